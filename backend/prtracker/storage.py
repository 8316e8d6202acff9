"""Local blob storage for public buckets (avatars).

Files live under ``settings.uploads_dir/<bucket>/<key>`` and are served
back by the storage router.
"""

import os
from dataclasses import dataclass

from loguru import logger

from prtracker.core.config import settings
from prtracker.core.constants import AVATAR_MAX_BYTES, AVATARS_BUCKET
from prtracker.core.errors import UploadError


@dataclass(frozen=True)
class BucketPolicy:
    max_bytes: int
    content_prefix: str  # e.g. "image/"


BUCKETS = {
    AVATARS_BUCKET: BucketPolicy(max_bytes=AVATAR_MAX_BYTES, content_prefix="image/"),
}


@dataclass(frozen=True)
class StoredBlob:
    path: str
    public_url: str


def _check_key(key: str) -> None:
    if not key or key in (".", "..") or "/" in key or "\\" in key:
        raise UploadError(f"Invalid object key: {key!r}")


class LocalBlobStorage:
    def __init__(self, root: str | None = None, public_base_url: str | None = None):
        self.root = root or settings.uploads_dir
        self.public_base_url = (public_base_url or settings.public_base_url).rstrip("/")

    def _policy(self, bucket: str) -> BucketPolicy:
        policy = BUCKETS.get(bucket)
        if policy is None:
            raise UploadError(f"Unknown bucket: {bucket}")
        return policy

    def resolve(self, bucket: str, path: str) -> str:
        """Filesystem location of an object; the object may not exist yet."""
        self._policy(bucket)
        _check_key(path)
        return os.path.join(self.root, bucket, path)

    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> StoredBlob:
        policy = self._policy(bucket)
        save_path = self.resolve(bucket, key)

        if not data:
            raise UploadError("No file provided")
        if len(data) > policy.max_bytes:
            raise UploadError(f"File exceeds the {policy.max_bytes // (1024 * 1024)} MB limit")
        if not (content_type or "").startswith(policy.content_prefix):
            raise UploadError(f"Only {policy.content_prefix}* files are supported")
        if os.path.exists(save_path) and not upsert:
            raise UploadError("The resource already exists")

        os.makedirs(os.path.dirname(save_path), exist_ok=True)
        try:
            with open(save_path, "wb") as out:
                out.write(data)
        except OSError as e:
            logger.error(f"Failed to write {bucket}/{key}: {e}")
            raise UploadError("Could not store file") from e

        logger.info("Stored blob", bucket=bucket, key=key, size_bytes=len(data))
        return StoredBlob(path=key, public_url=self.public_url(bucket, key))

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/storage/{bucket}/{path}"
