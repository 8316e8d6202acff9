import base64
import os
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from loguru import logger

from prtracker.client.notices import Notice, failure
from prtracker.client.session import SessionContext
from prtracker.core.constants import AVATARS_BUCKET, BIO_MAX_LENGTH
from prtracker.core.errors import AuthRequiredError, FetchError, UploadError, ValidationError, WriteError
from prtracker.schemas.profile import ProfileRead, ProfileUpsert
from prtracker.storage import StoredBlob


# Fields the form edits, with optional length caps
PROFILE_FIELDS = {"name": None, "location": None, "bio": BIO_MAX_LENGTH}


class ProfileStore(Protocol):
    def get(self, user_id: str): ...

    def insert(self, user_id: str, payload: ProfileUpsert): ...

    def upsert(self, user_id: str, payload: ProfileUpsert): ...


class BlobStore(Protocol):
    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str = ...,
        upsert: bool = ...,
    ) -> StoredBlob: ...

    def public_url(self, bucket: str, path: str) -> str: ...


@dataclass
class PendingAvatar:
    filename: str
    data: bytes
    content_type: str

    @property
    def preview_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


def avatar_key(user_id: str, filename: str) -> str:
    """'<user id>-<epoch ms>.<ext>', the layout the storage router enforces."""
    ext = os.path.splitext(filename)[1].lstrip(".").lower() or "bin"
    return f"{user_id}-{int(time.time() * 1000)}.{ext}"


class ProfileEditor:
    """Profile form: lazy creation on load, avatar upload, full-replace save."""

    def __init__(self, profiles: ProfileStore, storage: BlobStore, session: SessionContext):
        self.profiles = profiles
        self.storage = storage
        self.session = session
        self.profile: Optional[ProfileRead] = None
        self.name = ""
        self.location = ""
        self.bio = ""
        self.avatar_path: Optional[str] = None
        self.avatar_url: Optional[str] = None
        self.pending_avatar: Optional[PendingAvatar] = None
        self.uploading_avatar = False
        self.loading = False
        self.notices: list[Notice] = []

    def _require_user(self) -> str:
        try:
            return self.session.require().user_id
        except AuthRequiredError as e:
            self.notices.append(failure("Authentication required", e))
            raise

    def _apply(self, profile: ProfileRead) -> None:
        self.profile = profile
        self.name = profile.name or ""
        self.location = profile.location or ""
        self.bio = profile.bio or ""
        self.avatar_path = profile.avatar_url or None
        self.avatar_url = (
            self.storage.public_url(AVATARS_BUCKET, self.avatar_path) if self.avatar_path else None
        )

    def load(self) -> ProfileRead:
        """Fetch the signed-in user's profile, creating an empty one if absent."""
        user_id = self._require_user()
        self.loading = True
        try:
            row = self.profiles.get(user_id)
            if row is None:
                logger.info("Creating missing profile", user_id=user_id)
                row = self.profiles.insert(user_id, ProfileUpsert())
            profile = ProfileRead.model_validate(row)
        except FetchError as e:
            self.notices.append(failure("Error fetching profile", e))
            raise
        except WriteError as e:
            self.notices.append(failure("Error creating profile", e))
            raise
        finally:
            self.loading = False

        self._apply(profile)
        return profile

    def set_field(self, name: str, value: str) -> None:
        if name not in PROFILE_FIELDS:
            raise ValidationError(f"Unknown field: {name}")
        value = value or ""
        limit = PROFILE_FIELDS[name]
        if limit is not None:
            value = value[:limit]
        setattr(self, name, value)

    def choose_avatar(self, filename: str, data: bytes, content_type: str) -> None:
        self.pending_avatar = PendingAvatar(filename, data, content_type)
        self.avatar_url = self.pending_avatar.preview_url

    def _upload_avatar(self, user_id: str) -> Optional[str]:
        pending = self.pending_avatar
        self.uploading_avatar = True
        try:
            blob = self.storage.upload(
                AVATARS_BUCKET,
                avatar_key(user_id, pending.filename),
                pending.data,
                content_type=pending.content_type,
                upsert=True,
            )
        except UploadError as e:
            logger.error(f"Avatar upload error: {e.message}")
            self.notices.append(failure("Avatar upload failed", e))
            return None
        finally:
            self.uploading_avatar = False

        self.pending_avatar = None
        self.avatar_path = blob.path
        self.avatar_url = blob.public_url
        return blob.path

    def submit(self) -> ProfileRead:
        """Upload a staged avatar, then replace the whole profile row.

        A failed upload is reported and the profile is saved with the
        previous avatar.
        """
        user_id = self._require_user()

        if self.pending_avatar is not None:
            self._upload_avatar(user_id)

        updates = ProfileUpsert(
            name=self.name,
            location=self.location,
            bio=self.bio,
            avatar_url=self.avatar_path or "",
        )
        self.loading = True
        try:
            row = self.profiles.upsert(user_id, updates)
        except (FetchError, WriteError) as e:
            logger.error(f"Error updating profile: {e.message}")
            self.notices.append(failure("Error updating profile", e))
            raise
        finally:
            self.loading = False

        self.profile = ProfileRead.model_validate(row)
        self.notices.append(Notice("Profile updated", "Your profile has been updated successfully."))
        return self.profile
