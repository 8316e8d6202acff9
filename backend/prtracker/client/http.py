"""Typed HTTP client for the hosted backend.

Each table gets its own small client with typed inputs and outputs, so
callers never build raw requests. Failures come back as the tracker's own
error types:

  - transport errors and non-2xx reads   -> FetchError
  - non-2xx writes                        -> WriteError
  - non-2xx uploads                       -> UploadError
  - 401 on any call                       -> AuthRequiredError
"""

from typing import Optional

import httpx
from loguru import logger

from prtracker.core.config import settings
from prtracker.core.errors import (
    AuthError,
    AuthRequiredError,
    FetchError,
    TrackerError,
    UploadError,
    WriteError,
)
from prtracker.client.session import SessionContext
from prtracker.schemas.auth import AuthSession
from prtracker.schemas.profile import ProfileRead, ProfileUpsert
from prtracker.schemas.record import RecordCreate, RecordRead, RecordUpdate
from prtracker.storage import StoredBlob


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("detail"):
        detail = body["detail"]
        return detail if isinstance(detail, str) else str(detail)
    return response.reason_phrase


class ApiClient:
    def __init__(
        self,
        session: SessionContext,
        base_url: str | None = None,
        http: httpx.Client | None = None,
    ):
        self.session = session
        self.http = http or httpx.Client(base_url=base_url or settings.api_base_url)
        self.records = RecordsClient(self)
        self.profiles = ProfilesClient(self)
        self.storage = StorageClient(self)

    # -- auth ---------------------------------------------------------------

    def _authenticate(self, path: str, email: str, password: str) -> AuthSession:
        try:
            r = self.http.post(path, json={"email": email, "password": password})
        except httpx.HTTPError as e:
            raise AuthError(f"Could not reach the server: {e}") from e
        if r.status_code >= 400:
            raise AuthError(_detail(r))

        auth = AuthSession.model_validate(r.json())
        self.session.start(auth)
        return auth

    def sign_up(self, email: str, password: str) -> AuthSession:
        return self._authenticate("/auth/signup", email, password)

    def sign_in(self, email: str, password: str) -> AuthSession:
        return self._authenticate("/auth/login", email, password)

    def sign_out(self) -> None:
        """End the local session; the server call is best effort."""
        if self.session.current is not None:
            try:
                self.request("POST", "/auth/logout", WriteError)
            except TrackerError as e:
                logger.warning(f"Sign-out request failed: {e.message}")
        self.session.end()

    # -- plumbing -----------------------------------------------------------

    def headers(self) -> dict:
        token = self.session.require().access_token
        return {"Authorization": f"Bearer {token}"}

    def request(
        self,
        method: str,
        url: str,
        error: type[TrackerError],
        missing_ok: bool = False,
        **kwargs,
    ) -> Optional[httpx.Response]:
        headers = self.headers()
        try:
            r = self.http.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise error(f"Could not reach the server: {e}") from e

        if r.status_code == 404 and missing_ok:
            return None
        if r.status_code == 401:
            raise AuthRequiredError(_detail(r))
        if r.status_code >= 400:
            logger.error(f"{method} {url} returned {r.status_code}")
            raise error(_detail(r))
        return r

    def check_owner(self, owner: str) -> None:
        if owner != self.session.require().user_id:
            raise AuthRequiredError("Cannot access another user's data")


class RecordsClient:
    """The `personal_records` table."""

    def __init__(self, api: ApiClient):
        self.api = api

    def list_for_owner(self, owner: str) -> list[RecordRead]:
        self.api.check_owner(owner)
        r = self.api.request("GET", "/records/", FetchError)
        return [RecordRead.model_validate(row) for row in r.json()]

    def insert(self, owner: str, payload: RecordCreate) -> RecordRead:
        self.api.check_owner(owner)
        r = self.api.request("POST", "/records/", WriteError, json=payload.model_dump(mode="json"))
        return RecordRead.model_validate(r.json())

    def update(self, record_id: str, owner: str, fields: RecordUpdate) -> RecordRead:
        self.api.check_owner(owner)
        r = self.api.request(
            "PATCH",
            f"/records/{record_id}",
            WriteError,
            json=fields.model_dump(mode="json", exclude_unset=True),
        )
        return RecordRead.model_validate(r.json())

    def delete(self, record_id: str, owner: str) -> None:
        self.api.check_owner(owner)
        self.api.request("DELETE", f"/records/{record_id}", WriteError)


class ProfilesClient:
    """The `profiles` table."""

    def __init__(self, api: ApiClient):
        self.api = api

    def get(self, user_id: str) -> Optional[ProfileRead]:
        self.api.check_owner(user_id)
        r = self.api.request("GET", f"/profiles/{user_id}", FetchError, missing_ok=True)
        if r is None:
            return None
        return ProfileRead.model_validate(r.json())

    def insert(self, user_id: str, payload: ProfileUpsert) -> ProfileRead:
        self.api.check_owner(user_id)
        r = self.api.request("POST", f"/profiles/{user_id}", WriteError, json=payload.model_dump())
        return ProfileRead.model_validate(r.json())

    def upsert(self, user_id: str, payload: ProfileUpsert) -> ProfileRead:
        self.api.check_owner(user_id)
        r = self.api.request("PUT", f"/profiles/{user_id}", WriteError, json=payload.model_dump())
        return ProfileRead.model_validate(r.json())


class StorageClient:
    """Public buckets (avatars)."""

    def __init__(self, api: ApiClient):
        self.api = api

    def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> StoredBlob:
        r = self.api.request(
            "POST",
            f"/storage/{bucket}",
            UploadError,
            data={"key": key, "upsert": "true" if upsert else "false"},
            files={"file": (key, data, content_type)},
        )
        body = r.json()
        return StoredBlob(path=body["path"], public_url=body["public_url"])

    def public_url(self, bucket: str, path: str) -> str:
        base = str(self.api.http.base_url).rstrip("/")
        return f"{base}/storage/{bucket}/{path}"
