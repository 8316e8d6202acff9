from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from prtracker.core.constants import PASSWORD_MIN_LENGTH


class Credentials(BaseModel):
    email: str
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("email must be a valid address")
        return v


class AuthSession(BaseModel):
    """A signed-in identity as handed to the client."""

    user_id: str
    email: str
    access_token: str
    token_type: str = "bearer"
    expires_at: Optional[datetime] = None

    @property
    def expired(self) -> bool:
        if self.expires_at is None:
            return False
        expires = self.expires_at
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        return expires <= datetime.now(timezone.utc)


class UserRead(BaseModel):
    id: str
    email: str
