from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from prtracker.core.constants import BIO_MAX_LENGTH


class ProfileUpsert(BaseModel):
    """Full replacement of a profile row."""

    name: str = ""
    location: str = ""
    bio: str = Field("", max_length=BIO_MAX_LENGTH)
    avatar_url: str = ""  # storage path inside the avatars bucket


class ProfileRead(ProfileUpsert):
    id: str
    # Resolved link for avatar_url, filled in by the API
    avatar_public_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
