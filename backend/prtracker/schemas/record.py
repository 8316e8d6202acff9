from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from prtracker.core.time_utils import format_date_achieved, format_for_display


class RecordBase(BaseModel):
    hours: int = Field(0, ge=0)
    minutes: int = Field(0, ge=0, le=59)
    seconds: int = Field(0, ge=0, le=59)

    race_location: Optional[str] = None
    date_achieved: Optional[date] = None


class RecordCreate(RecordBase):
    """Schema for creating a new personal record."""

    distance: str = Field(..., min_length=1)

    @field_validator("distance")
    @classmethod
    def _distance_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("distance must not be empty")
        return v


class RecordUpdate(BaseModel):
    """Schema for updating a record (all fields optional, distance is fixed)."""

    hours: Optional[int] = Field(None, ge=0)
    minutes: Optional[int] = Field(None, ge=0, le=59)
    seconds: Optional[int] = Field(None, ge=0, le=59)
    race_location: Optional[str] = None
    date_achieved: Optional[date] = None

    # Be lenient with extra fields from clients (id, time, distance...)
    model_config = ConfigDict(extra="ignore")

    def changes(self) -> dict:
        """Fields the caller actually set; null time components are dropped."""
        data = self.model_dump(exclude_unset=True)
        for key in ("hours", "minutes", "seconds"):
            if key in data and data[key] is None:
                data.pop(key)
        return data


class RecordRead(RecordBase):
    """Schema returned to the frontend when reading a record."""

    id: str
    user_id: str
    distance: str

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def time(self) -> str:
        # e.g. "00:20:15"
        return format_for_display(self.hours, self.minutes, self.seconds)

    @property
    def date_display(self) -> Optional[str]:
        return format_date_achieved(self.date_achieved)
