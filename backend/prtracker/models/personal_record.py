import uuid

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func
from prtracker.db import Base


class PersonalRecord(Base):
    __tablename__ = "personal_records"
    __table_args__ = (
        CheckConstraint("hours >= 0", name="ck_personal_records_hours"),
        CheckConstraint("minutes BETWEEN 0 AND 59", name="ck_personal_records_minutes"),
        CheckConstraint("seconds BETWEEN 0 AND 59", name="ck_personal_records_seconds"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # "5K", "Marathon" or free text; fixed once created
    distance = Column(String, nullable=False)

    # Time is stored as three components, never as a single string
    hours = Column(Integer, nullable=False, server_default="0")
    minutes = Column(Integer, nullable=False, server_default="0")
    seconds = Column(Integer, nullable=False, server_default="0")

    race_location = Column(String, nullable=True)
    date_achieved = Column(Date, nullable=True)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
