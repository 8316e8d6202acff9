import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func
from prtracker.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Stored lower-cased, unique per account
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
