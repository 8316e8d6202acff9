from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.sql import func
from prtracker.db import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the owning user; one profile per user
    id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)

    name = Column(String, nullable=False, server_default="")
    location = Column(String, nullable=False, server_default="")
    bio = Column(String(150), nullable=False, server_default="")

    # Path inside the avatars bucket, not the public URL
    avatar_url = Column(String, nullable=False, server_default="")

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
