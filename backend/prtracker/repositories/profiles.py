from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prtracker.core.errors import FetchError, WriteError
from prtracker.models.profile import Profile
from prtracker.schemas.profile import ProfileUpsert


class ProfileRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Profile | None:
        try:
            return self.db.query(Profile).filter(Profile.id == user_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise FetchError("Could not load profile") from e

    def insert(self, user_id: str, payload: ProfileUpsert) -> Profile:
        row = Profile(id=user_id, **payload.model_dump())
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create profile {user_id}: {e}")
            raise WriteError("Could not create profile") from e
        return row

    def upsert(self, user_id: str, payload: ProfileUpsert) -> Profile:
        """Replace every column of the profile, creating it if missing."""
        row = self.get(user_id)
        if row is None:
            return self.insert(user_id, payload)

        for key, value in payload.model_dump().items():
            setattr(row, key, value)
        try:
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update profile {user_id}: {e}")
            raise WriteError("Could not update profile") from e
        return row
