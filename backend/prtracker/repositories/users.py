from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from prtracker.core.errors import FetchError, WriteError
from prtracker.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> User | None:
        try:
            return self.db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise FetchError("Could not load user") from e

    def get_by_email(self, email: str) -> User | None:
        try:
            return self.db.query(User).filter(User.email == email.lower()).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise FetchError("Could not load user") from e

    def create(self, email: str, password_hash: str) -> User:
        user = User(email=email.lower(), password_hash=password_hash)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as e:
            self.db.rollback()
            raise WriteError("User already registered") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise WriteError("Could not create user") from e
        return user
