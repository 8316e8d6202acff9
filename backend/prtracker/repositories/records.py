from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from prtracker.core.errors import FetchError, RecordNotFound, WriteError
from prtracker.models.personal_record import PersonalRecord
from prtracker.schemas.record import RecordCreate, RecordUpdate


class PersonalRecordRepository:
    """Typed access to the personal_records table.

    Every write is scoped by both record id and owner so one user can never
    touch another user's rows, whatever the caller passes in.
    """

    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, record_id: str, owner: str):
        return (
            self.db.query(PersonalRecord)
            .filter(PersonalRecord.id == record_id)
            .filter(PersonalRecord.user_id == owner)
        )

    def list_for_owner(self, owner: str) -> list[PersonalRecord]:
        # Most recent first; where undated rows land is up to the database
        try:
            return (
                self.db.query(PersonalRecord)
                .filter(PersonalRecord.user_id == owner)
                .order_by(PersonalRecord.date_achieved.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to fetch records for {owner}: {e}")
            raise FetchError("Could not load personal records") from e

    def get(self, record_id: str, owner: str) -> PersonalRecord | None:
        try:
            return self._scoped(record_id, owner).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise FetchError("Could not load personal record") from e

    def insert(self, owner: str, payload: RecordCreate) -> PersonalRecord:
        row = PersonalRecord(user_id=owner, **payload.model_dump())
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to insert record for {owner}: {e}")
            raise WriteError("Could not save personal record") from e

        logger.info("Personal record created", record_id=row.id, owner=owner, distance=row.distance)
        return row

    def update(self, record_id: str, owner: str, fields: RecordUpdate) -> PersonalRecord:
        row = self.get(record_id, owner)
        if row is None:
            raise RecordNotFound("Record not found")

        for key, value in fields.changes().items():
            setattr(row, key, value)
        try:
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update record {record_id}: {e}")
            raise WriteError("Could not update personal record") from e
        return row

    def delete(self, record_id: str, owner: str) -> None:
        try:
            deleted = self._scoped(record_id, owner).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete record {record_id}: {e}")
            raise WriteError("Could not delete personal record") from e

        if not deleted:
            raise RecordNotFound("Record not found")
        logger.info("Personal record deleted", record_id=record_id, owner=owner)
