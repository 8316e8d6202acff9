from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from prtracker.core.errors import FetchError, RecordNotFound, WriteError
from prtracker.db import get_db
from prtracker.dependencies import get_current_user
from prtracker.models.user import User
from prtracker.repositories.records import PersonalRecordRepository
from prtracker.schemas.record import RecordCreate, RecordRead, RecordUpdate

router = APIRouter(prefix="/records", tags=["records"])


@router.get("/", response_model=list[RecordRead])
def list_records(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List the caller's personal records, most recent date first.

      GET /records/
    """
    try:
        rows = PersonalRecordRepository(db).list_for_owner(user.id)
    except FetchError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return [RecordRead.model_validate(row) for row in rows]


@router.post("/", response_model=RecordRead, status_code=201)
def create_record(
    payload: RecordCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        row = PersonalRecordRepository(db).insert(user.id, payload)
    except WriteError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return RecordRead.model_validate(row)


@router.patch("/{record_id}", response_model=RecordRead)
def update_record(
    record_id: str,
    payload: RecordUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        row = PersonalRecordRepository(db).update(record_id, user.id, payload)
    except RecordNotFound:
        raise HTTPException(status_code=404, detail="Record not found")
    except (FetchError, WriteError) as e:
        raise HTTPException(status_code=500, detail=e.message)
    return RecordRead.model_validate(row)


@router.delete("/{record_id}")
def delete_record(
    record_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        PersonalRecordRepository(db).delete(record_id, user.id)
    except RecordNotFound:
        raise HTTPException(status_code=404, detail="Record not found")
    except WriteError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return {"message": "Record deleted"}
