from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from prtracker.core.constants import AVATARS_BUCKET
from prtracker.core.errors import FetchError, WriteError
from prtracker.db import get_db
from prtracker.dependencies import get_current_user, get_storage
from prtracker.models.profile import Profile
from prtracker.models.user import User
from prtracker.repositories.profiles import ProfileRepository
from prtracker.schemas.profile import ProfileRead, ProfileUpsert
from prtracker.storage import LocalBlobStorage


router = APIRouter(prefix="/profiles", tags=["profiles"])


def _own_profile_id(profile_id: str, user: User) -> str:
    if profile_id != user.id:
        raise HTTPException(status_code=403, detail="Cannot access another user's profile")
    return profile_id


def _to_read(row: Profile, storage: LocalBlobStorage) -> ProfileRead:
    profile = ProfileRead.model_validate(row)
    if profile.avatar_url:
        profile.avatar_public_url = storage.public_url(AVATARS_BUCKET, profile.avatar_url)
    return profile


@router.get("/{profile_id}", response_model=ProfileRead)
def get_profile(
    profile_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_storage),
):
    _own_profile_id(profile_id, user)
    try:
        row = ProfileRepository(db).get(profile_id)
    except FetchError as e:
        raise HTTPException(status_code=500, detail=e.message)
    if not row:
        raise HTTPException(status_code=404, detail="Profile not found")
    return _to_read(row, storage)


@router.post("/{profile_id}", response_model=ProfileRead, status_code=201)
def create_profile(
    profile_id: str,
    payload: ProfileUpsert,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_storage),
):
    _own_profile_id(profile_id, user)
    profiles = ProfileRepository(db)
    try:
        if profiles.get(profile_id):
            raise HTTPException(status_code=409, detail="Profile already exists")
        row = profiles.insert(profile_id, payload)
    except (FetchError, WriteError) as e:
        raise HTTPException(status_code=500, detail=e.message)
    return _to_read(row, storage)


@router.put("/{profile_id}", response_model=ProfileRead)
def upsert_profile(
    profile_id: str,
    payload: ProfileUpsert,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: LocalBlobStorage = Depends(get_storage),
):
    _own_profile_id(profile_id, user)
    try:
        row = ProfileRepository(db).upsert(profile_id, payload)
    except (FetchError, WriteError) as e:
        raise HTTPException(status_code=500, detail=e.message)
    return _to_read(row, storage)
