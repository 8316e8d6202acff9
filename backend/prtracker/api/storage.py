import os

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse

from prtracker.core.constants import AVATAR_CACHE_SECONDS
from prtracker.core.errors import UploadError
from prtracker.dependencies import get_current_user, get_storage
from prtracker.models.user import User
from prtracker.storage import BUCKETS, LocalBlobStorage


router = APIRouter(prefix="/storage", tags=["storage"])


@router.post("/{bucket}")
def upload_blob(
    bucket: str,
    key: str = Form(...),
    upsert: bool = Form(False),
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    storage: LocalBlobStorage = Depends(get_storage),
):
    if bucket not in BUCKETS:
        raise HTTPException(status_code=404, detail="Bucket not found")
    # Objects are named "<user id>-..." so users only write their own
    if not key.startswith(f"{user.id}-"):
        raise HTTPException(status_code=403, detail="Key must start with your user id")

    data = file.file.read()
    if len(data) > BUCKETS[bucket].max_bytes:
        raise HTTPException(status_code=413, detail="File too large")
    try:
        blob = storage.upload(
            bucket,
            key,
            data,
            content_type=file.content_type or "application/octet-stream",
            upsert=upsert,
        )
    except UploadError as e:
        raise HTTPException(status_code=400, detail=e.message)

    return {"path": blob.path, "public_url": blob.public_url}


@router.get("/{bucket}/{path}")
def download_blob(bucket: str, path: str, storage: LocalBlobStorage = Depends(get_storage)):
    try:
        location = storage.resolve(bucket, path)
    except UploadError:
        raise HTTPException(status_code=404, detail="Object not found")
    if not os.path.exists(location):
        raise HTTPException(status_code=404, detail="Object not found")
    return FileResponse(
        location,
        headers={"Cache-Control": f"max-age={AVATAR_CACHE_SECONDS}"},
    )
