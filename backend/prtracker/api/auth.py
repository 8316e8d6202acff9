from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.orm import Session

from prtracker.auth import create_access_token, hash_password, verify_password
from prtracker.core.errors import WriteError
from prtracker.db import get_db
from prtracker.dependencies import get_current_user
from prtracker.models.user import User
from prtracker.repositories.users import UserRepository
from prtracker.schemas.auth import AuthSession, Credentials, UserRead


router = APIRouter(prefix="/auth", tags=["auth"])


def _session_for(user: User) -> AuthSession:
    token, expires_at = create_access_token(user.id)
    return AuthSession(
        user_id=user.id,
        email=user.email,
        access_token=token,
        expires_at=expires_at,
    )


@router.post("/signup", response_model=AuthSession, status_code=201)
def sign_up(payload: Credentials, db: Session = Depends(get_db)):
    users = UserRepository(db)
    if users.get_by_email(payload.email):
        raise HTTPException(status_code=409, detail="User already registered")
    try:
        user = users.create(payload.email, hash_password(payload.password))
    except WriteError as e:
        raise HTTPException(status_code=409, detail=e.message)

    logger.info("User signed up", user_id=user.id)
    return _session_for(user)


@router.post("/login", response_model=AuthSession)
def sign_in(payload: Credentials, db: Session = Depends(get_db)):
    user = UserRepository(db).get_by_email(payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Rejected sign-in attempt")
        raise HTTPException(status_code=401, detail="Invalid login credentials")

    logger.info("User signed in", user_id=user.id)
    return _session_for(user)


@router.post("/logout")
def sign_out(user: User = Depends(get_current_user)):
    # Tokens are stateless; the client drops its session
    logger.info("User signed out", user_id=user.id)
    return {"message": "Signed out"}


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)):
    return UserRead(id=user.id, email=user.email)
