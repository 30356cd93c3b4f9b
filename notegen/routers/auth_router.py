# /notegen/routers/auth_router.py

"""
Authentication endpoints: registration, token issuance, and the current user's profile.

The ingestion pipeline only ever sees the user id these tokens carry.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from ..core import security
from ..core.config import Settings
from ..core.deps import get_current_user_id, get_settings
from ..models.user_model import Token, User, UserCreate
from ..services import user_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, db: DatabaseService = Depends(get_db_service)):
    try:
        return user_service.create_user(db=db, user=user_in)
    except user_service.UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: DatabaseService = Depends(get_db_service),
    settings: Settings = Depends(get_settings),
):
    user = user_service.authenticate_user(db, username=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = security.create_access_token(
        subject=user.id,
        secret=settings.auth_secret_key,
        expires_minutes=settings.access_token_expire_minutes,
    )
    return Token(access_token=access_token, token_type="bearer")


@router.get("/me", response_model=User)
def read_current_user(
    user_id: str = Depends(get_current_user_id),
    db: DatabaseService = Depends(get_db_service),
):
    user = db.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return user
