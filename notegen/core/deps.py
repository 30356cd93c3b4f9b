# /notegen/core/deps.py

"""
FastAPI dependencies shared by the routers.

The collaborators built at startup (settings, object store, AI backend) live on
`app.state`; these providers hand them to request handlers so tests can swap
any of them through `app.dependency_overrides`.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from . import security
from .config import Settings
from ..services.database_service import DatabaseService, get_db_service
from ..services.gemini_service import TextGenerator
from ..services.generation_service import GenerationDispatcher
from ..services.ingestion_service import IngestionService
from ..services.object_store import ObjectStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_object_store(request: Request) -> ObjectStore:
    return request.app.state.object_store


def get_text_generator(request: Request) -> TextGenerator:
    return request.app.state.text_generator


def get_current_user_id(
    token: str = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> str:
    """Resolves the bearer token to the caller's user id (the record owner id)."""
    user_id = security.decode_access_token(token, settings.auth_secret_key)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_ingestion_service(
    settings: Settings = Depends(get_settings),
    db: DatabaseService = Depends(get_db_service),
    object_store: ObjectStore = Depends(get_object_store),
    text_generator: TextGenerator = Depends(get_text_generator),
) -> IngestionService:
    return IngestionService(
        settings=settings,
        db=db,
        object_store=object_store,
        dispatcher=GenerationDispatcher(text_generator),
    )
