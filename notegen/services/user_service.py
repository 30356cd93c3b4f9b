# /notegen/services/user_service.py

import uuid
from typing import Optional

from sqlalchemy.exc import IntegrityError

from ..core import security
from ..core.logging import get_logger
from ..models.user_model import UserCreate
from .database_service import DatabaseService

logger = get_logger(__name__)


class UsernameTakenError(ValueError):
    pass


def create_user(db: DatabaseService, user: UserCreate):
    """Registers a new user. The password is hashed here, before anything is persisted."""
    if db.get_user_by_username(user.username):
        raise UsernameTakenError("Username already taken.")

    record = {
        "id": f"usr_{uuid.uuid4().hex[:16]}",
        "username": user.username,
        "hashed_password": security.hash_password(user.password),
    }
    try:
        new_user = db.add_user(record)
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same name.
        raise UsernameTakenError("Username already taken.") from e
    logger.info("user_registered", user_id=new_user.id)
    return new_user


def authenticate_user(db: DatabaseService, username: str, password: str) -> Optional[object]:
    user = db.get_user_by_username(username)
    if not user or not security.verify_password(password, user.hashed_password):
        return None
    return user
