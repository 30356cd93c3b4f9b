# /notegen/services/database_service.py

from typing import Dict, Generator, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

# --- Core Database Setup ---
from notegen.db.database import get_db

# --- Repository Imports ---
from .database_helpers.generation_repository_sql import GenerationRepositorySQL
from .database_helpers.user_repository_sql import UserRepositorySQL


class DatabaseService:
    """A thin facade that groups the SQL repositories behind one session."""

    def __init__(self, db_session: Session):
        self.generation_repo = GenerationRepositorySQL(db_session)
        self.user_repo = UserRepositorySQL(db_session)

    # --- GENERATION METHODS (DELEGATED) ---
    def add_generation_record(self, record: Dict): return self.generation_repo.add_generation_record(record)
    def get_generation_by_id(self, generation_id: str): return self.generation_repo.get_generation_by_id(generation_id)
    def get_generations_by_owner(self, owner_id: str, generation_type: Optional[str] = None) -> List:
        return self.generation_repo.get_generations_by_owner(owner_id, generation_type)
    def update_user_given_name(self, generation_id: str, user_given_name: str):
        return self.generation_repo.update_user_given_name(generation_id, user_given_name)
    def delete_generation_record(self, generation_id: str) -> bool: return self.generation_repo.delete_generation_record(generation_id)

    # --- USER METHODS (DELEGATED) ---
    def add_user(self, record: Dict): return self.user_repo.add_user(record)
    def get_user_by_id(self, user_id: str): return self.user_repo.get_user_by_id(user_id)
    def get_user_by_username(self, username: str): return self.user_repo.get_user_by_username(username)


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a DatabaseService bound to the request's session."""
    yield DatabaseService(db_session=db)
