# /notegen/services/database_helpers/user_repository_sql.py

from typing import Dict, Optional
from sqlalchemy.orm import Session
from notegen.db.models.user_models import User


class UserRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def add_user(self, record: Dict) -> User:
        new_user = User(**record)
        self.db.add(new_user)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(new_user)
        return new_user

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()
