# /notegen/db/models/user_models.py

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from ..base_class import Base


class User(Base):
    id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    # Always a salted hash produced by core.security.hash_password, never plain text.
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
