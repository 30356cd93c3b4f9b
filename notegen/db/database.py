# /notegen/db/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


def build_engine(database_url: str):
    # The 'check_same_thread' argument is only needed for SQLite.
    engine_args = {"connect_args": {"check_same_thread": False}} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, **engine_args)


# Each instance of this class is a database session. It stays unbound until the
# app lifespan builds the engine from Settings and calls configure(bind=...).
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def init_db(bind) -> None:
    """Creates every registered table that does not exist yet."""
    from .base import Base
    Base.metadata.create_all(bind=bind)


# Dependency to get a DB session. Used by the routers through get_db_service.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
