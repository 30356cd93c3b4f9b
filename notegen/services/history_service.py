# /notegen/services/history_service.py

"""
The owner-scoped read/update/delete surface for generation records.

Every call receives the caller's verified owner id. A record that does not
exist yields NotFoundError; a record that exists but belongs to someone else
yields ForbiddenError. The owner check happens before any mutation.
"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..core.errors import ForbiddenError, InvalidInputError, NotFoundError, PersistenceError
from ..core.logging import get_logger
from ..models.generation_model import GenerationListResponse, GenerationRecord, GenerationType
from .database_service import DatabaseService

logger = get_logger(__name__)

MAX_NAME_LENGTH = 200


def _get_owned_record(db: DatabaseService, generation_id: str, owner_id: str):
    record = db.get_generation_by_id(generation_id)
    if record is None:
        raise NotFoundError()
    if record.owner_id != owner_id:
        logger.warning("generation_access_forbidden", generation_id=generation_id, owner_id=owner_id)
        raise ForbiddenError()
    return record


def get_generation(db: DatabaseService, generation_id: str, owner_id: str) -> GenerationRecord:
    return GenerationRecord.model_validate(_get_owned_record(db, generation_id, owner_id))


def list_generations(
    db: DatabaseService,
    owner_id: str,
    generation_type: Optional[GenerationType] = None,
    search: Optional[str] = None,
) -> GenerationListResponse:
    """Returns the caller's records, newest first, optionally filtered by type or text."""
    records = db.get_generations_by_owner(owner_id, generation_type.value if generation_type else None)
    results: List[GenerationRecord] = [GenerationRecord.model_validate(r) for r in records]

    if search:
        search_lower = search.lower()
        results = [
            r for r in results
            if search_lower in r.file_name.lower()
            or search_lower in (r.user_given_name or "").lower()
            or search_lower in r.generated_content.lower()
        ]
    return GenerationListResponse(generations=results, total=len(results))


def rename_generation(db: DatabaseService, generation_id: str, owner_id: str, user_given_name: str) -> GenerationRecord:
    if not isinstance(user_given_name, str) or not user_given_name.strip():
        raise InvalidInputError("Invalid name provided.")
    name = user_given_name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidInputError(f"Name must be at most {MAX_NAME_LENGTH} characters.")

    _get_owned_record(db, generation_id, owner_id)
    try:
        updated = db.update_user_given_name(generation_id, name)
    except SQLAlchemyError as e:
        logger.error("generation_rename_failed", generation_id=generation_id, error=str(e))
        raise PersistenceError("The generation could not be renamed.") from e
    if updated is None:
        # Deleted between the ownership check and the update.
        raise NotFoundError()
    return GenerationRecord.model_validate(updated)


def delete_generation(db: DatabaseService, generation_id: str, owner_id: str) -> None:
    _get_owned_record(db, generation_id, owner_id)
    try:
        was_deleted = db.delete_generation_record(generation_id)
    except SQLAlchemyError as e:
        logger.error("generation_delete_failed", generation_id=generation_id, error=str(e))
        raise PersistenceError("The generation could not be deleted.") from e
    if not was_deleted:
        raise NotFoundError()
    logger.info("generation_deleted", generation_id=generation_id, owner_id=owner_id)
