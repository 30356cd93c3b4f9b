# /notegen/routers/generations_router.py

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from ..core.deps import get_current_user_id
from ..models import generation_model
from ..services import history_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

_OWNERSHIP_RESPONSES = {
    403: {"model": generation_model.ErrorResponse, "description": "Record belongs to another user"},
    404: {"model": generation_model.ErrorResponse, "description": "Generation record not found"},
}


@router.get(
    "",  # Maps to /api/generations
    response_model=generation_model.GenerationListResponse,
    summary="List the Caller's Generations",
)
def list_generations(
    generation_type: Optional[generation_model.GenerationType] = None,
    search: Optional[str] = None,
    owner_id: str = Depends(get_current_user_id),
    db: DatabaseService = Depends(get_db_service),
):
    return history_service.list_generations(db=db, owner_id=owner_id, generation_type=generation_type, search=search)


@router.get(
    "/{generation_id}",
    response_model=generation_model.GenerationRecord,
    summary="Get a Single Generation",
    responses=_OWNERSHIP_RESPONSES,
)
def get_generation(
    generation_id: str,
    owner_id: str = Depends(get_current_user_id),
    db: DatabaseService = Depends(get_db_service),
):
    return history_service.get_generation(db=db, generation_id=generation_id, owner_id=owner_id)


@router.put(
    "/{generation_id}",
    response_model=generation_model.GenerationRecord,
    summary="Rename a Generation",
    description="Sets the human-readable label of a record. No other field can be changed.",
    responses=_OWNERSHIP_RESPONSES,
)
def rename_generation(
    generation_id: str,
    payload: generation_model.GenerationRename,
    owner_id: str = Depends(get_current_user_id),
    db: DatabaseService = Depends(get_db_service),
):
    return history_service.rename_generation(
        db=db, generation_id=generation_id, owner_id=owner_id, user_given_name=payload.user_given_name
    )


@router.delete(
    "/{generation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a Generation",
    description="Permanently deletes a single generation record from the caller's history.",
    responses=_OWNERSHIP_RESPONSES,
)
def delete_generation(
    generation_id: str,
    owner_id: str = Depends(get_current_user_id),
    db: DatabaseService = Depends(get_db_service),
):
    history_service.delete_generation(db=db, generation_id=generation_id, owner_id=owner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
