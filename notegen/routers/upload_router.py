# /notegen/routers/upload_router.py

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..core.deps import get_current_user_id, get_ingestion_service
from ..models import generation_model
from ..services.ingestion_service import IngestionRequest, IngestionService

router = APIRouter()


@router.post(
    "",
    response_model=generation_model.UploadResponse,
    summary="Generate Study Material from an Uploaded File",
    description=(
        "Extracts the text of a PDF, DOCX, image or plain-text file, generates a summary, "
        "flashcards or key points from it, and saves the result to the caller's history."
    ),
    responses={
        400: {"model": generation_model.ErrorResponse},
        413: {"model": generation_model.ErrorResponse},
        415: {"model": generation_model.ErrorResponse},
        422: {"model": generation_model.ErrorResponse},
        502: {"model": generation_model.ErrorResponse},
    },
)
async def upload_and_generate(
    file: UploadFile = File(...),
    generation_type: str = Form(..., alias="generationType"),
    owner_id: str = Depends(get_current_user_id),
    service: IngestionService = Depends(get_ingestion_service),
):
    """Runs the full ingestion pipeline for one uploaded file."""
    file_bytes = await file.read()
    record = await service.ingest(
        IngestionRequest(
            file_bytes=file_bytes,
            file_name=file.filename or "unnamed_file",
            media_type=file.content_type,
            generation_type=generation_type,
            owner_id=owner_id,
        )
    )
    return generation_model.UploadResponse(
        id=record.id,
        generated_content=record.generated_content,
        generation_type=record.generation_type,
    )
