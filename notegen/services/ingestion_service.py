# /notegen/services/ingestion_service.py

"""
The ingestion orchestrator.

One call to `IngestionService.ingest` drives a single upload through

    RECEIVED -> CLASSIFIED -> EXTRACTED -> VALIDATED -> STORED -> GENERATED -> PERSISTED

and either returns the persisted GenerationRecord or raises a NotegenError
subclass whose `failed_state` names the last state reached. Stages run
strictly in order; nothing is retried here and nothing already done (a
stored blob, for instance) is undone when a later stage fails.
"""

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..core.config import Settings
from ..core.errors import (
    FileTooLargeError,
    InternalPipelineError,
    InvalidInputError,
    NotegenError,
    PersistenceError,
    StorageError,
    UnsupportedFormatError,
)
from ..core.logging import get_logger
from ..models.generation_model import GenerationRecord, GenerationType
from .database_service import DatabaseService
from .generation_service import GenerationDispatcher
from .ingestion_helpers import extraction
from .ingestion_helpers.content_validator import ValidationThresholds, validate_content
from .ingestion_helpers.format_classifier import DocumentFormat, classify
from .ingestion_helpers.ocr_engine import OcrEngineFactory, tesseract_engine_factory
from .object_store import ObjectStore, build_blob_name

logger = get_logger(__name__)


class PipelineState(str, Enum):
    RECEIVED = "RECEIVED"
    CLASSIFIED = "CLASSIFIED"
    EXTRACTED = "EXTRACTED"
    VALIDATED = "VALIDATED"
    STORED = "STORED"
    GENERATED = "GENERATED"
    PERSISTED = "PERSISTED"
    FAILED = "FAILED"


@dataclass
class IngestionRequest:
    file_bytes: bytes
    file_name: str
    media_type: Optional[str]
    generation_type: str
    owner_id: str


class _Run:
    """Tracks the state of one pipeline run and logs every transition."""

    def __init__(self, request: IngestionRequest):
        self.state = PipelineState.RECEIVED
        self.log = logger.bind(
            file_name=request.file_name,
            owner_id=request.owner_id,
            generation_type=request.generation_type,
            size=len(request.file_bytes or b""),
        )
        self.log.info("ingestion_received")

    def advance(self, new_state: PipelineState, **details) -> None:
        self.state = new_state
        self.log.info("ingestion_state_changed", state=new_state.value, **details)

    def fail(self, error: NotegenError) -> NotegenError:
        error.failed_state = self.state.value
        if isinstance(error, InternalPipelineError):
            self.log.exception("ingestion_failed", state=self.state.value, kind=error.kind.value, reason=error.message)
        else:
            self.log.warning("ingestion_failed", state=self.state.value, kind=error.kind.value, reason=error.message)
        self.state = PipelineState.FAILED
        return error


class IngestionService:
    def __init__(
        self,
        settings: Settings,
        db: DatabaseService,
        object_store: ObjectStore,
        dispatcher: GenerationDispatcher,
        ocr_engine_factory: Optional[OcrEngineFactory] = None,
    ):
        self.settings = settings
        self.db = db
        self.object_store = object_store
        self.dispatcher = dispatcher
        self.extraction_options = extraction.ExtractionOptions(
            ocr_engine_factory=ocr_engine_factory or tesseract_engine_factory(settings.ocr_language),
            pdf_fallback_min_chars=settings.pdf_fallback_min_chars,
        )
        self.thresholds = ValidationThresholds(
            pdf_max_chars=settings.pdf_low_signal_max_chars,
            pdf_min_bytes=settings.pdf_low_signal_min_bytes,
            image_max_chars=settings.image_low_signal_max_chars,
            image_min_bytes=settings.image_low_signal_min_bytes,
        )

    async def ingest(self, request: IngestionRequest) -> GenerationRecord:
        run = _Run(request)
        try:
            return await self._run_pipeline(run, request)
        except NotegenError as e:
            raise run.fail(e)
        except Exception as e:
            raise run.fail(InternalPipelineError()) from e

    # --- Stages ---

    def _check_request(self, request: IngestionRequest) -> GenerationType:
        if not request.owner_id:
            raise InvalidInputError("An authenticated owner is required.")
        if not request.file_bytes:
            raise InvalidInputError("No file uploaded.")
        if len(request.file_bytes) > self.settings.max_file_size_bytes:
            raise FileTooLargeError(
                f"File size exceeds the limit of {self.settings.max_file_size_mb:g}MB. "
                "Please upload a smaller file."
            )
        try:
            return GenerationType(request.generation_type)
        except ValueError:
            raise InvalidInputError("Invalid generation type selected.")

    async def _run_pipeline(self, run: _Run, request: IngestionRequest) -> GenerationRecord:
        file_name = request.file_name or "unnamed_file"
        generation_type = self._check_request(request)

        document_format = classify(request.media_type, file_name)
        run.advance(PipelineState.CLASSIFIED, format=document_format.value)

        if document_format == DocumentFormat.UNSUPPORTED:
            raise UnsupportedFormatError(
                f"Unsupported file type: {request.media_type or file_name}. "
                "Please upload PDF, DOCX, JPG, PNG, or text files."
            )

        text = await asyncio.to_thread(
            extraction.extract, document_format, request.file_bytes, self.extraction_options
        )
        run.advance(PipelineState.EXTRACTED, chars=len(text))

        validate_content(document_format, text, len(request.file_bytes), self.thresholds)
        run.advance(PipelineState.VALIDATED)

        try:
            file_url = await self.object_store.store(
                request.file_bytes, build_blob_name(file_name), request.media_type
            )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError() from e
        if not file_url:
            raise StorageError("The object store did not return a file URL.")
        run.advance(PipelineState.STORED, url=file_url)

        generated_content = await self.dispatcher.dispatch(text, generation_type)
        run.advance(PipelineState.GENERATED, generated_chars=len(generated_content))

        record = self._persist(
            owner_id=request.owner_id,
            original_content=text,
            generated_content=generated_content,
            file_name=file_name,
            generation_type=generation_type,
            original_file_url=file_url,
        )
        run.advance(PipelineState.PERSISTED, generation_id=record.id)
        return record

    def _persist(self, **fields) -> GenerationRecord:
        record_data = {
            "id": f"gen_{uuid.uuid4().hex[:16]}",
            "owner_id": fields["owner_id"],
            "original_content": fields["original_content"],
            "generated_content": fields["generated_content"],
            "file_name": fields["file_name"],
            "generation_type": fields["generation_type"].value,
            "original_file_url": fields["original_file_url"],
            "upload_date": datetime.now(timezone.utc),
        }
        try:
            new_generation = self.db.add_generation_record(record_data)
        except SQLAlchemyError as e:
            raise PersistenceError() from e
        return GenerationRecord.model_validate(new_generation)
