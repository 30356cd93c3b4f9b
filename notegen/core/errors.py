# /notegen/core/errors.py

"""
The error taxonomy for the ingestion pipeline and the owner-scoped record surface.

Every stage of the pipeline catches failures at its own boundary and re-raises
them as exactly one of the classes below. Routers never see raw library
exceptions; they only translate an `ErrorKind` into an HTTP status.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid-input"
    UNSUPPORTED_FORMAT = "unsupported-format"
    EXTRACTION_ERROR = "extraction-error"
    LOW_SIGNAL = "low-signal"
    EMPTY_CONTENT = "empty-content"
    STORAGE_ERROR = "storage-error"
    GENERATION_ERROR = "generation-error"
    PERSISTENCE_ERROR = "persistence-error"
    NOT_FOUND = "not-found"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


class NotegenError(Exception):
    """
    Base class for every classified failure.

    `failed_state` is filled in by the ingestion orchestrator with the name of
    the last state the run reached before it failed. It stays None for
    failures raised outside a pipeline run (e.g. reads and renames).
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None, failed_state: Optional[str] = None):
        self.message = message or self.default_message
        self.failed_state = failed_state
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class InvalidInputError(NotegenError):
    kind = ErrorKind.INVALID_INPUT
    default_message = "The request is missing required fields or contains invalid values."


class FileTooLargeError(InvalidInputError):
    default_message = "The uploaded file exceeds the maximum allowed size."


class UnsupportedFormatError(NotegenError):
    kind = ErrorKind.UNSUPPORTED_FORMAT
    default_message = "Unsupported file type. Please upload PDF, DOCX, JPG, PNG, or text files."


class ExtractionError(NotegenError):
    kind = ErrorKind.EXTRACTION_ERROR
    default_message = "The document could not be parsed."


class LowSignalError(NotegenError):
    kind = ErrorKind.LOW_SIGNAL
    default_message = "Very little text could be extracted from the document."


class EmptyContentError(NotegenError):
    kind = ErrorKind.EMPTY_CONTENT
    default_message = (
        "No text content could be extracted from the file. "
        "Please ensure the file contains readable text."
    )


class StorageError(NotegenError):
    kind = ErrorKind.STORAGE_ERROR
    default_message = "The original file could not be stored."


class GenerationError(NotegenError):
    kind = ErrorKind.GENERATION_ERROR
    default_message = "Failed to generate content with AI."


class PersistenceError(NotegenError):
    kind = ErrorKind.PERSISTENCE_ERROR
    default_message = "The generation record could not be saved."


class NotFoundError(NotegenError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Generation not found."


class ForbiddenError(NotegenError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden: You do not own this generation."


class InternalPipelineError(NotegenError):
    kind = ErrorKind.INTERNAL


class ConfigurationError(Exception):
    """Raised at startup when a required setting or credential is missing."""
