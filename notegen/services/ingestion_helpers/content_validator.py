# /notegen/services/ingestion_helpers/content_validator.py

from dataclasses import dataclass

from ...core.errors import EmptyContentError, LowSignalError
from .format_classifier import DocumentFormat


@dataclass(frozen=True)
class ValidationThresholds:
    # A check fires only when the text is SHORTER than max_chars AND the file
    # is LARGER than min_bytes. Both bounds are exclusive.
    pdf_max_chars: int = 100
    pdf_min_bytes: int = 100 * 1024
    image_max_chars: int = 10
    image_min_bytes: int = 10 * 1024


def validate_content(
    document_format: DocumentFormat,
    text: str,
    file_size: int,
    thresholds: ValidationThresholds = ValidationThresholds(),
) -> None:
    """
    Rejects extractions that technically succeeded but are unlikely to hold the
    document's real content. Raises LowSignalError or EmptyContentError.
    """
    if document_format == DocumentFormat.PDF:
        if len(text) < thresholds.pdf_max_chars and file_size > thresholds.pdf_min_bytes:
            raise LowSignalError(
                "This PDF appears to be a scanned document with minimal selectable text. "
                "Please ensure it is a searchable PDF or upload its pages as images for OCR."
            )
    elif document_format == DocumentFormat.IMAGE:
        if len(text) < thresholds.image_max_chars and file_size > thresholds.image_min_bytes:
            raise LowSignalError(
                "Could not extract significant text from the image. "
                "Ensure the image contains clear text."
            )

    if not text or not text.strip():
        raise EmptyContentError()
