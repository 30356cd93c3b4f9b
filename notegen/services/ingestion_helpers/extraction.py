# /notegen/services/ingestion_helpers/extraction.py

"""
Format-specific text extraction strategies.

Each strategy turns raw file bytes into plain text or raises ExtractionError.
The PDF strategy is the only one with a fallback: when PyMuPDF cannot read the
document, the bytes are scraped for printable ASCII instead. The fallback is a
different strategy, not a retry, and it runs at most once.
"""

import io
import re
from dataclasses import dataclass
from typing import Callable, Dict

import fitz  # PyMuPDF
from docx import Document

from ...core.errors import ExtractionError, UnsupportedFormatError
from ...core.logging import get_logger
from .format_classifier import DocumentFormat
from .ocr_engine import OcrEngineFactory, acquire_ocr_engine

logger = get_logger(__name__)

_NON_PRINTABLE = re.compile(r"[^\x20-\x7E\n\r\t]")
_WHITESPACE_RUN = re.compile(r"\s+")

UNPARSEABLE_PDF_MESSAGE = (
    "Failed to parse PDF file. Please ensure it contains selectable text "
    "or try uploading as images."
)


@dataclass(frozen=True)
class ExtractionOptions:
    ocr_engine_factory: OcrEngineFactory
    pdf_fallback_min_chars: int = 50


# --- PDF ---

def extract_pdf_primary(file_bytes: bytes) -> str:
    with fitz.open(stream=file_bytes, filetype="pdf") as pdf_document:
        return "\n".join(page.get_text() for page in pdf_document)


def extract_pdf_fallback(file_bytes: bytes, min_chars: int = 50) -> str:
    text = file_bytes.decode("utf-8", errors="replace")
    cleaned = _NON_PRINTABLE.sub(" ", text)
    cleaned = _WHITESPACE_RUN.sub(" ", cleaned).strip()
    if len(cleaned) < min_chars:
        raise ExtractionError("Could not extract meaningful text from PDF.")
    return cleaned


def extract_pdf(file_bytes: bytes, options: ExtractionOptions) -> str:
    try:
        return extract_pdf_primary(file_bytes)
    except Exception as e:
        logger.warning("pdf_primary_extraction_failed", error=str(e))

    try:
        text = extract_pdf_fallback(file_bytes, min_chars=options.pdf_fallback_min_chars)
    except ExtractionError as fallback_error:
        logger.warning("pdf_fallback_extraction_failed", error=fallback_error.message)
        raise ExtractionError(UNPARSEABLE_PDF_MESSAGE) from fallback_error

    logger.info("pdf_fallback_extraction_used", chars=len(text))
    return text


# --- DOCX ---

def extract_docx(file_bytes: bytes, options: ExtractionOptions) -> str:
    # A malformed package can also fail while its body is walked, not only on open.
    try:
        document = Document(io.BytesIO(file_bytes))
        parts = [paragraph.text for paragraph in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                parts.append("\t".join(cell.text for cell in row.cells))
    except Exception as e:
        logger.warning("docx_extraction_failed", error=str(e))
        raise ExtractionError("Failed to parse DOCX file.") from e
    return "\n".join(parts)


# --- IMAGE ---

def extract_image(file_bytes: bytes, options: ExtractionOptions) -> str:
    try:
        with acquire_ocr_engine(options.ocr_engine_factory) as engine:
            return engine.recognize(file_bytes)
    except Exception as e:
        logger.warning("ocr_extraction_failed", error=str(e))
        raise ExtractionError("Failed to read text from the image.") from e


# --- TEXT ---

def extract_text(file_bytes: bytes, options: ExtractionOptions) -> str:
    try:
        return file_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExtractionError("The text file is not valid UTF-8.") from e


EXTRACTORS: Dict[DocumentFormat, Callable[[bytes, ExtractionOptions], str]] = {
    DocumentFormat.PDF: extract_pdf,
    DocumentFormat.DOCX: extract_docx,
    DocumentFormat.IMAGE: extract_image,
    DocumentFormat.TEXT: extract_text,
}


def extract(document_format: DocumentFormat, file_bytes: bytes, options: ExtractionOptions) -> str:
    """Runs the strategy registered for `document_format`."""
    extractor = EXTRACTORS.get(document_format)
    if extractor is None:
        raise UnsupportedFormatError()
    return extractor(file_bytes, options)
