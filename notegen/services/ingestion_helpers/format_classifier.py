# /notegen/services/ingestion_helpers/format_classifier.py

from enum import Enum
from typing import Optional


class DocumentFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    IMAGE = "image"
    TEXT = "text"
    UNSUPPORTED = "unsupported"


DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_MEDIA_TYPES = {
    "application/pdf": DocumentFormat.PDF,
    DOCX_MEDIA_TYPE: DocumentFormat.DOCX,
    "image/jpeg": DocumentFormat.IMAGE,
    "image/jpg": DocumentFormat.IMAGE,
    "image/png": DocumentFormat.IMAGE,
}

_EXTENSIONS = {
    "pdf": DocumentFormat.PDF,
    "docx": DocumentFormat.DOCX,
    "jpg": DocumentFormat.IMAGE,
    "jpeg": DocumentFormat.IMAGE,
    "png": DocumentFormat.IMAGE,
    "txt": DocumentFormat.TEXT,
    "md": DocumentFormat.TEXT,
    "csv": DocumentFormat.TEXT,
    "json": DocumentFormat.TEXT,
    "log": DocumentFormat.TEXT,
}


def get_extension(file_name: Optional[str]) -> str:
    """Lower-cased extension without the dot, or '' when the name has none."""
    base_name = (file_name or "").replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in base_name:
        return ""
    return base_name.rsplit(".", 1)[-1].strip().lower()


def _classify_media_type(media_type: Optional[str]) -> Optional[DocumentFormat]:
    if not media_type:
        return None
    # Drop parameters such as "; charset=utf-8".
    normalized = media_type.split(";", 1)[0].strip().lower()
    if normalized in _MEDIA_TYPES:
        return _MEDIA_TYPES[normalized]
    if normalized.startswith("text/"):
        return DocumentFormat.TEXT
    return None


def classify(media_type: Optional[str], file_name: Optional[str]) -> DocumentFormat:
    """
    Maps a declared media type and file name to a DocumentFormat.

    The declared media type wins when it is recognized. Generic or missing types
    (e.g. application/octet-stream, which browsers send for .md files) fall back
    to the file extension.
    """
    by_media_type = _classify_media_type(media_type)
    if by_media_type is not None:
        return by_media_type
    return _EXTENSIONS.get(get_extension(file_name), DocumentFormat.UNSUPPORTED)
