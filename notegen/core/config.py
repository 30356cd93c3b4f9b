# /notegen/core/config.py

"""
Explicit application configuration.

Values are read from the process environment (and a local .env file during
development) exactly once, at startup, and the resulting `Settings` object is
handed to every collaborator that needs it. A missing required credential
raises `ConfigurationError` here instead of failing later inside a request.
"""

import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import ConfigurationError

MB = 1024 * 1024
KB = 1024


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # --- Credentials ---
    gemini_api_key: str
    auth_secret_key: str
    blob_read_write_token: Optional[str] = None

    # --- AI backend ---
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.5

    # --- Object store ---
    object_store_backend: Literal["vercel_blob", "local"] = "vercel_blob"
    blob_api_url: str = "https://blob.vercel-storage.com"
    local_storage_dir: str = "./data/uploads"
    local_storage_base_url: str = "http://localhost:8000/files"

    # --- Pipeline limits and heuristics ---
    max_file_size_bytes: int = Field(default=10 * MB, gt=0)
    pdf_fallback_min_chars: int = 50
    pdf_low_signal_max_chars: int = 100
    pdf_low_signal_min_bytes: int = 100 * KB
    image_low_signal_max_chars: int = 10
    image_low_signal_min_bytes: int = 10 * KB
    ocr_language: str = "eng"

    # --- Persistence & auth ---
    database_url: str = "sqlite:///./notegen.db"
    access_token_expire_minutes: int = 60 * 24

    # --- Logging ---
    log_level: str = "INFO"
    app_env: str = "development"

    @model_validator(mode="after")
    def _check_credentials(self) -> "Settings":
        if not self.gemini_api_key:
            raise ConfigurationError("FATAL ERROR: GOOGLE_API_KEY environment variable is not set.")
        if not self.auth_secret_key:
            raise ConfigurationError("FATAL ERROR: AUTH_SECRET_KEY environment variable is not set.")
        if self.object_store_backend == "vercel_blob" and not self.blob_read_write_token:
            raise ConfigurationError(
                "FATAL ERROR: BLOB_READ_WRITE_TOKEN must be set when OBJECT_STORE_BACKEND is 'vercel_blob'."
            )
        return self

    @property
    def max_file_size_mb(self) -> float:
        return self.max_file_size_bytes / MB

    @classmethod
    def from_env(cls) -> "Settings":
        """Builds Settings from environment variables, loading .env first if present."""
        load_dotenv()

        overrides = {
            "gemini_model": os.getenv("GEMINI_MODEL"),
            "gemini_temperature": os.getenv("GEMINI_TEMPERATURE"),
            "object_store_backend": os.getenv("OBJECT_STORE_BACKEND"),
            "blob_api_url": os.getenv("BLOB_API_URL"),
            "local_storage_dir": os.getenv("LOCAL_STORAGE_DIR"),
            "local_storage_base_url": os.getenv("LOCAL_STORAGE_BASE_URL"),
            "pdf_fallback_min_chars": os.getenv("PDF_FALLBACK_MIN_CHARS"),
            "pdf_low_signal_max_chars": os.getenv("PDF_LOW_SIGNAL_MAX_CHARS"),
            "pdf_low_signal_min_bytes": os.getenv("PDF_LOW_SIGNAL_MIN_BYTES"),
            "image_low_signal_max_chars": os.getenv("IMAGE_LOW_SIGNAL_MAX_CHARS"),
            "image_low_signal_min_bytes": os.getenv("IMAGE_LOW_SIGNAL_MIN_BYTES"),
            "ocr_language": os.getenv("OCR_LANGUAGE"),
            "database_url": os.getenv("DATABASE_URL"),
            "access_token_expire_minutes": os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES"),
            "log_level": os.getenv("LOG_LEVEL"),
            "app_env": os.getenv("APP_ENV"),
        }
        max_size_mb = os.getenv("MAX_FILE_SIZE_MB")
        if max_size_mb:
            overrides["max_file_size_bytes"] = int(float(max_size_mb) * MB)

        return cls(
            gemini_api_key=os.getenv("GOOGLE_API_KEY", ""),
            auth_secret_key=os.getenv("AUTH_SECRET_KEY", ""),
            blob_read_write_token=os.getenv("BLOB_READ_WRITE_TOKEN"),
            **{key: value for key, value in overrides.items() if value},
        )
