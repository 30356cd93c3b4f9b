# /notegen/services/object_store.py

"""
Durable storage for the original uploaded files.

Two backends share the `ObjectStore` contract: Vercel Blob for deployments and
a local directory for development. Both return a publicly fetchable URL and
report every failure as StorageError.
"""

import asyncio
import uuid
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import quote

import httpx

from ..core.config import Settings
from ..core.errors import StorageError
from ..core.logging import get_logger
from .ingestion_helpers.format_classifier import get_extension

logger = get_logger(__name__)


class ObjectStore(Protocol):
    async def store(self, data: bytes, suggested_name: str, content_type: Optional[str] = None) -> str: ...


def build_blob_name(original_file_name: str) -> str:
    """'notes.pdf' -> 'notes_<uuid>.pdf'. The uuid keeps concurrent uploads of the same name apart."""
    extension = get_extension(original_file_name)
    stem = original_file_name.rsplit(".", 1)[0] if extension else original_file_name
    stem = Path(stem).name or "unnamed_file"
    unique_id = uuid.uuid4()
    return f"{stem}_{unique_id}.{extension}" if extension else f"{stem}_{unique_id}"


class VercelBlobStore:
    API_VERSION = "7"

    def __init__(self, token: str, api_url: str = "https://blob.vercel-storage.com", client: Optional[httpx.AsyncClient] = None):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self._client = client

    async def store(self, data: bytes, suggested_name: str, content_type: Optional[str] = None) -> str:
        headers = {
            "authorization": f"Bearer {self.token}",
            "x-api-version": self.API_VERSION,
            "x-add-random-suffix": "0",
        }
        if content_type:
            headers["x-content-type"] = content_type
        url = f"{self.api_url}/{quote(suggested_name)}"

        try:
            if self._client is not None:
                response = await self._client.put(url, content=data, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=60.0) as client:
                    response = await client.put(url, content=data, headers=headers)
            response.raise_for_status()
            blob_url = response.json()["url"]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error("blob_upload_failed", name=suggested_name, error=str(e))
            raise StorageError() from e

        logger.info("blob_uploaded", name=suggested_name, size=len(data))
        return blob_url


class LocalObjectStore:
    def __init__(self, root_dir: str, base_url: str):
        self.root_dir = Path(root_dir)
        self.base_url = base_url.rstrip("/")

    def _write(self, data: bytes, name: str) -> None:
        self.root_dir.mkdir(parents=True, exist_ok=True)
        (self.root_dir / name).write_bytes(data)

    async def store(self, data: bytes, suggested_name: str, content_type: Optional[str] = None) -> str:
        name = Path(suggested_name).name
        try:
            await asyncio.to_thread(self._write, data, name)
        except OSError as e:
            logger.error("local_store_failed", name=name, error=str(e))
            raise StorageError() from e
        return f"{self.base_url}/{quote(name)}"


def build_object_store(settings: Settings) -> ObjectStore:
    if settings.object_store_backend == "local":
        return LocalObjectStore(settings.local_storage_dir, settings.local_storage_base_url)
    return VercelBlobStore(settings.blob_read_write_token, api_url=settings.blob_api_url)
