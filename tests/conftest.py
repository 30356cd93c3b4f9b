# /tests/conftest.py

import io
import os
from typing import List, Optional

import fitz  # PyMuPDF
import pytest
from docx import Document
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notegen.core.config import Settings
from notegen.db.base import Base
from notegen.services.database_service import DatabaseService


# --- Collaborator Fakes ---

class FakeObjectStore:
    """Records every stored blob and returns a predictable URL."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.stored: List[tuple] = []

    async def store(self, data: bytes, suggested_name: str, content_type: Optional[str] = None) -> str:
        if self.fail:
            raise ConnectionError("blob store unreachable")
        self.stored.append((suggested_name, data, content_type))
        return f"https://blob.example.com/{suggested_name}"


class FakeTextGenerator:
    def __init__(self, response: str = "Generated study material.", error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.response


class FakeOcrEngine:
    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.recognize_calls = 0
        self.closed = False

    def recognize(self, image_bytes: bytes) -> str:
        self.recognize_calls += 1
        if self.error:
            raise self.error
        return self.text

    def close(self) -> None:
        self.closed = True


class FakeOcrEngineFactory:
    """Hands out a fresh FakeOcrEngine per call and keeps them for inspection."""

    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.engines: List[FakeOcrEngine] = []

    def __call__(self) -> FakeOcrEngine:
        engine = FakeOcrEngine(self.text, self.error)
        self.engines.append(engine)
        return engine


# --- File Builders ---

def make_pdf_bytes(text: str) -> bytes:
    document = fitz.open()
    page = document.new_page()
    page.insert_text((72, 72), text, fontsize=10)
    data = document.tobytes()
    document.close()
    return data


def make_scanned_pdf_bytes(width: int = 320, height: int = 320) -> bytes:
    """A PDF whose only content is a raster image of random noise (no text layer)."""
    noise = Image.frombytes("RGB", (width, height), os.urandom(width * height * 3))
    buffer = io.BytesIO()
    noise.save(buffer, format="PNG")
    document = fitz.open()
    page = document.new_page()
    page.insert_image(page.rect, stream=buffer.getvalue())
    data = document.tobytes()
    document.close()
    return data


def make_docx_bytes(paragraphs: List[str]) -> bytes:
    document = Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def make_image_bytes(fmt: str = "PNG", size=(60, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (255, 255, 255)).save(buffer, format=fmt)
    return buffer.getvalue()


# --- Fixtures ---

@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        gemini_api_key="test-gemini-key",
        auth_secret_key="test-secret-key-for-hs256-signing!",
        object_store_backend="local",
        local_storage_dir=str(tmp_path / "uploads"),
        local_storage_base_url="http://testserver/files",
    )


@pytest.fixture
def db_session():
    """A fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def db_service(db_session) -> DatabaseService:
    return DatabaseService(db_session=db_session)


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def text_generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def ocr_factory() -> FakeOcrEngineFactory:
    return FakeOcrEngineFactory(text="Photosynthesis converts light into chemical energy.")
