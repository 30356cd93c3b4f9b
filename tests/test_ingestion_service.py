# /tests/test_ingestion_service.py

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from notegen.core.errors import (
    EmptyContentError,
    ErrorKind,
    ExtractionError,
    FileTooLargeError,
    GenerationError,
    InternalPipelineError,
    InvalidInputError,
    LowSignalError,
    PersistenceError,
    StorageError,
    UnsupportedFormatError,
)
from notegen.models.generation_model import GenerationType
from notegen.services.generation_service import GenerationDispatcher
from notegen.services.ingestion_helpers import extraction
from notegen.services.ingestion_service import IngestionRequest, IngestionService

from conftest import (
    FakeObjectStore,
    FakeOcrEngineFactory,
    FakeTextGenerator,
    make_docx_bytes,
    make_image_bytes,
    make_pdf_bytes,
    make_scanned_pdf_bytes,
)

OWNER = "usr_owner"


@pytest.fixture
def build_service(settings, db_service, object_store, text_generator, ocr_factory):
    def _build(**overrides):
        return IngestionService(
            settings=overrides.get("settings", settings),
            db=overrides.get("db", db_service),
            object_store=overrides.get("object_store", object_store),
            dispatcher=GenerationDispatcher(overrides.get("text_generator", text_generator)),
            ocr_engine_factory=overrides.get("ocr_factory", ocr_factory),
        )
    return _build


def _request(file_bytes, file_name="notes.txt", media_type="text/plain", generation_type="summary", owner_id=OWNER):
    return IngestionRequest(
        file_bytes=file_bytes,
        file_name=file_name,
        media_type=media_type,
        generation_type=generation_type,
        owner_id=owner_id,
    )


# --- Happy paths ---

@pytest.mark.asyncio
async def test_plain_text_upload_is_persisted(build_service, db_service, object_store, text_generator):
    """A 2 KB text file with SUMMARY runs all the way to PERSISTED."""
    source = ("Photosynthesis turns light into chemical energy. " * 45)[:2048]
    service = build_service()

    record = await service.ingest(_request(source.encode("utf-8")))

    assert record.original_content == source
    assert record.generated_content == "Generated study material."
    assert record.generation_type == GenerationType.SUMMARY
    assert record.owner_id == OWNER
    assert record.file_name == "notes.txt"
    assert record.user_given_name is None
    assert record.original_file_url.startswith("https://blob.example.com/notes_")
    assert record.original_file_url.endswith(".txt")

    stored = db_service.get_generation_by_id(record.id)
    assert stored is not None
    assert stored.owner_id == OWNER
    assert len(object_store.stored) == 1
    assert len(text_generator.prompts) == 1


@pytest.mark.asyncio
async def test_pdf_upload_uses_structured_extraction(build_service):
    pdf = make_pdf_bytes("Chapter 1: The Cell\nCells are the basic unit of life.")
    record = await build_service().ingest(
        _request(pdf, file_name="bio.pdf", media_type="application/pdf", generation_type="key_points")
    )
    assert "Cells are the basic unit of life." in record.original_content
    assert record.generation_type == GenerationType.KEY_POINTS


@pytest.mark.asyncio
async def test_docx_upload_is_persisted(build_service):
    docx = make_docx_bytes(["The French Revolution began in 1789.", "It reshaped Europe."])
    record = await build_service().ingest(
        _request(docx, file_name="history.docx", media_type="application/octet-stream", generation_type="flashcards")
    )
    assert "The French Revolution began in 1789." in record.original_content
    assert record.generation_type == GenerationType.FLASHCARDS


@pytest.mark.asyncio
async def test_small_image_runs_ocr_and_releases_engine(build_service):
    """A small JPEG with printed text reaches generation and the OCR engine is released."""
    factory = FakeOcrEngineFactory(text="Mitosis has four phases: prophase, metaphase, anaphase, telophase.")
    image = make_image_bytes("JPEG")
    assert len(image) < 10 * 1024

    record = await build_service(ocr_factory=factory).ingest(
        _request(image, file_name="board.jpg", media_type="image/jpeg", generation_type="flashcards")
    )

    assert record.original_content.startswith("Mitosis")
    assert factory.engines[0].closed is True


# --- Gate failures ---

@pytest.mark.asyncio
async def test_oversized_file_is_rejected_before_classification(build_service, object_store, mocker):
    classify = mocker.patch("notegen.services.ingestion_service.classify")
    big = b"a" * (12 * 1024 * 1024)

    with pytest.raises(FileTooLargeError) as exc_info:
        await build_service().ingest(_request(big))

    assert exc_info.value.kind == ErrorKind.INVALID_INPUT
    assert exc_info.value.failed_state == "RECEIVED"
    classify.assert_not_called()
    assert object_store.stored == []


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"file_bytes": b""},
    {"generation_type": "mind_map"},
    {"owner_id": ""},
])
async def test_invalid_input_fails_at_received(build_service, overrides):
    kwargs = {"file_bytes": b"some valid text content"}
    kwargs.update(overrides)
    with pytest.raises(InvalidInputError) as exc_info:
        await build_service().ingest(_request(**kwargs))
    assert exc_info.value.failed_state == "RECEIVED"


@pytest.mark.asyncio
async def test_unsupported_format_fails_before_any_extraction(build_service, mocker):
    extract = mocker.patch.object(extraction, "extract")
    with pytest.raises(UnsupportedFormatError) as exc_info:
        await build_service().ingest(_request(b"PK\x03\x04", file_name="deck.pptx", media_type="application/zip"))
    extract.assert_not_called()
    assert exc_info.value.failed_state == "CLASSIFIED"


@pytest.mark.asyncio
async def test_scanned_pdf_is_low_signal_and_creates_no_record(build_service, db_service, object_store, text_generator):
    """A >100 KB PDF holding only a raster image yields low-signal and nothing is stored."""
    scanned = make_scanned_pdf_bytes()
    assert len(scanned) > 100 * 1024

    with pytest.raises(LowSignalError) as exc_info:
        await build_service().ingest(
            _request(scanned, file_name="scan.pdf", media_type="application/pdf", generation_type="key_points")
        )

    assert exc_info.value.failed_state == "EXTRACTED"
    assert db_service.get_generations_by_owner(OWNER) == []
    assert object_store.stored == []
    assert text_generator.prompts == []


@pytest.mark.asyncio
async def test_unparseable_pdf_is_extraction_error(build_service, mocker):
    mocker.patch.object(extraction, "extract_pdf_primary", side_effect=RuntimeError("no trailer"))
    with pytest.raises(ExtractionError) as exc_info:
        await build_service().ingest(_request(b"\x00garbage\x01", file_name="x.pdf", media_type="application/pdf"))
    assert exc_info.value.failed_state == "CLASSIFIED"


@pytest.mark.asyncio
async def test_whitespace_only_text_is_empty_content(build_service):
    with pytest.raises(EmptyContentError):
        await build_service().ingest(_request(b"   \n\n\t  "))


@pytest.mark.asyncio
async def test_ocr_failure_still_releases_engine(build_service):
    factory = FakeOcrEngineFactory(error=RuntimeError("engine crashed"))
    with pytest.raises(ExtractionError):
        await build_service(ocr_factory=factory).ingest(
            _request(make_image_bytes(), file_name="x.png", media_type="image/png")
        )
    assert factory.engines[0].closed is True


# --- Downstream failures ---

@pytest.mark.asyncio
async def test_storage_failure_is_storage_error(build_service, text_generator):
    with pytest.raises(StorageError) as exc_info:
        await build_service(object_store=FakeObjectStore(fail=True)).ingest(_request(b"enough text to pass validation"))
    assert exc_info.value.failed_state == "VALIDATED"
    assert text_generator.prompts == []


@pytest.mark.asyncio
async def test_generation_failure_keeps_blob_but_creates_no_record(build_service, db_service, object_store):
    failing = FakeTextGenerator(error=RuntimeError("503 from backend"))
    with pytest.raises(GenerationError) as exc_info:
        await build_service(text_generator=failing).ingest(_request(b"enough text to pass validation"))

    assert exc_info.value.failed_state == "STORED"
    assert len(object_store.stored) == 1
    assert db_service.get_generations_by_owner(OWNER) == []


@pytest.mark.asyncio
async def test_database_failure_is_persistence_error(build_service):
    broken_db = MagicMock()
    broken_db.add_generation_record.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))

    with pytest.raises(PersistenceError) as exc_info:
        await build_service(db=broken_db).ingest(_request(b"enough text to pass validation"))
    assert exc_info.value.failed_state == "GENERATED"


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_internal_error(build_service, mocker):
    mocker.patch("notegen.services.ingestion_service.validate_content", side_effect=KeyError("boom"))
    with pytest.raises(InternalPipelineError) as exc_info:
        await build_service().ingest(_request(b"enough text to pass validation"))
    assert exc_info.value.kind == ErrorKind.INTERNAL
    assert exc_info.value.failed_state == "EXTRACTED"
