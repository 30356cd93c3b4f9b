# /notegen/services/ingestion_helpers/ocr_engine.py

"""
The OCR engine behind image extraction.

An engine instance belongs to exactly one extraction call. `acquire_ocr_engine`
creates it, hands it to the caller and always closes it afterwards, whether
recognition returned, raised, or was never attempted.
"""

import io
from contextlib import contextmanager
from typing import Callable, Iterator, List, Protocol

import pytesseract
from PIL import Image

from ...core.logging import get_logger

logger = get_logger(__name__)


class OcrEngine(Protocol):
    def recognize(self, image_bytes: bytes) -> str: ...

    def close(self) -> None: ...


OcrEngineFactory = Callable[[], OcrEngine]


class TesseractEngine:
    """A single-pass Tesseract recognizer bound to one language model."""

    def __init__(self, language: str = "eng"):
        self.language = language
        self._open_images: List[Image.Image] = []
        self.closed = False

    def recognize(self, image_bytes: bytes) -> str:
        if self.closed:
            raise RuntimeError("OCR engine has already been released.")
        image = Image.open(io.BytesIO(image_bytes))
        self._open_images.append(image)
        return pytesseract.image_to_string(image, lang=self.language)

    def close(self) -> None:
        for image in self._open_images:
            image.close()
        self._open_images.clear()
        self.closed = True


def tesseract_engine_factory(language: str) -> OcrEngineFactory:
    return lambda: TesseractEngine(language=language)


@contextmanager
def acquire_ocr_engine(factory: OcrEngineFactory) -> Iterator[OcrEngine]:
    engine = factory()
    try:
        yield engine
    finally:
        engine.close()
        logger.debug("ocr_engine_released", engine=type(engine).__name__)
