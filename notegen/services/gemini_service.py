# /notegen/services/gemini_service.py

from typing import Protocol

import google.generativeai as genai
from google.generativeai.types import GenerationConfig

from ..core.config import Settings
from ..core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


class TextGenerator(Protocol):
    """The generative-AI backend contract: one prompt in, one text out, no streaming."""

    async def generate(self, prompt: str) -> str: ...


def configure(api_key: str) -> None:
    """Registers the API key with the Gemini SDK. Called once at startup."""
    genai.configure(api_key=api_key)


async def generate_text(prompt: str, model_name: str = DEFAULT_MODEL, temperature: float = 0.5) -> str:
    """The workhorse for text-only, non-streaming tasks."""
    try:
        model = genai.GenerativeModel(model_name)
        config = GenerationConfig(temperature=temperature)
        response = await model.generate_content_async(prompt, generation_config=config)
        if not response.parts:
            raise ValueError("AI model returned an empty response.")

        usage = getattr(response, "usage_metadata", None)
        if usage:
            logger.info(
                "gemini_token_usage",
                model=model_name,
                prompt_tokens=getattr(usage, "prompt_token_count", 0),
                completion_tokens=getattr(usage, "candidates_token_count", 0),
                total_tokens=getattr(usage, "total_token_count", 0),
            )
        return response.text
    except Exception as e:
        logger.error("gemini_generate_text_failed", model=model_name, error=str(e))
        raise


class GeminiTextGenerator:
    """TextGenerator backed by the Gemini API."""

    def __init__(self, model_name: str = DEFAULT_MODEL, temperature: float = 0.5):
        self.model_name = model_name
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiTextGenerator":
        configure(settings.gemini_api_key)
        return cls(model_name=settings.gemini_model, temperature=settings.gemini_temperature)

    async def generate(self, prompt: str) -> str:
        return await generate_text(prompt, model_name=self.model_name, temperature=self.temperature)
