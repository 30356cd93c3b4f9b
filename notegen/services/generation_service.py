# /notegen/services/generation_service.py

from typing import Dict

from ..core.errors import GenerationError, InternalPipelineError
from ..core.logging import get_logger
from ..models.generation_model import GenerationType
from . import prompt_library
from .gemini_service import TextGenerator

logger = get_logger(__name__)


# --- Generation Type -> Prompt Template ---
PROMPT_TEMPLATES: Dict[GenerationType, str] = {
    GenerationType.SUMMARY: prompt_library.SUMMARY_PROMPT,
    GenerationType.FLASHCARDS: prompt_library.FLASHCARDS_PROMPT,
    GenerationType.KEY_POINTS: prompt_library.KEY_POINTS_PROMPT,
}


def build_prompt(source_text: str, generation_type: GenerationType) -> str:
    template = PROMPT_TEMPLATES.get(generation_type)
    if template is None:
        # The orchestrator rejects unknown types at RECEIVED, so reaching this is a bug.
        raise InternalPipelineError(f"No prompt template registered for generation type: {generation_type!r}")
    return template.format(source_text=source_text)


class GenerationDispatcher:
    """
    Turns extracted text into the requested artifact through one backend call.

    Backend failures of any sort are reported as GenerationError. No retries:
    the backend's own client owns that policy.
    """

    def __init__(self, backend: TextGenerator):
        self.backend = backend

    async def dispatch(self, source_text: str, generation_type: GenerationType) -> str:
        prompt = build_prompt(source_text, generation_type)
        try:
            generated = await self.backend.generate(prompt)
        except Exception as e:
            logger.error("generation_backend_failed", generation_type=generation_type.value, error=str(e))
            raise GenerationError() from e

        if not isinstance(generated, str) or not generated.strip():
            logger.error("generation_backend_empty", generation_type=generation_type.value)
            raise GenerationError("The AI returned an empty response.")
        return generated
