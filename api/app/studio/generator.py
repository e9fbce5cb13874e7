from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from app.core.config import Settings
from app.core.errors import FormatError
from app.core.llm import chat_completion
from app.schemas.study import StudyMaterial
from app.studio.parsing import parse_study_material
from app.studio.prompt import build_study_prompt, truncate_text

logger = logging.getLogger("studio")


@dataclass(frozen=True)
class GenerationOutcome:
    material: StudyMaterial
    truncated: bool
    input_chars: int


async def generate_study_material(
    client: httpx.AsyncClient, text: str, settings: Settings
) -> GenerationOutcome:
    """
    Truncate -> prompt -> one LLM call -> parse. No retries.
    """
    submitted, truncated = truncate_text(text, settings.max_text_chars)
    if truncated:
        logger.info("input truncated chars=%s max=%s", len(text), settings.max_text_chars)

    prompt = build_study_prompt(submitted)
    gen = await chat_completion(client, prompt, settings)

    try:
        material = parse_study_material(gen.response)
    except FormatError as e:
        logger.warning("invalid generator output model=%s reason=%s raw=%r", gen.model, e.reason, gen.response[:300])
        raise

    logger.info(
        "generated model=%s flashcards=%s quiz=%s summary_chars=%s",
        gen.model,
        len(material.flashcards),
        len(material.quiz),
        len(material.summary),
    )
    return GenerationOutcome(material=material, truncated=truncated, input_chars=len(submitted))
