"""Short bullet-point summaries of product descriptions."""

import logging
from functools import lru_cache
from typing import Optional, Protocol

import google.generativeai as genai

from catalog_digest.config import get_settings
from catalog_digest.models.enrichment import SUMMARY_FAILED_MESSAGE, Degraded, Enriched, Outcome

logger = logging.getLogger(__name__)

INSTRUCTION = (
    "Filter and summarize the given text based on the product "
    "in exactly 3 short bullet points: "
)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class GeminiGenerator:
    """Text generation backed by Google Gemini."""

    def __init__(self, api_key: str, model_name: str = "gemini-1.5-flash") -> None:
        if not api_key:
            raise RuntimeError("GEMINI_API_KEY is not configured.")
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)

    async def generate(self, prompt: str) -> str:
        response = await self.model.generate_content_async(prompt)
        return response.text


@lru_cache(maxsize=1)
def get_text_generator() -> TextGenerator:
    settings = get_settings()
    return GeminiGenerator(settings.gemini_api_key, settings.gemini_model)


def build_prompt(description: str) -> str:
    return f"{INSTRUCTION}{description}"


def clean_summary(raw: str) -> str:
    """Drop the model's leading preamble paragraph and flatten the rest.

    The text is split on blank lines, the first block discarded, and the
    remaining blocks joined with single spaces.
    """
    return " ".join(raw.split("\n\n")[1:]).strip()


async def summarize(description: str, generator: Optional[TextGenerator] = None) -> Outcome:
    """Summarize *description* in three short bullet points.  Never raises."""
    try:
        raw = await (generator or get_text_generator()).generate(build_prompt(description))
        summary = clean_summary(raw or "")
    except Exception as exc:
        logger.warning("Error summarizing description: %s", exc)
        return Degraded(reason="summary_failed", message=SUMMARY_FAILED_MESSAGE)

    if not summary:
        logger.warning("Summarizer returned no usable text")
        return Degraded(reason="summary_failed", message=SUMMARY_FAILED_MESSAGE)
    return Enriched(text=summary)
