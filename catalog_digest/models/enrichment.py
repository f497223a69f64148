"""Tagged result of a best-effort enrichment step.

An enrichment step either produces text (:class:`Enriched`) or degrades
(:class:`Degraded`).  A degraded value still carries the human-readable
placeholder message so display code can render it as-is, while callers and
tests can branch on ``kind`` / ``reason``.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

DegradationReason = Literal[
    "fetch_failed",
    "no_body",
    "no_description",
    "summary_failed",
    "description_unavailable",
]

FETCH_FAILED_MESSAGE = "Failed to fetch description"
NO_BODY_MESSAGE = "No HTML body found in the response"
NO_DESCRIPTION_MESSAGE = "No suitable description found"
SUMMARY_FAILED_MESSAGE = "Failed to summarize description"


class Enriched(BaseModel):
    kind: Literal["ok"] = "ok"
    text: str


class Degraded(BaseModel):
    kind: Literal["degraded"] = "degraded"
    reason: DegradationReason
    message: str


Outcome = Annotated[Union[Enriched, Degraded], Field(discriminator="kind")]


def outcome_text(outcome: Union[Enriched, Degraded]) -> str:
    """Return the produced text, or the placeholder message when degraded."""
    if isinstance(outcome, Enriched):
        return outcome.text
    return outcome.message
