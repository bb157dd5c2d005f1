"""Hand an ingestion result or a snippet to the review collaborator."""

from __future__ import annotations

import json
import logging
from typing import Any

from circuitbreaker import CircuitBreakerError
from pydantic import BaseModel, Field

from reposcope.config import Settings
from reposcope.ingestion.schemas import IngestionResult
from reposcope.review.completion import complete
from reposcope.review.prompts import (
    REVIEW_SYSTEM_PROMPT,
    build_code_review_message,
    build_review_message,
)

logger = logging.getLogger(__name__)


class ReviewOutcome(BaseModel):
    """Opaque collaborator result: success flag plus payload or error."""

    success: bool
    result: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    model: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0


def parse_review(raw: str) -> dict[str, Any]:
    """JSON object if the reply is one, else the text as a summary."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return {"summary": raw}
    if isinstance(data, dict):
        return data
    return {"summary": raw}


async def request_review(
    message: str,
    settings: Settings | None = None,
) -> ReviewOutcome:
    """Send *message* to the model chain; first model to answer wins.

    Never raises for collaborator failures: an open breaker or a
    failed call moves on to the next model, and if every model fails
    the outcome carries ``success=False``.
    """
    cfg = settings or Settings()
    messages = [
        {"role": "system", "content": REVIEW_SYSTEM_PROMPT},
        {"role": "user", "content": message},
    ]

    last_error = "no model configured"
    for model in cfg.litellm_model_chain:
        try:
            reply = await complete(model, messages, cfg.llm_timeout_seconds)
        except CircuitBreakerError:
            logger.warning("event=circuit_open model=%s component=review", model)
            last_error = f"circuit open for {model}"
            continue
        except Exception as exc:
            logger.warning(
                "event=review_failed model=%s", model, exc_info=True
            )
            last_error = str(exc) or type(exc).__name__
            continue
        return ReviewOutcome(
            success=True,
            result=parse_review(reply.content),
            model=reply.model,
            input_tokens=reply.usage.input_tokens,
            output_tokens=reply.usage.output_tokens,
        )

    return ReviewOutcome(
        success=False,
        error=f"Failed to get review results: {last_error}",
    )


async def review_repository(
    result: IngestionResult,
    settings: Settings | None = None,
) -> ReviewOutcome:
    """Build the collaborator message for *result* and request a review."""
    return await request_review(build_review_message(result), settings)


async def review_code(
    code: str,
    file_name: str | None = None,
    language: str | None = None,
    settings: Settings | None = None,
) -> ReviewOutcome:
    """Review a single pasted snippet."""
    return await request_review(
        build_code_review_message(code, file_name, language), settings
    )
