"""One completion request against one model of the review chain.

Every model has its own breaker, so an outage at one provider still
lets the chain fall through to the next. Provider rate limits are
retried here and never count as a breaker failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any

import litellm
from circuitbreaker import (  # pyright: ignore[reportUnknownVariableType]
    CircuitBreaker,
    CircuitBreakerError,
)
from litellm.exceptions import RateLimitError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from reposcope.constants import (
    CB_LLM_FAILURE_THRESHOLD,
    CB_LLM_RECOVERY_TIMEOUT,
    LLM_MAX_OUTPUT_TOKENS,
    RETRY_INITIAL_WAIT,
    RETRY_MAX_ATTEMPTS,
    RETRY_MAX_WAIT,
)

logger = logging.getLogger(__name__)

# Module attribute so tests can swap the provider call
_acompletion: Callable[..., Coroutine[Any, Any, Any]] = litellm.acompletion

JSON_REPLY = {"type": "json_object"}


@dataclass(frozen=True)
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0

    @classmethod
    def of(cls, response: Any) -> TokenUsage:
        """Usage reported by the provider; missing counts read as zero."""
        usage: Any = getattr(response, "usage", None)
        return cls(
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        )


@dataclass(frozen=True)
class ModelReply:
    model: str
    content: str
    usage: TokenUsage


def _counts_as_outage(thrown_type: type, thrown_value: BaseException) -> bool:
    return not issubclass(thrown_type, RateLimitError)


_breakers: dict[str, CircuitBreaker] = {}  # pyright: ignore[reportUnknownVariableType]


def breaker_for(model: str) -> CircuitBreaker:  # pyright: ignore[reportUnknownParameterType]
    breaker = _breakers.get(model)
    if breaker is None:
        breaker = CircuitBreaker(  # pyright: ignore[reportUnknownMemberType]
            failure_threshold=CB_LLM_FAILURE_THRESHOLD,
            recovery_timeout=CB_LLM_RECOVERY_TIMEOUT,
            expected_exception=_counts_as_outage,
            name=f"review_{model}",
        )
        _breakers[model] = breaker
    return breaker  # pyright: ignore[reportUnknownVariableType]


def reset_breakers() -> None:
    """Drop every breaker; the next call starts closed."""
    _breakers.clear()


@retry(
    stop=stop_after_attempt(RETRY_MAX_ATTEMPTS),
    wait=wait_exponential_jitter(
        initial=RETRY_INITIAL_WAIT, max=RETRY_MAX_WAIT
    ),
    retry=retry_if_exception_type(RateLimitError),
    reraise=True,
)
async def complete(
    model: str,
    messages: list[dict[str, str]],
    timeout: int,
) -> ModelReply:
    """Ask *model* for a JSON reply.

    Raises ``CircuitBreakerError`` without calling the provider while
    the model's breaker is open; any provider error propagates.
    """
    breaker = breaker_for(model)
    if breaker.opened:  # pyright: ignore[reportUnknownMemberType]
        raise CircuitBreakerError(breaker)  # pyright: ignore[reportUnknownArgumentType]
    with breaker:  # pyright: ignore[reportUnknownMemberType]
        response: Any = await _acompletion(
            model=model,
            messages=messages,
            timeout=timeout,
            max_tokens=LLM_MAX_OUTPUT_TOKENS,
            response_format=JSON_REPLY,
        )

    usage = TokenUsage.of(response)
    logger.debug(
        "event=review_reply model=%s input_tokens=%d output_tokens=%d",
        model,
        usage.input_tokens,
        usage.output_tokens,
    )
    return ModelReply(
        model=model,
        content=str(response.choices[0].message.content or ""),
        usage=usage,
    )
