"""Review collaborator: message assembly and the guarded model call."""

from reposcope.review.client import (
    ReviewOutcome,
    parse_review,
    request_review,
    review_code,
    review_repository,
)
from reposcope.review.prompts import (
    build_code_review_message,
    build_review_message,
)

__all__ = [
    "ReviewOutcome",
    "build_code_review_message",
    "build_review_message",
    "parse_review",
    "request_review",
    "review_code",
    "review_repository",
]
