"""Shared event types for pipeline progress reporting."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from reposcope.constants import STAGE_LABELS, StageProgress


@dataclass(frozen=True)
class StageEvent:
    """Typed event emitted during pipeline progress."""

    name: str
    status: StageProgress
    message: str = ""
    duration_ms: float = 0.0
    # Present during the fetch stage, once per completed batch
    completed: int | None = None
    total: int | None = None

    @property
    def label(self) -> str:
        """User-friendly display label from STAGE_LABELS."""
        return STAGE_LABELS[self.name]


ProgressCallback = Callable[[StageEvent], None]
