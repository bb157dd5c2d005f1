"""FastAPI dependency injection for settings and shared clients."""

from __future__ import annotations

import httpx
from fastapi import Request

from reposcope.config import Settings
from reposcope.logger import IngestionLogger


def get_settings(request: Request) -> Settings:
    """Get Settings from app.state."""
    return request.app.state.settings  # type: ignore[no-any-return]


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared hosting-service HTTP client created in the lifespan."""
    return request.app.state.http  # type: ignore[no-any-return]


def get_run_log(request: Request) -> IngestionLogger | None:
    """Structured run logger, if the app configured one."""
    return getattr(request.app.state, "run_log", None)
