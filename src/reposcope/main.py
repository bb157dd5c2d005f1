"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# Phase 1: Singleton logging, MUST be before any reposcope imports
# (the review client imports litellm, which reads LITELLM_LOG at import time)
from reposcope.logging_config import setup_logging

setup_logging()

import httpx  # noqa: E402
from fastapi import FastAPI, Request  # noqa: E402
from fastapi.exceptions import RequestValidationError  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402

from reposcope import __version__  # noqa: E402
from reposcope.api.routes import health, ingest  # noqa: E402
from reposcope.api.schemas import ErrorResponse  # noqa: E402
from reposcope.config import Settings  # noqa: E402
from reposcope.logger import IngestionLogger  # noqa: E402
from reposcope.logging_config import (  # noqa: E402
    apply_log_level,
    cleanup_third_party_handlers,
)

# Phase 2: Now that all imports (including litellm) are done,
# clear litellm's duplicate handlers.
cleanup_third_party_handlers()

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = _settings
    apply_log_level(settings.log_level)

    # One pooled client shared by every ingestion request
    http = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout_seconds)
    )

    app.state.settings = settings
    app.state.http = http
    app.state.run_log = IngestionLogger(
        log_dir=settings.log_dir, level=settings.log_level
    )

    if not settings.github_token:
        _logger.warning(
            "event=no_github_token action=anonymous_rate_limits"
        )

    yield

    await http.aclose()


app = FastAPI(
    title="Reposcope",
    description=(
        "Repository ingestion for code review --"
        " fetches a bounded, decoded slice of any public repository"
    ),
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

_settings = Settings()
_cors_origins = [
    o.strip()
    for o in _settings.cors_origins.split(",")
    if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=False,
)

app.include_router(health.router)
app.include_router(ingest.router)


@app.exception_handler(RequestValidationError)
async def validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed bodies in the same shape as pipeline errors."""
    problems: list[str] = []
    for err in exc.errors():
        loc = ".".join(
            str(part) for part in err.get("loc", ()) if part != "body"
        )
        msg = err.get("msg", "invalid")
        problems.append(f"{loc}: {msg}" if loc else msg)
    _logger.info(
        "event=request_invalid path=%s errors=%d",
        request.url.path,
        len(problems),
    )
    body = ErrorResponse(error="Invalid request: " + "; ".join(problems))
    return JSONResponse(
        status_code=400, content=body.model_dump(by_alias=True)
    )
