"""Repository ingestion and review routes."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from reposcope.api.dependencies import (
    get_http_client,
    get_run_log,
    get_settings,
)
from reposcope.api.schemas import (
    CodeReviewRequest,
    CodeReviewResponse,
    ErrorResponse,
    IngestRequest,
    IngestResponse,
    ReviewResponse,
)
from reposcope.config import Settings
from reposcope.ingestion.errors import IngestionError
from reposcope.ingestion.schemas import IngestionResult
from reposcope.logger import IngestionLogger
from reposcope.review.client import review_code, review_repository
from reposcope.services.ingestion_service import run_ingestion

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ingestion"])


def _error(message: str, status_code: int) -> JSONResponse:
    body = ErrorResponse(error=message)
    return JSONResponse(
        status_code=status_code, content=body.model_dump(by_alias=True)
    )


async def _ingest(
    body: IngestRequest,
    settings: Settings,
    http: httpx.AsyncClient,
    run_log: IngestionLogger | None,
) -> IngestionResult | JSONResponse:
    """Run ingestion, mapping terminal failures to error responses."""
    if not body.repo_url or not body.repo_url.strip():
        return _error("repoUrl is required", 400)
    try:
        return await run_ingestion(
            body.repo_url,
            body.branch,
            settings,
            http=http,
            run_log=run_log,
        )
    except IngestionError as exc:
        logger.info(
            "event=ingestion_failed status=%d error=%s",
            exc.status_code,
            exc.message,
        )
        return _error(exc.message, exc.status_code)
    except Exception as exc:
        logger.exception("event=ingestion_crashed")
        return _error(str(exc) or "Failed to fetch repository", 500)


@router.post("/github")
async def ingest_repository(
    body: IngestRequest,
    settings: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
    run_log: IngestionLogger | None = Depends(get_run_log),
) -> JSONResponse:
    """Fetch a repository's tree and selected file contents."""
    outcome = await _ingest(body, settings, http, run_log)
    if isinstance(outcome, JSONResponse):
        return outcome
    payload = IngestResponse.from_result(outcome)
    return JSONResponse(content=payload.model_dump(by_alias=True))


@router.post("/review")
async def review(
    body: IngestRequest,
    settings: Settings = Depends(get_settings),
    http: httpx.AsyncClient = Depends(get_http_client),
    run_log: IngestionLogger | None = Depends(get_run_log),
) -> JSONResponse:
    """Ingest a repository and hand it to the review collaborator."""
    outcome = await _ingest(body, settings, http, run_log)
    if isinstance(outcome, JSONResponse):
        return outcome
    if not outcome.files:
        return _error("No reviewable files found in repository", 422)

    reviewed = await review_repository(outcome, settings)
    if not reviewed.success:
        return _error(
            reviewed.error or "Failed to get review results", 502
        )

    payload = ReviewResponse(
        owner=outcome.owner,
        repo=outcome.repo,
        branch=outcome.branch,
        fetched_files=outcome.fetched_count,
        model=reviewed.model,
        review=reviewed.result,
        input_tokens=reviewed.input_tokens,
        output_tokens=reviewed.output_tokens,
    )
    return JSONResponse(content=payload.model_dump(by_alias=True))


@router.post("/review/code")
async def review_snippet(
    body: CodeReviewRequest,
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Review one pasted snippet without touching the hosting service."""
    if not body.code or not body.code.strip():
        return _error("code is required", 400)

    reviewed = await review_code(
        body.code, body.file_name, body.language, settings
    )
    if not reviewed.success:
        return _error(
            reviewed.error or "Failed to get review results", 502
        )

    payload = CodeReviewResponse(
        model=reviewed.model,
        review=reviewed.result,
        input_tokens=reviewed.input_tokens,
        output_tokens=reviewed.output_tokens,
    )
    return JSONResponse(content=payload.model_dump(by_alias=True))
