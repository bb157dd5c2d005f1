"""Pipeline orchestration: one single-pass ingestion per call."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

import httpx

from reposcope.config import Settings
from reposcope.constants import (
    REQUEST_ID_HEX_LENGTH,
    FileOutcome,
    StageProgress,
)
from reposcope.ingestion.errors import IngestionTimeout
from reposcope.ingestion.fetcher import fetch_contents
from reposcope.ingestion.github_client import GitHubClient
from reposcope.ingestion.normalizer import normalize
from reposcope.ingestion.reference import parse_reference
from reposcope.ingestion.schemas import IngestionResult, RepositoryReference
from reposcope.ingestion.selector import select_files
from reposcope.ingestion.tree import list_tree, resolve_default_branch
from reposcope.logger import IngestionLogger
from reposcope.services.events import ProgressCallback, StageEvent

logger = logging.getLogger(__name__)


@dataclass
class StageStatus:
    """Status of a pipeline stage."""

    name: str
    ok: bool
    duration_ms: float = 0.0
    error: str | None = None


@dataclass
class IngestionContext:
    """Per-run bookkeeping: identity, callbacks and stage timings."""

    request_id: str
    settings: Settings
    on_progress: ProgressCallback | None = None
    run_log: IngestionLogger | None = None
    stages: list[StageStatus] = field(
        default_factory=lambda: list[StageStatus]()
    )

    def report(self, event: StageEvent) -> None:
        """Emit a progress event if callback is set."""
        if self.on_progress:
            self.on_progress(event)

    def finish(self, status: StageStatus) -> None:
        self.stages.append(status)
        self.report(
            StageEvent(
                name=status.name,
                status=(
                    StageProgress.DONE
                    if status.ok
                    else StageProgress.ERROR
                ),
                duration_ms=status.duration_ms,
                message=status.error or "",
            )
        )
        if self.run_log:
            self.run_log.log_stage(
                self.request_id,
                status.name,
                "ok" if status.ok else "error",
                status.duration_ms,
                status.error,
            )


@contextmanager
def _stage(ctx: IngestionContext, name: str) -> Iterator[None]:
    """Time a stage and report RUNNING then DONE/ERROR."""
    ctx.report(StageEvent(name=name, status=StageProgress.RUNNING))
    t0 = time.monotonic()
    try:
        yield
    except BaseException as exc:
        # CancelledError from the overall deadline lands here too
        ctx.finish(
            StageStatus(
                name=name,
                ok=False,
                duration_ms=(time.monotonic() - t0) * 1000,
                error=str(exc) or type(exc).__name__,
            )
        )
        raise
    ctx.finish(
        StageStatus(
            name=name,
            ok=True,
            duration_ms=(time.monotonic() - t0) * 1000,
        )
    )


async def run_ingestion(
    locator: str,
    branch: str | None = None,
    settings: Settings | None = None,
    *,
    client: GitHubClient | None = None,
    http: httpx.AsyncClient | None = None,
    on_progress: ProgressCallback | None = None,
    run_log: IngestionLogger | None = None,
    request_id: str | None = None,
) -> IngestionResult:
    """Run the ingestion pipeline for one repository.

    Stages, strictly in order:
      1. Parse the locator (no network on failure)
      2. Resolve the default branch when none was given
      3. List and classify the recursive tree
      4. Select files under the budget
      5. Fetch contents in sequential batches
      6. Decode and label

    Terminal failures raise :class:`IngestionError` subclasses;
    per-file failures only shrink ``files``.
    """
    cfg = settings or Settings()
    ctx = IngestionContext(
        request_id=request_id or uuid.uuid4().hex[:REQUEST_ID_HEX_LENGTH],
        settings=cfg,
        on_progress=on_progress,
        run_log=run_log,
    )

    with _stage(ctx, "parse_reference"):
        ref = parse_reference(locator, branch)

    t0 = time.monotonic()
    owned = client is None
    gh = client or GitHubClient(cfg.github, http=http)
    try:
        async with asyncio.timeout(cfg.ingestion_timeout_seconds):
            result = await _run_stages(ctx, gh, ref)
    except TimeoutError as exc:
        msg = (
            f"Ingestion of {ref.full_name} exceeded "
            f"{cfg.ingestion_timeout_seconds:g}s"
        )
        if run_log:
            run_log.log_error(ctx.request_id, "ingestion", msg)
        raise IngestionTimeout(msg) from exc
    finally:
        if owned:
            await gh.aclose()

    duration_ms = (time.monotonic() - t0) * 1000
    logger.info(
        "event=ingestion_complete repo=%s branch=%s eligible=%d "
        "selected=%d fetched=%d duration_ms=%.0f",
        ref.full_name,
        result.branch,
        result.total_eligible,
        result.selected_count,
        result.fetched_count,
        duration_ms,
    )
    if run_log:
        run_log.log_ingestion(
            ctx.request_id,
            ref.full_name,
            result.branch,
            result.total_eligible,
            result.selected_count,
            result.fetched_count,
            duration_ms,
        )
    return result


async def _run_stages(
    ctx: IngestionContext,
    gh: GitHubClient,
    ref: RepositoryReference,
) -> IngestionResult:
    cfg = ctx.settings

    target_branch = ref.branch
    if not target_branch:
        with _stage(ctx, "resolve_branch"):
            target_branch = await resolve_default_branch(gh, ref)

    with _stage(ctx, "list_tree"):
        eligible = await list_tree(gh, ref, target_branch)

    with _stage(ctx, "select"):
        selection = select_files(eligible, cfg.budget)

    def _on_batch(completed: int, total: int) -> None:
        ctx.report(
            StageEvent(
                name="fetch",
                status=StageProgress.RUNNING,
                message=f"{completed}/{total} files",
                completed=completed,
                total=total,
            )
        )

    with _stage(ctx, "fetch"):
        fetched = await fetch_contents(
            gh,
            ref,
            target_branch,
            selection.files,
            cfg.fetch_batch_size,
            on_batch=_on_batch,
        )

    with _stage(ctx, "normalize"):
        records, outcomes = normalize(fetched)

    if ctx.run_log:
        for outcome in outcomes:
            if outcome.outcome != FileOutcome.FETCHED:
                ctx.run_log.log_file_outcome(
                    ctx.request_id,
                    outcome.path,
                    outcome.outcome,
                    outcome.detail,
                )

    return IngestionResult(
        owner=ref.owner,
        repo=ref.name,
        branch=target_branch,
        files=tuple(records),
        tree=tuple(eligible),
        outcomes=tuple(outcomes),
        total_eligible=selection.total_eligible,
        selected_count=len(selection.files),
    )
