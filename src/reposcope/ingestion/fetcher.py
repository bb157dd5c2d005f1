"""Batched, failure-tolerant retrieval of selected file contents."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from reposcope.constants import TRANSPORT_ENCODING, FileOutcome
from reposcope.ingestion.errors import PerFileFetchFailure
from reposcope.ingestion.github_client import GitHubClient
from reposcope.ingestion.schemas import (
    FetchedFile,
    RepositoryReference,
    TreeEntry,
)
from reposcope.resilience.errors import classify_error

logger = logging.getLogger(__name__)

BatchCallback = Callable[[int, int], None]


def _check_payload(path: str, payload: Any) -> str:
    """Return the encoded content or raise for an unexpected shape."""
    if not isinstance(payload, dict):
        raise PerFileFetchFailure(
            path, FileOutcome.UNEXPECTED_ENCODING, "not a file"
        )
    encoding = payload.get("encoding")
    content = payload.get("content")
    if encoding != TRANSPORT_ENCODING or not content:
        raise PerFileFetchFailure(
            path,
            FileOutcome.UNEXPECTED_ENCODING,
            str(encoding or "none"),
        )
    return str(content)


async def fetch_one(
    client: GitHubClient,
    ref: RepositoryReference,
    branch: str,
    entry: TreeEntry,
) -> FetchedFile:
    """Fetch one file. Never raises; failures become an outcome."""
    try:
        payload = await client.get_contents(ref, entry.path, branch)
        encoded = _check_payload(entry.path, payload)
    except PerFileFetchFailure as exc:
        logger.debug(
            "event=file_dropped path=%s outcome=%s detail=%s",
            entry.path,
            exc.outcome,
            exc.detail,
        )
        return FetchedFile(
            entry=entry, outcome=exc.outcome, detail=exc.detail
        )
    except Exception as exc:
        error_class = classify_error(exc)
        logger.warning(
            "event=file_fetch_failed path=%s class=%s error=%s",
            entry.path,
            error_class.value,
            type(exc).__name__,
        )
        return FetchedFile(
            entry=entry,
            outcome=FileOutcome.NETWORK_ERROR,
            detail=error_class.value,
        )
    return FetchedFile(entry=entry, encoded=encoded)


async def fetch_contents(
    client: GitHubClient,
    ref: RepositoryReference,
    branch: str,
    files: Sequence[TreeEntry],
    batch_size: int,
    on_batch: BatchCallback | None = None,
) -> list[FetchedFile]:
    """Fetch *files* in consecutive groups of at most *batch_size*.

    Groups run one after another; fetches inside a group run
    concurrently. The result has one slot per input file, in input
    order, whatever order the fetches complete in.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    results: list[FetchedFile] = []
    for start in range(0, len(files), batch_size):
        group = files[start:start + batch_size]
        fetched = await asyncio.gather(
            *(fetch_one(client, ref, branch, entry) for entry in group)
        )
        results.extend(fetched)
        if on_batch is not None:
            on_batch(len(results), len(files))

    ok = sum(1 for r in results if r.outcome == FileOutcome.FETCHED)
    logger.info(
        "event=contents_fetched repo=%s requested=%d ok=%d",
        ref.full_name,
        len(files),
        ok,
    )
    return results
