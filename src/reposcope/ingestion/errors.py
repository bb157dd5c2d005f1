"""Exceptions raised by the ingestion pipeline.

Terminal errors (``IngestionError`` subclasses) abort the whole run
and carry the HTTP-style status the inbound interface answers with.
Per-file errors are raised and absorbed inside the fetcher and
normalizer; they never escape the pipeline.
"""

from __future__ import annotations

from reposcope.constants import FileOutcome


class IngestionError(Exception):
    """Terminal failure of an ingestion run."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MalformedReference(IngestionError):
    """Locator did not match any accepted form. No network call is made."""

    status_code = 400


class UpstreamError(IngestionError):
    """Hosting service answered with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message, status_code)


class RepositoryNotFound(UpstreamError):
    """Repository (or the requested branch) does not exist or is private."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class RateLimited(UpstreamError):
    """Hosting service reported the request quota as exhausted."""


class IngestionTimeout(IngestionError):
    """The overall ingestion deadline elapsed."""

    status_code = 504


class PerFileFetchFailure(Exception):
    """Content retrieval failed for a single file."""

    def __init__(
        self, path: str, outcome: FileOutcome, detail: str = ""
    ) -> None:
        super().__init__(f"{path}: {outcome} {detail}".strip())
        self.path = path
        self.outcome = outcome
        self.detail = detail


class BinaryContentSkipped(Exception):
    """Decoded content looks binary (contains a null byte)."""

    def __init__(self, path: str) -> None:
        super().__init__(f"{path}: binary content")
        self.path = path
