"""Error classification for per-file failure reporting.

Classifies exceptions by category so a dropped file's outcome detail
says *why* it was dropped (timeout vs rate limit vs server fault)
without the pipeline ever retrying.
"""

from __future__ import annotations

from enum import Enum

import httpx


class ErrorClass(Enum):
    TRANSIENT = "transient"  # 429, connection errors
    SERVER = "server"  # 5xx
    TIMEOUT = "timeout"  # deadline exceeded
    CLIENT = "client"  # 4xx other than 429
    UNKNOWN = "unknown"


def _status_of(error: Exception) -> int | None:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


def classify_error(error: Exception) -> ErrorClass:
    """Classify an error to label a per-file failure.

    Checks structured attributes first (status code, httpx exception
    types), falls back to string matching for untyped exceptions.
    """
    # 1. Structured status code
    status_code = _status_of(error)
    if status_code is not None:
        if status_code == 429:
            return ErrorClass.TRANSIENT
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT
        if 500 <= status_code < 600:
            return ErrorClass.SERVER

    # 2. Exception types
    if isinstance(error, (TimeoutError, httpx.TimeoutException)):
        return ErrorClass.TIMEOUT
    if isinstance(error, httpx.TransportError):
        return ErrorClass.TRANSIENT

    # 3. Untyped fallback
    msg = str(error).lower()

    if "timeout" in msg or "timed out" in msg:
        return ErrorClass.TIMEOUT
    if "429" in msg or "rate limit" in msg:
        return ErrorClass.TRANSIENT
    if any(code in msg for code in ("500", "502", "503", "504")):
        return ErrorClass.SERVER
    if "connection" in msg:
        return ErrorClass.TRANSIENT

    return ErrorClass.UNKNOWN
