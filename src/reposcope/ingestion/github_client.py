"""Thin async client for the three hosting-service calls the pipeline makes."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx

from reposcope.constants import GITHUB_ACCEPT, FileOutcome
from reposcope.ingestion.errors import (
    PerFileFetchFailure,
    RateLimited,
    RepositoryNotFound,
    UpstreamError,
)
from reposcope.ingestion.schemas import GitHubConfig, RepositoryReference

logger = logging.getLogger(__name__)


def build_headers(config: GitHubConfig) -> dict[str, str]:
    """Identification header plus the optional bearer credential."""
    headers = {
        "Accept": GITHUB_ACCEPT,
        "User-Agent": config.user_agent,
    }
    if config.token:
        headers["Authorization"] = f"Bearer {config.token}"
    return headers


def _rate_limit_message(response: httpx.Response, context: str) -> str | None:
    """Describe an exhausted quota, or None if this is not one."""
    if response.status_code not in (403, 429):
        return None
    remaining = response.headers.get("X-RateLimit-Remaining")
    if remaining != "0" and "rate limit" not in response.text.lower():
        return None
    msg = f"GitHub rate limit hit during {context}."
    reset = response.headers.get("X-RateLimit-Reset")
    if reset and reset.isdigit():
        when = datetime.fromtimestamp(int(reset), tz=UTC)
        msg = f"{msg} Resets at {when.isoformat()}."
    return msg


class GitHubClient:
    """Async wrapper over the hosting service's REST API.

    Owns its ``httpx.AsyncClient`` unless one is passed in, in which
    case closing is left to the caller.
    """

    def __init__(
        self,
        config: GitHubConfig,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._base = config.api_url.rstrip("/")
        self._headers = build_headers(config)
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_seconds)
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _repo_url(self, ref: RepositoryReference) -> str:
        return f"{self._base}/repos/{quote(ref.owner)}/{quote(ref.name)}"

    async def _get(
        self, url: str, params: dict[str, str] | None = None
    ) -> httpx.Response:
        return await self._http.get(
            url,
            params=params,
            headers=self._headers,
            timeout=self._config.timeout_seconds,
        )

    async def get_repository(
        self, ref: RepositoryReference
    ) -> dict[str, Any]:
        """Repository metadata (``GET /repos/{owner}/{repo}``)."""
        response = await self._get(self._repo_url(ref))
        if response.status_code == 404:
            raise RepositoryNotFound(
                f"Repository {ref.full_name} not found. "
                "Make sure it exists and is public."
            )
        rate_msg = _rate_limit_message(response, "repository lookup")
        if rate_msg:
            raise RateLimited(rate_msg, response.status_code)
        if not response.is_success:
            raise UpstreamError(
                f"GitHub API error: {response.status_code} "
                f"{response.reason_phrase}",
                response.status_code,
            )
        data: dict[str, Any] = response.json()
        return data

    async def get_tree(
        self, ref: RepositoryReference, branch: str
    ) -> dict[str, Any]:
        """Recursive tree listing for *branch*."""
        url = f"{self._repo_url(ref)}/git/trees/{quote(branch, safe='/')}"
        response = await self._get(url, params={"recursive": "1"})
        if response.status_code == 404:
            raise RepositoryNotFound(
                f"Repository {ref.full_name} or branch '{branch}' "
                "not found."
            )
        rate_msg = _rate_limit_message(response, "tree listing")
        if rate_msg:
            raise RateLimited(rate_msg, response.status_code)
        if not response.is_success:
            raise UpstreamError(
                f"Failed to fetch repo tree: {response.status_code} "
                f"{response.reason_phrase}",
                response.status_code,
            )
        data: dict[str, Any] = response.json()
        return data

    async def get_contents(
        self, ref: RepositoryReference, path: str, branch: str
    ) -> dict[str, Any]:
        """File payload for *path* at *branch*.

        Raises :class:`PerFileFetchFailure` on a non-success status;
        transport errors propagate as ``httpx.HTTPError``.
        """
        url = f"{self._repo_url(ref)}/contents/{quote(path, safe='/')}"
        response = await self._get(url, params={"ref": branch})
        if response.status_code == 404:
            raise PerFileFetchFailure(path, FileOutcome.NOT_FOUND, "404")
        if not response.is_success:
            raise PerFileFetchFailure(
                path, FileOutcome.HTTP_ERROR, str(response.status_code)
            )
        data: dict[str, Any] = response.json()
        return data
