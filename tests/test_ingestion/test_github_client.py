"""Tests for the hosting-service client: headers, URLs, status mapping."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from reposcope.constants import FileOutcome
from reposcope.ingestion.errors import PerFileFetchFailure
from reposcope.ingestion.github_client import GitHubClient, build_headers
from reposcope.ingestion.schemas import GitHubConfig, RepositoryReference
from tests.conftest import make_settings
from tests.fakes import FakeGitHub


class TestHeaders:
    def test_anonymous(self) -> None:
        headers = build_headers(GitHubConfig(user_agent="ua-test"))
        assert headers["User-Agent"] == "ua-test"
        assert "application/vnd.github" in headers["Accept"]
        assert "Authorization" not in headers

    def test_bearer_token(self) -> None:
        headers = build_headers(GitHubConfig(token="ghp_secret"))
        assert headers["Authorization"] == "Bearer ghp_secret"

    def test_empty_token_means_anonymous(self, tmp_path: Path) -> None:
        assert make_settings(tmp_path).github.token is None


async def test_headers_sent_on_requests(
    tmp_path: Path, fake_github: FakeGitHub, ref: RepositoryReference
) -> None:
    settings = make_settings(tmp_path, github_token="tok")
    async with fake_github.client() as http:
        client = GitHubClient(settings.github, http=http)
        await client.get_repository(ref)
        await client.get_tree(ref, "main")
    for request in fake_github.requests:
        assert request.headers["Authorization"] == "Bearer tok"
        assert request.headers["User-Agent"] == "reposcope"


class TestGetContents:
    async def test_path_and_ref(
        self,
        github_client: GitHubClient,
        fake_github: FakeGitHub,
        ref: RepositoryReference,
    ) -> None:
        payload = await github_client.get_contents(ref, "src/app.py", "dev")
        assert payload["encoding"] == "base64"
        request = fake_github.requests[-1]
        assert request.url.path == "/repos/octocat/Hello-World/contents/src/app.py"
        assert request.url.params["ref"] == "dev"

    async def test_special_characters_are_quoted(
        self, ref: RepositoryReference
    ) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.raw_path.decode())
            return httpx.Response(200, json={})

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler)
        ) as http:
            client = GitHubClient(GitHubConfig(), http=http)
            await client.get_contents(ref, "docs/my file#1.md", "main")
        assert "/contents/docs/my%20file%231.md" in seen[0]

    async def test_not_found(
        self, github_client: GitHubClient, ref: RepositoryReference
    ) -> None:
        with pytest.raises(PerFileFetchFailure) as info:
            await github_client.get_contents(ref, "missing.py", "main")
        assert info.value.outcome == FileOutcome.NOT_FOUND

    async def test_server_error(
        self,
        github_client: GitHubClient,
        fake_github: FakeGitHub,
        ref: RepositoryReference,
    ) -> None:
        fake_github.repos["octocat/Hello-World"].file_status["src/app.py"] = 503
        with pytest.raises(PerFileFetchFailure) as info:
            await github_client.get_contents(ref, "src/app.py", "main")
        assert info.value.outcome == FileOutcome.HTTP_ERROR
        assert info.value.detail == "503"


async def test_owned_http_client_closed_on_exit() -> None:
    async with GitHubClient(GitHubConfig()) as client:
        inner = client._http
        assert not inner.is_closed
    assert inner.is_closed


async def test_borrowed_http_client_left_open(
    fake_github: FakeGitHub,
) -> None:
    http = fake_github.client()
    async with GitHubClient(GitHubConfig(), http=http):
        pass
    assert not http.is_closed
    await http.aclose()
