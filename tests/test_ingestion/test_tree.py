"""Tests for branch resolution and tree listing."""

from __future__ import annotations

import logging

import pytest

from reposcope.constants import EntryKind
from reposcope.ingestion.errors import (
    RateLimited,
    RepositoryNotFound,
    UpstreamError,
)
from reposcope.ingestion.github_client import GitHubClient
from reposcope.ingestion.schemas import RepositoryReference
from reposcope.ingestion.tree import list_tree, resolve_default_branch
from tests.fakes import FakeGitHub


class TestResolveDefaultBranch:
    async def test_returns_default_branch(
        self, github_client: GitHubClient, ref: RepositoryReference
    ) -> None:
        assert await resolve_default_branch(github_client, ref) == "main"

    async def test_missing_default_falls_back_to_main(
        self,
        github_client: GitHubClient,
        fake_github: FakeGitHub,
        ref: RepositoryReference,
    ) -> None:
        fake_github.repos["octocat/Hello-World"].default_branch = None
        assert await resolve_default_branch(github_client, ref) == "main"

    async def test_unknown_repository(
        self, github_client: GitHubClient
    ) -> None:
        ref = RepositoryReference(owner="nobody", name="nothing")
        with pytest.raises(RepositoryNotFound) as info:
            await resolve_default_branch(github_client, ref)
        assert info.value.status_code == 404
        assert "nobody/nothing" in info.value.message

    async def test_other_status_is_upstream_error(
        self,
        github_client: GitHubClient,
        fake_github: FakeGitHub,
        ref: RepositoryReference,
    ) -> None:
        fake_github.repos["octocat/Hello-World"].meta_status = 502
        with pytest.raises(UpstreamError) as info:
            await resolve_default_branch(github_client, ref)
        assert info.value.status_code == 502
        assert not isinstance(info.value, RepositoryNotFound)

    async def test_rate_limit_reported(
        self,
        github_client: GitHubClient,
        fake_github: FakeGitHub,
        ref: RepositoryReference,
    ) -> None:
        fake_github.repos["octocat/Hello-World"].rate_limited = True
        with pytest.raises(RateLimited) as info:
            await resolve_default_branch(github_client, ref)
        assert info.value.status_code == 403
        assert "rate limit" in info.value.message


class TestListTree:
    async def test_filters_to_eligible_blobs(
        self, github_client: GitHubClient, ref: RepositoryReference
    ) -> None:
        entries = await list_tree(github_client, ref, "main")
        assert [e.path for e in entries] == [
            "README.md",
            "src/app.py",
            "src/util.js",
            "Dockerfile",
        ]
        assert all(e.kind == EntryKind.BLOB for e in entries)
        assert entries[1].size == 26

    async def test_missing_size_counts_as_zero(
        self,
        github_client: GitHubClient,
        fake_github: FakeGitHub,
        ref: RepositoryReference,
    ) -> None:
        fake_github.repos["octocat/Hello-World"].entries = [
            {"path": "a.py", "type": "blob"}
        ]
        entries = await list_tree(github_client, ref, "main")
        assert entries[0].size == 0

    async def test_unknown_branch_is_not_found(
        self, github_client: GitHubClient, ref: RepositoryReference
    ) -> None:
        with pytest.raises(RepositoryNotFound, match="nope"):
            await list_tree(github_client, ref, "nope")

    async def test_tree_failure_is_upstream_error(
        self,
        github_client: GitHubClient,
        fake_github: FakeGitHub,
        ref: RepositoryReference,
    ) -> None:
        fake_github.repos["octocat/Hello-World"].tree_status = 500
        with pytest.raises(UpstreamError) as info:
            await list_tree(github_client, ref, "main")
        assert info.value.status_code == 500

    async def test_truncated_listing_logs_warning(
        self,
        github_client: GitHubClient,
        fake_github: FakeGitHub,
        ref: RepositoryReference,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        fake_github.repos["octocat/Hello-World"].tree_truncated = True
        with caplog.at_level(logging.WARNING, logger="reposcope.ingestion.tree"):
            entries = await list_tree(github_client, ref, "main")
        assert entries
        assert "event=tree_truncated" in caplog.text

    async def test_requests_recursive_listing(
        self,
        github_client: GitHubClient,
        fake_github: FakeGitHub,
        ref: RepositoryReference,
    ) -> None:
        await list_tree(github_client, ref, "dev")
        request = fake_github.requests[-1]
        assert request.url.path == "/repos/octocat/Hello-World/git/trees/dev"
        assert request.url.params["recursive"] == "1"
