"""Shared test fixtures: settings, fake hosting service, client."""

import os

# Force demo keys for all tests; no real LLM or GitHub calls.
# Set unconditionally at import time, so real keys in your shell
# never leak into Settings() created by the code under test.
os.environ["OPENAI_API_KEY"] = "for-demo-purposes-only"
os.environ["ANTHROPIC_API_KEY"] = "for-demo-purposes-only"
os.environ.pop("GITHUB_TOKEN", None)

from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from reposcope.config import Settings
from reposcope.ingestion.github_client import GitHubClient
from reposcope.ingestion.schemas import RepositoryReference
from tests.fakes import FakeGitHub, FakeRepo, blob, tree

SAMPLE_FILES: dict[str, bytes] = {
    "README.md": b"# Hello World\n",
    "src/app.py": b"def main():\n    return 42\n",
    "src/util.js": b"export const x = 1;\n",
    "Dockerfile": b"FROM python:3.12\n",
}


def make_settings(tmp_path: Path, **overrides: object) -> Settings:
    """Settings isolated from any .env file on the developer machine."""
    values: dict[str, object] = {
        "github_token": "",
        "log_dir": tmp_path / "logs",
        "litellm_model_chain": ["test/model-a", "test/model-b"],
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[arg-type]


def sample_repo() -> FakeRepo:
    return FakeRepo(
        default_branch="main",
        branches=("main", "dev"),
        entries=[
            blob("README.md", 14),
            tree("src"),
            blob("src/app.py", 26),
            blob("src/util.js", 20),
            blob("Dockerfile", 17),
            blob("node_modules/lib/index.js", 5),
            blob("package-lock.json", 3),
            blob("assets/logo.png", 10),
        ],
        files=dict(SAMPLE_FILES),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub({"octocat/Hello-World": sample_repo()})


@pytest.fixture
def ref() -> RepositoryReference:
    return RepositoryReference(owner="octocat", name="Hello-World")


@pytest.fixture
async def github_client(
    fake_github: FakeGitHub, settings: Settings
) -> AsyncIterator[GitHubClient]:
    http = fake_github.client()
    client = GitHubClient(settings.github, http=http)
    yield client
    await http.aclose()
