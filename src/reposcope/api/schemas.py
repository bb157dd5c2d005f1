"""Request/response schemas for the HTTP API.

Wire names are camelCase to match the browser client.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from reposcope.ingestion.schemas import IngestionResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True
    )


class IngestRequest(_CamelModel):
    """Request body for POST /api/github and POST /api/review."""

    repo_url: str | None = Field(default=None, max_length=2_000)
    branch: str | None = Field(default=None, max_length=255)


class CodeReviewRequest(_CamelModel):
    """Request body for POST /api/review/code."""

    code: str | None = Field(default=None, max_length=500_000)
    file_name: str | None = Field(default=None, max_length=255)
    language: str | None = Field(default=None, max_length=64)


class ErrorResponse(_CamelModel):
    success: bool = False
    error: str


class FileOut(_CamelModel):
    path: str
    content: str
    size: int
    language: str


class TreeItemOut(_CamelModel):
    path: str
    size: int


class FileOutcomeOut(_CamelModel):
    path: str
    outcome: str
    detail: str = ""


class IngestResponse(_CamelModel):
    """Success body for POST /api/github."""

    success: bool = True
    owner: str
    repo: str
    branch: str
    files: list[FileOut]
    total_files: int
    fetched_files: int
    truncated_files: int
    dropped_files: int
    tree: list[TreeItemOut]
    file_outcomes: list[FileOutcomeOut]

    @classmethod
    def from_result(cls, result: IngestionResult) -> "IngestResponse":
        return cls(
            owner=result.owner,
            repo=result.repo,
            branch=result.branch,
            files=[
                FileOut(
                    path=f.path,
                    content=f.content,
                    size=f.size,
                    language=f.language,
                )
                for f in result.files
            ],
            total_files=result.total_eligible,
            fetched_files=result.fetched_count,
            truncated_files=result.truncated_count,
            dropped_files=result.dropped_count,
            tree=[
                TreeItemOut(path=t.path, size=t.size)
                for t in result.tree
            ],
            file_outcomes=[
                FileOutcomeOut(
                    path=o.path, outcome=str(o.outcome), detail=o.detail
                )
                for o in result.outcomes
            ],
        )


class ReviewResponse(_CamelModel):
    """Success body for POST /api/review."""

    success: bool = True
    owner: str
    repo: str
    branch: str
    fetched_files: int
    model: str | None = None
    review: dict[str, Any]
    input_tokens: int = 0
    output_tokens: int = 0


class CodeReviewResponse(_CamelModel):
    """Success body for POST /api/review/code."""

    success: bool = True
    model: str | None = None
    review: dict[str, Any]
    input_tokens: int = 0
    output_tokens: int = 0
