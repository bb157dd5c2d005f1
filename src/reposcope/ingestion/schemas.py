"""Pydantic models for the ingestion data flow."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from reposcope.constants import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_FILES,
    DEFAULT_MAX_TOTAL_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT,
    GITHUB_API_URL,
    UNKNOWN_LANGUAGE,
    EntryKind,
    FileOutcome,
)


class RepositoryReference(BaseModel):
    """Output of the reference parser: which repository to ingest."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str
    branch: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class GitHubConfig(BaseModel):
    """Hosting-service client configuration, fixed for the process."""

    model_config = ConfigDict(frozen=True)

    api_url: str = GITHUB_API_URL
    user_agent: str = DEFAULT_USER_AGENT
    token: str | None = None
    timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT


class TreeEntry(BaseModel):
    """One node of the recursive tree listing."""

    model_config = ConfigDict(frozen=True)

    path: str
    size: int = 0
    kind: EntryKind = EntryKind.BLOB


class SelectionBudget(BaseModel):
    """Count and size limits for one pipeline run."""

    model_config = ConfigDict(frozen=True)

    max_files: int = Field(default=DEFAULT_MAX_FILES, ge=0)
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=0)
    max_total_size: int = Field(default=DEFAULT_MAX_TOTAL_SIZE, ge=0)


class Selection(BaseModel):
    """Output of the selector: admitted files in admission order."""

    model_config = ConfigDict(frozen=True)

    files: tuple[TreeEntry, ...] = ()
    total_eligible: int = 0

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.files)


class FetchedFile(BaseModel):
    """Outcome of one content fetch.

    ``encoded`` holds the transport-encoded payload on success and is
    ``None`` for every dropped file.
    """

    model_config = ConfigDict(frozen=True)

    entry: TreeEntry
    encoded: str | None = None
    outcome: FileOutcome = FileOutcome.FETCHED
    detail: str = ""


class FileRecord(BaseModel):
    """A decoded, labeled file handed to the review collaborator."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    size: int
    language: str


class FileOutcomeRecord(BaseModel):
    """Per-file outcome, one per selected file, in selection order."""

    model_config = ConfigDict(frozen=True)

    path: str
    outcome: FileOutcome
    detail: str = ""


class IngestionResult(BaseModel):
    """Terminal artifact of one ingestion run."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    branch: str
    files: tuple[FileRecord, ...] = ()
    tree: tuple[TreeEntry, ...] = ()
    outcomes: tuple[FileOutcomeRecord, ...] = ()
    total_eligible: int = 0
    selected_count: int = 0

    @property
    def fetched_count(self) -> int:
        return len(self.files)

    @property
    def dropped_count(self) -> int:
        """Selected files that did not make it into ``files``."""
        return self.selected_count - self.fetched_count

    @property
    def truncated_count(self) -> int:
        """Eligible files not delivered, whether unselected or dropped."""
        return self.total_eligible - self.fetched_count

    @property
    def languages(self) -> list[str]:
        """Distinct known languages in first-seen order."""
        seen: list[str] = []
        for record in self.files:
            if record.language == UNKNOWN_LANGUAGE:
                continue
            if record.language and record.language not in seen:
                seen.append(record.language)
        return seen
