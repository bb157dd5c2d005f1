"""Repository ingestion: parse, discover, select, fetch, decode."""

from reposcope.ingestion.classifier import is_eligible, language_for
from reposcope.ingestion.errors import (
    BinaryContentSkipped,
    IngestionError,
    IngestionTimeout,
    MalformedReference,
    PerFileFetchFailure,
    RateLimited,
    RepositoryNotFound,
    UpstreamError,
)
from reposcope.ingestion.reference import parse_reference
from reposcope.ingestion.schemas import (
    FetchedFile,
    FileOutcomeRecord,
    FileRecord,
    GitHubConfig,
    IngestionResult,
    RepositoryReference,
    Selection,
    SelectionBudget,
    TreeEntry,
)
from reposcope.ingestion.selector import select_files

__all__ = [
    "BinaryContentSkipped",
    "FetchedFile",
    "FileOutcomeRecord",
    "FileRecord",
    "GitHubConfig",
    "IngestionError",
    "IngestionResult",
    "IngestionTimeout",
    "MalformedReference",
    "PerFileFetchFailure",
    "RateLimited",
    "RepositoryNotFound",
    "RepositoryReference",
    "Selection",
    "SelectionBudget",
    "TreeEntry",
    "UpstreamError",
    "is_eligible",
    "language_for",
    "parse_reference",
    "select_files",
]
