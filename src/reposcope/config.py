"""Environment-based configuration and static classification tables."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from reposcope.constants import (
    DEFAULT_FETCH_BATCH_SIZE,
    DEFAULT_INGESTION_TIMEOUT,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_FILES,
    DEFAULT_MAX_TOTAL_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT,
    GITHUB_API_URL,
)
from reposcope.ingestion.schemas import GitHubConfig, SelectionBudget

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables.

    Frozen after construction: the hosting-service credential is
    read once and handed to the pipeline as an immutable value.
    """

    # Hosting service
    github_token: str = ""
    github_api_url: str = GITHUB_API_URL
    github_user_agent: str = DEFAULT_USER_AGENT

    # Selection budget
    max_files: int = DEFAULT_MAX_FILES
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE
    max_total_size_bytes: int = DEFAULT_MAX_TOTAL_SIZE

    # Fetching
    fetch_batch_size: int = DEFAULT_FETCH_BATCH_SIZE
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT
    ingestion_timeout_seconds: float = DEFAULT_INGESTION_TIMEOUT

    # Review collaborator (first = primary, rest = fallbacks tried in order)
    litellm_model_chain: Annotated[list[str], NoDecode] = [
        "openai/gpt-4.1-mini",
        "anthropic/claude-3-5-haiku-latest",
    ]
    llm_timeout_seconds: int = 120

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")

    # API
    cors_origins: str = "http://localhost:3000"

    @field_validator("litellm_model_chain", mode="before")
    @classmethod
    def _parse_chain(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("litellm_model_chain")
    @classmethod
    def _validate_chain(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError(
                "litellm_model_chain must contain at least one model"
            )
        seen: set[str] = set()
        dupes: list[str] = []
        for m in v:
            if m in seen:
                dupes.append(m)
            seen.add(m)
        if dupes:
            logger.warning(
                "Duplicate models in LITELLM_MODEL_CHAIN: %s",
                ", ".join(dupes),
            )
        return v

    @field_validator("fetch_batch_size", "max_files")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @property
    def budget(self) -> SelectionBudget:
        """Selection budget for one ingestion run."""
        return SelectionBudget(
            max_files=self.max_files,
            max_file_size=self.max_file_size_bytes,
            max_total_size=self.max_total_size_bytes,
        )

    @property
    def github(self) -> GitHubConfig:
        """Immutable hosting-service configuration for the client."""
        return GitHubConfig(
            api_url=self.github_api_url,
            user_agent=self.github_user_agent,
            token=self.github_token or None,
            timeout_seconds=self.request_timeout_seconds,
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
        "frozen": True,
    }
