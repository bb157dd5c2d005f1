"""Structured JSON logger for ingestion runs and per-file drops."""

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path

from reposcope.constants import ERROR_TRUNCATION_CHARS

__all__ = ["IngestionLogger"]


class IngestionLogger:
    """Structured JSON logger with request_id correlation."""

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        self._log_dir = log_dir
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger("reposcope.ingestion_log")
        self._logger.setLevel(getattr(logging, level.upper()))
        self._logger.propagate = False

        self.path = log_dir / "ingestion.log"
        target = os.path.abspath(self.path)
        for existing in list(self._logger.handlers):
            if getattr(existing, "baseFilename", None) != target:
                self._logger.removeHandler(existing)
                existing.close()
        if not self._logger.handlers:
            handler = logging.FileHandler(self.path)
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)

    def _emit(self, level: int, payload: dict[str, object]) -> None:
        payload["timestamp"] = datetime.now(UTC).isoformat()
        self._logger.log(level, json.dumps(payload))

    def log_ingestion(
        self,
        request_id: str,
        repository: str,
        branch: str,
        total_eligible: int,
        selected: int,
        fetched: int,
        duration_ms: float,
    ) -> None:
        self._emit(
            logging.INFO,
            {
                "type": "ingestion",
                "request_id": request_id,
                "repository": repository,
                "branch": branch,
                "total_eligible": total_eligible,
                "selected": selected,
                "fetched": fetched,
                "dropped": selected - fetched,
                "duration_ms": duration_ms,
            },
        )

    def log_stage(
        self,
        request_id: str,
        stage_name: str,
        status: str,
        duration_ms: float,
        error: str | None = None,
    ) -> None:
        self._emit(
            logging.INFO,
            {
                "type": "stage",
                "request_id": request_id,
                "stage": stage_name,
                "status": status,
                "duration_ms": duration_ms,
                "error": error,
            },
        )

    def log_file_outcome(
        self,
        request_id: str,
        path: str,
        outcome: str,
        detail: str = "",
    ) -> None:
        self._emit(
            logging.INFO,
            {
                "type": "file",
                "request_id": request_id,
                "path": path,
                "outcome": outcome,
                "detail": detail,
            },
        )

    def log_error(
        self,
        request_id: str,
        component: str,
        error: str,
    ) -> None:
        self._emit(
            logging.ERROR,
            {
                "type": "error",
                "request_id": request_id,
                "component": component,
                "error": error[:ERROR_TRUNCATION_CHARS],
            },
        )
