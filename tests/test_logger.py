"""Tests for the JSON run logger."""

import json
from pathlib import Path

from reposcope.logger import IngestionLogger


def _lines(path: Path) -> list[dict[str, object]]:
    return [json.loads(line) for line in path.read_text().splitlines()]


def test_creates_log_dir(tmp_path: Path) -> None:
    log_dir = tmp_path / "nested" / "logs"
    IngestionLogger(log_dir)
    assert log_dir.is_dir()


def test_ingestion_entry(tmp_path: Path) -> None:
    run_log = IngestionLogger(tmp_path)
    run_log.log_ingestion("abc", "o/r", "main", 10, 4, 3, 12.5)

    (entry,) = _lines(run_log.path)
    assert entry["type"] == "ingestion"
    assert entry["request_id"] == "abc"
    assert entry["dropped"] == 1
    assert "timestamp" in entry


def test_file_outcome_and_stage(tmp_path: Path) -> None:
    run_log = IngestionLogger(tmp_path)
    run_log.log_stage("abc", "fetch", "ok", 3.0)
    run_log.log_file_outcome("abc", "a.py", "not_found", "404")

    stage, outcome = _lines(run_log.path)
    assert stage["stage"] == "fetch"
    assert stage["error"] is None
    assert outcome == {
        **outcome,
        "type": "file",
        "path": "a.py",
        "outcome": "not_found",
        "detail": "404",
    }


def test_error_truncated(tmp_path: Path) -> None:
    run_log = IngestionLogger(tmp_path)
    run_log.log_error("abc", "ingestion", "x" * 1000)
    (entry,) = _lines(run_log.path)
    assert len(str(entry["error"])) == 200


def test_rebinds_to_new_directory(tmp_path: Path) -> None:
    first = IngestionLogger(tmp_path / "one")
    second = IngestionLogger(tmp_path / "two")
    second.log_stage("abc", "select", "ok", 1.0)
    assert second.path.read_text()
    assert not first.path.exists() or not first.path.read_text()
