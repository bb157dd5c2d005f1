"""Decode fetched payloads into labeled text records."""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Sequence

from reposcope.constants import FileOutcome
from reposcope.ingestion.classifier import language_for
from reposcope.ingestion.errors import BinaryContentSkipped, PerFileFetchFailure
from reposcope.ingestion.schemas import (
    FetchedFile,
    FileOutcomeRecord,
    FileRecord,
)

logger = logging.getLogger(__name__)


def decode_content(encoded: str) -> str:
    """Base64 → UTF-8 text, replacing invalid byte sequences.

    Line breaks the hosting service inserts into the payload are
    ignored.
    """
    raw = base64.b64decode(encoded)
    return raw.decode("utf-8", errors="replace")


def normalize_file(fetched: FetchedFile) -> FileRecord:
    """Build the :class:`FileRecord` for one successful fetch.

    Raises :class:`BinaryContentSkipped` when the decoded text holds
    a null byte, :class:`PerFileFetchFailure` when the payload is not
    valid base64.
    """
    entry = fetched.entry
    if fetched.encoded is None:
        raise PerFileFetchFailure(entry.path, fetched.outcome, fetched.detail)
    try:
        text = decode_content(fetched.encoded)
    except (binascii.Error, ValueError) as exc:
        raise PerFileFetchFailure(
            entry.path, FileOutcome.UNEXPECTED_ENCODING, str(exc)
        ) from exc
    if "\x00" in text:
        raise BinaryContentSkipped(entry.path)
    return FileRecord(
        path=entry.path,
        content=text,
        size=entry.size or len(text),
        language=language_for(entry.path),
    )


def normalize(
    fetched: Sequence[FetchedFile],
) -> tuple[list[FileRecord], list[FileOutcomeRecord]]:
    """Decode every fetch result, keeping input order.

    Returns the records that decoded cleanly plus one outcome per
    input, so drops stay visible to callers that want them.
    """
    records: list[FileRecord] = []
    outcomes: list[FileOutcomeRecord] = []
    for item in fetched:
        path = item.entry.path
        try:
            record = normalize_file(item)
        except BinaryContentSkipped:
            logger.debug("event=binary_skipped path=%s", path)
            outcomes.append(
                FileOutcomeRecord(path=path, outcome=FileOutcome.BINARY)
            )
            continue
        except PerFileFetchFailure as exc:
            outcomes.append(
                FileOutcomeRecord(
                    path=path, outcome=exc.outcome, detail=exc.detail
                )
            )
            continue
        records.append(record)
        outcomes.append(
            FileOutcomeRecord(path=path, outcome=FileOutcome.FETCHED)
        )
    return records, outcomes
