"""Greedy size-ascending selection of files under a budget."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from reposcope.ingestion.schemas import Selection, SelectionBudget, TreeEntry

logger = logging.getLogger(__name__)


def select_files(
    eligible: Sequence[TreeEntry], budget: SelectionBudget
) -> Selection:
    """Admit the smallest files first until a budget runs out.

    Files are walked in ascending size (stable, so ties keep listing
    order). A file larger than ``max_file_size`` is skipped on its
    own; the walk stops outright at the first candidate that would
    exceed ``max_files`` or ``max_total_size``. Smaller files after
    that point are not considered, so this is not an optimal packing.
    """
    ordered = sorted(eligible, key=lambda e: e.size)

    admitted: list[TreeEntry] = []
    total = 0
    skipped_oversized = 0
    for entry in ordered:
        if len(admitted) >= budget.max_files:
            break
        if entry.size > budget.max_file_size:
            skipped_oversized += 1
            continue
        if total + entry.size > budget.max_total_size:
            break
        admitted.append(entry)
        total += entry.size

    logger.debug(
        "event=selection eligible=%d selected=%d bytes=%d oversized=%d",
        len(ordered),
        len(admitted),
        total,
        skipped_oversized,
    )
    return Selection(files=tuple(admitted), total_eligible=len(eligible))
