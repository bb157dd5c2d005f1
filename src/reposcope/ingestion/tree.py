"""Discover the repository's file universe for one run."""

from __future__ import annotations

import logging

from reposcope.constants import FALLBACK_BRANCH, EntryKind
from reposcope.ingestion.classifier import is_eligible
from reposcope.ingestion.github_client import GitHubClient
from reposcope.ingestion.schemas import RepositoryReference, TreeEntry

logger = logging.getLogger(__name__)


async def resolve_default_branch(
    client: GitHubClient, ref: RepositoryReference
) -> str:
    """Look up the repository's default branch (one network call)."""
    meta = await client.get_repository(ref)
    branch = meta.get("default_branch") or FALLBACK_BRANCH
    logger.info(
        "event=default_branch_resolved repo=%s branch=%s",
        ref.full_name,
        branch,
    )
    return str(branch)


async def list_tree(
    client: GitHubClient, ref: RepositoryReference, branch: str
) -> list[TreeEntry]:
    """Eligible blobs of the recursive listing, in listing order."""
    data = await client.get_tree(ref, branch)
    if data.get("truncated"):
        logger.warning(
            "event=tree_truncated repo=%s branch=%s",
            ref.full_name,
            branch,
        )

    entries: list[TreeEntry] = []
    raw = data.get("tree") or []
    for item in raw:
        if item.get("type") != EntryKind.BLOB:
            continue
        path = item.get("path") or ""
        if not path or not is_eligible(path):
            continue
        entries.append(
            TreeEntry(
                path=path,
                size=int(item.get("size") or 0),
                kind=EntryKind.BLOB,
            )
        )

    logger.info(
        "event=tree_listed repo=%s branch=%s entries=%d eligible=%d",
        ref.full_name,
        branch,
        len(raw),
        len(entries),
    )
    return entries
