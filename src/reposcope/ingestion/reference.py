"""Parse a user-supplied repository locator.

Accepted forms::

    owner/name
    https://github.com/owner/name
    https://github.com/owner/name/tree/<branch>[/more/path]

A trailing ``.git`` and a trailing slash are tolerated. Parsing is
local and synchronous; it never touches the network.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from reposcope.constants import GITHUB_HOST
from reposcope.ingestion.errors import MalformedReference
from reposcope.ingestion.schemas import RepositoryReference

_SHORTHAND = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

_USAGE = (
    "Invalid GitHub URL. Use format: "
    "https://github.com/owner/repo or owner/repo"
)


def parse_reference(
    locator: str, branch: str | None = None
) -> RepositoryReference:
    """Return the :class:`RepositoryReference` named by *locator*.

    An explicit *branch* wins over one embedded in the URL.
    Raises :class:`MalformedReference` for anything else.
    """
    cleaned = (locator or "").strip()
    if not cleaned:
        raise MalformedReference("repository locator is required")
    cleaned = cleaned.removesuffix(".git").removesuffix("/")

    explicit = branch.strip() if branch else None

    if _SHORTHAND.match(cleaned):
        owner, name = cleaned.split("/")
        return RepositoryReference(
            owner=owner, name=name, branch=explicit or None
        )

    parts = urlsplit(cleaned)
    if parts.scheme not in ("http", "https"):
        raise MalformedReference(_USAGE)
    if (parts.hostname or "").lower() != GITHUB_HOST:
        raise MalformedReference(_USAGE)

    segments = [s for s in parts.path.split("/") if s]
    if len(segments) < 2:
        raise MalformedReference(_USAGE)

    owner, name = segments[0], segments[1]
    embedded: str | None = None
    if len(segments) > 3 and segments[2] == "tree":
        embedded = segments[3]

    return RepositoryReference(
        owner=owner, name=name, branch=explicit or embedded
    )
