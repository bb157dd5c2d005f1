"""Decide whether a repository path is eligible for review."""

from __future__ import annotations

from reposcope.constants import (
    CODE_EXTENSIONS,
    EXTENSION_LANGUAGES,
    EXTENSIONLESS_CODE_FILES,
    SKIP_DIRECTORIES,
    SKIP_FILENAMES,
    UNKNOWN_LANGUAGE,
)


def file_extension(name: str) -> str:
    """Lower-cased text after the last ``.`` of *name*, dot included.

    ``""`` when *name* has no dot. Leading-dot names count:
    ``.gitignore`` has extension ``.gitignore``.
    """
    if "." not in name:
        return ""
    return "." + name.rsplit(".", 1)[1].lower()


def is_eligible(path: str) -> bool:
    """Return True if *path* should be considered for review.

    * No directory segment may be in :data:`SKIP_DIRECTORIES`.
    * The file name may not be in :data:`SKIP_FILENAMES`.
    * The extension must be in :data:`CODE_EXTENSIONS`, or the name
      must be one of the extension-less code files (``Dockerfile``,
      ``Makefile``). Any other extension-less file is excluded.
    """
    segments = path.split("/")
    if any(part in SKIP_DIRECTORIES for part in segments[:-1]):
        return False

    name = segments[-1]
    if name in SKIP_FILENAMES:
        return False
    if name in EXTENSIONLESS_CODE_FILES:
        return True

    ext = file_extension(name)
    if not ext:
        return False
    return ext in CODE_EXTENSIONS


def language_for(path: str) -> str:
    """Language label for *path*; ``Unknown`` when unmapped."""
    name = path.rsplit("/", 1)[-1]
    special = EXTENSIONLESS_CODE_FILES.get(name)
    if special is not None:
        return special
    return EXTENSION_LANGUAGES.get(file_extension(name), UNKNOWN_LANGUAGE)
