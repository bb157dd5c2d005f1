"""Process-wide logging setup, run in two phases around the litellm import.

Phase 1: setup_logging() runs before anything imports litellm. It pins
  LITELLM_LOG and installs the root handler.

Phase 2: cleanup_third_party_handlers() runs once imports are done.
  litellm attaches its own StreamHandlers at import time; they are
  removed so each record is printed once, through root.

apply_log_level() can run any time after phase 1, once Settings (or a
CLI flag) has decided the level.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

APP_LOGGER = "reposcope"

# Kept at WARNING whatever the app level is
_SUPPRESSED_LOGGERS = (
    "LiteLLM",
    "LiteLLM Router",
    "LiteLLM Proxy",
    "httpx",
    "httpcore",
)

_LITELLM_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy")

_phase1_done = False
_phase2_done = False


def _level(name: str) -> int:
    value = logging.getLevelName(name.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {name!r}")
    return value


def setup_logging(level: str = "INFO") -> None:
    """Phase 1: root handler, format and third-party levels.

    Idempotent; a second call does nothing.
    """
    global _phase1_done  # noqa: PLW0603
    if _phase1_done:
        return
    _phase1_done = True

    # litellm._logging reads this at import time
    os.environ.setdefault("LITELLM_LOG", "WARNING")

    logging.basicConfig(
        level=_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    # httpx logs every request at INFO, one line per fetched file
    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def apply_log_level(level: str) -> None:
    """Set the application's log level without touching third parties."""
    numeric = _level(level)
    logging.getLogger().setLevel(numeric)
    logging.getLogger(APP_LOGGER).setLevel(numeric)
    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))


def cleanup_third_party_handlers() -> None:
    """Phase 2: drop the handlers litellm installs on import.

    Idempotent; a second call does nothing.
    """
    global _phase2_done  # noqa: PLW0603
    if _phase2_done:
        return
    _phase2_done = True

    for name in _LITELLM_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True
