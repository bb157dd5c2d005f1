"""CLI entry point: ``reposcope ingest``, ``review`` and ``review-code``."""

from __future__ import annotations

# Phase 1: Singleton logging, before any transitive litellm imports
from reposcope.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import json  # noqa: E402
import sys  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Any  # noqa: E402

from reposcope import __version__  # noqa: E402
from reposcope.config import Settings  # noqa: E402
from reposcope.constants import StageProgress  # noqa: E402
from reposcope.ingestion.errors import IngestionError  # noqa: E402
from reposcope.ingestion.schemas import IngestionResult  # noqa: E402
from reposcope.logging_config import (  # noqa: E402
    apply_log_level,
    cleanup_third_party_handlers,
)
from reposcope.services.events import (  # noqa: E402
    ProgressCallback,
    StageEvent,
)

# Phase 2: Clear litellm's duplicate handlers after all imports
cleanup_third_party_handlers()


def main() -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.version:
        print(f"reposcope {__version__}")
        return

    if args.command == "ingest":
        _run_ingest(args)
    elif args.command == "review":
        _run_review(args)
    elif args.command == "review-code":
        _run_review_code(args)
    else:
        parser.print_help()


def _add_repo_arguments(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "locator",
        type=str,
        help="Repository URL or owner/name shorthand",
    )
    sub.add_argument(
        "--branch",
        "-b",
        default=None,
        help="Branch to read (default: repository default branch)",
    )
    sub.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the JSON result to this file",
    )
    sub.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print stage progress and debug logs",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="reposcope",
        description=(
            "Fetch a bounded, decoded slice of a GitHub repository "
            "for code review."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    ingest = sub.add_parser(
        "ingest",
        help="List, select and fetch repository files",
    )
    _add_repo_arguments(ingest)

    review = sub.add_parser(
        "review",
        help="Ingest a repository and request a code review",
    )
    _add_repo_arguments(review)

    snippet = sub.add_parser(
        "review-code",
        help="Request a code review of a single source file",
    )
    snippet.add_argument(
        "path",
        type=str,
        help="File to review, or - to read standard input",
    )
    snippet.add_argument(
        "--language",
        "-l",
        default=None,
        help="Language hint (default: let the model detect it)",
    )
    snippet.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the JSON result to this file",
    )
    snippet.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print debug logs",
    )

    return parser


def _progress_printer(verbose: bool) -> ProgressCallback:
    def on_progress(event: StageEvent) -> None:
        if not verbose:
            return
        if event.status == StageProgress.RUNNING:
            suffix = f" ({event.message})" if event.message else ""
            print(f"  {event.label}...{suffix}", file=sys.stderr)
        elif event.status == StageProgress.ERROR:
            print(
                f"  [FAILED] {event.label}: {event.message}",
                file=sys.stderr,
            )

    return on_progress


def _load_settings(verbose: bool) -> Settings:
    settings = Settings()
    apply_log_level("DEBUG" if verbose else settings.log_level)
    return settings


def _ingest_or_exit(
    args: argparse.Namespace, settings: Settings
) -> IngestionResult:
    from reposcope.services.ingestion_service import run_ingestion

    try:
        return asyncio.run(
            run_ingestion(
                args.locator,
                args.branch,
                settings,
                on_progress=_progress_printer(args.verbose),
            )
        )
    except IngestionError as exc:
        print(
            f"Error ({exc.status_code}): {exc.message}",
            file=sys.stderr,
        )
        sys.exit(1)


def result_to_dict(result: IngestionResult) -> dict[str, Any]:
    """JSON-ready view of an ingestion result."""
    return {
        "owner": result.owner,
        "repo": result.repo,
        "branch": result.branch,
        "total_files": result.total_eligible,
        "fetched_files": result.fetched_count,
        "truncated_files": result.truncated_count,
        "dropped_files": result.dropped_count,
        "files": [f.model_dump() for f in result.files],
        "file_outcomes": [
            o.model_dump(mode="json") for o in result.outcomes
        ],
        "tree": [
            {"path": t.path, "size": t.size} for t in result.tree
        ],
    }


def _write_json(data: dict[str, Any], output: str | None) -> None:
    text = json.dumps(data, indent=2)
    if output is None:
        print(text)
        return
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    print(f"Output: {path}")


def _run_ingest(args: argparse.Namespace) -> None:
    """Execute the ingest command."""
    settings = _load_settings(args.verbose)
    result = _ingest_or_exit(args, settings)

    print(
        f"{result.owner}/{result.repo}@{result.branch}: "
        f"{result.fetched_count} of {result.total_eligible} eligible "
        f"files fetched ({result.dropped_count} dropped)",
        file=sys.stderr,
    )
    _write_json(result_to_dict(result), args.output)


def _run_review(args: argparse.Namespace) -> None:
    """Execute the review command."""
    from reposcope.review.client import review_repository

    settings = _load_settings(args.verbose)
    result = _ingest_or_exit(args, settings)
    if not result.files:
        print("Error: no reviewable files found", file=sys.stderr)
        sys.exit(1)

    _progress_printer(args.verbose)(
        StageEvent(
            name="review",
            status=StageProgress.RUNNING,
            message=f"{result.fetched_count} files",
        )
    )
    outcome = asyncio.run(review_repository(result, settings))
    if not outcome.success:
        print(f"Error: {outcome.error}", file=sys.stderr)
        sys.exit(1)

    _write_json(
        {
            "owner": result.owner,
            "repo": result.repo,
            "branch": result.branch,
            "fetched_files": result.fetched_count,
            "model": outcome.model,
            "review": outcome.result,
            "input_tokens": outcome.input_tokens,
            "output_tokens": outcome.output_tokens,
        },
        args.output,
    )


def _run_review_code(args: argparse.Namespace) -> None:
    """Execute the review-code command."""
    from reposcope.review.client import review_code

    settings = _load_settings(args.verbose)
    if args.path == "-":
        code, file_name = sys.stdin.read(), None
    else:
        source = Path(args.path)
        try:
            code = source.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            print(f"Error: cannot read {source}: {exc}", file=sys.stderr)
            sys.exit(1)
        file_name = source.name

    if not code.strip():
        print("Error: nothing to review", file=sys.stderr)
        sys.exit(1)

    outcome = asyncio.run(
        review_code(code, file_name, args.language, settings)
    )
    if not outcome.success:
        print(f"Error: {outcome.error}", file=sys.stderr)
        sys.exit(1)

    _write_json(
        {
            "file": file_name,
            "model": outcome.model,
            "review": outcome.result,
            "input_tokens": outcome.input_tokens,
            "output_tokens": outcome.output_tokens,
        },
        args.output,
    )


if __name__ == "__main__":
    main()
