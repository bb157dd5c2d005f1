"""Review message assembly for the analysis collaborator.

The collaborator receives one text message: repository identity,
aggregate counts, the review brief, then every file's content behind
a ``--- FILE: <path> (<language>) ---`` delimiter.
"""

from __future__ import annotations

from reposcope.ingestion.schemas import FileRecord, IngestionResult

REVIEW_SYSTEM_PROMPT = """\
You are an expert code reviewer. You receive the source files of a \
repository and return a structured review as a JSON object.

Return a JSON object with these fields:
- overall_score: integer 0-10
- summary: two or three sentences on the codebase's overall health
- total_issues, critical_issues, warnings, suggestions: integers
- categories: object with code_quality, security, performance and \
best_practices, each {"score": 0-10, "issues_count": integer}
- issues: array of {"id", "severity" ("critical" | "warning" | \
"suggestion"), "category", "title", "description", "file", "line", \
"code_snippet", "suggestion", "suggested_code"}
- positive_highlights: array of strings
- review_metadata: {"files_reviewed", "lines_analyzed", \
"review_duration", "languages_detected"}

Cite only files and lines that appear in the input. Return JSON only.\
"""

REVIEW_BRIEF = """\
Analyze ALL files together as a complete codebase. Look for:
- Cross-file issues (inconsistent patterns, missing imports, circular dependencies)
- Security vulnerabilities across the entire codebase
- Architecture and design pattern issues
- Code quality and consistency across files
- Performance bottlenecks that may span multiple files\
"""

FILE_DELIMITER = "--- FILE: {path} ({language}) ---"


def count_lines(records: tuple[FileRecord, ...] | list[FileRecord]) -> int:
    """Total newline-separated lines across *records*."""
    return sum(len(r.content.split("\n")) for r in records)


def format_file(record: FileRecord) -> str:
    header = FILE_DELIMITER.format(
        path=record.path, language=record.language
    )
    return f"{header}\n{record.content}"


def build_review_message(result: IngestionResult) -> str:
    """Concatenate an ingestion result into the collaborator message."""
    languages = result.languages
    file_contents = "\n\n".join(format_file(f) for f in result.files)
    return (
        "Review the following GitHub repository code from "
        f"{result.owner}/{result.repo} (branch: {result.branch}).\n\n"
        f"Repository contains {len(result.files)} code files across "
        f"{len(languages)} languages: {', '.join(languages)}.\n"
        f"Total lines of code: {count_lines(result.files)}.\n\n"
        f"{REVIEW_BRIEF}\n\n"
        "Here are all the files:\n\n"
        f"{file_contents}"
    )


AUTO_DETECT = "Auto-detect"


def build_code_review_message(
    code: str,
    file_name: str | None = None,
    language: str | None = None,
) -> str:
    """Collaborator message for one pasted snippet.

    The language hint is left out when unset or ``Auto-detect`` so
    the model infers it from the code.
    """
    file_hint = f"\nFile: {file_name}" if file_name else ""
    language_hint = (
        f"\nLanguage: {language}"
        if language and language != AUTO_DETECT
        else ""
    )
    return f"Review the following code:{file_hint}{language_hint}\n\n{code}"
