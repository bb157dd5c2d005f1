"""Shared constants: single source of truth for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so downstream code (JSON
payloads, log lines) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class EntryKind(StrEnum):
    """Node kinds returned by the recursive tree listing."""

    BLOB = "blob"
    TREE = "tree"


class FileOutcome(StrEnum):
    """Per-file outcome of the fetch + normalize stages.

    Everything except FETCHED is a silent drop from the caller's
    point of view; the code is kept for logging and reporting.
    """

    FETCHED = "fetched"
    NOT_FOUND = "not_found"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    UNEXPECTED_ENCODING = "unexpected_encoding"
    BINARY = "binary"


class StageProgress(StrEnum):
    """Progress status for pipeline stage events."""

    RUNNING = "running"
    DONE = "done"
    ERROR = "error"


# ── Hosting Service ──────────────────────────────────────

GITHUB_API_URL = "https://api.github.com"
GITHUB_HOST = "github.com"
GITHUB_ACCEPT = "application/vnd.github.v3+json"
DEFAULT_USER_AGENT = "reposcope"
FALLBACK_BRANCH = "main"
TRANSPORT_ENCODING = "base64"

# ── Selection Budget Defaults ────────────────────────────

DEFAULT_MAX_FILES = 50
DEFAULT_MAX_FILE_SIZE = 100_000  # 100 KB per file
DEFAULT_MAX_TOTAL_SIZE = 500_000  # 500 KB total content
DEFAULT_FETCH_BATCH_SIZE = 10

# ── Timeouts (seconds) ───────────────────────────────────

DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_INGESTION_TIMEOUT = 120

# ── Circuit Breaker Configuration ────────────────────────

CB_LLM_FAILURE_THRESHOLD = 5
CB_LLM_RECOVERY_TIMEOUT = 30

# ── Retry Strategy (review collaborator only) ────────────

RETRY_MAX_ATTEMPTS = 3
RETRY_INITIAL_WAIT = 2
RETRY_MAX_WAIT = 30

# ── LLM Output ───────────────────────────────────────────

LLM_MAX_OUTPUT_TOKENS = 8192

# ── Misc ─────────────────────────────────────────────────

UNKNOWN_LANGUAGE = "Unknown"
ERROR_TRUNCATION_CHARS = 200
REQUEST_ID_HEX_LENGTH = 12

# ── Stage Labels (user-facing) ───────────────────────────

STAGE_LABELS: dict[str, str] = {
    "parse_reference": "Parsing repository reference",
    "resolve_branch": "Resolving default branch",
    "list_tree": "Listing repository files",
    "select": "Selecting files within budget",
    "fetch": "Fetching file contents",
    "normalize": "Decoding file contents",
    "review": "Requesting code review",
}

# ── Classification Tables ──────────────────────────────

# Extensions considered reviewable code (compared lower-cased)
CODE_EXTENSIONS: frozenset[str] = frozenset({
    ".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs",
    ".py", ".pyw",
    ".java", ".kt", ".kts", ".scala",
    ".go",
    ".rs",
    ".c", ".cpp", ".cc", ".cxx", ".h", ".hpp",
    ".cs",
    ".rb",
    ".php",
    ".swift",
    ".dart",
    ".vue", ".svelte",
    ".sol",
    ".r",
    ".lua",
    ".sh", ".bash", ".zsh",
    ".sql",
    ".graphql", ".gql",
    ".yml", ".yaml",
    ".json",
    ".xml",
    ".toml",
    ".cfg", ".ini", ".conf",
    ".md", ".mdx",
    ".html", ".css", ".scss", ".sass", ".less",
    ".dockerfile",
    ".tf",
    ".prisma",
    ".proto",
})

# Directory names that exclude their whole subtree
SKIP_DIRECTORIES: frozenset[str] = frozenset({
    "node_modules", ".git", "dist", "build", "out", ".next",
    "__pycache__", ".cache", "vendor", "target", "bin", "obj",
    ".idea", ".vscode", "coverage", ".nyc_output", ".tox",
    "venv", ".venv", "env", ".env", "eggs", ".eggs",
})

# Exact file names excluded regardless of extension (lock files)
SKIP_FILENAMES: frozenset[str] = frozenset({
    "package-lock.json", "yarn.lock", "pnpm-lock.yaml",
    "composer.lock", "Gemfile.lock", "Cargo.lock",
    "go.sum", "poetry.lock", "Pipfile.lock",
})

# Extension-less file names that still count as code
EXTENSIONLESS_CODE_FILES: dict[str, str] = {
    "Dockerfile": "Dockerfile",
    "Makefile": "Makefile",
}

# File extension → language label
EXTENSION_LANGUAGES: dict[str, str] = {
    # JavaScript / TypeScript
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    # Python
    ".py": "Python",
    ".pyw": "Python",
    # JVM
    ".java": "Java",
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".scala": "Scala",
    ".go": "Go",
    ".rs": "Rust",
    # C family
    ".c": "C",
    ".h": "C",
    ".cpp": "C++",
    ".cc": "C++",
    ".cxx": "C++",
    ".hpp": "C++",
    ".cs": "C#",
    ".rb": "Ruby",
    ".php": "PHP",
    ".swift": "Swift",
    ".dart": "Dart",
    ".vue": "Vue",
    ".svelte": "Svelte",
    ".sol": "Solidity",
    ".r": "R",
    ".lua": "Lua",
    # Shell
    ".sh": "Shell",
    ".bash": "Shell",
    ".zsh": "Shell",
    ".sql": "SQL",
    # Web
    ".html": "HTML",
    ".css": "CSS",
    ".scss": "SCSS",
    ".sass": "Sass",
    ".less": "Less",
    # Data / config
    ".json": "JSON",
    ".yml": "YAML",
    ".yaml": "YAML",
    ".toml": "TOML",
    ".xml": "XML",
    # Docs
    ".md": "Markdown",
    ".mdx": "MDX",
    # Schemas / infra
    ".graphql": "GraphQL",
    ".gql": "GraphQL",
    ".proto": "Protocol Buffers",
    ".prisma": "Prisma",
    ".tf": "Terraform",
}
