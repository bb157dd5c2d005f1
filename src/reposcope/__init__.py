"""Repository ingestion and selection pipeline for code review."""

__version__ = "0.1.0"
