"""Static configuration for corpus discovery and report output paths."""

from __future__ import annotations

from pathlib import Path

# Default directories used by the Typer CLI; callers may override these.
DEFAULT_CORPUS_ROOT = Path("data/corpora")
DEFAULT_OUTPUT_ROOT = Path("data/reports")

# Every plain-text file below a source directory contributes tokens.
DEFAULT_FILE_PATTERN = "*.txt"
DEFAULT_ENCODING = "utf-8"


__all__ = [
    "DEFAULT_CORPUS_ROOT",
    "DEFAULT_OUTPUT_ROOT",
    "DEFAULT_FILE_PATTERN",
    "DEFAULT_ENCODING",
]
