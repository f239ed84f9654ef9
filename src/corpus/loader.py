"""Read plain-text source directories and tabulate their word frequencies."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Sequence

from .config import DEFAULT_ENCODING, DEFAULT_FILE_PATTERN
from .histogram import FrequencyHistogram, tabulate
from .text import tokenize


@dataclass(frozen=True)
class SourceSpec:
    """A named news source backed by a directory of text files."""

    name: str
    directory: Path
    pattern: str = DEFAULT_FILE_PATTERN

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Source name cannot be empty.")


def parse_source_option(option: str) -> SourceSpec:
    """Parse ``name=path`` CLI values into a :class:`SourceSpec`."""
    name, sep, raw_path = option.partition("=")
    if not sep or not name.strip() or not raw_path.strip():
        raise ValueError(f"Expected NAME=DIRECTORY, received {option!r}")
    return SourceSpec(name=name.strip(), directory=Path(raw_path.strip()))


def discover_sources(root: Path, pattern: str = DEFAULT_FILE_PATTERN) -> List[SourceSpec]:
    """Treat every sub-directory of ``root`` as one source."""
    if not root.is_dir():
        raise FileNotFoundError(f"Corpus root {root} does not exist or is not a directory.")
    sources = [
        SourceSpec(name=child.name, directory=child, pattern=pattern)
        for child in sorted(root.iterdir())
        if child.is_dir()
    ]
    if not sources:
        raise ValueError(f"No source directories found under {root}.")
    return sources


def list_source_files(directory: Path, pattern: str = DEFAULT_FILE_PATTERN) -> List[Path]:
    if not directory.is_dir():
        raise FileNotFoundError(f"Source directory {directory} does not exist.")
    files = sorted(path for path in directory.rglob(pattern) if path.is_file())
    if not files:
        raise ValueError(f"No files matching '{pattern}' under {directory}.")
    return files


def iter_source_tokens(
    directory: Path,
    pattern: str = DEFAULT_FILE_PATTERN,
    encoding: str = DEFAULT_ENCODING,
) -> Iterator[str]:
    """Yield cleaned tokens from every matching file, in sorted path order."""
    for path in list_source_files(directory, pattern):
        yield from tokenize(path.read_text(encoding=encoding, errors="replace"))


def load_source(source: SourceSpec, encoding: str = DEFAULT_ENCODING) -> FrequencyHistogram:
    """Tabulate a single source directory."""
    histogram = tabulate(iter_source_tokens(source.directory, source.pattern, encoding))
    print(
        f"[corpus] {source.name}: n={histogram.sample_size} tokens, "
        f"K={histogram.unique_count} unique words, max frequency={histogram.max_frequency}"
    )
    return histogram


def load_sources(
    sources: Sequence[SourceSpec],
    encoding: str = DEFAULT_ENCODING,
) -> Dict[str, FrequencyHistogram]:
    """Tabulate several sources, keyed by source name."""
    names = [source.name for source in sources]
    if len(set(names)) != len(names):
        raise ValueError(f"Source names must be unique, received: {', '.join(names)}")
    return {source.name: load_source(source, encoding=encoding) for source in sources}


__all__ = [
    "SourceSpec",
    "discover_sources",
    "iter_source_tokens",
    "list_source_files",
    "load_source",
    "load_sources",
    "parse_source_option",
]
