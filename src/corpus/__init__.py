from .histogram import FrequencyHistogram, require_non_empty, tabulate
from .loader import SourceSpec, discover_sources, iter_source_tokens, load_source, load_sources, parse_source_option
from .text import tokenize

__all__ = [
    "FrequencyHistogram",
    "SourceSpec",
    "discover_sources",
    "iter_source_tokens",
    "load_source",
    "load_sources",
    "parse_source_option",
    "require_non_empty",
    "tabulate",
    "tokenize",
]
