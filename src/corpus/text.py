"""Text cleaning helpers: lowercasing, punctuation stripping and word splitting."""

from __future__ import annotations

import re
from typing import List

# Letters only, optionally joined by an inner apostrophe (don't, o'clock).
WORD_PATTERN = re.compile(r"[^\W\d_]+(?:'[^\W\d_]+)*")

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "`": "'"})


def normalize_text(text: str) -> str:
    """Lowercase text and fold typographic apostrophes into ASCII ones."""
    return text.translate(_APOSTROPHES).lower()


def tokenize(text: str) -> List[str]:
    """Split raw text into lowercase word tokens, dropping digits and punctuation."""
    return WORD_PATTERN.findall(normalize_text(text))


__all__ = ["WORD_PATTERN", "normalize_text", "tokenize"]
