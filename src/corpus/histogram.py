"""Frequency-of-frequencies histograms derived from token samples."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

import numpy as np


@dataclass(frozen=True, eq=False)
class FrequencyHistogram:
    """Counts of unique words grouped by how often they were observed.

    ``counts[i - 1]`` holds ``Y_i``, the number of distinct words seen exactly
    ``i`` times. Words that never occur are absent by definition; estimating
    them is the job of the downstream estimators.
    """

    counts: np.ndarray

    def __post_init__(self) -> None:
        counts = np.asarray(self.counts)
        if counts.ndim != 1:
            raise ValueError(f"Histogram counts must be 1-D, got shape {counts.shape}")
        if counts.size and not np.issubdtype(counts.dtype, np.integer):
            if not np.all(np.isfinite(counts)) or not np.all(np.equal(np.mod(counts, 1), 0)):
                raise ValueError("Histogram counts must be whole numbers.")
        if np.any(counts < 0):
            raise ValueError("Histogram counts cannot be negative.")

        counts = counts.astype(np.int64)
        nonzero = np.flatnonzero(counts)
        counts = counts[: nonzero[-1] + 1] if nonzero.size else counts[:0]
        counts.setflags(write=False)
        object.__setattr__(self, "counts", counts)

    @classmethod
    def from_counts(cls, counts: Sequence[int] | np.ndarray) -> "FrequencyHistogram":
        """Build a histogram from ``[Y_1, Y_2, ...]``."""
        return cls(np.asarray(counts))

    @classmethod
    def from_word_counts(cls, word_counts: Mapping[str, int]) -> "FrequencyHistogram":
        """Build a histogram from a word -> occurrence count mapping."""
        occurrences = [int(count) for count in word_counts.values() if count > 0]
        if not occurrences:
            return cls(np.zeros(0, dtype=np.int64))
        binned = np.bincount(np.asarray(occurrences, dtype=np.int64))
        return cls(binned[1:])

    @property
    def max_frequency(self) -> int:
        return int(self.counts.size)

    @property
    def frequencies(self) -> np.ndarray:
        """Frequency index ``i`` aligned with :attr:`counts`."""
        return np.arange(1, self.counts.size + 1, dtype=np.int64)

    @property
    def sample_size(self) -> int:
        """Total token count ``n = sum(i * Y_i)``."""
        return int(np.dot(self.frequencies, self.counts))

    @property
    def unique_count(self) -> int:
        """Unique word count ``K = sum(Y_i)``."""
        return int(self.counts.sum())

    @property
    def singletons(self) -> int:
        return int(self.counts[0]) if self.counts.size else 0

    @property
    def is_empty(self) -> bool:
        return self.counts.size == 0

    def padded(self, length: int) -> np.ndarray:
        """Return the counts with structural zeros appended up to ``length``."""
        if length < self.counts.size:
            raise ValueError(
                f"Cannot pad histogram of length {self.counts.size} down to {length}."
            )
        padded = np.zeros(length, dtype=np.int64)
        padded[: self.counts.size] = self.counts
        return padded

    def as_dict(self) -> dict[int, int]:
        """Sparse ``{frequency: count}`` view without empty buckets."""
        return {int(i): int(y) for i, y in zip(self.frequencies, self.counts) if y}


def tabulate(tokens: Iterable[str]) -> FrequencyHistogram:
    """Convert a token sequence into its frequency-of-frequencies histogram.

    An empty token sequence yields an empty histogram.
    """
    return FrequencyHistogram.from_word_counts(Counter(tokens))


def require_non_empty(histogram: FrequencyHistogram, *, name: str = "histogram") -> None:
    """Raise when a histogram carries no observations."""
    if histogram.is_empty or histogram.sample_size <= 0:
        raise ValueError(f"{name} is empty; at least one observed token is required.")


__all__ = ["FrequencyHistogram", "require_non_empty", "tabulate"]
