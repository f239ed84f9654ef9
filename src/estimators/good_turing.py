"""Closed-form Good-Turing quantities for a frequency histogram."""

from __future__ import annotations

import numpy as np

from src.corpus.histogram import FrequencyHistogram, require_non_empty


def missing_mass(histogram: FrequencyHistogram) -> float:
    """Estimated probability mass of unseen words, ``Y_1 / n``."""
    require_non_empty(histogram)
    return histogram.singletons / histogram.sample_size


def discovery_probability(histogram: FrequencyHistogram, added: int = 0) -> float:
    """Probability that the next draw is a new word after ``added`` extra draws.

    ``Y_1 / (n + added)``, holding the singleton count fixed.
    """
    require_non_empty(histogram)
    if added < 0:
        raise ValueError("added cannot be negative.")
    return histogram.singletons / (histogram.sample_size + added)


def adjusted_counts(histogram: FrequencyHistogram) -> np.ndarray:
    """Good-Turing adjusted counts ``r* = (r + 1) Y_{r+1} / Y_r`` for ``r = 1..max``.

    Levels with ``Y_r = 0`` are reported as ``nan``.
    """
    require_non_empty(histogram)
    counts = histogram.counts.astype(float)
    following = np.append(counts[1:], 0.0)
    ranks = histogram.frequencies.astype(float)
    with np.errstate(divide="ignore", invalid="ignore"):
        adjusted = (ranks + 1.0) * following / counts
    adjusted[counts == 0] = np.nan
    return adjusted


__all__ = ["adjusted_counts", "discovery_probability", "missing_mass"]
