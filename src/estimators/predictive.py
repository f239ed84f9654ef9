"""Posterior predictive simulation of frequency counts and unseen words."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from src.corpus.histogram import FrequencyHistogram, require_non_empty

from .dirichlet import DirichletPosterior, check_normalized
from .records import ComparisonResult, EstimateSummary


@dataclass(frozen=True, eq=False)
class PosteriorPredictive:
    """Simulated histograms ``Y~``, unseen counts ``Y0~`` and totals ``N~``."""

    counts: np.ndarray
    unseen: np.ndarray
    totals: np.ndarray
    observed_unique: int

    @property
    def replications(self) -> int:
        return int(self.totals.shape[0])


def simulate_posterior_predictive(
    histogram: FrequencyHistogram,
    posterior: DirichletPosterior,
    rng: Optional[np.random.Generator] = None,
) -> PosteriorPredictive:
    """Draw one predictive histogram and one unseen count per posterior draw.

    ``Y~ ~ Multinomial(K, p)`` and ``Y0~ ~ Binomial(K, p_1)``: the singleton
    proportion ``p_1`` stands in for the unobservable missing mass ``p_0``.
    """
    require_non_empty(histogram)
    probabilities = np.asarray(posterior.draws, dtype=float)
    if probabilities.ndim != 2:
        raise ValueError(f"Posterior draws must be 2-D (replications x support), got {probabilities.shape}")
    if probabilities.shape[1] < histogram.max_frequency:
        raise ValueError("Posterior support is shorter than the observed histogram.")
    if np.any(probabilities < 0):
        raise ValueError("Posterior draws contain negative probabilities.")
    check_normalized(probabilities)

    generator = rng if rng is not None else np.random.default_rng()
    observed_unique = histogram.unique_count

    counts = generator.multinomial(observed_unique, probabilities)
    unseen = generator.binomial(observed_unique, probabilities[:, 0])
    totals = counts.sum(axis=1) + unseen

    if np.any(totals < observed_unique):
        raise RuntimeError("Predicted vocabulary fell below the observed unique-word count.")

    return PosteriorPredictive(
        counts=counts,
        unseen=unseen,
        totals=totals,
        observed_unique=observed_unique,
    )


def summarize_draws(values: np.ndarray, label: str, credible_interval: float = 0.95) -> EstimateSummary:
    """Empirical mean, sd and central quantile interval of Monte Carlo draws."""
    if not 0 < credible_interval < 1:
        raise ValueError("credible_interval must fall within (0, 1).")
    arr = np.asarray(values, dtype=float).reshape(-1)
    if arr.size == 0:
        raise ValueError("Cannot summarise an empty set of draws.")
    tail = (1.0 - credible_interval) / 2.0
    lower, upper = np.quantile(arr, [tail, 1.0 - tail])
    return EstimateSummary(
        label=label,
        mean=float(arr.mean()),
        sd=float(arr.std(ddof=1)) if arr.size > 1 else 0.0,
        lower=float(lower),
        upper=float(upper),
    )


def compare_draws(
    first: np.ndarray,
    second: np.ndarray,
    first_label: str = "first",
    second_label: str = "second",
) -> ComparisonResult:
    """Estimate ``Pr(first > second)`` as the fraction of paired draws where it holds.

    Draw sets from independent runs are paired by position and truncated to the
    shorter length. Ties do not count as ``first > second``.
    """
    a = np.asarray(first, dtype=float).reshape(-1)
    b = np.asarray(second, dtype=float).reshape(-1)
    draws = min(a.size, b.size)
    if draws == 0:
        raise ValueError("Both draw sets must be non-empty to compare them.")

    wins = a[:draws] > b[:draws]
    probability = float(wins.mean())
    standard_error = float(np.sqrt(probability * (1.0 - probability) / draws))
    return ComparisonResult(
        first=first_label,
        second=second_label,
        probability=probability,
        standard_error=standard_error,
        draws=draws,
    )


__all__ = ["PosteriorPredictive", "compare_draws", "simulate_posterior_predictive", "summarize_draws"]
