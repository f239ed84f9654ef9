"""Conjugate Dirichlet posterior over frequency proportions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from src.corpus.histogram import FrequencyHistogram, require_non_empty

from .config import EstimatorConfig

NORMALIZATION_TOLERANCE = 1e-9


@dataclass(frozen=True, eq=False)
class DirichletPosterior:
    """``R x L`` matrix of probability vectors drawn from ``Dirichlet(alpha + Y)``."""

    draws: np.ndarray
    concentration: np.ndarray

    @property
    def replications(self) -> int:
        return int(self.draws.shape[0])

    @property
    def support_size(self) -> int:
        return int(self.draws.shape[1])

    def mean(self) -> np.ndarray:
        return self.draws.mean(axis=0)


def prior_concentration(length: int, exponent: float = 1.0) -> np.ndarray:
    """Prior weights ``alpha_i = i ** -exponent`` for ``i = 1..length``."""
    if length < 1:
        raise ValueError("Prior length must be at least 1.")
    return np.arange(1, length + 1, dtype=float) ** -float(exponent)


def resolve_support_size(histogram: FrequencyHistogram, config: EstimatorConfig) -> int:
    """Length of the probability vectors: ``support_size`` or the sample size ``n``."""
    length = config.support_size if config.support_size is not None else histogram.sample_size
    if length <= 0:
        raise ValueError("Sample size must be positive.")
    if length < histogram.max_frequency:
        raise ValueError(
            f"support_size={length} is smaller than the observed max frequency {histogram.max_frequency}."
        )
    return int(length)


def check_normalized(draws: np.ndarray, tolerance: float = NORMALIZATION_TOLERANCE) -> None:
    """Raise when any row of ``draws`` does not sum to 1 within ``tolerance``."""
    totals = draws.sum(axis=-1)
    worst = float(np.max(np.abs(totals - 1.0))) if totals.size else 0.0
    if worst > tolerance:
        raise ValueError(f"Probability vectors must sum to 1 (max deviation {worst:.3e}).")


def sample_dirichlet_posterior(
    histogram: FrequencyHistogram,
    config: Optional[EstimatorConfig] = None,
    rng: Optional[np.random.Generator] = None,
    prior: Optional[Sequence[float] | np.ndarray] = None,
) -> DirichletPosterior:
    """Draw ``R`` probability vectors from the Dirichlet posterior.

    Each draw normalises independent ``Gamma(alpha_i + Y_i, rate)`` variates by
    their sum. Counts are padded with structural zeros up to the support size.

    Args:
        histogram: Observed frequency-of-frequencies histogram.
        config: Prior and replication settings.
        rng: Random generator; one is seeded from ``config.random_seed`` if omitted.
        prior: Explicit ``alpha`` vector overriding ``config.prior_exponent``.

    Returns:
        DirichletPosterior with an ``R x L`` draw matrix whose rows sum to 1.
    """
    cfg = config or EstimatorConfig()
    cfg.validate()
    require_non_empty(histogram)
    generator = rng if rng is not None else np.random.default_rng(cfg.random_seed)

    length = resolve_support_size(histogram, cfg)
    counts = histogram.padded(length).astype(float)
    if prior is None:
        alpha = prior_concentration(length, cfg.prior_exponent)
    else:
        alpha = np.asarray(prior, dtype=float)
        if alpha.shape != counts.shape:
            raise ValueError(f"Prior has shape {alpha.shape}, expected {counts.shape} to match the counts.")
        if np.any(alpha <= 0) or not np.all(np.isfinite(alpha)):
            raise ValueError("Prior concentration must be finite and strictly positive.")

    concentration = alpha + counts
    gammas = generator.gamma(shape=concentration, scale=1.0 / cfg.gamma_rate, size=(cfg.replications, length))
    totals = gammas.sum(axis=1, keepdims=True)
    if np.any(totals <= 0) or not np.all(np.isfinite(totals)):
        raise RuntimeError("Gamma draws collapsed to zero total mass; check the prior parameters.")

    draws = gammas / totals
    try:
        check_normalized(draws)
    except ValueError as exc:
        raise RuntimeError(str(exc)) from exc

    return DirichletPosterior(draws=draws, concentration=concentration)


__all__ = [
    "DirichletPosterior",
    "NORMALIZATION_TOLERANCE",
    "check_normalized",
    "prior_concentration",
    "resolve_support_size",
    "sample_dirichlet_posterior",
]
