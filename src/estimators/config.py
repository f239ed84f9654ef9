"""Configuration records for the Dirichlet-multinomial estimators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EstimatorConfig:
    """Prior and replication settings for the Dirichlet-multinomial estimator.

    ``alpha_i = i ** -prior_exponent``: the default of 1.0 decays prior weight on
    the rarer high frequencies, 0.0 gives the flat ``alpha_i = 1`` prior.
    ``support_size`` caps the length of the probability vectors; ``None`` uses
    the sample size ``n``.
    """

    prior_exponent: float = 1.0
    gamma_rate: float = 1.0
    replications: int = 3000
    support_size: Optional[int] = None
    credible_interval: float = 0.95
    random_seed: Optional[int] = None

    def validate(self) -> None:
        if self.replications < 1:
            raise ValueError("replications must be at least 1.")
        if self.gamma_rate <= 0:
            raise ValueError("gamma_rate must be strictly positive.")
        if self.prior_exponent < 0:
            raise ValueError("prior_exponent cannot be negative.")
        if not 0 < self.credible_interval < 1:
            raise ValueError("credible_interval must fall within (0, 1).")
        if self.support_size is not None and self.support_size < 1:
            raise ValueError("support_size must be positive when set.")


@dataclass(frozen=True)
class RarefactionConfig:
    """Settings for the exploratory rarefaction/extrapolation walk."""

    draws: int = 100
    added_observations: int = 100
    random_seed: Optional[int] = None

    def validate(self) -> None:
        if self.draws < 1:
            raise ValueError("draws must be at least 1.")
        if self.added_observations < 0:
            raise ValueError("added_observations cannot be negative.")


__all__ = ["EstimatorConfig", "RarefactionConfig"]
