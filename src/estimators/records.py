"""Shared records for estimator outputs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EstimateSummary:
    """Empirical summary of a set of Monte Carlo draws."""

    label: str
    mean: float
    sd: float
    lower: float
    upper: float


@dataclass(frozen=True)
class ComparisonResult:
    """Monte Carlo estimate of ``Pr(first > second)``."""

    first: str
    second: str
    probability: float
    standard_error: float
    draws: int
