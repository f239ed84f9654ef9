"""Shared result records for the log-log regression fits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ParameterSummary:
    """Posterior summary for a single scalar model parameter."""

    name: str
    mean: float
    sd: float
    lower: float
    upper: float
    ess: Optional[float] = None
    r_hat: Optional[float] = None


@dataclass(frozen=True)
class InterceptEstimate:
    """Extrapolated intercept on the log scale and as a word count (``exp(b0) - 1``)."""

    log_scale: ParameterSummary
    count_scale: ParameterSummary


@dataclass(frozen=True)
class LeastSquaresFit:
    """Ordinary least squares baseline for the log-log line."""

    intercept: float
    slope: float
    r2: float
