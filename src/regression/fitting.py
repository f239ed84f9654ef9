"""Public entry point for log-log frequency regression."""

from __future__ import annotations

from typing import Optional, Sequence

from src.corpus.histogram import FrequencyHistogram

from .loglog import LogLogRegression, StepName
from .builders import RegressionPriors
from .records import ParameterSummary


def fit_loglog_regression(
    histogram: FrequencyHistogram,
    priors: Optional[RegressionPriors] = None,
    changepoint: bool = False,
    draws: int = 2000,
    tune: int = 1000,
    chains: int = 4,
    cores: Optional[int] = None,
    step: StepName = "nuts",
    credible_interval: float = 0.95,
    random_seed: Optional[int] = None,
) -> Sequence[ParameterSummary]:
    """Fit the regression and return parameter summaries in one call."""
    regression = LogLogRegression(
        priors=priors,
        changepoint=changepoint,
        draws=draws,
        tune=tune,
        chains=chains,
        cores=cores,
        step=step,
        credible_interval=credible_interval,
        random_seed=random_seed,
    )
    regression.fit(histogram)
    return regression.summaries()
