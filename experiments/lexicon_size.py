from __future__ import annotations

from dataclasses import dataclass, field
from itertools import permutations
from typing import Dict, List, Mapping, Optional

from src.corpus import FrequencyHistogram
from src.estimators import (
    ComparisonResult,
    EstimatorConfig,
    LexiconEstimate,
    RarefactionConfig,
    RarefactionResult,
    compare_draws,
    compare_sources,
    estimate_sources,
    run_rarefaction,
)
from src.regression import LeastSquaresFit, LogLogRegression, build_dataset, fit_least_squares
from src.regression.loglog import StepName


@dataclass(frozen=True)
class RegressionSettings:
    """Sampler settings for the per-source log-log regressions."""

    enabled: bool = True
    changepoint: bool = False
    draws: int = 2000
    tune: int = 1000
    chains: int = 2
    cores: Optional[int] = 1
    step: StepName = "nuts"
    random_seed: Optional[int] = 123


@dataclass
class LexiconRun:
    """Everything produced by one end-to-end run over a set of sources."""

    histograms: Dict[str, FrequencyHistogram]
    estimates: Dict[str, LexiconEstimate]
    comparisons: List[ComparisonResult]
    least_squares: Dict[str, LeastSquaresFit] = field(default_factory=dict)
    regressions: Dict[str, LogLogRegression] = field(default_factory=dict)
    rarefaction: Dict[str, RarefactionResult] = field(default_factory=dict)
    rarefaction_comparisons: List[ComparisonResult] = field(default_factory=list)


def run_regressions(
    histograms: Mapping[str, FrequencyHistogram],
    settings: RegressionSettings,
) -> tuple[Dict[str, LeastSquaresFit], Dict[str, LogLogRegression]]:
    least_squares: Dict[str, LeastSquaresFit] = {}
    regressions: Dict[str, LogLogRegression] = {}
    for name, histogram in histograms.items():
        # Needs at least two frequency levels.
        try:
            dataset = build_dataset(histogram)
        except ValueError as exc:
            print(f"[regression] {name}: skipped ({exc})")
            continue
        fit = fit_least_squares(dataset)
        least_squares[name] = fit
        print(f"[regression] {name}: OLS intercept={fit.intercept:.3f} slope={fit.slope:.3f} R^2={fit.r2:.3f}")

        if not settings.enabled:
            continue
        regression = LogLogRegression(
            changepoint=settings.changepoint,
            draws=settings.draws,
            tune=settings.tune,
            chains=settings.chains,
            cores=settings.cores,
            step=settings.step,
            random_seed=settings.random_seed,
        )
        regressions[name] = regression.fit(histogram)
    return least_squares, regressions


def run_lexicon_size(
    histograms: Mapping[str, FrequencyHistogram],
    estimator_config: Optional[EstimatorConfig] = None,
    rarefaction_config: Optional[RarefactionConfig] = None,
    regression_settings: Optional[RegressionSettings] = None,
) -> LexiconRun:
    """Regress, estimate, rarefy and compare already tabulated sources."""
    if not histograms:
        raise ValueError("At least one source histogram is required.")
    settings = regression_settings or RegressionSettings()
    print(f"[lexicon] Running estimation for {len(histograms)} sources: {', '.join(histograms)}")

    least_squares, regressions = run_regressions(histograms, settings)
    estimates = estimate_sources(histograms, estimator_config)
    comparisons = compare_sources(estimates) if len(estimates) > 1 else []

    rarefaction: Dict[str, RarefactionResult] = {}
    rarefaction_comparisons: List[ComparisonResult] = []
    if rarefaction_config is not None:
        for name, estimate in estimates.items():
            rarefaction[name] = run_rarefaction(estimate.predictive, rarefaction_config)
        for first, second in permutations(rarefaction, 2):
            rarefaction_comparisons.append(
                compare_draws(rarefaction[first].final_unique, rarefaction[second].final_unique, first, second)
            )

    for comparison in comparisons:
        print(
            f"[lexicon] Pr(N_{comparison.first} > N_{comparison.second}) = "
            f"{comparison.probability:.3f} (MC se {comparison.standard_error:.3f})"
        )

    return LexiconRun(
        histograms=dict(histograms),
        estimates=estimates,
        comparisons=comparisons,
        least_squares=least_squares,
        regressions=regressions,
        rarefaction=rarefaction,
        rarefaction_comparisons=rarefaction_comparisons,
    )
