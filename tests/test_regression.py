"""Tests for the log-log regression builders and samplers."""

from __future__ import annotations

from pathlib import Path
import sys

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.corpus.histogram import FrequencyHistogram
from src.regression.builders import (
    RegressionDataset,
    RegressionPriors,
    build_changepoint_model,
    build_dataset,
    build_linear_model,
    line_mean,
)
from src.regression.fitting import fit_loglog_regression
from src.regression.least_squares import LeastSquaresConfig, fit_least_squares
from src.regression.loglog import LogLogRegression
from src.regression.records import ParameterSummary


def _zipf_like_histogram() -> FrequencyHistogram:
    return FrequencyHistogram.from_counts([200, 60, 30, 18, 12, 8, 6, 5, 4, 3, 3, 2, 2, 1, 1, 1, 0, 1, 0, 0, 1])


# ---------------------------------------------------------------------------
# Dataset builder tests


def test_build_dataset_uses_log_scales() -> None:
    dataset = build_dataset(FrequencyHistogram.from_counts([7, 0, 3]))

    assert isinstance(dataset, RegressionDataset)
    assert dataset.x == pytest.approx(np.log([1.0, 2.0, 3.0]))
    assert dataset.y == pytest.approx(np.log([8.0, 1.0, 4.0]))


def test_build_dataset_can_drop_empty_levels() -> None:
    dataset = build_dataset(FrequencyHistogram.from_counts([7, 0, 3]), drop_empty=True)
    assert list(dataset.frequencies) == [1, 3]


def test_build_dataset_rejects_degenerate_histograms() -> None:
    with pytest.raises(ValueError):
        build_dataset(FrequencyHistogram.from_counts([]))
    with pytest.raises(ValueError):
        build_dataset(FrequencyHistogram.from_counts([12]))


def test_priors_validate() -> None:
    RegressionPriors().validate()
    with pytest.raises(ValueError):
        RegressionPriors(noise_scale=0.0).validate()


def test_build_models_construct_pymc_models() -> None:
    dataset = build_dataset(_zipf_like_histogram())
    linear = build_linear_model(dataset, RegressionPriors())
    assert {"intercept", "slope", "sigma"}.issubset(linear.named_vars)

    changepoint = build_changepoint_model(dataset, RegressionPriors())
    assert {"intercept", "slope", "slope_after", "tau", "sigma"}.issubset(changepoint.named_vars)


def test_line_mean_handles_changepoint() -> None:
    params = {
        "intercept": np.array([1.0]),
        "slope": np.array([-1.0]),
        "slope_after": np.array([0.0]),
        "tau": np.array([1.0]),
    }
    mu = line_mean(params, np.array([0.0, 1.0, 2.0]))
    assert mu.shape == (1, 3)
    assert mu[0] == pytest.approx([1.0, 0.0, 0.0])


# ---------------------------------------------------------------------------
# Least squares baseline


def test_least_squares_recovers_exact_line() -> None:
    x = np.log(np.arange(1, 6, dtype=float))
    y = 2.0 - 1.5 * x
    dataset = RegressionDataset(x=x, y=y, frequencies=np.arange(1, 6), counts=np.ones(5, dtype=int))

    fit = fit_least_squares(dataset)
    assert fit.intercept == pytest.approx(2.0)
    assert fit.slope == pytest.approx(-1.5)
    assert fit.r2 == pytest.approx(1.0)


def test_least_squares_slope_is_negative_on_zipf_like_counts() -> None:
    dataset = build_dataset(_zipf_like_histogram())
    assert fit_least_squares(dataset).slope < 0
    assert fit_least_squares(dataset, LeastSquaresConfig(weighted=True)).slope < 0


# ---------------------------------------------------------------------------
# Bayesian regression tests


def test_summaries_require_fit() -> None:
    regression = LogLogRegression()
    with pytest.raises(RuntimeError):
        regression.summaries()
    with pytest.raises(RuntimeError):
        regression.intercept_estimate()


def test_regression_rejects_bad_settings() -> None:
    with pytest.raises(ValueError):
        LogLogRegression(step="gibbs")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        LogLogRegression(credible_interval=1.5)


@pytest.mark.filterwarnings("ignore::UserWarning")
@pytest.mark.filterwarnings("ignore::RuntimeWarning")
def test_linear_regression_produces_parameter_summaries() -> None:
    regression = LogLogRegression(draws=300, tune=300, chains=2, cores=1, random_seed=123)
    regression.fit(_zipf_like_histogram())
    summaries = regression.summaries()

    assert [summary.name for summary in summaries] == ["intercept", "slope", "sigma"]
    assert all(isinstance(summary, ParameterSummary) for summary in summaries)
    by_name = {summary.name: summary for summary in summaries}
    assert by_name["slope"].mean < 0
    assert by_name["intercept"].lower < by_name["intercept"].upper
    assert by_name["sigma"].mean > 0
    assert by_name["slope"].r_hat is not None

    intercept = regression.intercept_estimate()
    assert intercept.count_scale.mean == pytest.approx(np.expm1(regression.samples("intercept")).mean())

    autocorr = regression.autocorrelation("slope", max_lag=10)
    assert autocorr.shape == (11,)
    assert autocorr[0] == pytest.approx(1.0)

    grid = np.array([0.0, 1.0])
    assert regression.predict_mean(grid).shape == (2,)


@pytest.mark.filterwarnings("ignore::UserWarning")
@pytest.mark.filterwarnings("ignore::RuntimeWarning")
def test_changepoint_regression_with_metropolis() -> None:
    histogram = _zipf_like_histogram()
    regression = LogLogRegression(
        changepoint=True,
        step="metropolis",
        draws=400,
        tune=400,
        chains=1,
        cores=1,
        random_seed=7,
    )
    regression.fit(histogram)
    summaries = {summary.name: summary for summary in regression.summaries()}

    assert set(summaries) == {"intercept", "slope", "slope_after", "tau", "sigma"}
    tau = regression.samples("tau")
    assert np.all(tau >= 0.0)
    assert np.all(tau <= np.log(histogram.max_frequency))
    assert summaries["tau"].r_hat is None
    assert regression.chain_samples("tau").shape == (1, 400)


@pytest.mark.filterwarnings("ignore::UserWarning")
@pytest.mark.filterwarnings("ignore::RuntimeWarning")
def test_fit_loglog_regression_wrapper() -> None:
    summaries = fit_loglog_regression(
        _zipf_like_histogram(),
        draws=150,
        tune=150,
        chains=2,
        cores=1,
        random_seed=99,
    )
    assert [summary.name for summary in summaries] == ["intercept", "slope", "sigma"]
