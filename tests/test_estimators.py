"""Tests for the Dirichlet-multinomial sampler, predictive simulator and comparisons."""

from __future__ import annotations

from pathlib import Path
import sys

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.corpus.histogram import FrequencyHistogram
from src.estimators.config import EstimatorConfig
from src.estimators.dirichlet import (
    DirichletPosterior,
    prior_concentration,
    resolve_support_size,
    sample_dirichlet_posterior,
)
from src.estimators.good_turing import adjusted_counts, discovery_probability, missing_mass
from src.estimators.pipeline import compare_sources, estimate_lexicon_size, estimate_sources
from src.estimators.predictive import compare_draws, simulate_posterior_predictive, summarize_draws


def _reference_histogram() -> FrequencyHistogram:
    # 50 words seen once, 10 twice, 3 three times, 1 four times: n = 83, K = 64.
    return FrequencyHistogram.from_counts([50, 10, 3, 1])


# ---------------------------------------------------------------------------
# Configuration and prior


def test_estimator_config_validation() -> None:
    EstimatorConfig().validate()
    for bad in (
        EstimatorConfig(replications=0),
        EstimatorConfig(gamma_rate=0.0),
        EstimatorConfig(prior_exponent=-1.0),
        EstimatorConfig(credible_interval=1.0),
        EstimatorConfig(support_size=0),
    ):
        with pytest.raises(ValueError):
            bad.validate()


def test_prior_concentration_decays_with_frequency() -> None:
    alpha = prior_concentration(4)
    assert alpha == pytest.approx([1.0, 0.5, 1 / 3, 0.25])
    assert prior_concentration(3, exponent=0.0) == pytest.approx([1.0, 1.0, 1.0])
    with pytest.raises(ValueError):
        prior_concentration(0)


def test_support_size_defaults_to_sample_size() -> None:
    histogram = _reference_histogram()
    assert resolve_support_size(histogram, EstimatorConfig()) == 83
    assert resolve_support_size(histogram, EstimatorConfig(support_size=10)) == 10
    with pytest.raises(ValueError):
        resolve_support_size(histogram, EstimatorConfig(support_size=3))


# ---------------------------------------------------------------------------
# Dirichlet posterior sampler


def test_dirichlet_rows_sum_to_one() -> None:
    histogram = _reference_histogram()
    config = EstimatorConfig(replications=500, random_seed=1)
    posterior = sample_dirichlet_posterior(histogram, config)

    assert posterior.draws.shape == (500, 83)
    assert np.all(posterior.draws >= 0)
    assert np.allclose(posterior.draws.sum(axis=1), 1.0, atol=1e-9)
    assert posterior.concentration[:4] == pytest.approx([51.0, 10.5, 3 + 1 / 3, 1.25])


def test_dirichlet_posterior_mean_tracks_concentration() -> None:
    histogram = _reference_histogram()
    posterior = sample_dirichlet_posterior(histogram, EstimatorConfig(replications=4000, random_seed=3))
    expected = posterior.concentration / posterior.concentration.sum()
    assert posterior.mean()[0] == pytest.approx(expected[0], abs=0.02)


def test_dirichlet_is_reproducible_with_seed() -> None:
    histogram = _reference_histogram()
    config = EstimatorConfig(replications=50, random_seed=11)
    first = sample_dirichlet_posterior(histogram, config)
    second = sample_dirichlet_posterior(histogram, config)
    assert np.array_equal(first.draws, second.draws)


def test_dirichlet_rejects_bad_inputs() -> None:
    with pytest.raises(ValueError):
        sample_dirichlet_posterior(FrequencyHistogram.from_counts([]))

    histogram = _reference_histogram()
    config = EstimatorConfig(replications=10, support_size=6)
    with pytest.raises(ValueError):
        sample_dirichlet_posterior(histogram, config, prior=np.ones(5))
    with pytest.raises(ValueError):
        sample_dirichlet_posterior(histogram, config, prior=np.zeros(6))

    posterior = sample_dirichlet_posterior(histogram, config, prior=np.ones(6))
    assert posterior.support_size == 6


# ---------------------------------------------------------------------------
# Posterior predictive simulation


def test_predictive_rows_sum_to_observed_unique_count() -> None:
    histogram = _reference_histogram()
    rng = np.random.default_rng(5)
    posterior = sample_dirichlet_posterior(histogram, EstimatorConfig(replications=300), rng)
    predictive = simulate_posterior_predictive(histogram, posterior, rng)

    assert predictive.counts.shape == (300, 83)
    assert np.all(predictive.counts.sum(axis=1) == 64)
    assert np.all(predictive.totals >= 64)
    assert np.array_equal(predictive.totals, predictive.counts.sum(axis=1) + predictive.unseen)


def test_predictive_rejects_unnormalised_draws() -> None:
    histogram = _reference_histogram()
    draws = np.full((3, 4), 0.3)
    posterior = DirichletPosterior(draws=draws, concentration=np.ones(4))
    with pytest.raises(ValueError):
        simulate_posterior_predictive(histogram, posterior)


def test_predictive_rejects_short_support() -> None:
    histogram = _reference_histogram()
    posterior = DirichletPosterior(draws=np.full((2, 2), 0.5), concentration=np.ones(2))
    with pytest.raises(ValueError):
        simulate_posterior_predictive(histogram, posterior)


def test_reference_histogram_predicts_unseen_words() -> None:
    estimate = estimate_lexicon_size(
        _reference_histogram(),
        EstimatorConfig(replications=3000, random_seed=2024),
        label="reference",
    )
    assert estimate.total.mean > 64
    assert estimate.unseen.mean > 0
    assert estimate.total.lower <= estimate.total.mean <= estimate.total.upper
    assert estimate.missing_mass == pytest.approx(50 / 83)


def test_flat_prior_still_respects_invariants() -> None:
    estimate = estimate_lexicon_size(
        _reference_histogram(),
        EstimatorConfig(prior_exponent=0.0, replications=500, random_seed=9),
    )
    assert np.all(estimate.predictive.counts.sum(axis=1) == 64)
    assert estimate.total.mean > 64


# ---------------------------------------------------------------------------
# Summaries and comparisons


def test_summarize_draws_reports_quantile_interval() -> None:
    values = np.arange(1, 101)
    summary = summarize_draws(values, label="x", credible_interval=0.9)
    assert summary.mean == pytest.approx(50.5)
    assert summary.lower == pytest.approx(np.quantile(values, 0.05))
    assert summary.upper == pytest.approx(np.quantile(values, 0.95))
    with pytest.raises(ValueError):
        summarize_draws(np.array([]), label="empty")
    with pytest.raises(ValueError):
        summarize_draws(values, label="x", credible_interval=0.0)


def test_compare_draws_counts_strict_wins() -> None:
    result = compare_draws(np.array([3, 2, 5, 1]), np.array([1, 2, 4, 7]), "a", "b")
    assert result.probability == pytest.approx(0.5)
    assert result.draws == 4
    assert result.standard_error == pytest.approx(np.sqrt(0.25 / 4))
    with pytest.raises(ValueError):
        compare_draws(np.array([]), np.array([1]))


def test_compare_draws_truncates_to_shorter_set() -> None:
    result = compare_draws(np.array([5, 5, 5]), np.array([1, 9]))
    assert result.draws == 2
    assert result.probability == pytest.approx(0.5)


def test_comparison_probability_bounds_and_standard_error_scaling() -> None:
    histogram = _reference_histogram()

    def standard_error(replications: int) -> float:
        first = estimate_lexicon_size(histogram, EstimatorConfig(replications=replications, random_seed=1))
        second = estimate_lexicon_size(histogram, EstimatorConfig(replications=replications, random_seed=2))
        result = compare_draws(first.predictive.totals, second.predictive.totals)
        assert 0.0 <= result.probability <= 1.0
        return result.standard_error

    small, large = standard_error(400), standard_error(6400)
    # 16x more draws should shrink the Monte Carlo error by roughly 4x.
    assert 2.5 < small / large < 6.0


def test_compare_sources_covers_every_ordered_pair() -> None:
    histograms = {
        "herald": FrequencyHistogram.from_counts([50, 10, 3, 1]),
        "courier": FrequencyHistogram.from_counts([30, 12, 6, 2, 1]),
    }
    estimates = estimate_sources(histograms, EstimatorConfig(replications=400, random_seed=4))
    comparisons = compare_sources(estimates)

    pairs = {(result.first, result.second) for result in comparisons}
    assert pairs == {("herald", "courier"), ("courier", "herald")}
    for result in comparisons:
        assert 0.0 <= result.probability <= 1.0

    with pytest.raises(ValueError):
        compare_sources({"herald": estimates["herald"]})


# ---------------------------------------------------------------------------
# Good-Turing quantities


def test_good_turing_point_estimates() -> None:
    histogram = _reference_histogram()
    assert missing_mass(histogram) == pytest.approx(50 / 83)
    assert discovery_probability(histogram) == pytest.approx(50 / 83)
    assert discovery_probability(histogram, added=17) == pytest.approx(50 / 100)
    with pytest.raises(ValueError):
        discovery_probability(histogram, added=-1)


def test_good_turing_adjusted_counts() -> None:
    adjusted = adjusted_counts(FrequencyHistogram.from_counts([10, 4, 0, 2]))
    assert adjusted[0] == pytest.approx(2 * 4 / 10)
    assert adjusted[1] == pytest.approx(0.0)
    assert np.isnan(adjusted[2])
    assert adjusted[3] == pytest.approx(0.0)
