"""Tests for the stochastic rarefaction/extrapolation walk."""

from __future__ import annotations

from pathlib import Path
import sys

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.corpus.histogram import FrequencyHistogram
from src.estimators.config import EstimatorConfig, RarefactionConfig
from src.estimators.pipeline import estimate_lexicon_size
from src.estimators.predictive import PosteriorPredictive
from src.estimators.rarefaction import extend_histogram, run_rarefaction


def _predictive_from_rows(rows: list[list[int]]) -> PosteriorPredictive:
    counts = np.asarray(rows, dtype=np.int64)
    unique = int(counts[0].sum())
    unseen = np.zeros(counts.shape[0], dtype=np.int64)
    return PosteriorPredictive(counts=counts, unseen=unseen, totals=counts.sum(axis=1), observed_unique=unique)


# ---------------------------------------------------------------------------
# Single walk


def test_zero_added_observations_returns_input_unchanged() -> None:
    counts = np.array([50, 10, 3, 1])
    outcome = extend_histogram(counts, 0, np.random.default_rng(0))
    assert np.array_equal(outcome.counts, counts)
    assert outcome.discoveries == 0
    assert outcome.total == 83
    assert int(outcome.counts.sum()) == 64


def test_walk_preserves_token_and_word_accounting() -> None:
    counts = np.array([50, 10, 3, 1])
    outcome = extend_histogram(counts, 40, np.random.default_rng(3))

    assert outcome.total == 83 + 40
    assert int(np.dot(np.arange(1, outcome.counts.size + 1), outcome.counts)) == outcome.total
    assert int(outcome.counts.sum()) == 64 + outcome.discoveries
    assert 0 <= outcome.discoveries <= 40


def test_all_singletons_always_discover() -> None:
    outcome = extend_histogram(np.array([5]), 1, np.random.default_rng(1))
    assert outcome.discoveries == 1
    assert list(outcome.counts) == [6]


def test_no_singletons_never_discover() -> None:
    outcome = extend_histogram(np.array([0, 0, 3]), 6, np.random.default_rng(2))
    assert outcome.discoveries == 0
    assert int(outcome.counts.sum()) == 3
    assert outcome.total == 15
    assert outcome.counts[0] == 0


def test_capacity_overflow_is_fatal() -> None:
    with pytest.raises(RuntimeError):
        extend_histogram(np.array([0, 1]), 5, np.random.default_rng(0), capacity=2)


def test_walk_rejects_invalid_input() -> None:
    rng = np.random.default_rng(0)
    with pytest.raises(ValueError):
        extend_histogram(np.array([0, 0]), 3, rng)
    with pytest.raises(ValueError):
        extend_histogram(np.array([2, -1]), 3, rng)
    with pytest.raises(ValueError):
        extend_histogram(np.array([2]), -1, rng)
    with pytest.raises(ValueError):
        extend_histogram(np.array([2, 1, 1]), 3, rng, capacity=2)


# ---------------------------------------------------------------------------
# Batch runs over predictive draws


def test_run_rarefaction_with_zero_steps_keeps_unique_counts() -> None:
    predictive = _predictive_from_rows([[50, 10, 3, 1], [48, 11, 4, 1]])
    result = run_rarefaction(predictive, RarefactionConfig(draws=2, added_observations=0, random_seed=0))
    assert list(result.final_unique) == [64, 64]
    assert list(result.discoveries) == [0, 0]
    assert list(result.final_totals) == [83, 86]


def test_run_rarefaction_is_reproducible_and_bounded() -> None:
    estimate = estimate_lexicon_size(
        FrequencyHistogram.from_counts([50, 10, 3, 1]),
        EstimatorConfig(replications=200, random_seed=8),
    )
    config = RarefactionConfig(draws=20, added_observations=25, random_seed=99)
    first = run_rarefaction(estimate.predictive, config)
    second = run_rarefaction(estimate.predictive, config)

    assert first.draws == 20
    assert np.array_equal(first.final_unique, second.final_unique)
    assert np.all(first.final_unique == first.start_unique + first.discoveries)
    assert np.all(first.start_unique == 64)
    assert np.all((first.discoveries >= 0) & (first.discoveries <= 25))


def test_run_rarefaction_caps_draws_at_available_replications() -> None:
    predictive = _predictive_from_rows([[3, 1], [2, 2]])
    result = run_rarefaction(predictive, RarefactionConfig(draws=10, added_observations=2, random_seed=1))
    assert result.draws == 2


def test_rarefaction_config_validation() -> None:
    with pytest.raises(ValueError):
        RarefactionConfig(draws=0).validate()
    with pytest.raises(ValueError):
        RarefactionConfig(added_observations=-5).validate()
