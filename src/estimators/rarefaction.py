"""Stochastic rarefaction/extrapolation walk over frequency histograms.

Extends a histogram one hypothetical word draw at a time using the Good-Turing
discovery probability: with probability ``p_1 = Y_1 / N`` the draw is a word
never seen before, otherwise an existing word at frequency ``j`` is seen once
more and moves to bucket ``j + 1``. This is an exploratory estimate with
noticeably higher variance than the direct posterior predictive one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from tqdm import tqdm

from .config import RarefactionConfig
from .predictive import PosteriorPredictive


@dataclass(frozen=True, eq=False)
class WalkOutcome:
    counts: np.ndarray
    discoveries: int
    total: int


@dataclass(frozen=True, eq=False)
class RarefactionResult:
    """Per-draw results of the walk; ``final_unique = start_unique + discoveries``."""

    start_unique: np.ndarray
    final_unique: np.ndarray
    discoveries: np.ndarray
    final_totals: np.ndarray
    added_observations: int

    @property
    def draws(self) -> int:
        return int(self.final_unique.shape[0])


def _trim(counts: np.ndarray) -> np.ndarray:
    nonzero = np.flatnonzero(counts)
    return counts[: nonzero[-1] + 1] if nonzero.size else counts[:0]


def extend_histogram(
    counts: np.ndarray,
    added: int,
    rng: np.random.Generator,
    capacity: Optional[int] = None,
) -> WalkOutcome:
    """Run ``added`` sequential draws starting from ``counts = [Y_1, Y_2, ...]``.

    Args:
        counts: Starting frequency-of-frequencies histogram.
        added: Number of hypothetical extra word draws ``m``.
        rng: Random generator for the Bernoulli and categorical draws.
        capacity: Preallocated number of frequency buckets; defaults to enough
            room for every draw to push a word one level higher.

    Raises:
        ValueError: On negative or empty input.
        RuntimeError: When the remaining mass is exhausted or a word would move
            past the preallocated capacity.
    """
    start = np.asarray(counts, dtype=np.int64).reshape(-1)
    if added < 0:
        raise ValueError("added cannot be negative.")
    if np.any(start < 0):
        raise ValueError("Histogram counts cannot be negative.")

    frequencies = np.arange(1, start.size + 1, dtype=np.int64)
    total = int(np.dot(frequencies, start))
    if total <= 0:
        raise ValueError("Cannot extend a histogram with no observed tokens.")
    if added == 0:
        return WalkOutcome(counts=start.copy(), discoveries=0, total=total)

    size = capacity if capacity is not None else start.size + added
    if size < start.size:
        raise ValueError(f"capacity={size} is smaller than the histogram length {start.size}.")

    state = np.zeros(size, dtype=np.int64)
    state[: start.size] = start
    levels = np.arange(1, size + 1, dtype=np.int64)
    discoveries = 0

    for _ in range(added):
        mass = levels * state
        current = int(mass.sum())
        if current != total:
            raise RuntimeError(f"Token total drifted during the walk ({current} != {total}).")
        if current <= 0:
            raise RuntimeError("All probability mass exhausted during the walk.")
        proportions = mass / current

        if rng.random() < proportions[0]:
            state[0] += 1
            discoveries += 1
        else:
            bucket = int(rng.choice(size, p=proportions))
            if bucket + 1 >= size:
                raise RuntimeError(
                    f"Frequency index {bucket + 2} exceeds the preallocated capacity of {size} buckets."
                )
            state[bucket] -= 1
            state[bucket + 1] += 1
        total += 1

    kept = max(start.size, _trim(state).size)
    return WalkOutcome(counts=state[:kept], discoveries=discoveries, total=total)


def run_rarefaction(predictive: PosteriorPredictive, config: Optional[RarefactionConfig] = None) -> RarefactionResult:
    """Walk the first ``config.draws`` predictive histograms forward by ``m`` draws each.

    Every draw gets its own child generator, so results do not depend on the
    order in which draws are processed.
    """
    cfg = config or RarefactionConfig()
    cfg.validate()
    draws = min(cfg.draws, predictive.replications)
    seeds = np.random.SeedSequence(cfg.random_seed).spawn(draws)

    start_unique = np.zeros(draws, dtype=np.int64)
    final_unique = np.zeros(draws, dtype=np.int64)
    discoveries = np.zeros(draws, dtype=np.int64)
    final_totals = np.zeros(draws, dtype=np.int64)

    print(f"[rarefaction] Extending {draws} predictive draws by {cfg.added_observations} observations each.")
    for idx in tqdm(range(draws), desc="Rarefaction walk", leave=False):
        start = _trim(np.asarray(predictive.counts[idx], dtype=np.int64))
        outcome = extend_histogram(start, cfg.added_observations, np.random.default_rng(seeds[idx]))

        start_unique[idx] = int(start.sum())
        discoveries[idx] = outcome.discoveries
        final_unique[idx] = start_unique[idx] + outcome.discoveries
        final_totals[idx] = outcome.total
        if final_unique[idx] != int(outcome.counts.sum()):
            raise RuntimeError("Unique-word count after the walk does not match the histogram.")

    return RarefactionResult(
        start_unique=start_unique,
        final_unique=final_unique,
        discoveries=discoveries,
        final_totals=final_totals,
        added_observations=cfg.added_observations,
    )


__all__ = ["RarefactionResult", "WalkOutcome", "extend_histogram", "run_rarefaction"]
