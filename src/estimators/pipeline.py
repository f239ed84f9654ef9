"""One-call vocabulary size estimation and pairwise source comparisons."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import permutations
from typing import List, Mapping, Optional

import numpy as np

from src.corpus.histogram import FrequencyHistogram, require_non_empty

from .config import EstimatorConfig
from .dirichlet import DirichletPosterior, resolve_support_size, sample_dirichlet_posterior
from .good_turing import missing_mass
from .predictive import PosteriorPredictive, compare_draws, simulate_posterior_predictive, summarize_draws
from .records import ComparisonResult, EstimateSummary

# replications x support_size float64 cells, about 400 MB per matrix.
LARGE_DRAW_CELLS = 50_000_000


@dataclass(frozen=True, eq=False)
class LexiconEstimate:
    """Posterior and posterior predictive results for one source."""

    label: str
    histogram: FrequencyHistogram
    posterior: DirichletPosterior
    predictive: PosteriorPredictive
    total: EstimateSummary
    unseen: EstimateSummary
    missing_mass: float


def warn_if_large(histogram: FrequencyHistogram, config: EstimatorConfig, label: str = "source") -> bool:
    """Print a warning when the draw matrices would exceed ``LARGE_DRAW_CELLS``."""
    require_non_empty(histogram)
    cells = config.replications * resolve_support_size(histogram, config)
    if cells <= LARGE_DRAW_CELLS:
        return False
    print(
        f"[estimate] {label}: {config.replications} x {cells // config.replications} draw matrices "
        f"need ~{cells * 8 / 1e9:.1f} GB each; consider --support-size or fewer --replications."
    )
    return True


def estimate_lexicon_size(
    histogram: FrequencyHistogram,
    config: Optional[EstimatorConfig] = None,
    label: str = "source",
    rng: Optional[np.random.Generator] = None,
) -> LexiconEstimate:
    """Sample the Dirichlet posterior, simulate predictive draws and summarise ``N~``."""
    cfg = config or EstimatorConfig()
    cfg.validate()
    generator = rng if rng is not None else np.random.default_rng(cfg.random_seed)

    print(
        f"[estimate] {label}: n={histogram.sample_size}, K={histogram.unique_count}, "
        f"drawing {cfg.replications} posterior replications."
    )
    warn_if_large(histogram, cfg, label)
    posterior = sample_dirichlet_posterior(histogram, cfg, generator)
    predictive = simulate_posterior_predictive(histogram, posterior, generator)

    total = summarize_draws(predictive.totals, label=f"{label}:N", credible_interval=cfg.credible_interval)
    unseen = summarize_draws(predictive.unseen, label=f"{label}:Y0", credible_interval=cfg.credible_interval)
    print(f"[estimate] {label}: N~ mean={total.mean:.1f} [{total.lower:.0f}, {total.upper:.0f}]")

    return LexiconEstimate(
        label=label,
        histogram=histogram,
        posterior=posterior,
        predictive=predictive,
        total=total,
        unseen=unseen,
        missing_mass=missing_mass(histogram),
    )


def estimate_sources(
    histograms: Mapping[str, FrequencyHistogram],
    config: Optional[EstimatorConfig] = None,
) -> dict[str, LexiconEstimate]:
    """Estimate every source with one shared generator seeded from ``config``."""
    cfg = config or EstimatorConfig()
    generator = np.random.default_rng(cfg.random_seed)
    return {
        name: estimate_lexicon_size(histogram, cfg, label=name, rng=generator)
        for name, histogram in histograms.items()
    }


def compare_sources(estimates: Mapping[str, LexiconEstimate]) -> List[ComparisonResult]:
    """``Pr(N_a > N_b)`` for every ordered pair of sources."""
    if len(estimates) < 2:
        raise ValueError("At least two sources are required for a comparison.")
    return [
        compare_draws(estimates[a].predictive.totals, estimates[b].predictive.totals, a, b)
        for a, b in permutations(estimates, 2)
    ]


__all__ = ["LARGE_DRAW_CELLS", "LexiconEstimate", "compare_sources", "estimate_lexicon_size", "estimate_sources", "warn_if_large"]
