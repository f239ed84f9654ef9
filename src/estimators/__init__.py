"""Dirichlet-multinomial and Good-Turing estimators of vocabulary size."""

from .config import EstimatorConfig, RarefactionConfig
from .dirichlet import DirichletPosterior, prior_concentration, sample_dirichlet_posterior
from .good_turing import adjusted_counts, discovery_probability, missing_mass
from .pipeline import LexiconEstimate, compare_sources, estimate_lexicon_size, estimate_sources
from .predictive import PosteriorPredictive, compare_draws, simulate_posterior_predictive, summarize_draws
from .rarefaction import RarefactionResult, extend_histogram, run_rarefaction
from .records import ComparisonResult, EstimateSummary

__all__ = [
    "ComparisonResult",
    "DirichletPosterior",
    "EstimateSummary",
    "EstimatorConfig",
    "LexiconEstimate",
    "PosteriorPredictive",
    "RarefactionConfig",
    "RarefactionResult",
    "adjusted_counts",
    "compare_draws",
    "compare_sources",
    "discovery_probability",
    "estimate_lexicon_size",
    "estimate_sources",
    "extend_histogram",
    "missing_mass",
    "prior_concentration",
    "run_rarefaction",
    "sample_dirichlet_posterior",
    "simulate_posterior_predictive",
    "summarize_draws",
]
