"""Plotting utilities for lexicon size results."""

from .frequency_spectrum import build_frequency_spectrum, plot_frequency_spectrum
from .posterior_totals import build_draw_histogram, plot_posterior_totals, plot_rarefaction
from .regression_diagnostics import build_autocorrelation_figure, build_trace_figure, plot_regression_diagnostics
from .save_config import PlotSaveConfig, PlotSaveDestinations, emit_figure

__all__ = [
    "build_autocorrelation_figure",
    "build_draw_histogram",
    "build_frequency_spectrum",
    "build_trace_figure",
    "emit_figure",
    "plot_frequency_spectrum",
    "plot_posterior_totals",
    "plot_rarefaction",
    "plot_regression_diagnostics",
    "PlotSaveConfig",
    "PlotSaveDestinations",
]
