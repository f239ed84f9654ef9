"""Log-log scatter of frequency counts with fitted regression lines."""

from __future__ import annotations

from typing import Mapping, Optional

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from src.corpus import FrequencyHistogram
from src.regression import LeastSquaresFit, LogLogRegression
from .save_config import PlotSaveDestinations, emit_figure


def build_frequency_spectrum(
    histograms: Mapping[str, FrequencyHistogram],
    least_squares: Optional[Mapping[str, LeastSquaresFit]] = None,
    regressions: Optional[Mapping[str, LogLogRegression]] = None,
) -> go.Figure:
    """Scatter ``log(Y_i + 1)`` against ``log(i)`` for every source."""
    rows: list[dict[str, object]] = []
    for source, histogram in histograms.items():
        for frequency, count in zip(histogram.frequencies, histogram.counts):
            rows.append(
                {
                    "source": source,
                    "log_frequency": float(np.log(frequency)),
                    "log_count": float(np.log1p(count)),
                }
            )
    df = pd.DataFrame(rows, columns=["source", "log_frequency", "log_count"])

    fig = px.scatter(
        df,
        x="log_frequency",
        y="log_count",
        color="source",
        opacity=0.6,
        title="Frequency spectrum (log-log)",
        labels={"log_frequency": "log(frequency i)", "log_count": "log(Y_i + 1)"},
    )

    for source, histogram in histograms.items():
        grid = np.linspace(0.0, float(np.log(max(histogram.max_frequency, 1))), 50)
        if least_squares and source in least_squares:
            fit = least_squares[source]
            fig.add_trace(
                go.Scatter(
                    x=grid,
                    y=fit.intercept + fit.slope * grid,
                    mode="lines",
                    line=dict(dash="dot"),
                    name=f"{source} OLS",
                )
            )
        if regressions and source in regressions:
            fig.add_trace(
                go.Scatter(
                    x=grid,
                    y=regressions[source].predict_mean(grid),
                    mode="lines",
                    name=f"{source} posterior mean",
                )
            )
    return fig


def plot_frequency_spectrum(
    histograms: Mapping[str, FrequencyHistogram],
    least_squares: Optional[Mapping[str, LeastSquaresFit]] = None,
    regressions: Optional[Mapping[str, LogLogRegression]] = None,
    save_to: Optional[PlotSaveDestinations] = None,
) -> None:
    if not histograms:
        return
    emit_figure(build_frequency_spectrum(histograms, least_squares, regressions), save_to)
