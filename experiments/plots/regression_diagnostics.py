"""Trace and autocorrelation plots for the log-log regression sampler."""

from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from src.regression import LogLogRegression
from .save_config import PlotSaveDestinations, emit_figure

MAX_TRACE_POINTS = 2000


def build_trace_figure(regression: LogLogRegression, source: str, names: Optional[Sequence[str]] = None) -> go.Figure:
    """One panel per parameter, one line per chain."""
    rows: list[dict[str, object]] = []
    for name in names or regression.parameter_names:
        per_chain = regression.chain_samples(name)
        stride = max(1, per_chain.shape[1] // MAX_TRACE_POINTS)
        for chain_idx, chain in enumerate(per_chain):
            for draw_idx in range(0, chain.shape[0], stride):
                rows.append(
                    {
                        "parameter": name,
                        "chain": str(chain_idx),
                        "draw": draw_idx,
                        "value": float(chain[draw_idx]),
                    }
                )

    df = pd.DataFrame(rows)
    fig = px.line(
        df,
        x="draw",
        y="value",
        color="chain",
        facet_row="parameter",
        title=f"{source} - regression traces",
        height=220 * df["parameter"].nunique(),
    )
    fig.update_yaxes(matches=None)
    return fig


def build_autocorrelation_figure(
    regression: LogLogRegression,
    source: str,
    max_lag: int = 50,
    names: Optional[Sequence[str]] = None,
) -> go.Figure:
    """Chain-averaged autocorrelation by lag for each parameter."""
    rows: list[dict[str, object]] = []
    for name in names or regression.parameter_names:
        for lag, value in enumerate(regression.autocorrelation(name, max_lag=max_lag)):
            rows.append({"parameter": name, "lag": lag, "autocorrelation": float(value)})

    df = pd.DataFrame(rows)
    fig = px.bar(
        df,
        x="lag",
        y="autocorrelation",
        facet_row="parameter",
        title=f"{source} - regression autocorrelation",
        height=200 * df["parameter"].nunique(),
    )
    fig.update_yaxes(range=[-1.0, 1.0])
    return fig


def plot_regression_diagnostics(
    regression: LogLogRegression,
    source: str,
    max_lag: int = 50,
    save_to: Optional[PlotSaveDestinations] = None,
) -> None:
    emit_figure(build_trace_figure(regression, source), save_to.child("trace") if save_to else None)
    emit_figure(
        build_autocorrelation_figure(regression, source, max_lag=max_lag),
        save_to.child("autocorr") if save_to else None,
    )
