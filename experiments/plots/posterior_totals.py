"""Histograms of posterior predictive vocabulary sizes per source."""

from __future__ import annotations

from typing import Mapping, Optional

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .save_config import PlotSaveDestinations, emit_figure


def build_draw_histogram(
    draws_by_source: Mapping[str, np.ndarray],
    title: str,
    value_label: str,
    nbins: int = 60,
) -> go.Figure:
    """Overlaid histograms of Monte Carlo draws, one colour per source."""
    frames = [
        pd.DataFrame({"source": source, "value": np.asarray(draws).reshape(-1)})
        for source, draws in draws_by_source.items()
    ]
    df = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame(columns=["source", "value"])

    fig = px.histogram(
        df,
        x="value",
        color="source",
        nbins=nbins,
        barmode="overlay",
        opacity=0.55,
        title=title,
        labels={"value": value_label},
    )
    for source, draws in draws_by_source.items():
        fig.add_vline(
            x=float(np.mean(draws)),
            line_dash="dash",
            annotation_text=f"{source} mean",
            annotation_position="top",
        )
    return fig


def plot_posterior_totals(
    totals: Mapping[str, np.ndarray],
    save_to: Optional[PlotSaveDestinations] = None,
) -> None:
    """Visualise ``N~`` draws for each source."""
    if not totals:
        return
    fig = build_draw_histogram(totals, "Posterior predictive vocabulary size", "N~ (unique words)")
    emit_figure(fig, save_to)


def plot_rarefaction(
    final_unique: Mapping[str, np.ndarray],
    added_observations: int,
    save_to: Optional[PlotSaveDestinations] = None,
) -> None:
    """Visualise unique-word counts after extending each predictive draw."""
    if not final_unique:
        return
    fig = build_draw_histogram(
        final_unique,
        f"Rarefaction walk: unique words after {added_observations} extra draws",
        "K_final",
        nbins=30,
    )
    emit_figure(fig, save_to)
