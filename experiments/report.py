"""Summary tables and a single HTML report for a lexicon size run."""

from __future__ import annotations

import html
from datetime import datetime
from pathlib import Path
from typing import Dict, List

import pandas as pd
import plotly.graph_objects as go

from src.estimators import adjusted_counts, discovery_probability, summarize_draws
from experiments.lexicon_size import LexiconRun
from experiments.plots import build_autocorrelation_figure, build_draw_histogram, build_frequency_spectrum, build_trace_figure


def histogram_table(run: LexiconRun) -> pd.DataFrame:
    rows = []
    for source, histogram in run.histograms.items():
        estimate = run.estimates.get(source)
        rows.append(
            {
                "source": source,
                "tokens_n": histogram.sample_size,
                "unique_K": histogram.unique_count,
                "singletons_Y1": histogram.singletons,
                "max_frequency": histogram.max_frequency,
                "missing_mass": estimate.missing_mass if estimate else None,
            }
        )
    return pd.DataFrame(rows)


def vocabulary_table(run: LexiconRun) -> pd.DataFrame:
    rows = []
    for source, estimate in run.estimates.items():
        for quantity, summary in (("N", estimate.total), ("Y0", estimate.unseen)):
            rows.append(
                {
                    "source": source,
                    "quantity": quantity,
                    "mean": summary.mean,
                    "sd": summary.sd,
                    "lower": summary.lower,
                    "upper": summary.upper,
                }
            )
    return pd.DataFrame(rows, columns=["source", "quantity", "mean", "sd", "lower", "upper"])


def comparison_table(run: LexiconRun) -> pd.DataFrame:
    rows = []
    methods = (
        ("posterior_predictive", "N", run.comparisons),
        ("rarefaction", "K_final", run.rarefaction_comparisons),
    )
    for method, quantity, comparisons in methods:
        for comparison in comparisons:
            rows.append(
                {
                    "method": method,
                    "event": f"{quantity}_{comparison.first} > {quantity}_{comparison.second}",
                    "probability": comparison.probability,
                    "mc_standard_error": comparison.standard_error,
                    "draws": comparison.draws,
                }
            )
    return pd.DataFrame(rows, columns=["method", "event", "probability", "mc_standard_error", "draws"])


def regression_table(run: LexiconRun) -> pd.DataFrame:
    rows = []
    for source, fit in run.least_squares.items():
        rows.append({"source": source, "method": "ols", "parameter": "intercept", "mean": fit.intercept})
        rows.append({"source": source, "method": "ols", "parameter": "slope", "mean": fit.slope})
        rows.append({"source": source, "method": "ols", "parameter": "r2", "mean": fit.r2})
    for source, regression in run.regressions.items():
        summaries = list(regression.summaries())
        intercept = regression.intercept_estimate()
        summaries.append(intercept.count_scale)
        for summary in summaries:
            rows.append(
                {
                    "source": source,
                    "method": "bayes",
                    "parameter": summary.name,
                    "mean": summary.mean,
                    "sd": summary.sd,
                    "lower": summary.lower,
                    "upper": summary.upper,
                    "ess": summary.ess,
                    "r_hat": summary.r_hat,
                }
            )
    columns = ["source", "method", "parameter", "mean", "sd", "lower", "upper", "ess", "r_hat"]
    return pd.DataFrame(rows, columns=columns)


def rarefaction_table(run: LexiconRun, credible_interval: float = 0.95) -> pd.DataFrame:
    rows = []
    for source, result in run.rarefaction.items():
        summary = summarize_draws(result.final_unique, label=source, credible_interval=credible_interval)
        rows.append(
            {
                "source": source,
                "added_observations": result.added_observations,
                "draws": result.draws,
                "mean_discoveries": float(result.discoveries.mean()),
                "good_turing_discovery": discovery_probability(run.histograms[source], result.added_observations),
                "mean": summary.mean,
                "sd": summary.sd,
                "lower": summary.lower,
                "upper": summary.upper,
            }
        )
    columns = [
        "source",
        "added_observations",
        "draws",
        "mean_discoveries",
        "good_turing_discovery",
        "mean",
        "sd",
        "lower",
        "upper",
    ]
    return pd.DataFrame(rows, columns=columns)


def good_turing_table(run: LexiconRun, max_frequency: int = 10) -> pd.DataFrame:
    """Observed ``Y_r`` next to the Good-Turing adjusted count ``r*`` for low frequencies."""
    rows = []
    for source, histogram in run.histograms.items():
        adjusted = adjusted_counts(histogram)
        for frequency, count, r_star in zip(histogram.frequencies, histogram.counts, adjusted):
            if frequency > max_frequency:
                break
            rows.append(
                {
                    "source": source,
                    "frequency": int(frequency),
                    "count": int(count),
                    "adjusted_frequency": float(r_star),
                }
            )
    return pd.DataFrame(rows, columns=["source", "frequency", "count", "adjusted_frequency"])


def summary_tables(run: LexiconRun, credible_interval: float = 0.95) -> Dict[str, pd.DataFrame]:
    """All report tables keyed by a file-friendly name."""
    tables = {
        "samples": histogram_table(run),
        "vocabulary": vocabulary_table(run),
        "comparisons": comparison_table(run),
        "good_turing": good_turing_table(run),
        "regression": regression_table(run),
    }
    if run.rarefaction:
        tables["rarefaction"] = rarefaction_table(run, credible_interval)
    return tables


def write_tables(tables: Dict[str, pd.DataFrame], directory: Path) -> List[Path]:
    directory.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for name, table in tables.items():
        path = directory / f"{name}.csv"
        table.to_csv(path, index=False)
        written.append(path)
    return written


def report_figures(run: LexiconRun, max_lag: int = 50) -> List[go.Figure]:
    figures = [build_frequency_spectrum(run.histograms, run.least_squares, run.regressions)]
    figures.append(
        build_draw_histogram(
            {source: estimate.predictive.totals for source, estimate in run.estimates.items()},
            "Posterior predictive vocabulary size",
            "N~ (unique words)",
        )
    )
    if run.rarefaction:
        added = next(iter(run.rarefaction.values())).added_observations
        figures.append(
            build_draw_histogram(
                {source: result.final_unique for source, result in run.rarefaction.items()},
                f"Rarefaction walk: unique words after {added} extra draws",
                "K_final",
                nbins=30,
            )
        )
    for source, regression in run.regressions.items():
        figures.append(build_trace_figure(regression, source))
        figures.append(build_autocorrelation_figure(regression, source, max_lag=max_lag))
    return figures


def render_report(
    run: LexiconRun,
    path: Path,
    title: str = "Lexicon size of news sources",
    credible_interval: float = 0.95,
    include_figures: bool = True,
    max_lag: int = 50,
) -> Path:
    """Render every table and figure into one HTML page."""
    tables = summary_tables(run, credible_interval)
    parts = [
        "<!DOCTYPE html>",
        "<html><head><meta charset='utf-8'>",
        f"<title>{html.escape(title)}</title>",
        "</head><body>",
        f"<h1>{html.escape(title)}</h1>",
        f"<p>Generated {datetime.now().strftime('%Y-%m-%d %H:%M')}; "
        f"intervals are central {credible_interval:.0%} quantiles of the draws (HDI for regression parameters).</p>",
    ]
    for name, table in tables.items():
        parts.append(f"<h2>{html.escape(name.capitalize())}</h2>")
        parts.append(table.to_html(index=False, float_format=lambda value: f"{value:,.4g}", na_rep="-"))

    if include_figures:
        parts.append("<h2>Figures</h2>")
        for idx, figure in enumerate(report_figures(run, max_lag=max_lag)):
            parts.append(figure.to_html(full_html=False, include_plotlyjs="cdn" if idx == 0 else False))

    parts.append("</body></html>")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(parts), encoding="utf-8")
    print(f"[report] Wrote {path}")
    return path


__all__ = ["good_turing_table", "render_report", "report_figures", "summary_tables", "write_tables"]
