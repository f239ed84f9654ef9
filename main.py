from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer

from experiments.lexicon_size import RegressionSettings, run_lexicon_size, run_regressions
from experiments.plots import (
    PlotSaveConfig,
    plot_frequency_spectrum,
    plot_posterior_totals,
    plot_rarefaction,
    plot_regression_diagnostics,
)
from experiments.report import render_report, summary_tables, write_tables
from src.corpus import FrequencyHistogram, SourceSpec, discover_sources, load_sources, parse_source_option
from src.corpus.config import DEFAULT_CORPUS_ROOT, DEFAULT_OUTPUT_ROOT
from src.estimators import EstimatorConfig, RarefactionConfig, estimate_sources

app = typer.Typer()

SOURCE_HELP = "Source as NAME=DIRECTORY (repeatable). Defaults to every sub-directory of --corpus-root."


def _resolve_sources(source: Optional[List[str]], corpus_root: Path) -> List[SourceSpec]:
    try:
        if source:
            return [parse_source_option(option) for option in source]
        return discover_sources(corpus_root)
    except (ValueError, FileNotFoundError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load(source: Optional[List[str]], corpus_root: Path) -> dict[str, FrequencyHistogram]:
    try:
        return load_sources(_resolve_sources(source, corpus_root))
    except (ValueError, FileNotFoundError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _estimator_config(
    replications: int,
    prior_exponent: float,
    support_size: Optional[int],
    credible_interval: float,
    seed: Optional[int],
) -> EstimatorConfig:
    config = EstimatorConfig(
        prior_exponent=prior_exponent,
        replications=replications,
        support_size=support_size,
        credible_interval=credible_interval,
        random_seed=seed,
    )
    try:
        config.validate()
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return config


@app.command()
def tabulate(
    source: Optional[List[str]] = typer.Option(None, "--source", help=SOURCE_HELP),
    corpus_root: Path = typer.Option(DEFAULT_CORPUS_ROOT, "--corpus-root", help="Directory holding one folder per source."),
    max_frequency: int = typer.Option(10, "--max-frequency", help="Number of frequency levels to print."),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the full histograms to this CSV file."),
) -> None:
    """
    Print the frequency-of-frequencies histogram for each source.
    """
    histograms = _load(source, corpus_root)
    rows = []
    for name, histogram in histograms.items():
        for frequency, count in histogram.as_dict().items():
            rows.append({"source": name, "frequency": frequency, "count": count})
    df = pd.DataFrame(rows, columns=["source", "frequency", "count"])

    preview = df[df["frequency"] <= max_frequency].pivot(index="frequency", columns="source", values="count")
    print(preview.fillna(0).astype(int).to_string())
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(output, index=False)
        print(f"[corpus] Saved histograms → {output}")


@app.command()
def regress(
    source: Optional[List[str]] = typer.Option(None, "--source", help=SOURCE_HELP),
    corpus_root: Path = typer.Option(DEFAULT_CORPUS_ROOT, "--corpus-root"),
    changepoint: bool = typer.Option(False, "--changepoint", help="Fit a broken line with one changepoint."),
    step: str = typer.Option("nuts", "--step", help="Sampler step: nuts or metropolis."),
    draws: int = typer.Option(2000, "--draws"),
    tune: int = typer.Option(1000, "--tune"),
    chains: int = typer.Option(2, "--chains"),
    seed: Optional[int] = typer.Option(123, "--seed"),
    plots_root: Optional[Path] = typer.Option(None, "--plots-root", help="Save trace/autocorrelation plots here."),
) -> None:
    """
    Fit the log-log regression of log(Y_i + 1) on log(i) for each source.
    """
    if step not in ("nuts", "metropolis"):
        raise typer.BadParameter("--step must be 'nuts' or 'metropolis'.")
    histograms = _load(source, corpus_root)
    settings = RegressionSettings(
        changepoint=changepoint,
        draws=draws,
        tune=tune,
        chains=chains,
        step=step,  # type: ignore[arg-type]
        random_seed=seed,
    )
    least_squares, regressions = run_regressions(histograms, settings)

    save_config = _plot_config(plots_root, None, "regression")
    for name, regression in regressions.items():
        print(f"\n{name}")
        table = pd.DataFrame([asdict(summary) for summary in regression.summaries()])
        print(table.to_string(index=False))
        intercept = regression.intercept_estimate().count_scale
        print(f"extrapolated intercept (words): {intercept.mean:.1f} [{intercept.lower:.1f}, {intercept.upper:.1f}]")
        if save_config:
            plot_regression_diagnostics(regression, name, save_to=save_config.for_plot(f"diagnostics-{name}"))

    if save_config:
        plot_frequency_spectrum(histograms, least_squares, regressions, save_to=save_config.for_plot("spectrum"))


@app.command()
def estimate(
    source: Optional[List[str]] = typer.Option(None, "--source", help=SOURCE_HELP),
    corpus_root: Path = typer.Option(DEFAULT_CORPUS_ROOT, "--corpus-root"),
    replications: int = typer.Option(3000, "--replications", help="Posterior draws R."),
    prior_exponent: float = typer.Option(1.0, "--prior-exponent", help="alpha_i = i^-exponent (0 = flat prior)."),
    support_size: Optional[int] = typer.Option(None, "--support-size", help="Cap the probability vector length (default n). Set this for large corpora: memory grows with replications x n."),
    credible_interval: float = typer.Option(0.95, "--credible-interval"),
    seed: Optional[int] = typer.Option(None, "--seed"),
) -> None:
    """
    Estimate total vocabulary size per source with the Dirichlet-multinomial model.
    """
    histograms = _load(source, corpus_root)
    config = _estimator_config(replications, prior_exponent, support_size, credible_interval, seed)
    estimates = estimate_sources(histograms, config)
    rows = []
    for result in estimates.values():
        for summary in (result.total, result.unseen):
            rows.append(asdict(summary))
    print(pd.DataFrame(rows).to_string(index=False))


@app.command()
def compare(
    source: Optional[List[str]] = typer.Option(None, "--source", help=SOURCE_HELP),
    corpus_root: Path = typer.Option(DEFAULT_CORPUS_ROOT, "--corpus-root"),
    replications: int = typer.Option(3000, "--replications"),
    prior_exponent: float = typer.Option(1.0, "--prior-exponent"),
    support_size: Optional[int] = typer.Option(None, "--support-size", help="Cap the probability vector length (default n)."),
    credible_interval: float = typer.Option(0.95, "--credible-interval"),
    seed: Optional[int] = typer.Option(None, "--seed"),
    rarefaction_draws: int = typer.Option(100, "--rarefaction-draws", help="Predictive draws to extend (0 disables)."),
    added_observations: int = typer.Option(100, "--added-observations", help="Extra word draws m per rarefaction walk."),
    regression: bool = typer.Option(True, help="Fit the Bayesian log-log regression as well."),
    changepoint: bool = typer.Option(False, "--changepoint"),
    regression_draws: int = typer.Option(1000, "--regression-draws"),
    output_root: Path = typer.Option(DEFAULT_OUTPUT_ROOT, "--output-root", help="Where tables, plots and the report go."),
    tag: Optional[str] = typer.Option(None, "--tag", help="Folder suffix for this run (defaults to timestamp)."),
    save_static: bool = typer.Option(False, help="Also write PNG snapshots of each plot."),
) -> None:
    """
    Run the full analysis for every source and write tables plus an HTML report.
    """
    histograms = _load(source, corpus_root)
    if len(histograms) < 2:
        raise typer.BadParameter("compare needs at least two sources.")
    config = _estimator_config(replications, prior_exponent, support_size, credible_interval, seed)
    rarefaction = None
    if rarefaction_draws > 0:
        rarefaction = RarefactionConfig(draws=rarefaction_draws, added_observations=added_observations, random_seed=seed)
        try:
            rarefaction.validate()
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc

    settings = RegressionSettings(
        enabled=regression,
        changepoint=changepoint,
        draws=regression_draws,
        tune=regression_draws,
        random_seed=seed,
    )
    run = run_lexicon_size(histograms, config, rarefaction, settings)

    save_config = PlotSaveConfig(
        base_dir=output_root / "compare",
        run_tag=tag or datetime.now().strftime("%Y%m%d-%H%M%S"),
        save_static=save_static,
        save_html=True,
    )
    run_dir = save_config.run_dir
    print(f"[report] Saving outputs under {run_dir}")
    write_tables(summary_tables(run, credible_interval), run_dir / "tables")

    plot_posterior_totals(
        {name: result.predictive.totals for name, result in run.estimates.items()},
        save_to=save_config.for_plot("posterior_totals"),
    )
    if run.rarefaction:
        plot_rarefaction(
            {name: result.final_unique for name, result in run.rarefaction.items()},
            added_observations,
            save_to=save_config.for_plot("rarefaction"),
        )
    render_report(run, run_dir / "report.html", credible_interval=credible_interval)


def _plot_config(root: Optional[Path], tag: Optional[str], command: str) -> Optional[PlotSaveConfig]:
    if root is None:
        return None
    run_tag = tag or datetime.now().strftime("%Y%m%d-%H%M%S")
    return PlotSaveConfig(base_dir=root / command, run_tag=run_tag)


if __name__ == "__main__":
    app()
