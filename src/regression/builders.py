"""Dataset builders and PyMC model construction for log-log frequency regression."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pymc as pm

from src.corpus.histogram import FrequencyHistogram, require_non_empty


@dataclass(frozen=True)
class RegressionPriors:
    """Prior hyper-parameters shared by the linear and changepoint models."""

    intercept_mean: float = 0.0
    intercept_sigma: float = 10.0
    slope_mean: float = 0.0
    slope_sigma: float = 10.0
    noise_scale: float = 1.0

    def validate(self) -> None:
        if self.intercept_sigma <= 0 or self.slope_sigma <= 0 or self.noise_scale <= 0:
            raise ValueError("Prior scales must be strictly positive.")


@dataclass(frozen=True, eq=False)
class RegressionDataset:
    x: np.ndarray
    y: np.ndarray
    frequencies: np.ndarray
    counts: np.ndarray


def build_dataset(histogram: FrequencyHistogram, drop_empty: bool = False) -> RegressionDataset:
    """Convert a histogram into ``x = log(i)``, ``y = log(Y_i + 1)`` arrays.

    Frequencies with no words are kept by default; the ``+ 1`` keeps them finite.
    """
    require_non_empty(histogram)

    frequencies = histogram.frequencies
    counts = histogram.counts
    if drop_empty:
        keep = counts > 0
        frequencies = frequencies[keep]
        counts = counts[keep]

    if frequencies.size < 2:
        raise ValueError("At least two frequency levels are needed to fit a regression line.")

    return RegressionDataset(
        x=np.log(frequencies.astype(float)),
        y=np.log(counts.astype(float) + 1.0),
        frequencies=frequencies,
        counts=counts,
    )


def build_linear_model(dataset: RegressionDataset, priors: RegressionPriors) -> pm.Model:
    """Plain log-log line: ``y ~ Normal(intercept + slope * x, sigma)``."""
    priors.validate()
    with pm.Model() as model:
        x = pm.Data("x", dataset.x)
        intercept = pm.Normal("intercept", mu=priors.intercept_mean, sigma=priors.intercept_sigma)
        slope = pm.Normal("slope", mu=priors.slope_mean, sigma=priors.slope_sigma)
        sigma = pm.HalfNormal("sigma", sigma=priors.noise_scale)

        pm.Normal("observations", mu=intercept + slope * x, sigma=sigma, observed=dataset.y)
    return model


def build_changepoint_model(dataset: RegressionDataset, priors: RegressionPriors) -> pm.Model:
    """Broken line that stays continuous at the changepoint ``tau`` (on the log scale)."""
    priors.validate()
    lower, upper = float(dataset.x.min()), float(dataset.x.max())
    with pm.Model() as model:
        x = pm.Data("x", dataset.x)
        intercept = pm.Normal("intercept", mu=priors.intercept_mean, sigma=priors.intercept_sigma)
        slope = pm.Normal("slope", mu=priors.slope_mean, sigma=priors.slope_sigma)
        slope_after = pm.Normal("slope_after", mu=priors.slope_mean, sigma=priors.slope_sigma)
        tau = pm.Uniform("tau", lower=lower, upper=upper)
        sigma = pm.HalfNormal("sigma", sigma=priors.noise_scale)

        mu = intercept + slope * x + (slope_after - slope) * pm.math.maximum(x - tau, 0.0)
        pm.Normal("observations", mu=mu, sigma=sigma, observed=dataset.y)
    return model


def line_mean(params: dict[str, np.ndarray], x: np.ndarray) -> np.ndarray:
    """Evaluate the (possibly broken) line for every posterior sample.

    ``params`` maps variable names to 1-D sample arrays; the result has shape
    ``(n_samples, len(x))``.
    """
    x_row = np.asarray(x, dtype=float)[None, :]
    intercept = params["intercept"][:, None]
    slope = params["slope"][:, None]
    mu = intercept + slope * x_row
    if "tau" in params:
        tau = params["tau"][:, None]
        slope_after = params["slope_after"][:, None]
        mu = mu + (slope_after - slope) * np.maximum(x_row - tau, 0.0)
    return mu


__all__ = [
    "RegressionDataset",
    "RegressionPriors",
    "build_changepoint_model",
    "build_dataset",
    "build_linear_model",
    "line_mean",
]
