"""Ordinary least squares baseline built on scikit-learn."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from sklearn.linear_model import LinearRegression

from .builders import RegressionDataset
from .records import LeastSquaresFit


@dataclass
class LeastSquaresConfig:
    fit_intercept: bool = True
    weighted: bool = False


def fit_least_squares(dataset: RegressionDataset, config: LeastSquaresConfig | None = None) -> LeastSquaresFit:
    """Fit ``log(Y_i + 1) = b0 + b1 log(i)`` by least squares.

    With ``weighted=True`` each frequency level is weighted by ``Y_i + 1`` so the
    well-populated low frequencies dominate the fit.
    """
    cfg = config or LeastSquaresConfig()
    X = dataset.x.reshape(-1, 1)
    y = dataset.y
    weights = dataset.counts.astype(float) + 1.0 if cfg.weighted else None

    model = LinearRegression(fit_intercept=cfg.fit_intercept)
    model.fit(X, y, sample_weight=weights)
    r2 = float(model.score(X, y, sample_weight=weights))

    return LeastSquaresFit(
        intercept=float(model.intercept_) if cfg.fit_intercept else 0.0,
        slope=float(np.ravel(model.coef_)[0]),
        r2=r2,
    )


__all__ = ["LeastSquaresConfig", "fit_least_squares"]
