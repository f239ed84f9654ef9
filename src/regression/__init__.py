"""Log-log regression of frequency counts on frequency, with an optional changepoint."""

from .builders import RegressionDataset, RegressionPriors, build_changepoint_model, build_dataset, build_linear_model
from .fitting import fit_loglog_regression
from .least_squares import LeastSquaresConfig, fit_least_squares
from .loglog import LogLogRegression
from .records import InterceptEstimate, LeastSquaresFit, ParameterSummary

__all__ = [
    "InterceptEstimate",
    "LeastSquaresConfig",
    "LeastSquaresFit",
    "LogLogRegression",
    "ParameterSummary",
    "RegressionDataset",
    "RegressionPriors",
    "build_changepoint_model",
    "build_dataset",
    "build_linear_model",
    "fit_least_squares",
    "fit_loglog_regression",
]
