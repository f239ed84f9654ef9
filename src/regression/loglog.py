"""Bayesian log-log regression of frequency counts, fitted with PyMC."""

from __future__ import annotations

from typing import Dict, Literal, Optional, Sequence, Tuple, cast

import arviz as az
import numpy as np
import pymc as pm
import xarray as xr
from arviz import InferenceData

from src.corpus.histogram import FrequencyHistogram

from .builders import RegressionDataset, RegressionPriors, build_changepoint_model, build_dataset, build_linear_model, line_mean
from .records import InterceptEstimate, ParameterSummary

StepName = Literal["nuts", "metropolis"]

LINEAR_PARAMETERS: Tuple[str, ...] = ("intercept", "slope", "sigma")
CHANGEPOINT_PARAMETERS: Tuple[str, ...] = ("intercept", "slope", "slope_after", "tau", "sigma")


class LogLogRegression:
    """Fits ``log(Y_i + 1)`` against ``log(i)`` and exposes posterior summaries."""

    def __init__(
        self,
        priors: Optional[RegressionPriors] = None,
        changepoint: bool = False,
        draws: int = 2000,
        tune: int = 1000,
        chains: int = 4,
        cores: Optional[int] = None,
        step: StepName = "nuts",
        target_accept: float = 0.9,
        credible_interval: float = 0.95,
        drop_empty: bool = False,
        random_seed: Optional[int] = None,
    ) -> None:
        if step not in ("nuts", "metropolis"):
            raise ValueError(f"Unknown sampler step '{step}'. Use 'nuts' or 'metropolis'.")
        if not 0 < credible_interval < 1:
            raise ValueError("credible_interval must fall within (0, 1).")
        self.priors = priors or RegressionPriors()
        self.changepoint = changepoint
        self.draws = draws
        self.tune = tune
        self.chains = chains
        self.cores = cores
        self.step = step
        self.target_accept = target_accept
        self.credible_interval = credible_interval
        self.drop_empty = drop_empty
        self.random_seed = random_seed
        self._idata: Optional[InferenceData] = None
        self._dataset: Optional[RegressionDataset] = None

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        return CHANGEPOINT_PARAMETERS if self.changepoint else LINEAR_PARAMETERS

    def fit(self, histogram: FrequencyHistogram) -> "LogLogRegression":
        """Build the model for ``histogram`` and draw posterior samples."""
        dataset = build_dataset(histogram, drop_empty=self.drop_empty)
        builder = build_changepoint_model if self.changepoint else build_linear_model
        model = builder(dataset, self.priors)

        kind = "changepoint" if self.changepoint else "linear"
        print(
            f"[regression] Sampling {kind} model on {dataset.x.size} frequency levels "
            f"({self.chains} chains x {self.draws} draws, step={self.step})."
        )
        with model:
            sampler_kwargs: Dict[str, object] = {}
            if self.step == "metropolis":
                sampler_kwargs["step"] = pm.Metropolis()
            else:
                sampler_kwargs["target_accept"] = self.target_accept
            self._idata = pm.sample(
                draws=self.draws,
                tune=self.tune,
                chains=self.chains,
                cores=self.cores,
                random_seed=self.random_seed,
                return_inferencedata=True,
                progressbar=False,
                **sampler_kwargs,
            )
        self._dataset = dataset
        return self

    @property
    def dataset(self) -> RegressionDataset:
        if self._dataset is None:
            raise RuntimeError("LogLogRegression.fit() must be called before accessing the dataset.")
        return self._dataset

    @property
    def inference_data(self) -> InferenceData:
        if self._idata is None:
            raise RuntimeError("LogLogRegression.fit() must be called before accessing the trace.")
        return self._idata

    def _posterior(self) -> xr.Dataset:
        posterior_group = getattr(self.inference_data, "posterior", None)
        if posterior_group is None:
            raise RuntimeError("Inference data does not contain a posterior group.")
        return cast(xr.Dataset, posterior_group)

    def chain_samples(self, name: str) -> np.ndarray:
        """Posterior samples of ``name`` shaped ``(chain, draw)``."""
        posterior = self._posterior()
        if name not in posterior:
            raise KeyError(f"Posterior has no variable '{name}'. Available: {list(posterior.data_vars)}")
        return np.asarray(posterior[name], dtype=float)

    def samples(self, name: str) -> np.ndarray:
        """Flattened posterior samples of ``name`` across chains."""
        return self.chain_samples(name).reshape(-1)

    def summaries(self) -> Sequence[ParameterSummary]:
        """Return mean, sd, HDI, ESS and R-hat for each model parameter."""
        idata = self.inference_data
        names = list(self.parameter_names)
        ess = cast(xr.Dataset, az.ess(idata, var_names=names))
        r_hat = cast(xr.Dataset, az.rhat(idata, var_names=names)) if self.chains > 1 else None

        results: list[ParameterSummary] = []
        for name in names:
            results.append(
                self._summarize(
                    name,
                    self.samples(name),
                    ess=float(ess[name]),
                    r_hat=float(r_hat[name]) if r_hat is not None else None,
                )
            )
        return results

    def intercept_estimate(self) -> InterceptEstimate:
        """Summaries of the extrapolated intercept on both scales."""
        intercept = self.samples("intercept")
        return InterceptEstimate(
            log_scale=self._summarize("intercept", intercept),
            count_scale=self._summarize("intercept_count", np.expm1(intercept)),
        )

    def autocorrelation(self, name: str, max_lag: int = 50) -> np.ndarray:
        """Chain-averaged autocorrelation of ``name`` for lags ``0..max_lag``."""
        if max_lag < 0:
            raise ValueError("max_lag must be non-negative.")
        per_chain = self.chain_samples(name)
        lags = min(max_lag + 1, per_chain.shape[1])
        curves = [np.asarray(az.autocorr(chain), dtype=float)[:lags] for chain in per_chain]
        return np.mean(curves, axis=0)

    def predict_mean(self, x: np.ndarray) -> np.ndarray:
        """Posterior mean of the fitted line at log-frequencies ``x``."""
        params: Dict[str, np.ndarray] = {name: self.samples(name) for name in self.parameter_names}
        return line_mean(params, np.asarray(x, dtype=float)).mean(axis=0)

    def _summarize(
        self,
        name: str,
        values: np.ndarray,
        ess: Optional[float] = None,
        r_hat: Optional[float] = None,
    ) -> ParameterSummary:
        interval = np.asarray(az.hdi(values, hdi_prob=self.credible_interval), dtype=float)
        return ParameterSummary(
            name=name,
            mean=float(values.mean()),
            sd=float(values.std(ddof=1)),
            lower=float(interval[0]),
            upper=float(interval[1]),
            ess=ess,
            r_hat=r_hat,
        )


__all__ = ["CHANGEPOINT_PARAMETERS", "LINEAR_PARAMETERS", "LogLogRegression", "StepName"]
