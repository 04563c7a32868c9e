"""Drift benchmark: extrapolate the line through the first and last values."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from tsevalkit.models.adapters.base import require_length, residual_scale
from tsevalkit.models.spec import ModelSpec


@dataclass(frozen=True)
class DriftParams:
    last: float
    slope: float
    sigma: float
    n_obs: int


def fit(y: np.ndarray, X: np.ndarray | None, spec: ModelSpec, season_length: int) -> DriftParams:
    require_length(y, 2, spec)
    n = len(y)
    slope = float((y[-1] - y[0]) / (n - 1))
    residuals = np.diff(y) - slope
    return DriftParams(last=float(y[-1]), slope=slope, sigma=residual_scale(residuals), n_obs=n)


def predict(params: DriftParams, h: int, X_future: np.ndarray | None = None) -> tuple[np.ndarray, np.ndarray]:
    steps = np.arange(1, h + 1)
    mu = params.last + params.slope * steps
    sigma = params.sigma * np.sqrt(steps * (1 + steps / (params.n_obs - 1)))
    return mu, sigma
