"""Mean benchmark: the historical average is the forecast for all horizons."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from tsevalkit.models.adapters.base import require_length
from tsevalkit.models.spec import ModelSpec


@dataclass(frozen=True)
class MeanParams:
    mean: float
    sigma: float
    n_obs: int


def fit(y: np.ndarray, X: np.ndarray | None, spec: ModelSpec, season_length: int) -> MeanParams:
    require_length(y, 1, spec)
    sigma = float(np.std(y, ddof=1)) if len(y) > 1 else 0.0
    return MeanParams(mean=float(np.mean(y)), sigma=sigma, n_obs=len(y))


def predict(params: MeanParams, h: int, X_future: np.ndarray | None = None) -> tuple[np.ndarray, np.ndarray]:
    sigma = params.sigma * np.sqrt(1 + 1 / params.n_obs)
    return np.full(h, params.mean), np.full(h, sigma)
