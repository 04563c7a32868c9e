"""Seasonal naive benchmark.

Forecast: value from the same season in the last observed cycle.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from tsevalkit.models.adapters.base import require_length, residual_scale
from tsevalkit.models.spec import ModelSpec


@dataclass(frozen=True)
class SeasonalNaiveParams:
    last_cycle: tuple[float, ...]
    season_length: int
    sigma: float


def fit(
    y: np.ndarray,
    X: np.ndarray | None,
    spec: ModelSpec,
    season_length: int,
) -> SeasonalNaiveParams:
    m = max(season_length, 1)
    require_length(y, m, spec)
    residuals = y[m:] - y[:-m]
    return SeasonalNaiveParams(
        last_cycle=tuple(float(v) for v in y[-m:]),
        season_length=m,
        sigma=residual_scale(residuals),
    )


def predict(
    params: SeasonalNaiveParams,
    h: int,
    X_future: np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    m = params.season_length
    steps = np.arange(h)
    mu = np.asarray(params.last_cycle)[steps % m]
    # Completed cycles before each step
    k = steps // m
    return mu, params.sigma * np.sqrt(k + 1)
