"""Naive benchmark: the last value is the forecast for all horizons."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from tsevalkit.models.adapters.base import require_length, residual_scale
from tsevalkit.models.spec import ModelSpec


@dataclass(frozen=True)
class NaiveParams:
    last: float
    sigma: float


def fit(y: np.ndarray, X: np.ndarray | None, spec: ModelSpec, season_length: int) -> NaiveParams:
    require_length(y, 1, spec)
    return NaiveParams(last=float(y[-1]), sigma=residual_scale(np.diff(y)))


def predict(params: NaiveParams, h: int, X_future: np.ndarray | None = None) -> tuple[np.ndarray, np.ndarray]:
    steps = np.arange(1, h + 1)
    return np.full(h, params.last), params.sigma * np.sqrt(steps)
