"""Exponential smoothing backed by statsforecast's AutoETS.

The ETS form (error, trend, season) is selected per training partition;
``EtsParams.method`` records what was chosen. Trend and seasonal dummies are
not used as regressors: ETS models both through its own state components.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from tsevalkit.models.adapters.base import require_length, sigma_from_interval
from tsevalkit.models.spec import ModelSpec

logger = logging.getLogger(__name__)

_INTERVAL_LEVEL = 95


@dataclass(frozen=True)
class EtsParams:
    method: str
    season_length: int
    estimator: Any


def fit(y: np.ndarray, X: np.ndarray | None, spec: ModelSpec, season_length: int) -> EtsParams:
    from statsforecast.models import AutoETS

    require_length(y, 3, spec)
    estimator = AutoETS(season_length=season_length, **spec.options)
    estimator.fit(np.asarray(y, dtype=np.float64))
    method = str(estimator.model_.get("method", "ETS"))
    logger.debug("Model '%s' selected %s", spec.name, method)
    return EtsParams(method=method, season_length=season_length, estimator=estimator)


def predict(params: EtsParams, h: int, X_future: np.ndarray | None = None) -> tuple[np.ndarray, np.ndarray]:
    result = params.estimator.predict(h=h, level=[_INTERVAL_LEVEL])
    mu = np.asarray(result["mean"], dtype=float)
    sigma = sigma_from_interval(mu, result[f"hi-{_INTERVAL_LEVEL}"], _INTERVAL_LEVEL)
    return mu, sigma
