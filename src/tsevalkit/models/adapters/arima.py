"""ARIMA with automatic order search, backed by statsforecast's AutoARIMA.

Regressors (trend, seasonal dummies, exogenous covariates) enter as ``X``,
giving a regression with ARIMA errors. The order search reruns on every
training partition, so two partitions may end up with different
``(p, d, q)(P, D, Q)m`` structures.
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
class ArimaParams:
    order: tuple[int, int, int]
    seasonal_order: tuple[int, int, int, int]
    aic: float | None
    estimator: Any

    @property
    def label(self) -> str:
        p, d, q = self.order
        P, D, Q, m = self.seasonal_order
        if P or D or Q:
            return f"ARIMA({p},{d},{q})({P},{D},{Q})[{m}]"
        return f"ARIMA({p},{d},{q})"


def fit(y: np.ndarray, X: np.ndarray | None, spec: ModelSpec, season_length: int) -> ArimaParams:
    from statsforecast.models import AutoARIMA

    require_length(y, 3, spec)
    estimator = AutoARIMA(season_length=season_length, **spec.options)
    exog = None if X is None else np.asarray(X, dtype=np.float64)
    estimator.fit(np.asarray(y, dtype=np.float64), X=exog)

    # statsforecast stores orders as (p, q, P, Q, m, d, D)
    p, q, P, Q, m, d, D = (int(v) for v in estimator.model_["arma"])
    aic = estimator.model_.get("aic")
    params = ArimaParams(
        order=(p, d, q),
        seasonal_order=(P, D, Q, m),
        aic=float(aic) if aic is not None else None,
        estimator=estimator,
    )
    logger.debug("Model '%s' selected %s", spec.name, params.label)
    return params


def predict(params: ArimaParams, h: int, X_future: np.ndarray | None = None) -> tuple[np.ndarray, np.ndarray]:
    exog = None if X_future is None else np.asarray(X_future, dtype=np.float64)
    result = params.estimator.predict(h=h, X=exog, level=[_INTERVAL_LEVEL])
    mu = np.asarray(result["mean"], dtype=float)
    sigma = sigma_from_interval(mu, result[f"hi-{_INTERVAL_LEVEL}"], _INTERVAL_LEVEL)
    return mu, sigma
