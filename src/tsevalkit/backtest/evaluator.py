"""Accuracy evaluation of one forecast against realized values."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from tsevalkit.backtest.metrics import METRIC_DIRECTIONS, crps, mae, mape, mase, rmse, winkler
from tsevalkit.core.errors import EConfig, ENoOverlap
from tsevalkit.core.results import Forecast
from tsevalkit.core.series import TimeSeries

logger = logging.getLogger(__name__)


def _as_series(realized: TimeSeries | pd.Series) -> pd.Series:
    if isinstance(realized, TimeSeries):
        return realized.to_series()
    return pd.Series(realized, dtype=float)


def _insample_values(insample: TimeSeries | np.ndarray | None) -> np.ndarray | None:
    if insample is None:
        return None
    if isinstance(insample, TimeSeries):
        return np.asarray(insample.values, dtype=float)
    return np.asarray(insample, dtype=float)


def evaluate(
    forecast: Forecast,
    realized: TimeSeries | pd.Series,
    metrics: Sequence[str] = ("rmse", "mae", "crps"),
    insample: TimeSeries | np.ndarray | None = None,
    season_length: int = 1,
) -> dict[str, float]:
    """Score a forecast over the timestamps it shares with ``realized``.

    Only timestamps present in both, with a non-missing realized value,
    are scored. Metrics undefined on the data are omitted from the result.

    Args:
        forecast: Forecast to score
        realized: Observed values indexed by timestamp
        metrics: Metric names to compute
        insample: Training values, required by ``mase``
        season_length: Seasonal period used by ``mase``

    Returns:
        Mapping metric name -> value

    Raises:
        ENoOverlap: If no forecast timestamp has a realized value
    """
    unknown = [name for name in metrics if name not in METRIC_DIRECTIONS]
    if unknown:
        raise EConfig(f"Unknown metrics: {unknown}", context={"available": sorted(METRIC_DIRECTIONS)})

    actual = _as_series(realized).reindex(forecast.ds)
    mask = actual.notna().to_numpy()
    if not mask.any():
        raise ENoOverlap(
            f"Forecast of '{forecast.model}' for series '{forecast.unique_id}' shares no "
            "timestamp with the realized values",
            context={
                "unique_id": forecast.unique_id,
                "model": forecast.model,
                "partition": forecast.partition_id,
                "forecast_start": str(forecast.ds[0]),
                "forecast_end": str(forecast.ds[-1]),
            },
        )

    positions = np.flatnonzero(mask)
    y_true = actual.to_numpy(dtype=float)[positions]
    distribution = forecast.distribution.take(positions)
    y_pred = distribution.mean()
    y_train = _insample_values(insample)

    def compute(name: str) -> float:
        if name == "rmse":
            return rmse(y_true, y_pred)
        if name == "mae":
            return mae(y_true, y_pred)
        if name == "mape":
            return mape(y_true, y_pred)
        if name == "mase":
            if y_train is None:
                raise ValueError("Cannot compute MASE without in-sample values")
            return mase(y_true, y_pred, y_train, season_length)
        if name == "crps":
            return crps(y_true, distribution)
        # winkler: interval score at the widest level
        level = max(forecast.levels)
        lower, upper = distribution.interval(level)
        return winkler(y_true, lower, upper, level)

    results: dict[str, float] = {}
    for name in metrics:
        try:
            value = compute(name)
        except ValueError as exc:
            logger.debug("Metric '%s' omitted for %s/%s: %s", name, forecast.unique_id, forecast.model, exc)
            continue
        if np.isfinite(value):
            results[name] = value

    return results


__all__ = ["evaluate"]
