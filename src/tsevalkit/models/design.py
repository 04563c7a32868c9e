"""Regressor matrices built from a model's declared predictors.

Columns, in order: trend (1-based period index), seasonal dummies for
period-within-cycle 2..m, then one column per exogenous term. The intercept
is left to the family routine.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from tsevalkit.core.errors import EFit, EMissingCovariate
from tsevalkit.core.series import TimeSeries
from tsevalkit.models.spec import ModelSpec


def regressor_names(spec: ModelSpec, season_length: int) -> list[str]:
    names: list[str] = []
    if spec.predictors.trend:
        names.append("trend")
    if spec.predictors.season and season_length > 1:
        names.extend(f"season{s + 1}" for s in range(1, season_length))
    names.extend(term.name for term in spec.exogenous)
    return names


def _calendar_columns(spec: ModelSpec, t: np.ndarray, season_length: int) -> list[np.ndarray]:
    columns: list[np.ndarray] = []
    if spec.predictors.trend:
        columns.append(t.astype(float))
    if spec.predictors.season and season_length > 1:
        position = (t - 1) % season_length
        for s in range(1, season_length):
            columns.append((position == s).astype(float))
    return columns


def _stack(columns: list[np.ndarray], n_rows: int) -> np.ndarray | None:
    if not columns:
        return None
    return np.column_stack(columns).reshape(n_rows, len(columns))


def training_regressors(
    spec: ModelSpec,
    train: TimeSeries,
    season_length: int,
) -> tuple[np.ndarray | None, np.ndarray]:
    """Build the training regressors.

    Returns:
        ``(X, keep)`` where ``keep`` flags the training rows usable for
        fitting. Rows whose lagged covariate precedes the series start, or
        whose covariate is missing, are not usable.
    """
    n = len(train)
    t = np.arange(1, n + 1)
    columns = _calendar_columns(spec, t, season_length)

    for term in spec.exogenous:
        if term.column not in train.covariate_columns:
            raise EFit(
                f"Covariate column '{term.column}' is not available on series '{train.name}'",
                context={"model": spec.name, "available": train.covariate_columns},
                fix_hint="Declare the column in build_dataset(covariates=...)",
            )
        values = train.covariates[term.column].to_numpy(dtype=float)
        lagged = np.full(n, np.nan)
        if term.lag < n:
            lagged[term.lag :] = values[: n - term.lag]
        columns.append(lagged)

    X = _stack(columns, n)
    if X is None:
        return None, np.ones(n, dtype=bool)
    keep = np.all(np.isfinite(X), axis=1)
    return X[keep], keep


def _covariate_lookup(train: TimeSeries, future_covariates: pd.DataFrame | None) -> pd.DataFrame:
    known = train.covariates if train.covariates is not None else pd.DataFrame(index=train.index)
    if future_covariates is None:
        return known
    future = future_covariates
    if "ds" in future.columns:
        future = future.set_index("ds")
    future = future.drop(columns=["unique_id"], errors="ignore")
    future.index = pd.DatetimeIndex(pd.to_datetime(future.index))
    return known.combine_first(future)


def future_regressors(
    spec: ModelSpec,
    train: TimeSeries,
    h: int,
    season_length: int,
    future_covariates: pd.DataFrame | None = None,
) -> np.ndarray | None:
    """Build the regressors for the ``h`` steps after the training end.

    Raises:
        EMissingCovariate: If any lagged covariate value needed by a forecast
            step is neither in the training covariates nor in
            ``future_covariates``.
    """
    n = len(train)
    t = np.arange(n + 1, n + h + 1)
    columns = _calendar_columns(spec, t, season_length)

    if spec.exogenous:
        lookup = _covariate_lookup(train, future_covariates)
        grid = train.index.append(train.future_index(h))
        for term in spec.exogenous:
            positions = np.arange(n, n + h) - term.lag
            # Lags reaching before the series start have no value
            stamps = grid[np.clip(positions, 0, None)]
            values = np.full(h, np.nan)
            if term.column in lookup.columns:
                values = lookup[term.column].reindex(stamps).to_numpy(dtype=float)
                values[positions < 0] = np.nan
            missing = ~np.isfinite(values)
            if missing.any():
                raise EMissingCovariate(
                    f"Model '{spec.name}' needs {int(missing.sum())} future value(s) of "
                    f"'{term.column}' (lag {term.lag})",
                    context={
                        "model": spec.name,
                        "series_id": train.name,
                        "column": term.column,
                        "missing_ds": [str(s) for s in stamps[missing][:5]],
                    },
                )
            columns.append(values)

    return _stack(columns, h)


__all__ = ["future_regressors", "regressor_names", "training_regressors"]
