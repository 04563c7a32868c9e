"""Pure function protocol for model fitting and prediction.

``fit`` turns a ``ModelSpec`` and a training series into a ``FittedModel``;
``predict`` turns a ``FittedModel`` into a ``Forecast`` on the original
scale. Family specifics live in the adapter modules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from tsevalkit.core.errors import EConfig, EFit, TSEvalKitError
from tsevalkit.core.results import Forecast
from tsevalkit.core.series import TimeSeries
from tsevalkit.models.design import future_regressors, training_regressors
from tsevalkit.models.distribution import PredictiveDistribution
from tsevalkit.models.registry import load_adapter
from tsevalkit.models.spec import ModelSpec
from tsevalkit.models.transforms import get_transform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FittedModel:
    """A model fit on one training partition.

    Attributes:
        spec: Model declaration
        train: Training series the model was fit on
        season_length: Seasonal period used for fitting
        params: Family-specific parameters (e.g. ``ArimaParams`` with the
            discovered orders); never shared across partitions
    """

    spec: ModelSpec
    train: TimeSeries
    season_length: int
    params: Any

    @property
    def name(self) -> str:
        return self.spec.name


def fit(spec: ModelSpec, train: TimeSeries, season_length: int | None = None) -> FittedModel:
    """Fit a model to a training series.

    Args:
        spec: Model specification
        train: Training series
        season_length: Seasonal period (spec.season_length takes precedence;
            falls back to the period implied by the series freq)

    Returns:
        Fitted model for ``predict``

    Raises:
        EFit: If the model cannot be fit on this series
    """
    m = spec.season_length or season_length or train.season_length
    y = np.asarray(train.values, dtype=float)
    if np.isnan(y).any():
        raise EFit(
            f"Training values of series '{train.name}' contain {int(np.isnan(y).sum())} missing value(s)",
            context={"model": spec.name, "series_id": train.name},
            fix_hint="Fill gaps upstream or pass fill_value to build_dataset",
        )

    z = get_transform(spec.transform).forward(y)
    X, keep = training_regressors(spec, train, m)
    z = z[keep]

    adapter = load_adapter(spec.family)
    try:
        params = adapter.fit(z, X, spec, m)
    except TSEvalKitError:
        raise
    except Exception as exc:
        raise EFit(
            f"Fitting '{spec.name}' ({spec.family}) failed: {exc}",
            context={"model": spec.name, "series_id": train.name, "type": type(exc).__name__},
        ) from exc

    return FittedModel(spec=spec, train=train, season_length=m, params=params)


def predict(
    fitted: FittedModel,
    h: int,
    future_covariates: pd.DataFrame | None = None,
    levels: tuple[int, ...] = (80, 95),
    partition_id: int | None = None,
) -> Forecast:
    """Forecast ``h`` periods past the end of the training series.

    Args:
        fitted: Model from ``fit``
        h: Forecast horizon
        future_covariates: Covariate values indexed by (or with a column)
            ``ds``; required for exogenous models when the needed values lie
            past the training end
        levels: Interval coverage levels reported by the forecast
        partition_id: Partition the model was fit on, if any

    Raises:
        EMissingCovariate: If an exogenous model lacks future covariates
        EFit: If the family routine fails to produce a finite forecast
    """
    if h < 1:
        raise EConfig(f"h must be positive, got {h}", context={"h": h})

    spec = fitted.spec
    X_future = future_regressors(spec, fitted.train, h, fitted.season_length, future_covariates)

    adapter = load_adapter(spec.family)
    try:
        mu, sigma = adapter.predict(fitted.params, h, X_future)
    except TSEvalKitError:
        raise
    except Exception as exc:
        raise EFit(
            f"Forecasting '{spec.name}' ({spec.family}) failed: {exc}",
            context={"model": spec.name, "series_id": fitted.train.name, "type": type(exc).__name__},
        ) from exc

    mu = np.asarray(mu, dtype=float)
    sigma = np.asarray(sigma, dtype=float)
    if not (np.all(np.isfinite(mu)) and np.all(np.isfinite(sigma))):
        raise EFit(
            f"Model '{spec.name}' produced a non-finite forecast",
            context={"model": spec.name, "series_id": fitted.train.name},
        )

    return Forecast(
        unique_id=fitted.train.name,
        model=spec.name,
        ds=fitted.train.future_index(h),
        distribution=PredictiveDistribution(mu, sigma, spec.transform),
        levels=tuple(levels),
        partition_id=partition_id,
    )


__all__ = ["FittedModel", "fit", "predict"]
