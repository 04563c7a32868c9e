"""Top-level evaluation pipeline.

Core logic: validate -> build dataset -> split -> fit/forecast/evaluate per
cell -> skill scores -> aggregate and rank.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any

import pandas as pd

from tsevalkit.backtest.engine import FitFunc, PredictFunc, run_evaluation
from tsevalkit.backtest.report import EvaluationReport
from tsevalkit.core.config import EvalConfig
from tsevalkit.core.errors import EConfig
from tsevalkit.core.series import TSDataset
from tsevalkit.models.protocol import fit, predict
from tsevalkit.models.registry import ModelRegistry
from tsevalkit.models.spec import ModelSpec

logger = logging.getLogger(__name__)

ModelsLike = ModelRegistry | Iterable[ModelSpec | Mapping[str, Any]]


# =============================================================================
# Dataset Building
# =============================================================================


def build_dataset(
    df: pd.DataFrame,
    freq: str | None = None,
    covariates: Sequence[str] = (),
    fill_value: float | None = None,
) -> TSDataset:
    """Build a TSDataset from a long DataFrame.

    Args:
        df: Frame with ``[unique_id, ds, y, <covariates>]``
        freq: Pandas frequency alias (None = inferred)
        covariates: Covariate column names to carry along
        fill_value: Sentinel used to complete gaps in the time grid

    Returns:
        TSDataset ready for evaluation
    """
    return TSDataset.from_dataframe(df, freq=freq, covariates=covariates, fill_value=fill_value)


def _as_dataset(data: TSDataset | pd.DataFrame, config: EvalConfig | None = None) -> TSDataset:
    if isinstance(data, TSDataset):
        return data
    freq = config.freq if config is not None else None
    return build_dataset(data, freq=freq)


def _as_registry(models: ModelsLike) -> ModelRegistry:
    if isinstance(models, ModelRegistry):
        return models
    return ModelRegistry.from_specs(models)


def _default_config(registry: ModelRegistry, preset: EvalConfig) -> EvalConfig:
    # Skill scores only when the default baseline is among the candidates
    if preset.baseline is not None and preset.baseline not in registry:
        return replace(preset, baseline=None)
    return preset


# =============================================================================
# Evaluation
# =============================================================================


def evaluate_holdout(
    data: TSDataset | pd.DataFrame,
    models: ModelsLike,
    config: EvalConfig | None = None,
    fit_func: FitFunc | None = None,
    predict_func: PredictFunc | None = None,
) -> EvaluationReport:
    """Evaluate models on a single train/test split per series.

    Args:
        data: Dataset, or a long frame ``[unique_id, ds, y]`` (covariates
            must be declared through ``build_dataset``)
        models: Model specs, dicts or a ModelRegistry
        config: Evaluation configuration. If None, ``EvalConfig.holdout()``,
            without skill scores unless a ``naive`` model is registered

    Returns:
        EvaluationReport with one partition per series
    """
    registry = _as_registry(models)
    config = config or _default_config(registry, EvalConfig.holdout())
    return run_evaluation(
        _as_dataset(data, config),
        registry,
        config,
        strategy="holdout",
        fit_func=fit_func,
        predict_func=predict_func,
    )


def evaluate_rolling(
    data: TSDataset | pd.DataFrame,
    models: ModelsLike,
    config: EvalConfig | None = None,
    fit_func: FitFunc | None = None,
    predict_func: PredictFunc | None = None,
) -> EvaluationReport:
    """Evaluate models with rolling-origin (expanding window) cross-validation.

    Example:
        >>> report = evaluate_rolling(
        ...     df,
        ...     [{"name": "naive", "family": "naive"}, {"name": "ets", "family": "ets"}],
        ...     EvalConfig.rolling(h=3, initial_size=24, step=3),
        ... )
        >>> report.ranking
    """
    registry = _as_registry(models)
    config = config or _default_config(registry, EvalConfig.rolling(h=1))
    return run_evaluation(
        _as_dataset(data, config),
        registry,
        config,
        strategy="rolling",
        fit_func=fit_func,
        predict_func=predict_func,
    )


# =============================================================================
# Forecasting
# =============================================================================


def _covariates_for(future_covariates: pd.DataFrame | None, unique_id: str) -> pd.DataFrame | None:
    if future_covariates is None or "unique_id" not in future_covariates.columns:
        return future_covariates
    return future_covariates[future_covariates["unique_id"].astype(str) == unique_id]


def forecast(
    data: TSDataset | pd.DataFrame,
    models: ModelsLike,
    h: int,
    future_covariates: pd.DataFrame | None = None,
    levels: tuple[int, ...] = (80, 95),
    season_length: int | None = None,
) -> pd.DataFrame:
    """Fit every model on the full history and forecast ``h`` periods ahead.

    Args:
        data: Dataset or long frame
        models: Model specs, dicts or a ModelRegistry
        h: Forecast horizon
        future_covariates: Frame ``[unique_id?, ds, <covariates>]`` with the
            covariate values of the forecast periods
        levels: Interval coverage levels
        season_length: Seasonal period (None = inferred from freq)

    Returns:
        Forecast table ``[unique_id, model, partition, ds, yhat, lo-*, hi-*]``

    Raises:
        EConfig: If h is not positive
        EFit: If a model cannot be fit
        EMissingCovariate: If an exogenous model lacks future covariates
    """
    if h < 1:
        raise EConfig(f"h must be positive, got {h}", context={"h": h})
    dataset = _as_dataset(data)
    registry = _as_registry(models)

    frames = []
    for series in dataset:
        series_covariates = _covariates_for(future_covariates, series.name)
        for spec in registry:
            fitted = fit(spec, series, season_length)
            result = predict(fitted, h, future_covariates=series_covariates, levels=levels)
            frames.append(result.to_frame())
    logger.info("Forecast %d model(s) x %d series, h=%d", len(registry), dataset.n_series, h)
    return pd.concat(frames, ignore_index=True)


__all__ = [
    "build_dataset",
    "evaluate_holdout",
    "evaluate_rolling",
    "forecast",
]
