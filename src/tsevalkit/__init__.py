"""tsevalkit - Forecast evaluation harness.

Fits a declared set of candidate forecasting models to one or more series,
evaluates them with a holdout split and with rolling-origin
cross-validation, scores point and distributional accuracy, and ranks them.

Input contract:
    DataFrame columns: unique_id, ds, y, plus any declared covariates.

Basic usage:
    >>> from tsevalkit import EvalConfig, build_dataset, evaluate_rolling
    >>> dataset = build_dataset(df, freq="MS")
    >>> models = [
    ...     {"name": "naive", "family": "naive"},
    ...     {"name": "snaive", "family": "seasonal_naive"},
    ...     {"name": "ets", "family": "ets", "transform": "log"},
    ... ]
    >>> report = evaluate_rolling(dataset, models, EvalConfig.rolling(h=6, initial_size=36, step=6))
    >>> print(report.summary())

Exogenous models:
    >>> dataset = build_dataset(df, covariates=["price"])
    >>> arima = {
    ...     "name": "arima_price",
    ...     "family": "arima",
    ...     "predictors": {"exogenous": [{"column": "price", "lag": 1}]},
    ... }
    >>> report = evaluate_holdout(dataset, [{"name": "naive", "family": "naive"}, arima])
"""

__version__ = "0.3.0"

from tsevalkit.backtest import EvaluationReport, Partition, holdout_split, rolling_origin_split
from tsevalkit.core.config import EvalConfig
from tsevalkit.core.errors import (
    EConfig,
    EContract,
    EFit,
    EIndex,
    EMissingCovariate,
    ENoOverlap,
    ERange,
    EUndefinedSkill,
    TSEvalKitError,
)
from tsevalkit.core.results import Forecast
from tsevalkit.core.series import TimeSeries, TSDataset
from tsevalkit.discovery import describe
from tsevalkit.models import ModelRegistry, ModelSpec, fit, predict
from tsevalkit.pipeline import build_dataset, evaluate_holdout, evaluate_rolling, forecast

__all__ = [
    "__version__",
    # Pipeline
    "build_dataset",
    "evaluate_holdout",
    "evaluate_rolling",
    "forecast",
    "EvalConfig",
    "EvaluationReport",
    # Data
    "TimeSeries",
    "TSDataset",
    "Partition",
    "holdout_split",
    "rolling_origin_split",
    # Models
    "ModelSpec",
    "ModelRegistry",
    "fit",
    "predict",
    "Forecast",
    # Discovery
    "describe",
    # Errors
    "TSEvalKitError",
    "EContract",
    "ERange",
    "EIndex",
    "EConfig",
    "EFit",
    "EMissingCovariate",
    "ENoOverlap",
    "EUndefinedSkill",
]
