"""Metrics calculation for time series forecasting.

Point metrics: RMSE, MAE, MAPE, MASE. Distributional metrics: CRPS and the
Winkler interval score. Skill scores compare a metric against a baseline.

A metric that is undefined on the data (MAPE with a zero actual, MASE with
a flat training series) raises ``ValueError``; callers omit it.
"""

from __future__ import annotations

import numpy as np

from tsevalkit.core.errors import EUndefinedSkill
from tsevalkit.models.distribution import PredictiveDistribution

# Metric name -> higher_is_better
METRIC_DIRECTIONS: dict[str, bool] = {
    "rmse": False,
    "mae": False,
    "mape": False,
    "mase": False,
    "crps": False,
    "winkler": False,
}


def rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Root Mean Squared Error.

    Args:
        y_true: Actual values
        y_pred: Predicted values

    Returns:
        RMSE value
    """
    return float(np.sqrt(np.mean((np.asarray(y_true) - np.asarray(y_pred)) ** 2)))


def mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Mean Absolute Error."""
    return float(np.mean(np.abs(np.asarray(y_true) - np.asarray(y_pred))))


def mape(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Mean Absolute Percentage Error, in percent.

    Raises:
        ValueError: If any actual value is zero
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    if np.any(y_true == 0):
        raise ValueError("Cannot compute MAPE: y_true contains zeros")

    return float(100 * np.mean(np.abs((y_true - y_pred) / y_true)))


def mase(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    y_train: np.ndarray,
    season_length: int = 1,
) -> float:
    """Mean Absolute Scaled Error.

    Scales the forecast error by the in-sample MAE of the naive
    seasonal forecast.

    Args:
        y_true: Actual values (test set)
        y_pred: Predicted values
        y_train: Training values for scaling
        season_length: Seasonal period for naive forecast

    Returns:
        MASE value (1.0 means same error as naive seasonal)

    Raises:
        ValueError: If the training series is too short or the naive
            forecast MAE is zero
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    y_train = np.asarray(y_train, dtype=float)

    mae_forecast = np.mean(np.abs(y_true - y_pred))

    if len(y_train) <= season_length:
        # Not enough data for seasonal naive, use regular naive
        season_length = 1
    if len(y_train) < 2:
        raise ValueError("Cannot compute MASE: need at least 2 training values")
    naive_errors = np.abs(y_train[season_length:] - y_train[:-season_length])
    mae_naive = np.nanmean(naive_errors)

    if not mae_naive > 0:
        raise ValueError("Cannot compute MASE: naive forecast MAE is zero")

    return float(mae_forecast / mae_naive)


def crps(y_true: np.ndarray, distribution: PredictiveDistribution) -> float:
    """Mean Continuous Ranked Probability Score.

    Uses the closed form of the full predictive distribution (Gaussian, or
    shifted log-normal under a log transform). Lower is better; for a
    degenerate distribution it reduces to the absolute error.
    """
    return float(np.mean(distribution.crps(np.asarray(y_true, dtype=float))))


def winkler(
    y_true: np.ndarray,
    lower: np.ndarray,
    upper: np.ndarray,
    level: float,
) -> float:
    """Mean Winkler (interval) score of a central interval.

    Interval width plus ``2 / alpha`` times the distance by which the actual
    falls outside the interval, where ``alpha = 1 - level / 100``.
    """
    y_true = np.asarray(y_true, dtype=float)
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)
    alpha = 1 - level / 100

    score = (upper - lower) + (2 / alpha) * (
        np.maximum(lower - y_true, 0) + np.maximum(y_true - upper, 0)
    )
    return float(np.mean(score))


def skill_score(score: float, baseline_score: float) -> float:
    """Relative improvement over a baseline: ``1 - score / baseline_score``.

    0 means no better than the baseline, 1 a perfect forecast, negative
    values worse than the baseline. Higher is better.

    Raises:
        EUndefinedSkill: If the baseline score is exactly zero
    """
    if baseline_score == 0:
        raise EUndefinedSkill(
            "Skill score is undefined for a baseline score of zero",
            context={"score": score, "baseline_score": baseline_score},
        )
    return float(1 - score / baseline_score)


__all__ = [
    "METRIC_DIRECTIONS",
    "crps",
    "mae",
    "mape",
    "mase",
    "rmse",
    "skill_score",
    "winkler",
]
