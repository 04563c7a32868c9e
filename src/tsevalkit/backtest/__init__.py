"""Backtest module for tsevalkit.

Provides holdout and rolling-origin splitting, accuracy metrics, the
evaluation engine and report structures.
"""

from .aggregation import aggregate_records, rank_models, records_frame
from .engine import CellResult, make_partitions, run_evaluation
from .evaluator import evaluate
from .metrics import (
    METRIC_DIRECTIONS,
    crps,
    mae,
    mape,
    mase,
    rmse,
    skill_score,
    winkler,
)
from .report import EvaluationReport
from .splitting import Partition, holdout_split, rolling_origin_split

__all__ = [
    # Splitting
    "Partition",
    "holdout_split",
    "rolling_origin_split",
    # Engine
    "run_evaluation",
    "make_partitions",
    "CellResult",
    # Report
    "EvaluationReport",
    # Aggregation
    "aggregate_records",
    "rank_models",
    "records_frame",
    # Metrics
    "evaluate",
    "METRIC_DIRECTIONS",
    "rmse",
    "mae",
    "mape",
    "mase",
    "crps",
    "winkler",
    "skill_score",
]
