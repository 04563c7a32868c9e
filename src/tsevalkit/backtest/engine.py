"""Evaluation engine.

Fans every (series, partition, model) cell out as an independent task
(fit -> forecast -> evaluate), then fans results back in: skill scores
against the baseline model, aggregation and ranking.

A cell that fails with one of ``CELL_ERRORS`` becomes a failure record and
the run continues; any other exception propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Literal

import pandas as pd

from tsevalkit.backtest.aggregation import aggregate_records, rank_models, records_frame
from tsevalkit.backtest.evaluator import evaluate
from tsevalkit.backtest.metrics import skill_score
from tsevalkit.backtest.report import FAILURE_COLUMNS, EvaluationReport
from tsevalkit.backtest.splitting import Partition, holdout_split, rolling_origin_split
from tsevalkit.core.config import EvalConfig
from tsevalkit.core.errors import CELL_ERRORS, EConfig, EUndefinedSkill
from tsevalkit.core.results import Forecast
from tsevalkit.core.series import TimeSeries, TSDataset
from tsevalkit.models.protocol import FittedModel, fit, predict
from tsevalkit.models.registry import ModelRegistry
from tsevalkit.models.spec import ModelSpec

logger = logging.getLogger(__name__)

FitFunc = Callable[[ModelSpec, TimeSeries, int], FittedModel]
PredictFunc = Callable[..., Forecast]


@dataclass(frozen=True)
class CellResult:
    """Outcome of one (series, partition, model) cell."""

    unique_id: str
    model: str
    partition_id: int
    forecast: Forecast | None = None
    scores: dict[str, float] = field(default_factory=dict)
    failure: dict[str, object] | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(frozen=True)
class _Cell:
    series: TimeSeries
    partition: Partition
    spec: ModelSpec
    season_length: int


def make_partitions(
    series: TimeSeries,
    config: EvalConfig,
    strategy: Literal["holdout", "rolling"],
) -> list[Partition]:
    """Partitions of one series under the configured split policy."""
    if strategy == "holdout":
        return holdout_split(series, config.test_fraction)
    m = config.resolve_season_length(series.season_length)
    return rolling_origin_split(series, config.resolve_initial_size(m), config.step, config.h)


def _run_cell(
    cell: _Cell,
    config: EvalConfig,
    fit_func: FitFunc,
    predict_func: PredictFunc,
) -> CellResult:
    series, partition, spec = cell.series, cell.partition, cell.spec
    stage = "fit"
    forecast = None
    try:
        train = partition.train(series)
        fitted = fit_func(spec, train, cell.season_length)

        stage = "forecast"
        forecast = predict_func(
            fitted,
            partition.forecast_horizon,
            future_covariates=series.covariates,
            levels=config.levels,
            partition_id=partition.partition_id,
        )

        stage = "evaluate"
        test = partition.test(series)
        realized = test.to_series() if test is not None else pd.Series(dtype=float)
        scores = evaluate(
            forecast,
            realized,
            config.metrics,
            insample=train,
            season_length=cell.season_length,
        )
    except CELL_ERRORS as exc:
        logger.warning(
            "Cell %s/%s/partition %d failed at %s: [%s] %s",
            series.name,
            spec.name,
            partition.partition_id,
            stage,
            exc.error_code,
            exc.message,
        )
        return CellResult(
            unique_id=series.name,
            model=spec.name,
            partition_id=partition.partition_id,
            forecast=forecast,
            failure={
                "unique_id": series.name,
                "model": spec.name,
                "partition": partition.partition_id,
                "stage": stage,
                "error_code": exc.error_code,
                "message": exc.message,
            },
        )

    return CellResult(
        unique_id=series.name,
        model=spec.name,
        partition_id=partition.partition_id,
        forecast=forecast,
        scores=scores,
    )


def _skill_records(
    results: list[CellResult],
    config: EvalConfig,
) -> list[dict[str, object]]:
    """Skill of every scored cell against the baseline cell of the same partition."""
    if config.baseline is None:
        return []

    baseline_scores = {
        (r.unique_id, r.partition_id): r.scores
        for r in results
        if r.model == config.baseline and r.ok
    }
    records: list[dict[str, object]] = []
    for r in results:
        if not r.ok:
            continue
        reference = baseline_scores.get((r.unique_id, r.partition_id))
        if reference is None:
            continue
        for metric in config.skill_metrics:
            if metric not in r.scores or metric not in reference:
                continue
            try:
                value = skill_score(r.scores[metric], reference[metric])
            except EUndefinedSkill:
                logger.debug(
                    "skill_%s omitted for %s/%s/partition %d: baseline score is zero",
                    metric,
                    r.unique_id,
                    r.model,
                    r.partition_id,
                )
                continue
            records.append(
                {
                    "unique_id": r.unique_id,
                    "model": r.model,
                    "partition": r.partition_id,
                    "metric": f"skill_{metric}",
                    "value": value,
                }
            )
    return records


def _forecasts_frame(results: list[CellResult]) -> pd.DataFrame:
    frames = [r.forecast.to_frame() for r in results if r.forecast is not None]
    if not frames:
        return pd.DataFrame(columns=["unique_id", "model", "partition", "ds", "yhat"])
    return pd.concat(frames, ignore_index=True)


def run_evaluation(
    dataset: TSDataset,
    registry: ModelRegistry,
    config: EvalConfig,
    strategy: Literal["holdout", "rolling"] = "rolling",
    fit_func: FitFunc | None = None,
    predict_func: PredictFunc | None = None,
) -> EvaluationReport:
    """Evaluate every registered model on every partition of every series.

    Args:
        dataset: Series to evaluate on
        registry: Candidate models
        config: Evaluation configuration
        strategy: "holdout" (single split) or "rolling" (rolling origin)
        fit_func: Fitting function ``fit_func(spec, train, season_length)``
            (defaults to ``models.fit``)
        predict_func: Forecasting function with the signature of
            ``models.predict`` (defaults to ``models.predict``)

    Returns:
        EvaluationReport with forecasts, records, failures and ranking

    Raises:
        EConfig: If the configuration is invalid for this dataset or the
            baseline model is not registered
    """
    fit_func = fit if fit_func is None else fit_func
    predict_func = predict if predict_func is None else predict_func

    if strategy not in ("holdout", "rolling"):
        raise EConfig(f"Unknown strategy '{strategy}'", context={"available": ["holdout", "rolling"]})
    if len(registry) == 0:
        raise EConfig("No models registered", fix_hint="Pass at least one model spec")
    if config.baseline is not None and config.baseline not in registry:
        raise EConfig(
            f"Baseline model '{config.baseline}' is not registered",
            context={"registered": registry.names},
            fix_hint="Register the baseline model or set baseline=None",
        )

    # Split every series up front so configuration errors surface before fitting
    partitions: dict[str, list[Partition]] = {}
    cells: list[_Cell] = []
    for series in dataset:
        m = config.resolve_season_length(series.season_length)
        parts = make_partitions(series, config, strategy)
        partitions[series.name] = parts
        cells.extend(
            _Cell(series=series, partition=p, spec=spec, season_length=m)
            for p in parts
            for spec in registry
        )

    n_total = sum(len(parts) for parts in partitions.values())
    logger.info(
        "Evaluating %d model(s) on %d series, %d partition(s) (%s)",
        len(registry),
        dataset.n_series,
        n_total,
        strategy,
    )

    def run_one(cell: _Cell) -> CellResult:
        return _run_cell(cell, config, fit_func, predict_func)

    results: list[CellResult] = []
    # For a single cell or max_workers=1, fall back to sequential
    if len(cells) <= 1 or config.max_workers == 1:
        results = [run_one(cell) for cell in cells]
    else:
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            futures = {executor.submit(run_one, cell): idx for idx, cell in enumerate(cells)}
            for future in as_completed(futures):
                results.append(future.result())

    # Completion order is arbitrary; restore the canonical order
    model_order = {name: i for i, name in enumerate(registry.names)}
    results.sort(key=lambda r: (r.unique_id, r.partition_id, model_order[r.model]))

    raw_records = [
        {
            "unique_id": r.unique_id,
            "model": r.model,
            "partition": r.partition_id,
            "metric": metric,
            "value": value,
        }
        for r in results
        for metric, value in r.scores.items()
    ]
    records = records_frame(raw_records + _skill_records(results, config))
    failures = pd.DataFrame(
        [r.failure for r in results if r.failure is not None],
        columns=FAILURE_COLUMNS,
    )

    summary_table = aggregate_records(records, total_partitions=n_total)
    ranking = rank_models(
        summary_table,
        config.primary_metric,
        config.higher_is_better,
        models=registry.names,
        total_partitions=n_total,
    )

    logger.info(
        "Evaluation finished: %d record(s), %d failed cell(s)",
        len(records),
        len(failures),
    )

    return EvaluationReport(
        strategy=strategy,
        config=config,
        models=registry.names,
        partitions=partitions,
        forecasts=_forecasts_frame(results),
        records=records,
        failures=failures,
        summary_table=summary_table,
        ranking=ranking,
        metadata={
            "n_series": dataset.n_series,
            "n_models": len(registry),
            "n_cells": len(cells),
            "n_failed": len(failures),
        },
    )


__all__ = ["CellResult", "FitFunc", "PredictFunc", "make_partitions", "run_evaluation"]
