"""Aggregation of accuracy records and model ranking."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

import numpy as np
import pandas as pd

RECORD_COLUMNS = ["unique_id", "model", "partition", "metric", "value"]
SUMMARY_COLUMNS = ["model", "metric", "value", "n_partitions", "n_total"]
RANKING_COLUMNS = ["rank", "model", "metric", "value", "n_partitions", "n_total"]


def records_frame(records: Sequence[Mapping[str, object]]) -> pd.DataFrame:
    """Build the accuracy records table in canonical order.

    Rows are sorted by ``(unique_id, model, partition, metric)`` so every
    downstream mean is computed in the same order regardless of the order
    in which results were produced.
    """
    df = pd.DataFrame(list(records), columns=RECORD_COLUMNS)
    if df.empty:
        return df.astype({"value": float})
    df["value"] = df["value"].astype(float)
    return df.sort_values(["unique_id", "model", "partition", "metric"], kind="mergesort").reset_index(
        drop=True
    )


def aggregate_records(
    records: pd.DataFrame,
    total_partitions: int,
    by: Sequence[str] = ("model", "metric"),
) -> pd.DataFrame:
    """Arithmetic mean of each metric per group over the records present.

    Args:
        records: Accuracy records ``[unique_id, model, partition, metric, value]``
        total_partitions: Number of cells each model was attempted on
            (series x partitions), reported as ``n_total``
        by: Grouping columns

    Returns:
        DataFrame ``[*by, value, n_partitions, n_total]`` where
        ``n_partitions`` counts the contributing cells
    """
    by = list(by)
    if records.empty:
        return pd.DataFrame(columns=[*by, "value", "n_partitions", "n_total"])

    ordered = records.sort_values(
        ["unique_id", "model", "partition", "metric"], kind="mergesort"
    )
    grouped = ordered.groupby(by, sort=True)["value"]
    summary = grouped.agg(
        value=lambda v: float(np.mean(v.to_numpy())),
        n_partitions="count",
    ).reset_index()
    summary["n_partitions"] = summary["n_partitions"].astype(int)
    summary["n_total"] = int(total_partitions)
    return summary


def rank_models(
    summary: pd.DataFrame,
    primary_metric: str,
    higher_is_better: Callable[[str], bool] | Mapping[str, bool],
    models: Sequence[str] | None = None,
    total_partitions: int | None = None,
) -> pd.DataFrame:
    """Order models best to worst by the primary metric.

    Ties are broken by model name. Models in ``models`` without a value for
    the primary metric (every cell failed) are listed last with a NaN value.

    Args:
        summary: Output of ``aggregate_records``
        primary_metric: Metric that orders the table
        higher_is_better: Direction lookup, as a mapping or callable
        models: Every model name of the run
        total_partitions: ``n_total`` reported for models without records

    Returns:
        DataFrame ``[rank, model, metric, value, n_partitions, n_total]``
    """
    if callable(higher_is_better):
        descending = bool(higher_is_better(primary_metric))
    else:
        descending = bool(higher_is_better.get(primary_metric, False))

    primary = summary[summary["metric"] == primary_metric] if not summary.empty else summary
    rows: dict[str, dict[str, object]] = {
        str(row["model"]): {
            "model": str(row["model"]),
            "metric": primary_metric,
            "value": float(row["value"]),
            "n_partitions": int(row["n_partitions"]),
            "n_total": int(row["n_total"]),
        }
        for _, row in primary.iterrows()
    }
    for name in models or ():
        if name not in rows:
            rows[name] = {
                "model": name,
                "metric": primary_metric,
                "value": float("nan"),
                "n_partitions": 0,
                "n_total": int(total_partitions or 0),
            }

    def sort_key(row: dict[str, object]) -> tuple[bool, float, str]:
        value = float(row["value"])  # type: ignore[arg-type]
        missing = bool(np.isnan(value))
        signed = 0.0 if missing else (-value if descending else value)
        return missing, signed, str(row["model"])

    ordered = sorted(rows.values(), key=sort_key)
    ranking = pd.DataFrame(ordered, columns=RANKING_COLUMNS[1:])
    ranking.insert(0, "rank", np.arange(1, len(ranking) + 1))
    return ranking


__all__ = [
    "RANKING_COLUMNS",
    "RECORD_COLUMNS",
    "SUMMARY_COLUMNS",
    "aggregate_records",
    "rank_models",
    "records_frame",
]
