"""Evaluation report structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from tsevalkit.backtest.aggregation import aggregate_records, rank_models
from tsevalkit.backtest.splitting import Partition
from tsevalkit.core.config import EvalConfig

FAILURE_COLUMNS = ["unique_id", "model", "partition", "stage", "error_code", "message"]


def _json_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Rows as dicts with NaN mapped to None."""
    return df.astype(object).where(df.notna(), None).to_dict(orient="records")


@dataclass(frozen=True)
class EvaluationReport:
    """Complete results of a holdout or rolling-origin evaluation.

    Attributes:
        strategy: "holdout" or "rolling"
        config: Configuration of the run
        models: Model names in registry order
        partitions: Partitions per series id
        forecasts: Forecast table ``[unique_id, model, partition, ds, yhat, lo-*, hi-*]``
        records: Accuracy records ``[unique_id, model, partition, metric, value]``
        failures: Missing-result markers
            ``[unique_id, model, partition, stage, error_code, message]``
        summary_table: Mean per ``(model, metric)`` with ``n_partitions``/``n_total``
        ranking: ``[rank, model, metric, value, n_partitions, n_total]``
    """

    strategy: str
    config: EvalConfig
    models: list[str]
    partitions: dict[str, list[Partition]]
    forecasts: pd.DataFrame
    records: pd.DataFrame
    failures: pd.DataFrame
    summary_table: pd.DataFrame
    ranking: pd.DataFrame
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def n_partitions(self) -> int:
        """Total (series, partition) cells per model."""
        return sum(len(parts) for parts in self.partitions.values())

    @property
    def best_model(self) -> str | None:
        if self.ranking.empty or pd.isna(self.ranking["value"].iloc[0]):
            return None
        return str(self.ranking["model"].iloc[0])

    def get_metric(self, model: str, metric: str) -> float:
        """Aggregate metric of a model, NaN if it has no records."""
        rows = self.summary_table[
            (self.summary_table["model"] == model) & (self.summary_table["metric"] == metric)
        ]
        if rows.empty:
            return float("nan")
        return float(rows["value"].iloc[0])

    def ranking_by_series(self) -> pd.DataFrame:
        """Ranking computed separately for each series.

        Returns:
            DataFrame ``[unique_id, rank, model, metric, value, n_partitions, n_total]``
        """
        frames = []
        for uid, parts in self.partitions.items():
            series_records = self.records[self.records["unique_id"] == uid]
            summary = aggregate_records(series_records, total_partitions=len(parts))
            ranking = rank_models(
                summary,
                self.config.primary_metric,
                self.config.higher_is_better,
                models=self.models,
                total_partitions=len(parts),
            )
            ranking.insert(0, "unique_id", uid)
            frames.append(ranking)
        if not frames:
            return pd.DataFrame(columns=["unique_id", *self.ranking.columns])
        return pd.concat(frames, ignore_index=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "strategy": self.strategy,
            "models": list(self.models),
            "primary_metric": self.config.primary_metric,
            "partitions": {
                uid: [p.to_dict() for p in parts] for uid, parts in self.partitions.items()
            },
            "ranking": _json_records(self.ranking),
            "summary": _json_records(self.summary_table),
            "failures": _json_records(self.failures),
            "metadata": self.metadata,
        }

    def summary(self) -> str:
        """Generate a human-readable summary.

        Returns:
            Summary string with the ranking and failure counts
        """
        lines = [
            f"Evaluation Report: {len(self.partitions)} series, "
            f"{self.n_partitions} partitions ({self.strategy})",
            "=" * 50,
            f"\nRanking by {self.config.primary_metric}:",
        ]
        for _, row in self.ranking.iterrows():
            value = "n/a" if pd.isna(row["value"]) else f"{row['value']:.4f}"
            lines.append(
                f"  {row['rank']}. {row['model']}: {value} "
                f"({row['n_partitions']}/{row['n_total']} partitions)"
            )

        if not self.summary_table.empty:
            lines.append("\nAggregate Metrics:")
            for model in self.models:
                model_rows = self.summary_table[self.summary_table["model"] == model]
                if model_rows.empty:
                    continue
                metrics = ", ".join(
                    f"{r['metric']}={r['value']:.4f}" for _, r in model_rows.iterrows()
                )
                lines.append(f"  {model}: {metrics}")

        if not self.failures.empty:
            lines.append(f"\nFailures: {len(self.failures)}")
            counts = self.failures.groupby(["model", "error_code"]).size()
            for (model, code), count in counts.items():
                lines.append(f"  {model}: {count} x {code}")

        return "\n".join(lines)


__all__ = ["EvaluationReport", "FAILURE_COLUMNS"]
