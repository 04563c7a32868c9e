"""Evaluation configuration.

A single frozen value object carries every knob of an evaluation run:
split policy, horizon, interval levels, metrics and ranking direction.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from tsevalkit.core.errors import EConfig


@dataclass(frozen=True)
class EvalConfig:
    """Configuration for holdout and rolling-origin evaluation.

    Args:
        h: Forecast horizon for rolling-origin partitions
        freq: Pandas frequency alias (None = inferred from the data)
        levels: Nominal coverage levels of the predictive intervals
        test_fraction: Share of the series held out by the holdout split
        initial_size: Training periods of the first rolling origin
            (None = max(2 * season_length, 10))
        step: Periods added to the training range between origins
        metrics: Accuracy metrics computed per partition
        skill_metrics: Metrics also reported as skill relative to ``baseline``
        baseline: Name of the baseline model for skill scores (None = no skill)
        primary_metric: Metric that orders the ranking table
        metric_directions: Overrides of ``higher_is_better`` per metric
        season_length: Seasonal period (None = inferred from freq)
        max_workers: Worker threads for the model x partition matrix
            (1 = sequential, None = executor default)
    """

    h: int = 1
    freq: str | None = None
    levels: tuple[int, ...] = (80, 95)

    # Holdout
    test_fraction: float = 0.2

    # Rolling origin
    initial_size: int | None = None
    step: int = 1

    # Scoring
    metrics: tuple[str, ...] = ("rmse", "mae", "crps")
    skill_metrics: tuple[str, ...] = ("rmse", "crps")
    baseline: str | None = "naive"
    primary_metric: str = "crps"
    metric_directions: Mapping[str, bool] = field(default_factory=dict, hash=False)

    season_length: int | None = None
    max_workers: int | None = None

    def __post_init__(self) -> None:
        from tsevalkit.backtest.metrics import METRIC_DIRECTIONS

        object.__setattr__(self, "levels", tuple(sorted(int(lvl) for lvl in self.levels)))
        object.__setattr__(self, "metrics", tuple(self.metrics))
        object.__setattr__(self, "skill_metrics", tuple(self.skill_metrics))
        object.__setattr__(self, "metric_directions", MappingProxyType(dict(self.metric_directions)))

        if self.h <= 0:
            raise EConfig(f"h must be positive, got {self.h}", context={"h": self.h})
        if not self.levels or any(not 0 < lvl < 100 for lvl in self.levels):
            raise EConfig(
                f"levels must lie strictly between 0 and 100, got {list(self.levels)}",
                context={"levels": list(self.levels)},
            )
        if not 0 < self.test_fraction < 1:
            raise EConfig(
                f"test_fraction must lie strictly between 0 and 1, got {self.test_fraction}",
                context={"test_fraction": self.test_fraction},
            )
        if self.initial_size is not None and self.initial_size < 1:
            raise EConfig(
                f"initial_size must be at least 1, got {self.initial_size}",
                context={"initial_size": self.initial_size},
            )
        if self.step < 1:
            raise EConfig(f"step must be at least 1, got {self.step}", context={"step": self.step})
        if self.season_length is not None and self.season_length < 1:
            raise EConfig(f"season_length must be at least 1, got {self.season_length}")
        if self.max_workers is not None and self.max_workers < 1:
            raise EConfig(f"max_workers must be at least 1, got {self.max_workers}")

        unknown = [m for m in self.metrics if m not in METRIC_DIRECTIONS]
        if unknown:
            raise EConfig(
                f"Unknown metrics: {unknown}",
                context={"available": sorted(METRIC_DIRECTIONS)},
            )
        not_computed = [m for m in self.skill_metrics if m not in self.metrics]
        if not_computed:
            raise EConfig(
                f"Skill metrics must also be listed in metrics: {not_computed}",
                context={"metrics": list(self.metrics)},
            )
        if self.primary_metric not in self.metric_names:
            raise EConfig(
                f"primary_metric '{self.primary_metric}' is not computed by this config",
                context={"available": self.metric_names},
            )

    @classmethod
    def holdout(cls, test_fraction: float = 0.2, **kwargs) -> EvalConfig:
        """Single train/test split preset."""
        return cls(test_fraction=test_fraction, **kwargs)

    @classmethod
    def rolling(cls, h: int, initial_size: int | None = None, step: int = 1, **kwargs) -> EvalConfig:
        """Rolling-origin (expanding window) cross-validation preset."""
        return cls(h=h, initial_size=initial_size, step=step, **kwargs)

    @property
    def skill_names(self) -> list[str]:
        if self.baseline is None:
            return []
        return [f"skill_{m}" for m in self.skill_metrics]

    @property
    def metric_names(self) -> list[str]:
        """Every metric name that can appear in the accuracy records."""
        return [*self.metrics, *self.skill_names]

    def higher_is_better(self, metric: str) -> bool:
        from tsevalkit.backtest.metrics import METRIC_DIRECTIONS

        if metric in self.metric_directions:
            return self.metric_directions[metric]
        if metric.startswith("skill_"):
            return True
        return METRIC_DIRECTIONS.get(metric, False)

    def resolve_season_length(self, series_season_length: int) -> int:
        return self.season_length or series_season_length

    def resolve_initial_size(self, season_length: int) -> int:
        if self.initial_size is not None:
            return self.initial_size
        return max(season_length * 2, 10)


__all__ = ["EvalConfig"]
