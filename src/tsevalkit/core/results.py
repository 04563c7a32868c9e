"""Forecast output container."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from tsevalkit.models.distribution import PredictiveDistribution


@dataclass(frozen=True)
class Forecast:
    """Forecast of one model for one series over a horizon.

    The point forecast is the mean of the back-transformed predictive
    distribution. ``partition_id`` is None for out-of-sample forecasts.
    """

    unique_id: str
    model: str
    ds: pd.DatetimeIndex
    distribution: PredictiveDistribution
    levels: tuple[int, ...] = (80, 95)
    partition_id: int | None = None

    def __post_init__(self) -> None:
        if len(self.ds) != len(self.distribution):
            raise ValueError(
                f"Forecast has {len(self.ds)} timestamps but {len(self.distribution)} distribution steps"
            )

    @property
    def horizon(self) -> int:
        return len(self.ds)

    @property
    def point(self) -> np.ndarray:
        return self.distribution.mean()

    def interval(self, level: float) -> tuple[np.ndarray, np.ndarray]:
        return self.distribution.interval(level)

    def to_series(self) -> pd.Series:
        """Point forecast indexed by timestamp."""
        return pd.Series(self.point, index=self.ds, name=self.model)

    def to_frame(self) -> pd.DataFrame:
        """Forecast table ``[unique_id, model, partition, ds, yhat, lo-*, hi-*]``."""
        df = pd.DataFrame(
            {
                "unique_id": self.unique_id,
                "model": self.model,
                "partition": self.partition_id,
                "ds": self.ds,
                "yhat": self.point,
            }
        )
        for level in self.levels:
            lo, hi = self.interval(level)
            df[f"lo-{level}"] = lo
            df[f"hi-{level}"] = hi
        return df


__all__ = ["Forecast"]
