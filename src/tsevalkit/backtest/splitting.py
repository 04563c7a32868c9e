"""Temporal partitions for holdout and rolling-origin evaluation.

Partitions are expressed as offsets into a series: the training range is
``[0, cutoff)`` and the test range ``[cutoff, cutoff + test_size)``. No
partition ever trains on data at or after its test start.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from tsevalkit.core.errors import EConfig
from tsevalkit.core.series import TimeSeries

SplitStrategy = Literal["holdout", "rolling"]


@dataclass(frozen=True)
class Partition:
    """One train/test partition of a series.

    Attributes:
        partition_id: 0-based origin index
        cutoff: Number of training periods
        test_size: Periods with ground truth (may be shorter than
            ``horizon`` at the series end, possibly 0)
        horizon: Periods requested from the forecaster
        strategy: "holdout" or "rolling"
    """

    partition_id: int
    cutoff: int
    test_size: int
    horizon: int
    strategy: SplitStrategy = "rolling"

    @property
    def is_truncated(self) -> bool:
        return self.test_size < self.horizon

    @property
    def forecast_horizon(self) -> int:
        """Steps to forecast; a partition without ground truth still forecasts ``horizon``."""
        return self.test_size if self.test_size > 0 else self.horizon

    def train(self, series: TimeSeries) -> TimeSeries:
        return series.window(0, self.cutoff)

    def test(self, series: TimeSeries) -> TimeSeries | None:
        """Realized values of the test range (None when nothing is left)."""
        if self.test_size == 0:
            return None
        return series.window(self.cutoff, self.cutoff + self.test_size)

    def to_dict(self) -> dict[str, object]:
        return {
            "partition_id": self.partition_id,
            "cutoff": self.cutoff,
            "test_size": self.test_size,
            "horizon": self.horizon,
            "strategy": self.strategy,
        }


def holdout_split(series: TimeSeries | int, test_fraction: float) -> list[Partition]:
    """Single split holding out the last ``ceil(len * test_fraction)`` periods.

    Args:
        series: Series (or its length)
        test_fraction: Share of periods held out, strictly between 0 and 1

    Returns:
        Exactly one partition

    Raises:
        EConfig: If test_fraction is out of range or either range is empty
    """
    n = series if isinstance(series, int) else len(series)
    if not 0 < test_fraction < 1:
        raise EConfig(
            f"test_fraction must lie strictly between 0 and 1, got {test_fraction}",
            context={"test_fraction": test_fraction},
        )
    test_size = math.ceil(n * test_fraction)
    cutoff = n - test_size
    if cutoff < 1 or test_size < 1:
        raise EConfig(
            f"Holdout split of {n} periods at fraction {test_fraction} leaves "
            f"{cutoff} training and {test_size} test periods",
            context={"length": n, "test_fraction": test_fraction},
            fix_hint="Use a longer series or a different test_fraction",
        )
    return [
        Partition(
            partition_id=0,
            cutoff=cutoff,
            test_size=test_size,
            horizon=test_size,
            strategy="holdout",
        )
    ]


def rolling_origin_split(
    series: TimeSeries | int,
    initial_size: int,
    step: int,
    horizon: int,
) -> list[Partition]:
    """Expanding-window partitions.

    Origins sit at training sizes ``initial_size + k * step <= len`` for
    ``k = 0, 1, ...``. Each test range covers the next ``horizon`` periods,
    truncated at the series end. Late origins are shortened, never dropped,
    so there are always ``floor((len - initial_size) / step) + 1`` partitions.

    Raises:
        EConfig: If ``initial_size < 1``, ``initial_size > len``, ``step < 1``
            or ``horizon < 1``
    """
    n = series if isinstance(series, int) else len(series)
    context = {"length": n, "initial_size": initial_size, "step": step, "horizon": horizon}
    if initial_size < 1:
        raise EConfig(f"initial_size must be at least 1, got {initial_size}", context=context)
    if initial_size > n:
        raise EConfig(
            f"initial_size {initial_size} exceeds the series length {n}",
            context=context,
            fix_hint="Lower initial_size or use a longer series",
        )
    if step < 1:
        raise EConfig(f"step must be at least 1, got {step}", context=context)
    if horizon < 1:
        raise EConfig(f"horizon must be at least 1, got {horizon}", context=context)

    n_partitions = (n - initial_size) // step + 1
    partitions = []
    for k in range(n_partitions):
        cutoff = initial_size + k * step
        partitions.append(
            Partition(
                partition_id=k,
                cutoff=cutoff,
                test_size=min(horizon, n - cutoff),
                horizon=horizon,
                strategy="rolling",
            )
        )
    return partitions


__all__ = ["Partition", "SplitStrategy", "holdout_split", "rolling_origin_split"]
