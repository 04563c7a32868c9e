"""Time-indexed series containers.

``TimeSeries`` is a read-only view of one series on a regular time grid with
optional aligned covariates. ``TSDataset`` groups several named series built
from a long ``[unique_id, ds, y, ...]`` frame.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from tsevalkit.core.errors import EContract, EIndex, ERange

_SEASON_LENGTHS: dict[str, int] = {
    "D": 7,
    "B": 5,
    "h": 24,
    "H": 24,
    "T": 60,
    "min": 60,
    "M": 12,
    "ME": 12,
    "MS": 12,
    "Q": 4,
    "QE": 4,
    "QS": 4,
    "W": 52,
}


def _normalize_freq_alias(freq: str) -> str:
    """Normalize deprecated pandas aliases to current forms."""
    hourly_match = re.fullmatch(r"(\d*)H", freq)
    if hourly_match:
        return f"{hourly_match.group(1)}h"

    monthly_match = re.fullmatch(r"(\d*)M", freq)
    if monthly_match:
        return f"{monthly_match.group(1)}ME"

    quarterly_match = re.fullmatch(r"(\d*)Q", freq)
    if quarterly_match:
        return f"{quarterly_match.group(1)}QE"

    return freq


def season_length_for(freq: str) -> int:
    """Infer the seasonal period from a frequency alias (1 when unknown)."""
    base = freq.lstrip("0123456789").split("-")[0]
    return _SEASON_LENGTHS.get(base, 1)


def _infer_freq(index: pd.DatetimeIndex, name: str) -> str:
    if len(index) < 3:
        raise EContract(
            f"Cannot infer frequency of series '{name}' from {len(index)} timestamps",
            context={"series_id": name},
            fix_hint="Pass freq explicitly",
        )
    freq = pd.infer_freq(index)
    if freq is None:
        raise EContract(
            f"Timestamps of series '{name}' are not equally spaced",
            context={"series_id": name, "start": str(index[0]), "end": str(index[-1])},
            fix_hint="Pass freq explicitly and fill gaps with fill_value",
        )
    return freq


def _infer_gapped_freq(index: pd.DatetimeIndex, name: str) -> str:
    """Infer the grid of a series that may have missing periods.

    The first three consecutive, equally spaced timestamps give the candidate
    frequency; every timestamp must then lie on that grid.
    """
    for start in range(len(index) - 2):
        freq = pd.infer_freq(index[start : start + 3])
        if freq is None:
            continue
        grid = pd.date_range(start=index[0], end=index[-1], freq=freq)
        if index.isin(grid).all():
            return freq
    return _infer_freq(index, name)


@dataclass(frozen=True)
class TimeSeries:
    """One named series on a regular time grid.

    Values may contain NaN for periods that were not observed; the grid
    itself must be complete, strictly increasing and duplicate-free.
    """

    name: str
    index: pd.DatetimeIndex
    values: np.ndarray
    freq: str
    covariates: pd.DataFrame | None = None

    def __post_init__(self) -> None:
        index = pd.DatetimeIndex(self.index)
        values = np.array(self.values, dtype=float)
        freq = _normalize_freq_alias(self.freq)

        if values.ndim != 1 or len(values) != len(index):
            raise EContract(
                f"Series '{self.name}' has {len(index)} timestamps but {values.size} values",
                context={"series_id": self.name},
            )
        if len(index) == 0:
            raise EContract(f"Series '{self.name}' is empty", context={"series_id": self.name})
        if index.has_duplicates:
            raise EContract(
                f"Series '{self.name}' has duplicate timestamps",
                context={"series_id": self.name},
            )
        expected = pd.date_range(start=index[0], periods=len(index), freq=freq)
        if not index.equals(expected):
            raise EContract(
                f"Series '{self.name}' is not strictly increasing and equally spaced at freq '{freq}'",
                context={"series_id": self.name, "freq": freq},
                fix_hint="Sort by ds and fill gaps with fill_value",
            )

        covariates = self.covariates
        if covariates is not None:
            if len(covariates) != len(index):
                raise EContract(
                    f"Covariates of series '{self.name}' are not aligned to its index",
                    context={"series_id": self.name, "n_rows": len(covariates)},
                )
            covariates = covariates.copy()
            covariates.index = expected
            covariates.index.name = "ds"

        values.setflags(write=False)
        object.__setattr__(self, "index", expected)
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "freq", freq)
        object.__setattr__(self, "covariates", covariates)

    @classmethod
    def from_values(
        cls,
        values: Sequence[float] | np.ndarray,
        start: str | pd.Timestamp = "2000-01-01",
        freq: str = "MS",
        name: str = "series",
        covariates: Mapping[str, Sequence[float]] | pd.DataFrame | None = None,
    ) -> TimeSeries:
        """Build a series from raw values starting at ``start``."""
        index = pd.date_range(start=start, periods=len(values), freq=_normalize_freq_alias(freq))
        cov_df = None
        if covariates is not None:
            cov_df = pd.DataFrame(covariates)
            cov_df = cov_df.reset_index(drop=True)
        return cls(name=name, index=index, values=np.asarray(values), freq=freq, covariates=cov_df)

    def __len__(self) -> int:
        return len(self.values)

    def length(self) -> int:
        """Number of periods."""
        return len(self.values)

    @property
    def season_length(self) -> int:
        return season_length_for(self.freq)

    @property
    def covariate_columns(self) -> list[str]:
        if self.covariates is None:
            return []
        return list(self.covariates.columns)

    @property
    def start(self) -> pd.Timestamp:
        return self.index[0]

    @property
    def end(self) -> pd.Timestamp:
        return self.index[-1]

    def at(self, offset: int) -> tuple[pd.Timestamp, float]:
        """Return ``(timestamp, value)`` at a 0-based offset."""
        if offset < 0 or offset >= len(self):
            raise EIndex(
                f"Offset {offset} is out of bounds for series '{self.name}' of length {len(self)}",
                context={"series_id": self.name, "offset": offset, "length": len(self)},
            )
        return self.index[offset], float(self.values[offset])

    def window(self, start: int, stop: int) -> TimeSeries:
        """Return the sub-series at offsets ``[start, stop)``."""
        if start < 0 or stop > len(self) or start > stop:
            raise ERange(
                f"Window [{start}, {stop}) is outside series '{self.name}' of length {len(self)}",
                context={"series_id": self.name, "start": start, "stop": stop, "length": len(self)},
            )
        if start == stop:
            raise ERange(
                f"Window [{start}, {stop}) of series '{self.name}' is empty",
                context={"series_id": self.name, "start": start, "stop": stop},
            )
        covariates = None
        if self.covariates is not None:
            covariates = self.covariates.iloc[start:stop]
        return TimeSeries(
            name=self.name,
            index=self.index[start:stop],
            values=self.values[start:stop],
            freq=self.freq,
            covariates=covariates,
        )

    def head(self, n: int) -> TimeSeries:
        return self.window(0, n)

    def slice(self, start: Any, end: Any) -> TimeSeries:
        """Return the sub-series between two timestamps, both inclusive."""
        start_ts = pd.Timestamp(start)
        end_ts = pd.Timestamp(end)
        for bound in (start_ts, end_ts):
            if bound not in self.index:
                raise ERange(
                    f"Timestamp {bound} is not on the grid of series '{self.name}'",
                    context={
                        "series_id": self.name,
                        "timestamp": str(bound),
                        "grid_start": str(self.start),
                        "grid_end": str(self.end),
                        "freq": self.freq,
                    },
                )
        i = self.index.get_loc(start_ts)
        j = self.index.get_loc(end_ts)
        if i > j:
            raise ERange(
                f"Slice start {start_ts} is after end {end_ts}",
                context={"series_id": self.name},
            )
        return self.window(i, j + 1)

    def future_index(self, h: int) -> pd.DatetimeIndex:
        """Next ``h`` timestamps after the end of the series."""
        return pd.date_range(start=self.end, periods=h + 1, freq=self.freq)[1:]

    def to_series(self) -> pd.Series:
        return pd.Series(self.values, index=self.index, name=self.name)

    def to_frame(self) -> pd.DataFrame:
        """Long-format frame ``[unique_id, ds, y, <covariates>]``."""
        df = pd.DataFrame({"unique_id": self.name, "ds": self.index, "y": self.values})
        if self.covariates is not None:
            cov = self.covariates.reset_index(drop=True)
            df = pd.concat([df, cov], axis=1)
        return df


@dataclass(frozen=True)
class TSDataset:
    """Ordered collection of named series sharing one frequency."""

    series: dict[str, TimeSeries]
    freq: str

    def __post_init__(self) -> None:
        if not self.series:
            raise EContract("Dataset contains no series")

    def __iter__(self) -> Iterator[TimeSeries]:
        return iter(self.series.values())

    def __len__(self) -> int:
        return len(self.series)

    def __getitem__(self, unique_id: str) -> TimeSeries:
        return self.series[unique_id]

    @property
    def ids(self) -> list[str]:
        return list(self.series)

    @property
    def n_series(self) -> int:
        return len(self.series)

    @property
    def min_length(self) -> int:
        return min(len(s) for s in self.series.values())

    @classmethod
    def from_series(cls, series: Sequence[TimeSeries]) -> TSDataset:
        if not series:
            raise EContract("Dataset contains no series")
        names = [s.name for s in series]
        if len(set(names)) != len(names):
            raise EContract("Series names must be unique", context={"names": names})
        freqs = {s.freq for s in series}
        if len(freqs) > 1:
            raise EContract("All series must share one frequency", context={"freqs": sorted(freqs)})
        return cls(series={s.name: s for s in series}, freq=series[0].freq)

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        freq: str | None = None,
        covariates: Sequence[str] = (),
        fill_value: float | None = None,
    ) -> TSDataset:
        """Create a dataset from a long frame with validation.

        Args:
            df: Frame with ``unique_id``, ``ds``, ``y`` and the covariate columns
            freq: Pandas frequency alias; inferred from the first series if omitted
            covariates: Names of the covariate columns to keep
            fill_value: Sentinel used to complete gaps in the grid. Gaps are
                rejected when ``None``.
        """
        required = ["unique_id", "ds", "y", *covariates]
        missing = [c for c in required if c not in df.columns]
        if missing:
            raise EContract(
                f"Missing required columns: {missing}",
                context={"required": required, "found": list(df.columns)},
            )
        if len(df) == 0:
            raise EContract("DataFrame is empty")
        for col in ("unique_id", "ds"):
            null_count = int(df[col].isnull().sum())
            if null_count > 0:
                raise EContract(
                    f"Column '{col}' has {null_count} null values",
                    fix_hint="Remove or fill null values in key columns",
                )

        work = df[required].copy()
        work["ds"] = pd.to_datetime(work["ds"])
        duplicated = work.duplicated(subset=["unique_id", "ds"])
        if duplicated.any():
            raise EContract(
                f"Found {int(duplicated.sum())} duplicate (unique_id, ds) rows",
                context={"examples": work.loc[duplicated, ["unique_id", "ds"]].head(3).to_dict("records")},
                fix_hint="Deduplicate upstream before evaluation",
            )
        work = work.sort_values(["unique_id", "ds"]).reset_index(drop=True)

        series: list[TimeSeries] = []
        for uid, group in work.groupby("unique_id", sort=True):
            index = pd.DatetimeIndex(group["ds"])
            if freq:
                series_freq = _normalize_freq_alias(freq)
            elif fill_value is not None:
                series_freq = _infer_gapped_freq(index, str(uid))
            else:
                series_freq = _infer_freq(index, str(uid))
            frame = group.set_index("ds")
            if fill_value is not None:
                grid = pd.date_range(start=index[0], end=index[-1], freq=series_freq)
                frame = frame.reindex(grid)
                frame[["y", *covariates]] = frame[["y", *covariates]].fillna(fill_value)
            cov_df = frame[list(covariates)].reset_index(drop=True) if covariates else None
            series.append(
                TimeSeries(
                    name=str(uid),
                    index=pd.DatetimeIndex(frame.index),
                    values=frame["y"].to_numpy(dtype=float),
                    freq=series_freq,
                    covariates=cov_df,
                )
            )
        return cls.from_series(series)

    def to_frame(self) -> pd.DataFrame:
        return pd.concat([s.to_frame() for s in self.series.values()], ignore_index=True)


__all__ = ["TimeSeries", "TSDataset", "season_length_for"]
