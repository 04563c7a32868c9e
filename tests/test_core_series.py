"""Tests for the TimeSeries and TSDataset containers."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tsevalkit import EContract, EIndex, ERange, TimeSeries, TSDataset, build_dataset
from tsevalkit.core.series import season_length_for

MONTHLY = [10, 12, 9, 14, 11, 13, 10, 15, 12, 16, 13, 17]


@pytest.fixture
def monthly() -> TimeSeries:
    return TimeSeries.from_values(MONTHLY, start="2020-01-01", freq="MS", name="counts")


def _long_frame(n: int = 12, ids: tuple[str, ...] = ("A", "B")) -> pd.DataFrame:
    frames = []
    for i, uid in enumerate(ids):
        frames.append(
            pd.DataFrame(
                {
                    "unique_id": uid,
                    "ds": pd.date_range("2020-01-01", periods=n, freq="MS"),
                    "y": np.arange(n, dtype=float) + 10 * i,
                    "price": np.linspace(1.0, 2.0, n),
                }
            )
        )
    return pd.concat(frames, ignore_index=True)


class TestTimeSeries:
    """Test construction and invariants."""

    def test_from_values(self, monthly):
        """Values and grid are built from a start and frequency."""
        assert len(monthly) == 12
        assert monthly.length() == 12
        assert monthly.start == pd.Timestamp("2020-01-01")
        assert monthly.end == pd.Timestamp("2020-12-01")
        assert monthly.season_length == 12

    def test_values_read_only(self, monthly):
        """Values cannot be mutated in place."""
        with pytest.raises(ValueError):
            monthly.values[0] = 99.0

    def test_duplicate_timestamps_rejected(self):
        """Duplicate timestamps violate the grid contract."""
        index = pd.DatetimeIndex(["2020-01-01", "2020-01-01", "2020-02-01"])
        with pytest.raises(EContract, match="duplicate"):
            TimeSeries(name="x", index=index, values=[1.0, 2.0, 3.0], freq="MS")

    def test_gap_rejected(self):
        """A missing period violates the grid contract."""
        index = pd.DatetimeIndex(["2020-01-01", "2020-02-01", "2020-04-01"])
        with pytest.raises(EContract, match="equally spaced"):
            TimeSeries(name="x", index=index, values=[1.0, 2.0, 3.0], freq="MS")

    def test_length_mismatch_rejected(self):
        """Values and timestamps must align."""
        index = pd.date_range("2020-01-01", periods=3, freq="MS")
        with pytest.raises(EContract):
            TimeSeries(name="x", index=index, values=[1.0, 2.0], freq="MS")


class TestTimeSeriesAccess:
    """Test offset and label access."""

    def test_at(self, monthly):
        """at() returns (timestamp, value) at a 0-based offset."""
        ts, value = monthly.at(3)
        assert ts == pd.Timestamp("2020-04-01")
        assert value == 14.0

    @pytest.mark.parametrize("offset", [-1, 12, 100])
    def test_at_out_of_bounds(self, monthly, offset):
        """Out-of-bounds offsets raise EIndex, also a builtin IndexError."""
        with pytest.raises(EIndex):
            monthly.at(offset)
        with pytest.raises(IndexError):
            monthly.at(offset)

    def test_window(self, monthly):
        """window() slices offsets [start, stop)."""
        window = monthly.window(2, 5)
        assert list(window.values) == [9.0, 14.0, 11.0]
        assert window.start == pd.Timestamp("2020-03-01")
        assert window.freq == monthly.freq

    @pytest.mark.parametrize(("start", "stop"), [(-1, 3), (0, 13), (5, 2), (4, 4)])
    def test_window_out_of_range(self, monthly, start, stop):
        """Invalid or empty windows raise ERange."""
        with pytest.raises(ERange):
            monthly.window(start, stop)

    def test_slice_inclusive(self, monthly):
        """slice() is label based and inclusive on both ends."""
        part = monthly.slice("2020-10-01", "2020-12-01")
        assert list(part.values) == [16.0, 13.0, 17.0]

    def test_slice_off_grid(self, monthly):
        """Bounds must lie on the grid."""
        with pytest.raises(ERange):
            monthly.slice("2020-01-15", "2020-03-01")
        with pytest.raises(ERange):
            monthly.slice("2019-12-01", "2020-03-01")

    def test_slice_reversed(self, monthly):
        """start after end is a range error."""
        with pytest.raises(ERange):
            monthly.slice("2020-05-01", "2020-03-01")

    def test_future_index(self, monthly):
        """future_index continues the grid."""
        future = monthly.future_index(2)
        assert list(future) == [pd.Timestamp("2021-01-01"), pd.Timestamp("2021-02-01")]

    def test_window_keeps_covariates_aligned(self):
        """Covariates are sliced with the values."""
        series = TimeSeries.from_values(
            [1.0, 2.0, 3.0, 4.0],
            freq="D",
            covariates={"price": [10.0, 20.0, 30.0, 40.0]},
        )
        window = series.window(1, 3)
        assert list(window.covariates["price"]) == [20.0, 30.0]
        assert window.covariates.index.equals(window.index)


class TestSeasonLength:
    """Test seasonal period inference."""

    @pytest.mark.parametrize(
        ("freq", "expected"),
        [("MS", 12), ("ME", 12), ("QS", 4), ("W-SUN", 52), ("D", 7), ("h", 24), ("YS", 1)],
    )
    def test_season_length_for(self, freq, expected):
        assert season_length_for(freq) == expected


class TestTSDataset:
    """Test building datasets from long frames."""

    def test_from_dataframe(self):
        """Series are grouped by unique_id with an inferred frequency."""
        dataset = TSDataset.from_dataframe(_long_frame(), covariates=["price"])
        assert dataset.ids == ["A", "B"]
        assert dataset.n_series == 2
        assert dataset["B"].values[0] == 10.0
        assert dataset["A"].covariate_columns == ["price"]
        assert dataset.min_length == 12

    def test_undeclared_covariates_dropped(self):
        """Only declared covariate columns are carried."""
        dataset = TSDataset.from_dataframe(_long_frame())
        assert dataset["A"].covariates is None

    def test_missing_columns(self):
        """Required columns are checked."""
        df = _long_frame().drop(columns=["y"])
        with pytest.raises(EContract, match="Missing required columns"):
            TSDataset.from_dataframe(df)

    def test_missing_covariate_column(self):
        """Declared covariates must exist."""
        with pytest.raises(EContract, match="Missing required columns"):
            TSDataset.from_dataframe(_long_frame(), covariates=["promo"])

    def test_empty_frame(self):
        with pytest.raises(EContract, match="empty"):
            TSDataset.from_dataframe(_long_frame().iloc[0:0])

    def test_duplicates_rejected(self):
        """Duplicate (unique_id, ds) rows are rejected."""
        df = _long_frame()
        df = pd.concat([df, df.iloc[[0]]], ignore_index=True)
        with pytest.raises(EContract, match="duplicate"):
            TSDataset.from_dataframe(df)

    def test_gap_rejected_without_fill_value(self):
        """Gaps in the grid are rejected by default."""
        df = _long_frame(ids=("A",)).drop(index=[5])
        with pytest.raises(EContract):
            TSDataset.from_dataframe(df, freq="MS")

    def test_gap_filled_with_fill_value(self):
        """fill_value completes the grid with a sentinel."""
        df = _long_frame(ids=("A",)).drop(index=[5])
        dataset = TSDataset.from_dataframe(df, freq="MS", fill_value=0.0)
        series = dataset["A"]
        assert len(series) == 12
        assert series.values[5] == 0.0
        assert series.values[6] == 6.0

    def test_gap_filled_with_inferred_freq(self):
        """Without freq, the grid is inferred from the observed timestamps."""
        df = _long_frame(ids=("A",)).drop(index=[5])
        dataset = build_dataset(df, fill_value=0.0)
        series = dataset["A"]
        assert series.freq == "MS"
        assert len(series) == 12
        assert series.index[5] == pd.Timestamp("2020-06-01")
        assert series.values[5] == 0.0

    def test_gap_at_start_with_inferred_freq(self):
        """A gap among the first periods does not prevent inference."""
        df = _long_frame(ids=("A",)).drop(index=[1])
        series = build_dataset(df, fill_value=-1.0)["A"]
        assert len(series) == 12
        assert series.values[1] == -1.0

    def test_unsorted_input(self):
        """Rows are sorted by timestamp before building series."""
        df = _long_frame(ids=("A",)).sample(frac=1.0, random_state=0)
        dataset = TSDataset.from_dataframe(df)
        assert list(dataset["A"].values) == list(np.arange(12, dtype=float))

    def test_round_trip_frame(self):
        """to_frame restores the long layout."""
        df = _long_frame()
        dataset = TSDataset.from_dataframe(df, covariates=["price"])
        out = dataset.to_frame()
        assert list(out.columns) == ["unique_id", "ds", "y", "price"]
        assert len(out) == len(df)
