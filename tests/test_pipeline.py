"""Tests for the top-level pipeline functions."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tsevalkit import (
    EConfig,
    EContract,
    EFit,
    EMissingCovariate,
    EvalConfig,
    TSDataset,
    build_dataset,
    evaluate_holdout,
    evaluate_rolling,
    forecast,
)


@pytest.fixture
def sales_df() -> pd.DataFrame:
    """Two monthly series with a known price covariate."""
    ds = pd.date_range("2019-01-01", periods=36, freq="MS")
    rng = np.random.default_rng(11)
    frames = []
    for uid, base in (("A", 100.0), ("B", 60.0)):
        price = 10 + rng.uniform(-1, 1, 36)
        y = base - 2.0 * price + 5 * np.sin(2 * np.pi * np.arange(36) / 12) + rng.normal(0, 0.5, 36)
        frames.append(pd.DataFrame({"unique_id": uid, "ds": ds, "y": y, "price": price}))
    return pd.concat(frames, ignore_index=True)


MODELS = [
    {"name": "naive", "family": "naive"},
    {"name": "snaive", "family": "seasonal_naive"},
    {"name": "mean", "family": "mean"},
]


class TestBuildDataset:
    def test_builds_series(self, sales_df):
        dataset = build_dataset(sales_df, freq="MS", covariates=["price"])
        assert isinstance(dataset, TSDataset)
        assert dataset.ids == ["A", "B"]
        assert dataset["A"].covariate_columns == ["price"]

    def test_missing_covariate_column(self, sales_df):
        with pytest.raises(EContract, match="Missing required columns"):
            build_dataset(sales_df, covariates=["promo"])


class TestEvaluate:
    """Holdout and rolling entry points."""

    def test_holdout_from_dataframe(self, sales_df):
        report = evaluate_holdout(sales_df[["unique_id", "ds", "y"]], MODELS, EvalConfig.holdout(0.25))
        assert report.strategy == "holdout"
        assert report.n_partitions == 2
        assert set(report.ranking["model"]) == {"naive", "snaive", "mean"}
        assert report.failures.empty

    def test_rolling_default_initial_size(self, sales_df):
        """Monthly data: the first origin trains on two seasonal cycles."""
        report = evaluate_rolling(sales_df, MODELS, EvalConfig.rolling(h=3, step=5))
        cutoffs = [p.cutoff for p in report.partitions["A"]]
        assert cutoffs == [24, 29, 34]
        assert report.failures.empty

    def test_exogenous_model(self, sales_df):
        dataset = build_dataset(sales_df, covariates=["price"])
        models = [
            {"name": "naive", "family": "naive"},
            {
                "name": "price_reg",
                "family": "linear",
                "predictors": {"season": True, "exogenous": ["price"]},
            },
        ]
        report = evaluate_holdout(dataset, models, EvalConfig.holdout(0.25))
        assert report.failures.empty
        assert report.best_model == "price_reg"

    def test_default_config_without_naive(self, sales_df):
        """Without a config and a naive model, the run skips skill scores."""
        report = evaluate_holdout(sales_df, [{"name": "m", "family": "mean"}])
        assert report.config.baseline is None
        assert not report.records["metric"].str.startswith("skill_").any()
        assert report.ranking["model"].tolist() == ["m"]

    def test_default_config_keeps_naive_baseline(self, sales_df):
        report = evaluate_rolling(sales_df, MODELS)
        assert report.config.baseline == "naive"
        assert "skill_crps" in set(report.records["metric"])

    def test_explicit_unregistered_baseline(self, sales_df):
        """An explicit config is used as given."""
        with pytest.raises(EConfig, match="not registered"):
            evaluate_holdout(sales_df, [{"name": "m", "family": "mean"}], EvalConfig.holdout())

    def test_invalid_models(self, sales_df):
        with pytest.raises(ValueError):
            evaluate_holdout(sales_df, [{"name": "x", "family": "prophet"}])


class TestForecast:
    """Refit on full history and forecast ahead."""

    def test_forecast_table(self, sales_df):
        result = forecast(sales_df[["unique_id", "ds", "y"]], MODELS, h=4)
        assert len(result) == 2 * 3 * 4
        assert {"unique_id", "model", "ds", "yhat", "lo-80", "hi-95"} <= set(result.columns)
        a_mean = result[(result["unique_id"] == "A") & (result["model"] == "mean")]
        expected = sales_df.loc[sales_df["unique_id"] == "A", "y"].mean()
        assert a_mean["yhat"].tolist() == pytest.approx([expected] * 4)
        assert a_mean["ds"].min() == pd.Timestamp("2022-01-01")

    def test_future_covariates(self, sales_df):
        dataset = build_dataset(sales_df, covariates=["price"])
        models = [
            {"name": "reg", "family": "linear", "predictors": {"season": True, "exogenous": ["price"]}}
        ]

        def future(price: float) -> pd.DataFrame:
            return pd.DataFrame(
                {
                    "unique_id": ["A"] * 2 + ["B"] * 2,
                    "ds": list(pd.date_range("2022-01-01", periods=2, freq="MS")) * 2,
                    "price": [price] * 4,
                }
            )

        cheap = forecast(dataset, models, h=2, future_covariates=future(9.0))
        dear = forecast(dataset, models, h=2, future_covariates=future(11.0))
        assert len(cheap) == 4
        # Higher price, lower sales
        assert (dear["yhat"].to_numpy() < cheap["yhat"].to_numpy()).all()

    def test_missing_future_covariates(self, sales_df):
        dataset = build_dataset(sales_df, covariates=["price"])
        models = [{"name": "reg", "family": "linear", "predictors": {"exogenous": ["price"]}}]
        with pytest.raises(EMissingCovariate):
            forecast(dataset, models, h=2)

    def test_lagged_covariate_needs_no_future(self, sales_df):
        """A lag-1 covariate is known one step ahead."""
        dataset = build_dataset(sales_df, covariates=["price"])
        models = [
            {"name": "reg", "family": "linear", "predictors": {"exogenous": [{"column": "price", "lag": 1}]}}
        ]
        result = forecast(dataset, models, h=1)
        assert len(result) == 2

    def test_horizon_must_be_positive(self, sales_df):
        with pytest.raises(EConfig):
            forecast(sales_df, MODELS, h=0)

    def test_fit_errors_propagate(self):
        short = pd.DataFrame(
            {"unique_id": "s", "ds": pd.date_range("2020-01-01", periods=5, freq="MS"), "y": np.arange(5.0)}
        )
        with pytest.raises(EFit):
            forecast(short, [{"name": "snaive", "family": "seasonal_naive"}], h=2)
