"""Pydantic model declarations.

Model specifications are static configuration: they can be written as plain
dicts (or JSON) and are validated once, up front, before any fitting.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tsevalkit.models.transforms import TransformName

ModelFamily = Literal[
    "naive",
    "seasonal_naive",
    "drift",
    "mean",
    "linear",
    "ets",
    "arima",
]

# Families that take no regressors at all
BENCHMARK_FAMILIES: frozenset[str] = frozenset({"naive", "seasonal_naive", "drift", "mean"})


class BaseSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ExogenousTerm(BaseSpec):
    """A named covariate column, optionally lagged by ``lag`` periods."""

    column: str = Field(..., min_length=1)
    lag: int = Field(0, ge=0)

    @property
    def name(self) -> str:
        return f"{self.column}_lag{self.lag}" if self.lag else self.column


class PredictorSpec(BaseSpec):
    trend: bool = False
    season: bool = False
    exogenous: tuple[ExogenousTerm, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _normalize_exogenous(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        payload = dict(data)
        terms = payload.get("exogenous")
        if terms is not None:
            # Bare column names are shorthand for lag 0
            payload["exogenous"] = tuple(
                {"column": t} if isinstance(t, str) else t for t in terms
            )
        return payload

    @model_validator(mode="after")
    def _check_unique_terms(self) -> PredictorSpec:
        names = [t.name for t in self.exogenous]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate exogenous terms: {names}")
        return self

    @property
    def is_empty(self) -> bool:
        return not (self.trend or self.season or self.exogenous)


class ModelSpec(BaseSpec):
    """Declaration of one candidate forecasting model.

    Attributes:
        name: Unique key within a registry (e.g. "naive", "arima_exo_lag1")
        family: Fitting routine
        transform: Response transform applied before fitting
        predictors: Trend, seasonal dummies and exogenous covariates
        season_length: Seasonal period (None = inferred from the series freq)
        options: Extra keyword options for the family routine
    """

    name: str = Field(..., min_length=1)
    family: ModelFamily
    transform: TransformName = "identity"
    predictors: PredictorSpec = Field(default_factory=PredictorSpec)
    season_length: int | None = Field(None, gt=0)
    options: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_family_predictors(self) -> ModelSpec:
        if self.family in BENCHMARK_FAMILIES and not self.predictors.is_empty:
            raise ValueError(f"Family '{self.family}' does not take predictors")
        if self.family == "ets" and self.predictors.exogenous:
            raise ValueError("Family 'ets' does not take exogenous predictors")
        return self

    @property
    def exogenous(self) -> tuple[ExogenousTerm, ...]:
        return self.predictors.exogenous

    @property
    def covariate_columns(self) -> list[str]:
        return sorted({t.column for t in self.predictors.exogenous})

    @property
    def max_lag(self) -> int:
        return max((t.lag for t in self.predictors.exogenous), default=0)


__all__ = [
    "BENCHMARK_FAMILIES",
    "BaseSpec",
    "ExogenousTerm",
    "ModelFamily",
    "ModelSpec",
    "PredictorSpec",
]
