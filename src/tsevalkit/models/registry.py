"""Model registry.

``FAMILY_ADAPTERS`` is the single source of truth for model families: adding a
family requires only an adapter module and an entry here. ``ModelRegistry``
holds the candidate ``ModelSpec`` declarations of one evaluation run.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterable, Iterator, Mapping
from types import ModuleType
from typing import Any

from tsevalkit.core.errors import EConfig
from tsevalkit.models.spec import ModelSpec

FAMILY_ADAPTERS: dict[str, str] = {
    "naive": "tsevalkit.models.adapters.baseline.naive",
    "seasonal_naive": "tsevalkit.models.adapters.baseline.seasonal",
    "drift": "tsevalkit.models.adapters.baseline.drift",
    "mean": "tsevalkit.models.adapters.baseline.mean",
    "linear": "tsevalkit.models.adapters.linear",
    "ets": "tsevalkit.models.adapters.ets",
    "arima": "tsevalkit.models.adapters.arima",
}


def list_families() -> list[str]:
    """List registered model families."""
    return list(FAMILY_ADAPTERS)


def load_adapter(family: str) -> ModuleType:
    """Import the adapter module of a family.

    Raises:
        KeyError: If the family is not registered
    """
    if family not in FAMILY_ADAPTERS:
        available = ", ".join(list_families())
        raise KeyError(f"Family '{family}' not found. Available: {available}")
    return importlib.import_module(FAMILY_ADAPTERS[family])


class ModelRegistry:
    """Ordered, name-unique collection of model specifications.

    Example:
        >>> registry = ModelRegistry.from_specs([
        ...     {"name": "naive", "family": "naive"},
        ...     {"name": "trend", "family": "linear", "predictors": {"trend": True}},
        ... ])
        >>> registry.names
        ['naive', 'trend']
    """

    def __init__(self, specs: Iterable[ModelSpec] = ()) -> None:
        self._specs: dict[str, ModelSpec] = {}
        for spec in specs:
            self.register(spec)

    @classmethod
    def from_specs(cls, specs: Iterable[ModelSpec | Mapping[str, Any]]) -> ModelRegistry:
        """Build a registry from specs or plain dicts."""
        return cls(
            spec if isinstance(spec, ModelSpec) else ModelSpec.model_validate(dict(spec))
            for spec in specs
        )

    def register(self, spec: ModelSpec) -> None:
        if spec.name in self._specs:
            raise EConfig(
                f"Model name '{spec.name}' is already registered",
                context={"registered": self.names},
                fix_hint="Model names must be unique within a run",
            )
        self._specs[spec.name] = spec

    def get(self, name: str) -> ModelSpec:
        if name not in self._specs:
            available = ", ".join(self.names)
            raise KeyError(f"Model '{name}' not found. Available: {available}")
        return self._specs[name]

    @property
    def names(self) -> list[str]:
        return list(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[ModelSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


__all__ = [
    "FAMILY_ADAPTERS",
    "ModelRegistry",
    "list_families",
    "load_adapter",
]
