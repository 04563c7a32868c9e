"""API discovery and introspection for tsevalkit.

Provides ``describe()`` which returns a machine-readable schema of the
library's public surface: version, entry points, model families,
transforms, metrics and error codes with fix hints.

Usage:
    >>> from tsevalkit import describe
    >>> info = describe()
    >>> sorted(info["families"])[:2]
    ['arima', 'drift']
"""

from __future__ import annotations

from typing import Any


def describe() -> dict[str, Any]:
    """Return a machine-readable API schema for tsevalkit.

    Returns:
        Structured dict describing the public surface.
    """
    import tsevalkit

    return {
        "version": tsevalkit.__version__,
        "apis": _get_apis(),
        "families": _get_families(),
        "transforms": _get_transforms(),
        "metrics": _get_metrics(),
        "error_codes": _get_error_codes(),
    }


def _get_apis() -> dict[str, dict[str, str]]:
    return {
        "build_dataset": {
            "function": "build_dataset",
            "description": "Construct an immutable TSDataset from a long DataFrame",
        },
        "evaluate_holdout": {
            "function": "evaluate_holdout",
            "description": "Single train/test split evaluation and ranking",
        },
        "evaluate_rolling": {
            "function": "evaluate_rolling",
            "description": "Rolling-origin cross-validation and ranking",
        },
        "forecast": {
            "function": "forecast",
            "description": "Refit on the full history and forecast h periods ahead",
        },
    }


def _get_families() -> dict[str, str]:
    from tsevalkit.models.registry import FAMILY_ADAPTERS

    return dict(FAMILY_ADAPTERS)


def _get_transforms() -> list[str]:
    from tsevalkit.models.transforms import TRANSFORMS

    return list(TRANSFORMS)


def _get_metrics() -> dict[str, dict[str, Any]]:
    from tsevalkit.backtest.metrics import METRIC_DIRECTIONS

    return {
        name: {"higher_is_better": higher}
        for name, higher in METRIC_DIRECTIONS.items()
    }


def _get_error_codes() -> dict[str, dict[str, str]]:
    """Return all error codes with descriptions and fix hints."""
    from tsevalkit.core.errors import ERROR_REGISTRY

    result: dict[str, dict[str, str]] = {}
    for code, cls in ERROR_REGISTRY.items():
        result[code] = {
            "class": cls.__name__,
            "description": cls.__doc__ or "",
            "fix_hint": cls.fix_hint,
        }
    return result


__all__ = ["describe"]
