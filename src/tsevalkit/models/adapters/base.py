"""Shared helpers for family adapters.

An adapter module exposes two pure functions on the modeling scale:

* ``fit(y, X, spec, season_length) -> params``
* ``predict(params, h, X_future) -> (mu, sigma)``

``params`` is a frozen dataclass specific to the family.
"""

from __future__ import annotations

import numpy as np
from scipy.stats import norm

from tsevalkit.core.errors import EFit
from tsevalkit.models.spec import ModelSpec


def require_length(y: np.ndarray, minimum: int, spec: ModelSpec) -> None:
    """Raise EFit when fewer than ``minimum`` training values are available."""
    if len(y) < minimum:
        raise EFit(
            f"Family '{spec.family}' needs at least {minimum} observations, got {len(y)}",
            context={"model": spec.name, "n_obs": len(y), "min_required": minimum},
        )


def residual_scale(residuals: np.ndarray) -> float:
    """Root mean square of the residuals (0 when there are none)."""
    residuals = np.asarray(residuals, dtype=float)
    if residuals.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(residuals**2)))


def sigma_from_interval(mean: np.ndarray, upper: np.ndarray, level: float) -> np.ndarray:
    """Recover the Gaussian scale from the upper bound of a central interval."""
    z = norm.ppf(0.5 + level / 200)
    return np.maximum((np.asarray(upper, dtype=float) - np.asarray(mean, dtype=float)) / z, 0.0)


__all__ = ["require_length", "residual_scale", "sigma_from_interval"]
