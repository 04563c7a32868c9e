"""Invertible response transforms.

Models are fit on ``forward(y)``; forecasts are mapped back with the
distribution-aware back-transform in ``tsevalkit.models.distribution``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np

from tsevalkit.core.errors import EFit

TransformName = Literal["identity", "log", "log1p"]


@dataclass(frozen=True)
class Transform:
    """Response transform ``z = log(y + shift)`` or the identity.

    Attributes:
        name: Transform name
        shift: Additive shift applied before the log (None = identity)
    """

    name: str
    shift: float | None = None

    @property
    def is_identity(self) -> bool:
        return self.shift is None

    def forward(self, y: np.ndarray) -> np.ndarray:
        y = np.asarray(y, dtype=float)
        if self.is_identity:
            return y.copy()
        shifted = y + self.shift
        if np.any(shifted <= 0):
            raise EFit(
                f"{self.name} transform needs y > {-self.shift:g}",
                context={"transform": self.name, "min_value": float(np.min(y))},
                fix_hint="Use transform='log1p' or 'identity' for series with zeros or negatives",
            )
        return np.log(shifted)

    def inverse(self, z: np.ndarray) -> np.ndarray:
        """Map modeling-scale quantiles back to the original scale."""
        z = np.asarray(z, dtype=float)
        if self.is_identity:
            return z.copy()
        return np.exp(z) - self.shift


TRANSFORMS: dict[str, Transform] = {
    "identity": Transform("identity"),
    "log": Transform("log", shift=0.0),
    "log1p": Transform("log1p", shift=1.0),
}


def get_transform(name: str) -> Transform:
    if name not in TRANSFORMS:
        raise KeyError(f"Unknown transform '{name}'. Available: {', '.join(TRANSFORMS)}")
    return TRANSFORMS[name]


__all__ = ["Transform", "TransformName", "TRANSFORMS", "get_transform"]
