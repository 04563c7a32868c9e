"""Linear regression on trend, seasonal dummies and exogenous covariates.

Ordinary least squares with an intercept. Prediction variance follows the
standard regression formula ``sigma^2 * (1 + x0' (X'X)^-1 x0)``.

Coefficients come from ``numpy.linalg.lstsq``, so an exactly linear series is
reproduced to floating-point tolerance (e.g. ``[1..6]`` extends to
``[7.000000000000003, 8.000000000000004]``), not bit for bit.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from tsevalkit.core.errors import EFit
from tsevalkit.models.spec import ModelSpec


@dataclass(frozen=True)
class LinearParams:
    coef: np.ndarray
    xtx_inv: np.ndarray
    sigma2: float
    n_obs: int


def _with_intercept(X: np.ndarray | None, n_rows: int) -> np.ndarray:
    ones = np.ones((n_rows, 1))
    if X is None:
        return ones
    return np.hstack([ones, X])


def fit(y: np.ndarray, X: np.ndarray | None, spec: ModelSpec, season_length: int) -> LinearParams:
    design = _with_intercept(X, len(y))
    n, p = design.shape
    if n < p or np.linalg.matrix_rank(design) < p:
        raise EFit(
            f"Singular design matrix for model '{spec.name}' ({n} rows, {p} columns)",
            context={"model": spec.name, "n_obs": n, "n_params": p},
            fix_hint="Drop collinear predictors or use a longer training window",
        )
    coef, *_ = np.linalg.lstsq(design, y, rcond=None)
    residuals = y - design @ coef
    dof = n - p
    sigma2 = float(residuals @ residuals / dof) if dof > 0 else 0.0
    return LinearParams(
        coef=coef,
        xtx_inv=np.linalg.inv(design.T @ design),
        sigma2=sigma2,
        n_obs=n,
    )


def predict(params: LinearParams, h: int, X_future: np.ndarray | None = None) -> tuple[np.ndarray, np.ndarray]:
    design = _with_intercept(X_future, h)
    mu = design @ params.coef
    leverage = np.einsum("ij,jk,ik->i", design, params.xtx_inv, design)
    sigma = np.sqrt(np.maximum(params.sigma2 * (1 + leverage), 0.0))
    return mu, sigma
