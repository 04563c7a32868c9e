"""Core error types with rich context.

Every error carries an ``error_code``, a free-form ``context`` dict and a
``fix_hint``. Errors split into two groups:

* run-level errors (``EContract``, ``ERange``, ``EIndex``, ``EConfig``) mean the
  whole evaluation is ill-posed and always propagate;
* cell-level errors (``EFit``, ``EMissingCovariate``, ``ENoOverlap``,
  ``EUndefinedSkill``) are scoped to a single (model, partition) pair and are
  recorded as missing results by the backtest engine.
"""

from __future__ import annotations

from typing import Any


class TSEvalKitError(Exception):
    """Base exception with rich context."""

    error_code: str = "E_UNKNOWN"
    fix_hint: str = ""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        fix_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        if fix_hint:
            self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [f"[{self.error_code}] {self.message}"]
        if self.context:
            parts.append(f"(context: {self.context})")
        if self.fix_hint:
            parts.append(f"[hint: {self.fix_hint}]")
        return " ".join(parts)


class EContract(TSEvalKitError, ValueError):
    """Input data violates contract requirements."""

    error_code = "E_CONTRACT_VIOLATION"
    fix_hint = "DataFrame must have [unique_id, ds, y] columns on a regular, duplicate-free grid"


class ERange(TSEvalKitError, IndexError):
    """Slice bounds fall outside the series grid."""

    error_code = "E_RANGE"
    fix_hint = "Use timestamps that exist on the series index"


class EIndex(TSEvalKitError, IndexError):
    """Offset outside the series bounds."""

    error_code = "E_INDEX"
    fix_hint = "Offsets are 0-based and must be smaller than the series length"


class EConfig(TSEvalKitError, ValueError):
    """Evaluation or split configuration is invalid."""

    error_code = "E_CONFIG"
    fix_hint = "Check test_fraction, initial_size, step and h against the series length"


class EFit(TSEvalKitError):
    """A model could not be fit on a training partition."""

    error_code = "E_FIT_FAILED"
    fix_hint = "Check model family and predictors against the training length and values"


class EMissingCovariate(TSEvalKitError):
    """Future covariate values required by an exogenous model are missing."""

    error_code = "E_MISSING_COVARIATE"
    fix_hint = "Pass future_covariates covering every forecast timestamp"


class ENoOverlap(TSEvalKitError):
    """Forecast and realized values share no timestamp."""

    error_code = "E_NO_OVERLAP"
    fix_hint = "The partition has no ground truth left; it cannot be scored"


class EUndefinedSkill(TSEvalKitError):
    """Skill score denominator (baseline score) is zero."""

    error_code = "E_UNDEFINED_SKILL"
    fix_hint = "Choose a baseline model whose score is non-zero"


# Errors that only invalidate a single (model, partition) cell
CELL_ERRORS: tuple[type[TSEvalKitError], ...] = (
    EFit,
    EMissingCovariate,
    ENoOverlap,
)

# Error registry for lookup
ERROR_REGISTRY: dict[str, type[TSEvalKitError]] = {
    cls.error_code: cls
    for cls in (
        EContract,
        ERange,
        EIndex,
        EConfig,
        EFit,
        EMissingCovariate,
        ENoOverlap,
        EUndefinedSkill,
    )
}


def get_error_class(error_code: str) -> type[TSEvalKitError]:
    """Get error class by code."""
    return ERROR_REGISTRY.get(error_code, TSEvalKitError)


__all__ = [
    "TSEvalKitError",
    "EContract",
    "ERange",
    "EIndex",
    "EConfig",
    "EFit",
    "EMissingCovariate",
    "ENoOverlap",
    "EUndefinedSkill",
    "CELL_ERRORS",
    "ERROR_REGISTRY",
    "get_error_class",
]
