"""Core data containers, configuration and errors."""

from tsevalkit.core.config import EvalConfig
from tsevalkit.core.errors import (
    CELL_ERRORS,
    ERROR_REGISTRY,
    EConfig,
    EContract,
    EFit,
    EIndex,
    EMissingCovariate,
    ENoOverlap,
    ERange,
    EUndefinedSkill,
    TSEvalKitError,
    get_error_class,
)
from tsevalkit.core.series import TimeSeries, TSDataset, season_length_for

__all__ = [
    "EvalConfig",
    "TimeSeries",
    "TSDataset",
    "season_length_for",
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
