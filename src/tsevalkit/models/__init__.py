"""Model declarations, registry and the fit/predict protocol."""

from tsevalkit.models.distribution import PredictiveDistribution
from tsevalkit.models.protocol import FittedModel, fit, predict
from tsevalkit.models.registry import FAMILY_ADAPTERS, ModelRegistry, list_families, load_adapter
from tsevalkit.models.spec import ExogenousTerm, ModelSpec, PredictorSpec
from tsevalkit.models.transforms import TRANSFORMS, get_transform

__all__ = [
    "ModelSpec",
    "PredictorSpec",
    "ExogenousTerm",
    "ModelRegistry",
    "FAMILY_ADAPTERS",
    "list_families",
    "load_adapter",
    "FittedModel",
    "fit",
    "predict",
    "PredictiveDistribution",
    "TRANSFORMS",
    "get_transform",
]
