"""
Reference conditional-distribution models.

These models implement the density evaluator and path simulator the risk
engine consumes, so the engine can be exercised end to end.
"""

from .base import ConditionalModel, ModelKind
from .iid import GaussianModel, StudentTModel
from .garch import GarchModel


MODEL_REGISTRY = {
    ModelKind.GAUSSIAN: GaussianModel,
    ModelKind.STUDENT_T: StudentTModel,
    ModelKind.GARCH: GarchModel
}


def create_model(kind, random_seed=None) -> ConditionalModel:
    """Instantiate a reference model by kind or kind name."""
    return MODEL_REGISTRY[ModelKind(kind)](random_seed=random_seed)


__all__ = [
    'ConditionalModel',
    'ModelKind',
    'GaussianModel',
    'StudentTModel',
    'GarchModel',
    'MODEL_REGISTRY',
    'create_model'
]
