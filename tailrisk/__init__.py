"""
Tail risk measures for conditional-distribution time series models.

This package provides:
- Grid-based Value-at-Risk and Expected Shortfall from predictive densities
- Simulation-based multi-step and cumulative risk measures
- Reference Gaussian, Student-t and GARCH(1,1) models

Example usage:
    import numpy as np
    from tailrisk import GaussianModel, compute_risk

    returns = np.random.default_rng(1).standard_normal(500)
    risk = compute_risk(GaussianModel(random_seed=1), [0.0, 1.0], returns,
                        alpha=[0.01, 0.05], nahead=5)
    print(risk.summary())
"""

from .config import SystemConfig, RiskControl, setup_logging, get_logger
from .exceptions import TailRiskError, ConfigurationError, DataError, CollaboratorFailure
from .models import ConditionalModel, ModelKind, GaussianModel, StudentTModel, GarchModel, create_model
from .risk import (
    RiskEngine,
    RiskResult,
    RiskSource,
    SourceKind,
    FittedModel,
    compute_risk,
    risk_from_fit,
    label_with_index
)

__version__ = "1.0.0"

__all__ = [
    # Configuration
    'SystemConfig',
    'RiskControl',
    'setup_logging',
    'get_logger',

    # Errors
    'TailRiskError',
    'ConfigurationError',
    'DataError',
    'CollaboratorFailure',

    # Models
    'ConditionalModel',
    'ModelKind',
    'GaussianModel',
    'StudentTModel',
    'GarchModel',
    'create_model',

    # Engine
    'RiskEngine',
    'RiskResult',
    'RiskSource',
    'SourceKind',
    'FittedModel',
    'compute_risk',
    'risk_from_fit',
    'label_with_index'
]
