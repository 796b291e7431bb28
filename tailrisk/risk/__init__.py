"""
Risk measure computation package.

This package turns predictive densities and simulated paths into
Value-at-Risk and Expected Shortfall tables.
"""

from .grid import OutcomeGrid, build_outcome_grid
from .var_calculator import VaRCalculator, ExpectedShortfallCalculator
from .monte_carlo import MonteCarloEngine, HorizonEstimate
from .inputs import FittedModel, RiskSource, SourceKind
from .results import RiskResult, assemble_result, label_with_index, future_index, is_calendar_index
from .engine import RiskEngine, compute_risk, risk_from_fit

__all__ = [
    'OutcomeGrid',
    'build_outcome_grid',
    'VaRCalculator',
    'ExpectedShortfallCalculator',
    'MonteCarloEngine',
    'HorizonEstimate',
    'FittedModel',
    'RiskSource',
    'SourceKind',
    'RiskResult',
    'assemble_result',
    'label_with_index',
    'future_index',
    'is_calendar_index',
    'RiskEngine',
    'compute_risk',
    'risk_from_fit'
]
