"""
Risk engine orchestrating grid-based and simulation-based estimation.

The one-step-ahead (or in-sample) measures come from the predictive density
evaluated on an outcome grid. Steps 2..nahead of an out-of-sample forecast
come from simulated paths and replace the corresponding rows.
"""

import numpy as np
from typing import Optional, Sequence

from ..config import RiskControl, DEFAULT_ALPHA, get_logger, validate_alpha
from ..exceptions import CollaboratorFailure, ConfigurationError
from .grid import OutcomeGrid, build_outcome_grid
from .inputs import FittedModel, RiskSource
from .monte_carlo import MonteCarloEngine
from .results import RiskResult, assemble_result, is_calendar_index, label_with_index
from .var_calculator import ExpectedShortfallCalculator, VaRCalculator


class RiskEngine:
    """Value-at-Risk and Expected Shortfall engine."""

    def __init__(self, control: Optional[RiskControl] = None, density_tolerance: float = 0.05):
        """
        Initialize the engine.

        Args:
            control: Grid resolution and simulation settings (defaults apply if None)
            density_tolerance: Allowed deviation of density mass from 1 before warning
        """
        self.control = (control or RiskControl()).validate()
        self.var_calculator = VaRCalculator(density_tolerance)
        self.es_calculator = ExpectedShortfallCalculator()
        self.logger = get_logger(__name__)

    def compute(self,
                source: RiskSource,
                alpha: Sequence[float] = DEFAULT_ALPHA,
                nahead: int = 1,
                do_es: bool = True,
                in_sample: bool = False,
                cumulative: bool = False,
                label: bool = True) -> RiskResult:
        """
        Compute VaR and (optionally) ES.

        Args:
            source: Model, parameters and history
            alpha: Confidence levels
            nahead: Forecast horizon; ignored in-sample
            do_es: Also compute Expected Shortfall
            in_sample: One row per observation instead of per horizon step
            cumulative: Measures on cumulated simulated draws (out-of-sample only)
            label: Re-label rows with the series index when the history has one;
                out-of-sample rows keep their h= labels unless the index is dated

        Returns:
            RiskResult with (T or nahead) x len(alpha) tables
        """
        levels = validate_alpha(alpha)
        nahead = self._check_horizon(nahead)
        if cumulative and in_sample:
            raise ConfigurationError("Cumulative risk measures are only available out-of-sample")

        data = source.history()
        self.logger.info(
            f"Computing {'in-sample' if in_sample else f'{nahead}-step'} risk for "
            f"{len(data)} observations at levels {levels} ({source.kind.value})"
        )

        grid = build_outcome_grid(data, self.control.nmesh)
        pdf = self._evaluate_density(source, grid, data, in_sample)

        if not grid.is_degenerate:
            self.var_calculator.check_density_mass(pdf, grid.step)

        cumul = self.var_calculator.cumulative_distribution(pdf, grid.step)
        grid_var = self.var_calculator.grid_var(cumul, grid, levels)
        grid_es = self.es_calculator.grid_es(pdf, grid, grid_var, levels) if do_es else None

        nsim = None
        if in_sample:
            var, es = grid_var, grid_es
        else:
            var = np.full((nahead, len(levels)), np.nan)
            var[0] = grid_var[0]
            es = None
            if do_es:
                es = np.full((nahead, len(levels)), np.nan)
                es[0] = grid_es[0]

            if nahead > 1:
                nsim = self.control.resolve_nsim(source.n_draws)
                horizon = MonteCarloEngine(nsim).estimate(
                    source.model, source.params, data, nahead, levels,
                    do_es=do_es, cumulative=cumulative
                )
                var[1:] = horizon.var[1:]
                if do_es:
                    es[1:] = horizon.es[1:]

        result = assemble_result(
            var, es, levels,
            in_sample=in_sample,
            nahead=1 if in_sample else nahead,
            cumulative=cumulative,
            nmesh=self.control.nmesh,
            nsim=nsim,
            source=source.kind.value
        )

        if label and source.index is not None and (in_sample or is_calendar_index(source.index)):
            result = label_with_index(result, source.index)

        self.logger.info(f"Risk computation complete: {len(result.var)} rows")
        return result

    def _evaluate_density(self,
                          source: RiskSource,
                          grid: OutcomeGrid,
                          data: np.ndarray,
                          in_sample: bool) -> np.ndarray:
        """Evaluate the predictive density and check its shape."""
        pdf = np.asarray(
            source.model.predictive_pdf(source.params, grid.values, data, in_sample=in_sample),
            dtype=float
        )
        expected = (len(data) if in_sample else 1, grid.nmesh)
        if pdf.shape != expected:
            raise CollaboratorFailure("density evaluator", expected, pdf.shape)
        return pdf

    @staticmethod
    def _check_horizon(nahead) -> int:
        try:
            valid = not isinstance(nahead, bool) and int(nahead) == nahead and nahead >= 1
        except (TypeError, ValueError):
            valid = False
        if not valid:
            raise ConfigurationError(f"nahead must be a positive integer, got {nahead!r}")
        return int(nahead)


def compute_risk(model,
                 params,
                 data,
                 alpha: Sequence[float] = DEFAULT_ALPHA,
                 nahead: int = 1,
                 do_es: bool = True,
                 in_sample: bool = False,
                 cumulative: bool = False,
                 control: Optional[RiskControl] = None) -> RiskResult:
    """Risk measures from a model specification and explicit parameters."""
    engine = RiskEngine(control)
    return engine.compute(
        RiskSource.from_specification(model, params, data),
        alpha=alpha, nahead=nahead, do_es=do_es,
        in_sample=in_sample, cumulative=cumulative
    )


def risk_from_fit(fit: FittedModel,
                  newdata=None,
                  alpha: Sequence[float] = DEFAULT_ALPHA,
                  nahead: int = 1,
                  do_es: bool = True,
                  in_sample: bool = False,
                  cumulative: bool = False,
                  control: Optional[RiskControl] = None) -> RiskResult:
    """Risk measures from a point estimate or posterior ensemble."""
    engine = RiskEngine(control)
    return engine.compute(
        RiskSource.from_fit(fit, newdata),
        alpha=alpha, nahead=nahead, do_es=do_es,
        in_sample=in_sample, cumulative=cumulative
    )
