"""
Monte Carlo estimation of multi-step risk measures.

Beyond the first forecast step the predictive density is not evaluated
directly. Instead the model simulates future paths and VaR / ES are read off
the empirical distribution of the draws at each step, optionally after
cumulating the draws along the horizon.
"""

import numpy as np
from typing import Optional, Sequence
from dataclasses import dataclass

from ..config import get_logger
from ..exceptions import CollaboratorFailure


@dataclass(frozen=True)
class HorizonEstimate:
    """Simulation-based risk measures for every horizon step."""

    var: np.ndarray
    es: Optional[np.ndarray]
    num_paths: int
    cumulative: bool


class MonteCarloEngine:
    """Monte Carlo estimator for horizon risk measures."""

    def __init__(self, num_simulations: int = 10000):
        """
        Initialize Monte Carlo engine.

        Args:
            num_simulations: Number of paths requested per parameter draw
        """
        self.num_simulations = num_simulations
        self.logger = get_logger(__name__)

    def simulate_draws(self, model, params: np.ndarray, data: np.ndarray, nahead: int) -> np.ndarray:
        """
        Request simulated outcomes from the model.

        Args:
            model: Object exposing simulate(params, data, nahead, nsim)
            params: Parameter matrix (draws x parameters)
            data: Observed history
            nahead: Number of horizon steps

        Returns:
            Draws of shape (nahead x paths)
        """
        self.logger.debug(
            f"Requesting {self.num_simulations} paths per parameter draw "
            f"({params.shape[0]} draws) over {nahead} steps"
        )
        draws = np.asarray(
            model.simulate(params, data, nahead=nahead, nsim=self.num_simulations),
            dtype=float
        )

        if draws.ndim != 2 or draws.shape[0] != nahead or draws.shape[1] == 0:
            raise CollaboratorFailure("path simulator", (nahead, 'n_paths'), draws.shape)
        return draws

    @staticmethod
    def cumulate(draws: np.ndarray) -> np.ndarray:
        """Running sum of each path along the horizon axis."""
        return np.cumsum(draws, axis=0)

    @staticmethod
    def horizon_var(draws: np.ndarray, alpha: Sequence[float]) -> np.ndarray:
        """Empirical alpha-quantile of the draws at each step (steps x levels)."""
        return np.quantile(draws, list(alpha), axis=1).T

    @staticmethod
    def horizon_es(draws: np.ndarray, var: np.ndarray) -> np.ndarray:
        """Mean of the draws at or below the VaR at each step (steps x levels)."""
        es = np.empty_like(var, dtype=float)
        for j in range(draws.shape[0]):
            for i in range(var.shape[1]):
                tail = draws[j, draws[j] <= var[j, i]]
                es[j, i] = np.mean(tail)
        return es

    def estimate(self,
                 model,
                 params: np.ndarray,
                 data: np.ndarray,
                 nahead: int,
                 alpha: Sequence[float],
                 do_es: bool = True,
                 cumulative: bool = False) -> HorizonEstimate:
        """
        Estimate VaR and ES at every horizon step from simulated paths.

        Args:
            model: Path simulator
            params: Parameter matrix (draws x parameters)
            data: Observed history
            nahead: Number of horizon steps
            alpha: Confidence levels
            do_es: Whether to compute Expected Shortfall
            cumulative: Cumulate draws along the horizon before estimation

        Returns:
            HorizonEstimate with (nahead x levels) matrices
        """
        draws = self.simulate_draws(model, params, data, nahead)

        if cumulative:
            draws = self.cumulate(draws)

        var = self.horizon_var(draws, alpha)
        es = self.horizon_es(draws, var) if do_es else None

        self.logger.debug(
            f"Horizon estimate from {draws.shape[1]} paths "
            f"({'cumulative' if cumulative else 'per-step'})"
        )

        return HorizonEstimate(
            var=var,
            es=es,
            num_paths=draws.shape[1],
            cumulative=cumulative
        )
