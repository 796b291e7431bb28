"""
Value-at-Risk (VaR) and Expected Shortfall calculation on a density grid.

This module turns a predictive density evaluated on an outcome grid into
risk measures: the numerical CDF is inverted for VaR and the lower tail is
integrated for Expected Shortfall.
"""

import numpy as np
from typing import Sequence

from ..config import get_logger
from .grid import OutcomeGrid


class VaRCalculator:
    """Grid-based Value-at-Risk calculator."""

    def __init__(self, density_tolerance: float = 0.05):
        """
        Initialize VaR calculator.

        Args:
            density_tolerance: Allowed deviation of a density row's integral
                from 1 before a warning is logged
        """
        self.density_tolerance = density_tolerance
        self.logger = get_logger(__name__)

    def cumulative_distribution(self, pdf: np.ndarray, step: float) -> np.ndarray:
        """
        Integrate density rows into cumulative probabilities.

        Args:
            pdf: Density matrix (rows x grid points)
            step: Grid step

        Returns:
            Running sum of each row scaled by the grid step
        """
        return np.cumsum(pdf, axis=1) * step

    def density_mass(self, pdf: np.ndarray, step: float) -> np.ndarray:
        """Total probability mass captured by each density row."""
        return np.sum(pdf, axis=1) * step

    def check_density_mass(self, pdf: np.ndarray, step: float) -> np.ndarray:
        """Log a warning for rows whose mass is far from one. Returns the masses."""
        mass = self.density_mass(pdf, step)
        off = np.abs(mass - 1.0) > self.density_tolerance
        if np.any(off):
            self.logger.warning(
                f"{int(np.sum(off))} of {len(mass)} density rows integrate to "
                f"[{mass.min():.4f}, {mass.max():.4f}] on the grid; "
                f"VaR and ES will be biased"
            )
        return mass

    def grid_var(self,
                 cumulative: np.ndarray,
                 grid: OutcomeGrid,
                 alpha: Sequence[float]) -> np.ndarray:
        """
        Invert cumulative probabilities at each confidence level.

        The VaR is the grid value whose cumulative probability is nearest to
        alpha. When several grid points are equally near, the first one
        (lowest outcome) is taken.

        Args:
            cumulative: Cumulative matrix (rows x grid points)
            grid: Outcome grid the rows were evaluated on
            alpha: Confidence levels

        Returns:
            VaR matrix (rows x levels)
        """
        var = np.empty((cumulative.shape[0], len(alpha)))
        for i, level in enumerate(alpha):
            nearest = np.argmin(np.abs(cumulative - level), axis=1)
            var[:, i] = grid.values[nearest]
        return var


class ExpectedShortfallCalculator:
    """Grid-based Expected Shortfall calculator."""

    def __init__(self):
        """Initialize Expected Shortfall calculator."""
        self.logger = get_logger(__name__)

    def grid_es(self,
                pdf: np.ndarray,
                grid: OutcomeGrid,
                var: np.ndarray,
                alpha: Sequence[float]) -> np.ndarray:
        """
        Integrate the density-weighted lower tail up to the VaR.

        ES(n, i) = step / alpha_i * sum_{x_k <= VaR(n, i)} pdf[n, k] * x_k

        The sum is normalised by the nominal level alpha_i, not by the tail
        mass actually captured on the grid.

        Args:
            pdf: Density matrix (rows x grid points)
            grid: Outcome grid
            var: VaR matrix (rows x levels) from the same density
            alpha: Confidence levels

        Returns:
            ES matrix (rows x levels)
        """
        x = grid.values
        weighted = pdf * x[np.newaxis, :]

        es = np.empty_like(var, dtype=float)
        for i, level in enumerate(alpha):
            in_tail = x[np.newaxis, :] <= var[:, i][:, np.newaxis]
            es[:, i] = np.sum(weighted * in_tail, axis=1) * grid.step / level
        return es
