"""
Outcome grid construction.

The grid spans the observed range of the data padded by one sample standard
deviation on each side, so predictive densities are evaluated over the region
where almost all of their mass lies.
"""

import numpy as np
from dataclasses import dataclass

from ..config import get_logger
from ..exceptions import ConfigurationError, DataError


logger = get_logger(__name__)


@dataclass(frozen=True)
class OutcomeGrid:
    """Evenly spaced evaluation grid."""

    values: np.ndarray
    step: float

    @property
    def xmin(self) -> float:
        return float(self.values[0])

    @property
    def xmax(self) -> float:
        return float(self.values[-1])

    @property
    def nmesh(self) -> int:
        return len(self.values)

    @property
    def is_degenerate(self) -> bool:
        return self.step <= 0

    def __len__(self) -> int:
        return len(self.values)


def build_outcome_grid(data, nmesh: int) -> OutcomeGrid:
    """
    Build the evaluation grid for the outcome variable.

    Args:
        data: Observed history (at least 2 values)
        nmesh: Number of grid points (at least 2)

    Returns:
        OutcomeGrid over [min - sd, max + sd]
    """
    if nmesh < 2:
        raise ConfigurationError(f"nmesh must be at least 2, got {nmesh}")

    y = np.asarray(data, dtype=float)
    if y.ndim != 1 or len(y) < 2:
        raise DataError(
            f"At least 2 observations are needed to build a grid, got shape {y.shape}"
        )

    sd = np.std(y, ddof=1)
    xmin = np.min(y) - sd
    xmax = np.max(y) + sd

    values = np.linspace(xmin, xmax, int(nmesh))
    step = float(values[1] - values[0])

    if step <= 0:
        logger.warning("Data has no dispersion, the outcome grid collapses to a single point")
    else:
        logger.debug(f"Outcome grid [{xmin:.6g}, {xmax:.6g}] with {nmesh} points, step {step:.6g}")

    return OutcomeGrid(values=values, step=step)
