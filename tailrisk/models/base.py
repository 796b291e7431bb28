"""
Conditional-distribution model interface.

The risk engine only talks to a model through two operations: evaluating the
predictive density on a grid and simulating future paths. Parameter input is
always a matrix with one row per parameter draw; a single estimate is a
one-row matrix.
"""

import numpy as np
from typing import List, Optional, Tuple
from abc import ABC, abstractmethod
from enum import Enum

from ..config import get_logger
from ..exceptions import ConfigurationError


class ModelKind(Enum):
    """Available reference models."""
    GAUSSIAN = "gaussian"
    STUDENT_T = "student_t"
    GARCH = "garch"


class ConditionalModel(ABC):
    """Abstract base class for models producing a predictive density."""

    kind: ModelKind
    param_names: Tuple[str, ...] = ()

    def __init__(self, random_seed: Optional[int] = None):
        """
        Initialize the model.

        Args:
            random_seed: Seed used for every simulation request. With a seed,
                repeated requests return identical draws.
        """
        self.random_seed = random_seed
        self.logger = get_logger(__name__)

    @property
    def n_params(self) -> int:
        return len(self.param_names)

    def check_params(self, params) -> np.ndarray:
        """Return parameters as a (n_draws, n_params) matrix."""
        par = np.asarray(params, dtype=float)
        if par.ndim == 1:
            par = par.reshape(1, -1)
        if par.ndim != 2 or par.shape[0] == 0 or par.shape[1] != self.n_params:
            raise ConfigurationError(
                f"{self.kind.value} model expects {self.n_params} parameters "
                f"{list(self.param_names)}, got array of shape {np.shape(params)}"
            )
        for theta in par:
            self._check_theta(theta)
        return par

    def predictive_pdf(self,
                       params,
                       x: np.ndarray,
                       data: np.ndarray,
                       in_sample: bool = False) -> np.ndarray:
        """
        Evaluate the predictive density on a grid.

        Args:
            params: Parameter vector or matrix of parameter draws
            x: Outcome grid
            data: Observed history
            in_sample: Return one row per observation instead of the
                single one-step-ahead row

        Returns:
            Density matrix (T x len(x)) or (1 x len(x)), averaged over draws
        """
        par = self.check_params(params)
        x = np.asarray(x, dtype=float)
        data = np.asarray(data, dtype=float)

        pdf = None
        for theta in par:
            rows = self._pdf_rows(theta, x, data, in_sample)
            pdf = rows if pdf is None else pdf + rows
        return pdf / par.shape[0]

    def simulate(self,
                 params,
                 data: np.ndarray,
                 nahead: int,
                 nsim: int) -> np.ndarray:
        """
        Simulate future outcomes.

        Args:
            params: Parameter vector or matrix of parameter draws
            data: Observed history
            nahead: Number of steps to simulate
            nsim: Number of paths per parameter draw

        Returns:
            Draws of shape (nahead x n_draws * nsim)
        """
        par = self.check_params(params)
        data = np.asarray(data, dtype=float)
        rng = np.random.default_rng(self.random_seed)

        blocks: List[np.ndarray] = [
            self._simulate_paths(theta, data, nahead, nsim, rng) for theta in par
        ]
        draws = np.hstack(blocks)
        self.logger.debug(f"Simulated {draws.shape[1]} paths over {nahead} steps")
        return draws

    @abstractmethod
    def _check_theta(self, theta: np.ndarray) -> None:
        """Raise ConfigurationError for an inadmissible parameter vector."""
        pass

    @abstractmethod
    def _pdf_rows(self,
                  theta: np.ndarray,
                  x: np.ndarray,
                  data: np.ndarray,
                  in_sample: bool) -> np.ndarray:
        pass

    @abstractmethod
    def _simulate_paths(self,
                        theta: np.ndarray,
                        data: np.ndarray,
                        nahead: int,
                        nsim: int,
                        rng: np.random.Generator) -> np.ndarray:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(random_seed={self.random_seed})"
