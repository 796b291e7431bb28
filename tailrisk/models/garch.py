"""
GARCH(1,1) model with normal innovations.

    y_t = sqrt(h_t) * z_t,    z_t ~ N(0, 1)
    h_t = omega + alpha * y_{t-1}^2 + beta * h_{t-1}

The recursion starts from the unconditional variance omega / (1 - alpha - beta).
"""

import numpy as np
from scipy.stats import norm

from .base import ConditionalModel, ModelKind
from ..exceptions import ConfigurationError


class GarchModel(ConditionalModel):
    """Zero-mean GARCH(1,1) with Gaussian innovations."""

    kind = ModelKind.GARCH
    param_names = ('omega', 'alpha', 'beta')

    def _check_theta(self, theta: np.ndarray) -> None:
        omega, alpha, beta = theta
        if not np.all(np.isfinite(theta)):
            raise ConfigurationError(f"Non-finite GARCH parameters: {theta}")
        if omega <= 0:
            raise ConfigurationError(f"omega must be positive, got {omega}")
        if alpha < 0 or beta < 0:
            raise ConfigurationError("alpha and beta must be non-negative")
        if alpha + beta >= 1:
            raise ConfigurationError(
                f"Covariance stationarity requires alpha + beta < 1, got {alpha + beta}"
            )

    def conditional_variance(self, theta: np.ndarray, data: np.ndarray) -> np.ndarray:
        """
        Filter the conditional variances.

        Returns:
            Array of length T + 1: h_1..h_T for the observations followed by
            the one-step-ahead variance h_{T+1}
        """
        omega, alpha, beta = theta
        h = np.empty(len(data) + 1)
        h[0] = omega / (1.0 - alpha - beta)
        for i, y in enumerate(data):
            h[i + 1] = omega + alpha * y**2 + beta * h[i]
        return h

    def _pdf_rows(self, theta, x, data, in_sample):
        h = self.conditional_variance(theta, data)
        scale = np.sqrt(h[:-1] if in_sample else h[-1:])
        return norm.pdf(x[np.newaxis, :], loc=0.0, scale=scale[:, np.newaxis])

    def _simulate_paths(self, theta, data, nahead, nsim, rng):
        omega, alpha, beta = theta
        h = np.full(nsim, self.conditional_variance(theta, data)[-1])
        shocks = rng.standard_normal((nahead, nsim))

        paths = np.zeros((nahead, nsim))
        for step in range(nahead):
            paths[step] = np.sqrt(h) * shocks[step]
            h = omega + alpha * paths[step]**2 + beta * h
        return paths
