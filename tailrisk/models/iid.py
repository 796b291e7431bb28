"""
Independent and identically distributed return models.

The predictive density does not depend on the history, so every in-sample row
is the same density.
"""

import numpy as np
from scipy.stats import norm, t

from .base import ConditionalModel, ModelKind
from ..exceptions import ConfigurationError


class GaussianModel(ConditionalModel):
    """Constant-mean, constant-variance normal returns."""

    kind = ModelKind.GAUSSIAN
    param_names = ('mu', 'sigma')

    def _check_theta(self, theta: np.ndarray) -> None:
        if not np.all(np.isfinite(theta)):
            raise ConfigurationError(f"Non-finite gaussian parameters: {theta}")
        if theta[1] <= 0:
            raise ConfigurationError(f"sigma must be positive, got {theta[1]}")

    def _pdf_rows(self, theta, x, data, in_sample):
        mu, sigma = theta
        row = norm.pdf(x, loc=mu, scale=sigma)
        n_rows = len(data) if in_sample else 1
        return np.tile(row, (n_rows, 1))

    def _simulate_paths(self, theta, data, nahead, nsim, rng):
        mu, sigma = theta
        return rng.normal(loc=mu, scale=sigma, size=(nahead, nsim))


class StudentTModel(ConditionalModel):
    """Location-scale Student-t returns."""

    kind = ModelKind.STUDENT_T
    param_names = ('mu', 'sigma', 'nu')

    def _check_theta(self, theta: np.ndarray) -> None:
        if not np.all(np.isfinite(theta)):
            raise ConfigurationError(f"Non-finite student-t parameters: {theta}")
        if theta[1] <= 0:
            raise ConfigurationError(f"sigma must be positive, got {theta[1]}")
        if theta[2] <= 0:
            raise ConfigurationError(f"nu must be positive, got {theta[2]}")

    def _pdf_rows(self, theta, x, data, in_sample):
        mu, sigma, nu = theta
        row = t.pdf(x, nu, loc=mu, scale=sigma)
        n_rows = len(data) if in_sample else 1
        return np.tile(row, (n_rows, 1))

    def _simulate_paths(self, theta, data, nahead, nsim, rng):
        mu, sigma, nu = theta
        return mu + sigma * rng.standard_t(nu, size=(nahead, nsim))
