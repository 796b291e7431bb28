"""
Shared fixtures for the tailrisk test suite.
"""

import numpy as np
import pandas as pd
import pytest

from tailrisk.models import GaussianModel, GarchModel


@pytest.fixture
def normal_returns():
    """500 i.i.d. standard normal returns."""
    np.random.seed(42)
    return np.random.normal(loc=0.0, scale=1.0, size=500)


@pytest.fixture
def garch_returns():
    """Returns simulated from a GARCH(1,1) with omega=0.05, alpha=0.1, beta=0.85."""
    model = GarchModel(random_seed=3)
    path = model.simulate([0.05, 0.1, 0.85], np.zeros(2), nahead=800, nsim=1)
    return path[:, 0]


@pytest.fixture
def dated_returns(normal_returns):
    """Normal returns indexed by calendar days."""
    index = pd.date_range("2020-01-01", periods=len(normal_returns), freq="D")
    return pd.Series(normal_returns, index=index, name="returns")


@pytest.fixture
def gaussian_model():
    """Seeded standard normal model."""
    return GaussianModel(random_seed=1234)


@pytest.fixture
def unit_params():
    """Zero-mean, unit-variance gaussian parameters."""
    return np.array([0.0, 1.0])
