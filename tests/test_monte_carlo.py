"""
Unit Tests -- Simulation-based horizon estimator and cumulative aggregation
==========================================================================
"""

import numpy as np
import pytest
from scipy.stats import norm

from tailrisk.exceptions import CollaboratorFailure
from tailrisk.risk.monte_carlo import MonteCarloEngine


class ShortSimulator:
    """Simulator returning one step fewer than requested."""

    def simulate(self, params, data, nahead, nsim):
        return np.zeros((nahead - 1, nsim))


# ---------------------------------------------------------------------------
# Empirical estimators
# ---------------------------------------------------------------------------
class TestEmpiricalMeasures:
    """Tests for empirical quantiles and tail means."""

    def test_cumulate_running_sum(self):
        draws = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        np.testing.assert_allclose(
            MonteCarloEngine.cumulate(draws),
            [[1.0, 2.0], [4.0, 6.0], [9.0, 12.0]]
        )

    def test_horizon_var_linear_quantile(self):
        draws = np.array([[1.0, 2.0, 3.0, 4.0, 5.0]])
        var = MonteCarloEngine.horizon_var(draws, [0.4])
        np.testing.assert_allclose(var, [[2.6]])

    def test_horizon_es_tail_mean(self):
        draws = np.array([[1.0, 2.0, 3.0, 4.0, 5.0]])
        var = MonteCarloEngine.horizon_var(draws, [0.4])
        es = MonteCarloEngine.horizon_es(draws, var)
        np.testing.assert_allclose(es, [[1.5]])

    def test_shapes_follow_steps_and_levels(self):
        draws = np.random.default_rng(0).standard_normal((4, 1000))
        var = MonteCarloEngine.horizon_var(draws, [0.01, 0.05, 0.1])
        es = MonteCarloEngine.horizon_es(draws, var)
        assert var.shape == (4, 3)
        assert es.shape == (4, 3)
        assert np.all(es <= var)
        assert np.all(np.diff(var, axis=1) >= 0)


# ---------------------------------------------------------------------------
# Simulation requests
# ---------------------------------------------------------------------------
class TestHorizonEstimate:
    """Tests for estimation from model simulations."""

    def test_per_step_matches_normal_quantile(self, gaussian_model, unit_params, normal_returns):
        engine = MonteCarloEngine(num_simulations=20000)
        estimate = engine.estimate(gaussian_model, unit_params.reshape(1, -1), normal_returns,
                                   nahead=3, alpha=[0.05])
        np.testing.assert_allclose(estimate.var[:, 0], norm.ppf(0.05), atol=0.06)
        assert estimate.num_paths == 20000
        assert not estimate.cumulative

    def test_cumulative_scales_with_sqrt_horizon(self, gaussian_model, unit_params, normal_returns):
        engine = MonteCarloEngine(num_simulations=20000)
        estimate = engine.estimate(gaussian_model, unit_params.reshape(1, -1), normal_returns,
                                   nahead=5, alpha=[0.05], cumulative=True)
        expected = norm.ppf(0.05) * np.sqrt(np.arange(1, 6))
        np.testing.assert_allclose(estimate.var[:, 0], expected, rtol=0.06)

    def test_es_skipped_on_request(self, gaussian_model, unit_params, normal_returns):
        engine = MonteCarloEngine(num_simulations=100)
        estimate = engine.estimate(gaussian_model, unit_params.reshape(1, -1), normal_returns,
                                   nahead=2, alpha=[0.05], do_es=False)
        assert estimate.es is None

    def test_wrong_step_count_is_collaborator_failure(self, unit_params, normal_returns):
        engine = MonteCarloEngine(num_simulations=10)
        with pytest.raises(CollaboratorFailure):
            engine.simulate_draws(ShortSimulator(), unit_params.reshape(1, -1), normal_returns, 4)
