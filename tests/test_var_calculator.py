"""
Unit Tests -- Grid, CDF integration, VaR inversion and ES integration
=====================================================================
"""

import numpy as np
import pytest
from scipy.stats import norm

from tailrisk.exceptions import ConfigurationError, DataError
from tailrisk.risk.grid import OutcomeGrid, build_outcome_grid
from tailrisk.risk.var_calculator import ExpectedShortfallCalculator, VaRCalculator


@pytest.fixture
def var_calculator():
    return VaRCalculator()


@pytest.fixture
def es_calculator():
    return ExpectedShortfallCalculator()


@pytest.fixture
def normal_grid(normal_returns):
    return build_outcome_grid(normal_returns, 1000)


@pytest.fixture
def normal_pdf(normal_grid):
    return norm.pdf(normal_grid.values)[np.newaxis, :]


# ---------------------------------------------------------------------------
# Grid Builder
# ---------------------------------------------------------------------------
class TestOutcomeGrid:
    """Tests for the evaluation grid."""

    def test_grid_spans_padded_range(self):
        data = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
        grid = build_outcome_grid(data, 5)
        sd = np.std(data, ddof=1)
        np.testing.assert_allclose(grid.xmin, -sd)
        np.testing.assert_allclose(grid.xmax, 4.0 + sd)
        assert grid.nmesh == 5

    def test_grid_evenly_spaced(self, normal_grid):
        steps = np.diff(normal_grid.values)
        assert np.all(steps > 0)
        np.testing.assert_allclose(steps, normal_grid.step)

    def test_nmesh_below_two_rejected(self, normal_returns):
        with pytest.raises(ConfigurationError):
            build_outcome_grid(normal_returns, 1)

    def test_single_observation_rejected(self):
        with pytest.raises(DataError):
            build_outcome_grid([0.3], 100)

    def test_constant_data_degenerates(self):
        """Zero dispersion collapses the grid but is not an error."""
        grid = build_outcome_grid([0.5, 0.5, 0.5], 10)
        assert grid.is_degenerate
        assert grid.step == 0
        np.testing.assert_allclose(grid.values, 0.5)


# ---------------------------------------------------------------------------
# CDF Integrator
# ---------------------------------------------------------------------------
class TestCumulativeDistribution:
    """Tests for density-to-CDF integration."""

    def test_running_sum_scaled_by_step(self, var_calculator):
        pdf = np.array([[1.0, 1.0, 1.0, 1.0]])
        cumul = var_calculator.cumulative_distribution(pdf, 0.25)
        np.testing.assert_allclose(cumul, [[0.25, 0.5, 0.75, 1.0]])

    def test_cdf_monotone_and_bounded(self, var_calculator, normal_grid, normal_pdf):
        cumul = var_calculator.cumulative_distribution(normal_pdf, normal_grid.step)
        assert np.all(np.diff(cumul, axis=1) >= 0)
        assert cumul.min() >= 0
        assert cumul.max() <= 1 + 1e-2

    def test_mass_close_to_one(self, var_calculator, normal_grid, normal_pdf):
        mass = var_calculator.density_mass(normal_pdf, normal_grid.step)
        np.testing.assert_allclose(mass, 1.0, atol=1e-2)

    def test_poor_mass_logs_warning(self, var_calculator, normal_grid, normal_pdf, caplog):
        with caplog.at_level("WARNING", logger="tailrisk"):
            var_calculator.check_density_mass(0.5 * normal_pdf, normal_grid.step)
        assert "biased" in caplog.text


# ---------------------------------------------------------------------------
# Quantile Inverter
# ---------------------------------------------------------------------------
class TestGridVaR:
    """Tests for VaR by nearest cumulative probability."""

    def test_standard_normal_quantile(self, var_calculator, normal_grid, normal_pdf):
        cumul = var_calculator.cumulative_distribution(normal_pdf, normal_grid.step)
        var = var_calculator.grid_var(cumul, normal_grid, [0.05])
        np.testing.assert_allclose(var[0, 0], norm.ppf(0.05), atol=2 * normal_grid.step)

    def test_var_is_a_grid_point(self, var_calculator, normal_grid, normal_pdf):
        cumul = var_calculator.cumulative_distribution(normal_pdf, normal_grid.step)
        var = var_calculator.grid_var(cumul, normal_grid, [0.01, 0.05])
        assert np.all(np.isin(var, normal_grid.values))

    def test_ties_resolve_to_lowest_grid_point(self, var_calculator):
        grid = OutcomeGrid(values=np.array([-1.0, 0.0, 1.0, 2.0]), step=1.0)
        cumul = np.array([[0.0, 0.25, 0.75, 1.0]])
        var = var_calculator.grid_var(cumul, grid, [0.5])
        assert var[0, 0] == 0.0

    def test_var_non_decreasing_in_alpha(self, var_calculator, normal_grid, normal_pdf):
        cumul = var_calculator.cumulative_distribution(normal_pdf, normal_grid.step)
        var = var_calculator.grid_var(cumul, normal_grid, [0.001, 0.01, 0.025, 0.05, 0.1])
        assert np.all(np.diff(var[0]) >= 0)

    def test_duplicate_levels_duplicate_columns(self, var_calculator, normal_grid, normal_pdf):
        cumul = var_calculator.cumulative_distribution(normal_pdf, normal_grid.step)
        var = var_calculator.grid_var(cumul, normal_grid, [0.05, 0.05])
        assert var.shape == (1, 2)
        assert var[0, 0] == var[0, 1]


# ---------------------------------------------------------------------------
# Tail Integrator
# ---------------------------------------------------------------------------
class TestGridES:
    """Tests for Expected Shortfall by tail integration."""

    def test_hand_computed_tail(self, es_calculator):
        grid = OutcomeGrid(values=np.array([-2.0, -1.0, 0.0, 1.0]), step=1.0)
        pdf = np.array([[0.1, 0.2, 0.3, 0.4]])
        es = es_calculator.grid_es(pdf, grid, np.array([[-1.0]]), [0.5])
        np.testing.assert_allclose(es, [[-0.8]])

    def test_normalised_by_nominal_alpha(self, es_calculator):
        """The same tail sum divided by two different levels."""
        grid = OutcomeGrid(values=np.array([-2.0, -1.0, 0.0, 1.0]), step=1.0)
        pdf = np.array([[0.1, 0.2, 0.3, 0.4]])
        var = np.array([[-1.0, -1.0]])
        es = es_calculator.grid_es(pdf, grid, var, [0.25, 0.5])
        np.testing.assert_allclose(es[0, 0], 2 * es[0, 1])

    def test_standard_normal_shortfall(self, var_calculator, es_calculator, normal_grid, normal_pdf):
        cumul = var_calculator.cumulative_distribution(normal_pdf, normal_grid.step)
        var = var_calculator.grid_var(cumul, normal_grid, [0.05])
        es = es_calculator.grid_es(normal_pdf, normal_grid, var, [0.05])
        expected = -norm.pdf(norm.ppf(0.05)) / 0.05
        np.testing.assert_allclose(es[0, 0], expected, atol=0.05)

    def test_es_below_var(self, var_calculator, es_calculator, normal_grid, normal_pdf):
        alpha = [0.01, 0.05, 0.1]
        cumul = var_calculator.cumulative_distribution(normal_pdf, normal_grid.step)
        var = var_calculator.grid_var(cumul, normal_grid, alpha)
        es = es_calculator.grid_es(normal_pdf, normal_grid, var, alpha)
        assert np.all(es <= var)
