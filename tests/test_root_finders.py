"""Tests for the astrocore.root_finders module.

Tests cover:
- Root function wrappers (autodiff and explicit derivatives)
- Termination conditions (absolute, relative, combined, iteration cap)
- Newton-Raphson convergence on smooth problems, including Kepler's equation
- Behaviour on a zero derivative (non-finite iterate, stopped by the cap)
"""

import logging

import jax.numpy as jnp
import pytest

from astrocore.root_finders import (
    AutodiffRootFunction,
    CallableRootFunction,
    ConvergenceError,
    MaximumIterationsTerminationCondition,
    NewtonRaphson,
    RootAbsoluteOrRelativeToleranceTerminationCondition,
    RootAbsoluteToleranceTerminationCondition,
    RootFinderCore,
    RootRelativeToleranceTerminationCondition,
)


# ──────────────────────────────────────────────
# Helper functions
# ──────────────────────────────────────────────

def _kepler_root_function(eccentricity, mean_anomaly):
    """Kepler's equation E - e sin(E) - M = 0 for the eccentric anomaly E."""
    return AutodiffRootFunction(lambda E: E - eccentricity * jnp.sin(E) - mean_anomaly)


# ──────────────────────────────────────────────
# Root function tests
# ──────────────────────────────────────────────

class TestAutodiffRootFunction:
    def test_evaluate(self):
        f = AutodiffRootFunction(lambda x: x**2 - 2.0)
        assert float(f.evaluate(3.0)) == pytest.approx(7.0)

    def test_callable(self):
        """Calling the object is the same as evaluate."""
        f = AutodiffRootFunction(lambda x: x**2 - 2.0)
        assert float(f(3.0)) == pytest.approx(7.0)

    def test_first_derivative(self):
        f = AutodiffRootFunction(lambda x: x**2 - 2.0)
        assert float(f.compute_derivative(1, 3.0)) == pytest.approx(6.0)

    def test_second_derivative(self):
        f = AutodiffRootFunction(lambda x: x**3)
        assert float(f.compute_derivative(2, 2.0)) == pytest.approx(12.0)

    def test_third_derivative_after_first(self):
        """Higher orders build on the derivatives already cached."""
        f = AutodiffRootFunction(lambda x: x**4)
        assert float(f.compute_derivative(1, 1.0)) == pytest.approx(4.0)
        assert float(f.compute_derivative(3, 1.0)) == pytest.approx(24.0)

    def test_zeroth_derivative_is_value(self):
        f = AutodiffRootFunction(jnp.sin)
        assert float(f.compute_derivative(0, 0.5)) == pytest.approx(float(jnp.sin(0.5)))

    def test_negative_order_raises(self):
        f = AutodiffRootFunction(jnp.sin)
        with pytest.raises(ValueError, match="non-negative"):
            f.compute_derivative(-1, 0.5)


class TestCallableRootFunction:
    def test_value_and_derivatives(self):
        f = CallableRootFunction(
            lambda x: x**3, lambda x: 3.0 * x**2, lambda x: 6.0 * x
        )
        assert float(f.evaluate(2.0)) == pytest.approx(8.0)
        assert float(f.compute_derivative(1, 2.0)) == pytest.approx(12.0)
        assert float(f.compute_derivative(2, 2.0)) == pytest.approx(12.0)

    def test_missing_second_derivative_raises(self):
        f = CallableRootFunction(lambda x: x**3, lambda x: 3.0 * x**2)
        with pytest.raises(ValueError, match="not available"):
            f.compute_derivative(2, 2.0)


# ──────────────────────────────────────────────
# Termination condition tests
# ──────────────────────────────────────────────

class TestMaximumIterationsTerminationCondition:
    def test_below_cap(self):
        condition = MaximumIterationsTerminationCondition(5)
        assert condition(1.0, 0.0, 1.0, 0.0, 4) is False

    def test_at_cap_warns(self, caplog):
        """Reaching the cap stops iteration and logs a warning."""
        condition = MaximumIterationsTerminationCondition(5)
        with caplog.at_level(logging.WARNING, logger="astrocore.root_finders"):
            assert condition(1.0, 0.0, 1.0, 0.0, 5) is True
        assert "without converging" in caplog.text

    def test_at_cap_raises_when_configured(self):
        condition = MaximumIterationsTerminationCondition(5, throw_on_max_iterations_exceeded=True)
        with pytest.raises(ConvergenceError, match="5 iterations") as excinfo:
            condition(1.0, 0.0, 1.0, 0.0, 5)
        assert excinfo.value.maximum_number_of_iterations == 5

    def test_invalid_cap_raises(self):
        with pytest.raises(ValueError, match="must be positive"):
            MaximumIterationsTerminationCondition(0)


class TestToleranceTerminationConditions:
    def test_absolute_converged(self):
        condition = RootAbsoluteToleranceTerminationCondition(1e-6)
        assert condition(1.0 + 1e-8, 1.0, 0.0, 0.0, 1) is True

    def test_absolute_not_converged(self):
        condition = RootAbsoluteToleranceTerminationCondition(1e-6)
        assert condition(1.0 + 1e-3, 1.0, 0.0, 0.0, 1) is False

    def test_relative_scales_with_root(self):
        """A change of 1 on a root of 1e9 is a relative change of 1e-9."""
        condition = RootRelativeToleranceTerminationCondition(1e-6)
        assert condition(1.0e9 + 1.0, 1.0e9, 0.0, 0.0, 1) is True
        assert condition(1.0 + 1e-3, 1.0, 0.0, 0.0, 1) is False

    def test_relative_rejects_non_finite(self):
        condition = RootRelativeToleranceTerminationCondition(1e-6)
        assert condition(jnp.nan, 1.0, 0.0, 0.0, 1) is False

    def test_absolute_or_relative_near_zero(self):
        """Near a zero root only the absolute test can succeed."""
        condition = RootAbsoluteOrRelativeToleranceTerminationCondition(1e-12, 1e-12)
        assert condition(1e-15, 2e-15, 0.0, 0.0, 1) is True
        assert condition(1e-3, 2e-3, 0.0, 0.0, 1) is False

    def test_absolute_or_relative_large_root(self):
        condition = RootAbsoluteOrRelativeToleranceTerminationCondition(1e-12, 1e-9)
        assert condition(1.0e6 + 1e-4, 1.0e6, 0.0, 0.0, 1) is True

    def test_defaults(self):
        condition = RootAbsoluteOrRelativeToleranceTerminationCondition()
        assert condition.absolute_tolerance == 1e-12
        assert condition.relative_tolerance == 1e-12
        assert condition.maximum_number_of_iterations == 1000
        assert condition.throw_on_max_iterations_exceeded is False


# ──────────────────────────────────────────────
# Newton-Raphson tests
# ──────────────────────────────────────────────

class TestNewtonRaphson:
    def test_square_root_of_two(self):
        finder = NewtonRaphson.from_tolerance(1e-12, 100)
        root = finder.execute(AutodiffRootFunction(lambda x: x**2 - 2.0), 1.5)
        assert float(root) == pytest.approx(2.0**0.5, rel=1e-12)

    def test_cosine_fixed_point(self):
        """cos(x) = x has its root near 0.739085."""
        f = CallableRootFunction(lambda x: jnp.cos(x) - x, lambda x: -jnp.sin(x) - 1.0)
        finder = NewtonRaphson(RootAbsoluteToleranceTerminationCondition(1e-14, 50))
        root = finder.execute(f, 1.0)
        assert float(root) == pytest.approx(0.7390851332151607, abs=1e-12)

    @pytest.mark.parametrize(
        "eccentricity,mean_anomaly",
        [(0.0, 1.0), (0.1, 0.5), (0.3, 1.0), (0.7, 2.5), (0.9, 0.2)],
    )
    def test_kepler_equation(self, eccentricity, mean_anomaly):
        """The returned eccentric anomaly satisfies Kepler's equation."""
        f = _kepler_root_function(eccentricity, mean_anomaly)
        finder = NewtonRaphson(RootAbsoluteOrRelativeToleranceTerminationCondition(1e-14, 1e-14, 100))
        root = finder.execute(f, jnp.pi)
        assert abs(float(f.evaluate(root))) < 1e-12

    def test_iteration_count_starts_at_one(self):
        """The termination predicate receives the number of iterations performed."""
        counts = []

        def stop_after_three(current, previous, current_value, previous_value, iterations):
            counts.append(iterations)
            return iterations >= 3

        finder = NewtonRaphson(stop_after_three)
        finder.execute(AutodiffRootFunction(lambda x: x**2 - 2.0), 1.5)
        assert counts == [1, 2, 3]

    def test_predicate_receives_successive_iterates(self):
        """Each check sees the new iterate and the one before it."""
        history = []

        def record(current, previous, current_value, previous_value, iterations):
            history.append((float(current), float(previous)))
            return iterations >= 3

        NewtonRaphson(record).execute(AutodiffRootFunction(lambda x: x**2 - 2.0), 1.5)
        assert history[0][1] == pytest.approx(1.5)
        assert history[1][1] == pytest.approx(history[0][0])
        assert history[2][1] == pytest.approx(history[1][0])

    def test_zero_derivative_is_not_caught(self, caplog):
        """f'(x0) = 0 gives a non-finite iterate that only the cap can stop."""
        finder = NewtonRaphson.from_tolerance(1e-12, 5)
        with caplog.at_level(logging.WARNING, logger="astrocore.root_finders"):
            root = finder.execute(AutodiffRootFunction(lambda x: x**2 + 1.0), 0.0)
        assert not bool(jnp.isfinite(root))
        assert "without converging" in caplog.text

    def test_zero_derivative_raises_when_configured(self):
        condition = RootRelativeToleranceTerminationCondition(
            1e-12, 5, throw_on_max_iterations_exceeded=True
        )
        with pytest.raises(ConvergenceError):
            NewtonRaphson(condition).execute(AutodiffRootFunction(lambda x: x**2 + 1.0), 0.0)

    def test_is_root_finder_core(self):
        assert isinstance(NewtonRaphson.from_tolerance(1e-12, 10), RootFinderCore)

    def test_from_tolerance_condition(self):
        finder = NewtonRaphson.from_tolerance(1e-10, 42)
        condition = finder.termination_function
        assert isinstance(condition, RootRelativeToleranceTerminationCondition)
        assert condition.relative_tolerance == 1e-10
        assert condition.maximum_number_of_iterations == 42
