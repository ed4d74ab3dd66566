"""Tests for the astrocore.numerical_derivatives module."""

import jax.numpy as jnp
import pytest

from astrocore.numerical_derivatives import CentralDifferenceOrder, compute_central_difference

# Positions spanning several orders of magnitude
_POSITIONS = (
    (0.0416284088706, 0.365492068944, 0.805197604602),
    (1.63074391170, 8.04179355586, 6.74984731916),
)


def _exponential_density(position):
    """exp(||r||) as a length-1 vector."""
    return jnp.atleast_1d(jnp.exp(jnp.linalg.norm(position)))


def _exponential_density_jacobian(position):
    norm = jnp.linalg.norm(position)
    return (position / norm * jnp.exp(norm)).reshape(1, -1)


def _unit_gravity(position):
    """-r / ||r||."""
    return -position / jnp.linalg.norm(position)


def _unit_gravity_jacobian(position):
    norm = jnp.linalg.norm(position)
    return jnp.outer(position, position) / norm**3 - jnp.eye(3) / norm


class TestCentralDifference:
    @pytest.mark.parametrize("position", _POSITIONS)
    @pytest.mark.parametrize(
        "order,rtol",
        [
            (CentralDifferenceOrder.ORDER_2, 1e-6),
            (CentralDifferenceOrder.ORDER_4, 1e-8),
            (CentralDifferenceOrder.ORDER_8, 1e-8),
        ],
    )
    def test_exponential_density(self, position, order, rtol):
        position = jnp.asarray(position, dtype=jnp.float64)
        numerical = compute_central_difference(position, _exponential_density, order=order)
        analytical = _exponential_density_jacobian(position)
        assert numerical.shape == (1, 3)
        assert jnp.allclose(numerical, analytical, rtol=rtol, atol=0.0)

    @pytest.mark.parametrize("position", _POSITIONS)
    @pytest.mark.parametrize(
        "order,rtol",
        [
            (CentralDifferenceOrder.ORDER_2, 1e-6),
            (CentralDifferenceOrder.ORDER_4, 1e-8),
            (CentralDifferenceOrder.ORDER_8, 1e-8),
        ],
    )
    def test_unit_gravity(self, position, order, rtol):
        position = jnp.asarray(position, dtype=jnp.float64)
        numerical = compute_central_difference(position, _unit_gravity, order=order)
        analytical = _unit_gravity_jacobian(position)
        assert numerical.shape == (3, 3)
        assert jnp.allclose(numerical, analytical, rtol=rtol, atol=1e-12)

    def test_quadratic_exact_at_second_order(self):
        """Central differences of order 2 are exact for quadratics."""
        x = jnp.array([1.0, -2.0, 3.0])
        jacobian = compute_central_difference(x, lambda v: v**2)
        assert jnp.allclose(jacobian, jnp.diag(2.0 * x), rtol=1e-9)

    def test_zero_element_uses_relative_step(self):
        """A zero input element still gets a non-zero perturbation."""
        x = jnp.array([0.0, 2.0])
        jacobian = compute_central_difference(x, lambda v: jnp.array([v[0] + v[1] ** 2]))
        assert jnp.allclose(jacobian, jnp.array([[1.0, 4.0]]), rtol=1e-8)

    def test_minimum_and_relative_step(self):
        x = jnp.array([1.0e-9, 1.0])
        jacobian = compute_central_difference(
            x, jnp.sin, minimum_step=1e-6, relative_step=1e-5,
            order=CentralDifferenceOrder.ORDER_4,
        )
        assert jnp.allclose(jacobian, jnp.diag(jnp.cos(x)), rtol=1e-9)

    def test_scalar_function(self):
        """A scalar-valued function yields a single-row Jacobian."""
        x = jnp.array([1.0, 2.0])
        jacobian = compute_central_difference(x, lambda v: jnp.sum(v**3))
        assert jacobian.shape == (1, 2)
        assert jnp.allclose(jacobian, jnp.array([[3.0, 12.0]]), rtol=1e-8)

    def test_integer_order_accepted(self):
        x = jnp.array([0.5])
        jacobian = compute_central_difference(x, jnp.exp, order=4)
        assert jnp.allclose(jacobian, jnp.exp(x).reshape(1, 1), rtol=1e-10)

    def test_unsupported_order_raises(self):
        with pytest.raises(ValueError, match="Unsupported central difference order"):
            compute_central_difference(jnp.array([1.0]), jnp.exp, order=3)
