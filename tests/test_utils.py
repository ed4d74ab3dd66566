"""Tests for the astrocore.utils module."""

import jax.numpy as jnp
import pytest

from astrocore.utils import compute_modulo


class TestComputeModulo:
    def test_positive_operands(self):
        """Positive dividend and divisor behave like the usual remainder."""
        assert float(compute_modulo(7.0, 3.0)) == pytest.approx(1.0)

    def test_negative_dividend_takes_divisor_sign(self):
        """A negative dividend wraps into [0, divisor)."""
        assert float(compute_modulo(-1.0, 3.0)) == pytest.approx(2.0)

    def test_negative_divisor(self):
        """The result carries the sign of a negative divisor."""
        assert float(compute_modulo(7.0, -3.0)) == pytest.approx(-2.0)

    def test_wrap_angle(self):
        """Negative angles wrap into [0, 2 pi)."""
        result = compute_modulo(-0.5 * jnp.pi, 2.0 * jnp.pi)
        assert float(result) == pytest.approx(1.5 * jnp.pi)

    def test_exact_multiple(self):
        assert float(compute_modulo(6.0, 3.0)) == pytest.approx(0.0)

    def test_array_input(self):
        """Element-wise over arrays."""
        result = compute_modulo(jnp.array([-4.0, -1.0, 0.5, 5.0]), 2.0)
        assert jnp.allclose(result, jnp.array([0.0, 1.0, 0.5, 1.0]))
