"""Natural cubic spline interpolation.

Construction solves the tridiagonal system for the second derivatives
``M_i`` at the knots with ``M_0 = M_{n-1} = 0`` (natural end conditions):

.. math::

    h_{i-1} M_{i-1} + 2 (h_{i-1} + h_i) M_i + h_i M_{i+1}
        = 6 \\left( \\frac{y_{i+1} - y_i}{h_i}
                 - \\frac{y_i - y_{i-1}}{h_{i-1}} \\right),
    \\qquad h_i = x_{i+1} - x_i

Evaluation uses the form of Press et al., *Numerical Recipes*:

.. math::

    y = A y_i + B y_{i+1} + \\left( (A^3 - A) M_i + (B^3 - B) M_{i+1} \\right)
        \\frac{h_i^2}{6},
    \\qquad A = \\frac{x_{i+1} - x}{h_i}, \\quad B = 1 - A

Targets outside the table are extrapolated with the end polynomials.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype
from astrocore.interpolators._base import Interpolator
from astrocore.interpolators.lookup import LookupScheme, create_lookup_scheme


def solve_tridiagonal(
    sub_diagonal: ArrayLike,
    diagonal: ArrayLike,
    super_diagonal: ArrayLike,
    right_hand_side: ArrayLike,
) -> Array:
    """Solve a tridiagonal linear system with the Thomas algorithm.

    Row ``i`` of the system reads
    ``sub[i] x[i-1] + diag[i] x[i] + sup[i] x[i+1] = rhs[i]``.  ``sub[0]``
    and ``sup[-1]`` are ignored.  No pivoting is done, so the matrix should
    be diagonally dominant, which the spline system always is.

    Args:
        sub_diagonal: Sub-diagonal, shape ``(k,)``.
        diagonal: Main diagonal, shape ``(k,)``.
        super_diagonal: Super-diagonal, shape ``(k,)``.
        right_hand_side: Right-hand side, shape ``(k,)``.

    Returns:
        jax.Array: Solution, shape ``(k,)``.
    """
    dtype = get_dtype()
    sub_diagonal = jnp.asarray(sub_diagonal, dtype=dtype)
    diagonal = jnp.asarray(diagonal, dtype=dtype)
    super_diagonal = jnp.asarray(super_diagonal, dtype=dtype)
    right_hand_side = jnp.asarray(right_hand_side, dtype=dtype)
    zero = jnp.zeros((), dtype=dtype)

    def eliminate(carry, row):
        modified_super_previous, modified_rhs_previous = carry
        sub, diag, sup, rhs = row
        denominator = diag - sub * modified_super_previous
        modified_super = sup / denominator
        modified_rhs = (rhs - sub * modified_rhs_previous) / denominator
        return (modified_super, modified_rhs), (modified_super, modified_rhs)

    _, (modified_super, modified_rhs) = jax.lax.scan(
        eliminate, (zero, zero), (sub_diagonal, diagonal, super_diagonal, right_hand_side)
    )

    def substitute(next_solution, row):
        sup, rhs = row
        solution = rhs - sup * next_solution
        return solution, solution

    _, solution = jax.lax.scan(
        substitute, zero, (modified_super, modified_rhs), reverse=True
    )
    return solution


def compute_natural_spline_second_derivatives(
    independent_values: Array, dependent_values: Array
) -> Array:
    """Second derivatives at the knots of the natural spline through the data."""
    n = independent_values.shape[0]
    if n < 3:
        return jnp.zeros_like(dependent_values)

    h = jnp.diff(independent_values)
    slopes = jnp.diff(dependent_values) / h
    interior = solve_tridiagonal(
        h[:-1],
        2.0 * (h[:-1] + h[1:]),
        h[1:],
        6.0 * (slopes[1:] - slopes[:-1]),
    )
    zero = jnp.zeros((1,), dtype=interior.dtype)
    return jnp.concatenate([zero, interior, zero])


class CubicSplineInterpolator(Interpolator):
    """Natural cubic spline through scalar data.

    Args:
        independent_values: Strictly ascending knots, shape ``(n,)``.
        dependent_values: Values at the knots, shape ``(n,)``.
        lookup_scheme: How the bracketing interval is found.

    Raises:
        ValueError: If the knots are empty, not ascending, or the two
            inputs disagree in length.

    Examples:
        ```python
        import jax.numpy as jnp
        from astrocore.interpolators import CubicSplineInterpolator
        x = jnp.linspace(0.0, 3.0, 7)
        spline = CubicSplineInterpolator(x, jnp.sin(x))
        spline(1.2)  # ~sin(1.2)
        ```
    """

    def __init__(
        self,
        independent_values: ArrayLike,
        dependent_values: ArrayLike,
        lookup_scheme: LookupScheme = LookupScheme.BINARY_SEARCH,
    ) -> None:
        self._lookup_scheme = create_lookup_scheme(independent_values, lookup_scheme)
        self._independent_values = self._lookup_scheme.independent_values
        dependent_values = jnp.asarray(dependent_values, dtype=get_dtype())
        if dependent_values.shape != self._independent_values.shape:
            raise ValueError(
                f"dependent values must have shape {self._independent_values.shape}, "
                f"got {dependent_values.shape}"
            )
        self._dependent_values = dependent_values
        self._second_derivatives = compute_natural_spline_second_derivatives(
            self._independent_values, self._dependent_values
        )

    @property
    def independent_values(self) -> Array:
        return self._independent_values

    @property
    def dependent_values(self) -> Array:
        return self._dependent_values

    @property
    def second_derivatives(self) -> Array:
        """Second derivatives of the spline at the knots."""
        return self._second_derivatives

    def interpolate(self, target: ArrayLike) -> Array:
        target = jnp.asarray(target, dtype=get_dtype())
        i = self._lookup_scheme.find_nearest_lower_neighbour(target)
        x = self._independent_values
        y = self._dependent_values
        m = self._second_derivatives

        h = x[i + 1] - x[i]
        a = (x[i + 1] - target) / h
        b = (target - x[i]) / h
        return a * y[i] + b * y[i + 1] + ((a**3 - a) * m[i] + (b**3 - b) * m[i + 1]) * h * h / 6.0
