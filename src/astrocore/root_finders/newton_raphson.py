"""Newton-Raphson root finder.

Iterates

.. math::

    x_{n+1} = x_n - \\frac{f(x_n)}{f'(x_n)}

with no bracketing or bisection fallback.  Convergence is quadratic near a
simple root given a reasonable initial guess, which is what tight loops such
as Kepler's equation need.  Away from that regime the method can diverge:

- A zero derivative makes the update non-finite.  This is not caught; the
  non-finite iterate propagates, never satisfies a tolerance test, and the
  termination condition's iteration cap ends the run.
- Multiple roots, inflection points and poor initial guesses may oscillate
  or run away.

Callers that need robustness should bound the problem domain, use a
termination condition that raises on its iteration cap, or check the
residual ``f(root)`` of the returned value.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array

from astrocore.root_finders._core import RootFinderCore
from astrocore.root_finders._types import RootFunction
from astrocore.root_finders.termination_conditions import (
    RootRelativeToleranceTerminationCondition,
)


class NewtonRaphson(RootFinderCore):
    """Newton-Raphson root finder.

    Args:
        termination_function: Any termination callable; see
            :mod:`astrocore.root_finders.termination_conditions`.

    Examples:
        ```python
        from astrocore.root_finders import AutodiffRootFunction, NewtonRaphson
        finder = NewtonRaphson.from_tolerance(1e-12, 100)
        root = finder.execute(AutodiffRootFunction(lambda x: x**2 - 2.0), 1.5)
        ```
    """

    @classmethod
    def from_tolerance(
        cls,
        relative_tolerance: float,
        maximum_number_of_iterations: int,
    ) -> NewtonRaphson:
        """Build a finder that stops on relative tolerance or iteration count.

        Args:
            relative_tolerance: Threshold on ``|x_n - x_{n-1}| / |x_n|``.
            maximum_number_of_iterations: Iteration cap.

        Returns:
            NewtonRaphson: Finder using a
            :class:`RootRelativeToleranceTerminationCondition`.
        """
        return cls(
            RootRelativeToleranceTerminationCondition(
                relative_tolerance, maximum_number_of_iterations
            )
        )

    def _compute_next_root(
        self, root_function: RootFunction, root: Array, function_value: Array
    ) -> Array:
        derivative = root_function.compute_derivative(1, root)
        # jnp division keeps f' = 0 as inf/nan instead of raising
        return root - jnp.divide(function_value, derivative)
