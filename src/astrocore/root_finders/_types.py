"""Type definitions for root finders.

Provides the function objects consumed by every root finder:

- :class:`RootFunction`: Abstract scalar function exposing its value and
  its derivatives.
- :class:`AutodiffRootFunction`: Wraps a JAX-traceable scalar function and
  obtains derivatives of any order through ``jax.grad``.
- :class:`CallableRootFunction`: Wraps a function together with
  hand-written derivative callables.
- :class:`ConvergenceError`: Raised by termination conditions that are
  configured to fail loudly when the iteration limit is reached.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype

TerminationFunction = Callable[[Array, Array, Array, Array, int], bool]


class ConvergenceError(RuntimeError):
    """Raised when a root finder exceeds its maximum number of iterations.

    Attributes:
        maximum_number_of_iterations: The iteration limit that was reached.
    """

    def __init__(self, maximum_number_of_iterations: int) -> None:
        super().__init__(
            f"Root finder did not converge within {maximum_number_of_iterations} iterations"
        )
        self.maximum_number_of_iterations = maximum_number_of_iterations


class RootFunction(ABC):
    """Scalar function whose root is sought.

    Root finders only ever call :meth:`evaluate` and
    :meth:`compute_derivative`; implementations hold no state between
    calls other than values cached for the same ``x``.
    """

    @abstractmethod
    def evaluate(self, x: ArrayLike) -> Array:
        """Evaluate the function at ``x``."""

    @abstractmethod
    def compute_derivative(self, order: int, x: ArrayLike) -> Array:
        """Evaluate the derivative of the given ``order`` at ``x``."""

    def __call__(self, x: ArrayLike) -> Array:
        return self.evaluate(x)


class AutodiffRootFunction(RootFunction):
    """Root function with derivatives computed by automatic differentiation.

    The wrapped function must be scalar-to-scalar and traceable by JAX.
    Derivatives of order ``n`` are built once by nesting ``jax.grad`` and
    cached on the instance.

    Args:
        function: Scalar function ``f(x) -> y``.

    Examples:
        ```python
        from astrocore.root_finders import AutodiffRootFunction
        f = AutodiffRootFunction(lambda x: x**2 - 2.0)
        f.compute_derivative(1, 3.0)  # 6.0
        ```
    """

    def __init__(self, function: Callable[[Array], Array]) -> None:
        self._function = function
        self._derivatives: dict[int, Callable[[Array], Array]] = {0: function}

    def evaluate(self, x: ArrayLike) -> Array:
        x = jnp.asarray(x, dtype=get_dtype())
        return jnp.asarray(self._function(x), dtype=get_dtype())

    def compute_derivative(self, order: int, x: ArrayLike) -> Array:
        if order < 0:
            raise ValueError(f"Derivative order must be non-negative, got {order}")
        if order not in self._derivatives:
            highest = max(self._derivatives)
            derivative = self._derivatives[highest]
            for n in range(highest + 1, order + 1):
                derivative = jax.grad(derivative)
                self._derivatives[n] = derivative
        x = jnp.asarray(x, dtype=get_dtype())
        return jnp.asarray(self._derivatives[order](x), dtype=get_dtype())


class CallableRootFunction(RootFunction):
    """Root function assembled from explicit callables.

    Args:
        function: Scalar function ``f(x)``.
        first_derivative: ``f'(x)``.
        second_derivative: Optional ``f''(x)``.
    """

    def __init__(
        self,
        function: Callable[[Array], ArrayLike],
        first_derivative: Callable[[Array], ArrayLike],
        second_derivative: Callable[[Array], ArrayLike] | None = None,
    ) -> None:
        self._callables = [function, first_derivative]
        if second_derivative is not None:
            self._callables.append(second_derivative)

    def evaluate(self, x: ArrayLike) -> Array:
        return self.compute_derivative(0, x)

    def compute_derivative(self, order: int, x: ArrayLike) -> Array:
        if not 0 <= order < len(self._callables):
            raise ValueError(
                f"Derivative of order {order} is not available; "
                f"highest supplied order is {len(self._callables) - 1}"
            )
        x = jnp.asarray(x, dtype=get_dtype())
        return jnp.asarray(self._callables[order](x), dtype=get_dtype())
