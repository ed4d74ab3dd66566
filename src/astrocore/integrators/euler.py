"""Fixed-step forward Euler integrator.

First-order and without error control.  Mostly useful as a reference
against which the embedded Runge-Kutta schemes can be checked, and for
quick propagations where accuracy does not matter.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype
from astrocore.integrators._base import NumericalIntegrator
from astrocore.integrators._types import StateDerivativeFunction


class EulerIntegrator(NumericalIntegrator):
    """Forward Euler: ``x_{n+1} = x_n + h * f(t_n, x_n)``.

    Args:
        state_derivative_function: ODE right-hand side ``f(t, x) -> dx/dt``.
        interval_start: Initial value of the independent variable.
        initial_state: Initial state vector.

    Examples:
        ```python
        import jax.numpy as jnp
        from astrocore.integrators import EulerIntegrator
        integrator = EulerIntegrator(lambda t, x: -x, 0.0, jnp.array([1.0]))
        integrator.perform_integration_step(0.1)  # [0.9]
        ```
    """

    def __init__(
        self,
        state_derivative_function: StateDerivativeFunction,
        interval_start: float,
        initial_state: ArrayLike,
    ) -> None:
        initial_state = jnp.asarray(initial_state, dtype=get_dtype())
        self._state_derivative_function = state_derivative_function
        self._current_independent_variable = float(interval_start)
        self._current_state = initial_state
        self._last_independent_variable = float(interval_start)
        self._last_state = initial_state
        self._step_size = 0.0

    @property
    def current_state(self) -> Array:
        return self._current_state

    @property
    def current_independent_variable(self) -> float:
        return self._current_independent_variable

    @property
    def next_step_size(self) -> float:
        """Step size of the last step; a fixed-step method repeats it."""
        return self._step_size

    def perform_integration_step(self, step_size: float) -> Array:
        step_size = float(step_size)
        derivative = jnp.asarray(
            self._state_derivative_function(
                self._current_independent_variable, self._current_state
            ),
            dtype=get_dtype(),
        )
        self._last_independent_variable = self._current_independent_variable
        self._last_state = self._current_state
        self._current_state = self._current_state + step_size * derivative
        self._current_independent_variable += step_size
        self._step_size = step_size
        return self._current_state

    def rollback_to_previous_state(self) -> bool:
        if self._current_independent_variable == self._last_independent_variable:
            return False
        self._current_independent_variable = self._last_independent_variable
        self._current_state = self._last_state
        return True

    def modify_current_state(self, new_state: ArrayLike) -> None:
        self._current_state = jnp.asarray(new_state, dtype=get_dtype())
        self._last_independent_variable = self._current_independent_variable
