"""Variable-step-size embedded Runge-Kutta integrator.

Each call to :meth:`RungeKuttaVariableStepSizeIntegrator.perform_integration_step`
evaluates all stages of the Butcher tableau, forms the lower- and
higher-order solutions, and hands both to the step-size strategy.  If the
error is within tolerance the step is committed; otherwise it is redone from
scratch with the smaller step the strategy proposed.  Rejected attempts are
normal control flow and are not reported to the caller.  The loop ends
either with an accepted step or with
:class:`~astrocore.integrators.MinimumStepSizeExceededError` once the
controller asks for a step below the minimum; there is no separate retry
cap.

Stage evaluations are never reused between attempts (the Fehlberg pairs
are not first-same-as-last), so an attempt always costs exactly
``number_of_stages`` derivative evaluations.
"""

from __future__ import annotations

import logging

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype
from astrocore.integrators._adaptive import bound_step_size, compute_new_step_size
from astrocore.integrators._base import NumericalIntegrator
from astrocore.integrators._types import (
    NewStepSizeFunction,
    StateDerivativeFunction,
    StepSizeControl,
)
from astrocore.integrators.coefficients import (
    OrderEstimateToIntegrate,
    RungeKuttaCoefficients,
)

logger = logging.getLogger(__name__)


class RungeKuttaVariableStepSizeIntegrator(NumericalIntegrator):
    """Adaptive embedded Runge-Kutta integrator with single-level rollback.

    Args:
        coefficients: Butcher tableau, e.g. from
            :func:`~astrocore.integrators.get_coefficients`.
        state_derivative_function: ODE right-hand side ``f(t, x) -> dx/dt``.
            Called with intermediate, possibly non-physical, states.
        interval_start: Initial value of the independent variable.
        initial_state: Initial state vector.
        minimum_step_size: Smallest allowed step magnitude. Violating it is
            fatal.
        maximum_step_size: Largest allowed step magnitude. Larger proposals
            are clamped.
        relative_error_tolerance: Relative tolerance, scalar or one value
            per state element.
        absolute_error_tolerance: Absolute tolerance, scalar or one value
            per state element.
        step_size_control: Safety factor and step-change bounds. Uses the
            default :class:`StepSizeControl` if ``None``.
        new_step_size_function: Step-size strategy with the signature of
            :func:`~astrocore.integrators.compute_new_step_size`, which is
            used if ``None``.

    Examples:
        ```python
        import jax.numpy as jnp
        from astrocore.integrators import (
            CoefficientSet, RungeKuttaVariableStepSizeIntegrator, get_coefficients,
        )
        integrator = RungeKuttaVariableStepSizeIntegrator(
            get_coefficients(CoefficientSet.RUNGE_KUTTA_FEHLBERG_78),
            lambda t, x: x, 0.0, jnp.array([1.0]),
            minimum_step_size=1e-6, maximum_step_size=1.0,
        )
        integrator.integrate_to(1.0, 0.1)  # ~[e]
        ```
    """

    def __init__(
        self,
        coefficients: RungeKuttaCoefficients,
        state_derivative_function: StateDerivativeFunction,
        interval_start: float,
        initial_state: ArrayLike,
        minimum_step_size: float,
        maximum_step_size: float,
        relative_error_tolerance: ArrayLike = 1e-12,
        absolute_error_tolerance: ArrayLike = 1e-12,
        step_size_control: StepSizeControl | None = None,
        new_step_size_function: NewStepSizeFunction | None = None,
    ) -> None:
        if step_size_control is None:
            step_size_control = StepSizeControl()

        dtype = get_dtype()
        initial_state = jnp.asarray(initial_state, dtype=dtype)

        self._coefficients = coefficients
        self._state_derivative_function = state_derivative_function
        self._current_independent_variable = float(interval_start)
        self._current_state = initial_state
        self._last_independent_variable = float(interval_start)
        self._last_state = initial_state
        self._minimum_step_size = abs(float(minimum_step_size))
        self._maximum_step_size = abs(float(maximum_step_size))
        self._relative_error_tolerance = jnp.broadcast_to(
            jnp.abs(jnp.asarray(relative_error_tolerance, dtype=dtype)), initial_state.shape
        )
        self._absolute_error_tolerance = jnp.broadcast_to(
            jnp.abs(jnp.asarray(absolute_error_tolerance, dtype=dtype)), initial_state.shape
        )
        self._step_size_control = StepSizeControl(*(abs(f) for f in step_size_control))
        self._new_step_size_function = new_step_size_function or compute_new_step_size
        self._step_size = 0.0
        self._current_state_derivatives: list[Array] = []

        if self._minimum_step_size > self._maximum_step_size:
            raise ValueError(
                f"minimum_step_size ({self._minimum_step_size:g}) exceeds "
                f"maximum_step_size ({self._maximum_step_size:g})"
            )

    @property
    def coefficients(self) -> RungeKuttaCoefficients:
        """Butcher tableau used by this integrator."""
        return self._coefficients

    @property
    def current_state(self) -> Array:
        return self._current_state

    @property
    def current_independent_variable(self) -> float:
        return self._current_independent_variable

    @property
    def next_step_size(self) -> float:
        return self._step_size

    @property
    def minimum_step_size(self) -> float:
        return self._minimum_step_size

    @property
    def maximum_step_size(self) -> float:
        return self._maximum_step_size

    @property
    def current_state_derivatives(self) -> list[Array]:
        """Stage derivatives ``k_i`` of the last attempted step."""
        return list(self._current_state_derivatives)

    def perform_integration_step(self, step_size: float) -> Array:
        """Take one accepted step, retrying with smaller steps as needed.

        The step actually taken may be smaller than ``step_size`` if the
        first attempt is rejected.  Afterwards :attr:`next_step_size` holds
        the step size proposed for the following step.

        Args:
            step_size: Step size of the first attempt. May be negative.

        Returns:
            jax.Array: The new current state.

        Raises:
            MinimumStepSizeExceededError: If the controller asks for a step
                smaller than the minimum step size.
            IntegrationError: If the error estimate is NaN.
        """
        step_size = float(step_size)
        while True:
            lower_order_estimate, higher_order_estimate = self._compute_estimates(step_size)
            if self._compute_next_step_size_and_validate_result(
                lower_order_estimate, higher_order_estimate, step_size
            ):
                break
            logger.debug(
                "Rejected step of %g at t=%g, retrying with %g",
                step_size,
                self._current_independent_variable,
                self._step_size,
            )
            step_size = self._step_size

        self._last_independent_variable = self._current_independent_variable
        self._last_state = self._current_state
        self._current_independent_variable += step_size
        if self._coefficients.order_estimate_to_integrate is OrderEstimateToIntegrate.LOWER:
            self._current_state = lower_order_estimate
        else:
            self._current_state = higher_order_estimate
        return self._current_state

    def rollback_to_previous_state(self) -> bool:
        """Restore the state from before the last accepted step.

        Only one level of history is kept: a second consecutive call, or a
        call right after :meth:`modify_current_state`, returns ``False`` and
        changes nothing.

        Returns:
            bool: ``True`` if the rollback happened.
        """
        if self._current_independent_variable == self._last_independent_variable:
            return False
        self._current_independent_variable = self._last_independent_variable
        self._current_state = self._last_state
        return True

    def modify_current_state(self, new_state: ArrayLike) -> None:
        """Replace the current state, e.g. for staging or impulsive shots.

        The modification cannot be rolled back; the rollback point moves to
        the current instant.  To revert, store the state beforehand and pass
        it back in.

        Args:
            new_state: State to continue integrating from.
        """
        self._current_state = jnp.asarray(new_state, dtype=get_dtype())
        self._last_independent_variable = self._current_independent_variable

    def _compute_estimates(self, step_size: float) -> tuple[Array, Array]:
        """Evaluate all stages and return the lower- and higher-order solutions."""
        a = self._coefficients.a
        b_lower, b_higher = self._coefficients.b
        c = self._coefficients.c
        t = self._current_independent_variable
        state = self._current_state
        dtype = get_dtype()

        self._current_state_derivatives = []
        lower_order_estimate = state
        higher_order_estimate = state
        for stage in range(self._coefficients.number_of_stages):
            intermediate_state = state
            for column in range(stage):
                if a[stage][column] != 0.0:
                    intermediate_state = intermediate_state + (
                        step_size * a[stage][column] * self._current_state_derivatives[column]
                    )

            derivative = jnp.asarray(
                self._state_derivative_function(t + c[stage] * step_size, intermediate_state),
                dtype=dtype,
            )
            self._current_state_derivatives.append(derivative)

            if b_lower[stage] != 0.0:
                lower_order_estimate = lower_order_estimate + b_lower[stage] * step_size * derivative
            if b_higher[stage] != 0.0:
                higher_order_estimate = (
                    higher_order_estimate + b_higher[stage] * step_size * derivative
                )

        return lower_order_estimate, higher_order_estimate

    def _compute_next_step_size_and_validate_result(
        self,
        lower_order_estimate: Array,
        higher_order_estimate: Array,
        step_size: float,
    ) -> bool:
        """Store the bounded next step size and report whether to accept."""
        control = self._step_size_control
        new_step_size, accepted = self._new_step_size_function(
            step_size,
            self._coefficients.lower_order,
            self._coefficients.higher_order,
            control.safety_factor,
            self._relative_error_tolerance,
            self._absolute_error_tolerance,
            lower_order_estimate,
            higher_order_estimate,
        )
        self._step_size = bound_step_size(
            new_step_size,
            step_size,
            control,
            self._minimum_step_size,
            self._maximum_step_size,
        )
        return accepted
