"""Common interface for stateful single-step integrators.

:class:`NumericalIntegrator` is what propagation code talks to: it can take
one step of a given size, report its current state, undo the last step, and
integrate up to a given value of the independent variable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_machine_epsilon


class NumericalIntegrator(ABC):
    """Stateful integrator advancing ``dx/dt = f(t, x)`` one step at a time."""

    @property
    @abstractmethod
    def current_state(self) -> Array:
        """State at :attr:`current_independent_variable`."""

    @property
    @abstractmethod
    def current_independent_variable(self) -> float:
        """Current value of the independent variable."""

    @property
    @abstractmethod
    def next_step_size(self) -> float:
        """Step size the integrator proposes for its next step."""

    @abstractmethod
    def perform_integration_step(self, step_size: float) -> Array:
        """Advance the state by one step and return the new state."""

    @abstractmethod
    def rollback_to_previous_state(self) -> bool:
        """Undo the last step. Returns ``False`` if there is nothing to undo."""

    @abstractmethod
    def modify_current_state(self, new_state: ArrayLike) -> None:
        """Overwrite the current state without taking a step."""

    def integrate_to(self, interval_end: float, initial_step_size: float) -> Array:
        """Integrate until the independent variable reaches ``interval_end``.

        Steps are taken with the size proposed by the integrator after each
        step, starting from ``initial_step_size``.  The step that would
        overshoot ``interval_end`` is shortened to land on it.  When the
        remainder is between one and two steps it is split into two equal
        steps, so the last step is never much smaller than the ones before
        it.  Negative step sizes integrate backwards.

        Args:
            interval_end: Value of the independent variable to stop at.
            initial_step_size: Size of the first step.

        Returns:
            jax.Array: State at ``interval_end``.

        Raises:
            ValueError: If ``initial_step_size`` points away from
                ``interval_end``.
            MinimumStepSizeExceededError: If the remaining interval is
                shorter than the minimum step size. The step that would
                cover it is discarded and the state stays where it was.
        """
        step_size = float(initial_step_size)
        remaining = interval_end - self.current_independent_variable
        end_tolerance = 10.0 * get_machine_epsilon() * max(1.0, abs(interval_end))
        if abs(remaining) <= end_tolerance:
            return self.current_state
        if step_size == 0.0 or remaining * step_size < 0.0:
            raise ValueError(
                f"initial_step_size {step_size:g} does not point towards interval end "
                f"{interval_end:g} from {self.current_independent_variable:g}"
            )

        while abs(remaining) > end_tolerance:
            if abs(remaining) <= abs(step_size):
                step_size = remaining
            elif abs(remaining) < 2.0 * abs(step_size):
                step_size = 0.5 * remaining
            self.perform_integration_step(step_size)
            step_size = self.next_step_size
            remaining = interval_end - self.current_independent_variable

        return self.current_state
