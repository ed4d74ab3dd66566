"""Termination conditions for iterative root finders.

A termination condition is any callable with the signature::

    stop = condition(current_root, previous_root,
                     current_function_value, previous_function_value,
                     number_of_iterations)

returning ``True`` when iteration should stop.  The classes below combine a
convergence test on the root with a cap on the number of iterations; the
two are joined by a logical OR, so the cap is a configuration concern of the
condition and not of the root finder loop.

When the cap fires first, the condition either logs a warning and lets the
root finder return its latest (unconverged) iterate, or raises
:class:`~astrocore.root_finders.ConvergenceError` if constructed with
``throw_on_max_iterations_exceeded=True``.
"""

from __future__ import annotations

import logging

import jax.numpy as jnp
from jax.typing import ArrayLike

from astrocore.root_finders._types import ConvergenceError

logger = logging.getLogger(__name__)


class MaximumIterationsTerminationCondition:
    """Stop once a fixed number of iterations has been performed.

    Args:
        maximum_number_of_iterations: Iteration cap.
        throw_on_max_iterations_exceeded: Raise
            :class:`ConvergenceError` instead of warning when the cap is
            reached.
    """

    def __init__(
        self,
        maximum_number_of_iterations: int = 1000,
        throw_on_max_iterations_exceeded: bool = False,
    ) -> None:
        if maximum_number_of_iterations < 1:
            raise ValueError(
                f"maximum_number_of_iterations must be positive, got {maximum_number_of_iterations}"
            )
        self.maximum_number_of_iterations = maximum_number_of_iterations
        self.throw_on_max_iterations_exceeded = throw_on_max_iterations_exceeded

    def check_maximum_iterations_exceeded(self, number_of_iterations: int) -> bool:
        """Return ``True`` if the iteration cap has been reached.

        Raises:
            ConvergenceError: If the cap is reached and the condition was
                configured to raise.
        """
        if number_of_iterations < self.maximum_number_of_iterations:
            return False
        if self.throw_on_max_iterations_exceeded:
            raise ConvergenceError(self.maximum_number_of_iterations)
        logger.warning(
            "Root finder stopped after %d iterations without converging",
            number_of_iterations,
        )
        return True

    def __call__(
        self,
        current_root: ArrayLike,
        previous_root: ArrayLike,
        current_function_value: ArrayLike,
        previous_function_value: ArrayLike,
        number_of_iterations: int,
    ) -> bool:
        return self.check_maximum_iterations_exceeded(number_of_iterations)


class RootAbsoluteToleranceTerminationCondition(MaximumIterationsTerminationCondition):
    """Stop when successive roots differ by less than an absolute tolerance.

    Args:
        absolute_tolerance: Threshold on ``|x_n - x_{n-1}|``.
        maximum_number_of_iterations: Iteration cap.
        throw_on_max_iterations_exceeded: Raise instead of warn at the cap.
    """

    def __init__(
        self,
        absolute_tolerance: float = 1e-12,
        maximum_number_of_iterations: int = 1000,
        throw_on_max_iterations_exceeded: bool = False,
    ) -> None:
        super().__init__(maximum_number_of_iterations, throw_on_max_iterations_exceeded)
        self.absolute_tolerance = absolute_tolerance

    def __call__(self, current_root, previous_root, current_function_value,
                 previous_function_value, number_of_iterations):
        if bool(jnp.abs(current_root - previous_root) < self.absolute_tolerance):
            return True
        return self.check_maximum_iterations_exceeded(number_of_iterations)


class RootRelativeToleranceTerminationCondition(MaximumIterationsTerminationCondition):
    """Stop when the relative change of the root drops below a tolerance.

    The test is ``|x_n - x_{n-1}| / |x_n| < relative_tolerance``.  A
    non-finite root (e.g. after a zero derivative in Newton-Raphson) never
    satisfies it, so only the iteration cap can stop such a run.

    Args:
        relative_tolerance: Threshold on the relative change.
        maximum_number_of_iterations: Iteration cap.
        throw_on_max_iterations_exceeded: Raise instead of warn at the cap.
    """

    def __init__(
        self,
        relative_tolerance: float = 1e-12,
        maximum_number_of_iterations: int = 1000,
        throw_on_max_iterations_exceeded: bool = False,
    ) -> None:
        super().__init__(maximum_number_of_iterations, throw_on_max_iterations_exceeded)
        self.relative_tolerance = relative_tolerance

    def __call__(self, current_root, previous_root, current_function_value,
                 previous_function_value, number_of_iterations):
        current_root = jnp.asarray(current_root)
        relative_change = jnp.abs(current_root - previous_root) / jnp.abs(current_root)
        if bool(relative_change < self.relative_tolerance):
            return True
        return self.check_maximum_iterations_exceeded(number_of_iterations)


class RootAbsoluteOrRelativeToleranceTerminationCondition(MaximumIterationsTerminationCondition):
    """Stop when either the absolute or the relative tolerance is met.

    Useful for roots near zero, where the relative test alone never
    converges.

    Args:
        absolute_tolerance: Threshold on ``|x_n - x_{n-1}|``.
        relative_tolerance: Threshold on ``|x_n - x_{n-1}| / |x_n|``.
        maximum_number_of_iterations: Iteration cap.
        throw_on_max_iterations_exceeded: Raise instead of warn at the cap.
    """

    def __init__(
        self,
        absolute_tolerance: float = 1e-12,
        relative_tolerance: float = 1e-12,
        maximum_number_of_iterations: int = 1000,
        throw_on_max_iterations_exceeded: bool = False,
    ) -> None:
        super().__init__(maximum_number_of_iterations, throw_on_max_iterations_exceeded)
        self.absolute_tolerance = absolute_tolerance
        self.relative_tolerance = relative_tolerance

    def __call__(self, current_root, previous_root, current_function_value,
                 previous_function_value, number_of_iterations):
        current_root = jnp.asarray(current_root)
        change = jnp.abs(current_root - previous_root)
        if bool(change < self.absolute_tolerance):
            return True
        if bool(change / jnp.abs(current_root) < self.relative_tolerance):
            return True
        return self.check_maximum_iterations_exceeded(number_of_iterations)
