"""Generic iteration loop shared by all root finders.

:class:`RootFinderCore` owns the fixed-point loop: it keeps the current and
the next iterate together with their function values, asks the concrete
update rule for the next iterate, and stops as soon as the termination
condition says so.  The loop itself has no iteration cap; the cap lives in
the termination condition.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype
from astrocore.root_finders._types import RootFunction, TerminationFunction


class RootFinderCore(ABC):
    """Base class for iterative scalar root finders.

    Args:
        termination_function: Callable deciding when to stop, with signature
            ``(current_root, previous_root, current_value, previous_value,
            number_of_iterations) -> bool``.
    """

    def __init__(self, termination_function: TerminationFunction) -> None:
        self.termination_function = termination_function

    @abstractmethod
    def _compute_next_root(
        self, root_function: RootFunction, root: Array, function_value: Array
    ) -> Array:
        """Apply the update rule to obtain the next iterate."""

    def execute(self, root_function: RootFunction, initial_guess: ArrayLike) -> Array:
        """Find a root of ``root_function`` starting from ``initial_guess``.

        Args:
            root_function: Function object providing ``evaluate`` and
                ``compute_derivative``.
            initial_guess: Starting iterate.

        Returns:
            jax.Array: The most recent iterate when the termination
            condition fired.  It is not guaranteed to be a root if the
            condition stopped on its iteration cap.
        """
        next_root = jnp.asarray(initial_guess, dtype=get_dtype())
        next_value = root_function.evaluate(next_root)
        number_of_iterations = 0

        while True:
            current_root, current_value = next_root, next_value
            next_root = self._compute_next_root(root_function, current_root, current_value)
            next_value = root_function.evaluate(next_root)
            number_of_iterations += 1
            if self.termination_function(
                next_root, current_root, next_value, current_value, number_of_iterations
            ):
                return next_root
