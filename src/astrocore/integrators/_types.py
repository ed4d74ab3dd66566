"""Type definitions for numerical integrators.

Provides the core data types used across all integrator implementations:

- :data:`StateDerivativeFunction`: Signature of the ODE right-hand side.
- :data:`NewStepSizeFunction`: Signature of a pluggable step-size strategy.
- :class:`StepSizeControl`: Safety and growth/shrink bounds for adaptive
  step-size control.
- :class:`IntegrationError` and :class:`MinimumStepSizeExceededError`:
  Fatal integration failures.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

from jax import Array

StateDerivativeFunction = Callable[[Array, Array], Array]

NewStepSizeFunction = Callable[
    [float, int, int, float, Array, Array, Array, Array],
    tuple[float, bool],
]


class StepSizeControl(NamedTuple):
    """Factors bounding the adaptive step-size update.

    Attributes:
        safety_factor: Multiplicative safety factor applied to the
            predicted step size. Usually picked between 0.8 and 0.9
            (Burden and Faires, 2001).
        maximum_factor_increase: Largest allowed ratio of the new step size
            to the step just taken. Keeps step changes from aliasing with
            the dynamics being integrated.
        minimum_factor_decrease: Smallest allowed ratio of the new step size
            to the step just taken.
    """

    safety_factor: float = 0.8
    maximum_factor_increase: float = 4.0
    minimum_factor_decrease: float = 0.1


class IntegrationError(RuntimeError):
    """Raised when an integration step cannot be completed."""


class MinimumStepSizeExceededError(IntegrationError):
    """Raised when the step-size controller asks for a step below the minimum.

    Propagation cannot continue without violating the requested accuracy,
    so this is fatal for the current integration.

    Attributes:
        minimum_step_size: The minimum step size allowed by the integrator.
        requested_step_size: The (absolute) step size the controller asked
            for.
    """

    def __init__(self, minimum_step_size: float, requested_step_size: float) -> None:
        super().__init__(
            f"Minimum step size exceeded: requested {requested_step_size:g}, "
            f"minimum {minimum_step_size:g}"
        )
        self.minimum_step_size = minimum_step_size
        self.requested_step_size = requested_step_size
