"""Adaptive step-size control utilities for embedded Runge-Kutta methods.

Provides the default error-control strategy and the step-size bounding
shared by the variable-step integrators:

1. Compare the higher- and lower-order solutions element by element against
   mixed relative/absolute tolerances.
2. Accept the step if the largest normalized error is <= 1.0.
3. Predict the next step size from that error and the higher order.
4. Bound the change of step size and the step size itself.
"""

from __future__ import annotations

import math

import jax.numpy as jnp
from jax.typing import ArrayLike

from astrocore.integrators._types import (
    IntegrationError,
    MinimumStepSizeExceededError,
    StepSizeControl,
)


def compute_new_step_size(
    step_size: float,
    lower_order: int,
    higher_order: int,
    safety_factor: float,
    relative_error_tolerance: ArrayLike,
    absolute_error_tolerance: ArrayLike,
    lower_order_estimate: ArrayLike,
    higher_order_estimate: ArrayLike,
) -> tuple[float, bool]:
    """Propose a new step size from the local truncation error.

    The per-element tolerance and the error norm are:

    .. math::

        \\epsilon_i = |y^{\\text{high}}_i - y^{\\text{low}}_i|, \\qquad
        \\text{tol}_i = |y^{\\text{high}}_i| \\cdot \\text{rel}_i
            + \\text{abs}_i, \\qquad
        e = \\max_i \\frac{\\epsilon_i}{\\text{tol}_i}

    and the proposed step follows Montenbruck and Gill (2005):

    .. math::

        h_{\\text{new}} = S \\cdot h \\cdot
            \\left(\\frac{1}{e}\\right)^{1/p_{\\text{high}}}

    A zero error yields an infinite proposal, which the caller's
    factor-increase bound turns into the maximum growth.

    Args:
        step_size: Step size used to obtain the estimates.
        lower_order: Order of the lower-order solution (unused by this
            strategy, part of the strategy signature).
        higher_order: Order of the higher-order solution.
        safety_factor: Multiplicative safety factor.
        relative_error_tolerance: Relative tolerance per element.
        absolute_error_tolerance: Absolute tolerance per element.
        lower_order_estimate: Lower-order solution at the end of the step.
        higher_order_estimate: Higher-order solution at the end of the step.

    Returns:
        tuple[float, bool]: Proposed step size and whether the step just
        taken satisfies the tolerances.
    """
    del lower_order
    truncation_error = jnp.abs(higher_order_estimate - lower_order_estimate)
    error_tolerance = (
        jnp.abs(higher_order_estimate) * relative_error_tolerance + absolute_error_tolerance
    )
    maximum_error_in_state = jnp.max(truncation_error / error_tolerance)

    new_step_size = (
        safety_factor * step_size * jnp.power(1.0 / maximum_error_in_state, 1.0 / higher_order)
    )
    return float(new_step_size), bool(maximum_error_in_state <= 1.0)


def bound_step_size(
    new_step_size: float,
    step_size: float,
    control: StepSizeControl,
    minimum_step_size: float,
    maximum_step_size: float,
) -> float:
    """Apply the factor and absolute bounds to a proposed step size.

    The ratio ``new_step_size / step_size`` is clamped to
    ``[minimum_factor_decrease, maximum_factor_increase]``.  A result whose
    magnitude exceeds ``maximum_step_size`` is clamped to it, keeping the
    sign of the step.  A magnitude below ``minimum_step_size`` is fatal.

    Args:
        new_step_size: Step size proposed by the strategy.
        step_size: Step size just attempted.
        control: Factor bounds.
        minimum_step_size: Smallest allowed step magnitude.
        maximum_step_size: Largest allowed step magnitude.

    Returns:
        float: The bounded step size.

    Raises:
        IntegrationError: If the proposal is NaN, e.g. because the
            derivative function returned non-finite values.
        MinimumStepSizeExceededError: If the bounded step size is smaller in
            magnitude than ``minimum_step_size``.
    """
    if math.isnan(new_step_size):
        raise IntegrationError(
            f"Step-size control produced NaN after a step of size {step_size:g}"
        )

    ratio = new_step_size / step_size
    if ratio <= control.minimum_factor_decrease:
        bounded = step_size * control.minimum_factor_decrease
    elif ratio >= control.maximum_factor_increase:
        bounded = step_size * control.maximum_factor_increase
    else:
        bounded = new_step_size

    if abs(bounded) < minimum_step_size:
        raise MinimumStepSizeExceededError(minimum_step_size, abs(bounded))
    if abs(bounded) > maximum_step_size:
        bounded = math.copysign(maximum_step_size, step_size)
    return bounded
