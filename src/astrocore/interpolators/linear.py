"""Piecewise-linear interpolation in one independent variable.

Dependent values may be scalars (shape ``(n,)``) or vectors (shape
``(n, m)``); vectors are interpolated element-wise.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype
from astrocore.interpolators._base import Interpolator
from astrocore.interpolators.lookup import (
    LookupScheme,
    create_lookup_scheme,
    find_nearest_left_neighbour_using_binary_search,
    validate_independent_values,
)


def _validate_dependent_values(independent_values: Array, dependent_values: ArrayLike) -> Array:
    dependent_values = jnp.asarray(dependent_values, dtype=get_dtype())
    if dependent_values.ndim not in (1, 2):
        raise ValueError(
            f"dependent values must have shape (n,) or (n, m), got {dependent_values.shape}"
        )
    if dependent_values.shape[0] != independent_values.shape[0]:
        raise ValueError(
            f"Got {independent_values.shape[0]} independent values but "
            f"{dependent_values.shape[0]} dependent values"
        )
    return dependent_values


def _interpolate_in_interval(
    independent_values: Array, dependent_values: Array, index: int, target: Array
) -> Array:
    x0 = independent_values[index]
    x1 = independent_values[index + 1]
    y0 = dependent_values[index]
    y1 = dependent_values[index + 1]
    return y0 + (y1 - y0) * (target - x0) / (x1 - x0)


def compute_linear_interpolation(
    independent_values: ArrayLike,
    dependent_values: ArrayLike,
    target: ArrayLike,
) -> Array:
    """Linearly interpolate a table at a single target.

    The bracketing interval is found by binary search.  Targets outside the
    table are extrapolated with the first or last interval.

    Args:
        independent_values: Strictly ascending table, shape ``(n,)``.
        dependent_values: Values at the table points, shape ``(n,)`` or
            ``(n, m)``.
        target: Independent value to interpolate at.

    Returns:
        jax.Array: Scalar, or shape ``(m,)`` for vector dependent values.

    Raises:
        ValueError: If the table is empty, not ascending, or the two inputs
            disagree in length.

    Examples:
        ```python
        compute_linear_interpolation([0.0, 1.0, 3.0], [-20.0, 20.0, 21.0], 2.0)  # 20.5
        ```
    """
    independent_values = validate_independent_values(independent_values)
    dependent_values = _validate_dependent_values(independent_values, dependent_values)
    target = jnp.asarray(target, dtype=get_dtype())
    index = find_nearest_left_neighbour_using_binary_search(independent_values, target)
    return _interpolate_in_interval(independent_values, dependent_values, index, target)


class LinearInterpolator(Interpolator):
    """Piecewise-linear interpolator over a fixed table.

    Args:
        independent_values: Strictly ascending table, shape ``(n,)``.
        dependent_values: Values at the table points, shape ``(n,)`` or
            ``(n, m)``.
        lookup_scheme: How the bracketing interval is found.

    Raises:
        ValueError: If the table is empty, not ascending, or the two inputs
            disagree in length.
    """

    def __init__(
        self,
        independent_values: ArrayLike,
        dependent_values: ArrayLike,
        lookup_scheme: LookupScheme = LookupScheme.BINARY_SEARCH,
    ) -> None:
        self._lookup_scheme = create_lookup_scheme(independent_values, lookup_scheme)
        self._independent_values = self._lookup_scheme.independent_values
        self._dependent_values = _validate_dependent_values(
            self._independent_values, dependent_values
        )

    @property
    def independent_values(self) -> Array:
        return self._independent_values

    @property
    def dependent_values(self) -> Array:
        return self._dependent_values

    def interpolate(self, target: ArrayLike) -> Array:
        target = jnp.asarray(target, dtype=get_dtype())
        index = self._lookup_scheme.find_nearest_lower_neighbour(target)
        return _interpolate_in_interval(
            self._independent_values, self._dependent_values, index, target
        )
