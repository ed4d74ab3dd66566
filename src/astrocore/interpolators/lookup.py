"""Interval lookup in ascending tables of independent values.

A lookup returns the index ``i`` of the interval ``[x_i, x_{i+1}]`` that
brackets a target.  Indices are clamped to ``[0, n - 2]``: a target below
the table maps to the first interval and a target above it to the last, so
the interpolators built on top extrapolate with the end intervals.

Two schemes are available:

- :class:`BinarySearchLookupScheme` -- stateless, O(log n) per query via
  ``jnp.searchsorted``.
- :class:`HuntingAlgorithmLookupScheme` -- remembers the last interval and
  hunts outward from it, which is close to O(1) for targets that change
  slowly, e.g. successive integrator steps.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype


class LookupScheme(enum.Enum):
    """Available interval lookup schemes."""

    BINARY_SEARCH = "binary_search"
    HUNTING_ALGORITHM = "hunting_algorithm"


def validate_independent_values(values: ArrayLike, name: str = "independent values") -> Array:
    """Coerce a 1-D table of independent values and check it can be searched.

    Args:
        values: Candidate table.
        name: Name used in error messages.

    Returns:
        jax.Array: The table as a 1-D array of the configured dtype.

    Raises:
        ValueError: If the table is not 1-D, has fewer than two entries or
            is not strictly ascending.
    """
    values = jnp.asarray(values, dtype=get_dtype())
    if values.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional, got shape {values.shape}")
    if values.shape[0] < 2:
        raise ValueError(f"{name} must contain at least two entries, got {values.shape[0]}")
    if not bool(jnp.all(jnp.diff(values) > 0.0)):
        raise ValueError(f"{name} must be strictly ascending")
    return values


def find_nearest_left_neighbour_using_binary_search(values: ArrayLike, target: ArrayLike) -> int:
    """Index of the interval of an ascending table that brackets ``target``.

    Args:
        values: Strictly ascending table, at least two entries.
        target: Value to look up.

    Returns:
        int: Index ``i`` in ``[0, n - 2]`` with ``x_i <= target < x_{i+1}``
        for in-range targets.

    Examples:
        ```python
        find_nearest_left_neighbour_using_binary_search([0.0, 1.0, 3.0], 2.0)  # 1
        ```
    """
    values = jnp.asarray(values, dtype=get_dtype())
    # searchsorted(side='right') returns the index of the first entry > target,
    # so subtracting 1 gives the left end of the bracketing interval.
    index = jnp.searchsorted(values, jnp.asarray(target, dtype=values.dtype), side="right") - 1
    return int(jnp.clip(index, 0, values.shape[0] - 2))


class NearestNeighbourLookupScheme(ABC):
    """Finds the bracketing interval in a fixed table of independent values."""

    def __init__(self, independent_values: ArrayLike) -> None:
        self._independent_values = validate_independent_values(independent_values)

    @property
    def independent_values(self) -> Array:
        """The table searched by this scheme."""
        return self._independent_values

    @abstractmethod
    def find_nearest_lower_neighbour(self, target: ArrayLike) -> int:
        """Index ``i`` in ``[0, n - 2]`` of the interval bracketing ``target``."""


class BinarySearchLookupScheme(NearestNeighbourLookupScheme):
    """Stateless binary search."""

    def find_nearest_lower_neighbour(self, target: ArrayLike) -> int:
        return find_nearest_left_neighbour_using_binary_search(self._independent_values, target)


class HuntingAlgorithmLookupScheme(NearestNeighbourLookupScheme):
    """Hunt outward from the previously found interval, then bisect.

    Follows the ``hunt`` routine of Press et al., *Numerical Recipes*: the
    search window doubles in the direction of the target until it brackets
    the target, and is then narrowed by bisection.  Runs on host floats.
    """

    def __init__(self, independent_values: ArrayLike) -> None:
        super().__init__(independent_values)
        self._values = tuple(float(v) for v in self._independent_values)
        self._previous_index = 0

    def find_nearest_lower_neighbour(self, target: ArrayLike) -> int:
        values = self._values
        n = len(values)
        target = float(target)

        if target <= values[0]:
            index = 0
        elif target >= values[-1]:
            index = n - 2
        else:
            lower = self._previous_index
            increment = 1
            if target >= values[lower]:
                upper = lower + increment
                while upper < n - 1 and target >= values[upper]:
                    lower = upper
                    increment *= 2
                    upper = lower + increment
                upper = min(upper, n - 1)
            else:
                upper = lower
                lower = upper - increment
                while lower > 0 and target < values[lower]:
                    upper = lower
                    increment *= 2
                    lower = upper - increment
                lower = max(lower, 0)

            # values[lower] <= target < values[upper]
            while upper - lower > 1:
                middle = (upper + lower) // 2
                if target >= values[middle]:
                    lower = middle
                else:
                    upper = middle
            index = lower

        self._previous_index = index
        return index


def create_lookup_scheme(
    independent_values: ArrayLike,
    scheme: LookupScheme = LookupScheme.BINARY_SEARCH,
) -> NearestNeighbourLookupScheme:
    """Build the lookup scheme selected by ``scheme`` over ``independent_values``.

    Raises:
        ValueError: If ``scheme`` is not a :class:`LookupScheme`, or the
            table is invalid.
    """
    if scheme is LookupScheme.BINARY_SEARCH:
        return BinarySearchLookupScheme(independent_values)
    if scheme is LookupScheme.HUNTING_ALGORITHM:
        return HuntingAlgorithmLookupScheme(independent_values)
    raise ValueError(f"Unknown lookup scheme: {scheme!r}")
