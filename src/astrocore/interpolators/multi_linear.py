"""Multi-linear interpolation on a rectilinear grid of any dimension.

The value at a target point is built recursively over the dimensions: for
each dimension the two neighbouring grid planes are weighted by the
fractional distance of the target between them, which visits the
``2**N`` corners of the enclosing grid cell.
"""

from __future__ import annotations

from collections.abc import Sequence

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype
from astrocore.interpolators._base import Interpolator
from astrocore.interpolators.lookup import LookupScheme, create_lookup_scheme


class MultiLinearInterpolator(Interpolator):
    """N-dimensional multi-linear interpolator.

    Args:
        independent_values: One strictly ascending grid axis per dimension.
        dependent_data: Grid values, with
            ``dependent_data.shape[i] == len(independent_values[i])``.
        lookup_scheme: Lookup used along every axis. Defaults to the
            hunting algorithm.

    Raises:
        ValueError: If an axis is invalid, or the data does not have one
            dimension per axis with matching lengths.

    Examples:
        ```python
        import jax.numpy as jnp
        from astrocore.interpolators import MultiLinearInterpolator
        interpolator = MultiLinearInterpolator(
            [jnp.array([0.0, 1.0]), jnp.array([0.0, 2.0])],
            jnp.array([[0.0, 2.0], [1.0, 3.0]]),
        )
        interpolator([0.5, 1.0])  # 1.5
        ```
    """

    def __init__(
        self,
        independent_values: Sequence[ArrayLike],
        dependent_data: ArrayLike,
        lookup_scheme: LookupScheme = LookupScheme.HUNTING_ALGORITHM,
    ) -> None:
        if len(independent_values) == 0:
            raise ValueError("At least one independent variable is required")

        self._lookup_schemes = [
            create_lookup_scheme(values, lookup_scheme) for values in independent_values
        ]
        self._independent_values = [scheme.independent_values for scheme in self._lookup_schemes]

        dependent_data = jnp.asarray(dependent_data, dtype=get_dtype())
        if dependent_data.ndim != len(self._independent_values):
            raise ValueError(
                f"Got {len(self._independent_values)} independent variables but "
                f"dependent data with {dependent_data.ndim} dimensions"
            )
        for dimension, values in enumerate(self._independent_values):
            if dependent_data.shape[dimension] != values.shape[0]:
                raise ValueError(
                    f"Dimension {dimension}: {values.shape[0]} independent values but "
                    f"{dependent_data.shape[dimension]} data points"
                )
        self._dependent_data = dependent_data

    @property
    def number_of_dimensions(self) -> int:
        return len(self._independent_values)

    @property
    def independent_values(self) -> list[Array]:
        return list(self._independent_values)

    @property
    def dependent_data(self) -> Array:
        return self._dependent_data

    def interpolate(self, target: ArrayLike) -> Array:
        """Interpolate at ``target``, one coordinate per dimension.

        Raises:
            ValueError: If ``target`` does not have one coordinate per
                dimension.
        """
        target = jnp.asarray(target, dtype=get_dtype()).reshape(-1)
        if target.shape[0] != self.number_of_dimensions:
            raise ValueError(
                f"Expected {self.number_of_dimensions} coordinates, got {target.shape[0]}"
            )
        lower_indices = tuple(
            scheme.find_nearest_lower_neighbour(target[dimension])
            for dimension, scheme in enumerate(self._lookup_schemes)
        )
        return self._interpolate_recursively(0, target, (), lower_indices)

    def _interpolate_recursively(
        self,
        dimension: int,
        target: Array,
        cell_indices: tuple[int, ...],
        lower_indices: tuple[int, ...],
    ) -> Array:
        values = self._independent_values[dimension]
        lower = lower_indices[dimension]
        width = values[lower + 1] - values[lower]
        upper_fraction = (target[dimension] - values[lower]) / width
        lower_fraction = (values[lower + 1] - target[dimension]) / width

        if dimension == self.number_of_dimensions - 1:
            lower_contribution = self._dependent_data[(*cell_indices, lower)]
            upper_contribution = self._dependent_data[(*cell_indices, lower + 1)]
        else:
            lower_contribution = self._interpolate_recursively(
                dimension + 1, target, (*cell_indices, lower), lower_indices
            )
            upper_contribution = self._interpolate_recursively(
                dimension + 1, target, (*cell_indices, lower + 1), lower_indices
            )

        return upper_fraction * upper_contribution + lower_fraction * lower_contribution
