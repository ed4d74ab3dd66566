"""Atmosphere model interpolated from a table of altitude profiles.

Density, pressure and temperature are each interpolated with a natural
cubic spline in altitude.  The model is one-dimensional: longitude,
latitude and time are accepted so the model can stand in wherever a
position- and time-dependent atmosphere is expected, but they do not
affect the result.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype
from astrocore.interpolators import CubicSplineInterpolator, LookupScheme


class TabulatedAtmosphere:
    """Spline-interpolated atmosphere profile.

    Args:
        altitudes: Strictly ascending altitudes [m], shape ``(n,)``.
        densities: Density at each altitude [kg/m³].
        pressures: Pressure at each altitude [Pa].
        temperatures: Temperature at each altitude [K].
        lookup_scheme: Interval lookup used by the splines. Hunting suits
            the slowly varying altitude of a propagated trajectory.

    Raises:
        ValueError: If the altitudes are invalid or a profile does not
            have one value per altitude.

    Examples:
        ```python
        import jax.numpy as jnp
        from astrocore.atmosphere import TabulatedAtmosphere
        atmosphere = TabulatedAtmosphere(
            altitudes=jnp.array([0.0, 1.0e3, 2.0e3]),
            densities=jnp.array([1.2250, 1.1117, 1.0066]),
            pressures=jnp.array([101325.0, 89876.0, 79501.0]),
            temperatures=jnp.array([288.15, 281.65, 275.15]),
        )
        atmosphere.get_density(1.0e3)  # 1.1117
        ```
    """

    def __init__(
        self,
        altitudes: ArrayLike,
        densities: ArrayLike,
        pressures: ArrayLike,
        temperatures: ArrayLike,
        lookup_scheme: LookupScheme = LookupScheme.HUNTING_ALGORITHM,
    ) -> None:
        self._density_interpolator = CubicSplineInterpolator(altitudes, densities, lookup_scheme)
        self._pressure_interpolator = CubicSplineInterpolator(altitudes, pressures, lookup_scheme)
        self._temperature_interpolator = CubicSplineInterpolator(
            altitudes, temperatures, lookup_scheme
        )

    @property
    def altitudes(self) -> Array:
        """Tabulated altitudes [m]."""
        return self._density_interpolator.independent_values

    def get_density(
        self,
        altitude: ArrayLike,
        longitude: ArrayLike = 0.0,
        latitude: ArrayLike = 0.0,
        time: ArrayLike = 0.0,
    ) -> Array:
        """Density [kg/m³] at ``altitude`` [m]."""
        return self._density_interpolator.interpolate(jnp.asarray(altitude, dtype=get_dtype()))

    def get_pressure(
        self,
        altitude: ArrayLike,
        longitude: ArrayLike = 0.0,
        latitude: ArrayLike = 0.0,
        time: ArrayLike = 0.0,
    ) -> Array:
        """Pressure [Pa] at ``altitude`` [m]."""
        return self._pressure_interpolator.interpolate(jnp.asarray(altitude, dtype=get_dtype()))

    def get_temperature(
        self,
        altitude: ArrayLike,
        longitude: ArrayLike = 0.0,
        latitude: ArrayLike = 0.0,
        time: ArrayLike = 0.0,
    ) -> Array:
        """Temperature [K] at ``altitude`` [m]."""
        return self._temperature_interpolator.interpolate(
            jnp.asarray(altitude, dtype=get_dtype())
        )
