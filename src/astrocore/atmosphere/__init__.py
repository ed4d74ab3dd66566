"""Atmosphere models.

- :class:`TabulatedAtmosphere` -- cubic-spline interpolation of tabulated
  density, pressure and temperature profiles
"""

from astrocore.atmosphere.tabulated import TabulatedAtmosphere

__all__ = ["TabulatedAtmosphere"]
