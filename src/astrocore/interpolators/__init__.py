"""Interpolation of tabulated data.

Available interpolators (all callable, see :class:`Interpolator`):

- :class:`LinearInterpolator` -- piecewise linear, scalar or vector data
- :class:`CubicSplineInterpolator` -- natural cubic spline, scalar data
- :class:`MultiLinearInterpolator` -- N-dimensional rectilinear grids

The bracketing interval is found with a :class:`LookupScheme`:
``BINARY_SEARCH`` or ``HUNTING_ALGORITHM``.  Targets outside the table are
extrapolated with the end intervals.
"""

from astrocore.interpolators._base import Interpolator
from astrocore.interpolators.cubic_spline import (
    CubicSplineInterpolator,
    compute_natural_spline_second_derivatives,
    solve_tridiagonal,
)
from astrocore.interpolators.linear import LinearInterpolator, compute_linear_interpolation
from astrocore.interpolators.lookup import (
    BinarySearchLookupScheme,
    HuntingAlgorithmLookupScheme,
    LookupScheme,
    NearestNeighbourLookupScheme,
    create_lookup_scheme,
    find_nearest_left_neighbour_using_binary_search,
)
from astrocore.interpolators.multi_linear import MultiLinearInterpolator

__all__ = [
    "BinarySearchLookupScheme",
    "CubicSplineInterpolator",
    "HuntingAlgorithmLookupScheme",
    "Interpolator",
    "LinearInterpolator",
    "LookupScheme",
    "MultiLinearInterpolator",
    "NearestNeighbourLookupScheme",
    "compute_linear_interpolation",
    "compute_natural_spline_second_derivatives",
    "create_lookup_scheme",
    "find_nearest_left_neighbour_using_binary_search",
    "solve_tridiagonal",
]
