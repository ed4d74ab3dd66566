"""astrocore: numerical building blocks for astrodynamics.

Adaptive Runge-Kutta integration, root finding, interpolation of tabulated
data and finite-difference derivatives, computed with JAX arrays.
"""

from astrocore.atmosphere import TabulatedAtmosphere
from astrocore.config import get_dtype, get_machine_epsilon, set_dtype
from astrocore.integrators import (
    CoefficientSet,
    EulerIntegrator,
    IntegrationError,
    MinimumStepSizeExceededError,
    NumericalIntegrator,
    RungeKuttaVariableStepSizeIntegrator,
    StepSizeControl,
    get_coefficients,
)
from astrocore.interpolators import (
    CubicSplineInterpolator,
    LinearInterpolator,
    LookupScheme,
    MultiLinearInterpolator,
    compute_linear_interpolation,
)
from astrocore.numerical_derivatives import CentralDifferenceOrder, compute_central_difference
from astrocore.root_finders import (
    AutodiffRootFunction,
    ConvergenceError,
    NewtonRaphson,
    RootRelativeToleranceTerminationCondition,
)
from astrocore.utils import compute_modulo

__all__ = [
    "AutodiffRootFunction",
    "CentralDifferenceOrder",
    "CoefficientSet",
    "ConvergenceError",
    "CubicSplineInterpolator",
    "EulerIntegrator",
    "IntegrationError",
    "LinearInterpolator",
    "LookupScheme",
    "MinimumStepSizeExceededError",
    "MultiLinearInterpolator",
    "NewtonRaphson",
    "NumericalIntegrator",
    "RootRelativeToleranceTerminationCondition",
    "RungeKuttaVariableStepSizeIntegrator",
    "StepSizeControl",
    "TabulatedAtmosphere",
    "compute_central_difference",
    "compute_linear_interpolation",
    "compute_modulo",
    "get_coefficients",
    "get_dtype",
    "get_machine_epsilon",
    "set_dtype",
]
