"""Numerical ODE integrators for trajectory propagation.

Provides stateful integrators behind a common interface
(:class:`NumericalIntegrator`), driven one step at a time or with
:meth:`~NumericalIntegrator.integrate_to`.

Available integrators:

- :class:`RungeKuttaVariableStepSizeIntegrator` -- embedded Runge-Kutta
  with adaptive step size, for any tableau from :func:`get_coefficients`
- :class:`EulerIntegrator` -- forward Euler (fixed step)

Available tableaux (:class:`CoefficientSet`):

- ``RUNGE_KUTTA_FEHLBERG_45`` -- orders 4 and 5
- ``RUNGE_KUTTA_FEHLBERG_56`` -- orders 5 and 6
- ``RUNGE_KUTTA_FEHLBERG_78`` -- orders 7 and 8

All integrators take a derivative function of the form::

    dynamics(t, x) -> dx

and keep one level of history for :meth:`rollback_to_previous_state`.
"""

from astrocore.integrators._adaptive import bound_step_size, compute_new_step_size
from astrocore.integrators._base import NumericalIntegrator
from astrocore.integrators._types import (
    IntegrationError,
    MinimumStepSizeExceededError,
    NewStepSizeFunction,
    StateDerivativeFunction,
    StepSizeControl,
)
from astrocore.integrators.coefficients import (
    CoefficientSet,
    OrderEstimateToIntegrate,
    RungeKuttaCoefficients,
    get_coefficients,
)
from astrocore.integrators.euler import EulerIntegrator
from astrocore.integrators.runge_kutta_variable_step import (
    RungeKuttaVariableStepSizeIntegrator,
)

__all__ = [
    "CoefficientSet",
    "EulerIntegrator",
    "IntegrationError",
    "MinimumStepSizeExceededError",
    "NewStepSizeFunction",
    "NumericalIntegrator",
    "OrderEstimateToIntegrate",
    "RungeKuttaCoefficients",
    "RungeKuttaVariableStepSizeIntegrator",
    "StateDerivativeFunction",
    "StepSizeControl",
    "bound_step_size",
    "compute_new_step_size",
    "get_coefficients",
]
