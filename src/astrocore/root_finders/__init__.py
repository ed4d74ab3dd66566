"""Iterative scalar root finders.

Root finders are built from three pieces:

- a :class:`RootFunction` giving ``f(x)`` and its derivatives,
- a termination condition deciding when to stop iterating,
- a :class:`RootFinderCore` subclass providing the update rule.

Available root finders:

- :class:`NewtonRaphson` -- derivative-based update ``x - f / f'``
"""

from astrocore.root_finders._core import RootFinderCore
from astrocore.root_finders._types import (
    AutodiffRootFunction,
    CallableRootFunction,
    ConvergenceError,
    RootFunction,
    TerminationFunction,
)
from astrocore.root_finders.newton_raphson import NewtonRaphson
from astrocore.root_finders.termination_conditions import (
    MaximumIterationsTerminationCondition,
    RootAbsoluteOrRelativeToleranceTerminationCondition,
    RootAbsoluteToleranceTerminationCondition,
    RootRelativeToleranceTerminationCondition,
)

__all__ = [
    "AutodiffRootFunction",
    "CallableRootFunction",
    "ConvergenceError",
    "MaximumIterationsTerminationCondition",
    "NewtonRaphson",
    "RootAbsoluteOrRelativeToleranceTerminationCondition",
    "RootAbsoluteToleranceTerminationCondition",
    "RootFinderCore",
    "RootFunction",
    "RootRelativeToleranceTerminationCondition",
    "TerminationFunction",
]
