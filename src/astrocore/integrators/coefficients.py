"""Butcher tableaux for embedded Runge-Kutta-Fehlberg pairs.

Each table holds the coupling matrix ``a`` (strictly lower triangular,
stored square), two weight rows ``b`` (row 0: lower-order solution, row 1:
higher-order solution), the nodes ``c``, and the orders of both solutions.
Tables are plain tuples, frozen after construction and cached, so a single
instance is shared by every integrator that asks for the same scheme.

Available schemes (:class:`CoefficientSet`):

- ``RUNGE_KUTTA_FEHLBERG_45`` -- 6 stages, orders 4 and 5
- ``RUNGE_KUTTA_FEHLBERG_56`` -- 8 stages, orders 5 and 6
- ``RUNGE_KUTTA_FEHLBERG_78`` -- 13 stages, orders 7 and 8

References:
    E. Fehlberg, *Classical Fifth-, Sixth-, Seventh-, and Eighth-Order
    Runge-Kutta Formulas with Stepsize Control*, NASA TR R-287, 1968.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from functools import cache


class CoefficientSet(enum.Enum):
    """Named embedded Runge-Kutta schemes."""

    RUNGE_KUTTA_FEHLBERG_45 = "rkf45"
    RUNGE_KUTTA_FEHLBERG_56 = "rkf56"
    RUNGE_KUTTA_FEHLBERG_78 = "rkf78"


class OrderEstimateToIntegrate(enum.Enum):
    """Which of the two embedded solutions becomes the new state."""

    LOWER = "lower"
    HIGHER = "higher"


@dataclass(frozen=True)
class RungeKuttaCoefficients:
    """Butcher tableau of an embedded Runge-Kutta pair.

    Args:
        a: Coupling coefficients, ``stages`` rows of ``stages`` entries.
            Only entries below the diagonal are used.
        b: Two rows of ``stages`` weights; row 0 gives the lower-order
            solution, row 1 the higher-order solution.
        c: Stage nodes, ``stages`` entries.
        higher_order: Order of the row-1 solution.
        lower_order: Order of the row-0 solution.
        order_estimate_to_integrate: Solution propagated after an accepted
            step.
    """

    a: tuple[tuple[float, ...], ...]
    b: tuple[tuple[float, ...], tuple[float, ...]]
    c: tuple[float, ...]
    higher_order: int
    lower_order: int
    order_estimate_to_integrate: OrderEstimateToIntegrate = OrderEstimateToIntegrate.HIGHER

    def __post_init__(self) -> None:
        stages = len(self.c)
        if len(self.a) != stages or any(len(row) != stages for row in self.a):
            raise ValueError(f"a must be {stages}x{stages} to match c")
        if len(self.b) != 2 or any(len(row) != stages for row in self.b):
            raise ValueError(f"b must have 2 rows of {stages} weights")
        if self.lower_order >= self.higher_order:
            raise ValueError(
                f"lower_order ({self.lower_order}) must be below higher_order ({self.higher_order})"
            )

    @property
    def number_of_stages(self) -> int:
        """Number of derivative evaluations per step."""
        return len(self.c)


def _square(rows: tuple[tuple[float, ...], ...]) -> tuple[tuple[float, ...], ...]:
    """Zero-pad ragged lower-triangular rows to a square matrix."""
    n = len(rows)
    return tuple(tuple(row) + (0.0,) * (n - len(row)) for row in rows)


def _rkf45() -> RungeKuttaCoefficients:
    a = (
        (),
        (1.0 / 4.0,),
        (3.0 / 32.0, 9.0 / 32.0),
        (1932.0 / 2197.0, -7200.0 / 2197.0, 7296.0 / 2197.0),
        (439.0 / 216.0, -8.0, 3680.0 / 513.0, -845.0 / 4104.0),
        (-8.0 / 27.0, 2.0, -3544.0 / 2565.0, 1859.0 / 4104.0, -11.0 / 40.0),
    )
    b_low = (25.0 / 216.0, 0.0, 1408.0 / 2565.0, 2197.0 / 4104.0, -1.0 / 5.0, 0.0)
    b_high = (16.0 / 135.0, 0.0, 6656.0 / 12825.0, 28561.0 / 56430.0, -9.0 / 50.0, 2.0 / 55.0)
    c = (0.0, 1.0 / 4.0, 3.0 / 8.0, 12.0 / 13.0, 1.0, 1.0 / 2.0)
    return RungeKuttaCoefficients(_square(a), (b_low, b_high), c, higher_order=5, lower_order=4)


def _rkf56() -> RungeKuttaCoefficients:
    a = (
        (),
        (1.0 / 6.0,),
        (4.0 / 75.0, 16.0 / 75.0),
        (5.0 / 6.0, -8.0 / 3.0, 5.0 / 2.0),
        (-8.0 / 5.0, 144.0 / 25.0, -4.0, 16.0 / 25.0),
        (361.0 / 320.0, -18.0 / 5.0, 407.0 / 128.0, -11.0 / 80.0, 55.0 / 128.0),
        (-11.0 / 640.0, 0.0, 11.0 / 256.0, -11.0 / 160.0, 11.0 / 256.0, 0.0),
        (93.0 / 640.0, -18.0 / 5.0, 803.0 / 256.0, -11.0 / 160.0, 99.0 / 256.0, 0.0, 1.0),
    )
    b_low = (31.0 / 384.0, 0.0, 1125.0 / 2816.0, 9.0 / 32.0, 125.0 / 768.0, 5.0 / 66.0, 0.0, 0.0)
    b_high = (
        7.0 / 1408.0, 0.0, 1125.0 / 2816.0, 9.0 / 32.0, 125.0 / 768.0, 0.0, 5.0 / 66.0, 5.0 / 66.0,
    )
    c = (0.0, 1.0 / 6.0, 4.0 / 15.0, 2.0 / 3.0, 4.0 / 5.0, 1.0, 0.0, 1.0)
    return RungeKuttaCoefficients(_square(a), (b_low, b_high), c, higher_order=6, lower_order=5)


def _rkf78() -> RungeKuttaCoefficients:
    a = (
        (),
        (2.0 / 27.0,),
        (1.0 / 36.0, 1.0 / 12.0),
        (1.0 / 24.0, 0.0, 1.0 / 8.0),
        (5.0 / 12.0, 0.0, -25.0 / 16.0, 25.0 / 16.0),
        (1.0 / 20.0, 0.0, 0.0, 1.0 / 4.0, 1.0 / 5.0),
        (-25.0 / 108.0, 0.0, 0.0, 125.0 / 108.0, -65.0 / 27.0, 125.0 / 54.0),
        (31.0 / 300.0, 0.0, 0.0, 0.0, 61.0 / 225.0, -2.0 / 9.0, 13.0 / 900.0),
        (2.0, 0.0, 0.0, -53.0 / 6.0, 704.0 / 45.0, -107.0 / 9.0, 67.0 / 90.0, 3.0),
        (-91.0 / 108.0, 0.0, 0.0, 23.0 / 108.0, -976.0 / 135.0, 311.0 / 54.0, -19.0 / 60.0,
         17.0 / 6.0, -1.0 / 12.0),
        (2383.0 / 4100.0, 0.0, 0.0, -341.0 / 164.0, 4496.0 / 1025.0, -301.0 / 82.0,
         2133.0 / 4100.0, 45.0 / 82.0, 45.0 / 164.0, 18.0 / 41.0),
        (3.0 / 205.0, 0.0, 0.0, 0.0, 0.0, -6.0 / 41.0, -3.0 / 205.0, -3.0 / 41.0, 3.0 / 41.0,
         6.0 / 41.0, 0.0),
        (-1777.0 / 4100.0, 0.0, 0.0, -341.0 / 164.0, 4496.0 / 1025.0, -289.0 / 82.0,
         2193.0 / 4100.0, 51.0 / 82.0, 33.0 / 164.0, 12.0 / 41.0, 0.0, 1.0),
    )
    b_low = (
        41.0 / 840.0, 0.0, 0.0, 0.0, 0.0, 34.0 / 105.0, 9.0 / 35.0, 9.0 / 35.0, 9.0 / 280.0,
        9.0 / 280.0, 41.0 / 840.0, 0.0, 0.0,
    )
    b_high = (
        0.0, 0.0, 0.0, 0.0, 0.0, 34.0 / 105.0, 9.0 / 35.0, 9.0 / 35.0, 9.0 / 280.0,
        9.0 / 280.0, 0.0, 41.0 / 840.0, 41.0 / 840.0,
    )
    c = (
        0.0, 2.0 / 27.0, 1.0 / 9.0, 1.0 / 6.0, 5.0 / 12.0, 1.0 / 2.0, 5.0 / 6.0, 1.0 / 6.0,
        2.0 / 3.0, 1.0 / 3.0, 1.0, 0.0, 1.0,
    )
    return RungeKuttaCoefficients(_square(a), (b_low, b_high), c, higher_order=8, lower_order=7)


_BUILDERS = {
    CoefficientSet.RUNGE_KUTTA_FEHLBERG_45: _rkf45,
    CoefficientSet.RUNGE_KUTTA_FEHLBERG_56: _rkf56,
    CoefficientSet.RUNGE_KUTTA_FEHLBERG_78: _rkf78,
}


@cache
def get_coefficients(coefficient_set: CoefficientSet) -> RungeKuttaCoefficients:
    """Return the shared Butcher tableau for a named scheme.

    Args:
        coefficient_set: Scheme identifier.

    Returns:
        RungeKuttaCoefficients: Immutable table; repeated calls return the
        same object.

    Raises:
        ValueError: If *coefficient_set* is not a :class:`CoefficientSet`.

    Examples:
        ```python
        from astrocore.integrators import CoefficientSet, get_coefficients
        rkf78 = get_coefficients(CoefficientSet.RUNGE_KUTTA_FEHLBERG_78)
        rkf78.number_of_stages  # 13
        ```
    """
    try:
        builder = _BUILDERS[coefficient_set]
    except KeyError:
        raise ValueError(f"Unknown Runge-Kutta coefficient set: {coefficient_set!r}") from None
    return builder()
