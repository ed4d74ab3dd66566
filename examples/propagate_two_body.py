# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "astrocore"]
#
# [tool.uv.sources]
# astrocore = { path = ".." }
# ///
"""Propagate a point-mass Earth orbit with the variable-step Runge-Kutta integrator.

Integrates an elliptical orbit for a number of revolutions and reports how
far the final position is from the initial one (it should close), how many
steps the integrator accepted, and how long it took.  An optional impulsive
along-track burn at apoapsis of the first revolution shows discrete state
changes with ``modify_current_state``; the orbit then no longer closes.

Requires astrocore to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/propagate_two_body.py [OPTIONS]

Examples:
    # One revolution of a 500 km circular orbit with RKF 7(8)
    uv run examples/propagate_two_body.py

    # Ten revolutions of a Molniya-like orbit with RKF 4(5)
    uv run examples/propagate_two_body.py --scheme rkf45 --perigee-altitude 600 \\
        --eccentricity 0.74 --revolutions 10

    # Apoapsis burn of 10 m/s
    uv run examples/propagate_two_body.py --delta-v 10
"""

import enum
import math
import time
from typing import Annotated

import jax.numpy as jnp
import typer

from astrocore import (
    CoefficientSet,
    RungeKuttaVariableStepSizeIntegrator,
    get_coefficients,
    set_dtype,
)

GM_EARTH = 3.986004418e14  # [m^3/s^2]
R_EARTH = 6378.1363e3  # [m]

set_dtype(jnp.float64)


class Scheme(enum.StrEnum):
    """Embedded Runge-Kutta pair."""

    rkf45 = "rkf45"
    rkf56 = "rkf56"
    rkf78 = "rkf78"


def main(
    scheme: Annotated[Scheme, typer.Option(help="Runge-Kutta-Fehlberg pair")] = Scheme.rkf78,
    perigee_altitude: Annotated[
        float, typer.Option(help="Perigee altitude above the equator in km")
    ] = 500.0,
    eccentricity: Annotated[float, typer.Option(help="Orbit eccentricity")] = 0.0,
    revolutions: Annotated[int, typer.Option(help="Number of orbital revolutions")] = 1,
    tolerance: Annotated[
        float, typer.Option(help="Relative and absolute error tolerance")
    ] = 1e-10,
    delta_v: Annotated[
        float, typer.Option(help="Along-track burn at the first apoapsis in m/s")
    ] = 0.0,
) -> None:
    r_perigee = R_EARTH + perigee_altitude * 1e3
    sma = r_perigee / (1.0 - eccentricity)
    period = 2.0 * math.pi * math.sqrt(sma**3 / GM_EARTH)
    v_perigee = math.sqrt(GM_EARTH * (1.0 + eccentricity) / r_perigee)
    x0 = jnp.array([r_perigee, 0.0, 0.0, 0.0, v_perigee, 0.0])

    evaluations = 0

    def two_body(t, state):
        nonlocal evaluations
        evaluations += 1
        r = state[:3]
        return jnp.concatenate([state[3:], -GM_EARTH * r / jnp.linalg.norm(r) ** 3])

    coefficients = get_coefficients(CoefficientSet(scheme.value))
    integrator = RungeKuttaVariableStepSizeIntegrator(
        coefficients,
        two_body,
        0.0,
        x0,
        minimum_step_size=1e-3,
        maximum_step_size=period / 8.0,
        relative_error_tolerance=tolerance,
        absolute_error_tolerance=tolerance,
    )

    print(f"Scheme: {scheme.value} ({coefficients.number_of_stages} stages)")
    print(f"  Semi-major axis: {sma / 1e3:.3f} km, eccentricity: {eccentricity}")
    print(f"  Period: {period:.1f} s, revolutions: {revolutions}")

    t0 = time.perf_counter()
    if delta_v != 0.0:
        state = integrator.integrate_to(0.5 * period, 10.0)
        velocity = state[3:]
        burn = delta_v * velocity / jnp.linalg.norm(velocity)
        integrator.modify_current_state(state.at[3:].add(burn))
        print(f"  Applied {delta_v} m/s burn at t = {integrator.current_independent_variable:.1f} s")
    state = integrator.integrate_to(revolutions * period, integrator.next_step_size or 10.0)
    elapsed = time.perf_counter() - t0

    steps = evaluations // coefficients.number_of_stages
    closure = float(jnp.linalg.norm(state[:3] - x0[:3]))
    print(f"  Steps (accepted + rejected): {steps}")
    print(f"  Position closure error: {closure:.6e} m")
    print(f"  Wall time: {elapsed:.2f}s")


if __name__ == "__main__":
    typer.run(main)
