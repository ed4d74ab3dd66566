"""Central-difference Jacobians of vector functions.

Useful where a function cannot be traced by JAX (tabulated models, external
code) so :func:`jax.jacfwd` is not an option.  Each column of the Jacobian
is built from evaluations at symmetric offsets around the nominal input,
with the standard central-difference weights of order 2, 4 or 8.
"""

from __future__ import annotations

import enum
from collections.abc import Callable

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype, get_machine_epsilon


class CentralDifferenceOrder(enum.IntEnum):
    """Truncation order of the central-difference stencil."""

    ORDER_2 = 2
    ORDER_4 = 4
    ORDER_8 = 8


# (offset in steps, weight) pairs of each stencil
_CENTRAL_DIFFERENCE_STENCILS = {
    CentralDifferenceOrder.ORDER_2: ((-1, -1.0 / 2.0), (1, 1.0 / 2.0)),
    CentralDifferenceOrder.ORDER_4: (
        (-2, 1.0 / 12.0),
        (-1, -2.0 / 3.0),
        (1, 2.0 / 3.0),
        (2, -1.0 / 12.0),
    ),
    CentralDifferenceOrder.ORDER_8: (
        (-4, 1.0 / 280.0),
        (-3, -4.0 / 105.0),
        (-2, 1.0 / 5.0),
        (-1, -4.0 / 5.0),
        (1, 4.0 / 5.0),
        (2, -1.0 / 5.0),
        (3, 4.0 / 105.0),
        (4, -1.0 / 280.0),
    ),
}


def compute_central_difference(
    input: ArrayLike,
    function: Callable[[Array], ArrayLike],
    minimum_step: float = 0.0,
    relative_step: float = 0.0,
    order: CentralDifferenceOrder = CentralDifferenceOrder.ORDER_2,
) -> Array:
    """Jacobian of ``function`` at ``input`` by central differences.

    The perturbation of element ``i`` is
    ``max(minimum_step, relative_step * |x_i|)``, falling back to
    ``relative_step`` when that is zero.  A ``relative_step`` of zero
    selects ``eps ** (1 / (order + 1))`` of the configured dtype, which
    balances truncation against round-off error.

    Args:
        input: Nominal input vector, shape ``(n,)``.
        function: Vector function, returns shape ``(m,)`` (or a scalar).
        minimum_step: Lower bound on the absolute perturbation.
        relative_step: Perturbation relative to ``|x_i|``.
        order: Stencil order.

    Returns:
        jax.Array: Jacobian ``d function / d input``, shape ``(m, n)``.

    Raises:
        ValueError: If ``order`` is not a supported stencil order.

    Examples:
        ```python
        import jax.numpy as jnp
        from astrocore.numerical_derivatives import compute_central_difference
        compute_central_difference(jnp.array([1.0, 2.0]), lambda x: x**2)
        # ~[[2, 0], [0, 4]]
        ```
    """
    try:
        stencil = _CENTRAL_DIFFERENCE_STENCILS[CentralDifferenceOrder(order)]
    except ValueError as e:
        raise ValueError(f"Unsupported central difference order: {order!r}") from e

    x = jnp.atleast_1d(jnp.asarray(input, dtype=get_dtype()))
    if relative_step == 0.0:
        relative_step = get_machine_epsilon() ** (1.0 / (int(order) + 1))

    columns = []
    for i in range(x.shape[0]):
        step = max(minimum_step, relative_step * abs(float(x[i])))
        if step == 0.0:
            step = relative_step

        column = 0.0
        for offset, weight in stencil:
            perturbed = x.at[i].add(offset * step)
            column = column + weight * jnp.atleast_1d(jnp.asarray(function(perturbed)))
        columns.append(column / step)

    return jnp.stack(columns, axis=1)
