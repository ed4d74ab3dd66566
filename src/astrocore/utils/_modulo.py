"""Floored modulo helper."""

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from astrocore.config import get_dtype


def compute_modulo(dividend: ArrayLike, divisor: ArrayLike) -> Array:
    """Compute the floored modulo of ``dividend`` by ``divisor``.

    Unlike the C ``fmod``, the result always carries the sign of the
    divisor, so ``compute_modulo(-1.0, 2 * pi)`` wraps a negative angle into
    ``[0, 2 * pi)``:

    .. math::

        r = a - b \\lfloor a / b \\rfloor

    Args:
        dividend (ArrayLike): Value to wrap.
        divisor (ArrayLike): Period. Must be non-zero.

    Returns:
        Remainder with the sign of ``divisor``.

    Examples:
        ```python
        import jax.numpy as jnp
        from astrocore.utils import compute_modulo
        compute_modulo(-0.5 * jnp.pi, 2.0 * jnp.pi)  # 1.5 * pi
        ```
    """
    dividend = jnp.asarray(dividend, dtype=get_dtype())
    divisor = jnp.asarray(divisor, dtype=get_dtype())
    return dividend - divisor * jnp.floor(dividend / divisor)
