"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
throughout astrocore.  The default is ``jnp.float32``.  Switching to
``jnp.float64`` automatically enables JAX's 64-bit mode
(``jax_enable_x64``).

The adaptive integrators and root finders compare error estimates against
tolerances that are often far below float32 resolution, so most numerical
work should call ``set_dtype(jnp.float64)`` first.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

_dtype = jnp.float32


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for astrocore.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is automatically
    enabled via ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: One of ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``,
            or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float32``).
    """
    return _dtype


def get_machine_epsilon() -> float:
    """Return the machine epsilon of the configured float dtype.

    Used as the default relative perturbation scale for finite differences
    and as the end-of-interval tolerance unit in ``integrate_to``.

    Returns:
        float: Spacing between 1.0 and the next representable value.
    """
    return float(jnp.finfo(_dtype).eps)
