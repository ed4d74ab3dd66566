"""Shared utility functions for astrocore.

Provides the floored modulo used to wrap angles and other periodic
quantities into a single period.
"""

from astrocore.utils._modulo import compute_modulo

__all__ = [
    "compute_modulo",
]
