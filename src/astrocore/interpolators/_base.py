"""Common interface of the interpolators."""

from __future__ import annotations

from abc import ABC, abstractmethod

from jax import Array
from jax.typing import ArrayLike


class Interpolator(ABC):
    """Maps a target value of the independent variable(s) to a dependent value.

    Interpolators are callable: ``interpolator(t)`` is
    ``interpolator.interpolate(t)``.  Instances that use the hunting lookup
    remember the last interval and are not safe to share between threads.
    """

    @abstractmethod
    def interpolate(self, target: ArrayLike) -> Array:
        """Interpolated dependent value at ``target``."""

    def __call__(self, target: ArrayLike) -> Array:
        return self.interpolate(target)
