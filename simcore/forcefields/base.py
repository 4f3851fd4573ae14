"""Base interface for pairwise potentials."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import ArrayLike, NDArray


class Potential(ABC):
    """
    Abstract base class for pairwise interaction laws.

    Potentials are stateless and immutable once constructed, so a single
    instance can be shared by any number of force fields.

    Both evaluation methods take the squared pair distance r^2 (scalar or
    array) and return zero at and beyond the cutoff.
    """

    @abstractmethod
    def energy(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        """
        Compute pair energy U(r).

        Args:
            r2: Squared distance(s) [m^2].

        Returns:
            Pair energy [J], same shape as r2.
        """
        ...

    @abstractmethod
    def force_div_r(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        """
        Compute force magnitude divided by distance, -dU/dr / r.

        Multiplying by a displacement vector gives the force vector without
        taking a square root. Positive values are repulsive.

        Args:
            r2: Squared distance(s) [m^2].

        Returns:
            F/r [N/m], same shape as r2.
        """
        ...

    @property
    @abstractmethod
    def cutoff_squared(self) -> float:
        """Return squared cutoff distance [m^2]."""
        ...

    @property
    def cutoff(self) -> float:
        """Return cutoff distance [m]."""
        return float(np.sqrt(self.cutoff_squared))


def _finish(values: NDArray[np.floating], scalar: bool) -> float | NDArray[np.floating]:
    return float(values) if scalar else values
