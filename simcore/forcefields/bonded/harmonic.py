"""Harmonic pair potential."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..base import Potential, _finish


class HarmonicPotential(Potential):
    """
    Harmonic spring between particle pairs.

    U(r) = 0.5 * k * (r - r0)^2

    Attributes:
        k: Spring constant [N/m].
        r0: Equilibrium distance [m].
    """

    def __init__(self, k: float, r0: float, cutoff: float) -> None:
        """
        Initialize harmonic potential.

        Args:
            k: Spring constant [N/m].
            r0: Equilibrium distance [m].
            cutoff: Interaction cutoff [m].
        """
        if not np.isfinite(k) or k < 0.0:
            raise ValueError(f"k must be non-negative and finite, got {k}")
        if not np.isfinite(r0) or r0 < 0.0:
            raise ValueError(f"r0 must be non-negative and finite, got {r0}")
        if not np.isfinite(cutoff) or cutoff <= 0.0:
            raise ValueError(f"cutoff must be positive and finite, got {cutoff}")

        self._k = float(k)
        self._r0 = float(r0)
        self._cutoff_sq = float(cutoff) ** 2

    @property
    def k(self) -> float:
        return self._k

    @property
    def r0(self) -> float:
        return self._r0

    @property
    def cutoff_squared(self) -> float:
        return self._cutoff_sq

    def energy(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        r2 = np.asarray(r2, dtype=np.float64)
        inside = r2 < self._cutoff_sq
        r = np.sqrt(np.where(inside, r2, 0.0))
        values = 0.5 * self._k * (r - self._r0) ** 2
        return _finish(np.where(inside, values, 0.0), r2.ndim == 0)

    def force_div_r(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        # F/r = -k * (r - r0) / r; undefined direction at r = 0 gives zero
        r2 = np.asarray(r2, dtype=np.float64)
        inside = (r2 < self._cutoff_sq) & (r2 > 0.0)
        r = np.sqrt(np.where(inside, r2, 1.0))
        values = -self._k * (r - self._r0) / r
        return _finish(np.where(inside, values, 0.0), r2.ndim == 0)

    def __repr__(self) -> str:
        return (
            f"HarmonicPotential(k={self._k!r}, r0={self._r0!r}, "
            f"cutoff={self.cutoff!r})"
        )
