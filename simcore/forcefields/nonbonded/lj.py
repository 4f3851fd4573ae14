"""Lennard-Jones potential."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..base import Potential, _finish


class LennardJones(Potential):
    """
    Shifted Lennard-Jones 12-6 potential.

    U(r) = 4 * epsilon * [(sigma/r)^12 - (sigma/r)^6] - U_c

    where U_c is the unshifted energy at the cutoff, so U is continuous at
    r_c. Forces are the analytic derivative of the unshifted form.

    Argon: epsilon = 1.654e-21 J, sigma = 3.405e-10 m.

    Attributes:
        epsilon: Well depth [J].
        sigma: Zero-crossing distance [m].
        shift: Energy shift applied inside the cutoff [J].
    """

    def __init__(self, epsilon: float, sigma: float, cutoff: float) -> None:
        """
        Initialize Lennard-Jones potential.

        Args:
            epsilon: Well depth [J].
            sigma: Size parameter [m].
            cutoff: Interaction cutoff [m].
        """
        if not np.isfinite(epsilon) or epsilon < 0.0:
            raise ValueError(f"epsilon must be non-negative and finite, got {epsilon}")
        if not np.isfinite(sigma) or sigma <= 0.0:
            raise ValueError(f"sigma must be positive and finite, got {sigma}")
        if not np.isfinite(cutoff) or cutoff <= 0.0:
            raise ValueError(f"cutoff must be positive and finite, got {cutoff}")

        self._epsilon = float(epsilon)
        self._sigma = float(sigma)
        self._sigma_sq = self._sigma**2
        self._cutoff_sq = float(cutoff) ** 2

        sr6 = (self._sigma_sq / self._cutoff_sq) ** 3
        self._shift = 4.0 * self._epsilon * (sr6 * sr6 - sr6)

    @property
    def epsilon(self) -> float:
        return self._epsilon

    @property
    def sigma(self) -> float:
        return self._sigma

    @property
    def shift(self) -> float:
        return self._shift

    @property
    def cutoff_squared(self) -> float:
        return self._cutoff_sq

    def _terms(
        self, r2: NDArray[np.floating]
    ) -> tuple[NDArray[np.bool_], NDArray[np.floating], NDArray[np.floating]]:
        inside = (r2 < self._cutoff_sq) & (r2 > 0.0)
        safe_r2 = np.where(inside, r2, self._cutoff_sq)
        sr6 = (self._sigma_sq / safe_r2) ** 3
        return inside, sr6, safe_r2

    def energy(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        r2 = np.asarray(r2, dtype=np.float64)
        inside, sr6, _ = self._terms(r2)
        values = 4.0 * self._epsilon * (sr6 * sr6 - sr6) - self._shift
        return _finish(np.where(inside, values, 0.0), r2.ndim == 0)

    def force_div_r(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        # F/r = 24 * eps * (2 (sigma/r)^12 - (sigma/r)^6) / r^2
        r2 = np.asarray(r2, dtype=np.float64)
        inside, sr6, safe_r2 = self._terms(r2)
        values = 24.0 * self._epsilon * (2.0 * sr6 * sr6 - sr6) / safe_r2
        return _finish(np.where(inside, values, 0.0), r2.ndim == 0)

    def __repr__(self) -> str:
        return (
            f"LennardJones(epsilon={self._epsilon!r}, sigma={self._sigma!r}, "
            f"cutoff={self.cutoff!r})"
        )
