"""Periodic lattice geometry."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray

_EPS = np.finfo(np.float64).eps


def _unit(axis: int) -> NDArray[np.floating]:
    vector = np.zeros(3, dtype=np.float64)
    vector[axis] = 1.0
    return vector


@dataclass(frozen=True, eq=False)
class Lattice:
    """
    Periodic simulation cell spanned by three basis vectors.

    Every lattice point is R = n1*a1 + n2*a2 + n3*a3. All geometry goes
    through fractional coordinates, so triclinic cells are handled the same
    way as orthogonal ones. Lengths are in metres.

    The default lattice is the unit cube (volume 1 m^3).

    Attributes:
        a1: First basis vector, shape (3,).
        a2: Second basis vector, shape (3,).
        a3: Third basis vector, shape (3,).
    """

    a1: NDArray[np.floating] = field(default_factory=lambda: _unit(0))
    a2: NDArray[np.floating] = field(default_factory=lambda: _unit(1))
    a3: NDArray[np.floating] = field(default_factory=lambda: _unit(2))

    def __post_init__(self) -> None:
        """Convert basis vectors to float arrays."""
        for name in ("a1", "a2", "a3"):
            vector = np.array(getattr(self, name), dtype=np.float64)
            if vector.shape != (3,):
                raise ValueError(
                    f"Lattice vector {name} must have shape (3,), got {vector.shape}"
                )
            vector.flags.writeable = False
            object.__setattr__(self, name, vector)

    @classmethod
    def cubic(cls, length: float) -> Lattice:
        """Create a cubic lattice with the given edge length."""
        return cls.orthorhombic(length, length, length)

    @classmethod
    def orthorhombic(cls, lx: float, ly: float, lz: float) -> Lattice:
        """Create an axis-aligned lattice with the given edge lengths."""
        return cls([lx, 0.0, 0.0], [0.0, ly, 0.0], [0.0, 0.0, lz])

    @classmethod
    def from_vectors(cls, vectors: ArrayLike) -> Lattice:
        """Create a lattice from a 3x3 matrix whose rows are a1, a2, a3."""
        vectors = np.asarray(vectors, dtype=np.float64)
        if vectors.shape != (3, 3):
            raise ValueError(f"Lattice matrix must be (3, 3), got {vectors.shape}")
        return cls(vectors[0], vectors[1], vectors[2])

    @property
    def vectors(self) -> NDArray[np.floating]:
        """Return the basis as a 3x3 matrix with rows a1, a2, a3."""
        return np.vstack((self.a1, self.a2, self.a3))

    @property
    def lengths(self) -> NDArray[np.floating]:
        """Return basis vector lengths [|a1|, |a2|, |a3|]."""
        return np.linalg.norm(self.vectors, axis=1)

    @property
    def volume(self) -> float:
        """Return the signed cell volume a1 . (a2 x a3)."""
        return float(np.dot(self.a1, np.cross(self.a2, self.a3)))

    @property
    def is_orthogonal(self) -> bool:
        """Check if a1, a2, a3 lie along x, y, z respectively."""
        vectors = self.vectors
        off_diag = vectors.copy()
        np.fill_diagonal(off_diag, 0.0)
        scale = np.max(np.abs(vectors))
        return bool(np.all(np.abs(off_diag) <= 1e-10 * scale))

    def validate(self) -> str | None:
        """
        Check that the basis spans a usable cell.

        Returns:
            Error message, or None if the lattice is valid.
        """
        for name in ("a1", "a2", "a3"):
            if not np.all(np.isfinite(getattr(self, name))):
                return f"Lattice vector {name} contains non-finite components."
        volume = self.volume
        if not np.isfinite(volume):
            return "Lattice volume is non-finite, indicating invalid basis vectors."
        if self._is_degenerate(volume):
            return (
                "Lattice vectors are linearly dependent (volume is zero), "
                "forming a degenerate lattice."
            )
        return None

    def _is_degenerate(self, volume: float) -> bool:
        # Scale-relative: |V| against |a1||a2||a3|
        return abs(volume) <= _EPS * float(np.prod(self.lengths))

    def _inverse_rows(self) -> NDArray[np.floating]:
        # Rows are (a2 x a3, a3 x a1, a1 x a2) / V, i.e. Cramer's rule.
        volume = self.volume
        if not np.isfinite(volume) or self._is_degenerate(volume):
            raise ValueError("cannot invert a degenerate or non-finite lattice")
        return (
            np.vstack(
                (
                    np.cross(self.a2, self.a3),
                    np.cross(self.a3, self.a1),
                    np.cross(self.a1, self.a2),
                )
            )
            / volume
        )

    def cartesian_to_fractional(self, cart: ArrayLike) -> NDArray[np.floating]:
        """
        Convert Cartesian coordinates to fractional coordinates.

        Args:
            cart: Cartesian coordinates, shape (3,) or (N, 3).

        Returns:
            Fractional coordinates with the same shape.

        Raises:
            ValueError: If the lattice is degenerate or non-finite.
        """
        cart = np.asarray(cart, dtype=np.float64)
        return cart @ self._inverse_rows().T

    def fractional_to_cartesian(self, frac: ArrayLike) -> NDArray[np.floating]:
        """
        Convert fractional coordinates to Cartesian coordinates.

        Args:
            frac: Fractional coordinates, shape (3,) or (N, 3).

        Returns:
            Cartesian coordinates with the same shape.
        """
        frac = np.asarray(frac, dtype=np.float64)
        return frac @ self.vectors

    @staticmethod
    def min_image_frac(frac: ArrayLike) -> NDArray[np.floating]:
        """
        Map fractional components into the half-open interval [-0.5, 0.5).

        Args:
            frac: Fractional vector(s), shape (3,) or (N, 3).

        Returns:
            Minimum-image fractional vector(s).
        """
        frac = np.asarray(frac, dtype=np.float64)
        wrapped = frac - np.floor(frac + 0.5)
        # frac + 0.5 can round across an integer, leaving a value one ulp out
        wrapped = np.where(wrapped >= 0.5, wrapped - 1.0, wrapped)
        return np.where(wrapped < -0.5, wrapped + 1.0, wrapped)

    def wrap_cartesian(self, cart: ArrayLike) -> NDArray[np.floating]:
        """
        Wrap Cartesian positions into the primary cell.

        Args:
            cart: Cartesian positions, shape (3,) or (N, 3).

        Returns:
            Wrapped positions with fractional coordinates in [0, 1).
        """
        frac = self.cartesian_to_fractional(cart)
        frac = frac - np.floor(frac)
        # A tiny negative component rounds up to exactly 1.0
        frac = np.where(frac >= 1.0, 0.0, frac)
        return self.fractional_to_cartesian(frac)

    def min_image_displacement(
        self, r1: ArrayLike, r2: ArrayLike
    ) -> NDArray[np.floating]:
        """
        Compute the minimum-image displacement r2 - r1.

        Args:
            r1: First position(s), shape (3,) or (N, 3).
            r2: Second position(s), shape (3,) or (N, 3).

        Returns:
            Shortest periodic displacement vector(s).
        """
        dr = np.asarray(r2, dtype=np.float64) - np.asarray(r1, dtype=np.float64)
        frac = self.min_image_frac(self.cartesian_to_fractional(dr))
        return self.fractional_to_cartesian(frac)

    def reciprocal_vectors(self) -> NDArray[np.floating]:
        """
        Compute reciprocal vectors with b_i . a_j = 2*pi*delta_ij.

        Returns:
            3x3 matrix with rows b1, b2, b3.

        Raises:
            ValueError: If the lattice is degenerate or non-finite.
        """
        return 2.0 * np.pi * self._inverse_rows()
