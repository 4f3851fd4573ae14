"""Verlet neighbor list implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from .search import displacement, find_pairs

if TYPE_CHECKING:
    from ..system import Lattice, ParticleSystem


class NeighborList:
    """
    Verlet neighbor list with skin distance.

    Uses a larger cutoff (cutoff + skin) for list construction, so the list
    stays valid while atoms move small distances. It is rebuilt lazily: only
    when some particle has moved more than skin/2 since the last build
    (measured with the minimum image when a lattice is present), or when the
    particle count changed.

    Each pair is stored once, under its lower index (i < j), in discovery
    order.

    Attributes:
        _cutoff: Interaction cutoff distance.
        _skin: Additional buffer distance.
        _neighbors: Per-particle neighbor index arrays.
        _positions_at_build: Positions when the list was last built.
    """

    def __init__(self, cutoff: float, skin: float) -> None:
        """
        Initialize neighbor list.

        Args:
            cutoff: Force cutoff distance [m].
            skin: Buffer distance for list validity [m].
        """
        self._neighbors: list[NDArray[np.intp]] = []
        self._i_indices: NDArray[np.intp] = np.empty(0, dtype=np.intp)
        self._j_indices: NDArray[np.intp] = np.empty(0, dtype=np.intp)
        self._positions_at_build: NDArray[np.floating] | None = None
        self.set_cutoff(cutoff, skin)

    def set_cutoff(self, cutoff: float, skin: float) -> None:
        """Set cutoff and skin distances; the list must be rebuilt afterwards."""
        if cutoff <= 0.0:
            raise ValueError(f"cutoff must be positive, got {cutoff}")
        if skin < 0.0:
            raise ValueError(f"skin must be non-negative, got {skin}")
        self._cutoff = float(cutoff)
        self._skin = float(skin)
        self._list_cutoff_sq = (self._cutoff + self._skin) ** 2
        self._skin_half_sq = (0.5 * self._skin) ** 2
        self.clear()

    @property
    def cutoff(self) -> float:
        """Return the interaction cutoff distance."""
        return self._cutoff

    @property
    def skin(self) -> float:
        return self._skin

    @property
    def list_cutoff(self) -> float:
        """Return the neighbor list cutoff (cutoff + skin)."""
        return self._cutoff + self._skin

    @property
    def n_pairs(self) -> int:
        """Return the number of neighbor pairs."""
        return len(self._i_indices)

    @property
    def size(self) -> int:
        """Return the number of particles covered by the list."""
        return len(self._neighbors)

    @property
    def is_built(self) -> bool:
        return self._positions_at_build is not None

    def build(self, system: ParticleSystem, lattice: Lattice | None = None) -> int:
        """
        Build the neighbor list from scratch.

        Args:
            system: Particle system.
            lattice: Lattice for periodic boundaries (None = non-periodic).

        Returns:
            Number of neighbor pairs.
        """
        positions = system.positions
        n = len(positions)
        self._positions_at_build = positions.copy()

        i_indices, j_indices = find_pairs(positions, lattice, self._list_cutoff_sq)
        self._i_indices = i_indices
        self._j_indices = j_indices

        # Pairs arrive sorted by i, so each row is a contiguous slice
        bounds = np.searchsorted(i_indices, np.arange(n + 1))
        self._neighbors = [j_indices[bounds[i] : bounds[i + 1]] for i in range(n)]

        return self.n_pairs

    def needs_rebuild(
        self, system: ParticleSystem, lattice: Lattice | None = None
    ) -> bool:
        """
        Check whether the list is stale.

        Args:
            system: Particle system.
            lattice: Lattice for periodic boundaries.

        Returns:
            True if never built, the particle count changed, or any particle
            moved more than skin/2 since the last build.
        """
        if self._positions_at_build is None:
            return True
        positions = system.positions
        if len(positions) != len(self._positions_at_build):
            return True
        if len(positions) == 0:
            return False

        dr = displacement(self._positions_at_build, positions, lattice)
        dr2 = np.einsum("ij,ij->i", dr, dr)
        return bool(np.any(dr2 > self._skin_half_sq))

    def neighbors(self, index: int) -> NDArray[np.intp]:
        """
        Get neighbors j > index of a particle.

        Args:
            index: Particle index.

        Returns:
            Array of neighbor indices in discovery order.
        """
        return self._neighbors[index]

    def get_pairs(self) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
        """
        Get all neighbor pairs.

        Returns:
            Tuple of (i_indices, j_indices) with i < j for every pair.
        """
        return self._i_indices, self._j_indices

    def clear(self) -> None:
        """Forget the current list and recorded positions."""
        self._neighbors = []
        self._i_indices = np.empty(0, dtype=np.intp)
        self._j_indices = np.empty(0, dtype=np.intp)
        self._positions_at_build = None
