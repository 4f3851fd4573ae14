"""Pairwise force field evaluators."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..neighborlists import NeighborList
from ..neighborlists.search import accumulate_pair_forces, displacement, find_pairs
from .base import Potential

if TYPE_CHECKING:
    from ..system import Lattice, ParticleSystem


def _evaluate_pairs(
    potential: Potential,
    system: ParticleSystem,
    lattice: Lattice | None,
    i_indices: NDArray[np.intp],
    j_indices: NDArray[np.intp],
    with_forces: bool,
) -> float:
    """Evaluate the potential over candidate pairs inside its true cutoff."""
    if len(i_indices) == 0:
        return 0.0

    positions = system.positions
    dr = displacement(positions[i_indices], positions[j_indices], lattice)
    r2 = np.einsum("ij,ij->i", dr, dr)

    mask = r2 < potential.cutoff_squared
    if not np.any(mask):
        return 0.0
    r2 = r2[mask]

    energy = float(np.sum(potential.energy(r2)))
    if with_forces:
        accumulate_pair_forces(
            system.forces,
            i_indices[mask],
            j_indices[mask],
            dr[mask],
            potential.force_div_r(r2),
        )
    return energy


class ForceField:
    """
    Brute-force pairwise force field.

    Visits every unordered pair once (O(N^2)) and applies Newton's third
    law structurally: each pair force is added to one particle and
    subtracted from the other.

    Example:
        ff = ForceField(LennardJones(epsilon, sigma, cutoff))
        potential_energy = ff.compute_forces(system, lattice)
    """

    def __init__(self, potential: Potential | None) -> None:
        """
        Initialize force field.

        Args:
            potential: Pair potential (may be shared with other force fields).
        """
        self._potential = potential

    @property
    def potential(self) -> Potential | None:
        return self._potential

    @potential.setter
    def potential(self, value: Potential | None) -> None:
        self._potential = value

    def _pairs(
        self, system: ParticleSystem, lattice: Lattice | None
    ) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
        return find_pairs(system.positions, lattice, self._potential.cutoff_squared)

    def compute_forces(
        self, system: ParticleSystem, lattice: Lattice | None = None
    ) -> float:
        """
        Zero and recompute all forces.

        Args:
            system: Particle system; forces are written in place.
            lattice: Lattice for periodic boundaries (None = non-periodic).

        Returns:
            Total potential energy [J].
        """
        system.clear_forces()
        if self._potential is None:
            return 0.0
        i_indices, j_indices = self._pairs(system, lattice)
        return _evaluate_pairs(
            self._potential, system, lattice, i_indices, j_indices, with_forces=True
        )

    def compute_energy(
        self, system: ParticleSystem, lattice: Lattice | None = None
    ) -> float:
        """Compute total potential energy without touching forces."""
        if self._potential is None:
            return 0.0
        i_indices, j_indices = self._pairs(system, lattice)
        return _evaluate_pairs(
            self._potential, system, lattice, i_indices, j_indices, with_forces=False
        )


class NeighborForceField(ForceField):
    """
    Pairwise force field accelerated by a Verlet neighbor list.

    The list is built with cutoff + skin and rebuilt only when stale. Forces
    are evaluated over listed pairs with the potential's own cutoff, so
    pairs in the skin shell are listed but contribute nothing until they
    move inside the cutoff.
    """

    def __init__(self, potential: Potential | None, cutoff: float, skin: float) -> None:
        """
        Initialize neighbor-list force field.

        Args:
            potential: Pair potential.
            cutoff: Neighbor list cutoff [m].
            skin: Neighbor list skin [m].
        """
        super().__init__(potential)
        self._nlist = NeighborList(cutoff, skin)

    @property
    def neighbor_list(self) -> NeighborList:
        return self._nlist

    def _pairs(
        self, system: ParticleSystem, lattice: Lattice | None
    ) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
        if self._nlist.needs_rebuild(system, lattice):
            self._nlist.build(system, lattice)
        return self._nlist.get_pairs()
