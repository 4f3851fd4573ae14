"""Pair search and displacement helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..system import Lattice


def displacement(
    r1: NDArray[np.floating], r2: NDArray[np.floating], lattice: Lattice | None
) -> NDArray[np.floating]:
    """
    Displacement r2 - r1, using the minimum image when a lattice is given.

    Args:
        r1: First position(s), shape (3,) or (N, 3).
        r2: Second position(s), shape (3,) or (N, 3).
        lattice: Periodic lattice, or None for open boundaries.

    Returns:
        Displacement vector(s).
    """
    if lattice is None:
        return r2 - r1
    return lattice.min_image_displacement(r1, r2)


def find_pairs(
    positions: NDArray[np.floating], lattice: Lattice | None, cutoff_sq: float
) -> tuple[NDArray[np.intp], NDArray[np.intp]]:
    """
    Find every unordered pair closer than the cutoff.

    Pairs are returned ordered by i, then by j, with i < j. The search is
    O(N^2) but vectorized one row at a time, so memory stays O(N).

    Args:
        positions: Positions, shape (N, 3).
        lattice: Periodic lattice, or None for open boundaries.
        cutoff_sq: Squared cutoff distance.

    Returns:
        Tuple of (i_indices, j_indices).
    """
    n = len(positions)
    i_chunks: list[NDArray[np.intp]] = []
    j_chunks: list[NDArray[np.intp]] = []

    for i in range(n - 1):
        dr = displacement(positions[i], positions[i + 1 :], lattice)
        r2 = np.einsum("ij,ij->i", dr, dr)
        hits = np.nonzero(r2 < cutoff_sq)[0]
        if len(hits):
            j_chunks.append(hits + i + 1)
            i_chunks.append(np.full(len(hits), i, dtype=np.intp))

    if not i_chunks:
        empty = np.empty(0, dtype=np.intp)
        return empty, empty.copy()
    return np.concatenate(i_chunks), np.concatenate(j_chunks).astype(np.intp)


def accumulate_pair_forces(
    forces: NDArray[np.floating],
    i_indices: NDArray[np.intp],
    j_indices: NDArray[np.intp],
    dr: NDArray[np.floating],
    f_div_r: NDArray[np.floating],
) -> None:
    """
    Scatter equal and opposite pair forces into ``forces``.

    ``dr`` points from i to j, so a positive (repulsive) F/r pushes j along
    dr and i against it.
    """
    force_vectors = f_div_r[:, np.newaxis] * dr
    np.add.at(forces, j_indices, force_vectors)
    np.add.at(forces, i_indices, -force_vectors)
