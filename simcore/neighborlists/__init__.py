"""Neighbor list implementations."""

from .search import displacement, find_pairs
from .verlet import NeighborList

__all__ = ["NeighborList", "displacement", "find_pairs"]
