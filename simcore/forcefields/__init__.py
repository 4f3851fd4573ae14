"""Pair potentials and force field evaluators."""

from .base import Potential
from .bonded import HarmonicPotential
from .nonbonded import LennardJones
from .pairwise import ForceField, NeighborForceField

__all__ = [
    "Potential",
    "LennardJones",
    "HarmonicPotential",
    "ForceField",
    "NeighborForceField",
]
