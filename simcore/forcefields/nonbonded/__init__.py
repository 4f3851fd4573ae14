"""Nonbonded pair potentials."""

from .lj import LennardJones

__all__ = ["LennardJones"]
