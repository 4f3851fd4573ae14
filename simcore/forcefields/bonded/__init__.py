"""Bonded pair potentials."""

from .harmonic import HarmonicPotential

__all__ = ["HarmonicPotential"]
