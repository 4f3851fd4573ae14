"""Lattice geometry and particle state."""

from .lattice import Lattice
from .particles import Particle, ParticleSystem

__all__ = ["Lattice", "Particle", "ParticleSystem"]
