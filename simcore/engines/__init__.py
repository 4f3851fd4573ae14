"""Simulation orchestration."""

from .md import MDModel
from .params import SimMode, SimulationParams
from .simulation import Simulation

__all__ = [
    "SimMode",
    "SimulationParams",
    "MDModel",
    "Simulation",
]
