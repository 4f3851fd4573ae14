"""
simcore: particle and field simulation core.

Molecular dynamics of point particles under pair potentials in a periodic
lattice, and explicit 1D/2D heat diffusion, behind one Simulation
interface. All quantities are SI.
"""

__version__ = "0.1.0"

# High-level APIs
from . import plotting, simulate

# Core components
from .alloc import BoundedAllocator, MemoryBudgetExceeded
from .constants import K_BOLTZMANN
from .engines import MDModel, SimMode, Simulation, SimulationParams
from .forcefields import (
    ForceField,
    HarmonicPotential,
    LennardJones,
    NeighborForceField,
    Potential,
)
from .integrators import (
    AndersenThermostat,
    EulerIntegrator,
    Integrator,
    NullThermostat,
    Thermostat,
    VelocityRescaleThermostat,
    VelocityVerlet,
)
from .io import ConfigResult, load_config, load_config_or_raise
from .models import (
    HeatDiffusion2DModel,
    HeatDiffusion2DParams,
    HeatDiffusionModel,
    HeatDiffusionParams,
    HeatIC2D,
    SimModel,
)
from .neighborlists import NeighborList
from .system import Lattice, Particle, ParticleSystem

__all__ = [
    "__version__",
    "simulate",
    "plotting",
    "K_BOLTZMANN",
    # Memory
    "BoundedAllocator",
    "MemoryBudgetExceeded",
    # System
    "Lattice",
    "Particle",
    "ParticleSystem",
    # Force fields
    "Potential",
    "LennardJones",
    "HarmonicPotential",
    "ForceField",
    "NeighborForceField",
    "NeighborList",
    # Integrators
    "Integrator",
    "VelocityVerlet",
    "EulerIntegrator",
    "Thermostat",
    "VelocityRescaleThermostat",
    "AndersenThermostat",
    "NullThermostat",
    # Models
    "SimModel",
    "HeatDiffusionParams",
    "HeatDiffusionModel",
    "HeatIC2D",
    "HeatDiffusion2DParams",
    "HeatDiffusion2DModel",
    # Orchestration
    "SimMode",
    "SimulationParams",
    "MDModel",
    "Simulation",
    # Config
    "ConfigResult",
    "load_config",
    "load_config_or_raise",
]
