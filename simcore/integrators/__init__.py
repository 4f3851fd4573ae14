"""Integrators, thermostats and timestep checks."""

from . import timestep
from .base import Integrator, Thermostat
from .thermostats import AndersenThermostat, NullThermostat, VelocityRescaleThermostat
from .velocity_verlet import EulerIntegrator, VelocityVerlet

__all__ = [
    # Base classes
    "Integrator",
    "Thermostat",
    # Integrators
    "VelocityVerlet",
    "EulerIntegrator",
    # Thermostats
    "VelocityRescaleThermostat",
    "AndersenThermostat",
    "NullThermostat",
    "timestep",
]
