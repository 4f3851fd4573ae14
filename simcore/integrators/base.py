"""Base interfaces for integrators and thermostats."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..system import ParticleSystem


ForceCallback = Callable[["ParticleSystem"], None]


class Integrator(ABC):
    """
    Abstract base class for time integration algorithms.

    Integrators advance particle kinematics in place given the forces
    currently stored on the system.
    """

    def __init__(self, dt: float) -> None:
        """
        Initialize integrator.

        Args:
            dt: Integration timestep [s].
        """
        self.dt = dt

    @property
    def dt(self) -> float:
        """Return the integration timestep."""
        return self._dt

    @dt.setter
    def dt(self, value: float) -> None:
        if not value > 0.0:
            raise ValueError(f"timestep must be positive, got {value}")
        self._dt = float(value)

    @abstractmethod
    def integrate(self, system: ParticleSystem, compute_forces: ForceCallback) -> None:
        """
        Advance the system by one timestep.

        Args:
            system: Particle system, updated in place.
            compute_forces: Callback that zeroes and recomputes the forces on
                ``system`` at its current positions. Called exactly once.
        """
        ...


class Thermostat(ABC):
    """
    Abstract base class for thermostats.

    Thermostats adjust particle velocities in place toward a target
    temperature after each integration step.
    """

    @abstractmethod
    def apply(self, system: ParticleSystem, dt: float) -> None:
        """
        Apply the thermostat.

        Args:
            system: Particle system, velocities modified in place.
            dt: Integration timestep [s].
        """
        ...

    @property
    @abstractmethod
    def target_temperature(self) -> float:
        """Return target temperature [K]."""
        ...

    @target_temperature.setter
    @abstractmethod
    def target_temperature(self, value: float) -> None: ...
