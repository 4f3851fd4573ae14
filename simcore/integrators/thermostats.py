"""Thermostat implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ..constants import K_BOLTZMANN
from .base import Thermostat

if TYPE_CHECKING:
    from ..system import ParticleSystem


class VelocityRescaleThermostat(Thermostat):
    """
    Berendsen weak-coupling velocity rescaling.

    Scales all velocities by lambda with

        lambda^2 = 1 + (dt / tau) * (T_target / T - 1)

    so the temperature relaxes toward the target with time constant tau.
    Good for equilibration; does not sample the canonical ensemble.

    Attributes:
        target_temperature: Target temperature [K].
        tau: Relaxation time [s] (smaller = stronger coupling).
    """

    def __init__(self, target_temperature: float, tau: float) -> None:
        """
        Initialize velocity rescaling thermostat.

        Args:
            target_temperature: Target temperature [K].
            tau: Relaxation time [s].
        """
        self._temperature = float(target_temperature)
        self.tau = tau

    @property
    def target_temperature(self) -> float:
        return self._temperature

    @target_temperature.setter
    def target_temperature(self, value: float) -> None:
        self._temperature = float(value)

    @property
    def tau(self) -> float:
        return self._tau

    @tau.setter
    def tau(self, value: float) -> None:
        if not value > 0.0:
            raise ValueError(f"tau must be positive, got {value}")
        self._tau = float(value)

    def apply(self, system: ParticleSystem, dt: float) -> None:
        current_temp = system.temperature
        if current_temp <= 0.0 or self._temperature <= 0.0:
            return

        scale_sq = 1.0 + (dt / self._tau) * (self._temperature / current_temp - 1.0)
        if scale_sq <= 0.0:
            return

        system.velocities[...] *= np.sqrt(scale_sq)


class AndersenThermostat(Thermostat):
    """
    Andersen stochastic collision thermostat.

    Each step, every particle collides with probability
    p = 1 - exp(-nu * dt); a colliding particle gets a fresh velocity drawn
    from the Maxwell-Boltzmann distribution, sigma = sqrt(k_B * T / m) per
    axis. Samples the canonical ensemble but disrupts dynamics.

    The random generator is private to the thermostat. A seed of 0 (or
    None) draws the seed from system entropy; any other seed is
    reproducible.

    Attributes:
        target_temperature: Target temperature [K].
        collision_frequency: Collision rate nu [1/s].
    """

    def __init__(
        self,
        target_temperature: float,
        collision_frequency: float,
        seed: int | None = 0,
    ) -> None:
        """
        Initialize Andersen thermostat.

        Args:
            target_temperature: Target temperature [K].
            collision_frequency: Collision rate [1/s].
            seed: Random seed (0 or None = entropy).

        Raises:
            ValueError: If the target temperature is negative or non-finite,
                or the collision frequency is negative.
        """
        self.target_temperature = target_temperature
        self.collision_frequency = collision_frequency
        self._rng = np.random.default_rng(seed if seed else None)

    @property
    def target_temperature(self) -> float:
        return self._temperature

    @target_temperature.setter
    def target_temperature(self, value: float) -> None:
        if not (np.isfinite(value) and value >= 0.0):
            raise ValueError(
                f"target temperature must be finite and non-negative, got {value}"
            )
        self._temperature = float(value)

    @property
    def collision_frequency(self) -> float:
        return self._nu

    @collision_frequency.setter
    def collision_frequency(self, value: float) -> None:
        if not value >= 0.0:
            raise ValueError(f"collision frequency must be non-negative, got {value}")
        self._nu = float(value)

    def collision_probability(self, dt: float) -> float:
        """Return per-particle collision probability for one step."""
        return 1.0 - float(np.exp(-self._nu * dt))

    def apply(self, system: ParticleSystem, dt: float) -> None:
        n = len(system)
        if n == 0:
            return

        collide = self._rng.random(n) < self.collision_probability(dt)
        n_collide = int(np.count_nonzero(collide))
        if n_collide == 0:
            return

        sigma = np.sqrt(K_BOLTZMANN * self._temperature / system.masses[collide])
        system.velocities[collide] = (
            self._rng.standard_normal((n_collide, 3)) * sigma[:, np.newaxis]
        )


class NullThermostat(Thermostat):
    """No-op thermostat (NVE, constant energy)."""

    @property
    def target_temperature(self) -> float:
        return 0.0

    @target_temperature.setter
    def target_temperature(self, value: float) -> None:
        pass

    def apply(self, system: ParticleSystem, dt: float) -> None:
        pass
