"""Velocity Verlet and Euler integrators."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .base import ForceCallback, Integrator

if TYPE_CHECKING:
    from ..system import ParticleSystem


class VelocityVerlet(Integrator):
    """
    Velocity Verlet integrator (kick-drift-kick formulation).

    The standard symplectic integrator for molecular dynamics with
    excellent energy conservation and time-reversibility.

    Algorithm:
        v(t + dt/2) = v(t) + 0.5 * dt * a(t)          # step1: first kick
        r(t + dt) = r(t) + dt * v(t + dt/2)           # step1: drift
        F(t + dt) computed at the new positions        # caller
        v(t + dt) = v(t + dt/2) + 0.5 * dt * a(t+dt)  # step2: second kick

    The two half kicks around a single force evaluation are what make the
    scheme symplectic; they must not be merged.

    Attributes:
        dt: Integration timestep.
    """

    def step1(self, system: ParticleSystem) -> None:
        """Half-kick velocities with current forces, then drift positions."""
        accel = system.forces / system.masses[:, np.newaxis]
        system.velocities[...] += 0.5 * self._dt * accel
        system.positions[...] += self._dt * system.velocities

    def step2(self, system: ParticleSystem) -> None:
        """Half-kick velocities with forces computed at the new positions."""
        accel = system.forces / system.masses[:, np.newaxis]
        system.velocities[...] += 0.5 * self._dt * accel

    def integrate(self, system: ParticleSystem, compute_forces: ForceCallback) -> None:
        self.step1(system)
        compute_forces(system)
        self.step2(system)


class EulerIntegrator(Integrator):
    """
    Explicit Euler integrator.

    First order and not time-reversible, so energy errors are O(dt) instead
    of O(dt^2). Kept for comparison and testing against VelocityVerlet.

    Algorithm:
        v(t + dt) = v(t) + dt * a(t)
        r(t + dt) = r(t) + dt * v(t + dt)
    """

    def step(self, system: ParticleSystem) -> None:
        """Advance velocities and positions with the current forces."""
        accel = system.forces / system.masses[:, np.newaxis]
        system.velocities[...] += self._dt * accel
        system.positions[...] += self._dt * system.velocities

    def integrate(self, system: ParticleSystem, compute_forces: ForceCallback) -> None:
        self.step(system)
        compute_forces(system)
