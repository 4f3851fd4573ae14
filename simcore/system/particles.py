"""Particle container and aggregate physics."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..alloc import BoundedAllocator
from ..constants import DEFAULT_PARTICLE_BUDGET, K_BOLTZMANN

if TYPE_CHECKING:
    from .lattice import Lattice


def _vector(value: ArrayLike) -> NDArray[np.floating]:
    vector = np.array(value, dtype=np.float64)
    if vector.shape != (3,):
        raise ValueError(f"expected a 3-vector, got shape {vector.shape}")
    return vector


@dataclass
class Particle:
    """
    State of a single point particle (SI units).

    Attributes:
        pos: Position [m].
        vel: Velocity [m/s].
        force: Force [N].
        mass: Mass [kg].
    """

    pos: NDArray[np.floating] = field(default_factory=lambda: np.zeros(3))
    vel: NDArray[np.floating] = field(default_factory=lambda: np.zeros(3))
    force: NDArray[np.floating] = field(default_factory=lambda: np.zeros(3))
    mass: float = 1.0

    def __post_init__(self) -> None:
        self.pos = _vector(self.pos)
        self.vel = _vector(self.vel)
        self.force = _vector(self.force)
        self.mass = float(self.mass)


class ParticleSystem:
    """
    Ordered, index-stable collection of particles.

    Particle data lives in contiguous arrays drawn from a BoundedAllocator.
    Storage grows geometrically like a dynamic array; the number of
    particles only changes through add_particle(), add_particles() and
    clear(). Aggregate quantities are computed on demand from the current
    arrays and never cached.

    The ``positions``, ``velocities``, ``forces`` and ``masses`` properties
    return writable views of the live particles, shape (N, 3) or (N,).
    """

    def __init__(
        self,
        max_bytes: int = DEFAULT_PARTICLE_BUDGET,
        allocator: BoundedAllocator | None = None,
    ) -> None:
        """
        Initialize an empty particle system.

        Args:
            max_bytes: Byte ceiling for particle storage.
            allocator: Existing allocator to share; overrides max_bytes.
        """
        self._allocator = allocator if allocator is not None else BoundedAllocator(
            max_bytes
        )
        self._n = 0
        self._capacity = 0
        self._pos = np.empty((0, 3), dtype=np.float64)
        self._vel = np.empty((0, 3), dtype=np.float64)
        self._force = np.empty((0, 3), dtype=np.float64)
        self._mass = np.empty(0, dtype=np.float64)

    @classmethod
    def from_arrays(
        cls,
        positions: ArrayLike,
        masses: ArrayLike,
        velocities: ArrayLike | None = None,
        max_bytes: int = DEFAULT_PARTICLE_BUDGET,
    ) -> ParticleSystem:
        """
        Create a system populated from arrays.

        Args:
            positions: Positions, shape (N, 3).
            masses: Masses, shape (N,) or a scalar shared by all particles.
            velocities: Velocities, shape (N, 3). Defaults to zeros.
            max_bytes: Byte ceiling for particle storage.

        Returns:
            New ParticleSystem.
        """
        system = cls(max_bytes=max_bytes)
        system.add_particles(positions, masses, velocities)
        return system

    @property
    def allocator(self) -> BoundedAllocator:
        """Return the allocator backing particle storage."""
        return self._allocator

    @property
    def n_particles(self) -> int:
        """Return number of particles."""
        return self._n

    @property
    def capacity(self) -> int:
        """Return number of particle slots currently allocated."""
        return self._capacity

    @property
    def empty(self) -> bool:
        return self._n == 0

    def __len__(self) -> int:
        return self._n

    @property
    def positions(self) -> NDArray[np.floating]:
        return self._pos[: self._n]

    @positions.setter
    def positions(self, value: ArrayLike) -> None:
        self._pos[: self._n] = value

    @property
    def velocities(self) -> NDArray[np.floating]:
        return self._vel[: self._n]

    @velocities.setter
    def velocities(self, value: ArrayLike) -> None:
        self._vel[: self._n] = value

    @property
    def forces(self) -> NDArray[np.floating]:
        return self._force[: self._n]

    @forces.setter
    def forces(self, value: ArrayLike) -> None:
        self._force[: self._n] = value

    @property
    def masses(self) -> NDArray[np.floating]:
        return self._mass[: self._n]

    def __getitem__(self, index: int) -> Particle:
        """Return a copy of particle ``index``."""
        if index < 0:
            index += self._n
        if not 0 <= index < self._n:
            raise IndexError(f"particle index {index} out of range for {self._n}")
        return Particle(
            pos=self._pos[index].copy(),
            vel=self._vel[index].copy(),
            force=self._force[index].copy(),
            mass=float(self._mass[index]),
        )

    def __iter__(self) -> Iterator[Particle]:
        for i in range(self._n):
            yield self[i]

    def reserve(self, n: int) -> None:
        """
        Ensure storage for at least ``n`` particles.

        Raises:
            MemoryBudgetExceeded: If the new storage does not fit the budget.
        """
        if n <= self._capacity:
            return

        allocator = self._allocator
        # New buffers are charged before the old ones are returned
        allocated: list[NDArray[np.floating]] = []
        try:
            for shape in ((n, 3), (n, 3), (n, 3), (n,)):
                allocated.append(allocator.allocate(shape))
        except MemoryError:
            for array in allocated:
                allocator.release(array)
            raise
        pos, vel, force, mass = allocated

        pos[: self._n] = self.positions
        vel[: self._n] = self.velocities
        force[: self._n] = self.forces
        mass[: self._n] = self.masses

        self._release_storage()
        self._pos, self._vel, self._force, self._mass = pos, vel, force, mass
        self._capacity = n

    def _release_storage(self) -> None:
        if self._capacity == 0:
            return
        for array in (self._pos, self._vel, self._force, self._mass):
            self._allocator.release(array)

    def _grow_for(self, n_new: int) -> None:
        needed = self._n + n_new
        if needed > self._capacity:
            self.reserve(max(needed, 2 * self._capacity, 1))

    def add_particle(self, particle: Particle) -> int:
        """
        Append a particle.

        Args:
            particle: Particle to copy into the system.

        Returns:
            Index of the new particle.
        """
        if not particle.mass > 0.0:
            raise ValueError(f"particle mass must be positive, got {particle.mass}")
        self._grow_for(1)
        i = self._n
        self._pos[i] = particle.pos
        self._vel[i] = particle.vel
        self._force[i] = particle.force
        self._mass[i] = particle.mass
        self._n += 1
        return i

    def add_particles(
        self,
        positions: ArrayLike,
        masses: ArrayLike,
        velocities: ArrayLike | None = None,
    ) -> None:
        """
        Append many particles at once.

        Args:
            positions: Positions, shape (M, 3).
            masses: Masses, shape (M,) or scalar.
            velocities: Velocities, shape (M, 3). Defaults to zeros.
        """
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        m = len(positions)
        masses = np.broadcast_to(np.asarray(masses, dtype=np.float64), (m,))
        if np.any(~(masses > 0.0)):
            raise ValueError("particle masses must be positive")
        if velocities is None:
            velocities = np.zeros((m, 3), dtype=np.float64)
        velocities = np.asarray(velocities, dtype=np.float64)
        if velocities.shape != (m, 3):
            raise ValueError(
                f"velocities shape {velocities.shape} incompatible with {m} particles"
            )

        self._grow_for(m)
        start, stop = self._n, self._n + m
        self._pos[start:stop] = positions
        self._vel[start:stop] = velocities
        self._force[start:stop] = 0.0
        self._mass[start:stop] = masses
        self._n = stop

    def clear(self) -> None:
        """Remove all particles (storage is kept)."""
        self._n = 0

    def clear_forces(self) -> None:
        """Zero all forces; required before force accumulation."""
        self.forces[...] = 0.0

    @property
    def kinetic_energy(self) -> float:
        """Compute total kinetic energy sum(0.5 * m * v^2) [J]."""
        return float(0.5 * np.sum(self.masses[:, np.newaxis] * self.velocities**2))

    @property
    def temperature(self) -> float:
        """
        Compute instantaneous temperature [K].

        Uses T = 2 * KE / (N_dof * k_B) with N_dof = 3*N - 3 (fixed centre
        of mass). Returns 0 if N <= 1.
        """
        if self._n <= 1:
            return 0.0
        n_dof = 3 * self._n - 3
        return 2.0 * self.kinetic_energy / (n_dof * K_BOLTZMANN)

    @property
    def center_of_mass(self) -> NDArray[np.floating]:
        """Compute centre of mass position (origin for an empty system)."""
        total_mass = np.sum(self.masses)
        if total_mass <= 0.0:
            return np.zeros(3)
        return np.sum(self.masses[:, np.newaxis] * self.positions, axis=0) / total_mass

    @property
    def center_of_mass_velocity(self) -> NDArray[np.floating]:
        """Compute mass-weighted mean velocity."""
        total_mass = np.sum(self.masses)
        if total_mass <= 0.0:
            return np.zeros(3)
        return np.sum(self.masses[:, np.newaxis] * self.velocities, axis=0) / total_mass

    def zero_com_velocity(self) -> None:
        """Subtract the centre of mass velocity from every particle."""
        self.velocities[...] -= self.center_of_mass_velocity

    def apply_pbc(self, lattice: Lattice) -> None:
        """Wrap every position into the primary cell of ``lattice``."""
        if self._n:
            self.positions[...] = lattice.wrap_cartesian(self.positions)

    def is_finite(self) -> bool:
        """Check that all positions, velocities and forces are finite."""
        return bool(
            np.all(np.isfinite(self.positions))
            and np.all(np.isfinite(self.velocities))
            and np.all(np.isfinite(self.forces))
        )
