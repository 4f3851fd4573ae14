"""Tests for the particle container."""

import numpy as np
import pytest

from simcore.alloc import MemoryBudgetExceeded
from simcore.constants import K_BOLTZMANN, PARTICLE_SLOT_BYTES
from simcore.system import Lattice, Particle, ParticleSystem


@pytest.fixture
def two_particles():
    """Two particles moving in opposite directions."""
    system = ParticleSystem()
    system.add_particle(Particle(pos=[0.0, 0.0, 0.0], vel=[1.0, 0.0, 0.0], mass=2.0))
    system.add_particle(Particle(pos=[1.0, 0.0, 0.0], vel=[-1.0, 2.0, 0.0], mass=1.0))
    return system


class TestParticle:
    """Test the single particle record."""

    def test_defaults(self):
        particle = Particle()
        assert np.allclose(particle.pos, 0.0)
        assert particle.mass == 1.0

    def test_rejects_bad_vector(self):
        with pytest.raises(ValueError):
            Particle(pos=[1.0, 2.0])


class TestParticleSystemStorage:
    """Test adding, indexing and growth."""

    def test_empty(self):
        system = ParticleSystem()
        assert system.empty
        assert len(system) == 0
        assert system.positions.shape == (0, 3)

    def test_add_particle_returns_index(self):
        system = ParticleSystem()
        assert system.add_particle(Particle(mass=1.0)) == 0
        assert system.add_particle(Particle(mass=1.0)) == 1
        assert system.n_particles == 2

    def test_add_particle_rejects_non_positive_mass(self):
        system = ParticleSystem()
        with pytest.raises(ValueError):
            system.add_particle(Particle(mass=0.0))

    def test_getitem_returns_copy(self, two_particles):
        particle = two_particles[1]
        particle.pos[0] = 99.0
        assert two_particles.positions[1, 0] == 1.0
        assert two_particles[-1].mass == 1.0

    def test_getitem_out_of_range(self, two_particles):
        with pytest.raises(IndexError):
            two_particles[2]

    def test_iteration(self, two_particles):
        masses = [p.mass for p in two_particles]
        assert masses == [2.0, 1.0]

    def test_add_particles_bulk(self):
        system = ParticleSystem()
        system.add_particles(np.zeros((5, 3)), 3.0)
        assert len(system) == 5
        assert np.all(system.masses == 3.0)
        assert np.all(system.velocities == 0.0)

    def test_add_particles_rejects_bad_velocity_shape(self):
        system = ParticleSystem()
        with pytest.raises(ValueError):
            system.add_particles(np.zeros((2, 3)), 1.0, np.zeros((3, 3)))

    def test_from_arrays(self):
        positions = np.arange(12.0).reshape(4, 3)
        system = ParticleSystem.from_arrays(positions, [1.0, 2.0, 3.0, 4.0])
        assert np.allclose(system.positions, positions)
        assert np.allclose(system.masses, [1.0, 2.0, 3.0, 4.0])

    def test_growth_preserves_data(self):
        system = ParticleSystem()
        for i in range(10):
            system.add_particle(Particle(pos=[float(i), 0.0, 0.0], mass=1.0))
        assert system.capacity >= 10
        assert np.allclose(system.positions[:, 0], np.arange(10.0))

    def test_views_are_writable(self, two_particles):
        two_particles.positions[0] = [5.0, 5.0, 5.0]
        assert np.allclose(two_particles[0].pos, [5.0, 5.0, 5.0])

    def test_clear_keeps_storage(self, two_particles):
        capacity = two_particles.capacity
        two_particles.clear()
        assert two_particles.empty
        assert two_particles.capacity == capacity


class TestParticleBudget:
    """Test particle storage draws on the allocator."""

    def test_reserve_charges_allocator(self):
        system = ParticleSystem(max_bytes=100 * PARTICLE_SLOT_BYTES)
        system.reserve(10)
        assert system.allocator.current_bytes == 10 * PARTICLE_SLOT_BYTES

    def test_growth_releases_old_storage(self):
        system = ParticleSystem(max_bytes=100 * PARTICLE_SLOT_BYTES)
        system.reserve(4)
        system.reserve(8)
        assert system.allocator.current_bytes == 8 * PARTICLE_SLOT_BYTES

    def test_budget_exceeded(self):
        system = ParticleSystem(max_bytes=4 * PARTICLE_SLOT_BYTES)
        system.add_particles(np.zeros((4, 3)), 1.0)
        with pytest.raises(MemoryBudgetExceeded):
            system.add_particle(Particle(mass=1.0))
        # Failed growth leaves the system intact
        assert len(system) == 4
        assert system.allocator.current_bytes == 4 * PARTICLE_SLOT_BYTES


class TestAggregates:
    """Test kinetic energy, temperature and centre of mass."""

    def test_kinetic_energy(self, two_particles):
        # 0.5*2*1 + 0.5*1*(1 + 4)
        assert two_particles.kinetic_energy == pytest.approx(3.5)

    def test_temperature(self, two_particles):
        expected = 2.0 * 3.5 / (3 * K_BOLTZMANN)
        assert two_particles.temperature == pytest.approx(expected)

    def test_temperature_single_particle_is_zero(self):
        system = ParticleSystem()
        system.add_particle(Particle(vel=[100.0, 0.0, 0.0], mass=1.0))
        assert system.temperature == 0.0

    def test_center_of_mass(self, two_particles):
        assert np.allclose(two_particles.center_of_mass, [1.0 / 3.0, 0.0, 0.0])

    def test_zero_com_velocity(self, two_particles):
        two_particles.zero_com_velocity()
        assert np.allclose(two_particles.center_of_mass_velocity, 0.0, atol=1e-15)

    def test_empty_aggregates(self):
        system = ParticleSystem()
        assert system.kinetic_energy == 0.0
        assert np.allclose(system.center_of_mass, 0.0)

    def test_clear_forces(self, two_particles):
        two_particles.forces[...] = 1.0
        two_particles.clear_forces()
        assert np.all(two_particles.forces == 0.0)

    def test_apply_pbc(self):
        system = ParticleSystem.from_arrays([[11.0, -1.0, 3.0]], 1.0)
        system.apply_pbc(Lattice.cubic(10.0))
        assert np.allclose(system.positions, [[1.0, 9.0, 3.0]])

    def test_is_finite(self, two_particles):
        assert two_particles.is_finite()
        two_particles.velocities[0, 1] = np.inf
        assert not two_particles.is_finite()
