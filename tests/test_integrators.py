"""Tests for integrator implementations."""

import numpy as np
import pytest

from simcore.integrators import EulerIntegrator, VelocityVerlet
from simcore.integrators import timestep as ts
from simcore.system import ParticleSystem


@pytest.fixture
def moving_pair():
    """Two unit-mass particles with opposite velocities."""
    return ParticleSystem.from_arrays(
        [[4.5, 5.0, 5.0], [5.5, 5.0, 5.0]],
        [1.0, 1.0],
        [[0.1, 0.0, 0.0], [-0.1, 0.0, 0.0]],
    )


def spring(k: float = 1.0):
    """Force callback for independent springs tethered at the origin."""

    def compute(system):
        system.forces[...] = -k * system.positions

    return compute


def no_force(system):
    system.clear_forces()


def harmonic_energy(system, k: float = 1.0) -> float:
    return system.kinetic_energy + 0.5 * k * float(np.sum(system.positions**2))


class TestIntegratorBase:
    """Test common timestep handling."""

    def test_dt_property(self):
        integrator = VelocityVerlet(0.002)
        assert integrator.dt == 0.002
        integrator.dt = 0.001
        assert integrator.dt == 0.001

    @pytest.mark.parametrize("dt", [0.0, -1e-15, float("nan")])
    def test_invalid_dt(self, dt):
        with pytest.raises(ValueError):
            VelocityVerlet(dt)


class TestVelocityVerlet:
    """Test the two-phase velocity Verlet scheme."""

    def test_constant_velocity_no_force(self, moving_pair):
        integrator = VelocityVerlet(0.01)
        start = moving_pair.positions.copy()
        for _ in range(10):
            integrator.integrate(moving_pair, no_force)
        assert np.allclose(moving_pair.velocities[:, 0], [0.1, -0.1])
        expected = start + 10 * 0.01 * moving_pair.velocities
        assert np.allclose(moving_pair.positions, expected)

    def test_constant_force_is_exact(self):
        """Uniform acceleration is integrated without error."""
        system = ParticleSystem.from_arrays([[0.0, 0.0, 0.0]], 2.0, [[1.0, 0.0, 0.0]])
        force = np.array([4.0, 0.0, 0.0])

        def constant(s):
            s.forces[...] = force

        constant(system)
        dt = 0.1
        integrator = VelocityVerlet(dt)
        for _ in range(5):
            integrator.integrate(system, constant)

        t = 5 * dt
        assert system.positions[0, 0] == pytest.approx(1.0 * t + 0.5 * 2.0 * t * t)
        assert system.velocities[0, 0] == pytest.approx(1.0 + 2.0 * t)

    def test_step1_half_kick_then_drift(self):
        system = ParticleSystem.from_arrays([[0.0, 0.0, 0.0]], 1.0, [[1.0, 0.0, 0.0]])
        system.forces[...] = [2.0, 0.0, 0.0]
        VelocityVerlet(0.5).step1(system)
        # v = 1 + 0.5*0.5*2 = 1.5; x = 0.5 * 1.5
        assert system.velocities[0, 0] == pytest.approx(1.5)
        assert system.positions[0, 0] == pytest.approx(0.75)

    def test_step2_uses_new_forces(self):
        system = ParticleSystem.from_arrays([[0.0, 0.0, 0.0]], 1.0, [[1.5, 0.0, 0.0]])
        system.forces[...] = [-2.0, 0.0, 0.0]
        VelocityVerlet(0.5).step2(system)
        assert system.velocities[0, 0] == pytest.approx(1.0)

    def test_callback_called_once(self, moving_pair):
        calls = []

        def counting(system):
            calls.append(1)
            no_force(system)

        VelocityVerlet(0.01).integrate(moving_pair, counting)
        assert len(calls) == 1

    def test_energy_conservation_harmonic(self):
        system = ParticleSystem.from_arrays([[1.0, 0.0, 0.0]], 1.0)
        compute = spring()
        compute(system)
        integrator = VelocityVerlet(0.01)
        e0 = harmonic_energy(system)
        energies = []
        for _ in range(2000):
            integrator.integrate(system, compute)
            energies.append(harmonic_energy(system))
        assert np.max(np.abs(np.array(energies) - e0)) / e0 < 1e-4

    def test_time_reversibility(self):
        system = ParticleSystem.from_arrays(
            [[1.0, 0.5, 0.0]], 1.0, [[0.0, 0.3, -0.2]]
        )
        compute = spring(2.0)
        compute(system)
        start = system.positions.copy()
        integrator = VelocityVerlet(0.01)
        for _ in range(200):
            integrator.integrate(system, compute)
        system.velocities[...] *= -1.0
        for _ in range(200):
            integrator.integrate(system, compute)
        assert np.allclose(system.positions, start, atol=1e-10)

    def test_momentum_conservation_internal_force(self, moving_pair):
        def internal(system):
            system.forces[...] = [[-0.5, 0.0, 0.0], [0.5, 0.0, 0.0]]

        integrator = VelocityVerlet(0.001)
        p0 = np.sum(moving_pair.masses[:, np.newaxis] * moving_pair.velocities, axis=0)
        internal(moving_pair)
        for _ in range(100):
            integrator.integrate(moving_pair, internal)
        p1 = np.sum(moving_pair.masses[:, np.newaxis] * moving_pair.velocities, axis=0)
        assert np.allclose(p0, p1, atol=1e-12)


class TestEulerIntegrator:
    """Test the single-phase Euler scheme."""

    def test_step(self):
        system = ParticleSystem.from_arrays([[0.0, 0.0, 0.0]], 2.0, [[1.0, 0.0, 0.0]])
        system.forces[...] = [4.0, 0.0, 0.0]
        EulerIntegrator(0.5).step(system)
        # v = 1 + 0.5*2 = 2; x = 0.5*2
        assert system.velocities[0, 0] == pytest.approx(2.0)
        assert system.positions[0, 0] == pytest.approx(1.0)

    def test_integrate_refreshes_forces(self):
        system = ParticleSystem.from_arrays([[1.0, 0.0, 0.0]], 1.0)
        compute = spring()
        compute(system)
        EulerIntegrator(0.1).integrate(system, compute)
        assert np.allclose(system.forces, -system.positions)

    def test_larger_energy_error_than_verlet(self):
        """First-order Euler tracks oscillator energy far worse than Verlet."""
        energies = {}
        for name, integrator in (
            ("euler", EulerIntegrator(0.05)),
            ("verlet", VelocityVerlet(0.05)),
        ):
            system = ParticleSystem.from_arrays([[1.0, 0.0, 0.0]], 1.0)
            compute = spring()
            compute(system)
            worst = 0.0
            for _ in range(500):
                integrator.integrate(system, compute)
                worst = max(worst, abs(harmonic_energy(system) - 0.5))
            energies[name] = worst
        assert energies["euler"] > 10 * energies["verlet"]


class TestTimestepChecks:
    """Test timestep sanity helpers."""

    def test_empty_system(self):
        assert ts.estimate_characteristic_time(ParticleSystem()) == 1.0

    def test_at_rest(self):
        system = ParticleSystem.from_arrays([[0.0, 0.0, 0.0]], 1.0)
        assert ts.estimate_characteristic_time(system) == pytest.approx(1e-14)

    def test_fast_particle(self):
        system = ParticleSystem.from_arrays(
            [[0.0, 0.0, 0.0]], 1.0, [[300.0, 400.0, 0.0]]
        )
        tau = 1e-10 / 500.0
        assert ts.estimate_characteristic_time(system) == pytest.approx(tau)
        assert ts.recommended_max_dt(system) == pytest.approx(tau / 20.0)
        assert ts.is_stable(tau / 20.0, system)
        assert not ts.is_stable(tau / 5.0, system)

    def test_validate_dt(self):
        system = ParticleSystem.from_arrays(
            [[0.0, 0.0, 0.0]], 1.0, [[1000.0, 0.0, 0.0]]
        )
        assert ts.validate_dt(1e-15, system) is None
        message = ts.validate_dt(1e-12, system)
        assert message is not None
        assert "too large" in message
