"""Tests for thermostat implementations."""

import numpy as np
import pytest

from simcore.constants import K_BOLTZMANN
from simcore.integrators import (
    AndersenThermostat,
    NullThermostat,
    VelocityRescaleThermostat,
)
from simcore.system import ParticleSystem

MASS = 6.63e-26


def thermal_system(n: int, temperature: float, seed: int = 0) -> ParticleSystem:
    """Particles with Maxwell-Boltzmann velocities at ``temperature``."""
    rng = np.random.default_rng(seed)
    sigma = np.sqrt(K_BOLTZMANN * temperature / MASS)
    system = ParticleSystem.from_arrays(
        rng.uniform(0.0, 1e-8, (n, 3)), MASS, rng.normal(0.0, sigma, (n, 3))
    )
    system.zero_com_velocity()
    return system


class TestVelocityRescaleThermostat:
    """Test Berendsen-style velocity rescaling."""

    def test_properties(self):
        thermostat = VelocityRescaleThermostat(350.0, 8e-13)
        assert thermostat.target_temperature == 350.0
        assert thermostat.tau == 8e-13
        thermostat.target_temperature = 400.0
        assert thermostat.target_temperature == 400.0

    @pytest.mark.parametrize("tau", [0.0, -1e-13])
    def test_invalid_tau(self, tau):
        with pytest.raises(ValueError):
            VelocityRescaleThermostat(300.0, tau)

    def test_scaling_formula(self):
        """With dt = tau the new temperature is exactly the target."""
        system = thermal_system(50, 100.0)
        t0 = system.temperature
        thermostat = VelocityRescaleThermostat(2.0 * t0, 1e-15)
        thermostat.apply(system, 1e-15)
        assert system.temperature == pytest.approx(2.0 * t0)

    def test_partial_coupling(self):
        system = thermal_system(50, 100.0)
        t0 = system.temperature
        VelocityRescaleThermostat(2.0 * t0, 1e-13).apply(system, 1e-15)
        # lambda^2 = 1 + 0.01 * (2 - 1)
        assert system.temperature == pytest.approx(1.01 * t0)

    def test_relaxes_to_target(self):
        system = thermal_system(100, 500.0)
        thermostat = VelocityRescaleThermostat(300.0, 1e-14)
        for _ in range(200):
            thermostat.apply(system, 1e-15)
        assert system.temperature == pytest.approx(300.0, rel=1e-3)

    def test_zero_temperature_untouched(self):
        system = ParticleSystem.from_arrays(np.zeros((3, 3)), MASS)
        VelocityRescaleThermostat(300.0, 1e-13).apply(system, 1e-15)
        assert np.all(system.velocities == 0.0)

    def test_zero_target_untouched(self):
        system = thermal_system(10, 300.0)
        before = system.velocities.copy()
        VelocityRescaleThermostat(0.0, 1e-13).apply(system, 1e-15)
        assert np.array_equal(system.velocities, before)

    def test_negative_scale_skipped(self):
        """A huge dt/tau that would make lambda^2 negative is ignored."""
        system = thermal_system(10, 300.0)
        before = system.velocities.copy()
        VelocityRescaleThermostat(3.0, 1e-16).apply(system, 1e-15)
        assert np.array_equal(system.velocities, before)


class TestAndersenThermostat:
    """Test stochastic collision thermostat."""

    def test_properties(self):
        thermostat = AndersenThermostat(300.0, 1e12, seed=3)
        assert thermostat.target_temperature == 300.0
        assert thermostat.collision_frequency == 1e12

    def test_negative_frequency_rejected(self):
        with pytest.raises(ValueError):
            AndersenThermostat(300.0, -1.0)

    @pytest.mark.parametrize("target", [-1.0, -1e-3, np.nan, np.inf])
    def test_invalid_target_rejected(self, target):
        with pytest.raises(ValueError):
            AndersenThermostat(target, 1e12)
        thermostat = AndersenThermostat(300.0, 1e12)
        with pytest.raises(ValueError):
            thermostat.target_temperature = target
        assert thermostat.target_temperature == 300.0

    def test_zero_target_freezes_colliders(self):
        system = ParticleSystem.from_arrays(np.zeros((5, 3)), 1.0)
        system.velocities[...] = 1.0
        AndersenThermostat(0.0, 1e20, seed=2).apply(system, 1e-15)
        assert np.all(np.isfinite(system.velocities))
        np.testing.assert_array_equal(system.velocities, 0.0)

    def test_collision_probability(self):
        thermostat = AndersenThermostat(300.0, 1e12)
        assert thermostat.collision_probability(1e-15) == pytest.approx(
            1.0 - np.exp(-1e-3)
        )

    def test_zero_frequency_no_collisions(self):
        system = thermal_system(20, 300.0)
        before = system.velocities.copy()
        AndersenThermostat(50.0, 0.0, seed=1).apply(system, 1e-15)
        assert np.array_equal(system.velocities, before)

    def test_seeded_runs_are_reproducible(self):
        first = thermal_system(50, 300.0)
        second = thermal_system(50, 300.0)
        a = AndersenThermostat(100.0, 1e14, seed=42)
        b = AndersenThermostat(100.0, 1e14, seed=42)
        for _ in range(5):
            a.apply(first, 1e-15)
            b.apply(second, 1e-15)
        assert np.array_equal(first.velocities, second.velocities)

    def test_full_collision_samples_target(self):
        """With p ~ 1 every velocity is redrawn at the target temperature."""
        system = thermal_system(5000, 1000.0)
        AndersenThermostat(300.0, 1e20, seed=7).apply(system, 1e-15)
        assert system.temperature == pytest.approx(300.0, rel=0.05)

    def test_partial_collisions(self):
        system = thermal_system(2000, 300.0)
        before = system.velocities.copy()
        thermostat = AndersenThermostat(300.0, 1e14, seed=9)
        thermostat.apply(system, 1e-15)
        changed = np.any(system.velocities != before, axis=1)
        p = thermostat.collision_probability(1e-15)
        assert 0 < np.count_nonzero(changed) < len(system)
        assert np.mean(changed) == pytest.approx(p, abs=0.05)

    def test_empty_system(self):
        AndersenThermostat(300.0, 1e14, seed=1).apply(ParticleSystem(), 1e-15)


class TestNullThermostat:
    """Test the no-op thermostat."""

    def test_no_change(self):
        system = thermal_system(10, 300.0)
        before = system.velocities.copy()
        NullThermostat().apply(system, 1e-15)
        assert np.array_equal(system.velocities, before)

    def test_target_temperature(self):
        thermostat = NullThermostat()
        thermostat.target_temperature = 500.0
        assert thermostat.target_temperature == 0.0
