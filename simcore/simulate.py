"""
Simple high-level simulation API.

Each runner builds a Simulation, steps it to completion and returns a
SimulationResult with time series (MD) or the final temperature field
(heat diffusion).

Example:
    >>> from simcore import simulate
    >>> result = simulate.argon_gas(n_steps=300)
    >>> print(result.mean_temperature)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from .constants import K_BOLTZMANN
from .engines import Simulation, SimulationParams
from .forcefields import LennardJones
from .integrators import NullThermostat, VelocityRescaleThermostat
from .models import HeatDiffusion2DParams, HeatDiffusionParams, HeatIC2D
from .system import Lattice

logger = logging.getLogger(__name__)

# Argon-like Lennard-Jones parameters (SI)
ARGON_MASS = 6.63e-26
ARGON_EPSILON = 1.654e-21
ARGON_SIGMA = 3.405e-10
ARGON_CUTOFF = 1.1e-9


@dataclass
class SimulationResult:
    """Results from a simulation run."""

    # Final particle state
    positions: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    velocities: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    # Time series, one entry for the initial state and one per step
    time: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    kinetic_energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    potential_energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    total_energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    temperature: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    # Summary statistics
    mean_temperature: float = 0.0
    mean_potential_energy: float = 0.0
    mean_kinetic_energy: float = 0.0
    energy_drift: float = 0.0
    energy_fluctuation: float = 0.0

    # Heat diffusion output
    temperature_field: NDArray[np.floating] = field(
        default_factory=lambda: np.array([])
    )
    dx: float = 0.0

    # Metadata
    n_atoms: int = 0
    n_steps: int = 0
    timestep: float = 0.0
    box_size: float = 0.0
    final_time: float = 0.0
    error_message: str = ""

    @property
    def ok(self) -> bool:
        return not self.error_message


def cubic_grid(n_side: int, box_length: float) -> NDArray[np.floating]:
    """
    Place n_side^3 points at the cell centres of a cubic grid.

    Args:
        n_side: Points per edge.
        box_length: Edge length of the cube [m].

    Returns:
        Positions, shape (n_side**3, 3).
    """
    spacing = box_length / n_side
    index = np.indices((n_side, n_side, n_side)).reshape(3, -1).T
    return (index + 0.5) * spacing


def maxwell_boltzmann_velocities(
    n: int, mass: float, temperature: float, rng: np.random.Generator
) -> NDArray[np.floating]:
    """Draw velocities with sigma = sqrt(k_B * T / m) per axis."""
    sigma = np.sqrt(K_BOLTZMANN * temperature / mass)
    return rng.normal(0.0, sigma, (n, 3))


def _run_md(sim: Simulation) -> dict[str, list[float]]:
    series: dict[str, list[float]] = {
        "time": [],
        "kinetic_energy": [],
        "potential_energy": [],
        "temperature": [],
    }

    def record(s: Simulation) -> None:
        series["time"].append(s.time)
        series["kinetic_energy"].append(s.kinetic_energy)
        series["potential_energy"].append(s.potential_energy)
        series["temperature"].append(s.temperature)

    sim.initialize()
    record(sim)
    sim.set_step_callback(record)
    sim.run()
    return series


def _md_result(
    sim: Simulation, series: dict[str, list[float]], box_size: float
) -> SimulationResult:
    ke = np.array(series["kinetic_energy"])
    pe = np.array(series["potential_energy"])
    total = ke + pe
    temp = np.array(series["temperature"])
    n_steps = sim.step_count

    fluctuation = 0.0
    if len(total) and np.mean(total) != 0.0:
        fluctuation = float(np.std(total) / abs(np.mean(total)))

    return SimulationResult(
        positions=sim.system.positions.copy(),
        velocities=sim.system.velocities.copy(),
        time=np.array(series["time"]),
        kinetic_energy=ke,
        potential_energy=pe,
        total_energy=total,
        temperature=temp,
        mean_temperature=float(np.mean(temp)) if len(temp) else 0.0,
        mean_potential_energy=float(np.mean(pe)) if len(pe) else 0.0,
        mean_kinetic_energy=float(np.mean(ke)) if len(ke) else 0.0,
        energy_drift=float((total[-1] - total[0]) / n_steps) if n_steps else 0.0,
        energy_fluctuation=fluctuation,
        n_atoms=len(sim.system),
        n_steps=n_steps,
        timestep=sim.params.dt,
        box_size=box_size,
        final_time=sim.time,
        error_message=sim.error_message,
    )


def argon_gas(
    n_side: int = 12,
    box_length: float = 8e-9,
    temperature: float = 350.0,
    n_steps: int = 300,
    timestep: float = 1e-15,
    tau: float = 8e-13,
    use_neighbor_list: bool = True,
    seed: int = 42,
) -> SimulationResult:
    """
    Run a periodic argon gas under a velocity rescaling thermostat.

    Args:
        n_side: Atoms per edge of the initial grid (N = n_side^3).
        box_length: Edge of the cubic periodic cell [m].
        temperature: Initial and target temperature [K].
        n_steps: Number of MD steps.
        timestep: Timestep [s].
        tau: Thermostat relaxation time [s].
        use_neighbor_list: Use the Verlet list instead of brute force.
        seed: Seed for the initial velocities.

    Returns:
        SimulationResult with energy and temperature series.

    Example:
        >>> result = argon_gas(n_side=8, n_steps=100)
        >>> print(f"Mean T: {result.mean_temperature:.1f} K")
    """
    params = SimulationParams(
        dt=timestep,
        max_steps=n_steps,
        temperature=temperature,
        cutoff=ARGON_CUTOFF,
        use_neighbor_list=use_neighbor_list,
    )
    potential = LennardJones(ARGON_EPSILON, ARGON_SIGMA, ARGON_CUTOFF)
    sim = Simulation(params, potential)
    if not sim.is_valid:
        logger.error("Invalid argon parameters: %s", sim.error_message)
        return SimulationResult(error_message=sim.error_message)

    rng = np.random.default_rng(seed)
    positions = cubic_grid(n_side, box_length)
    velocities = maxwell_boltzmann_velocities(
        len(positions), ARGON_MASS, temperature, rng
    )
    sim.system.add_particles(positions, ARGON_MASS, velocities)
    sim.set_lattice(Lattice.cubic(box_length))
    sim.set_thermostat(VelocityRescaleThermostat(temperature, tau))

    logger.info(
        "Argon gas: N=%d, L=%.3g m, T=%.1f K, %d steps",
        len(sim.system),
        box_length,
        temperature,
        n_steps,
    )
    series = _run_md(sim)
    result = _md_result(sim, series, box_length)
    if result.ok:
        logger.info("Done: mean T = %.1f K", result.mean_temperature)
    else:
        logger.warning("Run stopped at step %d: %s", sim.step_count, sim.error_message)
    return result


def lj_cluster(
    n_side: int = 3,
    spacing: float = 3.8e-10,
    temperature: float = 20.0,
    n_steps: int = 500,
    timestep: float = 2e-15,
    seed: int = 7,
) -> SimulationResult:
    """
    Run an isolated argon cluster at constant energy.

    Non-periodic, brute-force pairs and no thermostat, so the total energy
    series measures integrator drift.

    Args:
        n_side: Atoms per edge of the initial cube (N = n_side^3).
        spacing: Initial nearest-neighbour distance [m].
        temperature: Temperature of the initial velocities [K].
        n_steps: Number of MD steps.
        timestep: Timestep [s].
        seed: Seed for the initial velocities.

    Returns:
        SimulationResult with energy series.

    Example:
        >>> result = lj_cluster()
        >>> print(f"Energy fluctuation: {result.energy_fluctuation:.2e}")
    """
    params = SimulationParams(
        dt=timestep,
        max_steps=n_steps,
        temperature=temperature,
        cutoff=ARGON_CUTOFF,
        use_neighbor_list=False,
    )
    sim = Simulation(params, LennardJones(ARGON_EPSILON, ARGON_SIGMA, ARGON_CUTOFF))
    if not sim.is_valid:
        logger.error("Invalid cluster parameters: %s", sim.error_message)
        return SimulationResult(error_message=sim.error_message)

    rng = np.random.default_rng(seed)
    positions = cubic_grid(n_side, n_side * spacing)
    velocities = maxwell_boltzmann_velocities(
        len(positions), ARGON_MASS, temperature, rng
    )
    sim.system.add_particles(positions, ARGON_MASS, velocities)
    sim.set_thermostat(NullThermostat())

    logger.info("LJ cluster: N=%d, %d steps (NVE)", len(sim.system), n_steps)
    series = _run_md(sim)
    result = _md_result(sim, series, n_side * spacing)
    logger.info("Done: energy fluctuation %.2e", result.energy_fluctuation)
    return result


def heat_rod(
    n_cells: int = 50,
    alpha: float = 1e-5,
    dx: float = 1e-3,
    timestep: float = 0.02,
    end_time: float = 10.0,
    max_steps: int = 10_000,
) -> SimulationResult:
    """
    Run 1D heat diffusion along a rod with cold ends.

    Returns:
        SimulationResult with the final temperature profile.

    Example:
        >>> result = heat_rod()
        >>> print(result.temperature_field.max())
    """
    params = HeatDiffusionParams(
        alpha=alpha,
        dx=dx,
        dt=timestep,
        end_time=end_time,
        max_steps=max_steps,
        n_cells=n_cells,
    )
    sim = Simulation(params)
    if not sim.is_valid:
        logger.error("Invalid heat parameters: %s", sim.error_message)
        return SimulationResult(error_message=sim.error_message)

    logger.info(
        "Heat rod: alpha=%g m^2/s, dx=%g m, dt=%g s, end_time=%g s",
        alpha,
        dx,
        timestep,
        end_time,
    )
    sim.run()
    logger.info("Finished at t=%g s, steps=%d", sim.time, sim.step_count)
    return SimulationResult(
        temperature_field=sim.heat_model.temperature.copy(),
        dx=dx,
        n_steps=sim.step_count,
        timestep=timestep,
        final_time=sim.time,
        error_message=sim.error_message,
    )


def heat_plate(
    nx: int = 80,
    ny: int = 80,
    ic: HeatIC2D = HeatIC2D.HOT_CENTER,
    n_steps: int = 500,
    alpha: float = 1.11e-4,
    dx: float = 1.25e-3,
    timestep: float = 3e-3,
    T_boundary: float = 300.0,
    T_hot: float = 1200.0,
) -> SimulationResult:
    """
    Run 2D heat diffusion on a plate with fixed-temperature edges.

    Returns:
        SimulationResult with the final (ny, nx) temperature field.

    Example:
        >>> result = heat_plate(nx=40, ny=40, n_steps=200)
        >>> print(result.temperature_field.shape)
    """
    params = HeatDiffusion2DParams(
        alpha=alpha,
        dx=dx,
        dt=timestep,
        max_steps=n_steps,
        nx=nx,
        ny=ny,
        T_boundary=T_boundary,
        ic=ic,
        T_hot=T_hot,
    )
    sim = Simulation(params)
    if not sim.is_valid:
        logger.error("Invalid heat parameters: %s", sim.error_message)
        return SimulationResult(error_message=sim.error_message)

    logger.info("Heat plate: %dx%d cells, %s, %d steps", nx, ny, ic.name, n_steps)
    sim.run()
    logger.info("Finished at t=%g s, steps=%d", sim.time, sim.step_count)
    return SimulationResult(
        temperature_field=sim.heat_2d_model.temperature.copy(),
        dx=dx,
        n_steps=sim.step_count,
        timestep=timestep,
        final_time=sim.time,
        error_message=sim.error_message,
    )
