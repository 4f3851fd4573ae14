"""Simulation orchestrator over MD and heat diffusion models."""

from __future__ import annotations

from collections.abc import Callable

from ..constants import DEFAULT_FIELD_BUDGET, DEFAULT_PARTICLE_BUDGET
from ..forcefields import Potential
from ..integrators import Integrator, Thermostat
from ..models import (
    HeatDiffusion2DModel,
    HeatDiffusion2DParams,
    HeatDiffusionModel,
    HeatDiffusionParams,
    SimModel,
)
from ..system import Lattice, ParticleSystem
from .md import MDModel
from .params import SimMode, SimulationParams

StepCallback = Callable[["Simulation"], None]

AnyParams = SimulationParams | HeatDiffusionParams | HeatDiffusion2DParams


class Simulation:
    """
    Single entry point for stepping any supported model.

    The mode is chosen from the parameter record passed at construction
    and never changes:

    - SimulationParams: molecular dynamics (SimMode.MD)
    - HeatDiffusionParams: 1D heat diffusion (SimMode.HEAT_DIFFUSION)
    - HeatDiffusion2DParams: 2D heat diffusion (SimMode.HEAT_DIFFUSION_2D)

    Stepping, time, step count and validity are delegated to the active
    model. Invalid parameters do not raise: the simulation is marked
    invalid with a non-empty error_message and refuses to step.

    Example usage:
        sim = Simulation(SimulationParams(dt=1e-15, end_time=1e-12),
                         LennardJones(1.654e-21, 3.405e-10, 1.1e-9))
        sim.system.add_particles(positions, 6.63e-26, velocities)
        sim.set_lattice(Lattice.cubic(8e-9))
        sim.set_thermostat(VelocityRescaleThermostat(350.0, 8e-13))
        sim.run()

        heat = Simulation(HeatDiffusion2DParams(nx=40, ny=40, max_steps=500))
        heat.run()
        image = heat.heat_2d_model.temperature
    """

    def __init__(
        self,
        params: AnyParams,
        potential: Potential | None = None,
        max_bytes: int | None = None,
    ) -> None:
        """
        Initialize simulation.

        Args:
            params: Parameter record selecting the mode.
            potential: Pair potential (MD only).
            max_bytes: Memory ceiling for particle or field storage
                (default 1 GiB for MD, 256 MiB for heat diffusion).

        Raises:
            TypeError: If params is not a known parameter record, or a
                potential is given for a heat diffusion mode.
            MemoryBudgetExceeded: If a heat grid does not fit the budget.
        """
        self._md: MDModel | None = None
        self._step_callback: StepCallback | None = None

        if isinstance(params, SimulationParams):
            self._mode = SimMode.MD
            self._md = MDModel(
                params,
                potential,
                max_bytes=DEFAULT_PARTICLE_BUDGET if max_bytes is None else max_bytes,
            )
            self._model: SimModel = self._md
            return

        if potential is not None:
            raise TypeError("a potential can only be used with SimulationParams")
        field_bytes = DEFAULT_FIELD_BUDGET if max_bytes is None else max_bytes
        if isinstance(params, HeatDiffusionParams):
            self._mode = SimMode.HEAT_DIFFUSION
            self._model = HeatDiffusionModel(params, max_bytes=field_bytes)
        elif isinstance(params, HeatDiffusion2DParams):
            self._mode = SimMode.HEAT_DIFFUSION_2D
            self._model = HeatDiffusion2DModel(params, max_bytes=field_bytes)
        else:
            raise TypeError(f"unsupported parameter record: {type(params).__name__}")

    # ------------------------------------------------------------------
    # Common queries
    # ------------------------------------------------------------------

    @property
    def mode(self) -> SimMode:
        return self._mode

    @property
    def model(self) -> SimModel:
        """Return the active model."""
        return self._model

    @property
    def is_valid(self) -> bool:
        return self._model.is_valid

    @property
    def error_message(self) -> str:
        """Return the error message (empty string when valid)."""
        return self._model.error_message

    @property
    def time(self) -> float:
        """Return simulated time [s]."""
        return self._model.time

    @property
    def step_count(self) -> int:
        return self._model.step_count

    @property
    def finished(self) -> bool:
        return self._model.finished

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """
        Prepare an MD run: zero the centre of mass velocity and compute
        initial forces. Called automatically by the first step() or run();
        a no-op for heat diffusion.
        """
        if self._md is not None:
            self._md.initialize()

    def step(self) -> bool:
        """
        Advance one timestep.

        Returns:
            True if a step was taken and stepping can continue; False when
            the model is invalid, finished, or just reached its end time.
        """
        return self._model.step()

    def run(self) -> None:
        """Step until step() returns False."""
        self._model.run()

    # ------------------------------------------------------------------
    # MD components
    # ------------------------------------------------------------------

    def _require_md(self, operation: str) -> MDModel:
        if self._md is None:
            raise RuntimeError(f"{operation} requires MD mode, not {self._mode.name}")
        return self._md

    @property
    def params(self) -> SimulationParams:
        return self._require_md("params").params

    @property
    def system(self) -> ParticleSystem:
        """Return the particle system for in-place population."""
        return self._require_md("system").system

    @property
    def lattice(self) -> Lattice | None:
        return self._require_md("lattice").lattice

    @property
    def has_lattice(self) -> bool:
        return self._md is not None and self._md.has_lattice

    def set_lattice(self, lattice: Lattice | None) -> None:
        """
        Set the periodic cell (None = non-periodic).

        Raises:
            ValueError: If the lattice is degenerate or non-finite.
            RuntimeError: If not in MD mode.
        """
        self._require_md("set_lattice").set_lattice(lattice)

    @property
    def potential(self) -> Potential | None:
        return self._md.potential if self._md is not None else None

    def set_potential(self, potential: Potential | None) -> None:
        self._require_md("set_potential").set_potential(potential)

    @property
    def thermostat(self) -> Thermostat | None:
        return self._md.thermostat if self._md is not None else None

    def set_thermostat(self, thermostat: Thermostat | None) -> None:
        self._require_md("set_thermostat").set_thermostat(thermostat)

    @property
    def integrator(self) -> Integrator | None:
        return self._md.integrator if self._md is not None else None

    def set_integrator(self, integrator: Integrator) -> None:
        self._require_md("set_integrator").set_integrator(integrator)

    def set_step_callback(self, callback: StepCallback | None) -> None:
        """Register a function called with this simulation after each MD step."""
        md = self._require_md("set_step_callback")
        self._step_callback = callback
        md.set_step_callback(None if callback is None else self._notify)

    def _notify(self, model: MDModel) -> None:
        self._step_callback(self)

    @property
    def kinetic_energy(self) -> float:
        return self._require_md("kinetic_energy").kinetic_energy

    @property
    def potential_energy(self) -> float:
        """Return potential energy from the last force evaluation [J]."""
        return self._require_md("potential_energy").potential_energy

    @property
    def total_energy(self) -> float:
        return self._require_md("total_energy").total_energy

    @property
    def temperature(self) -> float:
        """Return instantaneous particle temperature [K]."""
        return self._require_md("temperature").temperature

    # ------------------------------------------------------------------
    # Heat diffusion access
    # ------------------------------------------------------------------

    @property
    def heat_model(self) -> HeatDiffusionModel | HeatDiffusion2DModel | None:
        """Return the heat diffusion model, or None in MD mode."""
        if self._md is not None:
            return None
        return self._model

    @property
    def heat_2d_model(self) -> HeatDiffusion2DModel | None:
        """Return the 2D heat model, or None in any other mode."""
        if self._mode is SimMode.HEAT_DIFFUSION_2D:
            return self._model
        return None
