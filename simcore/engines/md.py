"""Molecular dynamics model."""

from __future__ import annotations

import math
from collections.abc import Callable

from ..constants import DEFAULT_PARTICLE_BUDGET
from ..forcefields import ForceField, NeighborForceField, Potential
from ..integrators import Integrator, Thermostat, VelocityVerlet
from ..models.base import SimModel
from ..system import Lattice, ParticleSystem
from .params import SimulationParams

StepCallback = Callable[["MDModel"], None]


class MDModel(SimModel):
    """
    Molecular dynamics assembly: particles, force field, integrator,
    thermostat and an optional periodic lattice.

    One step runs:

    1. Integrator first half (velocities and positions).
    2. Wrap positions into the lattice, if one is set.
    3. Recompute forces.
    4. Integrator second half.
    5. Thermostat, if set.
    6. Advance time and step count, then check the state is finite.

    When end_time > 0 and time lands within dt/2 of it, time is clamped
    to end_time and step() returns False.

    Example:
        model = MDModel(SimulationParams(dt=1e-15, max_steps=100),
                        LennardJones(1.654e-21, 3.405e-10, 1.1e-9))
        model.system.add_particles(positions, 6.63e-26)
        model.set_lattice(Lattice.cubic(5e-9))
        model.run()
    """

    def __init__(
        self,
        params: SimulationParams,
        potential: Potential | None = None,
        max_bytes: int = DEFAULT_PARTICLE_BUDGET,
    ) -> None:
        """
        Initialize MD model.

        Args:
            params: Run parameters; validated immediately.
            potential: Pair potential (None = free particles).
            max_bytes: Byte ceiling for particle storage.
        """
        self._params = params
        self._system = ParticleSystem(max_bytes=max_bytes)
        self._lattice: Lattice | None = None
        self._force_field: ForceField | None = None
        self._integrator: Integrator | None = None
        self._thermostat: Thermostat | None = None
        self._step_callback: StepCallback | None = None

        self._time = 0.0
        self._step_count = 0
        self._valid = False
        self._error = ""
        self._initialized = False
        self._forces_stale = True
        self._force_count = 0
        self._last_potential_energy = 0.0

        error = params.validate()
        if error is not None:
            self._error = error
            return

        self._integrator = VelocityVerlet(params.dt)
        if potential is not None:
            self.set_potential(potential)
        self._valid = True

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def params(self) -> SimulationParams:
        return self._params

    @property
    def system(self) -> ParticleSystem:
        """Return the particle system for in-place population."""
        return self._system

    @property
    def lattice(self) -> Lattice | None:
        return self._lattice

    @property
    def has_lattice(self) -> bool:
        return self._lattice is not None

    def set_lattice(self, lattice: Lattice | None) -> None:
        """
        Set the periodic cell (None = non-periodic).

        Raises:
            ValueError: If the lattice is degenerate or non-finite.
        """
        if lattice is not None:
            error = lattice.validate()
            if error is not None:
                raise ValueError(error)
        self._lattice = lattice
        if isinstance(self._force_field, NeighborForceField):
            # Pairs were chosen under the old cell
            self._force_field.neighbor_list.clear()
        self._forces_stale = True

    @property
    def force_field(self) -> ForceField | None:
        return self._force_field

    @property
    def potential(self) -> Potential | None:
        if self._force_field is None:
            return None
        return self._force_field.potential

    def set_potential(self, potential: Potential | None) -> None:
        """
        Set the pair potential.

        Builds a NeighborForceField (cutoff and skin from params) when
        use_neighbor_list is set, a brute-force ForceField otherwise. The
        potential object is shared, not copied.
        """
        if potential is None:
            self._force_field = None
        elif self._params.use_neighbor_list:
            self._force_field = NeighborForceField(
                potential, self._params.cutoff, self._params.neighbor_skin
            )
        else:
            self._force_field = ForceField(potential)
        self._forces_stale = True

    @property
    def integrator(self) -> Integrator | None:
        return self._integrator

    def set_integrator(self, integrator: Integrator) -> None:
        """
        Replace the integrator.

        Raises:
            ValueError: If the integrator's timestep differs from params.dt.
        """
        if not math.isclose(integrator.dt, self._params.dt, rel_tol=1e-12):
            raise ValueError(
                f"integrator timestep {integrator.dt} does not match "
                f"params.dt {self._params.dt}"
            )
        self._integrator = integrator

    @property
    def thermostat(self) -> Thermostat | None:
        return self._thermostat

    def set_thermostat(self, thermostat: Thermostat | None) -> None:
        self._thermostat = thermostat

    def set_step_callback(self, callback: StepCallback | None) -> None:
        """Register a function called with this model after every step."""
        self._step_callback = callback

    # ------------------------------------------------------------------
    # Observables
    # ------------------------------------------------------------------

    @property
    def kinetic_energy(self) -> float:
        return self._system.kinetic_energy

    @property
    def potential_energy(self) -> float:
        """Return potential energy from the last force evaluation [J]."""
        return self._last_potential_energy

    @property
    def total_energy(self) -> float:
        return self.kinetic_energy + self.potential_energy

    @property
    def temperature(self) -> float:
        return self._system.temperature

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def compute_forces(self) -> float:
        """
        Wrap positions into the lattice and recompute forces.

        Returns:
            Potential energy [J].
        """
        system = self._system
        if self._lattice is not None:
            system.apply_pbc(self._lattice)
        if self._force_field is None:
            system.clear_forces()
            self._last_potential_energy = 0.0
        else:
            self._last_potential_energy = self._force_field.compute_forces(
                system, self._lattice
            )
        self._forces_stale = False
        self._force_count = len(system)
        return self._last_potential_energy

    def _update_forces(self, system: ParticleSystem) -> None:
        self.compute_forces()

    def initialize(self) -> None:
        """Zero the centre of mass velocity and compute initial forces."""
        self._initialized = True
        if self._system.empty:
            return
        self._system.zero_com_velocity()
        self.compute_forces()

    @property
    def initialized(self) -> bool:
        return self._initialized

    def step(self) -> bool:
        if not self._valid or self.finished:
            return False
        if not self._initialized:
            self.initialize()
        elif self._forces_stale or self._force_count != len(self._system):
            self.compute_forces()

        params = self._params
        self._integrator.integrate(self._system, self._update_forces)
        if self._thermostat is not None:
            self._thermostat.apply(self._system, params.dt)

        self._time += params.dt
        self._step_count += 1

        if not math.isfinite(self._time):
            return self._invalidate("Time value became non-finite.")
        if not self._system.is_finite():
            return self._invalidate("Particle state became non-finite.")

        keep_going = True
        if params.end_time > 0.0 and self._time >= params.end_time - 0.5 * params.dt:
            self._time = params.end_time
            keep_going = False

        if self._step_callback is not None:
            self._step_callback(self)
        return keep_going

    def _invalidate(self, message: str) -> bool:
        if not self._error:
            self._error = message
        self._valid = False
        return False

    def run(self) -> None:
        if not self._initialized:
            self.initialize()
        super().run()

    @property
    def finished(self) -> bool:
        if not self._valid:
            return True
        if self._step_count >= self._params.max_steps:
            return True
        end_time = self._params.end_time
        return end_time > 0.0 and self._time >= end_time

    @property
    def time(self) -> float:
        return self._time

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def is_valid(self) -> bool:
        return self._valid

    @property
    def error_message(self) -> str:
        return self._error
