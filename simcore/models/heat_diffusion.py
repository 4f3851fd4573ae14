"""
1D explicit heat diffusion on a rod.

Solves dT/dt = alpha * d^2T/dx^2 with forward Euler in time and a
three-point Laplacian. Both ends are Dirichlet cells that never evolve.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..alloc import BoundedAllocator
from ..constants import DEFAULT_FIELD_BUDGET
from .base import SimModel


@dataclass
class HeatDiffusionParams:
    """
    Parameters for 1D heat diffusion (SI units).

    Attributes:
        alpha: Thermal diffusivity [m^2/s].
        dx: Grid spacing [m].
        dt: Timestep [s].
        end_time: End time [s]; 0 runs until max_steps.
        max_steps: Maximum number of steps.
        n_cells: Number of grid cells, including the two boundary cells.
    """

    alpha: float = 1e-5
    dx: float = 1e-3
    dt: float = 1e-6
    end_time: float = 1e-3
    max_steps: int = 1_000_000
    n_cells: int = 100

    def stability_limit(self) -> float:
        """Return the largest stable timestep dx^2 / (2 * alpha)."""
        if self.alpha <= 0.0 or self.dx <= 0.0:
            return 0.0
        return self.dx * self.dx / (2.0 * self.alpha)

    def validate(self) -> str | None:
        """
        Check parameters.

        Returns:
            Error message, or None if the parameters are usable.
        """
        if not math.isfinite(self.alpha) or self.alpha <= 0.0:
            return "Thermal diffusivity alpha must be positive and finite."
        if not math.isfinite(self.dx) or self.dx <= 0.0:
            return "Grid spacing dx must be positive and finite."
        if not math.isfinite(self.dt) or self.dt <= 0.0:
            return "Time step dt must be positive and finite."
        if not math.isfinite(self.end_time) or self.end_time < 0.0:
            return "End time must be non-negative and finite."
        if self.max_steps <= 0:
            return "Maximum steps must be greater than 0."
        if self.n_cells < 2:
            return "Number of cells must be at least 2."
        limit = self.stability_limit()
        if not math.isfinite(limit) or self.dt > limit:
            return "Time step dt exceeds stability limit (dt <= dx^2/(2*alpha))."
        return None


class HeatDiffusionModel(SimModel):
    """
    1D explicit heat diffusion model.

    The rod starts with every interior cell at INTERIOR_TEMPERATURE and both
    ends held at BOUNDARY_TEMPERATURE. Each step applies

        T_new[i] = T[i] + r * (T[i-1] - 2*T[i] + T[i+1]),  r = alpha*dt/dx^2

    to the interior and copies the boundary cells unchanged.

    Example:
        model = HeatDiffusionModel(HeatDiffusionParams(n_cells=50))
        model.run()
        profile = model.temperature
    """

    INTERIOR_TEMPERATURE = 300.0
    BOUNDARY_TEMPERATURE = 0.0

    def __init__(
        self, params: HeatDiffusionParams, max_bytes: int = DEFAULT_FIELD_BUDGET
    ) -> None:
        """
        Initialize 1D heat diffusion model.

        Args:
            params: Model parameters; validated immediately.
            max_bytes: Byte ceiling for the temperature buffers.

        Raises:
            MemoryBudgetExceeded: If the grid does not fit in max_bytes.
        """
        self._params = params
        self._allocator = BoundedAllocator(max_bytes)
        self._time = 0.0
        self._step_count = 0
        self._error = ""
        self._valid = False
        self._T: NDArray[np.floating] = np.empty(0, dtype=np.float64)
        self._T_next: NDArray[np.floating] = np.empty(0, dtype=np.float64)

        error = params.validate()
        if error is not None:
            self._error = error
            return

        n = params.n_cells
        self._T = self._allocator.allocate((n,))
        self._T_next = self._allocator.allocate((n,))
        self._initialize()
        self._valid = True

    def _initialize(self) -> None:
        self._T[1:-1] = self.INTERIOR_TEMPERATURE
        self._T[0] = self._T[-1] = self.BOUNDARY_TEMPERATURE
        self._T_next[...] = self._T

    @property
    def params(self) -> HeatDiffusionParams:
        return self._params

    @property
    def allocator(self) -> BoundedAllocator:
        return self._allocator

    @property
    def n_cells(self) -> int:
        """Return number of grid cells."""
        return len(self._T)

    @property
    def temperature(self) -> NDArray[np.floating]:
        """Return read-only view of the temperature field [K]."""
        view = self._T.view()
        view.flags.writeable = False
        return view

    @property
    def diffusion_number(self) -> float:
        """Return r = alpha * dt / dx^2."""
        return self._params.alpha * self._params.dt / (self._params.dx**2)

    def step(self) -> bool:
        if not self._valid or self.finished:
            return False

        T, T_next = self._T, self._T_next
        r = self.diffusion_number
        T_next[1:-1] = T[1:-1] + r * (T[:-2] - 2.0 * T[1:-1] + T[2:])
        T_next[0] = T[0]
        T_next[-1] = T[-1]
        self._T, self._T_next = T_next, T

        self._time += self._params.dt
        self._step_count += 1

        if not math.isfinite(self._time):
            return self._invalidate("Time became non-finite.")
        if not np.all(np.isfinite(self._T)):
            return self._invalidate("Temperature field became non-finite.")
        return True

    def _invalidate(self, message: str) -> bool:
        if not self._error:
            self._error = message
        self._valid = False
        return False

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
