"""
2D explicit heat diffusion on a uniform Cartesian grid.

Solves dT/dt = alpha * (d^2T/dx^2 + d^2T/dy^2) with forward Euler in time
and the 5-point Laplacian. The field is stored as an (ny, nx) array, so
``temperature[j, i]`` is the cell in row j, column i. Every edge cell is a
Dirichlet cell held at T_boundary.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from ..alloc import BoundedAllocator
from ..constants import DEFAULT_FIELD_BUDGET
from .base import SimModel


class HeatIC2D(Enum):
    """
    Initial condition presets.

    HOT_CENTER: Gaussian hot spot at the domain centre decaying to
        T_boundary (point heat source).
    UNIFORM_HOT: Whole interior at T_hot with edges at T_boundary
        (quenching from the edges).
    """

    HOT_CENTER = "hot_center"
    UNIFORM_HOT = "uniform_hot"


@dataclass
class HeatDiffusion2DParams:
    """
    Parameters for 2D heat diffusion (SI units).

    Defaults describe a copper plate with a central hot spot.

    Attributes:
        alpha: Thermal diffusivity [m^2/s].
        dx: Grid spacing in both directions [m].
        dt: Timestep [s].
        end_time: End time [s]; 0 runs until max_steps.
        max_steps: Maximum number of steps.
        nx: Grid cells in x.
        ny: Grid cells in y.
        T_boundary: Dirichlet edge temperature [K].
        ic: Initial condition preset.
        T_hot: Hot region temperature [K].
        hot_radius_frac: Gaussian width as a fraction of the domain
            (HOT_CENTER only).
    """

    alpha: float = 1.11e-4
    dx: float = 1.25e-3
    dt: float = 3.0e-3
    end_time: float = 0.0
    max_steps: int = 10_000_000
    nx: int = 80
    ny: int = 80
    T_boundary: float = 300.0
    ic: HeatIC2D = HeatIC2D.HOT_CENTER
    T_hot: float = 1200.0
    hot_radius_frac: float = 0.12

    def stability_limit(self) -> float:
        """Return the largest stable timestep dx^2 / (4 * alpha)."""
        if self.alpha <= 0.0 or self.dx <= 0.0:
            return 0.0
        return self.dx * self.dx / (4.0 * self.alpha)

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
        if self.nx < 3:
            return "Grid dimension nx must be at least 3 (need interior cells)."
        if self.ny < 3:
            return "Grid dimension ny must be at least 3 (need interior cells)."
        if not math.isfinite(self.T_boundary) or self.T_boundary < 0.0:
            return "Boundary temperature must be non-negative and finite."
        if not math.isfinite(self.T_hot) or self.T_hot <= self.T_boundary:
            return (
                "Hot temperature must be finite and greater than boundary "
                "temperature."
            )
        if self.ic is HeatIC2D.HOT_CENTER and not (
            math.isfinite(self.hot_radius_frac) and self.hot_radius_frac > 0.0
        ):
            return "Hot radius fraction must be positive and finite."
        limit = self.stability_limit()
        if not math.isfinite(limit) or self.dt > limit:
            return (
                "Time step dt exceeds 2D stability limit: dt <= dx^2 / (4*alpha). "
                "Reduce dt or increase dx."
            )
        return None


class HeatDiffusion2DModel(SimModel):
    """
    2D explicit heat diffusion model.

    Each step updates the interior with

        T_new[j,i] = T[j,i] + r * (T[j,i-1] + T[j,i+1] + T[j-1,i] + T[j+1,i]
                                   - 4*T[j,i])

    where r = alpha*dt/dx^2, then re-forces every edge cell to T_boundary.

    Example:
        model = HeatDiffusion2DModel(HeatDiffusion2DParams(nx=40, ny=40))
        for _ in range(100):
            model.step()
        image = model.temperature  # shape (ny, nx)
    """

    def __init__(
        self, params: HeatDiffusion2DParams, max_bytes: int = DEFAULT_FIELD_BUDGET
    ) -> None:
        """
        Initialize 2D heat diffusion model.

        Args:
            params: Model parameters; validated immediately.
            max_bytes: Byte ceiling for the two temperature buffers.

        Raises:
            MemoryBudgetExceeded: If the grid does not fit in max_bytes.
        """
        self._params = params
        self._allocator = BoundedAllocator(max_bytes)
        self._time = 0.0
        self._step_count = 0
        self._error = ""
        self._valid = False
        self._T: NDArray[np.floating] = np.empty((0, 0), dtype=np.float64)
        self._T_next: NDArray[np.floating] = np.empty((0, 0), dtype=np.float64)

        error = params.validate()
        if error is not None:
            self._error = error
            return

        shape = (params.ny, params.nx)
        self._T = self._allocator.allocate(shape)
        self._T_next = self._allocator.allocate(shape)
        self._initialize()
        self._valid = True

    def _initialize(self) -> None:
        params = self._params
        if params.ic is HeatIC2D.HOT_CENTER:
            # Cell centres in fractional coordinates, origin at domain centre
            fx = (np.arange(params.nx) + 0.5) / params.nx - 0.5
            fy = (np.arange(params.ny) + 0.5) / params.ny - 0.5
            r2 = fy[:, np.newaxis] ** 2 + fx[np.newaxis, :] ** 2
            sigma = params.hot_radius_frac
            delta = params.T_hot - params.T_boundary
            self._T[...] = params.T_boundary + delta * np.exp(
                -r2 / (2.0 * sigma * sigma)
            )
        else:
            self._T[...] = params.T_hot

        self._apply_boundary(self._T)
        self._T_next[...] = self._T

    def _apply_boundary(self, field: NDArray[np.floating]) -> None:
        t_boundary = self._params.T_boundary
        field[0, :] = t_boundary
        field[-1, :] = t_boundary
        field[:, 0] = t_boundary
        field[:, -1] = t_boundary

    @property
    def params(self) -> HeatDiffusion2DParams:
        return self._params

    @property
    def allocator(self) -> BoundedAllocator:
        return self._allocator

    @property
    def nx(self) -> int:
        return self._T.shape[1]

    @property
    def ny(self) -> int:
        return self._T.shape[0]

    @property
    def T_cold(self) -> float:
        """Return lower colour bound for visualisation (T_boundary)."""
        return self._params.T_boundary

    @property
    def T_hot(self) -> float:
        """Return upper colour bound for visualisation."""
        return self._params.T_hot

    @property
    def temperature(self) -> NDArray[np.floating]:
        """Return read-only (ny, nx) view of the temperature field [K]."""
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
        center = T[1:-1, 1:-1]
        T_next[1:-1, 1:-1] = center + r * (
            T[1:-1, :-2] + T[1:-1, 2:] + T[:-2, 1:-1] + T[2:, 1:-1] - 4.0 * center
        )
        self._apply_boundary(T_next)
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
