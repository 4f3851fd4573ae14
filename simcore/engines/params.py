"""Molecular dynamics run parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class SimMode(Enum):
    """Physics model driven by a Simulation."""

    MD = "md"
    HEAT_DIFFUSION = "heat_diffusion"
    HEAT_DIFFUSION_2D = "heat_diffusion_2d"


@dataclass
class SimulationParams:
    """
    Parameters for a molecular dynamics run (SI units).

    Attributes:
        dt: Timestep [s].
        dx: Grid spacing [m]; carried for front ends, unused by MD.
        end_time: End time [s]; 0 runs until max_steps.
        max_steps: Maximum number of steps.
        temperature: Target temperature [K].
        cutoff: Neighbor list cutoff [m].
        use_neighbor_list: Use a Verlet list instead of brute-force pairs.
        neighbor_skin: Neighbor list skin [m].
    """

    dt: float = 1e-15
    dx: float = 1e-9
    end_time: float = 0.0
    max_steps: int = 10_000_000
    temperature: float = 300.0
    cutoff: float = 1.0e-9
    use_neighbor_list: bool = True
    neighbor_skin: float = 0.2e-9

    def validate(self) -> str | None:
        """
        Check parameters.

        Returns:
            Error message, or None if the parameters are usable.
        """
        if not math.isfinite(self.dt) or self.dt <= 0.0:
            return "Time step 'dt' must be positive and finite."
        if not math.isfinite(self.end_time) or self.end_time < 0.0:
            return "End time must be non-negative and finite."
        if self.max_steps <= 0:
            return "Maximum steps must be greater than 0."
        if not math.isfinite(self.temperature) or self.temperature < 0.0:
            return "Temperature must be non-negative and finite."
        if not math.isfinite(self.cutoff) or self.cutoff <= 0.0:
            return "Force cutoff must be positive and finite."
        if not math.isfinite(self.neighbor_skin) or self.neighbor_skin < 0.0:
            return "Neighbor skin must be non-negative and finite."
        if self.end_time > 0.0 and self.dt > self.end_time:
            return "Time step cannot be greater than end time."
        return None
