"""
Timestep sanity checks for molecular dynamics.

The timestep must resolve the fastest motion in the system. These helpers
estimate a characteristic time from the fastest particle crossing a typical
atomic spacing (1 Angstrom) and compare dt against it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from ..system import ParticleSystem

TYPICAL_SPACING = 1e-10  # m
AT_REST_TIME = 1e-14  # s


def estimate_characteristic_time(system: ParticleSystem) -> float:
    """
    Estimate the shortest relevant timescale of the system [s].

    Returns 1.0 for an empty system and 1e-14 s when every particle is
    essentially at rest.
    """
    if system.empty:
        return 1.0

    max_speed = float(np.max(np.linalg.norm(system.velocities, axis=1)))
    if max_speed < 1e-10:
        return AT_REST_TIME
    return TYPICAL_SPACING / max_speed


def is_stable(dt: float, system: ParticleSystem) -> bool:
    """Check dt < tau / 10."""
    return dt < estimate_characteristic_time(system) / 10.0


def recommended_max_dt(system: ParticleSystem) -> float:
    """Return tau / 20."""
    return estimate_characteristic_time(system) / 20.0


def validate_dt(dt: float, system: ParticleSystem) -> str | None:
    """
    Check a timestep against the system's characteristic time.

    Returns:
        Warning message if dt looks too large, None otherwise.
    """
    max_dt = estimate_characteristic_time(system) / 10.0
    if dt > max_dt:
        return (
            f"Time step {dt:g} s may be too large; "
            f"recommended maximum is {max_dt:g} s."
        )
    return None
