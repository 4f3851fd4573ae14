"""
Built-in plotting utilities for simulation results.

Example:
    >>> from simcore import simulate, plotting
    >>> result = simulate.argon_gas(n_steps=300)
    >>> plotting.energy(result)
    >>> plotting.save("argon.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .simulate import SimulationResult

# Try to import matplotlib, but don't fail if not available
try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None

logger = logging.getLogger(__name__)


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install simcore[plot]"
        )


def energy(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 6),
) -> None:
    """
    Plot energy time series.

    Shows kinetic, potential, and total energy vs time, and the relative
    drift of the total energy.

    Args:
        result: SimulationResult from an MD run.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, axes = plt.subplots(1, 2, figsize=figsize)
    times_ps = result.time * 1e12

    ax = axes[0]
    ax.plot(times_ps, result.kinetic_energy, "b-", label="Kinetic", alpha=0.7, lw=0.8)
    ax.plot(
        times_ps, result.potential_energy, "r-", label="Potential", alpha=0.7, lw=0.8
    )
    ax.plot(times_ps, result.total_energy, "k-", label="Total", lw=1.5)
    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Energy (J)")
    ax.set_title("Energy vs Time")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    if len(result.total_energy) > 0:
        e0 = result.total_energy[0]
        rel_error = (
            (result.total_energy - e0) / abs(e0) * 100
            if e0 != 0
            else result.total_energy * 0
        )
        ax.plot(times_ps, rel_error, "k-", lw=1)
        ax.axhline(y=0, color="r", linestyle="--", alpha=0.5)
    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Relative Energy Error (%)")
    ax.set_title(f"Energy Conservation (fluct: {result.energy_fluctuation:.2e})")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def temperature(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
) -> None:
    """
    Plot temperature time series with its mean and spread.

    Args:
        result: SimulationResult from an MD run.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    times_ps = result.time * 1e12
    spread = np.std(result.temperature)

    ax.plot(times_ps, result.temperature, "b-", alpha=0.7, lw=0.5)
    ax.axhline(
        y=result.mean_temperature,
        color="r",
        linestyle="--",
        lw=2,
        label=f"Mean T = {result.mean_temperature:.1f} K",
    )
    ax.fill_between(
        times_ps,
        result.mean_temperature - spread,
        result.mean_temperature + spread,
        alpha=0.2,
        color="r",
        label=f"±1σ = {spread:.1f} K",
    )

    ax.set_xlabel("Time (ps)")
    ax.set_ylabel("Temperature (K)")
    ax.set_title("Temperature vs Time")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def heat_profile(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (8, 4),
) -> None:
    """
    Plot a 1D temperature profile along the rod.

    Args:
        result: SimulationResult from simulate.heat_rod().
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    profile = result.temperature_field
    if profile.ndim != 1 or len(profile) == 0:
        raise ValueError("heat_profile needs a 1D temperature field")

    x_mm = np.arange(len(profile)) * result.dx * 1e3

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(x_mm, profile, "r-", lw=1.5)
    ax.set_xlabel("Position (mm)")
    ax.set_ylabel("Temperature (K)")
    ax.set_title(f"Temperature Profile at t = {result.final_time:.3g} s")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()


def heat_map(
    result: SimulationResult,
    vmin: float | None = None,
    vmax: float | None = None,
    show: bool = True,
    figsize: tuple[float, float] = (7, 6),
) -> None:
    """
    Plot a 2D temperature field as an image.

    Pass vmin/vmax (e.g. the model's T_cold and T_hot) to keep the colour
    scale fixed across frames.

    Args:
        result: SimulationResult from simulate.heat_plate().
        vmin: Lower colour bound [K].
        vmax: Upper colour bound [K].
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
    """
    _check_matplotlib()

    field = result.temperature_field
    if field.ndim != 2:
        raise ValueError("heat_map needs a 2D temperature field")

    ny, nx = field.shape
    extent = (0.0, nx * result.dx * 1e3, 0.0, ny * result.dx * 1e3)

    fig, ax = plt.subplots(figsize=figsize)
    image = ax.imshow(
        field, origin="lower", extent=extent, cmap="inferno", vmin=vmin, vmax=vmax
    )
    fig.colorbar(image, ax=ax, label="Temperature (K)")
    ax.set_xlabel("x (mm)")
    ax.set_ylabel("y (mm)")
    ax.set_title(f"Temperature Field at t = {result.final_time:.3g} s")

    plt.tight_layout()
    if show:
        plt.show()


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save the current figure to a file.

    Args:
        filename: Output filename (e.g., "plot.png", "plot.pdf").
        dpi: Resolution in dots per inch.
    """
    _check_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")
    logger.info("Saved plot to %s", filename)


def show() -> None:
    """Display all pending plots."""
    _check_matplotlib()
    plt.show()
