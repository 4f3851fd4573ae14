#!/usr/bin/env python
"""
Example: 2D heat diffusion driven step by step.

This script demonstrates how to:
1. Build a Simulation from HeatDiffusion2DParams
2. Check the explicit stability limit before running
3. Step the model and sample the field
4. Plot the final field on a fixed colour scale (needs matplotlib)

Usage:
    python examples/run_heat_diffusion.py
"""

import numpy as np

from simcore import HeatDiffusion2DParams, Simulation, plotting
from simcore.simulate import SimulationResult


def main():
    params = HeatDiffusion2DParams(nx=60, ny=60, max_steps=1500)
    limit = params.stability_limit()
    print(f"dt = {params.dt:g} s, stability limit = {limit:g} s")

    sim = Simulation(params)
    if not sim.is_valid:
        print(f"Error: {sim.error_message}")
        return

    model = sim.heat_2d_model
    centre = (params.ny // 2, params.nx // 2)
    print(f"{'step':>6} {'time (s)':>10} {'centre (K)':>12} {'mean (K)':>10}")
    while sim.step():
        if sim.step_count % 250 == 0:
            T = model.temperature
            print(
                f"{sim.step_count:6d} {sim.time:10.3f} "
                f"{T[centre]:12.2f} {np.mean(T):10.2f}"
            )

    result = SimulationResult(
        temperature_field=model.temperature.copy(),
        dx=params.dx,
        n_steps=sim.step_count,
        timestep=params.dt,
        final_time=sim.time,
    )
    if plotting.HAS_MATPLOTLIB:
        plotting.heat_map(result, vmin=model.T_cold, vmax=model.T_hot)
    else:
        print("matplotlib not installed; skipping plot")


if __name__ == "__main__":
    main()
