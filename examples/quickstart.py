#!/usr/bin/env python
"""
Quick start example - the simplest way to run a simulation.

This demonstrates the high-level API for users who just want results
without dealing with the internal details.

Usage:
    python examples/quickstart.py
"""

from simcore import HeatIC2D, simulate
from simcore.logging_config import setup_logging


def main():
    setup_logging()

    print("=" * 60)
    print("simcore Quick Start")
    print("=" * 60)

    # 1. Argon gas with a thermostat
    print("\n1. Argon gas (small box):")
    print("-" * 40)
    result = simulate.argon_gas(n_side=6, box_length=4e-9, n_steps=200)
    print(f"   Mean temperature: {result.mean_temperature:.1f} K")

    # 2. Isolated cluster at constant energy
    print("\n2. LJ cluster (NVE):")
    print("-" * 40)
    result = simulate.lj_cluster(n_steps=1000)
    print(f"   Energy conserved: {result.energy_fluctuation < 1e-3}")

    # 3. 1D rod cooling from both ends
    print("\n3. Heat rod:")
    print("-" * 40)
    result = simulate.heat_rod()
    print(f"   Peak temperature: {result.temperature_field.max():.1f} K")

    # 4. 2D plate with a hot centre, then uniformly hot
    print("\n4. Heat plate:")
    print("-" * 40)
    for ic in HeatIC2D:
        result = simulate.heat_plate(nx=40, ny=40, ic=ic, n_steps=300)
        print(f"   {ic.value}: centre {result.temperature_field[20, 20]:.1f} K")

    print("\n" + "=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
