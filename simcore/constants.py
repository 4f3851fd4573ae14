"""Physical constants shared across the engine (SI units)."""

# Boltzmann constant [J/K]
K_BOLTZMANN = 1.380649e-23

# Bytes per particle slot: position, velocity, force (3 each) and mass
PARTICLE_SLOT_BYTES = 10 * 8

# Default memory ceilings
DEFAULT_PARTICLE_BUDGET = 1024 * 1024 * 1024
DEFAULT_FIELD_BUDGET = 256 * 1024 * 1024
