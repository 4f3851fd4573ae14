"""Grid-based simulation models and the common stepping interface."""

from .base import SimModel
from .heat_diffusion import HeatDiffusionModel, HeatDiffusionParams
from .heat_diffusion_2d import HeatDiffusion2DModel, HeatDiffusion2DParams, HeatIC2D

__all__ = [
    "SimModel",
    "HeatDiffusionParams",
    "HeatDiffusionModel",
    "HeatIC2D",
    "HeatDiffusion2DParams",
    "HeatDiffusion2DModel",
]
