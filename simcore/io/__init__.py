"""Configuration file I/O."""

from .config import ConfigResult, load_config, load_config_or_raise

__all__ = [
    "ConfigResult",
    "load_config",
    "load_config_or_raise",
]
