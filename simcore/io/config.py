"""
Line-oriented ``key=value`` configuration files for MD runs.

Example file::

    # argon at 1 fs
    dt = 1e-15
    end_time = 1e-12
    max_steps = 5000
    use_neighbor_list = yes
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..engines.params import SimulationParams

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes"}
_FALSE = {"0", "false", "no"}


def _parse_float(value: str) -> float:
    return float(value)


def _parse_count(value: str) -> int:
    count = int(value)
    if count < 0:
        raise ValueError(f"negative count {count}")
    return count


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


_PARSERS: dict[str, Callable[[str], Any]] = {
    "dt": _parse_float,
    "dx": _parse_float,
    "end_time": _parse_float,
    "max_steps": _parse_count,
    "temperature": _parse_float,
    "cutoff": _parse_float,
    "neighbor_skin": _parse_float,
    "use_neighbor_list": _parse_bool,
}


@dataclass
class ConfigResult:
    """
    Outcome of loading a configuration file.

    Attributes:
        ok: True when params holds a validated configuration.
        params: Loaded parameters (defaults when ok is False).
        error: Failure message (empty when ok is True).
    """

    ok: bool
    params: SimulationParams = field(default_factory=SimulationParams)
    error: str = ""

    @classmethod
    def success(cls, params: SimulationParams) -> ConfigResult:
        return cls(ok=True, params=params)

    @classmethod
    def failure(cls, message: str) -> ConfigResult:
        return cls(ok=False, error=message)


def load_config(path: str | os.PathLike[str] | None) -> ConfigResult:
    """
    Load SimulationParams from a configuration file.

    Blank lines and lines starting with ``#`` are ignored; keys and values
    are whitespace-trimmed. An empty path means "no config file" and yields
    the defaults.

    Args:
        path: Path to the file, or "" / None for defaults.

    Returns:
        ConfigResult; on failure, error names the offending line.
    """
    params = SimulationParams()
    if path is None or str(path) == "":
        return ConfigResult.success(params)

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ConfigResult.failure(f"Cannot open config file: {path}")

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            return ConfigResult.failure(f"Invalid line {line_no}: missing '='")
        key = key.strip()
        value = value.strip()
        if not key:
            return ConfigResult.failure(f"Invalid line {line_no}: empty key")

        parser = _PARSERS.get(key)
        if parser is None:
            return ConfigResult.failure(f"Line {line_no}: unknown key '{key}'")
        try:
            setattr(params, key, parser(value))
        except ValueError:
            return ConfigResult.failure(f"Line {line_no}: invalid {key} value")
        logger.debug("%s: %s = %s", path, key, value)

    error = params.validate()
    if error is not None:
        return ConfigResult.failure(f"Config validation failed: {error}")
    return ConfigResult.success(params)


def load_config_or_raise(path: str | os.PathLike[str] | None) -> SimulationParams:
    """
    Load SimulationParams, raising on failure.

    Raises:
        ValueError: With the ConfigResult error message.
    """
    result = load_config(path)
    if not result.ok:
        raise ValueError(result.error)
    return result.params
