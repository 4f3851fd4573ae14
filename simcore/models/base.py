"""Common stepping interface for simulation models."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SimModel(ABC):
    """
    Abstract base class for a model that advances in discrete steps.

    A model validates its parameters at construction. An invalid model
    reports a non-empty error_message, is always finished, and refuses to
    step. Once invalidated, a model never becomes valid again.
    """

    @abstractmethod
    def step(self) -> bool:
        """
        Advance the model by one timestep.

        Returns:
            True if a step was taken and the model can keep stepping.
        """
        ...

    @property
    @abstractmethod
    def finished(self) -> bool:
        """Return True when no further steps will be taken."""
        ...

    @property
    @abstractmethod
    def time(self) -> float:
        """Return simulated time [s]."""
        ...

    @property
    @abstractmethod
    def step_count(self) -> int:
        """Return number of completed steps."""
        ...

    @property
    @abstractmethod
    def is_valid(self) -> bool:
        ...

    @property
    @abstractmethod
    def error_message(self) -> str:
        """Return the error message (empty string when valid)."""
        ...

    def run(self) -> None:
        """Step until the model reports it cannot continue."""
        while self.step():
            pass
