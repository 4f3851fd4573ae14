"""Resource-bounded storage."""

from .bounded import BoundedAllocator, MemoryBudgetExceeded

__all__ = ["BoundedAllocator", "MemoryBudgetExceeded"]
