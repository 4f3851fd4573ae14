"""Bounded allocator for particle and field storage."""

from __future__ import annotations

import numpy as np
from numpy.typing import DTypeLike, NDArray


class MemoryBudgetExceeded(MemoryError):
    """Raised when an allocation would exceed the allocator's byte ceiling."""

    def __init__(self, requested: int, current: int, max_bytes: int) -> None:
        self.requested = requested
        self.current = current
        self.max_bytes = max_bytes
        super().__init__(
            f"allocation of {requested} bytes exceeds budget "
            f"({current} of {max_bytes} bytes in use)"
        )


class _Budget:
    """Byte counter shared by every copy of one allocator."""

    __slots__ = ("max_bytes", "current_bytes")

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes
        self.current_bytes = 0


class BoundedAllocator:
    """
    Array allocator that enforces a hard byte ceiling.

    Every request is checked against ``current + requested <= max_bytes``
    before any memory is handed out. Exceeding the ceiling raises
    MemoryBudgetExceeded; there is no partial or degraded result. Copies
    made with copy() share the same budget, so several containers can draw
    on one limit.

    Not thread-safe.

    Attributes:
        max_bytes: Byte ceiling set at construction.
        current_bytes: Bytes currently handed out.
    """

    def __init__(self, max_bytes: int) -> None:
        """
        Initialize allocator.

        Args:
            max_bytes: Maximum number of bytes that may be outstanding.
        """
        max_bytes = int(max_bytes)
        if max_bytes < 0:
            raise ValueError(f"max_bytes must be non-negative, got {max_bytes}")
        self._budget = _Budget(max_bytes)

    @property
    def max_bytes(self) -> int:
        return self._budget.max_bytes

    @property
    def current_bytes(self) -> int:
        return self._budget.current_bytes

    @property
    def available_bytes(self) -> int:
        """Return bytes that can still be allocated."""
        return self._budget.max_bytes - self._budget.current_bytes

    def copy(self) -> BoundedAllocator:
        """Return an allocator sharing this allocator's budget."""
        other = BoundedAllocator.__new__(BoundedAllocator)
        other._budget = self._budget
        return other

    def shares_budget(self, other: BoundedAllocator) -> bool:
        """Check whether two allocators draw on the same budget."""
        return self._budget is other._budget

    def reserve_bytes(self, n_bytes: int) -> None:
        """
        Account for ``n_bytes`` without creating an array.

        Raises:
            MemoryBudgetExceeded: If the ceiling would be exceeded.
        """
        n_bytes = int(n_bytes)
        budget = self._budget
        if n_bytes < 0:
            raise ValueError(f"cannot reserve a negative byte count ({n_bytes})")
        if budget.current_bytes + n_bytes > budget.max_bytes:
            raise MemoryBudgetExceeded(
                n_bytes, budget.current_bytes, budget.max_bytes
            )
        budget.current_bytes += n_bytes

    def release_bytes(self, n_bytes: int) -> None:
        """Return ``n_bytes`` to the budget."""
        n_bytes = int(n_bytes)
        budget = self._budget
        if n_bytes < 0 or n_bytes > budget.current_bytes:
            raise ValueError(
                f"cannot release {n_bytes} bytes, only "
                f"{budget.current_bytes} are allocated"
            )
        budget.current_bytes -= n_bytes

    def allocate(
        self,
        shape: int | tuple[int, ...],
        dtype: DTypeLike = np.float64,
        fill_value: float = 0.0,
    ) -> NDArray:
        """
        Allocate a filled array, charging its size against the budget.

        Args:
            shape: Array shape.
            dtype: Array dtype.
            fill_value: Initial value of every element.

        Returns:
            New array of the requested shape.

        Raises:
            MemoryBudgetExceeded: If the ceiling would be exceeded.
            MemoryError: If the system cannot provide the memory; the
                reservation is returned to the budget.
        """
        shape = (shape,) if isinstance(shape, (int, np.integer)) else tuple(shape)
        n_bytes = int(np.prod(shape, dtype=np.int64)) * np.dtype(dtype).itemsize
        self.reserve_bytes(n_bytes)
        try:
            return np.full(shape, fill_value, dtype=dtype)
        except Exception:
            self.release_bytes(n_bytes)
            raise

    def release(self, array: NDArray) -> None:
        """Return an array previously obtained from allocate()."""
        self.release_bytes(array.nbytes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundedAllocator):
            return NotImplemented
        return self._budget is other._budget

    def __hash__(self) -> int:
        return id(self._budget)

    def __repr__(self) -> str:
        return (
            f"BoundedAllocator(max_bytes={self.max_bytes}, "
            f"current_bytes={self.current_bytes})"
        )
