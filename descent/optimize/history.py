"""Bounded FIFO storage for L-BFGS curvature pairs."""

from __future__ import annotations

from typing import Iterator, NamedTuple, Optional

import numpy as np


class CurvaturePair(NamedTuple):
    """One step ``s``, its gradient change ``y`` and ``rho = 1 / (y . s)``."""

    s: np.ndarray
    y: np.ndarray
    rho: float


class CurvatureHistory:
    """Ring buffer holding at most ``capacity`` curvature pairs.

    Pairs live in preallocated ``(capacity, dim)`` arrays addressed through a
    head index, so appending to a full buffer overwrites the oldest pair in
    O(1). Indexing and iteration run from oldest (index 0) to newest and
    return copies, so a pair stays valid after its slot is overwritten.
    """

    def __init__(self, capacity: int, dim: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}.")
        if dim < 1:
            raise ValueError(f"dim must be >= 1, got {dim}.")
        self._capacity = int(capacity)
        self._dim = int(dim)
        self._s = np.empty((self._capacity, self._dim))
        self._y = np.empty((self._capacity, self._dim))
        self._rho = np.empty(self._capacity)
        # slot of the oldest stored pair
        self._head = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def dim(self) -> int:
        return self._dim

    def __len__(self) -> int:
        return self._size

    def _slot(self, index: int) -> int:
        return (self._head + index) % self._capacity

    def append(self, s: np.ndarray, y: np.ndarray, rho: Optional[float] = None) -> None:
        """Store ``(s, y, rho)``, evicting the oldest pair when full.

        ``rho`` defaults to ``1 / (y . s)`` computed without any guard; a
        zero curvature yields ``inf`` under NumPy's floating-point rules.
        """
        s = np.asarray(s, dtype=float)
        y = np.asarray(y, dtype=float)
        if s.shape != (self._dim,) or y.shape != (self._dim,):
            raise ValueError(
                f"Expected vectors of shape ({self._dim},), got {s.shape} and {y.shape}."
            )
        if rho is None:
            with np.errstate(divide="ignore"):
                rho = float(np.float64(1.0) / np.dot(y, s))
        if self._size < self._capacity:
            slot = self._slot(self._size)
            self._size += 1
        else:
            slot = self._head
            self._head = (self._head + 1) % self._capacity
        self._s[slot] = s
        self._y[slot] = y
        self._rho[slot] = rho

    def __getitem__(self, index: int) -> CurvaturePair:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError("curvature history index out of range")
        slot = self._slot(index)
        return CurvaturePair(
            self._s[slot].copy(), self._y[slot].copy(), float(self._rho[slot])
        )

    def __iter__(self) -> Iterator[CurvaturePair]:
        for i in range(self._size):
            yield self[i]

    def __reversed__(self) -> Iterator[CurvaturePair]:
        for i in range(self._size - 1, -1, -1):
            yield self[i]

    def newest(self) -> CurvaturePair:
        if self._size == 0:
            raise IndexError("curvature history is empty")
        return self[self._size - 1]

    def clear(self) -> None:
        self._head = 0
        self._size = 0

    def __repr__(self) -> str:
        return (
            f"CurvatureHistory(capacity={self._capacity}, dim={self._dim}, "
            f"size={self._size})"
        )


__all__ = ["CurvatureHistory", "CurvaturePair"]
