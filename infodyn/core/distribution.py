"""
Empirical Distribution
======================

A frequency histogram over a fixed support of integer events.

Counts are exact unsigned integers. The total number of observations is
maintained incrementally by every mutation, never recomputed on query:

    total == sum(histogram)     (always)

A distribution is valid iff it has a non-empty support and at least one
observation. Probabilities of an invalid distribution are 0, never 0/0.

Out-of-range events are tolerated: get returns 0, set and tick return 0
and leave the histogram untouched. The module-level helpers extend the
same tolerance to a missing (None) distribution.

Usage:
    from infodyn.core.distribution import Distribution

    d = Distribution.create(4)
    d.tick(0); d.tick(0); d.tick(3)
    d.probability(0)     # 0.666...
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Union

import numpy as np

from infodyn.errors import ErrorCode, InformError


logger = logging.getLogger(__name__)

_COUNT_DTYPE = np.uint64


class Distribution:
    """
    Histogram of non-negative integer counts.

    Prefer the factories Distribution.create and Distribution.from_counts,
    which return None instead of raising on a zero-size support or an
    allocation failure.
    """

    __slots__ = ("_histogram", "_total")

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"support size must be positive, got {size}")
        self._histogram = np.zeros(int(size), dtype=_COUNT_DTYPE)
        self._total = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, size: int) -> Optional["Distribution"]:
        """
        Allocate an empty distribution.

        Args:
            size: Support size

        Returns:
            New distribution, or None if size is zero or allocation fails
        """
        if size is None or size <= 0:
            return None
        try:
            return cls(int(size))
        except (MemoryError, ValueError) as e:
            logger.warning(f"Could not allocate distribution of size {size}: {e}")
            return None

    @classmethod
    def from_counts(cls, counts: Sequence[int]) -> Optional["Distribution"]:
        """
        Build a distribution from an initial histogram.

        Args:
            counts: Non-negative count per event

        Returns:
            New distribution with total = sum(counts), or None if counts is
            empty or contains a negative entry
        """
        arr = np.asarray(counts)
        if arr.ndim != 1 or arr.size == 0:
            return None
        if np.any(arr < 0):
            logger.warning("Refusing to build a distribution from negative counts")
            return None

        dist = cls.create(arr.size)
        if dist is None:
            return None
        dist._histogram[:] = arr.astype(_COUNT_DTYPE)
        dist._total = int(dist._histogram.sum(dtype=_COUNT_DTYPE))
        return dist

    # ------------------------------------------------------------------
    # Shape and validity
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Number of events in the support."""
        return int(self._histogram.shape[0])

    @property
    def total(self) -> int:
        """Total number of observations."""
        return self._total

    @property
    def histogram(self) -> np.ndarray:
        """Copy of the per-event counts."""
        return self._histogram.copy()

    def is_valid(self) -> bool:
        return self.size > 0 and self._total > 0

    def __len__(self) -> int:
        return self.size

    def __eq__(self, other) -> bool:
        if not isinstance(other, Distribution):
            return NotImplemented
        return (self._total == other._total
                and np.array_equal(self._histogram, other._histogram))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Distribution(size={self.size}, total={self._total})"

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    def _in_support(self, event: int) -> bool:
        return 0 <= event < self.size

    def get(self, event: int) -> int:
        """Number of observations of event (0 if out of range)."""
        if not self._in_support(event):
            return 0
        return int(self._histogram[event])

    def set(self, event: int, count: int) -> int:
        """
        Overwrite the count of an event.

        The total is adjusted by the difference between the old and new
        count. Counts are truncated to integers. Out-of-range events and
        negative counts are ignored.

        Returns:
            The new count, or 0 if nothing was set
        """
        count = int(count)
        if not self._in_support(event) or count < 0:
            return 0
        old = int(self._histogram[event])
        self._histogram[event] = count
        self._total += int(count) - old
        return int(count)

    def tick(self, event: int) -> int:
        """
        Record one observation of event.

        Returns:
            The event's new count, or 0 if event is out of range
        """
        if not self._in_support(event):
            return 0
        self._histogram[event] += 1
        self._total += 1
        return int(self._histogram[event])

    increment = tick

    # ------------------------------------------------------------------
    # Probabilities
    # ------------------------------------------------------------------

    def probability(self, event: int) -> float:
        """Empirical probability of event; 0 if unobserved, empty or out of range."""
        if self._total == 0 or not self._in_support(event):
            return 0.0
        return float(self._histogram[event]) / self._total

    def probabilities(self) -> np.ndarray:
        """
        Empirical probability of every event.

        Returns zeros for a distribution with no observations.
        """
        if self._total == 0:
            return np.zeros(self.size, dtype=np.float64)
        return self._histogram.astype(np.float64) / self._total

    def dump(self, out: Optional[np.ndarray]) -> ErrorCode:
        """
        Write event probabilities into a caller-supplied buffer.

        Args:
            out: Float array with exactly one slot per event

        Returns:
            SUCCESS, or
            INVALID_DISTRIBUTION if there are no observations,
            INVALID_POINTER if out is None,
            INVALID_ARGUMENT if out has the wrong length
        """
        if self.size == 0 or self._total == 0:
            return ErrorCode.INVALID_DISTRIBUTION
        if out is None:
            return ErrorCode.INVALID_POINTER
        if len(out) != self.size:
            return ErrorCode.INVALID_ARGUMENT
        out[:] = self.probabilities()
        return ErrorCode.SUCCESS

    # ------------------------------------------------------------------
    # Support changes
    # ------------------------------------------------------------------

    def resize(self, size: int) -> Optional["Distribution"]:
        """
        Grow or shrink the support in place.

        Shrinking drops the events beyond the new boundary and recomputes
        the total from the retained counts. Growing zero-fills the new
        events. A size of zero is a no-op.

        Returns:
            self, or None if allocation failed (self is left unchanged)
        """
        if size is None or size <= 0 or size == self.size:
            return self
        try:
            histogram = np.zeros(int(size), dtype=_COUNT_DTYPE)
        except (MemoryError, ValueError) as e:
            logger.warning(f"Could not resize distribution to {size}: {e}")
            return None

        if size < self.size:
            histogram[:] = self._histogram[:size]
            self._total = int(histogram.sum(dtype=_COUNT_DTYPE))
        else:
            histogram[:self.size] = self._histogram
        self._histogram = histogram
        return self

    def copy(self) -> "Distribution":
        """Deep copy of the histogram and total."""
        return copy(self, None)

    def release(self):
        """Drop the histogram. The distribution is left empty and invalid."""
        self._histogram = np.zeros(0, dtype=_COUNT_DTYPE)
        self._total = 0


# ----------------------------------------------------------------------
# None-tolerant helpers
# ----------------------------------------------------------------------

def resize(dist: Optional[Distribution], size: int) -> Optional[Distribution]:
    """
    Resize dist, allocating a new distribution if dist is None.

    Returns:
        The resized distribution, dist unchanged if size is zero, or None
        if allocation failed
    """
    if size is None or size <= 0:
        return dist
    if dist is None:
        return Distribution.create(size)
    return dist.resize(size)


def copy(src: Optional[Distribution],
         dest: Optional[Distribution] = None) -> Optional[Distribution]:
    """
    Copy src into dest, resizing or allocating dest as needed.

    Copying a distribution onto itself is a no-op.

    Returns:
        dest (or the newly allocated distribution), or None if src is None
        or allocation failed
    """
    if src is None:
        return None
    if dest is src:
        return dest
    if dest is None or dest.size != src.size:
        dest = resize(dest, src.size)
        if dest is None:
            return None
    dest._histogram[:] = src._histogram
    dest._total = src._total
    return dest


def dup(dist: Optional[Distribution]) -> Optional[Distribution]:
    """Fresh deep copy of dist, or None."""
    if dist is None:
        return None
    return copy(dist, Distribution.create(dist.size))


def count(dist: Optional[Distribution], event: int) -> int:
    return 0 if dist is None else dist.get(event)


def set_count(dist: Optional[Distribution], event: int, value: int) -> int:
    return 0 if dist is None else dist.set(event, value)


def tick(dist: Optional[Distribution], event: int) -> int:
    return 0 if dist is None else dist.tick(event)


def probability(dist: Optional[Distribution], event: int) -> float:
    return 0.0 if dist is None else dist.probability(event)


def is_valid(dist: Optional[Distribution]) -> bool:
    return dist is not None and dist.is_valid()


def support_size(dist: Optional[Distribution]) -> int:
    return 0 if dist is None else dist.size


def total(dist: Optional[Distribution]) -> int:
    return 0 if dist is None else dist.total


def dump(dist: Optional[Distribution], out: Optional[np.ndarray]) -> ErrorCode:
    """Distribution.dump that also accepts a missing distribution."""
    if dist is None:
        return ErrorCode.INVALID_DISTRIBUTION
    return dist.dump(out)


@contextmanager
def acquire(size: int) -> Iterator[Distribution]:
    """
    Scoped accumulator.

    Yields an empty distribution and releases it when the block exits,
    including on error.

    Raises:
        InformError(NO_MEMORY) if the distribution cannot be allocated
    """
    dist = Distribution.create(size)
    if dist is None:
        raise InformError(ErrorCode.NO_MEMORY, f"support size {size}")
    try:
        yield dist
    finally:
        dist.release()
