"""
Measurement Results
===================

Every information measure returns a Measurement:

    Defined(value)             a real-valued estimate
    Undefined(reason, error)   no value could be produced

Undefined with error=None means the quantity is mathematically undefined
(e.g. the entropy of a distribution with no observations). Undefined with
an ErrorCode means the call itself was rejected.

Arithmetic between measurements propagates: the first Undefined operand
poisons the combination. float() of an Undefined is nan so results can be
dropped into numpy arrays.

Usage:
    from infodyn.result import Defined, Undefined

    h = shannon_entropy(dist)
    if h.is_defined:
        print(float(h))
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Optional, Union

from infodyn.errors import ErrorCode


class Measurement:
    """Base class for Defined and Undefined."""

    __slots__ = ()

    @property
    def is_defined(self) -> bool:
        return isinstance(self, Defined)

    def value_or(self, default: float) -> float:
        """Return the value, or default if undefined."""
        return self.value if isinstance(self, Defined) else default

    def isclose(self, other: Union["Measurement", float], rel_tol: float = 1e-9,
                abs_tol: float = 1e-12) -> bool:
        """
        Compare two measurements.

        Two Undefined results are never close, matching nan semantics.
        """
        if not self.is_defined:
            return False
        other = _coerce(other)
        if not other.is_defined:
            return False
        return math.isclose(self.value, other.value, rel_tol=rel_tol, abs_tol=abs_tol)

    def _combine(self, other, op):
        other = _coerce(other)
        if isinstance(self, Undefined):
            return self
        if isinstance(other, Undefined):
            return other
        return Defined(op(self.value, other.value))

    def __add__(self, other):
        return self._combine(other, lambda a, b: a + b)

    def __radd__(self, other):
        return _coerce(other)._combine(self, lambda a, b: a + b)

    def __sub__(self, other):
        return self._combine(other, lambda a, b: a - b)

    def __rsub__(self, other):
        return _coerce(other)._combine(self, lambda a, b: a - b)

    def __neg__(self):
        if isinstance(self, Undefined):
            return self
        return Defined(-self.value)


@dataclass(frozen=True)
class Defined(Measurement):
    """A real-valued estimate."""
    value: float

    def __float__(self) -> float:
        return float(self.value)

    def __repr__(self) -> str:
        return f"Defined({self.value!r})"


@dataclass(frozen=True)
class Undefined(Measurement):
    """
    No value could be produced.

    Attributes:
        reason: Human-readable explanation
        error: Status code if the call was rejected, None if the quantity
               is simply undefined for valid input
    """
    reason: str
    error: Optional[ErrorCode] = None

    @property
    def value(self) -> float:
        return math.nan

    @property
    def failed(self) -> bool:
        """True if the call was rejected rather than merely undefined."""
        return ErrorCode.failed(self.error)

    def __float__(self) -> float:
        return math.nan

    def __repr__(self) -> str:
        if self.error is None:
            return f"Undefined({self.reason!r})"
        return f"Undefined({self.reason!r}, error={self.error.name})"


def _coerce(x: Union[Measurement, float]) -> Measurement:
    if isinstance(x, Measurement):
        return x
    if isinstance(x, Real):
        x = float(x)
        if math.isnan(x):
            return Undefined("nan operand")
        return Defined(x)
    raise TypeError(f"cannot combine Measurement with {type(x).__name__}")


def undefined_from(code: ErrorCode, detail: Optional[str] = None) -> Undefined:
    """Build an Undefined carrying an operational error code."""
    reason = code.message if not detail else f"{code.message}: {detail}"
    return Undefined(reason, error=code)
