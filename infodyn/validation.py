"""
Time Series Validation
======================

Checks estimator inputs before any accumulator is allocated.

PRINCIPLE: a rejected input produces an Undefined carrying an ErrorCode,
never an exception and never a silent zero.

Usage:
    from infodyn.validation import check_ensemble

    check = check_ensemble(series, num_realizations=3, steps=100, base=2, history_length=2)
    if not check.valid:
        return check.undefined
    for realization in check.data:
        ...
"""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from infodyn.errors import ErrorCode
from infodyn.result import Undefined, undefined_from


@dataclass
class SeriesCheck:
    """Outcome of validating an ensemble of time series."""

    valid: bool = True
    error: ErrorCode = ErrorCode.SUCCESS
    detail: str = ""

    # (num_realizations, steps) integer view of the input when valid
    data: Optional[np.ndarray] = None

    @property
    def undefined(self) -> Optional[Undefined]:
        if self.valid:
            return None
        return undefined_from(self.error, self.detail)

    def summary(self) -> str:
        if self.valid:
            n, m = self.data.shape
            return f"{n} realization(s) x {m} step(s)"
        return f"{self.error.name}: {self.error.message} ({self.detail})"


def _reject(code: ErrorCode, detail: str = "") -> SeriesCheck:
    return SeriesCheck(valid=False, error=code, detail=detail)


def as_symbols(series: Any) -> Optional[np.ndarray]:
    """
    Integer view of series.

    Accepts integer and boolean arrays, and float arrays whose values are
    all integral. Returns None for anything else.
    """
    arr = np.asarray(series)
    if arr.dtype == bool or np.issubdtype(arr.dtype, np.integer):
        return arr.astype(np.int64, copy=False)
    if np.issubdtype(arr.dtype, np.floating):
        if arr.size and not (np.all(np.isfinite(arr)) and np.all(arr == np.floor(arr))):
            return None
        return arr.astype(np.int64)
    if arr.size == 0:
        return arr.astype(np.int64)
    return None


def check_ensemble(
    series: Any,
    num_realizations: int,
    steps: int,
    base: int,
    history_length: int,
) -> SeriesCheck:
    """
    Validate the dimensions of an ensemble.

    Args:
        series: Flat or (num_realizations, steps) array-like of symbols
        num_realizations: Number of independent realizations
        steps: Time steps per realization
        base: Alphabet size
        history_length: History length k

    Returns:
        SeriesCheck; when valid, data holds a (num_realizations, steps)
        int64 array
    """
    if series is None:
        return _reject(ErrorCode.NO_TIMESERIES)
    if num_realizations is None or num_realizations < 1:
        return _reject(ErrorCode.NO_REALIZATIONS, f"num_realizations={num_realizations}")
    if steps is None or steps <= 1:
        return _reject(ErrorCode.SHORT_SERIES, f"steps={steps}")
    if history_length is None or history_length < 1:
        return _reject(ErrorCode.ZERO_HISTORY, f"history_length={history_length}")
    if steps <= history_length:
        return _reject(
            ErrorCode.LONG_HISTORY,
            f"history_length={history_length} with only {steps} steps",
        )
    if base is None or not float(base).is_integer() or base < 2:
        return _reject(ErrorCode.INVALID_BASE, f"base={base}")

    data = as_symbols(series)
    if data is None:
        return _reject(ErrorCode.INVALID_ARGUMENT, "series must contain integer symbols")
    if data.size != num_realizations * steps:
        return _reject(
            ErrorCode.INVALID_ARGUMENT,
            f"series has {data.size} symbols, expected "
            f"{num_realizations} x {steps} = {num_realizations * steps}",
        )

    return SeriesCheck(data=data.reshape(num_realizations, steps))
