"""
Error Codes
===========

Status classification for operational failures.

Two channels exist in infodyn:
    - ErrorCode      The call itself failed (bad input, allocation failure).
    - Undefined      The call succeeded but the quantity has no value
                     (see infodyn.result).

Estimators never raise to the caller. They attach an ErrorCode to the
Undefined they return. InformError and EncodingError are used internally
between the encoder and the estimators.
"""

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """Operational status codes."""
    SUCCESS = 0
    FAILURE = -1
    INVALID_POINTER = 1
    INVALID_ARGUMENT = 2
    NO_MEMORY = 3
    NO_TIMESERIES = 4
    NO_REALIZATIONS = 5
    SHORT_SERIES = 6
    ZERO_HISTORY = 7
    LONG_HISTORY = 8
    INVALID_BASE = 9
    NEGATIVE_STATE = 10
    BAD_STATE = 11
    INVALID_DISTRIBUTION = 12

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @staticmethod
    def succeeded(code: Optional["ErrorCode"]) -> bool:
        """True if no code was recorded or the code is SUCCESS."""
        return code is None or code == ErrorCode.SUCCESS

    @staticmethod
    def failed(code: Optional["ErrorCode"]) -> bool:
        return not ErrorCode.succeeded(code)


_MESSAGES = {
    ErrorCode.SUCCESS: "success",
    ErrorCode.FAILURE: "generic failure",
    ErrorCode.INVALID_POINTER: "required argument is missing",
    ErrorCode.INVALID_ARGUMENT: "invalid argument",
    ErrorCode.NO_MEMORY: "allocation failed",
    ErrorCode.NO_TIMESERIES: "time series is missing",
    ErrorCode.NO_REALIZATIONS: "time series has no realizations",
    ErrorCode.SHORT_SERIES: "time series has fewer than two time steps",
    ErrorCode.ZERO_HISTORY: "history length is zero",
    ErrorCode.LONG_HISTORY: "history length is too long for the time series",
    ErrorCode.INVALID_BASE: "base must be at least 2",
    ErrorCode.NEGATIVE_STATE: "time series contains a negative state",
    ErrorCode.BAD_STATE: "time series contains a state outside the alphabet",
    ErrorCode.INVALID_DISTRIBUTION: "distribution is empty or missing",
}


class InformError(Exception):
    """Raised internally when an operation fails with a status code."""

    def __init__(self, code: ErrorCode, detail: Optional[str] = None):
        self.code = ErrorCode(code)
        self.detail = detail

        message = self.code.message
        if detail:
            message += f": {detail}"

        super().__init__(message)


class EncodingError(InformError):
    """Raised when a window of symbols cannot be encoded."""
