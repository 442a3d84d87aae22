"""
State Encoding
==============

Bijection between length-k windows of base-b symbols and the integers
[0, b^k). The first symbol of a window is the most significant digit:

    encode([1, 0, 1], 2) == 0b101 == 5

Joint states built by the estimators extend a history encoding with
further digits (history + future * b^k + ...), so every marginal of a
joint event is recovered with the same discipline.
"""

from typing import Optional, Sequence

import numpy as np

from infodyn.errors import EncodingError, ErrorCode


def encode(state: Sequence[int], base: int) -> int:
    """
    Encode a window of symbols as an integer.

    Args:
        state: Symbols, each in [0, base)
        base: Alphabet size (>= 2)

    Returns:
        Integer in [0, base ** len(state)); 0 for an empty window

    Raises:
        EncodingError: base < 2, or a symbol is negative or >= base
    """
    if base < 2:
        raise EncodingError(ErrorCode.INVALID_BASE, f"base={base}")

    encoding = 0
    for symbol in state:
        symbol = int(symbol)
        if symbol < 0:
            raise EncodingError(ErrorCode.NEGATIVE_STATE, f"symbol {symbol}")
        if symbol >= base:
            raise EncodingError(ErrorCode.BAD_STATE, f"symbol {symbol} >= base {base}")
        encoding = encoding * base + symbol
    return encoding


def decode(encoding: int, base: int, length: int) -> np.ndarray:
    """
    Inverse of encode.

    Args:
        encoding: Integer in [0, base ** length)
        base: Alphabet size (>= 2)
        length: Number of symbols in the window

    Returns:
        int64 array of length symbols

    Raises:
        EncodingError: base < 2, negative length, or encoding out of range
    """
    if base < 2:
        raise EncodingError(ErrorCode.INVALID_BASE, f"base={base}")
    if length < 0:
        raise EncodingError(ErrorCode.INVALID_ARGUMENT, f"length={length}")
    if encoding < 0 or encoding >= base ** length:
        raise EncodingError(
            ErrorCode.INVALID_ARGUMENT,
            f"{encoding} is not a base-{base} encoding of length {length}",
        )

    state = np.zeros(length, dtype=np.int64)
    for i in range(length - 1, -1, -1):
        encoding, state[i] = divmod(encoding, base)
    return state


def infer_base(series: Sequence[int], base: Optional[int] = None) -> int:
    """
    Smallest alphabet that holds every symbol of series.

    An explicit base is returned unchanged. Otherwise max(series) + 1,
    and never less than 2.
    """
    if base is not None:
        return int(base)
    arr = np.asarray(series)
    if arr.size == 0:
        return 2
    return max(2, int(arr.max()) + 1)
