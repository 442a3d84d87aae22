"""
Time Series Estimators
======================

Active information and transfer entropy of discrete time series.

Each estimator runs the same pipeline:

    validate dimensions -> acquire accumulators -> stream windows
        -> combine entropies -> release accumulators -> return

Realizations of an ensemble are contiguous blocks of steps symbols.
They are streamed in order into shared accumulators, so every
realization must be well formed: one symbol outside [0, base) anywhere
in the ensemble aborts the whole estimate with Undefined.

Accumulator supports (k = history length, b = base):

    active information   states b^(k+1), histories b^k, futures b
    transfer entropy     states b^(k+2), histories b^k,
                         sources b^(k+1), predicates b^(k+1)
"""

import logging
from contextlib import ExitStack
from typing import Any, Optional, Sequence

import numpy as np

from infodyn.core.distribution import Distribution, acquire
from infodyn.core.encoding import encode
from infodyn.core.shannon import mutual_information, shannon_entropy
from infodyn.errors import EncodingError, ErrorCode, InformError
from infodyn.result import Measurement, undefined_from
from infodyn.validation import check_ensemble


logger = logging.getLogger(__name__)


def _symbol(value: int, base: int) -> int:
    symbol = int(value)
    if symbol < 0:
        raise EncodingError(ErrorCode.NEGATIVE_STATE, f"symbol {symbol}")
    if symbol >= base:
        raise EncodingError(ErrorCode.BAD_STATE, f"symbol {symbol} >= base {base}")
    return symbol


# ============================================================
# ACTIVE INFORMATION
# ============================================================

def accumulate_active_information(
    series: Sequence[int],
    base: int,
    history_length: int,
    states: Distribution,
    histories: Distribution,
    futures: Distribution,
):
    """
    Record every (history, future) window of one realization.

    For each time t >= k the k symbols before t are the history and
    series[t] is the future:

        state = history + future * base^k

    Raises:
        EncodingError: a symbol is negative or >= base
    """
    k = history_length
    shift = base ** k
    for t in range(k, len(series)):
        history = encode(series[t - k:t], base)
        future = _symbol(series[t], base)
        states.tick(history + future * shift)
        histories.tick(history)
        futures.tick(future)


def active_information(
    series: Sequence[int],
    base: int = 2,
    history_length: int = 1,
    *,
    log_base: Optional[float] = None,
) -> Measurement:
    """
    Active information of a single time series.

    Args:
        series: Symbols in [0, base)
        base: Alphabet size
        history_length: History length k
        log_base: Logarithm base of the result (defaults to base)

    Returns:
        Defined(A) or Undefined
    """
    length = 0 if series is None else int(np.size(series))
    return active_information_ensemble(
        series, 1, length, base, history_length, log_base=log_base,
    )


def active_information_ensemble(
    series: Any,
    num_realizations: int,
    steps_per_realization: int,
    base: int = 2,
    history_length: int = 1,
    *,
    log_base: Optional[float] = None,
) -> Measurement:
    """
    Active information of an ensemble of realizations.

    Mutual information between the k-step history of the process and its
    next symbol, accumulated over every realization.

    Args:
        series: Flat array-like of num_realizations * steps_per_realization
                symbols, or a (num_realizations, steps_per_realization) array
        num_realizations: Number of realizations
        steps_per_realization: Time steps per realization
        base: Alphabet size
        history_length: History length k
        log_base: Logarithm base of the result (defaults to base)

    Returns:
        Defined(A), or Undefined with an ErrorCode if the input is rejected
    """
    check = check_ensemble(series, num_realizations, steps_per_realization,
                           base, history_length)
    if not check.valid:
        logger.warning(f"Active information rejected: {check.summary()}")
        return check.undefined

    base, k = int(base), int(history_length)
    logger.debug(f"Active information: {check.summary()}, base={base}, k={k}")

    try:
        with ExitStack() as stack:
            states = stack.enter_context(acquire(base ** (k + 1)))
            histories = stack.enter_context(acquire(base ** k))
            futures = stack.enter_context(acquire(base))

            for realization in check.data:
                accumulate_active_information(realization, base, k,
                                              states, histories, futures)

            return mutual_information(states, histories, futures,
                                      base if log_base is None else log_base)
    except InformError as e:
        logger.warning(f"Active information aborted: {e}")
        return undefined_from(e.code, e.detail)


# ============================================================
# TRANSFER ENTROPY
# ============================================================

def accumulate_transfer_entropy(
    source: Sequence[int],
    target: Sequence[int],
    base: int,
    history_length: int,
    states: Distribution,
    histories: Distribution,
    sources: Distribution,
    predicates: Distribution,
):
    """
    Record every window of one realization of a source/target pair.

    For each time t >= k of the target, the k target symbols before t
    are the history, target[t] is the future, and source[t - 1] is the
    source symbol concurrent with the last history symbol:

        state     = history + future * base^k + source * base^(k+1)
        source    = history + source * base^k
        predicate = history + future * base^k

    Raises:
        EncodingError: a symbol is negative or >= base
    """
    k = history_length
    shift = base ** k
    for t in range(k, len(target)):
        history = encode(target[t - k:t], base)
        future = _symbol(target[t], base)
        concurrent = _symbol(source[t - 1], base)
        states.tick(history + future * shift + concurrent * shift * base)
        histories.tick(history)
        sources.tick(history + concurrent * shift)
        predicates.tick(history + future * shift)


def transfer_entropy(
    source: Sequence[int],
    target: Sequence[int],
    base: int = 2,
    history_length: int = 1,
    *,
    log_base: Optional[float] = None,
) -> Measurement:
    """
    Transfer entropy from source to target for single time series.

    Args:
        source: Source series Y
        target: Target series X
        base: Alphabet size shared by both series
        history_length: Target history length k
        log_base: Logarithm base of the result (defaults to base)

    Returns:
        Defined(T_{Y->X}) or Undefined
    """
    # a missing target is reported by the ensemble check
    reference = target if target is not None else source
    length = 0 if reference is None else int(np.size(reference))
    return transfer_entropy_ensemble(
        source, target, 1, length, base, history_length, log_base=log_base,
    )


def transfer_entropy_ensemble(
    source: Any,
    target: Any,
    num_realizations: int,
    steps_per_realization: int,
    base: int = 2,
    history_length: int = 1,
    *,
    log_base: Optional[float] = None,
) -> Measurement:
    """
    Transfer entropy from source to target over an ensemble.

        T = H(sources) + H(predicates) - H(states) - H(histories)

    Both series are validated identically and must have the same shape.

    Args:
        source: Source ensemble Y (flat or 2-D)
        target: Target ensemble X (flat or 2-D)
        num_realizations: Number of realizations
        steps_per_realization: Time steps per realization
        base: Alphabet size
        history_length: History length k
        log_base: Logarithm base of the result (defaults to base)

    Returns:
        Defined(T), or Undefined with an ErrorCode if the input is rejected
    """
    checks = [
        check_ensemble(s, num_realizations, steps_per_realization, base, history_length)
        for s in (source, target)
    ]
    for role, check in zip(("source", "target"), checks):
        if not check.valid:
            logger.warning(f"Transfer entropy rejected ({role}): {check.summary()}")
            return check.undefined

    source_data, target_data = checks[0].data, checks[1].data
    base, k = int(base), int(history_length)
    logger.debug(f"Transfer entropy: {checks[1].summary()}, base={base}, k={k}")

    b = base if log_base is None else log_base
    try:
        with ExitStack() as stack:
            states = stack.enter_context(acquire(base ** (k + 2)))
            histories = stack.enter_context(acquire(base ** k))
            sources = stack.enter_context(acquire(base ** (k + 1)))
            predicates = stack.enter_context(acquire(base ** (k + 1)))

            for y, x in zip(source_data, target_data):
                accumulate_transfer_entropy(y, x, base, k,
                                            states, histories, sources, predicates)

            return (shannon_entropy(sources, b)
                    + shannon_entropy(predicates, b)
                    - shannon_entropy(states, b)
                    - shannon_entropy(histories, b))
    except InformError as e:
        logger.warning(f"Transfer entropy aborted: {e}")
        return undefined_from(e.code, e.detail)
