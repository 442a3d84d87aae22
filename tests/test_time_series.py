"""
Tests for the active information and transfer entropy estimators.

Validates:
    1. Known values on small hand-counted series
    2. Rejection of degenerate dimensions with the right ErrorCode
    3. Whole-ensemble abort on out-of-alphabet symbols
    4. Ensemble accumulation and input shapes
    5. Directionality of transfer entropy on lagged-copy data
"""

import math

import numpy as np
import pytest

from infodyn.core.distribution import Distribution
from infodyn.core.time_series import (
    accumulate_active_information,
    accumulate_transfer_entropy,
    active_information,
    active_information_ensemble,
    transfer_entropy,
    transfer_entropy_ensemble,
)
from infodyn.errors import EncodingError, ErrorCode


def _h(*counts):
    """Entropy in bits of a histogram given as counts."""
    n = sum(counts)
    return -sum(c / n * math.log2(c / n) for c in counts if c)


# ─────────────────────────────────────────────────────────────────────
# Active information
# ─────────────────────────────────────────────────────────────────────

class TestActiveInformation:
    """Single-series active information."""

    def test_alternating(self):
        """Period-2 series: bounded by one bit, equal to H(history)."""
        ai = active_information([0, 1, 0, 1, 0, 1, 0, 1], 2, 1)
        assert ai.is_defined
        assert 0.0 <= float(ai) <= math.log2(2) + 1e-12
        # histories 4x0 3x1, futures 3x0 4x1, states 4x(0,1) 3x(1,0)
        assert float(ai) == pytest.approx(_h(4, 3))

    def test_constant_is_exactly_zero(self):
        ai = active_information([0] * 8, 2, 1)
        assert ai.is_defined
        assert float(ai) == 0.0

    def test_hand_counted(self):
        """
        series 0 0 1 1 0 0 1 1, k = 1
        (h, f): (0,0) x2, (0,1) x2, (1,1) x2, (1,0) x1
        """
        ai = active_information([0, 0, 1, 1, 0, 0, 1, 1], 2, 1)
        expected = _h(4, 3) + _h(3, 4) - _h(2, 2, 2, 1)
        assert float(ai) == pytest.approx(expected)

    def test_longer_history(self):
        """Period-3 series with k = 2 is fully predictable from history."""
        series = [0, 0, 1] * 10
        ai = active_information(series, 2, 2)
        # the future is a function of the history, so A = H(future)
        futures = series[2:]
        expected = _h(futures.count(0), futures.count(1))
        assert float(ai) == pytest.approx(expected)

    def test_log_base(self):
        bits = active_information([0, 1, 0, 1, 0, 1, 0, 1], 2, 1)
        nats = active_information([0, 1, 0, 1, 0, 1, 0, 1], 2, 1, log_base=math.e)
        assert float(nats) == pytest.approx(float(bits) * math.log(2))

    def test_ternary_alphabet(self):
        series = [0, 1, 2] * 6
        ai = active_information(series, 3, 1)
        # base-3 logarithm: the cycle is determined by the history
        assert float(ai) == pytest.approx(1.0, abs=0.01)

    def test_numpy_input(self):
        a = active_information(np.array([0, 0, 1, 1, 0, 0, 1, 1]), 2, 1)
        b = active_information([0, 0, 1, 1, 0, 0, 1, 1], 2, 1)
        assert a == b


class TestActiveInformationRejects:
    """Degenerate inputs give Undefined with an ErrorCode."""

    def test_missing_series(self):
        ai = active_information(None, 2, 1)
        assert ai.error == ErrorCode.NO_TIMESERIES

    def test_empty_series(self):
        assert active_information([], 2, 1).error == ErrorCode.SHORT_SERIES

    def test_single_step(self):
        assert active_information([1], 2, 1).error == ErrorCode.SHORT_SERIES

    @pytest.mark.parametrize("k, steps", [(2, 2), (3, 3), (3, 2), (5, 4)])
    def test_history_not_shorter_than_series(self, k, steps):
        series = [0, 1] * 4
        ai = active_information_ensemble(series[:steps], 1, steps, 2, k)
        assert not ai.is_defined
        assert ai.error == ErrorCode.LONG_HISTORY

    def test_zero_history(self):
        assert active_information([0, 1, 0], 2, 0).error == ErrorCode.ZERO_HISTORY

    def test_no_realizations(self):
        ai = active_information_ensemble([0, 1, 0], 0, 3, 2, 1)
        assert ai.error == ErrorCode.NO_REALIZATIONS

    def test_bad_base(self):
        assert active_information([0, 0, 0], 1, 1).error == ErrorCode.INVALID_BASE

    def test_dimension_mismatch(self):
        ai = active_information_ensemble([0, 1, 0, 1, 0], 2, 3, 2, 1)
        assert ai.error == ErrorCode.INVALID_ARGUMENT

    def test_fractional_base(self):
        ai = active_information([0, 1, 0, 1], 2.5, 1)
        assert ai.error == ErrorCode.INVALID_BASE

    def test_non_integer_symbols(self):
        ai = active_information([0.5, 1.0, 0.0], 2, 1)
        assert ai.error == ErrorCode.INVALID_ARGUMENT

    def test_symbol_outside_alphabet(self):
        ai = active_information([0, 1, 2, 0, 1], 2, 1)
        assert not ai.is_defined
        assert ai.error == ErrorCode.BAD_STATE

    def test_bad_final_future(self):
        """The last future symbol is checked even though it starts no history."""
        ai = active_information([0, 1, 0, 2], 2, 1)
        assert ai.error == ErrorCode.BAD_STATE

    def test_negative_symbol(self):
        ai = active_information([0, 1, -1, 0], 2, 1)
        assert ai.error == ErrorCode.NEGATIVE_STATE


class TestActiveInformationEnsemble:
    """Ensembles of realizations."""

    def test_single_realization_matches(self):
        series = [0, 0, 1, 1, 0, 0, 1, 1]
        assert active_information_ensemble(series, 1, 8, 2, 1) == active_information(series, 2, 1)

    def test_repeated_realization_matches_single(self):
        """Doubling every count leaves the probabilities unchanged."""
        series = [0, 0, 1, 1, 0, 1, 1, 1]
        single = active_information(series, 2, 1)
        double = active_information_ensemble(series * 2, 2, 8, 2, 1)
        assert double.isclose(single)

    def test_windows_do_not_span_realizations(self):
        """
        Realizations [0 0 0 0] and [1 1 1 1]: each is constant, so every
        future equals its history and A = H(history) = 1 bit.
        """
        ai = active_information_ensemble([0, 0, 0, 0, 1, 1, 1, 1], 2, 4, 2, 1)
        assert float(ai) == pytest.approx(1.0)

    def test_two_dimensional_input(self):
        flat = [0, 1, 1, 0, 1, 0, 0, 1, 1, 1, 0, 0]
        a = active_information_ensemble(flat, 3, 4, 2, 1)
        b = active_information_ensemble(np.array(flat).reshape(3, 4), 3, 4, 2, 1)
        assert a == b

    def test_one_bad_realization_aborts_all(self):
        """A malformed realization invalidates the whole estimate."""
        good = [0, 1, 0, 1]
        bad = [0, 1, 3, 1]
        ai = active_information_ensemble(good + good + bad, 3, 4, 2, 1)
        assert not ai.is_defined
        assert ai.error == ErrorCode.BAD_STATE


class TestAccumulateActiveInformation:
    """Caller-owned accumulation."""

    def test_counts(self):
        states, histories, futures = (Distribution.create(n) for n in (8, 4, 2))
        accumulate_active_information([0, 1, 1, 0, 1], 2, 2, states, histories, futures)

        assert states.total == histories.total == futures.total == 3
        # windows: (01 -> 1), (11 -> 0), (10 -> 1)
        assert histories.get(0b01) == 1
        assert histories.get(0b11) == 1
        assert histories.get(0b10) == 1
        assert states.get(0b01 + 1 * 4) == 1
        assert states.get(0b11 + 0 * 4) == 1
        assert futures.get(1) == 2

    def test_raises_on_bad_symbol(self):
        states, histories, futures = (Distribution.create(n) for n in (4, 2, 2))
        with pytest.raises(EncodingError):
            accumulate_active_information([0, 5, 1], 2, 1, states, histories, futures)


# ─────────────────────────────────────────────────────────────────────
# Transfer entropy
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture
def lagged_copy():
    """Random source bits; the target copies the source one step later."""
    rng = np.random.default_rng(42)
    source = rng.integers(0, 2, size=4000)
    target = np.empty_like(source)
    target[0] = 0
    target[1:] = source[:-1]
    return source, target


class TestTransferEntropy:
    """Single-series transfer entropy."""

    def test_lagged_copy(self, lagged_copy):
        """The source determines the next target symbol: about one bit flows."""
        source, target = lagged_copy
        te = transfer_entropy(source, target, 2, 1)
        assert float(te) == pytest.approx(1.0, abs=0.02)

    def test_asymmetric(self, lagged_copy):
        """Swapping source and target changes the estimate."""
        source, target = lagged_copy
        forward = transfer_entropy(source, target, 2, 1)
        reverse = transfer_entropy(target, source, 2, 1)
        assert float(reverse) == pytest.approx(0.0, abs=0.01)
        assert float(forward) - float(reverse) > 0.9

    def test_self_transfer_is_zero(self):
        """The source symbol is already the last history symbol."""
        series = [0, 1, 1, 0, 1, 0, 0, 1, 1, 1, 0, 1]
        te = transfer_entropy(series, series, 2, 1)
        assert float(te) == pytest.approx(0.0, abs=1e-12)

    def test_hand_counted(self):
        """
        source y = 1 0 1 1, target x = 0 1 0 1, k = 1
        t=1: h=0 f=1 s=1    t=2: h=1 f=0 s=0    t=3: h=0 f=1 s=1
        """
        te = transfer_entropy([1, 0, 1, 1], [0, 1, 0, 1], 2, 1)
        # states (h,f,s): 2x(0,1,1) 1x(1,0,0); sources (h,s): 2x(0,1) 1x(1,0)
        # predicates (h,f): 2x(0,1) 1x(1,0); histories: 2x0 1x1
        expected = _h(2, 1) + _h(2, 1) - _h(2, 1) - _h(2, 1)
        assert float(te) == pytest.approx(expected, abs=1e-12)

    def test_log_base(self, lagged_copy):
        source, target = lagged_copy
        bits = transfer_entropy(source, target, 2, 1)
        nats = transfer_entropy(source, target, 2, 1, log_base=math.e)
        assert float(nats) == pytest.approx(float(bits) * math.log(2))


class TestTransferEntropyRejects:

    def test_missing_series(self):
        assert transfer_entropy(None, [0, 1, 0], 2, 1).error == ErrorCode.NO_TIMESERIES
        assert transfer_entropy([0, 1, 0], None, 2, 1).error == ErrorCode.NO_TIMESERIES

    def test_length_mismatch(self):
        te = transfer_entropy([0, 1], [0, 1, 0, 1], 2, 1)
        assert te.error == ErrorCode.INVALID_ARGUMENT

    @pytest.mark.parametrize("k, steps", [(2, 2), (4, 3)])
    def test_history_too_long(self, k, steps):
        te = transfer_entropy_ensemble([0] * steps, [1] * steps, 1, steps, 2, k)
        assert te.error == ErrorCode.LONG_HISTORY

    def test_bad_source_symbol(self):
        te = transfer_entropy([0, 2, 0, 1], [0, 1, 0, 1], 2, 1)
        assert te.error == ErrorCode.BAD_STATE

    def test_bad_target_future(self):
        te = transfer_entropy([0, 1, 0, 1], [0, 1, 0, 2], 2, 1)
        assert te.error == ErrorCode.BAD_STATE


class TestTransferEntropyEnsemble:

    def test_repeated_realization_matches_single(self):
        y = [1, 0, 1, 1, 0, 0, 1, 0]
        x = [0, 1, 0, 1, 1, 0, 0, 1]
        single = transfer_entropy(y, x, 2, 1)
        double = transfer_entropy_ensemble(y * 2, x * 2, 2, 8, 2, 1)
        assert double.isclose(single)

    def test_one_bad_realization_aborts_all(self):
        y = [0, 1, 0, 1] + [0, 1, 0, 1]
        x = [1, 0, 1, 0] + [1, 0, 7, 0]
        te = transfer_entropy_ensemble(y, x, 2, 4, 2, 1)
        assert te.error == ErrorCode.BAD_STATE


class TestAccumulateTransferEntropy:

    def test_counts(self):
        states, histories, sources, predicates = (
            Distribution.create(n) for n in (8, 2, 4, 4)
        )
        accumulate_transfer_entropy([1, 0, 1, 1], [0, 1, 0, 1], 2, 1,
                                    states, histories, sources, predicates)

        for d in (states, histories, sources, predicates):
            assert d.total == 3
        # (h, f, s) = (0, 1, 1) twice -> 0 + 1*2 + 1*4
        assert states.get(6) == 2
        assert states.get(1) == 1
        assert sources.get(0 + 1 * 2) == 2
        assert predicates.get(0 + 1 * 2) == 2
        assert histories.get(0) == 2
