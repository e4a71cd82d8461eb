"""
Random Source, Clock and Numeric Helper Tests.
"""

from datetime import datetime, timezone

import pytest

from gameecon.common.clock import Clock, FixedClock, SystemClock
from gameecon.common.exceptions import (
    ErrorCode,
    InvalidInputError,
    RandomSourceExhaustedError,
    require_in_range,
    require_non_negative,
)
from gameecon.common.numeric import clamp, round_money, round_pct, round_prob, safe_ratio
from gameecon.common.randomness import (
    RandomSource,
    SeededRandomSource,
    SequenceRandomSource,
    uniform_between,
)


class TestSequenceRandomSource:
    def test_replays_values_in_order(self):
        source = SequenceRandomSource([0.1, 0.5, 0.9])
        assert [source.next(), source.next(), source.next()] == [0.1, 0.5, 0.9]
        assert source.remaining == 0

    def test_exhaustion_raises(self):
        """Asking for one draw too many is a test bug, not a silent reuse."""
        source = SequenceRandomSource([0.3])
        source.next()
        with pytest.raises(RandomSourceExhaustedError) as exc_info:
            source.next()
        assert exc_info.value.code == ErrorCode.RANDOM_SOURCE_EXHAUSTED

    @pytest.mark.parametrize("bad", [1.0, -0.01, 1.5])
    def test_rejects_values_outside_unit_interval(self, bad):
        with pytest.raises(InvalidInputError):
            SequenceRandomSource([0.2, bad])

    def test_satisfies_protocol(self):
        assert isinstance(SequenceRandomSource([0.0]), RandomSource)


class TestSeededRandomSource:
    def test_same_seed_same_stream(self):
        a = SeededRandomSource(seed=7)
        b = SeededRandomSource(seed=7)
        assert [a.next() for _ in range(5)] == [b.next() for _ in range(5)]

    def test_draws_in_unit_interval(self):
        source = SeededRandomSource(seed=1)
        for _ in range(200):
            assert 0.0 <= source.next() < 1.0

    def test_uniform_between_maps_onto_band(self):
        assert uniform_between(SequenceRandomSource([0.0]), 3.0, 6.0) == 3.0
        assert uniform_between(SequenceRandomSource([0.5]), 6.0, 12.0) == pytest.approx(9.0)


class TestClocks:
    def test_fixed_clock_returns_instant(self):
        instant = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert FixedClock(instant).now() == instant

    def test_naive_instant_treated_as_utc(self):
        clock = FixedClock(datetime(2026, 1, 1))
        assert clock.now().tzinfo == timezone.utc

    def test_system_clock_is_tz_aware(self):
        clock = SystemClock()
        assert isinstance(clock, Clock)
        assert clock.now().tzinfo is not None


class TestNumeric:
    def test_clamp(self):
        assert clamp(150, 0, 100) == 100
        assert clamp(-5, 0, 100) == 0
        assert clamp(42, 0, 100) == 42

    def test_rounding_policy(self):
        assert round_money(10.005001) == 10.01
        assert round_pct(78.560000001) == 78.56
        assert round_prob(0.123456) == 0.1235

    def test_safe_ratio_guards_zero(self):
        assert safe_ratio(5, 0) == 0.0
        assert safe_ratio(5, 0, default=1.0) == 1.0
        assert safe_ratio(1, 4) == 0.25


class TestExceptions:
    def test_require_non_negative(self):
        assert require_non_negative("amount", 0) == 0
        with pytest.raises(InvalidInputError) as exc_info:
            require_non_negative("amount", -1)
        assert exc_info.value.code == ErrorCode.NEGATIVE_VALUE
        assert exc_info.value.to_dict()["details"] == {"field": "amount"}

    def test_require_in_range_is_inclusive(self):
        assert require_in_range("alignment", 0, 0, 100) == 0
        assert require_in_range("alignment", 100, 0, 100) == 100
        with pytest.raises(InvalidInputError) as exc_info:
            require_in_range("alignment", 100.5, 0, 100)
        assert exc_info.value.code == ErrorCode.OUT_OF_RANGE
        assert exc_info.value.field == "alignment"
