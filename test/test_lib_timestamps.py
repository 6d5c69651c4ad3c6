#!/usr/bin/env python3
"""Tests for scrutineer/timestamps.py"""

import pytest
from typing import Iterator, List
from unittest.mock import Mock

from scrutineer.constants import EPOCH, NS_PER_SECOND
from scrutineer.timestamps import TimestampOracle, resolution_to_ns


def scripted_clock(readings: List[int]) -> Mock:
    """Clock returning readings in order, then repeating the last one."""
    it: Iterator[int] = iter(readings)
    last = {"value": readings[-1]}

    def read() -> int:
        try:
            last["value"] = next(it)
        except StopIteration:
            pass
        return last["value"]

    return Mock(side_effect=read)


class TestResolution:
    """Tests for resolution_to_ns function."""

    def test_one_second(self) -> None:
        assert resolution_to_ns(1.0) == NS_PER_SECOND

    def test_sub_second(self) -> None:
        assert resolution_to_ns(0.01) == 10_000_000

    @pytest.mark.parametrize("seconds", [0, -1.0, 1e-12])
    def test_rejects_non_positive(self, seconds: float) -> None:
        with pytest.raises(ValueError):
            resolution_to_ns(seconds)

    def test_oracle_rejects_zero_resolution(self) -> None:
        with pytest.raises(ValueError):
            TimestampOracle(resolution_ns=0)


class TestNow:
    """Tests for TimestampOracle.now."""

    def test_quantizes_down(self) -> None:
        oracle = TimestampOracle(resolution_ns=1000, clock=lambda: 12_345)
        assert oracle.now() == 12_000

    def test_exact_multiple_unchanged(self) -> None:
        oracle = TimestampOracle(resolution_ns=1000, clock=lambda: 5000)
        assert oracle.now() == 5000


class TestAdvancePast:
    """Tests for TimestampOracle.advance_past."""

    def test_returns_immediately_when_clock_is_ahead(self) -> None:
        """Test no waiting when the clock already exceeds the floor."""
        sleep = Mock()
        oracle = TimestampOracle(resolution_ns=1000, clock=lambda: 7_500, sleep=sleep)

        assert oracle.advance_past(EPOCH) == 7_000
        assert oracle.advance_past(6_999) == 7_000
        sleep.assert_not_called()

    def test_spins_until_clock_moves_past_floor(self) -> None:
        """Test polling while the quantized clock equals the floor."""
        sleep = Mock()
        clock = scripted_clock([1_000, 1_500, 1_999, 2_000])
        oracle = TimestampOracle(resolution_ns=1000, clock=clock, sleep=sleep, poll_interval=0.0001)

        assert oracle.advance_past(1_000) == 2_000
        assert sleep.call_count == 3
        sleep.assert_called_with(0.0001)

    def test_successive_stamps_strictly_increase(self) -> None:
        """Test that chaining advance_past never repeats a value."""
        ticks = {"now": 0}

        def clock() -> int:
            ticks["now"] += 300
            return ticks["now"]

        oracle = TimestampOracle(resolution_ns=1000, clock=clock, sleep=lambda _: None)
        stamps = []
        prev = oracle.advance_past(EPOCH)
        for _ in range(10):
            prev = oracle.advance_past(prev)
            stamps.append(prev)

        assert all(b > a for a, b in zip(stamps, stamps[1:]))
        assert all(s % 1000 == 0 for s in stamps)

    def test_never_returns_floor_or_below(self) -> None:
        clock = scripted_clock([10_000, 10_999, 11_000])
        oracle = TimestampOracle(resolution_ns=1000, clock=clock, sleep=lambda _: None)
        assert oracle.advance_past(10_000) > 10_000

    def test_real_clock(self) -> None:
        """Test against the real clock with a fine resolution."""
        oracle = TimestampOracle(resolution_ns=resolution_to_ns(0.001))
        first = oracle.advance_past(EPOCH)
        second = oracle.advance_past(first)
        assert second > first
