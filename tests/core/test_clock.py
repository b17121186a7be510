"""Tests for the clock abstraction."""

import pytest

from jobsight.core.clock import DEFAULT_CLOCK, MockClock, SystemClock


class TestMockClock:
    def test_starts_at_given_time(self) -> None:
        assert MockClock(start=10.0).monotonic() == 10.0

    def test_advance(self) -> None:
        clock = MockClock()
        clock.advance(2.5)
        clock.advance(0.5)

        assert clock.monotonic() == 3.0

    def test_negative_advance_rejected(self) -> None:
        clock = MockClock()

        with pytest.raises(ValueError, match="negative"):
            clock.advance(-1.0)


class TestSystemClock:
    def test_never_goes_backwards(self) -> None:
        clock = SystemClock()
        first = clock.monotonic()

        assert clock.monotonic() >= first

    def test_default_is_system_clock(self) -> None:
        assert isinstance(DEFAULT_CLOCK, SystemClock)
