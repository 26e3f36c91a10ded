"""Tests for the game timer."""

import pytest

from jigsaw_engine import GameTimer, format_time


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "00:00"), (5, "00:05"), (65, "01:05"), (3600, "60:00"), (6000, "100:00")],
)
def test_format_time(seconds: int, expected: str) -> None:
    assert format_time(seconds) == expected


class TestGameTimer:
    """Tests for GameTimer."""

    def test_not_running_until_started(self, clock) -> None:
        timer = GameTimer(clock)
        clock.advance(10)
        assert timer.tick() == 0.0
        assert not timer.running

    def test_late_ticks_do_not_lose_time(self, clock) -> None:
        timer = GameTimer(clock)
        timer.start()
        clock.advance(1.0)
        timer.tick()
        # A tick delivered 2.5s late still counts the full interval
        clock.advance(3.5)
        timer.tick()
        assert timer.elapsed == pytest.approx(4.5)
        assert timer.elapsed_seconds == 4

    def test_stop_keeps_time_since_last_tick(self, clock) -> None:
        timer = GameTimer(clock)
        timer.start()
        clock.advance(2.0)
        timer.stop()
        clock.advance(100.0)
        timer.tick()
        assert timer.elapsed == pytest.approx(2.0)
        assert not timer.running

    def test_restart_continues_accumulating(self, clock) -> None:
        timer = GameTimer(clock)
        timer.start()
        clock.advance(3.0)
        timer.stop()
        clock.advance(50.0)
        timer.start()
        clock.advance(2.0)
        timer.tick()
        assert timer.elapsed == pytest.approx(5.0)

    def test_reset(self, clock) -> None:
        timer = GameTimer(clock)
        timer.start()
        clock.advance(3.0)
        timer.tick()
        timer.reset()
        assert timer.elapsed == 0.0
        assert not timer.running
