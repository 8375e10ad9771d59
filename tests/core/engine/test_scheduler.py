"""
Unit tests for cooperative periodic timers.
"""

from unittest.mock import Mock

import pytest

from duelsim.core.engine.scheduler import PeriodicTimer


class TestPeriodicTimer:
    """Test PeriodicTimer polling behaviour."""

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            PeriodicTimer(0, Mock())
        with pytest.raises(ValueError):
            PeriodicTimer(1.0, Mock(), max_catch_up=0)

    def test_inactive_timer_never_fires(self):
        callback = Mock()
        timer = PeriodicTimer(1.0, callback)

        assert timer.poll(100.0) == 0
        callback.assert_not_called()

    def test_fires_once_per_period(self):
        callback = Mock()
        timer = PeriodicTimer(1.0, callback)
        timer.start(0.0)

        assert timer.poll(0.5) == 0
        assert timer.poll(1.0) == 1
        assert timer.poll(1.5) == 0
        assert timer.poll(2.0) == 1
        assert callback.call_count == 2
        assert timer.fire_count == 2

    def test_catches_up_missed_periods(self):
        callback = Mock()
        timer = PeriodicTimer(1.0, callback)
        timer.start(0.0)

        assert timer.poll(3.5) == 3
        assert timer.next_fire == pytest.approx(4.0)

    def test_catch_up_is_capped(self):
        callback = Mock()
        timer = PeriodicTimer(1.0, callback, max_catch_up=4)
        timer.start(0.0)

        assert timer.poll(100.5) == 4
        assert timer.next_fire == pytest.approx(101.0)

    def test_stop_cancels_future_firings(self):
        callback = Mock()
        timer = PeriodicTimer(0.1, callback)
        timer.start(0.0)
        timer.stop()

        assert not timer.is_active
        assert timer.next_fire is None
        assert timer.poll(10.0) == 0

    def test_stop_from_callback_drops_backlog(self):
        timer = PeriodicTimer(1.0, lambda: timer.stop())
        timer.start(0.0)

        assert timer.poll(5.0) == 1
        assert not timer.is_active

    def test_callback_is_not_reentered(self):
        nested_results = []

        def callback():
            nested_results.append(timer.poll(50.0))

        timer = PeriodicTimer(1.0, callback)
        timer.start(0.0)
        timer.poll(1.0)

        assert nested_results == [0]
        assert timer.fire_count == 1

    def test_restart_resets_schedule(self):
        callback = Mock()
        timer = PeriodicTimer(1.0, callback)
        timer.start(0.0)
        timer.stop()
        timer.start(10.0)

        assert timer.poll(10.5) == 0
        assert timer.poll(11.0) == 1

    def test_callback_exception_propagates_and_unlocks(self):
        timer = PeriodicTimer(1.0, Mock(side_effect=RuntimeError("boom")))
        timer.start(0.0)

        with pytest.raises(RuntimeError):
            timer.poll(1.0)
        timer.callback = Mock()
        assert timer.poll(2.0) == 1
