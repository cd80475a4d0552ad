"""Tests for the debouncer.

Uses a fake timer factory so tests control when the quiet period ends.
"""

import threading
import time
from unittest.mock import Mock

import pytest

from src.shell.debounce import Debouncer, debounce


class TestTrailingMode:
    """Default mode: fire after the quiet period, with the last arguments."""

    def test_does_not_fire_immediately(self, timers):
        func = Mock()
        debounced = Debouncer(func, 300, timer_factory=timers)

        debounced(1)

        func.assert_not_called()

    def test_burst_collapses_to_last_call(self, timers):
        func = Mock()
        debounced = Debouncer(func, 300, timer_factory=timers)

        for value in (10, 20, 30, 40):
            debounced(value)
        for timer in timers.created:
            timer.fire()

        func.assert_called_once_with(40)

    def test_each_call_restarts_timer(self, timers):
        debounced = Debouncer(Mock(), 300, timer_factory=timers)

        debounced(1)
        debounced(2)

        assert len(timers.created) == 2
        assert timers.created[0].cancelled is True
        assert timers.created[1].cancelled is False

    def test_timer_uses_quiet_period_in_seconds(self, timers):
        debounced = Debouncer(Mock(), 300, timer_factory=timers)

        debounced()

        assert timers.latest.interval == pytest.approx(0.3)

    def test_separate_bursts_fire_separately(self, timers):
        func = Mock()
        debounced = Debouncer(func, 300, timer_factory=timers)

        debounced("a")
        timers.latest.fire()
        debounced("b")
        timers.latest.fire()

        assert [c.args for c in func.call_args_list] == [("a",), ("b",)]

    def test_superseded_timer_firing_late_is_ignored(self, timers):
        """A replaced timer whose callback still runs does not fire early."""
        func = Mock()
        debounced = Debouncer(func, 300, timer_factory=timers)

        debounced(1)
        first = timers.latest
        debounced(2)
        first.function()

        func.assert_not_called()
        assert debounced.pending is True

        timers.latest.fire()

        func.assert_called_once_with(2)

    def test_pending_flag(self, timers):
        debounced = Debouncer(Mock(), 300, timer_factory=timers)

        debounced()
        assert debounced.pending is True

        timers.latest.fire()
        assert debounced.pending is False

    def test_exception_in_callback_is_logged(self, timers, caplog):
        func = Mock(side_effect=RuntimeError("boom"))
        debounced = Debouncer(func, 300, timer_factory=timers)

        debounced()
        timers.latest.fire()

        assert "Debounced call" in caplog.text


class TestLeadingMode:
    """immediate=True: fire at once, then ignore until the period expires."""

    def test_first_call_fires_immediately(self, timers):
        func = Mock()
        debounced = Debouncer(func, 300, immediate=True, timer_factory=timers)

        debounced(1)

        func.assert_called_once_with(1)

    def test_calls_within_period_are_dropped(self, timers):
        func = Mock()
        debounced = Debouncer(func, 300, immediate=True, timer_factory=timers)

        debounced(1)
        debounced(2)
        debounced(3)
        timers.latest.fire()

        func.assert_called_once_with(1)

    def test_fires_again_after_period(self, timers):
        func = Mock()
        debounced = Debouncer(func, 300, immediate=True, timer_factory=timers)

        debounced(1)
        timers.latest.fire()
        debounced(2)

        assert [c.args for c in func.call_args_list] == [(1,), (2,)]

    def test_superseded_timer_does_not_reopen_period(self, timers):
        func = Mock()
        debounced = Debouncer(func, 300, immediate=True, timer_factory=timers)

        debounced(1)
        first = timers.latest
        debounced(2)
        first.function()
        debounced(3)

        func.assert_called_once_with(1)


class TestCancelAndFlush:
    def test_cancel_drops_pending_call(self, timers):
        func = Mock()
        debounced = Debouncer(func, 300, timer_factory=timers)

        debounced(1)
        debounced.cancel()
        timers.latest.fire()

        func.assert_not_called()
        assert debounced.pending is False

    def test_flush_fires_pending_call_now(self, timers):
        func = Mock()
        debounced = Debouncer(func, 300, timer_factory=timers)

        debounced(7)
        debounced.flush()

        func.assert_called_once_with(7)
        assert timers.latest.cancelled is True

    def test_flush_without_pending_call(self, timers):
        func = Mock()
        debounced = Debouncer(func, 300, timer_factory=timers)

        debounced.flush()

        func.assert_not_called()


class TestDecorator:
    def test_decorator_wraps_function(self, timers):
        calls = []

        @debounce(300, timer_factory=timers)
        def handler(value):
            calls.append(value)

        handler(1)
        handler(2)
        timers.latest.fire()

        assert isinstance(handler, Debouncer)
        assert calls == [2]


class TestRealTimer:
    def test_fires_once_after_quiet_period(self):
        fired = threading.Event()
        calls = []

        def record(value):
            calls.append(value)
            fired.set()

        debounced = Debouncer(record, 50)
        for value in range(5):
            debounced(value)

        assert fired.wait(timeout=2.0)
        time.sleep(0.1)
        assert calls == [4]
