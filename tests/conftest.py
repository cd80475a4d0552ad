"""Shared fixtures."""

import pytest


class FakeTimer:
    """Timer that only fires when told to."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.function()


class FakeTimers:
    """Timer factory recording every timer it creates."""

    def __init__(self):
        self.created = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.created.append(timer)
        return timer

    @property
    def latest(self):
        return self.created[-1]


@pytest.fixture
def timers():
    """Timer factory for driving debounced calls by hand."""
    return FakeTimers()
