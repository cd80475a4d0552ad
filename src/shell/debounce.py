"""Debounce - Imperative Shell.

Collapses bursts of calls into one. Uses a timer thread, so it lives in
the shell; the timer factory can be swapped out in tests.
"""

import logging
import threading
from typing import Any, Callable, Protocol


logger = logging.getLogger(__name__)


class Timer(Protocol):
    """The part of threading.Timer the debouncer uses."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


def _thread_timer(interval: float, function: Callable[[], None]) -> Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class Debouncer:
    """Wraps a callback so rapid repeated calls collapse into one.

    Trailing mode (default): the callback runs once the quiet period has
    passed with no further calls, with the arguments of the last call.

    Leading mode (immediate=True): the first call runs the callback at
    once; calls arriving before the quiet period expires restart the
    period and are dropped.

    Each call cancels and restarts the single pending timer.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        wait_ms: int,
        immediate: bool = False,
        timer_factory: TimerFactory = _thread_timer,
    ) -> None:
        """Initialize debouncer.

        Args:
            func: Callback to rate-limit
            wait_ms: Quiet period in milliseconds
            immediate: Fire on the leading edge instead of the trailing edge
            timer_factory: Builds the timer (threading.Timer by default)
        """
        self.func = func
        self.wait_ms = wait_ms
        self.immediate = immediate
        self._timer_factory = timer_factory
        self._timer: Timer | None = None
        self._pending: tuple[tuple, dict] | None = None
        self._lock = threading.Lock()

    @property
    def wait_seconds(self) -> float:
        return self.wait_ms / 1000.0

    @property
    def pending(self) -> bool:
        """True while a timer is running."""
        with self._lock:
            return self._timer is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            call_now = self.immediate and self._timer is None

            if self._timer is not None:
                self._timer.cancel()

            self._pending = None if self.immediate else (args, kwargs)
            timer = self._timer_factory(self.wait_seconds, lambda: self._later(timer))
            self._timer = timer
            timer.start()

        if call_now:
            self.func(*args, **kwargs)

    def _later(self, timer: Timer) -> None:
        with self._lock:
            # Superseded timers that fire anyway are ignored
            if self._timer is not timer:
                return
            self._timer = None
            pending, self._pending = self._pending, None

        if pending is not None:
            args, kwargs = pending
            self._invoke(args, kwargs)

    def _invoke(self, args: tuple, kwargs: dict) -> None:
        try:
            self.func(*args, **kwargs)
        except Exception:
            logger.exception("Debounced call to %r failed", self.func)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    def flush(self) -> None:
        """Run the pending trailing call now instead of waiting."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            pending, self._pending = self._pending, None

        if pending is not None:
            args, kwargs = pending
            self.func(*args, **kwargs)


def debounce(
    wait_ms: int,
    immediate: bool = False,
    timer_factory: TimerFactory = _thread_timer,
) -> Callable[[Callable[..., Any]], Debouncer]:
    """Decorator form of Debouncer."""
    def decorator(func: Callable[..., Any]) -> Debouncer:
        return Debouncer(func, wait_ms, immediate=immediate, timer_factory=timer_factory)
    return decorator
