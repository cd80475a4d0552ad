"""UI Surface - Imperative Shell.

Server-side stand-ins for the page elements the fetch cycle touches: the
loading indicator, the town count readout and blocking notifications.
The page polls these through the API and mirrors them in the browser.
"""

import logging
import threading
from collections import deque
from contextlib import contextmanager
from typing import Iterator


logger = logging.getLogger(__name__)


# Oldest notifications are dropped beyond this many unread messages
MAX_PENDING_NOTIFICATIONS = 20


class LoadingIndicator:
    """Loading indicator shared by overlapping fetch cycles.

    Counts active cycles so the indicator stays visible until the last
    overlapping cycle finishes.
    """

    def __init__(self) -> None:
        self._active = 0
        self._lock = threading.Lock()

    @property
    def visible(self) -> bool:
        with self._lock:
            return self._active > 0

    def show(self) -> None:
        with self._lock:
            self._active += 1

    def hide(self) -> None:
        with self._lock:
            self._active = max(0, self._active - 1)

    @contextmanager
    def shown(self) -> Iterator[None]:
        """Show the indicator for the duration of a block, hide it after."""
        self.show()
        try:
            yield
        finally:
            self.hide()


class CountDisplay:
    """Numeric readout next to the slider."""

    def __init__(self, value: int) -> None:
        self.value = value

    def set(self, value: int) -> None:
        self.value = value

    @property
    def text(self) -> str:
        return str(self.value)


class NotificationQueue:
    """Blocking user notifications waiting to be shown by the page."""

    def __init__(self, maxlen: int = MAX_PENDING_NOTIFICATIONS) -> None:
        self._messages: deque[str] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def notify(self, message: str) -> None:
        logger.info("Queueing user notification: %s", message)
        with self._lock:
            self._messages.append(message)

    def peek(self) -> list[str]:
        with self._lock:
            return list(self._messages)

    def drain(self) -> list[str]:
        """Return and clear pending notifications."""
        with self._lock:
            messages = list(self._messages)
            self._messages.clear()
        return messages


class UiSurface:
    """Bundle of the UI elements the orchestrator drives."""

    def __init__(self, initial_count: int) -> None:
        self.loading = LoadingIndicator()
        self.count_display = CountDisplay(initial_count)
        self.notifications = NotificationQueue()
