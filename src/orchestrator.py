"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. It runs the
fetch-and-render cycle and handles the reload button and the slider.
"""

import logging
import threading
from dataclasses import dataclass, field

from src.core.config import Config
from src.core.markers import build_markers
from src.core.state import (
    MapState,
    apply_markers,
    initial_state,
    issue_ticket,
    set_town_count,
)
from src.shell.debounce import Debouncer, TimerFactory
from src.shell.towns_client import TownsClient, TownsFetchError
from src.shell.ui_surface import UiSurface


logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """Result of one fetch-and-render cycle.

    Attributes:
        sequence: Sequence number of the cycle
        town_count: Town count requested
        towns_fetched: Records in the feed response
        markers_drawn: Markers in the new marker set
        skipped: Names of towns skipped for invalid coordinates
        applied: Whether the new markers replaced the drawn set
        error: Error message if the fetch failed
    """
    sequence: int
    town_count: int
    towns_fetched: int = 0
    markers_drawn: int = 0
    skipped: list[str] = field(default_factory=list)
    applied: bool = False
    error: str | None = None

    @property
    def success(self) -> bool:
        """Returns True if the fetch succeeded."""
        return self.error is None

    @property
    def summary(self) -> str:
        """Human-readable summary of the cycle."""
        if self.error:
            return f"Cycle {self.sequence} failed: {self.error}"
        return (
            f"Cycle {self.sequence}: fetched {self.towns_fetched} towns, "
            f"{self.markers_drawn} drawn, {len(self.skipped)} skipped"
            + ("" if self.applied else " (stale, discarded)")
        )


class Orchestrator:
    """Coordinates the town map.

    This class wires together:
    - Town feed client (fetches town records)
    - Core functions (parsing, filtering, scaling, state transitions)
    - UI surface (loading indicator, count readout, notifications)
    - Debouncer (rate-limits slider input)
    """

    def __init__(
        self,
        config: Config,
        towns_client: TownsClient | None = None,
        ui: UiSurface | None = None,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        """Initialize orchestrator with configuration.

        Args:
            config: Application configuration
            towns_client: Town feed client (created if not provided)
            ui: UI surface (created if not provided)
            timer_factory: Timer factory for the slider debouncer
        """
        self.config = config
        self.towns_client = towns_client or TownsClient(
            base_url=config.api.base_url,
            timeout=config.api.timeout_seconds,
        )
        self.ui = ui or UiSurface(config.controls.initial_town_count)

        self._state = initial_state(config.controls.initial_town_count)
        self._lock = threading.Lock()

        debounce_kwargs = {}
        if timer_factory is not None:
            debounce_kwargs["timer_factory"] = timer_factory
        self._slider = Debouncer(
            self._apply_slider_value,
            config.controls.debounce_ms,
            **debounce_kwargs,
        )

    @property
    def state(self) -> MapState:
        """Current map state."""
        with self._lock:
            return self._state

    @property
    def town_count(self) -> int:
        return self.state.town_count

    def fetch_and_render(self) -> CycleResult:
        """Fetch towns for the current count and replace the marker set.

        The loading indicator is shown for the whole cycle. On failure the
        drawn markers are left as they were and one notification is raised.
        A response arriving after a newer cycle was applied is discarded.

        Returns:
            CycleResult describing what happened
        """
        with self._lock:
            self._state, ticket = issue_ticket(self._state)

        result = CycleResult(
            sequence=ticket.sequence,
            town_count=ticket.town_count,
        )

        with self.ui.loading.shown():
            try:
                towns = self.towns_client.fetch_towns(ticket.town_count)
            except TownsFetchError as e:
                logger.error("Error fetching or plotting towns: %s", e)
                self.ui.notifications.notify(self.config.notification_message)
                result.error = str(e)
                return result

            # Pure core function
            built = build_markers(towns)

            for name in built.skipped_names:
                logger.warning("Invalid coordinates for town: %s", name)

            with self._lock:
                self._state, applied = apply_markers(
                    self._state,
                    ticket,
                    built.markers,
                )

        result.towns_fetched = len(towns)
        result.markers_drawn = len(built.markers)
        result.skipped = built.skipped_names
        result.applied = applied

        if not applied:
            logger.info(
                "Discarding stale response for cycle %d (cycle %d already drawn)",
                ticket.sequence,
                self.state.last_applied,
            )

        logger.info("%s", result.summary)

        return result

    def reload(self) -> CycleResult:
        """Reload button handler: rerun the cycle with the current count."""
        return self.fetch_and_render()

    def on_slider_input(self, value: int) -> None:
        """Slider input handler.

        Debounced: only the last value of a burst is applied.
        """
        self._slider(value)

    def _apply_slider_value(self, value: int) -> CycleResult:
        """Debounced slider action: update readout and count, then fetch."""
        self.ui.count_display.set(value)
        with self._lock:
            self._state = set_town_count(self._state, value)
        logger.info("Town count set to %d", value)
        return self.fetch_and_render()

    def flush_pending_input(self) -> None:
        """Apply a pending slider value immediately."""
        self._slider.flush()

    def shutdown(self) -> None:
        """Drop any pending slider action."""
        self._slider.cancel()
