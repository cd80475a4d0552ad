"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Town record parsing and validity filtering
- Population-to-radius scaling and marker construction
- Pulse animation phases
- Map state transitions
- Snapshot configuration

All functions here are deterministic and have no I/O.
"""

from src.core.town import Town, parse_towns, split_plottable
from src.core.markers import Marker, build_markers, scale_population, format_popup
from src.core.pulse import PulsePhase, pulse_phases, pulse_keyframes
from src.core.state import MapState, FetchTicket, apply_markers, issue_ticket, set_town_count
from src.core.static_map import create_snapshot_config

__all__ = [
    # Town
    "Town",
    "parse_towns",
    "split_plottable",
    # Markers
    "Marker",
    "build_markers",
    "scale_population",
    "format_popup",
    # Pulse
    "PulsePhase",
    "pulse_phases",
    "pulse_keyframes",
    # State
    "MapState",
    "FetchTicket",
    "apply_markers",
    "issue_ticket",
    "set_town_count",
    # Snapshot
    "create_snapshot_config",
]
