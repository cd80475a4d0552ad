"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Town feed client (HTTP)
- Configuration loading (environment/files)
- Slider debouncing (timers)
- Map page and snapshot rendering

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.towns_client import TownsClient
from src.shell.config_loader import load_config, Config
from src.shell.debounce import Debouncer
from src.shell.map_renderer import LeafletPageRenderer
from src.shell.static_map_client import StaticMapClient

__all__ = [
    "TownsClient",
    "load_config",
    "Config",
    "Debouncer",
    "LeafletPageRenderer",
    "StaticMapClient",
]
