"""Marker construction - Pure functions.

Turns parsed towns into circle-marker descriptions for the map renderers.
Radius scaling and popup content live here so every renderer draws the
same marker set.
"""

import html
import math
from dataclasses import dataclass

from src.core.town import Town, split_plottable


# Radius used when a town has no population figure
DEFAULT_RADIUS = 5

# sqrt(population) multiplier
RADIUS_SCALE = 0.05

MARKER_COLOR = "red"
MARKER_FILL_OPACITY = 0.7
MARKER_CLASS_NAME = "pulsing-marker"


@dataclass(frozen=True)
class Marker:
    """Immutable circle marker for one town.

    Attributes:
        town: The town this marker represents
        radius: Circle radius in pixels (may be sub-pixel)
        color: Stroke color
        fill_color: Fill color
        fill_opacity: Fill opacity (0-1)
        class_name: CSS class the pulse animation targets
    """
    town: Town
    radius: float
    color: str = MARKER_COLOR
    fill_color: str = MARKER_COLOR
    fill_opacity: float = MARKER_FILL_OPACITY
    class_name: str = MARKER_CLASS_NAME

    @property
    def latitude(self) -> float:
        return self.town.latitude

    @property
    def longitude(self) -> float:
        return self.town.longitude

    @property
    def popup_html(self) -> str:
        return format_popup(self.town)


@dataclass(frozen=True)
class MarkerBuildResult:
    """Markers built from one feed response.

    Attributes:
        markers: One marker per plottable town
        skipped: Towns left out for missing coordinates
    """
    markers: tuple[Marker, ...]
    skipped: tuple[Town, ...]

    @property
    def skipped_names(self) -> list[str]:
        return [t.name for t in self.skipped]


def scale_population(population: float | None) -> float:
    """Map a population figure to a marker radius.

    Pure function. Falsy populations (None, 0) get the default radius;
    anything else is sqrt(population) * 0.05, so small towns get
    sub-pixel radii.

    Args:
        population: Population count or None

    Returns:
        Radius in pixels
    """
    if not population:
        return DEFAULT_RADIUS
    return math.sqrt(population) * RADIUS_SCALE


def format_population(population: float | None) -> str:
    """Format a population for display, "Unknown" when falsy."""
    if not population:
        return "Unknown"
    if float(population).is_integer():
        return str(int(population))
    return str(population)


def format_popup(town: Town) -> str:
    """Build the popup HTML shown for a town marker.

    Pure function.

    Args:
        town: Town to describe

    Returns:
        HTML fragment with name, county and population
    """
    return (
        f"<b>{html.escape(town.name)}</b><br>"
        f"County: {html.escape(town.county)}<br>"
        f"Population: {format_population(town.population)}"
    )


def build_marker(town: Town) -> Marker:
    """Build the marker for a single plottable town."""
    return Marker(town=town, radius=scale_population(town.population))


def build_markers(towns: list[Town]) -> MarkerBuildResult:
    """Build markers for every plottable town.

    Pure function. Towns without usable coordinates are returned in
    `skipped` for the caller to report.

    Args:
        towns: Parsed towns from one feed response

    Returns:
        MarkerBuildResult with markers and skipped towns
    """
    plottable, skipped = split_plottable(towns)

    return MarkerBuildResult(
        markers=tuple(build_marker(t) for t in plottable),
        skipped=tuple(skipped),
    )
