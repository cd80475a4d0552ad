"""Static map configuration - Pure functions.

This module provides pure functions for generating static snapshot
parameters for the current marker set. The actual image generation (I/O)
is handled by the shell layer.
"""

from dataclasses import dataclass

from src.core.markers import Marker


# Color names the snapshot renderer understands as hex
_COLOR_HEX = {
    "red": "#ff0000",
}


@dataclass(frozen=True)
class SnapshotMarker:
    """A single circle in the snapshot.

    Attributes:
        latitude: Circle center latitude
        longitude: Circle center longitude
        radius: Radius in whole pixels (at least 1)
        color: Hex fill color
    """
    latitude: float
    longitude: float
    radius: int
    color: str


@dataclass(frozen=True)
class SnapshotConfig:
    """Immutable configuration for a static snapshot image.

    Attributes:
        center_latitude: Center latitude (used when there are no markers)
        center_longitude: Center longitude (used when there are no markers)
        zoom: Zoom level, None to fit the markers
        width: Image width in pixels
        height: Image height in pixels
        markers: Circles to draw
    """
    center_latitude: float
    center_longitude: float
    zoom: int | None
    width: int
    height: int
    markers: tuple[SnapshotMarker, ...]


def to_hex_color(color: str) -> str:
    """Return a hex color for a marker color name.

    Pure function. Hex input is returned unchanged.
    """
    if color.startswith("#"):
        return color
    return _COLOR_HEX.get(color.lower(), "#ff0000")


def snapshot_radius(radius: float) -> int:
    """Round a marker radius to whole pixels, never below 1.

    Pure function. Sub-pixel radii would vanish in a raster image.
    """
    return max(1, round(radius))


def create_snapshot_config(
    markers: tuple[Marker, ...],
    center_latitude: float,
    center_longitude: float,
    zoom: int,
    width: int = 800,
    height: int = 600,
) -> SnapshotConfig:
    """Create snapshot configuration for a marker set.

    Pure function. With markers present the zoom is left to the renderer
    so the image fits them; an empty set falls back to the map's own
    center and zoom.

    Args:
        markers: Current marker set
        center_latitude: Map center latitude
        center_longitude: Map center longitude
        zoom: Map zoom level
        width: Image width in pixels (default: 800)
        height: Image height in pixels (default: 600)

    Returns:
        SnapshotConfig with all parameters set
    """
    snapshot_markers = tuple(
        SnapshotMarker(
            latitude=m.latitude,
            longitude=m.longitude,
            radius=snapshot_radius(m.radius),
            color=to_hex_color(m.fill_color),
        )
        for m in markers
    )

    return SnapshotConfig(
        center_latitude=center_latitude,
        center_longitude=center_longitude,
        zoom=None if snapshot_markers else zoom,
        width=width,
        height=height,
        markers=snapshot_markers,
    )
