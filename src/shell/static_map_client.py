"""Static Map Client - Imperative Shell.

This module handles generating static snapshot images of the marker set
using OpenStreetMap tiles. All I/O is contained here; snapshot
configuration is in the core module.
"""

import io
import logging
from dataclasses import dataclass

from staticmap import StaticMap, CircleMarker

from src.core.static_map import SnapshotConfig


logger = logging.getLogger(__name__)


# staticmap has no {s} subdomain support, so use the single-host endpoint
DEFAULT_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    error: str | None = None


class StaticMapClient:
    """Client for generating static map images.

    This is part of the imperative shell - it handles I/O (fetching map tiles
    and rendering images).
    """

    def __init__(self, tile_url: str | None = None) -> None:
        """Initialize static map client.

        Args:
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
        """
        self.tile_url = tile_url or DEFAULT_TILE_URL

    def generate_map(self, config: SnapshotConfig) -> MapImageResult:
        """Generate a static snapshot of the marker set.

        This method performs I/O (fetches map tiles from tile server).

        Args:
            config: Snapshot configuration from core module

        Returns:
            MapImageResult with image bytes or error
        """
        logger.info(
            "Generating snapshot with %d markers",
            len(config.markers),
        )

        try:
            static_map = StaticMap(
                config.width,
                config.height,
                url_template=self.tile_url,
            )

            for marker in config.markers:
                static_map.add_marker(CircleMarker(
                    (marker.longitude, marker.latitude),  # (lon, lat) order for staticmap
                    marker.color,
                    marker.radius,
                ))

            if config.markers:
                image = static_map.render()
            else:
                image = static_map.render(
                    zoom=config.zoom,
                    center=(config.center_longitude, config.center_latitude),
                )

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info(
                "Generated snapshot image: %d bytes",
                len(image_bytes),
            )

            return MapImageResult(
                success=True,
                image_bytes=image_bytes,
            )

        except Exception as e:
            logger.error("Failed to generate snapshot: %s", str(e))
            return MapImageResult(
                success=False,
                error=str(e),
            )
