"""Tests for snapshot configuration."""

from src.core.markers import build_markers
from src.core.static_map import (
    create_snapshot_config,
    snapshot_radius,
    to_hex_color,
)
from src.core.town import Town


class TestSnapshotRadius:
    def test_sub_pixel_radius_becomes_one(self):
        assert snapshot_radius(0.5) == 1

    def test_rounds_to_nearest(self):
        assert snapshot_radius(4.6) == 5


class TestToHexColor:
    def test_named_color(self):
        assert to_hex_color("red") == "#ff0000"

    def test_hex_passthrough(self):
        assert to_hex_color("#123456") == "#123456"


class TestCreateSnapshotConfig:
    def test_markers_are_converted(self):
        markers = build_markers([
            Town("A", "X", population=10000.0, latitude=51.0, longitude=-1.0),
        ]).markers

        config = create_snapshot_config(markers, 54.0, -2.0, 6)

        assert len(config.markers) == 1
        circle = config.markers[0]
        assert (circle.latitude, circle.longitude) == (51.0, -1.0)
        assert circle.radius == 5
        assert circle.color == "#ff0000"

    def test_fits_markers_when_present(self):
        markers = build_markers([
            Town("A", "X", latitude=51.0, longitude=-1.0),
        ]).markers

        config = create_snapshot_config(markers, 54.0, -2.0, 6)

        assert config.zoom is None

    def test_empty_set_uses_map_view(self):
        config = create_snapshot_config((), 54.0, -2.0, 6, width=400, height=300)

        assert config.zoom == 6
        assert (config.center_latitude, config.center_longitude) == (54.0, -2.0)
        assert (config.width, config.height) == (400, 300)
