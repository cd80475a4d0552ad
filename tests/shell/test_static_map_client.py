"""Tests for static map client.

Uses mocked tile fetching to avoid network calls in tests.
"""

from unittest.mock import MagicMock, patch

from src.core.static_map import SnapshotConfig, SnapshotMarker
from src.shell.static_map_client import StaticMapClient


TEST_CONFIG = SnapshotConfig(
    center_latitude=54.0,
    center_longitude=-2.0,
    zoom=None,
    width=400,
    height=300,
    markers=(
        SnapshotMarker(latitude=51.0, longitude=-1.0, radius=3, color="#ff0000"),
        SnapshotMarker(latitude=53.8, longitude=-1.55, radius=5, color="#ff0000"),
    ),
)

EMPTY_CONFIG = SnapshotConfig(
    center_latitude=54.0,
    center_longitude=-2.0,
    zoom=6,
    width=400,
    height=300,
    markers=(),
)


def _mock_render(mock_static_map_class):
    mock_map = MagicMock()
    mock_static_map_class.return_value = mock_map
    mock_image = MagicMock()
    mock_map.render.return_value = mock_image
    mock_image.save = lambda buf, format: buf.write(b"PNG_IMAGE_DATA")
    return mock_map


class TestStaticMapClientInit:
    """Tests for StaticMapClient initialization."""

    def test_default_tile_url(self):
        client = StaticMapClient()
        assert "openstreetmap" in client.tile_url.lower()

    def test_custom_tile_url(self):
        custom_url = "https://tiles.example.com/{z}/{x}/{y}.png"
        client = StaticMapClient(tile_url=custom_url)
        assert client.tile_url == custom_url


class TestStaticMapClientGenerateMap:
    """Tests for StaticMapClient.generate_map()."""

    @patch("src.shell.static_map_client.StaticMap")
    def test_successful_generation_returns_image_bytes(self, mock_static_map_class):
        _mock_render(mock_static_map_class)

        result = StaticMapClient().generate_map(TEST_CONFIG)

        assert result.success is True
        assert result.image_bytes == b"PNG_IMAGE_DATA"
        assert result.error is None

    @patch("src.shell.static_map_client.CircleMarker")
    @patch("src.shell.static_map_client.StaticMap")
    def test_adds_one_circle_per_marker(self, mock_static_map_class, mock_circle_class):
        mock_map = _mock_render(mock_static_map_class)

        StaticMapClient().generate_map(TEST_CONFIG)

        assert mock_map.add_marker.call_count == 2
        first_call = mock_circle_class.call_args_list[0]
        assert first_call.args == ((-1.0, 51.0), "#ff0000", 3)

    @patch("src.shell.static_map_client.StaticMap")
    def test_fits_markers_without_fixed_zoom(self, mock_static_map_class):
        mock_map = _mock_render(mock_static_map_class)

        StaticMapClient().generate_map(TEST_CONFIG)

        mock_map.render.assert_called_once_with()

    @patch("src.shell.static_map_client.StaticMap")
    def test_empty_marker_set_uses_center(self, mock_static_map_class):
        mock_map = _mock_render(mock_static_map_class)

        StaticMapClient().generate_map(EMPTY_CONFIG)

        mock_map.render.assert_called_once_with(zoom=6, center=(-2.0, 54.0))

    @patch("src.shell.static_map_client.StaticMap")
    def test_render_failure_returns_error(self, mock_static_map_class):
        mock_map = MagicMock()
        mock_static_map_class.return_value = mock_map
        mock_map.render.side_effect = RuntimeError("tile server down")

        result = StaticMapClient().generate_map(TEST_CONFIG)

        assert result.success is False
        assert result.image_bytes is None
        assert "tile server down" in result.error
