"""Tests for configuration models and validation."""

from src.core.config import (
    Config,
    ControlsConfig,
    MapConfig,
    TownsApiConfig,
    validate_config,
    validate_coordinates,
)


class TestDefaults:
    """Default configuration matches the UK map."""

    def test_map_defaults(self):
        config = MapConfig()

        assert (config.center_latitude, config.center_longitude) == (54.0, -2.0)
        assert config.zoom == 6
        assert config.max_zoom == 18
        assert "openstreetmap" in config.tile_url

    def test_controls_defaults(self):
        controls = ControlsConfig()

        assert controls.initial_town_count == 50
        assert controls.debounce_ms == 300
        assert controls.reload_position == "topright"

    def test_default_config_is_valid(self):
        result = validate_config(Config())

        assert result.valid is True
        assert result.errors == []


class TestValidateCoordinates:
    def test_valid(self):
        assert validate_coordinates(54.0, -2.0, "map.center") == []

    def test_out_of_range(self):
        errors = validate_coordinates(91.0, -181.0, "map.center")

        assert len(errors) == 2


class TestValidateConfig:
    def test_initial_count_outside_slider(self):
        config = Config(controls=ControlsConfig(initial_town_count=900, slider_max=500))

        result = validate_config(config)

        assert result.valid is False
        assert any(e.field == "controls.initial_town_count" for e in result.errors)

    def test_inverted_slider_range(self):
        config = Config(controls=ControlsConfig(slider_min=10, slider_max=5))

        result = validate_config(config)

        assert result.valid is False

    def test_url_without_trailing_slash_is_warning(self):
        config = Config(api=TownsApiConfig(base_url="http://example.com/towns"))

        result = validate_config(config)

        assert result.valid is True
        assert result.has_warnings is True

    def test_empty_url_is_error(self):
        config = Config(api=TownsApiConfig(base_url=""))

        assert validate_config(config).valid is False

    def test_unknown_control_position(self):
        config = Config(controls=ControlsConfig(reload_position="middle"))

        result = validate_config(config)

        assert result.has_errors is True

    def test_zoom_beyond_max(self):
        config = Config(map=MapConfig(zoom=20, max_zoom=18))

        assert validate_config(config).valid is False
