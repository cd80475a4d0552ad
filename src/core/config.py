"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field


# Town feed endpoint; the town count is appended to this prefix
DEFAULT_TOWNS_API_URL = "http://34.147.162.172/Circles/Towns/"

OSM_TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
OSM_ATTRIBUTION = "© OpenStreetMap contributors"


@dataclass
class MapConfig:
    """Leaflet viewport configuration.

    Attributes:
        center_latitude: Initial map center latitude
        center_longitude: Initial map center longitude
        zoom: Initial zoom level
        max_zoom: Maximum zoom level of the tile layer
        tile_url: Tile URL template
        attribution: Tile attribution text
    """
    center_latitude: float = 54.0
    center_longitude: float = -2.0
    zoom: int = 6
    max_zoom: int = 18
    tile_url: str = OSM_TILE_URL
    attribution: str = OSM_ATTRIBUTION


@dataclass
class TownsApiConfig:
    """Town feed configuration.

    Attributes:
        base_url: URL prefix; the town count is appended
        timeout_seconds: Request timeout
    """
    base_url: str = DEFAULT_TOWNS_API_URL
    timeout_seconds: int = 30


@dataclass
class ControlsConfig:
    """Reload button and slider configuration.

    Attributes:
        initial_town_count: Town count before any slider input
        slider_min: Smallest selectable town count
        slider_max: Largest selectable town count
        slider_step: Slider increment
        debounce_ms: Quiet period before a slider change triggers a fetch
        reload_position: Map corner for the reload button
        reload_label: Reload button text
    """
    initial_town_count: int = 50
    slider_min: int = 1
    slider_max: int = 500
    slider_step: int = 1
    debounce_ms: int = 300
    reload_position: str = "topright"
    reload_label: str = "Reload Towns"


@dataclass
class PulseConfig:
    """Post-render pulse animation configuration.

    Attributes:
        enabled: Whether markers pulse after a render
        radius_delta: Radius growth during the first phase
        opacity_delta: Fill opacity drop during the first phase
        phase_duration_ms: Duration of each of the two phases
    """
    enabled: bool = True
    radius_delta: float = 2.0
    opacity_delta: float = 0.2
    phase_duration_ms: int = 1000


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        map: Viewport and tile layer settings
        api: Town feed settings
        controls: Reload/slider settings
        pulse: Pulse animation settings
        notification_message: Text of the blocking notification on fetch failure
    """
    map: MapConfig = field(default_factory=MapConfig)
    api: TownsApiConfig = field(default_factory=TownsApiConfig)
    controls: ControlsConfig = field(default_factory=ControlsConfig)
    pulse: PulseConfig = field(default_factory=PulseConfig)
    notification_message: str = "Unable to load towns. Please try again later."


# Valid Leaflet control corners
CONTROL_POSITIONS = ("topleft", "topright", "bottomleft", "bottomright")


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field path that has an error
        message: Human-readable error message
        severity: 'error' for critical issues, 'warning' for non-critical
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of configuration validation.

    Attributes:
        valid: True if no critical errors
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError]

    @property
    def has_warnings(self) -> bool:
        return any(e.severity == "warning" for e in self.errors)

    @property
    def has_errors(self) -> bool:
        return any(e.severity == "error" for e in self.errors)


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude and longitude values.

    Pure function.

    Args:
        lat: Latitude to validate
        lon: Longitude to validate
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    errors.extend(validate_coordinates(
        config.map.center_latitude,
        config.map.center_longitude,
        "map.center",
    ))

    if not 0 <= config.map.zoom <= config.map.max_zoom:
        errors.append(ValidationError(
            field="map.zoom",
            message=f"Zoom {config.map.zoom} outside [0, {config.map.max_zoom}]",
        ))

    if not config.api.base_url:
        errors.append(ValidationError(
            field="api.base_url",
            message="Town feed URL is empty",
        ))
    elif not config.api.base_url.endswith("/"):
        errors.append(ValidationError(
            field="api.base_url",
            message="Town feed URL does not end with '/'; the count is appended directly",
            severity="warning",
        ))

    if config.api.timeout_seconds <= 0:
        errors.append(ValidationError(
            field="api.timeout_seconds",
            message=f"Timeout must be positive, got {config.api.timeout_seconds}",
        ))

    controls = config.controls
    if controls.slider_min < 1:
        errors.append(ValidationError(
            field="controls.slider_min",
            message=f"Slider minimum must be at least 1, got {controls.slider_min}",
        ))

    if controls.slider_min > controls.slider_max:
        errors.append(ValidationError(
            field="controls",
            message=f"slider_min ({controls.slider_min}) > slider_max ({controls.slider_max})",
        ))
    elif not controls.slider_min <= controls.initial_town_count <= controls.slider_max:
        errors.append(ValidationError(
            field="controls.initial_town_count",
            message=(
                f"Initial town count {controls.initial_town_count} outside slider range "
                f"[{controls.slider_min}, {controls.slider_max}]"
            ),
        ))

    if controls.debounce_ms < 0:
        errors.append(ValidationError(
            field="controls.debounce_ms",
            message=f"Debounce period cannot be negative, got {controls.debounce_ms}",
        ))

    if controls.reload_position not in CONTROL_POSITIONS:
        errors.append(ValidationError(
            field="controls.reload_position",
            message=f"Unknown control position '{controls.reload_position}'",
        ))

    if config.pulse.phase_duration_ms <= 0:
        errors.append(ValidationError(
            field="pulse.phase_duration_ms",
            message=f"Phase duration must be positive, got {config.pulse.phase_duration_ms}",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
