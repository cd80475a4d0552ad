"""Leaflet Page Renderer - Imperative Shell.

Builds the interactive map page with folium: tile layer, one circle
marker per town, the reload control, the town slider and the loading
indicator. The page talks back to the service through the control API.
"""

import html
import json
import logging

import folium
from branca.element import MacroElement
from jinja2 import Template as JinjaTemplate

from src.core.config import ControlsConfig, MapConfig
from src.core.markers import Marker
from src.core.state import MapState
from src.shell.animator import LeafletPulseAnimator, MarkerAnimator


logger = logging.getLogger(__name__)


# How often the page polls the service for state changes (ms)
DEFAULT_POLL_INTERVAL_MS = 500


class _ReloadControl(MacroElement):
    """Leaflet control button that asks the service to reload towns."""

    _template = JinjaTemplate(
        """
        {% macro script(this, kwargs) %}
        (function() {
            var reloadButton = L.control({position: {{ this.position|tojson }}});
            reloadButton.onAdd = function() {
                var div = L.DomUtil.create('div', 'leaflet-control-button');
                div.innerHTML = {{ this.label|tojson }};
                L.DomEvent.disableClickPropagation(div);
                div.onclick = function() {
                    fetch({{ this.url|tojson }}, {method: 'POST'});
                };
                return div;
            };
            reloadButton.addTo({{ this._parent.get_name() }});
        })();
        {% endmacro %}
        """
    )

    def __init__(self, position: str, label: str, url: str) -> None:
        super().__init__()
        self._name = "ReloadControl"
        self.position = position
        self.label = label
        self.url = url


class _PopupOnHover(MacroElement):
    """Opens a circle marker's popup on mouse-over."""

    _template = JinjaTemplate(
        """
        {% macro script(this, kwargs) %}
        {{ this._parent.get_name() }}.eachLayer(function(layer) {
            if (layer instanceof L.CircleMarker) {
                layer.on('mouseover', function() { layer.openPopup(); });
            }
        });
        {% endmacro %}
        """
    )

    def __init__(self) -> None:
        super().__init__()
        self._name = "PopupOnHover"


_CONTROLS_STYLE = """
<style>
    .leaflet-control-button {
        background: #fff;
        padding: 6px 10px;
        border-radius: 4px;
        box-shadow: 0 1px 4px rgba(0,0,0,0.3);
        cursor: pointer;
        font: 13px/1.4 sans-serif;
    }
    #townControls {
        position: fixed; bottom: 20px; left: 50%; transform: translateX(-50%);
        z-index: 9999; background: rgba(255,255,255,0.92);
        padding: 8px 14px; border-radius: 6px;
        box-shadow: 0 1px 4px rgba(0,0,0,0.2); font: 13px/1.4 sans-serif;
    }
    #loadingMessage {
        display: none; position: fixed; top: 10px; left: 50%;
        transform: translateX(-50%); z-index: 9999;
        background: rgba(0,0,0,0.75); color: #fff;
        padding: 6px 14px; border-radius: 4px; font: 13px/1.4 sans-serif;
    }
</style>
"""


class LeafletPageRenderer:
    """Renders the map page for a map state.

    This is part of the imperative shell - it produces the HTML the
    browser runs.
    """

    def __init__(
        self,
        map_config: MapConfig | None = None,
        controls_config: ControlsConfig | None = None,
        animator: MarkerAnimator | None = None,
        api_prefix: str = "/api",
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    ) -> None:
        """Initialize renderer.

        Args:
            map_config: Viewport and tile settings
            controls_config: Reload/slider settings
            animator: Post-render marker animator (pulse by default)
            api_prefix: URL prefix of the control API
            poll_interval_ms: State polling interval for the page
        """
        self.map_config = map_config or MapConfig()
        self.controls_config = controls_config or ControlsConfig()
        self.animator = animator if animator is not None else LeafletPulseAnimator()
        self.api_prefix = api_prefix.rstrip("/")
        self.poll_interval_ms = poll_interval_ms

    def _base_map(self) -> folium.Map:
        config = self.map_config
        folium_map = folium.Map(
            location=[config.center_latitude, config.center_longitude],
            zoom_start=config.zoom,
            max_zoom=config.max_zoom,
            tiles=None,
        )
        folium.TileLayer(
            tiles=config.tile_url,
            attr=config.attribution,
            max_zoom=config.max_zoom,
            name="OpenStreetMap",
        ).add_to(folium_map)
        return folium_map

    def _circle_marker(self, marker: Marker) -> folium.CircleMarker:
        circle = folium.CircleMarker(
            location=[marker.latitude, marker.longitude],
            radius=marker.radius,
            color=marker.color,
            fill=True,
            fill_color=marker.fill_color,
            fill_opacity=marker.fill_opacity,
            popup=folium.Popup(folium.Html(marker.popup_html, script=True), max_width=300),
        )
        circle.options.update({"className": marker.class_name})
        return circle

    def _add_markers(
        self,
        folium_map: folium.Map,
        markers: tuple[Marker, ...],
    ) -> list[tuple[Marker, folium.CircleMarker]]:
        group = folium.FeatureGroup(name="Towns")
        layers = []
        for marker in markers:
            circle = self._circle_marker(marker)
            circle.add_to(group)
            layers.append((marker, circle))
        group.add_to(folium_map)
        return layers

    def _controls_html(self, state: MapState) -> str:
        controls = self.controls_config
        return (
            _CONTROLS_STYLE
            + '<div id="loadingMessage">Loading towns...</div>'
            + '<div id="townControls">'
            + '<label for="townSlider">Towns: </label>'
            + f'<input type="range" id="townSlider" min="{controls.slider_min}" '
            + f'max="{controls.slider_max}" step="{controls.slider_step}" '
            + f'value="{state.town_count}"> '
            + f'<span id="townCount">{html.escape(str(state.town_count))}</span>'
            + '</div>'
        )

    def _page_script(self, state: MapState) -> str:
        page_config = {
            "renderVersion": state.render_version,
            "stateUrl": f"{self.api_prefix}/state",
            "sliderUrl": f"{self.api_prefix}/slider",
            "pollMs": self.poll_interval_ms,
        }
        config_json = json.dumps(page_config).replace("</", "<\\/")
        return (
            "<script>\n"
            "(function(cfg) {\n"
            "    var slider = document.getElementById('townSlider');\n"
            "    slider.addEventListener('input', function() {\n"
            "        fetch(cfg.sliderUrl + '?value=' + encodeURIComponent(slider.value),\n"
            "              {method: 'POST'});\n"
            "    });\n"
            "    function poll() {\n"
            "        fetch(cfg.stateUrl).then(function(r) { return r.json(); }).then(function(s) {\n"
            "            document.getElementById('loadingMessage').style.display =\n"
            "                s.loading ? 'block' : 'none';\n"
            "            document.getElementById('townCount').textContent = s.count_display;\n"
            "            s.notifications.forEach(function(m) { window.alert(m); });\n"
            "            if (s.render_version !== cfg.renderVersion) {\n"
            "                window.location.reload();\n"
            "                return;\n"
            "            }\n"
            "            window.setTimeout(poll, cfg.pollMs);\n"
            "        }).catch(function() { window.setTimeout(poll, cfg.pollMs); });\n"
            "    }\n"
            "    window.setTimeout(poll, cfg.pollMs);\n"
            f"}})({config_json});\n"
            "</script>"
        )

    def build_map(self, state: MapState) -> folium.Map:
        """Build the folium map for a state.

        Args:
            state: Map state to draw

        Returns:
            folium.Map with markers, controls and page scripts attached
        """
        folium_map = self._base_map()
        layers = self._add_markers(folium_map, state.markers)

        folium_map.add_child(_ReloadControl(
            position=self.controls_config.reload_position,
            label=self.controls_config.reload_label,
            url=f"{self.api_prefix}/reload",
        ))
        folium_map.add_child(_PopupOnHover())

        root = folium_map.get_root()
        root.html.add_child(folium.Element(self._controls_html(state)))
        root.html.add_child(folium.Element(self._page_script(state)))

        self.animator.animate(folium_map, layers)

        return folium_map

    def render_html(self, state: MapState) -> str:
        """Render the complete HTML page for a state."""
        logger.debug(
            "Rendering page with %d markers (version %d)",
            len(state.markers),
            state.render_version,
        )
        return self.build_map(state).get_root().render()
