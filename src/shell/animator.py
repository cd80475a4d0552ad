"""Marker Animators - Imperative Shell.

Animators attach the post-render pulse to a drawn map. The phases come
from the core; each animator turns them into its drawing stack's terms.
"""

import json
from typing import Protocol, Sequence

import folium
from branca.element import MacroElement
from jinja2 import Template as JinjaTemplate

from src.core.config import PulseConfig
from src.core.markers import Marker
from src.core.pulse import pulse_keyframes, pulse_phases


class MarkerAnimator(Protocol):
    """Animates markers once they have been drawn."""

    def animate(
        self,
        folium_map: folium.Map,
        layers: Sequence[tuple[Marker, folium.CircleMarker]],
    ) -> None: ...


class NullAnimator:
    """Animator that leaves markers still."""

    def animate(
        self,
        folium_map: folium.Map,
        layers: Sequence[tuple[Marker, folium.CircleMarker]],
    ) -> None:
        return None


class _PulseScript(MacroElement):
    """Runs each marker through its keyframes once, then stops."""

    _template = JinjaTemplate(
        """
        {% macro script(this, kwargs) %}
        (function(plan) {
            function tween(layer, from, to, done) {
                var start = null;
                function step(ts) {
                    if (start === null) { start = ts; }
                    var t = to.duration > 0 ? Math.min(1, (ts - start) / to.duration) : 1;
                    layer.setRadius(from.radius + (to.radius - from.radius) * t);
                    layer.setStyle({
                        fillOpacity: from.fillOpacity + (to.fillOpacity - from.fillOpacity) * t
                    });
                    if (t < 1) {
                        window.requestAnimationFrame(step);
                    } else {
                        done();
                    }
                }
                window.requestAnimationFrame(step);
            }
            plan.forEach(function(item) {
                var current = item.base;
                var frames = item.frames.slice();
                (function next() {
                    var frame = frames.shift();
                    if (!frame) { return; }
                    tween(item.layer, current, frame, function() {
                        current = frame;
                        next();
                    });
                })();
            });
        })([
            {% for item in this.plan %}
            {layer: {{ item.layer }}, base: {{ item.base }}, frames: {{ item.frames }}},
            {% endfor %}
        ]);
        {% endmacro %}
        """
    )

    def __init__(self, plan: list[dict[str, str]]) -> None:
        super().__init__()
        self._name = "PulseScript"
        self.plan = plan


class LeafletPulseAnimator:
    """One grow/shrink pulse per render, driven by requestAnimationFrame."""

    def __init__(self, config: PulseConfig | None = None) -> None:
        self.config = config or PulseConfig()

    def build_plan(
        self,
        layers: Sequence[tuple[Marker, folium.CircleMarker]],
    ) -> list[dict[str, str]]:
        """Build the per-layer keyframe plan the browser script consumes."""
        phases = pulse_phases(self.config)
        plan = []

        for marker, layer in layers:
            frames = [
                {
                    "radius": k.radius,
                    "fillOpacity": k.fill_opacity,
                    "duration": k.duration_ms,
                }
                for k in pulse_keyframes(marker, phases)
            ]
            plan.append({
                "layer": layer.get_name(),
                "base": json.dumps({
                    "radius": marker.radius,
                    "fillOpacity": marker.fill_opacity,
                }),
                "frames": json.dumps(frames),
            })

        return plan

    def animate(
        self,
        folium_map: folium.Map,
        layers: Sequence[tuple[Marker, folium.CircleMarker]],
    ) -> None:
        if not self.config.enabled or not layers:
            return
        folium_map.add_child(_PulseScript(self.build_plan(layers)))
