"""Pulse animation phases - Pure functions.

Describes the one-shot grow/shrink transition applied to markers after a
render. Renderers turn these phases into whatever their drawing stack
understands; nothing here touches a rendering library.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.core.markers import Marker

if TYPE_CHECKING:
    from src.core.config import PulseConfig


@dataclass(frozen=True)
class PulsePhase:
    """One transition step, relative to the marker's state before it.

    Attributes:
        radius_delta: Change in radius (pixels)
        opacity_delta: Change in fill opacity
        duration_ms: Transition duration in milliseconds
    """
    radius_delta: float
    opacity_delta: float
    duration_ms: int


@dataclass(frozen=True)
class PulseKeyframe:
    """Absolute target values at the end of a phase.

    Attributes:
        radius: Target radius
        fill_opacity: Target fill opacity
        duration_ms: Time to reach the target from the previous keyframe
    """
    radius: float
    fill_opacity: float
    duration_ms: int


def pulse_phases(config: "PulseConfig") -> tuple[PulsePhase, PulsePhase]:
    """Return the grow phase followed by the matching shrink phase.

    Pure function.

    Args:
        config: Pulse configuration

    Returns:
        (grow, shrink) phases; the shrink phase undoes the grow phase
    """
    grow = PulsePhase(
        radius_delta=config.radius_delta,
        opacity_delta=-config.opacity_delta,
        duration_ms=config.phase_duration_ms,
    )
    shrink = PulsePhase(
        radius_delta=-config.radius_delta,
        opacity_delta=config.opacity_delta,
        duration_ms=config.phase_duration_ms,
    )
    return grow, shrink


def pulse_keyframes(
    marker: Marker,
    phases: tuple[PulsePhase, ...],
) -> list[PulseKeyframe]:
    """Resolve phases into absolute keyframes for one marker.

    Pure function. Opacity is clamped to [0, 1]; radius never drops below 0.

    Args:
        marker: Marker to animate
        phases: Phases to apply in order

    Returns:
        One keyframe per phase
    """
    radius = marker.radius
    opacity = marker.fill_opacity
    keyframes = []

    for phase in phases:
        radius = max(0.0, radius + phase.radius_delta)
        opacity = min(1.0, max(0.0, opacity + phase.opacity_delta))
        keyframes.append(PulseKeyframe(
            radius=round(radius, 6),
            fill_opacity=round(opacity, 6),
            duration_ms=phase.duration_ms,
        ))

    return keyframes
