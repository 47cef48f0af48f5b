"""Wrap-aware position interpolation between two keyframes."""
from __future__ import annotations

from dataclasses import dataclass

from floorplay.types import Sample


@dataclass(frozen=True, slots=True)
class InterpolatedPosition:
    angle_deg: float | None
    radius_factor: float | None

    @property
    def renderable(self) -> bool:
        return self.angle_deg is not None and self.radius_factor is not None


def normalize_angle(angle_deg: float) -> float:
    """Map any angle into [0, 360)."""
    result = angle_deg % 360.0
    # -1e-18 % 360 rounds up to 360.0
    return 0.0 if result >= 360.0 else result


def shortest_arc(from_deg: float, to_deg: float) -> float:
    """Signed shortest angular delta from ``from_deg`` to ``to_deg``, in (-180, 180]."""
    delta = (to_deg - from_deg + 540.0) % 360.0 - 180.0
    return 180.0 if delta == -180.0 else delta


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def interpolate(a: Sample, b: Sample, time_sec: float) -> InterpolatedPosition:
    if a.t_sec == b.t_sec:
        return InterpolatedPosition(a.angle_deg, a.radius_factor)

    ratio = clamp((time_sec - a.t_sec) / (b.t_sec - a.t_sec), 0.0, 1.0)

    radius = None
    if a.radius_factor is not None and b.radius_factor is not None:
        radius = a.radius_factor + (b.radius_factor - a.radius_factor) * ratio

    angle = None
    if a.angle_deg is not None and b.angle_deg is not None:
        angle = normalize_angle(a.angle_deg + shortest_arc(a.angle_deg, b.angle_deg) * ratio)

    return InterpolatedPosition(angle, radius)
