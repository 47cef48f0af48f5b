"""Playback configuration dataclass."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class PlaybackConfig:
    """Immutable tuning constants for one playback session.

    Attributes:
        duration_sec: Length of the observation window; the clock never
            leaves ``[0, duration_sec]``.
        angle_epsilon: Largest angular change (degrees) between two samples
            that still counts as STILL.
        radius_epsilon: Largest radius change between two samples that
            still counts as STILL.
        dwell_baseline: Dwell magnitude of a moving or freshly seen entity.
        dwell_growth_per_sec: Magnitude gained per second of STILL playback.
        boundary_radius: Radius past which an active entity starts exiting.
        enter_duration: Seconds for the fade-in transition.
        exit_duration: Seconds for the fade-out transition.
        offmap_radius: Render radius an entering entity slides in from.
        exit_radius: Render radius an exiting entity slides out to.
        seated_radius: Radius assigned to bench rows that omit one.
    """

    duration_sec: float = 300.0
    angle_epsilon: float = 0.5
    radius_epsilon: float = 0.002
    dwell_baseline: float = 10.0
    dwell_growth_per_sec: float = 10.0
    boundary_radius: float = 1.0
    enter_duration: float = 0.35
    exit_duration: float = 0.6
    offmap_radius: float = 1.08
    exit_radius: float = 1.08
    seated_radius: float = 0.92

    def __post_init__(self) -> None:
        if self.duration_sec <= 0:
            raise ValueError("duration_sec must be positive")
        if self.angle_epsilon < 0 or self.radius_epsilon < 0:
            raise ValueError("motion epsilons must be non-negative")
        if self.dwell_growth_per_sec < 0:
            raise ValueError("dwell_growth_per_sec must be non-negative")
        if self.enter_duration <= 0 or self.exit_duration <= 0:
            raise ValueError("transition durations must be positive")
        if self.exit_radius <= self.boundary_radius:
            raise ValueError("exit_radius must lie past boundary_radius")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PlaybackConfig:
        """Build a config from a plain mapping, e.g. a parsed JSON file."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**{k: float(v) for k, v in data.items()})
