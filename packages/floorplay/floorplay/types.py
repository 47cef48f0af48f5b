"""Shared value types and exceptions for the playback engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

EntityId = str

STILL = "STILL"
MOVING = "MOVING"

ENTERING = "entering"
ACTIVE = "active"
EXITING = "exiting"
GONE = "gone"

IntervalKey = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Sample:
    """One recorded keyframe for one entity."""

    t_sec: float
    angle_deg: float | None = None
    radius_factor: float | None = None
    motion_label: str | None = None
    bench: str | None = None
    notes: str | None = None


Track = Sequence[Sample]


@dataclass(frozen=True, slots=True)
class Bracket:
    """Adjacent pair of samples around a query time."""

    a: Sample
    b: Sample

    @property
    def t_a(self) -> float:
        return self.a.t_sec

    @property
    def t_b(self) -> float:
        return self.b.t_sec


@dataclass(frozen=True, slots=True)
class Interval:
    """Half-open span [t_a, t_b) carrying a single motion classification."""

    t_a: float
    t_b: float
    motion: str

    @property
    def key(self) -> IntervalKey:
        return (self.t_a, self.t_b)

    @property
    def still(self) -> bool:
        return self.motion == STILL


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    advance: float
    time_sec: float


@dataclass(frozen=True, slots=True)
class EntityState:
    entity_id: EntityId
    angle_deg: float | None
    radius_factor: float | None
    motion: str | None
    dwell_magnitude: float
    lifecycle_phase: str | None
    render_opacity: float
    render_radius: float | None


class NotEnoughSamplesError(ValueError):
    """Raised when a track is too short to define an interval."""

    def __init__(self, entity_id: EntityId | None, count: int) -> None:
        self.entity_id = entity_id
        self.count = count
        who = f"Entity {entity_id!r}" if entity_id is not None else "Track"
        super().__init__(f"{who} has {count} sample(s), at least 2 are required")


class UnknownEntityError(KeyError):
    """Raised when querying an entity id that has no track."""

    def __init__(self, entity_id: EntityId) -> None:
        self.entity_id = entity_id
        super().__init__(f"No track for entity {entity_id!r}")
