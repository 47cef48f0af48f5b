"""DwellAccumulator - growing dwell magnitude while an entity stays still."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from floorplay.telemetry import INTERVAL_ENTERED, MAGNITUDE_UPDATED
from floorplay.types import EntityId, Interval, IntervalKey

if TYPE_CHECKING:
    from floorplay.telemetry import TelemetryBus


@dataclass
class DwellState:
    magnitude: float
    last_interval_key: IntervalKey | None = None


class DwellAccumulator:
    """Owns the per-entity dwell states of one playback session.

    Magnitude grows by ``growth_per_sec`` for every second spent in STILL
    intervals, carries over between consecutive STILL intervals, and is held
    at ``baseline`` for as long as the current interval is MOVING.
    """

    def __init__(
        self,
        baseline: float = 10.0,
        growth_per_sec: float = 10.0,
        bus: TelemetryBus | None = None,
    ) -> None:
        self.baseline = baseline
        self.growth_per_sec = growth_per_sec
        self._bus = bus
        self._states: dict[EntityId, DwellState] = {}

    def tick(self, entity_id: EntityId, interval: Interval | None, delta_time_sec: float) -> float:
        """Advance one entity and return its current magnitude.

        A None interval means the entity cannot be classified yet; the
        previous magnitude (or the baseline) is returned untouched.
        """
        state = self._states.get(entity_id)
        if interval is None:
            return state.magnitude if state is not None else self.baseline

        if state is None:
            state = DwellState(magnitude=self.baseline)
            self._states[entity_id] = state

        previous = state.magnitude
        if interval.key != state.last_interval_key:
            if not interval.still:
                state.magnitude = self.baseline
            state.last_interval_key = interval.key
            self._emit(INTERVAL_ENTERED, entity_id=entity_id,
                       t_a=interval.t_a, t_b=interval.t_b, motion=interval.motion)

        if interval.still:
            state.magnitude += self.growth_per_sec * delta_time_sec
        else:
            state.magnitude = self.baseline

        if state.magnitude != previous:
            self._emit(MAGNITUDE_UPDATED, entity_id=entity_id, magnitude=state.magnitude)
        return state.magnitude

    def magnitude(self, entity_id: EntityId) -> float:
        state = self._states.get(entity_id)
        return state.magnitude if state is not None else self.baseline

    def state(self, entity_id: EntityId) -> DwellState | None:
        return self._states.get(entity_id)

    def discard(self, entity_id: EntityId) -> None:
        self._states.pop(entity_id, None)

    def retain(self, entity_ids: Iterable[EntityId]) -> None:
        """Drop every state whose entity is not in ``entity_ids``."""
        keep = set(entity_ids)
        for eid in [eid for eid in self._states if eid not in keep]:
            del self._states[eid]

    def clear(self) -> None:
        self._states.clear()

    def tracked(self) -> list[EntityId]:
        return list(self._states)

    def _emit(self, event: str, **data: object) -> None:
        if self._bus is not None:
            self._bus.emit(event, **data)
