"""LifecycleTracker - entering/active/exiting/gone state per entity."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from floorplay.easing import ease, lerp
from floorplay.telemetry import LIFECYCLE_TRANSITIONED
from floorplay.types import ACTIVE, ENTERING, EXITING, GONE, EntityId

if TYPE_CHECKING:
    from floorplay.telemetry import TelemetryBus

# Absorbs float drift when summing frame deltas up to a duration.
_TIME_EPSILON = 1e-9


@dataclass
class Transition:
    from_value: float
    to_value: float
    duration: float
    elapsed: float = 0.0
    easing: str = "linear"

    @property
    def progress(self) -> float:
        return min(self.elapsed / self.duration, 1.0)

    @property
    def done(self) -> bool:
        return self.elapsed >= self.duration - _TIME_EPSILON

    def value(self) -> float:
        return lerp(self.from_value, self.to_value, ease(self.easing, self.progress))


@dataclass
class LifecycleState:
    phase: str
    render_radius: float
    opacity: float
    transition: Transition | None = None

    @property
    def visible(self) -> bool:
        return self.phase in (ENTERING, ACTIVE, EXITING)


class LifecycleTracker:
    """Owns the per-entity lifecycle states of one playback session.

    Entities inside ``boundary_radius`` enter with an ease-out slide from
    ``offmap_radius`` and a fade-in. Once active, crossing the boundary
    starts an ease-in slide to ``exit_radius`` with a fade-out, after which
    the entity is gone and its state is dropped.
    """

    def __init__(
        self,
        boundary_radius: float = 1.0,
        enter_duration: float = 0.35,
        exit_duration: float = 0.6,
        offmap_radius: float = 1.08,
        exit_radius: float = 1.08,
        bus: TelemetryBus | None = None,
    ) -> None:
        self.boundary_radius = boundary_radius
        self.enter_duration = enter_duration
        self.exit_duration = exit_duration
        self.offmap_radius = offmap_radius
        self.exit_radius = exit_radius
        self._bus = bus
        self._states: dict[EntityId, LifecycleState] = {}

    def tick(
        self, entity_id: EntityId, radius_factor: float, delta_time_sec: float,
    ) -> LifecycleState | None:
        """Advance one entity by ``delta_time_sec`` given its true radius.

        Returns the updated state, a state in phase ``gone`` on the tick the
        exit completes, or None when the entity is not on the floor.
        """
        state = self._states.get(entity_id)
        if state is None:
            if radius_factor > self.boundary_radius:
                return None
            state = LifecycleState(
                phase=ENTERING,
                render_radius=self.offmap_radius,
                opacity=0.0,
                transition=Transition(
                    self.offmap_radius, radius_factor, self.enter_duration, easing="ease_out",
                ),
            )
            self._states[entity_id] = state
            self._emit(entity_id, None, ENTERING)
            return state

        if state.phase == ENTERING:
            tr = state.transition
            assert tr is not None
            tr.to_value = radius_factor
            tr.elapsed += delta_time_sec
            if tr.done:
                self._set_phase(entity_id, state, ACTIVE)
                state.transition = None
                state.render_radius = radius_factor
                state.opacity = 1.0
            else:
                state.render_radius = tr.value()
                state.opacity = ease(tr.easing, tr.progress)

        elif state.phase == ACTIVE:
            if radius_factor > self.boundary_radius:
                self._set_phase(entity_id, state, EXITING)
                state.transition = Transition(
                    state.render_radius, self.exit_radius, self.exit_duration, easing="ease_in",
                )
            else:
                state.render_radius = radius_factor

        elif state.phase == EXITING:
            tr = state.transition
            assert tr is not None
            tr.elapsed += delta_time_sec
            state.render_radius = tr.value()
            state.opacity = 1.0 - ease(tr.easing, tr.progress)
            if tr.done:
                self._set_phase(entity_id, state, GONE)
                state.transition = None
                state.opacity = 0.0
                del self._states[entity_id]

        return state

    def state(self, entity_id: EntityId) -> LifecycleState | None:
        return self._states.get(entity_id)

    def visible_ids(self) -> list[EntityId]:
        return [eid for eid, st in self._states.items() if st.visible]

    def clear(self) -> None:
        self._states.clear()

    def _set_phase(self, entity_id: EntityId, state: LifecycleState, phase: str) -> None:
        old = state.phase
        state.phase = phase
        self._emit(entity_id, old, phase)

    def _emit(self, entity_id: EntityId, old: str | None, new: str) -> None:
        if self._bus is not None:
            self._bus.emit(LIFECYCLE_TRANSITIONED, entity_id=entity_id, old=old, new=new)
