"""PlaybackEngine - one playback session: clock, derived frame, and queries."""

from __future__ import annotations

from floorplay.clock import PlaybackClock
from floorplay.config import PlaybackConfig
from floorplay.dwell import DwellAccumulator
from floorplay.lifecycle import LifecycleTracker
from floorplay.motion import MotionClassifier
from floorplay.samples import SampleStore, canonical_id, path_history
from floorplay.schedule import MotionSchedule
from floorplay.systems import (
    System,
    make_dwell_system,
    make_frame_system,
    make_lifecycle_system,
    make_telemetry_system,
    sample_entity,
    still_run_start,
)
from floorplay.telemetry import STATE_RESET, TelemetryBus
from floorplay.types import (
    ACTIVE,
    EntityId,
    EntityState,
    Sample,
    TickContext,
    UnknownEntityError,
)
from floorplay.world import CurrentInterval, Position, World


class PlaybackEngine:
    """Drives every per-entity computation from a single clock.

    The host calls ``tick(dt)`` once per animation frame. Each tick runs the
    frame, lifecycle and dwell systems, then any systems added with
    ``add_system``, then flushes telemetry, so queries between ticks always
    see one consistent frame.
    """

    def __init__(
        self,
        store: SampleStore,
        config: PlaybackConfig | None = None,
        schedule: MotionSchedule | None = None,
        bus: TelemetryBus | None = None,
    ) -> None:
        self._config = config if config is not None else PlaybackConfig()
        cfg = self._config
        self._store = store
        self._schedule = schedule
        self._bus = bus if bus is not None else TelemetryBus()
        self._clock = PlaybackClock(cfg.duration_sec)
        self._world = World()
        self._classifier = MotionClassifier(cfg.angle_epsilon, cfg.radius_epsilon)
        self._dwell = DwellAccumulator(cfg.dwell_baseline, cfg.dwell_growth_per_sec, self._bus)
        self._lifecycle = LifecycleTracker(
            boundary_radius=cfg.boundary_radius,
            enter_duration=cfg.enter_duration,
            exit_duration=cfg.exit_duration,
            offmap_radius=cfg.offmap_radius,
            exit_radius=cfg.exit_radius,
            bus=self._bus,
        )
        self._systems: list[System] = [
            make_frame_system(store, self._classifier, schedule),
            make_lifecycle_system(self._lifecycle),
            make_dwell_system(self._dwell, self._lifecycle),
        ]
        self._extra_systems: list[System] = []
        self._flush = make_telemetry_system(self._bus)
        self._refresh()

    # -- Accessors --

    @property
    def config(self) -> PlaybackConfig:
        return self._config

    @property
    def clock(self) -> PlaybackClock:
        return self._clock

    @property
    def world(self) -> World:
        return self._world

    @property
    def store(self) -> SampleStore:
        return self._store

    @property
    def bus(self) -> TelemetryBus:
        return self._bus

    @property
    def dwell(self) -> DwellAccumulator:
        return self._dwell

    @property
    def lifecycle(self) -> LifecycleTracker:
        return self._lifecycle

    @property
    def time_sec(self) -> float:
        return self._clock.time_sec

    def add_system(self, system: System) -> None:
        self._extra_systems.append(system)

    # -- Clock control --

    def play(self) -> None:
        self._clock.play()

    def pause(self) -> None:
        self._clock.pause()

    def set_speed(self, multiplier: float) -> None:
        self._clock.set_speed(multiplier)

    def set_time(self, seconds: float) -> None:
        """Scrub to ``seconds``. Jumping backwards discards all derived state."""
        previous = self._clock.set_time(seconds)
        if self._clock.time_sec < previous:
            self.reset_derived_state()
        self._refresh()

    def tick(self, dt: float) -> None:
        advance = self._clock.tick(dt)
        self._run(dt, advance)

    def run(self, frames: int, dt: float) -> None:
        """Run ``frames`` ticks of ``dt`` seconds each, e.g. for headless replay."""
        for _ in range(frames):
            self.tick(dt)

    def reset_derived_state(self) -> None:
        self._dwell.clear()
        self._lifecycle.clear()
        self._world.clear()
        self._bus.emit(STATE_RESET, time_sec=self._clock.time_sec)

    def _refresh(self) -> None:
        self._run(0.0, 0.0)

    def _run(self, dt: float, advance: float) -> None:
        ctx = TickContext(
            tick_number=self._clock.tick_number,
            dt=dt,
            advance=advance,
            time_sec=self._clock.time_sec,
        )
        for system in self._systems:
            system(self._world, ctx)
        for system in self._extra_systems:
            system(self._world, ctx)
        self._flush(self._world, ctx)

    # -- Queries --

    def get_entity_state_at(
        self, entity_id: EntityId, time_sec: float | None = None,
    ) -> EntityState:
        """Render state of one entity.

        At the current time (the default) this is the live frame: dwell and
        lifecycle carry everything accumulated by previous ticks. Any other
        ``time_sec`` is answered as if playback had run uninterrupted up to
        it: dwell counts from the start of the STILL run covering that time,
        and an entity inside the boundary is shown as fully active.
        """
        eid = self._require(entity_id)
        if not self._is_live(time_sec):
            return self._derived_state(eid, time_sec)

        angle = radius = motion = None
        pos = self._world.find(eid, Position)
        current = self._world.find(eid, CurrentInterval)
        if pos is not None:
            angle, radius = pos.angle_deg, pos.radius_factor
        if current is not None:
            motion = current.interval.motion

        lc = self._lifecycle.state(eid)
        return EntityState(
            entity_id=eid,
            angle_deg=angle,
            radius_factor=radius,
            motion=motion,
            dwell_magnitude=self._dwell.magnitude(eid),
            lifecycle_phase=lc.phase if lc is not None else None,
            render_opacity=lc.opacity if lc is not None else 0.0,
            render_radius=lc.render_radius if lc is not None else None,
        )

    def get_all_visible_entity_ids(self, time_sec: float | None = None) -> list[EntityId]:
        """Ids that would be drawn at ``time_sec``, in track order."""
        if not self._is_live(time_sec):
            return [
                eid for eid in self._store.ids()
                if self._derived_state(eid, time_sec).lifecycle_phase is not None
            ]
        visible = set(self._lifecycle.visible_ids())
        result = []
        for eid in self._store.ids():
            pos = self._world.find(eid, Position)
            if eid in visible and pos is not None and pos.renderable:
                result.append(eid)
        return result

    def get_path_history(
        self, entity_id: EntityId, time_sec: float | None = None,
    ) -> list[Sample]:
        eid = self._require(entity_id)
        t = self._clock.time_sec if time_sec is None else time_sec
        return path_history(self._store.track(eid), t)

    def _require(self, entity_id: EntityId) -> EntityId:
        eid = canonical_id(entity_id)
        if eid not in self._store:
            raise UnknownEntityError(entity_id)
        return eid

    def _is_live(self, time_sec: float | None) -> bool:
        return time_sec is None or time_sec == self._clock.time_sec

    def _derived_state(self, eid: EntityId, time_sec: float) -> EntityState:
        cfg = self._config
        time_sec = max(0.0, min(time_sec, cfg.duration_sec))
        track = self._store.track(eid)
        sampled = sample_entity(eid, track, time_sec, self._classifier, self._schedule)
        if sampled is None:
            return EntityState(eid, None, None, None, cfg.dwell_baseline, None, 0.0, None)

        pos, interval = sampled
        dwell = cfg.dwell_baseline
        start = still_run_start(eid, track, time_sec, self._classifier, self._schedule)
        if start is not None:
            dwell += cfg.dwell_growth_per_sec * max(time_sec - start, 0.0)
        on_floor = pos.renderable and pos.radius_factor <= cfg.boundary_radius
        return EntityState(
            entity_id=eid,
            angle_deg=pos.angle_deg,
            radius_factor=pos.radius_factor,
            motion=interval.motion,
            dwell_magnitude=dwell,
            lifecycle_phase=ACTIVE if on_floor else None,
            render_opacity=1.0 if on_floor else 0.0,
            render_radius=pos.radius_factor if on_floor else None,
        )
