"""System factories run by the playback engine, in order, every tick."""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Callable

from floorplay.interpolate import interpolate
from floorplay.intervals import resolve
from floorplay.types import EntityId, Interval, NotEnoughSamplesError, Track
from floorplay.world import CurrentInterval, Position, World

if TYPE_CHECKING:
    from floorplay.dwell import DwellAccumulator
    from floorplay.lifecycle import LifecycleTracker
    from floorplay.motion import MotionClassifier
    from floorplay.samples import SampleStore
    from floorplay.schedule import MotionSchedule
    from floorplay.telemetry import TelemetryBus
    from floorplay.types import TickContext

System = Callable[[World, "TickContext"], None]


def sample_entity(
    entity_id: EntityId,
    track: Track,
    time_sec: float,
    classifier: MotionClassifier,
    schedule: MotionSchedule | None = None,
) -> tuple[Position, Interval] | None:
    """Position and classified interval of one entity at ``time_sec``.

    Returns None for tracks too short to interpolate. A schedule entry
    listing the entity takes precedence over the samples' own motion.
    """
    try:
        bracket = resolve(track, time_sec, entity_id)
    except NotEnoughSamplesError:
        return None
    position = Position.of(interpolate(bracket.a, bracket.b, time_sec))
    interval = None
    if schedule is not None:
        interval = schedule.interval_for(entity_id, time_sec)
    if interval is None:
        interval = classifier.interval_for(bracket)
    return position, interval


def still_run_start(
    entity_id: EntityId,
    track: Track,
    time_sec: float,
    classifier: MotionClassifier,
    schedule: MotionSchedule | None = None,
) -> float | None:
    """Playback time at which the unbroken STILL run covering ``time_sec`` began.

    Returns None when the entity is MOVING (or unclassifiable) at ``time_sec``.
    A run reaching back to the first sample is taken to start at 0.
    """
    sampled = sample_entity(entity_id, track, time_sec, classifier, schedule)
    if sampled is None or not sampled[1].still:
        return None
    start = sampled[1].t_a
    while start > track[0].t_sec:
        before = math.nextafter(start, -math.inf)
        sampled = sample_entity(entity_id, track, before, classifier, schedule)
        if sampled is None or not sampled[1].still:
            return start
        start = sampled[1].t_a
    return 0.0


def make_frame_system(
    store: SampleStore,
    classifier: MotionClassifier,
    schedule: MotionSchedule | None = None,
) -> System:
    """Return a system writing Position and CurrentInterval for every track."""

    def frame_system(world: World, ctx: TickContext) -> None:
        for eid in store.ids():
            world.spawn(eid)
            sampled = sample_entity(eid, store.track(eid), ctx.time_sec, classifier, schedule)
            if sampled is None:
                world.detach(eid, Position)
                world.detach(eid, CurrentInterval)
                continue
            position, interval = sampled
            world.attach(eid, position)
            world.attach(eid, CurrentInterval(interval))

    return frame_system


def make_lifecycle_system(tracker: LifecycleTracker) -> System:
    """Return a system advancing every renderable entity's lifecycle.

    Transitions run on the frame delta, so fades finish even while paused.
    Entities without a renderable position are left as they are.
    """

    def lifecycle_system(world: World, ctx: TickContext) -> None:
        for eid, (pos,) in world.query(Position):
            if not pos.renderable:
                continue
            tracker.tick(eid, pos.radius_factor, ctx.dt)

    return lifecycle_system


def make_dwell_system(
    accumulator: DwellAccumulator,
    tracker: LifecycleTracker,
) -> System:
    """Return a system feeding each visible entity's interval to the accumulator.

    Growth follows the playback advance rather than the frame delta, so a
    paused clock holds every magnitude where it is. Dwell state of entities
    that are no longer visible is discarded.
    """

    def dwell_system(world: World, ctx: TickContext) -> None:
        visible: list[EntityId] = []
        for eid, (pos, current) in world.query(Position, CurrentInterval):
            lc = tracker.state(eid)
            if not pos.renderable or lc is None or not lc.visible:
                continue
            accumulator.tick(eid, current.interval, ctx.advance)
            visible.append(eid)
        accumulator.retain(visible)

    return dwell_system


def make_telemetry_system(bus: TelemetryBus) -> System:
    def telemetry_system(world: World, ctx: TickContext) -> None:
        bus.flush()

    return telemetry_system
