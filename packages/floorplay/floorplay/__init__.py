"""floorplay - Temporal playback and motion classification of tracked people."""

from loguru import logger

from floorplay.clock import PlaybackClock
from floorplay.config import PlaybackConfig
from floorplay.dwell import DwellAccumulator, DwellState
from floorplay.engine import PlaybackEngine
from floorplay.interpolate import InterpolatedPosition, interpolate, shortest_arc
from floorplay.intervals import resolve
from floorplay.lifecycle import LifecycleState, LifecycleTracker, Transition
from floorplay.motion import MotionClassifier
from floorplay.samples import SampleStore, path_history
from floorplay.schedule import MotionSchedule, ScheduleEntry
from floorplay.telemetry import TelemetryBus, attach_logging
from floorplay.types import (
    ACTIVE,
    ENTERING,
    EXITING,
    GONE,
    MOVING,
    STILL,
    Bracket,
    EntityId,
    EntityState,
    Interval,
    NotEnoughSamplesError,
    Sample,
    TickContext,
    UnknownEntityError,
)
from floorplay.world import World

# Applications opt in with logger.enable("floorplay").
logger.disable("floorplay")

__all__ = [
    "PlaybackEngine",
    "PlaybackClock",
    "PlaybackConfig",
    "SampleStore",
    "MotionSchedule",
    "ScheduleEntry",
    "MotionClassifier",
    "DwellAccumulator",
    "DwellState",
    "LifecycleTracker",
    "LifecycleState",
    "Transition",
    "TelemetryBus",
    "World",
    "attach_logging",
    "resolve",
    "interpolate",
    "shortest_arc",
    "path_history",
    "InterpolatedPosition",
    "Sample",
    "Bracket",
    "Interval",
    "EntityId",
    "EntityState",
    "TickContext",
    "NotEnoughSamplesError",
    "UnknownEntityError",
    "STILL",
    "MOVING",
    "ENTERING",
    "ACTIVE",
    "EXITING",
    "GONE",
]
