"""MotionSchedule - precomputed STILL/MOVING membership per interval."""
from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from floorplay.samples import canonical_id
from floorplay.types import MOVING, STILL, EntityId, Interval


@dataclass(frozen=True)
class ScheduleEntry:
    t_a: float
    t_b: float
    still: frozenset[EntityId] = field(default_factory=frozenset)
    moving: frozenset[EntityId] = field(default_factory=frozenset)

    def motion_of(self, entity_id: EntityId) -> str | None:
        key = canonical_id(entity_id)
        if key in self.moving:
            return MOVING
        if key in self.still:
            return STILL
        return None


class MotionSchedule:
    """Interval list that overrides per-sample motion labels where it applies.

    Lookup follows the half-open ``[t_a, t_b)`` rule. Times that fall in no
    entry, and entities an entry does not list, are left to the caller.
    """

    def __init__(self, entries: Iterable[ScheduleEntry]) -> None:
        self._entries = sorted(entries, key=lambda e: e.t_a)
        for prev, cur in zip(self._entries, self._entries[1:]):
            if cur.t_a < prev.t_b:
                raise ValueError(
                    f"Schedule intervals overlap: [{prev.t_a}, {prev.t_b}) "
                    f"and [{cur.t_a}, {cur.t_b})"
                )

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> MotionSchedule:
        entries = []
        for rec in records:
            t_a = float(rec["tA"])
            t_b = float(rec["tB"])
            if not (math.isfinite(t_a) and math.isfinite(t_b)) or t_b <= t_a:
                raise ValueError(f"Invalid schedule interval [{t_a}, {t_b})")
            entries.append(ScheduleEntry(
                t_a=t_a,
                t_b=t_b,
                still=frozenset(canonical_id(i) for i in rec.get("STILL", ())),
                moving=frozenset(canonical_id(i) for i in rec.get("MOVING", ())),
            ))
        return cls(entries)

    def lookup(self, time_sec: float) -> ScheduleEntry | None:
        i = bisect_right(self._entries, time_sec, key=lambda e: e.t_a) - 1
        if i < 0:
            return None
        entry = self._entries[i]
        return entry if time_sec < entry.t_b else None

    def interval_for(self, entity_id: EntityId, time_sec: float) -> Interval | None:
        entry = self.lookup(time_sec)
        if entry is None:
            return None
        motion = entry.motion_of(entity_id)
        if motion is None:
            return None
        return Interval(entry.t_a, entry.t_b, motion)

    def __len__(self) -> int:
        return len(self._entries)
