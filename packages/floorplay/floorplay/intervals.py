"""Interval resolution over a sorted track."""
from __future__ import annotations

from bisect import bisect_right

from floorplay.types import Bracket, EntityId, Track, NotEnoughSamplesError


def resolve(track: Track, time_sec: float, entity_id: EntityId | None = None) -> Bracket:
    """Return the adjacent pair with ``a.t_sec <= time_sec < b.t_sec``.

    Times before the first sample resolve to the first pair and times at or
    after the last sample resolve to the last pair, so every finite time
    maps to exactly one interval. Raises NotEnoughSamplesError for tracks
    shorter than two samples.
    """
    n = len(track)
    if n < 2:
        raise NotEnoughSamplesError(entity_id, n)
    i = bisect_right(track, time_sec, key=lambda s: s.t_sec) - 1
    i = max(0, min(i, n - 2))
    return Bracket(track[i], track[i + 1])
