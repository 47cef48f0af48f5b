"""SampleStore - keyframe parsing and per-entity track storage."""

from __future__ import annotations

import csv
import io
import math
from bisect import bisect_right
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

from loguru import logger

from floorplay.interpolate import normalize_angle
from floorplay.types import EntityId, Sample, Track

# Bench codes of the floor plan; seated rows may omit their radius.
BENCH_CODES = frozenset({"T1", "T2", "R", "L", "B1", "B2"})

DEFAULT_SEATED_RADIUS = 0.92


def canonical_id(raw: Any) -> EntityId:
    """Trim and uppercase an entity id so every input source agrees."""
    if raw is None:
        return ""
    return str(raw).strip().upper()


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _number(value: Any) -> float | None:
    text = _text(value)
    if text is None:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_row(
    row: Mapping[str, Any], seated_radius: float = DEFAULT_SEATED_RADIUS,
) -> tuple[EntityId, Sample] | None:
    """Convert one input row into ``(entity_id, sample)``, or None if malformed."""
    entity_id = canonical_id(row.get("personId"))
    if not entity_id:
        return None
    t_sec = _number(row.get("tSec"))
    if t_sec is None:
        return None

    angle = _number(row.get("angleDeg"))
    if angle is not None:
        angle = normalize_angle(angle)

    bench = _text(row.get("bench"))
    if bench is not None:
        bench = bench.upper()
    radius = _number(row.get("radiusFactor"))
    if radius is None and bench in BENCH_CODES:
        radius = seated_radius

    return entity_id, Sample(
        t_sec=t_sec,
        angle_deg=angle,
        radius_factor=radius,
        motion_label=_text(row.get("motion")),
        bench=bench,
        notes=_text(row.get("notes")),
    )


def parse_rows(
    rows: Iterable[Mapping[str, Any]], seated_radius: float = DEFAULT_SEATED_RADIUS,
) -> tuple[dict[EntityId, list[Sample]], int]:
    """Group rows into tracks sorted by time.

    Returns the tracks and the number of rows that were skipped. Ties in
    ``t_sec`` keep their input order.
    """
    tracks: dict[EntityId, list[Sample]] = {}
    skipped = 0
    for lineno, row in enumerate(rows, start=1):
        parsed = parse_row(row, seated_radius)
        if parsed is None:
            skipped += 1
            logger.warning("Skipping malformed keyframe row {}: {!r}", lineno, dict(row))
            continue
        entity_id, sample = parsed
        tracks.setdefault(entity_id, []).append(sample)
    for samples in tracks.values():
        samples.sort(key=lambda s: s.t_sec)
    return tracks, skipped


def path_history(track: Track, time_sec: float) -> list[Sample]:
    """Samples recorded at or before ``time_sec``."""
    end = bisect_right(track, time_sec, key=lambda s: s.t_sec)
    return list(track[:end])


class SampleStore:
    """Per-entity tracks. Read-only downstream, append-only for live data."""

    def __init__(self, tracks: Mapping[EntityId, Iterable[Sample]] | None = None) -> None:
        self._tracks: dict[EntityId, list[Sample]] = {}
        self.skipped = 0
        if tracks:
            for entity_id, samples in tracks.items():
                ordered = sorted(samples, key=lambda s: s.t_sec)
                self._tracks[canonical_id(entity_id)] = ordered

    @classmethod
    def parse(
        cls, rows: Iterable[Mapping[str, Any]], seated_radius: float = DEFAULT_SEATED_RADIUS,
    ) -> SampleStore:
        tracks, skipped = parse_rows(rows, seated_radius)
        store = cls()
        store._tracks = tracks
        store.skipped = skipped
        if skipped:
            logger.info("Loaded {} track(s), skipped {} row(s)", len(tracks), skipped)
        return store

    @classmethod
    def from_csv_text(
        cls, text: str, seated_radius: float = DEFAULT_SEATED_RADIUS,
    ) -> SampleStore:
        return cls.parse(csv.DictReader(io.StringIO(text)), seated_radius)

    @classmethod
    def load_csv(
        cls, path: str | Path, seated_radius: float = DEFAULT_SEATED_RADIUS,
    ) -> SampleStore:
        with open(path, newline="", encoding="utf-8") as fh:
            return cls.parse(csv.DictReader(fh), seated_radius)

    def append(self, entity_id: EntityId, sample: Sample) -> None:
        """Append a live sample. Samples must arrive in time order."""
        key = canonical_id(entity_id)
        if not key:
            raise ValueError("entity_id must not be blank")
        track = self._tracks.setdefault(key, [])
        if track and sample.t_sec < track[-1].t_sec:
            raise ValueError(
                f"Sample at t={sample.t_sec} is earlier than the last sample "
                f"of {key!r} (t={track[-1].t_sec})"
            )
        track.append(sample)

    def track(self, entity_id: EntityId) -> Track:
        return self._tracks[canonical_id(entity_id)]

    def ids(self) -> list[EntityId]:
        return list(self._tracks)

    def __contains__(self, entity_id: object) -> bool:
        return isinstance(entity_id, str) and canonical_id(entity_id) in self._tracks

    def __iter__(self) -> Iterator[EntityId]:
        return iter(list(self._tracks))

    def __len__(self) -> int:
        return len(self._tracks)
