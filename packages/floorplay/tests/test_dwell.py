"""Tests for DwellAccumulator."""
from __future__ import annotations

import pytest
from floorplay import MOVING, STILL, DwellAccumulator, Interval, TelemetryBus

BASELINE = 10.0
RATE = 10.0


@pytest.fixture
def acc():
    return DwellAccumulator(baseline=BASELINE, growth_per_sec=RATE)


def _still(i: int) -> Interval:
    return Interval(float(i), float(i + 1), STILL)


def test_first_observation_starts_at_baseline(acc):
    assert acc.tick("P01", Interval(0.0, 5.0, MOVING), 0.0) == BASELINE
    assert acc.state("P01").last_interval_key == (0.0, 5.0)


def test_growth_across_consecutive_still_intervals(acc):
    """Magnitude keeps growing across STILL interval boundaries."""
    after = []
    for i in range(5):
        for _ in range(4):
            value = acc.tick("P01", _still(i), 0.25)
        after.append(value)
    assert after[4] > after[0]
    assert all(b > a for a, b in zip(after, after[1:]))
    assert after[4] == pytest.approx(BASELINE + RATE * 5.0)


def test_moving_interval_resets_to_baseline(acc):
    for _ in range(100):
        acc.tick("P01", _still(0), 0.5)
    assert acc.magnitude("P01") == pytest.approx(BASELINE + RATE * 50.0)
    assert acc.tick("P01", Interval(1.0, 2.0, MOVING), 0.5) == BASELINE


def test_moving_holds_baseline(acc):
    moving = Interval(0.0, 10.0, MOVING)
    for _ in range(10):
        assert acc.tick("P01", moving, 1.0) == BASELINE


def test_still_after_moving_grows_from_baseline(acc):
    acc.tick("P01", Interval(0.0, 1.0, MOVING), 1.0)
    assert acc.tick("P01", Interval(1.0, 2.0, STILL), 0.5) == pytest.approx(BASELINE + 5.0)


def test_growth_is_uncapped(acc):
    for _ in range(1000):
        acc.tick("P01", _still(0), 1.0)
    assert acc.magnitude("P01") == pytest.approx(BASELINE + RATE * 1000)


def test_zero_delta_does_not_grow(acc):
    acc.tick("P01", _still(0), 0.0)
    assert acc.magnitude("P01") == BASELINE


def test_none_interval_is_noop(acc):
    """Unclassifiable entities keep their previous magnitude."""
    assert acc.tick("P01", None, 1.0) == BASELINE
    assert acc.state("P01") is None
    acc.tick("P01", _still(0), 2.0)
    assert acc.tick("P01", None, 5.0) == pytest.approx(BASELINE + 20.0)


def test_entities_are_independent(acc):
    acc.tick("P01", _still(0), 3.0)
    acc.tick("P02", Interval(0.0, 1.0, MOVING), 3.0)
    assert acc.magnitude("P01") == pytest.approx(BASELINE + 30.0)
    assert acc.magnitude("P02") == BASELINE


def test_retain_discard_clear(acc):
    for eid in ("P01", "P02", "P03"):
        acc.tick(eid, _still(0), 1.0)
    acc.retain(["P01", "P02"])
    assert sorted(acc.tracked()) == ["P01", "P02"]
    acc.discard("P02")
    assert acc.tracked() == ["P01"]
    acc.clear()
    assert acc.tracked() == []
    assert acc.magnitude("P01") == BASELINE


def test_telemetry_events():
    bus = TelemetryBus()
    events = []
    bus.subscribe("*", lambda name, data: events.append((name, data)))
    acc = DwellAccumulator(baseline=BASELINE, growth_per_sec=RATE, bus=bus)

    acc.tick("P01", _still(0), 1.0)
    acc.tick("P01", _still(0), 1.0)
    acc.tick("P01", Interval(1.0, 2.0, MOVING), 1.0)
    bus.flush()

    names = [name for name, _ in events]
    assert names == [
        "interval_entered", "magnitude_updated",
        "magnitude_updated",
        "interval_entered", "magnitude_updated",
    ]
    assert events[0][1] == {"entity_id": "P01", "t_a": 0.0, "t_b": 1.0, "motion": STILL}
    assert events[-1][1] == {"entity_id": "P01", "magnitude": BASELINE}
