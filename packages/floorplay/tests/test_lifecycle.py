"""Tests for LifecycleTracker."""
from __future__ import annotations

import pytest
from floorplay import ACTIVE, ENTERING, EXITING, GONE, LifecycleTracker, TelemetryBus, Transition


@pytest.fixture
def tracker():
    return LifecycleTracker(
        boundary_radius=1.0, enter_duration=0.35, exit_duration=0.6,
        offmap_radius=1.08, exit_radius=1.08,
    )


def _activate(tracker, eid="P01", radius=0.5):
    tracker.tick(eid, radius, 0.0)
    for _ in range(4):
        tracker.tick(eid, radius, 0.1)
    assert tracker.state(eid).phase == ACTIVE


def test_first_observation_enters(tracker):
    state = tracker.tick("P01", 0.5, 0.1)
    assert state.phase == ENTERING
    assert state.opacity == 0.0
    assert state.render_radius == 1.08
    assert state.visible


def test_outside_boundary_not_observed(tracker):
    assert tracker.tick("P01", 1.2, 0.1) is None
    assert tracker.state("P01") is None
    assert tracker.visible_ids() == []


def test_entering_eases_in(tracker):
    tracker.tick("P01", 0.5, 0.0)
    state = tracker.tick("P01", 0.5, 0.1)
    first = (state.render_radius, state.opacity)
    state = tracker.tick("P01", 0.5, 0.1)
    assert state.phase == ENTERING
    assert 0.0 < first[1] < state.opacity < 1.0
    assert 1.08 > first[0] > state.render_radius > 0.5


def test_entering_completes_after_duration(tracker):
    _activate(tracker)
    state = tracker.state("P01")
    assert state.opacity == 1.0
    assert state.render_radius == 0.5
    assert state.transition is None


def test_entering_retargets_true_radius(tracker):
    tracker.tick("P01", 0.5, 0.0)
    state = tracker.tick("P01", 0.3, 0.1)
    assert state.transition.to_value == 0.3
    for _ in range(3):
        state = tracker.tick("P01", 0.3, 0.1)
    assert state.phase == ACTIVE
    assert state.render_radius == 0.3


def test_active_follows_true_radius(tracker):
    _activate(tracker)
    assert tracker.tick("P01", 0.7, 0.1).render_radius == 0.7
    assert tracker.tick("P01", 1.0, 0.1).phase == ACTIVE


def test_exit_then_gone_within_duration(tracker):
    """Crossing the boundary fades the entity out within exit_duration."""
    _activate(tracker)
    state = tracker.tick("P01", 1.01, 0.1)
    assert state.phase == EXITING
    assert state.opacity == 1.0
    assert state.transition.to_value == 1.08

    phases = []
    for _ in range(6):
        phases.append(tracker.tick("P01", 1.05, 0.1).phase)
    assert phases == [EXITING] * 5 + [GONE]
    assert tracker.state("P01") is None
    assert "P01" not in tracker.visible_ids()


def test_exiting_fades_out(tracker):
    _activate(tracker)
    tracker.tick("P01", 1.1, 0.1)
    opacities = [tracker.tick("P01", 1.1, 0.1).opacity for _ in range(5)]
    assert all(b < a for a, b in zip(opacities, opacities[1:]))
    assert opacities[-1] > 0.0


def test_gone_entity_past_boundary_stays_gone(tracker):
    _activate(tracker)
    tracker.tick("P01", 1.2, 0.1)
    for _ in range(6):
        tracker.tick("P01", 1.2, 0.1)
    assert tracker.tick("P01", 1.2, 0.1) is None


def test_reappearance_creates_fresh_state(tracker):
    _activate(tracker)
    tracker.tick("P01", 1.2, 0.1)
    last = None
    for _ in range(6):
        last = tracker.tick("P01", 1.2, 0.1)
    assert last.phase == GONE
    fresh = tracker.tick("P01", 0.9, 0.1)
    assert fresh is not last
    assert fresh.phase == ENTERING


def test_phases_never_regress(tracker):
    _activate(tracker)
    tracker.tick("P01", 1.2, 0.1)
    state = tracker.tick("P01", 0.5, 0.1)
    assert state.phase == EXITING


def test_clear(tracker):
    _activate(tracker, "P01")
    _activate(tracker, "P02")
    assert tracker.visible_ids() == ["P01", "P02"]
    tracker.clear()
    assert tracker.visible_ids() == []


def test_transition_value():
    tr = Transition(0.0, 10.0, duration=2.0, elapsed=1.0, easing="linear")
    assert tr.progress == 0.5
    assert tr.value() == 5.0
    assert not tr.done
    tr.elapsed = 3.0
    assert tr.progress == 1.0
    assert tr.done


def test_transition_events():
    bus = TelemetryBus()
    seen = []
    bus.subscribe("lifecycle_transitioned", lambda name, data: seen.append((data["old"], data["new"])))
    tracker = LifecycleTracker(enter_duration=0.1, exit_duration=0.1, bus=bus)
    tracker.tick("P01", 0.5, 0.0)
    tracker.tick("P01", 0.5, 0.1)
    tracker.tick("P01", 1.5, 0.1)
    tracker.tick("P01", 1.5, 0.1)
    bus.flush()
    assert seen == [(None, ENTERING), (ENTERING, ACTIVE), (ACTIVE, EXITING), (EXITING, GONE)]
