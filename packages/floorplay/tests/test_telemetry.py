"""Tests for TelemetryBus and the log subscriber."""
from __future__ import annotations

from floorplay import TelemetryBus, attach_logging
from floorplay.telemetry import make_log_subscriber
from loguru import logger


def test_emit_is_deferred_until_flush():
    bus = TelemetryBus()
    received = []
    bus.subscribe("state_reset", lambda name, data: received.append((name, data)))
    bus.emit("state_reset", time_sec=4.0)
    assert received == []
    assert bus.pending == 1
    bus.flush()
    assert received == [("state_reset", {"time_sec": 4.0})]
    assert bus.pending == 0


def test_events_without_subscribers_are_dropped():
    bus = TelemetryBus()
    bus.emit("magnitude_updated", entity_id="P01", magnitude=12.0)
    assert bus.pending == 0


def test_wildcard_receives_everything():
    bus = TelemetryBus()
    names = []
    bus.subscribe("*", lambda name, data: names.append(name))
    bus.emit("interval_entered", entity_id="P01")
    bus.emit("lifecycle_transitioned", entity_id="P01")
    bus.flush()
    assert names == ["interval_entered", "lifecycle_transitioned"]


def test_unsubscribe():
    bus = TelemetryBus()
    received = []

    def handler(name, data):
        received.append(name)

    bus.subscribe("state_reset", handler)
    bus.unsubscribe("state_reset", handler)
    bus.unsubscribe("state_reset", handler)
    bus.emit("state_reset")
    bus.flush()
    assert received == []


def test_handler_emits_during_flush_go_to_next_flush():
    bus = TelemetryBus()
    received = []

    def handler(name, data):
        received.append(name)
        if name == "interval_entered":
            bus.emit("magnitude_updated")

    bus.subscribe("*", handler)
    bus.emit("interval_entered")
    bus.flush()
    assert received == ["interval_entered"]
    bus.flush()
    assert received == ["interval_entered", "magnitude_updated"]


def test_clear_drops_pending():
    bus = TelemetryBus()
    bus.subscribe("*", lambda name, data: None)
    bus.emit("state_reset")
    bus.clear()
    assert bus.pending == 0


def test_log_subscriber_writes_through_loguru():
    messages = []
    logger.enable("floorplay")
    sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        bus = TelemetryBus()
        attach_logging(bus)
        bus.emit("magnitude_updated", entity_id="P01", magnitude=12.5)
        bus.flush()
    finally:
        logger.remove(sink_id)
        logger.disable("floorplay")
    assert any("magnitude_updated entity_id='P01' magnitude=12.5" in m for m in messages)


def test_log_subscriber_silent_while_disabled():
    messages = []
    sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        make_log_subscriber()("state_reset", {"time_sec": 1.0})
    finally:
        logger.remove(sink_id)
    assert messages == []
