"""Telemetry bus the engine reports to, flushed once per tick."""
from __future__ import annotations

from typing import Any, Callable

from loguru import logger

INTERVAL_ENTERED = "interval_entered"
MAGNITUDE_UPDATED = "magnitude_updated"
LIFECYCLE_TRANSITIONED = "lifecycle_transitioned"
STATE_RESET = "state_reset"

EVENTS = (INTERVAL_ENTERED, MAGNITUDE_UPDATED, LIFECYCLE_TRANSITIONED, STATE_RESET)

Subscriber = Callable[[str, dict[str, Any]], None]


class TelemetryBus:
    """Queues events during a tick and delivers them on ``flush``.

    A subscriber registered under ``"*"`` receives every event.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscriber]] = {}
        self._pending: list[tuple[str, dict[str, Any]]] = []

    def subscribe(self, event: str, handler: Subscriber) -> None:
        self._subscribers.setdefault(event, []).append(handler)

    def unsubscribe(self, event: str, handler: Subscriber) -> None:
        handlers = self._subscribers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, **data: Any) -> None:
        # Events nobody listens to are dropped.
        if event in self._subscribers or "*" in self._subscribers:
            self._pending.append((event, data))

    def flush(self) -> None:
        pending, self._pending = self._pending, []
        for event, data in pending:
            for handler in self._subscribers.get(event, ()):
                handler(event, data)
            for handler in self._subscribers.get("*", ()):
                handler(event, data)

    def clear(self) -> None:
        self._pending.clear()

    @property
    def pending(self) -> int:
        return len(self._pending)


def make_log_subscriber(level: str = "DEBUG") -> Subscriber:
    """Subscriber that forwards every event to the floorplay logger."""

    def log_event(event: str, data: dict[str, Any]) -> None:
        fields = " ".join(f"{k}={v!r}" for k, v in data.items())
        logger.log(level, "{} {}", event, fields)

    return log_event


def attach_logging(bus: TelemetryBus, level: str = "DEBUG") -> Subscriber:
    subscriber = make_log_subscriber(level)
    bus.subscribe("*", subscriber)
    return subscriber
