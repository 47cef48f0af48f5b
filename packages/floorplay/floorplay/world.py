"""World - per-session entity and component storage for the derived frame."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generator, TypeVar, cast

from floorplay.interpolate import InterpolatedPosition
from floorplay.types import EntityId, Interval, UnknownEntityError

T = TypeVar("T")


@dataclass
class Position:
    """Interpolated position of an entity at the current playback time."""

    angle_deg: float | None
    radius_factor: float | None

    @classmethod
    def of(cls, pos: InterpolatedPosition) -> Position:
        return cls(pos.angle_deg, pos.radius_factor)

    @property
    def renderable(self) -> bool:
        return self.angle_deg is not None and self.radius_factor is not None


@dataclass
class CurrentInterval:
    """Classified interval an entity occupies at the current playback time."""

    interval: Interval


class World:
    """Entities keyed by their track id, each with at most one component per type.

    Entities keep their spawn order, which is the order queries yield them.
    """

    def __init__(self) -> None:
        self._components: dict[type, dict[EntityId, Any]] = {}
        self._alive: dict[EntityId, None] = {}

    def spawn(self, entity_id: EntityId) -> EntityId:
        """Register an entity. Spawning a live entity is a no-op."""
        self._alive.setdefault(entity_id, None)
        return entity_id

    def despawn(self, entity_id: EntityId) -> None:
        self._alive.pop(entity_id, None)
        for store in self._components.values():
            store.pop(entity_id, None)

    def attach(self, entity_id: EntityId, component: Any) -> None:
        if entity_id not in self._alive:
            raise UnknownEntityError(entity_id)
        self._components.setdefault(type(component), {})[entity_id] = component

    def detach(self, entity_id: EntityId, component_type: type) -> None:
        store = self._components.get(component_type)
        if store is not None:
            store.pop(entity_id, None)

    def get(self, entity_id: EntityId, component_type: type[T]) -> T:
        if entity_id not in self._alive:
            raise UnknownEntityError(entity_id)
        store = self._components.get(component_type)
        if store is None or entity_id not in store:
            raise KeyError(
                f"Entity {entity_id!r} has no {component_type.__name__} component"
            )
        return cast(T, store[entity_id])

    def find(self, entity_id: EntityId, component_type: type[T]) -> T | None:
        """Like ``get`` but returns None when the component is absent."""
        store = self._components.get(component_type)
        if store is None or entity_id not in self._alive:
            return None
        return cast("T | None", store.get(entity_id))

    def has(self, entity_id: EntityId, component_type: type) -> bool:
        if entity_id not in self._alive:
            return False
        store = self._components.get(component_type)
        return store is not None and entity_id in store

    def query(
        self, *component_types: type
    ) -> Generator[tuple[EntityId, tuple[Any, ...]], None, None]:
        if not component_types:
            return
        for eid in list(self._alive):
            components: list[Any] = []
            for ctype in component_types:
                store = self._components.get(ctype)
                if store is None or eid not in store:
                    break
                components.append(store[eid])
            else:
                yield eid, tuple(components)

    def entities(self) -> list[EntityId]:
        return list(self._alive)

    def alive(self, entity_id: EntityId) -> bool:
        return entity_id in self._alive

    def clear(self) -> None:
        """Drop every component, keeping the entities."""
        self._components.clear()
