"""
World - the entities of a running session.

Keeps per-component-type and per-tag indices so queries never scan
every entity. Destruction is deferred until flush().

Usage:
    world = World(event_bus)

    player = world.create_entity("Player")
    player.add(Position(direction=Direction.RIGHT, x=0, z=0))
    player.add_tag("player")

    # None, the one match, or RuntimeError
    player = world.get_single("player", Position)
"""

from __future__ import annotations

from typing import Hashable, Iterator, Optional

from crawler_engine.core.component import Component
from crawler_engine.core.entity import Entity
from crawler_engine.core.events import EngineEvent, EventBus


class World:
    """Entity container with component/tag queries and lifecycle events."""

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus or EventBus()

        self._entities: dict[int, Entity] = {}
        self._doomed: list[int] = []

        # component type -> entity ids, tag -> entity ids
        self._by_component: dict[type[Component], set[int]] = {}
        self._by_tag: dict[str, set[int]] = {}

    # Lifecycle

    def create_entity(self, name: str = "") -> Entity:
        return self._attach(Entity(name))

    def add_entity(self, entity: Entity) -> Entity:
        """
        Adopt an entity built elsewhere, with its components and tags.

        Raises:
            ValueError: If the entity is in this world already
        """
        if entity.id in self._entities:
            raise ValueError(f"{entity.name} is already in this world")
        return self._attach(entity)

    def destroy_entity(self, entity: Entity | int) -> None:
        """Schedule an entity for removal on the next flush()."""
        entity_id = entity.id if isinstance(entity, Entity) else entity
        if entity_id in self._entities and entity_id not in self._doomed:
            self._doomed.append(entity_id)

    def flush(self) -> None:
        """Remove every entity scheduled by destroy_entity()."""
        doomed, self._doomed = self._doomed, []
        for entity_id in doomed:
            entity = self._entities.pop(entity_id, None)
            if entity is None:
                continue

            for component in entity.components:
                _unlink(self._by_component, type(component), entity_id)
            for tag in entity.tags:
                _unlink(self._by_tag, tag, entity_id)
            entity._world = None

            self.event_bus.publish(EngineEvent.ENTITY_DESTROYED, entity=entity)

    def clear(self) -> None:
        """Destroy every entity now."""
        for entity_id in list(self._entities):
            self.destroy_entity(entity_id)
        self.flush()
        self._by_component.clear()
        self._by_tag.clear()

    def get_entity(self, entity_id: int) -> Optional[Entity]:
        return self._entities.get(entity_id)

    @property
    def entities(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    @property
    def entity_count(self) -> int:
        return len(self._entities)

    # Queries

    def get_entities_with(self, *component_types: type[Component]) -> Iterator[Entity]:
        """Entities that have all of the given components, by id."""
        if not component_types:
            return iter(())
        ids = set.intersection(*(self._by_component.get(t, set()) for t in component_types))
        return self._resolve(ids)

    def get_entities_with_tag(self, tag: str) -> Iterator[Entity]:
        """Entities carrying a tag, by id."""
        return self._resolve(self._by_tag.get(tag, set()))

    def get_single(self, tag: str, *component_types: type[Component]) -> Optional[Entity]:
        """
        The one live entity with a tag (and the given components).

        Entities waiting for flush() do not count.

        Returns:
            The entity, or None when nothing matches

        Raises:
            RuntimeError: If more than one entity matches
        """
        matches = [
            entity for entity in self.get_entities_with_tag(tag)
            if entity.id not in self._doomed and entity.has(*component_types)
        ]
        if len(matches) > 1:
            names = ", ".join(e.name for e in matches)
            raise RuntimeError(f"Expected at most one '{tag}' entity, found {len(matches)}: {names}")
        return matches[0] if matches else None

    def _resolve(self, ids: set[int]) -> Iterator[Entity]:
        return iter([self._entities[i] for i in sorted(ids) if i in self._entities])

    # Hooks called by Entity

    def _attach(self, entity: Entity) -> Entity:
        entity._world = self
        self._entities[entity.id] = entity
        for component in entity.components:
            _link(self._by_component, type(component), entity.id)
        for tag in entity.tags:
            _link(self._by_tag, tag, entity.id)

        self.event_bus.publish(EngineEvent.ENTITY_CREATED, entity=entity)
        return entity

    def _component_attached(self, entity: Entity, component: Component) -> None:
        _link(self._by_component, type(component), entity.id)
        self.event_bus.publish(EngineEvent.COMPONENT_ADDED, entity=entity, component=component)

    def _component_detached(self, entity: Entity, component: Component) -> None:
        _unlink(self._by_component, type(component), entity.id)
        self.event_bus.publish(EngineEvent.COMPONENT_REMOVED, entity=entity, component=component)

    def _tag_added(self, entity: Entity, tag: str) -> None:
        _link(self._by_tag, tag, entity.id)

    def _tag_removed(self, entity: Entity, tag: str) -> None:
        _unlink(self._by_tag, tag, entity.id)


def _link(index: dict, key: Hashable, entity_id: int) -> None:
    index.setdefault(key, set()).add(entity_id)


def _unlink(index: dict, key: Hashable, entity_id: int) -> None:
    ids = index.get(key)
    if ids is not None:
        ids.discard(entity_id)
