"""
Entities - identity plus a bag of components and tags.

Usage:
    player = world.create_entity("Player")
    player.add(Position(direction=Direction.RIGHT, x=1, z=2))
    player.add_tag("player")

    position = player.get(Position)
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Iterator, Optional, TypeVar

from crawler_engine.core.component import Component

if TYPE_CHECKING:
    from crawler_engine.core.world import World


C = TypeVar('C', bound=Component)

_next_id = itertools.count(1)


class Entity:
    """
    Holds at most one component per component type plus string tags.

    An entity that belongs to a World reports every component and tag
    change to it so the World's query indices stay current.
    """

    def __init__(self, name: str = ""):
        self._id = next(_next_id)
        self._name = name or f"Entity_{self._id}"
        self._components: dict[type[Component], Component] = {}
        self._tags: set[str] = set()
        self._world: Optional[World] = None

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def world(self) -> Optional[World]:
        return self._world

    # Components

    def add(self, component: C) -> C:
        """
        Attach a component.

        Raises:
            ValueError: If a component of the same type is attached already
        """
        key = type(component)
        if key in self._components:
            raise ValueError(f"{self._name} already has a {key.__name__}")

        self._components[key] = component
        component._entity_id = self._id
        if self._world is not None:
            self._world._component_attached(self, component)
        return component

    def remove(self, component_type: type[C]) -> Optional[C]:
        """Detach and return a component, or None when there is none."""
        component = self._components.pop(component_type, None)
        if component is None:
            return None

        component._entity_id = None
        if self._world is not None:
            self._world._component_detached(self, component)
        return component  # type: ignore[return-value]

    def get(self, component_type: type[C]) -> C:
        """
        Get an attached component.

        Raises:
            KeyError: If no component of that type is attached
        """
        try:
            return self._components[component_type]  # type: ignore[return-value]
        except KeyError:
            raise KeyError(f"{self._name} has no {component_type.__name__}") from None

    def try_get(self, component_type: type[C]) -> Optional[C]:
        return self._components.get(component_type)  # type: ignore[return-value]

    def has(self, *component_types: type[Component]) -> bool:
        """True if every given component type is attached."""
        return all(t in self._components for t in component_types)

    @property
    def components(self) -> Iterator[Component]:
        return iter(list(self._components.values()))

    # Tags

    def add_tag(self, tag: str) -> None:
        self._tags.add(tag)
        if self._world is not None:
            self._world._tag_added(self, tag)

    def remove_tag(self, tag: str) -> None:
        self._tags.discard(tag)
        if self._world is not None:
            self._world._tag_removed(self, tag)

    def has_tag(self, tag: str) -> bool:
        return tag in self._tags

    @property
    def tags(self) -> frozenset[str]:
        return frozenset(self._tags)

    def __repr__(self) -> str:
        names = ", ".join(t.__name__ for t in self._components)
        return f"Entity({self._name}, id={self._id}, components=[{names}])"

    def __hash__(self) -> int:
        return hash(self._id)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Entity) and other._id == self._id
