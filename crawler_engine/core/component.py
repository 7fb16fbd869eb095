"""
Components - validated, data-only models attached to entities.

A component carries state and at most small helpers that carry out a
decision already made elsewhere (Position.go_forward()); deciding
whether a move is legal is the job of the systems.

Usage:
    @register_component
    class Position(Component):
        direction: Direction = Direction.LEFT
        x: int = 0
        z: int = 0
"""

from __future__ import annotations

from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Pydantic base for all components.

    Assignments are validated and unknown fields are rejected, so a
    component never holds data of the wrong shape.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra='forbid',
    )

    # Overrides the registry key (defaults to the class name)
    _type_name: ClassVar[str] = ""

    # Id of the entity this component is attached to
    _entity_id: Optional[int] = None

    @classmethod
    def get_type_name(cls) -> str:
        return cls._type_name or cls.__name__

    def clone(self) -> Component:
        """Deep, unattached copy."""
        copy = self.model_copy(deep=True)
        copy._entity_id = None
        return copy


_registry: dict[str, type[Component]] = {}


def register_component(cls: type[Component]) -> type[Component]:
    """Class decorator: make a component type findable by name."""
    _registry[cls.get_type_name()] = cls
    return cls


def get_component_type(type_name: str) -> Optional[type[Component]]:
    return _registry.get(type_name)
