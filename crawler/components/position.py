"""
Grid position component - facing direction plus integer cell.
"""

from __future__ import annotations

import math
from enum import Enum, auto
from typing import Any, Optional

from pydantic import field_serializer, field_validator

from crawler_engine.core.component import Component, register_component


class Direction(Enum):
    """The four grid facings."""
    UP = auto()
    RIGHT = auto()
    DOWN = auto()
    LEFT = auto()

    @classmethod
    def parse(cls, text: Any, default: Optional[Direction] = None) -> Optional[Direction]:
        """
        Parse a direction token case-insensitively.

        Surrounding whitespace is ignored. Anything else (including
        non-string values) yields default.
        """
        if not isinstance(text, str):
            return default
        return cls.__members__.get(text.strip().upper(), default)

    def reverse(self) -> Direction:
        """Get the opposite direction."""
        return _REVERSE[self]

    def rotate_right(self) -> Direction:
        """Turn a quarter clockwise: Right -> Down -> Left -> Up."""
        return _ROTATE_RIGHT[self]

    def rotate_left(self) -> Direction:
        """Turn a quarter counter-clockwise: Right -> Up -> Left -> Down."""
        return _ROTATE_LEFT[self]

    @property
    def vector(self) -> tuple[int, int]:
        """Grid step (dx, dz) one cell toward this direction."""
        return _VECTORS[self]

    @property
    def yaw(self) -> float:
        """Rotation about +Y in radians (Up faces -Z)."""
        return _YAWS[self]

    def __str__(self) -> str:
        return self.name.lower()


_REVERSE = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_ROTATE_RIGHT = {
    Direction.RIGHT: Direction.DOWN,
    Direction.DOWN: Direction.LEFT,
    Direction.LEFT: Direction.UP,
    Direction.UP: Direction.RIGHT,
}

_ROTATE_LEFT = {after: before for before, after in _ROTATE_RIGHT.items()}

_VECTORS = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}

_YAWS = {
    Direction.UP: 0.0,
    Direction.RIGHT: -math.pi / 2,
    Direction.DOWN: math.pi,
    Direction.LEFT: math.pi / 2,
}


@register_component
class Position(Component):
    """
    Facing and grid cell of the player.

    Attributes:
        direction: Current facing
        x: Grid column
        z: Grid row
    """
    direction: Direction = Direction.LEFT
    x: int = 0
    z: int = 0

    @field_validator('direction', mode='before')
    @classmethod
    def _parse_direction(cls, value: Any) -> Any:
        if isinstance(value, Direction):
            return value
        direction = Direction.parse(value)
        if direction is None:
            raise ValueError(f"unknown direction {value!r}")
        return direction

    @field_serializer('direction')
    def _serialize_direction(self, direction: Direction) -> str:
        return direction.name

    def ahead(self) -> tuple[int, int]:
        """Cell one step in the facing direction."""
        dx, dz = self.direction.vector
        return self.x + dx, self.z + dz

    def behind(self) -> tuple[int, int]:
        """Cell one step opposite the facing direction."""
        dx, dz = self.direction.vector
        return self.x - dx, self.z - dz

    def go_forward(self) -> None:
        self.x, self.z = self.ahead()

    def go_backward(self) -> None:
        self.x, self.z = self.behind()

    def rotate_left(self) -> None:
        self.direction = self.direction.rotate_left()

    def rotate_right(self) -> None:
        self.direction = self.direction.rotate_right()

    def as_tuple(self) -> tuple[Direction, int, int]:
        return self.direction, self.x, self.z
