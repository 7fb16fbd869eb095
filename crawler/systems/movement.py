"""
Grid movement - the command state machine and wall collision.

resolve_command() decides; apply_result() writes an accepted
decision back onto the live Position component.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from crawler.components.position import Direction, Position
from crawler.world.dungeon import Level
from crawler_engine.core.actions import Command

logger = logging.getLogger(__name__)


class Verdict(Enum):
    """Outcome of one command."""
    ACCEPTED = auto()
    REJECTED = auto()


@dataclass(frozen=True)
class MoveResult:
    """
    Result of resolving one command.

    Attributes:
        verdict: ACCEPTED or REJECTED
        before: Copy of the position the command started from
        position: Position after the command (equal to before when rejected)
        attempted: Destination cell of a step, even when blocked; None for rotations
    """
    verdict: Verdict
    before: Position
    position: Position
    attempted: Optional[tuple[int, int]] = None

    @property
    def accepted(self) -> bool:
        return self.verdict is Verdict.ACCEPTED

    @property
    def moved(self) -> bool:
        """Whether the grid cell changed."""
        return (self.before.x, self.before.z) != (self.position.x, self.position.z)


def is_blocked(level: Level, x: int, z: int, direction: Direction) -> bool:
    """Whether the tile at (x, z) has a wall toward direction. No tile never blocks."""
    tile = level.get_tile(x, z)
    return tile is not None and tile.has_wall(direction)


def resolve_command(position: Position, command: Command, level: Level) -> MoveResult:
    """
    Resolve one command against a level.

    Walls are read from the current tile only. The input position is
    never mutated.
    """
    before = position.clone()
    after = position.clone()

    if command is Command.ROTATE_LEFT:
        after.rotate_left()
        return MoveResult(Verdict.ACCEPTED, before, after)

    if command is Command.ROTATE_RIGHT:
        after.rotate_right()
        return MoveResult(Verdict.ACCEPTED, before, after)

    if command is Command.STEP_FORWARD:
        wall = position.direction
        attempted = position.ahead()
    elif command is Command.STEP_BACKWARD:
        wall = position.direction.reverse()
        attempted = position.behind()
    else:
        raise ValueError(f"Unknown command: {command!r}")

    if is_blocked(level, position.x, position.z, wall):
        logger.debug("%s blocked by %s wall at (%d, %d)", command.name, wall, position.x, position.z)
        return MoveResult(Verdict.REJECTED, before, after, attempted)

    after.x, after.z = attempted
    return MoveResult(Verdict.ACCEPTED, before, after, attempted)


def apply_result(position: Position, result: MoveResult) -> None:
    """Copy an accepted result onto a live Position in place."""
    if not result.accepted:
        return
    position.direction = result.position.direction
    position.x = result.position.x
    position.z = result.position.z
