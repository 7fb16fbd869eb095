"""
Player entity - factory and controller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from crawler.components.position import Direction, Position
from crawler.systems.motion import MotionPlan, plan_motion
from crawler.systems.movement import MoveResult, apply_result, resolve_command
from crawler.systems.occupancy import resolve_message
from crawler.world.dungeon import Level
from crawler_engine.core import Command, CrawlerConfig, CrawlerEvent, Entity, World
from crawler_engine.graphics.tween import Pose

logger = logging.getLogger(__name__)

PLAYER_TAG = "player"


@dataclass(frozen=True)
class CommandOutcome:
    """
    Everything one command produced.

    Attributes:
        command: The handled command
        result: Movement decision
        motion: Pose transition to play back
        message: Text for the cell after an accepted command, None when rejected
    """
    command: Command
    result: MoveResult
    motion: MotionPlan
    message: Optional[str]


def spawn_position(level: Optional[Level]) -> Position:
    """Position at a level's PlayerStart, or Left at (0, 0) when it has none."""
    start = level.player_start if level is not None else None
    if start is None:
        if level is not None:
            logger.warning("Level has no PlayerStart; spawning at (0, 0)")
        return Position(direction=Direction.LEFT, x=0, z=0)
    return Position(direction=start.direction, x=start.x, z=start.z)


def create_player(
    world: World,
    level: Optional[Level] = None,
    position: Optional[Position] = None,
    name: str = "Player",
) -> Entity:
    """
    Factory function to create the player entity.

    Args:
        world: World to add player to
        level: Level whose PlayerStart sets the spawn position
        position: Explicit spawn position (wins over level)
        name: Player name

    Returns:
        The created player entity
    """
    if position is None:
        position = spawn_position(level)

    player = world.create_entity(name)
    player.add_tag(PLAYER_TAG)
    player.add(position)

    logger.debug("Spawned player at %s (%d, %d)", position.direction, position.x, position.z)
    world.event_bus.publish(CrawlerEvent.PLAYER_SPAWNED, entity=player, position=position)
    return player


class PlayerController:
    """
    Turns player commands into movement, motion and messages.

    This is a utility class rather than a System because it only
    ever handles the single player entity.
    """

    def __init__(self, world: World, config: Optional[CrawlerConfig] = None):
        self.world = world
        self.config = config or CrawlerConfig()
        self.can_move: bool = True

    @property
    def player(self) -> Optional[Entity]:
        """
        The player entity, or None when there is none.

        Raises:
            RuntimeError: If more than one player exists
        """
        return self.world.get_single(PLAYER_TAG, Position)

    def handle(
        self,
        command: Command,
        level: Level,
        start: Optional[Pose] = None,
    ) -> Optional[CommandOutcome]:
        """
        Handle one command for the player.

        Args:
            command: Command to handle
            level: Active level
            start: Live pose to start the transition from

        Returns:
            The outcome, or None when there is no player or movement is frozen
        """
        if not self.can_move:
            return None

        player = self.player
        if player is None:
            return None

        position = player.get(Position)
        result = resolve_command(position, command, level)
        motion = plan_motion(result, self.config, start)
        bus = self.world.event_bus

        if not result.accepted:
            bus.publish(CrawlerEvent.PLAYER_BLOCKED, entity=player, result=result, motion=motion)
            return CommandOutcome(command, result, motion, None)

        apply_result(position, result)
        message = resolve_message(level, position.x, position.z)
        logger.debug("%s -> %s (%d, %d)", command.name, position.direction, position.x, position.z)

        bus.publish(CrawlerEvent.PLAYER_MOVED, entity=player, result=result, motion=motion)
        bus.publish(CrawlerEvent.MESSAGE_CHANGED, text=message)
        return CommandOutcome(command, result, motion, message)

    def freeze(self) -> None:
        """Stop handling commands."""
        self.can_move = False

    def unfreeze(self) -> None:
        """Resume handling commands."""
        self.can_move = True
