"""
Game session - the dungeon, the active level and the player.

Owns the current dungeon level index; movement never changes it,
only reset/load/change_level do.
"""

from __future__ import annotations

import logging
from typing import Optional

from crawler.components.position import Position
from crawler.save.manager import FileSaveStorage, SaveManager
from crawler.systems.occupancy import resolve_message
from crawler.world.dungeon import Dungeon, Level, load_dungeon
from crawler.world.player import CommandOutcome, PlayerController, create_player
from crawler_engine.core import Command, CrawlerConfig, CrawlerEvent, Entity, EventBus, World
from crawler_engine.graphics.tween import Pose

logger = logging.getLogger(__name__)


class GameSession:
    """
    Running game state.

    Usage:
        session = GameSession.new(CrawlerConfig(level_path="assets/level.ldtk"))
        session.load()  # saved game, or a fresh start
        outcome = session.handle(Command.STEP_FORWARD)
        session.save()
    """

    def __init__(
        self,
        dungeon: Dungeon,
        config: Optional[CrawlerConfig] = None,
        event_bus: Optional[EventBus] = None,
        save_manager: Optional[SaveManager] = None,
    ):
        self.dungeon = dungeon
        self.config = config or CrawlerConfig()
        self.event_bus = event_bus or EventBus()
        self.world = World(self.event_bus)
        self.save_manager = save_manager or SaveManager(
            FileSaveStorage(self.config.save_path), self.event_bus
        )
        self.controller = PlayerController(self.world, self.config)
        self.dungeon_level = 0

    @classmethod
    def new(cls, config: Optional[CrawlerConfig] = None, **kwargs) -> GameSession:
        """Load the dungeon from config.level_path and start a session."""
        config = config or CrawlerConfig()
        return cls(load_dungeon(config.level_path, config), config, **kwargs)

    @property
    def current_level(self) -> Level:
        return self.dungeon.level(self.dungeon_level)

    @property
    def player(self) -> Optional[Entity]:
        return self.controller.player

    def reset(self) -> None:
        """Start over on level 0 at its PlayerStart."""
        self.dungeon_level = 0
        self._spawn()
        logger.info("Session reset")

    def load(self) -> bool:
        """
        Restore the saved game, falling back to reset().

        Returns:
            True if a save was restored
        """
        loaded = self.save_manager.load_game()
        if loaded is None:
            self.reset()
            return False

        dungeon_level, position = loaded
        if dungeon_level >= len(self.dungeon):
            logger.warning("Saved level %d does not exist; starting over", dungeon_level)
            self.reset()
            return False

        self.dungeon_level = dungeon_level
        self._spawn(position)
        return True

    def save(self) -> bool:
        """Save the player position and level. False when there is no player."""
        player = self.player
        if player is None:
            return False
        return self.save_manager.save_game(player.get(Position), self.dungeon_level)

    def change_level(self, index: int) -> None:
        """
        Switch to another level and spawn at its PlayerStart.

        Raises:
            IndexError: If the level does not exist
        """
        self.dungeon.level(index)
        self.dungeon_level = index
        self._spawn()
        self.event_bus.publish(CrawlerEvent.LEVEL_CHANGED, index=index)

    def handle(self, command: Command, start: Optional[Pose] = None) -> Optional[CommandOutcome]:
        """Handle one player command on the current level."""
        return self.controller.handle(command, self.current_level, start)

    def _spawn(self, position: Optional[Position] = None) -> Entity:
        self.world.clear()
        level = self.current_level
        player = create_player(self.world, level, position)
        spawned = player.get(Position)
        self.event_bus.publish(
            CrawlerEvent.MESSAGE_CHANGED,
            text=resolve_message(level, spawned.x, spawned.z),
        )
        return player
