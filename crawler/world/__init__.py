"""
World module - dungeon model, player and session.

Provides:
- Dungeon model built from a level document
- Player factory and controller (crawler.world.player)
- Game session (crawler.world.session)

Player and session build on crawler.systems, which itself reads the
dungeon model, so they are imported from their own modules.
"""

from crawler.world.dungeon import (
    EntityType,
    Tile,
    LevelEntity,
    Level,
    Dungeon,
    parse_walls,
    build_dungeon,
    load_dungeon,
)

__all__ = [
    "EntityType",
    "Tile",
    "LevelEntity",
    "Level",
    "Dungeon",
    "parse_walls",
    "build_dungeon",
    "load_dungeon",
]
