"""
Dungeon model - levels of tiles with walls plus point entities.

Built once from a LevelDocument and read-only afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, Optional

from crawler.components.position import Direction
from crawler_engine.core.config import CrawlerConfig
from crawler_engine.resources.level_source import (
    EntityInstance,
    LayerInstance,
    LevelDocument,
    LevelRecord,
    LevelSource,
    LevelSourceError,
)

logger = logging.getLogger(__name__)


class EntityType(Enum):
    """Kinds of point entity a level can hold."""
    PLAYER_START = auto()
    CAT = auto()

    @classmethod
    def parse(cls, identifier: Any) -> Optional[EntityType]:
        """Match a level-editor identifier ("PlayerStart", "cat", ...)."""
        if not isinstance(identifier, str):
            return None
        return _ENTITY_IDENTIFIERS.get(identifier.strip().lower())


_ENTITY_IDENTIFIERS = {
    "playerstart": EntityType.PLAYER_START,
    "cat": EntityType.CAT,
}


@dataclass(frozen=True)
class Tile:
    """Wall configuration of one grid cell."""
    x: int
    z: int
    walls: frozenset[Direction] = frozenset()

    def has_wall(self, direction: Direction) -> bool:
        return direction in self.walls


@dataclass(frozen=True)
class LevelEntity:
    """A typed point entity placed on a level."""
    x: int
    z: int
    entity_type: EntityType
    direction: Direction = Direction.RIGHT
    message: Optional[str] = None


@dataclass(frozen=True)
class Level:
    """
    One playable floor.

    Attributes:
        width: Cells along x
        length: Cells along z
        tiles: Placed tiles (at most one per cell is looked up)
        entities: Point entities, including PlayerStart markers
    """
    width: int
    length: int
    tiles: tuple[Tile, ...] = ()
    entities: tuple[LevelEntity, ...] = ()

    def get_tile(self, x: int, z: int) -> Optional[Tile]:
        """Get the first tile at a cell."""
        for tile in self.tiles:
            if tile.x == x and tile.z == z:
                return tile
        return None

    def get_entity(self, x: int, z: int) -> Optional[LevelEntity]:
        """Get the first occupant of a cell. PlayerStart markers are not occupants."""
        for entity in self.entities:
            if entity.x == x and entity.z == z and entity.entity_type is not EntityType.PLAYER_START:
                return entity
        return None

    @property
    def player_start(self) -> Optional[LevelEntity]:
        """The PlayerStart marker; the last one wins when several exist."""
        start = None
        for entity in self.entities:
            if entity.entity_type is EntityType.PLAYER_START:
                start = entity
        return start

    @property
    def cats(self) -> list[LevelEntity]:
        return [e for e in self.entities if e.entity_type is EntityType.CAT]


@dataclass(frozen=True)
class Dungeon:
    """All levels of one level document, in document order."""
    levels: tuple[Level, ...] = ()

    def level(self, index: int) -> Level:
        """
        Get a level by index.

        Raises:
            IndexError: If index is out of range (negative included)
        """
        if not 0 <= index < len(self.levels):
            raise IndexError(f"Dungeon has no level {index} ({len(self.levels)} levels)")
        return self.levels[index]

    def __len__(self) -> int:
        return len(self.levels)


def parse_walls(tag_string: Optional[str]) -> frozenset[Direction]:
    """
    Parse a tile's comma-separated wall tags.

    Unknown tokens and empty entries are skipped: "up,,banana" -> {UP}.
    """
    if not tag_string:
        return frozenset()
    walls = set()
    for token in tag_string.split(','):
        direction = Direction.parse(token)
        if direction is not None:
            walls.add(direction)
    return frozenset(walls)


def build_dungeon(
    document: LevelDocument,
    entity_layer: str = "Entities",
    tile_layer: str = "Tiles",
) -> Dungeon:
    """
    Build the dungeon model from a parsed level document.

    Raises:
        LevelSourceError: If a tile layer's tileset cannot be resolved or
            an entity identifier is not recognized
    """
    levels = tuple(
        _build_level(document, record, entity_layer, tile_layer)
        for record in document.levels
    )
    logger.info("Built dungeon with %d levels", len(levels))
    return Dungeon(levels=levels)


def load_dungeon(path: str | Path, config: Optional[CrawlerConfig] = None) -> Dungeon:
    """Load a level document from a file and build the dungeon."""
    config = config or CrawlerConfig()
    return build_dungeon(
        LevelSource.load(path),
        entity_layer=config.entity_layer,
        tile_layer=config.tile_layer,
    )


def _build_level(
    document: LevelDocument,
    record: LevelRecord,
    entity_layer: str,
    tile_layer: str,
) -> Level:
    grid_size = document.default_grid_size
    tiles: list[Tile] = []
    entities: list[LevelEntity] = []

    for layer in record.layer_instances or []:
        if layer.identifier == entity_layer:
            entities.extend(_build_entity(instance) for instance in layer.entity_instances)
        elif layer.identifier == tile_layer:
            tiles.extend(_build_tiles(document, record, layer))
        else:
            logger.debug("Level %r: ignoring layer %r", record.identifier, layer.identifier)

    level = Level(
        width=record.px_wid // grid_size,
        length=record.px_hei // grid_size,
        tiles=tuple(tiles),
        entities=tuple(entities),
    )
    logger.debug(
        "Level %r: %dx%d, %d tiles, %d entities",
        record.identifier, level.width, level.length, len(level.tiles), len(level.entities),
    )
    return level


def _build_entity(instance: EntityInstance) -> LevelEntity:
    entity_type = EntityType.parse(instance.identifier)
    if entity_type is None:
        raise LevelSourceError(f"Unknown entity identifier: {instance.identifier!r}")

    x, z = instance.grid
    return LevelEntity(
        x=x,
        z=z,
        entity_type=entity_type,
        direction=Direction.parse(instance.get_field("Direction"), Direction.RIGHT),
        message=instance.get_string_field("Message"),
    )


def _build_tiles(document: LevelDocument, record: LevelRecord, layer: LayerInstance) -> list[Tile]:
    tileset = document.get_tileset(layer.tileset_def_uid)
    if tileset is None:
        raise LevelSourceError(
            f"Level {record.identifier!r} layer {layer.identifier!r}: "
            f"unknown tileset uid {layer.tileset_def_uid}"
        )

    grid_size = layer.grid_size or document.default_grid_size
    return [
        Tile(
            x=tile.px[0] // grid_size,
            z=tile.px[1] // grid_size,
            walls=parse_walls(tileset.get_custom_data(tile.tile_id)),
        )
        for tile in layer.grid_tiles
    ]
