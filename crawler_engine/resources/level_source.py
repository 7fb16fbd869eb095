"""
Level source - LDtk level document adapter.

Reads an LDtk JSON project (.ldtk) into typed records:
- Pixel dimensions per level
- Tile layers (placed tiles + referenced tileset uid)
- Entity layers (entity instances with named fields)
- Tileset definitions with per-tile custom data strings

Pure parsing: no game semantics live here. The document is validated
against a JSON schema first; anything that does not fit is a
LevelSourceError, since level documents are authored asset data.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import jsonschema

logger = logging.getLogger(__name__)


class LevelSourceError(ValueError):
    """The level document is malformed or internally inconsistent."""


_PAIR = {
    "type": "array",
    "items": {"type": "integer", "minimum": 0},
    "minItems": 2,
    "maxItems": 2,
}

# Subset of the LDtk project format the crawler reads
LDTK_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["defaultGridSize", "levels"],
    "properties": {
        "defaultGridSize": {"type": "integer", "exclusiveMinimum": 0},
        "levels": {"type": "array", "items": {"$ref": "#/$defs/level"}},
        "defs": {
            "type": "object",
            "properties": {
                "tilesets": {"type": "array", "items": {"$ref": "#/$defs/tileset"}},
            },
        },
    },
    "$defs": {
        "level": {
            "type": "object",
            "required": ["pxWid", "pxHei"],
            "properties": {
                "identifier": {"type": "string"},
                "pxWid": {"type": "integer", "minimum": 0},
                "pxHei": {"type": "integer", "minimum": 0},
                "layerInstances": {
                    "type": ["array", "null"],
                    "items": {"$ref": "#/$defs/layer"},
                },
            },
        },
        "layer": {
            "type": "object",
            "required": ["__identifier"],
            "properties": {
                "__identifier": {"type": "string"},
                "__type": {"type": "string"},
                "__gridSize": {"type": "integer", "exclusiveMinimum": 0},
                "__tilesetDefUid": {"type": ["integer", "null"]},
                "gridTiles": {"type": "array", "items": {"$ref": "#/$defs/gridTile"}},
                "entityInstances": {"type": "array", "items": {"$ref": "#/$defs/entity"}},
            },
        },
        "gridTile": {
            "type": "object",
            "required": ["px", "t"],
            "properties": {
                "px": _PAIR,
                "t": {"type": "integer", "minimum": 0},
            },
        },
        "entity": {
            "type": "object",
            "required": ["__identifier", "__grid"],
            "properties": {
                "__identifier": {"type": "string"},
                "__grid": _PAIR,
                "fieldInstances": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["__identifier"],
                        "properties": {"__identifier": {"type": "string"}},
                    },
                },
            },
        },
        "tileset": {
            "type": "object",
            "required": ["uid"],
            "properties": {
                "uid": {"type": "integer"},
                "identifier": {"type": "string"},
                "customData": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["tileId", "data"],
                        "properties": {
                            "tileId": {"type": "integer"},
                            "data": {"type": "string"},
                        },
                    },
                },
            },
        },
    },
}


@dataclass
class FieldInstance:
    """A named field value on an entity instance."""
    identifier: str
    value: Any = None


@dataclass
class EntityInstance:
    """A point entity placed in an entity layer."""
    identifier: str
    grid: tuple[int, int] = (0, 0)
    fields: list[FieldInstance] = field(default_factory=list)

    def get_field(self, name: str) -> Any:
        """Value of the first field called name, or None."""
        for field_instance in self.fields:
            if field_instance.identifier == name:
                return field_instance.value
        return None

    def get_string_field(self, name: str) -> Optional[str]:
        """Value of a field if it is a string, else None."""
        value = self.get_field(name)
        return value if isinstance(value, str) else None


@dataclass
class GridTile:
    """A tile placed in a tile layer."""
    px: tuple[int, int]
    tile_id: int


@dataclass
class LayerInstance:
    """One layer of a level."""
    identifier: str
    layer_type: str = ""
    grid_size: Optional[int] = None
    tileset_def_uid: Optional[int] = None
    grid_tiles: list[GridTile] = field(default_factory=list)
    entity_instances: list[EntityInstance] = field(default_factory=list)


@dataclass
class LevelRecord:
    """One level of the document."""
    identifier: str
    px_wid: int
    px_hei: int
    layer_instances: Optional[list[LayerInstance]] = None


@dataclass
class TilesetDef:
    """A tileset definition with its per-tile custom data."""
    uid: int
    identifier: str = ""
    custom_data: dict[int, str] = field(default_factory=dict)

    def get_custom_data(self, tile_id: int) -> Optional[str]:
        """Custom data string for a tile id, or None."""
        return self.custom_data.get(tile_id)


@dataclass
class LevelDocument:
    """A parsed LDtk project."""
    default_grid_size: int
    levels: list[LevelRecord] = field(default_factory=list)
    tilesets: list[TilesetDef] = field(default_factory=list)

    def get_tileset(self, uid: Optional[int]) -> Optional[TilesetDef]:
        """Get a tileset definition by uid."""
        if uid is None:
            return None
        for tileset in self.tilesets:
            if tileset.uid == uid:
                return tileset
        return None


class LevelSource:
    """
    Reads LDtk documents into LevelDocument records.

    Usage:
        document = LevelSource.load("assets/level.ldtk")
        document = LevelSource.from_json(text)
        document = LevelSource.from_dict(data)
    """

    @classmethod
    def load(cls, path: str | Path) -> LevelDocument:
        """Load a level document from a file."""
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                text = f.read()
        except UnicodeDecodeError as e:
            raise LevelSourceError(f"Level document {path} is not UTF-8 text: {e}") from e
        logger.info("Loading level document %s", path)
        return cls.from_json(text)

    @classmethod
    def from_json(cls, text: str) -> LevelDocument:
        """Parse a level document from JSON text."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise LevelSourceError(f"Level document is not valid JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Any) -> LevelDocument:
        """Validate and parse an already-decoded level document."""
        try:
            jsonschema.validate(instance=data, schema=LDTK_SCHEMA)
        except jsonschema.ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path) or "<root>"
            raise LevelSourceError(f"Level document invalid at {location}: {e.message}") from e

        document = LevelDocument(default_grid_size=int(data['defaultGridSize']))

        for ts_data in data.get('defs', {}).get('tilesets', []):
            document.tilesets.append(cls._parse_tileset(ts_data))

        for level_data in data['levels']:
            document.levels.append(cls._parse_level(level_data))

        logger.debug(
            "Parsed level document: %d levels, %d tilesets",
            len(document.levels), len(document.tilesets),
        )
        return document

    @classmethod
    def _parse_tileset(cls, data: dict) -> TilesetDef:
        tileset = TilesetDef(
            uid=int(data['uid']),
            identifier=data.get('identifier', ''),
        )
        for entry in data.get('customData', []):
            # First entry for a tile id wins
            tileset.custom_data.setdefault(int(entry['tileId']), entry['data'])
        return tileset

    @classmethod
    def _parse_level(cls, data: dict) -> LevelRecord:
        level = LevelRecord(
            identifier=data.get('identifier', ''),
            px_wid=int(data['pxWid']),
            px_hei=int(data['pxHei']),
        )
        layers = data.get('layerInstances')
        if layers is not None:
            level.layer_instances = [cls._parse_layer(layer) for layer in layers]
        return level

    @classmethod
    def _parse_layer(cls, data: dict) -> LayerInstance:
        grid_size = data.get('__gridSize')
        tileset_uid = data.get('__tilesetDefUid')

        layer = LayerInstance(
            identifier=data['__identifier'],
            layer_type=data.get('__type', ''),
            grid_size=int(grid_size) if grid_size is not None else None,
            tileset_def_uid=int(tileset_uid) if tileset_uid is not None else None,
        )

        for tile_data in data.get('gridTiles', []):
            px = tile_data['px']
            layer.grid_tiles.append(GridTile(
                px=(int(px[0]), int(px[1])),
                tile_id=int(tile_data['t']),
            ))

        for entity_data in data.get('entityInstances', []):
            grid = entity_data['__grid']
            layer.entity_instances.append(EntityInstance(
                identifier=entity_data['__identifier'],
                grid=(int(grid[0]), int(grid[1])),
                fields=[
                    FieldInstance(
                        identifier=f['__identifier'],
                        value=f.get('__value'),
                    )
                    for f in entity_data.get('fieldInstances', [])
                ],
            ))

        return layer
