"""
Resource loading.

Exports:
- LevelSource: LDtk level document adapter
- LevelDocument and its record types
- LevelSourceError
"""

from crawler_engine.resources.level_source import (
    LevelSource,
    LevelSourceError,
    LevelDocument,
    LevelRecord,
    LayerInstance,
    EntityInstance,
    FieldInstance,
    GridTile,
    TilesetDef,
    LDTK_SCHEMA,
)

__all__ = [
    "LevelSource",
    "LevelSourceError",
    "LevelDocument",
    "LevelRecord",
    "LayerInstance",
    "EntityInstance",
    "FieldInstance",
    "GridTile",
    "TilesetDef",
    "LDTK_SCHEMA",
]
