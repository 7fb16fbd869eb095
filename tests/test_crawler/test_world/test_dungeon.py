import pytest
from crawler.components.position import Direction
from crawler.world.dungeon import (
    Dungeon,
    EntityType,
    Level,
    LevelEntity,
    Tile,
    build_dungeon,
    load_dungeon,
    parse_walls,
)
from crawler_engine.core.config import CrawlerConfig
from crawler_engine.resources.level_source import LevelSource, LevelSourceError

def test_parse_walls_skips_junk():
    assert parse_walls("up,,banana") == frozenset({Direction.UP})

def test_parse_walls_strips_and_ignores_case():
    assert parse_walls(" Left , DOWN") == frozenset({Direction.LEFT, Direction.DOWN})

@pytest.mark.parametrize("tags", [None, "", ",,"])
def test_parse_walls_empty(tags):
    assert parse_walls(tags) == frozenset()

def test_entity_type_parse():
    assert EntityType.parse("PlayerStart") is EntityType.PLAYER_START
    assert EntityType.parse("CAT") is EntityType.CAT
    assert EntityType.parse("Dog") is None

def test_levels_in_document_order(dungeon):
    assert len(dungeon) == 3
    assert dungeon.level(0) is dungeon.levels[0]

def test_dimensions_are_floored(dungeon):
    level = dungeon.level(0)
    assert (level.width, level.length) == (3, 2)
    assert (dungeon.level(1).width, dungeon.level(1).length) == (2, 2)

def test_tiles_and_walls(dungeon):
    level = dungeon.level(0)
    assert level.get_tile(0, 0).walls == frozenset({Direction.UP})
    assert level.get_tile(1, 0).walls == frozenset()
    assert level.get_tile(2, 0).walls == frozenset({Direction.LEFT, Direction.DOWN})
    assert level.get_tile(0, 1) is None

def test_entities(dungeon):
    level = dungeon.level(0)
    start = level.player_start
    assert (start.x, start.z, start.direction) == (0, 0, Direction.RIGHT)

    cat = level.get_entity(1, 0)
    assert cat.entity_type is EntityType.CAT
    assert cat.message == "hello"
    assert cat.direction is Direction.RIGHT

    assert level.get_entity(2, 1).message is None
    assert len(level.cats) == 2

def test_get_entity_excludes_player_start(dungeon):
    assert dungeon.level(0).get_entity(0, 0) is None

def test_entity_direction_is_case_insensitive(dungeon):
    assert dungeon.level(1).player_start.direction is Direction.DOWN

def test_null_layer_instances(dungeon):
    level = dungeon.level(2)
    assert level.tiles == ()
    assert level.entities == ()
    assert level.player_start is None

def test_level_out_of_range(dungeon):
    with pytest.raises(IndexError):
        dungeon.level(3)
    with pytest.raises(IndexError):
        dungeon.level(-1)

def test_bad_direction_field_defaults_to_right(ldtk_document):
    fields = ldtk_document["levels"][0]["layerInstances"][0]["entityInstances"][0]["fieldInstances"]
    fields[0]["__value"] = "sideways"
    dungeon = build_dungeon(LevelSource.from_dict(ldtk_document))
    assert dungeon.level(0).player_start.direction is Direction.RIGHT

def test_non_string_message_is_none(ldtk_document):
    fields = ldtk_document["levels"][0]["layerInstances"][0]["entityInstances"][1]["fieldInstances"]
    fields[0]["__value"] = 42
    dungeon = build_dungeon(LevelSource.from_dict(ldtk_document))
    assert dungeon.level(0).get_entity(1, 0).message is None

def test_unknown_entity_is_fatal(ldtk_document):
    ldtk_document["levels"][0]["layerInstances"][0]["entityInstances"][1]["__identifier"] = "Dog"
    with pytest.raises(LevelSourceError, match="Dog"):
        build_dungeon(LevelSource.from_dict(ldtk_document))

def test_missing_tileset_is_fatal(ldtk_document):
    ldtk_document["levels"][0]["layerInstances"][1]["__tilesetDefUid"] = 99
    with pytest.raises(LevelSourceError, match="99"):
        build_dungeon(LevelSource.from_dict(ldtk_document))

def test_null_tileset_is_fatal(ldtk_document):
    ldtk_document["levels"][0]["layerInstances"][1]["__tilesetDefUid"] = None
    with pytest.raises(LevelSourceError):
        build_dungeon(LevelSource.from_dict(ldtk_document))

def test_layer_grid_size_falls_back_to_default(ldtk_document):
    del ldtk_document["levels"][0]["layerInstances"][1]["__gridSize"]
    dungeon = build_dungeon(LevelSource.from_dict(ldtk_document))
    assert dungeon.level(0).get_tile(2, 0) is not None

def test_custom_layer_names(ldtk_document):
    layers = ldtk_document["levels"][0]["layerInstances"]
    layers[0]["__identifier"] = "Markers"
    layers[1]["__identifier"] = "Walls"

    default = build_dungeon(LevelSource.from_dict(ldtk_document))
    assert default.level(0).tiles == ()

    custom = build_dungeon(
        LevelSource.from_dict(ldtk_document), entity_layer="Markers", tile_layer="Walls"
    )
    assert len(custom.level(0).tiles) == 3
    assert custom.level(0).player_start is not None

def test_first_tile_wins():
    level = Level(width=1, length=1, tiles=(
        Tile(0, 0, frozenset({Direction.UP})),
        Tile(0, 0, frozenset()),
    ))
    assert level.get_tile(0, 0).has_wall(Direction.UP)

def test_last_player_start_wins():
    level = Level(width=2, length=1, entities=(
        LevelEntity(0, 0, EntityType.PLAYER_START),
        LevelEntity(1, 0, EntityType.PLAYER_START, Direction.UP),
    ))
    assert (level.player_start.x, level.player_start.direction) == (1, Direction.UP)

def test_model_is_immutable(dungeon):
    with pytest.raises(AttributeError):
        dungeon.level(0).width = 10

def test_load_dungeon(tmp_path, ldtk_document):
    import json
    path = tmp_path / "level.ldtk"
    path.write_text(json.dumps(ldtk_document), encoding="utf-8")

    dungeon = load_dungeon(path, CrawlerConfig())
    assert isinstance(dungeon, Dungeon)
    assert len(dungeon) == 3

def test_bundled_level():
    from pathlib import Path
    path = Path(__file__).resolve().parents[3] / "assets" / "level.ldtk"

    dungeon = load_dungeon(path)

    cellar = dungeon.level(0)
    assert (cellar.width, cellar.length) == (3, 3)
    assert cellar.get_tile(0, 0).walls == frozenset({Direction.UP, Direction.LEFT})
    assert cellar.get_tile(1, 1).walls == frozenset()
    assert (cellar.player_start.x, cellar.player_start.z) == (0, 2)
    assert cellar.get_entity(2, 0).direction is Direction.LEFT
