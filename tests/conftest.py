import os
import sys
import copy
import pytest

# Ensure crawler modules can be imported
sys.path.append(os.getcwd())

LDTK_DOCUMENT = {
    "defaultGridSize": 16,
    "defs": {
        "tilesets": [
            {
                "uid": 1,
                "identifier": "Dungeon",
                "customData": [
                    {"tileId": 0, "data": "up"},
                    {"tileId": 1, "data": ""},
                    {"tileId": 2, "data": "Left, down"},
                ],
            }
        ]
    },
    "levels": [
        {
            "identifier": "Level_0",
            "pxWid": 48,
            "pxHei": 40,
            "layerInstances": [
                {
                    "__identifier": "Entities",
                    "__type": "Entities",
                    "__gridSize": 16,
                    "entityInstances": [
                        {
                            "__identifier": "PlayerStart",
                            "__grid": [0, 0],
                            "fieldInstances": [
                                {"__identifier": "Direction", "__value": "Right"},
                            ],
                        },
                        {
                            "__identifier": "Cat",
                            "__grid": [1, 0],
                            "fieldInstances": [
                                {"__identifier": "Message", "__value": "hello"},
                            ],
                        },
                        {
                            "__identifier": "Cat",
                            "__grid": [2, 1],
                            "fieldInstances": [
                                {"__identifier": "Message", "__value": None},
                            ],
                        },
                    ],
                },
                {
                    "__identifier": "Tiles",
                    "__type": "Tiles",
                    "__gridSize": 16,
                    "__tilesetDefUid": 1,
                    "gridTiles": [
                        {"px": [0, 0], "t": 0},
                        {"px": [16, 0], "t": 1},
                        {"px": [32, 0], "t": 2},
                    ],
                },
                {
                    "__identifier": "Floor",
                    "__type": "IntGrid",
                    "__gridSize": 16,
                },
            ],
        },
        {
            "identifier": "Level_1",
            "pxWid": 32,
            "pxHei": 32,
            "layerInstances": [
                {
                    "__identifier": "Entities",
                    "__type": "Entities",
                    "entityInstances": [
                        {
                            "__identifier": "playerstart",
                            "__grid": [1, 1],
                            "fieldInstances": [
                                {"__identifier": "Direction", "__value": "down"},
                            ],
                        },
                    ],
                },
            ],
        },
        {
            "identifier": "Level_2",
            "pxWid": 16,
            "pxHei": 16,
            "layerInstances": None,
        },
    ],
}


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from crawler_engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def world(event_bus):
    """Fresh World for each test."""
    from crawler_engine.core.world import World
    return World(event_bus)


@pytest.fixture
def ldtk_document():
    """Raw LDtk project: three levels, one tileset with wall tags."""
    return copy.deepcopy(LDTK_DOCUMENT)


@pytest.fixture
def dungeon(ldtk_document):
    """Dungeon built from ldtk_document."""
    from crawler_engine.resources.level_source import LevelSource
    from crawler.world.dungeon import build_dungeon
    return build_dungeon(LevelSource.from_dict(ldtk_document))
