import json
import pytest
from crawler.components.position import Direction, Position
from crawler.save.manager import (
    FileSaveStorage,
    MemorySaveStorage,
    SaveEvent,
    SaveManager,
)

@pytest.fixture
def save_events(event_bus):
    seen = []
    def handler(event):
        seen.append(event.type)
    for event_type in SaveEvent:
        event_bus.subscribe(event_type, handler, weak=False)
    return seen

@pytest.fixture
def manager(event_bus):
    return SaveManager(MemorySaveStorage(), event_bus)

def test_round_trip(manager, save_events):
    position = Position(direction=Direction.DOWN, x=3, z=4)

    assert manager.save_game(position, 2)
    loaded = manager.load_game()

    assert loaded is not None
    level, restored = loaded
    assert level == 2
    assert restored.as_tuple() == (Direction.DOWN, 3, 4)
    assert save_events == [
        SaveEvent.SAVE_STARTED,
        SaveEvent.SAVE_COMPLETED,
        SaveEvent.LOAD_STARTED,
        SaveEvent.LOAD_COMPLETED,
    ]

def test_document_layout(manager):
    manager.save_game(Position(direction=Direction.RIGHT, x=1, z=0), 0)
    data = json.loads(manager.storage.read())

    assert data["player_position"] == {"direction": "RIGHT", "x": 1, "z": 0}
    assert data["dungeon_level"] == 0
    assert data["version"] == SaveManager.VERSION
    assert "checksum" in data

def test_missing_save(manager, save_events):
    assert manager.load_game() is None
    assert not manager.has_save
    assert save_events == []

@pytest.mark.parametrize("text", [
    "{not json",
    "[]",
    json.dumps({"dungeon_level": 0}),
    json.dumps({"player_position": {"direction": "UP", "x": 0, "z": 0}, "dungeon_level": -1}),
    json.dumps({"player_position": {"direction": "NORTH", "x": 0, "z": 0}, "dungeon_level": 0}),
    json.dumps({"player_position": {"direction": "UP", "x": "far", "z": 0}, "dungeon_level": 0}),
])
def test_corrupt_save_is_absent(event_bus, save_events, text):
    manager = SaveManager(MemorySaveStorage({"save_data": text}), event_bus)

    assert manager.has_save
    assert manager.load_game() is None
    assert save_events[-1] is SaveEvent.LOAD_FAILED

def test_checksum_mismatch(manager):
    manager.save_game(Position(direction=Direction.UP, x=0, z=0), 0)
    data = json.loads(manager.storage.read())
    data["dungeon_level"] = 5
    manager.storage.write(json.dumps(data))

    assert manager.load_game() is None

def test_legacy_save_without_checksum(event_bus):
    text = json.dumps({"player_position": {"direction": "Right", "x": 2, "z": 1}, "dungeon_level": 1})
    manager = SaveManager(MemorySaveStorage({"save_data": text}), event_bus)

    level, position = manager.load_game()
    assert level == 1
    assert position.as_tuple() == (Direction.RIGHT, 2, 1)

def test_delete_save(manager):
    manager.save_game(Position(), 0)
    assert manager.has_save
    assert manager.delete_save()
    assert not manager.has_save
    assert manager.load_game() is None

def test_memory_storage_key():
    store = {}
    manager = SaveManager(MemorySaveStorage(store))
    manager.save_game(Position(), 0)
    assert "save_data" in store

def test_file_storage(tmp_path):
    path = tmp_path / "saves" / "save.json"
    manager = SaveManager(FileSaveStorage(path))

    assert manager.load_game() is None
    assert manager.save_game(Position(direction=Direction.LEFT, x=5, z=6), 1)
    assert path.exists()

    level, position = SaveManager(FileSaveStorage(path)).load_game()
    assert (level, position.as_tuple()) == (1, (Direction.LEFT, 5, 6))

    assert manager.delete_save()
    assert not path.exists()

def test_write_failure(tmp_path, event_bus, save_events):
    # A directory where the file should be
    path = tmp_path / "save.json"
    path.mkdir()
    manager = SaveManager(FileSaveStorage(path), event_bus)

    assert manager.save_game(Position(), 0) is False
    assert save_events == [SaveEvent.SAVE_STARTED, SaveEvent.SAVE_FAILED]

def test_save_file_not_utf8(tmp_path, event_bus, save_events):
    path = tmp_path / "save.json"
    path.write_bytes(b'\xff\xfe{"dungeon_level": 0}')
    manager = SaveManager(FileSaveStorage(path), event_bus)

    assert manager.has_save
    assert manager.load_game() is None
    assert save_events == [SaveEvent.LOAD_FAILED]
