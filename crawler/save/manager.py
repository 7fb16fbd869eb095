"""
Save/Load system - session persistence.

Provides:
- Save/load of the player position and dungeon level
- File and in-memory storage backends
- Save integrity validation (schema + checksum)
- Event publishing for save/load operations
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from pathlib import Path
from typing import Any, Optional

import jsonschema
from pydantic import ValidationError

from crawler.components.position import Position
from crawler_engine.core.events import EventBus

logger = logging.getLogger(__name__)


class SaveEvent(Enum):
    """Save system events."""
    SAVE_STARTED = auto()
    SAVE_COMPLETED = auto()
    SAVE_FAILED = auto()
    LOAD_STARTED = auto()
    LOAD_COMPLETED = auto()
    LOAD_FAILED = auto()


SAVE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["player_position", "dungeon_level"],
    "properties": {
        "version": {"type": "string"},
        "player_position": {"type": "object"},
        "dungeon_level": {"type": "integer", "minimum": 0},
        "checksum": {"type": "string"},
    },
}


class SaveStorage(ABC):
    """Where a single save document lives."""

    @abstractmethod
    def read(self) -> Optional[str]:
        """Return the stored text, or None when nothing is stored."""

    @abstractmethod
    def write(self, text: str) -> None:
        """Store text, replacing any previous save."""

    @abstractmethod
    def delete(self) -> None:
        """Remove the stored save if there is one."""


class FileSaveStorage(SaveStorage):
    """Save document in a JSON file."""

    def __init__(self, path: str | Path = "save.json"):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        with open(self.path, 'r', encoding='utf-8') as f:
            return f.read()

    def write(self, text: str) -> None:
        if self.path.parent != Path('.'):
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write(text)

    def delete(self) -> None:
        if self.path.exists():
            self.path.unlink()

    def __repr__(self) -> str:
        return f"FileSaveStorage({str(self.path)!r})"


class MemorySaveStorage(SaveStorage):
    """
    Save document in a key/value store.

    Stands in for browser local storage; pass a shared dict to
    keep saves across manager instances.
    """

    def __init__(self, store: Optional[dict[str, str]] = None, key: str = "save_data"):
        self.store = store if store is not None else {}
        self.key = key

    def read(self) -> Optional[str]:
        return self.store.get(self.key)

    def write(self, text: str) -> None:
        self.store[self.key] = text

    def delete(self) -> None:
        self.store.pop(self.key, None)


class SaveManager:
    """
    Saves and loads the session state.

    The document holds the player position and the dungeon level
    index, plus a version and a checksum. A missing or corrupt save
    loads as None.

    Usage:
        save_mgr = SaveManager(FileSaveStorage("save.json"), event_bus)
        save_mgr.save_game(position, dungeon_level=0)
        loaded = save_mgr.load_game()  # (dungeon_level, position) or None
    """

    VERSION = "1.0"

    def __init__(
        self,
        storage: Optional[SaveStorage] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.storage = storage or FileSaveStorage()
        self.event_bus = event_bus

    @property
    def has_save(self) -> bool:
        """Whether anything is stored (valid or not)."""
        try:
            return self.storage.read() is not None
        except UnicodeDecodeError:
            return True
        except OSError:
            return False

    def save_game(self, position: Position, dungeon_level: int) -> bool:
        """
        Save the session state.

        Returns:
            True if save was successful
        """
        self._publish(SaveEvent.SAVE_STARTED)

        save_dict = {
            'version': self.VERSION,
            'player_position': position.model_dump(mode='json'),
            'dungeon_level': dungeon_level,
        }
        save_dict['checksum'] = self._calculate_checksum(save_dict)

        try:
            self.storage.write(json.dumps(save_dict, indent=2))
        except OSError as e:
            logger.error("Save failed: %s", e)
            self._publish(SaveEvent.SAVE_FAILED, error=str(e))
            return False

        logger.info("Saved game: level %d, %s (%d, %d)",
                    dungeon_level, position.direction, position.x, position.z)
        self._publish(SaveEvent.SAVE_COMPLETED, dungeon_level=dungeon_level)
        return True

    def load_game(self) -> Optional[tuple[int, Position]]:
        """
        Load the saved session state.

        Returns:
            (dungeon_level, position), or None when there is no save or
            it cannot be used
        """
        try:
            text = self.storage.read()
        except (OSError, UnicodeDecodeError) as e:
            return self._load_failed(f"unreadable save: {e}")

        if text is None:
            return None

        self._publish(SaveEvent.LOAD_STARTED)

        try:
            save_dict = json.loads(text)
        except json.JSONDecodeError as e:
            return self._load_failed(f"not valid JSON: {e}")

        try:
            jsonschema.validate(instance=save_dict, schema=SAVE_SCHEMA)
        except jsonschema.ValidationError as e:
            return self._load_failed(f"invalid save: {e.message}")

        checksum = save_dict.get('checksum')
        if checksum and not self._verify_checksum(save_dict, checksum):
            return self._load_failed("checksum mismatch")

        try:
            position = Position.model_validate(save_dict['player_position'])
        except ValidationError as e:
            return self._load_failed(f"invalid player position: {e}")

        dungeon_level = int(save_dict['dungeon_level'])
        logger.info("Loaded game: level %d, %s (%d, %d)",
                    dungeon_level, position.direction, position.x, position.z)
        self._publish(SaveEvent.LOAD_COMPLETED, dungeon_level=dungeon_level)
        return dungeon_level, position

    def delete_save(self) -> bool:
        """Delete the stored save."""
        try:
            self.storage.delete()
        except OSError as e:
            logger.error("Could not delete save: %s", e)
            return False
        return True

    def _load_failed(self, reason: str) -> None:
        logger.warning("Ignoring save: %s", reason)
        self._publish(SaveEvent.LOAD_FAILED, error=reason)
        return None

    def _publish(self, event_type: SaveEvent, **data: Any) -> None:
        if self.event_bus:
            self.event_bus.publish(event_type, **data)

    # Checksum validation

    def _calculate_checksum(self, data: dict) -> str:
        """Calculate checksum for save data."""
        # Deterministic JSON string
        json_str = json.dumps(data, sort_keys=True, separators=(',', ':'))
        hash_bytes = hashlib.sha256(json_str.encode('utf-8')).digest()
        return base64.b64encode(hash_bytes).decode('ascii')

    def _verify_checksum(self, data: dict, expected_checksum: str) -> bool:
        """Verify save data checksum."""
        data_copy = data.copy()
        data_copy.pop('checksum', None)
        return self._calculate_checksum(data_copy) == expected_checksum
