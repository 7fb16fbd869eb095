"""
Save module - session persistence.

Provides:
- Save/load of player position and dungeon level
- File and in-memory storage
- Checksum validation
"""

from crawler.save.manager import (
    SaveManager,
    SaveEvent,
    SaveStorage,
    FileSaveStorage,
    MemorySaveStorage,
    SAVE_SCHEMA,
)

__all__ = [
    "SaveManager",
    "SaveEvent",
    "SaveStorage",
    "FileSaveStorage",
    "MemorySaveStorage",
    "SAVE_SCHEMA",
]
