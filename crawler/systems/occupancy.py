"""
Tile occupancy - which message, if any, the current cell shows.
"""

from __future__ import annotations

from crawler.world.dungeon import EntityType, Level
from crawler_engine.core.events import CrawlerEvent, Event, EventBus


def resolve_message(level: Level, x: int, z: int) -> str:
    """
    Message for a cell.

    A Cat with a non-empty message yields that message; anything else
    yields "" so the display is cleared.
    """
    occupant = level.get_entity(x, z)
    if occupant is not None and occupant.entity_type is EntityType.CAT and occupant.message:
        return occupant.message
    return ""


class MessageBoard:
    """
    Holds the message currently on display.

    Listens for MESSAGE_CHANGED; the last event wins.
    """

    def __init__(self, event_bus: EventBus):
        self.text = ""
        self._event_bus = event_bus
        event_bus.subscribe(CrawlerEvent.MESSAGE_CHANGED, self._on_message_changed)

    @property
    def visible(self) -> bool:
        return bool(self.text)

    def detach(self) -> None:
        self._event_bus.unsubscribe(CrawlerEvent.MESSAGE_CHANGED, self._on_message_changed)

    def _on_message_changed(self, event: Event) -> None:
        self.text = event.get("text", "")
