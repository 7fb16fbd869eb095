"""
Typed publish/subscribe bus.

Event types are Enum members, never strings.

Usage:
    bus.subscribe(CrawlerEvent.MESSAGE_CHANGED, board.on_message)
    bus.publish(CrawlerEvent.MESSAGE_CHANGED, text="Meow")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class EngineEvent(Enum):
    """Published by the World."""
    ENTITY_CREATED = auto()
    ENTITY_DESTROYED = auto()
    COMPONENT_ADDED = auto()
    COMPONENT_REMOVED = auto()


class CrawlerEvent(Enum):
    """Published by the player controller and the game session."""
    PLAYER_SPAWNED = auto()    # entity, position
    PLAYER_MOVED = auto()      # entity, result, motion
    PLAYER_BLOCKED = auto()    # entity, result, motion
    MESSAGE_CHANGED = auto()   # text ("" clears the display)
    LEVEL_CHANGED = auto()     # index


@dataclass
class Event:
    """
    One published event.

    Attributes:
        type: Enum member identifying the event
        data: Keyword arguments given to publish()
        consumed: Set by a handler to stop lower-priority handlers
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


@dataclass(eq=False)
class _Subscription:
    priority: int
    target: Any  # handler, or a weak reference to it
    one_shot: bool = False

    def resolve(self) -> Optional[EventHandler]:
        if isinstance(self.target, ref):
            return self.target()
        return self.target


class EventBus:
    """
    Dispatches events to subscribed handlers.

    - Handlers run highest priority first; equal priorities keep
      subscription order.
    - Weak subscriptions disappear once their handler is garbage collected.
    - One-shot handlers are dropped after their first call.
    - A handler may consume the event to stop the rest.
    - Events published from inside a handler are queued and dispatched
      after the current one.
    """

    def __init__(self):
        self._subscriptions: dict[Enum, list[_Subscription]] = {}
        self._pending: list[Event] = []
        self._dispatching = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe a handler.

        Args:
            event_type: Event to listen for
            handler: Called with the Event
            priority: Higher runs first
            one_shot: Unsubscribe after the first call
            weak: Hold only a weak reference to handler
        """
        target: Any = handler
        if weak:
            target = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)

        subscriptions = self._subscriptions.setdefault(event_type, [])
        position = next(
            (i for i, sub in enumerate(subscriptions) if priority > sub.priority),
            len(subscriptions),
        )
        subscriptions.insert(position, _Subscription(priority, target, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        subscriptions = self._subscriptions.get(event_type)
        if subscriptions is None:
            return
        subscriptions[:] = [sub for sub in subscriptions if sub.resolve() != handler]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Returns:
            The Event (check .consumed to see whether a handler took it)
        """
        event = Event(type=event_type, data=data)
        if self._dispatching:
            self._pending.append(event)
            return event

        self._dispatch(event)
        while self._pending:
            self._dispatch(self._pending.pop(0))
        return event

    def clear(self, event_type: Enum | None = None) -> None:
        """Drop the handlers of one event type, or of all types."""
        if event_type is None:
            self._subscriptions.clear()
        else:
            self._subscriptions.pop(event_type, None)

    def _dispatch(self, event: Event) -> None:
        subscriptions = self._subscriptions.get(event.type)
        if not subscriptions:
            return

        finished: list[_Subscription] = []
        self._dispatching = True
        try:
            for sub in list(subscriptions):
                handler = sub.resolve()
                if handler is None:
                    finished.append(sub)
                    continue

                try:
                    handler(event)
                except Exception:
                    logger.exception("Handler for %s failed", event.type)

                if sub.one_shot:
                    finished.append(sub)
                if event.consumed:
                    break
        finally:
            self._dispatching = False

        for sub in finished:
            if sub in subscriptions:
                subscriptions.remove(sub)
