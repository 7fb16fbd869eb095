"""
Core engine module.

Exports:
- Entity: Entity container
- Component, register_component: Component base and registration
- World: Entity container with component/tag queries
- EventBus, Event, EngineEvent, CrawlerEvent: Event system
- Command: Player commands
- CrawlerConfig: Configuration
"""

from crawler_engine.core.entity import Entity
from crawler_engine.core.component import Component, register_component, get_component_type
from crawler_engine.core.world import World
from crawler_engine.core.events import EventBus, Event, EngineEvent, CrawlerEvent
from crawler_engine.core.actions import Command
from crawler_engine.core.config import CrawlerConfig

__all__ = [
    # ECS
    "Entity",
    "Component",
    "register_component",
    "get_component_type",
    "World",
    # Events
    "EventBus",
    "Event",
    "EngineEvent",
    "CrawlerEvent",
    # Input
    "Command",
    # Config
    "CrawlerConfig",
]
