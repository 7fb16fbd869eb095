"""
Crawler Engine

Engine layer for a grid-based first-person dungeon crawler: a small
ECS, a typed event bus, the LDtk level-document adapter and tween
descriptors for pose transitions.

Quick Start:
    from crawler_engine.resources import LevelSource
    from crawler.world import build_dungeon

    dungeon = build_dungeon(LevelSource.load("assets/level.ldtk"))
"""

__version__ = "0.1.0"

from crawler_engine.core import (
    Entity,
    Component,
    register_component,
    World,
    EventBus,
    Event,
    EngineEvent,
    CrawlerEvent,
    Command,
    CrawlerConfig,
)

__all__ = [
    # ECS
    "Entity",
    "Component",
    "register_component",
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
