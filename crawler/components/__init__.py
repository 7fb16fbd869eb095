"""
Crawler components - data-only component definitions.

All components are Pydantic models containing only data.
Decisions live in systems, not in components.
"""

from crawler.components.position import Direction, Position

__all__ = [
    "Direction",
    "Position",
]
