"""
Crawler configuration.

Holds file locations, level-document layer names and the timing of
the motion transitions. Values can be read from a plain dict (for
example a parsed JSON settings file).
"""

from __future__ import annotations

from typing import Any


class CrawlerConfig:
    """Configuration for the dungeon crawler core."""

    def __init__(
        self,
        level_path: str = "assets/level.ldtk",
        save_path: str = "save.json",
        entity_layer: str = "Entities",
        tile_layer: str = "Tiles",
        glide_duration: float = 0.2,
        bounce_out_duration: float = 0.05,
        bounce_back_duration: float = 0.1,
        bounce_fraction: float = 0.1,
        eye_offset: float = 0.4,
        eye_height: float = 0.4,
    ):
        self.level_path = level_path
        self.save_path = save_path
        self.entity_layer = entity_layer
        self.tile_layer = tile_layer
        # Seconds
        self.glide_duration = glide_duration
        self.bounce_out_duration = bounce_out_duration
        self.bounce_back_duration = bounce_back_duration
        # Share of the way toward a blocked cell the bounce travels
        self.bounce_fraction = bounce_fraction
        # Camera sits behind the cell centre, looking forward
        self.eye_offset = eye_offset
        self.eye_height = eye_height

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CrawlerConfig:
        """
        Build a config from a dict.

        Raises:
            TypeError: If data contains an unknown key
        """
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return dict(vars(self))

    def __repr__(self) -> str:
        return f"CrawlerConfig(level_path={self.level_path!r}, save_path={self.save_path!r})"
