import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from crawler_engine.resources import LevelSource, LevelSourceError
from crawler.world import build_dungeon


def main():
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("LevelVerification")

    path = Path(sys.argv[1] if len(sys.argv) > 1 else "assets/level.ldtk")

    try:
        document = LevelSource.load(path)
        dungeon = build_dungeon(document)
    except (OSError, LevelSourceError) as e:
        logger.error(f"VERIFICATION FAILED: {e}")
        sys.exit(1)

    for index, level in enumerate(dungeon.levels):
        start = level.player_start
        walled = sum(1 for tile in level.tiles if tile.walls)
        logger.info(
            f"Level {index}: {level.width}x{level.length}, "
            f"{len(level.tiles)} tiles ({walled} with walls), "
            f"{len(level.cats)} cats, "
            f"start {'(%d, %d) %s' % (start.x, start.z, start.direction) if start else 'missing'}"
        )
        if start is None:
            logger.warning(f"Level {index} has no PlayerStart")

    logger.info(f"VERIFICATION SUCCESSFUL: {len(dungeon)} levels in {path}")


if __name__ == "__main__":
    main()
