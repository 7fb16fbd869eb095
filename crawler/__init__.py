"""
Dungeon crawler framework.

Provides the game built on top of the engine:
- Components (grid position and facing)
- World (dungeon model, player, session)
- Systems (movement, motion planning, tile messages)
- Save (persistence)
"""
