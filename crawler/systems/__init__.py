"""
Crawler systems - decision logic over components and the dungeon.

Movement decides, motion plans the pose transition, occupancy picks
the message for the cell the player ends up on.
"""

from crawler.systems.movement import (
    Verdict,
    MoveResult,
    is_blocked,
    resolve_command,
    apply_result,
)
from crawler.systems.motion import (
    TransitionKind,
    MotionPlan,
    player_pose,
    plan_glide,
    plan_bounce,
    plan_motion,
)
from crawler.systems.occupancy import resolve_message, MessageBoard

__all__ = [
    "Verdict",
    "MoveResult",
    "is_blocked",
    "resolve_command",
    "apply_result",
    "TransitionKind",
    "MotionPlan",
    "player_pose",
    "plan_glide",
    "plan_bounce",
    "plan_motion",
    "resolve_message",
    "MessageBoard",
]
