"""
Motion planning - turns a movement result into a pose transition.

Accepted commands glide from the old pose to the new one. Rejected
steps bounce a short way toward the blocked cell and back. Plans are
descriptors only; playback belongs to a Tweener.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from crawler.components.position import Position
from crawler.systems.movement import MoveResult
from crawler_engine.core.config import CrawlerConfig
from crawler_engine.graphics.tween import Easing, Pose, Transition, TweenPhase


class TransitionKind(Enum):
    """The two canonical transition shapes."""
    GLIDE = auto()
    BOUNCE = auto()


@dataclass(frozen=True)
class MotionPlan:
    """A transition tagged with its shape."""
    kind: TransitionKind
    transition: Transition

    @property
    def duration(self) -> float:
        return self.transition.total_duration

    @property
    def end_pose(self) -> Pose:
        return self.transition.end_pose


def player_pose(position: Position, config: Optional[CrawlerConfig] = None) -> Pose:
    """
    Eye pose for a grid position.

    The eye sits eye_offset behind the cell centre (opposite the facing)
    and eye_height above the floor.
    """
    config = config or CrawlerConfig()
    dx, dz = position.direction.vector
    translation = (
        position.x - dx * config.eye_offset,
        config.eye_height,
        position.z - dz * config.eye_offset,
    )
    return Pose.from_yaw(translation, position.direction.yaw)


def plan_glide(start: Pose, end: Pose, config: Optional[CrawlerConfig] = None) -> MotionPlan:
    config = config or CrawlerConfig()
    phase = TweenPhase(start, end, config.glide_duration, Easing.QUADRATIC_OUT)
    return MotionPlan(TransitionKind.GLIDE, Transition((phase,)))


def plan_bounce(start: Pose, toward: Pose, config: Optional[CrawlerConfig] = None) -> MotionPlan:
    """Bounce bounce_fraction of the way toward a pose, then back to start."""
    config = config or CrawlerConfig()
    bump = start.lerp(toward, config.bounce_fraction)
    out = TweenPhase(start, bump, config.bounce_out_duration, Easing.QUADRATIC_OUT)
    back = TweenPhase(bump, start, config.bounce_back_duration, Easing.QUADRATIC_OUT)
    return MotionPlan(TransitionKind.BOUNCE, Transition((out, back)))


def plan_motion(
    result: MoveResult,
    config: Optional[CrawlerConfig] = None,
    start: Optional[Pose] = None,
) -> MotionPlan:
    """
    Plan the transition for a movement result.

    Args:
        result: Output of resolve_command()
        config: Durations, bounce fraction and eye placement
        start: Live pose to start from instead of the pose of result.before
    """
    config = config or CrawlerConfig()
    if start is None:
        start = player_pose(result.before, config)

    if result.accepted:
        return plan_glide(start, player_pose(result.position, config), config)

    x, z = result.attempted
    target = result.before.model_copy(update={'x': x, 'z': z})
    return plan_bounce(start, player_pose(target, config), config)
