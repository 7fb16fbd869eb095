"""
Pose transitions.

Exports:
- Easing: Easing curves
- Pose: Translation + rotation quaternion
- TweenPhase, Transition: Declarative transitions
- Tweener: Frame-by-frame playback
"""

from crawler_engine.graphics.tween import (
    Easing,
    Pose,
    TweenPhase,
    Transition,
    Tweener,
    quat_from_yaw,
    slerp,
)

__all__ = [
    "Easing",
    "Pose",
    "TweenPhase",
    "Transition",
    "Tweener",
    "quat_from_yaw",
    "slerp",
]
