"""
Pose tweening data structures and playback.

Provides declarative, time-based pose transitions:
- Easing curves
- Poses (translation + rotation quaternion)
- Phases (start pose -> end pose over a duration)
- Transitions (phases played back to back)
- Tweener (advances a transition frame by frame)

Transitions are plain data: building one has no side effects, and
any number of playback helpers can sample the same transition.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Sequence

import numpy as np


class Easing(Enum):
    """Easing curves mapping linear progress (0-1) to eased progress."""
    LINEAR = auto()
    QUADRATIC_IN = auto()
    QUADRATIC_OUT = auto()
    QUADRATIC_IN_OUT = auto()

    def apply(self, t: float) -> float:
        """Ease a progress value, clamped to 0-1."""
        t = min(1.0, max(0.0, t))
        if self is Easing.QUADRATIC_IN:
            return t * t
        if self is Easing.QUADRATIC_OUT:
            return t * (2.0 - t)
        if self is Easing.QUADRATIC_IN_OUT:
            if t < 0.5:
                return 2.0 * t * t
            return -1.0 + (4.0 - 2.0 * t) * t
        return t


def quat_from_yaw(angle: float) -> np.ndarray:
    """Quaternion (x, y, z, w) for a rotation of angle radians about +Y."""
    half = angle * 0.5
    return np.array([0.0, math.sin(half), 0.0, math.cos(half)])


def slerp(q0: np.ndarray, q1: np.ndarray, t: float) -> np.ndarray:
    """Shortest-arc spherical interpolation between two unit quaternions."""
    q0 = np.asarray(q0, dtype=float)
    q1 = np.asarray(q1, dtype=float)
    dot = float(np.dot(q0, q1))

    # q and -q are the same rotation; flip to take the short way round
    if dot < 0.0:
        q1 = -q1
        dot = -dot

    if dot > 0.9995:
        result = q0 + (q1 - q0) * t
        return result / np.linalg.norm(result)

    theta_0 = math.acos(dot)
    theta = theta_0 * t
    ortho = q1 - q0 * dot
    ortho = ortho / np.linalg.norm(ortho)
    return q0 * math.cos(theta) + ortho * math.sin(theta)


@dataclass(frozen=True, eq=False)
class Pose:
    """
    Translation and orientation in world space.

    Attributes:
        translation: (x, y, z)
        rotation: Unit quaternion (x, y, z, w)
    """
    translation: np.ndarray
    rotation: np.ndarray

    def __post_init__(self) -> None:
        translation = np.array(self.translation, dtype=float)
        rotation = np.array(self.rotation, dtype=float)
        translation.setflags(write=False)
        rotation.setflags(write=False)
        object.__setattr__(self, 'translation', translation)
        object.__setattr__(self, 'rotation', rotation)

    @classmethod
    def from_yaw(cls, translation: Sequence[float], yaw: float) -> Pose:
        """Create a pose facing yaw radians about +Y."""
        return cls(translation=np.asarray(translation, dtype=float), rotation=quat_from_yaw(yaw))

    def lerp(self, other: Pose, t: float) -> Pose:
        """Linear translation and spherical rotation interpolation toward other."""
        return Pose(
            translation=self.translation + (other.translation - self.translation) * t,
            rotation=slerp(self.rotation, other.rotation, t),
        )

    def is_close(self, other: Pose, tolerance: float = 1e-6) -> bool:
        """Whether two poses match (q and -q count as the same rotation)."""
        if not np.allclose(self.translation, other.translation, atol=tolerance):
            return False
        return abs(abs(float(np.dot(self.rotation, other.rotation))) - 1.0) <= tolerance

    def __repr__(self) -> str:
        t = ", ".join(f"{v:.3f}" for v in self.translation)
        r = ", ".join(f"{v:.3f}" for v in self.rotation)
        return f"Pose(translation=({t}), rotation=({r}))"


@dataclass(frozen=True)
class TweenPhase:
    """
    One interpolation from a start pose to an end pose.

    Attributes:
        start: Pose at elapsed 0
        end: Pose at elapsed >= duration
        duration: Seconds
        easing: Easing curve applied to progress
    """
    start: Pose
    end: Pose
    duration: float
    easing: Easing = Easing.QUADRATIC_OUT

    def sample(self, elapsed: float) -> Pose:
        """Get the pose after elapsed seconds."""
        if self.duration <= 0:
            return self.end
        progress = self.easing.apply(elapsed / self.duration)
        return self.start.lerp(self.end, progress)


@dataclass(frozen=True)
class Transition:
    """
    Phases played one after another.

    A transition with a single phase is a plain tween; several phases
    form a sequence.
    """
    phases: tuple[TweenPhase, ...]

    def __post_init__(self) -> None:
        if not self.phases:
            raise ValueError("Transition needs at least one phase")
        object.__setattr__(self, 'phases', tuple(self.phases))

    @property
    def total_duration(self) -> float:
        """Get total duration in seconds."""
        return sum(p.duration for p in self.phases)

    @property
    def start_pose(self) -> Pose:
        return self.phases[0].start

    @property
    def end_pose(self) -> Pose:
        return self.phases[-1].end

    def get_phase_at_time(self, elapsed: float) -> tuple[TweenPhase, int, float]:
        """
        Get the phase running at a time.

        Returns:
            (phase, phase_index, time_into_phase) tuple
        """
        remaining = max(0.0, elapsed)
        for i, phase in enumerate(self.phases):
            if remaining < phase.duration:
                return phase, i, remaining
            remaining -= phase.duration

        last = len(self.phases) - 1
        return self.phases[last], last, self.phases[last].duration

    def sample(self, elapsed: float) -> Pose:
        """Get the pose after elapsed seconds (clamped to the end pose)."""
        phase, _, local = self.get_phase_at_time(elapsed)
        return phase.sample(local)


class Tweener:
    """
    Plays a Transition back over successive frames.

    Handles:
    - Current transition and elapsed time
    - Replacing a transition mid-flight (restarts from the new one)
    - Completion callback
    """

    def __init__(self, transition: Optional[Transition] = None):
        self._transition: Optional[Transition] = None
        self._elapsed: float = 0.0
        self._completed: bool = False

        self.on_complete: Optional[Callable[[Transition], None]] = None

        if transition is not None:
            self.play(transition)

    @property
    def transition(self) -> Optional[Transition]:
        """Get the current transition."""
        return self._transition

    @property
    def elapsed(self) -> float:
        """Get elapsed playback time."""
        return self._elapsed

    @property
    def is_playing(self) -> bool:
        """Check if a transition is running."""
        return self._transition is not None and not self._completed

    @property
    def is_complete(self) -> bool:
        """Check if the current transition has finished."""
        return self._completed

    @property
    def progress(self) -> float:
        """Get playback progress (0-1)."""
        if not self._transition or self._transition.total_duration <= 0:
            return 1.0 if self._completed else 0.0
        return min(1.0, self._elapsed / self._transition.total_duration)

    @property
    def pose(self) -> Optional[Pose]:
        """Get the current pose, or None when nothing was played."""
        if not self._transition:
            return None
        return self._transition.sample(self._elapsed)

    def play(self, transition: Transition) -> None:
        """Start a transition from the beginning, replacing any current one."""
        self._transition = transition
        self._elapsed = 0.0
        self._completed = False

    def update(self, dt: float) -> None:
        """
        Advance playback by delta time.

        Args:
            dt: Delta time in seconds
        """
        if not self.is_playing:
            return

        self._elapsed += dt

        if self._elapsed >= self._transition.total_duration:
            self._elapsed = self._transition.total_duration
            self._completed = True
            if self.on_complete:
                self.on_complete(self._transition)
