import math
import numpy as np
import pytest
from crawler_engine.graphics.tween import (
    Easing,
    Pose,
    TweenPhase,
    Transition,
    Tweener,
    quat_from_yaw,
    slerp,
)

def make_pose(x=0.0, yaw=0.0):
    return Pose.from_yaw((x, 0.0, 0.0), yaw)

@pytest.mark.parametrize("easing", list(Easing))
def test_easing_endpoints(easing):
    assert easing.apply(0.0) == pytest.approx(0.0)
    assert easing.apply(1.0) == pytest.approx(1.0)

def test_easing_shapes():
    assert Easing.LINEAR.apply(0.5) == pytest.approx(0.5)
    assert Easing.QUADRATIC_IN.apply(0.5) == pytest.approx(0.25)
    assert Easing.QUADRATIC_OUT.apply(0.5) == pytest.approx(0.75)
    assert Easing.QUADRATIC_IN_OUT.apply(0.25) == pytest.approx(0.125)

def test_easing_clamps():
    assert Easing.QUADRATIC_OUT.apply(2.0) == pytest.approx(1.0)
    assert Easing.QUADRATIC_OUT.apply(-1.0) == pytest.approx(0.0)

def test_quat_from_yaw():
    q = quat_from_yaw(math.pi)
    assert np.allclose(q, [0.0, 1.0, 0.0, 0.0])
    assert np.linalg.norm(quat_from_yaw(0.3)) == pytest.approx(1.0)

def test_slerp_halfway():
    q = slerp(quat_from_yaw(0.0), quat_from_yaw(math.pi / 2), 0.5)
    assert np.allclose(q, quat_from_yaw(math.pi / 4))

def test_slerp_takes_short_arc():
    # end is stored with the opposite sign; still the short way round
    start = quat_from_yaw(math.pi / 2)
    end = -quat_from_yaw(math.pi)
    mid = slerp(start, end, 0.5)
    assert abs(np.dot(mid, quat_from_yaw(3 * math.pi / 4))) == pytest.approx(1.0)

def test_pose_is_read_only():
    pose = make_pose(1.0)
    with pytest.raises(ValueError):
        pose.translation[0] = 5.0

def test_pose_lerp():
    mid = make_pose(0.0).lerp(make_pose(2.0), 0.5)
    assert np.allclose(mid.translation, [1.0, 0.0, 0.0])

def test_pose_is_close_ignores_quaternion_sign():
    pose = make_pose(1.0, 0.5)
    flipped = Pose(pose.translation, -pose.rotation)
    assert pose.is_close(flipped)
    assert not pose.is_close(make_pose(1.5, 0.5))

def test_phase_sample():
    phase = TweenPhase(make_pose(0.0), make_pose(1.0), 0.2, Easing.LINEAR)
    assert phase.sample(0.1).translation[0] == pytest.approx(0.5)
    assert phase.sample(1.0).is_close(phase.end)

def test_zero_duration_phase_is_end():
    phase = TweenPhase(make_pose(0.0), make_pose(1.0), 0.0)
    assert phase.sample(0.0).is_close(phase.end)

def test_transition_requires_phases():
    with pytest.raises(ValueError):
        Transition(())

def test_transition_sequence():
    a, b = make_pose(0.0), make_pose(1.0)
    transition = Transition((
        TweenPhase(a, b, 0.05, Easing.LINEAR),
        TweenPhase(b, a, 0.1, Easing.LINEAR),
    ))

    assert transition.total_duration == pytest.approx(0.15)
    assert transition.sample(0.05).translation[0] == pytest.approx(1.0)
    assert transition.sample(0.1).translation[0] == pytest.approx(0.5)
    assert transition.sample(10.0).is_close(a)

    phase, index, local = transition.get_phase_at_time(0.07)
    assert index == 1
    assert local == pytest.approx(0.02)

def test_tweener_playback():
    transition = Transition((TweenPhase(make_pose(0.0), make_pose(1.0), 0.2, Easing.LINEAR),))
    finished = []
    tweener = Tweener(transition)
    tweener.on_complete = finished.append

    tweener.update(0.1)
    assert tweener.is_playing
    assert tweener.progress == pytest.approx(0.5)
    assert tweener.pose.translation[0] == pytest.approx(0.5)

    tweener.update(0.5)
    assert tweener.is_complete
    assert tweener.elapsed == pytest.approx(0.2)
    assert finished == [transition]

    tweener.update(0.1)
    assert finished == [transition]

def test_tweener_replace_restarts():
    first = Transition((TweenPhase(make_pose(0.0), make_pose(1.0), 0.2),))
    second = Transition((TweenPhase(make_pose(5.0), make_pose(6.0), 0.2),))
    tweener = Tweener(first)
    tweener.update(0.1)

    tweener.play(second)
    assert tweener.elapsed == 0.0
    assert tweener.pose.is_close(second.start_pose)

def test_idle_tweener():
    tweener = Tweener()
    assert tweener.pose is None
    assert not tweener.is_playing
    assert tweener.progress == 0.0
