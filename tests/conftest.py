"""
Synthetic pose builders shared by the analyzer tests.

All coordinates are normalized image coordinates with y growing downward.
"""
import math

import pytest

from movement_coach.pose_detection.pose_frame import Joint, Keypoint, PoseFrame


def make_frame(points, timestamp=None, confidence=1.0):
    """PoseFrame from {Joint: (x, y)}."""
    return PoseFrame(
        keypoints={joint: Keypoint(x, y, confidence) for joint, (x, y) in points.items()},
        timestamp=timestamp
    )


def build_squat_frame(knee_angle, t=None, lean_dx=0.0):
    """
    Front-on squat with both knees bent to `knee_angle`.

    Shins are vertical, thighs swing inward as the knees bend so the hips
    stay between the knees. `lean_dx` shifts the shoulders sideways to tilt
    the torso.
    """
    theta = math.radians(knee_angle)
    thigh = 0.2
    points = {}
    for side, knee_x, inward in (("left", 0.6, -1.0), ("right", 0.4, 1.0)):
        hip = (knee_x + inward * thigh * math.sin(theta), 0.7 + thigh * math.cos(theta))
        points[Joint(f"{side}_ankle")] = (knee_x, 0.9)
        points[Joint(f"{side}_knee")] = (knee_x, 0.7)
        points[Joint(f"{side}_hip")] = hip
        points[Joint(f"{side}_shoulder")] = (hip[0] + lean_dx, hip[1] - 0.3)
    return make_frame(points, t)


def build_arm_raise_frame(left_elevation, right_elevation=None, t=None):
    """Both arms abducted to the given angles (0 hanging, 90 horizontal)."""
    if right_elevation is None:
        right_elevation = left_elevation
    points = {}
    for side, shoulder_x, outward, elevation in (
        ("left", 0.6, 1.0, left_elevation),
        ("right", 0.4, -1.0, right_elevation),
    ):
        e = math.radians(elevation)
        shoulder = (shoulder_x, 0.3)
        wrist = (shoulder_x + outward * 0.25 * math.sin(e), 0.3 + 0.25 * math.cos(e))
        points[Joint(f"{side}_shoulder")] = shoulder
        points[Joint(f"{side}_elbow")] = ((shoulder[0] + wrist[0]) / 2.0, (shoulder[1] + wrist[1]) / 2.0)
        points[Joint(f"{side}_wrist")] = wrist
    return make_frame(points, t)


def build_arm_circle_frame(angle, t=None, right_offset=0.0):
    """
    Straight arms pointing at `angle` degrees (0 = outward, 90 = up).

    The right arm mirrors the left; `right_offset` rotates it further.
    """
    points = {}
    for side, shoulder_x, direction, a in (
        ("left", 0.6, 1.0, angle),
        ("right", 0.4, -1.0, angle + right_offset),
    ):
        rad = math.radians(a)
        shoulder = (shoulder_x, 0.4)
        wrist = (shoulder_x + direction * 0.2 * math.cos(rad), 0.4 - 0.2 * math.sin(rad))
        points[Joint(f"{side}_shoulder")] = shoulder
        points[Joint(f"{side}_elbow")] = ((shoulder[0] + wrist[0]) / 2.0, (shoulder[1] + wrist[1]) / 2.0)
        points[Joint(f"{side}_wrist")] = wrist
    return make_frame(points, t)


def build_balance_frame(t=None, dx=0.0, dy=0.0):
    """Upright stance shifted by (dx, dy)."""
    base = {
        Joint.NECK: (0.5, 0.25),
        Joint.LEFT_SHOULDER: (0.58, 0.28),
        Joint.RIGHT_SHOULDER: (0.42, 0.28),
        Joint.LEFT_HIP: (0.55, 0.55),
        Joint.RIGHT_HIP: (0.45, 0.55),
        Joint.LEFT_KNEE: (0.55, 0.72),
        Joint.RIGHT_KNEE: (0.45, 0.72),
    }
    return make_frame({j: (x + dx, y + dy) for j, (x, y) in base.items()}, t)


def build_lunge_frame(forward, knee_angle=90.0, t=None):
    """
    Lunge with the `forward` ("left"/"right") knee bent to `knee_angle`
    and raised above the straight back knee. forward=None is a neutral
    stance with both knees level.
    """
    theta = math.radians(knee_angle)
    points = {}
    for side, hip_x in (("left", 0.55), ("right", 0.45)):
        hip = (hip_x, 0.5)
        if side == forward:
            knee = (hip_x, 0.65)
            ankle = (knee[0] + 0.15 * math.sin(theta), knee[1] - 0.15 * math.cos(theta))
        else:
            knee = (hip_x, 0.75 if forward else 0.7)
            ankle = (hip_x, knee[1] + 0.2)
        points[Joint(f"{side}_hip")] = hip
        points[Joint(f"{side}_knee")] = knee
        points[Joint(f"{side}_ankle")] = ankle
    return make_frame(points, t)


def build_plank_frame(t=None, sag=0.0, pike=False):
    """
    Side-on plank. `sag` drops the hips by that many degrees of body bend;
    `pike` puts the hips up into a 90 degree bend.
    """
    if pike:
        hip = (0.5, 0.2)
    else:
        hip = (0.5, 0.5 + 0.3 * math.tan(math.radians(sag / 2.0)))
    points = {}
    for side in ("left", "right"):
        points[Joint(f"{side}_shoulder")] = (0.2, 0.5)
        points[Joint(f"{side}_hip")] = hip
        points[Joint(f"{side}_ankle")] = (0.8, 0.5)
    return make_frame(points, t)


def without(frame, *joints):
    keypoints = {j: k for j, k in frame.keypoints.items() if j not in joints}
    return PoseFrame(keypoints=keypoints, timestamp=frame.timestamp)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def squat_frame():
    return build_squat_frame


@pytest.fixture
def arm_raise_frame():
    return build_arm_raise_frame


@pytest.fixture
def arm_circle_frame():
    return build_arm_circle_frame


@pytest.fixture
def balance_frame():
    return build_balance_frame


@pytest.fixture
def lunge_frame():
    return build_lunge_frame


@pytest.fixture
def plank_frame():
    return build_plank_frame


@pytest.fixture
def drop_joints():
    return without


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session():
    from movement_coach.exercise_analysis.session import SessionState
    return SessionState(exercise_id="test", start_time=0.0)
