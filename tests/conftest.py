import math

import numpy as np
import pytest

from signmirror.config import LIVE_FORMAT, REFERENCE_FORMAT
from signmirror.models import RawFrame

# leftShoulder, rightShoulder, leftElbow, rightElbow, leftWrist, rightWrist, leftHip, rightHip
BASE_JOINTS = [
    [0.60, 0.40],
    [0.40, 0.40],
    [0.65, 0.55],
    [0.35, 0.55],
    [0.66, 0.70],
    [0.34, 0.70],
    [0.57, 0.80],
    [0.43, 0.80],
]

LIVE_POINTS = 33
REFERENCE_POINTS = 17


def arm_pose(theta: float) -> list[list[float]]:
    """Upper body with the right arm held straight at angle theta."""
    joints = [list(p) for p in BASE_JOINTS]
    sx, sy = joints[1]
    dx, dy = 0.15 * math.cos(theta), 0.15 * math.sin(theta)
    joints[3] = [sx + dx, sy + dy]
    joints[5] = [sx + 2 * dx, sy + 2 * dy]
    return joints


def mirror_joints(joints):
    reflected = [[1 - x, y] for x, y in joints]
    for left, right in ((0, 1), (2, 3), (4, 5), (6, 7)):
        reflected[left], reflected[right] = reflected[right], reflected[left]
    return reflected


def hand_points(ox=0.3, oy=0.75, curl=0.3):
    """21-point hand: wrist then 4 joints per finger, each finger bending by curl."""
    points = [[ox, oy]]
    for finger in range(5):
        direction = -math.pi / 2 + (finger - 2) * 0.3
        x, y = ox, oy
        for joint in range(4):
            if joint:
                direction += curl
            x += 0.02 * math.cos(direction)
            y += 0.02 * math.sin(direction)
            points.append([x, y])
    return points


def _place(joints, table, size):
    pose = [[0.5, 0.5] for _ in range(size)]
    for k, idx in enumerate(table):
        pose[idx] = list(joints[k])
    return pose


def live_frame(joints, t=0.0, right_hand=None, left_hand=None, face=None):
    return RawFrame(
        t=t,
        pose=_place(joints, LIVE_FORMAT.upper_body, LIVE_POINTS),
        right_hand=right_hand,
        left_hand=left_hand,
        face=face,
    )


def reference_frame(joints, t=0.0, right_hand=None, left_hand=None):
    return RawFrame(
        t=t,
        pose=_place(joints, REFERENCE_FORMAT.upper_body, REFERENCE_POINTS),
        right_hand=right_hand,
        left_hand=left_hand,
    )


@pytest.fixture
def sweep():
    """Ten poses with the right arm sweeping from 0 to pi/2."""
    return [arm_pose(theta) for theta in np.linspace(0, math.pi / 2, 10)]


@pytest.fixture
def hand():
    return hand_points()


@pytest.fixture
def reference_frames(sweep, hand):
    return [reference_frame(j, t=i * 0.1, right_hand=hand) for i, j in enumerate(sweep)]


@pytest.fixture
def live_frames(sweep, hand):
    return [live_frame(j, t=i * 0.1, right_hand=hand) for i, j in enumerate(sweep)]


@pytest.fixture
def left_handed_frames(sweep, hand):
    """The sweep performed with the other arm, as seen by the camera."""
    reflected_hand = [[1 - x, y] for x, y in hand]
    return [
        live_frame(mirror_joints(j), t=i * 0.1, left_hand=reflected_hand)
        for i, j in enumerate(sweep)
    ]


@pytest.fixture
def still_frames(sweep, hand):
    return [live_frame(sweep[0], t=i * 0.1, right_hand=hand) for i in range(10)]
