import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from signmirror.config import (
    ARM_SEGMENTS,
    COMPONENT_INDEX,
    DEFAULT_CONFIG,
    FACE_INDICES,
    FACE_MIN_POINTS,
    FEATURE_COMPONENTS,
    FEATURE_LENGTH,
    FINGER_ANGLE_TRIPLETS,
    HAND_POINTS,
    ScoringConfig,
    SkeletonFormat,
)
from signmirror.models import Point, RawFrame

logger = logging.getLogger(__name__)

_SLOTS = {c.name: c.span for c in FEATURE_COMPONENTS}


@dataclass(frozen=True)
class FeatureVector:
    """60 feature values plus one presence flag per component."""

    values: np.ndarray
    presence: np.ndarray

    @property
    def arm_angles(self) -> np.ndarray:
        return self.values[_SLOTS["arm_angles"]]


@dataclass(frozen=True)
class MotionSequence:
    values: np.ndarray    # (n, FEATURE_LENGTH)
    presence: np.ndarray  # (n, components)

    @classmethod
    def from_vectors(cls, vectors: Sequence[FeatureVector]) -> "MotionSequence":
        if not vectors:
            return cls(
                values=np.zeros((0, FEATURE_LENGTH)),
                presence=np.zeros((0, len(FEATURE_COMPONENTS)), dtype=bool),
            )
        return cls(
            values=np.stack([v.values for v in vectors]),
            presence=np.stack([v.presence for v in vectors]),
        )

    def __len__(self) -> int:
        return self.values.shape[0]


def normalize_subset(points: np.ndarray, min_scale: float = DEFAULT_CONFIG.min_scale) -> Optional[np.ndarray]:
    """Translate the 8-joint subset to the shoulder centre and divide by body size.

    Returns None when the body is too small to normalize.
    """
    origin = (points[0] + points[1]) / 2
    shoulder_width = np.linalg.norm(points[0] - points[1])
    hip_center = (points[6] + points[7]) / 2
    torso_height = np.linalg.norm(origin - hip_center)
    scale = (shoulder_width + torso_height) / 2
    if scale < min_scale:
        return None
    return (points - origin) / scale


def _xy(points: Sequence[Point]) -> np.ndarray:
    return np.array([[p[0], p[1]] for p in points], dtype=float)


def _vertex_angle(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> float:
    """Angle at b in triangle a-b-c, in [0, pi]."""
    ba = a - b
    bc = c - b
    mag_ba = np.linalg.norm(ba)
    mag_bc = np.linalg.norm(bc)
    if mag_ba < 1e-6 or mag_bc < 1e-6:
        return float(np.pi)
    cos_angle = np.dot(ba, bc) / (mag_ba * mag_bc)
    return float(np.arccos(np.clip(cos_angle, -1, 1)))


def arm_angles(norm: np.ndarray) -> np.ndarray:
    return np.array([
        np.arctan2(norm[b][1] - norm[a][1], norm[b][0] - norm[a][0])
        for a, b in ARM_SEGMENTS
    ])


def angular_velocity(current: np.ndarray, previous: np.ndarray) -> np.ndarray:
    """Signed angle change per segment, wrapped into (-pi, pi]."""
    velocity = []
    for diff in current - previous:
        while diff > np.pi:
            diff -= 2 * np.pi
        while diff < -np.pi:
            diff += 2 * np.pi
        velocity.append(diff)
    return np.array(velocity)


def finger_angles(hand: Optional[Sequence[Point]]) -> Optional[np.ndarray]:
    if not hand or len(hand) < HAND_POINTS:
        return None
    pts = _xy(hand)
    return np.array([_vertex_angle(pts[a], pts[b], pts[c]) for a, b, c in FINGER_ANGLE_TRIPLETS])


def face_features(
    face: Optional[Sequence[Point]], min_face_height: float = DEFAULT_CONFIG.min_face_height
) -> Optional[np.ndarray]:
    """Brow heights, eye openness and mouth shape, each relative to face height."""
    if not face or len(face) < FACE_MIN_POINTS:
        return None
    f = {name: face[idx] for name, idx in FACE_INDICES.items()}
    face_height = abs(f["chin"][1] - f["forehead"][1])
    if face_height < min_face_height:
        return None
    return np.array([
        f["left_eye_center"][1] - f["left_brow"][1],
        f["right_eye_center"][1] - f["right_brow"][1],
        f["left_eye_bottom"][1] - f["left_eye_top"][1],
        f["right_eye_bottom"][1] - f["right_eye_top"][1],
        f["lower_lip"][1] - f["upper_lip"][1],
        abs(f["mouth_right"][0] - f["mouth_left"][0]),
    ]) / face_height


def extract_features(
    norm: np.ndarray,
    right_hand: Optional[Sequence[Point]] = None,
    left_hand: Optional[Sequence[Point]] = None,
    face: Optional[Sequence[Point]] = None,
    previous_angles: Optional[np.ndarray] = None,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> FeatureVector:
    """Build the fixed-length feature vector for one normalized frame."""
    values = np.zeros(FEATURE_LENGTH)
    presence = np.zeros(len(FEATURE_COMPONENTS), dtype=bool)

    def put(name: str, block: Optional[np.ndarray]):
        if block is not None:
            values[_SLOTS[name]] = block
            presence[COMPONENT_INDEX[name]] = True

    angles = arm_angles(norm)
    put("arm_angles", angles)
    put("positions", norm.reshape(-1))
    if previous_angles is not None:
        put("velocity", angular_velocity(angles, previous_angles))
    put("right_fingers", finger_angles(right_hand))
    put("left_fingers", finger_angles(left_hand))
    put("face", face_features(face, config.min_face_height))

    return FeatureVector(values=values, presence=presence)


def build_sequence(
    frames: Sequence[RawFrame],
    skeleton: SkeletonFormat,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> MotionSequence:
    """Turn a raw frame stream into feature vectors, skipping unusable frames."""
    vectors: list[FeatureVector] = []
    previous_angles = None

    for frame in frames:
        if not frame.pose or len(frame.pose) < skeleton.min_points:
            continue
        subset = _xy([frame.pose[i] for i in skeleton.upper_body])
        norm = normalize_subset(subset, config.min_scale)
        if norm is None:
            continue

        vector = extract_features(
            norm, frame.right_hand, frame.left_hand, frame.face, previous_angles, config
        )
        vectors.append(vector)
        previous_angles = vector.arm_angles

    dropped = len(frames) - len(vectors)
    if dropped:
        logger.debug("%s: dropped %d of %d frames", skeleton.name, dropped, len(frames))
    return MotionSequence.from_vectors(vectors)
