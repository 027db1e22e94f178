from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class ComponentPolicy(str, Enum):
    """How the distance metric decides that a feature component carries data."""

    ZERO_SENTINEL = "zero_sentinel"  # any non-zero value on either side
    PRESENCE = "presence"            # explicit per-component presence flag


class SkeletonFormat(BaseModel):
    """Index table from one skeleton format onto the 8-joint upper body.

    Semantic order: leftShoulder, rightShoulder, leftElbow, rightElbow,
    leftWrist, rightWrist, leftHip, rightHip.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    upper_body: tuple[int, ...]
    mirror_pairs: tuple[tuple[int, int], ...] = ()

    @property
    def min_points(self) -> int:
        return max(self.upper_body) + 1


class Component(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    start: int
    end: int
    weight: float

    @property
    def span(self) -> slice:
        return slice(self.start, self.end)


class MotionCap(BaseModel):
    model_config = ConfigDict(frozen=True)

    below_ratio: float
    max_score: int


# MediaPipe 33-point pose
LIVE_FORMAT = SkeletonFormat(
    name="live",
    upper_body=(11, 12, 13, 14, 15, 16, 23, 24),
    mirror_pairs=((11, 12), (13, 14), (15, 16), (23, 24)),
)

# Compact 17-point reference export
REFERENCE_FORMAT = SkeletonFormat(
    name="reference",
    upper_body=(4, 3, 6, 5, 8, 7, 16, 15),
)

FEATURE_LENGTH = 60

FEATURE_COMPONENTS = (
    Component(name="arm_angles", start=0, end=4, weight=2.5),
    Component(name="positions", start=4, end=20, weight=2.0),
    Component(name="velocity", start=20, end=24, weight=2.0),
    Component(name="right_fingers", start=24, end=39, weight=2.5),
    Component(name="left_fingers", start=39, end=54, weight=2.5),
    Component(name="face", start=54, end=60, weight=1.0),
)

COMPONENT_INDEX = {c.name: i for i, c in enumerate(FEATURE_COMPONENTS)}

# Segment pairs in upper-body subset indices: (from, to)
ARM_SEGMENTS = (
    (1, 3),  # right shoulder -> elbow
    (3, 5),  # right elbow -> wrist
    (0, 2),  # left shoulder -> elbow
    (2, 4),  # left elbow -> wrist
)

HAND_POINTS = 21

# (a, b, c) -> angle at b; 3 per finger, proximal to distal
FINGER_ANGLE_TRIPLETS = (
    (0, 1, 2), (1, 2, 3), (2, 3, 4),          # thumb
    (0, 5, 6), (5, 6, 7), (6, 7, 8),          # index
    (0, 9, 10), (9, 10, 11), (10, 11, 12),    # middle
    (0, 13, 14), (13, 14, 15), (14, 15, 16),  # ring
    (0, 17, 18), (17, 18, 19), (18, 19, 20),  # pinky
)

FACE_MIN_POINTS = 468

FACE_INDICES = {
    "left_eye_top": 159, "left_eye_bottom": 145,
    "right_eye_top": 386, "right_eye_bottom": 374,
    "left_brow": 70, "right_brow": 300,
    "left_eye_center": 33, "right_eye_center": 263,
    "upper_lip": 13, "lower_lip": 14,
    "mouth_left": 61, "mouth_right": 291,
    "chin": 152, "forehead": 10,
}


class ScoringConfig(BaseModel):
    """Calibration constants for one comparison.

    Sigma, the motion caps and the thresholds were tuned by hand against
    recorded attempts; keep them fixed unless re-calibrating on user data.
    """

    model_config = ConfigDict(frozen=True)

    components: tuple[Component, ...] = FEATURE_COMPONENTS
    distance_policy: ComponentPolicy = ComponentPolicy.ZERO_SENTINEL
    min_scale: float = 0.01
    min_face_height: float = 0.001
    sigma: float = 0.9
    min_alignment_frames: int = 2
    min_trackable_frames: int = 3
    min_reference_motion: float = 0.01
    motion_caps: tuple[MotionCap, ...] = (
        MotionCap(below_ratio=0.3, max_score=15),
        MotionCap(below_ratio=0.5, max_score=30),
        MotionCap(below_ratio=0.7, max_score=55),
    )
    low_motion_ratio: float = 0.5


DEFAULT_CONFIG = ScoringConfig()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SIGNMIRROR_", env_file=".env", extra="ignore")

    api_title: str = "SignMirror API"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]
    max_frames: int = 900


settings = Settings()
