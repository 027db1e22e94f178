import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_serializer


Point = tuple[float, ...]


class RawFrame(BaseModel):
    """One captured frame: (x, y) or (x, y, z) points in [0, 1] camera space.

    Frames are immutable once built; equality looks at the landmark data only.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    t: float = 0.0
    pose: Optional[tuple[Point, ...]] = None
    right_hand: Optional[tuple[Point, ...]] = Field(default=None, alias="rightHand")
    left_hand: Optional[tuple[Point, ...]] = Field(default=None, alias="leftHand")
    face: Optional[tuple[Point, ...]] = None

    # Set on frames produced by the mirror transform
    _mirrored_from: Optional["RawFrame"] = PrivateAttr(default=None)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawFrame):
            return NotImplemented
        return self.__dict__ == other.__dict__


class ReferenceDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    word: str = ""
    fps: float = 0.0
    duration: float = 0.0
    # 33-point indices the compact pose was cut from; REFERENCE_FORMAT already
    # encodes the upper-body mapping, so this is kept for provenance only
    pose_indices: list[int] = Field(default_factory=list, alias="poseIndices")
    frames: list[RawFrame]


class ComparisonResult(BaseModel):
    score: int
    raw_score: int = 0
    path_scores: list[int] = Field(default_factory=list)
    path: list[tuple[int, int]] = Field(default_factory=list)  # [(live_idx, ref_idx), ...]
    avg_distance: Optional[float] = math.inf
    live_feature_count: int = 0
    reference_feature_count: int = 0
    mirrored: bool = False
    low_motion: bool = False
    motion_ratio: float = 1.0

    @field_serializer("avg_distance")
    def _finite_distance(self, value: Optional[float]) -> Optional[float]:
        return value if value is not None and math.isfinite(value) else None


class Feedback(BaseModel):
    tier: str
    stars: int
    tips: list[str] = Field(min_length=1)


class CompareRequest(BaseModel):
    live_frames: list[RawFrame]
    reference: ReferenceDocument
    seed: Optional[int] = None


class CompareResponse(BaseModel):
    result: ComparisonResult
    feedback: Feedback
