from typing import Optional, Sequence

from signmirror.config import LIVE_FORMAT
from signmirror.models import Point, RawFrame


def _reflect(points: Optional[Sequence[Point]]) -> Optional[list[Point]]:
    if points is None:
        return None
    return [(1 - p[0], *p[1:]) for p in points]


def mirror_frame(
    frame: RawFrame,
    swap_pairs: Sequence[tuple[int, int]] = LIVE_FORMAT.mirror_pairs,
) -> RawFrame:
    """Left/right mirror of a frame: x -> 1 - x, swap paired joints and hands.

    Face points are kept as-is; the face features are symmetric ratios.
    Mirroring a mirrored frame returns the frame it was made from, so the
    transform is an exact involution despite float rounding in 1 - (1 - x).
    Frames are frozen, so the link cannot drift from the mirrored data.
    """
    if frame._mirrored_from is not None:
        return frame._mirrored_from

    pose = _reflect(frame.pose)
    if pose is not None:
        for left, right in swap_pairs:
            if left < len(pose) and right < len(pose):
                pose[left], pose[right] = pose[right], pose[left]

    mirrored = RawFrame(
        t=frame.t,
        pose=pose,
        right_hand=_reflect(frame.left_hand),
        left_hand=_reflect(frame.right_hand),
        face=frame.face,
    )
    mirrored._mirrored_from = frame
    return mirrored


def mirror_frames(
    frames: Sequence[RawFrame],
    swap_pairs: Sequence[tuple[int, int]] = LIVE_FORMAT.mirror_pairs,
) -> list[RawFrame]:
    return [mirror_frame(frame, swap_pairs) for frame in frames]
