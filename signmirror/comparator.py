import logging
from typing import Sequence

import numpy as np

from signmirror.alignment import align_sequences
from signmirror.config import (
    DEFAULT_CONFIG,
    FEATURE_COMPONENTS,
    LIVE_FORMAT,
    REFERENCE_FORMAT,
    ScoringConfig,
    SkeletonFormat,
)
from signmirror.features import MotionSequence, build_sequence
from signmirror.mirror import mirror_frames
from signmirror.models import ComparisonResult, RawFrame

logger = logging.getLogger(__name__)

_VELOCITY = next(c.span for c in FEATURE_COMPONENTS if c.name == "velocity")


def motion_energy(sequence: MotionSequence) -> float:
    """Total absolute arm angular velocity across the sequence."""
    return float(np.abs(sequence.values[:, _VELOCITY]).sum())


def apply_motion_penalty(score: int, motion_ratio: float, config: ScoringConfig = DEFAULT_CONFIG) -> int:
    """Cap the score when the live attempt moved much less than the reference.

    ratio < 0.3 -> at most 15, < 0.5 -> at most 30, < 0.7 -> at most 55.
    """
    for cap in sorted(config.motion_caps, key=lambda c: c.below_ratio):
        if motion_ratio < cap.below_ratio:
            return min(score, cap.max_score)
    return score


def compare_motion(
    live_frames: Sequence[RawFrame],
    reference_frames: Sequence[RawFrame],
    config: ScoringConfig = DEFAULT_CONFIG,
    live_format: SkeletonFormat = LIVE_FORMAT,
    reference_format: SkeletonFormat = REFERENCE_FORMAT,
) -> ComparisonResult:
    """Score a live attempt against a reference recording.

    Both the live frames and their left/right mirror are aligned against the
    reference, so a left-handed attempt can match a right-handed demo. The
    better orientation wins and is then capped by the motion floor.
    """
    reference = build_sequence(reference_frames, reference_format, config)
    live = build_sequence(live_frames, live_format, config)
    mirrored = build_sequence(
        mirror_frames(live_frames, live_format.mirror_pairs), live_format, config
    )

    logger.debug(
        "Features: live=%d, mirrored=%d, ref=%d", len(live), len(mirrored), len(reference)
    )

    if (max(len(live), len(mirrored)) < config.min_trackable_frames
            or len(reference) < config.min_alignment_frames):
        logger.info("Insufficient tracking: live=%d, ref=%d", len(live), len(reference))
        return ComparisonResult(
            score=0,
            live_feature_count=len(live),
            reference_feature_count=len(reference),
        )

    original = align_sequences(live, reference, config)
    flipped = align_sequences(mirrored, reference, config)

    use_mirrored = flipped.score > original.score
    best = flipped if use_mirrored else original
    best_live = mirrored if use_mirrored else live

    ref_motion = motion_energy(reference)
    live_motion = motion_energy(best_live)
    motion_ratio = live_motion / ref_motion if ref_motion > config.min_reference_motion else 1.0
    score = apply_motion_penalty(best.score, motion_ratio, config)

    logger.info(
        "DTW scores: original=%d, mirrored=%d, using=%s",
        original.score, flipped.score, "mirrored" if use_mirrored else "original",
    )
    logger.info(
        "Motion: live=%.2f, ref=%.2f, ratio=%.2f, raw=%d, final=%d",
        live_motion, ref_motion, motion_ratio, best.score, score,
    )

    return ComparisonResult(
        score=score,
        raw_score=best.score,
        path_scores=best.path_scores,
        path=best.path,
        avg_distance=best.avg_distance,
        live_feature_count=len(live),
        reference_feature_count=len(reference),
        mirrored=use_mirrored,
        low_motion=motion_ratio < config.low_motion_ratio,
        motion_ratio=motion_ratio,
    )
