"""Feedback tiers and phrases for a scored attempt.

Tiers: 0 stars (0-30), 1 star (31-60), 2 stars (61-85), 3 stars (86-100).
All phrasing stays positive and encouraging.
"""

import random
from dataclasses import dataclass
from typing import Optional

import numpy as np

from signmirror.config import DEFAULT_CONFIG, ScoringConfig
from signmirror.models import ComparisonResult, Feedback

TRACKING_TIP = "Let's make sure your upper body is nice and visible. Try stepping back a little!"

LOW_MOTION_TIPS = (
    "Try moving your arms along with the video!",
    "Watch the video again and copy the arm movements.",
)


@dataclass(frozen=True)
class Tier:
    name: str
    stars: int
    min_score: int
    headlines: tuple[str, ...]
    tips: tuple[str, ...] = ()


TIERS = (
    Tier(
        name="try_again",
        stars=0,
        min_score=0,
        headlines=(
            "Let's try again! Watch the video and copy the movements.",
            "Let's have another go! Follow along with the video.",
        ),
    ),
    Tier(
        name="good_try",
        stars=1,
        min_score=31,
        headlines=(
            "Good try! You're getting closer.",
            "Nice effort! You're on your way.",
        ),
        tips=("Try matching the speed and shape a little more.",),
    ),
    Tier(
        name="great",
        stars=2,
        min_score=61,
        headlines=(
            "Great signing! Almost perfect!",
            "Really good! You're nearly there!",
        ),
    ),
    Tier(
        name="excellent",
        stars=3,
        min_score=86,
        headlines=(
            "Amazing! Perfect sign!",
            "Wonderful! You nailed it!",
        ),
    ),
)


def tier_for_score(score: int) -> Tier:
    for tier in reversed(TIERS):
        if score >= tier.min_score:
            return tier
    return TIERS[0]


def _pacing_tip(path_scores: list[int]) -> Optional[str]:
    """Point at the part of the sign that matched worse, if one stands out."""
    third = len(path_scores) // 3
    if third == 0:
        return None
    first = np.mean(path_scores[:third])
    last = np.mean(path_scores[-third:])
    if first > last + 10:
        return "Try watching the ending part once more."
    if last > first + 10:
        return "Watch the beginning part once more."
    return None


def generate_feedback(
    result: ComparisonResult,
    rng: Optional[random.Random] = None,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> Feedback:
    """Pick tips for a result; tracking and low-motion problems override the tier."""
    rng = rng or random.Random()
    tier = tier_for_score(result.score)

    if result.live_feature_count < config.min_trackable_frames:
        tips = [TRACKING_TIP]
    elif result.low_motion:
        tips = list(LOW_MOTION_TIPS)
    else:
        tips = [rng.choice(tier.headlines), *tier.tips]
        if tier.stars == 2:
            pacing = _pacing_tip(result.path_scores)
            if pacing:
                tips.append(pacing)

    return Feedback(tier=tier.name, stars=tier.stars, tips=tips)
