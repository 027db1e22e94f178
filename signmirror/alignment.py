import math
from dataclasses import dataclass, field

import numpy as np
from dtw import dtw, symmetric1

from signmirror.config import DEFAULT_CONFIG, ScoringConfig
from signmirror.distance import distance_matrix
from signmirror.features import MotionSequence


@dataclass(frozen=True)
class Alignment:
    score: int
    path: list[tuple[int, int]] = field(default_factory=list)
    path_scores: list[int] = field(default_factory=list)
    avg_distance: float = math.inf


NO_ALIGNMENT = Alignment(score=0)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def distance_to_score(distance: float, sigma: float = DEFAULT_CONFIG.sigma) -> int:
    """Gaussian falloff: 0 -> 100, sigma -> ~61, 2 sigma -> ~14."""
    score = 100 * math.exp(-distance * distance / (2 * sigma * sigma))
    return round_half_up(min(100.0, max(0.0, score)))


def warp_path(local: np.ndarray) -> list[tuple[int, int]]:
    """Lowest-cost monotonic path through a local distance matrix.

    Cumulative cost uses the symmetric1 step pattern (unit-weight diagonal).
    The backtrace prefers diagonal, then up (i - 1), then left (j - 1) on
    ties so the same inputs always yield the same path.
    """
    cost = dtw(local, step_pattern=symmetric1, keep_internals=True).costMatrix

    i, j = cost.shape[0] - 1, cost.shape[1] - 1
    path = [(i, j)]
    while i > 0 or j > 0:
        if i == 0:
            j -= 1
        elif j == 0:
            i -= 1
        else:
            diag, up, left = cost[i - 1, j - 1], cost[i - 1, j], cost[i, j - 1]
            if diag <= up and diag <= left:
                i -= 1
                j -= 1
            elif up <= left:
                i -= 1
            else:
                j -= 1
        path.append((i, j))
    path.reverse()
    return path


def align_sequences(
    query: MotionSequence,
    reference: MotionSequence,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> Alignment:
    """DTW-align two feature sequences and score every aligned pair."""
    if len(query) < config.min_alignment_frames or len(reference) < config.min_alignment_frames:
        return NO_ALIGNMENT

    local = distance_matrix(query, reference, config)
    path = warp_path(local)

    path_distances = [float(local[i, j]) for i, j in path]
    path_scores = [distance_to_score(d, config.sigma) for d in path_distances]

    return Alignment(
        score=round_half_up(float(np.mean(path_scores))),
        path=path,
        path_scores=path_scores,
        avg_distance=float(np.mean(path_distances)),
    )
