import numpy as np

from signmirror.config import DEFAULT_CONFIG, ComponentPolicy, ScoringConfig
from signmirror.features import FeatureVector, MotionSequence


def _has_data(seq: MotionSequence, k: int, span: slice, policy: ComponentPolicy) -> np.ndarray:
    if policy is ComponentPolicy.PRESENCE:
        return seq.presence[:, k]
    return np.any(seq.values[:, span] != 0, axis=1)


def distance_matrix(
    query: MotionSequence,
    reference: MotionSequence,
    config: ScoringConfig = DEFAULT_CONFIG,
) -> np.ndarray:
    """Pairwise component-weighted distance, shape (len(query), len(reference)).

    Each component contributes its RMS difference with its fixed weight.
    Components where neither frame carries data are left out of the
    weighted mean; a pair with no shared component has distance 0.
    Built one query row at a time, so memory stays at (m, feature length).
    """
    n, m = len(query), len(reference)
    components = config.components
    weights = np.array([comp.weight for comp in components])
    query_has = np.stack(
        [_has_data(query, k, comp.span, config.distance_policy) for k, comp in enumerate(components)], axis=1
    ).reshape(n, len(components))
    ref_has = np.stack(
        [_has_data(reference, k, comp.span, config.distance_policy) for k, comp in enumerate(components)], axis=1
    ).reshape(m, len(components))

    out = np.zeros((n, m))
    for i in range(n):
        diff = reference.values - query.values[i]
        rms = np.stack(
            [np.sqrt(np.mean(diff[:, comp.span] ** 2, axis=1)) for comp in components], axis=1
        ).reshape(m, len(components))
        active = query_has[i] | ref_has
        total_weight = active @ weights
        weighted = (active * rms) @ weights
        np.divide(weighted, total_weight, out=out[i], where=total_weight >= 0.01)
    return out


def feature_distance(a: FeatureVector, b: FeatureVector, config: ScoringConfig = DEFAULT_CONFIG) -> float:
    return float(distance_matrix(
        MotionSequence.from_vectors([a]), MotionSequence.from_vectors([b]), config
    )[0, 0])
