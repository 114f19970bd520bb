#!/usr/bin/env python3
"""
Score Fusion - blend embedding similarity with the weighted LLM score.

    final = 0.3 * similarity + 0.7 * weighted      (normal)
    final = similarity                             (degraded, weighted unavailable)

The final score is always clamped to [0, 1].
"""

import math
from typing import Optional

from core.scorer.models import FusedScore

SIMILARITY_WEIGHT = 0.3
WEIGHTED_WEIGHT = 0.7


def _clamp01(x: float) -> float:
    if math.isnan(x):
        return 0.0
    return max(0.0, min(1.0, x))


def fuse_scores(
    similarity: float,
    weighted: Optional[float],
    similarity_weight: float = SIMILARITY_WEIGHT,
    weighted_weight: float = WEIGHTED_WEIGHT
) -> FusedScore:
    """
    Produce the final match score.

    Args:
        similarity: Stage-1 cosine similarity (always available)
        weighted: Stage-2 weighted score, or None when unavailable
        similarity_weight: Share of the similarity in the blend
        weighted_weight: Share of the weighted score in the blend

    Returns:
        FusedScore tagged degraded=True when weighted is None
    """
    if weighted is None:
        return FusedScore(score=_clamp01(similarity), degraded=True, similarity=similarity)

    blended = similarity_weight * similarity + weighted_weight * weighted
    return FusedScore(
        score=_clamp01(blended),
        degraded=False,
        similarity=similarity,
        weighted=weighted,
    )
