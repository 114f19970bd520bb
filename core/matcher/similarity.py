#!/usr/bin/env python3
"""
Similarity Calculator - Cosine similarity between embedding vectors.
"""
from typing import Sequence

import numpy as np

from core.errors import DimensionMismatch


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Args:
        vec1: First vector (e.g. profile embedding)
        vec2: Second vector (e.g. posting embedding)

    Returns:
        dot(vec1, vec2) / (||vec1|| * ||vec2||), in [-1, 1]. Not clamped.
        0.0 if either vector has zero norm.

    Raises:
        DimensionMismatch: if the vectors have different lengths
    """
    a = np.asarray(vec1, dtype=float)
    b = np.asarray(vec2, dtype=float)

    if a.shape != b.shape:
        raise DimensionMismatch(a.size, b.size)

    norm1 = float(np.linalg.norm(a))
    norm2 = float(np.linalg.norm(b))

    if norm1 == 0.0 or norm2 == 0.0:
        return 0.0

    return float(np.dot(a, b)) / (norm1 * norm2)


class SimilarityCalculator:
    """Calculate cosine similarity between vectors."""

    @staticmethod
    def calculate(vec1: Sequence[float], vec2: Sequence[float]) -> float:
        return cosine_similarity(vec1, vec2)
