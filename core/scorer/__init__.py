#!/usr/bin/env python3
"""
Scoring Module - Stage 2 and fusion.

Public API:
- MatchScoringService: batch scorer (similarity + weighted + fusion)
- AttributeScorer: LLM weighted attribute scoring
- fuse_scores: final score blend

- models.py: Data structures (ScoredPosting, BatchScoreResult, ...)
- weighted.py: LLM sub-scores, strict JSON decode, weighted sum
- fusion.py: Similarity/weighted blend with degraded fallback
- insights.py: Matching insights over a user's top postings
- persistence.py: Score write-back (save_scores)
- service.py: MatchScoringService orchestrator
"""

from core.scorer.models import (
    AttributeAnalysis, BatchScoreResult, FusedScore, ParseOutcome,
    ScoredPosting, ScoringFailure, SubScores, WeightedScore,
)
from core.scorer.fusion import fuse_scores
from core.scorer.weighted import AttributeScorer, parse_attribute_analysis
from core.scorer.service import MatchScoringService, bucket_for

__all__ = [
    'MatchScoringService', 'AttributeScorer', 'fuse_scores', 'bucket_for',
    'parse_attribute_analysis', 'AttributeAnalysis', 'BatchScoreResult',
    'FusedScore', 'ParseOutcome', 'ScoredPosting', 'ScoringFailure',
    'SubScores', 'WeightedScore',
]
