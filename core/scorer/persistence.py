#!/usr/bin/env python3
"""
Persistence Operations - write batch scores back onto postings.

The score column is overwritten unconditionally; degraded scores are
stored like any other.
"""

import logging
from typing import Iterable

from core.scorer.models import ScoredPosting

logger = logging.getLogger(__name__)


def _to_float(value) -> float:
    """Convert value to native Python float for database compatibility."""
    if value is None:
        return 0.0
    return float(value)


def save_scores(repo, results: Iterable[ScoredPosting]) -> int:
    """
    Persist match scores through the repository.

    Args:
        repo: InternshipRepository bound to an open session
        results: Scored postings

    Returns:
        Number of postings updated (missing postings are skipped)
    """
    saved = 0
    for scored in results:
        if repo.update_posting_score(scored.posting_id, _to_float(scored.score)):
            saved += 1
        else:
            logger.warning(f"Posting {scored.posting_id} disappeared before its score was saved")
    return saved
