#!/usr/bin/env python3
"""
Match Scoring Service - scores one applicant profile against many postings.

Per posting:
- Stage 1: cosine similarity between profile and posting embeddings
- Stage 2: weighted LLM attribute score (may be unavailable)
- Fusion: blended final score, or similarity alone when stage 2 is missing

One posting failing never fails the batch. Only a missing profile vector
(profile embedding call failing) propagates to the caller.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence
import logging

from core.config_loader import MatchingConfig, MatchingWeights
from core.errors import ScoreUnavailable
from core.llm.interfaces import LLMProvider
from core.matcher.dto import ProfileDTO, PostingDTO
from core.matcher.similarity import cosine_similarity
from core.matcher.text_builder import build_profile_text, build_posting_text

from core.scorer.fusion import fuse_scores
from core.scorer.models import BatchScoreResult, ScoredPosting, ScoringFailure
from core.scorer.weighted import AttributeScorer

logger = logging.getLogger(__name__)

HIGH = "high"
MEDIUM = "medium"
LOW = "low"


def bucket_for(score: float, config: MatchingConfig) -> Optional[str]:
    """Return the summary bucket for a score, or None below the low threshold."""
    if score >= config.high_threshold:
        return HIGH
    if score >= config.medium_threshold:
        return MEDIUM
    if score >= config.low_threshold:
        return LOW
    return None


class MatchScoringService:
    """
    Two-stage match scorer.

    The LLM provider is used for both embeddings (stage 1) and the
    attribute analysis (stage 2, via AttributeScorer).
    """

    def __init__(
        self,
        ai_service: LLMProvider,
        config: Optional[MatchingConfig] = None,
        attribute_scorer: Optional[AttributeScorer] = None
    ):
        self.ai_service = ai_service
        self.config = config or MatchingConfig()
        self.attribute_scorer = attribute_scorer or AttributeScorer(ai_service)

    def score_posting(
        self,
        profile_text: str,
        profile_vector: List[float],
        posting: PostingDTO,
        weights: MatchingWeights
    ) -> ScoredPosting:
        """Score a single posting against an already-embedded profile.

        Stage-1 errors (embedding call, DimensionMismatch) propagate; stage-2
        errors are absorbed into a degraded result.
        """
        posting_text = build_posting_text(posting)
        posting_vector = self.ai_service.generate_embedding(posting_text)
        similarity = cosine_similarity(profile_vector, posting_vector)

        weighted = None
        sub_scores = None
        advisory = {}
        degraded_reason = None
        try:
            weighted_result = self.attribute_scorer.score(profile_text, posting_text, weights)
            weighted = weighted_result.value
            sub_scores = weighted_result.sub_scores
            advisory = weighted_result.analysis.advisory()
        except ScoreUnavailable as e:
            degraded_reason = str(e)
        except Exception as e:
            degraded_reason = f"{type(e).__name__}: {e}"

        fused = fuse_scores(
            similarity,
            weighted,
            similarity_weight=self.config.similarity_weight,
            weighted_weight=self.config.weighted_weight,
        )

        if fused.degraded:
            logger.warning(
                f"Degraded score for posting {posting.id} ({posting.title}): "
                f"using similarity only ({degraded_reason})"
            )

        return ScoredPosting(
            posting=posting,
            score=fused.score,
            similarity=similarity,
            degraded=fused.degraded,
            weighted_score=fused.weighted,
            sub_scores=sub_scores,
            advisory=advisory,
            degraded_reason=degraded_reason,
        )

    def _score_isolated(
        self,
        profile_text: str,
        profile_vector: List[float],
        posting: PostingDTO,
        weights: MatchingWeights
    ):
        try:
            return self.score_posting(profile_text, profile_vector, posting, weights)
        except Exception as e:
            logger.error(f"Failed to score posting {posting.id} ({posting.title}): {e}")
            return ScoringFailure(posting_id=posting.id, title=posting.title, error=str(e))

    def score_batch(
        self,
        profile: ProfileDTO,
        postings: Sequence[PostingDTO],
        weights: Optional[MatchingWeights] = None
    ) -> BatchScoreResult:
        """Score every posting for a profile.

        Args:
            profile: Applicant profile
            postings: Postings to score (may be empty)
            weights: Attribute weights; config defaults when None

        Returns:
            BatchScoreResult with results sorted by score descending
            (stable, ties keep input order) and bucket counts

        Raises:
            ExternalServiceError: the profile embedding could not be generated
        """
        weights = weights or self.config.default_weights
        result = BatchScoreResult()

        if not postings:
            return result

        profile_text = build_profile_text(profile)
        profile_vector = self.ai_service.generate_embedding(profile_text)

        workers = max(1, int(self.config.max_workers or 1))
        if workers > 1 and len(postings) > 1:
            with ThreadPoolExecutor(max_workers=min(workers, len(postings))) as executor:
                outcomes = list(executor.map(
                    lambda p: self._score_isolated(profile_text, profile_vector, p, weights),
                    postings
                ))
        else:
            outcomes = [
                self._score_isolated(profile_text, profile_vector, p, weights)
                for p in postings
            ]

        for outcome in outcomes:
            if isinstance(outcome, ScoringFailure):
                result.failures.append(outcome)
            else:
                result.results.append(outcome)

        # sorted() is stable
        result.results = sorted(result.results, key=lambda r: r.score, reverse=True)

        for scored in result.results:
            bucket = bucket_for(scored.score, self.config)
            if bucket == HIGH:
                result.high_count += 1
            elif bucket == MEDIUM:
                result.medium_count += 1
            elif bucket == LOW:
                result.low_count += 1

        logger.info(
            f"Scored {len(result.results)}/{len(postings)} postings for profile {profile.id} "
            f"(high={result.high_count}, medium={result.medium_count}, low={result.low_count}, "
            f"degraded={result.degraded_count}, failed={len(result.failures)})"
        )
        return result
