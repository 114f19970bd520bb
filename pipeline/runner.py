"""Shared pipeline runner module.

Entry points used by main.py (and anything else that drives the core):
matching, status tracking, insights and cover letters. Each one opens its
own unit of work, keeps LLM calls outside open transactions where it can,
and returns a result dataclass instead of raising.
"""

import time
from datetime import datetime, timezone
import logging
from typing import List, Optional, Sequence, Any
from dataclasses import dataclass, field

from core.app_context import AppContext
from core.config_loader import MatchingWeights
from core.errors import ProfileNotFoundError
from core.matcher.dto import profile_from_orm, posting_from_orm
from core.scorer.insights import MatchingInsights, compute_matching_insights
from core.scorer.models import ScoredPosting, ScoringFailure
from core.scorer.persistence import save_scores
from core.tracker.insights import compute_insights, follow_up_reminders, health_metrics
from core.tracker.models import (
    ApplicationInsights, FollowUpReminder, HealthMetrics, StatusUpdateEvent, tracked_from_orm,
)
from core.tracker.reconciler import StatusReconciler
from core.writer.cover_letter import CoverLetterResult
from database.uow import internship_uow
from pipeline.control import StatusCheckLock

logger = logging.getLogger(__name__)


@dataclass
class MatchingPipelineResult:
    """Result of running the matching pipeline."""
    success: bool
    processed_count: int = 0
    saved_count: int = 0
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    degraded_count: int = 0
    results: List[ScoredPosting] = field(default_factory=list)
    failures: List[ScoringFailure] = field(default_factory=list)
    error: Optional[str] = None
    execution_time: float = 0.0


@dataclass
class StatusCheckResult:
    """Result of one status reconciliation run."""
    success: bool
    checked_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    updates: List[StatusUpdateEvent] = field(default_factory=list)
    insights: Optional[ApplicationInsights] = None
    reminders: List[FollowUpReminder] = field(default_factory=list)
    error: Optional[str] = None
    execution_time: float = 0.0


@dataclass
class InsightsReport:
    matching: MatchingInsights
    applications: ApplicationInsights
    health: HealthMetrics
    reminders: List[FollowUpReminder] = field(default_factory=list)


@dataclass
class CoverLetterPipelineResult:
    success: bool
    letter: Optional[CoverLetterResult] = None
    application_id: Optional[str] = None
    error: Optional[str] = None


def run_matching_pipeline(
    ctx: AppContext,
    user_id: Any,
    posting_ids: Optional[Sequence[Any]] = None,
    weights: Optional[MatchingWeights] = None
) -> MatchingPipelineResult:
    """Score a user's postings and write the scores back.

    Args:
        ctx: Application context with config and services
        user_id: Profile to score for
        posting_ids: Postings to score; None or empty means all of the user's postings
        weights: Attribute weights; config defaults when None

    Returns:
        MatchingPipelineResult with counts and the sorted scored postings
    """
    pipeline_start = time.time()

    logger.info("=" * 60)
    logger.info("STARTING MATCHING PIPELINE")
    logger.info("=" * 60)

    matching_config = ctx.config.matching
    if not matching_config.enabled:
        logger.info("=== MATCHING PIPELINE: Skipped (disabled in config) ===")
        return MatchingPipelineResult(success=True, error="Matching disabled in config")

    try:
        if weights is not None:
            weights.validate_sum()

        step_start = time.time()
        logger.info("=== MATCHING STEP 1: Loading Profile & Postings ===")

        # Convert to DTOs inside the UOW; LLM calls happen after it closes
        with internship_uow() as repo:
            profile_row = repo.get_profile(user_id)
            if profile_row is None:
                raise ProfileNotFoundError(f"Profile not found: {user_id}")
            profile = profile_from_orm(profile_row)

            if posting_ids:
                rows = repo.get_postings(posting_ids, user_id=user_id)
            else:
                rows = repo.get_postings(user_id=user_id)
            postings = [posting_from_orm(row) for row in rows]

        logger.info(
            f"MATCHING Step 1 completed: Loaded profile '{profile.name}' and "
            f"{len(postings)} posting(s) in {time.time() - step_start:.2f}s"
        )

        step_start = time.time()
        logger.info("=== MATCHING STEP 2: Scoring (Similarity + Weighted + Fusion) ===")
        batch = ctx.scoring_service.score_batch(profile, postings, weights)
        logger.info(f"MATCHING Step 2 completed: Scored {len(batch.results)} posting(s) in {time.time() - step_start:.2f}s")

        if batch.results:
            logger.info("Top 5 Matches:")
            for i, scored in enumerate(batch.results[:5], 1):
                flag = " [degraded]" if scored.degraded else ""
                logger.info(
                    f"  {i}. {scored.posting.title} @ {scored.posting.company}: "
                    f"score={scored.score:.2f} (similarity={scored.similarity:.2f}){flag}"
                )

        step_start = time.time()
        logger.info("=== MATCHING STEP 3: Saving Scores ===")
        with internship_uow() as repo:
            saved_count = save_scores(repo, batch.results)
        logger.info(f"MATCHING Step 3 completed: Saved {saved_count} score(s) in {time.time() - step_start:.2f}s")

        execution_time = time.time() - pipeline_start
        logger.info("=" * 60)
        logger.info(f"MATCHING PIPELINE COMPLETED in {execution_time:.2f}s")
        logger.info("=" * 60)

        return MatchingPipelineResult(
            success=True,
            processed_count=batch.processed,
            saved_count=saved_count,
            high_count=batch.high_count,
            medium_count=batch.medium_count,
            low_count=batch.low_count,
            degraded_count=batch.degraded_count,
            results=batch.results,
            failures=batch.failures,
            execution_time=execution_time,
        )

    except Exception as e:
        logger.exception("Error in matching pipeline")
        return MatchingPipelineResult(
            success=False,
            error=str(e),
            execution_time=time.time() - pipeline_start,
        )


def run_status_check(ctx: AppContext, user_id: Any, source: str = "cli") -> StatusCheckResult:
    """Reconcile a user's application statuses under the per-user lock."""
    pipeline_start = time.time()
    tracker_config = ctx.config.tracker

    logger.info("=" * 60)
    logger.info("STARTING STATUS CHECK")
    logger.info("=" * 60)

    if not tracker_config.enabled:
        logger.info("=== STATUS CHECK: Skipped (disabled in config) ===")
        return StatusCheckResult(success=True, error="Tracking disabled in config")

    lock = StatusCheckLock(user_id, lock_dir=tracker_config.lock_dir)
    if not lock.acquire(source):
        owner = lock.get_lock_info() or {}
        error_msg = f"Status check already running for user {user_id} (pid {owner.get('pid', '?')})"
        logger.warning(error_msg)
        return StatusCheckResult(success=False, error=error_msg)

    try:
        reconciler = StatusReconciler(internship_uow, ctx.status_sources, tracker_config)
        outcome = reconciler.reconcile_statuses(user_id)

        with internship_uow() as repo:
            tracked = [tracked_from_orm(row) for row in repo.get_applications(user_id)]
        reminders = follow_up_reminders(tracked, reconciler.clock())

        execution_time = time.time() - pipeline_start
        logger.info("=" * 60)
        logger.info(
            f"STATUS CHECK COMPLETED in {execution_time:.2f}s: "
            f"{len(outcome.updates)} update(s), {len(reminders)} reminder(s)"
        )
        logger.info("=" * 60)

        return StatusCheckResult(
            success=True,
            checked_count=outcome.checked_count,
            skipped_count=outcome.skipped_count,
            failed_count=outcome.failed_count,
            updates=outcome.updates,
            insights=outcome.insights,
            reminders=reminders,
            execution_time=execution_time,
        )

    except Exception as e:
        logger.exception("Error in status check")
        return StatusCheckResult(
            success=False,
            error=str(e),
            execution_time=time.time() - pipeline_start,
        )
    finally:
        lock.release()


def build_insights_report(ctx: AppContext, user_id: Any, now=None) -> InsightsReport:
    """Read-only matching and application insights for a user."""
    now = now or datetime.now(timezone.utc)

    with internship_uow() as repo:
        top_postings = repo.get_top_postings(user_id, limit=ctx.config.matching.insights_limit)
        matching = compute_matching_insights(top_postings)

        tracked = [tracked_from_orm(row) for row in repo.get_applications(user_id)]

    return InsightsReport(
        matching=matching,
        applications=compute_insights(tracked),
        health=health_metrics(tracked, now),
        reminders=follow_up_reminders(tracked, now),
    )


def run_cover_letter(
    ctx: AppContext,
    user_id: Any,
    posting_id: Any,
    tone: Optional[str] = None,
    length: Optional[str] = None,
    custom_points: Optional[Sequence[str]] = None,
    with_variations: Optional[bool] = None
) -> CoverLetterPipelineResult:
    """Generate a cover letter and store it on the user's application for the posting."""
    try:
        with internship_uow() as repo:
            profile_row = repo.get_profile(user_id)
            if profile_row is None:
                raise ProfileNotFoundError(f"Profile not found: {user_id}")
            rows = repo.get_postings([posting_id], user_id=user_id)
            if not rows:
                raise LookupError(f"Internship not found: {posting_id}")
            profile = profile_from_orm(profile_row)
            posting = posting_from_orm(rows[0])

        letter = ctx.writer.generate(
            profile,
            posting,
            tone=tone,
            length=length,
            custom_points=custom_points,
            with_variations=with_variations,
        )

        with internship_uow() as repo:
            application = repo.save_cover_letter(user_id, posting_id, letter.cover_letter)
            application_id = str(application.id)

        logger.info(f"Saved cover letter on application {application_id}")
        return CoverLetterPipelineResult(success=True, letter=letter, application_id=application_id)

    except Exception as e:
        logger.exception("Cover letter generation failed")
        return CoverLetterPipelineResult(success=False, error=str(e))
