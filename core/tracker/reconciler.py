#!/usr/bin/env python3
"""
Status Reconciler - merge external status signals into application records.

For each of a user's applications:
1. Skip terminal records and records updated within the debounce window.
2. Ask the signal sources in priority order; the first valid, forward,
   different status wins.
3. Write the transition atomically (status, updated_at, note, applied_on)
   in its own unit of work; no session is open while sources are asked.
4. Without a proposal, leave the record untouched.

Usage:
    reconciler = StatusReconciler(internship_uow, build_status_sources(config.tracker, llm), config.tracker)
    result = reconciler.reconcile_statuses(user_id)
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, ContextManager, List, Optional, Sequence

from core.config_loader import TrackerConfig
from core.errors import ExternalServiceError, InvalidStatusProposed, ReconciliationFetchError
from core.tracker.insights import compute_insights
from core.tracker.models import (
    ReconciliationResult, StatusUpdateEvent, TrackedApplication, tracked_from_orm,
)
from core.tracker.sources import StatusSignalSource
from core.tracker.state_machine import (
    hours_between, is_forward_transition, is_terminal, validate_status,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_note(event: StatusUpdateEvent, existing: Optional[str], mode: str = "append") -> str:
    """Note text to store for a transition."""
    summary = event.summary()
    if mode == "overwrite" or not existing:
        return summary
    return f"{existing.rstrip()}\n{summary}"


class StatusReconciler:
    """Reconciles application statuses for one user at a time."""

    def __init__(
        self,
        uow: Callable[[], ContextManager[Any]],
        sources: Sequence[StatusSignalSource],
        config: Optional[TrackerConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.uow = uow
        self.sources = list(sources)
        self.config = config or TrackerConfig()
        self.clock = clock or _utcnow
        self.sleep = sleep

    def should_skip(self, application: TrackedApplication, now: datetime) -> Optional[str]:
        """Reason to skip the application without any external call, or None."""
        if is_terminal(application.status):
            return "terminal"
        if hours_between(application.updated_at, now) < self.config.debounce_hours:
            return "debounced"
        return None

    def find_transition(
        self,
        application: TrackedApplication,
        now: datetime
    ) -> Optional[StatusUpdateEvent]:
        """Ask each source in order; return the first acceptable transition."""
        for source in self.sources:
            try:
                signal = source.check(application, now)
            except ExternalServiceError as e:
                logger.warning(f"Source '{source.name}' failed for application {application.id}: {e}")
                continue

            if signal is None:
                continue

            try:
                new_status = validate_status(signal.status, source=source.name)
            except InvalidStatusProposed as e:
                logger.warning(f"Application {application.id}: {e}; ignoring")
                continue

            if new_status == application.status:
                continue

            if not is_forward_transition(application.status, new_status):
                logger.info(
                    f"Application {application.id}: ignoring backward transition "
                    f"{application.status} -> {new_status} from '{source.name}'"
                )
                continue

            return StatusUpdateEvent(
                application_id=application.id,
                old_status=application.status,
                new_status=new_status,
                source=source.name,
                details=signal.details,
                timestamp=now,
            )

        return None

    def apply_transition(self, application: TrackedApplication, event: StatusUpdateEvent) -> None:
        """Write one transition in its own unit of work (commit or rollback)."""
        note = build_note(event, application.notes, self.config.notes_mode)
        applied_on = None
        if event.new_status == "submitted" and application.applied_on is None:
            applied_on = event.timestamp

        with self.uow() as repo:
            updated = repo.update_application_status(
                application.id,
                event.new_status,
                note,
                event.timestamp,
                applied_on=applied_on,
            )
            if updated is None:
                raise LookupError(f"Application {application.id} no longer exists")

        logger.info(
            f"Updated application {application.id}: {event.old_status} -> "
            f"{event.new_status} ({event.source})"
        )

    def reconcile_statuses(self, user_id: Any) -> ReconciliationResult:
        """
        Reconcile every application of a user.

        Args:
            user_id: Owner of the applications

        Returns:
            ReconciliationResult with applied updates and fresh insights

        Raises:
            ReconciliationFetchError: the application list could not be loaded
        """
        # Snapshot to DTOs; the session is closed before any source is asked
        try:
            with self.uow() as repo:
                rows = repo.get_applications(user_id)
                applications: List[TrackedApplication] = [tracked_from_orm(row) for row in rows]
        except Exception as e:
            raise ReconciliationFetchError(f"Failed to fetch applications for user {user_id}: {e}") from e

        now = self.clock()
        result = ReconciliationResult()

        logger.info(f"Reconciling {len(applications)} application(s) for user {user_id}")

        for application in applications:
            skip_reason = self.should_skip(application, now)
            if skip_reason:
                logger.debug(f"Skipping application {application.id} ({skip_reason})")
                result.skipped_count += 1
                continue

            try:
                event = self.find_transition(application, now)
                result.checked_count += 1
                if event is not None:
                    self.apply_transition(application, event)
                    result.updates.append(event)
                    application.status = event.new_status
                    application.updated_at = event.timestamp
                    if event.new_status == "submitted" and application.applied_on is None:
                        application.applied_on = event.timestamp
            except Exception as e:
                logger.error(f"Error checking application {application.id}: {e}")
                result.failed_count += 1

            if self.config.delay_between_checks_seconds > 0:
                self.sleep(self.config.delay_between_checks_seconds)

        result.insights = compute_insights(applications, result.updates)

        logger.info(
            f"Reconciliation done for user {user_id}: checked={result.checked_count}, "
            f"updated={len(result.updates)}, skipped={result.skipped_count}, "
            f"failed={result.failed_count}"
        )
        return result
