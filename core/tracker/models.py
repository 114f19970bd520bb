#!/usr/bin/env python3
"""
Tracker Models - application statuses, signals and reconciliation results.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    REVIEWING = "reviewing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


ALL_STATUSES = tuple(s.value for s in ApplicationStatus)
TERMINAL_STATUSES = frozenset({ApplicationStatus.ACCEPTED.value, ApplicationStatus.REJECTED.value})

# Source tags recorded on status updates
SOURCE_SCRAPING = "scraping"
SOURCE_API = "api"
SOURCE_MANUAL = "manual"  # heuristic prediction


@dataclass
class TrackedApplication:
    """Application plus the posting fields the signal sources need.

    Detached from the ORM session so sources never touch the database.
    """
    id: str
    user_id: str
    status: str
    created_at: datetime
    updated_at: datetime
    applied_on: Optional[datetime] = None
    notes: Optional[str] = None
    company: str = ""
    title: str = ""
    link: Optional[str] = None


def tracked_from_orm(application: Any) -> TrackedApplication:
    """Build a TrackedApplication from an Application row while the session is active."""
    internship = getattr(application, 'internship', None)
    return TrackedApplication(
        id=str(application.id),
        user_id=str(application.user_id),
        status=application.status,
        created_at=application.created_at,
        updated_at=application.updated_at,
        applied_on=application.applied_on,
        notes=application.notes,
        company=(internship.company if internship else "") or "",
        title=(internship.title if internship else "") or "",
        link=internship.link if internship else None,
    )


@dataclass
class StatusSignal:
    """A status proposed by one signal source (not yet validated)."""
    status: str
    details: str = ""


@dataclass
class StatusUpdateEvent:
    """One accepted transition, used to drive a single application write."""
    application_id: str
    old_status: str
    new_status: str
    source: str
    details: str
    timestamp: datetime

    def summary(self) -> str:
        return (
            f"Status updated from {self.old_status} to {self.new_status} "
            f"({self.source}): {self.details or ''}"
        ).rstrip()


@dataclass
class ApplicationInsights:
    """Aggregate statistics over all of a user's applications."""
    total_applications: int = 0
    status_counts: Dict[str, int] = field(default_factory=lambda: {s: 0 for s in ALL_STATUSES})
    success_rate: float = 0.0  # accepted / total, as a fraction
    average_response_time_days: float = 0.0
    recent_updates: int = 0


@dataclass
class ReconciliationResult:
    checked_count: int = 0
    updates: List[StatusUpdateEvent] = field(default_factory=list)
    insights: ApplicationInsights = field(default_factory=ApplicationInsights)
    skipped_count: int = 0
    failed_count: int = 0


@dataclass
class FollowUpReminder:
    type: str  # "follow_up" or "status_check"
    application_id: str
    company: str
    position: str
    message: str
    priority: str  # "medium" or "high"


@dataclass
class HealthMetrics:
    total_applications: int = 0
    recent_applications: int = 0
    application_rate: float = 0.0  # per week over the last 30 days
    response_rate: float = 0.0
    success_rate: float = 0.0
    average_response_time_days: float = 0.0
    most_active_day: str = "No data"
