#!/usr/bin/env python3
"""
Application insights, follow-up reminders and health metrics.

All functions are read-only and recompute from scratch on each call.
Inputs are Application rows or TrackedApplication DTOs; both expose
status, applied_on, created_at and updated_at.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Any, List, Sequence

from core.tracker.models import (
    ALL_STATUSES, ApplicationInsights, FollowUpReminder, HealthMetrics,
    StatusUpdateEvent, TrackedApplication,
)
from core.tracker.state_machine import as_utc, days_between

RECENT_WINDOW_DAYS = 30
WEEKS_IN_RECENT_WINDOW = 4


def average_response_time_days(applications: Sequence[Any]) -> float:
    """Mean of (updated_at - applied_on) in days over non-pending applications with applied_on."""
    response_times = [
        days_between(app.applied_on, app.updated_at)
        for app in applications
        if app.applied_on is not None and app.status != "pending"
    ]
    if not response_times:
        return 0.0
    return sum(response_times) / len(response_times)


def compute_insights(
    applications: Sequence[Any],
    updates: Sequence[StatusUpdateEvent] = ()
) -> ApplicationInsights:
    """Counts per status, success rate and average response time."""
    total = len(applications)
    counts = {status: 0 for status in ALL_STATUSES}
    for app in applications:
        if app.status in counts:
            counts[app.status] += 1

    return ApplicationInsights(
        total_applications=total,
        status_counts=counts,
        success_rate=counts["accepted"] / total if total else 0.0,
        average_response_time_days=average_response_time_days(applications),
        recent_updates=len(updates),
    )


def follow_up_reminders(
    applications: Sequence[TrackedApplication],
    now: datetime
) -> List[FollowUpReminder]:
    """
    Reminders keyed on whole days since applying (applied_on, else created_at).

    - submitted, day 7: medium follow-up
    - reviewing, day 14: high follow-up
    - reviewing, day 21: high status check
    """
    reminders = []

    for app in applications:
        applied = app.applied_on or app.created_at
        days = int(days_between(applied, now))

        if days == 7 and app.status == "submitted":
            reminders.append(FollowUpReminder(
                type="follow_up",
                application_id=app.id,
                company=app.company,
                position=app.title,
                message=f"One week since applying to {app.company}. Consider sending a follow-up email.",
                priority="medium",
            ))
        elif days == 14 and app.status == "reviewing":
            reminders.append(FollowUpReminder(
                type="follow_up",
                application_id=app.id,
                company=app.company,
                position=app.title,
                message=f"Two weeks since hearing from {app.company}. Time for a polite follow-up.",
                priority="high",
            ))
        elif days == 21 and app.status == "reviewing":
            reminders.append(FollowUpReminder(
                type="status_check",
                application_id=app.id,
                company=app.company,
                position=app.title,
                message=f"Three weeks since last update from {app.company}. Check application status.",
                priority="high",
            ))

    return reminders


def most_active_day(applications: Sequence[Any]) -> str:
    if not applications:
        return "No data"
    days = Counter(as_utc(app.created_at).strftime("%A") for app in applications)
    return days.most_common(1)[0][0]


def health_metrics(applications: Sequence[Any], now: datetime) -> HealthMetrics:
    total = len(applications)
    if total == 0:
        return HealthMetrics()

    cutoff = as_utc(now) - timedelta(days=RECENT_WINDOW_DAYS)
    recent = [app for app in applications if as_utc(app.created_at) >= cutoff]

    return HealthMetrics(
        total_applications=total,
        recent_applications=len(recent),
        application_rate=len(recent) / WEEKS_IN_RECENT_WINDOW,
        response_rate=sum(1 for app in applications if app.status != "pending") / total,
        success_rate=sum(1 for app in applications if app.status == "accepted") / total,
        average_response_time_days=average_response_time_days(applications),
        most_active_day=most_active_day(recent),
    )
