#!/usr/bin/env python3
"""
Application status state machine.

    pending -> submitted -> reviewing -> {accepted | rejected}

accepted and rejected are terminal for automated transitions. Forward
skips (e.g. submitted -> rejected) are allowed; moving backwards is not.
"""

from datetime import datetime, timezone
from typing import Optional

from core.errors import InvalidStatusProposed
from core.tracker.models import ALL_STATUSES, TERMINAL_STATUSES

_RANK = {
    "pending": 0,
    "submitted": 1,
    "reviewing": 2,
    "accepted": 3,
    "rejected": 3,
}

SECONDS_PER_DAY = 24 * 60 * 60


def validate_status(status: Optional[str], source: Optional[str] = None) -> str:
    """Return the normalized status or raise InvalidStatusProposed."""
    normalized = status.strip().lower() if isinstance(status, str) else None
    if normalized not in ALL_STATUSES:
        raise InvalidStatusProposed(str(status), source=source)
    return normalized


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def is_forward_transition(old_status: str, new_status: str) -> bool:
    """True if new_status is further along the pipeline than old_status."""
    if is_terminal(old_status):
        return False
    return _RANK[new_status] > _RANK[old_status]


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_between(start: datetime, end: datetime) -> float:
    return (as_utc(end) - as_utc(start)).total_seconds() / SECONDS_PER_DAY


def hours_between(start: datetime, end: datetime) -> float:
    return (as_utc(end) - as_utc(start)).total_seconds() / 3600
