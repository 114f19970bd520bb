"""Tracker Module - application status reconciliation and insights."""
from core.tracker.models import (
    ApplicationStatus, ALL_STATUSES, TERMINAL_STATUSES,
    TrackedApplication, StatusSignal, StatusUpdateEvent,
    ApplicationInsights, ReconciliationResult, FollowUpReminder, HealthMetrics,
)
from core.tracker.sources import (
    StatusSignalSource, PortalStatusSource, AtsApiStatusSource,
    HeuristicStatusSource, build_status_sources,
)
from core.tracker.reconciler import StatusReconciler
from core.tracker.insights import compute_insights, follow_up_reminders, health_metrics

__all__ = [
    'ApplicationStatus', 'ALL_STATUSES', 'TERMINAL_STATUSES',
    'TrackedApplication', 'StatusSignal', 'StatusUpdateEvent',
    'ApplicationInsights', 'ReconciliationResult', 'FollowUpReminder', 'HealthMetrics',
    'StatusSignalSource', 'PortalStatusSource', 'AtsApiStatusSource',
    'HeuristicStatusSource', 'build_status_sources',
    'StatusReconciler',
    'compute_insights', 'follow_up_reminders', 'health_metrics',
]
