"""Pipeline execution modules for InternScout."""

from .runner import (
    run_matching_pipeline, run_status_check, run_cover_letter, build_insights_report,
    MatchingPipelineResult, StatusCheckResult, CoverLetterPipelineResult, InsightsReport,
)

__all__ = [
    'run_matching_pipeline', 'run_status_check', 'run_cover_letter', 'build_insights_report',
    'MatchingPipelineResult', 'StatusCheckResult', 'CoverLetterPipelineResult', 'InsightsReport',
]
