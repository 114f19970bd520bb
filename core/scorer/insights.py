#!/usr/bin/env python3
"""
Matching Insights - patterns over a user's best-scoring postings.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence
import re

HIGH_MATCH_THRESHOLD = 0.8
LOW_AVERAGE_THRESHOLD = 0.6
TOP_N = 5

# Vocabulary scanned for in the requirements of high-match postings
TECH_SKILLS = (
    'React', 'JavaScript', 'TypeScript', 'Node.js', 'Python',
    'AWS', 'Docker', 'Git', 'Agile', 'SQL', 'MongoDB',
)


@dataclass
class MatchingInsights:
    total_postings: int = 0
    high_match_count: int = 0
    average_match_score: float = 0.0
    top_companies: List[Dict[str, Any]] = field(default_factory=list)
    top_locations: List[Dict[str, Any]] = field(default_factory=list)
    recommended_skills: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


def _score(posting: Any) -> float:
    return float(getattr(posting, 'match_score', None) or 0.0)


def _top(counter: Counter, key: str) -> List[Dict[str, Any]]:
    # most_common keeps first-seen order for equal counts
    return [{key: name, 'count': count} for name, count in counter.most_common(TOP_N)]


def extract_common_skills(postings: Sequence[Any]) -> List[str]:
    """Skills from TECH_SKILLS mentioned in the postings' requirements, most frequent first."""
    counts: Counter = Counter()
    for posting in postings:
        text = getattr(posting, 'requirements', None) or ''
        if not text:
            continue
        for skill in TECH_SKILLS:
            if re.search(r'(?<![\w.])' + re.escape(skill) + r'(?![\w])', text, re.IGNORECASE):
                counts[skill] += 1
    return [skill for skill, _ in counts.most_common()]


def generate_suggestions(postings: Sequence[Any], high_matches: Sequence[Any]) -> List[str]:
    suggestions = []

    if not high_matches:
        suggestions.append('Consider updating your profile with more specific skills and experience')

    remote_count = sum(
        1 for p in postings if 'remote' in (getattr(p, 'location', None) or '').lower()
    )
    if remote_count > len(postings) * 0.5:
        suggestions.append('Many opportunities are remote - consider highlighting remote work experience')

    average = sum(_score(p) for p in postings) / len(postings) if postings else 0.0
    if average < LOW_AVERAGE_THRESHOLD:
        suggestions.append('Your profile might need more specific technical keywords to improve matching')

    suggestions.append('Apply to high-match internships first to maximize success rate')
    return suggestions


def compute_matching_insights(postings: Sequence[Any]) -> MatchingInsights:
    """
    Summarize a user's top postings.

    Args:
        postings: Postings (ORM rows or DTOs) with company, location,
            requirements and match_score attributes, best first

    Returns:
        MatchingInsights; unscored postings count as score 0
    """
    if not postings:
        return MatchingInsights(suggestions=generate_suggestions([], []))

    high_matches = [p for p in postings if _score(p) >= HIGH_MATCH_THRESHOLD]
    companies = Counter(getattr(p, 'company', None) or 'Unknown' for p in postings)
    locations = Counter(getattr(p, 'location', None) or 'Remote' for p in postings)

    return MatchingInsights(
        total_postings=len(postings),
        high_match_count=len(high_matches),
        average_match_score=sum(_score(p) for p in postings) / len(postings),
        top_companies=_top(companies, 'company'),
        top_locations=_top(locations, 'location'),
        recommended_skills=extract_common_skills(high_matches),
        suggestions=generate_suggestions(postings, high_matches),
    )
