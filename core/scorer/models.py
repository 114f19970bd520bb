#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring results.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.matcher.dto import PostingDTO


class SubScores(BaseModel):
    """The four LLM sub-scores for one profile/posting pair, each in [0, 1]."""
    skills: float = Field(ge=0.0, le=1.0)
    experience: float = Field(ge=0.0, le=1.0)
    location: float = Field(ge=0.0, le=1.0)
    company: float = Field(ge=0.0, le=1.0)


class AttributeAnalysis(BaseModel):
    """
    Schema of the LLM match analysis.

    The sub-score keys are required and bounded. The advisory fields are
    carried for display only and never affect the score.
    """
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    skills_match: float = Field(alias='skillsMatch', ge=0.0, le=1.0)
    experience_match: float = Field(alias='experienceMatch', ge=0.0, le=1.0)
    location_match: float = Field(alias='locationMatch', ge=0.0, le=1.0)
    company_fit: float = Field(alias='companyFit', ge=0.0, le=1.0)

    overall_score: Optional[float] = Field(default=None, alias='overallScore')
    recommendations: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list, alias='missingSkills')
    strengths: List[str] = Field(default_factory=list)

    @field_validator('recommendations', 'missing_skills', 'strengths', mode='before')
    @classmethod
    def _coerce_text_list(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return [str(value)]

    @property
    def sub_scores(self) -> SubScores:
        return SubScores(
            skills=self.skills_match,
            experience=self.experience_match,
            location=self.location_match,
            company=self.company_fit,
        )

    def advisory(self) -> Dict[str, Any]:
        """Advisory fields in the LLM's own key names, for display."""
        return {
            'overallScore': self.overall_score,
            'recommendations': list(self.recommendations),
            'missingSkills': list(self.missing_skills),
            'strengths': list(self.strengths),
        }


@dataclass
class ParseOutcome:
    """Typed result of decoding an LLM analysis: exactly one of analysis/error is set."""
    analysis: Optional[AttributeAnalysis] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.analysis is not None


@dataclass
class WeightedScore:
    """Stage-2 output: the weighted combination of LLM sub-scores."""
    value: float
    sub_scores: SubScores
    analysis: AttributeAnalysis


@dataclass(frozen=True)
class FusedScore:
    """Final match score; degraded=True means stage 2 was unavailable."""
    score: float
    degraded: bool
    similarity: float
    weighted: Optional[float] = None


@dataclass
class ScoredPosting:
    """Complete scored match result for one posting."""
    posting: PostingDTO
    score: float
    similarity: float
    degraded: bool
    weighted_score: Optional[float] = None
    sub_scores: Optional[SubScores] = None
    advisory: Dict[str, Any] = field(default_factory=dict)
    degraded_reason: Optional[str] = None

    @property
    def posting_id(self) -> str:
        return self.posting.id


@dataclass
class ScoringFailure:
    """A posting that could not be scored at all (stage 1 failed)."""
    posting_id: str
    title: str
    error: str


@dataclass
class BatchScoreResult:
    """Outcome of scoring one profile against a batch of postings."""
    results: List[ScoredPosting] = field(default_factory=list)
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    failures: List[ScoringFailure] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.results) + len(self.failures)

    @property
    def degraded_count(self) -> int:
        return sum(1 for r in self.results if r.degraded)
