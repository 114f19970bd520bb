#!/usr/bin/env python3
"""
Weighted Attribute Scoring - Stage 2.

Asks the LLM for skills/experience/location/company sub-scores and
combines them with caller-supplied weights:

    weighted = skills*w.skills + experience*w.experience
             + location*w.location + company*w.company

Weights are used as given (no renormalization). The LLM answer is decoded
with a strict schema; anything that does not validate raises
ScoreUnavailable so the fusion stage can fall back. No retries here:
retrying belongs to the LLM client wrapper.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from core.config_loader import MatchingWeights
from core.errors import ExternalServiceError, ScoreUnavailable
from core.llm.interfaces import LLMProvider
from core.llm.parsing import extract_json_object
from core.llm.system_prompts import MATCH_ANALYSIS_SYSTEM_PROMPT, MATCH_ANALYSIS_USER_PROMPT
from core.scorer.models import AttributeAnalysis, ParseOutcome, SubScores, WeightedScore

logger = logging.getLogger(__name__)


def parse_attribute_analysis(text: Optional[str]) -> ParseOutcome:
    """Decode an LLM answer into an AttributeAnalysis, never raising."""
    data = extract_json_object(text)
    if data is None:
        return ParseOutcome(error="No JSON object found in LLM response")

    try:
        return ParseOutcome(analysis=AttributeAnalysis.model_validate(data))
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err['loc']) for err in e.errors())
        return ParseOutcome(error=f"LLM response failed schema validation ({fields})")


def combine_sub_scores(sub_scores: SubScores, weights: MatchingWeights) -> float:
    """Weighted sum of sub-scores."""
    return (
        sub_scores.skills * weights.skills
        + sub_scores.experience * weights.experience
        + sub_scores.location * weights.location
        + sub_scores.company * weights.company
    )


class AttributeScorer:
    """Stage-2 scorer backed by an LLM completion."""

    def __init__(
        self,
        ai_service: LLMProvider,
        temperature: float = 0.3,
        max_tokens: Optional[int] = 800
    ):
        self.ai_service = ai_service
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_prompt(self, profile_text: str, posting_text: str, weights: MatchingWeights) -> str:
        return MATCH_ANALYSIS_USER_PROMPT.format(
            profile_text=profile_text,
            posting_text=posting_text,
            skills_weight=weights.skills,
            experience_weight=weights.experience,
            location_weight=weights.location,
            company_weight=weights.company,
        )

    def score(self, profile_text: str, posting_text: str, weights: MatchingWeights) -> WeightedScore:
        """Get sub-scores from the LLM and combine them.

        Raises:
            ScoreUnavailable: LLM call failed or its answer did not validate
        """
        try:
            response_text = self.ai_service.complete(
                MATCH_ANALYSIS_SYSTEM_PROMPT,
                self.build_prompt(profile_text, posting_text, weights),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except ExternalServiceError as e:
            raise ScoreUnavailable(f"Match analysis call failed: {e}") from e

        outcome = parse_attribute_analysis(response_text)
        if not outcome.ok:
            raise ScoreUnavailable(outcome.error)

        sub_scores = outcome.analysis.sub_scores
        value = combine_sub_scores(sub_scores, weights)

        return WeightedScore(value=value, sub_scores=sub_scores, analysis=outcome.analysis)
