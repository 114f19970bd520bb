"""
Tests for LLM weighted attribute scoring.
"""
import json

import pytest

from core.config_loader import MatchingWeights
from core.errors import ExternalServiceError, ScoreUnavailable
from core.llm.parsing import extract_json_object
from core.scorer.weighted import AttributeScorer, combine_sub_scores, parse_attribute_analysis
from core.scorer.models import SubScores
from tests.mocks.llm_mocks import FakeLLMProvider, analysis_json


class TestExtractJsonObject:

    def test_plain_json(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_code_fence(self):
        text = 'Here you go:\n```json\n{"a": 2}\n```\nThanks'
        assert extract_json_object(text) == {"a": 2}

    def test_embedded_in_prose(self):
        assert extract_json_object('Sure! {"a": {"b": 3}} hope it helps') == {"a": {"b": 3}}

    def test_garbage(self):
        assert extract_json_object("no json here") is None
        assert extract_json_object("") is None
        assert extract_json_object(None) is None
        assert extract_json_object("[1, 2, 3]") is None


class TestParseAttributeAnalysis:

    def test_valid_answer(self):
        outcome = parse_attribute_analysis(analysis_json())
        assert outcome.ok
        assert outcome.error is None
        assert outcome.analysis.sub_scores == SubScores(skills=0.8, experience=0.6, location=1.0, company=0.5)
        assert outcome.analysis.missing_skills == ["Docker"]

    def test_missing_sub_score_is_error(self):
        data = json.loads(analysis_json())
        del data["companyFit"]
        outcome = parse_attribute_analysis(json.dumps(data))
        assert not outcome.ok
        assert "companyFit" in outcome.error

    def test_out_of_range_sub_score_is_error(self):
        outcome = parse_attribute_analysis(analysis_json(skills=1.7))
        assert not outcome.ok

    def test_non_numeric_sub_score_is_error(self):
        outcome = parse_attribute_analysis(analysis_json(location="high"))
        assert not outcome.ok

    def test_non_json_is_error(self):
        outcome = parse_attribute_analysis("I think this is a great match!")
        assert not outcome.ok
        assert outcome.analysis is None

    def test_advisory_fields_are_lenient(self):
        outcome = parse_attribute_analysis(analysis_json(recommendations="Apply now", strengths=None))
        assert outcome.ok
        assert outcome.analysis.recommendations == ["Apply now"]
        assert outcome.analysis.strengths == []


class TestCombineSubScores:

    def test_formula(self):
        scores = SubScores(skills=0.8, experience=0.6, location=1.0, company=0.5)
        weights = MatchingWeights(skills=0.4, experience=0.3, location=0.2, company=0.1)
        assert combine_sub_scores(scores, weights) == pytest.approx(0.32 + 0.18 + 0.2 + 0.05)

    def test_weights_not_renormalized(self):
        scores = SubScores(skills=1.0, experience=1.0, location=1.0, company=1.0)
        weights = MatchingWeights(skills=1.0, experience=1.0, location=0.0, company=0.0)
        assert combine_sub_scores(scores, weights) == pytest.approx(2.0)


class TestAttributeScorer:

    def test_score_returns_weighted_value_and_advisory(self):
        llm = FakeLLMProvider(completion="```json\n" + analysis_json() + "\n```")
        scorer = AttributeScorer(llm, temperature=0.2)

        result = scorer.score("profile", "posting", MatchingWeights())

        assert result.value == pytest.approx(0.75)
        assert result.analysis.strengths == ["Python"]
        call = llm.completion_calls[0]
        assert call["temperature"] == 0.2
        assert "profile" in call["user_prompt"] and "posting" in call["user_prompt"]
        assert "Skills Weight: 0.4" in call["user_prompt"]

    def test_malformed_answer_raises_score_unavailable(self):
        scorer = AttributeScorer(FakeLLMProvider(completion="not json"))
        with pytest.raises(ScoreUnavailable):
            scorer.score("p", "q", MatchingWeights())

    def test_llm_failure_raises_score_unavailable(self):
        scorer = AttributeScorer(FakeLLMProvider(completion=ExternalServiceError("openai.chat", "timeout")))
        with pytest.raises(ScoreUnavailable) as excinfo:
            scorer.score("p", "q", MatchingWeights())
        assert isinstance(excinfo.value.__cause__, ExternalServiceError)

    def test_no_retry_on_failure(self):
        llm = FakeLLMProvider(completion="garbage")
        with pytest.raises(ScoreUnavailable):
            AttributeScorer(llm).score("p", "q", MatchingWeights())
        assert len(llm.completion_calls) == 1
