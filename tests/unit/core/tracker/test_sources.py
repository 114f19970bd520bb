"""
Tests for the status signal sources.
"""
import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
import requests

from core.config_loader import TrackerConfig
from core.errors import ExternalServiceError
from core.tracker.models import TrackedApplication
from core.tracker.sources import (
    AtsApiStatusSource,
    HeuristicStatusSource,
    PortalStatusSource,
    build_status_sources,
    parse_status_prediction,
)
from tests.mocks.llm_mocks import FakeLLMProvider

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def application(status="submitted", days_in_status=5, link="https://acme.example.com/jobs/1"):
    return TrackedApplication(
        id="a1",
        user_id="u1",
        status=status,
        created_at=NOW - timedelta(days=10),
        updated_at=NOW - timedelta(days=days_in_status),
        applied_on=NOW - timedelta(days=9),
        company="Acme Corp",
        title="Data Intern",
        link=link,
    )


def http_response(status_code=200, text="", payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if payload is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


class TestPortalStatusSource:

    def test_matches_phrase(self):
        session = MagicMock()
        session.get.return_value = http_response(text="<p>Your application is <b>Under Review</b></p>")

        signal = PortalStatusSource(timeout=5, session=session).check(application(), NOW)

        assert signal.status == "reviewing"
        assert "under review" in signal.details
        _, kwargs = session.get.call_args
        assert kwargs["timeout"] == 5
        assert "User-Agent" in kwargs["headers"]

    def test_rejection_takes_precedence(self):
        session = MagicMock()
        session.get.return_value = http_response(
            text="Interview scheduled... update: we are not moving forward with your application"
        )
        signal = PortalStatusSource(session=session).check(application(), NOW)
        assert signal.status == "rejected"

    def test_no_phrase(self):
        session = MagicMock()
        session.get.return_value = http_response(text="<h1>Data Intern</h1><p>Apply now</p>")
        assert PortalStatusSource(session=session).check(application(), NOW) is None

    def test_html_entities_are_decoded(self):
        session = MagicMock()
        session.get.return_value = http_response(text="<p>Your application is under&nbsp;review</p>")

        signal = PortalStatusSource(session=session).check(application(), NOW)

        assert signal.status == "reviewing"

    def test_script_and_style_text_ignored(self):
        session = MagicMock()
        session.get.return_value = http_response(
            text="<html><head><style>.offer-letter:before{content:'offer letter'}</style></head>"
                 "<body><script>var faq='Once an offer letter is sent...';</script>"
                 "<noscript>position has been filled</noscript><p>Thanks for applying</p></body></html>"
        )
        assert PortalStatusSource(session=session).check(application(), NOW) is None

    def test_phrases_match_whole_words_only(self):
        session = MagicMock()
        session.get.return_value = http_response(
            text="<p>We reply within reviewing windows of two weeks.</p><p>Submit within review period.</p>"
        )
        assert PortalStatusSource(session=session).check(application(), NOW) is None

    def test_no_link_makes_no_request(self):
        session = MagicMock()
        assert PortalStatusSource(session=session).check(application(link=None), NOW) is None
        session.get.assert_not_called()

    def test_network_error_becomes_external_service_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ExternalServiceError) as excinfo:
            PortalStatusSource(session=session).check(application(), NOW)
        assert excinfo.value.service == "portal"

    def test_http_error_becomes_external_service_error(self):
        session = MagicMock()
        session.get.return_value = http_response(status_code=503)

        with pytest.raises(ExternalServiceError):
            PortalStatusSource(session=session).check(application(), NOW)


class TestAtsApiStatusSource:

    TEMPLATE = "https://ats.example.com/{company_slug}/applications/{application_id}"

    def test_builds_url_and_reads_status(self):
        session = MagicMock()
        session.get.return_value = http_response(payload={"status": "reviewing", "details": "Recruiter screen"})

        signal = AtsApiStatusSource(self.TEMPLATE, session=session).check(application(), NOW)

        assert signal.status == "reviewing"
        assert signal.details == "Recruiter screen"
        assert session.get.call_args[0][0] == "https://ats.example.com/acme-corp/applications/a1"

    def test_default_details(self):
        session = MagicMock()
        session.get.return_value = http_response(payload={"status": "accepted"})

        signal = AtsApiStatusSource(self.TEMPLATE, session=session).check(application(), NOW)

        assert signal.details == "Status updated via Acme Corp API"

    def test_not_found_is_no_signal(self):
        session = MagicMock()
        session.get.return_value = http_response(status_code=404)
        assert AtsApiStatusSource(self.TEMPLATE, session=session).check(application(), NOW) is None

    def test_missing_status_key(self):
        session = MagicMock()
        session.get.return_value = http_response(payload={"state": "open"})
        assert AtsApiStatusSource(self.TEMPLATE, session=session).check(application(), NOW) is None

    def test_invalid_json(self):
        session = MagicMock()
        session.get.return_value = http_response(text="<html>")

        with pytest.raises(ExternalServiceError) as excinfo:
            AtsApiStatusSource(self.TEMPLATE, session=session).check(application(), NOW)
        assert excinfo.value.service == "ats_api"

    def test_unconfigured(self):
        session = MagicMock()
        assert AtsApiStatusSource(None, session=session).check(application(), NOW) is None
        session.get.assert_not_called()


class TestHeuristicStatusSource:

    def prediction(self, **fields):
        payload = {"shouldUpdate": True, "newStatus": "reviewing", "reasoning": "A week has passed"}
        payload.update(fields)
        return json.dumps(payload)

    def test_predicts_update(self):
        llm = FakeLLMProvider(completion=self.prediction())

        signal = HeuristicStatusSource(llm, min_days=3).check(application(days_in_status=5), NOW)

        assert signal.status == "reviewing"
        assert signal.details == "AI-predicted update: A week has passed"
        prompt = llm.completion_calls[0]["user_prompt"]
        assert "Current Status: submitted" in prompt
        assert "Days In Current Status: 5" in prompt
        assert "Days Since Applied: 9" in prompt

    def test_not_consulted_before_min_days(self):
        llm = FakeLLMProvider(completion=self.prediction())
        assert HeuristicStatusSource(llm, min_days=3).check(application(days_in_status=2), NOW) is None
        assert llm.completion_calls == []

    def test_not_consulted_for_terminal(self):
        llm = FakeLLMProvider(completion=self.prediction())
        assert HeuristicStatusSource(llm).check(application(status="accepted", days_in_status=30), NOW) is None
        assert llm.completion_calls == []

    def test_no_update_needed(self):
        llm = FakeLLMProvider(completion=self.prediction(shouldUpdate=False, newStatus=None))
        assert HeuristicStatusSource(llm).check(application(), NOW) is None

    def test_malformed_answer(self):
        llm = FakeLLMProvider(completion="Probably reviewing by now")
        assert HeuristicStatusSource(llm).check(application(), NOW) is None

    def test_llm_failure_propagates_as_external_error(self):
        llm = FakeLLMProvider(completion=ExternalServiceError("openai.chat", "rate limited"))
        with pytest.raises(ExternalServiceError):
            HeuristicStatusSource(llm).check(application(), NOW)

    def test_invalid_status_is_passed_through_for_validation(self):
        llm = FakeLLMProvider(completion=self.prediction(newStatus="withdrawn"))
        assert HeuristicStatusSource(llm).check(application(), NOW).status == "withdrawn"


class TestParseStatusPrediction:

    def test_wrong_type(self):
        assert parse_status_prediction('{"shouldUpdate": "maybe"}') is None

    def test_fenced(self):
        prediction = parse_status_prediction('```json\n{"shouldUpdate": false}\n```')
        assert prediction.should_update is False


class TestBuildStatusSources:

    def test_priority_order(self):
        config = TrackerConfig(ats_status_url="https://ats.example.com/{application_id}")
        sources = build_status_sources(config, FakeLLMProvider(), session=MagicMock())
        assert [s.name for s in sources] == ["scraping", "api", "manual"]

    def test_api_needs_url_and_heuristic_needs_llm(self):
        sources = build_status_sources(TrackerConfig(), None, session=MagicMock())
        assert [s.name for s in sources] == ["scraping"]

    def test_disabled_sources(self):
        config = TrackerConfig(
            enable_portal_check=False,
            enable_api_check=False,
            ats_status_url="https://ats.example.com/{application_id}",
        )
        sources = build_status_sources(config, FakeLLMProvider(), session=MagicMock())
        assert [s.name for s in sources] == ["manual"]
