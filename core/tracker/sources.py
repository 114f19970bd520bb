#!/usr/bin/env python3
"""
Status Signal Sources

Each source looks at one tracked application and may propose a status.
Sources never validate or write; the reconciler does both.

Priority order used by the reconciler:
1. PortalStatusSource   - fetch the posting/portal page and look for status wording
2. AtsApiStatusSource   - query an applicant-tracking-system status endpoint
3. HeuristicStatusSource - ask the LLM, based on elapsed time in the current state

A source that cannot reach its backend raises ExternalServiceError; the
reconciler logs it and moves on to the next source.
"""

import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

import requests
from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.config_loader import TrackerConfig
from core.errors import ExternalServiceError
from core.llm.interfaces import LLMProvider
from core.llm.parsing import extract_json_object
from core.llm.system_prompts import STATUS_PREDICTION_SYSTEM_PROMPT, STATUS_PREDICTION_USER_PROMPT
from core.tracker.models import (
    ALL_STATUSES, SOURCE_API, SOURCE_MANUAL, SOURCE_SCRAPING,
    StatusSignal, TrackedApplication,
)
from core.tracker.state_machine import days_between, is_terminal

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

# Checked in order; the first status with a matching phrase wins
PORTAL_STATUS_PHRASES: List[Tuple[str, Tuple[str, ...]]] = [
    ("rejected", (
        "not moving forward",
        "no longer under consideration",
        "position has been filled",
        "application was not selected",
        "application has been declined",
    )),
    ("accepted", (
        "offer extended",
        "we are pleased to offer",
        "offer letter",
        "application status: accepted",
    )),
    ("reviewing", (
        "under review",
        "in review",
        "being reviewed",
        "interview scheduled",
        "application status: reviewing",
    )),
]

_PHRASE_PATTERNS = {
    phrase: re.compile(r"\b" + re.escape(phrase) + r"\b")
    for _, phrases in PORTAL_STATUS_PHRASES
    for phrase in phrases
}


def page_text(html: str) -> str:
    """Visible page text, lowercased, with entities decoded and scripts dropped."""
    soup = BeautifulSoup(html or "", "lxml")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    text = soup.get_text(" ").replace("\xa0", " ")
    return " ".join(text.split()).lower()


def find_status_phrase(text: str) -> Optional[Tuple[str, str]]:
    """First (status, phrase) whose phrase occurs as whole words in text."""
    for status, phrases in PORTAL_STATUS_PHRASES:
        for phrase in phrases:
            if _PHRASE_PATTERNS[phrase].search(text):
                return status, phrase
    return None


def _slug(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", (value or "").lower()).strip("-")


class StatusSignalSource(ABC):
    """Abstract status signal source."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source tag written into the status note ('scraping', 'api', 'manual')."""
        pass

    @abstractmethod
    def check(self, application: TrackedApplication, now: datetime) -> Optional[StatusSignal]:
        """
        Look for a status update.

        Args:
            application: Application being reconciled
            now: Reference time for the reconciliation run

        Returns:
            Proposed status, or None when the source has nothing to say
        """
        pass


class PortalStatusSource(StatusSignalSource):
    """Fetch the application link and match known status phrases in the page."""

    def __init__(self, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def name(self) -> str:
        return SOURCE_SCRAPING

    def check(self, application: TrackedApplication, now: datetime) -> Optional[StatusSignal]:
        if not application.link:
            return None

        try:
            response = self.session.get(
                application.link,
                headers={"User-Agent": USER_AGENT},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise ExternalServiceError("portal", f"Failed to fetch {application.link}: {e}") from e

        match = find_status_phrase(page_text(response.text))
        if match is None:
            return None

        status, phrase = match
        return StatusSignal(
            status=status,
            details=f"Status updated on company portal (found '{phrase}')",
        )


class AtsApiStatusSource(StatusSignalSource):
    """
    Query an ATS status endpoint.

    The URL template may use {company}, {company_slug} and {application_id}.
    The endpoint answers JSON with a "status" key and optional "details".
    A 404 means the ATS does not know the application.
    """

    def __init__(
        self,
        url_template: Optional[str],
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        self.url_template = url_template
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def name(self) -> str:
        return SOURCE_API

    def build_url(self, application: TrackedApplication) -> str:
        return self.url_template.format(
            company=application.company,
            company_slug=_slug(application.company),
            application_id=application.id,
        )

    def check(self, application: TrackedApplication, now: datetime) -> Optional[StatusSignal]:
        if not self.url_template:
            return None

        url = self.build_url(application)
        try:
            response = self.session.get(url, timeout=self.timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise ExternalServiceError("ats_api", f"Status request failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceError("ats_api", f"Status response is not JSON: {e}") from e

        if not isinstance(payload, dict) or not payload.get("status"):
            return None

        details = payload.get("details") or f"Status updated via {application.company} API"
        return StatusSignal(status=str(payload["status"]), details=str(details))


class StatusPrediction(BaseModel):
    """Schema of the LLM status prediction."""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    should_update: bool = Field(alias='shouldUpdate')
    new_status: Optional[str] = Field(default=None, alias='newStatus')
    reasoning: str = ""


def parse_status_prediction(text: Optional[str]) -> Optional[StatusPrediction]:
    """Decode the LLM answer; None for anything malformed (no update)."""
    data = extract_json_object(text)
    if data is None:
        return None
    try:
        return StatusPrediction.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Malformed status prediction ignored: {e.error_count()} validation error(s)")
        return None


class HeuristicStatusSource(StatusSignalSource):
    """
    LLM judgement based on how long the application has sat in its state.

    Only consulted once the application has been in its current
    non-terminal state for min_days (measured from updated_at).
    """

    def __init__(
        self,
        ai_service: LLMProvider,
        min_days: int = 3,
        temperature: float = 0.3,
        max_tokens: int = 500
    ):
        self.ai_service = ai_service
        self.min_days = min_days
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def name(self) -> str:
        return SOURCE_MANUAL

    def build_prompt(self, application: TrackedApplication, now: datetime) -> str:
        applied = application.applied_on or application.created_at
        return STATUS_PREDICTION_USER_PROMPT.format(
            current_status=application.status,
            days_in_status=int(days_between(application.updated_at, now)),
            days_since_applied=int(days_between(applied, now)),
            company=application.company or "Unknown",
            title=application.title or "Unknown",
            notes=application.notes or "No notes",
            allowed_statuses=", ".join(ALL_STATUSES),
        )

    def check(self, application: TrackedApplication, now: datetime) -> Optional[StatusSignal]:
        if is_terminal(application.status):
            return None
        if days_between(application.updated_at, now) < self.min_days:
            return None

        response_text = self.ai_service.complete(
            STATUS_PREDICTION_SYSTEM_PROMPT,
            self.build_prompt(application, now),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        prediction = parse_status_prediction(response_text)
        if prediction is None or not prediction.should_update or not prediction.new_status:
            return None

        return StatusSignal(
            status=prediction.new_status,
            details=f"AI-predicted update: {prediction.reasoning}",
        )


def build_status_sources(
    config: TrackerConfig,
    ai_service: Optional[LLMProvider] = None,
    session: Optional[requests.Session] = None
) -> List[StatusSignalSource]:
    """Enabled sources in priority order."""
    sources: List[StatusSignalSource] = []
    session = session or requests.Session()

    if config.enable_portal_check:
        sources.append(PortalStatusSource(timeout=config.request_timeout_seconds, session=session))
    if config.enable_api_check and config.ats_status_url:
        sources.append(AtsApiStatusSource(
            config.ats_status_url,
            timeout=config.request_timeout_seconds,
            session=session,
        ))
    if config.enable_prediction and ai_service is not None:
        sources.append(HeuristicStatusSource(ai_service, min_days=config.min_days_before_prediction))

    return sources
