from dataclasses import dataclass
from typing import List, Optional

import requests

from core.config_loader import AppConfig, LlmConfig
from core.llm.circuit_breaker import CircuitBreaker
from core.llm.openai_service import OpenAIService
from core.scorer.service import MatchScoringService
from core.scorer.weighted import AttributeScorer
from core.tracker.sources import StatusSignalSource, build_status_sources
from core.writer.cover_letter import CoverLetterWriter


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Services are built once per process and share one circuit breaker for
    every LLM call. DB access is obtained via internship_uow() inside each
    operation.
    """
    config: AppConfig
    ai_service: OpenAIService
    circuit_breaker: CircuitBreaker
    scoring_service: MatchScoringService
    status_sources: List[StatusSignalSource]
    writer: CoverLetterWriter
    http_session: Optional[requests.Session] = None

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance (no DB session attached)
        """
        circuit_breaker = cls._build_circuit_breaker(config.llm)
        ai_service = cls._build_ai_service(config.llm, circuit_breaker)

        scoring_service = MatchScoringService(
            ai_service,
            config.matching,
            attribute_scorer=AttributeScorer(ai_service, temperature=config.llm.temperature),
        )

        http_session = requests.Session()
        status_sources = build_status_sources(config.tracker, ai_service, session=http_session)

        writer = CoverLetterWriter(ai_service, config.writer)

        return cls(
            config=config,
            ai_service=ai_service,
            circuit_breaker=circuit_breaker,
            scoring_service=scoring_service,
            status_sources=status_sources,
            writer=writer,
            http_session=http_session,
        )

    @staticmethod
    def _build_circuit_breaker(llm_config: LlmConfig) -> CircuitBreaker:
        return CircuitBreaker(
            "llm",
            threshold=llm_config.circuit_breaker_threshold,
            reset_seconds=llm_config.circuit_breaker_reset_seconds,
        )

    @staticmethod
    def _build_ai_service(llm_config: LlmConfig, circuit_breaker: CircuitBreaker) -> OpenAIService:
        """Build OpenAI service from LLM configuration."""
        model_config = {
            'completion_model': llm_config.completion_model,
            'embedding_model': llm_config.embedding_model,
            'embedding_dimensions': llm_config.embedding_dimensions,
            'temperature': llm_config.temperature,
        }

        return OpenAIService(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            model_config=model_config,
            circuit_breaker=circuit_breaker,
            request_timeout_seconds=llm_config.request_timeout_seconds,
            max_retries=llm_config.max_retries,
        )

    def close(self):
        if self.http_session is not None:
            self.http_session.close()
