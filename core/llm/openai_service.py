"""
OpenAI Service - LLM implementation using the OpenAI API.

Provides chat completions and embedding generation behind the
LLMProvider contract. Transient failures are retried with tenacity;
anything that still fails is surfaced as ExternalServiceError.
"""
from typing import Dict, Any, List, Optional
import logging

import openai
from openai import OpenAI
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity import RetryCallState

from core.errors import ExternalServiceError
from core.llm.circuit_breaker import CircuitBreaker
from core.llm.interfaces import LLMProvider

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


# ---------------------------------------------------------------------------
# Retry helpers
# ---------------------------------------------------------------------------

def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry sleep."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    if isinstance(exc, openai.RateLimitError):
        logger.warning(
            "Rate limit hit (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )
    else:
        logger.warning(
            "Transient API error (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )


def _retry_after_seconds(exc: BaseException) -> float:
    """Read the standard ``retry-after`` header of a rate-limit error, 0.0 if absent."""
    response = getattr(exc, "response", None)
    if response is None:
        return 0.0
    try:
        return float(response.headers.get("retry-after", "") or 0.0)
    except (AttributeError, ValueError):
        return 0.0


def _wait_respecting_retry_after(retry_state: RetryCallState) -> float:
    """Honour server-declared waits on rate limits, else capped exponential backoff."""
    exc = retry_state.outcome.exception()
    if isinstance(exc, openai.RateLimitError):
        wait = _retry_after_seconds(exc)
        if wait > 0:
            return min(wait, 60.0)

    exp = wait_exponential(multiplier=1, min=1, max=20)
    return exp(retry_state)


def _llm_retrying(max_attempts: int) -> Retrying:
    """Return a tenacity Retrying controller for LLM API calls."""
    return Retrying(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        wait=_wait_respecting_retry_after,
        stop=stop_after_attempt(max(1, max_attempts)),
        before_sleep=_log_retry,
        reraise=True,
    )


class OpenAIService(LLMProvider):
    """
    OpenAI LLM Service.

    Every call goes: circuit breaker -> tenacity retry -> OpenAI client
    (with a per-request timeout). The OpenAI client's own retry loop is
    disabled so only one retry policy applies.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        request_timeout_seconds: float = 30.0,
        max_retries: int = 3,
    ):
        client_kwargs: Dict[str, Any] = {
            'timeout': request_timeout_seconds,
            'max_retries': 0,
        }
        if api_key:
            client_kwargs['api_key'] = api_key
        if base_url:
            client_kwargs['base_url'] = base_url

        self.client = OpenAI(**client_kwargs)
        self.circuit_breaker = circuit_breaker
        self.max_retries = max_retries

        self.model_config = model_config or {}
        self.completion_model = self.model_config.get('completion_model', 'gpt-4o-mini')
        self.embedding_model = self.model_config.get('embedding_model', 'text-embedding-3-small')
        self.embedding_dimensions = self.model_config.get('embedding_dimensions')
        self.temperature = self.model_config.get('temperature', 0.3)

    def _call(self, service: str, operation, *args, **kwargs):
        """Run operation with retries under the circuit breaker, mapping failures."""
        def attempt():
            try:
                return _llm_retrying(self.max_retries)(operation, *args, **kwargs)
            except openai.OpenAIError as e:
                raise ExternalServiceError(service, str(e)) from e

        if self.circuit_breaker is not None:
            return self.circuit_breaker.call(attempt)
        return attempt()

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> str:
        """Run a chat completion and return the text of the first choice."""
        request: Dict[str, Any] = {
            'model': model or self.completion_model,
            'messages': [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            'temperature': self.temperature if temperature is None else temperature,
        }
        if max_tokens:
            request['max_tokens'] = max_tokens

        response = self._call("openai.chat", self.client.chat.completions.create, **request)

        try:
            content = response.choices[0].message.content
        except (IndexError, AttributeError) as e:
            raise ExternalServiceError("openai.chat", f"Malformed completion response: {e}") from e

        logger.debug(f"Completion ({request['model']}) returned {len(content or '')} chars")
        return content or ""

    def generate_embedding(self, text: str) -> List[float]:
        """Generate embedding vector for text."""
        request: Dict[str, Any] = {
            'input': text,
            'model': self.embedding_model,
        }
        if self.embedding_dimensions:
            request['dimensions'] = self.embedding_dimensions

        response = self._call("openai.embeddings", self.client.embeddings.create, **request)

        try:
            return list(response.data[0].embedding)
        except (IndexError, AttributeError, TypeError) as e:
            raise ExternalServiceError("openai.embeddings", f"Malformed embedding response: {e}") from e
