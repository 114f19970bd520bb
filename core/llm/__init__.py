"""LLM Module - LLM services and interfaces."""
from core.llm.interfaces import LLMProvider
from core.llm.circuit_breaker import CircuitBreaker
from core.llm.openai_service import OpenAIService

__all__ = ['LLMProvider', 'CircuitBreaker', 'OpenAIService']
