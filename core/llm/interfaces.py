"""
LLM Provider Interface - Abstract base for AI service providers.

This module defines the interface for LLM services (OpenAI, Ollama, etc.).
Callers only see a request/response contract: text in, vector or text out.
"""
from abc import ABC, abstractmethod
from typing import List, Optional


class LLMProvider(ABC):
    """
    Abstract Interface for AI Service Providers (OpenAI, Ollama, etc.).

    Implementations raise ``core.errors.ExternalServiceError`` when the
    underlying call fails outright.
    """

    @abstractmethod
    def generate_embedding(self, text: str) -> List[float]:
        """
        Generate a vector embedding for the given text.
        """
        pass

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        model: Optional[str] = None,
    ) -> str:
        """
        Run a chat completion and return the raw text of the first choice.

        Args:
            system_prompt: Role/instructions for the model
            user_prompt: The actual request
            temperature: Override for the configured temperature
            max_tokens: Optional cap on the response length
            model: Override for the configured completion model
        """
        pass
