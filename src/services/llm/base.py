"""
Abstract base class for LLM providers.

All LLM implementations (Groq, Claude, Ollama) must implement this interface,
enabling provider-agnostic business logic in the service layer.
"""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """Interface that every LLM provider must implement."""

    @abstractmethod
    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a text response.

        Args:
            prompt: The user prompt to send to the model.
            **kwargs: ``system`` (system instruction), ``temperature``,
                ``max_tokens`` and ``json_mode`` (ask the provider to emit
                a single JSON object when it supports it).

        Returns:
            The model's text response.
        """
