"""
Transcription module - Speech-to-text abstraction layer.

Factory function for creating STT instances based on provider configuration.
"""

from src.core.exceptions import ConfigurationError
from src.services.transcription.base import BaseSTT

__all__ = ["BaseSTT", "create_stt"]


def create_stt(provider: str, **kwargs) -> BaseSTT:
    """
    Factory function to create STT instance based on provider.

    Args:
        provider: STT provider name ("groq", "local")
        **kwargs: Provider-specific configuration

    Returns:
        BaseSTT implementation instance

    Raises:
        ConfigurationError: If provider is unknown or missing credentials
    """
    if provider == "groq":
        from src.services.transcription.groq import GroqSTT

        return GroqSTT(**kwargs)
    elif provider in ("local", "whisper"):
        from src.services.transcription.whisper import WhisperSTT

        return WhisperSTT(**kwargs)
    else:
        raise ConfigurationError(f"Unknown STT provider: {provider}")
