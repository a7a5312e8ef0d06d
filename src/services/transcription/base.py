"""
Abstract base class for Speech-to-Text providers.

All STT implementations (Groq API, local faster-whisper) must implement
this interface, enabling provider-agnostic transcription in the service layer.
"""

from abc import ABC, abstractmethod


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, audio_path: str, **kwargs) -> dict:
        """Transcribe an audio file to text.

        Args:
            audio_path: Path to the audio file (WAV).
            **kwargs: Provider-specific options (language, etc.).

        Returns:
            Dict with keys: ``text``, ``language``, ``duration``.
        """
