"""Base AI provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


class AIProviderError(Exception):
    """The remote AI service failed to produce a result."""


class AIServiceUnavailableError(AIProviderError):
    """Transport-level failure: the service could not be reached."""


class AIAuthenticationError(AIProviderError):
    """Credentials are missing or were rejected by the service."""


@dataclass
class TranscriptionResult:
    """Result of audio transcription."""

    text: str
    model: str = ""
    attempts: int = 1
    raw_response: dict = field(default_factory=dict)


class AIProvider(ABC):
    """Abstract base class for AI providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def transcribe(
        self,
        audio_data: bytes,
        filename: str = "audio.wav",
        **kwargs: Any,
    ) -> TranscriptionResult:
        """Transcribe audio data."""
        ...

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> str:
        """Single chat completion; returns the reply content."""
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        return None
