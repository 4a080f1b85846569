"""AI gateway."""

from voxprompt.core.ai.base import (
    AIAuthenticationError,
    AIProvider,
    AIProviderError,
    AIServiceUnavailableError,
    TranscriptionResult,
)
from voxprompt.core.ai.retry import RetryPolicy
from voxprompt.core.ai.zai import ZAIProvider, get_ai_provider

__all__ = [
    "AIAuthenticationError",
    "AIProvider",
    "AIProviderError",
    "AIServiceUnavailableError",
    "TranscriptionResult",
    "RetryPolicy",
    "ZAIProvider",
    "get_ai_provider",
]
