"""Z.AI provider: speech recognition over direct HTTP, chat through the OpenAI SDK."""

import base64
from collections.abc import Callable, Mapping
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from voxprompt.config import Settings, settings as default_settings
from voxprompt.core.ai.base import (
    AIAuthenticationError,
    AIProvider,
    AIProviderError,
    AIServiceUnavailableError,
    TranscriptionResult,
)
from voxprompt.core.ai.retry import RetryPolicy
from voxprompt.core.logging import get_logger

logger = get_logger(__name__)

MISSING_CREDENTIALS_MESSAGE = (
    "AI service credentials are not configured. "
    "Set ZAI_API_KEY or create a .z-ai-config file."
)


def _from_path(*keys: str) -> Callable[[Mapping[str, Any]], str | None]:
    def extract(payload: Mapping[str, Any]) -> str | None:
        value: Any = payload
        for key in keys:
            if not isinstance(value, Mapping):
                return None
            value = value.get(key)
        return value if isinstance(value, str) else None

    return extract


def _from_segments(payload: Mapping[str, Any]) -> str | None:
    segments = payload.get("segments")
    if not isinstance(segments, list):
        return None
    texts = [seg.get("text", "") for seg in segments if isinstance(seg, Mapping)]
    joined = " ".join(t.strip() for t in texts if isinstance(t, str) and t.strip())
    return joined or None


# Known response shapes, tried in order; the first one yielding a string wins.
TRANSCRIPT_SHAPES: tuple[tuple[str, Callable[[Mapping[str, Any]], str | None]], ...] = (
    ("text", _from_path("text")),
    ("transcription", _from_path("transcription")),
    ("result.text", _from_path("result", "text")),
    ("data.text", _from_path("data", "text")),
    ("segments", _from_segments),
)


def extract_transcript_text(payload: Any) -> tuple[str, str | None]:
    """
    Pull the transcribed text out of a speech-recognition response.

    Returns:
        The text (empty string when no shape matches) and the name of the
        matching shape, or None.
    """
    if not isinstance(payload, Mapping):
        return "", None
    for shape, extract in TRANSCRIPT_SHAPES:
        text = extract(payload)
        if text is not None:
            return text, shape
    return "", None


class ZAIProvider(AIProvider):
    """
    Gateway to the Z.AI platform.

    - Speech recognition: JSON POST with the audio as base64, retried per
      the injected :class:`RetryPolicy`
    - Chat completion: OpenAI-compatible endpoint, called exactly once
    """

    def __init__(
        self,
        app_settings: Settings | None = None,
        retry_policy: RetryPolicy | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._settings = app_settings or default_settings
        self._retry_policy = retry_policy or RetryPolicy(
            max_attempts=self._settings.transcription_max_attempts,
            delay_seconds=self._settings.transcription_retry_delay_seconds,
            backoff_factor=self._settings.transcription_retry_backoff,
        )
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._chat_client: AsyncOpenAI | None = None
        self._credentials: tuple[str, str] | None = None

    @property
    def name(self) -> str:
        return "zai"

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def _resolve_credentials(self) -> tuple[str, str]:
        if self._credentials is None:
            credentials = self._settings.resolve_ai_credentials()
            if credentials is None:
                raise AIAuthenticationError(MISSING_CREDENTIALS_MESSAGE)
            self._credentials = credentials
        return self._credentials

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._settings.ai_request_timeout_seconds,
            )
        return self._http_client

    def _get_chat_client(self) -> AsyncOpenAI:
        if self._chat_client is None:
            api_key, base_url = self._resolve_credentials()
            self._chat_client = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                max_retries=0,
                timeout=self._settings.ai_request_timeout_seconds,
                http_client=self._get_http_client(),
            )
        return self._chat_client

    async def transcribe(
        self,
        audio_data: bytes,
        filename: str = "audio.wav",
        **kwargs: Any,
    ) -> TranscriptionResult:
        """
        Transcribe audio through the speech-recognition endpoint.

        Args:
            audio_data: Raw audio bytes
            filename: Original file name, forwarded for format detection

        Returns:
            TranscriptionResult from the first successful attempt
        """
        audio_b64 = base64.b64encode(audio_data).decode("ascii")
        logger.info(
            "transcription_request",
            filename=filename,
            size_bytes=len(audio_data),
            base64_length=len(audio_b64),
        )

        async def attempt() -> dict:
            return await self._post_asr(audio_b64, filename)

        payload, attempts = await self._retry_policy.execute(attempt, operation_name="transcription")
        text, shape = extract_transcript_text(payload)
        if shape is None:
            logger.warning("transcription_response_unrecognized", keys=sorted(payload)[:10])

        return TranscriptionResult(
            text=text,
            model=self._settings.ai_asr_model,
            attempts=attempts,
            raw_response=payload,
        )

    async def _post_asr(self, audio_b64: str, filename: str) -> dict:
        api_key, base_url = self._resolve_credentials()
        url = base_url.rstrip("/") + "/" + self._settings.ai_asr_path.lstrip("/")

        try:
            response = await self._get_http_client().post(
                url,
                json={
                    "model": self._settings.ai_asr_model,
                    "file_base64": audio_b64,
                    "file_name": filename,
                },
                headers={"Authorization": f"Bearer {api_key}"},
            )
        except httpx.TransportError as exc:
            raise AIServiceUnavailableError(
                f"Speech recognition service unreachable: {exc}"
            ) from exc

        if response.status_code in (401, 403):
            raise AIAuthenticationError(
                f"Speech recognition service rejected the credentials (HTTP {response.status_code})"
            )
        if response.status_code in (502, 503, 504):
            raise AIServiceUnavailableError(
                f"Speech recognition service unavailable (HTTP {response.status_code})"
            )
        if response.status_code >= 400:
            raise AIProviderError(
                f"Speech recognition request failed (HTTP {response.status_code}): "
                f"{response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise AIProviderError("Speech recognition returned a non-JSON response") from exc
        if not isinstance(payload, dict):
            raise AIProviderError("Speech recognition returned an unexpected response")
        return payload

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> str:
        """
        Chat completion against the configured model.

        Args:
            prompt: User message
            system: Optional system message
            temperature: Sampling temperature

        Returns:
            Reply content (may be empty)
        """
        messages = []

        if system:
            messages.append({"role": "system", "content": system})

        messages.append({"role": "user", "content": prompt})

        try:
            response = await self._get_chat_client().chat.completions.create(
                model=self._settings.ai_chat_model,
                messages=messages,
                temperature=temperature,
                **kwargs,
            )
        except openai.APIConnectionError as exc:
            raise AIServiceUnavailableError(f"AI service unreachable: {exc}") from exc
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise AIAuthenticationError(f"AI service rejected the credentials: {exc}") from exc
        except openai.OpenAIError as exc:
            raise AIProviderError(str(exc)) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            self._chat_client = None


# Singleton instance
_provider: ZAIProvider | None = None


def get_ai_provider() -> AIProvider:
    """Get singleton AI provider (FastAPI dependency)."""
    global _provider
    if _provider is None:
        _provider = ZAIProvider()
    return _provider


async def close_ai_provider() -> None:
    global _provider
    if _provider is not None:
        await _provider.aclose()
        _provider = None
