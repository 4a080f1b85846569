"""Audio transcription pipeline: validate, call the gateway, normalize, persist."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePath
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from voxprompt.core.ai.base import (
    AIAuthenticationError,
    AIProvider,
    AIProviderError,
    AIServiceUnavailableError,
)
from voxprompt.core.database.base import utcnow
from voxprompt.core.errors import (
    AuthError,
    InvalidInput,
    MissingInput,
    PayloadTooLarge,
    PayloadTooSmall,
    PersistenceFailed,
    ServiceUnavailable,
    TranscriptionFailed,
    UnsupportedFormat,
)
from voxprompt.core.logging import get_logger
from voxprompt.core.transcriptions.models import TranscriptionType
from voxprompt.core.transcriptions.service import count_words, create_transcription

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = frozenset({"wav", "mp3", "m4a", "ogg", "webm", "mp4", "aac"})
MAX_AUDIO_BYTES = 50 * 1024 * 1024
# Anything smaller cannot hold a usable amount of speech
MIN_AUDIO_BYTES = 500


@dataclass
class TranscriptionOutcome:
    """What the transcription endpoint reports back."""

    id: str
    text: str
    word_count: int
    file_name: str
    file_size: int
    created_at: datetime
    persisted: bool


def validate_audio_upload(file_name: str | None, size: int | None) -> None:
    """
    Reject uploads before any remote call.

    Checks run in order: presence, extension, upper size bound, lower size bound.
    """
    if not file_name or size is None:
        raise MissingInput("No audio file provided")

    extension = PurePath(file_name).suffix.lower().lstrip(".")
    if extension not in ALLOWED_EXTENSIONS:
        raise UnsupportedFormat()

    if size > MAX_AUDIO_BYTES:
        raise PayloadTooLarge()
    if size < MIN_AUDIO_BYTES:
        raise PayloadTooSmall()


async def transcribe_audio(
    db: AsyncSession,
    provider: AIProvider,
    *,
    file_name: str | None,
    content: bytes | None,
    type: TranscriptionType | str = TranscriptionType.UPLOAD,
) -> TranscriptionOutcome:
    """
    Transcribe one uploaded audio file.

    Retries are applied by the provider. A failed insert does not fail the
    request: the text is still returned under a generated identifier.

    Raises:
        MissingInput, UnsupportedFormat, PayloadTooLarge, PayloadTooSmall: Invalid upload
        InvalidInput: Unknown transcription type, reported after the upload checks
        ServiceUnavailable: The service could not be reached on any attempt
        AuthError: Credentials missing or rejected
        TranscriptionFailed: Any other upstream failure
    """
    validate_audio_upload(file_name, None if content is None else len(content))
    try:
        transcription_type = TranscriptionType(type)
    except ValueError:
        raise InvalidInput("type must be 'recording' or 'upload'")

    logger.info("transcription_started", file_name=file_name, size_bytes=len(content))

    try:
        result = await provider.transcribe(content, filename=file_name)
    except AIServiceUnavailableError as exc:
        raise ServiceUnavailable() from exc
    except AIAuthenticationError as exc:
        raise AuthError(str(exc)) from exc
    except AIProviderError as exc:
        raise TranscriptionFailed(f"Transcription failed: {exc}") from exc

    text = result.text
    word_count = count_words(text)

    try:
        record = await create_transcription(
            db,
            text=text,
            file_name=file_name,
            file_size=len(content),
            type=transcription_type,
            word_count=word_count,
        )
    except PersistenceFailed as exc:
        logger.warning("transcription_persist_failed", file_name=file_name, error=str(exc))
        outcome = TranscriptionOutcome(
            id=str(uuid4()),
            text=text,
            word_count=word_count,
            file_name=file_name,
            file_size=len(content),
            created_at=utcnow(),
            persisted=False,
        )
    else:
        outcome = TranscriptionOutcome(
            id=str(record.id),
            text=record.text,
            word_count=record.word_count,
            file_name=record.file_name,
            file_size=record.file_size,
            created_at=record.created_at,
            persisted=True,
        )

    logger.info(
        "transcription_completed",
        transcription_id=outcome.id,
        word_count=word_count,
        attempts=result.attempts,
        persisted=outcome.persisted,
    )
    return outcome
