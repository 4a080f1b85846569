"""Audio transcription endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from voxprompt.api.schemas import SuccessResponse
from voxprompt.core.ai.base import AIProvider
from voxprompt.core.ai.zai import get_ai_provider
from voxprompt.core.database.base import isoformat
from voxprompt.core.database.session import get_db
from voxprompt.core.errors import MissingInput
from voxprompt.core.logging import bind_request_context
from voxprompt.core.transcriptions.models import TranscriptionType
from voxprompt.core.transcriptions.transcriber import transcribe_audio

router = APIRouter()


class TranscribeResponse(SuccessResponse):
    transcription: str
    word_count: int
    file_name: str
    file_size: int
    timestamp: str
    id: str


@router.post("/transcribe", response_model=TranscribeResponse)
async def transcribe(
    db: Annotated[AsyncSession, Depends(get_db)],
    provider: Annotated[AIProvider, Depends(get_ai_provider)],
    audio: Annotated[UploadFile | None, File()] = None,
    type: Annotated[str, Form()] = TranscriptionType.UPLOAD.value,
) -> TranscribeResponse:
    """
    Transcribe an uploaded or recorded audio file.

    Multipart field ``audio`` carries the file; optional field ``type`` is
    ``recording`` or ``upload``.
    """
    if audio is None:
        raise MissingInput("No audio file provided")

    content = await audio.read()
    bind_request_context(file_name=audio.filename, file_size=len(content), transcription_type=type)

    outcome = await transcribe_audio(
        db,
        provider,
        file_name=audio.filename,
        content=content,
        type=type,
    )

    return TranscribeResponse(
        transcription=outcome.text,
        word_count=outcome.word_count,
        file_name=outcome.file_name,
        file_size=outcome.file_size,
        timestamp=isoformat(outcome.created_at),
        id=outcome.id,
    )
