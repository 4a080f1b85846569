"""Transcription history endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from voxprompt.api.schemas import (
    CamelModel,
    EnhancedPromptRecord,
    MessageResponse,
    SuccessResponse,
    TranscriptionDetail,
    TranscriptionRecord,
)
from voxprompt.core.database.session import get_db
from voxprompt.core.errors import InvalidInput, MissingInput, RecordNotFound
from voxprompt.core.prompts.service import list_enhanced_prompts_for_transcription
from voxprompt.core.transcriptions.models import Transcription, TranscriptionType
from voxprompt.core.transcriptions.service import (
    DEFAULT_LIST_LIMIT,
    create_transcription,
    delete_transcription,
    get_transcription,
    get_transcription_stats,
    list_transcriptions,
    update_transcription,
)

router = APIRouter()


class TranscriptionCreate(CamelModel):
    transcription: str | None = None
    word_count: int | None = Field(default=None, ge=0)
    file_name: str | None = None
    file_size: int | None = Field(default=None, ge=0)
    type: str | None = None


class TranscriptionUpdate(CamelModel):
    transcription: str | None = None
    word_count: int | None = Field(default=None, ge=0)
    file_name: str | None = None
    file_size: int | None = Field(default=None, ge=0)
    type: str | None = None


class TranscriptionResponse(SuccessResponse):
    transcription: TranscriptionRecord


class TranscriptionDetailResponse(SuccessResponse):
    transcription: TranscriptionDetail


class TranscriptionListResponse(SuccessResponse):
    transcriptions: list[TranscriptionRecord]


class TranscriptionStatsResponse(SuccessResponse):
    total: int
    by_type: dict[str, int]
    recent: int


class EnhancedPromptListResponse(SuccessResponse):
    enhanced_prompts: list[EnhancedPromptRecord]


def _parse_type(value: str) -> TranscriptionType:
    try:
        return TranscriptionType(value)
    except ValueError:
        raise InvalidInput("type must be 'recording' or 'upload'")


async def _get_or_404(
    db: AsyncSession,
    transcription_id: str,
    with_prompts: bool = False,
) -> Transcription:
    transcription = await get_transcription(db, transcription_id, with_prompts=with_prompts)
    if transcription is None:
        raise RecordNotFound("Transcription not found")
    return transcription


@router.get("", response_model=TranscriptionListResponse)
async def list_transcriptions_endpoint(
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1),
) -> TranscriptionListResponse:
    """List transcriptions, newest first."""
    transcriptions = await list_transcriptions(db, limit=limit)
    return TranscriptionListResponse(
        transcriptions=[TranscriptionRecord.from_model(t) for t in transcriptions]
    )


@router.post("", response_model=TranscriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_transcription_endpoint(
    data: TranscriptionCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TranscriptionResponse:
    """Store a transcription produced elsewhere. Identical bodies create distinct records."""
    if not data.transcription or not data.file_name or not data.type:
        raise MissingInput("Missing required fields: transcription, fileName, type")

    transcription = await create_transcription(
        db,
        text=data.transcription,
        file_name=data.file_name,
        file_size=data.file_size or 0,
        type=_parse_type(data.type),
        word_count=data.word_count,
    )
    return TranscriptionResponse(transcription=TranscriptionRecord.from_model(transcription))


@router.get("/stats", response_model=TranscriptionStatsResponse)
async def transcription_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TranscriptionStatsResponse:
    """Totals overall, per type, and for the last 24 hours."""
    stats = await get_transcription_stats(db)
    return TranscriptionStatsResponse(
        total=stats["total"],
        by_type=stats["byType"],
        recent=stats["recent"],
    )


@router.get("/{transcription_id}", response_model=TranscriptionDetailResponse)
async def get_transcription_endpoint(
    transcription_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TranscriptionDetailResponse:
    transcription = await _get_or_404(db, transcription_id, with_prompts=True)
    return TranscriptionDetailResponse(transcription=TranscriptionDetail.from_model(transcription))


@router.patch("/{transcription_id}", response_model=TranscriptionResponse)
async def update_transcription_endpoint(
    transcription_id: str,
    data: TranscriptionUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TranscriptionResponse:
    """Partial update; the word count follows the text unless given."""
    transcription = await _get_or_404(db, transcription_id)

    changes = data.model_dump(exclude_unset=True)
    if "transcription" in changes:
        changes["text"] = changes.pop("transcription")
    if changes.get("type") is not None:
        changes["type"] = _parse_type(changes["type"])

    transcription = await update_transcription(db, transcription, changes)
    return TranscriptionResponse(transcription=TranscriptionRecord.from_model(transcription))


@router.delete("/{transcription_id}", response_model=MessageResponse)
async def delete_transcription_endpoint(
    transcription_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    """Delete a transcription and its enhanced prompts."""
    transcription = await _get_or_404(db, transcription_id)
    await delete_transcription(db, transcription)
    return MessageResponse(message="Transcription deleted successfully")


@router.get("/{transcription_id}/enhanced-prompts", response_model=EnhancedPromptListResponse)
async def list_transcription_prompts(
    transcription_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EnhancedPromptListResponse:
    transcription = await _get_or_404(db, transcription_id)
    prompts = await list_enhanced_prompts_for_transcription(db, transcription.id)
    return EnhancedPromptListResponse(
        enhanced_prompts=[EnhancedPromptRecord.from_model(p) for p in prompts]
    )
