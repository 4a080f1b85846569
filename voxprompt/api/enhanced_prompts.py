"""Enhanced prompt persistence endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from voxprompt.api.schemas import CamelModel, EnhancedPromptRecord, MessageResponse, SuccessResponse
from voxprompt.core.database.session import get_db
from voxprompt.core.errors import MissingInput, RecordNotFound
from voxprompt.core.prompts.enhancer import coerce_follow_ups
from voxprompt.core.prompts.models import EnhancedPrompt
from voxprompt.core.prompts.service import (
    create_enhanced_prompt,
    delete_enhanced_prompt,
    get_enhanced_prompt,
)

router = APIRouter()

REQUIRED_FIELDS = (
    "transcription_id",
    "enhanced_prompt",
    "summary",
    "original_text",
    "target_agent",
    "prompt_style",
)


class EnhancedPromptCreate(CamelModel):
    transcription_id: str | None = None
    enhanced_prompt: str | None = None
    summary: str | None = None
    original_text: str | None = None
    target_agent: str | None = None
    prompt_style: str | None = None
    suggested_follow_ups: list | None = None


class EnhancedPromptResponse(SuccessResponse):
    enhanced_prompt: EnhancedPromptRecord


async def _get_or_404(db: AsyncSession, prompt_id: str) -> EnhancedPrompt:
    prompt = await get_enhanced_prompt(db, prompt_id)
    if prompt is None:
        raise RecordNotFound("Enhanced prompt not found")
    return prompt


@router.post("", response_model=EnhancedPromptResponse, status_code=status.HTTP_201_CREATED)
async def create_enhanced_prompt_endpoint(
    data: EnhancedPromptCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EnhancedPromptResponse:
    """Save the result of an enhancement against its transcription."""
    if any(not getattr(data, name) for name in REQUIRED_FIELDS):
        raise MissingInput("Missing required fields")

    prompt = await create_enhanced_prompt(
        db,
        transcription_id=data.transcription_id,
        enhanced_prompt=data.enhanced_prompt,
        summary=data.summary,
        original_text=data.original_text,
        target_agent=data.target_agent,
        prompt_style=data.prompt_style,
        suggested_follow_ups=coerce_follow_ups(data.suggested_follow_ups),
    )
    return EnhancedPromptResponse(enhanced_prompt=EnhancedPromptRecord.from_model(prompt))


@router.get("/{prompt_id}", response_model=EnhancedPromptResponse)
async def get_enhanced_prompt_endpoint(
    prompt_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EnhancedPromptResponse:
    prompt = await _get_or_404(db, prompt_id)
    return EnhancedPromptResponse(enhanced_prompt=EnhancedPromptRecord.from_model(prompt))


@router.delete("/{prompt_id}", response_model=MessageResponse)
async def delete_enhanced_prompt_endpoint(
    prompt_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MessageResponse:
    prompt = await _get_or_404(db, prompt_id)
    await delete_enhanced_prompt(db, prompt)
    return MessageResponse(message="Enhanced prompt deleted successfully")
