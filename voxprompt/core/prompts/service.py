"""EnhancedPrompt data access."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from voxprompt.core.database.session import persistence_guard
from voxprompt.core.errors import RecordNotFound
from voxprompt.core.prompts.models import EnhancedPrompt, FollowUp
from voxprompt.core.transcriptions.models import Transcription
from voxprompt.core.transcriptions.service import parse_id


async def create_enhanced_prompt(
    db: AsyncSession,
    *,
    transcription_id: str | UUID,
    enhanced_prompt: str,
    summary: str,
    original_text: str,
    target_agent: str,
    prompt_style: str,
    suggested_follow_ups: list[str] | None = None,
) -> EnhancedPrompt:
    """
    Insert an enhanced prompt and its follow-ups in one commit.

    Raises:
        RecordNotFound: If the owning transcription does not exist
    """
    uid = parse_id(transcription_id)
    if uid is None:
        raise RecordNotFound("Transcription not found")

    async with persistence_guard(db, "create enhanced prompt"):
        exists = await db.execute(select(Transcription.id).where(Transcription.id == uid))
        if exists.scalar_one_or_none() is None:
            raise RecordNotFound("Transcription not found")

        prompt = EnhancedPrompt(
            transcription_id=uid,
            enhanced_prompt=enhanced_prompt,
            summary=summary,
            original_text=original_text,
            target_agent=target_agent,
            prompt_style=prompt_style,
            suggested_follow_ups=[
                FollowUp(position=position, text=text)
                for position, text in enumerate(suggested_follow_ups or [])
            ],
        )
        db.add(prompt)
        await db.commit()

    return prompt


async def get_enhanced_prompt(db: AsyncSession, prompt_id: str | UUID) -> EnhancedPrompt | None:
    uid = parse_id(prompt_id)
    if uid is None:
        return None

    async with persistence_guard(db, "fetch enhanced prompt"):
        result = await db.execute(
            select(EnhancedPrompt)
            .where(EnhancedPrompt.id == uid)
            .options(selectinload(EnhancedPrompt.suggested_follow_ups))
        )
        return result.scalar_one_or_none()


async def list_enhanced_prompts_for_transcription(
    db: AsyncSession,
    transcription_id: UUID,
) -> list[EnhancedPrompt]:
    """Enhanced prompts of one transcription, newest first."""
    async with persistence_guard(db, "fetch enhanced prompts"):
        result = await db.execute(
            select(EnhancedPrompt)
            .where(EnhancedPrompt.transcription_id == transcription_id)
            .options(selectinload(EnhancedPrompt.suggested_follow_ups))
            .order_by(EnhancedPrompt.created_at.desc())
        )
        return list(result.scalars().all())


async def delete_enhanced_prompt(db: AsyncSession, prompt: EnhancedPrompt) -> None:
    async with persistence_guard(db, "delete enhanced prompt"):
        await db.delete(prompt)
        await db.commit()
