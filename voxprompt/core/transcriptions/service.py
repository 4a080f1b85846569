"""Transcription data access."""

import time
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from voxprompt.core.database.base import utcnow
from voxprompt.core.database.session import persistence_guard
from voxprompt.core.prompts.models import EnhancedPrompt
from voxprompt.core.transcriptions.models import Transcription, TranscriptionType

DEFAULT_LIST_LIMIT = 20


def count_words(value: str | None) -> int:
    """Number of whitespace-delimited tokens; 0 for blank text."""
    if not value:
        return 0
    return len(value.split())


def parse_id(raw: str | UUID) -> UUID | None:
    """Parse a record identifier, returning None for malformed input."""
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except ValueError:
        return None


async def create_transcription(
    db: AsyncSession,
    *,
    text: str,
    file_name: str,
    file_size: int = 0,
    type: TranscriptionType | str = TranscriptionType.UPLOAD,
    word_count: int | None = None,
) -> Transcription:
    """Insert a transcription; ``word_count`` defaults to the computed count."""
    transcription = Transcription(
        text=text,
        word_count=count_words(text) if word_count is None else word_count,
        file_name=file_name,
        file_size=file_size,
        type=TranscriptionType(type).value,
    )

    async with persistence_guard(db, "create transcription"):
        db.add(transcription)
        await db.commit()
        await db.refresh(transcription)

    return transcription


async def get_transcription(
    db: AsyncSession,
    transcription_id: str | UUID,
    with_prompts: bool = False,
) -> Transcription | None:
    """Fetch one transcription, optionally with its enhanced prompts and follow-ups."""
    uid = parse_id(transcription_id)
    if uid is None:
        return None

    query = select(Transcription).where(Transcription.id == uid)
    if with_prompts:
        query = query.options(
            selectinload(Transcription.enhanced_prompts).selectinload(
                EnhancedPrompt.suggested_follow_ups
            )
        ).execution_options(populate_existing=True)

    async with persistence_guard(db, "fetch transcription"):
        result = await db.execute(query)
        return result.scalar_one_or_none()


async def list_transcriptions(
    db: AsyncSession,
    limit: int = DEFAULT_LIST_LIMIT,
) -> list[Transcription]:
    """Most recent transcriptions first."""
    query = (
        select(Transcription)
        .order_by(Transcription.created_at.desc())
        .limit(limit)
    )

    async with persistence_guard(db, "fetch transcriptions"):
        result = await db.execute(query)
        return list(result.scalars().all())


async def update_transcription(
    db: AsyncSession,
    transcription: Transcription,
    changes: dict[str, Any],
) -> Transcription:
    """
    Apply a partial update.

    When the text changes and no word count is supplied, the count is
    recomputed from the new text.
    """
    if "text" in changes and changes["text"] is not None:
        transcription.text = changes["text"]
        if changes.get("word_count") is None:
            transcription.word_count = count_words(transcription.text)
    if changes.get("word_count") is not None:
        transcription.word_count = changes["word_count"]
    if changes.get("file_name") is not None:
        transcription.file_name = changes["file_name"]
    if changes.get("file_size") is not None:
        transcription.file_size = changes["file_size"]
    if changes.get("type") is not None:
        transcription.type = TranscriptionType(changes["type"]).value

    async with persistence_guard(db, "update transcription"):
        await db.commit()
        await db.refresh(transcription)

    return transcription


async def delete_transcription(db: AsyncSession, transcription: Transcription) -> None:
    """Delete a transcription together with its enhanced prompts."""
    async with persistence_guard(db, "delete transcription"):
        await db.delete(transcription)
        await db.commit()


async def get_transcription_stats(db: AsyncSession) -> dict[str, Any]:
    """Total count, count per type, and count created in the last 24 hours."""
    since = utcnow() - timedelta(hours=24)

    async with persistence_guard(db, "compute transcription stats"):
        total = (await db.execute(select(func.count()).select_from(Transcription))).scalar_one()
        rows = await db.execute(
            select(Transcription.type, func.count()).group_by(Transcription.type)
        )
        by_type = {row[0]: row[1] for row in rows.all()}
        recent = (
            await db.execute(
                select(func.count())
                .select_from(Transcription)
                .where(Transcription.created_at >= since)
            )
        ).scalar_one()

    return {"total": total, "byType": by_type, "recent": recent}


async def check_database_connection(db: AsyncSession) -> dict[str, Any]:
    """Lightweight connectivity check; never raises."""
    start = time.time()
    try:
        await db.execute(sql_text("SELECT 1"))
    except SQLAlchemyError as exc:
        return {"connected": False, "error": str(exc), "latency_ms": None}
    return {
        "connected": True,
        "error": None,
        "latency_ms": round((time.time() - start) * 1000, 2),
    }
