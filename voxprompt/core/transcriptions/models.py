"""Transcription model."""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from voxprompt.core.database.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from voxprompt.core.prompts.models import EnhancedPrompt


class TranscriptionType(str, Enum):
    """How the audio reached the server."""

    RECORDING = "recording"
    UPLOAD = "upload"


class Transcription(Base, UUIDMixin, TimestampMixin):
    """
    Text produced from one audio file.

    ``word_count`` is derived from ``text`` on creation but may be supplied
    by the client, in which case it is stored as given.
    """

    __tablename__ = "transcriptions"

    text: Mapped[str] = mapped_column(Text, nullable=False)
    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    file_name: Mapped[str] = mapped_column(String(500), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TranscriptionType.UPLOAD.value
    )

    enhanced_prompts: Mapped[list["EnhancedPrompt"]] = relationship(
        back_populates="transcription",
        cascade="all, delete-orphan",
        order_by="EnhancedPrompt.created_at.desc()",
    )

    __table_args__ = (Index("idx_transcriptions_type", "type"),)

    def __repr__(self) -> str:
        return f"<Transcription {self.id} ({self.word_count} words)>"
