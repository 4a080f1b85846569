"""EnhancedPrompt and FollowUp models."""

from uuid import UUID
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from voxprompt.core.database.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from voxprompt.core.transcriptions.models import Transcription


class EnhancedPrompt(Base, UUIDMixin, TimestampMixin):
    """An agent/style tailored rewrite of a transcription's text."""

    __tablename__ = "enhanced_prompts"

    transcription_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("transcriptions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    enhanced_prompt: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    target_agent: Mapped[str] = mapped_column(String(50), nullable=False)
    prompt_style: Mapped[str] = mapped_column(String(50), nullable=False)

    transcription: Mapped["Transcription"] = relationship(back_populates="enhanced_prompts")
    suggested_follow_ups: Mapped[list["FollowUp"]] = relationship(
        back_populates="enhanced_prompt",
        cascade="all, delete-orphan",
        order_by="FollowUp.position",
    )

    @property
    def follow_up_texts(self) -> list[str]:
        return [follow_up.text for follow_up in self.suggested_follow_ups]

    def __repr__(self) -> str:
        return f"<EnhancedPrompt {self.id} ({self.target_agent}/{self.prompt_style})>"


class FollowUp(Base, UUIDMixin):
    """Suggested follow-up prompt; only meaningful through its position."""

    __tablename__ = "follow_ups"

    enhanced_prompt_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("enhanced_prompts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    enhanced_prompt: Mapped["EnhancedPrompt"] = relationship(back_populates="suggested_follow_ups")

    def __repr__(self) -> str:
        return f"<FollowUp {self.position}: {self.text[:30]}>"
