"""Response and request models shared by the API routers.

Attributes are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from voxprompt.core.database.base import isoformat
from voxprompt.core.prompts.models import EnhancedPrompt
from voxprompt.core.transcriptions.models import Transcription


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessResponse(CamelModel):
    success: bool = True


class MessageResponse(SuccessResponse):
    message: str


class EnhancedPromptRecord(CamelModel):
    id: str
    transcription_id: str
    enhanced_prompt: str
    summary: str
    original_text: str
    target_agent: str
    prompt_style: str
    suggested_follow_ups: list[str]
    timestamp: str

    @classmethod
    def from_model(cls, prompt: EnhancedPrompt) -> "EnhancedPromptRecord":
        return cls(
            id=str(prompt.id),
            transcription_id=str(prompt.transcription_id),
            enhanced_prompt=prompt.enhanced_prompt,
            summary=prompt.summary,
            original_text=prompt.original_text,
            target_agent=prompt.target_agent,
            prompt_style=prompt.prompt_style,
            suggested_follow_ups=prompt.follow_up_texts,
            timestamp=isoformat(prompt.created_at),
        )


class TranscriptionRecord(CamelModel):
    id: str
    transcription: str
    word_count: int
    file_name: str
    file_size: int
    timestamp: str
    type: str

    @classmethod
    def from_model(cls, transcription: Transcription) -> "TranscriptionRecord":
        return cls(
            id=str(transcription.id),
            transcription=transcription.text,
            word_count=transcription.word_count,
            file_name=transcription.file_name,
            file_size=transcription.file_size,
            timestamp=isoformat(transcription.created_at),
            type=transcription.type,
        )


class TranscriptionDetail(TranscriptionRecord):
    """Single transcription with its enhanced prompts, newest first."""

    enhanced_prompts: list[EnhancedPromptRecord] = []

    @classmethod
    def from_model(cls, transcription: Transcription) -> "TranscriptionDetail":
        record = TranscriptionRecord.from_model(transcription)
        return cls(
            **record.model_dump(),
            enhanced_prompts=[
                EnhancedPromptRecord.from_model(prompt)
                for prompt in transcription.enhanced_prompts
            ],
        )
