"""Prompt enhancement endpoint."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from voxprompt.api.schemas import CamelModel, SuccessResponse
from voxprompt.core.ai.base import AIProvider
from voxprompt.core.ai.zai import get_ai_provider
from voxprompt.core.database.base import isoformat
from voxprompt.core.prompts.enhancer import enhance_text

router = APIRouter()


class EnhanceRequest(CamelModel):
    # Type checked by the enhancer so a non-string gets the same error as a missing one
    text: Any = None
    language: str | None = None
    target_agent: str | None = None
    prompt_style: str | None = None


class EnhanceResponse(SuccessResponse):
    enhanced_prompt: str
    summary: str
    suggested_follow_ups: list[str]
    original_text: str
    target_agent: str
    prompt_style: str
    timestamp: str


@router.post("/enhance-prompt", response_model=EnhanceResponse)
async def enhance_prompt(
    data: EnhanceRequest,
    provider: Annotated[AIProvider, Depends(get_ai_provider)],
) -> EnhanceResponse:
    """Rewrite text as a prompt tailored to a target agent and style. Not persisted."""
    result = await enhance_text(
        provider,
        text=data.text,
        target_agent=data.target_agent,
        prompt_style=data.prompt_style,
    )

    return EnhanceResponse(
        enhanced_prompt=result.enhanced_prompt,
        summary=result.summary,
        suggested_follow_ups=result.suggested_follow_ups,
        original_text=result.original_text,
        target_agent=result.target_agent,
        prompt_style=result.prompt_style,
        timestamp=isoformat(result.created_at),
    )
