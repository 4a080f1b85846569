"""Prompt enhancement: turn raw transcribed text into an agent/style tailored prompt."""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from voxprompt.core.ai.base import AIAuthenticationError, AIProvider, AIProviderError
from voxprompt.core.database.base import utcnow
from voxprompt.core.errors import AuthError, EnhancementFailed, InputTooShort, MissingInput
from voxprompt.core.logging import get_logger

logger = get_logger(__name__)

MIN_TEXT_LENGTH = 5
ENHANCEMENT_TEMPERATURE = 0.7
DEFAULT_TARGET_AGENT = "general"
DEFAULT_PROMPT_STYLE = "professional"
DEFAULT_SUMMARY = "Prompt enhanced successfully"

AGENT_INSTRUCTIONS: dict[str, str] = {
    "chatgpt": (
        "Optimize for ChatGPT - use clear, structured prompts with specific instructions. "
        "Break complex tasks into steps."
    ),
    "claude": (
        "Optimize for Claude - use natural language, provide context and examples. "
        "Claude works well with detailed instructions."
    ),
    "gemini": "Optimize for Gemini - be concise and direct. Use bullet points for multiple requirements.",
    "copilot": "Optimize for GitHub Copilot - use code comments style, specific technical requirements.",
    "midjourney": (
        "Optimize for Midjourney - focus on visual descriptions, artistic style, "
        "lighting, and composition."
    ),
    "dalle": "Optimize for DALL-E - describe the image clearly with style, mood, and details.",
    "general": "Create a versatile prompt that works well across different AI systems.",
}

STYLE_INSTRUCTIONS: dict[str, str] = {
    "creative": "Make the prompt creative and imaginative. Encourage unique and innovative responses.",
    "professional": (
        "Make the prompt professional and business-oriented. "
        "Focus on clarity and actionable outputs."
    ),
    "technical": "Make the prompt technical and precise. Include specific requirements and constraints.",
    "educational": (
        "Make the prompt educational and explanatory. "
        "Structure it for learning and understanding."
    ),
    "conversational": (
        "Make the prompt conversational and natural. "
        "Sound like talking to a helpful assistant."
    ),
}

SYSTEM_PROMPT_TEMPLATE = """You are an expert prompt engineer who transforms raw text into highly effective prompts for AI systems. Your task is to enhance the given text into a well-structured, optimized prompt.

Guidelines for enhancement:
1. {agent_instruction}
2. {style_instruction}
3. Create the prompt in English.
4. Preserve the core intent and meaning of the original text
5. Add necessary context and clarity
6. Structure the prompt for optimal AI understanding
7. Remove filler words and improve clarity

IMPORTANT: Respond ONLY with valid JSON, no markdown formatting. Use this exact format:
{{
  "enhancedPrompt": "the enhanced prompt text here",
  "summary": "brief explanation of what was improved",
  "suggestedFollowUps": ["suggested follow-up prompt 1", "suggested follow-up prompt 2"]
}}"""

USER_PROMPT_TEMPLATE = '''Transform this text into an optimized prompt for {target_agent}:

Original Text:
"""
{text}
"""

Target AI Agent: {target_agent}
Preferred Style: {prompt_style}'''

_CODE_FENCE = re.compile(r"```(?:json)?\n?")


class MalformedUpstreamResponse(ValueError):
    """The model reply is not the JSON object we asked for."""


@dataclass
class EnhancementResult:
    enhanced_prompt: str
    summary: str
    original_text: str
    target_agent: str
    prompt_style: str
    suggested_follow_ups: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    parsed: bool = True


def build_prompts(text: str, target_agent: str, prompt_style: str) -> tuple[str, str]:
    """Return the (system, user) message pair; unknown selectors use the fallbacks."""
    system = SYSTEM_PROMPT_TEMPLATE.format(
        agent_instruction=AGENT_INSTRUCTIONS.get(target_agent, AGENT_INSTRUCTIONS[DEFAULT_TARGET_AGENT]),
        style_instruction=STYLE_INSTRUCTIONS.get(prompt_style, STYLE_INSTRUCTIONS[DEFAULT_PROMPT_STYLE]),
    )
    user = USER_PROMPT_TEMPLATE.format(
        text=text,
        target_agent=target_agent,
        prompt_style=prompt_style,
    )
    return system, user


def parse_enhancement_reply(reply: str) -> dict[str, Any]:
    """
    Decode the model's JSON reply, tolerating surrounding code fences.

    Raises:
        MalformedUpstreamResponse: If the reply is not a JSON object
    """
    candidate = reply.strip()
    if candidate.startswith("```"):
        candidate = _CODE_FENCE.sub("", candidate).strip()
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise MalformedUpstreamResponse(str(exc)) from exc
    if not isinstance(payload, dict):
        raise MalformedUpstreamResponse("reply is not a JSON object")
    return payload


def coerce_follow_ups(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


async def enhance_text(
    provider: AIProvider,
    *,
    text: Any,
    target_agent: str | None = None,
    prompt_style: str | None = None,
) -> EnhancementResult:
    """
    Enhance *text* with one chat completion call.

    A reply that is not valid JSON is used verbatim as the enhanced prompt.

    Raises:
        MissingInput: No text, or text is not a string
        InputTooShort: Fewer than 5 characters after trimming
        AuthError: Credentials missing or rejected
        EnhancementFailed: Upstream failure or empty reply
    """
    if not text or not isinstance(text, str):
        raise MissingInput("No text provided for enhancement")
    if len(text.strip()) < MIN_TEXT_LENGTH:
        raise InputTooShort()

    target_agent = target_agent or DEFAULT_TARGET_AGENT
    prompt_style = prompt_style or DEFAULT_PROMPT_STYLE
    system, user = build_prompts(text, target_agent, prompt_style)

    logger.info(
        "enhancement_started",
        text_length=len(text),
        target_agent=target_agent,
        prompt_style=prompt_style,
    )

    try:
        reply = await provider.complete(user, system=system, temperature=ENHANCEMENT_TEMPERATURE)
    except AIAuthenticationError as exc:
        raise AuthError(str(exc)) from exc
    except AIProviderError as exc:
        raise EnhancementFailed(f"AI service error: {exc}") from exc

    if not reply:
        raise EnhancementFailed("Empty response from AI service")

    try:
        payload = parse_enhancement_reply(reply)
    except MalformedUpstreamResponse as exc:
        logger.warning("enhancement_reply_not_json", error=str(exc), reply_length=len(reply))
        return EnhancementResult(
            enhanced_prompt=reply,
            summary=DEFAULT_SUMMARY,
            original_text=text,
            target_agent=target_agent,
            prompt_style=prompt_style,
            parsed=False,
        )

    enhanced = payload.get("enhancedPrompt")
    summary = payload.get("summary")
    return EnhancementResult(
        enhanced_prompt=enhanced if isinstance(enhanced, str) and enhanced else text,
        summary=summary if isinstance(summary, str) and summary else DEFAULT_SUMMARY,
        original_text=text,
        target_agent=target_agent,
        prompt_style=prompt_style,
        suggested_follow_ups=coerce_follow_ups(payload.get("suggestedFollowUps")),
    )
