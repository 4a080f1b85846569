"""Main API router aggregator."""

from fastapi import APIRouter

from voxprompt.api import enhance, enhanced_prompts, transcribe, transcriptions

api_router = APIRouter()

api_router.include_router(transcribe.router, tags=["transcribe"])
api_router.include_router(enhance.router, tags=["enhance"])
api_router.include_router(transcriptions.router, prefix="/transcriptions", tags=["transcriptions"])
api_router.include_router(enhanced_prompts.router, prefix="/enhanced-prompts", tags=["enhanced-prompts"])
