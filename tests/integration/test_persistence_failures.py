"""Integration tests for database failures surfacing through the API."""

import pytest
from httpx import AsyncClient
from sqlalchemy import text


async def drop_table(engine, table: str) -> None:
    async with engine.begin() as conn:
        await conn.execute(text(f"DROP TABLE {table}"))


@pytest.mark.integration
@pytest.mark.asyncio
class TestBrokenTranscriptionsTable:

    async def test_transcribe_still_returns_text(
        self, async_client: AsyncClient, test_engine, stub_provider, sample_audio_file
    ):
        await drop_table(test_engine, "transcriptions")
        stub_provider.transcribe_results = ["spoken words survive"]

        response = await async_client.post(
            "/api/transcribe",
            files={"audio": ("sample.mp3", sample_audio_file, "audio/mpeg")},
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["success"] is True
        assert data["transcription"] == "spoken words survive"
        assert data["wordCount"] == 3
        assert data["id"]

    async def test_list_fails(self, async_client: AsyncClient, test_engine):
        await drop_table(test_engine, "transcriptions")

        response = await async_client.get("/api/transcriptions")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to fetch transcriptions"}

    async def test_manual_create_fails(self, async_client: AsyncClient, test_engine):
        await drop_table(test_engine, "transcriptions")

        response = await async_client.post(
            "/api/transcriptions",
            json={"transcription": "text", "fileName": "a.wav", "type": "upload"},
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to create transcription"}

    async def test_stats_fail(self, async_client: AsyncClient, test_engine):
        await drop_table(test_engine, "transcriptions")

        response = await async_client.get("/api/transcriptions/stats")

        assert response.status_code == 500
        assert response.json()["success"] is False


@pytest.mark.integration
@pytest.mark.asyncio
class TestBrokenEnhancedPromptsTable:

    async def test_enhanced_prompt_create_fails(
        self, async_client: AsyncClient, test_engine, create_transcription_via_api
    ):
        transcription = await create_transcription_via_api()
        await drop_table(test_engine, "follow_ups")
        await drop_table(test_engine, "enhanced_prompts")

        response = await async_client.post(
            "/api/enhanced-prompts",
            json={
                "transcriptionId": transcription["id"],
                "enhancedPrompt": "Build a todo app.",
                "summary": "Clarified",
                "originalText": "make a todo app",
                "targetAgent": "general",
                "promptStyle": "technical",
                "suggestedFollowUps": ["Add tests"],
            },
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to create enhanced prompt"}
