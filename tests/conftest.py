"""
Shared pytest fixtures for VoxPrompt tests.

Test categories:
    - Unit tests: no database, remote calls faked with stubs or httpx.MockTransport
    - Integration tests: HTTP API against a per-test SQLite database

The AI gateway is never contacted: integration tests override the
``get_ai_provider`` dependency with :class:`StubAIProvider` or with a
``ZAIProvider`` wired to a mock transport.
"""

import os
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# =============================================================================
# Environment Setup
# =============================================================================

# Override settings BEFORE importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("REQUIRE_MIGRATIONS_ON_STARTUP", "false")

# Now import app modules
from voxprompt.config import Settings  # noqa: E402
from voxprompt.core.ai.base import AIProvider, TranscriptionResult  # noqa: E402
from voxprompt.core.ai.retry import RetryPolicy  # noqa: E402
from voxprompt.core.ai.zai import ZAIProvider, get_ai_provider  # noqa: E402
from voxprompt.core.database.base import Base  # noqa: E402
from voxprompt.core.database.session import get_db  # noqa: E402

# Import all models to register them with Base.metadata
from voxprompt.core.prompts.models import EnhancedPrompt, FollowUp  # noqa: E402, F401
from voxprompt.core.transcriptions.models import Transcription  # noqa: E402, F401


# =============================================================================
# AI Provider Doubles
# =============================================================================


class StubAIProvider(AIProvider):
    """
    In-memory provider.

    ``transcribe_results`` and ``completions`` are consumed in order; an
    exception instance in either list is raised instead of returned.
    """

    def __init__(
        self,
        transcribe_results: list[Any] | None = None,
        completions: list[Any] | None = None,
    ):
        self.transcribe_results = list(transcribe_results or [])
        self.completions = list(completions or [])
        self.transcribe_calls: list[dict[str, Any]] = []
        self.complete_calls: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return "stub"

    async def transcribe(self, audio_data: bytes, filename: str = "audio.wav", **kwargs: Any) -> TranscriptionResult:
        self.transcribe_calls.append({"size": len(audio_data), "filename": filename})
        outcome = self.transcribe_results.pop(0) if self.transcribe_results else "hello world"
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, TranscriptionResult):
            return outcome
        return TranscriptionResult(text=outcome, model="stub")

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> str:
        self.complete_calls.append({"prompt": prompt, "system": system, "temperature": temperature})
        outcome = self.completions.pop(0) if self.completions else ""
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def stub_provider() -> StubAIProvider:
    return StubAIProvider()


@pytest.fixture
def ai_settings(tmp_path: Path) -> Settings:
    """Settings with a key set and no config-file lookups outside tmp_path."""
    return Settings(
        _env_file=None,
        ai_api_key="test-key",
        ai_base_url="https://ai.test/api/paas/v4",
        ai_config_path=str(tmp_path / "missing-config"),
        database_url="sqlite+aiosqlite:///:memory:",
        log_to_file=False,
    )


@pytest.fixture
def make_zai_provider(ai_settings: Settings) -> Callable[..., ZAIProvider]:
    """Build a ZAIProvider whose HTTP traffic goes to *handler*."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        retry_policy: RetryPolicy | None = None,
    ) -> ZAIProvider:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ZAIProvider(
            app_settings=ai_settings,
            retry_policy=retry_policy,
            http_client=client,
        )

    return factory


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def test_engine(tmp_path: Path):
    """SQLite file per test; NullPool keeps connections in the test's loop."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def setup_database(test_engine):
    """Create all tables in the test database."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    """Create session factory for tests."""
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(
    test_session_factory,
    setup_database,
) -> AsyncGenerator[AsyncSession, None]:
    """Fresh session for service-level tests."""
    async with test_session_factory() as session:
        yield session
        if session.in_transaction():
            await session.rollback()


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def app(setup_database, test_session_factory, stub_provider: StubAIProvider) -> FastAPI:
    """Application wired to the test database and the stub provider.

    Each request gets its own session, as in production.
    """
    from voxprompt.main import create_app

    app_instance = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with test_session_factory() as session:
            yield session

    app_instance.dependency_overrides[get_db] = override_get_db
    app_instance.dependency_overrides[get_ai_provider] = lambda: stub_provider

    yield app_instance

    app_instance.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def create_transcription_via_api(async_client: AsyncClient):
    """POST a manual transcription and return its wire representation."""

    async def create(**overrides: Any) -> dict[str, Any]:
        body = {
            "transcription": "make a todo app in react",
            "fileName": "note.webm",
            "fileSize": 1234,
            "type": "recording",
        }
        body.update(overrides)
        response = await async_client.post("/api/transcriptions", json=body)
        assert response.status_code == 201, response.text
        return response.json()["transcription"]

    return create


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def sample_audio_file() -> bytes:
    """40 KiB of MP3-framed silence."""
    header = bytes([0xFF, 0xFB, 0x90, 0x00])
    return header + bytes(40960 - len(header))


@pytest.fixture
def tiny_audio_file() -> bytes:
    """Below the minimum upload size."""
    return bytes([0xFF, 0xFB, 0x90, 0x00] + [0x00] * 100)
