"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Annotated, AsyncGenerator
import time

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession

from voxprompt import __version__
from voxprompt.api.router import api_router
from voxprompt.config import settings
from voxprompt.core.ai.zai import close_ai_provider
from voxprompt.core.database.base import isoformat, utcnow
from voxprompt.core.database.migration_check import require_migrations
from voxprompt.core.database.session import engine, get_db
from voxprompt.core.errors import register_exception_handlers
from voxprompt.core.logging import LoggingMiddleware, get_logger, setup_logging
from voxprompt.core.transcriptions.service import check_database_connection


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifecycle management."""

    # === STARTUP ===
    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        is_development=settings.is_development,
        logs_dir=settings.logs_dir,
        log_to_file=settings.log_to_file,
        log_file_max_bytes=settings.log_file_max_bytes,
        log_file_backup_count=settings.log_file_backup_count,
    )

    logger = get_logger(__name__)
    logger.info("application_starting", app_name=settings.app_name, environment=settings.app_env)

    try:
        await require_migrations(
            engine, fail_on_outdated=settings.require_migrations_on_startup
        )
    except RuntimeError as e:
        logger.error("migration_check_failed", error=str(e))
        raise

    if settings.resolve_ai_credentials() is None:
        logger.warning("ai_credentials_missing", hint="set ZAI_API_KEY or create .z-ai-config")

    app.state._start_time = time.time()
    logger.info("application_started_successfully", app_name=settings.app_name)

    yield

    # === SHUTDOWN ===
    logger.info("application_shutting_down", app_name=settings.app_name)
    await close_ai_provider()
    await engine.dispose()
    logger.info("application_shutdown_complete", app_name=settings.app_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Voice transcription and prompt enhancement API",
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        openapi_url="/api/openapi.json" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Adds correlation IDs and request context
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")

    @app.get("/api/health")
    async def health_check(
        db: Annotated[AsyncSession, Depends(get_db)],
    ) -> dict:
        """Database connectivity check."""
        database = await check_database_connection(db)

        if not hasattr(app.state, "_start_time"):
            app.state._start_time = time.time()

        return {
            "success": database["connected"],
            "status": "healthy" if database["connected"] else "degraded",
            "timestamp": isoformat(utcnow()),
            "uptime_seconds": round(time.time() - app.state._start_time, 2),
            "version": __version__,
            "environment": settings.app_env,
            "database": {
                "status": "connected" if database["connected"] else "error",
                "latency_ms": database["latency_ms"],
                "error": database["error"],
            },
        }

    return app


app = create_app()
