"""Structured logging for VoxPrompt.

structlog renders every record: colored console lines in development,
JSON elsewhere, and always JSON in ``logs/backend.log``. Each HTTP request
carries a ``request_id`` (taken from ``X-Request-ID`` when the client sends
one) and handlers may add their own context with :func:`bind_request_context`,
which ends up on the ``request_completed`` line.

Usage:
    from voxprompt.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("transcription_started", file_name="clip.mp3")
"""

import logging
import sys
import time
import uuid
from collections.abc import MutableMapping
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.types import Processor

REQUEST_ID_HEADER = b"x-request-id"

# Event keys whose values must never reach a log sink
SECRET_KEYS = frozenset({"api_key", "authorization", "file_base64", "ai_api_key"})

# Transcripts and prompts are logged by length, never in full
MAX_LOGGED_TEXT = 200

LIBRARY_LOGGERS = (
    "uvicorn.access",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "aiosqlite",
    "httpx",
    "httpcore",
    "openai",
    "asyncio",
)


def get_log_level(level_name: str) -> int:
    """Map a level name to its logging constant; unknown names give INFO."""
    return logging.getLevelNamesMapping().get(level_name.upper(), logging.INFO)


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credentials and raw audio, and cut long text values."""
    for key, value in event_dict.items():
        if key in SECRET_KEYS:
            event_dict[key] = "***"
        elif key != "event" and isinstance(value, str) and len(value) > MAX_LOGGED_TEXT:
            event_dict[key] = f"{value[:MAX_LOGGED_TEXT]}... ({len(value)} chars)"
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "auto",
    is_development: bool = True,
    logs_dir: str | None = None,
    log_to_file: bool = False,
    log_file_max_bytes: int = 10 * 1024 * 1024,
    log_file_backup_count: int = 5,
) -> None:
    """
    Configure structlog and the root stdlib logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: 'auto' (JSON unless developing), 'console' or 'json'
        is_development: Selects the renderer when log_format is 'auto'
        logs_dir: Directory for backend.log
        log_to_file: Also write JSON lines to logs_dir
        log_file_max_bytes: Rotation size
        log_file_backup_count: Rotated files kept
    """
    level = get_log_level(log_level)
    use_json = not is_development if log_format == "auto" else log_format == "json"
    shared_processors = _shared_processors()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [console_handler]
    root_logger.setLevel(level)

    if log_to_file and logs_dir:
        root_logger.addHandler(
            _file_handler(Path(logs_dir), log_file_max_bytes, log_file_backup_count)
        )

    # Library chatter stays at WARNING even when the app runs at DEBUG
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, level))


def _file_handler(logs_dir: Path, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    logs_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        logs_dir / "backend.log",
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_shared_processors(),
        )
    )
    return handler


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.stdlib.get_logger(name)


def bind_request_context(**values: Any) -> None:
    """Attach values to every log line of the current request."""
    structlog.contextvars.bind_contextvars(**values)


class LoggingMiddleware:
    """
    ASGI middleware logging one ``request_completed`` line per request.

    The request id is echoed back in ``X-Request-ID``. The health check is
    polled by monitors and not logged.
    """

    SKIP_PATHS = frozenset({"/api/health"})

    def __init__(self, app: Any) -> None:
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope: dict, receive: Any, send: Any) -> None:
        if scope["type"] != "http" or scope.get("path") in self.SKIP_PATHS:
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        request_id = headers.get(REQUEST_ID_HEADER, b"").decode("latin-1") or uuid.uuid4().hex[:12]

        structlog.contextvars.clear_contextvars()
        bind_request_context(
            request_id=request_id,
            method=scope.get("method", ""),
            path=scope.get("path", ""),
        )

        started = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: dict) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
                message.setdefault("headers", [])
                message["headers"] = list(message["headers"]) + [
                    (REQUEST_ID_HEADER, request_id.encode("latin-1"))
                ]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            log = self.logger.info if status_code < 400 else self.logger.warning
            log(
                "request_completed",
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            structlog.contextvars.clear_contextvars()
