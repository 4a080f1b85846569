"""Application error taxonomy and the JSON error envelope.

Every failure leaves the API as ``{"success": false, "error": <message>}``
with the status code carried by the exception class.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from voxprompt.core.logging import get_logger

logger = get_logger(__name__)


class VoxPromptError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingInput(VoxPromptError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required fields"


class InvalidInput(VoxPromptError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request body"


class UnsupportedFormat(VoxPromptError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid audio format. Supported: WAV, MP3, M4A, OGG, WEBM, MP4, AAC"


class PayloadTooLarge(VoxPromptError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "File too large. Maximum size is 50MB"


class PayloadTooSmall(VoxPromptError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Audio file is too small. Please record at least 2-3 seconds."


class InputTooShort(VoxPromptError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Text is too short to enhance (minimum 5 characters)"


class AuthError(VoxPromptError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "AI service authentication failed. Check the configured API key."


class RecordNotFound(VoxPromptError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Record not found"


class ServiceUnavailable(VoxPromptError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = (
        "Speech recognition service is temporarily unavailable. "
        "Please try again in a moment."
    )


class TranscriptionFailed(VoxPromptError):
    default_message = "Transcription failed"


class EnhancementFailed(VoxPromptError):
    default_message = "Prompt enhancement failed"


class PersistenceFailed(VoxPromptError):
    default_message = "Database operation failed"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def voxprompt_error_handler(request: Request, exc: VoxPromptError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", error_type=type(exc).__name__, error=exc.message)
    else:
        logger.info("request_rejected", error_type=type(exc).__name__, error=exc.message)
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    else:
        message = InvalidInput.default_message
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error=str(exc))
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc) or VoxPromptError.default_message,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error envelope on *app*."""
    app.add_exception_handler(VoxPromptError, voxprompt_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
