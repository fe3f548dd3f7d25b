"""Error classification for the chat endpoint.

Every failure is mapped to one of three classes, each with a fixed status
and a sanitized message. Exception details stay in the server logs.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ChatAPIError(Exception):
    """Base class for errors rendered as ``{"error": message}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class InvalidConversationError(ChatAPIError):
    """The request body does not contain a usable conversation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing messages[]"


class RateLimitExceededError(ChatAPIError):
    """The client used up its requests for the current window."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded"

    def __init__(self, retry_after: int, message: str | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(message)

    @property
    def headers(self) -> dict[str, str]:
        return {"retry-after": str(self.retry_after)}


class UpstreamError(ChatAPIError):
    """Generation failed: missing credentials, network or provider error."""


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error on ``app`` as a JSON ``{"error": message}`` body.

    Anything that is not a ``ChatAPIError`` is logged and reported as a
    generic ``UpstreamError``.
    """

    @app.exception_handler(ChatAPIError)
    async def handle_chat_api_error(request: Request, exc: ChatAPIError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}",
            exc_info=exc,
        )
        error = UpstreamError()
        return JSONResponse(status_code=error.status_code, content={"error": error.message})
