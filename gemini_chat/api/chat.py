"""Chat endpoint forwarding a conversation to Gemini.

Handles rate limiting, body validation, clamping and generation.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from gemini_chat.agent.chat_agent import AgentError, AgentService, get_agent_service
from gemini_chat.api.errors import (
    InvalidConversationError,
    RateLimitExceededError,
    UpstreamError,
)
from gemini_chat.api.guardrails import clamp_messages
from gemini_chat.api.rate_limit import (
    FixedWindowRateLimiter,
    get_client_key,
    get_rate_limiter,
)
from gemini_chat.models.schemas import ChatResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


async def _read_messages(request: Request) -> list[Any]:
    """Read the raw ``messages`` array from the JSON body.

    Raises:
        InvalidConversationError: If the body is not JSON or has no array.
    """
    try:
        body = await request.json()
    except (ValueError, RecursionError) as e:
        raise InvalidConversationError("Invalid JSON body") from e

    messages = body.get("messages") if isinstance(body, dict) else None
    if not isinstance(messages, list):
        raise InvalidConversationError("Missing messages[]")
    return messages


@router.post(
    "",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or unusable messages"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Generation failed"},
    },
)
async def chat(
    request: Request,
    limiter: Annotated[FixedWindowRateLimiter, Depends(get_rate_limiter)],
    agent_service: Annotated[AgentService, Depends(get_agent_service)],
) -> ChatResponse:
    """Generate the next assistant reply for a conversation.

    Keeps the last 20 messages, truncates each to 4000 characters and drops
    blank ones before forwarding to Gemini.

    Returns:
        ChatResponse with the generated text.

    Raises:
        400: Missing/invalid messages, or nothing usable after clamping.
        429: More than 30 requests from this client in the current minute.
        500: Missing API key, network or provider failure.
    """
    client_key = get_client_key(request)
    decision = limiter.hit(client_key)
    if not decision.allowed:
        logger.warning(f"Rate limit exceeded for {client_key}, retry in {decision.retry_after}s")
        raise RateLimitExceededError(retry_after=decision.retry_after)

    raw_messages = await _read_messages(request)

    messages = clamp_messages(raw_messages)
    if not messages:
        logger.info(f"Rejected conversation from {client_key}: no usable messages")
        raise InvalidConversationError("No usable messages")

    try:
        text = await agent_service.get_response(messages)
    except AgentError as e:
        logger.exception(f"Chat generation failed for {client_key}: {e}")
        raise UpstreamError() from e

    return ChatResponse(text=text)
