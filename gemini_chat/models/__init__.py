"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatMessage: Individual message in conversation
    - ChatRequest: Incoming chat request payload
    - ChatResponse: Generated text returned to the UI
    - ErrorResponse: Sanitized error body
"""

from gemini_chat.models.schemas import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    Role,
)

__all__ = ["ChatMessage", "ChatRequest", "ChatResponse", "ErrorResponse", "Role"]
