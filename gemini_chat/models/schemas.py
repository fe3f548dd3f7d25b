"""Request and response schemas for the chat endpoint."""

from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["user", "assistant"]


class ChatMessage(BaseModel):
    """A single message in the conversation.

    Attributes:
        role: The speaker, either the user or the assistant.
        content: The message text.
    """

    role: Role = Field(..., description="Message role: 'user' or 'assistant'")
    content: str = Field(..., description="The message content")


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Built by the UI client. The endpoint reads the raw JSON itself so that
    malformed conversations are reported as 400, not 422.

    Attributes:
        messages: The whole conversation, oldest first.
    """

    messages: list[ChatMessage]


class ChatResponse(BaseModel):
    """Successful reply from the chat endpoint."""

    text: str = Field(..., description="Generated text, empty if the model returned none")


class ErrorResponse(BaseModel):
    """Error body returned with every non-2xx status."""

    error: str
