"""Input guardrails applied to every incoming conversation.

Keeps requests to the model small: only the most recent messages are kept,
each one is truncated, and empty messages are dropped.
"""

from typing import Any

from gemini_chat.models.schemas import ChatMessage

MAX_MESSAGES = 20
MAX_CHARS_PER_MESSAGE = 4000


def _coerce_message(item: Any) -> ChatMessage:
    """Build a ChatMessage from one raw JSON item.

    Anything other than ``"assistant"`` is treated as a user turn. Missing
    content becomes an empty string, non-string content is stringified.
    """
    if not isinstance(item, dict):
        return ChatMessage(role="user", content="")

    role = "assistant" if item.get("role") == "assistant" else "user"
    content = item.get("content")
    if content is None:
        content = ""
    elif not isinstance(content, str):
        content = str(content)

    return ChatMessage(role=role, content=content[:MAX_CHARS_PER_MESSAGE])


def clamp_messages(messages: list[Any]) -> list[ChatMessage]:
    """Clamp a raw conversation to what is forwarded to the model.

    Args:
        messages: The ``messages`` array from the request body, oldest first.

    Returns:
        At most the last MAX_MESSAGES messages, each truncated to
        MAX_CHARS_PER_MESSAGE characters, without blank messages.
    """
    recent = [_coerce_message(item) for item in messages[-MAX_MESSAGES:]]
    return [message for message in recent if message.content.strip()]
