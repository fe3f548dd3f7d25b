"""Conversation state and API client for the chat page.

Kept free of NiceGUI so the turn logic can be exercised without a browser.
"""

import os
from datetime import datetime

import httpx

from gemini_chat.models.schemas import ChatRequest

DEFAULT_API_PORT = 8000
CHAT_PATH = "/api/chat"
REQUEST_TIMEOUT = 60.0

GREETING = "Hey! 👋 I'm your Gemini chatbot. What are we building today?"
CLEARED_GREETING = "Cleared ✨ What should we do next?"
EMPTY_REPLY = "(no response)"
FAILURE_NOTICE = "Sorry — something went wrong."


def get_api_base_url() -> str:
    """Return the chat API root, read from the environment on each call.

    ``API_BASE_URL`` wins when set. Otherwise the API is assumed to listen on
    this host at ``PORT``, which is where the server puts it in both run modes.
    """
    explicit = os.getenv("API_BASE_URL")
    if explicit:
        return explicit.rstrip("/")
    port = os.getenv("PORT", str(DEFAULT_API_PORT))
    return f"http://127.0.0.1:{port}"


class ChatRequestError(Exception):
    """Raised when the chat endpoint could not produce a reply."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class ChatSession:
    """Manages chat state for one page instance.

    At most one request is in flight: ``begin_turn`` refuses new input until
    ``complete_turn`` or ``fail_turn`` has been called.
    """

    def __init__(self) -> None:
        self.messages: list[dict] = []
        self.is_loading: bool = False
        self.add_message("assistant", GREETING)

    def add_message(self, role: str, content: str) -> None:
        self.messages.append({
            "role": role,
            "content": content,
            "time": datetime.now().strftime("%I:%M %p"),
        })

    def conversation(self) -> list[dict[str, str]]:
        """Return the conversation in the shape the endpoint expects."""
        return [{"role": m["role"], "content": m["content"]} for m in self.messages]

    def begin_turn(self, text: str) -> list[dict[str, str]] | None:
        """Append the user's input and return the conversation to send.

        Returns:
            The full updated conversation, or None if the input is blank or
            a request is already in flight.
        """
        text = text.strip()
        if not text or self.is_loading:
            return None

        self.is_loading = True
        self.add_message("user", text)
        return self.conversation()

    def complete_turn(self, reply: str) -> None:
        self.add_message("assistant", reply.strip() or EMPTY_REPLY)
        self.is_loading = False

    def fail_turn(self, detail: str) -> None:
        self.add_message("assistant", f"{FAILURE_NOTICE}\n{detail}")
        self.is_loading = False

    def clear(self) -> None:
        self.messages.clear()
        self.add_message("assistant", CLEARED_GREETING)


def _error_detail(response: httpx.Response) -> str:
    """Extract a readable error from a non-2xx response."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return response.text or f"Request failed ({response.status_code})"


async def request_chat_reply(
    messages: list[dict[str, str]],
    client_address: str | None = None,
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Send the conversation to the chat endpoint and return the reply text.

    Args:
        messages: The whole conversation, oldest first.
        client_address: Browser address forwarded for rate limiting.
        base_url: Root URL of the chat API, defaults to get_api_base_url().
        transport: Optional httpx transport (used by tests).

    Returns:
        The generated text, or an empty string if none was returned.

    Raises:
        ChatRequestError: On a transport failure or a non-2xx response.
    """
    headers = {"x-forwarded-for": client_address} if client_address else None
    async with httpx.AsyncClient(
        base_url=base_url or get_api_base_url(),
        timeout=REQUEST_TIMEOUT,
        transport=transport,
    ) as client:
        try:
            response = await client.post(
                CHAT_PATH, json=ChatRequest(messages=messages).model_dump(), headers=headers
            )
        except httpx.RequestError as e:
            raise ChatRequestError(f"Connection failed: {e}") from e

    if not response.is_success:
        raise ChatRequestError(_error_detail(response))

    try:
        data = response.json()
    except ValueError:
        return ""
    text = data.get("text") if isinstance(data, dict) else None
    return text if isinstance(text, str) else ""
