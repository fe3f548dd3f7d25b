"""Gemini agent service.

Turns a clamped conversation into a single ``generate_content`` call and
returns the generated text. There is no streaming and no retry: every chat
request is one round trip to the model.

The google-genai client is built lazily on the first request. Until an API
key is configured every request fails with ``AgentError``, while the server
itself keeps running.
"""

import logging
from collections.abc import Sequence

from google import genai
from google.genai import types
from pydantic import ValidationError

from gemini_chat.agent.config import AgentConfig, get_agent_config
from gemini_chat.models.schemas import ChatMessage

logger = logging.getLogger(__name__)

# Gemini only knows "user" and "model" turns
_ROLE_MAP = {"assistant": "model", "user": "user"}


class AgentError(Exception):
    """Raised when a reply cannot be generated."""

    pass


class AgentService:
    """Service wrapping the google-genai client.

    Wraps the SDK with:
    - Lazy configuration and client construction
    - Role translation into Gemini ``Content`` objects
    - Centralized error handling (every failure becomes ``AgentError``)
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loaded from the environment on first use if not provided.
        """
        self._config = config
        self._client: genai.Client | None = None

    @property
    def config(self) -> AgentConfig:
        """Return the agent configuration, loading it on first access.

        Raises:
            AgentError: If the configuration is invalid (e.g. no API key).
        """
        if self._config is None:
            try:
                self._config = get_agent_config()
            except ValidationError as e:
                raise AgentError("Gemini API key is not configured") from e
        return self._config

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    @staticmethod
    def build_contents(messages: Sequence[ChatMessage]) -> list[types.Content]:
        """Convert chat messages into Gemini contents.

        Args:
            messages: Conversation in order, already clamped.

        Returns:
            One ``Content`` per message with the role translated.
        """
        return [
            types.Content(
                role=_ROLE_MAP.get(message.role, "user"),
                parts=[types.Part(text=message.content)],
            )
            for message in messages
        ]

    def build_generation_config(self) -> types.GenerateContentConfig:
        """Build the fixed generation settings for a request."""
        return types.GenerateContentConfig(
            system_instruction=self.config.system_instruction,
            max_output_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )

    async def get_response(self, messages: Sequence[ChatMessage]) -> str:
        """Generate a reply for the conversation.

        Args:
            messages: Conversation in order, already clamped.

        Returns:
            Generated text, or an empty string if the model returned none.

        Raises:
            AgentError: On missing configuration, network or provider errors.
        """
        try:
            client = self._get_client()
            response = await client.aio.models.generate_content(
                model=self.config.model_name,
                contents=self.build_contents(messages),
                config=self.build_generation_config(),
            )
        except AgentError:
            raise
        except Exception as e:
            raise AgentError(f"Gemini request failed: {type(e).__name__}") from e

        text = response.text or ""
        logger.info(
            f"Generated {len(text)} chars with {self.config.model_name} "
            f"from {len(messages)} messages"
        )
        return text


# Module-level singleton instance
_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Get or create the global agent service.

    Construction never touches the environment, so this is safe to use as a
    FastAPI dependency even when no API key is configured.

    Returns:
        The AgentService instance.
    """
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service
