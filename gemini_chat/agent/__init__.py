"""Gemini agent logic for reply generation.

Responsibilities:
    - Configuration of model, sampling and credentials from the environment
    - Translation of chat messages into Gemini contents
    - One generate call per chat request, with errors wrapped in AgentError

Maintains clean separation from the HTTP layer.
"""

from gemini_chat.agent.chat_agent import AgentError, AgentService, get_agent_service
from gemini_chat.agent.config import AgentConfig, get_agent_config

__all__ = [
    "AgentConfig",
    "AgentError",
    "AgentService",
    "get_agent_config",
    "get_agent_service",
]
