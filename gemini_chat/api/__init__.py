"""FastAPI endpoints for Gemini Chat.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Generate the next assistant reply for a conversation
"""

from gemini_chat.api.app import app, create_app

__all__ = ["app", "create_app"]
