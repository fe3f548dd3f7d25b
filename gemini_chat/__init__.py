"""Gemini Chat - a minimal web chat client for the Gemini API.

Combines FastAPI for the chat endpoint, the google-genai SDK for generation,
NiceGUI for the conversational UI, and Pydantic for data validation.

Components:
    - api: Chat endpoint, guardrails and per-client rate limiting
    - agent: Gemini client configuration and request building
    - ui: Web interface holding the conversation in page state
    - models: Request/response schemas
"""

__version__ = "0.1.0"
