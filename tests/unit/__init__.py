"""Unit tests for individual components in isolation.

Coverage:
    - api/: Guardrails, rate limiting and error rendering
    - agent/: Agent configuration and Gemini request building
    - ui/: Conversation state and the endpoint client
"""
