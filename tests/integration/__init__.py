"""Integration tests for the chat endpoint working through the ASGI app.

Uses the real FastAPI app, guardrails, error handlers and rate limiter.
Only the Gemini call is faked, unless GEMINI_API_KEY is set for live tests.
"""
