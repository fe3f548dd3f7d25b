"""Test package for Gemini Chat.

Structure:
    - unit/: Individual function and class tests
    - integration/: Endpoint tests through the ASGI app

The Gemini API is replaced by a fake agent except in tests marked with
requires_api_key, which are skipped unless GEMINI_API_KEY is set.
Leverages pytest with pytest-check for soft assertions.
"""
