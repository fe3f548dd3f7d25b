"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Conversation state held in page memory, seeded with a greeting
    - One request in flight at a time, with a typing indicator
    - Failures shown as assistant messages instead of being dropped

Contains minimal business logic. Delegates generation to the API.
"""
