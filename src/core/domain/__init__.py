"""Domain models and entities.

Why:
- Pure, strict data structures (Pydantic v2) and plain input-event values.
- The domain knows nothing about SQL, files or terminals.
"""
