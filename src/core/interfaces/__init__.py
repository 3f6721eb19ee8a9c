"""Core interfaces/abstractions.

Why:
- Defines contracts (Protocol) implemented by storage adapters and UI components.
- Inverts dependencies: the Core depends on abstractions, never on a backend.
"""
