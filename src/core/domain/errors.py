"""Errors that cross the Core boundary."""

from __future__ import annotations


class StorageError(Exception):
    """I/O or serialization failure in a storage backend.

    Carries a human-readable message; the router shows it on the status line.
    Not-found is never a `StorageError` (load returns None, delete is a no-op).
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message
