"""
Error taxonomy for flashdeck.

- StorageInitError: the deck directory cannot be created (fatal at startup)
- DeckIOError: a deck or backup file cannot be read, written or deleted
- DeckParseError: a deck or backup file exists but its content is malformed

Empty front/back text on add or import is not an error; those inputs are
silently ignored.
"""

from __future__ import annotations

from pathlib import Path


class FlashdeckError(Exception):
    """Base class for all flashdeck errors."""

    pass


class StorageError(FlashdeckError):
    """Raised when a storage operation fails."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class StorageInitError(StorageError):
    """Raised when the storage directory cannot be created."""

    pass


class DeckIOError(StorageError):
    """Raised when a deck or backup file cannot be read or written."""

    pass


class DeckParseError(StorageError):
    """Raised when deck or backup content is malformed."""

    pass
