"""
Deck persistence: JSON deck files, CSV import and backup bundles.
"""

from .deck_store import DeckStorage
from .schemas import BackupImportResult, DeckSummary

__all__ = [
    "DeckStorage",
    "DeckSummary",
    "BackupImportResult",
]
