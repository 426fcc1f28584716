"""
On-disk schemas for deck files and backup bundles.

Deck files and backups are JSON. These models validate that content
before it is turned into Deck/Card objects, so a corrupt or hand-edited
file fails loudly instead of producing a card that breaks scheduling
invariants.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import AwareDatetime, BaseModel, Field, ValidationError

from ..models import MINIMUM_EASE, Card, Deck

BACKUP_FORMAT = "flashdeck-backup"
BACKUP_VERSION = 1

# Deck ids become file names, so only plain name characters are allowed
DECK_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class CardRecord(BaseModel):
    """A card as stored in a deck file."""

    id: str = Field(min_length=1)
    front: str
    back: str
    ease_factor: float = Field(default=2.5, ge=MINIMUM_EASE)
    interval: int = Field(default=0, ge=0)
    repetitions: int = Field(default=0, ge=0)
    lapses: int = Field(default=0, ge=0)
    due_date: Optional[AwareDatetime] = None
    last_reviewed: Optional[AwareDatetime] = None
    total_reviews: int = Field(default=0, ge=0)
    created_at: Optional[AwareDatetime] = None

    def to_card(self) -> Card:
        return Card.from_dict(self.model_dump())


class DeckRecord(BaseModel):
    """A deck as stored in its own file."""

    id: str = Field(pattern=DECK_ID_PATTERN)
    name: str
    description: str = ""
    cards: List[CardRecord] = Field(default_factory=list)

    def to_deck(self) -> Deck:
        return Deck(
            id=self.id,
            name=self.name,
            description=self.description,
            cards=[c.to_card() for c in self.cards],
        )


class DeckSummary(BaseModel):
    """Lightweight listing entry for a stored deck."""

    id: str
    name: str
    description: str = ""
    card_count: int = 0


class BackupBundle(BaseModel):
    """Every stored deck in one portable file."""

    format: Literal["flashdeck-backup"] = BACKUP_FORMAT
    version: int = BACKUP_VERSION
    exported_at: datetime
    decks: List[DeckRecord] = Field(default_factory=list)


class BackupImportResult(BaseModel):
    """Counts reported after importing a backup."""

    imported: int = 0
    skipped: int = 0


__all__ = [
    "BACKUP_FORMAT",
    "BACKUP_VERSION",
    "BackupBundle",
    "BackupImportResult",
    "CardRecord",
    "DeckRecord",
    "DeckSummary",
    "ValidationError",
]
