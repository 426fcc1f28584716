"""
Card and Deck Model.

Defines the records the rest of flashdeck works with:
- Card: one flashcard with its SM-2 scheduling state
- Deck: a named, ordered collection of cards it owns exclusively
- ReviewRating: the four recall ratings a user can give
- DeckStats: on-demand counts of new, learning and due cards

Cards are mutated only by the scheduler (review) or by content edits,
which never touch scheduling fields.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# =============================================================================
# Helpers
# =============================================================================

INITIAL_EASE = 2.5
MINIMUM_EASE = 1.3


def now_local() -> datetime:
    """Current wall-clock time as a timezone-aware datetime."""
    return datetime.now().astimezone()


def new_id() -> str:
    """Generate a fresh identifier for a card or deck."""
    return uuid.uuid4().hex


def _format_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_dt(value: str | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


# =============================================================================
# Review Rating
# =============================================================================


class ReviewRating(str, Enum):
    """
    Recall rating given after revealing a card's answer.

    Ordered by recall difficulty. Each rating carries a fixed weight
    (0-3) that the scheduler maps onto SM-2's 0-5 quality scale.
    """

    AGAIN = "again"  # Forgot
    HARD = "hard"  # Recalled with serious difficulty
    GOOD = "good"  # Recalled with normal effort
    EASY = "easy"  # Recalled effortlessly

    @property
    def weight(self) -> int:
        """Numeric weight used by the scheduler."""
        return _RATING_WEIGHTS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def ordered(cls) -> list[ReviewRating]:
        """All ratings, hardest recall first."""
        return [cls.AGAIN, cls.HARD, cls.GOOD, cls.EASY]

    @classmethod
    def parse(cls, text: str) -> ReviewRating:
        """
        Parse a rating from its name or its 1-based key.

        Args:
            text: "again", "Good", "3", ...

        Returns:
            The matching ReviewRating

        Raises:
            ValueError: If text names no rating
        """
        cleaned = text.strip().lower()
        if cleaned.isdigit():
            index = int(cleaned) - 1
            ratings = cls.ordered()
            if 0 <= index < len(ratings):
                return ratings[index]
            raise ValueError(f"Unknown rating key: {text!r}")
        return cls(cleaned)


_RATING_WEIGHTS = {
    ReviewRating.AGAIN: 0,
    ReviewRating.HARD: 1,
    ReviewRating.GOOD: 2,
    ReviewRating.EASY: 3,
}


# =============================================================================
# Card
# =============================================================================


@dataclass
class Card:
    """
    A single flashcard.

    A card with no due date has never been reviewed and counts as new.
    """

    front: str
    back: str
    id: str = field(default_factory=new_id)

    # SM-2 state
    ease_factor: float = INITIAL_EASE
    interval: int = 0  # Days; meaningless while new
    repetitions: int = 0  # Consecutive successful reviews since last lapse
    lapses: int = 0
    due_date: datetime | None = None
    last_reviewed: datetime | None = None
    total_reviews: int = 0

    created_at: datetime = field(default_factory=now_local)

    def is_new(self) -> bool:
        """True if the card has never been scheduled."""
        return self.due_date is None

    def is_due(self, now: datetime | None = None) -> bool:
        """True if the card is scheduled and its due date has passed."""
        if self.due_date is None:
            return False
        return self.due_date <= (now or now_local())

    def due_description(self, now: datetime | None = None) -> str:
        """Short status used when browsing cards."""
        if self.due_date is None:
            return "New card"

        # Whole days, truncated toward zero
        days = int((self.due_date - (now or now_local())).total_seconds() / 86400)
        if days < 0:
            return f"Overdue by {-days} days"
        if days == 0:
            return "Due today"
        if days == 1:
            return "Due tomorrow"
        return f"Due in {days} days"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "front": self.front,
            "back": self.back,
            "ease_factor": self.ease_factor,
            "interval": self.interval,
            "repetitions": self.repetitions,
            "lapses": self.lapses,
            "due_date": _format_dt(self.due_date),
            "last_reviewed": _format_dt(self.last_reviewed),
            "total_reviews": self.total_reviews,
            "created_at": _format_dt(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Card:
        """Create a Card from a serialized dictionary."""
        return cls(
            id=data["id"],
            front=data["front"],
            back=data["back"],
            ease_factor=data.get("ease_factor", INITIAL_EASE),
            interval=data.get("interval", 0),
            repetitions=data.get("repetitions", 0),
            lapses=data.get("lapses", 0),
            due_date=_parse_dt(data.get("due_date")),
            last_reviewed=_parse_dt(data.get("last_reviewed")),
            total_reviews=data.get("total_reviews", 0),
            created_at=_parse_dt(data.get("created_at")) or now_local(),
        )


# =============================================================================
# Deck Stats
# =============================================================================


@dataclass(frozen=True)
class DeckStats:
    """Counts over a deck's cards, computed on demand."""

    new_cards: int = 0
    learning_cards: int = 0
    due_cards: int = 0
    total_cards: int = 0

    @property
    def has_work(self) -> bool:
        """True if a study session would present at least one card."""
        return self.new_cards > 0 or self.due_cards > 0


# Cards with fewer successful repetitions than this that are scheduled in
# the future count as learning rather than review cards.
LEARNING_REPETITIONS = 2


# =============================================================================
# Deck
# =============================================================================


@dataclass
class Deck:
    """
    A named collection of cards.

    Insertion order matters for browsing and export; study order is
    decided by the study session. Cards are located by id since their
    position shifts on deletion.
    """

    name: str
    description: str = ""
    id: str = field(default_factory=new_id)
    cards: list[Card] = field(default_factory=list)

    @classmethod
    def create(cls, name: str, description: str = "") -> Deck:
        """Create an empty deck with a fresh id."""
        return cls(name=name.strip(), description=description.strip())

    def __len__(self) -> int:
        return len(self.cards)

    def _index(self) -> dict[str, int]:
        return {card.id: i for i, card in enumerate(self.cards)}

    def add_card(self, front: str, back: str) -> Card | None:
        """
        Append a new card.

        Args:
            front: Prompt text
            back: Answer text

        Returns:
            The new Card, or None if either side is empty after trimming
        """
        front = front.strip()
        back = back.strip()
        if not front or not back:
            return None

        card = Card(front=front, back=back)
        self.cards.append(card)
        return card

    def get_card(self, card_id: str) -> Card | None:
        """Find a card by id."""
        position = self._index().get(card_id)
        return self.cards[position] if position is not None else None

    def update_card(self, card_id: str, front: str, back: str) -> bool:
        """
        Replace a card's text. Scheduling state is left untouched.

        Returns:
            True if the card was found and updated
        """
        front = front.strip()
        back = back.strip()
        if not front or not back:
            return False

        card = self.get_card(card_id)
        if card is None:
            return False

        card.front = front
        card.back = back
        return True

    def delete_card(self, card_id: str) -> bool:
        """Remove a card by id. Returns True if a card was removed."""
        position = self._index().get(card_id)
        if position is None:
            return False
        del self.cards[position]
        return True

    def get_stats(self, now: datetime | None = None) -> DeckStats:
        """Count new, learning and due cards."""
        now = now or now_local()
        new = learning = due = 0

        for card in self.cards:
            if card.is_new():
                new += 1
            elif card.is_due(now):
                due += 1
            elif card.repetitions < LEARNING_REPETITIONS:
                learning += 1

        return DeckStats(
            new_cards=new,
            learning_cards=learning,
            due_cards=due,
            total_cards=len(self.cards),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "cards": [card.to_dict() for card in self.cards],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Deck:
        """Create a Deck from a serialized dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            cards=[Card.from_dict(c) for c in data.get("cards", [])],
        )
