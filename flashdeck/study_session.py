"""
Study Session Queue.

Sequences which card is presented next during a study session.

States:
    SELECTING -> QUESTION   pop the next card (or COMPLETE if none left)
    QUESTION  -> ANSWER     reveal
    ANSWER    -> SELECTING  rate; Again puts the card back at the end

The queue holds indices into the deck's card list: due review cards in
deck order, then up to `new_card_limit` new cards in deck order.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from .errors import StorageError
from .models import Card, Deck, ReviewRating, now_local
from .scheduler import ReviewOutcome, SM2Scheduler
from .telemetry import SessionTelemetry

if TYPE_CHECKING:
    from .storage import DeckStorage

DEFAULT_NEW_CARD_LIMIT = 20


class SessionState(Enum):
    """Where the session is in its present/reveal/rate cycle."""

    SELECTING = "selecting"
    QUESTION = "question"
    ANSWER = "answer"
    COMPLETE = "complete"


def build_queue(
    deck: Deck,
    new_card_limit: int = DEFAULT_NEW_CARD_LIMIT,
    now: datetime | None = None,
) -> list[int]:
    """
    Build the ordered list of card indices for a session.

    Args:
        deck: Deck to study
        new_card_limit: Maximum new cards introduced this session
        now: Reference time for due checks

    Returns:
        Due card indices followed by new card indices, both in deck order
    """
    now = now or now_local()

    due = [i for i, card in enumerate(deck.cards) if not card.is_new() and card.is_due(now)]
    new = [i for i, card in enumerate(deck.cards) if card.is_new()][: max(0, new_card_limit)]

    return due + new


class StudySession:
    """
    Runs one study session over a deck.

    Usage:
        session = StudySession(deck, store=storage)
        session.start()
        while session.state is not SessionState.COMPLETE:
            show(session.current_card.front)
            session.reveal()
            session.rate(ReviewRating.GOOD)
    """

    def __init__(
        self,
        deck: Deck,
        scheduler: SM2Scheduler | None = None,
        store: DeckStorage | None = None,
        new_card_limit: int = DEFAULT_NEW_CARD_LIMIT,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize a study session.

        Args:
            deck: Deck to study (mutated as cards are rated)
            scheduler: SM2Scheduler (creates default if None)
            store: Storage used to persist the deck after each rating
            new_card_limit: Maximum new cards per session
            clock: Source of the current time (defaults to local now)
        """
        self.deck = deck
        self.scheduler = scheduler or SM2Scheduler()
        self.store = store
        self.new_card_limit = new_card_limit
        self._clock = clock or now_local

        self.state = SessionState.SELECTING
        self._queue: deque[int] = deque()
        self.current_index: int | None = None
        self.interval_preview: list[tuple[ReviewRating, str]] = []
        self.telemetry = SessionTelemetry(started_at=self._clock())
        self.last_save_error: StorageError | None = None

    # =========================================================================
    # Observables
    # =========================================================================

    @property
    def current_card(self) -> Card | None:
        """The card being presented, if any."""
        if self.current_index is None or self.state is SessionState.COMPLETE:
            return None
        return self.deck.cards[self.current_index]

    @property
    def queue(self) -> list[int]:
        """Pending card indices, front first."""
        return list(self._queue)

    @property
    def remaining(self) -> int:
        """Cards still waiting in the queue (not counting the current one)."""
        return len(self._queue)

    @property
    def cards_studied(self) -> int:
        """Ratings given this session, repeats included."""
        return self.telemetry.total_reviews

    @property
    def started_at(self) -> datetime:
        return self.telemetry.started_at

    @property
    def elapsed(self) -> timedelta:
        return self._clock() - self.telemetry.started_at

    @property
    def is_complete(self) -> bool:
        return self.state is SessionState.COMPLETE

    # =========================================================================
    # Transitions
    # =========================================================================

    def start(self) -> SessionState:
        """
        Build the queue and present the first card.

        Returns:
            The new state (QUESTION, or COMPLETE if nothing is due)
        """
        now = self._clock()
        self._queue = deque(build_queue(self.deck, self.new_card_limit, now))
        self.telemetry = SessionTelemetry(started_at=now)
        self.current_index = None
        self.last_save_error = None
        self.state = SessionState.SELECTING

        logger.info(f"Session started for '{self.deck.name}': {len(self._queue)} cards queued")

        return self.next_card()

    def next_card(self) -> SessionState:
        """Pop the next card from the queue, or complete the session."""
        if not self._queue:
            self.current_index = None
            self.interval_preview = []
            self.state = SessionState.COMPLETE
            logger.info(f"Session complete: {self.cards_studied} cards rated")
            return self.state

        self.current_index = self._queue.popleft()
        self.interval_preview = self.scheduler.preview(self.deck.cards[self.current_index])
        self.state = SessionState.QUESTION
        return self.state

    def reveal(self) -> SessionState:
        """Show the answer of the current card."""
        if self.state is SessionState.QUESTION:
            self.state = SessionState.ANSWER
        return self.state

    def rate(self, rating: ReviewRating) -> ReviewOutcome | None:
        """
        Rate the current card and move on to the next one.

        Ratings are only accepted once the answer has been revealed.

        Args:
            rating: User's recall rating

        Returns:
            ReviewOutcome, or None if the rating was ignored
        """
        if self.state is not SessionState.ANSWER or self.current_index is None:
            logger.debug(f"Ignoring rating {rating.value} in state {self.state.value}")
            return None

        index = self.current_index
        card = self.deck.cards[index]
        now = self._clock()

        outcome = self.scheduler.review(card, rating, now=now)
        self.telemetry.record(card.id, rating, timestamp=now)

        if rating is ReviewRating.AGAIN:
            self._queue.append(index)

        self._persist()

        self.state = SessionState.SELECTING
        self.next_card()
        return outcome

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save_deck(self.deck)
            self.last_save_error = None
        except StorageError as e:
            logger.warning(f"Failed to save deck {self.deck.id}: {e}")
            self.last_save_error = e

    # =========================================================================
    # Summary
    # =========================================================================

    def summary(self) -> dict:
        """Completion summary: cards studied, duration and throughput."""
        stats = self.telemetry.get_stats(now=self._clock())
        stats["deck_name"] = self.deck.name
        stats["cards_studied"] = self.cards_studied
        stats["remaining"] = self.remaining
        stats["struggling_cards"] = self.telemetry.get_struggling_cards()
        return stats
