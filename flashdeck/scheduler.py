"""
SM-2 Spaced Repetition Scheduler.

Implements a SuperMemo SM-2 variant driven by four recall ratings.

Rating to SM-2 quality (0-5 scale):
    Again -> 0.00  (forgot)
    Hard  -> 1.67
    Good  -> 3.33
    Easy  -> 5.00

The ease factor is updated on every review, failures included:
    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from loguru import logger

from .models import MINIMUM_EASE, Card, ReviewRating, now_local

# =============================================================================
# Configuration and Results
# =============================================================================


@dataclass
class SM2Config:
    """Configuration for the SM-2 scheduler."""

    minimum_ease: float = MINIMUM_EASE
    easy_bonus: float = 1.3
    hard_multiplier: float = 1.2
    relearn_minutes: int = 10  # Retry delay for a new card rated Again


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of reviewing a card."""

    new_interval: int
    new_ease_factor: float
    next_due: datetime


# =============================================================================
# Interval Labels
# =============================================================================


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''}"


def interval_string(days: int) -> str:
    """
    Human-readable label for an interval in days.

    Examples:
        0 -> "< 1 min", 1 -> "1 day", 10 -> "1 week", 40 -> "1 month"
    """
    if days <= 0:
        return "< 1 min"
    if days == 1:
        return "1 day"
    if days < 7:
        return f"{days} days"
    if days < 30:
        return _plural(days // 7, "week")
    if days < 365:
        return _plural(days // 30, "month")
    return _plural(days // 365, "year")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# =============================================================================
# SM-2 Scheduler
# =============================================================================


class SM2Scheduler:
    """
    Computes review intervals and ease factors for cards.

    The scheduler performs no I/O and never fails: every reachable card
    state maps to a valid next state.
    """

    def __init__(self, config: SM2Config | None = None):
        """
        Initialize SM-2 scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
        """
        self.config = config or SM2Config()

    def calculate_ease_factor(self, card: Card, rating: ReviewRating) -> float:
        """New ease factor for a rating, floored at the minimum ease."""
        q = rating.weight * 5 / 3
        new_ef = card.ease_factor + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
        return max(self.config.minimum_ease, new_ef)

    def calculate_interval(self, card: Card, rating: ReviewRating, new_ease: float) -> int:
        """
        Next interval in whole days.

        Args:
            card: Card before the review is applied
            rating: The rating being applied
            new_ease: Ease factor already updated for this rating

        Returns:
            Interval in days (always >= 1)
        """
        if rating is ReviewRating.AGAIN:
            return 1

        if card.repetitions == 0:
            # First review
            return 4 if rating is ReviewRating.EASY else 1

        if card.repetitions == 1:
            # Second review
            return 4 if rating is ReviewRating.EASY else 1

        current = max(card.interval, 1)

        if rating is ReviewRating.HARD:
            interval = current * self.config.hard_multiplier
        elif rating is ReviewRating.GOOD:
            interval = current * new_ease
        elif rating is ReviewRating.EASY:
            interval = current * new_ease * self.config.easy_bonus
        else:
            raise ValueError(f"Unhandled rating: {rating!r}")

        return max(1, _round_half_up(interval))

    def review(
        self,
        card: Card,
        rating: ReviewRating,
        now: datetime | None = None,
    ) -> ReviewOutcome:
        """
        Apply a rating to a card, updating its state in place.

        Args:
            card: The card being reviewed (mutated)
            rating: User's recall rating
            now: Review time (defaults to current local time)

        Returns:
            ReviewOutcome with the new interval, ease factor and due date
        """
        now = now or now_local()
        was_new = card.is_new()

        new_ease = self.calculate_ease_factor(card, rating)
        new_interval = self.calculate_interval(card, rating, new_ease)

        if rating is ReviewRating.AGAIN:
            card.lapses += 1
            new_repetitions = 0
        else:
            new_repetitions = card.repetitions + 1

        if rating is ReviewRating.AGAIN and was_new:
            # Short relearn step so a brand-new failure comes back this sitting
            next_due = now + timedelta(minutes=self.config.relearn_minutes)
        else:
            next_due = now + timedelta(days=new_interval)

        card.ease_factor = new_ease
        card.interval = new_interval
        card.repetitions = new_repetitions
        card.due_date = next_due
        card.last_reviewed = now
        card.total_reviews += 1

        logger.debug(
            f"Reviewed card {card.id}: rating={rating.value}, "
            f"interval={new_interval}d, ease={new_ease:.2f}, next_due={next_due.isoformat()}"
        )

        return ReviewOutcome(
            new_interval=new_interval,
            new_ease_factor=new_ease,
            next_due=next_due,
        )

    def preview(self, card: Card) -> list[tuple[ReviewRating, str]]:
        """
        Interval label each rating would produce, without changing the card.

        Returns:
            Four (rating, label) pairs in rating order
        """
        preview = []

        for rating in ReviewRating.ordered():
            if rating is ReviewRating.AGAIN and card.is_new():
                label = f"{self.config.relearn_minutes} min"
            else:
                new_ease = self.calculate_ease_factor(card, rating)
                label = interval_string(self.calculate_interval(card, rating, new_ease))
            preview.append((rating, label))

        return preview
