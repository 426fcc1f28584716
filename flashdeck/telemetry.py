"""
Session Telemetry.

Tracks per-session review metrics:
- Cards rated (including repeats of requeued cards)
- Elapsed time and throughput
- Rating distribution and retention
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .models import ReviewRating, now_local


@dataclass
class ReviewEvent:
    """A single rating given during the session."""

    card_id: str
    rating: ReviewRating
    timestamp: datetime = field(default_factory=now_local)


class SessionTelemetry:
    """Tracks metrics for a single study session."""

    def __init__(self, started_at: datetime | None = None):
        """
        Initialize session telemetry.

        Args:
            started_at: Session start (defaults to now)
        """
        self.started_at = started_at or now_local()
        self.events: list[ReviewEvent] = []

    def record(
        self,
        card_id: str,
        rating: ReviewRating,
        timestamp: datetime | None = None,
    ) -> None:
        """Record a rating event."""
        self.events.append(
            ReviewEvent(card_id=card_id, rating=rating, timestamp=timestamp or now_local())
        )

    # =========================================================================
    # Basic Metrics
    # =========================================================================

    @property
    def total_reviews(self) -> int:
        """Total ratings given in the session."""
        return len(self.events)

    @property
    def lapse_count(self) -> int:
        """Number of Again ratings."""
        return sum(1 for e in self.events if e.rating is ReviewRating.AGAIN)

    @property
    def retention(self) -> float:
        """Share of ratings that were not Again."""
        if not self.events:
            return 0.0
        return 1 - self.lapse_count / len(self.events)

    def duration_minutes(self, now: datetime | None = None) -> float:
        """Session duration in minutes."""
        delta = (now or now_local()) - self.started_at
        return max(0.0, delta.total_seconds() / 60)

    def cards_per_minute(self, now: datetime | None = None) -> float:
        """Throughput; 0 for sessions shorter than a second."""
        minutes = self.duration_minutes(now)
        if minutes * 60 < 1:
            return 0.0
        return self.total_reviews / minutes

    # =========================================================================
    # Analysis
    # =========================================================================

    def get_stats(self, now: datetime | None = None) -> dict:
        """
        Get session statistics.

        Returns:
            Dictionary of session metrics
        """
        return {
            "duration_minutes": round(self.duration_minutes(now), 1),
            "total_reviews": self.total_reviews,
            "lapses": self.lapse_count,
            "retention_percent": round(self.retention * 100, 1),
            "cards_per_minute": round(self.cards_per_minute(now), 1),
            "rating_distribution": self._rating_distribution(),
        }

    def _rating_distribution(self) -> dict[str, int]:
        dist = {rating.value: 0 for rating in ReviewRating.ordered()}
        for event in self.events:
            dist[event.rating.value] += 1
        return dist

    def get_struggling_cards(self, min_failures: int = 2) -> list[str]:
        """
        Get card IDs rated Again multiple times this session.

        Args:
            min_failures: Minimum failures to be considered "struggling"

        Returns:
            List of card IDs in first-failure order
        """
        failure_counts: dict[str, int] = {}

        for event in self.events:
            if event.rating is ReviewRating.AGAIN:
                failure_counts[event.card_id] = failure_counts.get(event.card_id, 0) + 1

        return [card_id for card_id, count in failure_counts.items() if count >= min_failures]
