"""
flashdeck: Terminal Flashcards with SM-2 Scheduling.

A single-user, file-backed spaced repetition tool.

Components:
- Card / Deck: flashcard data model
- SM2Scheduler: spaced repetition algorithm
- StudySession: per-session card queue with requeue on failure
- SessionTelemetry: session metrics for the completion summary
- DeckStorage: JSON deck files, CSV import, backup bundles
"""

from .errors import (
    DeckIOError,
    DeckParseError,
    FlashdeckError,
    StorageError,
    StorageInitError,
)
from .models import Card, Deck, DeckStats, ReviewRating
from .scheduler import ReviewOutcome, SM2Config, SM2Scheduler, interval_string
from .storage import BackupImportResult, DeckStorage, DeckSummary
from .study_session import SessionState, StudySession, build_queue
from .telemetry import SessionTelemetry

__version__ = "1.0.0"

__all__ = [
    # Model
    "Card",
    "Deck",
    "DeckStats",
    "ReviewRating",
    # Scheduling
    "SM2Scheduler",
    "SM2Config",
    "ReviewOutcome",
    "interval_string",
    # Study
    "StudySession",
    "SessionState",
    "build_queue",
    "SessionTelemetry",
    # Persistence
    "DeckStorage",
    "DeckSummary",
    "BackupImportResult",
    # Errors
    "FlashdeckError",
    "StorageError",
    "StorageInitError",
    "DeckIOError",
    "DeckParseError",
]
