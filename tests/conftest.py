"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from flashdeck.models import Card, Deck  # noqa: E402
from flashdeck.storage import DeckStorage  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """A fixed, timezone-aware reference time."""
    return datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def storage(tmp_path):
    """DeckStorage rooted in a temporary directory."""
    return DeckStorage(tmp_path / "decks", backup_dir=tmp_path / "backups")


@pytest.fixture
def new_card():
    """A card that has never been reviewed."""
    return Card(front="What does DNS stand for?", back="Domain Name System")


@pytest.fixture
def review_card(now):
    """A mature card: three successful reviews, last interval 10 days."""
    return Card(
        front="Default HTTPS port?",
        back="443",
        ease_factor=2.5,
        interval=10,
        repetitions=3,
        due_date=now - timedelta(hours=1),
        last_reviewed=now - timedelta(days=10),
        total_reviews=3,
    )


@pytest.fixture
def sample_deck(now):
    """A deck with one due card, one future card and two new cards."""
    deck = Deck.create("Networking", "Ports and protocols")
    due = deck.add_card("SSH port?", "22")
    future = deck.add_card("SMTP port?", "25")
    deck.add_card("DNS port?", "53")
    deck.add_card("HTTP port?", "80")

    due.due_date = now - timedelta(days=1)
    due.interval = 3
    due.repetitions = 2
    due.total_reviews = 2

    future.due_date = now + timedelta(days=5)
    future.interval = 6
    future.repetitions = 3
    future.total_reviews = 3

    return deck
