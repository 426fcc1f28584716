"""
CSV Card Import.

Expected format:
    front,back[,ignored...]

- A first row whose first cell contains "front" (any case) is a header
- Rows with fewer than two columns are dropped
- Rows whose front or back is empty after trimming are dropped
"""

from __future__ import annotations

import csv
import re
from pathlib import Path

from loguru import logger

from ..errors import DeckIOError
from ..models import Deck


def parse_csv_rows(rows: list[list[str]]) -> list[tuple[str, str]]:
    """
    Extract (front, back) pairs from parsed CSV rows.

    Args:
        rows: Rows as returned by csv.reader

    Returns:
        Valid (front, back) pairs in file order
    """
    pairs = []

    for i, row in enumerate(rows):
        if i == 0 and row and "front" in row[0].lower():
            continue
        if len(row) < 2:
            continue

        front = row[0].strip()
        back = row[1].strip()
        if front and back:
            pairs.append((front, back))

    return pairs


def deck_from_csv(csv_path: Path, deck_name: str) -> Deck:
    """
    Build a new deck from a CSV file. The deck is not saved.

    Raises:
        DeckIOError: If the file cannot be read or decoded
    """
    try:
        with open(csv_path, encoding="utf-8-sig", newline="") as f:
            rows = list(csv.reader(f))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise DeckIOError(f"Failed to read CSV {csv_path}: {e}", path=csv_path) from e

    deck = Deck.create(deck_name)
    for front, back in parse_csv_rows(rows):
        deck.add_card(front, back)

    logger.debug(f"Parsed {len(deck.cards)} cards from {csv_path.name}")
    return deck


def filename_to_title_case(name: str) -> str:
    """
    Turn a snake_case or kebab-case file stem into a deck title.

    Example:
        "network_basics-part-2" -> "Network Basics Part 2"
    """
    words = [w for w in re.split(r"[_-]", name) if w]
    return " ".join(w[0].upper() + w[1:].lower() for w in words)


def list_csv_files(folder_path: Path) -> list[Path]:
    """
    CSV files directly inside a folder, sorted by name.

    Raises:
        DeckIOError: If the folder cannot be listed
    """
    try:
        entries = list(folder_path.iterdir())
    except OSError as e:
        raise DeckIOError(f"Failed to list {folder_path}: {e}", path=folder_path) from e

    return sorted(p for p in entries if p.is_file() and p.suffix.lower() == ".csv")
