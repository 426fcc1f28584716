"""
Backup Bundle.

A backup is one JSON file holding every deck at the same fidelity as the
individual deck files:

    {
      "format": "flashdeck-backup",
      "version": 1,
      "exported_at": "2026-10-19T09:30:00+02:00",
      "decks": [ {deck}, ... ]
    }
"""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from ..errors import DeckIOError, DeckParseError
from ..models import Deck, now_local
from .atomic import write_json_atomic
from .schemas import BACKUP_FORMAT, BACKUP_VERSION, BackupBundle


def write_backup(path: Path, decks: list[Deck]) -> None:
    """
    Write decks into a backup file, creating parent directories.

    Raises:
        DeckIOError: If the file cannot be written
    """
    payload = {
        "format": BACKUP_FORMAT,
        "version": BACKUP_VERSION,
        "exported_at": now_local().isoformat(),
        "decks": [deck.to_dict() for deck in decks],
    }

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        write_json_atomic(path, payload)
    except OSError as e:
        raise DeckIOError(f"Failed to write backup {path}: {e}", path=path) from e


def read_backup(path: Path) -> list[Deck]:
    """
    Read every deck from a backup file.

    Raises:
        DeckIOError: If the file cannot be read
        DeckParseError: If the content is not a valid backup
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DeckIOError(f"Failed to read backup {path}: {e}", path=path) from e

    try:
        bundle = BackupBundle.model_validate_json(raw)
        return [record.to_deck() for record in bundle.decks]
    except (ValidationError, ValueError) as e:
        raise DeckParseError(f"Malformed backup {path}: {e}", path=path) from e
