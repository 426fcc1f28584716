"""
JSON Deck Store.

Persists decks as one JSON file per deck, named by deck id:

    ~/.flashdeck/decks/{deck_id}.json

Writes go to a temporary file in the same directory and are moved into
place with os.replace, so a failed save leaves the previous file intact.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from ..errors import DeckIOError, DeckParseError, StorageInitError
from ..models import Deck, now_local
from . import backup, csv_import
from .atomic import write_json_atomic
from .schemas import BackupImportResult, DeckRecord, DeckSummary


class DeckStorage:
    """
    File-backed deck persistence.

    Handles:
    - Save / load / delete of single decks by id
    - Deck listing for browsing (corrupt files are skipped)
    - CSV import (single file or whole folder)
    - Backup export and import
    """

    def __init__(self, decks_dir: Path | None = None, backup_dir: Path | None = None):
        """
        Initialize the deck store.

        Args:
            decks_dir: Directory holding deck files (defaults to settings)
            backup_dir: Directory for default backup files (defaults to settings)

        Raises:
            StorageInitError: If the decks directory cannot be created
        """
        self.decks_dir = Path(decks_dir) if decks_dir else self.default_path()
        self.backup_dir = Path(backup_dir) if backup_dir else None

        try:
            self.decks_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageInitError(
                f"Failed to create decks directory {self.decks_dir}: {e}", path=self.decks_dir
            ) from e

        logger.debug(f"DeckStorage initialized at {self.decks_dir}")

    @staticmethod
    def default_path() -> Path:
        """Default deck directory from settings."""
        from config import get_settings

        return get_settings().resolved_decks_dir

    def default_backup_path(self, now: datetime | None = None) -> Path:
        """Timestamped backup file in the backup directory."""
        if self.backup_dir is not None:
            folder = self.backup_dir
        else:
            from config import get_settings

            folder = get_settings().resolved_backup_dir

        stamp = (now or now_local()).strftime("%Y%m%d-%H%M%S")
        return folder / f"flashdeck-backup-{stamp}.json"

    def deck_path(self, deck_id: str) -> Path:
        return self.decks_dir / f"{deck_id}.json"

    def exists(self, deck_id: str) -> bool:
        return self.deck_path(deck_id).exists()

    # =========================================================================
    # Single Deck Operations
    # =========================================================================

    def save_deck(self, deck: Deck) -> Path:
        """
        Save a deck to disk, replacing any previous version.

        Returns:
            Path of the deck file

        Raises:
            DeckIOError: If the file cannot be written
        """
        path = self.deck_path(deck.id)
        try:
            write_json_atomic(path, deck.to_dict())
        except OSError as e:
            raise DeckIOError(f"Failed to save deck '{deck.name}': {e}", path=path) from e

        logger.debug(f"Saved deck {deck.id} ({len(deck.cards)} cards) to {path}")
        return path

    def load_deck(self, deck_id: str) -> Deck | None:
        """
        Load a deck by id.

        Returns:
            The Deck, or None if no file exists for this id

        Raises:
            DeckIOError: If the file cannot be read
            DeckParseError: If the file content is malformed
        """
        path = self.deck_path(deck_id)
        if not path.exists():
            return None
        return self._read_deck_file(path)

    def _read_deck_file(self, path: Path) -> Deck:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise DeckIOError(f"Failed to read {path}: {e}", path=path) from e

        try:
            return DeckRecord.model_validate_json(raw).to_deck()
        except (ValidationError, ValueError) as e:
            raise DeckParseError(f"Malformed deck file {path}: {e}", path=path) from e

    def delete_deck(self, deck_id: str) -> bool:
        """
        Delete a deck file.

        Returns:
            True if a file was removed, False if none existed

        Raises:
            DeckIOError: If the file exists but cannot be removed
        """
        path = self.deck_path(deck_id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise DeckIOError(f"Failed to delete {path}: {e}", path=path) from e

        logger.info(f"Deleted deck {deck_id}")
        return True

    def create_deck(self, name: str, description: str = "") -> Deck:
        """Create and save an empty deck."""
        deck = Deck.create(name, description)
        self.save_deck(deck)
        logger.info(f"Created deck '{deck.name}' ({deck.id})")
        return deck

    # =========================================================================
    # Listing
    # =========================================================================

    def list_decks(self) -> list[DeckSummary]:
        """
        Summaries of every stored deck, sorted by name.

        Files that cannot be read or parsed are skipped so one bad file
        does not hide the rest.
        """
        summaries = []

        for path in self.decks_dir.glob("*.json"):
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
                summaries.append(
                    DeckSummary(
                        id=data["id"],
                        name=data["name"],
                        description=data.get("description", ""),
                        card_count=len(data.get("cards", [])),
                    )
                )
            except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
                logger.warning(f"Skipping unreadable deck file {path.name}: {e}")
                continue

        summaries.sort(key=lambda s: s.name)
        return summaries

    def load_all(self) -> list[Deck]:
        """Every deck that loads cleanly, sorted by name."""
        decks = []
        for summary in self.list_decks():
            try:
                deck = self.load_deck(summary.id)
            except (DeckIOError, DeckParseError) as e:
                logger.warning(f"Skipping deck {summary.id}: {e}")
                continue
            if deck is not None:
                decks.append(deck)
        return decks

    # =========================================================================
    # CSV Import
    # =========================================================================

    def import_csv(self, csv_path: Path, deck_name: str) -> Deck:
        """
        Build a new (unsaved) deck from a two-column CSV file.

        Raises:
            DeckIOError: If the CSV file cannot be read
        """
        return csv_import.deck_from_csv(Path(csv_path), deck_name)

    def import_folder(self, folder_path: Path) -> list[tuple[str, int]]:
        """
        Import every CSV file in a folder as its own deck.

        Deck names come from the filenames ("network_basics.csv" becomes
        "Network Basics"). Files that yield no cards are not saved.

        Returns:
            List of (deck_name, card_count) for each saved deck

        Raises:
            DeckIOError: If the folder cannot be listed or a deck cannot be saved
        """
        results = []

        for path in csv_import.list_csv_files(Path(folder_path)):
            deck_name = csv_import.filename_to_title_case(path.stem) or "Imported Deck"
            try:
                deck = self.import_csv(path, deck_name)
            except DeckIOError as e:
                logger.warning(f"Failed to import {path}: {e}")
                continue

            if deck.cards:
                self.save_deck(deck)
                results.append((deck_name, len(deck.cards)))

        logger.info(f"Imported {len(results)} decks from {folder_path}")
        return results

    def list_csv_files(self, folder_path: Path) -> list[Path]:
        """CSV files available for bulk import."""
        return csv_import.list_csv_files(Path(folder_path))

    # =========================================================================
    # Backup
    # =========================================================================

    def export_backup(self, path: Path | None = None) -> int:
        """
        Write every stored deck into one backup file.

        Returns:
            Number of decks exported

        Raises:
            DeckIOError: If the backup file cannot be written
        """
        target = Path(path) if path else self.default_backup_path()
        decks = self.load_all()
        backup.write_backup(target, decks)
        logger.info(f"Exported {len(decks)} decks to {target}")
        return len(decks)

    def import_backup(self, path: Path) -> BackupImportResult:
        """
        Restore decks from a backup file.

        Decks whose id already exists locally are left untouched.

        Raises:
            DeckIOError: If the backup cannot be read or a deck cannot be saved
            DeckParseError: If the backup content is malformed
        """
        result = BackupImportResult()

        for deck in backup.read_backup(Path(path)):
            if self.exists(deck.id):
                logger.debug(f"Skipping deck {deck.id}: already exists")
                result.skipped += 1
                continue
            self.save_deck(deck)
            result.imported += 1

        logger.info(f"Backup import: {result.imported} imported, {result.skipped} skipped")
        return result
