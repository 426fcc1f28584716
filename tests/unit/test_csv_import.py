"""
Unit tests for CSV card import.

Tests header detection, row filtering, folder import and deck naming
from filenames.
"""

import pytest

from flashdeck.errors import DeckIOError
from flashdeck.storage.csv_import import filename_to_title_case, parse_csv_rows


def write_csv(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestParseRows:
    """Tests for parse_csv_rows."""

    def test_header_is_skipped(self):
        rows = [["Front", "Back"], ["hola", "hello"]]
        assert parse_csv_rows(rows) == [("hola", "hello")]

    def test_header_match_is_case_insensitive_substring(self):
        rows = [["Card FRONT text", "Back"], ["a", "b"]]
        assert parse_csv_rows(rows) == [("a", "b")]

    def test_first_row_without_header_is_kept(self):
        rows = [["hola", "hello"], ["adios", "goodbye"]]
        assert len(parse_csv_rows(rows)) == 2

    def test_front_in_later_row_is_not_a_header(self):
        rows = [["a", "b"], ["front", "back"]]
        assert parse_csv_rows(rows) == [("a", "b"), ("front", "back")]

    def test_short_and_blank_rows_dropped(self):
        rows = [["only one"], [], ["", "back"], ["front", "  "], [" q ", " a "]]
        assert parse_csv_rows(rows) == [("q", "a")]

    def test_extra_columns_ignored(self):
        rows = [["q", "a", "tag", "notes"]]
        assert parse_csv_rows(rows) == [("q", "a")]


class TestImportCsv:
    """Tests for DeckStorage.import_csv."""

    def test_header_and_two_rows(self, storage, tmp_path):
        path = write_csv(tmp_path / "spanish.csv", "Front,Back\nhola,hello\nadios,goodbye\n")

        deck = storage.import_csv(path, "Spanish")

        assert deck.name == "Spanish"
        assert [(c.front, c.back) for c in deck.cards] == [("hola", "hello"), ("adios", "goodbye")]
        assert all(c.is_new() for c in deck.cards)

    def test_row_with_empty_back_dropped(self, storage, tmp_path):
        path = write_csv(tmp_path / "s.csv", "Front,Back\nhola,hello\ngracias,\nadios,goodbye\n")

        deck = storage.import_csv(path, "Spanish")

        assert len(deck.cards) == 2
        assert "gracias" not in [c.front for c in deck.cards]

    def test_quoted_fields_with_commas(self, storage, tmp_path):
        path = write_csv(tmp_path / "s.csv", '"Paris, France",capital\n')

        deck = storage.import_csv(path, "Geo")

        assert deck.cards[0].front == "Paris, France"

    def test_import_does_not_save(self, storage, tmp_path):
        path = write_csv(tmp_path / "s.csv", "q,a\n")
        storage.import_csv(path, "Unsaved")
        assert storage.list_decks() == []

    def test_missing_file_raises_io_error(self, storage, tmp_path):
        with pytest.raises(DeckIOError):
            storage.import_csv(tmp_path / "missing.csv", "Nope")

    def test_utf8_bom_is_stripped(self, storage, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufeffFront,Back\nq,a\n".encode("utf-8"))

        deck = storage.import_csv(path, "Bom")

        assert [(c.front, c.back) for c in deck.cards] == [("q", "a")]


class TestFilenameToTitleCase:
    """Tests for deck names derived from filenames."""

    @pytest.mark.parametrize("stem,expected", [
        ("spanish_verbs", "Spanish Verbs"),
        ("world-capitals", "World Capitals"),
        ("mixed_case-NAME", "Mixed Case Name"),
        ("__leading__trailing--", "Leading Trailing"),
        ("single", "Single"),
        ("", ""),
    ])
    def test_names(self, stem, expected):
        assert filename_to_title_case(stem) == expected


class TestImportFolder:
    """Tests for bulk folder import."""

    def test_each_csv_becomes_a_deck(self, storage, tmp_path):
        folder = tmp_path / "csvs"
        folder.mkdir()
        write_csv(folder / "spanish_verbs.csv", "Front,Back\nhablar,to speak\ncomer,to eat\n")
        write_csv(folder / "world-capitals.csv", "Peru,Lima\n")
        write_csv(folder / "empty_deck.csv", "Front,Back\n")
        write_csv(folder / "readme.txt", "not a deck")

        results = storage.import_folder(folder)

        assert results == [("Spanish Verbs", 2), ("World Capitals", 1)]
        assert sorted(s.name for s in storage.list_decks()) == ["Spanish Verbs", "World Capitals"]

    def test_list_csv_files(self, storage, tmp_path):
        folder = tmp_path / "csvs"
        folder.mkdir()
        write_csv(folder / "b.csv", "q,a\n")
        write_csv(folder / "a.CSV", "q,a\n")
        write_csv(folder / "c.txt", "q,a\n")

        assert [p.name for p in storage.list_csv_files(folder)] == ["a.CSV", "b.csv"]

    def test_missing_folder_raises_io_error(self, storage, tmp_path):
        with pytest.raises(DeckIOError):
            storage.import_folder(tmp_path / "nowhere")
