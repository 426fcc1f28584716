"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work against a
throwaway data directory.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def data_dir(tmp_path):
    """Empty flashdeck data directory."""
    return tmp_path / "data"


def run_cli_command(
    args: list[str],
    data_dir: Path,
    input_text: str | None = None,
    timeout: int = 30,
) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m flashdeck'
        data_dir: Value for FLASHDECK_DATA_DIR
        input_text: Text fed to stdin for interactive prompts
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    env = dict(os.environ)
    env["FLASHDECK_DATA_DIR"] = str(data_dir)
    env["COLUMNS"] = "200"
    env.pop("FLASHDECK_DECKS_DIR", None)
    env.pop("FLASHDECK_BACKUP_DIR", None)

    result = subprocess.run(
        [sys.executable, "-m", "flashdeck", *args],
        cwd=PROJECT_ROOT,
        env=env,
        input=input_text,
        capture_output=True,
        text=True,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


def stored_decks(data_dir: Path) -> list[dict]:
    return [json.loads(p.read_text(encoding="utf-8")) for p in (data_dir / "decks").glob("*.json")]


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, data_dir):
        """Main help should list the commands."""
        code, stdout, stderr = run_cli_command(["--help"], data_dir)

        assert code == 0, f"Help failed: {stderr}"
        assert "flashdeck" in stdout.lower()
        assert "Commands" in stdout
        assert "study" in stdout

    @pytest.mark.parametrize("command", ["study", "import-csv", "export", "import-backup"])
    def test_command_help(self, data_dir, command):
        code, stdout, stderr = run_cli_command([command, "--help"], data_dir)

        assert code == 0, f"{command} help failed: {stderr}"


class TestCLIDecks:
    """Test deck management commands."""

    def test_decks_on_empty_store(self, data_dir):
        code, stdout, stderr = run_cli_command(["decks"], data_dir)

        assert code == 0, f"Decks failed: {stderr}"
        assert "No decks" in stdout

    def test_create_then_list(self, data_dir):
        code, _, stderr = run_cli_command(["create", "Spanish Verbs", "-d", "Common verbs"], data_dir)
        assert code == 0, f"Create failed: {stderr}"

        code, stdout, stderr = run_cli_command(["decks"], data_dir)

        assert code == 0
        assert "Spanish Verbs" in stdout
        assert len(stored_decks(data_dir)) == 1

    def test_add_browse_and_stats(self, data_dir):
        run_cli_command(["create", "Capitals"], data_dir)

        code, _, stderr = run_cli_command(
            ["add", "capitals", "--front", "Capital of Peru?", "--back", "Lima"], data_dir
        )
        assert code == 0, f"Add failed: {stderr}"

        code, stdout, _ = run_cli_command(["browse", "Capitals"], data_dir)
        assert code == 0
        assert "Lima" in stdout
        assert "New card" in stdout

        code, stdout, _ = run_cli_command(["stats", "Capitals"], data_dir)
        assert code == 0
        assert "New" in stdout

    def test_unknown_deck_fails_cleanly(self, data_dir):
        code, stdout, _ = run_cli_command(["browse", "Nope"], data_dir)

        assert code == 1
        assert "No deck matches" in stdout

    def test_delete_deck(self, data_dir):
        run_cli_command(["create", "Temp"], data_dir)

        code, _, stderr = run_cli_command(["delete-deck", "Temp", "--yes"], data_dir)

        assert code == 0, f"Delete failed: {stderr}"
        assert stored_decks(data_dir) == []


class TestCLIStudy:
    """Test the interactive study loop."""

    def test_empty_deck_has_nothing_to_study(self, data_dir):
        run_cli_command(["create", "Empty"], data_dir)

        code, stdout, _ = run_cli_command(["study", "Empty"], data_dir)

        assert code == 0
        assert "Nothing to study" in stdout

    def test_new_card_limit_of_zero_leaves_nothing_queued(self, data_dir):
        run_cli_command(["create", "Capitals"], data_dir)
        run_cli_command(["add", "Capitals", "-f", "Capital of Peru?", "-b", "Lima"], data_dir)

        code, stdout, _ = run_cli_command(["study", "Capitals", "--new", "0"], data_dir)

        assert code == 0
        assert "Nothing to study" in stdout
        assert "cards queued" not in stdout
        assert "Session Complete" not in stdout

    def test_study_one_new_card(self, data_dir):
        run_cli_command(["create", "Capitals"], data_dir)
        run_cli_command(["add", "Capitals", "-f", "Capital of Peru?", "-b", "Lima"], data_dir)

        # Enter to reveal, then rate Good
        code, stdout, stderr = run_cli_command(["study", "Capitals"], data_dir, input_text="\n3\n")

        assert code == 0, f"Study failed: {stderr}"
        assert "Session Complete" in stdout

        card = stored_decks(data_dir)[0]["cards"][0]
        assert card["repetitions"] == 1
        assert card["due_date"] is not None


class TestCLIImportExport:
    """Test CSV import and backups."""

    def test_import_csv(self, data_dir, tmp_path):
        csv_path = tmp_path / "spanish_verbs.csv"
        csv_path.write_text("Front,Back\nhablar,to speak\ncomer,to eat\n", encoding="utf-8")

        code, stdout, stderr = run_cli_command(["import-csv", str(csv_path)], data_dir)

        assert code == 0, f"Import failed: {stderr}"
        assert "Imported 2 cards into 'Spanish Verbs'" in stdout

    def test_import_missing_csv_reports_error(self, data_dir, tmp_path):
        code, stdout, _ = run_cli_command(["import-csv", str(tmp_path / "missing.csv")], data_dir)

        assert code == 1
        assert "Error" in stdout

    def test_export_and_restore(self, data_dir, tmp_path):
        run_cli_command(["create", "Capitals"], data_dir)
        run_cli_command(["add", "Capitals", "-f", "Peru?", "-b", "Lima"], data_dir)
        backup_path = tmp_path / "backup.json"

        code, stdout, stderr = run_cli_command(["export", "-o", str(backup_path)], data_dir)
        assert code == 0, f"Export failed: {stderr}"
        assert "Exported 1 decks" in stdout

        other_dir = tmp_path / "other"
        code, stdout, stderr = run_cli_command(["import-backup", str(backup_path)], other_dir)
        assert code == 0, f"Import backup failed: {stderr}"
        assert "Imported 1 decks" in stdout
        assert stored_decks(other_dir) == stored_decks(data_dir)

        code, stdout, _ = run_cli_command(["import-backup", str(backup_path)], other_dir)
        assert "1 skipped" in stdout
