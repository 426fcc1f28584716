"""
Unit tests for settings loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config import Settings, get_settings
from flashdeck.scheduler import SM2Config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Ignore any FLASHDECK_ variables from the developer's shell."""
    for name in ["DATA_DIR", "DECKS_DIR", "BACKUP_DIR", "NEW_CARDS_PER_SESSION", "LOG_LEVEL"]:
        monkeypatch.delenv(f"FLASHDECK_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for defaults and environment overrides."""

    def test_directories_derive_from_data_dir(self, tmp_path):
        settings = Settings(data_dir=tmp_path, _env_file=None)

        assert settings.resolved_decks_dir == tmp_path / "decks"
        assert settings.resolved_backup_dir == tmp_path / "backups"

    def test_explicit_decks_dir_wins(self, tmp_path):
        settings = Settings(data_dir=tmp_path, decks_dir=tmp_path / "elsewhere", _env_file=None)
        assert settings.resolved_decks_dir == tmp_path / "elsewhere"

    def test_environment_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FLASHDECK_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("FLASHDECK_NEW_CARDS_PER_SESSION", "5")

        settings = get_settings()

        assert settings.data_dir == Path(tmp_path)
        assert settings.new_cards_per_session == 5

    def test_minimum_ease_cannot_go_below_floor(self):
        with pytest.raises(ValidationError):
            Settings(minimum_ease=1.0, _env_file=None)

    def test_scheduler_config(self):
        config = SM2Config(**Settings(relearn_minutes=3, _env_file=None).get_scheduler_config())

        assert config.relearn_minutes == 3
        assert config.minimum_ease == 1.3
