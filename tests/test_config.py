"""
Tests for environment-driven settings.
"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from missile_command.config import Settings, get_settings
from missile_command.gameplay.constants import BEST_SCORE_STORAGE_KEY


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep a developer's .env or exported variables out of these tests."""
    monkeypatch.chdir(tmp_path)
    for name in ("BEST_SCORE_PATH", "BEST_SCORE_KEY", "TARGET_FPS",
                 "WINDOW_TITLE", "LOG_LEVEL", "RNG_SEED",
                 "AUDIO_ENABLED", "VOLUME", "MUTED"):
        monkeypatch.delenv(f"MISSILE_COMMAND_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.best_score_path == Path("~/.missile_command/best_score.json")
        assert settings.best_score_key == BEST_SCORE_STORAGE_KEY
        assert settings.target_fps == 60
        assert settings.window_title == "Missile Command"
        assert settings.log_level == "INFO"
        assert settings.rng_seed is None
        assert settings.audio_enabled is True
        assert settings.volume == 0.6
        assert settings.muted is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("MISSILE_COMMAND_TARGET_FPS", "30")
        monkeypatch.setenv("MISSILE_COMMAND_RNG_SEED", "7")
        monkeypatch.setenv("MISSILE_COMMAND_BEST_SCORE_PATH", "/tmp/scores.json")

        settings = Settings()
        assert settings.target_fps == 30
        assert settings.rng_seed == 7
        assert settings.best_score_path == Path("/tmp/scores.json")

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("MISSILE_COMMAND_LOG_LEVEL=DEBUG\n", encoding="utf-8")
        assert Settings().log_level == "DEBUG"

    def test_audio_overrides(self, monkeypatch):
        monkeypatch.setenv("MISSILE_COMMAND_AUDIO_ENABLED", "false")
        monkeypatch.setenv("MISSILE_COMMAND_VOLUME", "0.25")
        monkeypatch.setenv("MISSILE_COMMAND_MUTED", "1")

        settings = Settings()
        assert settings.audio_enabled is False
        assert settings.volume == 0.25
        assert settings.muted is True

    def test_volume_out_of_range(self, monkeypatch):
        monkeypatch.setenv("MISSILE_COMMAND_VOLUME", "1.5")
        with pytest.raises(ValidationError):
            Settings()

    def test_fps_out_of_range(self, monkeypatch):
        monkeypatch.setenv("MISSILE_COMMAND_TARGET_FPS", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
