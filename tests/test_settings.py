"""Tests for YAML settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from habitstrength.config.settings import Settings


class TestSettingsLoad:
    """Tests for Settings.load."""

    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        settings = Settings.load(tmp_path / "missing.yaml")

        assert settings.strength.ema_period == 32
        assert settings.strength.chart_points == 30
        assert settings.logging.level == "WARNING"
        assert settings.database.path.name == "habits.db"

    def test_overrides(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text(
            "strength:\n"
            "  ema_period: 14\n"
            "  chart_points: 60\n"
            "logging:\n"
            "  level: debug\n"
            "database:\n"
            "  path: ~/habits/test.db\n"
        )

        settings = Settings.load(config)

        assert settings.strength.ema_period == 14
        assert settings.strength.chart_points == 60
        assert settings.logging.level == "DEBUG"
        assert settings.database.path == Path("~/habits/test.db").expanduser()

    def test_partial_section(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("strength:\n  chart_points: 10\n")

        settings = Settings.load(config)

        assert settings.strength.ema_period == 32
        assert settings.strength.chart_points == 10

    def test_empty_file(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("")
        assert Settings.load(config).strength.ema_period == 32

    def test_non_positive_period_rejected(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("strength:\n  ema_period: 0\n")
        with pytest.raises(ValueError, match="ema_period"):
            Settings.load(config)


def test_save_then_load(tmp_path) -> None:
    """Saved settings load back unchanged."""
    settings = Settings()
    settings.strength.ema_period = 21
    settings.logging.level = "INFO"
    settings.database.path = tmp_path / "h.db"

    config = tmp_path / "nested" / "config.yaml"
    settings.save(config)
    loaded = Settings.load(config)

    assert loaded.strength.ema_period == 21
    assert loaded.logging.level == "INFO"
    assert loaded.database.path == tmp_path / "h.db"
