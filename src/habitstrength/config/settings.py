"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from habitstrength.tracking.ema import DEFAULT_PERIOD
from habitstrength.tracking.history import DEFAULT_CHART_POINTS


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".habitstrength"


def _default_db_path() -> Path:
    """Return the default database path."""
    return _default_config_dir() / "habits.db"


@dataclass
class StrengthConfig:
    """Strength calculation configuration."""

    ema_period: int = DEFAULT_PERIOD
    chart_points: int = DEFAULT_CHART_POINTS


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: Path = field(default_factory=_default_db_path)


@dataclass
class Settings:
    """Main application settings."""

    strength: StrengthConfig = field(default_factory=StrengthConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.habitstrength/config.yaml

        Returns:
            Settings instance

        Raises:
            ValueError: If ema_period is not positive
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        if "strength" in data:
            strength_data = data["strength"] or {}
            if "ema_period" in strength_data:
                period = int(strength_data["ema_period"])
                if period <= 0:
                    raise ValueError(f"strength.ema_period must be positive, got {period}")
                settings.strength.ema_period = period
            if "chart_points" in strength_data:
                settings.strength.chart_points = int(strength_data["chart_points"])

        if "logging" in data:
            log_data = data["logging"] or {}
            if "level" in log_data:
                settings.logging.level = str(log_data["level"]).upper()

        if "database" in data:
            db_data = data["database"] or {}
            if "path" in db_data:
                settings.database.path = Path(db_data["path"]).expanduser()

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.habitstrength/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "strength": {
                "ema_period": self.strength.ema_period,
                "chart_points": self.strength.chart_points,
            },
            "logging": {
                "level": self.logging.level,
            },
            "database": {
                "path": str(self.database.path),
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
