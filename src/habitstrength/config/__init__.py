"""Configuration for habitstrength."""

from __future__ import annotations

from habitstrength.config.settings import Settings, get_settings, reload_settings

__all__ = ["Settings", "get_settings", "reload_settings"]
