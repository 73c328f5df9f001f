"""SQLite storage for habits."""

from __future__ import annotations

from habitstrength.db.connection import DatabaseConnection, get_db, set_db
from habitstrength.db.queries import HabitQueries

__all__ = ["DatabaseConnection", "HabitQueries", "get_db", "set_db"]
