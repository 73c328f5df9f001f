"""Pytest fixtures for habitstrength tests."""

from __future__ import annotations

from datetime import date

import pytest

from habitstrength.db.connection import DatabaseConnection, set_db
from habitstrength.tracking.models import HabitRecord, HabitType, TargetType


@pytest.fixture
def created() -> date:
    return date(2025, 1, 1)


@pytest.fixture
def binary_habit(created) -> HabitRecord:
    """Binary habit created 2025-01-01 with no entries."""
    return HabitRecord(id="run", created_at=created, type=HabitType.BINARY, name="Run")


@pytest.fixture
def min_habit(created) -> HabitRecord:
    """Measurable habit: read at least 10 pages."""
    return HabitRecord(
        id="read",
        created_at=created,
        type=HabitType.MEASURABLE,
        target_value=10,
        target_type=TargetType.MIN,
        name="Read",
        unit="pages",
    )


@pytest.fixture
def max_habit(created) -> HabitRecord:
    """Measurable habit: at most 5 cigarettes."""
    return HabitRecord(
        id="smoke",
        created_at=created,
        type=HabitType.MEASURABLE,
        target_value=5,
        target_type=TargetType.MAX,
        name="Cigarettes",
    )


@pytest.fixture
def temp_db(tmp_path):
    """Create a temporary database with schema."""
    db = DatabaseConnection(tmp_path / "habits.db")
    db.initialize_schema()

    yield db

    set_db(None)
