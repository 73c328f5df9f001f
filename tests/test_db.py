"""Tests for habit storage queries."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from habitstrength.db.queries import HabitQueries
from habitstrength.tracking.edits import toggle_completion
from habitstrength.tracking.models import HabitRecord, HabitType, TargetType

DAY1 = date(2025, 1, 1)
DAY2 = date(2025, 1, 2)


@pytest.fixture
def stored_habit() -> HabitRecord:
    return HabitRecord(
        id="water",
        created_at=DAY1,
        type=HabitType.MEASURABLE,
        target_value=8,
        target_type=TargetType.MAX,
        completions={DAY1: 6.5, DAY2: True},
        skipped={date(2025, 1, 3): True},
        strength=12,
        strength_baseline=12.345678901234567,
        last_strength_update=DAY2,
        name="Coffee",
        unit="cups",
    )


class TestHabitQueries:
    """Tests for HabitQueries."""

    def test_save_and_get(self, temp_db, stored_habit) -> None:
        with temp_db.get_connection() as conn:
            HabitQueries.save_habit(conn, stored_habit)

        with temp_db.get_connection() as conn:
            loaded = HabitQueries.get_habit(conn, "water")

        assert loaded == stored_habit
        assert loaded.completions[DAY2] is True

    def test_get_missing(self, temp_db) -> None:
        with temp_db.get_connection() as conn:
            assert HabitQueries.get_habit(conn, "nope") is None

    def test_save_replaces_entries(self, temp_db, stored_habit) -> None:
        with temp_db.get_connection() as conn:
            HabitQueries.save_habit(conn, stored_habit)
            HabitQueries.save_habit(conn, replace(stored_habit, completions={}, skipped={}, strength=0))

        with temp_db.get_connection() as conn:
            loaded = HabitQueries.get_habit(conn, "water")

        assert loaded.completions == {}
        assert loaded.skipped == {}
        assert loaded.strength == 0

    def test_list_habits(self, temp_db, stored_habit) -> None:
        other = HabitRecord(id="a", created_at=date(2024, 12, 1))
        with temp_db.get_connection() as conn:
            HabitQueries.save_habit(conn, stored_habit)
            HabitQueries.save_habit(conn, other)
            habits = HabitQueries.list_habits(conn)

        assert [h.id for h in habits] == ["a", "water"]

    def test_delete_habit(self, temp_db, stored_habit) -> None:
        with temp_db.get_connection() as conn:
            HabitQueries.save_habit(conn, stored_habit)
            assert HabitQueries.delete_habit(conn, "water") is True
            assert HabitQueries.delete_habit(conn, "water") is False
            count = conn.execute("SELECT COUNT(*) FROM habit_completions").fetchone()[0]

        assert count == 0


class TestUpdateHabit:
    """Read -> compute -> write in one transaction."""

    def test_applies_edit(self, temp_db) -> None:
        habit = HabitRecord.create("run", DAY1)
        with temp_db.transaction() as conn:
            HabitQueries.save_habit(conn, habit)

        with temp_db.transaction() as conn:
            updated = HabitQueries.update_habit(
                conn, "run", lambda h: toggle_completion(h, DAY1, today=DAY1, period=7)
            )

        with temp_db.get_connection() as conn:
            loaded = HabitQueries.get_habit(conn, "run")

        assert updated.strength == 25
        assert loaded == updated

    def test_unknown_habit(self, temp_db) -> None:
        with pytest.raises(KeyError):
            with temp_db.transaction() as conn:
                HabitQueries.update_habit(conn, "nope", lambda h: h)

    def test_failed_edit_rolls_back(self, temp_db, min_habit) -> None:
        with temp_db.transaction() as conn:
            HabitQueries.save_habit(conn, min_habit)

        with pytest.raises(ValueError):
            with temp_db.transaction() as conn:
                HabitQueries.update_habit(conn, "read", lambda h: toggle_completion(h, DAY1))

        with temp_db.get_connection() as conn:
            assert HabitQueries.get_habit(conn, "read") == min_habit
