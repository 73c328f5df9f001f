"""Database queries for habits and their day entries."""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import Callable, Optional

from habitstrength.tracking.models import CompletionEntry, HabitRecord


class HabitQueries:
    """Database queries for habit records."""

    @staticmethod
    def save_habit(conn: sqlite3.Connection, habit: HabitRecord) -> None:
        """Insert or replace a habit together with all of its day entries."""
        conn.execute(
            """
            INSERT INTO habits (habit_id, name, habit_type, unit, target_value,
                                target_type, created_at, strength,
                                strength_baseline, last_strength_update)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(habit_id) DO UPDATE SET
                name = excluded.name,
                habit_type = excluded.habit_type,
                unit = excluded.unit,
                target_value = excluded.target_value,
                target_type = excluded.target_type,
                created_at = excluded.created_at,
                strength = excluded.strength,
                strength_baseline = excluded.strength_baseline,
                last_strength_update = excluded.last_strength_update
            """,
            (
                habit.id,
                habit.name,
                habit.type.value,
                habit.unit,
                habit.target_value,
                habit.target_type.value,
                habit.created_at.isoformat(),
                habit.strength,
                habit.strength_baseline,
                habit.last_strength_update.isoformat() if habit.last_strength_update else None,
            ),
        )

        conn.execute("DELETE FROM habit_completions WHERE habit_id = ?", (habit.id,))
        conn.executemany(
            "INSERT INTO habit_completions (habit_id, day, done, amount) VALUES (?, ?, ?, ?)",
            [
                _completion_row(habit.id, day, entry)
                for day, entry in sorted(habit.completions.items())
            ],
        )

        conn.execute("DELETE FROM habit_skipped_days WHERE habit_id = ?", (habit.id,))
        conn.executemany(
            "INSERT INTO habit_skipped_days (habit_id, day) VALUES (?, ?)",
            [(habit.id, day.isoformat()) for day, frozen in sorted(habit.skipped.items()) if frozen],
        )

    @staticmethod
    def get_habit(conn: sqlite3.Connection, habit_id: str) -> Optional[HabitRecord]:
        """Get a habit by ID."""
        row = conn.execute(
            """
            SELECT habit_id, name, habit_type, unit, target_value, target_type,
                   created_at, strength, strength_baseline, last_strength_update
            FROM habits WHERE habit_id = ?
            """,
            (habit_id,),
        ).fetchone()

        if row is None:
            return None
        return _habit_from_row(conn, row)

    @staticmethod
    def list_habits(conn: sqlite3.Connection) -> list[HabitRecord]:
        """Get all habits, oldest first."""
        rows = conn.execute(
            """
            SELECT habit_id, name, habit_type, unit, target_value, target_type,
                   created_at, strength, strength_baseline, last_strength_update
            FROM habits ORDER BY created_at, habit_id
            """
        ).fetchall()
        return [_habit_from_row(conn, row) for row in rows]

    @staticmethod
    def delete_habit(conn: sqlite3.Connection, habit_id: str) -> bool:
        """Delete a habit and its entries. Returns False if it did not exist."""
        conn.execute("DELETE FROM habit_completions WHERE habit_id = ?", (habit_id,))
        conn.execute("DELETE FROM habit_skipped_days WHERE habit_id = ?", (habit_id,))
        cursor = conn.execute("DELETE FROM habits WHERE habit_id = ?", (habit_id,))
        return cursor.rowcount > 0

    @staticmethod
    def update_habit(
        conn: sqlite3.Connection,
        habit_id: str,
        update: Callable[[HabitRecord], HabitRecord],
    ) -> HabitRecord:
        """
        Read a habit, apply ``update`` and write the result back.

        Run inside ``DatabaseConnection.transaction()`` so the read and the
        write happen under one lock.

        Raises:
            KeyError: If no habit has this ID
        """
        habit = HabitQueries.get_habit(conn, habit_id)
        if habit is None:
            raise KeyError(habit_id)
        updated = update(habit)
        HabitQueries.save_habit(conn, updated)
        return updated


def _completion_row(
    habit_id: str, day: date, entry: CompletionEntry
) -> tuple[str, str, Optional[bool], Optional[float]]:
    if isinstance(entry, bool):
        return (habit_id, day.isoformat(), entry, None)
    return (habit_id, day.isoformat(), None, float(entry))


def _habit_from_row(conn: sqlite3.Connection, row: sqlite3.Row) -> HabitRecord:
    habit_id = row["habit_id"]

    completions: dict[date, CompletionEntry] = {}
    for entry in conn.execute(
        "SELECT day, done, amount FROM habit_completions WHERE habit_id = ?",
        (habit_id,),
    ):
        day = date.fromisoformat(entry["day"])
        if entry["amount"] is not None:
            completions[day] = entry["amount"]
        else:
            completions[day] = bool(entry["done"])

    skipped = {
        date.fromisoformat(entry["day"]): True
        for entry in conn.execute(
            "SELECT day FROM habit_skipped_days WHERE habit_id = ?", (habit_id,)
        )
    }

    return HabitRecord(
        id=habit_id,
        name=row["name"],
        type=row["habit_type"],
        unit=row["unit"],
        target_value=row["target_value"],
        target_type=row["target_type"],
        created_at=date.fromisoformat(row["created_at"]),
        completions=completions,
        skipped=skipped,
        strength=row["strength"],
        strength_baseline=row["strength_baseline"],
        last_strength_update=(
            date.fromisoformat(row["last_strength_update"])
            if row["last_strength_update"]
            else None
        ),
    )
