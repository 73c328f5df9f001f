"""Completion and freeze edits that keep strength up to date.

Each edit returns a new habit with the changed record already passed
through ``recalculate_strength`` for the edited day. Edits to future days
are stored but leave strength alone.
"""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import date
from typing import Optional

from habitstrength.tracking.ema import DEFAULT_PERIOD
from habitstrength.tracking.models import HabitRecord, HabitType
from habitstrength.tracking.recalc import recalculate_strength


def toggle_completion(
    habit: HabitRecord,
    day: date,
    *,
    today: Optional[date] = None,
    period: float = DEFAULT_PERIOD,
) -> HabitRecord:
    """
    Advance a binary habit's day through its three states.

    empty -> done -> frozen -> empty

    A frozen day is stored as a ``False`` completion plus a skip marker.

    Raises:
        ValueError: If the habit is measurable (use ``record_value``)
    """
    if habit.type != HabitType.BINARY:
        raise ValueError(f"habit {habit.id} is measurable, record a value instead")

    completions = dict(habit.completions)
    skipped = dict(habit.skipped)
    current = completions.get(day)

    if current is True:
        completions[day] = False
        skipped[day] = True
    elif current is False:
        completions.pop(day, None)
        skipped.pop(day, None)
    else:
        completions[day] = True
        skipped.pop(day, None)

    updated = replace(habit, completions=completions, skipped=skipped)
    return recalculate_strength(updated, day, today=today, period=period)


def record_value(
    habit: HabitRecord,
    day: date,
    value: Optional[float],
    *,
    today: Optional[date] = None,
    period: float = DEFAULT_PERIOD,
) -> HabitRecord:
    """Set (or clear, with None) a measurable habit's value for a day.

    Recording a value lifts any freeze on that day.

    Raises:
        ValueError: If the habit is binary (use ``toggle_completion``) or the
            value is not a finite number
    """
    if habit.type != HabitType.MEASURABLE:
        raise ValueError(f"habit {habit.id} is binary, toggle it instead")
    if value is not None and not math.isfinite(value):
        raise ValueError(f"value must be a finite number, got {value}")

    completions = dict(habit.completions)
    skipped = dict(habit.skipped)

    if value is None:
        completions.pop(day, None)
    else:
        completions[day] = float(value)
    skipped.pop(day, None)

    updated = replace(habit, completions=completions, skipped=skipped)
    return recalculate_strength(updated, day, today=today, period=period)


def set_frozen(
    habit: HabitRecord,
    day: date,
    frozen: bool = True,
    *,
    today: Optional[date] = None,
    period: float = DEFAULT_PERIOD,
) -> HabitRecord:
    """Mark or unmark a day as frozen."""
    skipped = dict(habit.skipped)
    if frozen:
        skipped[day] = True
    else:
        skipped.pop(day, None)

    updated = replace(habit, skipped=skipped)
    return recalculate_strength(updated, day, today=today, period=period)
