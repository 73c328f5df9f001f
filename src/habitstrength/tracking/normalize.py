"""Normalization of a day's raw completion entry to a 0-100 value.

Binary habits score 100 for a completed day and 0 otherwise. Measurable
habits compare the recorded number with their target:

    min target (reach at least):
        target 10, value 9  ->  90
        target 10, value 15 -> 100   (overachievement is capped)

    max target (stay at or below):
        target 5, value 5   -> 100
        target 5, value 7.5 ->  50   (50% over target = 50 point penalty)
        target 5, value 10  ->   0   (100% over target zeroes the day)
"""

from __future__ import annotations

import math
from datetime import date

from habitstrength.tracking.models import HabitRecord, HabitType, TargetType

FULL_COMPLETION = 100.0
NO_COMPLETION = 0.0


def completion_value(habit: HabitRecord, day: date) -> float:
    """
    Return how well a habit was satisfied on a day, from 0 to 100.

    Freezes are not considered here; callers skip frozen days before
    asking for a completion value.

    Args:
        habit: Habit whose completion record is read
        day: Calendar day to evaluate

    Returns:
        Completion value in [0, 100]
    """
    entry = habit.completions.get(day)

    if entry is None or entry is False:
        return NO_COMPLETION

    # bool before numbers: True is also an int
    if entry is True:
        return FULL_COMPLETION

    if habit.type == HabitType.BINARY:
        return NO_COMPLETION

    return measured_value(float(entry), habit.target_value, habit.target_type)


def measured_value(
    value: float,
    target: float | None,
    target_type: TargetType = TargetType.MIN,
) -> float:
    """Score a numeric entry against a measurable habit's target."""
    if not math.isfinite(value) or value < 0:
        return NO_COMPLETION

    if target is None or target <= 0:
        return FULL_COMPLETION if value > 0 else NO_COMPLETION

    if target_type == TargetType.MAX:
        if value <= target:
            return FULL_COMPLETION
        penalty = (value - target) / target * 100
        return max(FULL_COMPLETION - penalty, NO_COMPLETION)

    return min(value / target * 100, FULL_COMPLETION)
