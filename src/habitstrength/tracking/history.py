"""Day-by-day replay of habit strength.

The replay here is the only place days are walked. Full recalculation,
incremental recalculation and the chart history all go through
``replay_days`` so the three can never disagree on how a day is scored.
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Iterator, Optional

import pandas as pd

from habitstrength.tracking.ema import DEFAULT_PERIOD, update_strength
from habitstrength.tracking.models import HabitRecord, StrengthPoint
from habitstrength.tracking.normalize import completion_value
from habitstrength.tracking.trace import TraceEvent, TraceObserver

# Number of points a strength chart shows by default
DEFAULT_CHART_POINTS = 30

ONE_DAY = timedelta(days=1)


def find_start_date(habit: HabitRecord) -> date:
    """
    First day of a habit's strength history.

    This is the creation day, or an earlier day if completions or freezes
    were back-filled before the habit was created.
    """
    marked = [day for day, entry in habit.completions.items() if entry is not False]
    marked.extend(day for day, frozen in habit.skipped.items() if frozen is True)
    if not marked:
        return habit.created_at
    return min(habit.created_at, min(marked))


def replay_days(
    habit: HabitRecord,
    start: date,
    end: date,
    initial: float = 0.0,
    period: float = DEFAULT_PERIOD,
    observer: Optional[TraceObserver] = None,
) -> Iterator[tuple[date, float]]:
    """
    Walk days from start through end inclusive, smoothing as it goes.

    Frozen days leave strength untouched; every other day, with or without
    an entry, applies one EMA step.

    Args:
        habit: Habit whose record is replayed
        start: First day to process
        end: Last day to process (nothing is yielded if end < start)
        initial: Unfloored strength before ``start``
        period: EMA period
        observer: Optional callback receiving a TraceEvent per day

    Yields:
        (day, unfloored strength after the day)
    """
    strength = initial
    day = start
    while day <= end:
        if habit.is_frozen(day):
            if observer is not None:
                observer(TraceEvent.for_freeze(day, strength))
        else:
            value = completion_value(habit, day)
            before = strength
            strength = update_strength(strength, value, period)
            if observer is not None:
                observer(TraceEvent.for_step(day, before, strength, value))
        yield day, strength
        day += ONE_DAY


def replay_value(
    habit: HabitRecord,
    start: date,
    end: date,
    initial: float = 0.0,
    period: float = DEFAULT_PERIOD,
    observer: Optional[TraceObserver] = None,
) -> float:
    """Final unfloored strength of ``replay_days`` (``initial`` if no days)."""
    strength = initial
    for _, strength in replay_days(habit, start, end, initial, period, observer):
        pass
    return strength


def strength_history(
    habit: HabitRecord,
    *,
    today: Optional[date] = None,
    period: float = DEFAULT_PERIOD,
    observer: Optional[TraceObserver] = None,
) -> list[StrengthPoint]:
    """
    Reconstruct the strength trace from the first day through today.

    The habit is never modified. The last point's ``strength`` equals what a
    full recalculation on the same day stores as the public score.

    Args:
        habit: Habit to replay
        today: Last day of the trace (default: today)
        period: EMA period
        observer: Optional trace callback

    Returns:
        One StrengthPoint per day, oldest first
    """
    if today is None:
        today = date.today()
    start = find_start_date(habit)
    return [
        StrengthPoint(day, value)
        for day, value in replay_days(habit, start, today, 0.0, period, observer)
    ]


def strength_at_date(
    habit: HabitRecord,
    day: date,
    *,
    period: float = DEFAULT_PERIOD,
) -> float:
    """Unfloored strength at the end of a given day (0.0 before the first day)."""
    return replay_value(habit, find_start_date(habit), day, 0.0, period)


def downsample_history(
    points: list[StrengthPoint],
    max_points: int = DEFAULT_CHART_POINTS,
) -> list[StrengthPoint]:
    """
    Thin a history for charting.

    Keeps every ``ceil(n / max_points)``-th point and always the last one,
    so the current strength is never dropped from a chart.
    """
    if max_points <= 0 or len(points) <= max_points:
        return list(points)
    step = math.ceil(len(points) / max_points)
    last = len(points) - 1
    return [p for i, p in enumerate(points) if i % step == 0 or i == last]


def history_frame(points: list[StrengthPoint]) -> pd.DataFrame:
    """Convert a history to a DataFrame indexed by date.

    Columns are ``value`` (unfloored) and ``strength`` (public score).
    """
    frame = pd.DataFrame(
        {
            "date": [pd.Timestamp(p.day) for p in points],
            "value": [p.value for p in points],
            "strength": [p.strength for p in points],
        }
    )
    return frame.set_index("date")
