"""Recalculation of a habit's stored strength after edits and day rollovers.

Two strategies produce the same numbers:

- Full: replay from the habit's first day with strength 0, remember the
  unfloored value just before today as ``strength_baseline`` and stamp
  ``last_strength_update`` with today.
- Incremental: when the habit was already fully recalculated today and the
  edit is on or after that checkpoint, replay only the days from the
  checkpoint onward, starting from the stored baseline.

Any edit to a day before the checkpoint, or the first call on a new
calendar day, takes the Full path. Edits to future days change nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Optional

from habitstrength.tracking.ema import DEFAULT_PERIOD
from habitstrength.tracking.history import find_start_date, replay_value
from habitstrength.tracking.models import HabitRecord, clamp_strength
from habitstrength.tracking.trace import TraceObserver

logger = logging.getLogger(__name__)


class RecalcPath(str, Enum):
    """Which strategy a recalculation takes."""

    SKIP = "skip"
    INCREMENTAL = "incremental"
    FULL = "full"


@dataclass(frozen=True)
class RecalcPlan:
    """Decision for one recalculation.

    Attributes:
        path: Strategy to run
        reason: Short human-readable cause, for diagnostics
        start: First day the strategy replays (None for SKIP)
        today: Day the recalculation is evaluated as of
    """

    path: RecalcPath
    reason: str
    start: Optional[date]
    today: date


def plan_recalculation(
    habit: HabitRecord,
    changed_date: Optional[date] = None,
    today: Optional[date] = None,
) -> RecalcPlan:
    """
    Decide how a habit's strength must be recalculated.

    Args:
        habit: Habit being recalculated
        changed_date: Day that was edited, if any
        today: Evaluation day (default: today)

    Returns:
        RecalcPlan for ``recalculate_strength`` to execute
    """
    if today is None:
        today = date.today()

    if changed_date is not None and changed_date > today:
        return RecalcPlan(RecalcPath.SKIP, f"changed date {changed_date} is in the future", None, today)

    checkpoint = habit.last_strength_update
    if checkpoint is None:
        return RecalcPlan(RecalcPath.FULL, "never recalculated", find_start_date(habit), today)

    if checkpoint != today:
        return RecalcPlan(RecalcPath.FULL, f"new day since {checkpoint}", find_start_date(habit), today)

    if changed_date is not None and changed_date < checkpoint:
        return RecalcPlan(
            RecalcPath.FULL,
            f"changed date {changed_date} before checkpoint {checkpoint}",
            find_start_date(habit),
            today,
        )

    return RecalcPlan(RecalcPath.INCREMENTAL, "edit within today's window", checkpoint, today)


def recalculate_strength(
    habit: HabitRecord,
    changed_date: Optional[date] = None,
    *,
    today: Optional[date] = None,
    period: float = DEFAULT_PERIOD,
    observer: Optional[TraceObserver] = None,
) -> HabitRecord:
    """
    Recalculate a habit's strength and return the updated copy.

    Call after every completion or freeze edit (passing the edited day) and
    once per calendar day rollover (without a changed date).

    Args:
        habit: Habit to recalculate
        changed_date: Day that was edited, if any
        today: Evaluation day (default: today)
        period: EMA period
        observer: Optional callback receiving a TraceEvent per replayed day

    Returns:
        Updated habit, or the same object for future-day edits
    """
    plan = plan_recalculation(habit, changed_date, today)
    logger.debug("Recalculate %s: %s (%s)", habit.id, plan.path.value, plan.reason)

    if plan.path == RecalcPath.SKIP:
        return habit

    if plan.path == RecalcPath.INCREMENTAL:
        return _apply_incremental(habit, plan, period, observer)

    return _apply_full(habit, plan, period, observer)


def _apply_incremental(
    habit: HabitRecord,
    plan: RecalcPlan,
    period: float,
    observer: Optional[TraceObserver],
) -> HabitRecord:
    if habit.strength_baseline is not None:
        baseline = habit.strength_baseline
    else:
        baseline = float(habit.strength or 0)

    strength = replay_value(habit, plan.start, plan.today, baseline, period, observer)
    return replace(habit, strength=clamp_strength(strength), strength_baseline=baseline)


def _apply_full(
    habit: HabitRecord,
    plan: RecalcPlan,
    period: float,
    observer: Optional[TraceObserver],
) -> HabitRecord:
    # Baseline is the value after yesterday, i.e. right before today's step
    yesterday = plan.today - timedelta(days=1)
    baseline = replay_value(habit, plan.start, yesterday, 0.0, period, observer)
    strength = replay_value(habit, max(plan.start, plan.today), plan.today, baseline, period, observer)

    return replace(
        habit,
        strength=clamp_strength(strength),
        strength_baseline=baseline,
        last_strength_update=plan.today,
    )


def refresh_stale_habits(
    habits: Iterable[HabitRecord],
    *,
    today: Optional[date] = None,
    period: float = DEFAULT_PERIOD,
) -> list[HabitRecord]:
    """
    Apply the new-day recalculation to every habit not yet updated today.

    Habits already recalculated today are returned as-is.
    """
    if today is None:
        today = date.today()

    refreshed = []
    stale = 0
    for habit in habits:
        if habit.last_strength_update != today:
            habit = recalculate_strength(habit, today=today, period=period)
            stale += 1
        refreshed.append(habit)

    if stale:
        logger.info("New day %s: refreshed %d habit(s)", today, stale)
    return refreshed
