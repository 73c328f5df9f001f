"""Habit strength tracking.

This module turns a habit's daily completion record into a 0-100 strength
score using an exponential moving average, and reconstructs the score's
history for charts.

Key components:
- Completion normalization (binary, and min/max targets for measurable habits)
- EMA step (alpha = 2 / (N + 1), N = 32 by default)
- Recalculation with incremental and full strategies
- History replay, point-in-time strength and chart downsampling
"""

from __future__ import annotations

from habitstrength.tracking.edits import record_value, set_frozen, toggle_completion
from habitstrength.tracking.ema import DEFAULT_PERIOD, ema_alpha, update_strength
from habitstrength.tracking.history import (
    downsample_history,
    find_start_date,
    history_frame,
    strength_at_date,
    strength_history,
)
from habitstrength.tracking.models import (
    HabitRecord,
    HabitType,
    StrengthPoint,
    TargetType,
)
from habitstrength.tracking.normalize import completion_value
from habitstrength.tracking.recalc import (
    RecalcPath,
    RecalcPlan,
    plan_recalculation,
    recalculate_strength,
    refresh_stale_habits,
)
from habitstrength.tracking.trace import DayKind, TraceEvent, logging_observer

__all__ = [
    "DEFAULT_PERIOD",
    "DayKind",
    "HabitRecord",
    "HabitType",
    "RecalcPath",
    "RecalcPlan",
    "StrengthPoint",
    "TargetType",
    "TraceEvent",
    "completion_value",
    "downsample_history",
    "ema_alpha",
    "find_start_date",
    "history_frame",
    "logging_observer",
    "plan_recalculation",
    "recalculate_strength",
    "record_value",
    "refresh_stale_habits",
    "set_frozen",
    "strength_at_date",
    "strength_history",
    "toggle_completion",
    "update_strength",
]
