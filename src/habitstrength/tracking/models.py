"""Data models for habit records and strength history."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

CompletionEntry = Union[bool, float]

MIN_STRENGTH = 0
MAX_STRENGTH = 100


class HabitType(str, Enum):
    """How completions for a habit are recorded."""

    BINARY = "binary"
    MEASURABLE = "measurable"


class TargetType(str, Enum):
    """Direction of a measurable habit's goal."""

    MIN = "min"  # reach at least the target
    MAX = "max"  # stay at or below the target


def to_day(value: Union[date, datetime, str]) -> date:
    """Truncate a date, datetime or ISO string to a calendar day.

    Raises:
        ValueError: If a string cannot be parsed as an ISO date or datetime
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ValueError(f"not a calendar date: {value!r}") from None


def clamp_strength(value: float) -> int:
    """Floor an unfloored strength value into the public 0-100 range."""
    return max(MIN_STRENGTH, min(MAX_STRENGTH, math.floor(value)))


@dataclass(frozen=True)
class HabitRecord:
    """A habit with its completion record and strength state.

    Records are immutable: every update produces a new record via
    ``dataclasses.replace``. ``strength_baseline`` is kept at full
    precision while ``strength`` is the floored public score.
    """

    id: str
    created_at: date
    type: HabitType = HabitType.BINARY
    target_value: Optional[float] = None
    target_type: TargetType = TargetType.MIN
    completions: dict[date, CompletionEntry] = field(default_factory=dict)
    skipped: dict[date, bool] = field(default_factory=dict)
    strength: int = 0
    strength_baseline: Optional[float] = None
    last_strength_update: Optional[date] = None
    name: str = ""
    unit: Optional[str] = None

    def __post_init__(self) -> None:
        valid_types = tuple(t.value for t in HabitType)
        if not isinstance(self.type, HabitType):
            if self.type not in valid_types:
                raise ValueError(f"type must be one of {valid_types}, got '{self.type}'")
            object.__setattr__(self, "type", HabitType(self.type))

        valid_targets = tuple(t.value for t in TargetType)
        if not isinstance(self.target_type, TargetType):
            if self.target_type not in valid_targets:
                raise ValueError(
                    f"target_type must be one of {valid_targets}, got '{self.target_type}'"
                )
            object.__setattr__(self, "target_type", TargetType(self.target_type))

        if not isinstance(self.created_at, date) or isinstance(self.created_at, datetime):
            object.__setattr__(self, "created_at", to_day(self.created_at))

    @classmethod
    def create(
        cls,
        id: str,
        created_at: Union[date, datetime],
        type: HabitType = HabitType.BINARY,
        target_value: Optional[float] = None,
        target_type: TargetType = TargetType.MIN,
        name: str = "",
        unit: Optional[str] = None,
        today: Optional[date] = None,
    ) -> "HabitRecord":
        """Create a new habit whose strength is anchored on its creation day.

        A habit created ahead of time is anchored on today instead, so the
        last update never lies in the future.
        """
        day = to_day(created_at)
        today = today or date.today()
        return cls(
            id=id,
            created_at=day,
            type=type,
            target_value=target_value,
            target_type=target_type,
            strength=0,
            strength_baseline=0.0,
            last_strength_update=min(day, today),
            name=name,
            unit=unit,
        )

    def is_frozen(self, day: date) -> bool:
        """Return True if the day is marked as a freeze."""
        return self.skipped.get(day) is True


@dataclass(frozen=True)
class StrengthPoint:
    """One day of a reconstructed strength trace."""

    day: date
    value: float  # unfloored EMA value after the day

    @property
    def strength(self) -> int:
        """Public (floored, clamped) strength for the day."""
        return clamp_strength(self.value)
