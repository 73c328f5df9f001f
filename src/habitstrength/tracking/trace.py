"""Per-day trace events emitted while strength is replayed."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DayKind(str, Enum):
    """Outcome of one replayed day."""

    COMPLETED = "completed"
    PARTIAL = "partial"
    MISSED = "missed"
    FROZEN = "frozen"


@dataclass(frozen=True)
class TraceEvent:
    """What happened to strength on one day."""

    day: date
    kind: DayKind
    before: float
    after: float
    completion: Optional[float] = None  # None for frozen days

    @classmethod
    def for_step(
        cls, day: date, before: float, after: float, completion: float
    ) -> "TraceEvent":
        if completion >= 100:
            kind = DayKind.COMPLETED
        elif completion > 0:
            kind = DayKind.PARTIAL
        else:
            kind = DayKind.MISSED
        return cls(day, kind, before, after, completion)

    @classmethod
    def for_freeze(cls, day: date, strength: float) -> "TraceEvent":
        return cls(day, DayKind.FROZEN, strength, strength)


TraceObserver = Callable[[TraceEvent], None]


def logging_observer(
    target: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
) -> TraceObserver:
    """Build an observer that writes each replayed day to a logger."""
    log = target or logger

    def observe(event: TraceEvent) -> None:
        if event.kind == DayKind.FROZEN:
            log.log(level, "%s: frozen, strength stays at %.2f", event.day, event.before)
        else:
            log.log(
                level,
                "%s: %s (%.1f) strength %.2f -> %.2f",
                event.day,
                event.kind.value,
                event.completion,
                event.before,
                event.after,
            )

    return observe
