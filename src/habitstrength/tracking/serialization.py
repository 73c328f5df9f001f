"""JSON-compatible conversion of HabitRecord.

The dict format uses the camelCase keys and ISO ``YYYY-MM-DD`` date keys
that stores exchange with the engine:

    {
      "id": "1732000000000",
      "name": "Read",
      "createdAt": "2025-01-01T08:30:00.000Z",
      "type": "measurable",
      "targetValue": 10,
      "targetType": "min",
      "completions": {"2025-01-01": 9, "2025-01-02": true},
      "skipped": {"2025-01-03": true},
      "strength": 7,
      "strengthBaseline": 5.55,
      "lastStrengthUpdate": "2025-01-03"
    }

Datetime strings are truncated to their calendar day on load.
"""

from __future__ import annotations

import math
from typing import Any

from habitstrength.tracking.models import HabitRecord, to_day


def habit_to_dict(habit: HabitRecord) -> dict[str, Any]:
    """Convert a habit to a JSON-serializable dict.

    Args:
        habit: Habit to serialize

    Returns:
        Dict accepted by ``habit_from_dict``
    """
    data: dict[str, Any] = {
        "id": habit.id,
        "name": habit.name,
        "createdAt": habit.created_at.isoformat(),
        "type": habit.type.value,
        "targetType": habit.target_type.value,
        "completions": {
            day.isoformat(): entry for day, entry in sorted(habit.completions.items())
        },
        "skipped": {day.isoformat(): True for day, frozen in sorted(habit.skipped.items()) if frozen},
        "strength": habit.strength,
    }

    # Optional fields are omitted rather than written as null
    if habit.unit is not None:
        data["unit"] = habit.unit
    if habit.target_value is not None:
        data["targetValue"] = habit.target_value
    if habit.strength_baseline is not None:
        data["strengthBaseline"] = habit.strength_baseline
    if habit.last_strength_update is not None:
        data["lastStrengthUpdate"] = habit.last_strength_update.isoformat()

    return data


def habit_from_dict(data: dict[str, Any]) -> HabitRecord:
    """Build a habit from its dict form.

    Raises:
        ValueError: If a date is not parseable, a completion is not finite,
            or type/targetType is unknown
        KeyError: If ``id`` or ``createdAt`` is missing
    """
    completions = {}
    for key, entry in (data.get("completions") or {}).items():
        if entry is None:
            continue
        if isinstance(entry, bool):
            completions[to_day(key)] = entry
        else:
            amount = float(entry)
            if not math.isfinite(amount):
                raise ValueError(f"completion for {key} is not a finite number: {entry!r}")
            completions[to_day(key)] = amount

    skipped = {
        to_day(key): True for key, frozen in (data.get("skipped") or {}).items() if frozen is True
    }

    target_value = data.get("targetValue")
    baseline = data.get("strengthBaseline")
    last_update = data.get("lastStrengthUpdate")

    return HabitRecord(
        id=str(data["id"]),
        created_at=to_day(data["createdAt"]),
        type=data.get("type", "binary"),
        target_value=float(target_value) if target_value is not None else None,
        target_type=data.get("targetType") or "min",
        completions=completions,
        skipped=skipped,
        strength=int(data.get("strength") or 0),
        strength_baseline=float(baseline) if baseline is not None else None,
        last_strength_update=to_day(last_update) if last_update else None,
        name=data.get("name", ""),
        unit=data.get("unit"),
    )
