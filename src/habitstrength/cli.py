"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import date
from pathlib import Path
from typing import Callable, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from habitstrength.config import get_settings, reload_settings
from habitstrength.db import DatabaseConnection, HabitQueries, get_db, set_db
from habitstrength.tracking import (
    HabitRecord,
    HabitType,
    TargetType,
    downsample_history,
    history_frame,
    logging_observer,
    recalculate_strength,
    record_value,
    refresh_stale_habits,
    set_frozen,
    strength_history,
    toggle_completion,
)
from habitstrength.tracking.models import to_day
from habitstrength.tracking.serialization import habit_from_dict, habit_to_dict

app = typer.Typer(
    help="Habit strength tracking with an exponential moving average",
    no_args_is_help=True,
)
console = Console()

logger = logging.getLogger(__name__)

_verbose = False


# ============================================================================
# Helpers
# ============================================================================


def configure_logging(level: str) -> None:
    """Route library logging through rich at the given level."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(command: str, message: str, json_output: bool) -> NoReturn:
    """Report an error and exit with status 1."""
    if json_output:
        output_json({"success": False, "command": command, "errors": [message]})
    else:
        console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def parse_day(value: Optional[str], command: str, json_output: bool) -> date:
    """Parse a YYYY-MM-DD option, defaulting to today."""
    if value is None:
        return date.today()
    try:
        return to_day(value)
    except ValueError:
        fail(command, f"Invalid date: {value} (expected YYYY-MM-DD)", json_output)


def strength_color(strength: int) -> str:
    """Rich color for a strength score."""
    if strength >= 70:
        return "green"
    if strength >= 40:
        return "yellow"
    return "red"


def habit_summary(habit: HabitRecord) -> dict:
    """Strength fields of a habit for JSON output."""
    return {
        "id": habit.id,
        "name": habit.name,
        "strength": habit.strength,
        "strength_baseline": habit.strength_baseline,
        "last_strength_update": (
            habit.last_strength_update.isoformat() if habit.last_strength_update else None
        ),
    }


def apply_edit(
    command: str,
    habit_id: str,
    edit: Callable[[HabitRecord], HabitRecord],
    json_output: bool,
) -> HabitRecord:
    """Run an edit as one read -> compute -> write transaction."""
    db = get_db()
    try:
        with db.transaction() as conn:
            return HabitQueries.update_habit(conn, habit_id, edit)
    except KeyError:
        fail(command, f"Habit not found: {habit_id}", json_output)
    except ValueError as e:
        fail(command, str(e), json_output)


def report_edit(command: str, habit: HabitRecord, day: date, json_output: bool) -> None:
    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {**habit_summary(habit), "day": day.isoformat()},
            "human_summary": f"{habit.name or habit.id}: strength {habit.strength}",
        })
    else:
        color = strength_color(habit.strength)
        console.print(
            f"[green]Updated[/green] {habit.name or habit.id} on {day}: "
            f"strength [{color}]{habit.strength}[/{color}]"
        )


# ============================================================================
# Global options
# ============================================================================


@app.callback()
def main(
    db_path: Optional[Path] = typer.Option(
        None, "--db", help="Habit database path (default from config)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Config file (default: ~/.habitstrength/config.yaml)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every replayed day"
    ),
) -> None:
    """Habit strength tracking."""
    global _verbose
    _verbose = verbose

    settings = reload_settings(config_path) if config_path else get_settings()
    configure_logging("DEBUG" if verbose else settings.logging.level)

    db = DatabaseConnection(db_path or settings.database.path)
    db.initialize_schema()
    set_db(db)


# ============================================================================
# Commands
# ============================================================================


@app.command()
def add(
    name: str = typer.Argument(..., help="Habit name"),
    measurable: bool = typer.Option(False, "--measurable", help="Record numbers instead of checkmarks"),
    target: Optional[float] = typer.Option(None, "--target", "-t", help="Daily target (measurable)"),
    target_type: TargetType = typer.Option(TargetType.MIN, "--target-type", help="min or max"),
    unit: Optional[str] = typer.Option(None, "--unit", "-u", help="Unit label"),
    created: Optional[str] = typer.Option(None, "--created", help="Creation date (YYYY-MM-DD, default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Create a habit."""
    created_at = parse_day(created, "add", json_output)
    habit = HabitRecord.create(
        id=uuid.uuid4().hex[:12],
        created_at=created_at,
        type=HabitType.MEASURABLE if measurable else HabitType.BINARY,
        target_value=target,
        target_type=target_type,
        name=name,
        unit=unit,
    )

    with get_db().transaction() as conn:
        HabitQueries.save_habit(conn, habit)

    if json_output:
        output_json({
            "success": True,
            "command": "add",
            "data": habit_to_dict(habit),
            "human_summary": f"Created {name} ({habit.id})",
        })
    else:
        console.print(f"[green]Created:[/green] {name} [dim]({habit.id})[/dim]")


@app.command()
def refresh(
    today_str: Optional[str] = typer.Option(None, "--today", help="Evaluate as of this date"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Recalculate every habit not yet updated today (new-day event)."""
    today = parse_day(today_str, "refresh", json_output)
    period = get_settings().strength.ema_period

    with get_db().transaction() as conn:
        habits = HabitQueries.list_habits(conn)
        refreshed = refresh_stale_habits(habits, today=today, period=period)
        changed = [new for old, new in zip(habits, refreshed) if new is not old]
        for habit in changed:
            HabitQueries.save_habit(conn, habit)

    if json_output:
        output_json({
            "success": True,
            "command": "refresh",
            "data": {"refreshed": [habit_summary(h) for h in changed]},
            "human_summary": f"Refreshed {len(changed)} of {len(habits)} habits",
        })
    else:
        console.print(f"Refreshed {len(changed)} of {len(habits)} habits for {today}")


@app.command()
def score(
    today_str: Optional[str] = typer.Option(None, "--today", help="Evaluate as of this date"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show current strength of every habit (nothing is saved)."""
    today = parse_day(today_str, "score", json_output)
    period = get_settings().strength.ema_period

    with get_db().get_connection() as conn:
        habits = HabitQueries.list_habits(conn)
    current = [recalculate_strength(h, today=today, period=period) for h in habits]

    if json_output:
        output_json({
            "success": True,
            "command": "score",
            "data": {"today": today.isoformat(), "habits": [habit_summary(h) for h in current]},
            "human_summary": f"{len(current)} habits",
        })
        return

    if not current:
        console.print("No habits found")
        return

    table = Table(title=f"Habit Strength ({today})")
    table.add_column("ID", style="dim")
    table.add_column("Habit", style="cyan")
    table.add_column("Type")
    table.add_column("Strength", justify="right")
    table.add_column("Baseline", justify="right")
    table.add_column("Updated", style="dim")

    for habit in current:
        color = strength_color(habit.strength)
        table.add_row(
            habit.id,
            habit.name,
            habit.type.value,
            f"[{color}]{habit.strength}[/{color}]",
            f"{habit.strength_baseline:.2f}" if habit.strength_baseline is not None else "-",
            habit.last_strength_update.isoformat() if habit.last_strength_update else "-",
        )
    console.print(table)


@app.command()
def history(
    habit_id: str = typer.Argument(..., help="Habit ID"),
    today_str: Optional[str] = typer.Option(None, "--today", help="Last day of the history"),
    points: Optional[int] = typer.Option(
        None, "--points", "-n", help="Maximum points to show (default from config, 0 = all)"
    ),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Write the full history to CSV"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show a habit's strength history."""
    today = parse_day(today_str, "history", json_output)
    settings = get_settings()

    with get_db().get_connection() as conn:
        habit = HabitQueries.get_habit(conn, habit_id)
    if habit is None:
        fail("history", f"Habit not found: {habit_id}", json_output)

    observer = logging_observer() if _verbose else None
    trace = strength_history(
        habit, today=today, period=settings.strength.ema_period, observer=observer
    )

    if csv_path is not None:
        history_frame(trace).to_csv(csv_path)
        logger.info("Wrote %d days to %s", len(trace), csv_path)

    max_points = settings.strength.chart_points if points is None else points
    shown = downsample_history(trace, max_points)

    if json_output:
        output_json({
            "success": True,
            "command": "history",
            "data": {
                "habit_id": habit.id,
                "points": [
                    {"date": p.day.isoformat(), "strength": p.strength, "value": round(p.value, 4)}
                    for p in shown
                ],
            },
            "human_summary": f"{len(trace)} days, showing {len(shown)}",
        })
        return

    if not trace:
        console.print("No history yet")
        return

    table = Table(title=f"Strength History: {habit.name or habit.id}")
    table.add_column("Date", style="cyan")
    table.add_column("Strength", justify="right")
    table.add_column("", justify="right")

    prev = None
    for point in shown:
        delta = "" if prev is None else f"{point.value - prev:+.1f}"
        color = strength_color(point.strength)
        table.add_row(point.day.isoformat(), f"[{color}]{point.strength}[/{color}]", delta)
        prev = point.value
    console.print(table)


@app.command()
def toggle(
    habit_id: str = typer.Argument(..., help="Habit ID"),
    day_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Cycle a binary habit's day: empty -> done -> frozen -> empty."""
    day = parse_day(day_str, "toggle", json_output)
    period = get_settings().strength.ema_period
    habit = apply_edit(
        "toggle", habit_id, lambda h: toggle_completion(h, day, period=period), json_output
    )
    report_edit("toggle", habit, day, json_output)


@app.command()
def record(
    habit_id: str = typer.Argument(..., help="Habit ID"),
    value: Optional[float] = typer.Argument(None, help="Value for the day (omit with --clear)"),
    day_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    clear: bool = typer.Option(False, "--clear", help="Remove the day's value instead"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Record a measurable habit's value for a day."""
    day = parse_day(day_str, "record", json_output)
    if value is None and not clear:
        fail("record", "Missing value (pass a number, or --clear to remove the day's value)", json_output)
    period = get_settings().strength.ema_period
    amount = None if clear else value
    habit = apply_edit(
        "record", habit_id, lambda h: record_value(h, day, amount, period=period), json_output
    )
    report_edit("record", habit, day, json_output)


@app.command()
def freeze(
    habit_id: str = typer.Argument(..., help="Habit ID"),
    day_str: Optional[str] = typer.Option(None, "--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    unfreeze: bool = typer.Option(False, "--unfreeze", help="Remove the freeze instead"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Freeze a day so it neither builds nor drains strength."""
    day = parse_day(day_str, "freeze", json_output)
    period = get_settings().strength.ema_period
    habit = apply_edit(
        "freeze", habit_id, lambda h: set_frozen(h, day, not unfreeze, period=period), json_output
    )
    report_edit("freeze", habit, day, json_output)


@app.command("import")
def import_habits(
    path: Path = typer.Argument(..., help="JSON file with a list of habits"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Import habits from JSON (existing IDs are replaced)."""
    if not path.exists():
        fail("import", f"File not found: {path}", json_output)

    try:
        with open(path) as f:
            data = json.load(f)
        items = data.get("habits", []) if isinstance(data, dict) else data
        habits = [habit_from_dict(item) for item in items]
    except (KeyError, ValueError) as e:
        fail("import", f"Invalid habit data: {e}", json_output)

    with get_db().transaction() as conn:
        for habit in habits:
            HabitQueries.save_habit(conn, habit)

    if json_output:
        output_json({
            "success": True,
            "command": "import",
            "data": {"imported": [h.id for h in habits]},
            "human_summary": f"Imported {len(habits)} habits",
        })
    else:
        console.print(f"[green]Imported[/green] {len(habits)} habits from {path}")


@app.command("export")
def export_habits(
    path: Optional[Path] = typer.Argument(None, help="Output file (default: stdout)"),
) -> None:
    """Export all habits as JSON."""
    with get_db().get_connection() as conn:
        habits = HabitQueries.list_habits(conn)

    payload = {"habits": [habit_to_dict(h) for h in habits]}
    if path is None:
        output_json(payload)
    else:
        with open(path, "w") as f:
            output_json(payload, file=f)
        console.print(f"[green]Exported[/green] {len(habits)} habits to {path}")


if __name__ == "__main__":
    app()
