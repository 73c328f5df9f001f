"""SQLite database schema definitions."""

SCHEMA_SQL = """
-- Habits with their strength state
CREATE TABLE IF NOT EXISTS habits (
    habit_id TEXT PRIMARY KEY,
    name TEXT NOT NULL DEFAULT '',
    habit_type TEXT NOT NULL DEFAULT 'binary',
    unit TEXT,
    target_value REAL,
    target_type TEXT NOT NULL DEFAULT 'min',
    created_at DATE NOT NULL,
    strength INTEGER NOT NULL DEFAULT 0,
    strength_baseline REAL,           -- unfloored, never rounded
    last_strength_update DATE
);

-- One row per day with an entry: done (0/1) for checkmarks, amount for values
CREATE TABLE IF NOT EXISTS habit_completions (
    habit_id TEXT NOT NULL,
    day DATE NOT NULL,
    done BOOLEAN,
    amount REAL,
    PRIMARY KEY (habit_id, day),
    FOREIGN KEY (habit_id) REFERENCES habits(habit_id) ON DELETE CASCADE
);

-- Frozen days
CREATE TABLE IF NOT EXISTS habit_skipped_days (
    habit_id TEXT NOT NULL,
    day DATE NOT NULL,
    PRIMARY KEY (habit_id, day),
    FOREIGN KEY (habit_id) REFERENCES habits(habit_id) ON DELETE CASCADE
);
"""


def get_schema_sql() -> str:
    """Return the complete schema SQL."""
    return SCHEMA_SQL
