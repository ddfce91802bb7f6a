"""Database engine setup and initialization."""

import logging
from pathlib import Path

import aiosqlite

logger = logging.getLogger(__name__)

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent.parent / "data"


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "blocklog.db"


SCHEMA = [
    # Reusable workout units, one namespace per user
    """
    CREATE TABLE IF NOT EXISTS blocks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        description TEXT DEFAULT '',
        category TEXT,
        version INTEGER NOT NULL DEFAULT 1,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        last_modified TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE (user_id, name)
    )
    """,
    # Six weeks of progression per block
    """
    CREATE TABLE IF NOT EXISTS block_weeks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        block_id INTEGER NOT NULL,
        week_number INTEGER NOT NULL CHECK (week_number BETWEEN 1 AND 6),
        notes TEXT,
        UNIQUE (block_id, week_number),
        FOREIGN KEY (block_id) REFERENCES blocks(id) ON DELETE CASCADE
    )
    """,
    # Exercise prescriptions; rows are soft-deleted via is_active
    """
    CREATE TABLE IF NOT EXISTS block_week_exercises (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        block_week_id INTEGER NOT NULL,
        "order" INTEGER NOT NULL,
        name TEXT NOT NULL,
        sets INTEGER,
        reps TEXT,
        tempo TEXT,
        rest TEXT,
        weight_guidance TEXT,
        notes TEXT,
        is_active INTEGER NOT NULL DEFAULT 1,
        FOREIGN KEY (block_week_id) REFERENCES block_weeks(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS day_templates (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        day_number INTEGER NOT NULL CHECK (day_number BETWEEN 1 AND 7),
        name TEXT NOT NULL,
        description TEXT,
        version INTEGER NOT NULL DEFAULT 1,
        last_modified TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE (user_id, day_number)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS day_template_blocks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        day_template_id INTEGER NOT NULL,
        block_id INTEGER NOT NULL,
        "order" INTEGER NOT NULL,
        UNIQUE (day_template_id, block_id),
        FOREIGN KEY (day_template_id) REFERENCES day_templates(id) ON DELETE CASCADE,
        FOREIGN KEY (block_id) REFERENCES blocks(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS workout_logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT NOT NULL,
        date TEXT NOT NULL,
        day_template_id INTEGER,
        completed INTEGER NOT NULL DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE (user_id, date),
        FOREIGN KEY (day_template_id) REFERENCES day_templates(id) ON DELETE SET NULL
    )
    """,
    # No foreign key on exercise_id so logs outlive block deletion
    """
    CREATE TABLE IF NOT EXISTS exercise_logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        workout_log_id INTEGER NOT NULL,
        exercise_id INTEGER NOT NULL,
        set_number INTEGER NOT NULL,
        reps INTEGER,
        weight REAL,
        notes TEXT,
        FOREIGN KEY (workout_log_id) REFERENCES workout_logs(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS exercise_snapshots (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        exercise_log_id INTEGER NOT NULL UNIQUE,
        exercise_id INTEGER NOT NULL,
        name TEXT NOT NULL,
        sets INTEGER,
        reps TEXT,
        tempo TEXT,
        rest TEXT,
        notes TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (exercise_log_id) REFERENCES exercise_logs(id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TRIGGER IF NOT EXISTS exercise_snapshots_immutable
    BEFORE UPDATE ON exercise_snapshots
    BEGIN
        SELECT RAISE(ABORT, 'exercise snapshots are immutable');
    END
    """,
    """
    CREATE TABLE IF NOT EXISTS block_note_logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        workout_log_id INTEGER NOT NULL,
        block_id INTEGER NOT NULL,
        notes TEXT,
        UNIQUE (workout_log_id, block_id),
        FOREIGN KEY (workout_log_id) REFERENCES workout_logs(id) ON DELETE CASCADE,
        FOREIGN KEY (block_id) REFERENCES blocks(id) ON DELETE CASCADE
    )
    """,
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_blocks_user ON blocks(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_block_weeks_block ON block_weeks(block_id)",
    "CREATE INDEX IF NOT EXISTS idx_exercises_week ON block_week_exercises(block_week_id, is_active)",
    "CREATE INDEX IF NOT EXISTS idx_day_templates_user ON day_templates(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_day_blocks_block ON day_template_blocks(block_id)",
    "CREATE INDEX IF NOT EXISTS idx_workout_logs_user_date ON workout_logs(user_id, date)",
    "CREATE INDEX IF NOT EXISTS idx_exercise_logs_workout ON exercise_logs(workout_log_id)",
    "CREATE INDEX IF NOT EXISTS idx_exercise_logs_exercise ON exercise_logs(exercise_id)",
]


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        for statement in SCHEMA:
            await db.execute(statement)

        # Create indexes for common queries
        for statement in INDEXES:
            await db.execute(statement)

        await db.commit()

    logger.info("Initialized database at %s", db_path)
