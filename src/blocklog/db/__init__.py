"""Database layer for blocklog."""

from .engine import get_db_path, init_db
from .repositories import (
    BlockNoteRepository,
    BlockRepository,
    BlockWeekRepository,
    DayAssignmentRepository,
    DayTemplateRepository,
    ExerciseLogRepository,
    ExerciseRepository,
    WorkoutLogRepository,
)
from .store import Database, Transaction

__all__ = [
    "BlockNoteRepository",
    "BlockRepository",
    "BlockWeekRepository",
    "Database",
    "DayAssignmentRepository",
    "DayTemplateRepository",
    "ExerciseLogRepository",
    "ExerciseRepository",
    "get_db_path",
    "init_db",
    "Transaction",
    "WorkoutLogRepository",
]
