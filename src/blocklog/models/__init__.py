"""Data models for blocklog."""

from .block import (
    BLOCK_CATEGORIES,
    DEFAULT_CATEGORY,
    WEEKS_PER_BLOCK,
    Block,
    BlockSummary,
    BlockWeek,
    Exercise,
)
from .day import DEFAULT_DAY_NAMES, AssignedBlock, BlockRef, DayTemplate
from .workout import (
    BlockNoteEntry,
    BlockNoteLog,
    CalendarDay,
    ExerciseEntry,
    ExerciseHistoryEntry,
    ExerciseLog,
    ExerciseSnapshot,
    LoggedSet,
    WorkoutBlock,
    WorkoutExercise,
    WorkoutLog,
    WorkoutView,
)

__all__ = [
    "AssignedBlock",
    "Block",
    "BLOCK_CATEGORIES",
    "BlockNoteEntry",
    "BlockNoteLog",
    "BlockRef",
    "BlockSummary",
    "BlockWeek",
    "CalendarDay",
    "DayTemplate",
    "DEFAULT_CATEGORY",
    "DEFAULT_DAY_NAMES",
    "Exercise",
    "ExerciseEntry",
    "ExerciseHistoryEntry",
    "ExerciseLog",
    "ExerciseSnapshot",
    "LoggedSet",
    "WEEKS_PER_BLOCK",
    "WorkoutBlock",
    "WorkoutExercise",
    "WorkoutLog",
    "WorkoutView",
]
