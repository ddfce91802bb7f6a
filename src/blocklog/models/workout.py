"""Workout logging data models."""

from dataclasses import dataclass, field
from datetime import date, datetime

from .block import Exercise


@dataclass
class WorkoutLog:
    """One logged session per user and calendar date."""

    user_id: str
    date: date
    day_template_id: int | None = None
    completed: bool = False
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ExerciseLog:
    """One performed set of a prescribed exercise."""

    workout_log_id: int
    exercise_id: int
    set_number: int
    reps: int | None = None
    weight: float | None = None
    notes: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class ExerciseSnapshot:
    """Write-once copy of a prescription at the moment a set was logged."""

    exercise_log_id: int
    exercise_id: int
    name: str
    sets: int | None = None
    reps: str | None = None
    tempo: str | None = None
    rest: str | None = None
    notes: str | None = None
    id: int | None = None
    created_at: datetime | None = None

    @classmethod
    def capture(cls, exercise_log_id: int, exercise: Exercise) -> "ExerciseSnapshot":
        """Copy the live exercise fields for a freshly inserted log."""
        return cls(
            exercise_log_id=exercise_log_id,
            exercise_id=exercise.id,
            name=exercise.name,
            sets=exercise.sets,
            reps=exercise.reps,
            tempo=exercise.tempo,
            rest=exercise.rest,
            notes=exercise.notes,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary (the "prescribed" view)."""
        return {
            "name": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "tempo": self.tempo,
            "rest": self.rest,
            "notes": self.notes,
        }


@dataclass
class BlockNoteLog:
    """Free-text session note for one block on one workout."""

    workout_log_id: int
    block_id: int
    notes: str
    id: int | None = None


@dataclass
class ExerciseEntry:
    """A set the user performed, as submitted for saving."""

    exercise_id: int
    set_number: int
    reps: int | None = None
    weight: float | None = None
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseEntry":
        """Create from dictionary (accepts editor payloads)."""
        return cls(
            exercise_id=data.get("exercise_id", data.get("exerciseId")),
            set_number=data.get("set_number", data.get("setNumber")),
            reps=data.get("reps"),
            weight=data.get("weight"),
            notes=data.get("notes"),
        )


@dataclass
class BlockNoteEntry:
    """A block note as submitted for saving."""

    block_id: int
    notes: str

    @classmethod
    def from_dict(cls, data: dict) -> "BlockNoteEntry":
        """Create from dictionary (accepts editor payloads)."""
        return cls(
            block_id=data.get("block_id", data.get("blockId")),
            notes=data.get("notes") or "",
        )


@dataclass
class LoggedSet:
    """A previously saved set, merged into the workout view."""

    set_number: int
    reps: int | None
    weight: float | None
    notes: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "set_number": self.set_number,
            "reps": self.reps,
            "weight": self.weight,
            "notes": self.notes,
        }


@dataclass
class WorkoutExercise:
    """A live prescription plus whatever was already logged for the date."""

    exercise: Exercise
    logged_sets: list[LoggedSet] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = self.exercise.to_dict()
        data["logged_sets"] = [s.to_dict() for s in self.logged_sets]
        return data


@dataclass
class WorkoutBlock:
    """One assigned block within an assembled workout."""

    id: int
    name: str
    category: str | None
    prescription_week: int
    exercises: list[WorkoutExercise] = field(default_factory=list)
    existing_note: str | None = None

    @property
    def display_name(self) -> str:
        """Block name with its prescription week, e.g. "Push (Week 3)"."""
        return f"{self.name} (Week {self.prescription_week})"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "category": self.category,
            "exercises": [ex.to_dict() for ex in self.exercises],
            "existing_note": self.existing_note,
        }


@dataclass
class WorkoutView:
    """Read-only composition of what a given date's workout looks like."""

    date: date
    day_name: str
    weekday: int
    prescription_week: int
    week_in_cycle: int
    is_deload: bool
    is_completed: bool
    blocks: list[WorkoutBlock] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "date": self.date.isoformat(),
            "day_name": self.day_name,
            "day_number": self.weekday,
            "prescription_week": self.prescription_week,
            "week_in_cycle": self.week_in_cycle,
            "is_deload": self.is_deload,
            "is_completed": self.is_completed,
            "blocks": [block.to_dict() for block in self.blocks],
        }


@dataclass
class ExerciseHistoryEntry:
    """One historical set, displayed with the prescription captured at the time."""

    date: date
    set_number: int
    reps: int | None
    weight: float | None
    notes: str | None = None
    prescribed: ExerciseSnapshot | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "date": self.date.isoformat(),
            "set_number": self.set_number,
            "reps": self.reps,
            "weight": self.weight,
            "notes": self.notes,
            "prescribed": self.prescribed.to_dict() if self.prescribed else None,
        }


@dataclass
class CalendarDay:
    """Calendar data for one date (no rendering)."""

    date: date
    workout_day: str
    completed: bool
    is_deload: bool
    prescription_week: int
    week_in_cycle: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "date": self.date.isoformat(),
            "day": self.date.day,
            "workout_day": self.workout_day,
            "completed": self.completed,
            "is_deload": self.is_deload,
            "prescription_week": self.prescription_week,
            "week_in_cycle": self.week_in_cycle,
        }
