"""Block prescription data models."""

from dataclasses import dataclass, field
from datetime import datetime

WEEKS_PER_BLOCK = 6
DEFAULT_CATEGORY = "strength"

BLOCK_CATEGORIES = (
    "strength",
    "pt",
    "cardio",
    "mobility",
    "recovery",
    "rehabilitation",
    "power",
    "accessory",
)


@dataclass
class Exercise:
    """A prescribed exercise within one week of a block.

    Rows are never hard-deleted: historical logs reference them by id, so
    removal only clears ``is_active``.
    """

    name: str
    order: int = 0
    sets: int | None = None
    reps: str | None = None  # String to support ranges like "6-8"
    tempo: str | None = None  # e.g. "3010"
    rest: str | None = None  # e.g. "2:00-3:00"
    weight_guidance: str | None = None  # e.g. "RPE 7", "+5lb from week 3"
    notes: str | None = None
    is_active: bool = True
    id: int | None = None
    block_week_id: int | None = None

    def prescription(self) -> tuple:
        """The fields that define the prescription, without identity."""
        return (
            self.order,
            self.name,
            self.sets,
            self.reps,
            self.tempo,
            self.rest,
            self.weight_guidance,
            self.notes,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "order": self.order,
            "name": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "tempo": self.tempo,
            "rest": self.rest,
            "weight_guidance": self.weight_guidance,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        """Create from dictionary (accepts editor payloads)."""
        weight_guidance = data.get("weight_guidance", data.get("weightGuidance"))
        return cls(
            id=data.get("id"),
            order=data.get("order", 0),
            name=data.get("name", ""),
            sets=data.get("sets"),
            reps=data.get("reps"),
            tempo=data.get("tempo"),
            rest=data.get("rest"),
            weight_guidance=weight_guidance,
            notes=data.get("notes"),
        )


@dataclass
class BlockWeek:
    """One week (1-6) of a block's progression."""

    block_id: int | None
    week_number: int
    notes: str | None = None
    exercises: list[Exercise] = field(default_factory=list)
    id: int | None = None  # None until the week row exists

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "block_id": self.block_id,
            "week_number": self.week_number,
            "notes": self.notes,
            "exercises": [ex.to_dict() for ex in self.exercises],
        }


@dataclass
class Block:
    """A named, categorized, reusable workout unit."""

    user_id: str
    name: str
    category: str | None = DEFAULT_CATEGORY
    description: str | None = ""
    version: int = 1
    id: int | None = None
    created_at: datetime | None = None
    last_modified: datetime | None = None
    weeks: list[BlockWeek] = field(default_factory=list)
    days_used: list[tuple[int, str]] = field(default_factory=list)

    def get_week(self, week_number: int) -> BlockWeek | None:
        """Get a loaded week by number."""
        for week in self.weeks:
            if week.week_number == week_number:
                return week
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "version": self.version,
            "last_modified": (
                self.last_modified.isoformat() if self.last_modified else None
            ),
            "weeks": [week.to_dict() for week in self.weeks],
            "days_used": [
                {"day_number": number, "name": name} for number, name in self.days_used
            ],
        }


@dataclass
class BlockSummary:
    """List view of a block."""

    block: Block
    exercise_count: int
    days_used: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.block.id,
            "name": self.block.name,
            "description": self.block.description,
            "category": self.block.category,
            "exercise_count": self.exercise_count,
            "days_used": self.days_used,
            "version": self.block.version,
            "last_modified": (
                self.block.last_modified.isoformat()
                if self.block.last_modified
                else None
            ),
        }
