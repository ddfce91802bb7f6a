"""Day template data models."""

from dataclasses import dataclass, field
from datetime import datetime

DEFAULT_DAY_NAMES = [
    "Day 1 - Push",
    "Day 2 - Pull",
    "Day 3 - Legs",
    "Day 4 - Upper",
    "Day 5 - Lower",
    "Day 6 - Full Body",
    "Day 7 - Active Recovery",
]


@dataclass
class BlockRef:
    """A block assignment requested by an editor."""

    block_id: int
    order: int | None = None


@dataclass
class AssignedBlock:
    """A block as it appears on a day template."""

    block_id: int
    name: str
    order: int
    category: str | None = None
    description: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.block_id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "order": self.order,
        }


@dataclass
class DayTemplate:
    """One of the seven weekday templates a user owns."""

    user_id: str
    day_number: int  # 1=Monday ... 7=Sunday
    name: str
    description: str | None = None
    version: int = 1
    id: int | None = None
    last_modified: datetime | None = None
    blocks: list[AssignedBlock] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "day_number": self.day_number,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "blocks": [block.to_dict() for block in self.blocks],
        }
