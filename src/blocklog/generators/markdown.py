"""Markdown table format for sharing and bulk-editing a block.

A block is written as a header, two metadata lines and one table per week:

Example:
```
# Block: Push

**Category:** strength
**Description:** Horizontal and vertical pressing

## Week 1
*Keep 2 reps in reserve*

| # | Exercise | Sets | Reps | Tempo | Rest | Notes |
|---|----------|------|------|-------|------|-------|
| 1 | Bench Press | 4 | 6-8 | 3010 | 2:00 |  |
| 2 | Dips | 3 | 8-12 |  |  | Bodyweight |

## Week 2
...
```

Parsing is tolerant of spacing and stray header rows but rejects text that
cannot be read as that layout.
"""

import re
from dataclasses import dataclass, field

from ..errors import ParseError
from ..models.block import DEFAULT_CATEGORY, WEEKS_PER_BLOCK, Block, Exercise

BLOCK_PREFIX = "# Block:"
CATEGORY_PREFIX = "**Category:**"
DESCRIPTION_PREFIX = "**Description:**"

TABLE_HEADER = "| # | Exercise | Sets | Reps | Tempo | Rest | Notes |"
TABLE_SEPARATOR = "|---|----------|------|------|-------|------|-------|"

WEEK_HEADER = re.compile(r"^## Week\b\s*(\S*)")
LEADING_INT = re.compile(r"^[0-9]+")
DIGITS = re.compile(r"^[0-9]+$")


@dataclass
class ParsedExercise:
    """One table row."""

    order: int
    name: str
    sets: int | None = None
    reps: str | None = None
    tempo: str | None = None
    rest: str | None = None
    notes: str | None = None

    def to_exercise(self) -> Exercise:
        """Build a new (unsaved) exercise from the row."""
        return Exercise(
            order=self.order,
            name=self.name,
            sets=self.sets,
            reps=self.reps,
            tempo=self.tempo,
            rest=self.rest,
            notes=self.notes,
        )


@dataclass
class ParsedWeek:
    """One ``## Week N`` section. ``notes`` is None when no notes line was given."""

    week_number: int
    notes: str | None = None
    exercises: list[ParsedExercise] = field(default_factory=list)


@dataclass
class ParsedBlock:
    """Everything read from a markdown document."""

    name: str | None = None
    category: str | None = None
    description: str | None = None
    weeks: dict[int, ParsedWeek] = field(default_factory=dict)

    @property
    def exercise_count(self) -> int:
        return sum(len(week.exercises) for week in self.weeks.values())


def _cell(value) -> str:
    return "" if not value else str(value)


def _split_row(line: str) -> list[str]:
    """Split a table row, keeping inner empty cells so columns stay aligned."""
    cells = line.split("|")
    if cells and not cells[0].strip():
        cells = cells[1:]
    if cells and not cells[-1].strip():
        cells = cells[:-1]
    return [c.strip() for c in cells]


def _parse_sets(value: str | None) -> int | None:
    if not value:
        return None
    match = LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group()) or None


def _is_notes_line(line: str) -> bool:
    return len(line) > 2 and line.startswith("*") and line.endswith("*") and not line.startswith("**")


class BlockMarkdownCodec:
    """Renders blocks to markdown tables and parses them back."""

    def export(self, block: Block) -> str:
        """Render a block's six weeks.

        Args:
            block: Block with its weeks loaded (missing weeks render empty)

        Returns:
            Markdown text
        """
        lines = [
            f"{BLOCK_PREFIX} {block.name}",
            "",
            f"{CATEGORY_PREFIX} {block.category or DEFAULT_CATEGORY}",
            f"{DESCRIPTION_PREFIX} {block.description or ''}",
            "",
        ]

        for week_number in range(1, WEEKS_PER_BLOCK + 1):
            week = block.get_week(week_number)
            lines.append(f"## Week {week_number}")
            if week is not None and week.notes:
                lines.append(f"*{week.notes}*")
            lines.append("")
            lines.append(TABLE_HEADER)
            lines.append(TABLE_SEPARATOR)

            exercises = week.exercises if week is not None else []
            for ex in sorted((e for e in exercises if e.is_active), key=lambda e: e.order):
                lines.append(
                    f"| {ex.order} | {ex.name} | {_cell(ex.sets)} | {_cell(ex.reps)} | "
                    f"{_cell(ex.tempo)} | {_cell(ex.rest)} | {_cell(ex.notes)} |"
                )
            lines.append("")

        return "\n".join(lines)

    def parse(self, markdown: str) -> ParsedBlock:
        """Parse markdown produced by ``export`` (or hand-written in the same shape).

        Raises:
            ParseError: If a week header, table row or the document as a whole
                cannot be read
        """
        result = ParsedBlock()
        current: ParsedWeek | None = None
        in_table = False
        saw_metadata = False

        for line_number, raw in enumerate(markdown.splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue

            if line.startswith(BLOCK_PREFIX):
                result.name = line[len(BLOCK_PREFIX):].strip()
                saw_metadata = True
                continue
            if line.startswith(CATEGORY_PREFIX):
                result.category = line[len(CATEGORY_PREFIX):].strip()
                saw_metadata = True
                continue
            if line.startswith(DESCRIPTION_PREFIX):
                result.description = line[len(DESCRIPTION_PREFIX):].strip()
                saw_metadata = True
                continue

            week_match = WEEK_HEADER.match(line)
            if week_match:
                token = week_match.group(1)
                if not DIGITS.match(token) or int(token) < 1:
                    raise ParseError(f"Invalid week number: {token!r}", line_number)
                current = ParsedWeek(week_number=int(token))
                result.weeks[current.week_number] = current
                in_table = False
                continue

            if line.startswith("|"):
                if current is None:
                    raise ParseError("Table row outside of a week section", line_number)
                if "---" in line:
                    in_table = True
                    continue
                if not in_table:
                    # Column header row
                    continue
                self._parse_row(current, line, line_number)
                continue

            if current is not None and not in_table and _is_notes_line(line):
                current.notes = line[1:-1].strip()

        if not saw_metadata and not result.weeks:
            raise ParseError("No block metadata or week sections found")
        return result

    def _parse_row(self, week: ParsedWeek, line: str, line_number: int) -> None:
        cols = _split_row(line)
        if len(cols) < 2:
            raise ParseError(f"Expected at least 2 columns, found {len(cols)}", line_number)

        cols += [""] * (7 - len(cols))
        order, name, sets, reps, tempo, rest, notes = cols[:7]

        # Header echoed inside the table, or a row with no exercise name
        if not name or name.lower() == "exercise":
            return

        week.exercises.append(
            ParsedExercise(
                order=int(order) if DIGITS.match(order) else len(week.exercises) + 1,
                name=name,
                sets=_parse_sets(sets),
                reps=reps or None,
                tempo=tempo or None,
                rest=rest or None,
                notes=notes or None,
            )
        )


def export_block_markdown(block: Block) -> str:
    """Convenience function to render a block as markdown."""
    return BlockMarkdownCodec().export(block)


def parse_block_markdown(markdown: str) -> ParsedBlock:
    """Convenience function to parse block markdown."""
    return BlockMarkdownCodec().parse(markdown)
