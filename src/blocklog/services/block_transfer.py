"""Markdown export and import of whole blocks."""

import logging
from dataclasses import dataclass

from ..db.repositories import BlockRepository, BlockWeekRepository, ExerciseRepository
from ..db.store import Database
from ..errors import RangeError
from ..generators.markdown import BlockMarkdownCodec, ParsedBlock
from ..models.block import WEEKS_PER_BLOCK
from .prescriptions import PrescriptionStore, check_version, load_block

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Outcome of applying markdown to a block."""

    block_id: int
    block_name: str
    weeks_applied: list[int]
    exercises_imported: int
    version: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "block_id": self.block_id,
            "block_name": self.block_name,
            "weeks_applied": self.weeks_applied,
            "exercises_imported": self.exercises_imported,
            "version": self.version,
        }


class BlockTransferService:
    """Moves block prescriptions in and out of the markdown table format."""

    def __init__(self, db: Database, codec: BlockMarkdownCodec | None = None):
        self.db = db
        self.codec = codec or BlockMarkdownCodec()
        self.prescriptions = PrescriptionStore(db)

    async def export_block(self, user_id: str, block_id: int) -> str:
        """Render an owned block as markdown."""
        block = await self.prescriptions.get_block(user_id, block_id)
        return self.codec.export(block)

    async def import_block(
        self,
        user_id: str,
        block_id: int,
        markdown: str,
        expected_version: int | None = None,
    ) -> ImportResult:
        """Replace the content of every week present in the markdown.

        The block named by ``block_id`` is the target regardless of the
        ``# Block:`` line. Each parsed week has its active exercises
        soft-deleted and the parsed rows inserted as new exercises.
        Category and description are only overwritten when non-empty.

        Raises:
            ParseError: If the markdown cannot be read
            RangeError: If any parsed week is outside 1-6 (nothing is written)
        """
        parsed = self.codec.parse(markdown)
        self._check_weeks(parsed)

        async with self.db.transaction() as tx:
            blocks = BlockRepository(tx)
            weeks = BlockWeekRepository(tx)
            exercises = ExerciseRepository(tx)

            block = await load_block(blocks, user_id, block_id)
            check_version(block, expected_version)

            if parsed.category:
                block.category = parsed.category
            if parsed.description:
                block.description = parsed.description

            for week_number in sorted(parsed.weeks):
                section = parsed.weeks[week_number]
                week = await weeks.get_or_create(block.id, week_number)
                if section.notes is not None:
                    await weeks.set_notes(week, section.notes)
                await exercises.deactivate_week(week.id)
                for row in section.exercises:
                    exercise = row.to_exercise()
                    exercise.block_week_id = week.id
                    await exercises.add(exercise)

            await blocks.update(block)

        result = ImportResult(
            block_id=block.id,
            block_name=block.name,
            weeks_applied=sorted(parsed.weeks),
            exercises_imported=parsed.exercise_count,
            version=block.version,
        )
        logger.info(
            "Imported %d exercise(s) into block %d weeks %s",
            result.exercises_imported,
            block.id,
            result.weeks_applied,
        )
        return result

    def _check_weeks(self, parsed: ParsedBlock) -> None:
        invalid = sorted(w for w in parsed.weeks if not 1 <= w <= WEEKS_PER_BLOCK)
        if invalid:
            raise RangeError(
                f"Week numbers must be between 1 and {WEEKS_PER_BLOCK}, got {invalid}"
            )
