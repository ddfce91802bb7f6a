"""Prescription store: blocks, their six weeks and the exercises in each week."""

import logging
from collections.abc import Iterable
from typing import Any

from ..db.repositories import (
    BlockRepository,
    BlockWeekRepository,
    DayAssignmentRepository,
    ExerciseRepository,
)
from ..db.store import Database
from ..errors import (
    DuplicateNameError,
    InUseError,
    NotFoundError,
    RangeError,
    StaleVersionError,
    ValidationError,
)
from ..models.block import (
    DEFAULT_CATEGORY,
    WEEKS_PER_BLOCK,
    Block,
    BlockSummary,
    BlockWeek,
    Exercise,
)

logger = logging.getLogger(__name__)


def check_week_number(week_number: int) -> None:
    """Raise RangeError unless the week number is 1-6."""
    if isinstance(week_number, bool) or not isinstance(week_number, int):
        raise RangeError(f"Week number must be an integer, got {week_number!r}")
    if not 1 <= week_number <= WEEKS_PER_BLOCK:
        raise RangeError(f"Week number must be between 1 and {WEEKS_PER_BLOCK}, got {week_number}")


def check_version(block: Block, expected_version: int | None) -> None:
    """Reject a write made against a stale copy of the block."""
    if expected_version is not None and expected_version != block.version:
        raise StaleVersionError(expected_version, block.version)


async def load_block(blocks: BlockRepository, user_id: str, block_id: int) -> Block:
    """Get an owned block or raise NotFound."""
    block = await blocks.get(block_id, user_id)
    if block is None:
        raise NotFoundError(f"Block {block_id} not found")
    return block


def coerce_exercise(data: Exercise | dict[str, Any]) -> Exercise:
    """Validate one exercise input from an editor."""
    exercise = data if isinstance(data, Exercise) else Exercise.from_dict(data)

    name = exercise.name.strip() if isinstance(exercise.name, str) else ""
    if not name:
        raise ValidationError("Exercise name is required")
    exercise.name = name

    if isinstance(exercise.order, bool) or not isinstance(exercise.order, int):
        raise ValidationError(f"Exercise order must be an integer: {exercise.order!r}")
    if exercise.sets is not None and (
        isinstance(exercise.sets, bool) or not isinstance(exercise.sets, int) or exercise.sets < 0
    ):
        raise ValidationError(f"Sets must be a non-negative integer: {exercise.sets!r}")
    return exercise


class PrescriptionStore:
    """Creates, edits and reads blocks and their weekly prescriptions.

    Exercises are never hard-deleted. Every mutation runs in one transaction
    and bumps the block's version.
    """

    def __init__(self, db: Database):
        self.db = db

    async def create_block(
        self,
        user_id: str,
        name: str,
        category: str | None = DEFAULT_CATEGORY,
        description: str | None = "",
    ) -> Block:
        """Create a block with six empty weeks.

        Args:
            user_id: Owner of the block
            name: Block name, unique per user
            category: Free-form category (defaults to "strength")
            description: Optional description

        Returns:
            The created block with its weeks

        Raises:
            ValidationError: If the name is empty
            DuplicateNameError: If the user already has a block with this name
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Block name is required")

        async with self.db.transaction() as tx:
            blocks = BlockRepository(tx)
            weeks = BlockWeekRepository(tx)

            if await blocks.get_by_name(user_id, name) is not None:
                raise DuplicateNameError(f"Block named '{name}' already exists")

            block = await blocks.create(
                Block(
                    user_id=user_id,
                    name=name,
                    category=category or DEFAULT_CATEGORY,
                    description=description or "",
                )
            )
            for week_number in range(1, WEEKS_PER_BLOCK + 1):
                block.weeks.append(await weeks.get_or_create(block.id, week_number))

        logger.info("Created block %d '%s' for %s", block.id, block.name, user_id)
        return block

    async def update_block(
        self,
        user_id: str,
        block_id: int,
        name: str | None = None,
        description: str | None = None,
        category: str | None = None,
        expected_version: int | None = None,
    ) -> Block:
        """Partially update block metadata. None leaves a field unchanged."""
        async with self.db.transaction() as tx:
            blocks = BlockRepository(tx)
            block = await load_block(blocks, user_id, block_id)
            check_version(block, expected_version)

            if name is not None:
                name = name.strip()
                if not name:
                    raise ValidationError("Block name cannot be empty")
                if name != block.name:
                    existing = await blocks.get_by_name(user_id, name)
                    if existing is not None:
                        raise DuplicateNameError(f"Block named '{name}' already exists")
                block.name = name
            if description is not None:
                block.description = description
            if category is not None:
                block.category = category

            await blocks.update(block)

        logger.info("Updated block %d (version %d)", block.id, block.version)
        return block

    async def delete_block(
        self, user_id: str, block_id: int, expected_version: int | None = None
    ) -> None:
        """Hard-delete a block that no day template uses.

        Raises:
            InUseError: If any day template still has the block assigned
        """
        async with self.db.transaction() as tx:
            blocks = BlockRepository(tx)
            block = await load_block(blocks, user_id, block_id)
            check_version(block, expected_version)

            days = await DayAssignmentRepository(tx).days_using_block(block.id)
            if days:
                names = ", ".join(name for _, name in days)
                raise InUseError(f"Block '{block.name}' is assigned to: {names}")

            await blocks.delete(block.id)

        logger.info("Deleted block %d '%s'", block.id, block.name)

    async def list_blocks(self, user_id: str) -> list[BlockSummary]:
        """List a user's blocks with week 1 exercise counts and the days using them."""
        async with self.db.transaction() as tx:
            weeks = BlockWeekRepository(tx)
            exercises = ExerciseRepository(tx)
            assignments = DayAssignmentRepository(tx)

            summaries = []
            for block in await BlockRepository(tx).list_for_user(user_id):
                first_week = await weeks.get(block.id, 1)
                count = await exercises.count_active(first_week.id) if first_week else 0
                days = await assignments.days_using_block(block.id)
                summaries.append(
                    BlockSummary(
                        block=block,
                        exercise_count=count,
                        days_used=[name for _, name in days],
                    )
                )
        return summaries

    async def get_block(self, user_id: str, block_id: int) -> Block:
        """Get a block with all six weeks and their active exercises."""
        async with self.db.transaction() as tx:
            block = await load_block(BlockRepository(tx), user_id, block_id)
            exercises = ExerciseRepository(tx)

            existing = {
                week.week_number: week
                for week in await BlockWeekRepository(tx).list_for_block(block.id)
            }
            for week_number in range(1, WEEKS_PER_BLOCK + 1):
                week = existing.get(week_number)
                if week is None:
                    week = BlockWeek(block_id=block.id, week_number=week_number)
                else:
                    week.exercises = await exercises.list_active(week.id)
                block.weeks.append(week)

            block.days_used = await DayAssignmentRepository(tx).days_using_block(block.id)
        return block

    async def get_week(self, user_id: str, block_id: int, week_number: int) -> BlockWeek:
        """Get a week's notes and active exercises ordered by ``order``.

        A week row that was never created comes back empty with ``id=None``.
        """
        check_week_number(week_number)
        async with self.db.transaction() as tx:
            block = await load_block(BlockRepository(tx), user_id, block_id)
            week = await BlockWeekRepository(tx).get(block.id, week_number)
            if week is None:
                return BlockWeek(block_id=block.id, week_number=week_number)
            week.exercises = await ExerciseRepository(tx).list_active(week.id)

        logger.debug("Loaded block %d week %d (%d exercises)", block_id, week_number, len(week.exercises))
        return week

    async def replace_week(
        self,
        user_id: str,
        block_id: int,
        week_number: int,
        notes: str | None = None,
        exercises: Iterable[Exercise | dict[str, Any]] = (),
        deleted_exercise_ids: Iterable[int] = (),
        expected_version: int | None = None,
    ) -> BlockWeek:
        """Apply an editor save to one week.

        Deleted ids are soft-deleted first. Exercises with an id are updated
        in place, exercises without one are inserted as new rows.

        Args:
            user_id: Owner of the block
            block_id: Block to edit
            week_number: Week 1-6
            notes: New week notes, or None to keep the current ones
            exercises: Exercise inputs (``Exercise`` or editor dicts)
            deleted_exercise_ids: Ids to deactivate
            expected_version: Optional optimistic concurrency check

        Returns:
            The week as stored after the edit
        """
        check_week_number(week_number)
        inputs = [coerce_exercise(exercise) for exercise in exercises]
        deleted_ids = list(dict.fromkeys(deleted_exercise_ids))

        async with self.db.transaction() as tx:
            blocks = BlockRepository(tx)
            exercise_repo = ExerciseRepository(tx)
            block = await load_block(blocks, user_id, block_id)
            check_version(block, expected_version)

            weeks = BlockWeekRepository(tx)
            week = await weeks.get_or_create(block.id, week_number)
            if notes is not None:
                await weeks.set_notes(week, notes)

            in_week = {ex.id: ex for ex in await exercise_repo.list_for_week(week.id)}

            for exercise_id in deleted_ids:
                if exercise_id not in in_week:
                    raise NotFoundError(
                        f"Exercise {exercise_id} not found in block {block.id} week {week_number}"
                    )
            to_deactivate = [i for i in deleted_ids if in_week[i].is_active]
            await exercise_repo.deactivate(to_deactivate)
            for exercise_id in to_deactivate:
                in_week[exercise_id].is_active = False

            updated = inserted = 0
            for exercise in inputs:
                if exercise.id is None:
                    exercise.block_week_id = week.id
                    await exercise_repo.add(exercise)
                    inserted += 1
                    continue
                current = in_week.get(exercise.id)
                if current is None or not current.is_active:
                    raise NotFoundError(
                        f"Exercise {exercise.id} is not active in block {block.id} week {week_number}"
                    )
                exercise.block_week_id = week.id
                await exercise_repo.update(exercise)
                updated += 1

            await blocks.update(block)
            week.exercises = await exercise_repo.list_active(week.id)

        logger.info(
            "Replaced block %d week %d: %d inserted, %d updated, %d deleted (version %d)",
            block.id,
            week_number,
            inserted,
            updated,
            len(to_deactivate),
            block.version,
        )
        return week
