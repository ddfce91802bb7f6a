"""Copy one week's prescription into other weeks of the same block."""

import logging
from collections.abc import Iterable
from dataclasses import replace

from ..db.repositories import BlockRepository, BlockWeekRepository, ExerciseRepository
from ..db.store import Database
from ..errors import NotFoundError
from .prescriptions import check_version, check_week_number, load_block

logger = logging.getLogger(__name__)


class WeekCopyTransform:
    """Duplicates a source week's active exercises into target weeks.

    Target weeks lose their current exercises (soft-deleted) and receive new
    rows; source ids are never reused.
    """

    def __init__(self, db: Database):
        self.db = db

    async def copy_week(
        self,
        user_id: str,
        block_id: int,
        source_week: int,
        target_weeks: Iterable[int],
        expected_version: int | None = None,
    ) -> int:
        """Copy ``source_week`` into each of ``target_weeks``.

        Args:
            user_id: Owner of the block
            block_id: Block to edit
            source_week: Week 1-6 to copy from
            target_weeks: Weeks 1-6 to overwrite; the source itself is skipped
            expected_version: Optional optimistic concurrency check

        Returns:
            Number of weeks actually copied
        """
        check_week_number(source_week)
        targets = list(dict.fromkeys(target_weeks))
        for week_number in targets:
            check_week_number(week_number)
        targets = [w for w in targets if w != source_week]

        async with self.db.transaction() as tx:
            blocks = BlockRepository(tx)
            weeks = BlockWeekRepository(tx)
            exercises = ExerciseRepository(tx)

            block = await load_block(blocks, user_id, block_id)
            check_version(block, expected_version)

            source = await weeks.get(block.id, source_week)
            if source is None:
                raise NotFoundError(f"Week {source_week} of block {block.id} not found")
            source_exercises = await exercises.list_active(source.id)

            for week_number in targets:
                target = await weeks.get_or_create(block.id, week_number)
                await exercises.deactivate_week(target.id)
                for exercise in source_exercises:
                    await exercises.add(replace(exercise, id=None, block_week_id=target.id))

            await blocks.update(block)

        logger.info(
            "Copied block %d week %d to %s (%d exercise(s) each)",
            block.id,
            source_week,
            targets,
            len(source_exercises),
        )
        return len(targets)
