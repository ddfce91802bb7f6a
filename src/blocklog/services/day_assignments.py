"""Day assignment store: the seven weekday templates and their ordered blocks."""

import logging
from collections.abc import Iterable

from ..db.repositories import (
    BlockRepository,
    DayAssignmentRepository,
    DayTemplateRepository,
)
from ..db.store import Database, Transaction
from ..errors import DuplicateNameError, NotFoundError, RangeError, ValidationError
from ..models.day import DEFAULT_DAY_NAMES, BlockRef, DayTemplate

logger = logging.getLogger(__name__)

BlockRefInput = int | tuple[int, int] | BlockRef


def check_day_number(day_number: int) -> None:
    """Raise RangeError unless the weekday number is 1-7."""
    if isinstance(day_number, bool) or not isinstance(day_number, int):
        raise RangeError(f"Day number must be an integer, got {day_number!r}")
    if not 1 <= day_number <= 7:
        raise RangeError(f"Day number must be between 1 and 7, got {day_number}")


async def ensure_templates(tx: Transaction, user_id: str) -> list[DayTemplate]:
    """Create any missing weekday templates inside an open transaction."""
    templates = DayTemplateRepository(tx)
    existing = {t.day_number: t for t in await templates.list_for_user(user_id)}

    for day_number, name in enumerate(DEFAULT_DAY_NAMES, start=1):
        if day_number not in existing:
            existing[day_number] = await templates.create(
                DayTemplate(user_id=user_id, day_number=day_number, name=name)
            )
            logger.debug("Created day template %d for %s", day_number, user_id)

    return [existing[n] for n in sorted(existing)]


def _normalize_refs(block_refs: Iterable[BlockRefInput]) -> list[BlockRef]:
    refs = []
    for position, ref in enumerate(block_refs):
        if isinstance(ref, BlockRef):
            block_id, order = ref.block_id, ref.order
        elif isinstance(ref, (tuple, list)):
            block_id, order = ref
        else:
            block_id, order = ref, None
        if isinstance(block_id, bool) or not isinstance(block_id, int):
            raise ValidationError(f"Invalid block id: {block_id!r}")
        refs.append(BlockRef(block_id=block_id, order=position + 1 if order is None else order))

    seen = set()
    for ref in refs:
        if ref.block_id in seen:
            raise ValidationError(f"Block {ref.block_id} is assigned more than once")
        seen.add(ref.block_id)
    return refs


class DayAssignmentStore:
    """Manages day templates and which blocks each weekday trains."""

    def __init__(self, db: Database):
        self.db = db

    async def ensure_day_templates(self, user_id: str) -> list[DayTemplate]:
        """Idempotently create the user's seven templates and return them by weekday."""
        async with self.db.transaction() as tx:
            return await ensure_templates(tx, user_id)

    async def list_day_templates(self, user_id: str) -> list[DayTemplate]:
        """All seven templates with their ordered blocks."""
        async with self.db.transaction() as tx:
            assignments = DayAssignmentRepository(tx)
            templates = await ensure_templates(tx, user_id)
            for template in templates:
                template.blocks = await assignments.list_blocks(template.id)
        return templates

    async def get_day_template(self, user_id: str, day_number: int) -> DayTemplate:
        """One weekday's template with its ordered blocks."""
        check_day_number(day_number)
        async with self.db.transaction() as tx:
            template = await self._load(tx, user_id, day_number)
            template.blocks = await DayAssignmentRepository(tx).list_blocks(template.id)
        return template

    async def update_day_template(
        self,
        user_id: str,
        day_number: int,
        name: str | None = None,
        description: str | None = None,
    ) -> DayTemplate:
        """Rename or re-describe a weekday template.

        Raises:
            ValidationError: If the new name is empty
            DuplicateNameError: If another of the user's days already has the name
        """
        check_day_number(day_number)
        async with self.db.transaction() as tx:
            templates = DayTemplateRepository(tx)
            all_templates = await ensure_templates(tx, user_id)
            template = all_templates[day_number - 1]

            if name is not None:
                name = name.strip()
                if not name:
                    raise ValidationError("Day name cannot be empty")
                for other in all_templates:
                    if other.day_number != day_number and other.name == name:
                        raise DuplicateNameError(
                            f"Day {other.day_number} is already named '{name}'"
                        )
                template.name = name
            if description is not None:
                template.description = description

            await templates.update(template)
            template.blocks = await DayAssignmentRepository(tx).list_blocks(template.id)

        logger.info("Updated day template %d for %s", day_number, user_id)
        return template

    async def set_day_blocks(
        self, user_id: str, day_number: int, block_refs: Iterable[BlockRefInput]
    ) -> DayTemplate:
        """Replace the ordered block list of a weekday.

        Args:
            user_id: Owner of the template
            day_number: Weekday 1-7 (1=Monday)
            block_refs: Block ids, (block_id, order) pairs or BlockRef values;
                a missing order defaults to the position in the list

        Returns:
            The template with its new block list
        """
        check_day_number(day_number)
        refs = _normalize_refs(block_refs)

        async with self.db.transaction() as tx:
            template = await self._load(tx, user_id, day_number)

            owned = await BlockRepository(tx).get_many([r.block_id for r in refs], user_id)
            for ref in refs:
                if ref.block_id not in owned:
                    raise NotFoundError(f"Block {ref.block_id} not found")

            assignments = DayAssignmentRepository(tx)
            await assignments.replace(template.id, [(r.block_id, r.order) for r in refs])
            await DayTemplateRepository(tx).update(template)
            template.blocks = await assignments.list_blocks(template.id)

        logger.info(
            "Assigned %d block(s) to day %d for %s (version %d)",
            len(refs),
            day_number,
            user_id,
            template.version,
        )
        return template

    async def _load(self, tx: Transaction, user_id: str, day_number: int) -> DayTemplate:
        templates = await ensure_templates(tx, user_id)
        return templates[day_number - 1]
