"""Workout session assembly and logging.

Combines the cycle resolver, the day templates and the block prescriptions to
answer "what does this date's workout look like", and records what was done.
Every saved set gets a write-once snapshot of the prescription it was logged
against, so later edits never rewrite history.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from typing import Any

from ..db.repositories import (
    BlockNoteRepository,
    BlockRepository,
    BlockWeekRepository,
    DayAssignmentRepository,
    DayTemplateRepository,
    ExerciseLogRepository,
    ExerciseRepository,
    WorkoutLogRepository,
)
from ..db.store import Database
from ..errors import NotFoundError, ValidationError
from ..models.workout import (
    BlockNoteEntry,
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
from ..utils.cycle import CycleResolver, parse_date, week_dates
from .day_assignments import ensure_templates

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50
REST_DAY = "Rest"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_entries(entries: list[ExerciseEntry]) -> None:
    seen = set()
    for entry in entries:
        if not _is_int(entry.exercise_id):
            raise ValidationError(f"Exercise id is required: {entry.exercise_id!r}")
        if not _is_int(entry.set_number) or entry.set_number < 1:
            raise ValidationError(f"Set number must be a positive integer: {entry.set_number!r}")
        if entry.reps is not None and (not _is_int(entry.reps) or entry.reps < 0):
            raise ValidationError(f"Reps must be a non-negative integer: {entry.reps!r}")
        if entry.weight is not None:
            if isinstance(entry.weight, bool) or not isinstance(entry.weight, (int, float)):
                raise ValidationError(f"Weight must be a number: {entry.weight!r}")
            if entry.weight <= 0:
                raise ValidationError(f"Weight must be positive: {entry.weight}")

        key = (entry.exercise_id, entry.set_number)
        if key in seen:
            raise ValidationError(
                f"Set {entry.set_number} of exercise {entry.exercise_id} is logged twice"
            )
        seen.add(key)


class WorkoutSessionAssembler:
    """Builds workout views for a date and saves logged sets with snapshots."""

    def __init__(
        self,
        db: Database,
        resolver: CycleResolver | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self.db = db
        self.resolver = resolver or CycleResolver()
        self.history_limit = history_limit

    async def assemble_workout(self, user_id: str, day: str | date) -> WorkoutView:
        """Compose the prescribed workout for a date, merged with anything already logged.

        Args:
            user_id: Caller identity
            day: Date or YYYY-MM-DD string

        Returns:
            Read-only view of the day's blocks, exercises and logged sets
        """
        day = parse_date(day)
        cycle = self.resolver.resolve(day)

        async with self.db.transaction() as tx:
            template = (await ensure_templates(tx, user_id))[cycle.weekday - 1]
            assigned = await DayAssignmentRepository(tx).list_blocks(template.id)

            logged: dict[int, list[LoggedSet]] = defaultdict(list)
            notes: dict[int, str] = {}
            completed = False
            log = await WorkoutLogRepository(tx).get(user_id, day)
            if log is not None:
                completed = log.completed
                for entry in await ExerciseLogRepository(tx).list_for_workout(log.id):
                    logged[entry.exercise_id].append(
                        LoggedSet(
                            set_number=entry.set_number,
                            reps=entry.reps,
                            weight=entry.weight,
                            notes=entry.notes,
                        )
                    )
                for note in await BlockNoteRepository(tx).list_for_workout(log.id):
                    notes[note.block_id] = note.notes

            weeks = BlockWeekRepository(tx)
            exercise_repo = ExerciseRepository(tx)
            blocks = []
            for assignment in assigned:
                week = await weeks.get(assignment.block_id, cycle.prescription_week)
                exercises = await exercise_repo.list_active(week.id) if week else []
                blocks.append(
                    WorkoutBlock(
                        id=assignment.block_id,
                        name=assignment.name,
                        category=assignment.category,
                        prescription_week=cycle.prescription_week,
                        exercises=[
                            WorkoutExercise(
                                exercise=ex,
                                logged_sets=sorted(
                                    logged.get(ex.id, []), key=lambda s: s.set_number
                                ),
                            )
                            for ex in exercises
                        ],
                        existing_note=notes.get(assignment.block_id),
                    )
                )

        logger.debug(
            "Assembled %s: %s, week %d%s, %d block(s)",
            day.isoformat(),
            template.name,
            cycle.prescription_week,
            " (deload)" if cycle.is_deload else "",
            len(blocks),
        )
        return WorkoutView(
            date=day,
            day_name=template.name,
            weekday=cycle.weekday,
            prescription_week=cycle.prescription_week,
            week_in_cycle=cycle.week_in_cycle,
            is_deload=cycle.is_deload,
            is_completed=completed,
            blocks=blocks,
        )

    async def save_workout(
        self,
        user_id: str,
        day: str | date,
        exercise_entries: Iterable[ExerciseEntry | dict[str, Any]] = (),
        block_notes: Iterable[BlockNoteEntry | dict[str, Any]] = (),
        completed: bool = False,
    ) -> WorkoutLog:
        """Save the sets performed on a date, replacing any earlier save.

        Existing logs and snapshots for the date are deleted, then every entry
        is inserted with a fresh snapshot of its exercise as it stands now.

        Raises:
            ValidationError: On a malformed date or entry
            NotFoundError: If an exercise or block does not belong to the user
        """
        day = parse_date(day)
        entries = [
            e if isinstance(e, ExerciseEntry) else ExerciseEntry.from_dict(e)
            for e in exercise_entries
        ]
        _validate_entries(entries)

        notes: dict[int, str] = {}
        for note in block_notes:
            if not isinstance(note, BlockNoteEntry):
                note = BlockNoteEntry.from_dict(note)
            if not _is_int(note.block_id):
                raise ValidationError(f"Block id is required: {note.block_id!r}")
            text = (note.notes or "").strip()
            if text:
                notes[note.block_id] = text

        cycle = self.resolver.resolve(day)

        async with self.db.transaction() as tx:
            exercises = await ExerciseRepository(tx).get_owned(
                sorted({e.exercise_id for e in entries}), user_id
            )
            for entry in entries:
                if entry.exercise_id not in exercises:
                    raise NotFoundError(f"Exercise {entry.exercise_id} not found")

            owned_blocks = await BlockRepository(tx).get_many(list(notes), user_id)
            for block_id in notes:
                if block_id not in owned_blocks:
                    raise NotFoundError(f"Block {block_id} not found")

            template = (await ensure_templates(tx, user_id))[cycle.weekday - 1]
            workout_logs = WorkoutLogRepository(tx)
            log = await workout_logs.get(user_id, day)
            if log is None:
                log = await workout_logs.create(
                    WorkoutLog(user_id=user_id, date=day, day_template_id=template.id)
                )

            exercise_logs = ExerciseLogRepository(tx)
            await exercise_logs.delete_for_workout(log.id)
            for entry in entries:
                saved = await exercise_logs.add(
                    ExerciseLog(
                        workout_log_id=log.id,
                        exercise_id=entry.exercise_id,
                        set_number=entry.set_number,
                        reps=entry.reps,
                        weight=entry.weight,
                        notes=entry.notes,
                    )
                )
                await exercise_logs.add_snapshot(
                    ExerciseSnapshot.capture(saved.id, exercises[entry.exercise_id])
                )

            await BlockNoteRepository(tx).replace(log.id, notes)
            await workout_logs.set_completed(log, completed)

        logger.info(
            "Saved workout %s for %s: %d set(s), %d note(s), completed=%s",
            day.isoformat(),
            user_id,
            len(entries),
            len(notes),
            completed,
        )
        return log

    async def exercise_history(
        self, user_id: str, exercise_id: int, limit: int | None = None
    ) -> list[ExerciseHistoryEntry]:
        """Most recent logged sets for an exercise, newest date first.

        Each entry shows the prescription captured when it was logged, so the
        exercise row itself may since have been edited, deactivated or deleted.
        """
        limit = self.history_limit if limit is None else limit
        if not _is_int(limit) or limit < 1:
            raise ValidationError(f"History limit must be a positive integer: {limit!r}")

        async with self.db.transaction() as tx:
            rows = await ExerciseLogRepository(tx).history(user_id, exercise_id, limit)

        return [
            ExerciseHistoryEntry(
                date=workout_date,
                set_number=log.set_number,
                reps=log.reps,
                weight=log.weight,
                notes=log.notes,
                prescribed=snapshot,
            )
            for workout_date, log, snapshot in rows
        ]

    async def month_calendar(self, user_id: str, year: int, month: int) -> list[CalendarDay]:
        """Cycle position, day name and completion for every date of a month."""
        days = self.resolver.month_days(year, month)
        return await self._calendar(user_id, days)

    async def week_calendar(self, user_id: str, day: str | date) -> list[CalendarDay]:
        """Calendar data for the Monday-Sunday week containing a date."""
        days = [(d, self.resolver.resolve(d)) for d in week_dates(day)]
        return await self._calendar(user_id, days)

    async def _calendar(self, user_id, days) -> list[CalendarDay]:
        start, end = days[0][0], days[-1][0]
        async with self.db.transaction() as tx:
            names = {
                t.day_number: t.name
                for t in await DayTemplateRepository(tx).list_for_user(user_id)
            }
            logs = {
                log.date: log
                for log in await WorkoutLogRepository(tx).list_between(user_id, start, end)
            }

        return [
            CalendarDay(
                date=d,
                workout_day=names.get(cycle.weekday) or REST_DAY,
                completed=bool(logs.get(d) and logs[d].completed),
                is_deload=cycle.is_deload,
                prescription_week=cycle.prescription_week,
                week_in_cycle=cycle.week_in_cycle,
            )
            for d, cycle in days
        ]
