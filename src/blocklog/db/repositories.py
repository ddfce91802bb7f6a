"""Data access layer for blocklog.

Repositories wrap an open ``Transaction``; they translate between plain
records and model dataclasses and never commit on their own.
"""

from datetime import date, datetime

from ..models.block import Block, BlockWeek, Exercise
from ..models.day import AssignedBlock, DayTemplate
from ..models.workout import (
    BlockNoteLog,
    ExerciseLog,
    ExerciseSnapshot,
    WorkoutLog,
)
from .store import Transaction, now_timestamp


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class BlockRepository:
    """Repository for blocks."""

    def __init__(self, tx: Transaction):
        self.tx = tx

    async def create(self, block: Block) -> Block:
        """Create a new block."""
        row = await self.tx.insert(
            "blocks",
            {
                "user_id": block.user_id,
                "name": block.name,
                "description": block.description,
                "category": block.category,
                "version": block.version,
            },
        )
        return self._row_to_block(row)

    async def get(self, block_id: int, user_id: str) -> Block | None:
        """Get a block by ID, scoped to its owner."""
        row = await self.tx.select_one("blocks", {"id": block_id, "user_id": user_id})
        return self._row_to_block(row) if row else None

    async def get_by_name(self, user_id: str, name: str) -> Block | None:
        """Get a block by its (user, name) key."""
        row = await self.tx.select_one("blocks", {"user_id": user_id, "name": name})
        return self._row_to_block(row) if row else None

    async def list_for_user(self, user_id: str) -> list[Block]:
        """List all blocks for a user."""
        rows = await self.tx.select(
            "blocks", {"user_id": user_id}, order_by=("category", "name")
        )
        return [self._row_to_block(row) for row in rows]

    async def get_many(self, block_ids: list[int], user_id: str) -> dict[int, Block]:
        """Get several owned blocks keyed by id."""
        rows = await self.tx.select("blocks", {"id": block_ids, "user_id": user_id})
        return {row["id"]: self._row_to_block(row) for row in rows}

    async def update(self, block: Block) -> None:
        """Persist metadata and bump the version."""
        if block.id is None:
            raise ValueError("Block must have an ID to update")

        block.version += 1
        timestamp = now_timestamp()
        block.last_modified = _parse_timestamp(timestamp)
        await self.tx.update(
            "blocks",
            {
                "name": block.name,
                "description": block.description,
                "category": block.category,
                "version": block.version,
                "last_modified": timestamp,
            },
            {"id": block.id},
        )

    async def delete(self, block_id: int) -> None:
        """Delete a block (cascades to its weeks and exercises)."""
        await self.tx.delete("blocks", {"id": block_id})

    def _row_to_block(self, row: dict) -> Block:
        """Convert a database row to a Block."""
        return Block(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            description=row["description"],
            category=row["category"],
            version=row["version"],
            created_at=_parse_timestamp(row["created_at"]),
            last_modified=_parse_timestamp(row["last_modified"]),
        )


class BlockWeekRepository:
    """Repository for block weeks."""

    def __init__(self, tx: Transaction):
        self.tx = tx

    async def get(self, block_id: int, week_number: int) -> BlockWeek | None:
        """Get a week row, if it has been created."""
        row = await self.tx.select_one(
            "block_weeks", {"block_id": block_id, "week_number": week_number}
        )
        return self._row_to_week(row) if row else None

    async def get_or_create(self, block_id: int, week_number: int) -> BlockWeek:
        """Get a week row, creating it on first touch."""
        week = await self.get(block_id, week_number)
        if week is not None:
            return week
        row = await self.tx.insert(
            "block_weeks", {"block_id": block_id, "week_number": week_number}
        )
        return self._row_to_week(row)

    async def list_for_block(self, block_id: int) -> list[BlockWeek]:
        """List existing weeks of a block."""
        rows = await self.tx.select(
            "block_weeks", {"block_id": block_id}, order_by=("week_number",)
        )
        return [self._row_to_week(row) for row in rows]

    async def set_notes(self, week: BlockWeek, notes: str | None) -> None:
        """Replace a week's notes."""
        week.notes = notes
        await self.tx.update("block_weeks", {"notes": notes}, {"id": week.id})

    def _row_to_week(self, row: dict) -> BlockWeek:
        """Convert a database row to a BlockWeek."""
        return BlockWeek(
            id=row["id"],
            block_id=row["block_id"],
            week_number=row["week_number"],
            notes=row["notes"],
        )


class ExerciseRepository:
    """Repository for prescribed exercises."""

    def __init__(self, tx: Transaction):
        self.tx = tx

    async def list_active(self, block_week_id: int) -> list[Exercise]:
        """Active exercises of a week, in display order."""
        rows = await self.tx.select(
            "block_week_exercises",
            {"block_week_id": block_week_id, "is_active": True},
            order_by=("order", "id"),
        )
        return [self._row_to_exercise(row) for row in rows]

    async def list_for_week(self, block_week_id: int) -> list[Exercise]:
        """All exercises of a week, including soft-deleted ones."""
        rows = await self.tx.select(
            "block_week_exercises",
            {"block_week_id": block_week_id},
            order_by=("order", "id"),
        )
        return [self._row_to_exercise(row) for row in rows]

    async def count_active(self, block_week_id: int) -> int:
        """Count active exercises of a week."""
        rows = await self.tx.fetch_all(
            "SELECT COUNT(*) AS n FROM block_week_exercises "
            "WHERE block_week_id = ? AND is_active = 1",
            (block_week_id,),
        )
        return rows[0]["n"]

    async def get_owned(self, exercise_ids: list[int], user_id: str) -> dict[int, Exercise]:
        """Get exercises that belong to one of the user's blocks, keyed by id."""
        if not exercise_ids:
            return {}
        placeholders = ", ".join("?" for _ in exercise_ids)
        rows = await self.tx.fetch_all(
            f"""
            SELECT e.* FROM block_week_exercises e
            JOIN block_weeks w ON w.id = e.block_week_id
            JOIN blocks b ON b.id = w.block_id
            WHERE e.id IN ({placeholders}) AND b.user_id = ?
            """,
            (*exercise_ids, user_id),
        )
        return {row["id"]: self._row_to_exercise(row) for row in rows}

    async def add(self, exercise: Exercise) -> Exercise:
        """Insert a new active exercise row."""
        values = self._to_values(exercise)
        values["block_week_id"] = exercise.block_week_id
        values["is_active"] = True
        row = await self.tx.insert("block_week_exercises", values)
        return self._row_to_exercise(row)

    async def update(self, exercise: Exercise) -> None:
        """Overwrite an exercise's prescription fields in place."""
        if exercise.id is None:
            raise ValueError("Exercise must have an ID to update")
        await self.tx.update(
            "block_week_exercises", self._to_values(exercise), {"id": exercise.id}
        )

    async def deactivate(self, exercise_ids: list[int]) -> int:
        """Soft-delete specific exercises."""
        return await self.tx.update(
            "block_week_exercises", {"is_active": False}, {"id": exercise_ids}
        )

    async def deactivate_week(self, block_week_id: int) -> int:
        """Soft-delete every active exercise of a week."""
        return await self.tx.update(
            "block_week_exercises",
            {"is_active": False},
            {"block_week_id": block_week_id, "is_active": True},
        )

    def _to_values(self, exercise: Exercise) -> dict:
        return {
            "order": exercise.order,
            "name": exercise.name,
            "sets": exercise.sets,
            "reps": exercise.reps,
            "tempo": exercise.tempo,
            "rest": exercise.rest,
            "weight_guidance": exercise.weight_guidance,
            "notes": exercise.notes,
        }

    def _row_to_exercise(self, row: dict) -> Exercise:
        """Convert a database row to an Exercise."""
        return Exercise(
            id=row["id"],
            block_week_id=row["block_week_id"],
            order=row["order"],
            name=row["name"],
            sets=row["sets"],
            reps=row["reps"],
            tempo=row["tempo"],
            rest=row["rest"],
            weight_guidance=row["weight_guidance"],
            notes=row["notes"],
            is_active=bool(row["is_active"]),
        )


class DayTemplateRepository:
    """Repository for weekday templates."""

    def __init__(self, tx: Transaction):
        self.tx = tx

    async def list_for_user(self, user_id: str) -> list[DayTemplate]:
        """List a user's templates by weekday."""
        rows = await self.tx.select(
            "day_templates", {"user_id": user_id}, order_by=("day_number",)
        )
        return [self._row_to_template(row) for row in rows]

    async def get(self, user_id: str, day_number: int) -> DayTemplate | None:
        """Get the template for one weekday."""
        row = await self.tx.select_one(
            "day_templates", {"user_id": user_id, "day_number": day_number}
        )
        return self._row_to_template(row) if row else None

    async def create(self, template: DayTemplate) -> DayTemplate:
        """Create a template."""
        row = await self.tx.insert(
            "day_templates",
            {
                "user_id": template.user_id,
                "day_number": template.day_number,
                "name": template.name,
                "description": template.description,
                "version": template.version,
            },
        )
        return self._row_to_template(row)

    async def update(self, template: DayTemplate) -> None:
        """Persist name/description and bump the version."""
        if template.id is None:
            raise ValueError("Day template must have an ID to update")

        template.version += 1
        timestamp = now_timestamp()
        template.last_modified = _parse_timestamp(timestamp)
        await self.tx.update(
            "day_templates",
            {
                "name": template.name,
                "description": template.description,
                "version": template.version,
                "last_modified": timestamp,
            },
            {"id": template.id},
        )

    def _row_to_template(self, row: dict) -> DayTemplate:
        """Convert a database row to a DayTemplate."""
        return DayTemplate(
            id=row["id"],
            user_id=row["user_id"],
            day_number=row["day_number"],
            name=row["name"],
            description=row["description"],
            version=row["version"],
            last_modified=_parse_timestamp(row["last_modified"]),
        )


class DayAssignmentRepository:
    """Repository for the ordered day -> block junction."""

    def __init__(self, tx: Transaction):
        self.tx = tx

    async def list_blocks(self, day_template_id: int) -> list[AssignedBlock]:
        """Blocks assigned to a day, in order."""
        rows = await self.tx.fetch_all(
            """
            SELECT b.id AS block_id, b.name, b.category, b.description, dtb."order"
            FROM day_template_blocks dtb
            JOIN blocks b ON b.id = dtb.block_id
            WHERE dtb.day_template_id = ?
            ORDER BY dtb."order" ASC, dtb.id ASC
            """,
            (day_template_id,),
        )
        return [
            AssignedBlock(
                block_id=row["block_id"],
                name=row["name"],
                category=row["category"],
                description=row["description"],
                order=row["order"],
            )
            for row in rows
        ]

    async def replace(self, day_template_id: int, assignments: list[tuple[int, int]]) -> None:
        """Replace a day's assignments with (block_id, order) pairs."""
        await self.tx.delete("day_template_blocks", {"day_template_id": day_template_id})
        for block_id, order in assignments:
            await self.tx.insert(
                "day_template_blocks",
                {"day_template_id": day_template_id, "block_id": block_id, "order": order},
            )

    async def days_using_block(self, block_id: int) -> list[tuple[int, str]]:
        """(day_number, name) of each template that uses a block."""
        rows = await self.tx.fetch_all(
            """
            SELECT dt.day_number, dt.name
            FROM day_template_blocks dtb
            JOIN day_templates dt ON dt.id = dtb.day_template_id
            WHERE dtb.block_id = ?
            ORDER BY dt.day_number
            """,
            (block_id,),
        )
        return [(row["day_number"], row["name"]) for row in rows]


class WorkoutLogRepository:
    """Repository for daily workout logs."""

    def __init__(self, tx: Transaction):
        self.tx = tx

    async def get(self, user_id: str, day: date) -> WorkoutLog | None:
        """Get the log for a user and date."""
        row = await self.tx.select_one(
            "workout_logs", {"user_id": user_id, "date": day.isoformat()}
        )
        return self._row_to_log(row) if row else None

    async def create(self, log: WorkoutLog) -> WorkoutLog:
        """Create a workout log."""
        row = await self.tx.insert(
            "workout_logs",
            {
                "user_id": log.user_id,
                "date": log.date.isoformat(),
                "day_template_id": log.day_template_id,
                "completed": log.completed,
            },
        )
        return self._row_to_log(row)

    async def set_completed(self, log: WorkoutLog, completed: bool) -> None:
        """Set completion and touch updated_at."""
        timestamp = now_timestamp()
        log.completed = completed
        log.updated_at = _parse_timestamp(timestamp)
        await self.tx.update(
            "workout_logs",
            {"completed": completed, "updated_at": timestamp},
            {"id": log.id},
        )

    async def list_between(self, user_id: str, start: date, end: date) -> list[WorkoutLog]:
        """Logs for a user within an inclusive date range."""
        rows = await self.tx.fetch_all(
            "SELECT * FROM workout_logs WHERE user_id = ? AND date BETWEEN ? AND ? ORDER BY date",
            (user_id, start.isoformat(), end.isoformat()),
        )
        return [self._row_to_log(row) for row in rows]

    def _row_to_log(self, row: dict) -> WorkoutLog:
        """Convert a database row to a WorkoutLog."""
        return WorkoutLog(
            id=row["id"],
            user_id=row["user_id"],
            date=date.fromisoformat(row["date"]),
            day_template_id=row["day_template_id"],
            completed=bool(row["completed"]),
            created_at=_parse_timestamp(row["created_at"]),
            updated_at=_parse_timestamp(row["updated_at"]),
        )


class ExerciseLogRepository:
    """Repository for logged sets and their snapshots."""

    def __init__(self, tx: Transaction):
        self.tx = tx

    async def list_for_workout(self, workout_log_id: int) -> list[ExerciseLog]:
        """Logged sets of a workout."""
        rows = await self.tx.select(
            "exercise_logs",
            {"workout_log_id": workout_log_id},
            order_by=("exercise_id", "set_number"),
        )
        return [self._row_to_log(row) for row in rows]

    async def delete_for_workout(self, workout_log_id: int) -> int:
        """Delete a workout's logged sets together with their snapshots."""
        logs = await self.list_for_workout(workout_log_id)
        await self.tx.delete("exercise_snapshots", {"exercise_log_id": [log.id for log in logs]})
        return await self.tx.delete("exercise_logs", {"workout_log_id": workout_log_id})

    async def add(self, log: ExerciseLog) -> ExerciseLog:
        """Insert a logged set."""
        row = await self.tx.insert(
            "exercise_logs",
            {
                "workout_log_id": log.workout_log_id,
                "exercise_id": log.exercise_id,
                "set_number": log.set_number,
                "reps": log.reps,
                "weight": log.weight,
                "notes": log.notes,
            },
        )
        return self._row_to_log(row)

    async def add_snapshot(self, snapshot: ExerciseSnapshot) -> ExerciseSnapshot:
        """Insert a snapshot. Snapshots have no update path."""
        row = await self.tx.insert(
            "exercise_snapshots",
            {
                "exercise_log_id": snapshot.exercise_log_id,
                "exercise_id": snapshot.exercise_id,
                "name": snapshot.name,
                "sets": snapshot.sets,
                "reps": snapshot.reps,
                "tempo": snapshot.tempo,
                "rest": snapshot.rest,
                "notes": snapshot.notes,
            },
        )
        return self._row_to_snapshot(row)

    async def get_snapshot(self, exercise_log_id: int) -> ExerciseSnapshot | None:
        """Get the snapshot captured for a logged set."""
        row = await self.tx.select_one(
            "exercise_snapshots", {"exercise_log_id": exercise_log_id}
        )
        return self._row_to_snapshot(row) if row else None

    async def history(
        self, user_id: str, exercise_id: int, limit: int
    ) -> list[tuple[date, ExerciseLog, ExerciseSnapshot | None]]:
        """Most recent logged sets of an exercise for a user, newest date first."""
        rows = await self.tx.fetch_all(
            """
            SELECT el.*, wl.date AS workout_date,
                   s.id AS snapshot_id, s.name AS snapshot_name, s.sets AS snapshot_sets,
                   s.reps AS snapshot_reps, s.tempo AS snapshot_tempo,
                   s.rest AS snapshot_rest, s.notes AS snapshot_notes,
                   s.created_at AS snapshot_created_at
            FROM exercise_logs el
            JOIN workout_logs wl ON wl.id = el.workout_log_id
            LEFT JOIN exercise_snapshots s ON s.exercise_log_id = el.id
            WHERE el.exercise_id = ? AND wl.user_id = ?
            ORDER BY wl.date DESC, el.set_number ASC
            LIMIT ?
            """,
            (exercise_id, user_id, limit),
        )
        history = []
        for row in rows:
            snapshot = None
            if row["snapshot_id"] is not None:
                snapshot = ExerciseSnapshot(
                    id=row["snapshot_id"],
                    exercise_log_id=row["id"],
                    exercise_id=row["exercise_id"],
                    name=row["snapshot_name"],
                    sets=row["snapshot_sets"],
                    reps=row["snapshot_reps"],
                    tempo=row["snapshot_tempo"],
                    rest=row["snapshot_rest"],
                    notes=row["snapshot_notes"],
                    created_at=_parse_timestamp(row["snapshot_created_at"]),
                )
            history.append(
                (date.fromisoformat(row["workout_date"]), self._row_to_log(row), snapshot)
            )
        return history

    def _row_to_log(self, row: dict) -> ExerciseLog:
        """Convert a database row to an ExerciseLog."""
        return ExerciseLog(
            id=row["id"],
            workout_log_id=row["workout_log_id"],
            exercise_id=row["exercise_id"],
            set_number=row["set_number"],
            reps=row["reps"],
            weight=row["weight"],
            notes=row["notes"],
        )

    def _row_to_snapshot(self, row: dict) -> ExerciseSnapshot:
        """Convert a database row to an ExerciseSnapshot."""
        return ExerciseSnapshot(
            id=row["id"],
            exercise_log_id=row["exercise_log_id"],
            exercise_id=row["exercise_id"],
            name=row["name"],
            sets=row["sets"],
            reps=row["reps"],
            tempo=row["tempo"],
            rest=row["rest"],
            notes=row["notes"],
            created_at=_parse_timestamp(row["created_at"]),
        )


class BlockNoteRepository:
    """Repository for per-block session notes."""

    def __init__(self, tx: Transaction):
        self.tx = tx

    async def list_for_workout(self, workout_log_id: int) -> list[BlockNoteLog]:
        """Notes saved for a workout."""
        rows = await self.tx.select(
            "block_note_logs", {"workout_log_id": workout_log_id}, order_by=("id",)
        )
        return [
            BlockNoteLog(
                id=row["id"],
                workout_log_id=row["workout_log_id"],
                block_id=row["block_id"],
                notes=row["notes"],
            )
            for row in rows
        ]

    async def replace(self, workout_log_id: int, notes: dict[int, str]) -> None:
        """Replace all of a workout's block notes."""
        await self.tx.delete("block_note_logs", {"workout_log_id": workout_log_id})
        for block_id, text in notes.items():
            await self.tx.insert(
                "block_note_logs",
                {"workout_log_id": workout_log_id, "block_id": block_id, "notes": text},
            )
