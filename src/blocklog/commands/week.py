"""Week editing commands."""

import click

from ..services import PrescriptionStore, WeekCopyTransform
from .base import (
    async_command,
    echo_info,
    echo_json,
    echo_success,
    ensure_initialized,
    get_app,
    read_json_payload,
)
from .blocks import format_exercises

WEEK_NUMBER = click.IntRange(1, 6)


@click.group()
@click.pass_context
def week(ctx):
    """View and edit one week of a block."""
    ensure_initialized(ctx)


@week.command()
@click.argument("block_id", type=int)
@click.argument("week_number", type=WEEK_NUMBER)
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
@async_command
async def show(ctx, block_id: int, week_number: int, as_json: bool):
    """Show a week's notes and active exercises."""
    app = get_app(ctx)
    block_week = await PrescriptionStore(app.db).get_week(app.user_id, block_id, week_number)

    if as_json:
        echo_json(block_week.to_dict())
        return

    click.echo(f"Block {block_id}, week {week_number}")
    if block_week.notes:
        click.echo(f"Notes: {block_week.notes}")
    if not block_week.exercises:
        echo_info("No exercises in this week")
        return
    click.echo(format_exercises(block_week.exercises))


@week.command(name="set")
@click.argument("block_id", type=int)
@click.argument("week_number", type=WEEK_NUMBER)
@click.option(
    "--file",
    "-f",
    "source",
    type=click.File("r"),
    default="-",
    help="JSON payload (defaults to stdin)",
)
@click.option("--expected-version", type=int, help="Fail if the block has changed since this version")
@click.pass_context
@async_command
async def set_week(ctx, block_id: int, week_number: int, source, expected_version):
    """Save a week from a JSON payload.

    The payload is an object with optional keys "notes", "exercises" and
    "deleted_exercise_ids". Exercises with an "id" are updated in place,
    exercises without one are added.

    Example:

        echo '{"exercises": [{"order": 1, "name": "Bench Press", "sets": 4, "reps": "6-8"}]}' \\
            | blocklog week set 1 1
    """
    app = get_app(ctx)
    payload = read_json_payload(source, ctx)

    block_week = await PrescriptionStore(app.db).replace_week(
        app.user_id,
        block_id,
        week_number,
        notes=payload.get("notes"),
        exercises=payload.get("exercises") or [],
        deleted_exercise_ids=payload.get("deleted_exercise_ids")
        or payload.get("deletedExerciseIds")
        or [],
        expected_version=expected_version,
    )
    echo_success(
        f"Week {week_number} saved ({len(block_week.exercises)} active exercise(s))"
    )


@click.command(name="copy-week")
@click.argument("block_id", type=int)
@click.argument("source_week", type=WEEK_NUMBER)
@click.argument("target_weeks", type=WEEK_NUMBER, nargs=-1, required=True)
@click.option("--expected-version", type=int, help="Fail if the block has changed since this version")
@click.pass_context
@async_command
async def copy_week(ctx, block_id: int, source_week: int, target_weeks, expected_version):
    """Copy a week's exercises into other weeks.

    Example:

        blocklog copy-week 1 2 3 4 5
    """
    ensure_initialized(ctx)
    app = get_app(ctx)
    copied = await WeekCopyTransform(app.db).copy_week(
        app.user_id,
        block_id,
        source_week,
        list(target_weeks),
        expected_version=expected_version,
    )
    echo_success(f"Copied week {source_week} to {copied} week(s)")
