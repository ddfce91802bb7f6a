"""Workout viewing and logging commands."""

from datetime import date

import click

from ..services import WorkoutSessionAssembler
from .base import (
    async_command,
    blank,
    echo_info,
    echo_json,
    echo_success,
    ensure_initialized,
    format_table,
    get_app,
    read_json_payload,
)


def _assembler(ctx) -> WorkoutSessionAssembler:
    app = get_app(ctx)
    return WorkoutSessionAssembler(
        app.db, app.resolver, history_limit=app.config.history_limit
    )


@click.group()
@click.pass_context
def workout(ctx):
    """See and log the workout for a date."""
    ensure_initialized(ctx)


@workout.command()
@click.argument("day", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
@async_command
async def show(ctx, day: str | None, as_json: bool):
    """Show the prescribed workout for DAY (YYYY-MM-DD, default today)."""
    app = get_app(ctx)
    view = await _assembler(ctx).assemble_workout(app.user_id, day or date.today())

    if as_json:
        echo_json(view.to_dict())
        return

    header = f"{view.date.isoformat()} - {view.day_name} - Week {view.week_in_cycle} of 7"
    if view.is_deload:
        header += " (Deload)"
    click.echo()
    click.echo("=" * 60)
    click.echo(header)
    click.echo("=" * 60)
    if view.is_completed:
        echo_success("Completed")

    if not view.blocks:
        echo_info("Rest day - no blocks assigned")
        return

    for block in view.blocks:
        click.echo()
        click.echo(block.display_name)
        click.echo("-" * 40)
        if not block.exercises:
            click.echo("  (no exercises prescribed)")
        rows = []
        for item in block.exercises:
            ex = item.exercise
            logged = ", ".join(
                f"{s.set_number}: {blank(s.reps)}x{blank(s.weight)}" for s in item.logged_sets
            )
            rows.append([
                str(ex.id),
                ex.name,
                blank(ex.sets),
                blank(ex.reps),
                blank(ex.tempo),
                blank(ex.rest),
                blank(ex.weight_guidance),
                logged,
            ])
        if rows:
            click.echo(
                format_table(
                    ["ID", "Exercise", "Sets", "Reps", "Tempo", "Rest", "Weight", "Logged"],
                    rows,
                )
            )
        if block.existing_note:
            click.echo(f"Note: {block.existing_note}")


@workout.command()
@click.argument("day")
@click.option(
    "--file",
    "-f",
    "source",
    type=click.File("r"),
    default="-",
    help="JSON payload (defaults to stdin)",
)
@click.option("--completed/--not-completed", default=None, help="Override the payload's completed flag")
@click.pass_context
@async_command
async def log(ctx, day: str, source, completed: bool | None):
    """Log the sets performed on DAY from a JSON payload.

    The payload is an object with "exercises" (exercise_id, set_number,
    reps, weight, notes), optional "block_notes" (block_id, notes) and
    optional "completed". Re-logging a date replaces the earlier log.
    """
    app = get_app(ctx)
    payload = read_json_payload(source, ctx)
    if completed is None:
        completed = bool(payload.get("completed", False))

    workout_log = await _assembler(ctx).save_workout(
        app.user_id,
        day,
        payload.get("exercises") or [],
        payload.get("block_notes") or payload.get("blockNotes") or [],
        completed=completed,
    )
    status = "completed" if workout_log.completed else "in progress"
    echo_success(f"Workout for {workout_log.date.isoformat()} saved ({status})")


@click.command()
@click.argument("exercise_id", type=int)
@click.option("--limit", "-n", type=click.IntRange(min=1), help="Maximum number of sets")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
@async_command
async def history(ctx, exercise_id: int, limit: int | None, as_json: bool):
    """Show logged sets for an exercise with the prescription at the time."""
    ensure_initialized(ctx)
    app = get_app(ctx)
    entries = await _assembler(ctx).exercise_history(app.user_id, exercise_id, limit)

    if as_json:
        echo_json([entry.to_dict() for entry in entries])
        return

    if not entries:
        echo_info(f"No history for exercise {exercise_id}")
        return

    rows = []
    for entry in entries:
        prescribed = entry.prescribed
        rows.append([
            entry.date.isoformat(),
            str(entry.set_number),
            blank(entry.reps),
            blank(entry.weight),
            prescribed.name if prescribed else "",
            f"{blank(prescribed.sets)}x{blank(prescribed.reps)}" if prescribed else "",
            blank(entry.notes),
        ])
    click.echo(format_table(["Date", "Set", "Reps", "Weight", "Exercise", "Prescribed", "Notes"], rows))
