"""Calendar and cycle commands."""

from datetime import date

import click

from ..errors import ValidationError
from ..services import WorkoutSessionAssembler
from ..utils.cycle import short_day_name
from .base import async_command, echo_json, ensure_initialized, format_table, get_app


@click.command()
@click.option("--month", "-m", help="Month as YYYY-MM (default: current month)")
@click.option("--week", "-w", "week_of", help="Show the week containing this date (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
@async_command
async def calendar(ctx, month: str | None, week_of: str | None, as_json: bool):
    """Show cycle weeks, day names and completion for a month or week."""
    ensure_initialized(ctx)
    app = get_app(ctx)
    assembler = WorkoutSessionAssembler(app.db, app.resolver)

    if week_of:
        days = await assembler.week_calendar(app.user_id, week_of)
    else:
        if month:
            try:
                year_str, month_str = month.split("-")
                year, month_num = int(year_str), int(month_str)
            except ValueError:
                raise click.BadParameter("expected YYYY-MM", param_hint="--month")
        else:
            today = date.today()
            year, month_num = today.year, today.month
        days = await assembler.month_calendar(app.user_id, year, month_num)

    if as_json:
        echo_json([day.to_dict() for day in days])
        return

    rows = []
    for day in days:
        week_label = f"{day.week_in_cycle}" + (" (deload)" if day.is_deload else "")
        rows.append([
            day.date.isoformat(),
            short_day_name(day.date.isoweekday()),
            week_label,
            day.workout_day,
            "yes" if day.completed else "",
        ])
    click.echo(format_table(["Date", "Day", "Week", "Workout", "Done"], rows))


@click.command()
@click.argument("day", required=False)
@click.pass_context
def resolve(ctx, day: str | None):
    """Show where DAY (YYYY-MM-DD, default today) falls in the 7-week cycle."""
    app = get_app(ctx)
    try:
        cycle = app.resolver.resolve(day or date.today())
    except ValidationError as e:
        raise click.BadParameter(e.message, param_hint="DAY")
    echo_json(cycle.to_dict())
