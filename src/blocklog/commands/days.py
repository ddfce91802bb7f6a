"""Day template commands."""

import click

from ..services import DayAssignmentStore
from ..utils.cycle import day_name
from .base import (
    async_command,
    blank,
    echo_info,
    echo_json,
    echo_success,
    ensure_initialized,
    format_table,
    get_app,
)

DAY_NUMBER = click.IntRange(1, 7)


@click.group()
@click.pass_context
def days(ctx):
    """Manage the seven weekday templates (1=Monday ... 7=Sunday)."""
    ensure_initialized(ctx)


@days.command(name="list")
@click.pass_context
@async_command
async def list_days(ctx):
    """List all day templates and their blocks."""
    app = get_app(ctx)
    templates = await DayAssignmentStore(app.db).list_day_templates(app.user_id)

    headers = ["Day", "Weekday", "Name", "Blocks"]
    rows = [
        [
            str(t.day_number),
            day_name(t.day_number),
            t.name,
            ", ".join(b.name for b in t.blocks) or "-",
        ]
        for t in templates
    ]
    click.echo()
    click.echo(format_table(headers, rows))


@days.command()
@click.argument("day_number", type=DAY_NUMBER)
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
@async_command
async def show(ctx, day_number: int, as_json: bool):
    """Show one day template."""
    app = get_app(ctx)
    template = await DayAssignmentStore(app.db).get_day_template(app.user_id, day_number)

    if as_json:
        echo_json(template.to_dict())
        return

    click.echo(f"{day_name(template.day_number)}: {template.name} (version {template.version})")
    if template.description:
        click.echo(template.description)
    if not template.blocks:
        echo_info("No blocks assigned")
        return
    rows = [
        [str(b.order), str(b.block_id), b.name, blank(b.category)]
        for b in template.blocks
    ]
    click.echo(format_table(["Order", "ID", "Block", "Category"], rows))


@days.command()
@click.argument("day_number", type=DAY_NUMBER)
@click.argument("name")
@click.option("--description", "-d", help="New description")
@click.pass_context
@async_command
async def rename(ctx, day_number: int, name: str, description: str | None):
    """Rename a day template."""
    app = get_app(ctx)
    template = await DayAssignmentStore(app.db).update_day_template(
        app.user_id, day_number, name=name, description=description
    )
    echo_success(f"Day {day_number} renamed to '{template.name}'")


@days.command()
@click.argument("day_number", type=DAY_NUMBER)
@click.argument("block_ids", type=int, nargs=-1)
@click.pass_context
@async_command
async def assign(ctx, day_number: int, block_ids):
    """Set the blocks trained on a day, in order.

    Passing no block ids clears the day.

    Example:

        blocklog days assign 1 3 5
    """
    app = get_app(ctx)
    template = await DayAssignmentStore(app.db).set_day_blocks(
        app.user_id, day_number, list(block_ids)
    )
    if template.blocks:
        names = ", ".join(b.name for b in template.blocks)
        echo_success(f"{template.name}: {names}")
    else:
        echo_success(f"{template.name}: no blocks assigned")
