"""Block management commands."""

import click

from ..models.block import BLOCK_CATEGORIES, DEFAULT_CATEGORY
from ..services import PrescriptionStore
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


@click.group()
@click.pass_context
def blocks(ctx):
    """Manage workout blocks.

    A block is a reusable unit (e.g. "Push") with six weeks of
    progressive exercise prescriptions.
    """
    ensure_initialized(ctx)


@blocks.command(name="list")
@click.pass_context
@async_command
async def list_blocks(ctx):
    """List all blocks."""
    app = get_app(ctx)
    summaries = await PrescriptionStore(app.db).list_blocks(app.user_id)

    if not summaries:
        echo_info("No blocks found. Create one with 'blocklog blocks create'")
        return

    headers = ["ID", "Name", "Category", "Exercises", "Days", "Version"]
    rows = []
    for summary in summaries:
        block = summary.block
        rows.append([
            str(block.id),
            block.name[:30] + "..." if len(block.name) > 30 else block.name,
            blank(block.category),
            str(summary.exercise_count),
            ", ".join(summary.days_used) or "-",
            str(block.version),
        ])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(summaries)} block(s)")


@blocks.command()
@click.argument("name")
@click.option(
    "--category",
    "-c",
    type=click.Choice(BLOCK_CATEGORIES),
    default=DEFAULT_CATEGORY,
    help="Block category",
)
@click.option("--description", "-d", default="", help="Block description")
@click.pass_context
@async_command
async def create(ctx, name: str, category: str, description: str):
    """Create a block with six empty weeks."""
    app = get_app(ctx)
    block = await PrescriptionStore(app.db).create_block(
        app.user_id, name, category=category, description=description
    )
    echo_success(f"Block '{block.name}' created (ID: {block.id})")


@blocks.command()
@click.argument("block_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
@async_command
async def show(ctx, block_id: int, as_json: bool):
    """Show a block and all six weeks."""
    app = get_app(ctx)
    block = await PrescriptionStore(app.db).get_block(app.user_id, block_id)

    if as_json:
        echo_json(block.to_dict())
        return

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Block: {block.name} (ID: {block.id}, version {block.version})")
    click.echo("=" * 60)
    click.echo(f"Category: {blank(block.category)}")
    if block.description:
        click.echo(f"Description: {block.description}")
    if block.days_used:
        click.echo("Used on: " + ", ".join(name for _, name in block.days_used))

    for week in block.weeks:
        click.echo()
        click.echo(f"Week {week.week_number}")
        click.echo("-" * 40)
        if week.notes:
            click.echo(f"Notes: {week.notes}")
        if not week.exercises:
            click.echo("  (no exercises)")
            continue
        click.echo(format_exercises(week.exercises))


@blocks.command()
@click.argument("block_id", type=int)
@click.option("--name", "-n", help="New name")
@click.option("--category", "-c", type=click.Choice(BLOCK_CATEGORIES), help="New category")
@click.option("--description", "-d", help="New description")
@click.option("--expected-version", type=int, help="Fail if the block has changed since this version")
@click.pass_context
@async_command
async def update(ctx, block_id: int, name, category, description, expected_version):
    """Update block name, category or description."""
    app = get_app(ctx)
    block = await PrescriptionStore(app.db).update_block(
        app.user_id,
        block_id,
        name=name,
        description=description,
        category=category,
        expected_version=expected_version,
    )
    echo_success(f"Block {block.id} updated (version {block.version})")


@blocks.command()
@click.argument("block_id", type=int)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, block_id: int, force: bool):
    """Delete a block that is not assigned to any day."""
    app = get_app(ctx)
    store = PrescriptionStore(app.db)

    if not force:
        block = await store.get_block(app.user_id, block_id)
        click.echo(f"Block: {block.name}")
        if not click.confirm("Are you sure you want to delete this block?"):
            echo_info("Cancelled")
            return

    await store.delete_block(app.user_id, block_id)
    echo_success(f"Block {block_id} deleted")


def format_exercises(exercises) -> str:
    """Table of exercise prescriptions."""
    headers = ["ID", "#", "Exercise", "Sets", "Reps", "Tempo", "Rest", "Weight", "Notes"]
    rows = [
        [
            str(ex.id),
            str(ex.order),
            ex.name,
            blank(ex.sets),
            blank(ex.reps),
            blank(ex.tempo),
            blank(ex.rest),
            blank(ex.weight_guidance),
            blank(ex.notes),
        ]
        for ex in exercises
    ]
    return format_table(headers, rows)
