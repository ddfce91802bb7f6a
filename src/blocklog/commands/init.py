"""Initialize project command."""

import click

from ..db import init_db
from ..services import DayAssignmentStore
from .base import async_command, echo_info, echo_success, get_app


@click.command()
@click.pass_context
@async_command
async def init(ctx):
    """Initialize the blocklog database.

    Creates the data directory, the SQLite schema and the seven default
    day templates for the current user. Safe to run more than once.
    """
    app = get_app(ctx)
    db_path = app.config.db_path

    echo_info(f"Initializing blocklog in {db_path.parent}")
    db_path.parent.mkdir(parents=True, exist_ok=True)

    await init_db(db_path)
    echo_success("Database initialized")

    templates = await DayAssignmentStore(app.db).ensure_day_templates(app.user_id)
    echo_success(f"Day templates ready for '{app.user_id}' ({len(templates)} days)")

    click.echo()
    click.echo("Next steps:")
    click.echo('  1. Create a block:        blocklog blocks create "Push"')
    click.echo("  2. Fill in a week:        blocklog week set <block-id> 1 -f week1.json")
    click.echo("  3. Assign it to a day:    blocklog days assign 1 <block-id>")
    click.echo("  4. See today's workout:   blocklog workout show")
