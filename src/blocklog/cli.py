"""CLI entry point for blocklog."""

from pathlib import Path

import click

from . import __version__
from .commands import (
    blocks,
    calendar,
    copy_week,
    days,
    export,
    history,
    import_block,
    init,
    resolve,
    week,
    workout,
)
from .commands.base import AppContext, echo_error
from .config import configure_logging, load_config
from .errors import BlockLogError


@click.group()
@click.version_option(version=__version__, prog_name="blocklog")
@click.option("--user", "-u", help="User id to act as (default from config)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a blocklog.yaml file",
)
@click.pass_context
def main(ctx, user: str | None, verbose: bool, config_file: Path | None):
    """blocklog: block-periodized strength training tracker.

    Define reusable blocks with six weeks of progressive prescriptions,
    assign them to weekdays, and log workouts. Every date maps onto a
    repeating 7-week cycle whose last week is a deload.

    Example usage:

        # Initialize the database
        blocklog init

        # Create a block and fill in week 1
        blocklog blocks create "Push"
        blocklog week set 1 1 -f week1.json

        # Train it on Mondays and see today's workout
        blocklog days assign 1 1
        blocklog workout show
    """
    try:
        config = load_config(config_file)
    except BlockLogError as e:
        echo_error(f"Invalid configuration: {e.message}")
        ctx.exit(1)

    configure_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = AppContext(config=config, user_id=user or config.default_user)


# Register commands
main.add_command(init)
main.add_command(blocks)
main.add_command(week)
main.add_command(copy_week)
main.add_command(export)
main.add_command(import_block)
main.add_command(days)
main.add_command(workout)
main.add_command(calendar)
main.add_command(history)
main.add_command(resolve)


def run():
    """Run the CLI (handles async event loop)."""
    main()


if __name__ == "__main__":
    run()
