"""Markdown export and import commands."""

from pathlib import Path

import click

from ..services import BlockTransferService
from .base import (
    async_command,
    echo_error,
    echo_success,
    echo_warning,
    ensure_initialized,
    get_app,
)


@click.command()
@click.argument("block_id", type=int)
@click.option(
    "--clipboard",
    "-c",
    is_flag=True,
    help="Copy to clipboard instead of printing",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write to file instead of stdout",
)
@click.pass_context
@async_command
async def export(ctx, block_id: int, clipboard: bool, output: Path | None):
    """Export a block as a markdown table.

    Examples:
        # Print markdown
        blocklog export 1

        # Copy to clipboard
        blocklog export 1 --clipboard

        # Save to file
        blocklog export 1 -o push.md
    """
    ensure_initialized(ctx)
    app = get_app(ctx)
    content = await BlockTransferService(app.db).export_block(app.user_id, block_id)

    if clipboard:
        try:
            import pyperclip

            pyperclip.copy(content)
            echo_success("Copied to clipboard!")
        except ImportError:
            echo_error(
                "pyperclip not installed. Install with: pip install 'blocklog[clipboard]'"
            )
            ctx.exit(1)

    elif output:
        output.write_text(content)
        echo_success(f"Exported to {output}")

    else:
        click.echo(content)


@click.command(name="import")
@click.argument("block_id", type=int)
@click.argument("source", type=click.File("r"), default="-")
@click.option("--expected-version", type=int, help="Fail if the block has changed since this version")
@click.pass_context
@async_command
async def import_block(ctx, block_id: int, source, expected_version):
    """Import markdown into a block (SOURCE defaults to stdin).

    Every week present in the markdown has its exercises replaced. Category
    and description are updated when the markdown sets them.
    """
    ensure_initialized(ctx)
    app = get_app(ctx)
    result = await BlockTransferService(app.db).import_block(
        app.user_id, block_id, source.read(), expected_version=expected_version
    )

    if not result.weeks_applied:
        echo_warning(f"No week sections found; updated metadata of '{result.block_name}' only")
        return
    echo_success(
        f"Imported {result.exercises_imported} exercise(s) into '{result.block_name}' "
        f"(weeks {', '.join(str(w) for w in result.weeks_applied)})"
    )
