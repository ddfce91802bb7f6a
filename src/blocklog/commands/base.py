"""Shared CLI utilities."""

import asyncio
import json
from dataclasses import dataclass
from functools import wraps

import click

from ..config import Config
from ..db import Database
from ..errors import BlockLogError
from ..utils.cycle import CycleResolver


@dataclass
class AppContext:
    """Settings and caller identity shared by every command."""

    config: Config
    user_id: str

    @property
    def db(self) -> Database:
        return Database(self.config.db_path)

    @property
    def resolver(self) -> CycleResolver:
        return CycleResolver(self.config.cycle_start)


def get_app(ctx: click.Context) -> AppContext:
    """Get the application context set up by the root group."""
    return ctx.find_object(AppContext)


def async_command(f):
    """Decorator to run async Click commands.

    Expected failures are reported as an [ERROR] line with exit status 1.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return asyncio.run(f(*args, **kwargs))
        except BlockLogError as e:
            echo_error(e.message)
            click.get_current_context().exit(1)

    return wrapper


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_app(ctx).config.db_path
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'blocklog init' first."
        )
        ctx.exit(1)


def read_json_payload(source, ctx: click.Context) -> dict:
    """Read a JSON object from an open file (or stdin)."""
    try:
        data = json.load(source)
    except json.JSONDecodeError as e:
        echo_error(f"Invalid JSON: {e}")
        ctx.exit(1)
    if not isinstance(data, dict):
        echo_error("JSON payload must be an object")
        ctx.exit(1)
    return data


def echo_json(data) -> None:
    """Print data as indented JSON."""
    click.echo(json.dumps(data, indent=2))


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message, err=True)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)).rstrip()]
    lines.append("".join("-" * w + " " * padding for w in widths).rstrip())
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)).rstrip()
        )

    return "\n".join(lines)


def blank(value) -> str:
    """Render None as an empty cell."""
    return "" if value is None else str(value)
