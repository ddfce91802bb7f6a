"""CLI commands for blocklog."""

from .blocks import blocks
from .calendar import calendar, resolve
from .days import days
from .init import init
from .transfer import export, import_block
from .week import copy_week, week
from .workout import history, workout

__all__ = [
    "blocks",
    "calendar",
    "copy_week",
    "days",
    "export",
    "history",
    "import_block",
    "init",
    "resolve",
    "week",
    "workout",
]
