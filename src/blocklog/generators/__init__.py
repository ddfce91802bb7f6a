"""Text formats for blocklog."""

from .markdown import (
    BlockMarkdownCodec,
    ParsedBlock,
    ParsedExercise,
    ParsedWeek,
    export_block_markdown,
    parse_block_markdown,
)

__all__ = [
    "BlockMarkdownCodec",
    "export_block_markdown",
    "parse_block_markdown",
    "ParsedBlock",
    "ParsedExercise",
    "ParsedWeek",
]
