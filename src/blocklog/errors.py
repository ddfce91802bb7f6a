"""Typed errors raised by the blocklog core.

Each error carries a ``kind`` string so an outer layer (HTTP, CLI) can map it
to a response without inspecting the class hierarchy.
"""


class BlockLogError(Exception):
    """Base class for all expected, caller-actionable failures."""

    kind = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"kind": self.kind, "message": self.message}


class NotFoundError(BlockLogError, LookupError):
    """Block, week, exercise or day template absent or not owned by the caller."""

    kind = "NotFound"


class DuplicateNameError(BlockLogError):
    """A block or day template name is already taken for this user."""

    kind = "DuplicateName"


class RangeError(BlockLogError, ValueError):
    """Week number outside 1-6 or weekday outside 1-7."""

    kind = "RangeError"


class InUseError(BlockLogError):
    """Block deletion blocked by an existing day assignment."""

    kind = "InUse"


class ParseError(BlockLogError, ValueError):
    """Markdown could not be tokenized into the block table layout."""

    kind = "ParseError"

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class ValidationError(BlockLogError, ValueError):
    """Missing required field, malformed date, non-positive weight, etc."""

    kind = "ValidationError"


class StaleVersionError(BlockLogError):
    """The caller's expected version no longer matches the stored one."""

    kind = "StaleVersion"

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Block was modified concurrently (expected version {expected}, found {actual})"
        )
        self.expected = expected
        self.actual = actual
