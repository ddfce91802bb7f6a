"""Core services for blocklog."""

from .block_transfer import BlockTransferService, ImportResult
from .day_assignments import DayAssignmentStore
from .prescriptions import PrescriptionStore
from .week_copy import WeekCopyTransform
from .workout_session import WorkoutSessionAssembler

__all__ = [
    "BlockTransferService",
    "DayAssignmentStore",
    "ImportResult",
    "PrescriptionStore",
    "WeekCopyTransform",
    "WorkoutSessionAssembler",
]
