"""Pytest configuration and fixtures."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from blocklog.db import Database, init_db
from blocklog.services import (
    BlockTransferService,
    DayAssignmentStore,
    PrescriptionStore,
    WeekCopyTransform,
    WorkoutSessionAssembler,
)
from blocklog.utils.cycle import CycleResolver

EPOCH = date(2026, 1, 12)


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
async def db(temp_db_path):
    """An initialized database."""
    await init_db(temp_db_path)
    return Database(temp_db_path)


@pytest.fixture
def resolver():
    return CycleResolver(EPOCH)


@pytest.fixture
def prescriptions(db):
    return PrescriptionStore(db)


@pytest.fixture
def day_store(db):
    return DayAssignmentStore(db)


@pytest.fixture
def sessions(db, resolver):
    return WorkoutSessionAssembler(db, resolver)


@pytest.fixture
def week_copy(db):
    return WeekCopyTransform(db)


@pytest.fixture
def transfer(db):
    return BlockTransferService(db)


@pytest.fixture
async def push_block(prescriptions):
    """A "Push" block with two exercises in week 1 and one in week 2."""
    block = await prescriptions.create_block("athlete", "Push", "strength", "Pressing")
    await prescriptions.replace_week(
        "athlete",
        block.id,
        1,
        notes="Leave 2 in the tank",
        exercises=[
            {"order": 1, "name": "Bench Press", "sets": 4, "reps": "6-8", "tempo": "3010", "rest": "2:00"},
            {"order": 2, "name": "Dips", "sets": 3, "reps": "8-12", "weightGuidance": "Bodyweight"},
        ],
    )
    await prescriptions.replace_week(
        "athlete",
        block.id,
        2,
        exercises=[{"order": 1, "name": "Incline Press", "sets": 4, "reps": "8"}],
    )
    return await prescriptions.get_block("athlete", block.id)
