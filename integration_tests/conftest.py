"""Pytest configuration for integration tests."""

import tempfile
from datetime import date
from pathlib import Path
from types import SimpleNamespace

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


# Mark all tests in this directory as integration tests
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
async def database():
    """A fresh SQLite file with the full schema."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "cycle.db"
        await init_db(path)
        yield Database(path)


@pytest.fixture
def app(database):
    """Every service wired against one database, with the default epoch."""
    return SimpleNamespace(
        prescriptions=PrescriptionStore(database),
        days=DayAssignmentStore(database),
        sessions=WorkoutSessionAssembler(database, CycleResolver(date(2026, 1, 12))),
        copier=WeekCopyTransform(database),
        transfer=BlockTransferService(database),
    )
