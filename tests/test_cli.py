"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from blocklog.cli import main

WEEK_1 = {
    "notes": "Leave 2 in the tank",
    "exercises": [
        {"order": 1, "name": "Bench Press", "sets": 4, "reps": "6-8", "tempo": "3010"},
        {"order": 2, "name": "Dips", "sets": 3, "reps": "8-12", "weightGuidance": "Bodyweight"},
    ],
}


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """CLI runner pointed at a throwaway database."""
    monkeypatch.delenv("BLOCKLOG_CONFIG", raising=False)
    monkeypatch.setenv("BLOCKLOG_DB_PATH", str(tmp_path / "data" / "blocklog.db"))
    monkeypatch.setenv("BLOCKLOG_USER", "athlete")
    monkeypatch.chdir(tmp_path)
    return CliRunner()


def invoke(runner, *args, input=None):
    return runner.invoke(main, list(args), input=input)


@pytest.fixture
def initialized(runner):
    """Runner with the database created and one filled-in block assigned to Monday."""
    assert invoke(runner, "init").exit_code == 0
    assert invoke(runner, "blocks", "create", "Push", "-d", "Pressing").exit_code == 0
    assert invoke(runner, "week", "set", "1", "1", input=json.dumps(WEEK_1)).exit_code == 0
    assert invoke(runner, "days", "assign", "1", "1").exit_code == 0
    return runner


class TestSetup:
    """Tests for init and the initialization guard."""

    def test_version(self, runner):
        """Test the version option."""
        result = invoke(runner, "--version")

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_init(self, runner, tmp_path):
        """Test init creates the database and day templates."""
        result = invoke(runner, "init")

        assert result.exit_code == 0
        assert "Database initialized" in result.output
        assert "7 days" in result.output
        assert (tmp_path / "data" / "blocklog.db").exists()

    def test_init_twice(self, runner):
        """Test init is safe to repeat."""
        invoke(runner, "init")

        assert invoke(runner, "init").exit_code == 0

    def test_requires_init(self, runner):
        """Test commands refuse to run before init."""
        result = invoke(runner, "blocks", "list")

        assert result.exit_code == 1
        assert "not initialized" in result.output


class TestBlockCommands:
    """Tests for blocks, week and copy-week."""

    def test_list(self, initialized):
        """Test the block list shows counts and days."""
        result = invoke(initialized, "blocks", "list")

        assert result.exit_code == 0
        assert "Push" in result.output
        assert "Day 1 - Push" in result.output
        assert "Total: 1 block(s)" in result.output

    def test_week_show_json(self, initialized):
        """Test a saved week reads back as JSON."""
        result = invoke(initialized, "week", "show", "1", "1", "--json")

        data = json.loads(result.stdout)
        assert data["notes"] == "Leave 2 in the tank"
        assert [e["name"] for e in data["exercises"]] == ["Bench Press", "Dips"]
        assert data["exercises"][1]["weight_guidance"] == "Bodyweight"

    def test_week_number_range(self, initialized):
        """Test week 7 is rejected by argument parsing."""
        result = invoke(initialized, "week", "show", "1", "7")

        assert result.exit_code == 2

    def test_copy_week(self, initialized):
        """Test copying week 1 into later weeks."""
        result = invoke(initialized, "copy-week", "1", "1", "2", "3")

        assert result.exit_code == 0
        assert "Copied week 1 to 2 week(s)" in result.output
        shown = json.loads(invoke(initialized, "week", "show", "1", "3", "--json").stdout)
        assert [e["name"] for e in shown["exercises"]] == ["Bench Press", "Dips"]

    def test_duplicate_name(self, initialized):
        """Test typed errors exit with status 1."""
        result = invoke(initialized, "blocks", "create", "Push")

        assert result.exit_code == 1
        assert "[ERROR]" in result.output

    def test_show_missing(self, initialized):
        """Test a missing block is reported."""
        result = invoke(initialized, "blocks", "show", "99")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete_assigned(self, initialized):
        """Test an assigned block cannot be deleted."""
        result = invoke(initialized, "blocks", "delete", "1", "--force")

        assert result.exit_code == 1
        assert "Day 1 - Push" in result.output

    def test_stale_version(self, initialized):
        """Test --expected-version guards updates."""
        result = invoke(initialized, "blocks", "update", "1", "-n", "Press", "--expected-version", "1")

        assert result.exit_code == 1
        assert "modified concurrently" in result.output


class TestTransferCommands:
    """Tests for export and import."""

    def test_export_import(self, initialized):
        """Test exported markdown imports into another block."""
        exported = invoke(initialized, "export", "1")
        assert exported.exit_code == 0
        assert "| 1 | Bench Press | 4 | 6-8 | 3010 |  |  |" in exported.stdout

        invoke(initialized, "blocks", "create", "Copy")
        result = invoke(initialized, "import", "2", input=exported.stdout)

        assert result.exit_code == 0
        assert "Imported 2 exercise(s) into 'Copy'" in result.output
        shown = json.loads(invoke(initialized, "week", "show", "2", "1", "--json").stdout)
        assert [e["name"] for e in shown["exercises"]] == ["Bench Press", "Dips"]

    def test_export_to_file(self, initialized, tmp_path):
        """Test --output writes the markdown to a file."""
        target = tmp_path / "push.md"

        result = invoke(initialized, "export", "1", "-o", str(target))

        assert result.exit_code == 0
        assert target.read_text().startswith("# Block: Push")

    def test_import_parse_error(self, initialized):
        """Test unreadable markdown is reported."""
        result = invoke(initialized, "import", "1", input="## Week six\n")

        assert result.exit_code == 1
        assert "Line 1" in result.output


class TestWorkoutCommands:
    """Tests for days, workout, history, calendar and resolve."""

    def test_workout_show_json(self, initialized):
        """Test Monday of week 1 shows the assigned block."""
        result = invoke(initialized, "workout", "show", "2026-01-12", "--json")

        data = json.loads(result.stdout)
        assert data["day_name"] == "Day 1 - Push"
        assert data["prescription_week"] == 1
        assert data["blocks"][0]["display_name"] == "Push (Week 1)"

    def test_log_and_history(self, initialized):
        """Test logged sets show up in history with the captured prescription."""
        payload = {
            "exercises": [{"exercise_id": 1, "set_number": 1, "reps": 8, "weight": 80}],
            "completed": True,
        }

        result = invoke(initialized, "workout", "log", "2026-01-12", input=json.dumps(payload))

        assert result.exit_code == 0
        assert "(completed)" in result.output
        history = json.loads(invoke(initialized, "history", "1", "--json").stdout)
        assert history[0]["date"] == "2026-01-12"
        assert history[0]["prescribed"]["name"] == "Bench Press"

    def test_log_invalid_json(self, initialized):
        """Test a malformed payload is rejected."""
        result = invoke(initialized, "workout", "log", "2026-01-12", input="{not json")

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_calendar_week(self, initialized):
        """Test the week calendar names the assigned day."""
        result = invoke(initialized, "calendar", "--week", "2026-01-14", "--json")

        days = json.loads(result.stdout)
        assert len(days) == 7
        assert days[0]["date"] == "2026-01-12"
        assert days[0]["workout_day"] == "Day 1 - Push"

    def test_calendar_bad_month(self, initialized):
        """Test a malformed month is a usage error."""
        result = invoke(initialized, "calendar", "--month", "January")

        assert result.exit_code == 2

    def test_resolve_deload(self, runner):
        """Test resolve needs no database."""
        result = invoke(runner, "resolve", "2026-02-23")

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data == {
            "weekday": 1,
            "prescription_week": 6,
            "is_deload": True,
            "week_in_cycle": 7,
        }

    def test_resolve_bad_date(self, runner):
        """Test an invalid date is a usage error."""
        result = invoke(runner, "resolve", "2026-02-30")

        assert result.exit_code == 2
