"""Tests for the block markdown format."""

import pytest

from blocklog.errors import ParseError
from blocklog.generators.markdown import (
    TABLE_HEADER,
    TABLE_SEPARATOR,
    BlockMarkdownCodec,
    export_block_markdown,
    parse_block_markdown,
)
from blocklog.models.block import Block, BlockWeek, Exercise


@pytest.fixture
def sample_block():
    """A block with notes and one partially blank exercise in week 1."""
    return Block(
        user_id="athlete",
        name="Push",
        category="strength",
        description="Pressing",
        id=1,
        weeks=[
            BlockWeek(
                block_id=1,
                week_number=1,
                notes="Go easy",
                exercises=[
                    Exercise(name="Dips", order=2, reps="8-12", notes="Bodyweight", id=11),
                    Exercise(
                        name="Bench Press",
                        order=1,
                        sets=4,
                        reps="6-8",
                        tempo="3010",
                        rest="2:00",
                        id=10,
                    ),
                ],
            ),
            BlockWeek(
                block_id=1,
                week_number=2,
                exercises=[Exercise(name="Incline Press", order=1, sets=3, reps="8", id=12)],
            ),
        ],
    )


class TestExport:
    """Tests for rendering blocks."""

    def test_exact_layout(self, sample_block):
        """Test the header, metadata and first week are rendered exactly."""
        lines = BlockMarkdownCodec().export(sample_block).split("\n")

        assert lines[:13] == [
            "# Block: Push",
            "",
            "**Category:** strength",
            "**Description:** Pressing",
            "",
            "## Week 1",
            "*Go easy*",
            "",
            TABLE_HEADER,
            TABLE_SEPARATOR,
            "| 1 | Bench Press | 4 | 6-8 | 3010 | 2:00 |  |",
            "| 2 | Dips |  | 8-12 |  |  | Bodyweight |",
            "",
        ]
        assert lines[13] == "## Week 2"

    def test_all_six_weeks_rendered(self, sample_block):
        """Test weeks without data still get an empty table."""
        markdown = export_block_markdown(sample_block)

        for week_number in range(1, 7):
            assert f"## Week {week_number}" in markdown
        assert markdown.count(TABLE_HEADER) == 6
        assert "## Week 7" not in markdown

    def test_week_without_notes_has_no_italic_line(self, sample_block):
        """Test the notes line only appears when notes are set."""
        lines = export_block_markdown(sample_block).split("\n")
        week_two = lines.index("## Week 2")

        assert lines[week_two + 1] == ""
        assert lines[week_two + 2] == TABLE_HEADER

    def test_defaults_for_missing_metadata(self):
        """Test a missing category renders as strength and description as empty."""
        block = Block(user_id="athlete", name="Legs", category=None, description=None)
        lines = export_block_markdown(block).split("\n")

        assert lines[2] == "**Category:** strength"
        assert lines[3] == "**Description:** "

    def test_inactive_and_zero_sets(self):
        """Test inactive exercises are skipped and zero sets render blank."""
        block = Block(
            user_id="athlete",
            name="Core",
            weeks=[
                BlockWeek(
                    block_id=1,
                    week_number=1,
                    exercises=[
                        Exercise(name="Plank", order=1, sets=0, notes="Hold 30s"),
                        Exercise(name="Crunch", order=2, sets=3, is_active=False),
                    ],
                )
            ],
        )
        markdown = export_block_markdown(block)

        assert "| 1 | Plank |  |  |  |  | Hold 30s |" in markdown
        assert "Crunch" not in markdown


class TestParse:
    """Tests for parsing markdown."""

    def test_parse_exported_block(self, sample_block):
        """Test parsing export output recovers metadata, notes and exercises."""
        parsed = parse_block_markdown(export_block_markdown(sample_block))

        assert parsed.name == "Push"
        assert parsed.category == "strength"
        assert parsed.description == "Pressing"
        assert sorted(parsed.weeks) == [1, 2, 3, 4, 5, 6]
        assert parsed.weeks[1].notes == "Go easy"
        assert parsed.weeks[2].notes is None
        assert parsed.weeks[3].exercises == []

        bench, dips = parsed.weeks[1].exercises
        assert (bench.order, bench.name, bench.sets, bench.reps, bench.tempo, bench.rest, bench.notes) == (
            1, "Bench Press", 4, "6-8", "3010", "2:00", None
        )
        assert (dips.order, dips.name, dips.sets, dips.reps, dips.tempo, dips.rest, dips.notes) == (
            2, "Dips", None, "8-12", None, None, "Bodyweight"
        )
        assert parsed.exercise_count == 3

    def test_to_exercise(self):
        """Test parsed rows become new, unsaved exercises."""
        parsed = parse_block_markdown(
            "## Week 1\n| # | Exercise |\n|---|---|\n| 3 | Squat | 5 | 5 |\n"
        )
        exercise = parsed.weeks[1].exercises[0].to_exercise()

        assert exercise.id is None
        assert exercise.name == "Squat"
        assert exercise.order == 3
        assert exercise.sets == 5
        assert exercise.weight_guidance is None

    def test_short_rows_are_padded(self):
        """Test rows with fewer than seven cells leave later fields empty."""
        parsed = parse_block_markdown("## Week 1\n|---|\n| 1 | Squat | 5 |")
        squat = parsed.weeks[1].exercises[0]

        assert squat.sets == 5
        assert squat.reps is None
        assert squat.notes is None

    def test_non_numeric_order_uses_position(self):
        """Test a non-numeric order cell falls back to position + 1."""
        parsed = parse_block_markdown(
            "## Week 1\n|---|\n| a | Squat |\n| - | Lunge |\n| 7 | Step Up |"
        )

        assert [e.order for e in parsed.weeks[1].exercises] == [1, 2, 7]

    @pytest.mark.parametrize("cell,expected", [("4", 4), ("4x", 4), ("0", None), ("abc", None), ("", None)])
    def test_sets_parsing(self, cell, expected):
        """Test sets take the leading integer, with zero and text as null."""
        parsed = parse_block_markdown(f"## Week 1\n|---|\n| 1 | Squat | {cell} | 5 |")

        assert parsed.weeks[1].exercises[0].sets == expected

    def test_header_echo_skipped(self):
        """Test a header row repeated after the separator is ignored."""
        markdown = "\n".join(
            ["## Week 1", TABLE_HEADER, TABLE_SEPARATOR, TABLE_HEADER, "| 1 | Squat | 5 | 5 |  |  |  |"]
        )
        parsed = parse_block_markdown(markdown)

        assert [e.name for e in parsed.weeks[1].exercises] == ["Squat"]

    def test_rows_before_separator_skipped(self):
        """Test rows before the separator are treated as column headers."""
        parsed = parse_block_markdown("## Week 1\n| 1 | Not An Exercise |\n|---|\n| 2 | Squat |")

        assert [e.name for e in parsed.weeks[1].exercises] == ["Squat"]

    def test_whitespace_tolerant(self):
        """Test indentation and spacing are ignored."""
        markdown = "  # Block:   Legs  \n\n   ## Week 2\n  |---|---|\n  |1|Squat|5|5|||  |"
        parsed = parse_block_markdown(markdown)

        assert parsed.name == "Legs"
        assert parsed.weeks[2].exercises[0].name == "Squat"
        assert parsed.weeks[2].exercises[0].reps == "5"

    def test_metadata_only(self):
        """Test metadata without any weeks is accepted."""
        parsed = parse_block_markdown("**Category:** power\n**Description:** Jumps")

        assert parsed.category == "power"
        assert parsed.description == "Jumps"
        assert parsed.weeks == {}

    def test_empty_metadata_values(self):
        """Test empty metadata lines parse as empty strings."""
        parsed = parse_block_markdown("**Category:**\n**Description:**\n## Week 1")

        assert parsed.category == ""
        assert parsed.description == ""

    def test_out_of_range_week_collected(self):
        """Test week numbers above 6 are parsed (and rejected later on apply)."""
        parsed = parse_block_markdown("## Week 7\n|---|\n| 1 | Squat |")

        assert 7 in parsed.weeks

    def test_repeated_week_replaces_earlier(self):
        """Test a repeated week header starts the section over."""
        parsed = parse_block_markdown(
            "## Week 1\n|---|\n| 1 | Squat |\n## Week 1\n|---|\n| 1 | Deadlift |"
        )

        assert [e.name for e in parsed.weeks[1].exercises] == ["Deadlift"]

    def test_bold_lines_are_not_notes(self):
        """Test only single-asterisk lines set week notes."""
        parsed = parse_block_markdown("## Week 1\n**Bold**\n*Tempo focus*\n|---|")

        assert parsed.weeks[1].notes == "Tempo focus"

    @pytest.mark.parametrize("header", ["## Week abc", "## Week 0", "## Week", "## Week -1"])
    def test_invalid_week_header(self, header):
        """Test a week header without a positive integer is a ParseError."""
        with pytest.raises(ParseError) as exc_info:
            parse_block_markdown(f"# Block: Push\n{header}")

        assert exc_info.value.line_number == 2
        assert str(exc_info.value).startswith("Line 2:")

    def test_table_outside_week(self):
        """Test a table row before any week header is a ParseError."""
        with pytest.raises(ParseError):
            parse_block_markdown("# Block: Push\n| 1 | Squat |")

    def test_single_cell_row(self):
        """Test a data row with fewer than two cells is a ParseError."""
        with pytest.raises(ParseError) as exc_info:
            parse_block_markdown("## Week 1\n|---|\n| 1 |")

        assert exc_info.value.line_number == 3

    @pytest.mark.parametrize("markdown", ["", "   \n\n", "just some notes"])
    def test_nothing_recognizable(self, markdown):
        """Test text with no metadata and no weeks is a ParseError."""
        with pytest.raises(ParseError):
            parse_block_markdown(markdown)
