"""Tests for training cycle resolution."""

from datetime import date, datetime, timedelta

import pytest

from blocklog.errors import ValidationError
from blocklog.utils.cycle import (
    DEFAULT_CYCLE_START,
    CycleDay,
    CycleResolver,
    day_name,
    parse_date,
    resolve,
    short_day_name,
    week_dates,
    week_start,
)

EPOCH = date(2026, 1, 12)


class TestCycleResolver:
    """Tests for CycleResolver.resolve."""

    def test_epoch_is_week_one_monday(self):
        """Test the cycle start resolves to Monday of week 1."""
        assert CycleResolver(EPOCH).resolve(EPOCH) == CycleDay(
            weekday=1, prescription_week=1, is_deload=False, week_in_cycle=1
        )

    def test_sunday_stays_in_same_week(self):
        """Test the last day of a week keeps that week's number."""
        result = CycleResolver(EPOCH).resolve(EPOCH + timedelta(days=6))

        assert result.weekday == 7
        assert result.week_in_cycle == 1

    def test_each_week_advances(self):
        """Test weeks 1-6 map to their own prescriptions."""
        resolver = CycleResolver(EPOCH)
        for week in range(6):
            result = resolver.resolve(EPOCH + timedelta(weeks=week))
            assert result.week_in_cycle == week + 1
            assert result.prescription_week == week + 1
            assert not result.is_deload

    def test_seventh_week_is_deload(self):
        """Test week 7 is a deload reusing the week 6 prescription."""
        result = CycleResolver(EPOCH).resolve(EPOCH + timedelta(days=42))

        assert result.week_in_cycle == 7
        assert result.is_deload
        assert result.prescription_week == 6

    def test_cycle_restarts_after_deload(self):
        """Test the eighth week starts a new cycle."""
        result = CycleResolver(EPOCH).resolve(EPOCH + timedelta(days=49))

        assert result.week_in_cycle == 1
        assert not result.is_deload

    def test_day_before_epoch_is_deload_sunday(self):
        """Test negative offsets wrap backwards into the previous deload."""
        result = CycleResolver(EPOCH).resolve(EPOCH - timedelta(days=1))

        assert result.weekday == 7
        assert result.week_in_cycle == 7
        assert result.is_deload

    def test_negative_week_boundaries(self):
        """Test negative offsets land on whole weeks."""
        resolver = CycleResolver(EPOCH)

        assert resolver.resolve(EPOCH - timedelta(days=7)).week_in_cycle == 7
        assert resolver.resolve(EPOCH - timedelta(days=8)).week_in_cycle == 6
        assert resolver.resolve(EPOCH - timedelta(days=49)).week_in_cycle == 1

    def test_ranges_hold_for_all_dates(self):
        """Test every result stays within its range over several cycles."""
        resolver = CycleResolver(EPOCH)
        for offset in range(-400, 400):
            result = resolver.resolve(EPOCH + timedelta(days=offset))
            assert 1 <= result.prescription_week <= 6
            assert 1 <= result.week_in_cycle <= 7
            assert 1 <= result.weekday <= 7
            assert result.is_deload == (result.week_in_cycle == 7)

    def test_cycle_repeats_every_49_days(self):
        """Test the cycle period is seven weeks."""
        resolver = CycleResolver(EPOCH)
        for offset in range(-100, 100, 3):
            day = EPOCH + timedelta(days=offset)
            assert resolver.resolve(day) == resolver.resolve(day + timedelta(days=49))

    def test_weekday_is_iso_weekday(self):
        """Test weekday is computed from the calendar, not the cycle."""
        resolver = CycleResolver(EPOCH)
        for offset in range(-10, 10):
            day = EPOCH + timedelta(days=offset)
            assert resolver.resolve(day).weekday == day.isoweekday()

    def test_accepts_strings_and_datetimes(self):
        """Test YYYY-MM-DD strings and datetimes resolve like dates."""
        resolver = CycleResolver(EPOCH)

        assert resolver.resolve("2026-02-23") == resolver.resolve(date(2026, 2, 23))
        assert resolver.resolve(datetime(2026, 2, 23, 18, 30)) == resolver.resolve(
            date(2026, 2, 23)
        )

    @pytest.mark.parametrize("value", ["2026-1-12", "12/01/2026", "2026-02-30", "", "soon"])
    def test_rejects_bad_dates(self, value):
        """Test malformed or impossible dates raise ValidationError."""
        with pytest.raises(ValidationError):
            CycleResolver(EPOCH).resolve(value)

    def test_resolution_is_pure(self):
        """Test repeated calls in any order give identical results."""
        resolver = CycleResolver(EPOCH)
        first = resolver.resolve("2026-03-04")
        resolver.resolve("1999-12-31")
        resolver.resolve("2030-06-15")

        assert resolver.resolve("2026-03-04") == first

    def test_custom_epoch(self):
        """Test the epoch is configurable."""
        resolver = CycleResolver(date(2025, 1, 6))

        assert resolver.resolve("2025-01-06").week_in_cycle == 1
        assert resolver.resolve("2025-02-17").is_deload

    def test_epoch_must_be_monday(self):
        """Test a non-Monday epoch is rejected."""
        with pytest.raises(ValidationError):
            CycleResolver(date(2026, 1, 13))

    def test_module_resolve_uses_default_epoch(self):
        """Test the convenience function."""
        assert DEFAULT_CYCLE_START == EPOCH
        assert resolve("2026-02-23").is_deload
        assert resolve("2026-01-12").week_in_cycle == 1

    def test_to_dict(self):
        """Test CycleDay serialization."""
        data = CycleResolver(EPOCH).resolve("2026-01-28").to_dict()

        assert data == {
            "weekday": 3,
            "prescription_week": 3,
            "is_deload": False,
            "week_in_cycle": 3,
        }


class TestMonthDays:
    """Tests for month listings."""

    def test_february(self):
        """Test every date of the month is listed with its cycle position."""
        days = CycleResolver(EPOCH).month_days(2026, 2)

        assert len(days) == 28
        assert days[0][0] == date(2026, 2, 1)
        assert days[-1][0] == date(2026, 2, 28)
        deload = dict(days)[date(2026, 2, 23)]
        assert deload.is_deload

    def test_invalid_month(self):
        """Test an invalid month raises ValidationError."""
        with pytest.raises(ValidationError):
            CycleResolver(EPOCH).month_days(2026, 13)


class TestCalendarHelpers:
    """Tests for date helper functions."""

    def test_day_names(self):
        """Test day name lookups."""
        assert day_name(1) == "Monday"
        assert day_name(7) == "Sunday"
        assert day_name(0) == "Unknown"
        assert short_day_name(3) == "Wed"
        assert short_day_name(8) == "???"

    def test_week_start(self):
        """Test the Monday of a week is found."""
        assert week_start("2026-01-15") == date(2026, 1, 12)
        assert week_start(date(2026, 1, 12)) == date(2026, 1, 12)
        assert week_start("2026-01-18") == date(2026, 1, 12)

    def test_week_dates(self):
        """Test the seven dates of a week."""
        dates = week_dates("2026-01-14")

        assert len(dates) == 7
        assert dates[0] == date(2026, 1, 12)
        assert dates[-1] == date(2026, 1, 18)

    def test_parse_date(self):
        """Test date parsing."""
        assert parse_date("2026-01-12") == date(2026, 1, 12)
        with pytest.raises(ValidationError):
            parse_date(None)
