"""Tests for ISO week bucketing and calendar generation."""

from datetime import date, datetime, timedelta

import pytest

from app.errors import InvalidDate, ValidationError
from app.utils.week import (
    WeekBounds,
    iso_week_number,
    parse_date,
    week_bounds,
    weeks_in_range,
)


class TestParseDate:
    def test_accepts_date_datetime_and_string(self):
        assert parse_date(date(2025, 6, 4)) == date(2025, 6, 4)
        assert parse_date(datetime(2025, 6, 4, 23, 59)) == date(2025, 6, 4)
        assert parse_date("2025-06-04") == date(2025, 6, 4)
        assert parse_date(" 2025-06-04 ") == date(2025, 6, 4)

    def test_iso_datetime_string_keeps_only_the_date(self):
        assert parse_date("2025-06-04T23:30:00") == date(2025, 6, 4)

    @pytest.mark.parametrize("value", [None, "", "   ", "not-a-date", "2025-02-30", "2025/06/04", 20250604])
    def test_rejects_unparseable_values(self, value):
        with pytest.raises(InvalidDate):
            parse_date(value)

    def test_invalid_date_is_a_validation_error(self):
        assert issubclass(InvalidDate, ValidationError)


class TestWeekBounds:
    def test_midweek_date(self):
        assert week_bounds("2025-06-04") == WeekBounds("2025-06-02", "2025-06-08")

    def test_monday_is_its_own_week_start(self):
        assert week_bounds("2025-06-02") == WeekBounds("2025-06-02", "2025-06-08")

    def test_sunday_belongs_to_the_preceding_monday(self):
        assert week_bounds("2025-06-08") == WeekBounds("2025-06-02", "2025-06-08")
        assert week_bounds("2025-06-01") == WeekBounds("2025-05-26", "2025-06-01")

    def test_week_spanning_year_boundary(self):
        assert week_bounds("2025-01-01") == WeekBounds("2024-12-30", "2025-01-05")

    def test_time_of_day_is_ignored(self):
        assert week_bounds(datetime(2025, 6, 8, 23, 59, 59)) == week_bounds(date(2025, 6, 8))

    def test_every_day_starts_on_monday_and_is_idempotent(self):
        day = date(2023, 12, 1)
        for _ in range(800):
            bounds = week_bounds(day)
            start = parse_date(bounds.week_start)
            end = parse_date(bounds.week_end)
            assert start.isoweekday() == 1
            assert end.isoweekday() == 7
            assert end - start == timedelta(days=6)
            assert start <= day <= end
            assert week_bounds(bounds.week_start) == bounds
            day += timedelta(days=1)

    def test_invalid_input_raises(self):
        with pytest.raises(InvalidDate):
            week_bounds("garbage")

    def test_iso_week_number(self):
        assert iso_week_number("2025-06-02") == 23
        assert iso_week_number("2024-12-30") == 1


class TestWeeksInRange:
    def test_range_inside_one_week(self):
        assert weeks_in_range("2025-06-03", "2025-06-05") == [WeekBounds("2025-06-02", "2025-06-08")]

    def test_partial_weeks_at_both_ends_are_included(self):
        weeks = weeks_in_range("2025-06-01", "2025-06-15")
        assert [w.week_start for w in weeks] == ["2025-05-26", "2025-06-02", "2025-06-09"]
        assert weeks[-1].week_end == "2025-06-15"

    def test_inverted_range_is_empty(self):
        assert weeks_in_range("2025-06-15", "2025-06-01") == []

    def test_single_day_range(self):
        assert weeks_in_range("2025-06-08", "2025-06-08") == [WeekBounds("2025-06-02", "2025-06-08")]

    def test_length_and_contiguity(self):
        pairs = [("2025-01-01", "2025-12-31"), ("2024-02-28", "2024-03-04"), ("2025-06-02", "2025-06-30")]
        for start, end in pairs:
            weeks = weeks_in_range(start, end)
            first = parse_date(week_bounds(start).week_start)
            last = parse_date(week_bounds(end).week_end)
            assert len(weeks) == -(-((last - first).days + 1) // 7)
            for prev, nxt in zip(weeks, weeks[1:]):
                assert parse_date(nxt.week_start) - parse_date(prev.week_start) == timedelta(days=7)
                assert parse_date(nxt.week_start) - parse_date(prev.week_end) == timedelta(days=1)

    def test_is_restartable(self):
        assert weeks_in_range("2025-01-01", "2025-03-01") == weeks_in_range("2025-01-01", "2025-03-01")

    def test_invalid_bound_raises(self):
        with pytest.raises(InvalidDate):
            weeks_in_range("2025-01-01", "nope")
