"""
Unit tests for calendar helpers.

Run: pytest tests/unit/test_calendar_utils.py -v
"""

from datetime import date, datetime

from utils.calendar_utils import add_days, parse_iso_date, to_iso


class TestAddDays:
    """Tests for add_days()"""

    def test_adds_days_across_month_boundary(self):
        assert add_days("2025-01-30", 3) == "2025-02-02"

    def test_handles_leap_day(self):
        assert add_days("2024-02-28", 1) == "2024-02-29"

    def test_negative_goes_backwards(self):
        assert add_days("2025-03-01", -1) == "2025-02-28"

    def test_zero_is_same_day(self):
        assert add_days("2025-03-01", 0) == "2025-03-01"

    def test_fractional_days_round_up(self):
        """1.2 days occupies two calendar days."""
        assert add_days("2025-03-01", 1.2) == "2025-03-03"

    def test_unparsable_date_returned_unchanged(self):
        assert add_days("not-a-date", 5) == "not-a-date"

    def test_blank_date_returned_unchanged(self):
        assert add_days("", 2) == ""

    def test_overflow_returns_original(self):
        assert add_days("9999-12-31", 1) == "9999-12-31"


class TestParseIsoDate:
    """Tests for parse_iso_date()"""

    def test_parses_plain_date(self):
        assert parse_iso_date("2025-03-01") == date(2025, 3, 1)

    def test_uses_date_part_of_timestamp(self):
        assert parse_iso_date("2025-03-01T10:30:00Z") == date(2025, 3, 1)

    def test_accepts_date_and_datetime(self):
        assert parse_iso_date(date(2025, 3, 1)) == date(2025, 3, 1)
        assert parse_iso_date(datetime(2025, 3, 1, 8, 0)) == date(2025, 3, 1)

    def test_invalid_calendar_date_is_none(self):
        assert parse_iso_date("2025-02-30") is None

    def test_blank_and_none_are_none(self):
        assert parse_iso_date("   ") is None
        assert parse_iso_date(None) is None


class TestToIso:
    """Tests for to_iso()"""

    def test_formats_with_zero_padding(self):
        assert to_iso(date(2025, 3, 1)) == "2025-03-01"
