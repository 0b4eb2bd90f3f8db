"""Tests for time utilities."""

from datetime import UTC, date, datetime, timedelta, timezone

from farm_reports.common.time_utils import format_iso_date, in_window, parse_datetime, utc_now


class TestParseDatetime:
    def test_parses_zulu_suffix(self):
        parsed = parse_datetime("2024-07-09T14:00:00Z")
        assert parsed == datetime(2024, 7, 9, 14, 0, tzinfo=UTC)

    def test_naive_string_assumed_utc(self):
        parsed = parse_datetime("2024-04-15")
        assert parsed == datetime(2024, 4, 15, tzinfo=UTC)

    def test_keeps_explicit_offset(self):
        parsed = parse_datetime("2024-04-15T10:00:00+02:00")
        assert parsed.utcoffset() == timedelta(hours=2)

    def test_accepts_date_and_datetime(self):
        assert parse_datetime(date(2024, 1, 2)) == datetime(2024, 1, 2, tzinfo=UTC)
        naive = datetime(2024, 1, 2, 3, 4)
        assert parse_datetime(naive) == datetime(2024, 1, 2, 3, 4, tzinfo=UTC)

    def test_missing_or_invalid_values(self):
        assert parse_datetime(None) is None
        assert parse_datetime("") is None
        assert parse_datetime("not a date") is None


class TestInWindow:
    start = datetime(2024, 1, 1, tzinfo=UTC)
    end = datetime(2024, 1, 31, tzinfo=UTC)

    def test_bounds_are_inclusive(self):
        assert in_window(self.start, self.start, self.end)
        assert in_window(self.end, self.start, self.end)

    def test_outside_window(self):
        assert not in_window(self.end + timedelta(seconds=1), self.start, self.end)
        assert not in_window(self.start - timedelta(seconds=1), self.start, self.end)

    def test_missing_moment_is_outside(self):
        assert not in_window(None, self.start, self.end)

    def test_naive_window_bounds(self):
        moment = datetime(2024, 1, 15, tzinfo=UTC)
        assert in_window(moment, datetime(2024, 1, 1), datetime(2024, 1, 31))

    def test_other_timezone(self):
        eastern = timezone(timedelta(hours=-5))
        # 2024-01-31 22:00 -05:00 is 2024-02-01 03:00 UTC
        moment = datetime(2024, 1, 31, 22, 0, tzinfo=eastern)
        assert not in_window(moment, self.start, self.end)


def test_utc_now_is_aware():
    assert utc_now().tzinfo is not None


def test_format_iso_date():
    assert format_iso_date(datetime(2024, 3, 5, 18, 0, tzinfo=UTC)) == "2024-03-05"
