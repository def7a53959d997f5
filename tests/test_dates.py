"""Tests for date parsing, formatting and repeaters."""

import datetime

import pytest

from orgoutline.dates import (
    INVALID_TIMESTAMP,
    Repeater,
    advance_date_by_repeater,
    format_date,
    get_accepted_date_formats,
    parse_date_strict,
    parse_repeater,
    shift_timestamp_content,
    weekday_abbrev,
)


class TestFormats:
    """Tests for accepted formats and formatting."""

    def test_accepted_formats_default(self) -> None:
        assert get_accepted_date_formats() == [
            "YYYY-MM-DD",
            "MM-DD-YYYY",
            "DD-MM-YYYY",
        ]

    def test_configured_format_comes_first(self) -> None:
        assert get_accepted_date_formats("MM-DD-YYYY") == [
            "MM-DD-YYYY",
            "YYYY-MM-DD",
            "DD-MM-YYYY",
        ]

    @pytest.mark.parametrize(
        "fmt,expected",
        [
            ("YYYY-MM-DD", "2026-01-05"),
            ("MM-DD-YYYY", "01-05-2026"),
            ("DD-MM-YYYY", "05-01-2026"),
        ],
    )
    def test_format_date(self, fmt, expected) -> None:
        assert format_date(datetime.date(2026, 1, 5), fmt) == expected

    def test_weekday_abbrev(self) -> None:
        assert weekday_abbrev(datetime.date(2026, 1, 10)) == "Sat"


class TestParseDateStrict:
    """Tests for parse_date_strict."""

    def test_date_with_weekday(self) -> None:
        parsed = parse_date_strict("2026-01-10 Sat")

        assert parsed.is_valid
        assert parsed.date == datetime.date(2026, 1, 10)
        assert parsed.weekday == "Sat"
        assert parsed.date_format == "YYYY-MM-DD"

    def test_date_with_time(self) -> None:
        parsed = parse_date_strict("2026-01-10 Sat 9:30")
        assert parsed.time == datetime.time(9, 30)

    @pytest.mark.parametrize(
        "text",
        [
            "2026-01-10 Mon",
            "2026-13-01",
            "2026-01-45",
            "2026-02-30",
            "2026-01-10 Sat 25:00",
            "2026-01-10 Sat 10:75",
            "tomorrow",
            "",
            None,
        ],
        ids=[
            "wrong-weekday",
            "bad-month",
            "bad-day",
            "no-such-date",
            "bad-hour",
            "bad-minute",
            "word",
            "empty",
            "none",
        ],
    )
    def test_invalid(self, text) -> None:
        assert parse_date_strict(text) == INVALID_TIMESTAMP

    def test_us_layout_through_fallback(self) -> None:
        parsed = parse_date_strict("01-10-2026")

        assert parsed.date == datetime.date(2026, 1, 10)
        assert parsed.date_format == "MM-DD-YYYY"

    def test_format_order_decides_ambiguous_dates(self) -> None:
        parsed = parse_date_strict("01-10-2026", ["DD-MM-YYYY", "MM-DD-YYYY"])
        assert parsed.date == datetime.date(2026, 10, 1)

    def test_weekday_disambiguates(self) -> None:
        """
        Given a date that is valid in two layouts
        When the weekday only matches one of them
        Then the matching layout wins even if it is tried later
        """
        parsed = parse_date_strict("01-10-2026 Sat", ["DD-MM-YYYY", "MM-DD-YYYY"])

        assert parsed.date == datetime.date(2026, 1, 10)
        assert parsed.date_format == "MM-DD-YYYY"


class TestRepeaters:
    """Tests for parse_repeater and advance_date_by_repeater."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("+1w", Repeater("+", 1, "w")),
            ("++2m", Repeater("++", 2, "m")),
            (".+3d", Repeater(".+", 3, "d")),
            ("+1y -3d", Repeater("+", 1, "y")),
        ],
    )
    def test_parse(self, text, expected) -> None:
        assert parse_repeater(text) == expected

    @pytest.mark.parametrize("text", ["", "-3d", "+0d", "+1x", None])
    def test_no_repeater(self, text) -> None:
        assert parse_repeater(text) is None

    def test_str(self) -> None:
        assert str(Repeater("++", 2, "m")) == "++2m"

    def test_cumulative(self) -> None:
        result = advance_date_by_repeater(
            datetime.date(2026, 1, 1),
            Repeater("+", 1, "w"),
            datetime.date(2026, 3, 1),
        )
        assert result == datetime.date(2026, 1, 8)

    def test_catch_up(self) -> None:
        """
        Given a weekly ++ repeater several weeks in the past
        When it is advanced
        Then the result is the first occurrence after today
        """
        result = advance_date_by_repeater(
            datetime.date(2026, 1, 1),
            Repeater("++", 1, "w"),
            datetime.date(2026, 1, 20),
        )
        assert result == datetime.date(2026, 1, 22)

    def test_habit_counts_from_today(self) -> None:
        result = advance_date_by_repeater(
            datetime.date(2026, 1, 1),
            Repeater(".+", 1, "d"),
            datetime.date(2026, 1, 20),
        )
        assert result == datetime.date(2026, 1, 21)

    def test_month_end_is_clamped(self) -> None:
        result = advance_date_by_repeater(
            datetime.date(2026, 1, 31), Repeater("+", 1, "m")
        )
        assert result == datetime.date(2026, 2, 28)


class TestShiftTimestampContent:
    """Tests for shift_timestamp_content."""

    def test_weekly(self) -> None:
        assert shift_timestamp_content("2024-01-01 Mon +1w") == (
            "2024-01-08 Mon +1w",
            True,
        )

    def test_monthly_keeps_warning_period(self) -> None:
        assert shift_timestamp_content("2026-01-20 Tue +1m -3d") == (
            "2026-02-20 Fri +1m -3d",
            True,
        )

    def test_time_is_kept(self) -> None:
        result = shift_timestamp_content(
            "2026-01-15 Thu 09:00 .+2d", today=datetime.date(2026, 1, 20)
        )
        assert result == ("2026-01-22 Thu 09:00 .+2d", True)

    def test_weekday_only_when_present(self) -> None:
        assert shift_timestamp_content("2026-01-15 +1d") == ("2026-01-16 +1d", True)

    def test_configured_layout(self) -> None:
        assert shift_timestamp_content("01-15-2026 Thu +1d", "MM-DD-YYYY") == (
            "01-16-2026 Fri +1d",
            True,
        )

    @pytest.mark.parametrize(
        "content", ["2026-01-15 Thu", "2026-02-30 +1d", "not a date +1d"]
    )
    def test_unchanged(self, content) -> None:
        assert shift_timestamp_content(content) == (content, False)
