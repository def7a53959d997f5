"""Tests for planning lines and date shifting."""

import datetime

import pytest

from orgoutline.planning import (
    Planning,
    build_planning_body,
    compute_reschedule_replacements,
    compute_smart_date_replacements,
    get_immediate_planning_line,
    get_planning_for_heading,
    is_planning_line,
    parse_planning_from_text,
    process_repeater_on_done,
    replace_stamp_content,
    shift_day_heading_date,
    strip_inline_planning,
    transform_scheduled_date,
)

DOC = [
    "* [2026-02-09 Mon] ----",  # 0
    "  * TODO Task",  # 1
    "    SCHEDULED: <2026-02-09 Mon>",  # 2
    "  * TODO Other SCHEDULED: <2026-02-10 Tue>",  # 3
    "  * TODO Unscheduled",  # 4
]


def reschedule(lines, targets, forward=True, **kwargs):
    return compute_reschedule_replacements(
        lines.__getitem__, len(lines), targets, forward, **kwargs
    )


class TestReadingPlanning:
    """Tests for planning line detection and parsing."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("    SCHEDULED: <2026-01-15 Thu>", True),
            ("DEADLINE: <2026-01-20 Tue>  SCHEDULED: <2026-01-15 Thu>", True),
            ("  CLOSED: [2026-01-14 Wed 10:00]", True),
            ("* TODO Task SCHEDULED: <2026-01-15 Thu>", False),
            ("Scheduled: <2026-01-15 Thu>", False),
            ("", False),
        ],
    )
    def test_is_planning_line(self, line, expected) -> None:
        assert is_planning_line(line) is expected

    def test_parse_all_stamps(self) -> None:
        planning = parse_planning_from_text(
            "SCHEDULED: <2026-01-15 Thu>  DEADLINE: <2026-01-20 Tue -3d>"
            "  CLOSED: [2026-01-14 Wed 10:00]"
        )

        assert planning == Planning(
            scheduled="2026-01-15 Thu",
            deadline="2026-01-20 Tue -3d",
            closed="2026-01-14 Wed 10:00",
        )

    def test_completed_is_read_as_closed(self) -> None:
        planning = parse_planning_from_text("COMPLETED: [2026-01-14 Wed]")
        assert planning.closed == "2026-01-14 Wed"

    def test_immediate_planning_line(self) -> None:
        assert get_immediate_planning_line(DOC, 1) == (2, DOC[2])
        assert get_immediate_planning_line(DOC, 3) is None
        assert get_immediate_planning_line(DOC, 4) is None

    def test_planning_for_heading_merges_inline(self) -> None:
        """
        Given a heading with an inline DEADLINE and a SCHEDULED line below
        When its planning is read
        Then both stamps are reported
        """
        lines = [
            "* TODO Task DEADLINE: <2026-01-20 Tue>",
            "  SCHEDULED: <2026-01-15 Thu>",
        ]
        assert get_planning_for_heading(lines, 0) == Planning(
            scheduled="2026-01-15 Thu", deadline="2026-01-20 Tue"
        )

    def test_planning_for_missing_heading(self) -> None:
        assert get_planning_for_heading(DOC, 42) == Planning()


class TestWritingPlanning:
    """Tests for building and editing planning text."""

    def test_strip_inline_planning(self) -> None:
        assert (
            strip_inline_planning(
                "Task DEADLINE: <2026-01-20 Tue -3d> SCHEDULED: <2026-01-15>"
            )
            == "Task"
        )

    def test_build_planning_body(self) -> None:
        body = build_planning_body(
            Planning(scheduled="2026-01-15 Thu", closed="2026-01-14 Wed 10:00")
        )
        assert body == "SCHEDULED: <2026-01-15 Thu>  CLOSED: [2026-01-14 Wed 10:00]"

    def test_build_empty_body(self) -> None:
        assert build_planning_body(Planning()) == ""

    def test_replace_stamp_content(self) -> None:
        line = "  SCHEDULED: <2026-01-15 Thu>  DEADLINE: <2026-01-20 Tue>"
        assert replace_stamp_content(line, "DEADLINE", "2026-01-21 Wed") == (
            "  SCHEDULED: <2026-01-15 Thu>  DEADLINE: <2026-01-21 Wed>"
        )


class TestTransformScheduledDate:
    """Tests for transform_scheduled_date."""

    @pytest.mark.parametrize(
        "text,forward,expected",
        [
            ("SCHEDULED: [2026-01-10 Sat]", True, "SCHEDULED: [2026-01-11 Sun]"),
            ("SCHEDULED: <2026-03-01 Sun>", False, "SCHEDULED: <2026-02-28 Sat>"),
            ("SCHEDULED: <2026-01-10>", True, "SCHEDULED: <2026-01-11>"),
            (
                "  SCHEDULED: <2026-02-09 Mon 09:00-10:30 +1w -2d>",
                True,
                "  SCHEDULED: <2026-02-10 Tue 09:00-10:30 +1w -2d>",
            ),
            (
                "DEADLINE: <2026-01-20 Tue>  SCHEDULED: <2026-01-10 Sat>",
                True,
                "DEADLINE: <2026-01-20 Tue>  SCHEDULED: <2026-01-11 Sun>",
            ),
        ],
        ids=["inactive", "month-wrap", "no-weekday", "time-and-repeater", "deadline"],
    )
    def test_shift(self, text, forward, expected) -> None:
        assert transform_scheduled_date(text, forward) == (expected, False)

    def test_configured_layout(self) -> None:
        new_text, _ = transform_scheduled_date(
            "SCHEDULED: <2026-01-10 Sat>", True, "MM-DD-YYYY"
        )
        assert new_text == "SCHEDULED: <01-11-2026 Sun>"

    def test_no_stamp(self) -> None:
        assert transform_scheduled_date("* TODO Task", True) == (None, False)

    def test_bad_date(self) -> None:
        assert transform_scheduled_date("SCHEDULED: <2026-13-10 Sat>", True) == (
            None,
            True,
        )

    def test_day_heading(self) -> None:
        assert shift_day_heading_date("* [2026-01-31 Sat] ----", True) == (
            "* [2026-02-01 Sun] ----",
            False,
        )
        assert shift_day_heading_date("* Not a day", True) == (None, False)


class TestReschedule:
    """Tests for compute_reschedule_replacements."""

    def test_heading_and_planning_line_shift_once(self) -> None:
        """
        Given a selection covering a heading and its own planning line
        When the selection is rescheduled forward
        Then the planning line is shifted by exactly one day
        """
        result = reschedule(DOC, [1, 2])

        assert result.replacements == {2: "    SCHEDULED: <2026-02-10 Tue>"}
        assert not result.warned_parse

    def test_heading_resolves_to_planning_line(self) -> None:
        result = reschedule(DOC, [1], forward=False)
        assert result.replacements == {2: "    SCHEDULED: <2026-02-08 Sun>"}

    def test_inline_stamp(self) -> None:
        result = reschedule(DOC, [3])
        assert result.replacements == {
            3: "  * TODO Other SCHEDULED: <2026-02-11 Wed>"
        }

    def test_lines_without_stamp_are_skipped(self) -> None:
        assert reschedule(DOC, [0, 4, 99]).replacements == {}

    def test_unparseable_date_warns(self) -> None:
        result = reschedule(["  SCHEDULED: <2026-02-30 Mon>"], [0])

        assert result.replacements == {}
        assert result.warned_parse

    def test_smart_dates_shift_day_headings(self) -> None:
        result = compute_smart_date_replacements(
            DOC.__getitem__, len(DOC), [0, 1], False
        )

        assert result.replacements == {
            0: "* [2026-02-08 Sun] ----",
            2: "    SCHEDULED: <2026-02-08 Sun>",
        }


class TestRepeaterOnDone:
    """Tests for process_repeater_on_done."""

    def test_repeating_stamp_advances(self) -> None:
        outcome = process_repeater_on_done(
            Planning(scheduled="2026-01-15 Thu +1w", deadline="2026-01-20 Tue"),
            today=datetime.date(2026, 1, 15),
        )

        assert outcome.had_repeater
        assert outcome.planning == Planning(
            scheduled="2026-01-22 Thu +1w", deadline="2026-01-20 Tue"
        )

    def test_without_repeater(self) -> None:
        planning = Planning(scheduled="2026-01-15 Thu")
        outcome = process_repeater_on_done(planning)

        assert not outcome.had_repeater
        assert outcome.planning == planning
