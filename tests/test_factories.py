"""Tests that the factories and the engine produce org content orgmunge can parse."""

from datetime import date

from orgmunge import Org

from orgoutline.checkbox_stats import compute_cookie_update_edits
from orgoutline.checkbox_toggle import compute_checkbox_toggle_edits
from orgoutline.move import compute_move_block_result
from orgoutline.outline import apply_line_edits
from orgoutline.todo_state import compute_todo_state_change
from tests.conftest import NOW, make_day_heading, make_journal, make_task


def parse(lines: list[str]) -> Org:
    return Org("\n".join(lines) + "\n", from_file=False)


class TestMakeTask:
    """Tests that make_task produces valid parseable org content."""

    def test_task_parseable_by_orgmunge(self) -> None:
        lines = make_task(
            "Buy groceries",
            indent="",
            checkboxes=[(True, "Milk"), (False, "Bread")],
        )
        headings = list(parse(lines).get_all_headings())

        assert len(headings) == 1
        assert headings[0].headline.todo == "TODO"
        assert "Buy groceries" in headings[0].headline.title
        assert "- [X] Milk" in headings[0].body
        assert "- [ ] Bread" in headings[0].body

    def test_task_lines(self) -> None:
        assert make_task("Call mom", scheduled="2026-01-15 Thu") == [
            "  * TODO Call mom",
            "    SCHEDULED: <2026-01-15 Thu>",
        ]
        assert make_task("Notes", status=None, indent="") == ["* Notes"]


class TestMakeJournal:
    """Tests for make_day_heading and make_journal."""

    def test_day_heading(self) -> None:
        heading = make_day_heading(date(2026, 1, 15))
        assert heading.startswith("* [2026-01-15 Thu] ---")

    def test_day_heading_layout(self) -> None:
        heading = make_day_heading(date(2026, 1, 15), "DD-MM-YYYY")
        assert heading.startswith("* [15-01-2026 Thu]")

    def test_journal_parseable_by_orgmunge(self) -> None:
        """
        Given two days with top-level tasks
        When the journal is parsed by orgmunge
        Then every day heading and task is a heading
        """
        lines = make_journal(
            [
                (date(2026, 1, 15), [make_task("A", indent="")]),
                (date(2026, 1, 16), [make_task("B", indent="")]),
            ]
        )
        headings = list(parse(lines).get_all_headings())

        assert len(headings) == 4
        assert [h.headline.todo for h in headings].count("TODO") == 2
        assert lines[2] == ""


class TestEngineOutputParses:
    """Engine edits keep documents valid for a standard org parser."""

    def test_toggle_and_cookies(self) -> None:
        lines = make_task(
            "Buy groceries [/]",
            indent="",
            checkboxes=[(True, "Milk"), (False, "Bread")],
        )
        lines = apply_line_edits(lines, compute_checkbox_toggle_edits(lines, 2))
        lines = apply_line_edits(lines, compute_cookie_update_edits(lines))
        heading = list(parse(lines).get_all_headings())[0]

        assert lines[0] == "* TODO Buy groceries [2/2]"
        assert heading.headline.todo == "TODO"
        assert "- [X] Bread" in heading.body

    def test_done_with_closed_stamp(self) -> None:
        change = compute_todo_state_change(["* TODO Call mom"], 0, "DONE", now=NOW)
        heading = list(parse(change.updated_lines).get_all_headings())[0]

        assert heading.headline.todo == "DONE"
        assert "Call mom" in heading.headline.title

    def test_moved_subtree(self) -> None:
        lines = ["* Project", "** TODO A", "- [ ] a.1", "** TODO B"]
        result = compute_move_block_result(lines, 3, "up")
        titles = [
            h.headline.title
            for h in parse(result.updated_lines).get_all_headings()
            if h.headline.level == 2
        ]

        assert [t.strip() for t in titles] == ["B", "A"]
