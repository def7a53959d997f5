"""Tests for task states that follow their checklists."""

import pytest

from orgoutline.auto_done import (
    HeadingTransitions,
    apply_heading_transitions,
    compute_heading_transitions,
    done_keyword,
    reopen_keyword,
)
from orgoutline.continued import DAY_HEADING_SEPARATOR
from orgoutline.workflow import DEFAULT_REGISTRY, create_workflow_registry
from tests.conftest import NOW

CLOSED = "CLOSED: [2026-01-15 Thu 14:30]"


class TestComputeHeadingTransitions:
    """Tests for compute_heading_transitions."""

    def test_complete_and_reopen(self) -> None:
        """
        Given a task with a full checklist, a DONE task with an open box and
        an ABANDONED task
        When transitions are computed
        Then the first is completed, the second reopened and the third kept
        """
        lines = [
            "* IN_PROGRESS Task A",
            "  - [X] one",
            "  - [X] two",
            "",
            "* DONE Task B",
            "  - [X] one",
            "  - [ ] two",
            "",
            "* ABANDONED Task C",
            "  - [ ] one",
            "  - [X] two",
        ]
        transitions = compute_heading_transitions(lines)

        assert transitions.to_mark_done == [0]
        assert transitions.to_reopen == [4]
        assert transitions.done_keyword == "DONE"
        assert transitions.reopen_keyword == "IN_PROGRESS"

    def test_open_subtask_blocks_completion(self) -> None:
        lines = [
            "* IN_PROGRESS Parent",
            "  - [X] one",
            "  - [X] two",
            "  ** TODO Child still todo",
        ]
        assert compute_heading_transitions(lines).to_mark_done == []

    def test_nested_checkboxes_count(self) -> None:
        lines = ["* TODO Trip", "- [X] Pack", "  - [ ] Socks"]
        assert not compute_heading_transitions(lines)

    def test_completed_child_task_counts_its_boxes(self) -> None:
        lines = [
            "* TODO Parent",
            "** DONE Child",
            "   - [X] a",
        ]
        transitions = compute_heading_transitions(lines)

        assert transitions.to_mark_done == [0]
        assert transitions.to_reopen == []

    @pytest.mark.parametrize(
        "lines",
        [
            ["* TODO No checklist", "body"],
            ["* Notes", "- [X] a"],
            ["* [2026-01-15 Thu]", "- [X] a"],
            ["* DONE Finished", "- [X] a"],
        ],
        ids=["no-boxes", "plain-heading", "day-heading", "already-done"],
    )
    def test_nothing_to_do(self, lines) -> None:
        assert not compute_heading_transitions(lines)

    def test_custom_states(self) -> None:
        registry = create_workflow_registry(
            [
                {"keyword": "NEXT"},
                {"keyword": "WAIT"},
                {"keyword": "SHIPPED", "isDoneLike": True, "stampsClosed": True},
            ]
        )
        lines = ["* SHIPPED Release", "  - [ ] notes"]
        transitions = compute_heading_transitions(lines, registry)

        assert transitions.to_reopen == [0]
        assert transitions.reopen_keyword == "WAIT"


class TestKeywords:
    """Tests for done_keyword and reopen_keyword."""

    def test_defaults(self) -> None:
        assert done_keyword(DEFAULT_REGISTRY) == "DONE"
        assert reopen_keyword(DEFAULT_REGISTRY, "DONE") == "IN_PROGRESS"

    def test_without_closed_stamping_state(self) -> None:
        registry = create_workflow_registry(
            [{"keyword": "OPEN"}, {"keyword": "SHUT", "isDoneLike": True}]
        )

        assert done_keyword(registry) == "SHUT"
        assert reopen_keyword(registry, "SHUT") == "OPEN"

    def test_without_done_state(self) -> None:
        registry = create_workflow_registry([{"keyword": "OPEN"}])

        assert done_keyword(registry) is None
        assert not compute_heading_transitions(["* OPEN Task", "- [X] a"], registry)


class TestApplyHeadingTransitions:
    """Tests for apply_heading_transitions."""

    def test_done_is_stamped_and_reopen_unstamped(self) -> None:
        """
        Given one task to complete and one to reopen
        When the transitions are applied
        Then CLOSED is added to the first and removed from the second
        """
        lines = [
            "* TODO Pack",
            "  - [X] socks",
            "* DONE Book",
            "  " + CLOSED,
            "  - [ ] hotel",
        ]
        updated = apply_heading_transitions(
            lines, compute_heading_transitions(lines), now=NOW
        )

        assert updated == [
            "* DONE Pack",
            "  " + CLOSED,
            "  - [X] socks",
            "* IN_PROGRESS Book",
            "  - [ ] hotel",
        ]

    def test_continued_task_drops_forwarded_copy(self) -> None:
        lines = [
            "* [2026-01-15 Thu] ----",
            "  * CONTINUED Call mom",
            "    - [X] dial",
            "",
            "* [2026-01-16 Fri]" + DAY_HEADING_SEPARATOR,
            "  * TODO Call mom",
            "    SCHEDULED: <2026-01-16 Fri>",
        ]
        updated = apply_heading_transitions(
            lines, compute_heading_transitions(lines), now=NOW
        )

        assert updated[1:3] == ["  * DONE Call mom", "    " + CLOSED]
        assert "  * TODO Call mom" not in updated

    def test_no_transitions(self) -> None:
        lines = ["* TODO Task"]
        assert apply_heading_transitions(lines, HeadingTransitions()) == lines
