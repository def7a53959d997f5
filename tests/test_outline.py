"""Tests for the outline and indentation model."""

import pytest

from orgoutline.outline import (
    LineEdit,
    apply_line_edits,
    block_extent,
    depth_of,
    is_day_heading,
    is_heading_line,
    is_list_item_line,
    nearest_enclosing_node,
)
from orgoutline.workflow import create_workflow_registry

DOC = [
    "* [2026-01-15 Thu] ----",  # 0
    "  * TODO Task A",  # 1
    "    :PROPERTIES:",  # 2
    "    :ID: a",  # 3
    "    :END:",  # 4
    "    Some notes",  # 5
    "    - [ ] one",  # 6
    "      - [ ] one.a",  # 7
    "    - [ ] two",  # 8
    "  * TODO Task B",  # 9
    "",  # 10
    "* [2026-01-16 Fri] ----",  # 11
]


class TestLineClassification:
    """Tests for heading, list item and depth detection."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("* Heading", 1),
            ("*** Deep", 3),
            ("  * TODO indented task", 1),
            ("- item", 0),
            ("    + item", 4),
            ("  1. numbered", 2),
            ("  2) numbered", 2),
            ("plain text", None),
            ("", None),
            ("-----", None),
        ],
    )
    def test_depth_of(self, line, expected) -> None:
        assert depth_of(line) == expected

    def test_marker_glyph_headings(self) -> None:
        assert is_heading_line("⊙ TODO Task")
        assert depth_of("⊙⊙ TODO Subtask") == 2

    def test_custom_marker_needs_registry(self) -> None:
        reg = create_workflow_registry([{"keyword": "NEXT", "marker": "→"}])

        assert not is_heading_line("→ NEXT Task")
        assert is_heading_line("→ NEXT Task", reg)
        assert depth_of("→→ NEXT Task", reg) == 2

    def test_star_is_always_a_heading(self) -> None:
        assert is_heading_line("    * looks like a bullet")
        assert not is_list_item_line("    * looks like a bullet")

    def test_heading_needs_text(self) -> None:
        assert not is_heading_line("*")
        assert not is_heading_line("**bold**")

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("* [2026-01-15 Thu] ----", True),
            ("⊙ <2026-01-15 Thu 09:00>", True),
            ("  * [01-15-2026 Thu]", True),
            ("* TODO [2026-01-15 Thu]", False),
            ("* Meeting notes", False),
        ],
    )
    def test_is_day_heading(self, line, expected) -> None:
        assert is_day_heading(line) is expected


class TestBlockExtent:
    """Tests for block_extent."""

    def test_heading_block_includes_drawer_body_and_children(self) -> None:
        assert block_extent(DOC, 1) == range(1, 9)

    def test_heading_block_ends_at_same_rank_heading(self) -> None:
        # Task B runs up to the next day heading; its trailing blank is kept
        assert block_extent(DOC, 9) == range(9, 11)

    def test_day_heading_owns_its_tasks(self) -> None:
        assert block_extent(DOC, 0) == range(0, 11)

    def test_list_item_block(self) -> None:
        assert block_extent(DOC, 6) == range(6, 8)
        assert block_extent(DOC, 8) == range(8, 9)

    def test_list_item_block_drops_trailing_blanks(self) -> None:
        lines = ["- a", "  - b", "", "- c"]
        assert block_extent(lines, 0) == range(0, 2)

    def test_list_item_ends_at_heading(self) -> None:
        lines = ["- a", "  continued", "* Heading"]
        assert block_extent(lines, 0) == range(0, 2)

    def test_non_node_owns_itself(self) -> None:
        assert block_extent(DOC, 5) == range(5, 6)

    def test_out_of_range(self) -> None:
        assert block_extent(DOC, 99) == range(0)
        assert block_extent(DOC, -1) == range(0)

    def test_asterisk_levels(self) -> None:
        lines = ["* A", "** A.1", "*** A.1.a", "** A.2", "* B"]

        assert block_extent(lines, 0) == range(0, 4)
        assert block_extent(lines, 1) == range(1, 3)


class TestNearestEnclosingNode:
    """Tests for nearest_enclosing_node."""

    @pytest.mark.parametrize("cursor", [1, 2, 3, 4, 5])
    def test_resolves_to_task_heading(self, cursor) -> None:
        node = nearest_enclosing_node(DOC, cursor)

        assert node.index == 1
        assert node.is_heading
        assert node.rank == (1, 2)

    def test_resolves_to_list_item(self) -> None:
        node = nearest_enclosing_node(DOC, 7)

        assert node.index == 7
        assert node.kind == "item"
        assert node.indent == 6

    def test_above_first_node(self) -> None:
        assert nearest_enclosing_node(["text", "* Heading"], 0) is None

    def test_empty_document(self) -> None:
        assert nearest_enclosing_node([], 0) is None


class TestApplyLineEdits:
    """Tests for apply_line_edits."""

    def test_returns_new_list(self) -> None:
        lines = ["a", "b", "c"]
        updated = apply_line_edits(lines, [LineEdit(1, "B"), LineEdit(7, "x")])

        assert updated == ["a", "B", "c"]
        assert lines == ["a", "b", "c"]
