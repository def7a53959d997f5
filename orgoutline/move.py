"""
Whole-subtree reordering.

A block is a node plus everything block_extent() gives it. Moving swaps the
block with its neighbouring sibling block; any lines sitting between the two
(blank lines, stray text) stay between them. Any line under a heading,
checklist items included, moves the heading's block. List items only move on
their own in a list that sits outside every heading.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from orgoutline.outline import (
    Node,
    block_extent,
    indent_width,
    is_blank,
    is_day_heading,
    nearest_enclosing_node,
    node_at,
)
from orgoutline.workflow import WorkflowRegistry

logger = logging.getLogger(__name__)

DIRECTIONS = ("up", "down")


###############################################################################
###############################################################################
#
@dataclass
class MoveResult:
    """Outcome of a move: the full new line list plus where things landed."""

    updated_lines: list[str]
    new_cursor_line: int
    new_start_line: int
    new_selection_start_line: int | None = None
    new_selection_end_line: int | None = None  # Exclusive


# =============================================================================
# Sibling Search
# =============================================================================


###############################################################################
#
def _relation(root: Node, lines: Sequence[str], index: int, registry) -> str:
    """
    Classify a line relative to a root when searching for siblings.

    Returns:
        "sibling", "boundary" (search must stop here) or "skip"
    """
    line = lines[index]
    node = node_at(lines, index, registry)

    if root.is_heading:
        if node is None or not node.is_heading:
            return "skip"
        if node.rank > root.rank:
            return "skip"
        if node.rank == root.rank and not is_day_heading(line):
            return "sibling"
        return "boundary"

    if node is not None and node.is_heading:
        return "boundary"
    if node is not None:
        if node.indent == root.indent:
            return "sibling"
        return "skip" if node.indent > root.indent else "boundary"
    if not is_blank(line) and indent_width(line) < root.indent:
        return "boundary"
    return "skip"


###############################################################################
#
def _find_previous_sibling(
    lines: Sequence[str], root: Node, registry
) -> int | None:
    for i in range(root.index - 1, -1, -1):
        match _relation(root, lines, i, registry):
            case "sibling":
                return i
            case "boundary":
                return None
    return None


###############################################################################
#
def _find_next_sibling(
    lines: Sequence[str], root: Node, from_index: int, registry
) -> int | None:
    for i in range(from_index, len(lines)):
        match _relation(root, lines, i, registry):
            case "sibling":
                return i
            case "boundary":
                return None
    return None


###############################################################################
#
def _resolve_root(
    lines: Sequence[str], cursor_line, direction: str, registry
) -> Node | None:
    if not lines or direction not in DIRECTIONS:
        return None
    if not isinstance(cursor_line, int) or cursor_line < 0:
        return None
    root = nearest_enclosing_node(lines, cursor_line, registry)
    if root is not None and not root.is_heading:
        # Inside a heading's block the heading owns every line, list items too
        root = _enclosing_heading(lines, root.index, registry) or root
    if root is None or is_day_heading(lines[root.index]):
        return None
    return root


###############################################################################
#
def _enclosing_heading(lines: Sequence[str], index: int, registry) -> Node | None:
    for i in range(index - 1, -1, -1):
        node = node_at(lines, i, registry)
        if node is not None and node.is_heading:
            return node
    return None


###############################################################################
#
def _swap_with_neighbour(
    lines: Sequence[str],
    root: Node,
    group_end: int,
    direction: str,
    registry,
) -> tuple[list[str], int, int] | None:
    """
    Swap the group ``[root.index, group_end)`` with its sibling block.

    Returns:
        ``(updated_lines, new_start_line, group_length)`` or None
    """
    start = root.index
    group = list(lines[start:group_end])

    if direction == "up":
        prev = _find_previous_sibling(lines, root, registry)
        if prev is None:
            return None
        prev_end = block_extent(lines, prev, registry).stop
        if prev_end > start:
            return None
        updated = (
            list(lines[:prev])
            + group
            + list(lines[prev_end:start])
            + list(lines[prev:prev_end])
            + list(lines[group_end:])
        )
        return updated, prev, len(group)

    nxt = _find_next_sibling(lines, root, group_end, registry)
    if nxt is None:
        return None
    next_block = list(lines[nxt : block_extent(lines, nxt, registry).stop])
    updated = (
        list(lines[:start])
        + next_block
        + list(lines[group_end:nxt])
        + group
        + list(lines[nxt + len(next_block) :])
    )
    return updated, start + len(next_block), len(group)


# =============================================================================
# Public API
# =============================================================================


###############################################################################
#
def compute_move_block_result(
    lines: Sequence[str],
    cursor_line: int,
    direction: str,
    registry: WorkflowRegistry | None = None,
) -> MoveResult | None:
    """
    Move the block around the cursor past its neighbouring sibling.

    Args:
        lines: Document lines
        cursor_line: Any line inside the block (heading, drawer, body, child)
        direction: "up" or "down"
        registry: Registry whose markers count as heading glyphs

    Returns:
        MoveResult, or None when there is nothing to move: the cursor is above
        the first node, sits on a day heading, or the block is already first
        or last among its siblings.

    Note:
        Day headings anchor their day's tasks. They are never moved and a task
        never moves across one.
    """
    root = _resolve_root(lines, cursor_line, direction, registry)
    if root is None:
        return None

    end = block_extent(lines, root.index, registry).stop
    swapped = _swap_with_neighbour(lines, root, end, direction, registry)
    if swapped is None:
        logger.debug("move %s: no sibling for line %d", direction, root.index)
        return None

    updated, new_start, _ = swapped
    offset = max(0, cursor_line - root.index)
    return MoveResult(
        updated_lines=updated,
        new_cursor_line=min(len(updated) - 1, new_start + offset),
        new_start_line=new_start,
    )


###############################################################################
#
def compute_move_block_range_result(
    lines: Sequence[str],
    selection_start: int,
    selection_end: int,
    direction: str,
    registry: WorkflowRegistry | None = None,
) -> MoveResult | None:
    """
    Move a run of consecutive sibling blocks as one group.

    Args:
        lines: Document lines
        selection_start: First selected line
        selection_end: Last selected line (inclusive)
        direction: "up" or "down"
        registry: Registry whose markers count as heading glyphs

    Returns:
        MoveResult including the new selection range, or None
    """
    if not lines:
        return None
    last = len(lines) - 1
    start_line = max(0, min(last, selection_start))
    end_line = max(0, min(last, selection_end))

    root = _resolve_root(lines, start_line, direction, registry)
    if root is None:
        return None

    group_end = block_extent(lines, root.index, registry).stop
    cursor = group_end
    while cursor <= end_line and cursor < len(lines):
        relation = _relation(root, lines, cursor, registry)
        if relation == "boundary":
            break
        if relation == "skip":
            cursor += 1
            continue
        group_end = block_extent(lines, cursor, registry).stop
        cursor = group_end

    swapped = _swap_with_neighbour(lines, root, group_end, direction, registry)
    if swapped is None:
        return None

    updated, new_start, group_length = swapped
    offset = max(0, start_line - root.index)
    return MoveResult(
        updated_lines=updated,
        new_cursor_line=min(len(updated) - 1, new_start + offset),
        new_start_line=new_start,
        new_selection_start_line=new_start,
        new_selection_end_line=new_start + group_length,
    )
