"""
Checkbox toggling with descendant and ancestor propagation.
"""

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from orgoutline.outline import (
    LineEdit,
    block_extent,
    indent_width,
    is_heading_line,
    is_list_item_line,
)
from orgoutline.workflow import WorkflowRegistry

logger = logging.getLogger(__name__)

CHECKBOX_ITEM_REGEX = re.compile(
    r"^(\s*)([-+]|\d+[.)])(\s+)\[( |x|X|-)\](\s+|$)(.*)$"
)
_STATE_SLOT_REGEX = re.compile(r"^(\s*(?:[-+]|\d+[.)])\s+\[)( |x|X|-)(\])")


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class CheckboxItem:
    indent: int
    bullet: str
    state: str  # " ", "x", "X" or "-"
    text: str

    ###########################################################################
    #
    @property
    def checked(self) -> bool:
        return self.state.lower() == "x"


###############################################################################
#
def parse_checkbox_item(line: str) -> CheckboxItem | None:
    """Parse a checkbox list item, or return None for any other line."""
    match = CHECKBOX_ITEM_REGEX.match(line or "")
    if not match:
        return None
    return CheckboxItem(
        indent=len(match.group(1)),
        bullet=match.group(2),
        state=match.group(4),
        text=match.group(6),
    )


###############################################################################
#
def set_checkbox_state(line: str, state: str) -> str:
    """
    Rewrite the character inside a checkbox.

    Args:
        line: A checkbox list item line
        state: " ", "X" or "-"

    Returns:
        The updated line; non-checkbox lines come back unchanged
    """
    if not CHECKBOX_ITEM_REGEX.match(line or ""):
        return line
    return _STATE_SLOT_REGEX.sub(
        lambda m: f"{m.group(1)}{state or ' '}{m.group(3)}", line, count=1
    )


###############################################################################
#
def _parent_list_item(
    lines: Sequence[str], child_index: int, registry: WorkflowRegistry | None
) -> int | None:
    # Walk up to the nearest list item indented less than the child. A
    # heading is the boundary: nothing above it is an ancestor.
    child_indent = indent_width(lines[child_index])
    for i in range(child_index - 1, -1, -1):
        line = lines[i]
        if is_heading_line(line, registry):
            return None
        if is_list_item_line(line) and indent_width(line) < child_indent:
            return i
    return None


###############################################################################
#
def _direct_child_states(
    lines: Sequence[str], start: int, end: int, parent_indent: int
) -> list[str]:
    items = [parse_checkbox_item(lines[i]) for i in range(start, end)]
    items = [item for item in items if item and item.indent > parent_indent]
    if not items:
        return []
    child_indent = min(item.indent for item in items)
    return [item.state for item in items if item.indent == child_indent]


###############################################################################
#
def _aggregate_state(states: list[str]) -> str:
    # A partial child is progress too, so its parent is at least partial
    checked = sum(1 for s in states if s.lower() == "x")
    if checked == len(states):
        return "X"
    if checked == 0 and "-" not in states:
        return " "
    return "-"


###############################################################################
#
def compute_checkbox_toggle_edits(
    lines: Sequence[str],
    line_index: int,
    registry: WorkflowRegistry | None = None,
) -> list[LineEdit]:
    """
    Toggle one checkbox and propagate the change.

    Args:
        lines: Document lines
        line_index: Index of the checkbox item to toggle
        registry: Registry whose markers count as heading glyphs

    Returns:
        Ordered list of LineEdit to apply as one batch. Empty when the index
        is out of range or the line is not a checkbox item.

    Note:
        ``[X]`` becomes ``[ ]``; ``[ ]`` and ``[-]`` become ``[X]``. The new
        state is pushed to every descendant checkbox. Each ancestor checkbox,
        up to the enclosing heading, is then recomputed from its direct
        children: all checked ``[X]``, none checked or partial ``[ ]``,
        otherwise ``[-]``. Cookies are not touched.
    """
    if not isinstance(line_index, int) or not 0 <= line_index < len(lines):
        return []
    item = parse_checkbox_item(lines[line_index])
    if item is None:
        return []

    working = list(lines)
    changed: dict[int, str] = {}

    def put(index: int, state: str) -> None:
        updated = set_checkbox_state(working[index], state)
        if updated != working[index]:
            working[index] = updated
            changed[index] = updated

    desired = " " if item.checked else "X"
    for i in block_extent(working, line_index, registry):
        if parse_checkbox_item(working[i]) is not None:
            put(i, desired)

    child = line_index
    while (parent := _parent_list_item(working, child, registry)) is not None:
        parent_item = parse_checkbox_item(working[parent])
        if parent_item is not None:
            extent = block_extent(working, parent, registry)
            states = _direct_child_states(
                working, parent + 1, extent.stop, parent_item.indent
            )
            if states:
                put(parent, _aggregate_state(states))
        child = parent

    return [LineEdit(i, changed[i]) for i in sorted(changed)]


###############################################################################
#
def compute_checkbox_bulk_toggle_edits(
    lines: Sequence[str], line_indexes: Iterable[int]
) -> list[LineEdit]:
    """
    Toggle an explicit selection of checkboxes to one common state.

    Args:
        lines: Document lines
        line_indexes: Selected line indexes; non-checkbox and out-of-range
            lines are ignored

    Returns:
        Edits for the selected checkbox lines only. The target is checked
        when any selected checkbox is not ``[X]``, otherwise unchecked.
    """
    selected = sorted(
        {
            i
            for i in line_indexes
            if 0 <= i < len(lines) and parse_checkbox_item(lines[i]) is not None
        }
    )
    if not selected:
        logger.debug("bulk toggle: no checkbox lines in selection")
        return []

    any_unchecked = any(not parse_checkbox_item(lines[i]).checked for i in selected)
    target = "X" if any_unchecked else " "

    edits = []
    for i in selected:
        updated = set_checkbox_state(lines[i], target)
        if updated != lines[i]:
            edits.append(LineEdit(i, updated))
    return edits
