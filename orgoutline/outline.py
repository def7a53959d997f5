"""
Outline and indentation model.

There is no parse tree: every structural fact (depth, block extent, enclosing
node) is recomputed from the line list each time it is asked for. A node is
just a line index plus what its marker says about it.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from orgoutline.workflow import DEFAULT_REGISTRY, WorkflowRegistry

LIST_ITEM_REGEX = re.compile(r"^(\s*)([-+]|\d+[.)])(\s+|$)")

# A day heading's title is itself a date, e.g. "* [2026-01-15 Thu] ------"
DAY_HEADING_REGEX = re.compile(
    r"^(?P<indent>\s*)(?P<marker>\*+|[⊙⊘⊜⊖⊗])\s*"
    r"(?P<open>[\[<])(?P<date>\d{2,4}-\d{2}-\d{2,4})\s+(?P<weekday>[A-Za-z]{3})"
    r"(?:\s+(?P<time>\d{1,2}:\d{2}))?(?P<close>[\]>])(?P<suffix>.*)$"
)

# =============================================================================
# Line Edits
# =============================================================================


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class LineEdit:
    """Replacement of one whole line."""

    line_index: int
    new_text: str


###############################################################################
#
def apply_line_edits(lines: Sequence[str], edits: Iterable[LineEdit]) -> list[str]:
    """
    Apply whole-line replacements to a copy of ``lines``.

    Args:
        lines: Snapshot the edits were computed from
        edits: Replacements; out-of-range indices are ignored

    Returns:
        New list of lines
    """
    updated = list(lines)
    for edit in edits:
        if 0 <= edit.line_index < len(updated):
            updated[edit.line_index] = edit.new_text
    return updated


# =============================================================================
# Line Classification
# =============================================================================


###############################################################################
#
def heading_line_regex(registry: WorkflowRegistry | None = None) -> re.Pattern:
    """
    Regex for a heading line under either marker style.

    Groups: (1) indentation, (2) the marker run (``***`` or a repeated glyph).
    """
    registry = registry or DEFAULT_REGISTRY
    runs = ["\\*+"] + [f"(?:{re.escape(m)})+" for m in registry.markers()]
    return re.compile(f"^(\\s*)({'|'.join(runs)})\\s+\\S")


_DEFAULT_HEADING_REGEX = heading_line_regex()


###############################################################################
#
def _heading_match(line: str, registry: WorkflowRegistry | None):
    regex = (
        heading_line_regex(registry) if registry else _DEFAULT_HEADING_REGEX
    )
    return regex.match(line or "")


###############################################################################
#
def indent_width(line: str) -> int:
    return len(line or "") - len((line or "").lstrip())


###############################################################################
#
def is_blank(line: str) -> bool:
    return not (line or "").strip()


###############################################################################
#
def is_heading_line(line: str, registry: WorkflowRegistry | None = None) -> bool:
    return _heading_match(line, registry) is not None


###############################################################################
#
def is_list_item_line(line: str) -> bool:
    return LIST_ITEM_REGEX.match(line or "") is not None


###############################################################################
#
def is_day_heading(line: str) -> bool:
    return DAY_HEADING_REGEX.match(line or "") is not None


###############################################################################
#
def depth_of(line: str, registry: WorkflowRegistry | None = None) -> int | None:
    """
    Structural depth of a line.

    Args:
        line: Line text
        registry: Registry whose markers count as heading glyphs

    Returns:
        Number of repeated marker characters for a heading, leading
        whitespace width for a list item, None for any other line
    """
    match = _heading_match(line, registry)
    if match:
        run = match.group(2)
        glyph = run[0]
        return len(run) if glyph == "*" else run.count(glyph)
    if is_list_item_line(line):
        return indent_width(line)
    return None


# =============================================================================
# Nodes
# =============================================================================


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class Node:
    """A heading or list item found at a line index."""

    index: int
    kind: str  # "heading" or "item"
    level: int  # Marker count for headings, indentation for list items
    indent: int

    ###########################################################################
    #
    @property
    def rank(self) -> tuple[int, int]:
        """
        Ordering key for headings.

        Two headings with the same marker count nest by indentation, so
        ``  * TODO task`` sits inside ``* [2026-01-15 Thu]``.
        """
        return (self.level, self.indent)

    ###########################################################################
    #
    @property
    def is_heading(self) -> bool:
        return self.kind == "heading"


###############################################################################
#
def node_at(
    lines: Sequence[str], index: int, registry: WorkflowRegistry | None = None
) -> Node | None:
    """Return the Node at ``index`` or None if that line is not a node."""
    if index < 0 or index >= len(lines):
        return None
    line = lines[index]
    depth = depth_of(line, registry)
    if depth is None:
        return None
    kind = "heading" if is_heading_line(line, registry) else "item"
    return Node(index=index, kind=kind, level=depth, indent=indent_width(line))


###############################################################################
#
def nearest_enclosing_node(
    lines: Sequence[str],
    cursor_index: int,
    registry: WorkflowRegistry | None = None,
) -> Node | None:
    """
    Walk upward from the cursor to the closest heading or list item.

    Args:
        lines: Document lines
        cursor_index: Any line inside a block
        registry: Registry whose markers count as heading glyphs

    Returns:
        The Node that owns the cursor line, or None above the first node
    """
    if not lines:
        return None
    start = min(cursor_index, len(lines) - 1)
    for i in range(start, -1, -1):
        node = node_at(lines, i, registry)
        if node is not None:
            return node
    return None


###############################################################################
#
def ends_block(
    root: Node, line: str, registry: WorkflowRegistry | None = None
) -> bool:
    """
    Whether ``line`` lies outside the block rooted at ``root``.

    Heading blocks end at the next heading whose rank is not greater than the
    root's. List-item blocks end at any heading and at the next non-blank
    line indented no deeper than the item.
    """
    match = _heading_match(line, registry)
    if root.is_heading:
        if not match:
            return False
        other = (depth_of(line, registry), indent_width(line))
        return other <= root.rank
    if match:
        return True
    return not is_blank(line) and indent_width(line) <= root.indent


###############################################################################
#
def block_extent(
    lines: Sequence[str],
    root_index: int,
    registry: WorkflowRegistry | None = None,
) -> range:
    """
    Line range owned by the node at ``root_index``.

    Args:
        lines: Document lines
        root_index: Index of the root line
        registry: Registry whose markers count as heading glyphs

    Returns:
        ``range(root_index, end)`` covering the root and every deeper line
        (drawers, planning, body text and nested nodes). A line that is not a
        node owns only itself; an out-of-range index owns nothing.
    """
    if root_index < 0 or root_index >= len(lines):
        return range(0)
    root = node_at(lines, root_index, registry)
    if root is None:
        return range(root_index, root_index + 1)

    end = len(lines)
    for i in range(root_index + 1, len(lines)):
        if ends_block(root, lines[i], registry):
            end = i
            break

    # Trailing blank lines of a list item belong to whatever follows it
    if not root.is_heading:
        while end - 1 > root_index and is_blank(lines[end - 1]):
            end -= 1
    return range(root_index, end)
