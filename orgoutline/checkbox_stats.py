"""
Checkbox statistics and ``[n/m]`` / ``[p%]`` cookies.

Statistics are always computed from the current lines. Writing the numbers
back into cookies is a separate, explicit pass (compute_cookie_update_edits)
that callers run after a toggle or a move.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple

from orgoutline.outline import (
    LineEdit,
    block_extent,
    depth_of,
    heading_line_regex,
    indent_width,
    is_heading_line,
    is_list_item_line,
)
from orgoutline.workflow import DEFAULT_REGISTRY, WorkflowRegistry

CHECKBOX_REGEX = re.compile(r"^\s*(?:[-+]|\d+[.)])\s+\[( |x|X|-)\](?:\s+|$)")
COOKIE_REGEX = re.compile(r"\[(\d+/\d+|\d+%|/|%)\]")

# Org headline tags: " :WORK:HOME:" at the very end of the line
TRAILING_TAGS_REGEX = re.compile(r"\s+:(?:[^:\s]+:)+\s*$")

COOKIE_MODES = ("fraction", "percent")


###############################################################################
###############################################################################
#
class CheckboxStats(NamedTuple):
    checked: int
    total: int


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class CheckboxCookie:
    """Location of a statistics cookie inside a line."""

    start: int
    end: int
    raw: str  # e.g. "[2/3]" or "[%]"
    mode: str  # "fraction" or "percent"


# =============================================================================
# Checkbox Lines
# =============================================================================


###############################################################################
#
def is_checkbox_line(line: str) -> bool:
    return CHECKBOX_REGEX.match(line or "") is not None


###############################################################################
#
def checkbox_mark(line: str) -> str | None:
    """The character between the brackets (" ", "x", "X" or "-"), if any."""
    match = CHECKBOX_REGEX.match(line or "")
    return match.group(1) if match else None


###############################################################################
#
def is_checkbox_checked(line: str) -> bool:
    return (checkbox_mark(line) or "").lower() == "x"


# =============================================================================
# Statistics
# =============================================================================


###############################################################################
#
def compute_hierarchical_checkbox_stats_in_range(
    lines: Sequence[str],
    start: int,
    end: int | None = None,
    parent_indent: int = -1,
) -> CheckboxStats:
    """
    Count direct-child checkboxes in a line range.

    Args:
        lines: Document lines
        start: First line of the range (inclusive)
        end: End of the range (exclusive); None means end of document
        parent_indent: -1 to count the shallowest checkboxes in the range
            (direct children of a heading), or the indentation of a list
            item to count the checkboxes one level below it

    Returns:
        CheckboxStats. A checkbox is counted as checked only when its own
        marker is ``[X]``; ``[-]`` never counts.
    """
    start = max(0, start)
    end = len(lines) if end is None else min(len(lines), end)

    indents = [
        indent_width(lines[i])
        for i in range(start, end)
        if is_checkbox_line(lines[i]) and indent_width(lines[i]) > parent_indent
    ]
    if not indents:
        return CheckboxStats(0, 0)

    child_indent = min(indents)
    checked = total = 0
    for i in range(start, end):
        line = lines[i]
        if not is_checkbox_line(line) or indent_width(line) != child_indent:
            continue
        total += 1
        if is_checkbox_checked(line):
            checked += 1
    return CheckboxStats(checked, total)


###############################################################################
#
def compute_checkbox_stats_by_heading_line(
    lines: Sequence[str], registry: WorkflowRegistry | None = None
) -> dict[int, CheckboxStats]:
    """
    Checkbox statistics for every heading in the document.

    Args:
        lines: Document lines
        registry: Registry whose markers count as heading glyphs

    Returns:
        Mapping of heading line index to the stats of the checkboxes that are
        its direct children, anywhere in the heading's extent
    """
    result: dict[int, CheckboxStats] = {}
    for i, line in enumerate(lines):
        if not is_heading_line(line, registry):
            continue
        extent = block_extent(lines, i, registry)
        result[i] = compute_hierarchical_checkbox_stats_in_range(
            lines, i + 1, extent.stop, -1
        )
    return result


###############################################################################
#
def compute_todo_stats_in_range(
    lines: Sequence[str],
    start: int,
    end: int | None = None,
    registry: WorkflowRegistry | None = None,
) -> CheckboxStats:
    """Count task headings in a range; done-like ones count as checked."""
    registry = registry or DEFAULT_REGISTRY
    task_regex = registry.build_task_heading_regex()
    end = len(lines) if end is None else min(len(lines), end)

    checked = total = 0
    for i in range(max(0, start), end):
        line = lines[i]
        if not task_regex.match(line):
            continue
        keyword = registry.find_keyword(line)
        total += 1
        if registry.is_done_like(keyword) or registry.stamps_closed(keyword):
            checked += 1
    return CheckboxStats(checked, total)


###############################################################################
#
def compute_subtree_completion_stats_in_range(
    lines: Sequence[str],
    start: int,
    end: int | None = None,
    registry: WorkflowRegistry | None = None,
) -> CheckboxStats:
    """Checkbox and task-heading completion combined."""
    boxes = compute_hierarchical_checkbox_stats_in_range(lines, start, end, -1)
    todos = compute_todo_stats_in_range(lines, start, end, registry)
    return CheckboxStats(
        boxes.checked + todos.checked, boxes.total + todos.total
    )


# =============================================================================
# Cookies
# =============================================================================


###############################################################################
#
def has_checkbox_cookie(line: str) -> bool:
    return COOKIE_REGEX.search(line or "") is not None


###############################################################################
#
def find_checkbox_cookie(line: str) -> CheckboxCookie | None:
    """
    Locate the first statistics cookie in a line.

    Returns:
        CheckboxCookie with the span, raw text and mode, or None
    """
    match = COOKIE_REGEX.search(line or "")
    if not match:
        return None
    mode = "percent" if "%" in match.group(1) else "fraction"
    return CheckboxCookie(
        start=match.start(), end=match.end(), raw=match.group(0), mode=mode
    )


###############################################################################
#
def format_checkbox_stats(stats, mode: str = "fraction") -> str:
    """
    Render stats as a cookie.

    Args:
        stats: CheckboxStats or any ``(checked, total)`` pair
        mode: "fraction" for ``[c/t]``, "percent" for ``[p%]``

    Returns:
        Cookie text. Percent is floored and is 0 when total is 0.

    Examples:
        (2, 3), "fraction" -> "[2/3]"
        (2, 3), "percent"  -> "[66%]"
    """
    checked, total = stats
    if str(mode or "fraction").lower() == "percent":
        pct = (checked * 100) // total if total > 0 else 0
        return f"[{pct}%]"
    return f"[{checked}/{total}]"


###############################################################################
#
def upsert_checkbox_cookie_in_headline(line: str, mode: str = "fraction") -> str:
    """
    Insert a fresh cookie into a heading or list-item line.

    An existing cookie is replaced where it stands. Otherwise the cookie goes
    right before a trailing tag cluster, or at the end of the line. The
    counts are zero; compute_cookie_update_edits fills them in.
    """
    text = line or ""
    placeholder = format_checkbox_stats(CheckboxStats(0, 0), mode)

    cookie = find_checkbox_cookie(text)
    if cookie:
        return text[: cookie.start] + placeholder + text[cookie.end :]

    tags = TRAILING_TAGS_REGEX.search(text)
    if tags:
        before = text[: tags.start()].rstrip()
        return f"{before} {placeholder}{text[tags.start():]}"
    return f"{text.rstrip()} {placeholder}"


###############################################################################
#
def remove_checkbox_cookie_from_headline(line: str) -> str:
    """Delete the cookie token, keeping the rest of the line and its tags."""
    text = line or ""
    cookie = find_checkbox_cookie(text)
    if not cookie:
        return text

    before = text[: cookie.start].rstrip()
    after = text[cookie.end :].lstrip()
    joined = f"{before} {after}" if before and after else before + after
    return joined.rstrip()


###############################################################################
#
def replace_cookie_counts(line: str, stats: CheckboxStats) -> str:
    """Rewrite an existing cookie with new counts, keeping its mode."""
    cookie = find_checkbox_cookie(line)
    if not cookie:
        return line
    rendered = format_checkbox_stats(stats, cookie.mode)
    return line[: cookie.start] + rendered + line[cookie.end :]


###############################################################################
#
def compute_cookie_update_edits(
    lines: Sequence[str], registry: WorkflowRegistry | None = None
) -> list[LineEdit]:
    """
    Recompute every cookie in the document.

    Args:
        lines: Document lines
        registry: Registry whose markers count as heading glyphs

    Returns:
        Edits for the cookie-bearing lines whose text changes. Headings get
        the stats of their direct-child checkboxes; list items get the stats
        of the checkboxes nested directly under them.

    Note:
        This is a separate pass. Toggling and moving never touch cookies, so
        callers run this afterwards on the updated lines.
    """
    edits: list[LineEdit] = []
    heading_regex = heading_line_regex(registry)

    for i, line in enumerate(lines):
        if not has_checkbox_cookie(line):
            continue

        if heading_regex.match(line):
            extent = block_extent(lines, i, registry)
            stats = compute_hierarchical_checkbox_stats_in_range(
                lines, i + 1, extent.stop, -1
            )
        elif is_list_item_line(line):
            extent = block_extent(lines, i, registry)
            stats = compute_hierarchical_checkbox_stats_in_range(
                lines, i + 1, extent.stop, depth_of(line, registry)
            )
        else:
            continue

        updated = replace_cookie_counts(line, stats)
        if updated != line:
            edits.append(LineEdit(i, updated))
    return edits
