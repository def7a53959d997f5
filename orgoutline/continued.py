"""
Forwarding CONTINUED tasks to the next day.

A journal is a sequence of day headings (``* [2026-01-15 Thu] ----``), each
followed by that day's tasks. When a task enters a forwarding state, an open
copy of it is placed under the next calendar day, creating that day heading
if needed. When it leaves the state again, the copy is removed.
"""

import datetime
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from orgoutline.dates import (
    DEFAULT_DATE_FORMAT,
    format_date,
    get_accepted_date_formats,
    parse_date_strict,
    weekday_abbrev,
)
from orgoutline.headline import build_task_line, clean_task_text, split_heading
from orgoutline.outline import DAY_HEADING_REGEX, is_blank, is_heading_line
from orgoutline.planning import (
    INLINE_PLANNING_REGEX,
    get_immediate_planning_line,
    strip_inline_planning,
)
from orgoutline.workflow import DEFAULT_REGISTRY, WorkflowRegistry

logger = logging.getLogger(__name__)

DAY_HEADING_SEPARATOR = " " + "-" * 48

__all__ = [
    "DAY_HEADING_REGEX",
    "DayHeading",
    "build_day_heading",
    "compute_continued_forward",
    "compute_continued_removal",
    "find_containing_day_heading",
    "find_forwarded_task",
    "find_last_task_line_under_heading",
    "find_next_day_heading",
    "get_immediate_planning_line",
    "get_task_identifier",
    "strip_inline_planning",
]


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class DayHeading:
    index: int
    indent: str
    marker: str
    open_bracket: str
    date: str
    weekday: str
    time: str | None
    close_bracket: str
    suffix: str


###############################################################################
#
def _day_heading_at(lines: Sequence[str], index: int) -> DayHeading | None:
    match = DAY_HEADING_REGEX.match(lines[index] or "")
    if not match:
        return None
    return DayHeading(
        index=index,
        indent=match.group("indent"),
        marker=match.group("marker"),
        open_bracket=match.group("open"),
        date=match.group("date"),
        weekday=match.group("weekday"),
        time=match.group("time"),
        close_bracket=match.group("close"),
        suffix=match.group("suffix"),
    )


###############################################################################
#
def find_containing_day_heading(
    lines: Sequence[str], index: int
) -> DayHeading | None:
    """The nearest day heading at or above ``index``."""
    for i in range(min(index, len(lines) - 1), -1, -1):
        heading = _day_heading_at(lines, i)
        if heading:
            return heading
    return None


###############################################################################
#
def find_next_day_heading(
    lines: Sequence[str], after_index: int
) -> DayHeading | None:
    """The first day heading strictly below ``after_index``."""
    for i in range(max(0, after_index + 1), len(lines)):
        heading = _day_heading_at(lines, i)
        if heading:
            return heading
    return None


###############################################################################
#
def find_last_task_line_under_heading(
    lines: Sequence[str], heading_index: int
) -> int:
    """
    Last non-blank line of a day's section.

    Returns:
        Index of the last non-blank line before the next day heading (or end
        of document); the heading's own index when the day is empty
    """
    last = heading_index
    for i in range(heading_index + 1, len(lines)):
        if DAY_HEADING_REGEX.match(lines[i]):
            break
        if not is_blank(lines[i]):
            last = i
    return last


###############################################################################
#
def get_task_identifier(line: str, registry: WorkflowRegistry | None = None) -> str:
    """
    Keyword-independent signature of a task heading.

    Title and tags are kept; marker, keyword and planning stamps are dropped
    and whitespace is collapsed, so the same task matches across days.

    Examples:
        "** TODO Buy groceries :shopping:" -> "Buy groceries :shopping:"
        "** DONE Buy groceries SCHEDULED: <2026-01-15 Thu>" -> "Buy groceries"
    """
    text = clean_task_text(line or "", registry)
    text = INLINE_PLANNING_REGEX.sub(" ", text)
    return re.sub(r"\s+", " ", text).strip()


###############################################################################
#
def find_forwarded_task(
    lines: Sequence[str],
    next_day_index: int,
    identifier: str,
    registry: WorkflowRegistry | None = None,
) -> int | None:
    """
    Find a heading with ``identifier`` in the day section at ``next_day_index``.

    Returns:
        Line index, or None when that day has no such task
    """
    for i in range(next_day_index + 1, len(lines)):
        line = lines[i]
        if DAY_HEADING_REGEX.match(line):
            break
        if not is_heading_line(line, registry):
            continue
        if get_task_identifier(line, registry) == identifier:
            return i
    return None


###############################################################################
#
def build_day_heading(
    date: str,
    weekday: str,
    suffix: str = "",
    indent: str = "",
    marker: str = "*",
    open_bracket: str = "[",
    close_bracket: str = "]",
) -> str:
    """Render a day heading; an empty suffix gets the default dash separator."""
    return (
        f"{indent}{marker} {open_bracket}{date} {weekday}{close_bracket}"
        f"{suffix or DAY_HEADING_SEPARATOR}"
    )


###############################################################################
#
def _next_day(day: DayHeading, date_format: str) -> datetime.date | None:
    parsed = parse_date_strict(day.date, get_accepted_date_formats(date_format))
    if not parsed.is_valid:
        return None
    return parsed.date + datetime.timedelta(days=1)


###############################################################################
#
def _same_date(day: DayHeading | None, date: datetime.date, date_format: str) -> bool:
    if day is None:
        return False
    parsed = parse_date_strict(day.date, get_accepted_date_formats(date_format))
    return parsed.is_valid and parsed.date == date


###############################################################################
#
def _build_forwarded_lines(
    task_line: str,
    next_date: datetime.date,
    registry: WorkflowRegistry,
    date_format: str,
    body_indent: int,
    heading_marker_style: str,
) -> list[str]:
    parts = split_heading(task_line, registry)
    stars = parts.stars or "*" * parts.level
    text = strip_inline_planning(parts.text)
    keyword = registry.first_non_done_state() or registry.cycle_keywords()[0]

    heading = build_task_line(
        parts.indent, keyword, text, registry, heading_marker_style, stars
    )
    stamp = f"{format_date(next_date, date_format)} {weekday_abbrev(next_date)}"
    planning = f"{parts.indent}{' ' * body_indent}SCHEDULED: <{stamp}>"
    return [heading, planning]


###############################################################################
#
def compute_continued_forward(
    lines: Sequence[str],
    task_index: int,
    registry: WorkflowRegistry | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    body_indent: int = 2,
    heading_marker_style: str = "asterisks",
) -> list[str] | None:
    """
    Put an open copy of a task under the next calendar day.

    Args:
        lines: Document lines
        task_index: Index of the task heading being continued
        registry: Workflow registry (the copy gets its first open state)
        date_format: Layout for the new SCHEDULED stamp and day heading
        body_indent: Spaces between the heading indent and the planning line
        heading_marker_style: "asterisks" or "unicode"

    Returns:
        The new line list, or None when nothing changes: the task is not in a
        day section, the day's date does not parse, or the next day already
        holds the copy.

    Note:
        When the next day heading exists the copy goes after its last line.
        Otherwise a day heading styled like the current one (indent, marker,
        brackets) is created after the current day's last line.
    """
    registry = registry or DEFAULT_REGISTRY
    if not 0 <= task_index < len(lines):
        return None
    line = lines[task_index]
    if split_heading(line, registry) is None or DAY_HEADING_REGEX.match(line):
        return None

    current_day = find_containing_day_heading(lines, task_index)
    if current_day is None:
        logger.debug("forward: line %d is not under a day heading", task_index)
        return None
    next_date = _next_day(current_day, date_format)
    if next_date is None:
        return None

    forwarded = _build_forwarded_lines(
        lines[task_index],
        next_date,
        registry,
        date_format,
        body_indent,
        heading_marker_style,
    )
    identifier = get_task_identifier(lines[task_index], registry)
    next_day = find_next_day_heading(lines, current_day.index)
    updated = list(lines)

    if _same_date(next_day, next_date, date_format):
        if find_forwarded_task(lines, next_day.index, identifier, registry) is not None:
            return None
        insert_at = find_last_task_line_under_heading(lines, next_day.index) + 1
        updated[insert_at:insert_at] = forwarded
        return updated

    new_heading = build_day_heading(
        format_date(next_date, date_format),
        weekday_abbrev(next_date),
        indent=current_day.indent,
        marker=current_day.marker,
        open_bracket=current_day.open_bracket,
        close_bracket=current_day.close_bracket,
    )
    insert_at = find_last_task_line_under_heading(lines, current_day.index) + 1
    updated[insert_at:insert_at] = ["", new_heading, *forwarded]
    return updated


###############################################################################
#
def compute_continued_removal(
    lines: Sequence[str],
    task_index: int,
    registry: WorkflowRegistry | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> list[str] | None:
    """
    Delete the forwarded copy of a task from the next day.

    Returns:
        The new line list, or None when there is no copy to delete. The
        copy's planning line goes with it.
    """
    registry = registry or DEFAULT_REGISTRY
    if not 0 <= task_index < len(lines):
        return None

    current_day = find_containing_day_heading(lines, task_index)
    if current_day is None:
        return None
    next_date = _next_day(current_day, date_format)
    next_day = find_next_day_heading(lines, current_day.index)
    if next_date is None or not _same_date(next_day, next_date, date_format):
        return None

    identifier = get_task_identifier(lines[task_index], registry)
    index = find_forwarded_task(lines, next_day.index, identifier, registry)
    if index is None:
        return None

    end = index + 1
    if get_immediate_planning_line(lines, index) is not None:
        end += 1
    return list(lines[:index]) + list(lines[end:])
