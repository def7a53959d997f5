"""
Task-state transitions.

A transition rewrites the heading's keyword and then applies the side
effects the target state asks for: repeating tasks advance and reopen,
CLOSED-stamping states record a CLOSED timestamp, and forwarding states put
a copy of the task under the next day.
"""

import datetime
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from orgoutline.continued import compute_continued_forward, compute_continued_removal
from orgoutline.dates import (
    DEFAULT_DATE_FORMAT,
    format_date,
    get_accepted_date_formats,
    weekday_abbrev,
)
from orgoutline.headline import build_task_line, clean_task_text, split_heading
from orgoutline.outline import indent_width, is_day_heading
from orgoutline.planning import (
    Planning,
    build_planning_body,
    get_immediate_planning_line,
    get_planning_for_heading,
    parse_planning_from_text,
    process_repeater_on_done,
    replace_stamp_content,
    strip_inline_planning,
)
from orgoutline.workflow import DEFAULT_REGISTRY, WorkflowRegistry, normalize_keyword

logger = logging.getLogger(__name__)

CLOSED_STAMP_REGEX = re.compile(r"\s*\b(?:CLOSED|COMPLETED):\s*\[[^\]]*\]")
PROPERTY_REGEX = re.compile(r"^\s*:(?P<name>[^:\s]+):\s*(?P<value>.*?)\s*$")

__all__ = [
    "StateChange",
    "build_closed_stamp",
    "build_task_line",
    "clean_task_text",
    "compute_todo_state_change",
    "get_heading_property",
    "rotate_todo_state",
]


###############################################################################
###############################################################################
#
@dataclass
class StateChange:
    updated_lines: list[str]
    previous_keyword: str | None
    effective_keyword: str
    repeated: bool = False


###############################################################################
#
def _closed_timestamp(date_format: str, now: datetime.datetime) -> str:
    return (
        f"{format_date(now.date(), date_format)} {weekday_abbrev(now.date())} "
        f"{now:%H:%M}"
    )


###############################################################################
#
def build_closed_stamp(
    indent: str,
    date_format: str = DEFAULT_DATE_FORMAT,
    now: datetime.datetime | None = None,
    body_indent: int = 2,
) -> str:
    """
    Render a CLOSED planning line.

    Examples:
        ("", "YYYY-MM-DD", 2026-01-10 14:30, 2) -> "  CLOSED: [2026-01-10 Sat 14:30]"
    """
    now = now or datetime.datetime.now()
    return f"{indent}{' ' * body_indent}CLOSED: [{_closed_timestamp(date_format, now)}]"


###############################################################################
#
def get_heading_property(
    lines: Sequence[str], heading_index: int, name: str
) -> str | None:
    """
    Read a property from the drawer directly under a heading.

    The drawer may follow the planning line. Only the heading's own drawer is
    consulted.
    """
    i = heading_index + 1
    if get_immediate_planning_line(lines, heading_index) is not None:
        i += 1
    if i >= len(lines) or lines[i].strip().upper() != ":PROPERTIES:":
        return None

    for line in lines[i + 1 :]:
        if line.strip().upper() == ":END:":
            break
        match = PROPERTY_REGEX.match(line)
        if match and match.group("name").upper() == name.upper():
            return match.group("value")
    return None


###############################################################################
#
def _repeat_to_state(
    lines: Sequence[str], index: int, registry: WorkflowRegistry
) -> str | None:
    keyword = normalize_keyword(get_heading_property(lines, index, "REPEAT_TO_STATE"))
    if (
        keyword
        and registry.is_known_state(keyword)
        and not registry.is_done_like(keyword)
    ):
        return keyword
    return registry.first_non_done_state()


###############################################################################
#
def _remove_closed(line: str) -> str:
    return CLOSED_STAMP_REGEX.sub("", line).rstrip()


###############################################################################
#
def _write_planning_line(
    updated: list[str],
    index: int,
    indent: str,
    body_indent: int,
    planning_line: tuple[int, str] | None,
) -> tuple[int, str]:
    # Merge the heading's inline stamps into the planning line below it
    body = build_planning_body(get_planning_for_heading(updated, index))
    if planning_line is None:
        text = f"{indent}{' ' * body_indent}{body}"
        updated.insert(index + 1, text)
        return index + 1, text
    at, old = planning_line
    text = old[: indent_width(old)] + body
    updated[at] = text
    return at, text


###############################################################################
#
def compute_todo_state_change(
    lines: Sequence[str],
    index: int,
    target_keyword: str,
    registry: WorkflowRegistry | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    body_indent: int = 2,
    heading_marker_style: str = "asterisks",
    now: datetime.datetime | None = None,
) -> StateChange | None:
    """
    Set the keyword of the heading at ``index`` and apply side effects.

    Args:
        lines: Document lines
        index: Heading line index
        target_keyword: Keyword to move to (case-insensitive)
        registry: Workflow registry
        date_format: Layout for CLOSED stamps and advanced dates
        body_indent: Spaces between the heading indent and a new planning line
        heading_marker_style: "asterisks" or "unicode"
        now: Transition time (default: now)

    Returns:
        StateChange, or None when the line is not a task-capable heading or
        the target keyword is unknown

    Note:
        1. A repeating task that reaches a done-like state from an open one
           advances its SCHEDULED / DEADLINE stamps and reopens, in the state
           named by its ``:REPEAT_TO_STATE:`` property or in the first open
           state. No CLOSED stamp is written.
        2. Entering a CLOSED-stamping state records CLOSED in the planning line
           below the heading, creating that line when there is none. Leaving
           such a state removes the stamp and the line if nothing else is left
           on it.
        3. Entering a forwarding state forwards the task to the next day;
           leaving it removes the forwarded copy.

        Stamps written inline on the heading are moved into the planning line
        below it when the heading is rebuilt.
    """
    registry = registry or DEFAULT_REGISTRY
    now = now or datetime.datetime.now()
    if not 0 <= index < len(lines) or is_day_heading(lines[index]):
        return None
    parts = split_heading(lines[index], registry)
    target = normalize_keyword(target_keyword)
    if parts is None or not registry.is_known_state(target):
        return None

    current = parts.keyword
    effective = target
    repeated = False
    updated = list(lines)
    planning_line = get_immediate_planning_line(lines, index)

    outcome = None
    if registry.is_done_like(target) and not registry.is_done_like(current):
        outcome = process_repeater_on_done(
            get_planning_for_heading(lines, index),
            date_format,
            get_accepted_date_formats(date_format),
            now.date(),
        )
        if outcome.had_repeater:
            effective = _repeat_to_state(lines, index, registry) or target
            repeated = True

    text = parts.text
    if parse_planning_from_text(text) != Planning():
        text = strip_inline_planning(text)
        planning_line = _write_planning_line(
            updated, index, parts.indent, body_indent, planning_line
        )

    stars = parts.stars or "*" * parts.level
    updated[index] = build_task_line(
        parts.indent, effective, text, registry, heading_marker_style, stars
    )

    if repeated:
        for keyword, content in (
            ("SCHEDULED", outcome.planning.scheduled),
            ("DEADLINE", outcome.planning.deadline),
        ):
            if not content:
                continue
            if planning_line and f"{keyword}:" in planning_line[1]:
                at = planning_line[0]
            else:
                at = index
            updated[at] = replace_stamp_content(updated[at], keyword, content)

    elif registry.stamps_closed(effective) and not registry.stamps_closed(current):
        closed_line = build_closed_stamp(parts.indent, date_format, now, body_indent)
        if planning_line is None:
            updated.insert(index + 1, closed_line)
        else:
            at, text = planning_line
            cleaned = _remove_closed(text)
            if cleaned.strip():
                updated[at] = f"{cleaned}  {closed_line.strip()}"
            else:
                updated[at] = closed_line

    elif registry.stamps_closed(current) and not registry.stamps_closed(effective):
        if planning_line and CLOSED_STAMP_REGEX.search(planning_line[1]):
            at, text = planning_line
            remaining = _remove_closed(text)
            if remaining.strip():
                updated[at] = remaining
            else:
                del updated[at]

    # Forwarding edits land in a later day section, below everything above
    if registry.triggers_forward(effective) and not registry.triggers_forward(current):
        forwarded = compute_continued_forward(
            updated, index, registry, date_format, body_indent, heading_marker_style
        )
        updated = forwarded or updated
    elif registry.triggers_forward(current) and not registry.triggers_forward(
        effective
    ):
        removed = compute_continued_removal(updated, index, registry, date_format)
        updated = removed or updated

    logger.debug("line %d: %s -> %s", index, current, effective)
    return StateChange(
        updated_lines=updated,
        previous_keyword=current,
        effective_keyword=effective,
        repeated=repeated,
    )


###############################################################################
#
def rotate_todo_state(
    lines: Sequence[str],
    index: int,
    direction: str = "right",
    registry: WorkflowRegistry | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    body_indent: int = 2,
    heading_marker_style: str = "asterisks",
    now: datetime.datetime | None = None,
) -> StateChange | None:
    """Move the heading one step through the cycle ("right" or "left")."""
    registry = registry or DEFAULT_REGISTRY
    if not 0 <= index < len(lines):
        return None
    parts = split_heading(lines[index], registry)
    if parts is None:
        return None
    target = registry.rotate(parts.keyword, direction)
    return compute_todo_state_change(
        lines,
        index,
        target,
        registry,
        date_format,
        body_indent,
        heading_marker_style,
        now,
    )
