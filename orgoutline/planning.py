"""
Planning lines (SCHEDULED / DEADLINE / CLOSED) and date shifting.

The planning line is the line directly below a heading. Older files may
also carry planning fragments inline on the heading itself; both are read,
but an edit only ever targets one of them.
"""

import datetime
import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace

from orgoutline.dates import (
    DEFAULT_DATE_FORMAT,
    format_date,
    get_accepted_date_formats,
    parse_date_strict,
    shift_timestamp_content,
    weekday_abbrev,
)
from orgoutline.outline import DAY_HEADING_REGEX, is_heading_line

logger = logging.getLogger(__name__)

PLANNING_KEYWORDS = ("SCHEDULED", "DEADLINE", "CLOSED", "COMPLETED")

PLANNING_LINE_REGEX = re.compile(
    r"^\s*(?:SCHEDULED|DEADLINE|CLOSED|COMPLETED):\s*[\[<]"
)
INLINE_PLANNING_REGEX = re.compile(
    r"\s*\b(?:SCHEDULED|DEADLINE|CLOSED|COMPLETED):\s*[\[<][^\]>]*[\]>]"
)

# Groups: (1) open bracket, (2) date, (3) weekday, (4) time start,
# (5) time end, (6) repeater, (7) warning period, (8) close bracket
SCHEDULED_REGEX = re.compile(
    r"SCHEDULED:\s*([\[<])(\d{2,4}-\d{2}-\d{2,4})(?:\s+([A-Za-z]{3}))?"
    r"(?:\s+(\d{1,2}:\d{2})(?:-(\d{1,2}:\d{2}))?)?"
    r"(?:\s+((?:\.\+|\+\+|\+)\d+[dwmy]))?"
    r"(?:\s+(--?\d+[dwmy]))?"
    r"\s*([\]>])"
)


###############################################################################
#
def _stamp_regex(keyword: str) -> re.Pattern:
    return re.compile(f"{keyword}:\\s*([\\[<])([^\\]>]+)([\\]>])")


_STAMP_REGEXES = {kw: _stamp_regex(kw) for kw in PLANNING_KEYWORDS}

# =============================================================================
# Reading Planning
# =============================================================================


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class Planning:
    """Timestamp bodies (text between the brackets) of a planning line."""

    scheduled: str | None = None
    deadline: str | None = None
    closed: str | None = None


###############################################################################
#
def is_planning_line(line) -> bool:
    return PLANNING_LINE_REGEX.match(line or "") is not None


###############################################################################
#
def parse_planning_from_text(text) -> Planning:
    """
    Read SCHEDULED, DEADLINE and CLOSED bodies from any text.

    Note:
        Legacy ``COMPLETED:`` stamps are read as CLOSED when no CLOSED stamp
        is present.
    """
    found = {}
    for keyword, regex in _STAMP_REGEXES.items():
        match = regex.search(text or "")
        found[keyword] = match.group(2).strip() if match else None

    return Planning(
        scheduled=found["SCHEDULED"],
        deadline=found["DEADLINE"],
        closed=found["CLOSED"] or found["COMPLETED"],
    )


###############################################################################
#
def get_immediate_planning_line(
    lines: Sequence[str], heading_index: int
) -> tuple[int, str] | None:
    """Return ``(index, text)`` of the planning line under a heading, or None."""
    index = heading_index + 1
    if 0 <= heading_index and index < len(lines) and is_planning_line(lines[index]):
        return index, lines[index]
    return None


###############################################################################
#
def get_planning_for_heading(lines: Sequence[str], heading_index: int) -> Planning:
    """Planning for a heading, preferring its planning line over inline text."""
    if not 0 <= heading_index < len(lines):
        return Planning()
    inline = parse_planning_from_text(lines[heading_index])
    below = get_immediate_planning_line(lines, heading_index)
    if below is None:
        return inline
    own = parse_planning_from_text(below[1])
    return Planning(
        scheduled=own.scheduled or inline.scheduled,
        deadline=own.deadline or inline.deadline,
        closed=own.closed or inline.closed,
    )


###############################################################################
#
def strip_inline_planning(text) -> str:
    """
    Remove planning fragments from heading text.

    Examples:
        "Task DEADLINE: <2026-01-20 Tue -3d> SCHEDULED: <2026-01-15>" -> "Task"
    """
    if not text:
        return ""
    return INLINE_PLANNING_REGEX.sub("", text).rstrip()


###############################################################################
#
def build_planning_body(planning: Planning) -> str:
    """
    Render the stamps of a Planning in SCHEDULED, DEADLINE, CLOSED order.

    SCHEDULED and DEADLINE are active (``<...>``), CLOSED is inactive.
    """
    parts = []
    if planning.scheduled:
        parts.append(f"SCHEDULED: <{planning.scheduled}>")
    if planning.deadline:
        parts.append(f"DEADLINE: <{planning.deadline}>")
    if planning.closed:
        parts.append(f"CLOSED: [{planning.closed}]")
    return "  ".join(parts)


###############################################################################
#
def replace_stamp_content(line: str, keyword: str, content: str) -> str:
    """Swap the body of one stamp in a line, keeping its brackets."""
    regex = _STAMP_REGEXES[keyword]
    return regex.sub(
        lambda m: f"{keyword}: {m.group(1)}{content}{m.group(3)}", line, count=1
    )


# =============================================================================
# Rescheduling
# =============================================================================


###############################################################################
#
def transform_scheduled_date(
    text: str,
    forward: bool,
    date_format: str = DEFAULT_DATE_FORMAT,
    accepted_formats=None,
) -> tuple[str | None, bool]:
    """
    Shift the SCHEDULED date in a line by one day.

    Args:
        text: Line text
        forward: True for +1 day, False for -1 day
        date_format: Layout for the new date
        accepted_formats: Layouts accepted when reading the old date

    Returns:
        ``(new_text, parse_error)``. ``new_text`` is None when the line has no
        SCHEDULED stamp or its date does not parse; ``parse_error`` is True
        only in the latter case. Brackets, time range, repeater and warning
        period are preserved; the weekday is refreshed if one was present.

    Examples:
        "SCHEDULED: [2026-01-10 Sat]" -> "SCHEDULED: [2026-01-11 Sun]"
    """
    match = SCHEDULED_REGEX.search(text or "")
    if not match:
        return None, False

    formats = accepted_formats or get_accepted_date_formats(date_format)
    parsed = parse_date_strict(match.group(2), formats)
    if not parsed.is_valid:
        return None, True

    new_date = parsed.date + datetime.timedelta(days=1 if forward else -1)
    body = format_date(new_date, date_format)
    if match.group(3) is not None:
        body += f" {weekday_abbrev(new_date)}"
    if match.group(4):
        body += f" {match.group(4)}"
        if match.group(5):
            body += f"-{match.group(5)}"
    if match.group(6):
        body += f" {match.group(6)}"
    if match.group(7):
        body += f" {match.group(7)}"

    replacement = f"SCHEDULED: {match.group(1)}{body}{match.group(8)}"
    return text[: match.start()] + replacement + text[match.end() :], False


###############################################################################
#
def shift_day_heading_date(
    text: str,
    forward: bool,
    date_format: str = DEFAULT_DATE_FORMAT,
    accepted_formats=None,
) -> tuple[str | None, bool]:
    """Same contract as transform_scheduled_date, for a day heading's date."""
    match = DAY_HEADING_REGEX.match(text or "")
    if not match:
        return None, False

    formats = accepted_formats or get_accepted_date_formats(date_format)
    parsed = parse_date_strict(
        f"{match.group('date')} {match.group('weekday')}", formats
    )
    if not parsed.is_valid:
        return None, True

    new_date = parsed.date + datetime.timedelta(days=1 if forward else -1)
    stamp = f"{format_date(new_date, date_format)} {weekday_abbrev(new_date)}"
    start, end = match.start("date"), match.end("weekday")
    return text[:start] + stamp + text[end:], False


###############################################################################
###############################################################################
#
@dataclass
class RescheduleResult:
    replacements: dict[int, str] = field(default_factory=dict)
    warned_parse: bool = False


###############################################################################
#
def _resolve_scheduled_target(get_line_text, line_count, line_number, registry):
    # A heading resolves to its planning line when that line carries
    # SCHEDULED; otherwise the heading's own inline stamp is used.
    text = get_line_text(line_number)
    if is_heading_line(text, registry) and line_number + 1 < line_count:
        below = get_line_text(line_number + 1)
        if is_planning_line(below) and SCHEDULED_REGEX.search(below):
            return line_number + 1, below
    return line_number, text


###############################################################################
#
def compute_reschedule_replacements(
    get_line_text: Callable[[int], str],
    line_count: int,
    target_lines: Iterable[int],
    forward: bool,
    date_format: str = DEFAULT_DATE_FORMAT,
    accepted_formats=None,
    registry=None,
    shift_day_headings: bool = False,
) -> RescheduleResult:
    """
    Shift the SCHEDULED date of every selected task by one day.

    Args:
        get_line_text: ``(line_number) -> text`` accessor
        line_count: Number of lines in the document
        target_lines: Selected line numbers
        forward: True for +1 day, False for -1 day
        date_format: Layout for new dates
        accepted_formats: Layouts accepted when reading old dates
        registry: Registry whose markers count as heading glyphs
        shift_day_headings: Also shift the date of selected day headings

    Returns:
        RescheduleResult. Each resolved line is shifted exactly once even if
        both a heading and its own planning line were selected. Lines whose
        date fails to parse are left alone and set ``warned_parse``.
    """
    formats = accepted_formats or get_accepted_date_formats(date_format)
    result = RescheduleResult()
    handled: set[int] = set()

    selected = sorted(
        {n for n in target_lines if 0 <= n < line_count}, reverse=True
    )
    for line_number in selected:
        if line_number in handled:
            continue

        text = get_line_text(line_number)
        if shift_day_headings and DAY_HEADING_REGEX.match(text or ""):
            target, source = line_number, text
            new_text, parse_error = shift_day_heading_date(
                text, forward, date_format, formats
            )
        else:
            target, source = _resolve_scheduled_target(
                get_line_text, line_count, line_number, registry
            )
            if target in handled:
                continue
            new_text, parse_error = transform_scheduled_date(
                source, forward, date_format, formats
            )

        if parse_error:
            logger.debug("reschedule: could not parse date on line %d", target)
            result.warned_parse = True
            continue
        if new_text is None:
            continue

        handled.add(target)
        if new_text != source:
            result.replacements[target] = new_text

    return result


###############################################################################
#
def compute_smart_date_replacements(
    get_line_text: Callable[[int], str],
    line_count: int,
    target_lines: Iterable[int],
    forward: bool,
    date_format: str = DEFAULT_DATE_FORMAT,
    accepted_formats=None,
    registry=None,
) -> RescheduleResult:
    """
    Like compute_reschedule_replacements, but day headings in the selection
    have their own date (and weekday) shifted too.
    """
    return compute_reschedule_replacements(
        get_line_text,
        line_count,
        target_lines,
        forward,
        date_format,
        accepted_formats,
        registry,
        shift_day_headings=True,
    )


# =============================================================================
# Repeaters
# =============================================================================


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class RepeaterOutcome:
    had_repeater: bool
    planning: Planning


###############################################################################
#
def process_repeater_on_done(
    planning: Planning,
    date_format: str = DEFAULT_DATE_FORMAT,
    accepted_formats=None,
    today: datetime.date | None = None,
) -> RepeaterOutcome:
    """
    Advance repeating SCHEDULED / DEADLINE stamps of a completed task.

    Args:
        planning: The task's current planning
        date_format: Layout for new dates
        accepted_formats: Layouts accepted when reading old dates
        today: Completion date

    Returns:
        RepeaterOutcome. ``had_repeater`` is True when at least one stamp
        carried a repeater and was advanced; the caller then puts the task
        back into an open state instead of leaving it done.
    """
    formats = accepted_formats or get_accepted_date_formats(date_format)
    updated = planning
    had_repeater = False

    for name in ("scheduled", "deadline"):
        content = getattr(planning, name)
        if not content:
            continue
        shifted, did_shift = shift_timestamp_content(
            content, date_format, today, formats
        )
        if did_shift:
            updated = replace(updated, **{name: shifted})
            had_repeater = True

    return RepeaterOutcome(had_repeater=had_repeater, planning=updated)
