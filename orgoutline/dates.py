"""
Date parsing, formatting and repeater arithmetic.

Date layouts are written with the tokens ``YYYY``, ``MM`` and ``DD``
(e.g. "YYYY-MM-DD", "MM-DD-YYYY"). Parsing is strict: the text must match a
layout exactly, a weekday abbreviation must name the real weekday and a time
must be a valid clock time. Failures return INVALID_TIMESTAMP rather than
raising.
"""

import datetime
import re
from dataclasses import dataclass

from dateutil.relativedelta import relativedelta

DEFAULT_DATE_FORMAT = "YYYY-MM-DD"
SUPPORTED_DATE_FORMATS = ("YYYY-MM-DD", "MM-DD-YYYY", "DD-MM-YYYY")

WEEKDAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_TOKEN_PATTERNS = {
    "YYYY": r"(?P<year>\d{4})",
    "MM": r"(?P<month>\d{2})",
    "DD": r"(?P<day>\d{2})",
}
_TOKEN_REGEX = re.compile(r"YYYY|MM|DD")

# "<date> [Www] [H:MM]"
_TIMESTAMP_TEXT_REGEX = re.compile(
    r"^(?P<date>\S+)(?:\s+(?P<weekday>[A-Za-z]{3}))?"
    r"(?:\s+(?P<hour>\d{1,2}):(?P<minute>\d{2}))?$"
)

# Timestamp body inside brackets: date, optional weekday, time, then the rest
# (repeater, warning period, ...)
TIMESTAMP_CONTENT_REGEX = re.compile(
    r"^(?P<date>\d{2,4}-\d{2}-\d{2,4})(?:\s+(?P<weekday>[A-Za-z]{3}))?"
    r"(?:\s+(?P<time>\d{1,2}:\d{2}))?(?:\s+(?P<rest>.*))?$"
)

# +1w (cumulative), ++2m (catch-up), .+3d (habit)
REPEATER_REGEX = re.compile(r"(?<![\w.+])(\.\+|\+\+|\+)(\d+)([dwmy])\b")

_UNIT_DELTAS = {
    "d": lambda n: relativedelta(days=n),
    "w": lambda n: relativedelta(weeks=n),
    "m": lambda n: relativedelta(months=n),
    "y": lambda n: relativedelta(years=n),
}

# =============================================================================
# Formats
# =============================================================================


###############################################################################
#
def get_accepted_date_formats(primary: str | None = None) -> list[str]:
    """
    Formats tried when reading dates, most preferred first.

    Args:
        primary: The configured format (defaults to YYYY-MM-DD)

    Returns:
        ``[primary, "YYYY-MM-DD", "MM-DD-YYYY", "DD-MM-YYYY"]`` without
        duplicates, so older files keep parsing after a format change
    """
    formats = [primary or DEFAULT_DATE_FORMAT, *SUPPORTED_DATE_FORMATS]
    return list(dict.fromkeys(formats))


###############################################################################
#
def is_supported_date_format(fmt) -> bool:
    return fmt in SUPPORTED_DATE_FORMATS


###############################################################################
#
def _layout_regex(fmt: str) -> re.Pattern:
    parts = re.split(r"(YYYY|MM|DD)", fmt)
    pattern = "".join(_TOKEN_PATTERNS.get(part, re.escape(part)) for part in parts)
    return re.compile(f"^{pattern}$")


###############################################################################
#
def format_date(date: datetime.date, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    """Render a date with a YYYY/MM/DD layout."""
    values = {
        "YYYY": f"{date.year:04d}",
        "MM": f"{date.month:02d}",
        "DD": f"{date.day:02d}",
    }
    return _TOKEN_REGEX.sub(lambda m: values[m.group(0)], fmt or DEFAULT_DATE_FORMAT)


###############################################################################
#
def weekday_abbrev(date: datetime.date) -> str:
    """English three-letter weekday, independent of the process locale."""
    return WEEKDAY_ABBREVIATIONS[date.weekday()]


# =============================================================================
# Strict Parsing
# =============================================================================


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class Timestamp:
    """Result of a strict parse. ``date`` is None for an invalid result."""

    date: datetime.date | None = None
    weekday: str | None = None
    time: datetime.time | None = None
    date_format: str | None = None  # The layout that matched

    ###########################################################################
    #
    @property
    def is_valid(self) -> bool:
        return self.date is not None


INVALID_TIMESTAMP = Timestamp()


###############################################################################
#
def _parse_date_part(text: str, fmt: str) -> datetime.date | None:
    if not isinstance(fmt, str) or any(fmt.count(t) != 1 for t in _TOKEN_PATTERNS):
        return None
    match = _layout_regex(fmt).match(text)
    if not match:
        return None
    try:
        return datetime.date(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
        )
    except ValueError:
        return None


###############################################################################
#
def parse_date_strict(text, accepted_formats=None) -> Timestamp:
    """
    Strictly parse ``<date> [Www] [H:MM]``.

    Args:
        text: Text to parse, e.g. "2026-01-10 Sat 9:30"
        accepted_formats: Layouts to try in order (default: the ISO-first
            accepted list)

    Returns:
        The Timestamp from the first layout that validates, or
        INVALID_TIMESTAMP

    Examples:
        "2026-01-10 Sat" -> valid, 2026-01-10
        "2026-01-10 Mon" -> invalid (Jan 10 2026 is a Saturday)
        "01-10-2026"     -> valid through MM-DD-YYYY
    """
    if not isinstance(text, str):
        return INVALID_TIMESTAMP
    match = _TIMESTAMP_TEXT_REGEX.match(text.strip())
    if not match:
        return INVALID_TIMESTAMP

    time = None
    if match.group("hour") is not None:
        hour, minute = int(match.group("hour")), int(match.group("minute"))
        if hour > 23 or minute > 59:
            return INVALID_TIMESTAMP
        time = datetime.time(hour, minute)

    weekday = match.group("weekday")
    for fmt in accepted_formats or get_accepted_date_formats():
        date = _parse_date_part(match.group("date"), fmt)
        if date is None:
            continue
        if weekday and weekday.lower() != weekday_abbrev(date).lower():
            continue
        return Timestamp(date=date, weekday=weekday, time=time, date_format=fmt)
    return INVALID_TIMESTAMP


# =============================================================================
# Repeaters
# =============================================================================


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class Repeater:
    kind: str  # "+", "++" or ".+"
    amount: int
    unit: str  # "d", "w", "m" or "y"

    ###########################################################################
    #
    def __str__(self) -> str:
        return f"{self.kind}{self.amount}{self.unit}"

    ###########################################################################
    #
    @property
    def delta(self) -> relativedelta:
        return _UNIT_DELTAS[self.unit](self.amount)


###############################################################################
#
def parse_repeater(text) -> Repeater | None:
    """Return the first repeater token in ``text``, if any."""
    match = REPEATER_REGEX.search(text or "")
    if not match:
        return None
    amount = int(match.group(2))
    if amount <= 0:
        return None
    return Repeater(kind=match.group(1), amount=amount, unit=match.group(3))


###############################################################################
#
def advance_date_by_repeater(
    date: datetime.date,
    repeater: Repeater,
    today: datetime.date | None = None,
) -> datetime.date:
    """
    Next occurrence of a repeating timestamp.

    Args:
        date: The timestamp's current date
        repeater: Parsed repeater
        today: Completion date (default: today)

    Returns:
        ``+``: one interval after ``date``.
        ``++``: at least one interval after ``date``, then further intervals
        until the result is after ``today``.
        ``.+``: one interval after ``today``.
    """
    today = today or datetime.date.today()
    delta = repeater.delta

    match repeater.kind:
        case ".+":
            return today + delta
        case "++":
            result = date + delta
            while result <= today:
                result = result + delta
            return result
        case _:
            return date + delta


###############################################################################
#
def shift_timestamp_content(
    content,
    date_format: str = DEFAULT_DATE_FORMAT,
    today: datetime.date | None = None,
    accepted_formats=None,
) -> tuple[str, bool]:
    """
    Advance a timestamp body by its repeater.

    Args:
        content: Text between the brackets, e.g. "2024-01-01 Mon +1w"
        date_format: Layout for the new date
        today: Completion date, for ``++`` and ``.+`` repeaters
        accepted_formats: Layouts accepted when reading the old date

    Returns:
        ``(new_content, did_shift)``. Content without a valid date or without
        a repeater comes back unchanged with ``did_shift`` False. The weekday
        is kept only if the original had one; time, repeater and warning
        period are carried over.

    Examples:
        "2024-01-01 Mon +1w" -> ("2024-01-08 Mon +1w", True)
    """
    text = str(content or "")
    parts = TIMESTAMP_CONTENT_REGEX.match(text.strip())
    if not parts:
        return text, False

    formats = accepted_formats or get_accepted_date_formats(date_format)
    parsed = parse_date_strict(parts.group("date"), formats)
    if not parsed.is_valid:
        return text, False

    rest = (parts.group("rest") or "").strip()
    repeater = parse_repeater(rest)
    if repeater is None:
        return text, False

    next_date = advance_date_by_repeater(parsed.date, repeater, today)
    pieces = [format_date(next_date, date_format)]
    if parts.group("weekday"):
        pieces.append(weekday_abbrev(next_date))
    if parts.group("time"):
        pieces.append(parts.group("time"))
    if rest:
        pieces.append(rest)
    return " ".join(pieces), True
