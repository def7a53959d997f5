"""
Splitting and rebuilding task heading lines.
"""

import re
from dataclasses import dataclass

from orgoutline.workflow import DEFAULT_REGISTRY, WorkflowRegistry, marker_alternation

HEADING_MARKER_STYLES = ("asterisks", "unicode")


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class HeadingParts:
    """A heading line taken apart. ``text`` includes tags and cookies."""

    indent: str
    stars: str  # "**" for org-style headings, "" for glyph headings
    marker: str  # Glyph run for glyph headings, "" otherwise
    level: int
    keyword: str | None
    text: str


###############################################################################
#
def _heading_parts_regex(registry: WorkflowRegistry) -> re.Pattern:
    markers = marker_alternation(registry.states)
    keywords = "|".join(re.escape(k) for k in registry.cycle_keywords())
    marker_part = f"|(?P<marker>(?:{markers})+)" if markers else ""
    return re.compile(
        f"^(?P<indent>\\s*)(?:(?P<stars>\\*+){marker_part})\\s+"
        f"(?:(?P<keyword>{keywords})(?=\\s|$)\\s*)?(?P<text>.*)$"
    )


###############################################################################
#
def split_heading(
    line: str, registry: WorkflowRegistry | None = None
) -> HeadingParts | None:
    """
    Split a heading into indentation, marker run, keyword and text.

    Returns:
        HeadingParts, or None when the line is not a heading
    """
    registry = registry or DEFAULT_REGISTRY
    match = _heading_parts_regex(registry).match(line or "")
    if not match:
        return None

    stars = match.group("stars") or ""
    marker = match.groupdict().get("marker") or ""
    if stars:
        level = len(stars)
    else:
        level = len(re.findall(marker_alternation(registry.states), marker))

    return HeadingParts(
        indent=match.group("indent"),
        stars=stars,
        marker=marker,
        level=max(1, level),
        keyword=match.group("keyword"),
        text=match.group("text").rstrip(),
    )


###############################################################################
#
def clean_task_text(line: str, registry: WorkflowRegistry | None = None) -> str:
    """
    Heading text without indentation, marker and leading keyword.

    Examples:
        "  ** TODO Buy milk :shop:" -> "Buy milk :shop:"
        "⊘ IN_PROGRESS Draft"       -> "Draft"
    """
    parts = split_heading(line, registry)
    if parts is None:
        return (line or "").strip()
    return parts.text.strip()


###############################################################################
#
def build_task_line(
    indent: str,
    keyword: str | None,
    text: str,
    registry: WorkflowRegistry | None = None,
    heading_marker_style: str = "asterisks",
    star_prefix: str = "*",
) -> str:
    """
    Render a task heading.

    Args:
        indent: Leading whitespace
        keyword: Workflow keyword, or None for a plain heading
        text: Title, tags and anything else after the keyword
        registry: Registry supplying the keyword's glyph
        heading_marker_style: "asterisks" keeps org-style ``*`` runs;
            "unicode" uses the keyword's glyph, repeated once per level
        star_prefix: The heading's ``*`` run; its length is the level

    Returns:
        The heading line
    """
    registry = registry or DEFAULT_REGISTRY
    level = max(1, len(star_prefix or "*"))
    marker = registry.marker_for(keyword) if keyword else None

    if heading_marker_style == "unicode" and marker:
        head = marker * level
    else:
        head = "*" * level

    words = [head]
    if keyword:
        words.append(keyword)
    if text:
        words.append(text)
    return indent + " ".join(words)
