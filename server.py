#!/usr/bin/env python3
"""
MCP Server for structural editing of an org journal

Uses the orgoutline engine for all outline, checkbox, date and task-state
logic. Designed for use with Claude CLI/Code/Desktop to edit:
- ~/org/journal.org (day headings with tasks, checklists and planning lines)

Every tool reads the file into lines, runs one engine operation on that
snapshot, writes the result back in one go and reports a diff.
"""

import asyncio
import difflib
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from mcp.server import InitializationOptions, Server
from mcp.server.stdio import stdio_server
from mcp.types import Resource, ServerCapabilities, TextContent, Tool

from orgoutline.auto_done import (
    apply_heading_transitions,
    compute_heading_transitions,
)
from orgoutline.checkbox_stats import (
    COOKIE_MODES,
    compute_checkbox_stats_by_heading_line,
    compute_cookie_update_edits,
    remove_checkbox_cookie_from_headline,
    upsert_checkbox_cookie_in_headline,
)
from orgoutline.checkbox_toggle import (
    compute_checkbox_bulk_toggle_edits,
    compute_checkbox_toggle_edits,
    parse_checkbox_item,
)
from orgoutline.config import load_config
from orgoutline.dates import get_accepted_date_formats
from orgoutline.move import (
    compute_move_block_range_result,
    compute_move_block_result,
)
from orgoutline.outline import (
    apply_line_edits,
    depth_of,
    is_heading_line,
    is_list_item_line,
)
from orgoutline.planning import (
    compute_reschedule_replacements,
    compute_smart_date_replacements,
)
from orgoutline.todo_state import compute_todo_state_change, rotate_todo_state

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================

CONFIG = load_config()
ORG_DIR = CONFIG.org_dir
ORG_FILE = CONFIG.journal_file
REGISTRY = CONFIG.registry()

server = Server("org-outline")

# =============================================================================
# Plain Text Formatting Utilities
# =============================================================================


###############################################################################
#
def format_simple_diff(old_content: str, new_content: str) -> str:
    """
    Create a simple diff showing only changed lines with − and + markers.

    Args:
        old_content: Original content to compare from
        new_content: New content to compare against

    Returns:
        Formatted diff string with − for removed lines and + for added lines,
        or "(no changes)" if contents are identical
    """
    old_lines = old_content.splitlines()
    new_lines = new_content.splitlines()

    if old_lines == new_lines:
        return "(no changes)"

    matcher = difflib.SequenceMatcher(None, old_lines, new_lines)
    diff_lines: list[str] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        match tag:
            case "equal":
                continue
            case "replace":
                for line in old_lines[i1:i2]:
                    diff_lines.append(f"− {line}")
                for line in new_lines[j1:j2]:
                    diff_lines.append(f"+ {line}")
            case "delete":
                for line in old_lines[i1:i2]:
                    diff_lines.append(f"− {line}")
            case "insert":
                for line in new_lines[j1:j2]:
                    diff_lines.append(f"+ {line}")

    return "\n".join(diff_lines) if diff_lines else "(no changes)"


###############################################################################
#
def format_edit_result(
    title: str, old_lines: list[str], new_lines: list[str]
) -> str:
    """
    Format the result of an edit with diff.

    Args:
        title: What was done, e.g. "Toggled checkbox at line 4"
        old_lines: Document before the edit
        new_lines: Document after the edit

    Returns:
        Formatted string with status line and diff
    """
    lines = [
        f"✓ {title}",
        "",
        "Changes:",
        format_simple_diff("\n".join(old_lines), "\n".join(new_lines)),
    ]
    return "\n".join(lines)


###############################################################################
#
def format_outline(
    lines: list[str], start: int = 0, end: int | None = None
) -> str:
    """
    Render numbered lines, marking headings (H) and list items (-).

    Args:
        lines: Document lines
        start: First index to show
        end: End index (exclusive); None for the end of the document

    Returns:
        One row per line: "  12 H2 | * TODO Something"
    """
    end = len(lines) if end is None else min(end, len(lines))
    if start >= end:
        return "(empty)"

    width = len(str(end))
    rows = []
    for i in range(start, end):
        line = lines[i]
        depth = depth_of(line, REGISTRY)
        if is_heading_line(line, REGISTRY):
            kind = f"H{depth}"
        elif is_list_item_line(line):
            kind = "- "
        else:
            kind = "  "
        rows.append(f"{i + 1:>{width}} {kind:<3}| {line}")
    return "\n".join(rows)


# =============================================================================
# File Operations
# =============================================================================


###############################################################################
#
def write_file(
    path: Path, content: str, newline: str = "\n", final_newline: bool = True
) -> None:
    """
    Write content to file, ensuring it ends with newline.

    Args:
        path: Path to write to
        content: Content to write, lines separated by LF
        newline: Line ending written for each LF (LF or CRLF)
        final_newline: End the file with a line break

    Note:
        Creates parent directories if they don't exist.
        Automatically adds trailing newline if not present, unless
        final_newline is False.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if final_newline and not content.endswith("\n"):
        content += "\n"
    path.write_text(content, encoding="utf-8", newline=newline)


###############################################################################
#
def backup_file(path: Path) -> Path:
    """
    Create a timestamped backup before modifications.

    Args:
        path: Path to the file to backup

    Returns:
        Path to the backup file (original path with timestamp suffix)

    Note:
        Does nothing if file doesn't exist (returns original path).
        Backup format: original.YYYYMMDD_HHMMSS.bak
    """
    if not path.exists():
        return path
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = path.with_suffix(f".{timestamp}.bak")
    backup_path.write_bytes(path.read_bytes())
    return backup_path


###############################################################################
#
def read_lines() -> list[str]:
    """
    Read the journal file into a list of lines.

    Raises:
        FileNotFoundError: If the journal file doesn't exist

    Note:
        Only line breaks split lines; CRLF is read as LF and restored by
        save_lines().
    """
    if not ORG_FILE.exists():
        raise FileNotFoundError(str(ORG_FILE))
    text = ORG_FILE.read_text(encoding="utf-8")
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


###############################################################################
#
def line_layout(path: Path) -> tuple[str, bool]:
    """
    Line ending and final-newline state of a file as it is on disk.

    Returns:
        (newline, ends_with_newline): newline is CRLF when the file uses
        CRLF, otherwise LF. A missing or empty file counts as LF with a
        final newline.
    """
    if not path.exists():
        return "\n", True
    raw = path.read_bytes()
    newline = "\r\n" if b"\r\n" in raw else "\n"
    return newline, not raw or raw.endswith(b"\n")


###############################################################################
#
def save_lines(old_lines: list[str], new_lines: list[str]) -> None:
    """
    Write new lines to the journal, backing it up first when configured.

    Note:
        Does nothing when the lines are unchanged. The file keeps its line
        ending and its final-newline state, so untouched lines stay
        byte-identical.
    """
    if new_lines == old_lines:
        return
    newline, final_newline = line_layout(ORG_FILE)
    if CONFIG.backup:
        backup = backup_file(ORG_FILE)
        logger.info("backed up %s to %s", ORG_FILE, backup)
    write_file(ORG_FILE, "\n".join(new_lines), newline, final_newline)


###############################################################################
#
def line_index(lines: list[str], line_number) -> int:
    """
    Convert a 1-based line number from a tool call to a list index.

    Raises:
        ValueError: If the number is not an integer within the document
    """
    if not isinstance(line_number, int) or isinstance(line_number, bool):
        raise ValueError(f"Line number must be an integer, got {line_number!r}")
    if not 1 <= line_number <= len(lines):
        raise ValueError(
            f"Line {line_number} is out of range (document has {len(lines)} lines)"
        )
    return line_number - 1


###############################################################################
#
def with_cookies_updated(lines: list[str]) -> list[str]:
    """Run the cookie recomputation pass over freshly edited lines."""
    return apply_line_edits(lines, compute_cookie_update_edits(lines, REGISTRY))


###############################################################################
#
def with_auto_done(lines: list[str]) -> list[str]:
    """
    Complete or reopen tasks whose checklist state changed.

    Note:
        Only runs when ORG_AUTO_DONE is set.
    """
    if not CONFIG.auto_done:
        return lines
    transitions = compute_heading_transitions(lines, REGISTRY)
    if not transitions:
        return lines
    return apply_heading_transitions(
        lines,
        transitions,
        REGISTRY,
        CONFIG.date_format,
        CONFIG.body_indent,
        CONFIG.heading_marker_style,
    )


# =============================================================================
# Outline Operations
# =============================================================================


###############################################################################
#
def show_outline(start_line: int | None = None, end_line: int | None = None) -> str:
    """Numbered view of the journal (1-based, inclusive range)."""
    lines = read_lines()
    start = line_index(lines, start_line) if start_line is not None else 0
    end = line_index(lines, end_line) + 1 if end_line is not None else None
    return format_outline(lines, start, end)


###############################################################################
#
def set_todo_state(line_number: int, keyword: str) -> str:
    """
    Set the workflow keyword of the heading at a line.

    Raises:
        ValueError: If the keyword is unknown or the line is not a heading
    """
    lines = read_lines()
    index = line_index(lines, line_number)
    if not REGISTRY.is_known_state(keyword):
        known = ", ".join(REGISTRY.cycle_keywords())
        raise ValueError(f"Unknown keyword '{keyword}' (known: {known})")

    change = compute_todo_state_change(
        lines,
        index,
        keyword,
        REGISTRY,
        CONFIG.date_format,
        CONFIG.body_indent,
        CONFIG.heading_marker_style,
    )
    if change is None:
        raise ValueError(f"Line {line_number} is not a task heading")
    return _finish_state_change(lines, line_number, change)


###############################################################################
#
def cycle_todo_state(line_number: int, direction: str = "right") -> str:
    """Rotate the heading at a line one step through the workflow cycle."""
    lines = read_lines()
    index = line_index(lines, line_number)
    if direction not in ("right", "left"):
        raise ValueError(f"Direction must be 'right' or 'left', got '{direction}'")

    change = rotate_todo_state(
        lines,
        index,
        direction,
        REGISTRY,
        CONFIG.date_format,
        CONFIG.body_indent,
        CONFIG.heading_marker_style,
    )
    if change is None:
        raise ValueError(f"Line {line_number} is not a task heading")
    return _finish_state_change(lines, line_number, change)


###############################################################################
#
def _finish_state_change(lines, line_number, change) -> str:
    save_lines(lines, change.updated_lines)
    previous = change.previous_keyword or "(none)"
    title = f"Line {line_number}: {previous} → {change.effective_keyword}"
    if change.repeated:
        title += " (repeating task advanced)"
    return format_edit_result(title, lines, change.updated_lines)


###############################################################################
#
def toggle_checkbox(line_number: int) -> str:
    """
    Toggle one checkbox, propagate to children and parents, update cookies.

    With ORG_AUTO_DONE set, tasks whose checklist became complete are marked
    DONE and DONE tasks with an unchecked box are reopened.

    Raises:
        ValueError: If the line is not a checkbox item
    """
    lines = read_lines()
    index = line_index(lines, line_number)
    if parse_checkbox_item(lines[index]) is None:
        raise ValueError(f"Line {line_number} is not a checkbox item")

    edits = compute_checkbox_toggle_edits(lines, index, REGISTRY)
    updated = with_cookies_updated(apply_line_edits(lines, edits))
    updated = with_auto_done(updated)
    save_lines(lines, updated)
    return format_edit_result(
        f"Toggled checkbox at line {line_number}", lines, updated
    )


###############################################################################
#
def toggle_checkboxes(line_numbers: list[int]) -> str:
    """Toggle a selection of checkboxes to one common state."""
    lines = read_lines()
    indexes = [line_index(lines, n) for n in line_numbers]
    edits = compute_checkbox_bulk_toggle_edits(lines, indexes)
    if not edits:
        raise ValueError("No checkbox items in the selected lines")

    updated = with_cookies_updated(apply_line_edits(lines, edits))
    updated = with_auto_done(updated)
    save_lines(lines, updated)
    return format_edit_result(
        f"Toggled {len(edits)} checkbox(es)", lines, updated
    )


###############################################################################
#
def update_checkbox_cookies() -> str:
    """Recompute every [n/m] / [p%] cookie in the journal."""
    lines = read_lines()
    updated = with_cookies_updated(lines)
    save_lines(lines, updated)
    return format_edit_result("Checkbox cookies updated", lines, updated)


###############################################################################
#
def set_checkbox_cookie(line_number: int, mode: str = "fraction") -> str:
    """
    Insert, convert or remove the cookie on a heading or list item.

    Args:
        line_number: 1-based line of the heading or list item
        mode: "fraction", "percent" or "remove"
    """
    lines = read_lines()
    index = line_index(lines, line_number)
    line = lines[index]
    if not (is_heading_line(line, REGISTRY) or is_list_item_line(line)):
        raise ValueError(f"Line {line_number} is not a heading or list item")

    updated = list(lines)
    if mode == "remove":
        updated[index] = remove_checkbox_cookie_from_headline(line)
    elif mode in COOKIE_MODES:
        updated[index] = upsert_checkbox_cookie_in_headline(line, mode)
        updated = with_cookies_updated(updated)
    else:
        raise ValueError(
            f"Mode must be 'fraction', 'percent' or 'remove', got '{mode}'"
        )

    save_lines(lines, updated)
    return format_edit_result(
        f"Cookie at line {line_number} ({mode})", lines, updated
    )


###############################################################################
#
def move_subtree(
    line_number: int, direction: str, end_line_number: int | None = None
) -> str:
    """
    Move the block at a line (or a run of sibling blocks) up or down.

    Raises:
        ValueError: If there is no sibling to move past
    """
    lines = read_lines()
    index = line_index(lines, line_number)
    if direction not in ("up", "down"):
        raise ValueError(f"Direction must be 'up' or 'down', got '{direction}'")

    if end_line_number is None:
        result = compute_move_block_result(lines, index, direction, REGISTRY)
    else:
        end = line_index(lines, end_line_number)
        result = compute_move_block_range_result(
            lines, index, end, direction, REGISTRY
        )
    if result is None:
        raise ValueError(
            f"Cannot move block at line {line_number} {direction}: "
            "no sibling block in that direction"
        )

    updated = with_cookies_updated(result.updated_lines)
    save_lines(lines, updated)
    title = (
        f"Moved block {direction}; it now starts at line "
        f"{result.new_start_line + 1}"
    )
    return format_edit_result(title, lines, updated)


###############################################################################
#
def shift_dates(line_numbers: list[int], forward: bool, smart: bool) -> str:
    """
    Shift SCHEDULED dates (and, when smart, day heading dates) by one day.

    Raises:
        ValueError: If nothing in the selection carries a date to shift
    """
    lines = read_lines()
    indexes = {line_index(lines, n) for n in line_numbers}
    compute = (
        compute_smart_date_replacements if smart else compute_reschedule_replacements
    )
    result = compute(
        lines.__getitem__,
        len(lines),
        indexes,
        forward,
        CONFIG.date_format,
        get_accepted_date_formats(CONFIG.date_format),
        REGISTRY,
    )
    if not result.replacements:
        if result.warned_parse:
            raise ValueError("Could not parse the date in the selected lines")
        raise ValueError("Nothing to reschedule in the selected lines")

    updated = list(lines)
    for index, text in result.replacements.items():
        updated[index] = text
    save_lines(lines, updated)

    step = "+1" if forward else "-1"
    title = f"Shifted {len(result.replacements)} date(s) {step} day"
    if result.warned_parse:
        title += " (some dates could not be parsed and were skipped)"
    return format_edit_result(title, lines, updated)


###############################################################################
#
def checkbox_stats_to_dict(lines: list[str]) -> dict:
    """Checkbox stats per heading, keyed by 1-based line number."""
    stats = compute_checkbox_stats_by_heading_line(lines, REGISTRY)
    return {
        str(index + 1): {
            "heading": lines[index].strip(),
            "checked": s.checked,
            "total": s.total,
        }
        for index, s in stats.items()
        if s.total
    }


###############################################################################
#
def workflow_states_to_dict() -> dict:
    return {
        "states": [
            {
                "keyword": s.keyword,
                "marker": s.marker,
                "is_done_like": s.is_done_like,
                "stamps_closed": s.stamps_closed,
                "triggers_forward": s.triggers_forward,
                "agenda_visibility": s.agenda_visibility,
                "tagged_agenda_visibility": s.tagged_agenda_visibility,
            }
            for s in REGISTRY.states
        ],
        "errors": REGISTRY.errors,
    }


# =============================================================================
# MCP Tool Definitions
# =============================================================================

LINE_NUMBER_SCHEMA = {
    "type": "integer",
    "description": "1-based line number in the journal file",
    "minimum": 1,
}
LINE_NUMBERS_SCHEMA = {
    "type": "array",
    "items": {"type": "integer", "minimum": 1},
    "description": "1-based line numbers of the selection",
}


###############################################################################
#
@server.list_tools()
async def list_tools():
    return [
        # ----- Outline -----
        Tool(
            name="show_outline",
            description="Show the journal with line numbers. Headings are marked H<level>, list items '-'. Use the line numbers with the other tools.",
            inputSchema={
                "type": "object",
                "properties": {
                    "start_line": LINE_NUMBER_SCHEMA,
                    "end_line": LINE_NUMBER_SCHEMA,
                },
            },
        ),
        # ----- Task States -----
        Tool(
            name="cycle_todo_state",
            description="Rotate a task heading to the next (right) or previous (left) workflow state. Applies CLOSED stamps, repeaters and CONTINUED forwarding.",
            inputSchema={
                "type": "object",
                "properties": {
                    "line_number": LINE_NUMBER_SCHEMA,
                    "direction": {
                        "type": "string",
                        "enum": ["right", "left"],
                        "default": "right",
                    },
                },
                "required": ["line_number"],
            },
        ),
        Tool(
            name="set_todo_state",
            description="Set a task heading to a specific workflow keyword (see org-outline://workflow-states).",
            inputSchema={
                "type": "object",
                "properties": {
                    "line_number": LINE_NUMBER_SCHEMA,
                    "keyword": {
                        "type": "string",
                        "description": "Target keyword, e.g. DONE",
                    },
                },
                "required": ["line_number", "keyword"],
            },
        ),
        # ----- Checkboxes -----
        Tool(
            name="toggle_checkbox",
            description="Toggle a checkbox item. Children follow the new state, parent checkboxes become [X], [ ] or [-], and cookies are recomputed. With ORG_AUTO_DONE set, the owning task is marked DONE when its checklist is complete and reopened when it is not.",
            inputSchema={
                "type": "object",
                "properties": {"line_number": LINE_NUMBER_SCHEMA},
                "required": ["line_number"],
            },
        ),
        Tool(
            name="toggle_checkboxes",
            description="Toggle several checkbox items together: all become checked if any is unchecked, otherwise all become unchecked.",
            inputSchema={
                "type": "object",
                "properties": {"line_numbers": LINE_NUMBERS_SCHEMA},
                "required": ["line_numbers"],
            },
        ),
        Tool(
            name="update_checkbox_cookies",
            description="Recompute every [n/m] and [p%] progress cookie in the journal.",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="set_checkbox_cookie",
            description="Add a progress cookie to a heading or list item (placed before trailing tags), switch its mode, or remove it.",
            inputSchema={
                "type": "object",
                "properties": {
                    "line_number": LINE_NUMBER_SCHEMA,
                    "mode": {
                        "type": "string",
                        "enum": ["fraction", "percent", "remove"],
                        "default": "fraction",
                    },
                },
                "required": ["line_number"],
            },
        ),
        # ----- Structure -----
        Tool(
            name="move_subtree",
            description="Move the heading containing a line, with everything under it, past its neighbouring sibling. List items move on their own only in lists outside any heading. Give end_line_number to move a run of sibling blocks together.",
            inputSchema={
                "type": "object",
                "properties": {
                    "line_number": LINE_NUMBER_SCHEMA,
                    "direction": {"type": "string", "enum": ["up", "down"]},
                    "end_line_number": LINE_NUMBER_SCHEMA,
                },
                "required": ["line_number", "direction"],
            },
        ),
        # ----- Dates -----
        Tool(
            name="reschedule",
            description="Shift the SCHEDULED date of the selected tasks by one day. A heading and its planning line count once.",
            inputSchema={
                "type": "object",
                "properties": {
                    "line_numbers": LINE_NUMBERS_SCHEMA,
                    "forward": {"type": "boolean", "default": True},
                },
                "required": ["line_numbers"],
            },
        ),
        Tool(
            name="adjust_dates",
            description="Like reschedule, but selected day headings have their own date shifted too.",
            inputSchema={
                "type": "object",
                "properties": {
                    "line_numbers": LINE_NUMBERS_SCHEMA,
                    "forward": {"type": "boolean", "default": True},
                },
                "required": ["line_numbers"],
            },
        ),
    ]


# =============================================================================
# MCP Tool Handlers
# =============================================================================


###############################################################################
#
@server.call_tool()
async def call_tool(name: str, arguments: dict):
    try:
        match name:
            # ----- Outline -----
            case "show_outline":
                output = show_outline(
                    arguments.get("start_line"), arguments.get("end_line")
                )
                return [TextContent(type="text", text=output)]

            # ----- Task States -----
            case "cycle_todo_state":
                output = cycle_todo_state(
                    arguments["line_number"], arguments.get("direction", "right")
                )
                return [TextContent(type="text", text=output)]

            case "set_todo_state":
                output = set_todo_state(
                    arguments["line_number"], arguments["keyword"]
                )
                return [TextContent(type="text", text=output)]

            # ----- Checkboxes -----
            case "toggle_checkbox":
                output = toggle_checkbox(arguments["line_number"])
                return [TextContent(type="text", text=output)]

            case "toggle_checkboxes":
                output = toggle_checkboxes(arguments["line_numbers"])
                return [TextContent(type="text", text=output)]

            case "update_checkbox_cookies":
                output = update_checkbox_cookies()
                return [TextContent(type="text", text=output)]

            case "set_checkbox_cookie":
                output = set_checkbox_cookie(
                    arguments["line_number"], arguments.get("mode", "fraction")
                )
                return [TextContent(type="text", text=output)]

            # ----- Structure -----
            case "move_subtree":
                output = move_subtree(
                    arguments["line_number"],
                    arguments["direction"],
                    arguments.get("end_line_number"),
                )
                return [TextContent(type="text", text=output)]

            # ----- Dates -----
            case "reschedule":
                output = shift_dates(
                    arguments["line_numbers"],
                    arguments.get("forward", True),
                    smart=False,
                )
                return [TextContent(type="text", text=output)]

            case "adjust_dates":
                output = shift_dates(
                    arguments["line_numbers"],
                    arguments.get("forward", True),
                    smart=True,
                )
                return [TextContent(type="text", text=output)]

            case _:
                return [TextContent(type="text", text=f"Unknown tool: {name}")]

    except FileNotFoundError as e:
        return [TextContent(type="text", text=f"File not found: {e}")]
    except ValueError as e:
        return [TextContent(type="text", text=f"Error: {e}")]
    except Exception as e:
        logger.exception("tool %s failed", name)
        return [
            TextContent(
                type="text", text=f"Unexpected error: {type(e).__name__}: {e}"
            )
        ]


# =============================================================================
# Resources
# =============================================================================


###############################################################################
#
@server.list_resources()
async def list_resources():
    return [
        Resource(
            uri="org-outline://journal",
            name="Journal",
            description="Full text of the journal file",
        ),
        Resource(
            uri="org-outline://checkbox-stats",
            name="Checkbox Stats",
            description="Checked/total checkbox counts per heading",
        ),
        Resource(
            uri="org-outline://workflow-states",
            name="Workflow States",
            description="Configured workflow keywords, markers and flags",
        ),
    ]


###############################################################################
#
@server.read_resource()
async def read_resource(uri: str):
    match str(uri):
        case "org-outline://journal":
            return "\n".join(read_lines())
        case "org-outline://checkbox-stats":
            return json.dumps(checkbox_stats_to_dict(read_lines()), indent=2)
        case "org-outline://workflow-states":
            return json.dumps(workflow_states_to_dict(), indent=2)
        case _:
            raise ValueError(f"Unknown resource: {uri}")


# =============================================================================
# Main
# =============================================================================


###############################################################################
#
async def main():
    # stdout carries the MCP stream
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    init_options = InitializationOptions(
        server_name="org-outline",
        server_version="0.1.0",
        capabilities=ServerCapabilities(
            tools={},
            resources={},
        ),
    )
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, init_options)


###############################################################################
#
def run():
    """Console-script entry point."""
    asyncio.run(main())


###############################################################################
###############################################################################
#
if __name__ == "__main__":
    run()
