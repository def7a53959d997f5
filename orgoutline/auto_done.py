"""
Task states that follow their checklists.

A task whose checkboxes are all checked is completed, and a completed task
with an unchecked box is reopened. The transitions are computed first and
applied as ordinary state changes afterwards, so CLOSED stamps, repeaters
and forwarded copies behave exactly as when the state is set by hand.
"""

import datetime
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from orgoutline.checkbox_toggle import parse_checkbox_item
from orgoutline.dates import DEFAULT_DATE_FORMAT
from orgoutline.headline import split_heading
from orgoutline.outline import block_extent, is_day_heading, is_heading_line
from orgoutline.todo_state import compute_todo_state_change
from orgoutline.workflow import DEFAULT_REGISTRY, WorkflowRegistry

logger = logging.getLogger(__name__)


###############################################################################
###############################################################################
#
@dataclass
class HeadingTransitions:
    """Heading line indexes to complete and to reopen, in document order."""

    to_mark_done: list[int] = field(default_factory=list)
    to_reopen: list[int] = field(default_factory=list)
    done_keyword: str | None = None
    reopen_keyword: str | None = None

    ###########################################################################
    #
    def __bool__(self) -> bool:
        return bool(self.to_mark_done or self.to_reopen)


###############################################################################
#
def done_keyword(registry: WorkflowRegistry) -> str | None:
    """First done-like state that stamps CLOSED, else the first done-like one."""
    done_like = [s for s in registry.states if s.is_done_like]
    for state in done_like:
        if state.stamps_closed:
            return state.keyword
    return done_like[0].keyword if done_like else None


###############################################################################
#
def reopen_keyword(registry: WorkflowRegistry, done: str | None) -> str | None:
    """
    State a completed task returns to when its checklist is no longer done.

    The last open, non-forwarding state before ``done`` in the cycle
    (IN_PROGRESS with the default states), else the first open state.
    """
    keywords = registry.cycle_keywords()
    before = keywords[: keywords.index(done)] if done in keywords else keywords
    for keyword in reversed(before):
        if not registry.is_done_like(keyword) and not registry.triggers_forward(
            keyword
        ):
            return keyword
    return registry.first_non_done_state()


###############################################################################
#
def _checklist_counts(
    lines: Sequence[str], index: int, registry: WorkflowRegistry
) -> tuple[int, int, bool]:
    # (checked, total, has an open task heading below it)
    checked = total = 0
    open_below = False
    for i in block_extent(lines, index, registry)[1:]:
        line = lines[i]
        if is_heading_line(line, registry):
            parts = split_heading(line, registry)
            if parts and parts.keyword and not registry.is_done_like(parts.keyword):
                open_below = True
            continue
        item = parse_checkbox_item(line)
        if item is not None:
            total += 1
            checked += item.checked
    return checked, total, open_below


###############################################################################
#
def compute_heading_transitions(
    lines: Sequence[str], registry: WorkflowRegistry | None = None
) -> HeadingTransitions:
    """
    Find task headings whose state disagrees with their checklist.

    Args:
        lines: Document lines
        registry: Workflow registry

    Returns:
        HeadingTransitions. Checkboxes anywhere in a heading's block count,
        nested ones included.

    Note:
        1. An open task is completed when it has at least one checkbox, all
           of them are checked and no open task sits below it.
        2. A task in the done state is reopened when any checkbox is not
           checked.
        3. Other done-like states (ABANDONED) and day headings are left alone.
    """
    registry = registry or DEFAULT_REGISTRY
    done = done_keyword(registry)
    result = HeadingTransitions(
        done_keyword=done, reopen_keyword=reopen_keyword(registry, done)
    )
    if done is None:
        return result

    for i, line in enumerate(lines):
        if is_day_heading(line):
            continue
        parts = split_heading(line, registry)
        if parts is None or parts.keyword is None:
            continue
        keyword = parts.keyword
        if registry.is_done_like(keyword) and keyword != done:
            continue

        checked, total, open_below = _checklist_counts(lines, i, registry)
        if total == 0:
            continue
        if keyword == done:
            if checked < total:
                result.to_reopen.append(i)
        elif checked == total and not open_below:
            result.to_mark_done.append(i)
    return result


###############################################################################
#
def apply_heading_transitions(
    lines: Sequence[str],
    transitions: HeadingTransitions,
    registry: WorkflowRegistry | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
    body_indent: int = 2,
    heading_marker_style: str = "asterisks",
    now: datetime.datetime | None = None,
) -> list[str]:
    """
    Apply transitions from compute_heading_transitions as state changes.

    Headings are changed bottom-up; every state change only touches lines at
    or below its heading, so the remaining indexes stay valid.
    """
    registry = registry or DEFAULT_REGISTRY
    targets = {i: transitions.done_keyword for i in transitions.to_mark_done}
    targets.update({i: transitions.reopen_keyword for i in transitions.to_reopen})

    updated = list(lines)
    for index in sorted(targets, reverse=True):
        if targets[index] is None:
            continue
        change = compute_todo_state_change(
            updated,
            index,
            targets[index],
            registry,
            date_format,
            body_indent,
            heading_marker_style,
            now,
        )
        if change is not None:
            updated = change.updated_lines
            logger.debug("auto state: line %d -> %s", index, targets[index])
    return updated
