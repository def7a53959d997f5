"""
Workflow state registry.

The task-state vocabulary (TODO, IN_PROGRESS, ...) is configurable. Anything
that comes from configuration passes through
validate_and_normalize_workflow_states() first, which never raises: a bad
configuration degrades to a cleaned-up list (or the defaults) plus a list of
error messages.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

VISIBILITY_VALUES = ("show", "hide")

# =============================================================================
# Data Structures
# =============================================================================


###############################################################################
###############################################################################
#
@dataclass(frozen=True)
class WorkflowState:
    """One keyword in the task-state cycle."""

    keyword: str  # Canonical upper-case keyword, e.g. "IN_PROGRESS"
    marker: str | None = None  # Unicode heading glyph, e.g. "⊘"
    is_done_like: bool = False
    stamps_closed: bool = False
    triggers_forward: bool = False
    agenda_visibility: str = "show"
    tagged_agenda_visibility: str = "show"


###############################################################################
###############################################################################
#
@dataclass
class ValidationResult:
    """Outcome of validating a workflow-state configuration value."""

    ok: bool
    value: list[WorkflowState]
    errors: list[str] = field(default_factory=list)


###############################################################################
#
def get_default_workflow_states() -> list[WorkflowState]:
    """
    Return the built-in five state cycle.

    Returns:
        TODO, IN_PROGRESS, CONTINUED, DONE and ABANDONED, in cycle order
    """
    return [
        WorkflowState(keyword="TODO", marker="⊙"),
        WorkflowState(keyword="IN_PROGRESS", marker="⊘"),
        WorkflowState(
            keyword="CONTINUED",
            marker="⊜",
            triggers_forward=True,
            agenda_visibility="hide",
            tagged_agenda_visibility="hide",
        ),
        WorkflowState(
            keyword="DONE",
            marker="⊖",
            is_done_like=True,
            stamps_closed=True,
            agenda_visibility="hide",
            tagged_agenda_visibility="hide",
        ),
        WorkflowState(
            keyword="ABANDONED",
            marker="⊗",
            is_done_like=True,
            agenda_visibility="hide",
            tagged_agenda_visibility="hide",
        ),
    ]


# =============================================================================
# Normalization
# =============================================================================


###############################################################################
#
def normalize_keyword(keyword) -> str | None:
    """Upper-case a keyword; None if it is empty or contains whitespace."""
    if not isinstance(keyword, str):
        return None
    trimmed = keyword.strip()
    if not trimmed or re.search(r"\s", trimmed):
        return None
    return trimmed.upper()


###############################################################################
#
def _normalize_marker(marker) -> str | None:
    if not isinstance(marker, str):
        return None
    trimmed = marker.strip()
    if not trimmed or re.search(r"\s", trimmed):
        return None
    return trimmed


###############################################################################
#
def _normalize_visibility(value, default: str) -> str:
    return value if value in VISIBILITY_VALUES else default


###############################################################################
#
def _normalize_bool(value, default: bool) -> bool:
    return value if isinstance(value, bool) else default


###############################################################################
#
def _field(raw: Mapping, name: str):
    # Accept the camelCase spelling used by JSON configuration files
    if name in raw:
        return raw[name]
    head, *rest = name.split("_")
    return raw.get(head + "".join(part.title() for part in rest))


###############################################################################
#
def _normalize_state(raw) -> WorkflowState | None:
    if isinstance(raw, WorkflowState):
        raw = raw.__dict__
    if not isinstance(raw, Mapping):
        return None

    keyword = normalize_keyword(raw.get("keyword"))
    if keyword is None:
        return None

    return WorkflowState(
        keyword=keyword,
        marker=_normalize_marker(raw.get("marker")),
        is_done_like=_normalize_bool(_field(raw, "is_done_like"), False),
        stamps_closed=_normalize_bool(_field(raw, "stamps_closed"), False),
        triggers_forward=_normalize_bool(
            _field(raw, "triggers_forward"), False
        ),
        agenda_visibility=_normalize_visibility(
            _field(raw, "agenda_visibility"), "show"
        ),
        tagged_agenda_visibility=_normalize_visibility(
            _field(raw, "tagged_agenda_visibility"), "show"
        ),
    )


###############################################################################
#
def validate_and_normalize_workflow_states(config_value) -> ValidationResult:
    """
    Validate a workflow-state configuration value.

    Args:
        config_value: None, or a sequence of mappings / WorkflowState objects.
            Mapping keys use the WorkflowState field names (snake_case or
            camelCase).

    Returns:
        ValidationResult. ``value`` is always a usable list of states: the
        cleaned and de-duplicated input, or the defaults when nothing in the
        input is usable.

    Note:
        Keywords are case-folded before the duplicate check, so "todo" and
        "TODO" collide. Invalid entries and duplicates are dropped and
        reported in ``errors``; the result is then not ``ok``.
    """
    if config_value is None:
        return ValidationResult(ok=True, value=get_default_workflow_states())

    if isinstance(config_value, (str, bytes, Mapping)) or not isinstance(
        config_value, Sequence
    ):
        return ValidationResult(
            ok=False,
            value=get_default_workflow_states(),
            errors=["workflow states must be a list of state records"],
        )

    errors: list[str] = []
    normalized: list[WorkflowState] = []
    seen: set[str] = set()

    for raw in config_value:
        state = _normalize_state(raw)
        if state is None:
            errors.append(
                "Invalid workflow state entry (must include a non-empty "
                "keyword without spaces)"
            )
            continue
        if state.keyword in seen:
            errors.append(f"Duplicate workflow state keyword: {state.keyword}")
            continue
        seen.add(state.keyword)
        normalized.append(state)

    if not normalized:
        errors.append("workflow states must contain at least one valid state")
        return ValidationResult(
            ok=False, value=get_default_workflow_states(), errors=errors
        )

    return ValidationResult(ok=not errors, value=normalized, errors=errors)


# =============================================================================
# Regex Builders
# =============================================================================


###############################################################################
#
def _keyword_alternation(states: Sequence[WorkflowState]) -> str:
    return "|".join(re.escape(s.keyword) for s in states)


###############################################################################
#
def marker_alternation(states: Sequence[WorkflowState]) -> str:
    """Escaped, de-duplicated alternation of the configured markers."""
    markers = list(dict.fromkeys(s.marker for s in states if s.marker))
    return "|".join(re.escape(m) for m in markers)


###############################################################################
#
def build_task_prefix_regex(states: Sequence[WorkflowState]) -> re.Pattern:
    """
    Build a regex matching the prefix of any task-bearing line.

    Matches optional indentation, an optional configured marker, optional
    asterisks and then a configured keyword, so it finds tasks under either
    heading style.
    """
    markers = marker_alternation(states)
    marker_part = f"(?:(?:{markers})\\s*)?" if markers else ""
    return re.compile(
        f"^(\\s*){marker_part}(?:\\*+\\s+)?(?:{_keyword_alternation(states)})\\b"
    )


###############################################################################
#
def build_task_heading_regex(
    states: Sequence[WorkflowState], allow_asterisks: bool = True
) -> re.Pattern:
    """
    Build a regex matching a task heading line.

    Args:
        states: Workflow states whose keywords and markers are allowed
        allow_asterisks: Also accept org-style ``*`` runs as the heading
            marker (configured glyphs are always accepted)

    Returns:
        Compiled pattern with an ``indent`` group

    Examples:
        "* TODO Task", "⊙ TODO Task", "  ** DONE Nested"
    """
    parts = []
    if allow_asterisks:
        parts.append("\\*+")
    markers = marker_alternation(states)
    if markers:
        parts.append(f"(?:{markers})")
    head = "|".join(parts) if parts else "\\*+"
    return re.compile(
        f"^(?P<indent>\\s*)(?:{head})\\s+(?:{_keyword_alternation(states)})\\b"
    )


# =============================================================================
# Registry
# =============================================================================


###############################################################################
###############################################################################
#
class WorkflowRegistry:
    """Normalized workflow states with cycle and lookup helpers."""

    ###########################################################################
    #
    def __init__(
        self, states: Sequence[WorkflowState], errors: list[str] | None = None
    ):
        self.states = list(states)
        self.errors = list(errors or [])
        self._by_keyword = {s.keyword: s for s in self.states}
        self._keyword_re = re.compile(
            f"\\b({_keyword_alternation(self.states)})\\b"
        )

    ###########################################################################
    #
    def _get(self, keyword) -> WorkflowState | None:
        normalized = normalize_keyword(keyword)
        return self._by_keyword.get(normalized) if normalized else None

    ###########################################################################
    #
    def cycle_keywords(self) -> list[str]:
        return [s.keyword for s in self.states]

    ###########################################################################
    #
    def is_known_state(self, keyword) -> bool:
        return self._get(keyword) is not None

    ###########################################################################
    #
    def is_done_like(self, keyword) -> bool:
        state = self._get(keyword)
        return bool(state and state.is_done_like)

    ###########################################################################
    #
    def stamps_closed(self, keyword) -> bool:
        state = self._get(keyword)
        return bool(state and state.stamps_closed)

    ###########################################################################
    #
    def triggers_forward(self, keyword) -> bool:
        state = self._get(keyword)
        return bool(state and state.triggers_forward)

    ###########################################################################
    #
    def marker_for(self, keyword) -> str | None:
        state = self._get(keyword)
        return state.marker if state else None

    ###########################################################################
    #
    def markers(self) -> list[str]:
        return list(dict.fromkeys(s.marker for s in self.states if s.marker))

    ###########################################################################
    #
    def first_non_done_state(self) -> str | None:
        """The cycle's initial state: first keyword that is not done-like."""
        for state in self.states:
            if not state.is_done_like:
                return state.keyword
        return None

    ###########################################################################
    #
    def rotate(self, keyword: str | None, direction: str = "right") -> str:
        """
        Move one step through the cycle.

        Args:
            keyword: Current keyword (None or unknown starts the cycle)
            direction: "right" (forward) or "left" (backward)

        Returns:
            The neighbouring keyword, wrapping around at both ends
        """
        keywords = self.cycle_keywords()
        normalized = normalize_keyword(keyword)
        if normalized not in keywords:
            return keywords[0]
        step = -1 if direction == "left" else 1
        return keywords[(keywords.index(normalized) + step) % len(keywords)]

    ###########################################################################
    #
    def find_keyword(self, line: str) -> str | None:
        """Return the first registry keyword found in a line, if any."""
        match = self._keyword_re.search(line or "")
        return match.group(1) if match else None

    ###########################################################################
    #
    def build_task_heading_regex(
        self, allow_asterisks: bool = True
    ) -> re.Pattern:
        return build_task_heading_regex(self.states, allow_asterisks)

    ###########################################################################
    #
    def build_task_prefix_regex(self) -> re.Pattern:
        return build_task_prefix_regex(self.states)


###############################################################################
#
def create_workflow_registry(config_value=None) -> WorkflowRegistry:
    """
    Validate a configuration value and build a registry from it.

    Args:
        config_value: Raw workflow-state configuration (see
            validate_and_normalize_workflow_states)

    Returns:
        A usable WorkflowRegistry; validation errors are kept on ``errors``
    """
    result = validate_and_normalize_workflow_states(config_value)
    for error in result.errors:
        logger.warning("workflow states: %s", error)
    return WorkflowRegistry(result.value, result.errors)


DEFAULT_REGISTRY = create_workflow_registry()
