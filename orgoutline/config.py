"""
Configuration from environment variables.

load_config() never raises. A malformed value is logged at WARNING and its
default is used instead.
"""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from orgoutline.dates import DEFAULT_DATE_FORMAT, is_supported_date_format
from orgoutline.headline import HEADING_MARKER_STYLES
from orgoutline.workflow import WorkflowRegistry, create_workflow_registry

logger = logging.getLogger(__name__)

DEFAULT_BODY_INDENT = 2
TRUE_VALUES = ("1", "true", "yes", "on")


###############################################################################
###############################################################################
#
@dataclass
class Config:
    org_dir: Path = field(default_factory=lambda: Path.home() / "org")
    journal_file: Path | None = None
    date_format: str = DEFAULT_DATE_FORMAT
    workflow_states: list | None = None  # Raw records, validated by registry()
    heading_marker_style: str = "asterisks"
    body_indent: int = DEFAULT_BODY_INDENT
    backup: bool = False
    auto_done: bool = False

    ###########################################################################
    #
    def __post_init__(self):
        if self.journal_file is None:
            self.journal_file = self.org_dir / "journal.org"

    ###########################################################################
    #
    def registry(self) -> WorkflowRegistry:
        """Workflow registry built (and validated) from workflow_states."""
        return create_workflow_registry(self.workflow_states)


###############################################################################
#
def _workflow_states_from(raw: str | None) -> list | None:
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(
            "ORG_WORKFLOW_STATES is not valid JSON (%s); using defaults", e
        )
        return None
    if not isinstance(value, list):
        logger.warning("ORG_WORKFLOW_STATES must be a JSON list; using defaults")
        return None
    return value


###############################################################################
#
def _body_indent_from(raw: str | None) -> int:
    if raw is None or raw == "":
        return DEFAULT_BODY_INDENT
    try:
        value = int(raw)
    except ValueError:
        logger.warning(
            "ORG_BODY_INDENT=%r is not an integer; using %d", raw, DEFAULT_BODY_INDENT
        )
        return DEFAULT_BODY_INDENT
    if value < 0:
        logger.warning(
            "ORG_BODY_INDENT=%r is negative; using %d", raw, DEFAULT_BODY_INDENT
        )
        return DEFAULT_BODY_INDENT
    return value


###############################################################################
#
def _flag(raw: str | None) -> bool:
    return (raw or "").strip().lower() in TRUE_VALUES


###############################################################################
#
def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """
    Build a Config from environment variables.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        Config; unset or malformed variables fall back to their defaults

    Note:
        ORG_DIR, ORG_JOURNAL_FILE, ORG_DATE_FORMAT, ORG_WORKFLOW_STATES (JSON),
        ORG_HEADING_MARKER_STYLE, ORG_BODY_INDENT, ORG_BACKUP and ORG_AUTO_DONE
        are read.
    """
    env = os.environ if environ is None else environ

    org_dir = Path(env.get("ORG_DIR") or Path.home() / "org").expanduser()
    journal = env.get("ORG_JOURNAL_FILE")
    journal_file = Path(journal).expanduser() if journal else org_dir / "journal.org"

    date_format = env.get("ORG_DATE_FORMAT") or DEFAULT_DATE_FORMAT
    if not is_supported_date_format(date_format):
        logger.warning(
            "ORG_DATE_FORMAT=%r is not supported; using %s",
            date_format,
            DEFAULT_DATE_FORMAT,
        )
        date_format = DEFAULT_DATE_FORMAT

    style = (env.get("ORG_HEADING_MARKER_STYLE") or "asterisks").strip().lower()
    if style not in HEADING_MARKER_STYLES:
        logger.warning(
            "ORG_HEADING_MARKER_STYLE=%r is not supported; using asterisks", style
        )
        style = "asterisks"

    return Config(
        org_dir=org_dir,
        journal_file=journal_file,
        date_format=date_format,
        workflow_states=_workflow_states_from(env.get("ORG_WORKFLOW_STATES")),
        heading_marker_style=style,
        body_indent=_body_indent_from(env.get("ORG_BODY_INDENT")),
        backup=_flag(env.get("ORG_BACKUP")),
        auto_done=_flag(env.get("ORG_AUTO_DONE")),
    )
