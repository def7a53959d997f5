"""
Pytest fixtures and factories for testing the outline engine and MCP server.
"""

from datetime import date, datetime
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

import server
from orgoutline.config import Config
from orgoutline.continued import DAY_HEADING_SEPARATOR
from orgoutline.dates import format_date, weekday_abbrev
from orgoutline.workflow import DEFAULT_REGISTRY, WorkflowRegistry

# Fixed clock for CLOSED stamps and repeaters
NOW = datetime(2026, 1, 15, 14, 30)

# =============================================================================
# Sample Data Factories
# =============================================================================


def make_day_heading(day: date, fmt: str = "YYYY-MM-DD") -> str:
    """
    Factory to create a day heading line.

    Args:
        day: Date of the heading
        fmt: Date layout

    Returns:
        e.g. "* [2026-01-15 Thu] ------------------------------------------------"
    """
    return f"* [{format_date(day, fmt)} {weekday_abbrev(day)}]{DAY_HEADING_SEPARATOR}"


def make_task(
    headline: str,
    status: str | None = "TODO",
    indent: str = "  ",
    scheduled: str | None = None,
    checkboxes: list[tuple[bool, str]] | None = None,
) -> list[str]:
    """
    Factory to create the lines of a task heading.

    Args:
        headline: Task title (may include tags)
        status: Workflow keyword, or None for a plain heading
        indent: Indentation of the heading
        scheduled: Timestamp body for a SCHEDULED planning line
        checkboxes: List of (checked, text) tuples for a checklist

    Returns:
        Lines of the task entry
    """
    words = ["*", status, headline] if status else ["*", headline]
    lines = [indent + " ".join(words)]
    if scheduled:
        lines.append(f"{indent}  SCHEDULED: <{scheduled}>")
    for checked, text in checkboxes or []:
        marker = "[X]" if checked else "[ ]"
        lines.append(f"{indent}  - {marker} {text}")
    return lines


def make_journal(days: list[tuple[date, list[list[str]]]]) -> list[str]:
    """
    Factory to create journal lines from days of tasks.

    Args:
        days: List of (date, tasks) pairs; each task is a list of lines

    Returns:
        Journal lines; days are separated by one blank line
    """
    lines: list[str] = []
    for day, tasks in days:
        if lines:
            lines.append("")
        lines.append(make_day_heading(day))
        for task in tasks:
            lines.extend(task)
    return lines


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def registry() -> WorkflowRegistry:
    return DEFAULT_REGISTRY


@pytest.fixture
def journal_file(tmp_path: Path, mocker: MockerFixture) -> Path:
    """
    Point the server at an empty journal in a temporary org directory.

    The server's CONFIG is replaced too so that tests do not depend on the
    ORG_* environment of the machine running them.
    """
    path = tmp_path / "journal.org"
    config = Config(org_dir=tmp_path, journal_file=path)
    mocker.patch("server.CONFIG", config)
    mocker.patch("server.ORG_DIR", tmp_path)
    mocker.patch("server.ORG_FILE", path)
    mocker.patch("server.REGISTRY", config.registry())
    return path


@pytest.fixture
def sample_journal(journal_file: Path) -> Path:
    """
    Write a two-day journal with tasks, a checklist and a planning line.

    Layout (1-based line numbers):
        1  * [2026-01-15 Thu] ----
        2    * TODO Buy groceries [/] :shopping:
        3      - [ ] Milk
        4      - [ ] Bread
        5    * TODO Call mom
        6      SCHEDULED: <2026-01-15 Thu>
        7    * IN_PROGRESS Write report
        8
        9  * [2026-01-16 Fri] ----
        10   * TODO Plan week
    """
    lines = make_journal(
        [
            (
                date(2026, 1, 15),
                [
                    make_task(
                        "Buy groceries [/] :shopping:",
                        checkboxes=[(False, "Milk"), (False, "Bread")],
                    ),
                    make_task("Call mom", scheduled="2026-01-15 Thu"),
                    make_task("Write report", status="IN_PROGRESS"),
                ],
            ),
            (date(2026, 1, 16), [make_task("Plan week")]),
        ]
    )
    journal_file.write_text("\n".join(lines) + "\n")
    return journal_file


def read_journal(path: Path) -> list[str]:
    return path.read_text().splitlines()
