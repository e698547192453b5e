"""Rich rendering of command results.

All display logic for the shell lives here — no parsing, no model
access beyond the :class:`~tutorbook.core.commands.CommandResult`
handed in.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from tutorbook.cli.console import console
from tutorbook.core.commands import CommandResult
from tutorbook.core.messages import format_duration
from tutorbook.core.models import Person, Session
from tutorbook.exceptions import EnvironmentError, TutorBookError


def _import_rich_table() -> tuple[type[Any], type[Any]]:
    """Import rich ``Table`` and ``Text`` lazily for list rendering."""
    try:
        from rich.table import Table
        from rich.text import Text
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Table, Text


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms, no I/O)
# ---------------------------------------------------------------------------

def _format_tags(person: Person) -> str:
    """Render tags as ``"math, sec3"`` or ``"—"`` when there are none."""
    if not person.tags:
        return "—"
    return ", ".join(tag.tag_name for tag in person.sorted_tags())


def _format_note(note: str, limit: int = 40) -> str:
    if len(note) > limit:
        return note[: limit - 3] + "..."
    return note


def build_person_rows(persons: Sequence[Person]) -> list[tuple[str, ...]]:
    """One row of display strings per person, numbered from 1."""
    return [
        (
            str(index),
            person.name.full_name,
            person.phone.value,
            person.parent_phone.value,
            person.email.value,
            _format_tags(person),
            _format_note(person.note),
        )
        for index, person in enumerate(persons, start=1)
    ]


def build_session_rows(sessions: Sequence[Session]) -> list[tuple[str, ...]]:
    """One row of display strings per session, numbered from 1."""
    return [
        (
            str(index),
            session.student_name.full_name,
            session.subject.name,
            f"{session.date:%Y-%m-%d}",
            f"{session.time:%H:%M}",
            format_duration(session.duration),
        )
        for index, session in enumerate(sessions, start=1)
    ]


# ---------------------------------------------------------------------------
# Rich output
# ---------------------------------------------------------------------------

def render_persons(persons: Sequence[Person]) -> None:
    """Print *persons* as a numbered Rich table."""
    table_class, text_class = _import_rich_table()

    table = table_class(
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Name", min_width=10)
    table.add_column("Phone")
    table.add_column("Parent Phone")
    table.add_column("Email")
    table.add_column("Tags")
    table.add_column("Note")

    for row in build_person_rows(persons):
        table.add_row(*(text_class(cell) for cell in row))

    console.print(table)


def render_sessions(sessions: Sequence[Session]) -> None:
    """Print *sessions* as a numbered Rich table; cancel indexes refer to it."""
    table_class, text_class = _import_rich_table()

    table = table_class(
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Student", min_width=10)
    table.add_column("Subject")
    table.add_column("Date")
    table.add_column("Time")
    table.add_column("Duration", justify="right")

    for row in build_session_rows(sessions):
        table.add_row(*(text_class(cell) for cell in row))

    console.print(table)


def render_result(result: CommandResult) -> None:
    """Show the feedback of *result* and, when present, its tables."""
    console.print_plain(result.feedback)
    if result.persons:
        render_persons(result.persons)
    if result.sessions:
        render_sessions(result.sessions)


def render_error(exc: TutorBookError) -> None:
    console.print_error(str(exc), exc.hint)
