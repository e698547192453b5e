"""Executable command objects produced by the command parser.

Commands are frozen dataclasses holding already-validated values.
:meth:`Command.execute` either completes or raises
:class:`~tutorbook.exceptions.CommandError` before touching the model;
committing the resulting state to the history is the job of
:class:`~tutorbook.core.logic.LogicManager`, driven by the
:attr:`Command.mutates` and :attr:`Command.restores` flags.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from tutorbook.core.messages import (
    MESSAGE_INVALID_PERSON_DISPLAYED_INDEX,
    MESSAGE_INVALID_SESSION_DISPLAYED_INDEX,
    MESSAGE_PERSONS_LISTED_OVERVIEW,
    MESSAGE_SESSIONS_LISTED_OVERVIEW,
    format_person,
    format_session,
)
from tutorbook.core.models import Email, Name, Person, Phone, Session, Tag
from tutorbook.exceptions import CommandError

if TYPE_CHECKING:
    from tutorbook.core.model_manager import ModelManager


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one executed command, consumed by the CLI layer."""

    feedback: str
    persons: tuple[Person, ...] | None = None
    """Persons to render as a table, or ``None`` for feedback only."""

    sessions: tuple[Session, ...] | None = None
    """Sessions to render as a table, or ``None``."""

    show_help: bool = False
    exit: bool = False


class Command(ABC):
    """Base class for every executable command."""

    mutates: ClassVar[bool] = False
    """Whether a successful run produces a new history snapshot."""

    restores: ClassVar[bool] = False
    """Whether a successful run moves the history cursor."""

    @abstractmethod
    def execute(self, model: ModelManager) -> CommandResult:
        """Run against *model* and describe the outcome."""


def _person_at(model: ModelManager, index: int) -> Person:
    displayed = model.displayed_persons()
    if index >= len(displayed):
        raise CommandError(MESSAGE_INVALID_PERSON_DISPLAYED_INDEX)
    return displayed[index]


# ---------------------------------------------------------------------------
# Mutating commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AddCommand(Command):
    person: Person

    mutates: ClassVar[bool] = True

    def execute(self, model: ModelManager) -> CommandResult:
        model.address_book.add(self.person)
        model.show_all()
        return CommandResult(f"New person added: {format_person(self.person)}")


@dataclass(frozen=True, slots=True)
class EditPersonDescriptor:
    """Fields to change on an existing person; ``None`` means unchanged."""

    name: Name | None = None
    phone: Phone | None = None
    parent_phone: Phone | None = None
    email: Email | None = None
    tags: frozenset[Tag] | None = None

    def is_any_field_edited(self) -> bool:
        return any(
            value is not None
            for value in (self.name, self.phone, self.parent_phone, self.email, self.tags)
        )

    def apply_to(self, person: Person) -> Person:
        """Return a copy of *person* with the edited fields replaced."""
        changes = {
            field.name: getattr(self, field.name)
            for field in dataclasses.fields(self)
            if getattr(self, field.name) is not None
        }
        return dataclasses.replace(person, **changes)


@dataclass(frozen=True, slots=True)
class EditCommand(Command):
    index: int
    descriptor: EditPersonDescriptor

    mutates: ClassVar[bool] = True

    def execute(self, model: ModelManager) -> CommandResult:
        target = _person_at(model, self.index)
        edited = self.descriptor.apply_to(target)
        model.address_book.set_person(target, edited)
        model.show_all()
        return CommandResult(f"Edited Person: {format_person(edited)}")


@dataclass(frozen=True, slots=True)
class DeleteCommand(Command):
    index: int

    mutates: ClassVar[bool] = True

    def execute(self, model: ModelManager) -> CommandResult:
        target = _person_at(model, self.index)
        model.address_book.remove(target)
        return CommandResult(f"Deleted Person: {format_person(target)}")


@dataclass(frozen=True, slots=True)
class NoteCommand(Command):
    index: int
    note: str

    mutates: ClassVar[bool] = True

    def execute(self, model: ModelManager) -> CommandResult:
        target = _person_at(model, self.index)
        edited = dataclasses.replace(target, note=self.note)
        model.address_book.set_person(target, edited)
        if self.note:
            return CommandResult(f"Added note to Person: {format_person(edited)}")
        return CommandResult(f"Removed note from Person: {format_person(edited)}")


@dataclass(frozen=True, slots=True)
class ClearCommand(Command):
    mutates: ClassVar[bool] = True

    def execute(self, model: ModelManager) -> CommandResult:
        model.address_book.clear()
        model.show_all()
        return CommandResult("Address book has been cleared!")


MESSAGE_UNKNOWN_STUDENT = "No student named {} in the address book"


@dataclass(frozen=True, slots=True)
class ScheduleCommand(Command):
    """Book a session for an existing student; sessions may not overlap."""

    session: Session

    mutates: ClassVar[bool] = True

    def execute(self, model: ModelManager) -> CommandResult:
        book = model.address_book
        student = book.person_named(self.session.student_name)
        if student is None:
            raise CommandError(MESSAGE_UNKNOWN_STUDENT.format(self.session.student_name))
        clash = book.clashing_session(self.session)
        if clash is not None:
            raise CommandError(f"This session clashes with: {format_session(clash)}")

        session = dataclasses.replace(self.session, student_name=student.name)
        book.add_session(session)
        return CommandResult(f"New session scheduled: {format_session(session)}")


@dataclass(frozen=True, slots=True)
class CancelSessionCommand(Command):
    index: int

    mutates: ClassVar[bool] = True

    def execute(self, model: ModelManager) -> CommandResult:
        sessions = model.address_book.sessions
        if self.index >= len(sessions):
            raise CommandError(MESSAGE_INVALID_SESSION_DISPLAYED_INDEX)
        target = sessions[self.index]
        model.address_book.remove_session(target)
        return CommandResult(f"Cancelled {format_session(target)}")


# ---------------------------------------------------------------------------
# History commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class UndoCommand(Command):
    restores: ClassVar[bool] = True

    def execute(self, model: ModelManager) -> CommandResult:
        model.undo()
        return CommandResult("Undo successful")


@dataclass(frozen=True, slots=True)
class RedoCommand(Command):
    restores: ClassVar[bool] = True

    def execute(self, model: ModelManager) -> CommandResult:
        model.redo()
        return CommandResult("Redo successful")


# ---------------------------------------------------------------------------
# Read-only commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class FindCommand(Command):
    """Show persons whose name contains any keyword as a whole word."""

    keywords: tuple[str, ...]

    def matches(self, person: Person) -> bool:
        words = {word.casefold() for word in person.name.full_name.split()}
        return any(keyword.casefold() in words for keyword in self.keywords)

    def execute(self, model: ModelManager) -> CommandResult:
        model.update_filter(self.matches)
        shown = model.displayed_persons()
        return CommandResult(MESSAGE_PERSONS_LISTED_OVERVIEW.format(len(shown)), persons=shown)


@dataclass(frozen=True, slots=True)
class ListCommand(Command):
    def execute(self, model: ModelManager) -> CommandResult:
        model.show_all()
        return CommandResult("Listed all persons", persons=model.displayed_persons())


@dataclass(frozen=True, slots=True)
class ListSessionsCommand(Command):
    def execute(self, model: ModelManager) -> CommandResult:
        sessions = model.address_book.sessions
        return CommandResult(
            MESSAGE_SESSIONS_LISTED_OVERVIEW.format(len(sessions)),
            sessions=sessions,
        )


@dataclass(frozen=True, slots=True)
class HelpCommand(Command):
    usages: Sequence[str] = ()

    def execute(self, model: ModelManager) -> CommandResult:
        return CommandResult("\n\n".join(self.usages), show_help=True)


@dataclass(frozen=True, slots=True)
class ExitCommand(Command):
    def execute(self, model: ModelManager) -> CommandResult:
        return CommandResult("Exiting tutorbook as requested ...", exit=True)
