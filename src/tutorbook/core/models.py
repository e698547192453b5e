"""Domain models for tutorbook.

Value objects are **frozen** dataclasses validated at construction; an
invalid value can never exist.  :class:`AddressBook` is the only mutable
model: it holds the live persons and sessions that commands edit, and it converts
to and from immutable :class:`Snapshot` objects for the history.
"""

from __future__ import annotations

import datetime as dt
import re
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from tutorbook.exceptions import CommandError, FieldValidationError


# ---------------------------------------------------------------------------
# Field value objects
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Name:
    """A student's full name."""

    MESSAGE_CONSTRAINTS = (
        "Names should only contain alphanumeric characters and spaces, "
        "and it should not be blank"
    )
    _PATTERN = re.compile(r"[^\W_](?:[^\W_]| )*", re.ASCII)

    full_name: str

    def __post_init__(self) -> None:
        if not self.is_valid(self.full_name):
            raise FieldValidationError(self.MESSAGE_CONSTRAINTS)

    @classmethod
    def is_valid(cls, text: str) -> bool:
        return cls._PATTERN.fullmatch(text) is not None

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True, slots=True)
class Phone:
    """A phone number; used for both the student and the parent."""

    MESSAGE_CONSTRAINTS = (
        "Phone numbers should only contain numbers, and it should be at least 3 digits long"
    )
    _PATTERN = re.compile(r"\d{3,}", re.ASCII)

    value: str

    def __post_init__(self) -> None:
        if not self.is_valid(self.value):
            raise FieldValidationError(self.MESSAGE_CONSTRAINTS)

    @classmethod
    def is_valid(cls, text: str) -> bool:
        return cls._PATTERN.fullmatch(text) is not None

    def __str__(self) -> str:
        return self.value


_SPECIAL_CHARACTERS = "+_.-"
_ALPHANUMERIC_NO_UNDERSCORE = r"[^\W_]+"
_LOCAL_PART = (
    _ALPHANUMERIC_NO_UNDERSCORE
    + "(?:["
    + re.escape(_SPECIAL_CHARACTERS)
    + "]"
    + _ALPHANUMERIC_NO_UNDERSCORE
    + ")*"
)
_DOMAIN_PART = _ALPHANUMERIC_NO_UNDERSCORE + "(?:-" + _ALPHANUMERIC_NO_UNDERSCORE + ")*"
_DOMAIN_LAST_PART = "(?:" + _DOMAIN_PART + "){2,}"


@dataclass(frozen=True, slots=True)
class Email:
    """An email address of the form ``local-part@domain``."""

    MESSAGE_CONSTRAINTS = (
        "Emails should be of the format local-part@domain and adhere to the following constraints:\n"
        "1. The local-part should only contain alphanumeric characters and these special "
        f"characters, excluding the parentheses, ({_SPECIAL_CHARACTERS}). The local-part may not "
        "start or end with any special characters.\n"
        "2. This is followed by a '@' and then a domain name. The domain name is made up of "
        "domain labels separated by periods.\n"
        "The domain name must:\n"
        "    - end with a domain label at least 2 characters long\n"
        "    - have each domain label start and end with alphanumeric characters\n"
        "    - have each domain label consist of alphanumeric characters, separated only by "
        "hyphens, if any."
    )
    _PATTERN = re.compile(
        _LOCAL_PART + "@(?:" + _DOMAIN_PART + r"\.)*" + _DOMAIN_LAST_PART,
        re.ASCII,
    )

    value: str

    def __post_init__(self) -> None:
        if not self.is_valid(self.value):
            raise FieldValidationError(self.MESSAGE_CONSTRAINTS)

    @classmethod
    def is_valid(cls, text: str) -> bool:
        return cls._PATTERN.fullmatch(text) is not None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Tag:
    """A single alphanumeric label attached to a person."""

    MESSAGE_CONSTRAINTS = "Tags names should be alphanumeric"
    _PATTERN = re.compile(r"[^\W_]+", re.ASCII)

    tag_name: str

    def __post_init__(self) -> None:
        if not self.is_valid(self.tag_name):
            raise FieldValidationError(self.MESSAGE_CONSTRAINTS)

    @classmethod
    def is_valid(cls, text: str) -> bool:
        return cls._PATTERN.fullmatch(text) is not None

    def __str__(self) -> str:
        return f"[{self.tag_name}]"


# ---------------------------------------------------------------------------
# Person
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Person:
    """One student record.

    Equality covers every identity and data field; the free-text note
    is not part of it.
    """

    name: Name
    phone: Phone
    parent_phone: Phone
    email: Email
    tags: frozenset[Tag] = frozenset()
    note: str = field(default="", compare=False)

    def is_same_person(self, other: Person | None) -> bool:
        """Weaker identity: two persons with the same name (any case)."""
        if other is None:
            return False
        return self.name.full_name.casefold() == other.name.full_name.casefold()

    def copy(self) -> Person:
        """Return a deep copy, including a fresh tag set."""
        return Person(
            name=Name(self.name.full_name),
            phone=Phone(self.phone.value),
            parent_phone=Phone(self.parent_phone.value),
            email=Email(self.email.value),
            tags=frozenset(Tag(tag.tag_name) for tag in self.tags),
            note=self.note,
        )

    def sorted_tags(self) -> list[Tag]:
        """Tags in a stable, alphabetical order for display."""
        return sorted(self.tags, key=lambda tag: tag.tag_name)


# ---------------------------------------------------------------------------
# Tutoring sessions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Subject:
    """The subject taught in a session."""

    MESSAGE_CONSTRAINTS = (
        "Subjects should only contain alphanumeric characters and spaces, "
        "and it should not be blank"
    )
    _PATTERN = re.compile(r"[^\W_](?:[^\W_]| )*", re.ASCII)

    name: str

    def __post_init__(self) -> None:
        if not self.is_valid(self.name):
            raise FieldValidationError(self.MESSAGE_CONSTRAINTS)

    @classmethod
    def is_valid(cls, text: str) -> bool:
        return cls._PATTERN.fullmatch(text) is not None

    def __str__(self) -> str:
        return self.name


MAX_SESSION_DURATION = dt.timedelta(hours=12)


@dataclass(frozen=True, slots=True)
class Session:
    """One scheduled lesson with a student in the address book.

    The student is referenced by name; :class:`AddressBook` keeps the
    reference valid across renames and deletions.
    """

    MESSAGE_DURATION_CONSTRAINTS = "Session duration should be between 1 minute and 12 hours"

    student_name: Name
    subject: Subject
    date: dt.date
    time: dt.time
    duration: dt.timedelta

    def __post_init__(self) -> None:
        if not dt.timedelta(minutes=1) <= self.duration <= MAX_SESSION_DURATION:
            raise FieldValidationError(self.MESSAGE_DURATION_CONSTRAINTS)

    @property
    def start(self) -> dt.datetime:
        return dt.datetime.combine(self.date, self.time)

    @property
    def end(self) -> dt.datetime:
        return self.start + self.duration

    def overlaps(self, other: Session) -> bool:
        """True when the two sessions share any minute."""
        return self.start < other.end and other.start < self.end

    def is_for(self, person: Person) -> bool:
        return self.student_name.full_name.casefold() == person.name.full_name.casefold()

    def copy(self) -> Session:
        return replace(
            self,
            student_name=Name(self.student_name.full_name),
            subject=Subject(self.subject.name),
        )

    def sort_key(self) -> tuple[dt.datetime, str]:
        return self.start, self.student_name.full_name.casefold()


# ---------------------------------------------------------------------------
# Snapshot & live address book
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Snapshot:
    """Immutable copy of the full record set at one point in time."""

    persons: tuple[Person, ...] = ()
    sessions: tuple[Session, ...] = ()

    def __len__(self) -> int:
        return len(self.persons)


class AddressBook:
    """The live, mutable persons and schedule that commands operate on.

    Guarantees no two persons satisfy :meth:`Person.is_same_person`, and
    every session belongs to a person in the book.
    """

    def __init__(self, persons: Iterable[Person] = (), sessions: Iterable[Session] = ()) -> None:
        self._persons: list[Person] = []
        self._sessions: list[Session] = []
        for person in persons:
            self.add(person)
        for session in sessions:
            self.add_session(session)

    @property
    def persons(self) -> tuple[Person, ...]:
        return tuple(self._persons)

    @property
    def sessions(self) -> tuple[Session, ...]:
        """Sessions ordered by start time."""
        return tuple(self._sessions)

    def __len__(self) -> int:
        return len(self._persons)

    # ------------------------------------------------------------------
    # Persons
    # ------------------------------------------------------------------

    def has_person(self, person: Person) -> bool:
        return any(existing.is_same_person(person) for existing in self._persons)

    def person_named(self, name: Name) -> Person | None:
        """Return the person whose name matches *name* in any case."""
        wanted = name.full_name.casefold()
        return next(
            (person for person in self._persons if person.name.full_name.casefold() == wanted),
            None,
        )

    def add(self, person: Person) -> None:
        """Append *person*; it must not duplicate an existing person."""
        if self.has_person(person):
            raise CommandError("This person already exists in the address book")
        self._persons.append(person)

    def set_person(self, target: Person, edited: Person) -> None:
        """Replace *target* with *edited* in place; its sessions follow a rename."""
        index = self._index_of(target)
        if not target.is_same_person(edited) and self.has_person(edited):
            raise CommandError("This person already exists in the address book")
        self._persons[index] = edited
        if edited.name != target.name:
            self._sessions = [
                replace(session, student_name=edited.name) if session.is_for(target) else session
                for session in self._sessions
            ]

    def remove(self, target: Person) -> None:
        """Delete *target* together with its sessions."""
        del self._persons[self._index_of(target)]
        self._sessions = [session for session in self._sessions if not session.is_for(target)]

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def add_session(self, session: Session) -> None:
        """Insert *session* in start-time order.

        Raises
        ------
        CommandError
            If the student is not in the book or the session already exists.
        """
        if self.person_named(session.student_name) is None:
            raise CommandError(f"No student named {session.student_name} in the address book")
        if session in self._sessions:
            raise CommandError("This session already exists in the schedule")
        self._sessions.append(session)
        self._sessions.sort(key=Session.sort_key)

    def clashing_session(self, session: Session) -> Session | None:
        """Return the first existing session overlapping *session*, if any."""
        return next((existing for existing in self._sessions if existing.overlaps(session)), None)

    def remove_session(self, target: Session) -> None:
        for index, session in enumerate(self._sessions):
            if session == target:
                del self._sessions[index]
                return
        raise CommandError("The session is not in the schedule")

    # ------------------------------------------------------------------
    # Whole-book operations
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self._persons.clear()
        self._sessions.clear()

    def snapshot(self) -> Snapshot:
        """Deep-copy the current persons and sessions into an immutable snapshot."""
        return Snapshot(
            tuple(person.copy() for person in self._persons),
            tuple(session.copy() for session in self._sessions),
        )

    def reset(self, snapshot: Snapshot) -> None:
        """Replace the live contents with a deep copy of *snapshot*."""
        self._persons = [person.copy() for person in snapshot.persons]
        self._sessions = [session.copy() for session in snapshot.sessions]

    def _index_of(self, target: Person) -> int:
        for index, person in enumerate(self._persons):
            if person is target or person == target:
                return index
        raise CommandError("The person is not in the address book")
