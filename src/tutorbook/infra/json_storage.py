"""JSON file implementation of :class:`~tutorbook.core.protocols.AddressBookStorage`.

This module is the **only** place in the codebase that touches the data
file.  ``OSError``, JSON decoding errors and invalid field values are
caught here and re-raised as :class:`~tutorbook.exceptions.StorageError`
— nothing raw escapes the infrastructure boundary.

File layout::

    {
      "persons": [
        {"name": "...", "phone": "...", "parentPhone": "...",
         "email": "...", "tags": ["..."], "note": "..."}
      ],
      "sessions": [
        {"studentName": "...", "subject": "...", "date": "YYYY-MM-DD",
         "time": "HH:MM", "durationMinutes": 90}
      ]
    }

The ``sessions`` key is optional when reading.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any

from tutorbook.core.models import AddressBook, Email, Name, Person, Phone, Session, Subject, Tag
from tutorbook.exceptions import StorageError, TutorBookError

logger = logging.getLogger(__name__)


class JsonAddressBookStorage:
    """Concrete :class:`AddressBookStorage` backed by one JSON file.

    This class satisfies the :class:`~tutorbook.core.protocols.AddressBookStorage`
    protocol structurally — no explicit inheritance required.
    """

    def __init__(self, path: Path) -> None:
        self._path: Path = path

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def load(self) -> AddressBook | None:
        """Read the data file; ``None`` when it does not exist yet.

        Raises
        ------
        StorageError
            When the file is unreadable, not valid JSON, or holds
            records that fail validation.
        """
        if not self._path.exists():
            logger.info("data file %s not found, starting empty", self._path)
            return None

        try:
            raw: Any = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise StorageError(
                f"Could not read data file {self._path}: {exc}",
                hint="Check the file permissions or choose another --data-file.",
            ) from exc
        except json.JSONDecodeError as exc:
            raise StorageError(
                f"Data file {self._path} is not valid JSON: {exc}",
                hint="Fix or remove the file to start with an empty address book.",
            ) from exc

        book = self._decode(raw)
        logger.info("loaded %d person(s) from %s", len(book), self._path)
        return book

    def save(self, address_book: AddressBook) -> None:
        """Write *address_book* to the data file, creating parent folders."""
        payload = {
            "persons": [_encode_person(person) for person in address_book.persons],
            "sessions": [_encode_session(session) for session in address_book.sessions],
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise StorageError(
                f"Could not write data file {self._path}: {exc}",
                hint="Check the file permissions or choose another --data-file.",
            ) from exc
        logger.debug(
            "saved %d person(s) and %d session(s) to %s",
            len(address_book),
            len(address_book.sessions),
            self._path,
        )

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def _decode(self, raw: Any) -> AddressBook:
        if (
            not isinstance(raw, dict)
            or not isinstance(raw.get("persons"), list)
            or not isinstance(raw.get("sessions", []), list)
        ):
            raise StorageError(
                f"Data file {self._path} has an unexpected structure.",
                hint='Expected an object with a "persons" list and an optional "sessions" list.',
            )
        try:
            return AddressBook(
                (_decode_person(entry) for entry in raw["persons"]),
                (_decode_session(entry) for entry in raw.get("sessions", [])),
            )
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise StorageError(
                f"Data file {self._path} has a malformed entry: {exc!r}",
            ) from exc
        except TutorBookError as exc:
            raise StorageError(
                f"Data file {self._path} contains an invalid record: {exc}",
                hint="Fix the entry by hand or remove the file.",
            ) from exc


def _encode_person(person: Person) -> dict[str, Any]:
    return {
        "name": person.name.full_name,
        "phone": person.phone.value,
        "parentPhone": person.parent_phone.value,
        "email": person.email.value,
        "tags": [tag.tag_name for tag in person.sorted_tags()],
        "note": person.note,
    }


def _decode_person(entry: dict[str, Any]) -> Person:
    return Person(
        name=Name(entry["name"]),
        phone=Phone(entry["phone"]),
        parent_phone=Phone(entry["parentPhone"]),
        email=Email(entry["email"]),
        tags=frozenset(Tag(name) for name in entry.get("tags", [])),
        note=str(entry.get("note", "")),
    )


def _encode_session(session: Session) -> dict[str, Any]:
    return {
        "studentName": session.student_name.full_name,
        "subject": session.subject.name,
        "date": session.date.isoformat(),
        "time": session.time.strftime("%H:%M"),
        "durationMinutes": int(session.duration.total_seconds()) // 60,
    }


def _decode_session(entry: dict[str, Any]) -> Session:
    return Session(
        student_name=Name(entry["studentName"]),
        subject=Subject(entry["subject"]),
        date=dt.date.fromisoformat(entry["date"]),
        time=dt.time.fromisoformat(entry["time"]),
        duration=dt.timedelta(minutes=int(entry["durationMinutes"])),
    )
