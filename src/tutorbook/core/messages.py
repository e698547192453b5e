"""User-visible message constants and formatters."""

from __future__ import annotations

import datetime as dt

from tutorbook.core.models import Person, Session
from tutorbook.core.syntax import Prefix

MESSAGE_UNKNOWN_COMMAND = "Unknown command"
MESSAGE_INVALID_COMMAND_FORMAT = "Invalid command format! \n{}"
MESSAGE_INVALID_PERSON_DISPLAYED_INDEX = "The person index provided is invalid"
MESSAGE_PERSONS_LISTED_OVERVIEW = "{} persons listed!"
MESSAGE_INVALID_SESSION_DISPLAYED_INDEX = "The session index provided is invalid"
MESSAGE_SESSIONS_LISTED_OVERVIEW = "{} sessions listed!"
MESSAGE_MISSING_FIELDS = "Missing the following required fields: "
MESSAGE_DUPLICATE_FIELDS = "Multiple values specified for the following single-valued field(s): "


def get_error_message_for_duplicate_prefixes(*duplicate_prefixes: Prefix) -> str:
    """Return the duplicate-field message listing each prefix once.

    Prefixes keep the order they are given in.
    """
    if not duplicate_prefixes:
        raise ValueError("at least one duplicate prefix is required")
    fields = dict.fromkeys(str(prefix) for prefix in duplicate_prefixes)
    return MESSAGE_DUPLICATE_FIELDS + " ".join(fields)


def get_missing_prefixes_message(missing_prefixes: tuple[Prefix, ...], usage: str) -> str:
    """Prepend the list of missing prefixes, if any, to *usage*."""
    if not missing_prefixes:
        return usage
    listed = " ".join(str(prefix) for prefix in missing_prefixes)
    return f"{MESSAGE_MISSING_FIELDS}{listed}\n{usage}"


def format_person(person: Person) -> str:
    """Format *person* as a single line for feedback messages."""
    tags = "".join(str(tag) for tag in person.sorted_tags())
    return (
        f"{person.name}; Phone: {person.phone}; Parent Phone: {person.parent_phone}; "
        f"Email: {person.email}; Tags: {tags}"
    )


def format_duration(duration: dt.timedelta) -> str:
    """Format *duration* as hours and zero-padded minutes, e.g. ``1h05m``."""
    hours, seconds = divmod(int(duration.total_seconds()), 3600)
    return f"{hours}h{seconds // 60:02d}m"


def format_session(session: Session) -> str:
    """Format *session* as a single line, e.g. ``... on 2024-03-01 at 16:00 for 1h30m``."""
    return (
        f"Session for {session.student_name} in {session.subject} "
        f"on {session.date:%Y-%m-%d} at {session.time:%H:%M} for {format_duration(session.duration)}"
    )
