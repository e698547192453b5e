"""Trim-then-validate helpers that turn raw field text into value objects.

Every helper raises :class:`~tutorbook.exceptions.ParseError` (or its
:class:`~tutorbook.exceptions.FieldValidationError` subclass) carrying
the field's own constraint message.
"""

from __future__ import annotations

import datetime as dt
import re
from collections.abc import Iterable

from tutorbook.core.models import Email, Name, Phone, Subject, Tag
from tutorbook.exceptions import FieldValidationError, ParseError

MESSAGE_INVALID_INDEX = "Index is not a non-zero unsigned integer."
MESSAGE_INVALID_DATE = "Dates should be in the format YYYY-MM-DD, e.g. 2024-03-01"
MESSAGE_INVALID_TIME = "Times should be in 24-hour HH:MM format, e.g. 16:30"
MESSAGE_INVALID_DURATION = "Durations should look like 1h, 45m or 1h30m"

_DURATION_PATTERN = re.compile(r"(?:(?P<hours>\d+)h)?(?:(?P<minutes>\d+)m)?", re.ASCII)


def parse_index(one_based_index: str) -> int:
    """Parse a 1-based display index and return it 0-based."""
    trimmed = one_based_index.strip()
    if not trimmed.isdigit() or not trimmed.isascii() or int(trimmed) == 0:
        raise ParseError(MESSAGE_INVALID_INDEX)
    return int(trimmed) - 1


def parse_name(name: str) -> Name:
    return Name(name.strip())


def parse_phone(phone: str) -> Phone:
    return Phone(phone.strip())


def parse_email(email: str) -> Email:
    return Email(email.strip())


def parse_tag(tag: str) -> Tag:
    return Tag(tag.strip())


def parse_tags(tags: Iterable[str]) -> frozenset[Tag]:
    """Parse every raw tag; repeated tags collapse into one."""
    return frozenset(parse_tag(tag) for tag in tags)


def parse_subject(subject: str) -> Subject:
    return Subject(subject.strip())


def parse_date(date: str) -> dt.date:
    try:
        return dt.datetime.strptime(date.strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise FieldValidationError(MESSAGE_INVALID_DATE) from exc


def parse_time(time: str) -> dt.time:
    try:
        return dt.datetime.strptime(time.strip(), "%H:%M").time()
    except ValueError as exc:
        raise FieldValidationError(MESSAGE_INVALID_TIME) from exc


def parse_duration(duration: str) -> dt.timedelta:
    """Parse ``1h``, ``45m`` or ``1h30m``; bounds are checked by :class:`Session`."""
    match = _DURATION_PATTERN.fullmatch(duration.strip())
    if match is None or not any(match.group("hours", "minutes")):
        raise FieldValidationError(MESSAGE_INVALID_DURATION)
    return dt.timedelta(
        hours=int(match.group("hours") or 0),
        minutes=int(match.group("minutes") or 0),
    )
