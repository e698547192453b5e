"""Prefix catalog — the markers that delimit typed fields in a command.

The catalog is fixed at import time and read-only thereafter.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Prefix:
    """A short literal marker such as ``n/`` or ``p/``.

    Identity, equality and hashing are all by the literal text.
    """

    text: str

    def __str__(self) -> str:
        return self.text


PREFIX_NAME = Prefix("n/")
PREFIX_PHONE = Prefix("p/")
PREFIX_PARENT_PHONE = Prefix("pp/")
PREFIX_EMAIL = Prefix("e/")
PREFIX_TAG = Prefix("t/")
PREFIX_NOTE = Prefix("nt/")
PREFIX_SUBJECT = Prefix("s/")
PREFIX_DATE = Prefix("d/")
PREFIX_TIME = Prefix("tm/")
PREFIX_DURATION = Prefix("dur/")

ALL_PREFIXES: tuple[Prefix, ...] = (
    PREFIX_NAME,
    PREFIX_PHONE,
    PREFIX_PARENT_PHONE,
    PREFIX_EMAIL,
    PREFIX_TAG,
    PREFIX_NOTE,
    PREFIX_SUBJECT,
    PREFIX_DATE,
    PREFIX_TIME,
    PREFIX_DURATION,
)
