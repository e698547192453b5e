"""Core / service layer — parsing, commands, models and history.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from tutorbook.core.command_parser import parse_command
from tutorbook.core.history import HistoryManager
from tutorbook.core.logic import LogicManager
from tutorbook.core.model_manager import ModelManager
from tutorbook.core.models import AddressBook, Email, Name, Person, Phone, Snapshot, Tag
from tutorbook.core.protocols import AddressBookStorage
from tutorbook.core.tokenizer import ArgumentMultimap, tokenize

__all__: list[str] = [
    "AddressBook",
    "AddressBookStorage",
    "ArgumentMultimap",
    "Email",
    "HistoryManager",
    "LogicManager",
    "ModelManager",
    "Name",
    "Person",
    "Phone",
    "Snapshot",
    "Tag",
    "parse_command",
    "tokenize",
]
