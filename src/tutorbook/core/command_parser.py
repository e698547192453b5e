"""Command builders — turn one line of user input into a :class:`Command`.

Every command kind is one :class:`CommandSpec` row in
:data:`COMMAND_SPECS`, looked up by its keyword.  A row declares the
prefixes the command accepts, how its preamble is read, and a build
function that receives already-checked arguments.  The checks shared by
all commands run in :func:`parse_arguments`, in this order:

1. Presence — every missing required prefix is collected and reported
   together, alongside a stray preamble where none is allowed.
2. Duplicates — single-valued prefixes given more than once.
3. Preamble — an index or keywords, when the command takes one.
4. Conversion — the build function runs each value through its
   value-object validator.
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from tutorbook.core import parser_util
from tutorbook.core.commands import (
    AddCommand,
    CancelSessionCommand,
    ClearCommand,
    Command,
    DeleteCommand,
    EditCommand,
    EditPersonDescriptor,
    ExitCommand,
    FindCommand,
    HelpCommand,
    ListCommand,
    ListSessionsCommand,
    NoteCommand,
    RedoCommand,
    ScheduleCommand,
    UndoCommand,
)
from tutorbook.core.messages import (
    MESSAGE_INVALID_COMMAND_FORMAT,
    MESSAGE_UNKNOWN_COMMAND,
    get_missing_prefixes_message,
)
from tutorbook.core.models import Person, Session, Tag
from tutorbook.core.syntax import (
    PREFIX_DATE,
    PREFIX_DURATION,
    PREFIX_EMAIL,
    PREFIX_NAME,
    PREFIX_NOTE,
    PREFIX_PARENT_PHONE,
    PREFIX_PHONE,
    PREFIX_SUBJECT,
    PREFIX_TAG,
    PREFIX_TIME,
    Prefix,
)
from tutorbook.core.tokenizer import ArgumentMultimap, tokenize
from tutorbook.exceptions import MissingRequiredFieldError, ParseError

logger = logging.getLogger(__name__)

MESSAGE_NOT_EDITED = "At least one field to edit must be provided."

_COMMAND_FORMAT = re.compile(r"(?P<command_word>\S+)(?P<arguments>.*)", re.DOTALL)


class PreambleRule(enum.Enum):
    """How a command treats text before its first prefix."""

    NONE = "none"
    """Must be empty."""

    INDEX = "index"
    """A 1-based index into the displayed list."""

    KEYWORDS = "keywords"
    """One or more whitespace-separated words."""

    IGNORED = "ignored"
    """Anything goes; the text is dropped."""


BuildFn = Callable[[ArgumentMultimap, int | None], Command]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Declaration of one command kind."""

    keyword: str
    usage: str
    build: BuildFn
    required: tuple[Prefix, ...] = ()
    optional: tuple[Prefix, ...] = ()
    multi: tuple[Prefix, ...] = ()
    preamble: PreambleRule = PreambleRule.IGNORED

    @property
    def prefixes(self) -> tuple[Prefix, ...]:
        return self.required + self.optional + self.multi

    @property
    def single_valued(self) -> tuple[Prefix, ...]:
        return self.required + self.optional


# ---------------------------------------------------------------------------
# Shared argument checks
# ---------------------------------------------------------------------------

def _invalid_format(usage: str) -> ParseError:
    return ParseError(MESSAGE_INVALID_COMMAND_FORMAT.format(usage))


def parse_arguments(spec: CommandSpec, arguments: str) -> Command:
    """Validate *arguments* against *spec* and build its command.

    Raises
    ------
    MissingRequiredFieldError
        If any required prefix is absent; lists all of them.
    DuplicateFieldError
        If a single-valued prefix occurs more than once.
    FieldValidationError
        If a value fails its field constraint.
    ParseError
        For a malformed preamble or any other format problem.
    """
    args = tokenize(arguments, *spec.prefixes)

    missing = tuple(prefix for prefix in spec.required if args.get_value(prefix) is None)
    stray_preamble = spec.preamble is PreambleRule.NONE and bool(args.preamble)
    if missing or stray_preamble:
        message = MESSAGE_INVALID_COMMAND_FORMAT.format(
            get_missing_prefixes_message(missing, spec.usage),
        )
        if missing:
            raise MissingRequiredFieldError(message, missing)
        raise ParseError(message)

    args.verify_no_duplicate_prefixes_for(*spec.single_valued)

    index: int | None = None
    if spec.preamble is PreambleRule.INDEX:
        try:
            index = parser_util.parse_index(args.preamble)
        except ParseError as exc:
            raise _invalid_format(spec.usage) from exc
    elif spec.preamble is PreambleRule.KEYWORDS and not args.preamble:
        raise _invalid_format(spec.usage)

    return spec.build(args, index)


def parse_command(user_input: str) -> Command:
    """Parse one full line of user input into a command.

    Raises
    ------
    ParseError
        For blank input, an unknown keyword, or any argument error.
    """
    match = _COMMAND_FORMAT.match(user_input.strip())
    if match is None:
        raise _invalid_format(COMMAND_SPECS["help"].usage)

    command_word = match.group("command_word").lower()
    spec = COMMAND_SPECS.get(command_word)
    if spec is None:
        raise ParseError(MESSAGE_UNKNOWN_COMMAND, hint="Type 'help' to see the available commands.")

    command = parse_arguments(spec, match.group("arguments"))
    logger.debug("parsed %r as %r", command_word, command)
    return command


# ---------------------------------------------------------------------------
# Build functions
# ---------------------------------------------------------------------------

def _required(args: ArgumentMultimap, prefix: Prefix) -> str:
    value = args.get_value(prefix)
    if value is None:
        raise ParseError(f"Missing value for {prefix}")
    return value


def _build_add(args: ArgumentMultimap, _index: int | None) -> Command:
    person = Person(
        name=parser_util.parse_name(_required(args, PREFIX_NAME)),
        phone=parser_util.parse_phone(_required(args, PREFIX_PHONE)),
        parent_phone=parser_util.parse_phone(_required(args, PREFIX_PARENT_PHONE)),
        email=parser_util.parse_email(_required(args, PREFIX_EMAIL)),
        tags=parser_util.parse_tags(args.get_all_values(PREFIX_TAG)),
    )
    return AddCommand(person)


def _required_index(index: int | None, keyword: str) -> int:
    """Return *index*, or fail with the usage of *keyword* when it is absent."""
    if index is None:
        raise _invalid_format(COMMAND_SPECS[keyword].usage)
    return index


def _optional(args: ArgumentMultimap, prefix: Prefix, parse: Callable[[str], T]) -> T | None:
    value = args.get_value(prefix)
    return None if value is None else parse(value)


def _parse_tags_for_edit(values: list[str]) -> frozenset[Tag] | None:
    """``None`` when no ``t/`` was given; a lone empty ``t/`` clears tags."""
    if not values:
        return None
    if values == [""]:
        return frozenset()
    return parser_util.parse_tags(values)


def _build_edit(args: ArgumentMultimap, index: int | None) -> Command:
    index = _required_index(index, "edit")
    descriptor = EditPersonDescriptor(
        name=_optional(args, PREFIX_NAME, parser_util.parse_name),
        phone=_optional(args, PREFIX_PHONE, parser_util.parse_phone),
        parent_phone=_optional(args, PREFIX_PARENT_PHONE, parser_util.parse_phone),
        email=_optional(args, PREFIX_EMAIL, parser_util.parse_email),
        tags=_parse_tags_for_edit(args.get_all_values(PREFIX_TAG)),
    )
    if not descriptor.is_any_field_edited():
        raise ParseError(MESSAGE_NOT_EDITED)
    return EditCommand(index, descriptor)


def _build_delete(_args: ArgumentMultimap, index: int | None) -> Command:
    return DeleteCommand(_required_index(index, "delete"))


def _build_note(args: ArgumentMultimap, index: int | None) -> Command:
    return NoteCommand(_required_index(index, "note"), _required(args, PREFIX_NOTE))


def _build_schedule(args: ArgumentMultimap, _index: int | None) -> Command:
    session = Session(
        student_name=parser_util.parse_name(_required(args, PREFIX_NAME)),
        subject=parser_util.parse_subject(_required(args, PREFIX_SUBJECT)),
        date=parser_util.parse_date(_required(args, PREFIX_DATE)),
        time=parser_util.parse_time(_required(args, PREFIX_TIME)),
        duration=parser_util.parse_duration(_required(args, PREFIX_DURATION)),
    )
    return ScheduleCommand(session)


def _build_cancel(_args: ArgumentMultimap, index: int | None) -> Command:
    return CancelSessionCommand(_required_index(index, "cancel"))


def _build_find(args: ArgumentMultimap, _index: int | None) -> Command:
    return FindCommand(tuple(args.preamble.split()))


def _build_help(_args: ArgumentMultimap, _index: int | None) -> Command:
    return HelpCommand(tuple(spec.usage for spec in COMMAND_SPECS.values()))


def _constant(command: Command) -> BuildFn:
    return lambda _args, _index: command


# ---------------------------------------------------------------------------
# Command table
# ---------------------------------------------------------------------------

_PERSON_FIELDS = (
    f"{PREFIX_NAME}NAME {PREFIX_PHONE}PHONE {PREFIX_PARENT_PHONE}PARENT_PHONE {PREFIX_EMAIL}EMAIL"
)

COMMAND_SPECS: dict[str, CommandSpec] = {
    spec.keyword: spec
    for spec in (
        CommandSpec(
            keyword="add",
            usage=(
                "add: Adds a person to the address book. "
                f"Parameters: {_PERSON_FIELDS} [{PREFIX_TAG}TAG]...\n"
                f"Example: add {PREFIX_NAME}John Doe {PREFIX_PHONE}98765432 "
                f"{PREFIX_PARENT_PHONE}91234567 {PREFIX_EMAIL}johnd@example.com "
                f"{PREFIX_TAG}math {PREFIX_TAG}sec3"
            ),
            build=_build_add,
            required=(PREFIX_NAME, PREFIX_PHONE, PREFIX_PARENT_PHONE, PREFIX_EMAIL),
            multi=(PREFIX_TAG,),
            preamble=PreambleRule.NONE,
        ),
        CommandSpec(
            keyword="edit",
            usage=(
                "edit: Edits the details of the person identified by the index number used in "
                "the displayed person list. Existing values will be overwritten by the input "
                "values.\n"
                f"Parameters: INDEX (must be a positive integer) [{PREFIX_NAME}NAME] "
                f"[{PREFIX_PHONE}PHONE] [{PREFIX_PARENT_PHONE}PARENT_PHONE] "
                f"[{PREFIX_EMAIL}EMAIL] [{PREFIX_TAG}TAG]...\n"
                f"Example: edit 1 {PREFIX_PHONE}91234567 {PREFIX_EMAIL}johndoe@example.com"
            ),
            build=_build_edit,
            optional=(PREFIX_NAME, PREFIX_PHONE, PREFIX_PARENT_PHONE, PREFIX_EMAIL),
            multi=(PREFIX_TAG,),
            preamble=PreambleRule.INDEX,
        ),
        CommandSpec(
            keyword="delete",
            usage=(
                "delete: Deletes the person identified by the index number used in the "
                "displayed person list.\n"
                "Parameters: INDEX (must be a positive integer)\n"
                "Example: delete 1"
            ),
            build=_build_delete,
            preamble=PreambleRule.INDEX,
        ),
        CommandSpec(
            keyword="note",
            usage=(
                "note: Sets the note of the person identified by the index number used in the "
                "displayed person list. An empty note removes it.\n"
                f"Parameters: INDEX (must be a positive integer) {PREFIX_NOTE}NOTE\n"
                f"Example: note 1 {PREFIX_NOTE}Struggles with quadratics."
            ),
            build=_build_note,
            required=(PREFIX_NOTE,),
            preamble=PreambleRule.INDEX,
        ),
        CommandSpec(
            keyword="schedule",
            usage=(
                "schedule: Schedules a tutoring session with a person in the address book. "
                "Sessions may not overlap.\n"
                f"Parameters: {PREFIX_NAME}NAME {PREFIX_SUBJECT}SUBJECT {PREFIX_DATE}YYYY-MM-DD "
                f"{PREFIX_TIME}HH:MM {PREFIX_DURATION}DURATION\n"
                f"Example: schedule {PREFIX_NAME}John Doe {PREFIX_SUBJECT}Math "
                f"{PREFIX_DATE}2024-03-01 {PREFIX_TIME}16:00 {PREFIX_DURATION}1h30m"
            ),
            build=_build_schedule,
            required=(PREFIX_NAME, PREFIX_SUBJECT, PREFIX_DATE, PREFIX_TIME, PREFIX_DURATION),
            preamble=PreambleRule.NONE,
        ),
        CommandSpec(
            keyword="cancel",
            usage=(
                "cancel: Cancels the session identified by the index number used in the "
                "session list.\n"
                "Parameters: INDEX (must be a positive integer)\n"
                "Example: cancel 1"
            ),
            build=_build_cancel,
            preamble=PreambleRule.INDEX,
        ),
        CommandSpec(
            keyword="sessions",
            usage="sessions: Lists all scheduled sessions in time order.",
            build=_constant(ListSessionsCommand()),
        ),
        CommandSpec(
            keyword="find",
            usage=(
                "find: Finds all persons whose names contain any of the specified keywords "
                "(case-insensitive) and displays them as a list with index numbers.\n"
                "Parameters: KEYWORD [MORE_KEYWORDS]...\n"
                "Example: find alice bob charlie"
            ),
            build=_build_find,
            preamble=PreambleRule.KEYWORDS,
        ),
        CommandSpec(
            keyword="list",
            usage="list: Lists all persons in the address book.",
            build=_constant(ListCommand()),
        ),
        CommandSpec(
            keyword="clear",
            usage="clear: Deletes every person and session from the address book.",
            build=_constant(ClearCommand()),
        ),
        CommandSpec(
            keyword="undo",
            usage="undo: Reverts the address book to the state before the last change.",
            build=_constant(UndoCommand()),
        ),
        CommandSpec(
            keyword="redo",
            usage="redo: Reapplies the most recently undone change.",
            build=_constant(RedoCommand()),
        ),
        CommandSpec(
            keyword="help",
            usage="help: Shows program usage instructions.",
            build=_build_help,
        ),
        CommandSpec(
            keyword="exit",
            usage="exit: Exits the program.",
            build=_constant(ExitCommand()),
        ),
    )
}
