"""Tests for tutoring sessions across the layers.

Coverage:

* ``schedule`` / ``cancel`` / ``sessions`` parsing and field validation
* Clash detection, unknown students, start-time ordering
* Undo / redo of scheduling and cancelling
* Sessions follow a renamed person and go away with a deleted one
* Snapshot isolation, JSON persistence and table rendering
"""

from __future__ import annotations

import datetime as dt
import json
from pathlib import Path

import pytest
from conftest import make_person

from tutorbook.cli.render import build_session_rows, render_result, render_sessions
from tutorbook.core.command_parser import parse_command
from tutorbook.core.commands import (
    CancelSessionCommand,
    CommandResult,
    ListSessionsCommand,
    ScheduleCommand,
)
from tutorbook.core.logic import LogicManager
from tutorbook.core.messages import MESSAGE_INVALID_SESSION_DISPLAYED_INDEX, format_session
from tutorbook.core.models import AddressBook, Name, Session, Subject
from tutorbook.core.parser_util import (
    MESSAGE_INVALID_DATE,
    MESSAGE_INVALID_DURATION,
    MESSAGE_INVALID_TIME,
)
from tutorbook.core.syntax import PREFIX_DURATION, PREFIX_TIME
from tutorbook.exceptions import (
    CommandError,
    FieldValidationError,
    MissingRequiredFieldError,
    ParseError,
    StorageError,
)
from tutorbook.infra.json_storage import JsonAddressBookStorage

ADD_AMY = "add n/Amy Bee p/85355255 pp/91234567 e/amy@gmail.com"
ADD_BOB = "add n/Bob Choo p/22222222 pp/33333333 e/bob@example.com"
SCHEDULE_AMY = "schedule n/Amy Bee s/Math d/2024-03-01 tm/16:00 dur/1h30m"


def _session(
    name: str = "Amy Bee",
    day: int = 1,
    start: str = "16:00",
    minutes: int = 90,
    subject: str = "Math",
) -> Session:
    return Session(
        student_name=Name(name),
        subject=Subject(subject),
        date=dt.date(2024, 3, day),
        time=dt.time.fromisoformat(start),
        duration=dt.timedelta(minutes=minutes),
    )


@pytest.fixture
def tutor(logic: LogicManager) -> LogicManager:
    logic.execute(ADD_AMY)
    logic.execute(ADD_BOB)
    return logic


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class TestParsing:
    def test_schedule(self) -> None:
        command = parse_command(SCHEDULE_AMY)
        assert isinstance(command, ScheduleCommand)
        assert command.session == _session()

    def test_schedule_reports_every_missing_field(self) -> None:
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse_command("schedule n/Amy Bee s/Math d/2024-03-01")
        assert exc_info.value.missing == (PREFIX_TIME, PREFIX_DURATION)
        assert "schedule:" in str(exc_info.value)

    @pytest.mark.parametrize(
        ("fields", "message"),
        [
            ("d/2024-02-30 tm/16:00 dur/1h", MESSAGE_INVALID_DATE),
            ("d/01-03-2024 tm/16:00 dur/1h", MESSAGE_INVALID_DATE),
            ("d/2024-03-01 tm/24:00 dur/1h", MESSAGE_INVALID_TIME),
            ("d/2024-03-01 tm/4pm dur/1h", MESSAGE_INVALID_TIME),
            ("d/2024-03-01 tm/16:00 dur/90", MESSAGE_INVALID_DURATION),
            ("d/2024-03-01 tm/16:00 dur/h", MESSAGE_INVALID_DURATION),
            ("d/2024-03-01 tm/16:00 dur/0m", Session.MESSAGE_DURATION_CONSTRAINTS),
            ("d/2024-03-01 tm/16:00 dur/12h1m", Session.MESSAGE_DURATION_CONSTRAINTS),
        ],
    )
    def test_schedule_rejects_bad_values(self, fields: str, message: str) -> None:
        with pytest.raises(FieldValidationError) as exc_info:
            parse_command(f"schedule n/Amy Bee s/Math {fields}")
        assert str(exc_info.value) == message

    @pytest.mark.parametrize(("text", "minutes"), [("45m", 45), ("2h", 120), ("1h05m", 65)])
    def test_duration_forms(self, text: str, minutes: int) -> None:
        command = parse_command(f"schedule n/Amy Bee s/Math d/2024-03-01 tm/09:00 dur/{text}")
        assert isinstance(command, ScheduleCommand)
        assert command.session.duration == dt.timedelta(minutes=minutes)

    def test_subject_must_be_alphanumeric(self) -> None:
        with pytest.raises(FieldValidationError, match="Subjects"):
            parse_command("schedule n/Amy Bee s/Math! d/2024-03-01 tm/16:00 dur/1h")

    def test_cancel_and_list(self) -> None:
        assert parse_command("cancel 2") == CancelSessionCommand(1)
        assert isinstance(parse_command("sessions"), ListSessionsCommand)

    def test_cancel_needs_index(self) -> None:
        with pytest.raises(ParseError, match="cancel:"):
            parse_command("cancel")


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

class TestSessionModel:
    def test_format(self) -> None:
        assert format_session(_session()) == (
            "Session for Amy Bee in Math on 2024-03-01 at 16:00 for 1h30m"
        )
        assert format_session(_session(minutes=5)).endswith("for 0h05m")

    def test_adjacent_sessions_do_not_overlap(self) -> None:
        first = _session(start="16:00", minutes=60)
        assert not first.overlaps(_session(name="Bob Choo", start="17:00"))
        assert first.overlaps(_session(name="Bob Choo", start="16:59"))
        assert not first.overlaps(_session(day=2))

    def test_session_needs_known_student(self) -> None:
        with pytest.raises(CommandError, match="No student named"):
            AddressBook().add_session(_session())

    def test_sessions_are_kept_in_start_order(self) -> None:
        book = AddressBook([make_person(), make_person(name="Bob Choo")])
        book.add_session(_session(day=2))
        book.add_session(_session(name="Bob Choo", day=1, start="09:00"))
        assert [session.date.day for session in book.sessions] == [1, 2]

    def test_snapshot_sessions_are_isolated(self) -> None:
        book = AddressBook([make_person()], [_session()])
        snapshot = book.snapshot()
        book.clear()
        assert snapshot.sessions == (_session(),)
        book.reset(snapshot)
        assert book.sessions == (_session(),)
        assert book.sessions[0] is not snapshot.sessions[0]


# ---------------------------------------------------------------------------
# Commands through LogicManager
# ---------------------------------------------------------------------------

class TestSessionCommands:
    def test_schedule_uses_stored_name(self, tutor: LogicManager) -> None:
        result = tutor.execute("schedule n/amy bee s/Math d/2024-03-01 tm/16:00 dur/1h30m")
        assert result.feedback == f"New session scheduled: {format_session(_session())}"
        assert tutor.model.address_book.sessions == (_session(),)
        assert len(tutor.model.history) == 4

    def test_unknown_student(self, tutor: LogicManager) -> None:
        with pytest.raises(CommandError, match="No student named Cat Dee"):
            tutor.execute("schedule n/Cat Dee s/Math d/2024-03-01 tm/16:00 dur/1h")
        assert len(tutor.model.history) == 3

    def test_clash_is_rejected(self, tutor: LogicManager) -> None:
        tutor.execute(SCHEDULE_AMY)
        with pytest.raises(CommandError) as exc_info:
            tutor.execute("schedule n/Bob Choo s/Physics d/2024-03-01 tm/17:00 dur/1h")
        assert str(exc_info.value) == f"This session clashes with: {format_session(_session())}"
        assert len(tutor.model.address_book.sessions) == 1

    def test_sessions_lists_in_order(self, tutor: LogicManager) -> None:
        tutor.execute("schedule n/Bob Choo s/Physics d/2024-03-02 tm/09:00 dur/1h")
        tutor.execute(SCHEDULE_AMY)
        result = tutor.execute("sessions")
        assert result.feedback == "2 sessions listed!"
        assert result.sessions is not None
        assert [s.student_name.full_name for s in result.sessions] == ["Amy Bee", "Bob Choo"]
        assert len(tutor.model.history) == 5

    def test_cancel(self, tutor: LogicManager) -> None:
        tutor.execute(SCHEDULE_AMY)
        result = tutor.execute("cancel 1")
        assert result.feedback == f"Cancelled {format_session(_session())}"
        assert tutor.model.address_book.sessions == ()

    def test_cancel_out_of_range(self, tutor: LogicManager) -> None:
        with pytest.raises(CommandError) as exc_info:
            tutor.execute("cancel 1")
        assert str(exc_info.value) == MESSAGE_INVALID_SESSION_DISPLAYED_INDEX

    def test_schedule_and_cancel_are_undoable(self, tutor: LogicManager) -> None:
        tutor.execute(SCHEDULE_AMY)
        tutor.execute("cancel 1")
        tutor.execute("undo")
        assert tutor.model.address_book.sessions == (_session(),)
        tutor.execute("undo")
        assert tutor.model.address_book.sessions == ()
        tutor.execute("redo")
        assert tutor.model.address_book.sessions == (_session(),)

    def test_rename_carries_sessions(self, tutor: LogicManager) -> None:
        tutor.execute(SCHEDULE_AMY)
        tutor.execute("edit 1 n/Amy Lee")
        (session,) = tutor.model.address_book.sessions
        assert session.student_name == Name("Amy Lee")
        tutor.execute("undo")
        assert tutor.model.address_book.sessions == (_session(),)

    def test_delete_drops_sessions(self, tutor: LogicManager) -> None:
        tutor.execute(SCHEDULE_AMY)
        tutor.execute("schedule n/Bob Choo s/Physics d/2024-03-02 tm/09:00 dur/1h")
        tutor.execute("delete 1")
        assert [s.student_name.full_name for s in tutor.model.address_book.sessions] == [
            "Bob Choo"
        ]
        tutor.execute("undo")
        assert len(tutor.model.address_book.sessions) == 2

    def test_clear_drops_sessions(self, tutor: LogicManager) -> None:
        tutor.execute(SCHEDULE_AMY)
        tutor.execute("clear")
        assert tutor.model.address_book.sessions == ()


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

class TestSessionStorage:
    def test_round_trip(self, tmp_path: Path) -> None:
        storage = JsonAddressBookStorage(tmp_path / "book.json")
        storage.save(AddressBook([make_person()], [_session()]))

        raw = json.loads((tmp_path / "book.json").read_text(encoding="utf-8"))
        assert raw["sessions"] == [
            {
                "studentName": "Amy Bee",
                "subject": "Math",
                "date": "2024-03-01",
                "time": "16:00",
                "durationMinutes": 90,
            }
        ]
        loaded = storage.load()
        assert loaded is not None
        assert loaded.sessions == (_session(),)

    @pytest.mark.parametrize(
        "entry",
        [
            {"studentName": "Amy Bee", "subject": "Math", "date": "2024-13-01",
             "time": "16:00", "durationMinutes": 90},
            {"studentName": "Zed", "subject": "Math", "date": "2024-03-01",
             "time": "16:00", "durationMinutes": 90},
            {"studentName": "Amy Bee", "subject": "Math", "date": "2024-03-01",
             "time": "16:00", "durationMinutes": 0},
            {"studentName": "Amy Bee", "subject": "Math"},
        ],
    )
    def test_bad_session_entry(self, tmp_path: Path, entry: dict[str, object]) -> None:
        path = tmp_path / "book.json"
        person = {
            "name": "Amy Bee",
            "phone": "85355255",
            "parentPhone": "91234567",
            "email": "amy@gmail.com",
        }
        path.write_text(json.dumps({"persons": [person], "sessions": [entry]}), encoding="utf-8")
        with pytest.raises(StorageError):
            JsonAddressBookStorage(path).load()


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestSessionRendering:
    def test_rows(self) -> None:
        assert build_session_rows([_session()]) == [
            ("1", "Amy Bee", "Math", "2024-03-01", "16:00", "1h30m"),
        ]

    def test_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        render_sessions([_session()])
        err = capsys.readouterr().err
        assert "Subject" in err
        assert "1h30m" in err

    def test_result_with_sessions(self, capsys: pytest.CaptureFixture[str]) -> None:
        render_result(CommandResult("1 sessions listed!", sessions=(_session(),)))
        err = capsys.readouterr().err
        assert "1 sessions listed!" in err
        assert "Amy Bee" in err
