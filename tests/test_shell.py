"""Tests for the interactive shell and result rendering (cli/shell.py, cli/render.py).

Input is fed through an injected ``input_fn``; the clear confirmation
through ``confirm_fn``.  Rich writes to ``sys.stderr``, so output is
read from ``capsys``'s ``err``.
"""

from __future__ import annotations

from collections.abc import Iterable
from unittest.mock import MagicMock

import pytest
from conftest import make_person

from tutorbook.cli import exit_codes
from tutorbook.cli.render import build_person_rows, render_persons, render_result
from tutorbook.cli.shell import CLEAR_CONFIRMATION, PROMPT, run_shell
from tutorbook.core.commands import CommandResult
from tutorbook.core.logic import LogicManager

ADD_AMY = "add n/Amy Bee p/85355255 pp/91234567 e/amy@gmail.com"


def _feed(lines: Iterable[str]):
    """Return an ``input_fn`` that yields *lines* then raises ``EOFError``."""
    iterator = iter(lines)
    prompts: list[str] = []

    def _input(prompt: str) -> str:
        prompts.append(prompt)
        try:
            return next(iterator)
        except StopIteration:
            raise EOFError from None

    _input.prompts = prompts  # type: ignore[attr-defined]
    return _input


# ---------------------------------------------------------------------------
# Loop control
# ---------------------------------------------------------------------------

class TestLoop:
    def test_end_of_input_exits_cleanly(self, logic: LogicManager) -> None:
        assert run_shell(logic, input_fn=_feed([])) == exit_codes.SUCCESS

    def test_exit_command_stops_reading(self, logic: LogicManager) -> None:
        input_fn = _feed(["exit", ADD_AMY])
        assert run_shell(logic, input_fn=input_fn) == exit_codes.SUCCESS
        assert len(logic.model.address_book) == 0
        assert input_fn.prompts == [PROMPT]

    def test_blank_lines_are_skipped(self, logic: LogicManager) -> None:
        run_shell(logic, input_fn=_feed(["", "   ", ADD_AMY]))
        assert len(logic.model.address_book) == 1
        assert len(logic.model.history) == 2

    def test_error_is_rendered_and_loop_continues(
        self,
        logic: LogicManager,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        run_shell(logic, input_fn=_feed(["add n/Amy", ADD_AMY, "undo", "undo"]))
        err = capsys.readouterr().err
        assert "Error:" in err
        assert "Missing the following required fields: p/ pp/ e/" in err
        assert "No previous model state found" in err
        assert len(logic.model.address_book) == 0

    def test_unknown_command_shows_hint(
        self,
        logic: LogicManager,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        run_shell(logic, input_fn=_feed(["frobnicate"]))
        err = capsys.readouterr().err
        assert "Unknown command" in err
        assert "Hint:" in err

    def test_feedback_is_printed(
        self,
        logic: LogicManager,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        run_shell(logic, input_fn=_feed([ADD_AMY]))
        assert "New person added: Amy Bee" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Clear confirmation
# ---------------------------------------------------------------------------

class TestClearConfirmation:
    def test_declined_clear_changes_nothing(
        self,
        logic: LogicManager,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        confirm = MagicMock(return_value=False)
        run_shell(logic, input_fn=_feed([ADD_AMY, "clear"]), confirm_fn=confirm)
        confirm.assert_called_once_with(CLEAR_CONFIRMATION)
        assert len(logic.model.address_book) == 1
        assert len(logic.model.history) == 2
        assert "Clear cancelled." in capsys.readouterr().err

    def test_accepted_clear_is_undoable(self, logic: LogicManager) -> None:
        confirm = MagicMock(return_value=True)
        run_shell(logic, input_fn=_feed([ADD_AMY, "clear"]), confirm_fn=confirm)
        assert len(logic.model.address_book) == 0
        logic.execute("undo")
        assert len(logic.model.address_book) == 1

    def test_empty_book_clears_without_asking(self, logic: LogicManager) -> None:
        confirm = MagicMock(return_value=False)
        run_shell(logic, input_fn=_feed(["clear"]), confirm_fn=confirm)
        confirm.assert_not_called()
        assert len(logic.model.history) == 2


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRender:
    def test_rows_are_numbered_from_one(self) -> None:
        rows = build_person_rows([make_person(name="Amy"), make_person(name="Bob")])
        assert [row[0] for row in rows] == ["1", "2"]
        assert [row[1] for row in rows] == ["Amy", "Bob"]

    def test_row_formats_tags_and_note(self) -> None:
        person = make_person(tags=("sec3", "math"), note="x" * 50)
        (row,) = build_person_rows([person])
        assert row[5] == "math, sec3"
        assert row[6] == "x" * 37 + "..."

    def test_row_without_tags(self) -> None:
        (row,) = build_person_rows([make_person()])
        assert row[5] == "—"
        assert row[6] == ""

    def test_render_persons_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        render_persons([make_person(name="Amy", email="a@b.co")])
        err = capsys.readouterr().err
        assert "Name" in err
        assert "Amy" in err

    def test_render_result_without_persons(self, capsys: pytest.CaptureFixture[str]) -> None:
        render_result(CommandResult("Listed all persons", persons=()))
        err = capsys.readouterr().err
        assert "Listed all persons" in err
        assert "Name" not in err

    def test_feedback_is_not_markup(self, capsys: pytest.CaptureFixture[str]) -> None:
        render_result(CommandResult("Tags: [math][sec3]"))
        assert "Tags: [math][sec3]" in capsys.readouterr().err
