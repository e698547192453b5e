"""Interactive read-execute-render loop.

Each line is parsed and executed to completion before the next prompt.
Errors from a single line are rendered and the loop continues; only
``exit``, end of input, or an unexpected exception ends it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from tutorbook.cli import exit_codes
from tutorbook.cli.console import console
from tutorbook.cli.render import render_error, render_result
from tutorbook.core.commands import ClearCommand, Command
from tutorbook.core.logic import LogicManager
from tutorbook.exceptions import EnvironmentError, TutorBookError

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
ConfirmFn = Callable[[str], bool]

PROMPT = "tutorbook> "
CLEAR_CONFIRMATION = "Delete every person in the address book?"


def _import_questionary() -> Any:
    """Import questionary lazily for interactive confirmation."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def confirm_with_questionary(message: str) -> bool:
    """Ask a yes/no question; Ctrl+C or Esc counts as "no"."""
    questionary = _import_questionary()
    answer: bool | None = questionary.confirm(message, default=False).ask()
    return bool(answer)


def _needs_confirmation(command: Command, logic: LogicManager) -> bool:
    return isinstance(command, ClearCommand) and len(logic.model.address_book) > 0


def run_shell(
    logic: LogicManager,
    *,
    input_fn: InputFn = input,
    confirm_fn: ConfirmFn | None = None,
) -> int:
    """Run the shell until ``exit`` or end of input.

    Parameters
    ----------
    logic:
        The execution service; owns the model and its history.
    input_fn:
        Reads one line given a prompt.  Injected for tests.
    confirm_fn:
        Answers a yes/no question.  Defaults to a questionary prompt.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS`.
    """
    confirm = confirm_fn if confirm_fn is not None else confirm_with_questionary
    console.print("[bold]tutorbook[/bold]  type [cyan]help[/cyan] for commands, [cyan]exit[/cyan] to quit.")

    while True:
        try:
            line = input_fn(PROMPT)
        except EOFError:
            console.print_plain("")
            return exit_codes.SUCCESS

        if not line.strip():
            continue

        try:
            command = logic.parse(line)
            if _needs_confirmation(command, logic) and not confirm(CLEAR_CONFIRMATION):
                console.print("[yellow]Clear cancelled.[/yellow]")
                continue
            result = logic.run(command)
        except TutorBookError as exc:
            logger.info("command failed: %s", type(exc).__name__)
            render_error(exc)
            continue

        render_result(result)
        if result.exit:
            return exit_codes.SUCCESS
