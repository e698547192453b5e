"""Command execution — the single path from user input to a new state.

:class:`LogicManager` parses a line, runs the command against the
:class:`~tutorbook.core.model_manager.ModelManager` and then:

* saves through the injected storage after any state change;
* commits exactly one snapshot once a mutating command and its save
  have both succeeded;
* rolls the live book and the history cursor back when either fails,
  so a failed command never changes the history.
"""

from __future__ import annotations

import logging

from tutorbook.core.command_parser import parse_command
from tutorbook.core.commands import Command, CommandResult
from tutorbook.core.model_manager import ModelManager
from tutorbook.core.protocols import AddressBookStorage
from tutorbook.exceptions import TutorBookError

logger = logging.getLogger(__name__)


class LogicManager:
    """Parse-and-execute service consumed by the CLI layer.

    Parameters
    ----------
    model:
        The model (live book plus history) to execute against.
    storage:
        Optional persistence backend; ``None`` keeps everything in memory.
    """

    def __init__(self, model: ModelManager, storage: AddressBookStorage | None = None) -> None:
        self._model: ModelManager = model
        self._storage: AddressBookStorage | None = storage

    @property
    def model(self) -> ModelManager:
        return self._model

    def parse(self, user_input: str) -> Command:
        """Parse *user_input* without executing it."""
        return parse_command(user_input)

    def execute(self, user_input: str) -> CommandResult:
        """Parse and run one line of input.

        Raises
        ------
        TutorBookError
            Any parse, command, history-boundary or storage error.  The
            history is unchanged unless the command succeeded.
        """
        return self.run(self.parse(user_input))

    def run(self, command: Command) -> CommandResult:
        """Run an already-parsed *command*.

        The new state is saved before it is committed, so a failed save
        leaves both the live book and the history as they were.
        """
        cursor = self._model.history.cursor
        try:
            result = command.execute(self._model)
            if command.mutates or command.restores:
                self._save()
        except TutorBookError:
            self._model.rollback(cursor)
            raise

        if command.mutates:
            self._model.commit()
        self._model.history.previous_command = command
        logger.debug("executed %s", type(command).__name__)
        return result

    def _save(self) -> None:
        if self._storage is None:
            return
        self._storage.save(self._model.address_book)
