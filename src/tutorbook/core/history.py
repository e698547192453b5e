"""Linear undo/redo history of address-book snapshots.

State is ``(sequence, cursor)`` where ``cursor`` counts the valid
states: ``0`` before anything was pushed, otherwise
``1 <= cursor <= len(sequence)`` and the current state is
``sequence[cursor - 1]``.  Entries past the cursor are the redo branch;
a push prunes them, so history never branches.

One :class:`HistoryManager` is created by the composition root and
handed to the :class:`~tutorbook.core.model_manager.ModelManager`.  It
has no locking and assumes one command runs at a time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tutorbook.core.models import Snapshot
from tutorbook.exceptions import HistoryBoundaryError, HistoryPreconditionError

if TYPE_CHECKING:
    from tutorbook.core.commands import Command

logger = logging.getLogger(__name__)

MESSAGE_NO_PREVIOUS_STATE = "No previous model state found"
MESSAGE_NO_STATE_TO_REDO = "No state to redo"


class HistoryManager:
    """Ordered snapshots plus a cursor over them."""

    def __init__(self) -> None:
        self._states: list[Snapshot] = []
        self._cursor: int = 0
        self.previous_command: Command | None = None
        """The last command that executed successfully."""

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._states)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 1

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._states)

    def current(self) -> Snapshot:
        """Return the snapshot at the cursor.

        Raises
        ------
        HistoryPreconditionError
            If nothing has been pushed yet.
        """
        if self._cursor < 1:
            raise HistoryPreconditionError("History queried before any state was pushed")
        return self._states[self._cursor - 1]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def push(self, snapshot: Snapshot) -> None:
        """Discard the redo branch, append *snapshot* and advance."""
        self.clear_future()
        self._states.append(snapshot)
        self._cursor += 1
        logger.debug("history push: cursor=%d size=%d", self._cursor, len(self._states))

    def undo(self) -> None:
        """Step back one state; the undone state stays available to redo."""
        if not self.can_undo:
            raise HistoryBoundaryError(MESSAGE_NO_PREVIOUS_STATE)
        self._cursor -= 1
        logger.debug("history undo: cursor=%d", self._cursor)

    def redo(self) -> None:
        """Step forward to a previously undone state."""
        if not self.can_redo:
            raise HistoryBoundaryError(MESSAGE_NO_STATE_TO_REDO)
        self._cursor += 1
        logger.debug("history redo: cursor=%d", self._cursor)

    def seek(self, cursor: int) -> None:
        """Move the cursor to an existing state without pruning anything.

        Raises
        ------
        ValueError
            If *cursor* does not name a retained state.
        """
        if not 1 <= cursor <= len(self._states):
            raise ValueError(f"cursor {cursor} outside 1..{len(self._states)}")
        self._cursor = cursor
        logger.debug("history seek: cursor=%d", self._cursor)

    def clear_future(self) -> None:
        """Drop every state after the cursor; the cursor is unchanged."""
        if len(self._states) > self._cursor:
            logger.debug("history prune: dropping %d state(s)", len(self._states) - self._cursor)
            del self._states[self._cursor :]

    def snapshots(self) -> tuple[Snapshot, ...]:
        """All retained snapshots, including the redo branch."""
        return tuple(self._states)
