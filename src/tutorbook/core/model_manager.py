"""In-memory model: the live address book and its history.

:class:`ModelManager` owns exactly one
:class:`~tutorbook.core.history.HistoryManager`.  Every state it
commits is a deep-copied :class:`~tutorbook.core.models.Snapshot`, so
later edits to the live book never reach a stored entry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from tutorbook.core.history import HistoryManager
from tutorbook.core.models import AddressBook, Person

logger = logging.getLogger(__name__)

PersonPredicate = Callable[[Person], bool]


class ModelManager:
    """Live address book, display filter and undo/redo history.

    Parameters
    ----------
    address_book:
        Starting contents.  Its snapshot becomes the first history entry.
    history:
        The history to record into.  A fresh one is created when omitted.
    """

    def __init__(
        self,
        address_book: AddressBook | None = None,
        history: HistoryManager | None = None,
    ) -> None:
        self._address_book: AddressBook = address_book if address_book is not None else AddressBook()
        self._history: HistoryManager = history if history is not None else HistoryManager()
        self._filter: PersonPredicate | None = None
        self._history.push(self._address_book.snapshot())

    @property
    def address_book(self) -> AddressBook:
        return self._address_book

    @property
    def history(self) -> HistoryManager:
        return self._history

    # ------------------------------------------------------------------
    # Display filter
    # ------------------------------------------------------------------

    def displayed_persons(self) -> tuple[Person, ...]:
        """Persons currently shown to the user; indexes refer to this."""
        persons = self._address_book.persons
        if self._filter is None:
            return persons
        return tuple(person for person in persons if self._filter(person))

    def update_filter(self, predicate: PersonPredicate) -> None:
        self._filter = predicate

    def show_all(self) -> None:
        self._filter = None

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def commit(self) -> None:
        """Record the live book as the newest state."""
        self._history.clear_future()
        self._history.push(self._address_book.snapshot())
        logger.info("committed state %d (%d persons)", self._history.cursor, len(self._address_book))

    def undo(self) -> None:
        self._history.undo()
        self._restore_current()

    def redo(self) -> None:
        self._history.redo()
        self._restore_current()

    def rollback(self, cursor: int | None = None) -> None:
        """Discard uncommitted changes to the live book; the filter stays.

        When *cursor* is given the history is first moved back to it,
        undoing an ``undo`` or ``redo`` whose follow-up failed.
        """
        if cursor is not None and cursor != self._history.cursor:
            self._history.seek(cursor)
        self._address_book.reset(self._history.current())

    def _restore_current(self) -> None:
        self._address_book.reset(self._history.current())
        self._filter = None
