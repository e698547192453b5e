"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from typing import Protocol

from tutorbook.core.models import AddressBook


class AddressBookStorage(Protocol):
    """Contract for address-book persistence backends.

    Implementations must map all backend-specific exceptions to
    :class:`~tutorbook.exceptions.StorageError`.
    """

    def load(self) -> AddressBook | None:
        """Return the stored address book, or ``None`` when none exists yet.

        Raises
        ------
        StorageError
            When stored data exists but cannot be read or decoded.
        """
        ...  # pragma: no cover

    def save(self, address_book: AddressBook) -> None:
        """Persist *address_book*, replacing any previous contents.

        Raises
        ------
        StorageError
            When the data cannot be written.
        """
        ...  # pragma: no cover
