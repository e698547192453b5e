"""Infrastructure layer — external system integration.

This layer wraps all interaction with the filesystem.  Every raw OS or
decoding exception must be caught here and re-raised as a
:class:`~tutorbook.exceptions.TutorBookError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from tutorbook.infra.json_storage import JsonAddressBookStorage

__all__: list[str] = ["JsonAddressBookStorage"]
