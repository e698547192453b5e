"""tutorbook — command-line record book for private tutors.

Built around a prefix-based command parser and a linear undo/redo
history of address-book snapshots.
"""

from tutorbook.version import __version__

__all__: list[str] = ["__version__"]
