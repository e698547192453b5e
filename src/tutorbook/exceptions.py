"""Custom exception hierarchy for tutorbook.

All user-facing error conditions inherit from :class:`TutorBookError`.
Raw OS and decoding exceptions must NEVER propagate beyond the
infrastructure layer — they are caught there and re-raised as a typed
subclass defined here.

Hierarchy
---------
TutorBookError
├── ParseError
│   ├── MissingRequiredFieldError
│   ├── DuplicateFieldError
│   └── FieldValidationError
├── CommandError
│   └── HistoryBoundaryError
├── StorageError
└── EnvironmentError

HistoryPreconditionError (RuntimeError)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tutorbook.core.syntax import Prefix


class TutorBookError(Exception):
    """Base exception for all tutorbook errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the shell and the CLI error boundary can render a
    clean message without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Parsing ---------------------------------------------------------------

class ParseError(TutorBookError):
    """Raised when a command line does not conform to the expected format."""


class MissingRequiredFieldError(ParseError):
    """Raised when one or more required prefixes are absent.

    Carries every missing prefix, not just the first one found.
    """

    def __init__(
        self,
        message: str,
        missing: tuple[Prefix, ...],
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.missing: tuple[Prefix, ...] = missing


class DuplicateFieldError(ParseError):
    """Raised when a single-valued prefix occurs more than once."""

    def __init__(
        self,
        message: str,
        duplicates: tuple[Prefix, ...],
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.duplicates: tuple[Prefix, ...] = duplicates


class FieldValidationError(ParseError):
    """Raised when a field value fails its type-specific constraint."""


# --- Command execution -----------------------------------------------------

class CommandError(TutorBookError):
    """Raised when a parsed command cannot be executed against the model."""


class HistoryBoundaryError(CommandError):
    """Raised on undo with no earlier state, or redo with no later state."""


# --- Storage ---------------------------------------------------------------

class StorageError(TutorBookError):
    """Raised when the data file cannot be read, decoded, or written."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(TutorBookError):
    """Raised when a required runtime dependency is not available."""


# --- Programming errors ----------------------------------------------------

class HistoryPreconditionError(RuntimeError):
    """Raised when the current state is queried before any state exists.

    An integration defect rather than a user error: it sits outside the
    :class:`TutorBookError` tree and reaches the unexpected-error boundary.
    """
