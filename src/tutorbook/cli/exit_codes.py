"""Exit-code constants used by the CLI layer.

Every exit path uses one of these values instead of a bare integer.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — the shell ended normally or the command completed."""

GENERAL_ERROR: int = 1
"""A known TutorBookError reached the boundary, or a doctor check failed."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""
