"""Allow ``python -m tutorbook`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m tutorbook`` behaves identically to the ``tutorbook``
console script.
"""

from __future__ import annotations

from tutorbook.cli.app import cli

if __name__ == "__main__":
    cli()
