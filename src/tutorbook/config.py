"""Runtime configuration.

Values are resolved once at start-up with this precedence: command-line
flag, then environment variable, then built-in default.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

ENV_DATA_FILE = "TUTORBOOK_DATA_FILE"
ENV_LOG_FILE = "TUTORBOOK_LOG_FILE"

DEFAULT_DATA_FILE = Path("data") / "tutorbook.json"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Resolved settings for one tutorbook process."""

    data_file: Path
    """JSON file holding the address book."""

    log_file: Path | None
    """Optional plain-text log file."""

    verbose: bool
    """Show debug logging on the console."""


def load_config(
    *,
    data_file: str | None = None,
    log_file: str | None = None,
    verbose: bool = False,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Build an :class:`AppConfig` from explicit values and *environ*.

    Empty environment variables are treated as unset.
    """
    env = os.environ if environ is None else environ

    resolved_data = data_file or env.get(ENV_DATA_FILE) or None
    resolved_log = log_file or env.get(ENV_LOG_FILE) or None

    return AppConfig(
        data_file=Path(resolved_data).expanduser() if resolved_data else DEFAULT_DATA_FILE,
        log_file=Path(resolved_log).expanduser() if resolved_log else None,
        verbose=verbose,
    )
