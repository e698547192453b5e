"""CLI application entry point and composition root for tutorbook.

This module is the **sole process-level error boundary**.  It catches
:class:`~tutorbook.exceptions.TutorBookError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via
Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — parsing and execution belong to the
  core layer, persistence to the infrastructure layer.
* This module builds the object graph: storage, the single
  :class:`~tutorbook.core.history.HistoryManager`, the model and the
  logic manager, then hands them to the shell.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys

from tutorbook.cli import exit_codes
from tutorbook.cli.console import console
from tutorbook.config import AppConfig, load_config
from tutorbook.exceptions import TutorBookError
from tutorbook.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``tutorbook``          — start the interactive shell
    * ``tutorbook doctor``   — environment diagnostics
    * ``tutorbook --version``
    """
    parser = argparse.ArgumentParser(
        prog="tutorbook",
        description="Command-line record book for private tutors.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging on stderr.",
    )
    parser.add_argument(
        "--data-file",
        default=None,
        metavar="PATH",
        help="JSON file holding the address book (env: TUTORBOOK_DATA_FILE).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        metavar="PATH",
        help="Also write logs to this file (env: TUTORBOOK_LOG_FILE).",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="shell",
        choices=["shell", "doctor"],
        help="'shell' (default) to edit records, or 'doctor' to run diagnostics.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_shell(config: AppConfig) -> int:
    """Wire up storage, history, model and logic, then run the shell."""
    from tutorbook.cli.shell import run_shell
    from tutorbook.core.history import HistoryManager
    from tutorbook.core.logic import LogicManager
    from tutorbook.core.model_manager import ModelManager
    from tutorbook.core.models import AddressBook
    from tutorbook.infra.json_storage import JsonAddressBookStorage
    from tutorbook.utils.log import configure_logging

    configure_logging(verbose=config.verbose, log_file=config.log_file)

    storage = JsonAddressBookStorage(config.data_file)
    address_book = storage.load()
    if address_book is None:
        address_book = AddressBook()

    model = ModelManager(address_book, HistoryManager())
    logic = LogicManager(model, storage)
    logger.info("starting shell with %d person(s)", len(address_book))
    return run_shell(logic)


def _handle_doctor(config: AppConfig) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from tutorbook.cli.doctor import run_doctor

    return run_doctor(config)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the tutorbook CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    config = load_config(
        data_file=args.data_file,
        log_file=args.log_file,
        verbose=args.verbose,
    )

    if args.command == "doctor":
        return _handle_doctor(config)

    return _handle_shell(config)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except TutorBookError as exc:
        console.print_error(str(exc), exc.hint)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        logger.debug("unexpected error", exc_info=True)
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
