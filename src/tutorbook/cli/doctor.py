"""``tutorbook doctor`` — environment diagnostics command.

Checks the interpreter, the UI libraries and the data file, then
renders a Rich table telling whether the tutorbook shell can run.
Falls back to plain stderr output when Rich itself is missing.
"""

from __future__ import annotations

import importlib.util
import os
import platform
import sys
from pathlib import Path

from tutorbook.cli import exit_codes
from tutorbook.cli.console import console
from tutorbook.config import AppConfig
from tutorbook.version import __version__

Check = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _tutorbook_version_check() -> Check:
    return "tutorbook", __version__, "[green]OK[/green]"


def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _module_check(label: str, module: str, *, required: bool) -> Check:
    """Return a row telling whether *module* is importable."""
    if importlib.util.find_spec(module) is not None:
        return label, "installed", "[green]OK[/green]"
    if required:
        return label, "NOT INSTALLED", "[red]FAIL[/red]"
    return label, "NOT INSTALLED", "[yellow]WARN[/yellow]"


def _data_file_check(data_file: Path) -> Check:
    """Return a row telling whether the data file can be written."""
    if data_file.exists():
        ok = os.access(data_file, os.W_OK)
    else:
        parent = next((p for p in data_file.absolute().parents if p.exists()), None)
        ok = parent is not None and os.access(parent, os.W_OK)
    status = "[green]OK[/green]" if ok else "[red]FAIL (not writable)[/red]"
    return "Data file", str(data_file), status


def collect_checks(config: AppConfig) -> list[Check]:
    return [
        _tutorbook_version_check(),
        _python_version_check(),
        _module_check("rich", "rich", required=True),
        _module_check("questionary", "questionary", required=False),
        _data_file_check(config.data_file),
    ]


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    """Render doctor output without Rich."""
    print("\ntutorbook doctor", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<36} {'Status':<8}", file=sys.stderr)
    print("-" * 60, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<36} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(config: AppConfig) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    checks = collect_checks(config)
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
        from rich.text import Text
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print("Some checks failed." if has_failure else "All checks passed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS

    table = Table(
        title="tutorbook doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, Text(value), status)

    console.print()
    console.print(table)
    console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR
    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
