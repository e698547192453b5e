"""Console output for the shell and the error boundary.

This module avoids module-level imports of Rich so bootstrap paths
(``--help``, ``--version``) remain functional even when it is not
installed.
"""

from __future__ import annotations

import sys
from typing import Any

from tutorbook.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Import ``rich.console.Console`` lazily; ``EnvironmentError`` when missing."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Return a fresh Rich console bound to the current ``sys.stderr``."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


class _ConsoleProxy:
	"""Stderr writer used by every CLI module; degrades to ``print`` without Rich."""

	def print(self, *objects: object) -> None:
		"""Render with Rich markup when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects)

	def print_plain(self, text: str) -> None:
		"""Print user-supplied *text* verbatim, without markup or wrapping."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(text, file=sys.stderr)
			return
		rich_console.print(text, markup=False, highlight=False, soft_wrap=True)

	def print_error(self, message: str, hint: str | None = None) -> None:
		"""Render an ``Error:`` line and an optional ``Hint:`` line."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(f"Error: {message}", file=sys.stderr)
			if hint:
				print(f"Hint: {hint}", file=sys.stderr)
			return
		from rich.markup import escape

		rich_console.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)
		if hint:
			rich_console.print(f"[yellow]Hint:[/yellow] {escape(hint)}", soft_wrap=True)


console = _ConsoleProxy()
