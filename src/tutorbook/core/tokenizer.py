"""Prefix tokenizer and the field extractor over its result.

Tokenization is total: any input string produces an
:class:`ArgumentMultimap`, never an error.  Validation of what was
found is left to the command builders, which call
:meth:`ArgumentMultimap.verify_no_duplicate_prefixes_for` for the
fields where repetition is a genuine user error.

Grammar::

    PREAMBLE (WHITESPACE PREFIX VALUE)*

A prefix only counts when it starts the input or follows whitespace,
so ``p/`` is never found inside ``pp/`` or inside a value such as
``e/amy@a.com/p/``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from tutorbook.core.messages import get_error_message_for_duplicate_prefixes
from tutorbook.core.syntax import Prefix
from tutorbook.exceptions import DuplicateFieldError


class ArgumentMultimap:
    """Prefix → values mapping plus the preamble for one command line.

    Each occurrence of a prefix contributes one value, kept in input
    order.  A prefix that never occurred has no values; lookups for it
    return ``None`` or an empty list rather than raising.
    """

    def __init__(self, preamble: str = "") -> None:
        self._preamble: str = preamble
        self._values: dict[Prefix, list[str]] = {}

    def put(self, prefix: Prefix, value: str) -> None:
        """Append *value* as the next occurrence of *prefix*."""
        self._values.setdefault(prefix, []).append(value)

    @property
    def preamble(self) -> str:
        return self._preamble

    def get_preamble(self) -> str:
        """Return the trimmed text before the first recognised prefix."""
        return self._preamble

    def get_value(self, prefix: Prefix) -> str | None:
        """Return the last value given for *prefix*, or ``None``."""
        values = self._values.get(prefix)
        if not values:
            return None
        return values[-1]

    def get_all_values(self, prefix: Prefix) -> list[str]:
        """Return every value given for *prefix* in input order."""
        return list(self._values.get(prefix, ()))

    def verify_no_duplicate_prefixes_for(self, *prefixes: Prefix) -> None:
        """Raise if any of *prefixes* occurred more than once.

        The error lists every offending prefix exactly once, in the
        order the prefixes were passed here.

        Raises
        ------
        DuplicateFieldError
            When at least one of *prefixes* has two or more values.
        """
        duplicates = tuple(
            dict.fromkeys(
                prefix for prefix in prefixes if len(self._values.get(prefix, ())) > 1
            )
        )
        if duplicates:
            raise DuplicateFieldError(
                get_error_message_for_duplicate_prefixes(*duplicates),
                duplicates,
            )

    def __repr__(self) -> str:
        return f"ArgumentMultimap(preamble={self._preamble!r}, values={self._values!r})"


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

def _prefix_pattern(prefix: Prefix) -> re.Pattern[str]:
    """Match *prefix* at the start of input or right after whitespace."""
    return re.compile(r"(?:^|(?<=\s))" + re.escape(prefix.text))


def _find_prefix_positions(
    args: str,
    prefixes: Iterable[Prefix],
) -> list[tuple[int, Prefix]]:
    """Locate every prefix occurrence, ordered by position.

    When two prefixes would start at the same index the longer one
    wins, and an occurrence that starts inside an earlier marker is
    dropped.
    """
    found: list[tuple[int, Prefix]] = []
    for prefix in set(prefixes):
        for match in _prefix_pattern(prefix).finditer(args):
            found.append((match.start(), prefix))
    found.sort(key=lambda item: (item[0], -len(item[1].text)))

    positions: list[tuple[int, Prefix]] = []
    marker_end = -1
    for start, prefix in found:
        if start < marker_end:
            continue
        positions.append((start, prefix))
        marker_end = start + len(prefix.text)
    return positions


def tokenize(args: str, *prefixes: Prefix) -> ArgumentMultimap:
    """Split *args* into a preamble and per-prefix values.

    Values are the text between one recognised prefix and the next
    (or the end of input), trimmed.  Never raises.
    """
    positions = _find_prefix_positions(args, prefixes)
    if not positions:
        return ArgumentMultimap(args.strip())

    multimap = ArgumentMultimap(args[: positions[0][0]].strip())
    ends = [start for start, _ in positions[1:]] + [len(args)]
    for (start, prefix), end in zip(positions, ends):
        multimap.put(prefix, args[start + len(prefix.text) : end].strip())
    return multimap
