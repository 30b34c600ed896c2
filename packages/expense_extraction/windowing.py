"""Group each dated statement line with the lines that follow it.

Statement renderers often wrap the amount or narration onto the next line, so
every field except the date is read from a small window: the dated line plus
up to :data:`TRAILING_LINES` following lines, joined with single spaces.
Windows overlap when dated lines are adjacent; the deduplicator collapses
the resulting repeats.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date

from .dates import extract_statement_date

TRAILING_LINES = 2


@dataclass(frozen=True, slots=True)
class DatedWindow:
    date: date
    line_index: int
    context: str


def iter_dated_windows(
    text: str,
    *,
    today: date | None = None,
    trailing: int = TRAILING_LINES,
) -> Iterator[DatedWindow]:
    """Yield one :class:`DatedWindow` per non-blank line carrying a statement date."""

    lines = text.splitlines()
    for i, raw in enumerate(lines):
        line = raw.strip()
        if not line:
            continue
        found = extract_statement_date(line, today=today)
        if found is None:
            continue
        following = (ln.strip() for ln in lines[i + 1 : i + 1 + trailing])
        context = " ".join([line, *following])
        yield DatedWindow(date=found, line_index=i, context=context)


__all__ = ["TRAILING_LINES", "DatedWindow", "iter_dated_windows"]
