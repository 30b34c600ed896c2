"""Date recognition with two-digit-year expansion and century correction.

Formats are tried in a fixed order and the first structural match that forms
a valid calendar date wins. Numeric dates are day-first (``DD/MM``).

Two-digit years map to ``2000 + YY``. Any parsed year more than one year
ahead of ``today`` is treated as a mis-read century and replaced by
``(year % 100) + 2000``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from datetime import date

_MONTHS: tuple[str, ...] = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

_YEAR = r"(\d{4}|\d{2})(?!\d)"
_MON = r"([A-Za-z]{3,9})"

type _Builder = Callable[[re.Match[str]], tuple[int, int, int] | None]


def month_number(name: str) -> int | None:
    """Return 1-12 for a month name or abbreviation of at least three letters."""

    word = name.lower().rstrip(".")
    if len(word) < 3:
        return None
    for idx, full in enumerate(_MONTHS, start=1):
        if full.startswith(word):
            return idx
    return None


def _day_month_year(m: re.Match[str]) -> tuple[int, int, int] | None:
    return int(m.group(3)), int(m.group(2)), int(m.group(1))


def _day_name_year(m: re.Match[str]) -> tuple[int, int, int] | None:
    month = month_number(m.group(2))
    if month is None:
        return None
    return int(m.group(3)), month, int(m.group(1))


def _name_day_year(m: re.Match[str]) -> tuple[int, int, int] | None:
    month = month_number(m.group(1))
    if month is None:
        return None
    return int(m.group(3)), month, int(m.group(2))


def _iso(m: re.Match[str]) -> tuple[int, int, int] | None:
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


_DD_MM_SLASH = (re.compile(rf"(?<!\d)(\d{{1,2}})/(\d{{1,2}})/{_YEAR}"), _day_month_year)
_DD_MM_DASH = (re.compile(rf"(?<!\d)(\d{{1,2}})-(\d{{1,2}})-{_YEAR}"), _day_month_year)
_DD_MM_DOT = (re.compile(rf"(?<![\d.])(\d{{1,2}})\.(\d{{1,2}})\.{_YEAR}(?!\.\d)"), _day_month_year)
_DD_MON_DASH = (re.compile(rf"(?<!\d)(\d{{1,2}})-{_MON}-{_YEAR}"), _day_name_year)
_DD_MON_SPACE = (
    re.compile(rf"(?<!\d)(\d{{1,2}})\s+{_MON}\.?,?\s+{_YEAR}"),
    _day_name_year,
)
_MON_DD_YYYY = (
    re.compile(rf"(?<![A-Za-z]){_MON}\.?\s+(\d{{1,2}}),?\s+(\d{{4}})(?!\d)"),
    _name_day_year,
)
_YYYY_MM_DD = (re.compile(r"(?<!\d)(\d{4})-(\d{1,2})-(\d{1,2})(?!\d)"), _iso)

# Full format list for free text (SMS, bills).
DATE_FORMATS: tuple[tuple[re.Pattern[str], _Builder], ...] = (
    _DD_MM_SLASH,
    _DD_MM_DASH,
    _DD_MM_DOT,
    _DD_MON_DASH,
    _DD_MON_SPACE,
    _MON_DD_YYYY,
    _YYYY_MM_DD,
)

# Statement rows only use these layouts.
STATEMENT_DATE_FORMATS: tuple[tuple[re.Pattern[str], _Builder], ...] = (
    _DD_MM_SLASH,
    _DD_MM_DASH,
    _DD_MON_DASH,
    _DD_MON_SPACE,
)


def correct_century(year: int, *, today: date | None = None) -> int:
    """Expand two-digit years and pull far-future years back into this century."""

    ref = today or date.today()
    if year < 100:
        year += 2000
    if year > ref.year + 1:
        year = year % 100 + 2000
    return year


def _search(
    text: str,
    formats: Sequence[tuple[re.Pattern[str], _Builder]],
    today: date | None,
) -> date | None:
    for pattern, build in formats:
        for m in pattern.finditer(text):
            parts = build(m)
            if parts is None:
                continue
            year, month, day = parts
            try:
                return date(correct_century(year, today=today), month, day)
            except ValueError:
                continue
    return None


def extract_date(text: str, *, today: date | None = None) -> date | None:
    """Return the first recognizable date in free text, or ``None``."""

    return _search(text, DATE_FORMATS, today)


def extract_statement_date(line: str, *, today: date | None = None) -> date | None:
    """Return the date anchoring a statement row, or ``None``."""

    return _search(line, STATEMENT_DATE_FORMATS, today)


def date_spans(text: str) -> list[tuple[int, int]]:
    """Return the ``(start, end)`` spans of every recognizable date in ``text``.

    Formats are tried in the same order as :func:`extract_date`; a later
    match overlapping an earlier one is ignored. Spans come back sorted.
    """

    spans: list[tuple[int, int]] = []
    for pattern, build in DATE_FORMATS:
        for m in pattern.finditer(text):
            parts = build(m)
            if parts is None or not _is_calendar_date(*parts):
                continue
            start, end = m.span()
            if any(start < e and s < end for s, e in spans):
                continue
            spans.append((start, end))
    return sorted(spans)


def _is_calendar_date(year: int, month: int, day: int) -> bool:
    try:
        date(year if year >= 100 else 2000 + year, month, day)
    except ValueError:
        return False
    return True


__all__ = [
    "DATE_FORMATS",
    "STATEMENT_DATE_FORMATS",
    "correct_century",
    "date_spans",
    "extract_date",
    "extract_statement_date",
    "month_number",
]
