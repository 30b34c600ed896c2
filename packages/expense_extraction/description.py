"""Merchant description cleanup for statement context windows."""

from __future__ import annotations

import re

from .dates import date_spans

MAX_DESCRIPTION_LENGTH = 50
ELLIPSIS = "..."

# Applied in order after dates are cut; each match is removed outright.
_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"[\d,]+\.\d{2}"),
    re.compile(r"\b(?:DR|CR|DEBIT|CREDIT)\b", re.IGNORECASE),
    re.compile(r"\b\d{10,}\b"),
)


def _strip_dates(text: str) -> str:
    pieces: list[str] = []
    last = 0
    for start, end in date_spans(text):
        pieces.append(text[last:start])
        last = end
    pieces.append(text[last:])
    return " ".join(pieces)


def truncate_description(text: str, limit: int = MAX_DESCRIPTION_LENGTH) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with ``"..."``."""

    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def extract_description(context: str, *, placeholder: str) -> str:
    """Strip dates, amounts, direction tokens and long reference numbers.

    Returns ``placeholder`` when nothing survives.
    """

    cleaned = _strip_dates(context)
    for pattern in _NOISE_PATTERNS:
        cleaned = pattern.sub("", cleaned)
    cleaned = " ".join(cleaned.split())
    if not cleaned:
        return placeholder
    return truncate_description(cleaned)


__all__ = [
    "ELLIPSIS",
    "MAX_DESCRIPTION_LENGTH",
    "extract_description",
    "truncate_description",
]
