"""Amount and currency recognition.

``extract_amount`` tries an ordered table of currency-tagged patterns, two
forms per currency (code/symbol before the number, then after it). The first
pattern with a strictly positive match wins. When no currency tag is present
the recognizer falls back to a bare two-decimal amount:

- ``fallback="anchored"`` (SMS, bills): the amount must sit next to a
  direction verb (``debited``, ``credited``, ``paid``, ``spent``,
  ``received``).
- ``fallback="any"`` (statement rows): the first two-decimal amount.

Currency-less amounts are reported as INR. The engine targets Indian bank and
payment text, so an untagged amount in that vocabulary is rupees by policy.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Literal, NamedTuple

from .models import Currency

type Fallback = Literal["anchored", "any", "none"]

# Digits with optional thousands separators and an optional fraction.
_NUMBER = r"\d[\d,]*(?:\.\d+)?"
# Two-decimal amount that is not part of a dotted date such as 05.01.2025.
_TWO_DECIMAL = r"(?<![\d.])\d[\d,]*\.\d{2}(?![\d.])"

# Currency markers. Alphabetic codes must not be glued to surrounding letters
# ("Rs" inside "Users", "Dh" inside "Sidharth").
_MARKERS: tuple[tuple[Currency, str, str], ...] = (
    # (currency, marker before the number, marker after the number)
    (Currency.INR, r"(?<![A-Za-z])(?:Rs\.?|INR)|₹", r"(?:Rs\.?|INR)(?![A-Za-z])|₹"),
    # A bare "$" preceded by a letter belongs to S$, A$ or C$.
    (Currency.USD, r"(?<![A-Za-z])(?:USD|US\$|\$)", r"(?:USD|US\$)(?![A-Za-z])"),
    (Currency.EUR, r"(?<![A-Za-z])EUR|€", r"EUR(?![A-Za-z])|€"),
    (Currency.GBP, r"(?<![A-Za-z])GBP|£", r"GBP(?![A-Za-z])|£"),
    (Currency.AED, r"(?<![A-Za-z])(?:AED|Dh)", r"(?:AED|Dh)(?![A-Za-z])"),
    (Currency.SGD, r"(?<![A-Za-z])(?:SGD|S\$)", r"(?:SGD|S\$)(?![A-Za-z])"),
    (Currency.AUD, r"(?<![A-Za-z])(?:AUD|A\$)", r"(?:AUD|A\$)(?![A-Za-z])"),
    (Currency.CAD, r"(?<![A-Za-z])(?:CAD|C\$)", r"(?:CAD|C\$)(?![A-Za-z])"),
    (Currency.JPY, r"(?<![A-Za-z])JPY|¥", r"JPY(?![A-Za-z])|¥"),
)


def _build_patterns() -> tuple[tuple[re.Pattern[str], Currency], ...]:
    out: list[tuple[re.Pattern[str], Currency]] = []
    for currency, before, after in _MARKERS:
        out.append((re.compile(rf"(?:{before})\s*({_NUMBER})", re.IGNORECASE), currency))
        out.append(
            (re.compile(rf"(?<![\d.,])({_NUMBER})\s*(?:{after})", re.IGNORECASE), currency)
        )
    return tuple(out)


CURRENCY_PATTERNS: tuple[tuple[re.Pattern[str], Currency], ...] = _build_patterns()

_DIRECTION_VERBS = r"(?:debited|credited|paid|spent|received)"

_ANCHORED_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"{_DIRECTION_VERBS}.*?({_TWO_DECIMAL})", re.IGNORECASE),
    re.compile(rf"({_TWO_DECIMAL})\s*(?:debited|credited)", re.IGNORECASE),
)

_ANY_TWO_DECIMAL = re.compile(_TWO_DECIMAL)


class Amount(NamedTuple):
    value: Decimal
    currency: Currency


def parse_number(raw: str) -> Decimal | None:
    """Parse a numeric run with thousands separators; ``None`` when invalid."""

    cleaned = raw.replace(",", "").strip().rstrip(".")
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _first_positive(pattern: re.Pattern[str], text: str) -> Decimal | None:
    for m in pattern.finditer(text):
        value = parse_number(m.group(1))
        if value is not None and value > 0:
            return value
    return None


def extract_tagged_amount(text: str) -> Amount | None:
    """Return the first positive currency-tagged amount, by pattern priority."""

    for pattern, currency in CURRENCY_PATTERNS:
        value = _first_positive(pattern, text)
        if value is not None:
            return Amount(value, currency)
    return None


def extract_amount(text: str, *, fallback: Fallback = "anchored") -> Amount | None:
    """Return ``(amount, currency)`` found in ``text``, or ``None``.

    Zero and negative amounts are never returned.
    """

    tagged = extract_tagged_amount(text)
    if tagged is not None:
        return tagged

    if fallback == "anchored":
        for pattern in _ANCHORED_PATTERNS:
            value = _first_positive(pattern, text)
            if value is not None:
                return Amount(value, Currency.INR)
    elif fallback == "any":
        for m in _ANY_TWO_DECIMAL.finditer(text):
            value = parse_number(m.group(0))
            if value is not None and value > 0:
                return Amount(value, Currency.INR)
    return None


def find_decimal_amounts(text: str) -> list[Decimal]:
    """Return every positive two-decimal amount in ``text``, in text order."""

    out: list[Decimal] = []
    for m in _ANY_TWO_DECIMAL.finditer(text):
        value = parse_number(m.group(0))
        if value is not None and value > 0:
            out.append(value)
    return out


__all__ = [
    "CURRENCY_PATTERNS",
    "Amount",
    "extract_amount",
    "extract_tagged_amount",
    "find_decimal_amounts",
    "parse_number",
]
