"""Bill, receipt and payment-screenshot parser.

The text is OCR-like and describes a single payment. The amount is taken by
priority:

1. labeled totals: ``Grand Total`` > ``To Pay`` / ``Net Payable`` >
   line-start ``Total`` > line-start ``Amount``;
2. payment-screenshot shapes: ``Paid to ... ₹X`` or a line holding only
   ``₹X.XX``;
3. the first currency-tagged amount;
4. the largest two-decimal amount above 1.

The payee comes from ``Sent/Paid to X``, ``To: X`` or ``From: X`` (snapped
to a known biller when one is contained), then the earliest known biller in
the text, then the first line that looks like a merchant name. The category
is derived from the payee alone, since reference numbers elsewhere in a
screenshot often contain unrelated keywords.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import ClassVar

from ..amounts import Amount, extract_tagged_amount, find_decimal_amounts, parse_number
from ..categories import OTHER
from ..dates import extract_date
from ..description import truncate_description
from ..models import Currency, StatementKind, Transaction
from .base import StatementParser

_AMOUNT = r"(\d[\d,]*\.\d{2})"
_RUPEE = r"(?:₹|rs\.?)?"

# Highest priority first.
_LABELED_TOTALS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"grand\s*total\s*:?\s*{_RUPEE}\s*{_AMOUNT}", re.IGNORECASE),
    re.compile(rf"(?:to\s*pay|net\s*payable)\s*:?\s*{_RUPEE}\s*{_AMOUNT}", re.IGNORECASE),
    re.compile(rf"^\s*total\s*:?\s*{_RUPEE}\s*{_AMOUNT}", re.IGNORECASE | re.MULTILINE),
    re.compile(rf"^\s*amount\s*:?\s*{_RUPEE}\s*{_AMOUNT}", re.IGNORECASE | re.MULTILINE),
)

_SCREENSHOT_AMOUNTS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:paid|sent)\s+(?:to)?[^\d₹]*₹\s*(\d[\d,]*(?:\.\d+)?)", re.IGNORECASE),
    re.compile(rf"^\s*₹\s*{_AMOUNT}\s*$", re.MULTILINE),
)

_PAYEE_CUES: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:sent|paid)\s+to\s+([A-Za-z0-9]+)", re.IGNORECASE),
    re.compile(r"^\s*to\s*:\s*([A-Za-z0-9 \t]+?)\s*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*from\s*:\s*([A-Za-z0-9 \t]+?)\s*$", re.IGNORECASE | re.MULTILINE),
)

_NOT_MERCHANT_PREFIXES: tuple[str, ...] = ("total", "amount", "date", "payment")
# Label lines that never name the merchant, wherever the word sits.
_NOT_MERCHANT_WORDS: tuple[str, ...] = ("total", "transaction id")
_NUMERIC_LINE = re.compile(r"^[\d.,/-]+$")
MERCHANT_LINE_LIMIT = 30


def _first_positive(patterns: tuple[re.Pattern[str], ...], text: str) -> Decimal | None:
    for pattern in patterns:
        m = pattern.search(text)
        if m is None:
            continue
        value = parse_number(m.group(1))
        if value is not None and value > 0:
            return value
    return None


class BillParser(StatementParser):
    kind: ClassVar[StatementKind] = StatementKind.BILL

    def extract_bill_amount(self, text: str) -> Amount | None:
        tagged = extract_tagged_amount(text)
        # Labeled and bare amounts take the currency the bill shows elsewhere.
        fallback_currency = tagged.currency if tagged is not None else Currency.INR

        labeled = _first_positive(_LABELED_TOTALS, text)
        if labeled is not None:
            return Amount(labeled, fallback_currency)
        screenshot = _first_positive(_SCREENSHOT_AMOUNTS, text)
        if screenshot is not None:
            return Amount(screenshot, Currency.INR)
        if tagged is not None:
            return tagged
        candidates = [a for a in find_decimal_amounts(text) if a > 1]
        if candidates:
            return Amount(max(candidates), fallback_currency)
        return None

    def detect_payee(self, text: str) -> str | None:
        for pattern in _PAYEE_CUES:
            m = pattern.search(text)
            if m is None:
                continue
            captured = m.group(1).strip()
            if len(captured) < 2:
                continue
            hit = self.mapping.longest_contained(captured)
            return hit[0] if hit is not None else captured.upper()

        hit = self.mapping.detect_biller(text)
        if hit is not None:
            return hit.biller

        for raw in text.splitlines():
            line = raw.strip()
            if len(line) < 3 or _NUMERIC_LINE.match(line):
                continue
            lower = line.lower()
            if lower.startswith(_NOT_MERCHANT_PREFIXES):
                continue
            if any(w in lower for w in _NOT_MERCHANT_WORDS):
                continue
            return line[:MERCHANT_LINE_LIMIT]
        return None

    def extract_heuristic(self, text: str) -> list[Transaction]:
        amount = self.extract_bill_amount(text)
        if amount is None:
            return []
        payee = self.detect_payee(text)
        return [
            Transaction(
                date=extract_date(text, today=self.today) or self.reference_date(),
                description=truncate_description(payee or self.kind.placeholder),
                amount=amount.value,
                category=self.mapping.categorize(payee) if payee else OTHER,
                currency=amount.currency,
                biller=payee,
                raw_text=text,
            )
        ]


__all__ = ["BillParser"]
