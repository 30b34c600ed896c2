"""Transaction-direction classification per statement kind.

Bank and credit-card statements are dense multi-row documents, so candidate
rows are filtered aggressively; an SMS denotes a single event and is only
flagged, never dropped here.

Keywords match over the upper-cased context and must not follow a letter.
Short codes (three letters or fewer) must not be followed by one either, so
``CR`` does not fire inside ``CROMA`` nor ``INT`` inside ``PRINT``; longer
words also match their inflections (``CREDIT`` in ``CREDITED``). Digits and
punctuation separate (``450.00DR``, ``UPI/1234``).
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models import StatementKind

BANK_DEBIT_KEYWORDS: tuple[str, ...] = (
    "DR",
    "DEBIT",
    "UPI",
    "IMPS",
    "NEFT",
    "RTGS",
    "ATM",
    "POS",
    "WITHDRAWAL",
    "PAID",
    "TRF",
    "TRANSFER",
)
BANK_CREDIT_KEYWORDS: tuple[str, ...] = (
    "CR",
    "CREDIT",
    "SALARY",
    "REFUND",
    "REVERSAL",
    "CASHBACK",
    "INT",
    "INTEREST",
)

CARD_PURCHASE_KEYWORDS: tuple[str, ...] = (
    "POS",
    "PURCHASE",
    "MERCHANT",
    "AMAZON",
    "FLIPKART",
    "SWIGGY",
    "ZOMATO",
    "UBER",
    "ATM",
    "ECOM",
    "EMI",
    "FEE",
    "FEES",
    "CHARGE",
    "INTEREST",
)
CARD_PAYMENT_KEYWORDS: tuple[str, ...] = (
    "PAYMENT",
    "CR",
    "CREDIT",
    "REFUND",
    "REVERSAL",
    "CASHBACK",
    "TRANSFER CREDIT",
    "NETBANKING",
    "NEFT",
    "IMPS",
)
# Veto a card row even when purchase evidence is present.
CARD_VETO_PHRASES: tuple[str, ...] = (
    "PAYMENT RECEIVED",
    "TRANSFER CREDIT",
    "NETBANKING TRANSFER",
)

SMS_INCOMING_KEYWORDS: tuple[str, ...] = (
    "CREDITED",
    "RECEIVED",
    "REFUND",
    "REVERSAL",
    "REVERSED",
    "CASHBACK",
)
SMS_OUTGOING_KEYWORDS: tuple[str, ...] = (
    "DEBITED",
    "SPENT",
    "PAID",
    "WITHDRAWN",
    "PURCHASE",
    "SENT",
)

_SHORT_CODE = 3


def _keyword_pattern(keywords: Iterable[str]) -> re.Pattern[str]:
    ordered = sorted(set(keywords), key=len, reverse=True)
    alternation = "|".join(
        re.escape(k) if len(k) > _SHORT_CODE else re.escape(k) + "(?![A-Z])" for k in ordered
    )
    return re.compile(rf"(?<![A-Z])(?:{alternation})")


_BANK_DEBIT = _keyword_pattern(BANK_DEBIT_KEYWORDS)
_BANK_CREDIT = _keyword_pattern(BANK_CREDIT_KEYWORDS)
_CARD_PURCHASE = _keyword_pattern(CARD_PURCHASE_KEYWORDS)
_CARD_PAYMENT = _keyword_pattern(CARD_PAYMENT_KEYWORDS)
_CARD_VETO = _keyword_pattern(CARD_VETO_PHRASES)
_SMS_INCOMING = _keyword_pattern(SMS_INCOMING_KEYWORDS)
_SMS_OUTGOING = _keyword_pattern(SMS_OUTGOING_KEYWORDS)


def is_bank_debit(context: str) -> bool:
    """Keep a bank row: debit evidence present and no credit keyword at all."""

    upper = context.upper()
    if _BANK_CREDIT.search(upper):
        return False
    return _BANK_DEBIT.search(upper) is not None


def is_card_purchase(context: str) -> bool:
    """Keep a card row unless it reads as a payment or credit to the card.

    Purchase evidence overrides a generic payment/credit keyword; the phrases
    in :data:`CARD_VETO_PHRASES` always drop the row.
    """

    upper = context.upper()
    if _CARD_VETO.search(upper):
        return False
    if _CARD_PAYMENT.search(upper) is None:
        return True
    return _CARD_PURCHASE.search(upper) is not None


def is_incoming_sms(text: str) -> bool:
    """Return True when an SMS reads as money in and carries no debit wording."""

    upper = text.upper()
    return _SMS_INCOMING.search(upper) is not None and _SMS_OUTGOING.search(upper) is None


def keep_for(kind: StatementKind, context: str) -> bool:
    """Dispatch to the classifier for ``kind``; SMS and bills keep everything."""

    if kind is StatementKind.BANK:
        return is_bank_debit(context)
    if kind is StatementKind.CREDIT_CARD:
        return is_card_purchase(context)
    return True


__all__ = [
    "BANK_CREDIT_KEYWORDS",
    "BANK_DEBIT_KEYWORDS",
    "CARD_PAYMENT_KEYWORDS",
    "CARD_PURCHASE_KEYWORDS",
    "CARD_VETO_PHRASES",
    "is_bank_debit",
    "is_card_purchase",
    "is_incoming_sms",
    "keep_for",
]
