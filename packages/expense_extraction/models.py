"""Data models and type aliases for ``expense_extraction``.

Everything here is a value type: frozen dataclasses and string enums with no
shared mutable state. The only data the core reads from outside its boundary
is the biller mapping table (see :mod:`expense_extraction.mapping`).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import StrEnum

from .categories import is_allowed

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Currency(StrEnum):
    """Currencies the amount recognizer can tag."""

    INR = "INR"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    AED = "AED"
    SGD = "SGD"
    AUD = "AUD"
    CAD = "CAD"
    JPY = "JPY"
    UNKNOWN = "Unknown"

    @classmethod
    def from_code(cls, value: object, *, default: Currency | None = None) -> Currency:
        """Parse a currency code case-insensitively.

        Returns ``default`` (INR when omitted) for ``None``, blanks and
        unrecognized codes.
        """

        fallback = default if default is not None else cls.INR
        if not isinstance(value, str) or not value.strip():
            return fallback
        code = value.strip().upper()
        for member in cls:
            if member.value.upper() == code:
                return member
        return fallback


class StatementKind(StrEnum):
    """Source of the text handed to a parser."""

    BANK = "bank"
    CREDIT_CARD = "credit_card"
    SMS = "sms"
    BILL = "bill"

    @property
    def placeholder(self) -> str:
        """Description used when nothing meaningful survives cleanup."""

        return _PLACEHOLDERS[self]


_PLACEHOLDERS: dict[StatementKind, str] = {
    StatementKind.BANK: "Bank Transaction",
    StatementKind.CREDIT_CARD: "Credit Card Purchase",
    StatementKind.SMS: "Unknown",
    StatementKind.BILL: "Unknown",
}


# ---------------------------------------------------------------------------
# Transaction
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single outgoing transaction extracted from free text.

    Attributes
    ----------
    date:
        Calendar date of the transaction.
    description:
        Cleaned merchant description, at most 50 characters plus an ``"..."``
        marker when truncated. Never empty.
    amount:
        Strictly positive amount in ``currency``.
    category:
        A member of :data:`~expense_extraction.categories.ALLOWED_CATEGORIES`.
    currency:
        Detected currency.
    biller:
        Merchant the parser identified: a mapping-table phrase when one
        matched, otherwise the name read from the text (bills only).
    incoming:
        SMS only: the message reads as money coming in (credit/refund).
    raw_text:
        Source text the transaction was read from, kept for recategorization.
    """

    date: date
    description: str
    amount: Decimal
    category: str
    currency: Currency = Currency.INR
    biller: str | None = None
    incoming: bool = False
    raw_text: str | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError(f"amount must be positive, got {self.amount!r}")
        if not self.description.strip():
            raise ValueError("description must not be empty")
        if not is_allowed(self.category):
            raise ValueError(f"category not in the closed set: {self.category!r}")


# ---------------------------------------------------------------------------
# Parse results (sum type)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParseSuccess:
    transactions: tuple[Transaction, ...]
    produced_by_ai: bool = False


@dataclass(frozen=True, slots=True)
class NoTransactionsFound:
    """The heuristic pass ran and found nothing. Not an error."""


@dataclass(frozen=True, slots=True)
class ExtractionFailed:
    """The input had no usable text."""

    reason: str


type ParseResult = ParseSuccess | NoTransactionsFound | ExtractionFailed


# ---------------------------------------------------------------------------
# Orchestration status
# ---------------------------------------------------------------------------


class ParseState(StrEnum):
    """Named states of a single parse call."""

    IDLE = "idle"
    EXTRACTING = "extracting"
    AI_ATTEMPT = "ai_attempt"
    AI_RETRY = "ai_retry"
    AI_VALIDATED = "ai_validated"
    AI_FALLBACK = "ai_fallback"
    HEURISTIC_PASS = "heuristic_pass"
    DEDUPLICATED = "deduplicated"
    DONE = "done"
    EXTRACTION_FAILED = "extraction_failed"
    NO_TRANSACTIONS_FOUND = "no_transactions_found"


_TERMINAL_STATES = frozenset(
    {ParseState.DONE, ParseState.EXTRACTION_FAILED, ParseState.NO_TRANSACTIONS_FOUND}
)


@dataclass(frozen=True, slots=True)
class ParseStatus:
    """Advisory progress signal emitted on every state transition."""

    state: ParseState
    message: str = ""

    @property
    def in_progress(self) -> bool:
        return self.state not in _TERMINAL_STATES


type StatusCallback = Callable[[ParseStatus], None]


__all__ = [
    "Currency",
    "ExtractionFailed",
    "NoTransactionsFound",
    "ParseResult",
    "ParseState",
    "ParseStatus",
    "ParseSuccess",
    "StatementKind",
    "StatusCallback",
    "Transaction",
]
