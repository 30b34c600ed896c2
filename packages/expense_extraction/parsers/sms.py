"""Transactional SMS parser.

One message is one event, so an SMS yields at most one transaction: any
message with a positive amount is a candidate. Messages that read as money
coming in (credited, received, refund, reversal, cashback) carry
``incoming=True``; construct the parser with ``skip_incoming=True`` to drop
them instead.

The merchant is found in priority order:

1. merchant cues: ``at X``, ``for X``, ``to X`` (upper-case names) and
   ``Info: X`` / ``VPA X``, snapped to a known biller;
2. the earliest known biller anywhere in the message, preferring merchants
   over the paying bank.

The category comes from the detected biller, falling back to the generic
keyword rules applied to the whole message. There is no AI pass for SMS.
"""

from __future__ import annotations

import dataclasses
import re
from datetime import date
from typing import ClassVar, NamedTuple

from ..amounts import extract_amount
from ..categories import OTHER
from ..completion import CompletionProvider
from ..dates import extract_date
from ..description import truncate_description
from ..direction import is_incoming_sms
from ..logging_setup import get_logger
from ..mapping import SOURCE_CATEGORIES, MappingTable
from ..models import StatementKind, Transaction
from .base import StatementParser

_logger = get_logger("expense_extraction.parsers.sms")

# Case-sensitive: merchant names in bank SMS are upper-case, which keeps
# "to your account" from reading as a merchant.
_MERCHANT_CUES: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(?:at|for|to)\s+([A-Z][A-Z0-9\s.&'*-]+?)"
        r"(?:\s+(?:on|using|via|from)\b|$|\.|,)"
    ),
    re.compile(r"\b(?:Info|VPA)\s*:?\s*([A-Z][A-Z0-9]+)"),
)


class MerchantGuess(NamedTuple):
    biller: str | None
    category: str
    name: str | None


class SMSParser(StatementParser):
    kind: ClassVar[StatementKind] = StatementKind.SMS

    def __init__(
        self,
        *,
        mapping: MappingTable | None = None,
        completion: CompletionProvider | None = None,
        today: date | None = None,
        skip_incoming: bool = False,
    ) -> None:
        super().__init__(mapping=mapping, completion=completion, today=today)
        self.skip_incoming = skip_incoming

    def identify(self, text: str) -> MerchantGuess:
        """Return the biller, its category and a display name for ``text``."""

        cue_name: str | None = None
        for pattern in _MERCHANT_CUES:
            for m in pattern.finditer(text):
                captured = " ".join(m.group(1).split()).strip(" .")
                if len(captured) < 2:
                    continue
                if cue_name is None:
                    cue_name = captured
                hit = self.mapping.detect_biller(captured)
                if hit is not None and hit.category not in SOURCE_CATEGORIES:
                    return MerchantGuess(hit.biller, hit.category, hit.biller)

        hit = self.mapping.detect_biller(text)
        if hit is not None:
            return MerchantGuess(hit.biller, hit.category, hit.biller)

        category = self.mapping.categorize_keywords(text) or OTHER
        return MerchantGuess(None, category, cue_name)

    def parse_message(self, text: str) -> Transaction | None:
        """Parse a single SMS body; ``None`` when it carries no usable amount."""

        amount = extract_amount(text, fallback="anchored")
        if amount is None:
            return None
        incoming = is_incoming_sms(text)
        if incoming and self.skip_incoming:
            _logger.debug("sms:skipped_incoming")
            return None
        guess = self.identify(text)
        when = extract_date(text, today=self.today) or self.reference_date()
        return Transaction(
            date=when,
            description=truncate_description(guess.name or self.kind.placeholder),
            amount=amount.value,
            category=guess.category,
            currency=amount.currency,
            biller=guess.biller,
            incoming=incoming,
            raw_text=text,
        )

    def extract_heuristic(self, text: str) -> list[Transaction]:
        tx = self.parse_message(text)
        return [tx] if tx is not None else []

    def recategorize(self, transaction: Transaction) -> Transaction:
        """Re-derive biller and category from the stored text and current mapping.

        Falls back to the description when the raw message was not kept.
        """

        source = transaction.raw_text or transaction.description
        guess = self.identify(source)
        return dataclasses.replace(transaction, biller=guess.biller, category=guess.category)


__all__ = ["MerchantGuess", "SMSParser"]
