"""Credit-card statement parser.

Keeps purchases and charges. Payments to the card, refunds and other credits
are dropped unless purchase evidence (POS, merchant names, fees, EMI,
interest) is present on the same row; ``PAYMENT RECEIVED``,
``TRANSFER CREDIT`` and ``NETBANKING TRANSFER`` always drop the row.
"""

from __future__ import annotations

from typing import ClassVar

from ..models import StatementKind
from .statement import WindowedStatementParser


class CreditCardStatementParser(WindowedStatementParser):
    kind: ClassVar[StatementKind] = StatementKind.CREDIT_CARD


__all__ = ["CreditCardStatementParser"]
