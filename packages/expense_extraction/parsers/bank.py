"""Bank-account statement parser (savings/current accounts).

Keeps money leaving the account: UPI, NEFT/IMPS/RTGS and other transfers
out, POS and ATM debits, bill payments and bank charges. A row with any
credit keyword (salary, refund, reversal, cashback, interest, ``CR``) is
dropped even when debit keywords are also present.
"""

from __future__ import annotations

from typing import ClassVar

from ..models import StatementKind
from .statement import WindowedStatementParser


class BankStatementParser(WindowedStatementParser):
    kind: ClassVar[StatementKind] = StatementKind.BANK


__all__ = ["BankStatementParser"]
