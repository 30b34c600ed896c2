"""Per-source parsers: bank and credit-card statements, SMS, bills."""

from .bank import BankStatementParser
from .base import StatementParser
from .bill import BillParser
from .credit_card import CreditCardStatementParser
from .sms import SMSParser

__all__ = [
    "BankStatementParser",
    "BillParser",
    "CreditCardStatementParser",
    "SMSParser",
    "StatementParser",
]
