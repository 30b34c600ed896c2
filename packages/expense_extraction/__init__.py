"""Public interface for the ``expense_extraction`` package.

Symbol re-exports only; import submodules for the building blocks
(``amounts``, ``dates``, ``mapping``, ``direction``, ``windowing``,
``description``, ``duplicates``).
"""

from .amounts import Amount, extract_amount
from .batch import parse_batch, parse_sms_batch
from .categories import ALLOWED_CATEGORIES, OTHER, PROMPT_CATEGORIES, coerce_category
from .completion import (
    CompletionError,
    CompletionProvider,
    CompletionUnavailable,
    ContextLengthExceeded,
    DisabledCompletionProvider,
    OpenAICompletionProvider,
    build_completion_provider,
)
from .dates import extract_date, extract_statement_date
from .mapping import MappingTable, categorize, default_table
from .models import (
    Currency,
    ExtractionFailed,
    NoTransactionsFound,
    ParseResult,
    ParseState,
    ParseStatus,
    ParseSuccess,
    StatementKind,
    Transaction,
)
from .parsers import (
    BankStatementParser,
    BillParser,
    CreditCardStatementParser,
    SMSParser,
    StatementParser,
)

__all__ = [
    # Parsers
    "BankStatementParser",
    "BillParser",
    "CreditCardStatementParser",
    "SMSParser",
    "StatementParser",
    "parse_batch",
    "parse_sms_batch",
    # Building blocks
    "Amount",
    "MappingTable",
    "categorize",
    "default_table",
    "extract_amount",
    "extract_date",
    "extract_statement_date",
    # Categories
    "ALLOWED_CATEGORIES",
    "OTHER",
    "PROMPT_CATEGORIES",
    "coerce_category",
    # AI assist
    "CompletionError",
    "CompletionProvider",
    "CompletionUnavailable",
    "ContextLengthExceeded",
    "DisabledCompletionProvider",
    "OpenAICompletionProvider",
    "build_completion_provider",
    # Models
    "Currency",
    "ExtractionFailed",
    "NoTransactionsFound",
    "ParseResult",
    "ParseState",
    "ParseStatus",
    "ParseSuccess",
    "StatementKind",
    "Transaction",
]
