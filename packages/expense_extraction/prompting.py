"""Prompt construction for the optional AI extraction pass.

This module builds:
- A bounded prefix of the statement text (cut at the last full line).
- The source-specific instructions naming which rows to keep and skip, the
  closed category list and the currency codes.
- The full prompt string handed to a
  :class:`~expense_extraction.completion.CompletionProvider`.

Only bank and credit-card statements have an AI pass.
"""

from __future__ import annotations

from .categories import PROMPT_CATEGORIES
from .models import Currency, StatementKind

# Character budget for the first attempt and for the single context-length retry.
PROMPT_CHAR_BUDGET = 6000
RETRY_CHAR_BUDGET = 3000

_CURRENCY_CODES = ", ".join(c.value for c in Currency if c is not Currency.UNKNOWN)

_FIELDS = (
    "For each transaction, extract:\n"
    "- date: transaction date in DD/MM/YYYY format\n"
    "- description: {subject} name only (max 50 chars)\n"
    "- amount: numeric value (positive number, no currency symbol or commas)\n"
    "- category: one of [{categories}]\n"
    "- currency: 3-letter code ({currencies}) - detect from the statement\n"
)

_BANK_RULES = (
    "You are a BANK STATEMENT parser. Extract ONLY outgoing/expense transactions.\n"
    "\n"
    "{fields}"
    "\n"
    "EXTRACT ONLY THESE (money going OUT of the account):\n"
    "- UPI transfers/payments sent to merchants or individuals\n"
    "- NEFT/IMPS/RTGS transfers out\n"
    "- POS purchases (debit card)\n"
    "- ATM withdrawals\n"
    "- Bill payments and recharges\n"
    "- Cheque debits, standing instructions and auto-debits\n"
    "- Bank fees and charges\n"
    "- Foreign currency transactions (note the currency)\n"
    "\n"
    "SKIP THESE (money coming INTO the account):\n"
    "- Salary credits\n"
    "- UPI/NEFT/IMPS received\n"
    "- Interest credits\n"
    "- Refunds, reversals, cashbacks\n"
    "- FD maturity credits\n"
    '- Any row marked "CR" or "CREDIT"\n'
    "\n"
    "Look for columns: Date, Narration/Description, Debit, Credit, Balance.\n"
    "Only extract rows where the Debit column has a value.\n"
)

_CARD_RULES = (
    "You are a CREDIT CARD STATEMENT parser. Extract ONLY purchases and charges.\n"
    "\n"
    "{fields}"
    "\n"
    "EXTRACT ONLY THESE (charges/purchases):\n"
    "- POS transactions (in-store purchases)\n"
    "- Online purchases (e-commerce, subscriptions)\n"
    "- Restaurant and food orders\n"
    "- Fuel purchases\n"
    "- ATM cash advances\n"
    "- EMI installments\n"
    "- Annual fees, late fees, interest charges\n"
    "- Foreign currency transactions (note the currency)\n"
    "\n"
    "SKIP THESE (not purchases):\n"
    "- Payment received / payment credited\n"
    "- NEFT/IMPS/UPI payments TO the card\n"
    "- Refunds and reversals\n"
    "- Cashback credits\n"
    "- Balance transfers (credit side)\n"
    '- Any row marked "CR" or "Credit"\n'
    '- Rows with "PAYMENT RECEIVED", "TRANSFER CREDIT" or "NETBANKING"\n'
    "\n"
    "Purchases appear as debits (amounts owed); payments to the card are credits.\n"
)

_RULES: dict[StatementKind, tuple[str, str]] = {
    StatementKind.BANK: (_BANK_RULES, "payee/merchant"),
    StatementKind.CREDIT_CARD: (_CARD_RULES, "merchant/store"),
}


def truncate_statement_text(text: str, budget: int = PROMPT_CHAR_BUDGET) -> str:
    """Return at most ``budget`` characters of ``text``, ending on a full line.

    When the prefix contains no newline the raw prefix is returned.
    """

    if len(text) <= budget:
        return text
    prefix = text[:budget]
    cut = prefix.rfind("\n")
    return prefix[:cut] if cut != -1 else prefix


def build_instructions(kind: StatementKind) -> str:
    """Return the source-specific extraction rules for ``kind``."""

    try:
        template, subject = _RULES[kind]
    except KeyError:
        raise ValueError(f"no AI extraction prompt for statement kind {kind.value!r}") from None
    fields = _FIELDS.format(
        subject=subject,
        categories=", ".join(PROMPT_CATEGORIES),
        currencies=_CURRENCY_CODES,
    )
    return template.format(fields=fields)


def build_prompt(kind: StatementKind, text: str, *, budget: int = PROMPT_CHAR_BUDGET) -> str:
    """Build the complete prompt: rules, output contract, then the bounded text."""

    return (
        build_instructions(kind)
        + "\nReturn ONLY a JSON array, no explanation:\n"
        + "\nStatement Text:\n"
        + truncate_statement_text(text, budget)
    )


__all__ = [
    "PROMPT_CHAR_BUDGET",
    "RETRY_CHAR_BUDGET",
    "build_instructions",
    "build_prompt",
    "truncate_statement_text",
]
