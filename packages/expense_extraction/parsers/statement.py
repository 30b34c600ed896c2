"""Heuristic pass shared by the bank and credit-card statement parsers."""

from __future__ import annotations

from typing import ClassVar

from ..amounts import extract_amount
from ..categories import OTHER
from ..description import extract_description
from ..direction import keep_for
from ..models import Transaction
from ..windowing import iter_dated_windows
from .base import StatementParser


class WindowedStatementParser(StatementParser):
    """Read one candidate per dated line from its context window.

    For every window: apply the direction filter for :attr:`kind`, read the
    first amount (any two-decimal number when no currency tag is present),
    clean the description and categorize it against the mapping table.
    """

    uses_ai: ClassVar[bool] = True

    def _classify(self, description: str) -> tuple[str | None, str]:
        # The placeholder names the row type, not a merchant.
        if description == self.kind.placeholder:
            return None, OTHER
        hit = self.mapping.longest_contained(description)
        if hit is not None:
            return hit
        return None, self.mapping.categorize(description)

    def extract_heuristic(self, text: str) -> list[Transaction]:
        out: list[Transaction] = []
        for window in iter_dated_windows(text, today=self.today):
            if not keep_for(self.kind, window.context):
                continue
            amount = extract_amount(window.context, fallback="any")
            if amount is None:
                continue
            description = extract_description(window.context, placeholder=self.kind.placeholder)
            biller, category = self._classify(description)
            out.append(
                Transaction(
                    date=window.date,
                    description=description,
                    amount=amount.value,
                    category=category,
                    currency=amount.currency,
                    biller=biller,
                    raw_text=window.context,
                )
            )
        return out


__all__ = ["WindowedStatementParser"]
