# ruff: noqa: E402, I001
from __future__ import annotations

import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [p for p in [str(_ROOT / "packages"), str(_ROOT)] if p not in sys.path]

from expense_extraction.duplicates import dedupe_key, remove_duplicates
from expense_extraction.models import Transaction


def _tx(day: int, amount: str, description: str = "SWIGGY") -> Transaction:
    return Transaction(
        date=date(2025, 1, day),
        description=description,
        amount=Decimal(amount),
        category="Food & Dining",
    )


def test_first_seen_wins_and_order_is_kept() -> None:
    first = _tx(5, "450.00", "SWIGGY BANGALORE")
    repeat = _tx(5, "450.00", "SWIGGY BANGALORE 06/01/2025 UBER")
    other = _tx(6, "200.00", "UBER")

    assert remove_duplicates([first, other, repeat]) == [first, other]
    assert remove_duplicates([first, other, repeat])[0].description == "SWIGGY BANGALORE"


def test_trailing_zeros_do_not_split_keys() -> None:
    assert dedupe_key(_tx(5, "450.0")) == dedupe_key(_tx(5, "450.00"))
    assert len(remove_duplicates([_tx(5, "450.0"), _tx(5, "450.00")])) == 1


def test_same_amount_on_different_days_is_kept() -> None:
    assert len(remove_duplicates([_tx(5, "99.00"), _tx(6, "99.00")])) == 2


def test_empty_input() -> None:
    assert remove_duplicates([]) == []
