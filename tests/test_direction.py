# ruff: noqa: E402, I001
from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [p for p in [str(_ROOT / "packages"), str(_ROOT)] if p not in sys.path]

from expense_extraction.direction import (
    is_bank_debit,
    is_card_purchase,
    is_incoming_sms,
    keep_for,
)
from expense_extraction.models import StatementKind


@pytest.mark.parametrize(
    ("context", "expected"),
    [
        ("05/01/2025 UPI/123/SWIGGY 450.00 DR", True),
        ("05/01/2025 UPI/123/ACME CREDIT 450.00", False),
        ("05/01/2025 POS", True),
        ("05/01/2025 ATM WDL MG ROAD 2,000.00", True),
        ("05/01/2025 SWIGGY 450.00DR", True),
        ("05/01/2025 SALARY ACME LTD 50,000.00 CR", False),
        ("05/01/2025 NEFT INTEREST CREDITED 120.00", False),
        # Short codes do not fire inside longer words.
        ("05/01/2025 CROMA POS 1,200.00", True),
        ("05/01/2025 PRINT HUB POS 300.00", True),
        ("05/01/2025 OPENING BALANCE 9,000.00", False),
    ],
)
def test_bank_debit(context: str, expected: bool) -> None:
    assert is_bank_debit(context) is expected


@pytest.mark.parametrize(
    ("context", "expected"),
    [
        ("05/01/2025 AMAZON 1,299.00", True),
        ("05/01/2025 CORNER BISTRO 640.00", True),
        ("05/01/2025 ANNUAL FEE 500.00", True),
        # Purchase evidence outweighs a generic credit keyword.
        ("05/01/2025 REFUND AMAZON 500.00 CR", True),
        ("05/01/2025 PAYMENT THANK YOU 5,000.00", False),
        ("05/01/2025 PAYMENT RECEIVED POS 10,000.00 CR", False),
        ("05/01/2025 NETBANKING TRANSFER 5,000.00", False),
    ],
)
def test_card_purchase(context: str, expected: bool) -> None:
    assert is_card_purchase(context) is expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Rs 500.00 credited to your a/c XX1234", True),
        ("Refunded Rs 200.00 for order 991", True),
        ("Cashback of Rs 50.00 received", True),
        ("Rs 500.00 debited from a/c XX1234; refund ref 88", False),
        ("Rs 500.00 spent on card XX99 at UBER", False),
    ],
)
def test_incoming_sms(text: str, expected: bool) -> None:
    assert is_incoming_sms(text) is expected


def test_keep_for_dispatches_by_kind() -> None:
    credit_row = "05/01/2025 SALARY 50,000.00 CR"
    assert keep_for(StatementKind.BANK, credit_row) is False
    assert keep_for(StatementKind.CREDIT_CARD, credit_row) is False
    # SMS and bills are never filtered here.
    assert keep_for(StatementKind.SMS, credit_row) is True
    assert keep_for(StatementKind.BILL, credit_row) is True
