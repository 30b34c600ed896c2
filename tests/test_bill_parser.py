# ruff: noqa: E402, I001
from __future__ import annotations

import asyncio
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [p for p in [str(_ROOT / "packages"), str(_ROOT)] if p not in sys.path]

from expense_extraction.amounts import Amount
from expense_extraction.models import Currency, NoTransactionsFound, ParseSuccess, Transaction
from expense_extraction.parsers import BillParser

TODAY = date(2025, 6, 1)


def _parse_one(text: str) -> Transaction:
    result = asyncio.run(BillParser(today=TODAY).parse(text))
    assert isinstance(result, ParseSuccess), result
    assert len(result.transactions) == 1
    return result.transactions[0]


def test_restaurant_receipt_uses_grand_total() -> None:
    tx = _parse_one(
        "GREEN LEAF RESTAURANT\n"
        "Date: 05/01/2025\n"
        "Subtotal 1,000.00\n"
        "GST 180.00\n"
        "Grand Total: ₹1,180.00\n"
    )

    assert (tx.amount, tx.currency) == (Decimal("1180.00"), Currency.INR)
    assert tx.date == date(2025, 1, 5)
    assert tx.description == "GREEN LEAF RESTAURANT"
    assert tx.biller == "GREEN LEAF RESTAURANT"
    assert tx.category == "Food & Dining"


def test_payment_screenshot() -> None:
    tx = _parse_one("Paid to SWIGGY\n₹ 349\nUPI transaction ID 1234567890\n12 Mar 2025, 8:30 pm\n")

    assert tx.amount == Decimal("349")
    assert (tx.biller, tx.category) == ("SWIGGY", "Food & Dining")
    assert tx.date == date(2025, 3, 12)


def test_to_cue_snaps_to_known_biller() -> None:
    tx = _parse_one(
        "Payment Successful\nTo: Airtel Prepaid\nAmount: Rs. 299.00\nTransaction ID 998877\n"
    )

    assert tx.amount == Decimal("299.00")
    assert (tx.biller, tx.category) == ("AIRTEL", "Bills & Recharge")
    assert tx.description == "AIRTEL"
    assert tx.date == TODAY


def test_labeled_total_takes_currency_shown_elsewhere() -> None:
    tx = _parse_one("Total: 45.00\nUSD 45.00 charged\nSTARBUCKS SEATTLE\n")

    assert (tx.amount, tx.currency) == (Decimal("45.00"), Currency.USD)
    assert (tx.biller, tx.category) == ("STARBUCKS", "Food & Dining")


def test_largest_amount_fallback_and_first_merchant_line() -> None:
    tx = _parse_one("ACME HARDWARE\nItem A 120.00\nItem B 80.50\nPaid 200.50\n")

    assert tx.amount == Decimal("200.50")
    assert tx.description == "ACME HARDWARE"
    assert tx.category == "Other"


def test_bill_amount_priority() -> None:
    parser = BillParser(today=TODAY)
    text = "Amount: 100.00\nTotal: 110.00\nGrand Total: 118.00\n"
    assert parser.extract_bill_amount(text) == Amount(Decimal("118.00"), Currency.INR)
    assert parser.extract_bill_amount("To Pay: 64.00\nTotal 70.00") == Amount(
        Decimal("64.00"), Currency.INR
    )


def test_no_amount() -> None:
    result = asyncio.run(BillParser(today=TODAY).parse("Thank you for visiting\nSee you soon"))
    assert isinstance(result, NoTransactionsFound)
