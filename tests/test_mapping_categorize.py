# ruff: noqa: E402, I001
from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [
    p
    for p in [str(_ROOT / "packages"), str(_ROOT / "libs" / "db" / "src"), str(_ROOT)]
    if p not in sys.path
]

from expense_extraction.categories import ALLOWED_CATEGORIES, OTHER, coerce_category
from expense_extraction.mapping import (
    DEFAULT_BILLERS,
    BillerMatch,
    KeywordRule,
    MappingTable,
    categorize,
    default_table,
)


def _small_table() -> MappingTable:
    return MappingTable(
        [
            ("OLA", "Transport & Fuel"),
            ("HDFC", "Banking & Fees"),
            ("Swiggy", "Food & Dining"),
            ("SWIGGY INSTAMART", "Groceries"),
        ]
    )


# ---- Two-tier categorize -----------------------------------------------------


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("AMAZON PAY purchase", "UPI / Petty Cash"),
        ("amazon order", "Shopping"),
        ("SWIGGY BANGALORE", "Food & Dining"),
        ("NETFLIX.COM", "OTT"),
        ("Apollo Pharmacy", "Medical & Healthcare"),
    ],
)
def test_categorize_prefers_longest_biller(description: str, expected: str) -> None:
    assert categorize(description) == expected


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("Corner restaurant", "Food & Dining"),
        ("Blue Lagoon Cafe", "Food & Dining"),
        ("Green grocery store", "Groceries"),
        ("City Hospital", "Medical & Healthcare"),
    ],
)
def test_categorize_falls_back_to_keyword_rules(description: str, expected: str) -> None:
    assert categorize(description) == expected


def test_every_default_biller_round_trips() -> None:
    table = default_table()
    for biller, category in DEFAULT_BILLERS:
        assert table.categorize(biller) == category, biller
        assert table.categorize(biller.lower()) == category, biller


def test_categorize_unknown_is_other() -> None:
    assert categorize("xyz unknown") == OTHER
    assert categorize("some random unrelated text") == OTHER
    assert categorize("") == OTHER


def test_categorize_is_case_insensitive() -> None:
    table = _small_table()
    assert table.categorize("paid via swiggy instamart app") == "Groceries"
    assert table.categorize("Swiggy order") == "Food & Dining"


def test_keyword_rules_follow_declaration_order() -> None:
    rules = (
        KeywordRule(("store",), "Shopping"),
        KeywordRule(("grocery",), "Groceries"),
    )
    table = MappingTable([], keyword_rules=rules)
    assert table.categorize("grocery store") == "Shopping"


# ---- Table construction ------------------------------------------------------


def test_default_table_is_consistent_and_shared() -> None:
    table = default_table()
    assert table is default_table()
    assert len(table) == len({b.upper() for b, _ in DEFAULT_BILLERS})
    assert all(category in ALLOWED_CATEGORIES for _, category in table.items())


def test_billers_are_stored_upper_case() -> None:
    table = _small_table()
    assert "SWIGGY" in table
    assert "swiggy" in table
    assert table.lookup("hdfc") == "Banking & Fees"
    assert table.lookup("unknown") is None


def test_all_billers_longest_first() -> None:
    billers = _small_table().all_billers()
    assert billers[0] == "SWIGGY INSTAMART"
    assert [len(b) for b in billers] == sorted((len(b) for b in billers), reverse=True)


def test_rejects_unknown_category() -> None:
    with pytest.raises(ValueError, match="unknown category"):
        MappingTable([("ACME", "Gadgets")])


def test_rejects_keyword_rule_with_unknown_category() -> None:
    with pytest.raises(ValueError, match="keyword rule"):
        MappingTable([], keyword_rules=(KeywordRule(("shop",), "Gadgets"),))


def test_categorize_uses_an_empty_table_as_given() -> None:
    assert categorize("SWIGGY", MappingTable([])) == OTHER


def test_rejects_conflicting_duplicates() -> None:
    with pytest.raises(ValueError, match="conflicting"):
        MappingTable([("uber", "Transport & Fuel"), ("UBER", "Shopping")])


def test_accepts_agreeing_duplicates() -> None:
    table = MappingTable([("uber", "Transport & Fuel"), ("UBER ", "Transport & Fuel")])
    assert len(table) == 1


def test_rejects_blank_biller() -> None:
    with pytest.raises(ValueError, match="blank"):
        MappingTable([("   ", "Shopping")])


def test_with_entries_returns_new_table() -> None:
    base = _small_table()
    extended = base.with_entries({"ola": "Travel & Vacation", "Corner Bistro": "Food & Dining"})

    assert extended is not base
    assert extended.lookup("OLA") == "Travel & Vacation"
    assert extended.categorize("CORNER BISTRO MG ROAD") == "Food & Dining"
    # The base table is untouched.
    assert base.lookup("OLA") == "Transport & Fuel"
    assert "CORNER BISTRO" not in base


# ---- Whole-token biller detection --------------------------------------------


def test_find_billers_in_text_order() -> None:
    matches = _small_table().find_billers("HDFC card spent at Swiggy Instamart")
    assert matches == [
        BillerMatch("HDFC", "Banking & Fees", 0),
        BillerMatch("SWIGGY INSTAMART", "Groceries", 19),
    ]


def test_find_billers_requires_token_boundaries() -> None:
    table = _small_table()
    assert table.find_billers("COCA COLA") == []
    assert table.find_billers("OLA2") == []
    assert [m.biller for m in table.find_billers("paid to OLA.")] == ["OLA"]


def test_detect_biller_prefers_merchant_over_bank() -> None:
    table = _small_table()
    hit = table.detect_biller("HDFC Bank: spent at OLA")
    assert hit is not None and hit.biller == "OLA"


def test_detect_biller_uses_bank_when_alone() -> None:
    hit = _small_table().detect_biller("HDFC Bank alert")
    assert hit is not None and hit.category == "Banking & Fees"
    assert _small_table().detect_biller("no merchant here") is None


# ---- Category coercion --------------------------------------------------------


def test_coerce_category() -> None:
    assert coerce_category("  Food &   Dining ") == "Food & Dining"
    assert coerce_category("Gadgets") == OTHER
    assert coerce_category(None) == OTHER
