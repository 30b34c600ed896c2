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

from db.client import session_scope

from expense_extraction.mapping import default_table
from expense_extraction.store import load_mapping_table, seed_default_mappings

from tests.helpers.db import insert_rows, stored_rows


def _seed(database_url: str, **kw) -> int:
    with session_scope(database_url=database_url) as session:
        return seed_default_mappings(session, **kw)


def test_seed_is_idempotent(database_url: str) -> None:
    assert _seed(database_url) == len(default_table())
    assert _seed(database_url) == 0
    assert len(stored_rows(database_url)) == len(default_table())


def test_seed_normalizes_billers(database_url: str) -> None:
    added = _seed(database_url, entries=(("  corner   bistro ", "Food & Dining"), ("", "Other")))

    assert added == 1
    assert stored_rows(database_url) == {"CORNER BISTRO": "Food & Dining"}


def test_existing_rows_survive_seeding(database_url: str) -> None:
    insert_rows(database_url, [("SWIGGY", "Groceries")])

    _seed(database_url)

    assert stored_rows(database_url)["SWIGGY"] == "Groceries"
    assert load_mapping_table(database_url=database_url).categorize("SWIGGY ORDER") == "Groceries"


def test_load_mapping_table_round_trip(database_url: str) -> None:
    _seed(database_url)

    table = load_mapping_table(database_url=database_url)

    assert len(table) == len(default_table())
    assert table.categorize("AMAZON PAY purchase") == "UPI / Petty Cash"


def test_load_skips_rows_with_unknown_category(database_url: str) -> None:
    insert_rows(database_url, [("ACME", "Gadgets"), ("CORNER BISTRO", "Food & Dining")])

    table = load_mapping_table(database_url=database_url)

    assert "ACME" not in table
    assert table.lookup("corner bistro") == "Food & Dining"


def test_missing_database_url_is_an_error() -> None:
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        load_mapping_table()
