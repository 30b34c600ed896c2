"""Collapse transactions re-detected from overlapping context windows."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from .models import Transaction


def dedupe_key(tx: Transaction) -> tuple[date, Decimal]:
    """Identity of a heuristic detection: ``(date, amount)``.

    Decimal equality ignores trailing zeros, so ``450.0`` and ``450.00``
    collide as expected.
    """

    return tx.date, tx.amount


def remove_duplicates(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Keep the first transaction per ``(date, amount)``, preserving order."""

    seen: set[tuple[date, Decimal]] = set()
    out: list[Transaction] = []
    for tx in transactions:
        key = dedupe_key(tx)
        if key in seen:
            continue
        seen.add(key)
        out.append(tx)
    return out


__all__ = ["dedupe_key", "remove_duplicates"]
