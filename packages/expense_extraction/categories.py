"""Closed category set shared by every parser and the AI validation layer.

Exports
-------
- ``ALLOWED_CATEGORIES``: the ordered, closed set of category labels. The
  first eighteen are the labels offered to the AI assist in prompts; the rest
  are only produced by the biller/keyword mapping tables.
- ``normalize_name(...)``: trim and collapse whitespace in a label.
- ``coerce_category(...)``: return an allowed label or ``"Other"``.
"""

from __future__ import annotations

OTHER = "Other"

# Labels the AI assist may choose from (order is the prompt order).
PROMPT_CATEGORIES: tuple[str, ...] = (
    "Housing & Rent",
    "Utilities",
    "Groceries",
    "Food & Dining",
    "Transport & Fuel",
    "Shopping",
    "Medical & Healthcare",
    "Entertainment",
    "Subscriptions",
    "Bills & Recharge",
    "Insurance",
    "Debt & EMI",
    "Investments",
    "Education & Learning",
    "Travel & Vacation",
    "Banking & Fees",
    "UPI / Petty Cash",
    OTHER,
)

ALLOWED_CATEGORIES: tuple[str, ...] = PROMPT_CATEGORIES + (
    "OTT",
    "Gifts & Donations",
    "Vehicle Maintenance",
    "Pet Care",
    "Professional Fees",
    "Taxes",
    "Marketing & Ads",
    "Business Operations",
)

_ALLOWED_SET: frozenset[str] = frozenset(ALLOWED_CATEGORIES)


def normalize_name(name: str) -> str:
    """Return a trimmed, single-spaced representation of ``name``.

    Does not change case; labels are compared exactly.
    """

    return " ".join(name.strip().split())


def is_allowed(label: str) -> bool:
    return label in _ALLOWED_SET


def coerce_category(label: str | None) -> str:
    """Return ``label`` (whitespace-normalized) when allowed, else ``"Other"``."""

    if not isinstance(label, str):
        return OTHER
    s = normalize_name(label)
    return s if s in _ALLOWED_SET else OTHER


__all__ = [
    "ALLOWED_CATEGORIES",
    "OTHER",
    "PROMPT_CATEGORIES",
    "coerce_category",
    "is_allowed",
    "normalize_name",
]
