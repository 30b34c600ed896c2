"""Permissive parsing and per-candidate validation of AI extraction output.

The completion text is expected to hold a JSON array of objects with
``date``, ``description``, ``amount``, ``category`` and optional ``currency``.
Surrounding prose and Markdown code fences are tolerated. Each candidate is
validated on its own:

- ``date`` must parse with one of :data:`AI_DATE_FORMATS` (century-corrected);
- ``amount`` must be a strictly positive number;
- ``category`` outside the closed set becomes ``"Other"``;
- ``currency`` outside the enumerated set becomes INR.

Invalid candidates are dropped. Only a response with no decodable array at
all raises ``ValueError``.
"""

from __future__ import annotations

import datetime as dt
import json
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from .amounts import parse_number
from .categories import coerce_category
from .dates import correct_century
from .description import truncate_description
from .logging_setup import get_logger
from .models import Currency, Transaction

_logger = get_logger("expense_extraction.ai_response")

AI_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%m/%d/%Y",
    "%d/%m/%y",
    "%d-%m-%y",
)


def parse_ai_date(value: str, *, today: dt.date | None = None) -> dt.date | None:
    s = value.strip()
    for fmt in AI_DATE_FORMATS:
        try:
            parsed = dt.datetime.strptime(s, fmt).date()
        except ValueError:
            continue
        year = correct_century(parsed.year, today=today)
        try:
            return parsed.replace(year=year)
        except ValueError:
            # 29 February moved into a non-leap year.
            return None
    return None


class _AiCandidate(BaseModel):
    """Typed view of one AI-proposed transaction.

    Validators read ``ValidationInfo.context`` for:
      - ``placeholder``: description used when the model left it blank
      - ``today``: reference date for century correction (optional)
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, validate_default=True)

    date: dt.date
    description: str = ""
    amount: Decimal
    category: str = ""
    currency: Currency = Currency.INR

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v: Any, info: ValidationInfo) -> dt.date:
        if not isinstance(v, str):
            raise ValueError("date must be a string")
        today = info.context.get("today") if info.context else None
        parsed = parse_ai_date(v, today=today)
        if parsed is None:
            raise ValueError(f"unrecognized date: {v!r}")
        return parsed

    @field_validator("description", mode="before")
    @classmethod
    def _clean_description(cls, v: Any, info: ValidationInfo) -> str:
        placeholder = info.context.get("placeholder", "Unknown") if info.context else "Unknown"
        s = " ".join(str(v).split()) if v is not None else ""
        return truncate_description(s) if s else placeholder

    @field_validator("amount", mode="before")
    @classmethod
    def _positive_amount(cls, v: Any) -> Decimal:
        if isinstance(v, bool):
            raise ValueError("amount must be numeric")
        if isinstance(v, int | float):
            v = str(v)
        if not isinstance(v, str):
            raise ValueError("amount must be numeric")
        parsed = parse_number(v)
        if parsed is None or parsed <= 0:
            raise ValueError(f"amount must be a positive number, got {v!r}")
        return parsed

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, v: Any) -> str:
        return coerce_category(v if isinstance(v, str) else None)

    @field_validator("currency", mode="before")
    @classmethod
    def _coerce_currency(cls, v: Any) -> Currency:
        return Currency.from_code(v)


def _strip_to_array(raw: str) -> str:
    text = raw.replace("```json", "").replace("```", "").strip()
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end == -1 or end < start:
        raise ValueError("AI response contains no JSON array")
    return text[start : end + 1]


def parse_ai_transactions(
    raw: str,
    *,
    placeholder: str,
    today: dt.date | None = None,
) -> list[Transaction]:
    """Decode ``raw`` into validated transactions, dropping invalid candidates."""

    try:
        decoded = json.loads(_strip_to_array(raw))
    except json.JSONDecodeError as e:
        raise ValueError("AI response JSON array could not be decoded") from e
    if not isinstance(decoded, list):
        raise ValueError("AI response is not a JSON array")

    context = {"placeholder": placeholder, "today": today}
    out: list[Transaction] = []
    dropped = 0
    for item in decoded:
        if not isinstance(item, Mapping):
            dropped += 1
            continue
        try:
            cand = _AiCandidate.model_validate(item, context=context)
        except ValidationError as e:
            dropped += 1
            _logger.debug("ai_response:candidate_dropped errors=%d", e.error_count())
            continue
        out.append(
            Transaction(
                date=cand.date,
                description=cand.description,
                amount=cand.amount,
                category=cand.category,
                currency=cand.currency,
            )
        )
    if dropped:
        _logger.info("ai_response:validated kept=%d dropped=%d", len(out), dropped)
    return out


__all__ = ["AI_DATE_FORMATS", "parse_ai_date", "parse_ai_transactions"]
