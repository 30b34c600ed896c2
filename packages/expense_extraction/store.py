"""Database-backed mapping table: seeding and read-only loading.

The engine never writes mappings during parsing. ``seed_default_mappings``
populates a fresh database from the built-in table; editing happens outside
this package. ``load_mapping_table`` snapshots the rows into an immutable
:class:`~expense_extraction.mapping.MappingTable`.
"""

from __future__ import annotations

from db import Base
from db.client import get_engine, session_scope
from db.models.mappings import BillerMappingRow
from sqlalchemy import select
from sqlalchemy.orm import Session

from .categories import is_allowed, normalize_name
from .logging_setup import get_logger
from .mapping import DEFAULT_BILLERS, MappingTable

_logger = get_logger("expense_extraction.store")


def create_schema(*, database_url: str | None = None) -> None:
    """Create the mapping tables when missing."""

    Base.metadata.create_all(bind=get_engine(database_url=database_url))


def seed_default_mappings(
    session: Session,
    entries: tuple[tuple[str, str], ...] = DEFAULT_BILLERS,
) -> int:
    """Insert ``entries`` whose biller is not stored yet; return the number added.

    Existing rows win, so re-running is a no-op and user edits survive.
    Commit is left to the caller.
    """

    existing = set(session.scalars(select(BillerMappingRow.biller)))
    added = 0
    for biller, category in entries:
        key = normalize_name(biller).upper()
        if not key or key in existing:
            continue
        session.add(BillerMappingRow(biller=key, category=normalize_name(category)))
        existing.add(key)
        added += 1
    session.flush()
    _logger.info("store:seeded added=%d total=%d", added, len(existing))
    return added


def load_mapping_table(*, database_url: str | None = None) -> MappingTable:
    """Read every stored mapping into a :class:`MappingTable`.

    Rows with a category outside the closed set are skipped with a warning.
    """

    pairs: list[tuple[str, str]] = []
    with session_scope(database_url=database_url) as session:
        rows = session.execute(
            select(BillerMappingRow.biller, BillerMappingRow.category).order_by(
                BillerMappingRow.id
            )
        ).all()
    for biller, category in rows:
        if not is_allowed(normalize_name(category)):
            _logger.warning("store:skipped_row biller=%s category=%s", biller, category)
            continue
        pairs.append((biller, category))
    _logger.info("store:loaded count=%d", len(pairs))
    return MappingTable(pairs)


__all__ = ["create_schema", "load_mapping_table", "seed_default_mappings"]
