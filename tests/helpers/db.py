"""DB helpers for tests: bootstrap a temporary SQLite DB for the mapping store."""

from __future__ import annotations

from pathlib import Path

from db.client import session_scope
from db.models.mappings import BillerMappingRow
from sqlalchemy import select

from expense_extraction.store import create_schema


def bootstrap_sqlite_db(db_file: Path) -> str:
    """Create a SQLite database file, initialize schema, and return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    # Ensure parent exists before engine creation attempts any writes
    db_file.parent.mkdir(parents=True, exist_ok=True)
    create_schema(database_url=url)
    return url


def insert_rows(database_url: str, rows: list[tuple[str, str]]) -> None:
    """Insert raw ``(biller, category)`` rows, bypassing the seeding rules."""

    with session_scope(database_url=database_url) as session:
        for biller, category in rows:
            session.add(BillerMappingRow(biller=biller, category=category))


def stored_rows(database_url: str) -> dict[str, str]:
    with session_scope(database_url=database_url) as session:
        rows = session.execute(select(BillerMappingRow.biller, BillerMappingRow.category)).all()
    return {biller: category for biller, category in rows}
