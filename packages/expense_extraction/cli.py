# ruff: noqa: I001
"""CLI for the ``expense_extraction`` package.

A Typer-based console interface over the parsers. Environment variables
(``OPENAI_API_KEY``, ``EE_AI_ENABLED``, ``EE_AI_MODEL``, ``DATABASE_URL``) are
loaded from a local ``.env`` using ``python-dotenv`` before any command runs.
Input files are UTF-8 plain text; text extraction from PDFs happens upstream.

Every parse command prints one tab-separated line per transaction::

    date  amount  currency  category  description

Exit codes: ``0`` transactions found, ``1`` unreadable or empty input,
``2`` no transactions found.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .completion import build_completion_provider
from .logging_setup import configure_logging, get_logger, status_logger
from .mapping import MappingTable, default_table
from .models import ExtractionFailed, NoTransactionsFound, ParseResult, Transaction
from .parsers import (
    BankStatementParser,
    BillParser,
    CreditCardStatementParser,
    SMSParser,
    StatementParser,
)

_logger = get_logger("expense_extraction.cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NOTHING_FOUND = 2


# ---- Small module-level helpers used by CLI commands -------------------------


def format_transaction(tx: Transaction) -> str:
    fields = [tx.date.isoformat(), str(tx.amount), tx.currency.value, tx.category, tx.description]
    if tx.incoming:
        fields.append("incoming")
    return "\t".join(fields)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Error: cannot read {path}: {e}", err=True)
        raise typer.Exit(EXIT_FAILED) from e


def _resolve_mapping(database_url: str | None) -> MappingTable:
    """Load mappings from --database-url, else DATABASE_URL, else the built-in table."""

    url = database_url or os.getenv("DATABASE_URL")
    if not url:
        return default_table()
    # Deferred imports: the database stack is only needed with a database URL.
    from sqlalchemy.exc import SQLAlchemyError

    from .store import load_mapping_table

    try:
        return load_mapping_table(database_url=url)
    except (SQLAlchemyError, RuntimeError) as e:
        typer.echo(f"Error: cannot load biller mappings: {e}", err=True)
        raise typer.Exit(EXIT_FAILED) from e


def _report(result: ParseResult) -> int:
    if isinstance(result, ExtractionFailed):
        typer.echo(f"Error: {result.reason}", err=True)
        return EXIT_FAILED
    if isinstance(result, NoTransactionsFound):
        typer.echo("No transactions found.", err=True)
        return EXIT_NOTHING_FOUND
    for tx in result.transactions:
        typer.echo(format_transaction(tx))
    if result.produced_by_ai:
        _logger.info("cli:result source=ai count=%d", len(result.transactions))
    return EXIT_OK


def _run_parser(parser: StatementParser, path: Path) -> None:
    text = _read_text(path)
    result = asyncio.run(parser.parse(text, on_status=status_logger("expense_extraction.cli")))
    raise typer.Exit(_report(result))


def split_messages(text: str) -> list[str]:
    """Split an SMS export into messages separated by blank lines."""

    blocks: list[str] = []
    current: list[str] = []
    for line in text.splitlines():
        if line.strip():
            current.append(line.strip())
        elif current:
            blocks.append(" ".join(current))
            current = []
    if current:
        blocks.append(" ".join(current))
    return blocks


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Extract expense transactions from SMS, bank statements, credit-card "
        "statements and bills. Loads settings from a local .env before running."
    ),
)


# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Typer inspects these when used as default values below.
FILE_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--file",
    help="Path to a UTF-8 text file",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler reports a clean error
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    ...,  # default supplied by the parameter
    "--database-url",
    help=(
        "Read biller mappings from this database instead of the built-in table "
        "(falls back to DATABASE_URL)."
    ),
)


@app.command("parse-sms")
def parse_sms_cmd(
    file: Annotated[Path, FILE_OPTION],
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
    *,
    skip_incoming: bool = typer.Option(
        False, help="Drop messages that read as money coming in."
    ),
    concurrency: int = typer.Option(4, min=1, help="Messages parsed in parallel."),
) -> None:
    """Parse SMS messages (one per blank-line separated block)."""

    from .batch import parse_sms_batch

    messages = split_messages(_read_text(file))
    if not messages:
        typer.echo("Error: no messages in input", err=True)
        raise typer.Exit(EXIT_FAILED)
    parser = SMSParser(mapping=_resolve_mapping(database_url), skip_incoming=skip_incoming)
    found = parse_sms_batch(messages, parser, concurrency=concurrency)
    for tx in found:
        typer.echo(format_transaction(tx))
    _logger.info("cli:parse_sms messages=%d transactions=%d", len(messages), len(found))
    if not found:
        typer.echo("No transactions found.", err=True)
        raise typer.Exit(EXIT_NOTHING_FOUND)


@app.command("parse-bank")
def parse_bank_cmd(
    file: Annotated[Path, FILE_OPTION],
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Parse bank-account statement text."""

    parser = BankStatementParser(
        mapping=_resolve_mapping(database_url), completion=build_completion_provider()
    )
    _run_parser(parser, file)


@app.command("parse-card")
def parse_card_cmd(
    file: Annotated[Path, FILE_OPTION],
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Parse credit-card statement text."""

    parser = CreditCardStatementParser(
        mapping=_resolve_mapping(database_url), completion=build_completion_provider()
    )
    _run_parser(parser, file)


@app.command("parse-bill")
def parse_bill_cmd(
    file: Annotated[Path, FILE_OPTION],
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Parse bill, receipt or payment-screenshot text."""

    _run_parser(BillParser(mapping=_resolve_mapping(database_url)), file)


@app.command("categorize")
def categorize_cmd(
    description: Annotated[str, typer.Argument(help="Merchant description to categorize")],
    database_url: Annotated[str | None, DATABASE_URL_OPTION] = None,
) -> None:
    """Print the category for a description."""

    typer.echo(_resolve_mapping(database_url).categorize(description))


@app.command("seed-mappings")
def seed_mappings_cmd(
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Create the mapping table and insert the built-in billers (idempotent)."""

    from db.client import session_scope
    from sqlalchemy.exc import SQLAlchemyError

    from .store import create_schema, seed_default_mappings

    try:
        create_schema(database_url=database_url)
        with session_scope(database_url=database_url) as session:
            added = seed_default_mappings(session)
    except (SQLAlchemyError, RuntimeError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(EXIT_FAILED) from e
    typer.echo(f"Seeded {added} biller mappings.")


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log each parsing step at DEBUG level."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging.
    """

    # Load environment from .env in CWD (override=False to keep existing env)
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging("DEBUG" if verbose else None)

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    # Running as a module: `python -m expense_extraction.cli`
    app()
