"""Pytest configuration for test isolation.

Parsers read their AI switch (``EE_AI_ENABLED``), model override
(``EE_AI_MODEL``), credentials (``OPENAI_API_KEY``) and the mapping database
(``DATABASE_URL``) from the environment, and the CLI loads a ``.env`` from the
working directory before every command. A developer's shell or ``.env`` must
never flip a test onto the real OpenAI client or a real database, so each
test starts from a scrubbed environment inside its own temporary directory.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
# `packages/` holds `expense_extraction`, `libs/db/src` holds `db`.
sys.path[:0] = [
    p
    for p in [str(_ROOT / "packages"), str(_ROOT / "libs" / "db" / "src"), str(_ROOT)]
    if p not in sys.path
]

_SCRUBBED_ENV_VARS = (
    "EE_AI_ENABLED",
    "EE_AI_MODEL",
    "OPENAI_API_KEY",
    "DATABASE_URL",
    "EXPENSE_EXTRACTION_LOG_LEVEL",
)


@pytest.fixture(scope="session", autouse=True)
def _package_logging() -> None:
    """Install the package handler on the real stderr before any CLI test runs.

    Otherwise the first ``CliRunner`` invocation would bind the handler to its
    temporary stream and later log records would land in command output.
    """

    from expense_extraction.logging_setup import configure_logging

    configure_logging(stream=sys.__stderr__)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear settings env vars and run the test from its own temporary CWD."""

    for name in _SCRUBBED_ENV_VARS:
        # setenv records the prior state, so values a command loads from .env
        # are removed again at teardown.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    workdir = tmp_path / "cwd"
    workdir.mkdir(parents=True, exist_ok=True)
    monkeypatch.chdir(workdir)


@pytest.fixture
def database_url(tmp_path: Path) -> Iterator[str]:
    """File-backed SQLite database with the mapping schema created."""

    from db.client import dispose_engines

    from tests.helpers.db import bootstrap_sqlite_db

    url = bootstrap_sqlite_db(tmp_path / "db" / "mappings.sqlite")
    yield url
    dispose_engines()
