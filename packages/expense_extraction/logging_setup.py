"""Logging for the ``expense_extraction`` package.

Library modules only ever call ``get_logger("expense_extraction.<module>")``
and emit ``event:key=value`` messages; they never attach handlers. The
entrypoint (the CLI, or a host application) calls ``configure_logging`` once
to install a single stream handler on the package logger.

Level resolution, first match wins:

1. the explicit ``level`` argument (``int`` or a name such as ``"DEBUG"``);
2. the ``EXPENSE_EXTRACTION_LOG_LEVEL`` environment variable;
3. ``INFO``.

``status_logger`` adapts parser progress signals (:class:`ParseStatus`) to
log records so a CLI run can show the orchestration steps with ``-v``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ParseStatus, StatusCallback

PACKAGE_LOGGER = "expense_extraction"
LEVEL_ENV_VAR = "EXPENSE_EXTRACTION_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_handler: logging.Handler | None = None


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or the environment default) into a numeric level.

    Unknown names resolve to ``INFO`` rather than failing a run.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install the package handler; later calls only adjust the level.

    Returns the installed handler. ``stream`` defaults to the current
    ``sys.stderr`` at the time of the first call.
    """

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    resolved = resolve_level(level)

    if _handler is None:
        # Drop the placeholder NullHandler so records are not swallowed.
        for h in list(logger.handlers):
            if isinstance(h, logging.NullHandler):
                logger.removeHandler(h)
        _handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        _handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
        logger.addHandler(_handler)
        # Keep records out of the root logger's handlers.
        logger.propagate = False

    _handler.setLevel(resolved)
    logger.setLevel(resolved)
    return _handler


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name.

    Until ``configure_logging`` runs, the package logger carries a
    ``NullHandler`` so library use stays silent.
    """

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


def status_logger(name: str, *, level: int = logging.DEBUG) -> StatusCallback:
    """Return an ``on_status`` callback that logs each parser state change."""

    logger = get_logger(name)

    def on_status(status: ParseStatus) -> None:
        logger.log(level, "status:%s %s", status.state.value, status.message)

    return on_status


__all__ = [
    "DEFAULT_FORMAT",
    "LEVEL_ENV_VAR",
    "PACKAGE_LOGGER",
    "configure_logging",
    "get_logger",
    "resolve_level",
    "status_logger",
]
