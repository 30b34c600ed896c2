"""Parse many independent texts concurrently with a bounded worker pool.

``p_map`` is a small ``ThreadPoolExecutor`` wrapper in the spirit of
``p-map``: a concurrency cap, input order preserved in the output, and a
``p_map_skip`` sentinel for omitting items. ``parse_batch`` builds on it to
run one parse call per text (typically one per SMS body); each worker drives
its call on its own event loop, and calls share no mutable state.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TypeVar

from .logging_setup import get_logger
from .models import ParseResult, ParseSuccess, Transaction
from .parsers.base import StatementParser
from .parsers.sms import SMSParser

_logger = get_logger("expense_extraction.batch")

InT = TypeVar("InT")
OutT = TypeVar("OutT")

DEFAULT_CONCURRENCY = 4


class _Skip:
    __slots__ = ()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "p_map_skip"


# Mappers return this to omit their element from the output.
p_map_skip: object = _Skip()


def p_map(
    iterable: Iterable[InT],
    mapper: Callable[[InT], OutT | object],
    *,
    concurrency: int,
    stop_on_error: bool = True,
) -> list[OutT]:
    """Map ``iterable`` through ``mapper`` with at most ``concurrency`` calls in flight.

    - Output follows input order, minus items mapped to ``p_map_skip``.
    - ``stop_on_error=True``: the first mapper error propagates and queued
      work is cancelled.
    - ``stop_on_error=False``: every item runs, then failures are raised
      together as an ``ExceptionGroup``.
    """

    if not isinstance(concurrency, int) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    items = enumerate(iterable)
    results: dict[int, OutT | object] = {}
    errors: list[Exception] = []
    pending: dict[Future, int] = {}
    total = 0

    with ThreadPoolExecutor(max_workers=concurrency) as pool:

        def submit_next() -> bool:
            nonlocal total
            nxt = next(items, None)
            if nxt is None:
                return False
            idx, item = nxt
            pending[pool.submit(mapper, item)] = idx
            total += 1
            return True

        for _ in range(concurrency):
            if not submit_next():
                break

        while pending:
            done, _ = wait(set(pending), return_when=FIRST_COMPLETED)
            for fut in done:
                idx = pending.pop(fut)
                try:
                    results[idx] = fut.result()
                except Exception as e:
                    if stop_on_error:
                        pool.shutdown(wait=False, cancel_futures=True)
                        raise
                    errors.append(e)
                submit_next()

    if errors:
        raise ExceptionGroup("p_map: one or more mapper calls failed", errors)

    out: list[OutT] = []
    for i in range(total):
        val = results.get(i, p_map_skip)
        if val is not p_map_skip:
            out.append(val)  # type: ignore[arg-type]
    return out


def parse_batch(
    texts: Iterable[str],
    parser: StatementParser,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[ParseResult]:
    """Parse each text with ``parser``; results align with the input order."""

    def run_one(text: str) -> ParseResult:
        return asyncio.run(parser.parse(text))

    results = p_map(texts, run_one, concurrency=concurrency)
    _logger.info("batch:done kind=%s count=%d", parser.kind.value, len(results))
    return results


def parse_sms_batch(
    messages: Iterable[str],
    parser: SMSParser,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[Transaction]:
    """Return the transactions found across ``messages``, in message order.

    Messages without a transaction are omitted.
    """

    def run_one(text: str) -> Transaction | object:
        result = asyncio.run(parser.parse(text))
        if isinstance(result, ParseSuccess):
            return result.transactions[0]
        return p_map_skip

    return p_map(messages, run_one, concurrency=concurrency)


__all__ = ["DEFAULT_CONCURRENCY", "p_map", "p_map_skip", "parse_batch", "parse_sms_batch"]
