"""Per-call orchestration shared by every source parser.

A parse call walks a small state machine::

    IDLE -> EXTRACTING -> [AI_ATTEMPT -> (AI_RETRY) -> AI_VALIDATED | AI_FALLBACK]
         -> HEURISTIC_PASS -> DEDUPLICATED -> DONE

with two terminal failure states, ``EXTRACTION_FAILED`` (empty input) and
``NO_TRANSACTIONS_FOUND`` (the heuristic pass ran and found nothing). Every
transition is reported through the optional ``on_status`` callback.

The AI attempt is a single outstanding request. A
:class:`~expense_extraction.completion.ContextLengthExceeded` failure is
retried once with a much shorter prefix; any other provider failure, an
unparsable response or an empty result falls back to the heuristic pass.
AI and heuristic results are never merged. Cancellation propagates: an
abandoned call returns nothing.

Parsers hold no per-call state, so one instance may serve concurrent calls.
The mapping table and completion provider are injected.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import ClassVar

from ..ai_response import parse_ai_transactions
from ..completion import CompletionProvider, ContextLengthExceeded, DisabledCompletionProvider
from ..duplicates import remove_duplicates
from ..logging_setup import get_logger
from ..mapping import MappingTable, default_table
from ..models import (
    ExtractionFailed,
    NoTransactionsFound,
    ParseResult,
    ParseState,
    ParseStatus,
    ParseSuccess,
    StatementKind,
    StatusCallback,
    Transaction,
)
from ..prompting import PROMPT_CHAR_BUDGET, RETRY_CHAR_BUDGET, build_prompt

_logger = get_logger("expense_extraction.parsers")

type _Emit = Callable[[ParseState, str], None]


def _emitter(kind: StatementKind, on_status: StatusCallback | None) -> _Emit:
    def emit(state: ParseState, message: str = "") -> None:
        _logger.debug("parse:state kind=%s state=%s", kind.value, state.value)
        if on_status is not None:
            on_status(ParseStatus(state=state, message=message))

    return emit


class StatementParser:
    """Base class for the per-source parsers.

    Subclasses set :attr:`kind`, optionally :attr:`uses_ai`, and implement
    :meth:`extract_heuristic`.
    """

    kind: ClassVar[StatementKind]
    uses_ai: ClassVar[bool] = False

    def __init__(
        self,
        *,
        mapping: MappingTable | None = None,
        completion: CompletionProvider | None = None,
        today: date | None = None,
    ) -> None:
        self.mapping = mapping if mapping is not None else default_table()
        self.completion = completion if completion is not None else DisabledCompletionProvider()
        # Fixed reference date for tests; ``None`` means the current date.
        self.today = today

    @property
    def ai_enabled(self) -> bool:
        return self.uses_ai and bool(self.completion.available)

    def reference_date(self) -> date:
        return self.today or date.today()

    # -- heuristic pass -------------------------------------------------

    def extract_heuristic(self, text: str) -> list[Transaction]:
        """Return candidate transactions in source order, before deduplication."""

        raise NotImplementedError

    # -- AI pass --------------------------------------------------------

    async def _ask(self, text: str, budget: int) -> list[Transaction]:
        prompt = build_prompt(self.kind, text, budget=budget)
        raw = await self.completion.respond(prompt)
        return parse_ai_transactions(raw, placeholder=self.kind.placeholder, today=self.today)

    async def _ai_pass(self, text: str, emit: _Emit) -> list[Transaction]:
        emit(ParseState.AI_ATTEMPT, "Using AI to extract transactions...")
        try:
            found = await self._ask(text, PROMPT_CHAR_BUDGET)
        except ContextLengthExceeded:
            _logger.info("parse:ai_retry kind=%s reason=context_length", self.kind.value)
            emit(ParseState.AI_RETRY, "Retrying AI extraction with a shorter excerpt...")
            try:
                found = await self._ask(text[:RETRY_CHAR_BUDGET], RETRY_CHAR_BUDGET)
            except Exception as e:  # noqa: BLE001 - any provider failure falls back
                return self._ai_fallback(emit, reason=e.__class__.__name__)
        except Exception as e:  # noqa: BLE001 - any provider failure falls back
            return self._ai_fallback(emit, reason=e.__class__.__name__)

        if not found:
            return self._ai_fallback(emit, reason="empty")
        _logger.info("parse:ai_validated kind=%s count=%d", self.kind.value, len(found))
        emit(ParseState.AI_VALIDATED, f"AI extracted {len(found)} transactions")
        return found

    def _ai_fallback(self, emit: _Emit, *, reason: str) -> list[Transaction]:
        _logger.warning("parse:ai_fallback kind=%s reason=%s", self.kind.value, reason)
        emit(ParseState.AI_FALLBACK, "Falling back to pattern matching...")
        return []

    # -- entry point ----------------------------------------------------

    async def parse(self, text: str, *, on_status: StatusCallback | None = None) -> ParseResult:
        """Extract transactions from ``text``.

        Returns :class:`ParseSuccess`, :class:`NoTransactionsFound` or
        :class:`ExtractionFailed`; never raises for bad input or AI failures.
        """

        emit = _emitter(self.kind, on_status)
        emit(ParseState.EXTRACTING, "Reading text...")
        if not text or not text.strip():
            emit(ParseState.EXTRACTION_FAILED, "No text to parse")
            return ExtractionFailed("input text is empty")

        if self.ai_enabled:
            from_ai = await self._ai_pass(text, emit)
            if from_ai:
                emit(ParseState.DONE, f"Found {len(from_ai)} transactions")
                return ParseSuccess(transactions=tuple(from_ai), produced_by_ai=True)

        emit(ParseState.HEURISTIC_PASS, "Analyzing transactions...")
        candidates = self.extract_heuristic(text)
        kept = remove_duplicates(candidates)
        emit(ParseState.DEDUPLICATED, f"{len(kept)} unique of {len(candidates)} candidates")
        _logger.info(
            "parse:heuristic_done kind=%s candidates=%d kept=%d",
            self.kind.value,
            len(candidates),
            len(kept),
        )
        if not kept:
            emit(ParseState.NO_TRANSACTIONS_FOUND, "No transactions found")
            return NoTransactionsFound()
        emit(ParseState.DONE, f"Found {len(kept)} transactions")
        return ParseSuccess(transactions=tuple(kept), produced_by_ai=False)


__all__ = ["StatementParser"]
