"""Test helpers standing in for the completion provider used by the parsers.

``ScriptedCompletion`` replays a fixed list of outcomes, one per ``respond``
call: a string is returned as the model's text, an exception instance is
raised. Every prompt is recorded so tests can make lightweight assertions
about retries and prompt truncation.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterable
from typing import Any


class ScriptedCompletion:
    """Minimal stub matching the ``CompletionProvider`` protocol.

    Parameters
    ----------
    outcomes:
        Returned or raised in order, one per call. Running past the end is a
        test bug and raises ``AssertionError``.
    available:
        Value reported to parsers deciding whether to attempt the AI pass.
    """

    def __init__(self, outcomes: Iterable[str | BaseException], *, available: bool = True) -> None:
        self._outcomes = list(outcomes)
        self.available = available
        self.prompts: list[str] = []

    async def respond(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._outcomes:
            raise AssertionError("ScriptedCompletion: no scripted outcome left")
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    @property
    def calls(self) -> int:
        return len(self.prompts)


def ai_rows(*rows: dict[str, Any], fenced: bool = False) -> str:
    """Serialize candidate rows the way a chat model tends to answer."""

    body = json.dumps(list(rows))
    return f"```json\n{body}\n```" if fenced else body


class FakeOpenAIClients:
    """Factory standing in for ``completion._create_client``.

    Every call builds a new async-context-manager client whose
    ``responses.create`` records its kwargs, then raises ``outcome`` when it
    is an exception and returns it otherwise. Each client remembers the event
    loop it was entered on and whether it was closed.
    """

    def __init__(self, outcome: Any) -> None:
        self.outcome = outcome
        self.calls: list[dict[str, Any]] = []
        self.clients: list[_FakeClient] = []

    def __call__(self) -> _FakeClient:
        client = _FakeClient(self)
        self.clients.append(client)
        return client


class _FakeResponses:
    def __init__(self, factory: FakeOpenAIClients) -> None:
        self._factory = factory

    async def create(self, **kwargs: Any) -> Any:
        self._factory.calls.append(kwargs)
        if isinstance(self._factory.outcome, BaseException):
            raise self._factory.outcome
        return self._factory.outcome


class _FakeClient:
    def __init__(self, factory: FakeOpenAIClients) -> None:
        self.responses = _FakeResponses(factory)
        self.loop: asyncio.AbstractEventLoop | None = None
        self.closed = False

    async def __aenter__(self) -> _FakeClient:
        self.loop = asyncio.get_running_loop()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.closed = True
