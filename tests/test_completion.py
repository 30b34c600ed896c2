# ruff: noqa: E402, I001
from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any

import httpx
import pytest
from openai import APIError

_ROOT = Path(__file__).resolve().parents[1]
sys.path[:0] = [p for p in [str(_ROOT / "packages"), str(_ROOT)] if p not in sys.path]

import expense_extraction.completion as completion_mod
from expense_extraction.completion import (
    DEFAULT_MODEL,
    CompletionError,
    CompletionUnavailable,
    ContextLengthExceeded,
    DisabledCompletionProvider,
    OpenAICompletionProvider,
    build_completion_provider,
)

from tests.helpers.completion_stub import FakeOpenAIClients


# ---- Helpers -----------------------------------------------------------------


def _api_error(code: str | None) -> APIError:
    request = httpx.Request("POST", "https://api.openai.com/v1/responses")
    return APIError("request failed", request, body={"code": code, "message": "request failed"})


class _Resp:
    def __init__(self, output_text: str | None = None) -> None:
        self.output_text = output_text


def _respond(monkeypatch: pytest.MonkeyPatch, outcome: Any, **provider_kw: Any):
    clients = FakeOpenAIClients(outcome)
    monkeypatch.setattr(completion_mod, "_create_client", clients)
    text = asyncio.run(OpenAICompletionProvider(**provider_kw).respond("PROMPT"))
    return text, clients


# ---- Provider selection -------------------------------------------------------


def test_disabled_without_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    assert isinstance(build_completion_provider(), DisabledCompletionProvider)


def test_disabled_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EE_AI_ENABLED", "true")
    assert isinstance(build_completion_provider(), DisabledCompletionProvider)


def test_enabled_with_flag_and_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EE_AI_ENABLED", "1")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    provider = build_completion_provider()

    assert isinstance(provider, OpenAICompletionProvider)
    assert provider.available is True
    assert provider.model == DEFAULT_MODEL


def test_model_override_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EE_AI_MODEL", "gpt-test-mini")
    assert OpenAICompletionProvider().model == "gpt-test-mini"
    assert OpenAICompletionProvider(model="explicit").model == "explicit"


def test_disabled_provider_never_answers() -> None:
    provider = DisabledCompletionProvider()
    assert provider.available is False
    with pytest.raises(CompletionUnavailable):
        asyncio.run(provider.respond("anything"))


# ---- OpenAI adapter -------------------------------------------------------------


def test_client_is_created_lazily(monkeypatch: pytest.MonkeyPatch) -> None:
    def _boom():
        raise AssertionError("client must not be created on construction")

    monkeypatch.setattr(completion_mod, "_create_client", _boom)
    OpenAICompletionProvider()


def test_respond_returns_output_text(monkeypatch: pytest.MonkeyPatch) -> None:
    text, clients = _respond(monkeypatch, _Resp(output_text="[]"), model="m1")

    assert text == "[]"
    assert clients.calls == [{"model": "m1", "input": "PROMPT"}]


def test_each_call_opens_and_closes_its_own_client(monkeypatch: pytest.MonkeyPatch) -> None:
    clients = FakeOpenAIClients(_Resp(output_text="[]"))
    monkeypatch.setattr(completion_mod, "_create_client", clients)
    provider = OpenAICompletionProvider()

    asyncio.run(provider.respond("one"))
    asyncio.run(provider.respond("two"))

    assert len(clients.clients) == 2
    assert all(c.closed for c in clients.clients)
    assert clients.clients[0].loop is not clients.clients[1].loop


def test_respond_rejects_unknown_shape(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(CompletionError, match="no text output"):
        _respond(monkeypatch, _Resp())


def test_context_length_error_is_typed(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(ContextLengthExceeded):
        _respond(monkeypatch, _api_error("context_length_exceeded"))


def test_other_api_errors_are_generic(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(CompletionError) as exc_info:
        _respond(monkeypatch, _api_error("rate_limit_exceeded"))
    assert not isinstance(exc_info.value, ContextLengthExceeded)
