"""Completion-provider abstraction for the optional AI extraction pass.

Parsers are written once against :class:`CompletionProvider`. Two
implementations ship with the package:

- :class:`OpenAICompletionProvider`: the OpenAI Responses API via
  ``AsyncOpenAI``.
- :class:`DisabledCompletionProvider`: reports ``available = False`` and
  never answers.

:func:`build_completion_provider` resolves the capability once at startup
from ``EE_AI_ENABLED`` and ``OPENAI_API_KEY``.

Failures are typed. A prompt that does not fit the model window raises
:class:`ContextLengthExceeded`, detected from the API error ``code`` rather
than from message text; everything else from the SDK surfaces as
:class:`CompletionError`.
"""

from __future__ import annotations

import os
from typing import Any, Protocol

from openai import APIError, AsyncOpenAI, OpenAIError

from .logging_setup import get_logger

_logger = get_logger("expense_extraction.completion")

DEFAULT_MODEL = "gpt-5"
_ENABLED_ENV_VAR = "EE_AI_ENABLED"
_MODEL_ENV_VAR = "EE_AI_MODEL"
_CONTEXT_LENGTH_CODE = "context_length_exceeded"


class CompletionError(Exception):
    """The completion service failed to produce text."""


class ContextLengthExceeded(CompletionError):
    """The prompt exceeded the model's context window."""


class CompletionUnavailable(CompletionError):
    """No completion service is configured."""


class CompletionProvider(Protocol):
    available: bool

    async def respond(self, prompt: str) -> str: ...


class DisabledCompletionProvider:
    """Provider used when the AI pass is switched off."""

    available = False

    async def respond(self, prompt: str) -> str:
        raise CompletionUnavailable("AI completion is disabled")


def _create_client() -> AsyncOpenAI:
    return AsyncOpenAI()


def _extract_output_text(resp: Any) -> str:
    text = getattr(resp, "output_text", None)
    if not isinstance(text, str) or not text:
        raise CompletionError("Responses API returned no text output")
    return text


class OpenAICompletionProvider:
    """Completion provider backed by the OpenAI Responses API.

    Each ``respond`` call opens and closes its own client. Its connection
    pool is bound to the event loop that awaits the call, and batch parsing
    runs every parse on a separate loop.
    """

    available = True

    def __init__(self, model: str | None = None) -> None:
        self.model = model or os.getenv(_MODEL_ENV_VAR) or DEFAULT_MODEL

    async def respond(self, prompt: str) -> str:
        try:
            async with _create_client() as client:
                resp = await client.responses.create(model=self.model, input=prompt)
        except APIError as e:
            if getattr(e, "code", None) == _CONTEXT_LENGTH_CODE:
                raise ContextLengthExceeded(str(e)) from e
            raise CompletionError(str(e)) from e
        except OpenAIError as e:
            raise CompletionError(str(e)) from e
        return _extract_output_text(resp)


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def build_completion_provider() -> CompletionProvider:
    """Resolve the AI capability flag from the environment.

    The OpenAI provider is returned only when ``EE_AI_ENABLED`` is truthy and
    ``OPENAI_API_KEY`` is set; otherwise the disabled provider.
    """

    if not _truthy(os.getenv(_ENABLED_ENV_VAR)):
        _logger.debug("completion:disabled reason=flag_off")
        return DisabledCompletionProvider()
    if not os.getenv("OPENAI_API_KEY"):
        _logger.warning("completion:disabled reason=missing_api_key")
        return DisabledCompletionProvider()
    provider = OpenAICompletionProvider()
    _logger.info("completion:enabled model=%s", provider.model)
    return provider


__all__ = [
    "DEFAULT_MODEL",
    "CompletionError",
    "CompletionProvider",
    "CompletionUnavailable",
    "ContextLengthExceeded",
    "DisabledCompletionProvider",
    "OpenAICompletionProvider",
    "build_completion_provider",
]
