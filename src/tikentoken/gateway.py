"""Gateway orchestrating tokenize, embed and chat calls against an Ollama-style service.

Every operation resolves to a ``Success`` or ``Failure``; service and transport
problems never escape as exceptions. Tokenization additionally degrades to
``fallback_tokenize`` whenever the service cannot produce a valid answer.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from tikentoken.config import DEFAULT_BASE_URL, GatewayConfig
from tikentoken.fallback import fallback_tokenize
from tikentoken.options import CHAT_DEFAULTS, TOKENIZE_DEFAULTS, merge_options
from tikentoken.transport import Transport
from tikentoken.types import (
    Failure,
    HttpSuccess,
    Operation,
    Result,
    Success,
    TransportFailure,
    TransportOutcome,
)

logger = logging.getLogger(__name__)

EMBED_UNREACHABLE = "Ollama request failed (ensure server running?)"
CHAT_UNREACHABLE = "Chat request failed (ensure model supports chat and Ollama is running?)"
PIECE_FORMAT_UNSUPPORTED = "Piece format not supported; use 'id' format with Ollama"
INVALID_FORMAT = "Invalid format: use 'id'"


class Gateway:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        config: GatewayConfig | None = None,
        transport: Transport | None = None,
    ) -> None:
        resolved = (config or GatewayConfig()).with_base_url(base_url)
        self._config = resolved
        self._owns_transport = transport is None
        self._transport = transport or Transport(resolved.base_url, retry=resolved.retry)

    async def tokenize(
        self,
        text: str,
        model: str | None = None,
        format: str = "id",
        extra_options: Mapping[str, Any] | None = None,
    ) -> Result[list[int]]:
        """Tokenize ``text`` into ids, falling back to local ids on any failure.

        Only the ``"id"`` format exists; other formats fail without a request.
        """
        if format == "piece":
            return Failure(PIECE_FORMAT_UNSUPPORTED)
        if format != "id":
            return Failure(INVALID_FORMAT)

        payload = {"model": model or self._config.tokenize_model, "prompt": text}
        payload.update(merge_options(TOKENIZE_DEFAULTS, extra_options))
        outcome = await self._dispatch(Operation.TOKENIZE, payload)

        tokens = _field(outcome, "tokens")
        if _is_int_list(tokens):
            return Success(list(tokens))

        logger.warning("Tokenize unavailable (%s); using fallback tokenizer", _summarize(outcome))
        return Success(fallback_tokenize(text))

    async def embed(
        self,
        text: str,
        dim: int | None = None,
        model: str | None = None,
    ) -> Result[list[float]]:
        """Embed ``text``; the vector must have exactly ``dim`` components."""
        expected = self._config.embed_dim if dim is None else dim
        payload = {
            "model": model or self._config.embed_model,
            "prompt": text,
            "options": {"output_dimension": expected},
        }
        outcome = await self._dispatch(Operation.EMBED, payload)

        embedding = _field(outcome, "embedding")
        if _is_number_list(embedding):
            if len(embedding) != expected:
                return Failure(f"Unexpected dim: {len(embedding)} (expected {expected})")
            return Success([float(value) for value in embedding])
        return Failure(_service_error(outcome) or EMBED_UNREACHABLE)

    async def chat(
        self,
        prompt: str,
        model: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Result[str]:
        merged = merge_options(CHAT_DEFAULTS, options)
        payload = {
            "model": model or self._config.chat_model,
            "prompt": prompt,
            "stream": merged["stream"],
        }
        payload.update(merged)
        outcome = await self._dispatch(Operation.CHAT, payload)

        response = _field(outcome, "response")
        if isinstance(response, str):
            return Success(response)
        return Failure(_service_error(outcome) or CHAT_UNREACHABLE)

    async def _dispatch(self, operation: Operation, payload: dict[str, Any]) -> TransportOutcome:
        return await self._transport.send(operation.path, payload, self._config.timeout_for(operation))

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> "Gateway":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


async def tokenize(
    text: str,
    model: str | None = None,
    format: str = "id",
    extra_options: Mapping[str, Any] | None = None,
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> Result[list[int]]:
    async with Gateway(base_url) as gateway:
        return await gateway.tokenize(text, model, format, extra_options)


async def embed(
    text: str,
    dim: int | None = None,
    model: str | None = None,
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> Result[list[float]]:
    async with Gateway(base_url) as gateway:
        return await gateway.embed(text, dim, model)


async def chat(
    prompt: str,
    model: str | None = None,
    options: Mapping[str, Any] | None = None,
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> Result[str]:
    async with Gateway(base_url) as gateway:
        return await gateway.chat(prompt, model, options)


def _field(outcome: TransportOutcome, name: str) -> Any:
    if isinstance(outcome, HttpSuccess) and isinstance(outcome.body, dict):
        return outcome.body.get(name)
    return None


def _service_error(outcome: TransportOutcome) -> str | None:
    if isinstance(outcome, TransportFailure):
        return None
    body = outcome.body
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None


def _is_int_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(item, int) and not isinstance(item, bool) for item in value
    )


def _is_number_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(item, (int, float)) and not isinstance(item, bool) for item in value
    )


def _summarize(outcome: TransportOutcome) -> str:
    if isinstance(outcome, TransportFailure):
        return outcome.cause
    if isinstance(outcome, HttpSuccess):
        return "malformed tokenize response"
    return _service_error(outcome) or f"HTTP {outcome.status_code}"
