"""JSON-over-HTTP transport with bounded retry of transient failures."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from tikentoken.config import DEFAULT_BASE_URL, RetryPolicy
from tikentoken.types import HttpError, HttpSuccess, TransportFailure, TransportOutcome

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


class Transport:
    """Posts JSON payloads to an inference service.

    A single ``httpx.AsyncClient`` is shared by every call so concurrent
    requests reuse one connection pool. Nothing else is kept between calls.
    An injected ``client`` stays owned by the caller and is not closed here.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        retry: RetryPolicy | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._retry = retry or RetryPolicy()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient()

    async def send(self, path: str, payload: dict[str, Any], timeout_ms: int) -> TransportOutcome:
        url = f"{self._base_url}{path}"
        timeout = httpx.Timeout(timeout_ms / 1000.0)
        attempts = max(1, self._retry.attempts)
        last_error = "no attempt made"

        for attempt in range(1, attempts + 1):
            logger.debug("POST %s (attempt %d/%d)", url, attempt, attempts)
            try:
                response = await self._client.post(url, json=payload, timeout=timeout)
            except TRANSIENT_ERRORS as exc:
                last_error = _describe(exc)
                if attempt < attempts:
                    delay = self._retry.delay_for(attempt)
                    logger.warning("Transient error from %s: %s; retrying in %.2fs", url, last_error, delay)
                    await asyncio.sleep(delay)
                    continue
                logger.warning("Giving up on %s after %d attempts: %s", url, attempts, last_error)
                return TransportFailure(cause=last_error)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                logger.warning("Request to %s failed: %s", url, _describe(exc))
                return TransportFailure(cause=_describe(exc))

            body = _decode_body(response)
            if 200 <= response.status_code < 300:
                return HttpSuccess(status_code=response.status_code, body=body)
            logger.debug("HTTP %d from %s", response.status_code, url)
            return HttpError(status_code=response.status_code, body=body)

        return TransportFailure(cause=last_error)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def _describe(exc: Exception) -> str:
    message = str(exc)
    name = type(exc).__name__
    return f"{name}: {message}" if message else name
