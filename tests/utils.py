from __future__ import annotations

import json
from typing import Callable

import httpx

from tikentoken.config import RetryPolicy
from tikentoken.transport import Transport

BASE_URL = "http://ollama.test"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingService:
    """Stands in for the inference service behind an httpx.MockTransport."""

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]


def build_transport(service: RecordingService, *, attempts: int = 3) -> tuple[Transport, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(service))
    transport = Transport(BASE_URL, retry=RetryPolicy(attempts=attempts, backoff_s=0.0), client=client)
    return transport, client


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


def timing_out(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)
