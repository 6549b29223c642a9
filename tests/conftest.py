from __future__ import annotations

import httpx
import pytest_asyncio

from tests.utils import BASE_URL, Handler, RecordingService, build_transport
from tikentoken.config import GatewayConfig, RetryPolicy
from tikentoken.gateway import Gateway
from tikentoken.transport import Transport


@pytest_asyncio.fixture
async def make_gateway():
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Handler, *, attempts: int = 3) -> tuple[Gateway, RecordingService]:
        service = RecordingService(handler)
        transport, client = build_transport(service, attempts=attempts)
        clients.append(client)
        config = GatewayConfig(base_url=BASE_URL, retry=RetryPolicy(attempts=attempts, backoff_s=0.0))
        return Gateway(config=config, transport=transport), service

    yield factory
    for client in clients:
        await client.aclose()


@pytest_asyncio.fixture
async def make_transport():
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Handler, *, attempts: int = 3) -> tuple[Transport, RecordingService]:
        service = RecordingService(handler)
        transport, client = build_transport(service, attempts=attempts)
        clients.append(client)
        return transport, service

    yield factory
    for client in clients:
        await client.aclose()
