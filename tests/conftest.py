import base64
import json
from typing import Any, Dict, List

import httpx
import pytest

from exchanges.base_client import ExchangeCredentials
from exchanges.bitfinex.auth import NonceGenerator
from exchanges.bitfinex.client import BitfinexClient
from exchanges.transport import RestTransport


class StepClock:
    """Deterministic clock returning preset epoch seconds."""

    def __init__(self, *values: float) -> None:
        self._values = list(values)
        self._index = 0

    def __call__(self) -> float:
        value = self._values[min(self._index, len(self._values) - 1)]
        self._index += 1
        return value


class RecordingExchange:
    """
    Routes requests to canned JSON documents keyed by path and records every
    request so tests can inspect headers and decoded payloads.
    """

    def __init__(self, routes: Dict[str, Any] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = self.routes.get(request.url.path, {"message": "Unknown request"})
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, json=body)

    def payload(self, index: int = -1) -> dict:
        raw = self.requests[index].headers["X-BFX-PAYLOAD"]
        return json.loads(base64.b64decode(raw))


@pytest.fixture
def make_clock():
    return StepClock


@pytest.fixture
def credentials() -> ExchangeCredentials:
    return ExchangeCredentials(api_key="key", api_secret="secret")


@pytest.fixture
def exchange() -> RecordingExchange:
    return RecordingExchange()


@pytest.fixture
def make_client(exchange, credentials):
    clients: List[BitfinexClient] = []
    transports: List[RestTransport] = []

    def _make(transport: RestTransport | None = None, **kwargs) -> BitfinexClient:
        if transport is None:
            http_client = httpx.Client(
                base_url="https://api.bitfinex.com",
                transport=httpx.MockTransport(exchange),
            )
            transport = RestTransport("https://api.bitfinex.com", client=http_client)
            transports.append(transport)
        kwargs.setdefault("credentials", credentials)
        kwargs.setdefault("nonce", NonceGenerator(clock=StepClock(1700000000.0)))
        client = BitfinexClient(transport, **kwargs)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
    for transport in transports:
        transport.close()
