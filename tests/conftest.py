"""
Pytest fixtures for wallet dashboard tests. Providers and HTTP backends are
replaced by in-memory fakes; no network access.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx
import pytest

from wallet_dashboard.config import Settings
from wallet_dashboard.errors import ProviderError
from wallet_dashboard.history.mock import MockAdapter
from wallet_dashboard.history.selector import BackendSelector
from wallet_dashboard.providers.base import EthereumProvider
from wallet_dashboard.providers.gateway import ProviderGateway
from wallet_dashboard.session.aggregator import SessionAggregator

ADDRESS = "0xAbC0000000000000000000000000000000000001"
OTHER = "0xdef0000000000000000000000000000000000002"
FIXED_NOW = 1_700_000_000.0

# 1.5 ETH, 20 gwei, block 18945678, mainnet
DEFAULT_RESPONSES: Dict[str, Any] = {
    "eth_requestAccounts": [ADDRESS],
    "eth_getBalance": hex(1_500_000_000_000_000_000),
    "eth_gasPrice": hex(20_000_000_000),
    "eth_blockNumber": hex(18945678),
    "eth_chainId": "0x1",
}


class FakeProvider(EthereumProvider):
    """In-memory EIP-1193 provider. A response that is an exception is raised."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses = dict(DEFAULT_RESPONSES)
        self.responses.update(responses or {})
        self.calls: List[str] = []
        self.closed = False

    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        self.calls.append(method)
        if method not in self.responses:
            raise ProviderError(f"unsupported method {method}")
        response = self.responses[method]
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return await response(params)
        return response

    async def close(self) -> None:
        self.closed = True


def json_transport(handler: Callable[[httpx.Request], Any]) -> httpx.MockTransport:
    """MockTransport whose handler returns a JSON-able payload or a Response."""

    def _handle(request: httpx.Request) -> httpx.Response:
        result = handler(request)
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, content=json.dumps(result).encode())

    return httpx.MockTransport(_handle)


def explorer_tx(hash_: str, block: str, value: str = "0", to: str = OTHER, sender: str = ADDRESS) -> Dict[str, str]:
    return {"hash": hash_, "from": sender, "to": to, "value": value, "blockNumber": block}


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def settings():
    return Settings(request_timeout=None)


@pytest.fixture
def fixed_mock():
    return MockAdapter(clock=lambda: FIXED_NOW)


@pytest.fixture
def make_aggregator(fixed_mock):
    """Build an aggregator over a fake provider and a mocked HTTP transport."""

    def _make(
        provider: Optional[EthereumProvider] = None,
        settings: Optional[Settings] = None,
        handler: Optional[Callable[[httpx.Request], Any]] = None,
    ) -> SessionAggregator:
        settings = settings or Settings(request_timeout=None)
        handler = handler or (lambda request: httpx.Response(500))
        client = httpx.AsyncClient(transport=json_transport(handler))
        selector = BackendSelector(settings, client=client, mock=fixed_mock)
        return SessionAggregator(
            ProviderGateway(provider),
            selector,
            transaction_limit=settings.transaction_limit,
        )

    return _make
