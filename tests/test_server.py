"""Tests for the dashboard HTTP and WebSocket endpoints."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import ADDRESS, FakeProvider, json_transport
from wallet_dashboard.config import Settings
from wallet_dashboard.history.selector import BackendSelector
from wallet_dashboard.providers import ProviderGateway, UserWalletProvider
from wallet_dashboard.server import build_aggregator, create_app
from wallet_dashboard.session import SessionAggregator
from wallet_dashboard.session.aggregator import NO_WALLET_MESSAGE, REJECTED_MESSAGE


@pytest.fixture
def wallet():
    return UserWalletProvider(upstream=FakeProvider({"eth_requestAccounts": []}))


@pytest.fixture
def aggregator(wallet, fixed_mock):
    client = httpx.AsyncClient(transport=json_transport(lambda r: httpx.Response(500)))
    selector = BackendSelector(Settings(request_timeout=None), client=client, mock=fixed_mock)
    return SessionAggregator(ProviderGateway(wallet), selector)


@pytest.fixture
def client(aggregator):
    with TestClient(create_app(aggregator)) as test_client:
        yield test_client


def test_session_starts_empty(client):
    r = client.get("/session")
    assert r.status_code == 200
    body = r.json()
    assert body["address"] is None
    assert body["transactions"] == []
    assert body["connecting"] is False


def test_connect_with_browser_report(client):
    r = client.post("/connect", json={"address": ADDRESS, "chainId": "0x1"})
    assert r.status_code == 200
    body = r.json()
    assert body["address"] == ADDRESS
    assert body["balance"] == "1.5000"
    assert body["gasPriceGwei"] == "20.00"
    assert body["blockHeight"] == "18945678"
    assert body["chainId"] == 1
    assert len(body["transactions"]) == 3
    assert body["transactions"][2]["to"] is None
    assert body["historySource"] == "mock"


def test_connect_without_report_surfaces_error(client):
    body = client.post("/connect").json()
    assert body["address"] is None
    assert body["lastError"]


def test_refresh_and_disconnect(client, wallet):
    client.post("/connect", json={"address": ADDRESS, "chainId": 1})
    r = client.post("/transactions/refresh")
    assert r.json()["loadingTransactions"] is False

    body = client.post("/disconnect").json()
    assert body["address"] is None
    assert body["transactions"] == []
    assert wallet.address is None


def test_health(client):
    body = client.get("/health").json()
    assert body == {"status": "healthy", "connections": 0, "connected": False}


def test_websocket_flow(client, wallet):
    with client.websocket_connect("/ws") as ws:
        assert ws.receive_json()["session"]["address"] is None

        ws.send_json({"type": "wallet_connect", "address": ADDRESS, "metadata": {"chainId": "0xaa36a7"}})
        session = ws.receive_json()["session"]
        assert session["address"] == ADDRESS
        assert session["chainId"] == 11155111

        ws.send_json({"type": "refresh"})
        assert ws.receive_json()["session"]["address"] == ADDRESS

        ws.send_json({"type": "wallet_disconnect"})
        assert ws.receive_json()["session"]["address"] is None

        ws.send_json({"type": "wallet_rejected"})
        session = ws.receive_json()["session"]
        assert session["lastError"] == REJECTED_MESSAGE
        assert wallet.rejected


def test_build_aggregator_without_node():
    aggregator = build_aggregator(Settings())
    assert isinstance(aggregator.gateway.provider, UserWalletProvider)
    assert aggregator.gateway.provider.upstream is None

    with TestClient(create_app(aggregator)) as test_client:
        body = test_client.post("/connect").json()
    assert body["lastError"] == NO_WALLET_MESSAGE
