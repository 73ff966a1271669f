"""Tests for the FastAPI routes and WebSocket stream."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from aptostock.domain.exceptions.domain_errors import InsufficientBalanceError
from aptostock.main import create_app
from aptostock.presentation.api import routes


@pytest.fixture
def client(container):
    app = create_app(container)
    with TestClient(app) as test_client:
        yield test_client


def test_app_configuration(container):
    app = create_app(container)
    paths = {route.path for route in app.routes}

    assert app.title == "AptoStock Demo DEX"
    for path in (
        "/api/health",
        "/api/status",
        "/api/prices",
        "/api/oracle/pause",
        "/api/oracle/resume",
        "/api/oracle/reset",
        "/api/balances",
        "/api/pools",
        "/api/quote/mint",
        "/api/mint",
        "/api/quote/swap",
        "/api/swap",
        "/api/reset",
        "/api/history/reset",
        "/api/history/{asset}",
        "/api/candles/{asset}",
        "/ws/market",
    ):
        assert path in paths


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "aptostock"}


def test_status_reports_seed_state(client):
    data = client.get("/api/status").json()

    assert data["oracle"]["state"] == "PAUSED"
    assert data["prices"]["TLSA"] == 120.0
    assert data["balances"] == {"USDA": 10_000.0, "TLSA": 0.0, "CRCL": 0.0}
    assert data["pools"]["TLSA_USDA"]["reserve_stable"] == 120_000.0
    assert data["ws_clients"] == 0


def test_oracle_state_transitions(client):
    assert client.post("/api/oracle/resume").json()["state"] == "RUNNING"
    assert client.post("/api/oracle/pause").json()["state"] == "PAUSED"

    client.post("/api/oracle/prices", json={"TLSA": 150.0})
    assert client.get("/api/prices").json()["TLSA"] == 150.0

    reset = client.post("/api/oracle/reset").json()
    assert reset["prices"]["TLSA"] == 120.0
    assert reset["state"] == "PAUSED"


def test_set_prices_validates_positive(client):
    assert client.post("/api/oracle/prices", json={"TLSA": 0}).status_code == 422


def test_mint_flow(client):
    preview = client.get("/api/quote/mint", params={"asset": "TLSA", "stable_in": 500}).json()
    assert preview["amount_out"] == 4.166667

    response = client.post("/api/mint", json={"asset": "TLSA", "stable_in": 500})
    data = response.json()

    assert response.status_code == 200
    assert data["accepted"] is True
    assert data["amount_out"] == 4.166667
    assert data["balances"]["USDA"] == 9_500.0
    assert data["balances"]["TLSA"] == 4.166667


def test_mint_rejection_is_not_an_http_error(client):
    response = client.post("/api/mint", json={"asset": "CRCL", "stable_in": 20_000})

    assert response.status_code == 200
    assert response.json()["accepted"] is False
    assert response.json()["reason"] == "insufficient_balance"


def test_swap_flow(client):
    quote = client.get(
        "/api/quote/swap", params={"from_unit": "USDA", "to_unit": "TLSA", "amount_in": 1000}
    ).json()
    assert quote["supported"] is True
    assert quote["fee_paid"] == 3.0

    data = client.post("/api/swap", json={"from_unit": "USDA", "to_unit": "TLSA", "amount_in": 1000}).json()

    assert data["accepted"] is True
    assert data["amount_out"] == quote["amount_out"]
    assert data["balances"]["USDA"] == 9_000.0
    assert client.get("/api/pools").json()["TLSA_USDA"]["reserve_stable"] == 120_997.0


def test_swap_unsupported_pair(client):
    data = client.post("/api/swap", json={"from_unit": "TLSA", "to_unit": "CRCL", "amount_in": 1}).json()

    assert data["accepted"] is False
    assert data["reason"] == "unsupported_pair"


def test_unknown_unit_fails_validation(client):
    response = client.post("/api/swap", json={"from_unit": "BTC", "to_unit": "USDA", "amount_in": 1})
    assert response.status_code == 422

    response = client.get("/api/candles/BTC")
    assert response.status_code == 422


def test_reset_demo(client):
    client.post("/api/mint", json={"asset": "CRCL", "stable_in": 480})
    data = client.post("/api/reset").json()

    assert data["balances"] == {"USDA": 10_000.0, "TLSA": 0.0, "CRCL": 0.0}
    assert data["pools"]["CRCL_USDA"]["reserve_asset"] == 1_000.0


def test_history_is_backfilled_on_startup(client):
    data = client.get("/api/history/TLSA").json()

    assert data["symbol"] == "TLSA"
    assert data["count"] == 240
    assert data["points"][-1]["p"] == 120.0

    assert client.get("/api/history/TLSA", params={"count": 10}).json()["count"] == 10


def test_candles_endpoint(client):
    data = client.get("/api/candles/CRCL").json()

    assert data["frame_ms"] == 10_000
    assert 0 < data["count"] <= 60
    for candle in data["candles"]:
        assert candle["low"] <= min(candle["open"], candle["close"])
        assert max(candle["open"], candle["close"]) <= candle["high"]

    wide = client.get("/api/candles/CRCL", params={"frame_ms": 60_000}).json()
    assert wide["frame_ms"] == 60_000
    assert wide["count"] <= data["count"]


def test_history_reset(client):
    client.post("/api/history/reset")

    assert client.get("/api/history/CRCL").json()["count"] == 0
    assert client.get("/api/candles/CRCL").json()["candles"] == []


def test_domain_error_maps_to_conflict(client, monkeypatch):
    class ExplodingMint:
        def execute(self, asset, stable_in):
            raise InsufficientBalanceError("Saldo insuficiente", unit="USDA", balance=0.0, delta=-1.0)

    monkeypatch.setattr(routes, "_mint", ExplodingMint())
    response = client.post("/api/mint", json={"asset": "TLSA", "stable_in": 1})

    assert response.status_code == 409
    assert response.json()["error"] == "INSUFFICIENT_BALANCE"


def test_websocket_receives_snapshot_and_trades(client):
    with client.websocket_connect("/ws/market") as ws:
        hello = ws.receive_json()
        assert hello["type"] == "snapshot"
        assert hello["data"]["balances"]["USDA"] == 10_000.0

        client.post("/api/mint", json={"asset": "TLSA", "stable_in": 120})
        message = ws.receive_json()

    assert message["type"] == "trade"
    assert message["data"]["event_type"] == "MintExecuted"
    assert message["data"]["amount_out"] == 1.0
